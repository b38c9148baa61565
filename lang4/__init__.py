"""Tokenizer, binary token format, object store and directive runner for the lang4 scripting language."""

__version__ = "0.1.0"