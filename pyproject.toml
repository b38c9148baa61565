[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lang4"
version = "0.1.0"
description = "Tokenizer, binary token format and directive runner for the lang4 scripting language"
requires-python = ">=3.10"
keywords = ["interpreter", "tokenizer", "bytecode", "language", "tokens"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Interpreters",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lang4 = "lang4.runner:main"

[tool.hatch.build.targets.wheel]
packages = ["lang4"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
