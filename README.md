# lang4

`lang4` is an early-stage toolchain for a small scripting language. It:

- turns source text into a token stream (`lang4.compiler`),
- writes token streams to a compact binary format and reads them back (`lang4.binary`),
- runs the directive pass over a token stream (`lang4.runner`).

It has no third-party dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

The `lang4` command takes a file name first and the mode flags after it:

```
lang4 FILE [OUT] [-s] [-l] [-r]
lang4 --help
lang4 --version
lang4 --dump FILE
```

| Flags   | What happens |
|---------|--------------|
| `-s`    | compile `FILE` and save the binary tokens to `OUT` (the second argument) |
| `-l`    | load the binary token file `FILE` and run it |
| `-r`    | compile `FILE` and run it |
| `-s -r` | compile `FILE`, save it to `OUT` and run it |

Any other combination of flags does nothing beyond printing a status line.
`--dump FILE` prints a hex dump of a file, two bytes per group and sixteen
bytes per line.

Examples:

```
lang4 program.l4 program.l4b -s
lang4 program.l4b -l
lang4 program.l4 -r
```

Before it acts, the command prints the numeric mode, a `RUNNING LANG 4 WITH ...`
line and a short diagnostic of a test class. Errors from compiling, loading or
running arguments are printed to standard error and the command exits with
status 1.

## Library use

```python
from lang4.compiler import compile_source
from lang4.binary import flatten, load_tokens

tokens = compile_source("x = 5 + 3;")
blob = flatten(tokens)
assert load_tokens(blob) == tokens
```

### Modules

- `lang4.data` – `Token` and `Primitive` (frozen dataclasses tagged by
  `TokenKind` and `PrimitiveKind`), the `PrimType`, `Keyword` and `Directive`
  enums with `from_name`/`from_code` lookups, `operator_symbol`, `stable_hash`,
  and the object model classes `ArgsObj`, `PropsObj`, `FuncObj`, `ClassInstObj`.
  `Token.render()` and `Primitive.render()` give a coloured debug form such as
  `Dat(Int(5))`.
- `lang4.compiler` – `tokenize(text)` splits source into tokens (strings with
  `\xNN` escapes, 32-bit integer literals, operators, keywords, type names,
  `true`/`false`, `@directives`, parenthesised groups, `//` comments);
  `group_blocks(tokens)` wraps the tokens between each pair of braces in a
  group token and keeps the braces; `compile_source(text)` and
  `compile_file(path)` do both.
- `lang4.raw` – `parse_raw(text)` reads tokens written in the debug notation,
  e.g. `Lit("x") Opr(+=) Dat(Int(5))`; `scan_operator` reads one operator.
  Source may embed such a section between `@start_raw();` and `@end_raw();`.
- `lang4.binary` – `flatten` / `load_tokens` encode and decode bytes, `save` /
  `load` do the same with files, `hexdump` / `dump` format bytes as hex.
- `lang4.tobytes` – `int_to_bytes` and `bytes_to_int` for big-endian integers.
- `lang4.storage` – `Storage` (class objects, instances and a stack of variable
  scopes), `ClassObj`, `Interface`, `EnumObj`, `EnumItem`, `EnumItemInstance`.
- `lang4.library` – built-in modules `StdAuto`, `StdSys` and `StdFs`; each
  lists its exports with `names()` and builds one with `value(prop, objid)`.
- `lang4.runner` – `Runner.start(argv)` handles a command line,
  `Runner.run(tokens)` runs the directive pass; `main(argv=None)` is the
  `lang4` command.

### Errors

Errors are raised as exceptions: `CompileError` (from `lang4.raw`) for bad
source, `FormatError` for bad binary data, `StorageError` for failed store
lookups, `LibraryError` for unknown library exports and `RunnerError` for
command-line failures. `Runner.run` prints errors from the directive pass and
returns `False` instead of raising.

## What the package does not do

Running a program only evaluates its directives. Each directive must be
followed by a parenthesised group and `;`. `@unsafe` and `@is_unsafe` set runner
flags, `@test(...)` prints its arguments, `@wrapper` must have no arguments,
`@wrap`, `@must_override`, `@no_override` and `@seperate` have no effect, and any
other directive is reported as unrecognised. Statements, expressions, functions
and classes are not executed. The `File` class exported by `StdFs` has `open` and
`close` functions whose bodies are placeholders and perform no file access.