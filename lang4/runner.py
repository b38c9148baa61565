"""Command-line driver: compiles, saves, loads and runs token programs."""

from __future__ import annotations

import sys
from enum import IntFlag
from pathlib import Path
from typing import Sequence

from lang4.binary import FormatError, dump, load, save
from lang4.data import Directive, PropsObj, Token, TokenKind
from lang4.raw import CompileError
from lang4.compiler import compile_file
from lang4.storage import ClassObj, Storage

USAGE = (
    "lang4 {filename} [-slr] | [--help] [--version]\n\n"
    "-s      compile and save\n"
    "-l      load and run\n"
    "-r      compile and run\n\n"
)
VERSION = "lang4 0.0.0"


class RunnerError(Exception):
    """Raised when a program or the command line cannot be processed."""


class _Mode(IntFlag):
    SAVE = 1
    LOAD = 2
    RUN = 4


_OPTIONS = {"-s": _Mode.SAVE, "-l": _Mode.LOAD, "-r": _Mode.RUN}

_MODE_NAMES = {
    0: "nothing",
    1: "compile & save",
    2: "load & run",
    4: "compile & run",
    5: "compile & save & run",
}


class _State(IntFlag):
    UNSAFE_ENABLED = 1
    UNSAFE_DECLARATION = 2


def _render_list(tokens: Sequence[Token]) -> str:
    return "[" + ", ".join(token.render() for token in tokens) + "]"


class Runner:
    """Executes token programs and handles the command line."""

    def __init__(self) -> None:
        self.store = Storage()
        self._state = _State(0)

    @property
    def unsafe_enabled(self) -> bool:
        return bool(self._state & _State.UNSAFE_ENABLED)

    @property
    def unsafe_declaration(self) -> bool:
        return bool(self._state & _State.UNSAFE_DECLARATION)

    def start(self, argv: Sequence[str]) -> None:
        """Handle the arguments that follow the program name."""
        argv = list(argv)
        if not argv:
            raise RunnerError("NO FILE GIVEN")
        mode = _Mode(0)
        for arg in argv[1:]:
            mode |= _OPTIONS.get(arg, _Mode(0))
        print(int(mode))
        command = argv[0]
        if command == "--help":
            print(USAGE)
            return
        if command == "--version":
            print(VERSION)
            return
        if command == "--dump":
            dump(self._second(argv))
            return
        print(f"RUNNING LANG 4 WITH {_MODE_NAMES.get(int(mode), 'invalid')}")
        probe = ClassObj(0, "Test", [], PropsObj(), [], [])
        print(f"{probe!r}\n{probe.create()!r}")
        if mode == _Mode.SAVE:
            save(self._second(argv), compile_file(command))
        elif mode == _Mode.LOAD:
            self.run(load(command))
        elif mode == _Mode.RUN:
            self.run(compile_file(command))
        elif mode == _Mode.SAVE | _Mode.RUN:
            tokens = compile_file(command)
            save(self._second(argv), tokens)
            self.run(tokens)

    @staticmethod
    def _second(argv: Sequence[str]) -> str:
        if len(argv) < 2:
            raise RunnerError("MISSING SECOND PATH ARGUMENT")
        return argv[1]

    def run(self, tokens: Sequence[Token]) -> bool:
        """Run ``tokens``; print any error and return whether it succeeded."""
        tokens = list(tokens)
        print(_render_list(tokens))
        try:
            self._preprocess(tokens)
        except RunnerError as exc:
            print(f"ERROR:\n{exc}")
            return False
        return True

    def _require_unsafe(self) -> None:
        if not self.unsafe_enabled:
            raise RunnerError(
                "UnsafeViolationError(attempted to invoke unsafe directive or "
                "function outside of an unsafe block)"
            )

    def _preprocess(self, tokens: list[Token]) -> None:
        for index, token in enumerate(tokens):
            if token.kind is TokenKind.DIR:
                self._eval_directive(tokens, index)

    def _eval_directive(self, tokens: list[Token], index: int) -> None:
        if index + 1 >= len(tokens) or tokens[index + 1].kind is not TokenKind.GRP:
            raise RunnerError("INVALID TOKEN: EXPECTED GRP AFTER DIR, GOT OTHER")
        end = tokens[index + 2] if index + 2 < len(tokens) else None
        if end is None or end.kind is not TokenKind.SYM or end.value != ";":
            raise RunnerError("MISSING SEMICOLON AFTER DIRECTIVE")
        args = list(tokens[index + 1].value)
        directive = Directive.from_code(tokens[index].value)
        if directive is Directive.WRAPPER:
            if args:
                raise RunnerError("ARG COUNT ERROR: EXPECTED NONE, GOT OTHER")
        elif directive in (
            Directive.WRAP,
            Directive.MUST_OVERRIDE,
            Directive.NO_OVERRIDE,
            Directive.SEPERATE,
        ):
            pass
        elif directive is Directive.UNSAFE:
            self._state |= _State.UNSAFE_ENABLED
        elif directive is Directive.IS_UNSAFE:
            self._state |= _State.UNSAFE_DECLARATION
        elif directive is Directive.TEST:
            print(_render_list(args))
        else:
            raise RunnerError("UNRECOGNIZED DIRECTIVE")


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the ``lang4`` command."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        Runner().start(argv)
    except (RunnerError, CompileError, FormatError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())