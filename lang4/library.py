"""Built-in library modules and the values they export."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, ClassVar

from lang4.data import (
    ArgsObj,
    Directive,
    FuncObj,
    PrimType,
    Primitive,
    PrimitiveKind,
    PropsObj,
    Token,
    TokenKind,
)
from lang4.storage import ClassObj


class LibraryError(LookupError):
    """Raised when a module does not export the requested property."""


class ModType(IntEnum):
    CONSTANT = 0
    FUNCTION = 1
    ENUM = 2
    CLASS = 3
    INTERFACE = 4


@dataclass
class ModVal:
    """A value exported by a library module."""

    kind: ModType
    value: object
    prim_type: PrimType | None = None


class LibModule:
    """Base of library modules; subclasses fill in ``_exports``."""

    _exports: ClassVar[dict] = {}

    @classmethod
    def names(cls) -> tuple:
        """Return the (kind, name) pairs the module exports."""
        return tuple(cls._exports)

    @classmethod
    def value(cls, prop: tuple, objid: int = 0) -> ModVal:
        """Build the exported value for ``prop``; ``objid`` ids a created class."""
        try:
            build: Callable[[int], ModVal] = cls._exports[tuple(prop)]
        except (KeyError, TypeError):
            raise LibraryError(f"{cls.__name__} does not export {prop!r}") from None
        return build(objid)


def _nie_body() -> list:
    return [
        Token(TokenKind.DIR, Directive.LIBCALL),
        Token(TokenKind.GRP, [Token(TokenKind.DAT, Primitive(PrimitiveKind.STRING, "NIE"))]),
    ]


class StdAuto(LibModule):
    """Functions available without an import."""

    _exports = {
        (ModType.FUNCTION, "println"): lambda _objid: ModVal(ModType.FUNCTION, FuncObj("println")),
    }


class StdSys(LibModule):
    """System constants."""

    _exports = {
        (ModType.CONSTANT, "test"): lambda _objid: ModVal(
            ModType.CONSTANT, Primitive(PrimitiveKind.BOOL, False), PrimType.BOOL
        ),
    }


def _file_class(objid: int) -> ModVal:
    open_func = FuncObj(
        "open",
        ArgsObj([
            (int(PrimType.STRING), "path", Token(TokenKind.DAT, Primitive(PrimitiveKind.NULL))),
            (int(PrimType.STRING), "mode", Token(TokenKind.DAT, Primitive(PrimitiveKind.STRING, "r"))),
        ]),
        _nie_body(),
    )
    close_func = FuncObj("close", ArgsObj(), _nie_body())
    cls = ClassObj(objid, "File", [0], PropsObj(), [open_func], [close_func])
    return ModVal(ModType.CLASS, cls)


class StdFs(LibModule):
    """File system access."""

    _exports = {(ModType.CLASS, "File"): _file_class}