"""Tokens, primitive values and the object model shared by the toolchain."""

from __future__ import annotations

import hashlib
import math
import struct
from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import Iterable, Iterator, Tuple

KEYWORDS = (
    "return", "returnf", "func", "if", "elseif", "else", "loop", "while",
    "for", "continue", "break", "try", "catch", "finally", "class",
    "constructor", "static", "private", "public", "readonly", "const",
    "import", "export", "from", "as", "interface", "extends", "implements",
)

TYPELST = (
    "string", "bool", "u8", "u16", "u32", "u64", "u128", "i8", "i16",
    "i32", "i64", "i128", "f32", "f64", "void",
)

OPERATORS = (
    "+", "-", "*", "/", "**", "%", "!", "&", "&&", "|", "||", "^", "<", ">",
    "...", ".", "?", "=", "<=", ">=", "<<", ">>", "|<", ">|", "==", "!=",
    "!!=", "&=", "&&=", "|=", "||=", "^=", "+=", "-=", "*=", "/=", "**=",
    "%=", "$", "++", "--", "<<=", ">>=", "|<=", ">|=", ",", ":",
)

TYPE_RENDER_NAMES = (
    "string", "bool", "int", "short", "long", "byte", "uint", "ushort",
    "ulong", "float", "double",
)

RESET = "\x1b[0m"
_NUMBER_COLOR = "\x1b[38;2;200;255;175m"
_STRING_COLOR = "\x1b[38;2;255;200;0m"
_BOOL_COLOR = "\x1b[38;2;200;100;255m"


def stable_hash(value: object) -> int:
    """Return a 64-bit hash of ``value`` that is the same on every run."""
    if isinstance(value, (bytes, bytearray)):
        data = bytes(value)
    elif isinstance(value, str):
        data = value.encode("utf-8")
    else:
        data = repr(value).encode("utf-8")
    return int.from_bytes(hashlib.blake2b(data, digest_size=8).digest(), "big")


def operator_symbol(code: int) -> str:
    """Return the spelling of operator ``code``, or ``"INVALID"``."""
    if 0 <= code < len(OPERATORS):
        return OPERATORS[code]
    return "INVALID"


class TokenKind(IntEnum):
    GRP = 0
    PTR = 1
    DAT = 2
    OPR = 3
    DIR = 4
    KWD = 5
    LIT = 6
    SYM = 7
    TYP = 8


class PrimitiveKind(IntEnum):
    STRING = 0
    BOOL = 1
    INT = 2
    SHORT = 3
    LONG = 4
    BYTE = 5
    UINT = 6
    USHORT = 7
    ULONG = 8
    FLOAT = 9
    DOUBLE = 10
    NULL = 11


class PrimType(IntEnum):
    STRING = 0
    BOOL = 1
    U8 = 2
    U16 = 3
    U32 = 4
    U64 = 5
    U128 = 6
    I8 = 7
    I16 = 8
    I32 = 9
    I64 = 10
    I128 = 11
    F32 = 12
    F64 = 13
    VOID = 14

    @classmethod
    def from_name(cls, name: str) -> "PrimType":
        """Look a type up by its source spelling; unknown names give VOID."""
        try:
            return cls(TYPELST.index(name))
        except ValueError:
            return cls.VOID

    @classmethod
    def from_code(cls, code: int) -> "PrimType":
        """Look a type up by its numeric code; unknown codes give VOID."""
        try:
            return cls(code)
        except ValueError:
            return cls.VOID

    def __str__(self) -> str:
        return TYPELST[self]


class Keyword(IntEnum):
    RETURN = 0
    RETURNF = 1
    FUNC = 2
    IF = 3
    ELSEIF = 4
    ELSE = 5
    LOOP = 6
    WHILE = 7
    FOR = 8
    CONTINUE = 9
    BREAK = 10
    TRY = 11
    CATCH = 12
    FINALLY = 13
    CLASS = 14
    STATIC = 15
    PRIVATE = 16
    PUBLIC = 17
    READONLY = 18
    CONST = 19
    IMPORT = 20
    EXPORT = 21
    FROM = 22
    AS = 23
    NO_MATCH = 24

    @classmethod
    def from_name(cls, name: str) -> "Keyword":
        """Look a keyword up by spelling; unknown spellings give NO_MATCH."""
        return _KEYWORD_BY_NAME.get(name, cls.NO_MATCH)

    @classmethod
    def from_code(cls, code: int) -> "Keyword":
        """Look a keyword up by code; unknown codes give NO_MATCH."""
        try:
            return cls(code)
        except ValueError:
            return cls.NO_MATCH

    def text(self) -> str:
        """Return the source spelling of the keyword."""
        if self is Keyword.NO_MATCH:
            raise ValueError("NO_MATCH has no keyword spelling")
        return self.name.lower()


_KEYWORD_BY_NAME = {kw.name.lower(): kw for kw in Keyword if kw is not Keyword.NO_MATCH}


class Directive(IntEnum):
    WRAPPER = 0
    WRAP = 1
    MUST_OVERRIDE = 2
    NO_OVERRIDE = 3
    SEPERATE = 4
    UNSAFE = 5
    IS_UNSAFE = 6
    LIBCALL = 7
    TEST = 8
    NO_MATCH = 9

    @classmethod
    def from_name(cls, name: str) -> "Directive":
        """Look a directive up by spelling; unknown spellings give NO_MATCH."""
        return _DIRECTIVE_BY_NAME.get(name, cls.NO_MATCH)

    @classmethod
    def from_code(cls, code: int) -> "Directive":
        """Look a directive up by code; unknown codes give NO_MATCH."""
        try:
            return cls(code)
        except ValueError:
            return cls.NO_MATCH

    def text(self) -> str:
        """Return the source spelling of the directive."""
        return _DIRECTIVE_TEXT[self]


_DIRECTIVE_TEXT = {
    Directive.WRAPPER: "wrapper",
    Directive.WRAP: "wrap",
    Directive.MUST_OVERRIDE: "must_override",
    Directive.NO_OVERRIDE: "no_override",
    Directive.SEPERATE: "seperate",
    Directive.UNSAFE: "unsafe",
    Directive.IS_UNSAFE: "is_unsafe",
    Directive.LIBCALL: "LIBCALL",
    Directive.TEST: "test",
    Directive.NO_MATCH: "INVALID DIRECTIVE",
}

_DIRECTIVE_BY_NAME = {
    text: directive for directive, text in _DIRECTIVE_TEXT.items() if directive is not Directive.NO_MATCH
}

_INT_RANGES = {
    PrimitiveKind.INT: (-(2**31), 2**31 - 1),
    PrimitiveKind.SHORT: (-(2**15), 2**15 - 1),
    PrimitiveKind.LONG: (-(2**63), 2**63 - 1),
    PrimitiveKind.BYTE: (0, 2**8 - 1),
    PrimitiveKind.UINT: (0, 2**32 - 1),
    PrimitiveKind.USHORT: (0, 2**16 - 1),
    PrimitiveKind.ULONG: (0, 2**64 - 1),
}

_PRIMITIVE_NAMES = {
    PrimitiveKind.STRING: "String",
    PrimitiveKind.BOOL: "Bool",
    PrimitiveKind.INT: "Int",
    PrimitiveKind.SHORT: "Short",
    PrimitiveKind.LONG: "Long",
    PrimitiveKind.BYTE: "Byte",
    PrimitiveKind.UINT: "UInt",
    PrimitiveKind.USHORT: "UShort",
    PrimitiveKind.ULONG: "ULong",
    PrimitiveKind.FLOAT: "Float",
    PrimitiveKind.DOUBLE: "Double",
    PrimitiveKind.NULL: "Null",
}


def _to_f32(value: float) -> float:
    try:
        return struct.unpack(">f", struct.pack(">f", value))[0]
    except OverflowError as exc:
        raise ValueError(f"{value!r} does not fit a 32-bit float") from exc


def _format_float(value: float, single: bool) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if single:
        for digits in range(1, 10):
            candidate = f"{value:.{digits}g}"
            if _to_f32(float(candidate)) == value:
                text = candidate
                break
    return format(Decimal(text), "f")


@dataclass(frozen=True)
class Primitive:
    """A typed constant value."""

    kind: PrimitiveKind
    value: object = None

    def __post_init__(self) -> None:
        kind = PrimitiveKind(self.kind)
        object.__setattr__(self, "kind", kind)
        value = self.value
        if kind is PrimitiveKind.NULL:
            if value is not None:
                raise ValueError("a null primitive carries no value")
        elif kind is PrimitiveKind.STRING:
            if not isinstance(value, str):
                raise TypeError("a string primitive needs a str value")
        elif kind is PrimitiveKind.BOOL:
            if not isinstance(value, bool):
                raise TypeError("a bool primitive needs a bool value")
        elif kind in _INT_RANGES:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"a {_PRIMITIVE_NAMES[kind]} primitive needs an int value")
            low, high = _INT_RANGES[kind]
            if not low <= value <= high:
                raise ValueError(f"{value} is out of range for {_PRIMITIVE_NAMES[kind]}")
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"a {_PRIMITIVE_NAMES[kind]} primitive needs a number")
            value = float(value)
            if kind is PrimitiveKind.FLOAT:
                value = _to_f32(value)
            object.__setattr__(self, "value", value)

    def _text(self) -> str:
        if self.kind is PrimitiveKind.STRING:
            return self.value
        if self.kind is PrimitiveKind.BOOL:
            return "true" if self.value else "false"
        if self.kind is PrimitiveKind.FLOAT:
            return _format_float(self.value, single=True)
        if self.kind is PrimitiveKind.DOUBLE:
            return _format_float(self.value, single=False)
        return str(self.value)

    def render(self) -> str:
        """Return the coloured debug form, e.g. ``Int(5)``."""
        if self.kind is PrimitiveKind.NULL:
            return "Null"
        if self.kind is PrimitiveKind.STRING:
            color = _STRING_COLOR
        elif self.kind is PrimitiveKind.BOOL:
            color = _BOOL_COLOR
        else:
            color = _NUMBER_COLOR
        return f"{_PRIMITIVE_NAMES[self.kind]}({color}{self._text()}{RESET})"


_TOKEN_NAMES = {
    TokenKind.GRP: "Grp",
    TokenKind.PTR: "Ptr",
    TokenKind.DAT: "Dat",
    TokenKind.OPR: "Opr",
    TokenKind.DIR: "Dir",
    TokenKind.KWD: "Kwd",
    TokenKind.LIT: "Lit",
    TokenKind.SYM: "Sym",
    TokenKind.TYP: "Type",
}

_TOKEN_COLORS = {
    TokenKind.PTR: "\x1b[38;2;0;200;0m",
    TokenKind.OPR: "\x1b[38;2;255;100;50m",
    TokenKind.DIR: "\x1b[38;2;255;100;150m",
    TokenKind.KWD: "\x1b[38;2;200;100;255m",
    TokenKind.LIT: "\x1b[38;2;255;150;0m",
    TokenKind.SYM: "\x1b[38;2;150;150;150m",
    TokenKind.TYP: "\x1b[38;2;0;225;225m",
}

_CODE_KINDS = (TokenKind.OPR, TokenKind.DIR, TokenKind.KWD, TokenKind.TYP)


@dataclass(frozen=True)
class Token:
    """One lexical unit; a GRP token holds a tuple of nested tokens."""

    kind: TokenKind
    value: object

    def __post_init__(self) -> None:
        kind = TokenKind(self.kind)
        object.__setattr__(self, "kind", kind)
        value = self.value
        if kind is TokenKind.GRP:
            items = tuple(value)
            if not all(isinstance(item, Token) for item in items):
                raise TypeError("a group may only hold tokens")
            object.__setattr__(self, "value", items)
        elif kind in (TokenKind.PTR, TokenKind.LIT):
            if not isinstance(value, str):
                raise TypeError(f"a {_TOKEN_NAMES[kind]} token needs a str value")
        elif kind is TokenKind.DAT:
            if not isinstance(value, Primitive):
                raise TypeError("a data token needs a Primitive value")
        elif kind is TokenKind.SYM:
            if not isinstance(value, str) or len(value) != 1:
                raise ValueError("a symbol token needs a single character")
        else:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"a {_TOKEN_NAMES[kind]} token needs an int code")
            if not 0 <= value <= 255:
                raise ValueError(f"code {value} does not fit in a byte")
            object.__setattr__(self, "value", int(value))

    def render(self) -> str:
        """Return the coloured debug form of the token."""
        kind = self.kind
        if kind is TokenKind.GRP:
            inner = "[" + ", ".join(token.render() for token in self.value) + "]"
        elif kind is TokenKind.DAT:
            inner = self.value.render()
        else:
            if kind is TokenKind.OPR:
                text = operator_symbol(self.value)
            elif kind is TokenKind.TYP:
                text = TYPE_RENDER_NAMES[self.value] if self.value < len(TYPE_RENDER_NAMES) else "INVALID"
            else:
                text = str(self.value)
            inner = f"{_TOKEN_COLORS[kind]}{text}{RESET}"
        return f"{_TOKEN_NAMES[kind]}({inner})"


Arg = Tuple[int, str, Token]


@dataclass
class ArgsObj:
    """Ordered argument list of (type code, name, default token) entries."""

    items: list = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Arg]:
        return iter(self.items)

    def append(self, item: Arg) -> None:
        self.items.append(item)

    def extend(self, items: Iterable[Arg]) -> None:
        self.items.extend(items)


@dataclass
class PropsObj:
    """Property table of a class instance (currently without entries)."""


@dataclass
class FuncObj:
    """A named function with its argument list and body tokens."""

    name: str
    args: ArgsObj = field(default_factory=ArgsObj)
    tokens: list = field(default_factory=list)


@dataclass
class ClassInstObj:
    """One instance of a class, identified by class id and instance id."""

    cid: int
    iid: int
    props: PropsObj = field(default_factory=PropsObj)