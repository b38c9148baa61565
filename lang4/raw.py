"""Parser for raw token sections written in the token debug notation."""

from __future__ import annotations

import math
import re
import struct

from lang4.data import (
    OPERATORS,
    TYPE_RENDER_NAMES,
    Directive,
    Keyword,
    Primitive,
    PrimitiveKind,
    Token,
    TokenKind,
)

_OPERATOR_CODES = {text: code for code, text in enumerate(OPERATORS)}
_OPERATOR_STARTS = frozenset(text[0] for text in OPERATORS)
_LONGEST_OPERATOR = max(len(text) for text in OPERATORS)

_TYPE_CODES = {name: code for code, name in enumerate(TYPE_RENDER_NAMES)}

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)

# primitive name -> (kind, label used in error messages, signed)
_NUMERIC = {
    "Int": (PrimitiveKind.INT, "INT", True),
    "Short": (PrimitiveKind.SHORT, "SHORT", True),
    "Long": (PrimitiveKind.LONG, "LONG", True),
    "Byte": (PrimitiveKind.BYTE, "BYTE", False),
    "UInt": (PrimitiveKind.UINT, "UINT", False),
    "UShort": (PrimitiveKind.USHORT, "USHORT", False),
    "ULong": (PrimitiveKind.ULONG, "ULONG", False),
}
_FLOATS = {
    "Float": (PrimitiveKind.FLOAT, "FLOAT"),
    "Double": (PrimitiveKind.DOUBLE, "DOUBLE"),
}


class CompileError(ValueError):
    """Raised when source text cannot be turned into tokens."""

    def __init__(self, message: str, line: int, column: int) -> None:
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} ({line}, {column})")


def scan_operator(text: str, pos: int, line: int = 0, column: int = 0) -> tuple[int, int]:
    """Read the operator starting at ``pos``; return its code and the index after it."""
    if pos >= len(text) or text[pos] not in _OPERATOR_STARTS:
        raise CompileError("UNEXPECTED OPERATOR", line, column)
    for size in range(_LONGEST_OPERATOR, 0, -1):
        candidate = text[pos:pos + size]
        if len(candidate) < size:
            continue
        if candidate in _OPERATOR_CODES:
            return _OPERATOR_CODES[candidate], pos + size
        if size == 2 and candidate in ("!!", ".."):
            raise CompileError("INVALID OPERATOR", line, column)
    raise CompileError("UNEXPECTED OPERATOR", line, column)


def _to_single(value: float) -> float:
    try:
        return struct.unpack(">f", struct.pack(">f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


class _RawReader:
    def __init__(self, text: str, line: int, column: int) -> None:
        self.text = text
        self.pos = 0
        self.line = line
        self.column = column

    def error(self, message: str) -> CompileError:
        return CompileError(message, self.line, self.column)

    def char(self, message: str) -> str:
        if self.pos >= len(self.text):
            raise self.error(message)
        return self.text[self.pos]

    def parse(self) -> list[Token]:
        tokens: list[Token] = []
        tag = ""
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch in "\n ":
                self.column += 1
                if ch == "\n":
                    self.line += 1
                    self.column = 0
                self.pos += 1
                continue
            tag += ch
            if len(tag) == 3:
                self.pos += 2
                tokens.append(self.token(tag))
                tag = ""
            self.pos += 1
        return tokens

    def token(self, tag: str) -> Token:
        if tag == "Grp":
            return self.group()
        if tag in ("Ptr", "Dir", "Kwd", "Lit"):
            value = self.quoted()
            if tag == "Ptr":
                return Token(TokenKind.PTR, value)
            if tag == "Lit":
                return Token(TokenKind.LIT, value)
            if tag == "Dir":
                return Token(TokenKind.DIR, int(Directive.from_name(value)))
            return Token(TokenKind.KWD, int(Keyword.from_name(value)))
        if tag == "Dat":
            return Token(TokenKind.DAT, self.primitive())
        if tag == "Opr":
            code, end = scan_operator(self.text, self.pos, self.line, self.column)
            self.column += end - self.pos
            self.pos = end
            return Token(TokenKind.OPR, code)
        if tag == "Sym":
            ch = self.char("UNCLOSED SYM TOKEN")
            self.pos += 1
            return Token(TokenKind.SYM, ch)
        if tag == "Typ":
            return self.type_token()
        raise self.error(f"INVALID TOKEN ID {list(tag)!r}")

    def group(self) -> Token:
        start, start_line, start_column = self.pos, self.line, self.column
        depth = 1
        while True:
            ch = self.char("UNCLOSED GRP TOKEN")
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    break
            self.column += 1
            if ch == "\n":
                self.column = 0
                self.line += 1
            self.pos += 1
            if self.pos == len(self.text):
                raise self.error("UNCLOSED GRP TOKEN")
        try:
            inner = parse_raw(self.text[start:self.pos], start_line, start_column)
        except CompileError as exc:
            raise CompileError(
                f"GRP TOKEN CONTENTS ERROR: {exc}", start_line, start_column
            ) from exc
        return Token(TokenKind.GRP, inner)

    def quoted(self) -> str:
        if self.char("MALFORMED STR LIKE TOKEN") != '"':
            raise self.error("MALFORMED STR LIKE TOKEN")
        self.pos += 1
        end = self.text.find('"', self.pos)
        if end == -1:
            raise self.error("UNCLOSED STR LIKE TOKEN")
        value = self.text[self.pos:end]
        self.pos = end + 1
        return value

    def primitive(self) -> Primitive:
        name_chars: list[str] = []
        while True:
            ch = self.char("UNOPENED PRIMITIVE DECLARATION")
            if ch == "(":
                break
            if ch == "\n":
                raise self.error("BROKEN DATA (NEWLINE)")
            name_chars.append(ch)
            self.pos += 1
            self.column += 1
        self.pos += 1
        self.column += 1
        name = "".join(name_chars)
        is_string = name == "String"
        if is_string:
            if self.char("UNOPENED STRING PRIMITIVE VALUE") != '"':
                raise self.error("UNOPENED STRING PRIMITIVE VALUE")
            self.pos += 1
            self.column += 1
        body: list[str] = []
        while True:
            ch = self.char("UNCLOSED PRIMITIVE DECLARATION")
            if ch == ")":
                break
            if ch == '"' and is_string and self.text[self.pos - 1] != "\\":
                self.pos += 1
                self.column += 1
                if self.char("UNCLOSED PRIMITIVE STR DECLARATION") != ")":
                    raise self.error("UNCLOSED PRIMITIVE STR DECLARATION")
                break
            if ch == "\n":
                raise self.error("BROKEN DATA (NEWLINE)")
            body.append(ch)
            self.column += 1
            self.pos += 1
        value = self.make_primitive(name, "".join(body))
        self.pos += 1
        return value

    def make_primitive(self, name: str, body: str) -> Primitive:
        if name == "String":
            return Primitive(PrimitiveKind.STRING, body)
        if name == "Bool":
            if body == "true":
                return Primitive(PrimitiveKind.BOOL, True)
            if body == "false":
                return Primitive(PrimitiveKind.BOOL, False)
            raise self.error("INVALID VALUE FOR BOOLEAN PRIMITIVE")
        if name in _NUMERIC:
            kind, label, signed = _NUMERIC[name]
            pattern = _SIGNED_RE if signed else _UNSIGNED_RE
            if pattern.fullmatch(body):
                try:
                    return Primitive(kind, int(body))
                except ValueError:
                    pass
            raise self.error(f"ERROR PARSING {label} FROM {body}")
        if name in _FLOATS:
            kind, label = _FLOATS[name]
            if not _FLOAT_RE.fullmatch(body):
                raise self.error(f"ERROR PARSING {label} FROM {body}")
            number = float(body)
            if kind is PrimitiveKind.FLOAT:
                number = _to_single(number)
            return Primitive(kind, number)
        raise self.error(f"INVALID PRIMITIVE TYPE ({name})")

    def type_token(self) -> Token:
        name_chars: list[str] = []
        while True:
            ch = self.char("UNCLOSED TYP TOKEN")
            if ch == ")":
                break
            if not ch.isalpha():
                raise self.error("INVALID TYP TOKEN, TYPE MUST BE ALL ALPHA")
            name_chars.append(ch)
            self.pos += 1
        name = "".join(name_chars)
        if name not in _TYPE_CODES:
            raise self.error("INVALID TYP NAME")
        return Token(TokenKind.TYP, _TYPE_CODES[name])


def parse_raw(text: str, line: int = 0, column: int = 0) -> list[Token]:
    """Parse tokens written in debug notation, e.g. ``Lit("x") Opr(+=)``."""
    return _RawReader(text, line, column).parse()