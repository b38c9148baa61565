"""Turns source text into tokens and groups brace-delimited code blocks."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from lang4.data import (
    KEYWORDS,
    TYPELST,
    Directive,
    Keyword,
    PrimType,
    Primitive,
    PrimitiveKind,
    Token,
    TokenKind,
)
from lang4.raw import CompileError, parse_raw, scan_operator

_WHITESPACE = " \n\t"
_OPERATOR_CHARS = "+-*/%!&|^=<>?.$,:"
_DIGITS = "0123456789"
_HEX_DIGITS = "0123456789abcdefABCDEF"
_RAW_OPENING = "();"
_RAW_CLOSING = "@end_raw();"
_INT_MAX = 2**31 - 1


class _Lexer:
    def __init__(self, text: str, line: int, column: int) -> None:
        self.text = text
        self.pos = 0
        self.line = line
        self.column = column

    def error(self, message: str) -> CompileError:
        return CompileError(message, self.line, self.column)

    def advance(self, count: int = 1) -> None:
        for ch in self.text[self.pos:self.pos + count]:
            if ch == "\n":
                self.line += 1
                self.column = 0
            else:
                self.column += 1
        self.pos += count

    def tokens(self) -> Iterator[Token]:
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if self.text.startswith("//", self.pos):
                self.skip_comment()
            elif ch in _WHITESPACE:
                self.advance()
            elif ch == '"':
                yield self.string()
            elif ch in _DIGITS:
                yield self.integer()
            elif ch in _OPERATOR_CHARS:
                yield self.operator()
            elif ch.isalpha() or ch == "_":
                yield self.word()
            elif ch == "@":
                yield from self.directive()
            elif ch == "(":
                yield self.group()
            else:
                self.advance()
                yield Token(TokenKind.SYM, ch)

    def skip_comment(self) -> None:
        end = self.text.find("\n", self.pos)
        if end == -1:
            self.advance(len(self.text) - self.pos)
        else:
            self.advance(end + 1 - self.pos)

    def string(self) -> Token:
        self.advance()
        chars: list[str] = []
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == '"':
                self.advance()
                return Token(TokenKind.DAT, Primitive(PrimitiveKind.STRING, "".join(chars)))
            if ch == "\n":
                break
            if ch == "\\":
                if self.pos + 1 >= len(text):
                    raise self.error("EOF AFTER BACKSLASH")
                following = text[self.pos + 1]
                if following == "x":
                    if self.pos + 3 >= len(text):
                        raise self.error("INVALID ESCAPE (EOF)")
                    digits = text[self.pos + 2:self.pos + 4]
                    if any(digit not in _HEX_DIGITS for digit in digits):
                        raise self.error("INVALID ESCAPE (CHAR)")
                    chars.append(chr(int(digits, 16)))
                    self.advance(4)
                else:
                    chars.append(following)
                    self.advance(2)
                continue
            chars.append(ch)
            self.advance()
        raise self.error(f"UNCLOSED STRING: {''.join(chars)}")

    def integer(self) -> Token:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in _DIGITS:
            self.advance()
        digits = self.text[start:self.pos]
        value = int(digits)
        if value > _INT_MAX:
            raise self.error(f"INTEGER LITERAL OUT OF RANGE ({digits})")
        return Token(TokenKind.DAT, Primitive(PrimitiveKind.INT, value))

    def operator(self) -> Token:
        code, end = scan_operator(self.text, self.pos, self.line, self.column)
        self.advance(end - self.pos)
        return Token(TokenKind.OPR, code)

    def name(self) -> str:
        start = self.pos
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if not (ch.isalnum() or ch == "_"):
                break
            self.advance()
        return self.text[start:self.pos]

    def word(self) -> Token:
        word = self.name()
        if word == "true":
            return Token(TokenKind.DAT, Primitive(PrimitiveKind.BOOL, True))
        if word == "false":
            return Token(TokenKind.DAT, Primitive(PrimitiveKind.BOOL, False))
        if word in KEYWORDS:
            return Token(TokenKind.KWD, int(Keyword.from_name(word)))
        if word in TYPELST:
            prim_type = PrimType.from_name(word)
            if prim_type is PrimType.VOID:
                raise self.error(f"UNSUPPORTED TYPE ({word})")
            return Token(TokenKind.TYP, int(prim_type))
        return Token(TokenKind.LIT, word)

    def directive(self) -> Iterator[Token]:
        self.advance()
        name = self.name()
        if name == "start_raw":
            yield from self.raw_section()
        else:
            yield Token(TokenKind.DIR, int(Directive.from_name(name)))

    def raw_section(self) -> list[Token]:
        text = self.text
        if text[self.pos:self.pos + len(_RAW_OPENING)] != _RAW_OPENING:
            raise self.error("INVALID START RAW STATEMENT")
        self.advance(len(_RAW_OPENING))
        start, start_line, start_column = self.pos, self.line, self.column
        at = text.find("@", start)
        if at == -1:
            raise CompileError("UNCLOSED RAW SECTION", start_line, start_column)
        self.advance(at - self.pos)
        semicolon = text.find(";", at)
        if semicolon == -1:
            raise self.error("UNCLOSED ENDING DIRECTIVE")
        if text[at:semicolon + 1] != _RAW_CLOSING:
            raise self.error("DIRECTIVE EXPRESSIONS NOT ALLOWED INSIDE OF RAW SECTIONS")
        self.advance(semicolon + 1 - self.pos)
        try:
            return parse_raw(text[start:at], start_line, start_column)
        except CompileError as exc:
            raise CompileError(str(exc), self.line, self.column) from exc

    def group(self) -> Token:
        self.advance()
        start, start_line, start_column = self.pos, self.line, self.column
        depth = 1
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == ")":
                depth -= 1
                if depth == 0:
                    break
            elif ch == "(":
                depth += 1
            self.advance()
        body = self.text[start:self.pos]
        if self.pos < len(self.text):
            self.advance()
        try:
            inner = tokenize(body, start_line, start_column)
        except CompileError as exc:
            raise CompileError(str(exc), self.line, self.column) from exc
        return Token(TokenKind.GRP, inner)


def tokenize(text: str, line: int = 0, column: int = 0) -> list[Token]:
    """Split source ``text`` into tokens; ``line`` and ``column`` locate its start."""
    return list(_Lexer(text, line, column).tokens())


def _is_symbol(token: Token, char: str) -> bool:
    return token.kind is TokenKind.SYM and token.value == char


def _collect(tokens: list[Token], pos: int, nested: bool) -> tuple[list[Token], int]:
    out: list[Token] = []
    while pos < len(tokens):
        token = tokens[pos]
        if nested and _is_symbol(token, "}"):
            return out, pos
        if _is_symbol(token, "{"):
            inner, close = _collect(tokens, pos + 1, nested=True)
            if close >= len(tokens):
                raise CompileError("PREPROCESS ERROR: UNCLOSED CODE BLOCK", 0, 0)
            out.extend((token, Token(TokenKind.GRP, inner), tokens[close]))
            pos = close + 1
            continue
        out.append(token)
        pos += 1
    return out, pos


def group_blocks(tokens: Iterable[Token]) -> list[Token]:
    """Wrap the tokens between each pair of braces in a GRP token, keeping the braces."""
    grouped, _ = _collect(list(tokens), 0, nested=False)
    return grouped


def compile_source(text: str) -> list[Token]:
    """Tokenize ``text`` and group its code blocks."""
    return group_blocks(tokenize(text))


def compile_file(path: str | Path) -> list[Token]:
    """Read the UTF-8 source file at ``path`` and compile it to tokens."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise CompileError("ERROR READING FILE", 0, 0) from exc
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CompileError("FILE CONTENTS NOT VALID UTF8", 0, 0) from exc
    return compile_source(text)