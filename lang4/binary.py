"""Reading and writing the compact binary token format."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Iterable

from lang4.data import Primitive, PrimitiveKind, Token, TokenKind
from lang4.tobytes import bytes_to_int, int_to_bytes

_INT_LAYOUT = {
    PrimitiveKind.INT: (4, True),
    PrimitiveKind.SHORT: (2, True),
    PrimitiveKind.LONG: (8, True),
    PrimitiveKind.BYTE: (1, False),
    PrimitiveKind.UINT: (4, False),
    PrimitiveKind.USHORT: (2, False),
    PrimitiveKind.ULONG: (8, False),
}

_CODE_KINDS = (TokenKind.OPR, TokenKind.DIR, TokenKind.KWD, TokenKind.TYP)


class FormatError(ValueError):
    """Raised when binary token data is malformed."""


def _take(data: bytes, pos: int, count: int) -> bytes:
    chunk = data[pos:pos + count]
    if len(chunk) != count:
        raise FormatError("UNEXPECTED END OF DATA")
    return chunk


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise FormatError("INVALID STRING LOAD NON UTF8") from None


def _read_primitive(data: bytes, pos: int) -> tuple[Primitive, int]:
    prim_id = _take(data, pos, 1)[0]
    pos += 1
    try:
        kind = PrimitiveKind(prim_id)
    except ValueError:
        raise FormatError("INVALID PRIMITIVE TYPE ID") from None
    if kind is PrimitiveKind.STRING:
        length = bytes_to_int(_take(data, pos, 8))
        pos += 8
        text = _decode(_take(data, pos, length))
        return Primitive(kind, text), pos + length
    if kind is PrimitiveKind.BOOL:
        return Primitive(kind, _take(data, pos, 1)[0] != 0), pos + 1
    if kind in _INT_LAYOUT:
        width, signed = _INT_LAYOUT[kind]
        return Primitive(kind, bytes_to_int(_take(data, pos, width), signed)), pos + width
    if kind is PrimitiveKind.FLOAT:
        return Primitive(kind, struct.unpack(">f", _take(data, pos, 4))[0]), pos + 4
    if kind is PrimitiveKind.DOUBLE:
        return Primitive(kind, struct.unpack(">d", _take(data, pos, 8))[0]), pos + 8
    raise FormatError("INVALID PRIMITIVE TYPE ID")


def load_tokens(data: bytes) -> list[Token]:
    """Decode a token list from ``data``; unknown token ids are skipped."""
    data = bytes(data)
    tokens: list[Token] = []
    pos = 0
    while pos < len(data):
        kind_id = data[pos]
        pos += 1
        if kind_id in (TokenKind.GRP, TokenKind.PTR, TokenKind.LIT):
            length = bytes_to_int(_take(data, pos, 8))
            pos += 8
            body = _take(data, pos, length)
            pos += length
            if kind_id == TokenKind.GRP:
                tokens.append(Token(TokenKind.GRP, load_tokens(body)))
            else:
                tokens.append(Token(TokenKind(kind_id), _decode(body)))
        elif kind_id in _CODE_KINDS:
            tokens.append(Token(TokenKind(kind_id), _take(data, pos, 1)[0]))
            pos += 1
        elif kind_id == TokenKind.SYM:
            tokens.append(Token(TokenKind.SYM, chr(_take(data, pos, 1)[0])))
            pos += 1
        elif kind_id == TokenKind.DAT:
            primitive, pos = _read_primitive(data, pos)
            tokens.append(Token(TokenKind.DAT, primitive))
    return tokens


def load(path: str | Path) -> list[Token]:
    """Read and decode the token file at ``path``."""
    return load_tokens(Path(path).read_bytes())


def _write_primitive(prim: Primitive, out: bytearray) -> None:
    kind = prim.kind
    out.append(kind)
    if kind is PrimitiveKind.STRING:
        raw = prim.value.encode("utf-8")
        out += int_to_bytes(len(raw), 8)
        out += raw
    elif kind is PrimitiveKind.BOOL:
        out.append(1 if prim.value else 0)
    elif kind in _INT_LAYOUT:
        out += int_to_bytes(prim.value, _INT_LAYOUT[kind][0])
    elif kind is PrimitiveKind.FLOAT:
        out += struct.pack(">f", prim.value)
    elif kind is PrimitiveKind.DOUBLE:
        out += struct.pack(">d", prim.value)


def flatten(tokens: Iterable[Token]) -> bytes:
    """Encode ``tokens`` in the binary token format."""
    out = bytearray()
    for token in tokens:
        out.append(token.kind)
        if token.kind is TokenKind.GRP:
            body = flatten(token.value)
            out += int_to_bytes(len(body), 8)
            out += body
        elif token.kind in (TokenKind.PTR, TokenKind.LIT):
            raw = token.value.encode("utf-8")
            out += int_to_bytes(len(raw), 8)
            out += raw
        elif token.kind is TokenKind.DAT:
            _write_primitive(token.value, out)
        elif token.kind in _CODE_KINDS:
            out.append(token.value)
        else:
            out.append(ord(token.value) & 0xFF)
    return bytes(out)


def save(path: str | Path, tokens: Iterable[Token]) -> None:
    """Encode ``tokens`` and write them to ``path``."""
    Path(path).write_bytes(flatten(tokens))


def hexdump(data: bytes) -> str:
    """Format ``data`` as hex, two bytes per word and sixteen bytes per line."""
    parts: list[str] = []
    for index, byte in enumerate(bytes(data), start=1):
        parts.append(f"{byte:02x}")
        if index % 2 == 0:
            parts.append(" ")
        if index % 16 == 0:
            parts.append("\n")
    parts.append("\n")
    return "".join(parts)


def dump(path: str | Path) -> None:
    """Print a hex dump of the file at ``path``."""
    print(hexdump(Path(path).read_bytes()), end="")