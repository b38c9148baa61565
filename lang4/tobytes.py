"""Big-endian integer packing used by the binary token format."""

from __future__ import annotations


def int_to_bytes(value: int, width: int) -> bytes:
    """Encode ``value`` as ``width`` big-endian bytes, wrapping like a fixed-width cast."""
    if width <= 0:
        raise ValueError(f"width must be positive, got {width}")
    mask = (1 << (8 * width)) - 1
    return (value & mask).to_bytes(width, "big")


def bytes_to_int(data: bytes, signed: bool = False) -> int:
    """Decode big-endian ``data``; two's complement when ``signed`` is true."""
    if not data:
        raise ValueError("no bytes to decode")
    return int.from_bytes(bytes(data), "big", signed=signed)