"""Strict hex decoding shared by the crypto primitives."""

from __future__ import annotations

import re

from .errors import DecodeError

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def strip_0x(value: str) -> str:
    """Drop a leading ``0x``/``0X`` if present."""
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def decode_hex(value: str, label: str = "value") -> bytes:
    """
    Decode a hex string (case-insensitive, optional 0x prefix) to bytes.

    Unlike ``bytes.fromhex`` this rejects embedded whitespace.

    Raises:
        DecodeError: on odd length or non-hex characters.
    """
    if not isinstance(value, str):
        raise DecodeError(f"{label} must be a hex string, got {type(value).__name__}")
    raw = strip_0x(value)
    if len(raw) % 2:
        raise DecodeError(f"{label} has odd hex length {len(raw)}")
    if not _HEX_RE.fullmatch(raw):
        raise DecodeError(f"{label} contains non-hex characters")
    return bytes.fromhex(raw)


__all__: tuple[str, ...] = ("decode_hex", "strip_0x")
