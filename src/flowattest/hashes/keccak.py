"""
Keccak-256 (original Keccak padding, 256-bit output), as used by Ethereum for
address derivation and message digests. Pure Python; cythonized at build time
when a compiler is available.
"""

from __future__ import annotations

_RATE = 136  # bytes, 1088-bit rate for 256-bit capacity
_MASK = 0xFFFFFFFFFFFFFFFF

_ROUND_CONSTANTS = (
    0x0000000000000001,
    0x0000000000008082,
    0x800000000000808A,
    0x8000000080008000,
    0x000000000000808B,
    0x0000000080000001,
    0x8000000080008081,
    0x8000000000008009,
    0x000000000000008A,
    0x0000000000000088,
    0x0000000080008009,
    0x000000008000000A,
    0x000000008000808B,
    0x800000000000008B,
    0x8000000000008089,
    0x8000000000008003,
    0x8000000000008002,
    0x8000000000000080,
    0x000000000000800A,
    0x800000008000000A,
    0x8000000080008081,
    0x8000000000008080,
    0x0000000080000001,
    0x8000000080008008,
)

# Rotation offsets indexed by lane x + 5 * y.
_ROTATION = (
    0, 1, 62, 28, 27,
    36, 44, 6, 55, 20,
    3, 10, 43, 25, 39,
    41, 45, 15, 21, 8,
    18, 2, 61, 56, 14,
)

# rho and pi combined: lane i moves to _PI[i] after rotating by _ROTATION[i].
_PI = tuple(y + 5 * ((2 * x + 3 * y) % 5) for y in range(5) for x in range(5))
_PI_SRC = tuple(x + 5 * y for y in range(5) for x in range(5))


def _rol64(v: int, n: int) -> int:
    """Rotate 64-bit value v left by n bits."""
    if n == 0:
        return v
    return ((v << n) | (v >> (64 - n))) & _MASK


def _keccak_f(lanes: list[int]) -> None:
    """Keccak-f[1600] permutation over 25 lanes (x + 5 * y); updates in place."""
    b = [0] * 25
    for rc in _ROUND_CONSTANTS:
        # theta
        c = [
            lanes[x] ^ lanes[x + 5] ^ lanes[x + 10] ^ lanes[x + 15] ^ lanes[x + 20]
            for x in range(5)
        ]
        for x in range(5):
            d = c[(x - 1) % 5] ^ _rol64(c[(x + 1) % 5], 1)
            for y in range(0, 25, 5):
                lanes[x + y] ^= d
        # rho and pi
        for i in range(25):
            src = _PI_SRC[i]
            b[_PI[i]] = _rol64(lanes[src], _ROTATION[src])
        # chi
        for y in range(0, 25, 5):
            row = b[y : y + 5]
            for x in range(5):
                lanes[x + y] = row[x] ^ ((~row[(x + 1) % 5]) & row[(x + 2) % 5] & _MASK)
        # iota
        lanes[0] ^= rc


def _pad(data: bytes) -> bytes:
    """Multirate padding: 0x01 ... 0x80, always at least one byte."""
    padlen = _RATE - (len(data) % _RATE)
    if padlen == 1:
        return data + b"\x81"
    return data + b"\x01" + bytes(padlen - 2) + b"\x80"


def keccak256(data: bytes) -> bytes:
    """
    Keccak-256 hash (256-bit output, original Keccak padding, not SHA3-256).

    Args:
        data: Input bytes (any length).

    Returns:
        32-byte digest.
    """
    padded = _pad(bytes(data))
    lanes = [0] * 25
    for block_start in range(0, len(padded), _RATE):
        for i in range(_RATE // 8):
            off = block_start + i * 8
            lanes[i] ^= int.from_bytes(padded[off : off + 8], "little")
        _keccak_f(lanes)
    return b"".join(lane.to_bytes(8, "little") for lane in lanes[:4])


__all__: tuple[str, ...] = ("keccak256",)
