"""
secp256k1: key derivation, ECDSA verification and deterministic (RFC 6979) signing.

Public keys are the raw 64-byte ``x || y`` form Flow stores for ECDSA_secp256k1
account keys (no ``0x04`` prefix); signatures are the scalar pair ``(r, s)``.
"""

from __future__ import annotations

import hashlib
import hmac

from ..hashes import keccak256

_P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_Gx = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
_Gy = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8


def _mod_inv(a: int, n: int) -> int:
    """Modular inverse via extended gcd."""
    a %= n
    t, r = 0, n
    new_t, new_r = 1, a
    while new_r:
        q = r // new_r
        t, new_t = new_t, t - q * new_t
        r, new_r = new_r, r - q * new_r
    if r != 1:
        raise ValueError("no inverse")
    return t % n


def _point_add(px: int, py: int, qx: int, qy: int) -> tuple[int, int]:
    """Add two points in affine coords; (0, 0) is the identity."""
    if (px, py) == (0, 0):
        return (qx, qy)
    if (qx, qy) == (0, 0):
        return (px, py)
    if px == qx:
        if py != qy or py == 0:
            return (0, 0)
        lam = (3 * px * px) * _mod_inv(2 * py, _P) % _P
    else:
        lam = (qy - py) * _mod_inv(qx - px, _P) % _P
    rx = (lam * lam - px - qx) % _P
    ry = (lam * (px - rx) - py) % _P
    return (rx, ry)


def _point_mul(d: int, x: int, y: int) -> tuple[int, int]:
    """Scalar multiplication d * (x, y); returns (rx, ry)."""
    d = d % _N
    rx, ry = 0, 0
    while d:
        if d & 1:
            rx, ry = _point_add(rx, ry, x, y)
        x, y = _point_add(x, y, x, y)
        d >>= 1
    return (rx, ry)


def is_on_curve(pubkey: bytes) -> bool:
    """True iff pubkey is a 64-byte ``x || y`` encoding of a point on secp256k1."""
    if len(pubkey) != 64:
        return False
    x = int.from_bytes(pubkey[:32], "big")
    y = int.from_bytes(pubkey[32:], "big")
    if x >= _P or y >= _P:
        return False
    return (y * y - x * x * x - 7) % _P == 0


def _private_scalar(privkey: bytes) -> int:
    if len(privkey) != 32:
        raise ValueError("privkey must be 32 bytes")
    d = int.from_bytes(privkey, "big")
    if d == 0 or d >= _N:
        raise ValueError("invalid privkey")
    return d


def privkey_to_pubkey(privkey: bytes) -> bytes:
    """
    Derive the raw public key (64 bytes: x || y) from a 32-byte private key.

    Args:
        privkey: 32-byte secp256k1 private key.

    Returns:
        64-byte public key.
    """
    x, y = _point_mul(_private_scalar(privkey), _Gx, _Gy)
    return x.to_bytes(32, "big") + y.to_bytes(32, "big")


def privkey_to_address(privkey: bytes) -> str:
    """
    Ethereum address (0x + 40 lower-case hex) from 32-byte private key.

    Args:
        privkey: 32-byte secp256k1 private key.

    Returns:
        "0x" plus keccak256(pubkey)[12:32] as hex.
    """
    return "0x" + keccak256(privkey_to_pubkey(privkey))[12:].hex()


def ecdsa_verify(pubkey: bytes, msg_hash: bytes, r: int, s: int) -> bool:
    """
    Verify an ECDSA signature (r, s) over a 32-byte hash.

    Returns False for any cryptographically invalid input (scalars out of
    range, public key off the curve, failed equation); only a malformed
    ``msg_hash`` raises.
    """
    if len(msg_hash) != 32:
        raise ValueError("msg_hash must be 32 bytes")
    if not (0 < r < _N and 0 < s < _N):
        return False
    if not is_on_curve(pubkey):
        return False
    qx = int.from_bytes(pubkey[:32], "big")
    qy = int.from_bytes(pubkey[32:], "big")
    z = int.from_bytes(msg_hash, "big") % _N
    w = _mod_inv(s, _N)
    u1 = (z * w) % _N
    u2 = (r * w) % _N
    gx, gy = _point_mul(u1, _Gx, _Gy)
    px, py = _point_mul(u2, qx, qy)
    rx, ry = _point_add(gx, gy, px, py)
    if (rx, ry) == (0, 0):
        return False
    return rx % _N == r


def _rfc6979_nonces(d: int, msg_hash: bytes):
    """Yield candidate nonces per RFC 6979 section 3.2 (HMAC-SHA256)."""
    x = d.to_bytes(32, "big")
    h1 = (int.from_bytes(msg_hash, "big") % _N).to_bytes(32, "big")
    v = b"\x01" * 32
    k = b"\x00" * 32
    k = hmac.new(k, v + b"\x00" + x + h1, hashlib.sha256).digest()
    v = hmac.new(k, v, hashlib.sha256).digest()
    k = hmac.new(k, v + b"\x01" + x + h1, hashlib.sha256).digest()
    v = hmac.new(k, v, hashlib.sha256).digest()
    while True:
        v = hmac.new(k, v, hashlib.sha256).digest()
        candidate = int.from_bytes(v, "big")
        if 0 < candidate < _N:
            yield candidate
        k = hmac.new(k, v + b"\x00", hashlib.sha256).digest()
        v = hmac.new(k, v, hashlib.sha256).digest()


def ecdsa_sign(privkey: bytes, msg_hash: bytes) -> tuple[int, int]:
    """
    Deterministic ECDSA signature (RFC 6979), s normalised to the lower half.

    Args:
        privkey: 32-byte private key.
        msg_hash: 32-byte message hash to sign.

    Returns:
        (r, s) scalars.
    """
    if len(msg_hash) != 32:
        raise ValueError("msg_hash must be 32 bytes")
    d = _private_scalar(privkey)
    z = int.from_bytes(msg_hash, "big") % _N
    for k in _rfc6979_nonces(d, msg_hash):
        kx, _ = _point_mul(k, _Gx, _Gy)
        r = kx % _N
        if r == 0:
            continue
        s = (_mod_inv(k, _N) * (z + r * d)) % _N
        if s == 0:
            continue
        if s > _N // 2:
            s = _N - s
        return (r, s)
    raise ValueError("ecdsa_sign: nonce generator exhausted")


__all__: tuple[str, ...] = (
    "ecdsa_sign",
    "ecdsa_verify",
    "is_on_curve",
    "privkey_to_address",
    "privkey_to_pubkey",
)
