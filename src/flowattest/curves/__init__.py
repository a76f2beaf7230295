"""Elliptic-curve crypto: secp256k1 (Ethereum keys as stored on Flow accounts)."""

from .secp256k1 import (
    ecdsa_sign,
    ecdsa_verify,
    is_on_curve,
    privkey_to_address,
    privkey_to_pubkey,
)

__all__: tuple[str, ...] = (
    "ecdsa_sign",
    "ecdsa_verify",
    "is_on_curve",
    "privkey_to_address",
    "privkey_to_pubkey",
)
