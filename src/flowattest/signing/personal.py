"""
Ethereum personal messages: keccak256("\\x19Ethereum Signed Message:\\n" + len + message),
secp256k1 signature verification and address derivation from a raw public key.
"""

from __future__ import annotations

from typing import Union

from ..config import ETH_MESSAGE_PREFIX
from ..curves import ecdsa_sign, ecdsa_verify
from ..encoding import decode_hex
from ..hashes import keccak256

_SIGNATURE_LEN = 64
_PUBLIC_KEY_LEN = 64


def _as_bytes(message: Union[str, bytes]) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    return bytes(message)


def personal_message_hash(
    message: Union[str, bytes], prefix: str = ETH_MESSAGE_PREFIX
) -> bytes:
    """
    Digest signed by ``personal_sign`` / ``eth_sign``.

    The length is the byte length of the UTF-8 message in ASCII decimal.

    Args:
        message: Message text (encoded as UTF-8) or raw bytes.
        prefix: Signed-message prefix.

    Returns:
        32-byte Keccak-256 digest.
    """
    data = _as_bytes(message)
    return keccak256(prefix.encode("utf-8") + str(len(data)).encode("ascii") + data)


def verify_signature(
    public_key: str,
    signature: str,
    message: Union[str, bytes],
    prefix: str = ETH_MESSAGE_PREFIX,
) -> bool:
    """
    Verify a personal-message signature against a raw secp256k1 public key.

    Args:
        public_key: Hex of the 64-byte public key (x || y).
        signature: Hex of the 64-byte signature (r || s).
        message: The signed message.
        prefix: Signed-message prefix.

    Returns:
        True iff the signature is valid. Wrong lengths and invalid points
        return False.

    Raises:
        DecodeError: if either hex string is malformed.
    """
    pub = decode_hex(public_key, "public key")
    sig = decode_hex(signature, "signature")
    if len(pub) != _PUBLIC_KEY_LEN or len(sig) != _SIGNATURE_LEN:
        return False
    r = int.from_bytes(sig[:32], "big")
    s = int.from_bytes(sig[32:], "big")
    return ecdsa_verify(pub, personal_message_hash(message, prefix), r, s)


def derive_eth_address(public_key: str) -> str:
    """
    Ethereum address of a public key: last 20 bytes of keccak256(raw key).

    Args:
        public_key: Hex of the raw (non-prefixed) public key.

    Returns:
        "0x" + 40 lower-case hex characters.

    Raises:
        DecodeError: if the hex string is malformed.
    """
    pub = decode_hex(public_key, "public key")
    return "0x" + keccak256(pub)[12:].hex()


def sign_personal_message(
    privkey: bytes, message: Union[str, bytes], prefix: str = ETH_MESSAGE_PREFIX
) -> str:
    """
    Client-side helper: sign a personal message, returning hex ``r || s``.

    Wallet signatures carry a trailing recovery byte; attestations store the
    64-byte form without it.
    """
    r, s = ecdsa_sign(privkey, personal_message_hash(message, prefix))
    return (r.to_bytes(32, "big") + s.to_bytes(32, "big")).hex()


__all__: tuple[str, ...] = (
    "derive_eth_address",
    "personal_message_hash",
    "sign_personal_message",
    "verify_signature",
)
