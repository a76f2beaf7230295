"""Signing schemas: Ethereum personal messages (EIP-191 version 0x45)."""

from .personal import (
    derive_eth_address,
    personal_message_hash,
    sign_personal_message,
    verify_signature,
)

__all__: tuple[str, ...] = (
    "derive_eth_address",
    "personal_message_hash",
    "sign_personal_message",
    "verify_signature",
)
