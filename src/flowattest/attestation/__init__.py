"""Attestation protocol: message codec, attestation records, per-account registry."""

from .attestation import Attestation
from .message import AttestationMessage, canonicalize, parse_attestation_message, split
from .registry import (
    AttestationRegistry,
    AttestationRegistryPublic,
    borrow_public_registry,
    setup_account,
    verify_attestation,
)

__all__: tuple[str, ...] = (
    "Attestation",
    "AttestationMessage",
    "AttestationRegistry",
    "AttestationRegistryPublic",
    "borrow_public_registry",
    "canonicalize",
    "parse_attestation_message",
    "setup_account",
    "split",
    "verify_attestation",
)
