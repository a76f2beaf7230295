"""Error taxonomy for attestation creation and account storage."""

from __future__ import annotations


class AttestationError(Exception):
    """Base class for every error raised by flowattest."""


class DecodeError(AttestationError, ValueError):
    """Malformed hex input (odd length or non-hex characters)."""


class FormatError(AttestationError, ValueError):
    """Message does not split into the expected number of parts."""


class InvalidAddressError(AttestationError, ValueError):
    """Flow address is malformed or does not belong to the current network."""


class DuplicateAttestationError(AttestationError):
    """An attestation already exists for the Ethereum address."""

    def __init__(self, eth_address: str) -> None:
        super().__init__(f"attestation already exists for {eth_address}")
        self.eth_address = eth_address


class SignatureMismatchError(AttestationError):
    """Public key does not derive the claimed address, or the signature is invalid."""


class OwnerMismatchError(SignatureMismatchError):
    """Flow address in the message is not the address of the owning account."""


class StorageError(AttestationError):
    """Invalid use of account storage paths or capabilities."""


__all__: tuple[str, ...] = (
    "AttestationError",
    "DecodeError",
    "DuplicateAttestationError",
    "FormatError",
    "InvalidAddressError",
    "OwnerMismatchError",
    "SignatureMismatchError",
    "StorageError",
)
