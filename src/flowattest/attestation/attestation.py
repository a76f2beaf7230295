"""
A single Flow/Ethereum affiliation attestation.

An attestation is valid when the Ethereum key signed the canonical message,
the key derives the Ethereum address in the message, and the Flow address in
the message is the account that stores it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..config import Settings, get_settings
from ..signing import derive_eth_address, verify_signature
from .message import AttestationMessage, canonicalize

if TYPE_CHECKING:
    from ..flow.account import Account
    from .registry import AttestationRegistry


class Attestation:
    """Immutable record of (public key, signature, message)."""

    __slots__ = ("_public_key", "_signature", "_message", "_registry", "_settings")

    def __init__(
        self,
        public_key: str,
        signature: str,
        message: AttestationMessage,
        registry: Optional["AttestationRegistry"] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        object.__setattr__(self, "_public_key", public_key)
        object.__setattr__(self, "_signature", signature)
        object.__setattr__(self, "_message", message)
        object.__setattr__(self, "_registry", registry)
        object.__setattr__(self, "_settings", settings or get_settings())

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"Attestation(message={str(self._message)!r})"

    @property
    def public_key(self) -> str:
        return self._public_key

    @property
    def signature(self) -> str:
        return self._signature

    @property
    def message(self) -> AttestationMessage:
        return self._message

    @property
    def owner(self) -> Optional["Account"]:
        """Account holding the registry that holds this attestation."""
        if self._registry is None:
            return None
        return self._registry.owner

    def _detach(self) -> None:
        object.__setattr__(self, "_registry", None)

    def verify_signature(self) -> bool:
        signed = canonicalize(self._message, self._settings.delimiter)
        return verify_signature(
            self._public_key, self._signature, signed, self._settings.message_prefix
        )

    def verify_flow_address_matches_owner(self) -> bool:
        # No owner means no binding: fail closed.
        owner = self.owner
        if owner is None:
            return False
        return owner.address == self._message.flow_address

    def verify_eth_address_matches_public_key(self) -> bool:
        return derive_eth_address(self._public_key) == self._message.eth_address

    def verify(self) -> bool:
        return (
            self.verify_signature()
            and self.verify_flow_address_matches_owner()
            and self.verify_eth_address_matches_public_key()
        )


__all__: tuple[str, ...] = ("Attestation",)
