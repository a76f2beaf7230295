"""
Per-account attestation registry.

``create`` runs a validation pipeline under the registry's write lock and only
inserts once every check has passed, so a failed call never changes state.
Reads do not take the lock: entries are immutable once inserted.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from ..config import Settings, get_settings
from ..errors import (
    DuplicateAttestationError,
    InvalidAddressError,
    OwnerMismatchError,
    SignatureMismatchError,
    StorageError,
)
from ..flow.account import Account, Resource
from ..flow.address import Network, network_of
from ..signing import derive_eth_address
from .attestation import Attestation
from .message import parse_attestation_message, split

logger = logging.getLogger(__name__)


class AttestationRegistry(Resource):
    """Maps Ethereum address -> Attestation for the account that stores it."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__()
        self._settings = settings or get_settings()
        self._attestations: Dict[str, Attestation] = {}
        self._lock = threading.Lock()
        self._destroyed = False

    def __len__(self) -> int:
        return len(self._attestations)

    def __contains__(self, eth_address: object) -> bool:
        return eth_address in self._attestations

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def current_network(self) -> Optional[Network]:
        """Configured network, else the network of the owning account."""
        if self._settings.network is not None:
            return self._settings.network
        if self.owner is None:
            return None
        return network_of(self.owner.address)

    def create(self, public_key: str, signature: str, message: str) -> None:
        """
        Store a new attestation for the Ethereum address named in message.

        Raises:
            FormatError: message is not ``<flow>|<eth>``.
            DecodeError: public key or signature is not hex.
            SignatureMismatchError: key does not derive the eth address, or
                the signature does not verify.
            DuplicateAttestationError: an entry exists for the eth address.
            InvalidAddressError: Flow address invalid for the current network.
            OwnerMismatchError: Flow address is not this registry's owner.
            StorageError: the registry has been destroyed.
        """
        delimiter = self._settings.delimiter
        with self._lock:
            if self._destroyed:
                raise StorageError("attestation registry has been destroyed")

            eth_address = split(message, delimiter)[1]
            derived = derive_eth_address(public_key)
            if derived != eth_address:
                logger.warning(
                    "Rejected attestation: key derives %s, message claims %s",
                    derived,
                    eth_address,
                )
                raise SignatureMismatchError(
                    f"public key derives {derived}, message claims {eth_address}"
                )

            if eth_address in self._attestations:
                logger.warning("Rejected duplicate attestation for %s", eth_address)
                raise DuplicateAttestationError(eth_address)

            network = self.current_network
            if network is None:
                raise InvalidAddressError("cannot determine the current Flow network")
            parsed = parse_attestation_message(message, network, delimiter)

            attestation = Attestation(
                public_key, signature, parsed, registry=self, settings=self._settings
            )
            if not attestation.verify_signature():
                logger.warning("Rejected attestation for %s: bad signature", eth_address)
                raise SignatureMismatchError(f"signature does not verify for {eth_address}")
            if not attestation.verify_flow_address_matches_owner():
                owner = self.owner.address if self.owner is not None else None
                logger.warning(
                    "Rejected attestation for %s: message names %s, owner is %s",
                    eth_address,
                    parsed.flow_address,
                    owner,
                )
                raise OwnerMismatchError(
                    f"message names {parsed.flow_address}, registry owner is {owner}"
                )
            self._attestations[eth_address] = attestation
        logger.info("Created attestation %s -> %s", parsed.flow_address, eth_address)

    def borrow_attestation(self, eth_address: str) -> Optional[Attestation]:
        return self._attestations.get(eth_address)

    def verify(self, eth_address: str) -> bool:
        attestation = self.borrow_attestation(eth_address)
        if attestation is None:
            return False
        return attestation.verify()

    def eth_addresses(self) -> List[str]:
        return list(self._attestations)

    def destroy(self) -> None:
        """
        Drop every attestation; the registry cannot be used afterwards.

        Raises:
            StorageError: the registry is still stored in an account; load it
                out first.
        """
        with self._lock:
            if self.owner is not None:
                raise StorageError(
                    f"registry is still stored in {self.owner.address}; load it before destroying"
                )
            for attestation in self._attestations.values():
                attestation._detach()
            self._attestations.clear()
            self._destroyed = True
        logger.debug("Destroyed attestation registry")


class AttestationRegistryPublic:
    """Read-only view of a registry: lookup and verify, never create."""

    __slots__ = ("_registry",)

    def __init__(self, registry: AttestationRegistry) -> None:
        self._registry = registry

    def borrow_attestation(self, eth_address: str) -> Optional[Attestation]:
        return self._registry.borrow_attestation(eth_address)

    def verify(self, eth_address: str) -> bool:
        return self._registry.verify(eth_address)


def setup_account(account: Account, settings: Optional[Settings] = None) -> AttestationRegistry:
    """Opt account in: save a registry and link its public view. Idempotent."""
    settings = settings or get_settings()
    existing = account.borrow(settings.storage_path)
    if existing is not None:
        if not isinstance(existing, AttestationRegistry):
            raise TypeError(
                f"{settings.storage_path} holds {type(existing).__name__}, "
                "not an AttestationRegistry"
            )
        if existing.destroyed:
            raise StorageError(f"{settings.storage_path} holds a destroyed registry")
        return existing
    registry = AttestationRegistry(settings)
    account.save(registry, settings.storage_path)
    account.unlink(settings.public_path)
    account.link(settings.public_path, settings.storage_path, AttestationRegistryPublic)
    logger.info("Set up attestation registry for %s", account.address)
    return registry


def borrow_public_registry(
    account: Account, settings: Optional[Settings] = None
) -> Optional[AttestationRegistryPublic]:
    settings = settings or get_settings()
    view = account.capability(settings.public_path)
    if isinstance(view, AttestationRegistryPublic):
        return view
    return None


def verify_attestation(
    account: Account, eth_address: str, settings: Optional[Settings] = None
) -> bool:
    """Public verify for any observer: False when the account never opted in."""
    registry = borrow_public_registry(account, settings)
    if registry is None:
        return False
    return registry.verify(eth_address)


__all__: tuple[str, ...] = (
    "AttestationRegistry",
    "AttestationRegistryPublic",
    "borrow_public_registry",
    "setup_account",
    "verify_attestation",
)
