"""
Flow / Ethereum affiliation attestations: an Ethereum key signs
``<flow address>|<eth address>`` and the Flow account stores the proof.
"""

from .__about__ import __version__
from .attestation import (
    Attestation,
    AttestationMessage,
    AttestationRegistry,
    AttestationRegistryPublic,
    borrow_public_registry,
    canonicalize,
    parse_attestation_message,
    setup_account,
    split,
    verify_attestation,
)
from .config import Settings, get_settings, load_settings
from .curves import ecdsa_sign, ecdsa_verify, privkey_to_address, privkey_to_pubkey
from .errors import (
    AttestationError,
    DecodeError,
    DuplicateAttestationError,
    FormatError,
    InvalidAddressError,
    OwnerMismatchError,
    SignatureMismatchError,
    StorageError,
)
from .flow import Account, FlowAddress, Network, is_valid_address, network_of, parse_address
from .hashes import keccak256
from .signing import (
    derive_eth_address,
    personal_message_hash,
    sign_personal_message,
    verify_signature,
)

__all__: tuple[str, ...] = (
    # About
    "__version__",
    # Hashes
    "keccak256",
    # Curves: secp256k1
    "ecdsa_sign",
    "ecdsa_verify",
    "privkey_to_address",
    "privkey_to_pubkey",
    # Signing: Ethereum personal messages
    "derive_eth_address",
    "personal_message_hash",
    "sign_personal_message",
    "verify_signature",
    # Flow collaborators
    "Account",
    "FlowAddress",
    "Network",
    "is_valid_address",
    "network_of",
    "parse_address",
    # Attestations
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
    # Configuration
    "Settings",
    "get_settings",
    "load_settings",
    # Errors
    "AttestationError",
    "DecodeError",
    "DuplicateAttestationError",
    "FormatError",
    "InvalidAddressError",
    "OwnerMismatchError",
    "SignatureMismatchError",
    "StorageError",
)
