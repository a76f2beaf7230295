"""
Attestation messages: ``<flow address>|<eth address>``.

The canonical string is exactly what the Ethereum key signs, so parsing and
``canonicalize`` must round-trip.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..config import MESSAGE_DELIMITER
from ..errors import FormatError, InvalidAddressError
from ..flow.address import FlowAddress, Network, is_valid_address, parse_address


@dataclass(frozen=True)
class AttestationMessage:
    flow_address: FlowAddress
    eth_address: str

    def __str__(self) -> str:
        return canonicalize(self)


def split(message: str, delimiter: str = MESSAGE_DELIMITER, parts: int = 2) -> Tuple[str, ...]:
    """
    Split on delimiter, requiring exactly ``parts`` pieces.

    Raises:
        FormatError: on any other number of pieces.
    """
    pieces = message.split(delimiter)
    if len(pieces) != parts:
        raise FormatError(
            f"message must contain exactly {parts - 1} {delimiter!r} delimiter(s), "
            f"got {len(pieces) - 1}"
        )
    return tuple(pieces)


def parse_attestation_message(
    message: str, network: Network, delimiter: str = MESSAGE_DELIMITER
) -> AttestationMessage:
    """
    Parse a signed message string for the given network.

    The Flow address must already be canonical (see ``FlowAddress.__str__``),
    since the signature covers the message exactly as written. The Ethereum
    address is kept verbatim and compared case-sensitively against the
    lower-case address derived from the public key.

    Raises:
        FormatError: if the message does not have exactly two parts.
        InvalidAddressError: if the Flow address is malformed, not in canonical
            form, or not on network.
    """
    flow_part, eth_part = split(message, delimiter)
    address = parse_address(flow_part)
    if address is None:
        raise InvalidAddressError(f"malformed Flow address: {flow_part!r}")
    if str(address) != flow_part:
        raise InvalidAddressError(
            f"Flow address {flow_part!r} is not in canonical form, expected {str(address)!r}"
        )
    if not is_valid_address(address, network):
        raise InvalidAddressError(f"{flow_part} is not a {network.value} address")
    return AttestationMessage(flow_address=address, eth_address=eth_part)


def canonicalize(message: AttestationMessage, delimiter: str = MESSAGE_DELIMITER) -> str:
    """The exact string that was signed for message."""
    return f"{message.flow_address}{delimiter}{message.eth_address}"


__all__: tuple[str, ...] = (
    "AttestationMessage",
    "canonicalize",
    "parse_attestation_message",
    "split",
)
