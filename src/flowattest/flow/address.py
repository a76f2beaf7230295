"""
Flow addresses: parsing, canonical formatting and per-network validation.

A Flow address is a 64-bit codeword of a [64,45] linear code, XORed with a
per-network code word. An address belongs to a network iff
``address ^ code_word`` is a non-zero codeword, i.e. its parity check is zero.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

_ADDRESS_BYTES = 8
_HEX_RE = re.compile(r"[0-9a-fA-F]+")

# Columns of the parity-check matrix H, one per address bit (LSB first).
_PARITY_CHECK_COLUMNS = (
    0x00001, 0x00002, 0x00004, 0x00008,
    0x00010, 0x00020, 0x00040, 0x00080,
    0x00100, 0x00200, 0x00400, 0x00800,
    0x01000, 0x02000, 0x04000, 0x08000,
    0x10000, 0x20000, 0x40000, 0x7328D,
    0x6689A, 0x6112F, 0x6084B, 0x433FD,
    0x42AAB, 0x41951, 0x233CE, 0x22A81,
    0x21948, 0x1EF60, 0x1DECA, 0x1C639,
    0x1BDD8, 0x1A535, 0x194AC, 0x18C46,
    0x1632B, 0x1529B, 0x14A43, 0x13184,
    0x12942, 0x118C1, 0x0F812, 0x0E027,
    0x0D00E, 0x0C83C, 0x0B01D, 0x0A831,
    0x0982B, 0x07034, 0x0682A, 0x05819,
    0x03807, 0x007D2, 0x00727, 0x0068E,
    0x0067C, 0x0059D, 0x004EB, 0x003B4,
    0x0036A, 0x002D9, 0x001C7, 0x0003F,
)


class Network(str, Enum):
    """Flow networks with their chain code words."""

    MAINNET = "MAINNET"
    TESTNET = "TESTNET"
    EMULATOR = "EMULATOR"

    @property
    def code_word(self) -> int:
        return _CODE_WORDS[self]

    @classmethod
    def parse(cls, name: str) -> "Network":
        """Case-insensitive lookup by name."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown Flow network: {name!r}") from None


_CODE_WORDS = {
    Network.MAINNET: 0x0000000000000000,
    Network.TESTNET: 0x6834BA37B3980209,
    Network.EMULATOR: 0x1CB159857AF02018,
}


@dataclass(frozen=True, order=True)
class FlowAddress:
    """An 8-byte Flow account address."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value < 1 << (8 * _ADDRESS_BYTES):
            raise ValueError(f"Flow address out of range: {self.value:#x}")

    def __str__(self) -> str:
        # Canonical message form: lower-case hex, leading zeros trimmed.
        return f"0x{self.value:x}"

    def hex(self) -> str:
        """Zero-padded 16-digit form with 0x prefix."""
        return f"0x{self.value:016x}"

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(_ADDRESS_BYTES, "big")

    @classmethod
    def from_string(cls, text: str) -> "FlowAddress":
        """
        Parse ``0x``-prefixed or bare hex; odd lengths are left-padded.

        Raises:
            ValueError: if the text is not hex or longer than 8 bytes.
        """
        raw = text[2:] if text[:2] in ("0x", "0X") else text
        if not _HEX_RE.fullmatch(raw):
            raise ValueError(f"not a hex address: {text!r}")
        if len(raw) % 2:
            raw = "0" + raw
        if len(raw) > 2 * _ADDRESS_BYTES:
            raise ValueError(f"address longer than {_ADDRESS_BYTES} bytes: {text!r}")
        return cls(int(raw, 16))


def parse_address(value: Union[str, FlowAddress]) -> Optional[FlowAddress]:
    """FlowAddress for value, or None when it cannot be parsed."""
    if isinstance(value, FlowAddress):
        return value
    if not isinstance(value, str):
        return None
    try:
        return FlowAddress.from_string(value)
    except ValueError:
        return None


def _is_codeword(word: int) -> bool:
    parity = 0
    for column in _PARITY_CHECK_COLUMNS:
        if word & 1:
            parity ^= column
        word >>= 1
    return parity == 0 and word == 0


def is_valid_address(value: Union[str, FlowAddress], network: Network) -> bool:
    """True iff value parses and is an address of the given network."""
    address = parse_address(value)
    if address is None:
        return False
    word = address.value ^ network.code_word
    if word == 0:
        return False
    return _is_codeword(word)


def network_of(value: Union[str, FlowAddress]) -> Optional[Network]:
    """The network value belongs to, or None."""
    for network in Network:
        if is_valid_address(value, network):
            return network
    return None


__all__: tuple[str, ...] = (
    "FlowAddress",
    "Network",
    "is_valid_address",
    "network_of",
    "parse_address",
)
