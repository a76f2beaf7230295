"""Flow network collaborators: address validation and account storage."""

from .account import Account, Resource
from .address import FlowAddress, Network, is_valid_address, network_of, parse_address

__all__: tuple[str, ...] = (
    "Account",
    "FlowAddress",
    "Network",
    "Resource",
    "is_valid_address",
    "network_of",
    "parse_address",
)
