"""
Process-wide settings: storage/public paths, the signed-message prefix, the
message delimiter and the network the registries run on.

Settings are immutable. ``get_settings()`` loads them once per process from
the defaults below, overridden by ``FLOWATTEST_*`` environment variables;
components also accept an explicit ``Settings`` instance.
"""

from __future__ import annotations

import functools
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .flow.address import Network

logger = logging.getLogger(__name__)

ETH_MESSAGE_PREFIX = "\x19Ethereum Signed Message:\n"
MESSAGE_DELIMITER = "|"
DEFAULT_STORAGE_PATH = "/storage/ETHAffiliationAttestations"
DEFAULT_PUBLIC_PATH = "/public/ETHAffiliationAttestations"

ENV_STORAGE_PATH = "FLOWATTEST_STORAGE_PATH"
ENV_PUBLIC_PATH = "FLOWATTEST_PUBLIC_PATH"
ENV_NETWORK = "FLOWATTEST_NETWORK"


@dataclass(frozen=True)
class Settings:
    """Immutable protocol and deployment constants."""

    storage_path: str = DEFAULT_STORAGE_PATH
    public_path: str = DEFAULT_PUBLIC_PATH
    message_prefix: str = ETH_MESSAGE_PREFIX
    delimiter: str = MESSAGE_DELIMITER
    # None: derive from the owning account's address.
    network: Optional[Network] = None

    def __post_init__(self) -> None:
        if not self.storage_path.startswith("/storage/"):
            raise ValueError(f"storage_path must start with /storage/: {self.storage_path!r}")
        if not self.public_path.startswith("/public/"):
            raise ValueError(f"public_path must start with /public/: {self.public_path!r}")
        if not self.delimiter:
            raise ValueError("delimiter must not be empty")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from defaults plus FLOWATTEST_* overrides in environ."""
    if environ is None:
        environ = os.environ
    network_name = environ.get(ENV_NETWORK)
    settings = Settings(
        storage_path=environ.get(ENV_STORAGE_PATH, DEFAULT_STORAGE_PATH),
        public_path=environ.get(ENV_PUBLIC_PATH, DEFAULT_PUBLIC_PATH),
        network=Network.parse(network_name) if network_name else None,
    )
    logger.debug("Loaded settings: %s", settings)
    return settings


@functools.lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Settings for this process, loaded from the environment on first use."""
    return load_settings()


__all__: tuple[str, ...] = (
    "DEFAULT_PUBLIC_PATH",
    "DEFAULT_STORAGE_PATH",
    "ETH_MESSAGE_PREFIX",
    "MESSAGE_DELIMITER",
    "Settings",
    "get_settings",
    "load_settings",
)
