"""Shared fixtures: emulator settings, accounts and an opted-in registry."""

from __future__ import annotations

import pytest

from flowattest import Account, Network, Settings, setup_account
from vectors import SERVICE_ADDRESS, USER_ADDRESS


@pytest.fixture
def settings() -> Settings:
    return Settings(network=Network.EMULATOR)


@pytest.fixture
def service_account() -> Account:
    return Account(SERVICE_ADDRESS)


@pytest.fixture
def user_account() -> Account:
    return Account(USER_ADDRESS)


@pytest.fixture
def registry(service_account, settings):
    return setup_account(service_account, settings)
