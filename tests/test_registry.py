"""AttestationRegistry: the create pipeline, lookups and account integration."""

from __future__ import annotations

import threading

import pytest

from flowattest import (
    Account,
    AttestationRegistry,
    AttestationRegistryPublic,
    DecodeError,
    DuplicateAttestationError,
    FormatError,
    InvalidAddressError,
    Network,
    OwnerMismatchError,
    Settings,
    SignatureMismatchError,
    StorageError,
    borrow_public_registry,
    setup_account,
    sign_personal_message,
    verify_attestation,
)
from vectors import (
    ETH_ADDRESS,
    ETH_ADDRESS_ONE,
    ETH_ADDRESS_TWO,
    MAINNET_ADDRESS,
    PRIVKEY_ONE,
    PUBKEY_HEX,
    PUBKEY_ONE_HEX,
    PUBKEY_TWO_HEX,
    SERVICE_ADDRESS,
    SERVICE_MESSAGE,
    SERVICE_MESSAGE_ONE,
    SERVICE_MESSAGE_TWO,
    SERVICE_SIGNATURE,
    SERVICE_SIGNATURE_ALT,
    SERVICE_SIGNATURE_ONE,
    SERVICE_SIGNATURE_TWO,
    USER_ADDRESS,
    USER_MESSAGE,
    USER_SIGNATURE,
)

ZERO_ETH_ADDRESS = "0x" + "00" * 20


def test_end_to_end(registry) -> None:
    assert len(registry) == 0
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    assert registry.verify(ETH_ADDRESS) is True
    assert registry.borrow_attestation(ZERO_ETH_ADDRESS) is None
    with pytest.raises(DuplicateAttestationError):
        registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    assert len(registry) == 1
    assert registry.eth_addresses() == [ETH_ADDRESS]


def test_created_entry_verifies(registry) -> None:
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    attestation = registry.borrow_attestation(ETH_ADDRESS)
    assert attestation is not None
    assert attestation.verify() is True
    assert attestation.owner is registry.owner
    assert attestation.signature == SERVICE_SIGNATURE
    assert ETH_ADDRESS in registry


def test_multiple_eth_addresses_per_account(registry) -> None:
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    registry.create(PUBKEY_ONE_HEX, SERVICE_SIGNATURE_ONE, SERVICE_MESSAGE_ONE)
    registry.create(PUBKEY_TWO_HEX, SERVICE_SIGNATURE_TWO, SERVICE_MESSAGE_TWO)
    assert sorted(registry.eth_addresses()) == sorted([ETH_ADDRESS, ETH_ADDRESS_ONE, ETH_ADDRESS_TWO])
    assert all(registry.verify(address) for address in registry.eth_addresses())


def test_duplicate_leaves_original_unchanged(registry) -> None:
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    original = registry.borrow_attestation(ETH_ADDRESS)
    with pytest.raises(DuplicateAttestationError) as excinfo:
        registry.create(PUBKEY_HEX, SERVICE_SIGNATURE_ALT, SERVICE_MESSAGE)
    assert excinfo.value.eth_address == ETH_ADDRESS
    assert registry.borrow_attestation(ETH_ADDRESS) is original
    assert original.signature == SERVICE_SIGNATURE


def test_verify_absent_is_false(registry) -> None:
    assert registry.verify(ETH_ADDRESS) is False
    assert registry.borrow_attestation(ETH_ADDRESS) is None


def test_key_must_derive_claimed_address(registry) -> None:
    with pytest.raises(SignatureMismatchError):
        registry.create(PUBKEY_ONE_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    assert len(registry) == 0


def test_mixed_case_eth_address_is_rejected(registry) -> None:
    message = f"{SERVICE_ADDRESS}|0x" + ETH_ADDRESS[2:].upper()
    with pytest.raises(SignatureMismatchError):
        registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, message)
    assert len(registry) == 0


def test_bad_signature_is_rejected(registry) -> None:
    sig = bytearray.fromhex(SERVICE_SIGNATURE)
    sig[0] ^= 0x80
    with pytest.raises(SignatureMismatchError) as excinfo:
        registry.create(PUBKEY_HEX, sig.hex(), SERVICE_MESSAGE)
    assert not isinstance(excinfo.value, OwnerMismatchError)
    assert len(registry) == 0


def test_message_for_another_account_is_rejected(registry) -> None:
    with pytest.raises(OwnerMismatchError):
        registry.create(PUBKEY_HEX, USER_SIGNATURE, USER_MESSAGE)
    assert registry.borrow_attestation(ETH_ADDRESS) is None


@pytest.mark.parametrize(
    "message",
    [ETH_ADDRESS, f"{SERVICE_ADDRESS}|{ETH_ADDRESS}|", f"x|{SERVICE_ADDRESS}|{ETH_ADDRESS}"],
)
def test_malformed_message_is_rejected(registry, message: str) -> None:
    with pytest.raises(FormatError):
        registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, message)
    assert len(registry) == 0


def test_malformed_hex_is_rejected(registry) -> None:
    with pytest.raises(DecodeError):
        registry.create(PUBKEY_HEX[:-1], SERVICE_SIGNATURE, SERVICE_MESSAGE)
    with pytest.raises(DecodeError):
        registry.create(PUBKEY_HEX, SERVICE_SIGNATURE + "0", SERVICE_MESSAGE)
    assert len(registry) == 0


def test_flow_address_from_other_network_is_rejected(registry) -> None:
    with pytest.raises(InvalidAddressError):
        registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, f"{MAINNET_ADDRESS}|{ETH_ADDRESS}")
    assert len(registry) == 0


@pytest.mark.parametrize(
    "flow_part", ["0x01cf0e2f2f715450", "1cf0e2f2f715450", "0X1CF0E2F2F715450", "0x1CF0E2F2F715450"]
)
def test_non_canonical_flow_address_is_rejected(user_account, settings, flow_part: str) -> None:
    registry = setup_account(user_account, settings)
    message = f"{flow_part}|{ETH_ADDRESS_ONE}"
    signature = sign_personal_message(PRIVKEY_ONE, message)
    with pytest.raises(InvalidAddressError):
        registry.create(PUBKEY_ONE_HEX, signature, message)
    assert len(registry) == 0

    canonical = f"{USER_ADDRESS}|{ETH_ADDRESS_ONE}"
    registry.create(PUBKEY_ONE_HEX, sign_personal_message(PRIVKEY_ONE, canonical), canonical)
    assert registry.verify(ETH_ADDRESS_ONE) is True


def test_network_defaults_to_owner_network() -> None:
    account = Account(SERVICE_ADDRESS)
    registry = setup_account(account, Settings())
    assert registry.current_network is Network.EMULATOR
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    assert registry.verify(ETH_ADDRESS) is True


def test_unowned_registry_cannot_create() -> None:
    registry = AttestationRegistry(Settings())
    assert registry.current_network is None
    with pytest.raises(InvalidAddressError):
        registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)


def test_unowned_registry_with_network_fails_owner_check(settings) -> None:
    registry = AttestationRegistry(settings)
    with pytest.raises(OwnerMismatchError):
        registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    assert len(registry) == 0


def test_moving_registry_out_of_storage_fails_closed(registry, service_account, user_account, settings) -> None:
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    moved = service_account.load(settings.storage_path)
    assert moved is registry
    assert registry.verify(ETH_ADDRESS) is False
    user_account.save(registry, settings.storage_path)
    assert registry.borrow_attestation(ETH_ADDRESS) is not None
    assert registry.verify(ETH_ADDRESS) is False
    user_account.load(settings.storage_path)
    service_account.save(registry, settings.storage_path)
    assert registry.verify(ETH_ADDRESS) is True


def test_destroy_drops_attestations(registry, service_account, settings) -> None:
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    attestation = registry.borrow_attestation(ETH_ADDRESS)
    assert service_account.load(settings.storage_path) is registry
    registry.destroy()
    assert registry.destroyed is True
    assert len(registry) == 0
    assert registry.verify(ETH_ADDRESS) is False
    assert attestation.owner is None
    assert attestation.verify() is False
    with pytest.raises(StorageError):
        registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)


def test_destroy_requires_registry_out_of_storage(registry, service_account, settings) -> None:
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    with pytest.raises(StorageError):
        registry.destroy()
    assert registry.destroyed is False
    assert service_account.borrow(settings.storage_path) is registry
    assert verify_attestation(service_account, ETH_ADDRESS, settings) is True


def test_setup_account_after_destroy_gives_fresh_registry(registry, service_account, settings) -> None:
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    service_account.load(settings.storage_path).destroy()
    assert verify_attestation(service_account, ETH_ADDRESS, settings) is False

    fresh = setup_account(service_account, settings)
    assert fresh is not registry
    fresh.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    assert verify_attestation(service_account, ETH_ADDRESS, settings) is True


def test_setup_account_refuses_destroyed_registry(service_account, settings) -> None:
    registry = AttestationRegistry(settings)
    registry.destroy()
    service_account.save(registry, settings.storage_path)
    with pytest.raises(StorageError):
        setup_account(service_account, settings)


def test_setup_account_is_idempotent(service_account, settings) -> None:
    first = setup_account(service_account, settings)
    assert setup_account(service_account, settings) is first
    assert service_account.borrow(settings.storage_path) is first


def test_public_view_is_read_only(registry, service_account, settings) -> None:
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    view = borrow_public_registry(service_account, settings)
    assert isinstance(view, AttestationRegistryPublic)
    assert not hasattr(view, "create")
    assert view.verify(ETH_ADDRESS) is True
    assert view.borrow_attestation(ETH_ADDRESS) is registry.borrow_attestation(ETH_ADDRESS)
    assert view.verify(ZERO_ETH_ADDRESS) is False


def test_verify_attestation_for_any_observer(registry, service_account, user_account, settings) -> None:
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    assert verify_attestation(service_account, ETH_ADDRESS, settings) is True
    assert verify_attestation(service_account, ETH_ADDRESS_ONE, settings) is False
    assert borrow_public_registry(user_account, settings) is None
    assert verify_attestation(user_account, ETH_ADDRESS, settings) is False


def test_registries_are_per_account(registry, user_account, settings) -> None:
    user_registry = setup_account(user_account, settings)
    user_registry.create(PUBKEY_HEX, USER_SIGNATURE, USER_MESSAGE)
    registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
    assert user_registry.verify(ETH_ADDRESS) is True
    assert registry.verify(ETH_ADDRESS) is True
    assert user_registry.borrow_attestation(ETH_ADDRESS) is not registry.borrow_attestation(ETH_ADDRESS)


def test_concurrent_creates_insert_once(registry) -> None:
    outcomes = []
    barrier = threading.Barrier(4)

    def worker() -> None:
        barrier.wait()
        try:
            registry.create(PUBKEY_HEX, SERVICE_SIGNATURE, SERVICE_MESSAGE)
            outcomes.append("created")
        except DuplicateAttestationError:
            outcomes.append("duplicate")

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert sorted(outcomes) == ["created", "duplicate", "duplicate", "duplicate"]
    assert len(registry) == 1
