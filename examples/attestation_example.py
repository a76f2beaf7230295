#!/usr/bin/env python3
"""Example: bind an emulator Flow account to an Ethereum key and verify it."""

import logging

from flowattest import (
    Account,
    Network,
    Settings,
    privkey_to_address,
    privkey_to_pubkey,
    setup_account,
    sign_personal_message,
    verify_attestation,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

settings = Settings(network=Network.EMULATOR)
account = Account("0xf8d6e0586b0a20c7")
registry = setup_account(account, settings)

# Off-chain: the Ethereum key holder signs "<flow address>|<eth address>".
privkey = bytes(31) + bytes([1])
eth_address = privkey_to_address(privkey)
message = f"{account.address}|{eth_address}"
signature = sign_personal_message(privkey, message)
print("Message:", message)
print("Signature (r || s):", signature[:32] + "...")

# On the account: store the attestation.
registry.create(privkey_to_pubkey(privkey).hex(), signature, message)

# Anyone: verify through the public capability.
print("Verified:", verify_attestation(account, eth_address, settings))
print("Unknown address verified:", verify_attestation(account, "0x" + "00" * 20, settings))
