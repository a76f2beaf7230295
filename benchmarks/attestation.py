"""
Benchmark the attestation hot paths: Keccak-256, personal-message
verification, address derivation and a full registry create.
Reports whether the Cython-compiled crypto modules are in use.

Run from repo root:

  PYTHONPATH=src python benchmarks/attestation.py

Or after pip install -e .:

  python benchmarks/attestation.py
"""

from __future__ import annotations

import os
import sys
import time
import tracemalloc

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_src = os.path.join(_root, "src")
if _src not in sys.path:
    sys.path.insert(0, _src)

from flowattest import (
    Account,
    Network,
    Settings,
    derive_eth_address,
    keccak256,
    privkey_to_address,
    privkey_to_pubkey,
    setup_account,
    sign_personal_message,
    verify_signature,
)
from flowattest.curves import secp256k1
from flowattest.hashes import keccak

N_HASH = 2000
N_CURVE = 20
N_MEM = 10
PRIV = bytes(31) + bytes([1])
PUB_HEX = privkey_to_pubkey(PRIV).hex()
FLOW_ADDRESS = "0xf8d6e0586b0a20c7"
MESSAGE = f"{FLOW_ADDRESS}|{privkey_to_address(PRIV)}"
SIGNATURE = sign_personal_message(PRIV, MESSAGE)

SAMPLES = [
    (b"", "empty"),
    (MESSAGE.encode(), "message"),
    (b"x" * 136, "136 B"),
    (b"x" * 1024, "1 KiB"),
]


def _compiled(module) -> bool:
    return not module.__file__.endswith(".py")


def _time_per_call(fn, *args, n: int, warmup: int = 3) -> float:
    for _ in range(warmup):
        fn(*args)
    start = time.perf_counter()
    for _ in range(n):
        fn(*args)
    return (time.perf_counter() - start) / n


def _peak_kb(fn, *args, n: int = N_MEM) -> float:
    tracemalloc.start()
    if hasattr(tracemalloc, "reset_peak"):
        tracemalloc.reset_peak()
    for _ in range(n):
        fn(*args)
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return peak / 1024.0


def _create_once() -> None:
    settings = Settings(network=Network.EMULATOR)
    registry = setup_account(Account(FLOW_ADDRESS), settings)
    registry.create(PUB_HEX, SIGNATURE, MESSAGE)


def main() -> None:
    print("Benchmark: attestation hot paths")
    print(f"  keccak    compiled: {_compiled(keccak)}")
    print(f"  secp256k1 compiled: {_compiled(secp256k1)}")
    print()

    assert verify_signature(PUB_HEX, SIGNATURE, MESSAGE)
    print("  Sanity check: signature verifies.")
    print()

    print("  --- keccak256 (ms) ---")
    for data, label in SAMPLES:
        t = _time_per_call(keccak256, data, n=N_HASH) * 1000
        print(f"  {label:<10} {t:.4f}")
    print()

    print("  --- attestation (ms) ---")
    t = _time_per_call(derive_eth_address, PUB_HEX, n=N_HASH) * 1000
    print(f"  derive_eth_address     {t:.4f}")
    t = _time_per_call(sign_personal_message, PRIV, MESSAGE, n=N_CURVE) * 1000
    print(f"  sign_personal_message  {t:.4f}")
    t = _time_per_call(verify_signature, PUB_HEX, SIGNATURE, MESSAGE, n=N_CURVE) * 1000
    print(f"  verify_signature       {t:.4f}")
    t = _time_per_call(_create_once, n=N_CURVE) * 1000
    print(f"  registry create        {t:.4f}")
    print()

    print("  --- Peak memory (KiB) ---")
    print(f"  verify_signature  {_peak_kb(verify_signature, PUB_HEX, SIGNATURE, MESSAGE):.2f}")
    print(f"  registry create   {_peak_kb(_create_once):.2f}")


if __name__ == "__main__":
    main()
