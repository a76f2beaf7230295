"""
Keccak-256 and the Ethereum personal-message digest.

Run from repo root: PYTHONPATH=src python examples/keccak.py
"""

import os
import sys

if getattr(sys, "frozen", False) is False:
    _root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    _src = os.path.join(_root, "src")
    if _src not in sys.path:
        sys.path.insert(0, _src)

from flowattest import keccak256, personal_message_hash

digest = keccak256(b"hello")
print("keccak256(b'hello')          =", digest.hex())

# What a wallet actually signs for personal_sign
msg = "0xf8d6e0586b0a20c7|0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"
print("personal_message_hash(msg)   =", personal_message_hash(msg).hex())
