"""Named test identities derived deterministically from their names."""

from __future__ import annotations

from .crypto.hash_algorithms import sha256

NAMES = ["Program", "Alice", "Bob", "Carol", "Dave", "Eve"]


def derive_identity(name: str) -> bytes:
    return sha256(b"htlc-spec/test-account/", name.lower().encode())


ACCOUNTS: dict[str, bytes] = {name: derive_identity(name) for name in NAMES}

PROGRAM_ID = ACCOUNTS["Program"]
ALICE = ACCOUNTS["Alice"]
BOB = ACCOUNTS["Bob"]
CAROL = ACCOUNTS["Carol"]
DAVE = ACCOUNTS["Dave"]
EVE = ACCOUNTS["Eve"]

# Stand-in id for a token program; any non-zero 32-byte id behaves the same.
TOKEN_PROGRAM_ID = derive_identity("TokenProgram")
