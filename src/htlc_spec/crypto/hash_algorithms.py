"""Hash algorithm assignments for the swap program."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Optional

from blake3 import blake3

from ..config import NATIVE_TOKEN_SENTINEL


@dataclass(frozen=True)
class HashAssignment:
    purpose: str
    algorithm: str
    output_size: int
    input_spec: str


ASSIGNMENTS = [
    HashAssignment(
        "payment_commitment",
        "SHA-256",
        32,
        "receiver || sender || secret_hash || (token_program or 0^32) || amount_le64",
    ),
    HashAssignment("secret_hash", "SHA-256", 32, "secret preimage bytes"),
    HashAssignment("program_address", "SHA-256", 32, "seeds || program_id || 'ProgramDerivedAddress'"),
    HashAssignment("state_digest", "BLAKE3", 32, "canonical ledger account encoding"),
]


def sha256(*parts: bytes) -> bytes:
    hasher = hashlib.sha256()
    for part in parts:
        hasher.update(part)
    return hasher.digest()


def blake3_hash(data: bytes) -> bytes:
    return blake3(data).digest()


def commitment(
    receiver: bytes,
    sender: bytes,
    secret_hash: bytes,
    token_program: Optional[bytes],
    amount: int,
) -> bytes:
    """Bind a payment's parties, secret hash, currency and amount into one digest.

    Field order is load-bearing: funding and settlement must recompute the same
    bytes. A native payment hashes 32 zero bytes in the token slot, so an
    all-zero token id and ``None`` produce the same commitment.
    """
    token = token_program if token_program is not None else NATIVE_TOKEN_SENTINEL
    return sha256(
        receiver,
        sender,
        secret_hash,
        token,
        int(amount).to_bytes(8, "little", signed=False),
    )


def hash_of_secret(secret: bytes) -> bytes:
    return sha256(secret)


