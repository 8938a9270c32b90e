"""Program derived addresses and escrow seed layout.

A PDA is SHA-256(seeds || program_id || "ProgramDerivedAddress") that does not
decode to an ed25519 point, so no private key can sign for it. Only the owning
program can, by presenting the same seeds to the ledger.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from solders.pubkey import Pubkey

from ..config import MAX_SEED_LEN, MAX_SEEDS, PDA_MARKER, VAULT_DATA_SEED, VAULT_SEED
from ..errors import ErrorCode, SpecError
from .hash_algorithms import sha256


def is_on_curve(address: bytes) -> bool:
    """Return True if ``address`` decompresses to an ed25519 point."""
    return Pubkey(bytes(address)).is_on_curve()


def _check_seeds(seeds: Sequence[bytes], max_seeds: int) -> None:
    if len(seeds) > max_seeds:
        raise SpecError(ErrorCode.INVALID_SEEDS, "too many seeds")
    for seed in seeds:
        if len(seed) > MAX_SEED_LEN:
            raise SpecError(ErrorCode.INVALID_SEEDS, "seed exceeds max length")


def create_program_address(seeds: Sequence[bytes], program_id: bytes) -> bytes:
    _check_seeds(seeds, MAX_SEEDS)
    # Hashed here rather than via Pubkey.create_program_address, which aborts
    # instead of raising when the result lies on the curve.
    address = sha256(*seeds, program_id, PDA_MARKER)
    if is_on_curve(address):
        raise SpecError(ErrorCode.INVALID_SEEDS, "derived address lies on the curve")
    return address


def find_program_address(seeds: Sequence[bytes], program_id: bytes) -> Tuple[bytes, int]:
    """Return the first valid (address, bump), searching bumps from 255 down."""
    # One seed slot is reserved for the bump.
    _check_seeds(seeds, MAX_SEEDS - 1)
    address, bump = Pubkey.find_program_address([bytes(s) for s in seeds], Pubkey(bytes(program_id)))
    return bytes(address), bump


# --- Escrow seeds ---


def escrow_seed_prefix(tag: bytes, lock_time: int, secret_hash: bytes) -> List[bytes]:
    return [tag, int(lock_time).to_bytes(8, "little", signed=False), bytes(secret_hash)]


def vault_seeds(lock_time: int, secret_hash: bytes, bump: int) -> List[bytes]:
    return [*escrow_seed_prefix(VAULT_SEED, lock_time, secret_hash), bytes([bump])]


def vault_data_seeds(lock_time: int, secret_hash: bytes, bump: int) -> List[bytes]:
    return [*escrow_seed_prefix(VAULT_DATA_SEED, lock_time, secret_hash), bytes([bump])]
