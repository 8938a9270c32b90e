"""Canonical ledger state digest implementation (v1)."""
from __future__ import annotations

from typing import Any

from .crypto.hash_algorithms import blake3_hash

from .types import LedgerState


def _hex_to_bytes(value: str | None) -> bytes:
    if value is None:
        return b""
    if not isinstance(value, str):
        raise TypeError("hex value must be string")
    v = value[2:] if value.startswith(("0x", "0X")) else value
    if v == "":
        return b""
    return bytes.fromhex(v)


def _u64_le(value: int) -> bytes:
    if value < 0:
        raise ValueError("u64 must be non-negative")
    return int(value).to_bytes(8, "little", signed=False)


def state_to_digest_input(state: LedgerState) -> list[dict[str, Any]]:
    return [
        {
            "address": addr.hex(),
            "lamports": acct.lamports,
            "owner": acct.owner.hex(),
            "executable": acct.executable,
            "data": bytes(acct.data).hex(),
        }
        for addr, acct in state.accounts.items()
    ]


def compute_state_digest(accounts: list[dict[str, Any]] | LedgerState) -> str:
    """Compute state digest v1 over ledger accounts.

    Accounts are sorted by address and encoded as
    ``address || lamports || owner || executable || len(data) || data`` before
    hashing with BLAKE3-256. Empty system accounts (zero lamports, no data) are
    skipped so materialised-but-untouched addresses do not change the digest.
    """
    if isinstance(accounts, LedgerState):
        accounts = state_to_digest_input(accounts)

    sortable = []
    for acc in accounts:
        addr = _hex_to_bytes(acc.get("address", ""))
        if len(addr) != 32:
            raise ValueError(f"address must be 32 bytes, got {len(addr)}")
        sortable.append((addr, acc))
    sortable.sort(key=lambda x: x[0])

    buf = bytearray()
    for addr, acc in sortable:
        data = _hex_to_bytes(acc.get("data", ""))
        lamports = int(acc.get("lamports", 0))
        owner = _hex_to_bytes(acc.get("owner", "")) or bytes(32)
        if lamports == 0 and not data and owner == bytes(32):
            continue
        buf += addr
        buf += _u64_le(lamports)
        buf += owner
        buf += b"\x01" if acc.get("executable") else b"\x00"
        buf += _u64_le(len(data))
        buf += data

    return blake3_hash(bytes(buf)).hex()
