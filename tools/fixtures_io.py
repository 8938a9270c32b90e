"""Helpers to serialize/deserialize ledger fixtures for the swap program specs."""

from __future__ import annotations

from typing import Any

from htlc_spec.state_digest import compute_state_digest
from htlc_spec.types import (
    Account,
    AccountMeta,
    Instruction,
    LedgerState,
    Transaction,
)


def _hex_to_bytes(v: str) -> bytes:
    return bytes.fromhex(v)


def _bytes_to_hex(v: bytes) -> str:
    return bytes(v).hex()


def state_to_json(state: LedgerState) -> dict[str, Any]:
    accounts_out: list[dict[str, Any]] = []
    for addr in sorted(state.accounts):
        a = state.accounts[addr]
        accounts_out.append(
            {
                "address": _bytes_to_hex(addr),
                "lamports": a.lamports,
                "owner": _bytes_to_hex(a.owner),
                "executable": a.executable,
                "data": _bytes_to_hex(a.data),
            }
        )
    return {
        "slot": state.slot,
        "accounts": accounts_out,
        "state_digest": compute_state_digest(accounts_out),
    }


def state_from_json(data: dict[str, Any]) -> LedgerState:
    state = LedgerState(slot=int(data.get("slot", 0)))
    for a in data.get("accounts", []):
        state.accounts[_hex_to_bytes(a["address"])] = Account(
            lamports=int(a.get("lamports", 0)),
            data=bytearray(_hex_to_bytes(a.get("data", ""))),
            owner=_hex_to_bytes(a.get("owner", "00" * 32)),
            executable=bool(a.get("executable", False)),
        )
    return state


def tx_to_json(tx: Transaction) -> dict[str, Any]:
    return {
        "signers": [_bytes_to_hex(s) for s in tx.signers],
        "instructions": [
            {
                "program_id": _bytes_to_hex(ix.program_id),
                "accounts": [
                    {
                        "pubkey": _bytes_to_hex(m.pubkey),
                        "is_signer": m.is_signer,
                        "is_writable": m.is_writable,
                    }
                    for m in ix.accounts
                ],
                "data": _bytes_to_hex(ix.data),
            }
            for ix in tx.instructions
        ],
    }


def tx_from_json(data: dict[str, Any]) -> Transaction:
    instructions = [
        Instruction(
            program_id=_hex_to_bytes(ix["program_id"]),
            accounts=[
                AccountMeta(
                    pubkey=_hex_to_bytes(m["pubkey"]),
                    is_signer=bool(m.get("is_signer", False)),
                    is_writable=bool(m.get("is_writable", False)),
                )
                for m in ix.get("accounts", [])
            ],
            data=_hex_to_bytes(ix.get("data", "")),
        )
        for ix in data.get("instructions", [])
    ]
    return Transaction(
        instructions=instructions,
        signers=[_hex_to_bytes(s) for s in data.get("signers", [])],
    )
