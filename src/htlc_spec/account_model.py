"""Host ledger account model.

Accounts live in ``LedgerState.accounts`` keyed by address. The program sees
them through ``AccountInfo`` views that resolve every read by address against
the working state, so there are no in-process references between entities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

from .config import SYSTEM_PROGRAM_ID, U64_MAX
from .errors import ErrorCode, SpecError
from .types import Account, AccountMeta, LedgerState


def apply_balance_change(balance: int, delta: int) -> int:
    """Apply +/- lamports with u64 bounds."""
    new_balance = balance + delta
    if new_balance < 0:
        raise SpecError(ErrorCode.INSUFFICIENT_FUNDS, "insufficient lamports")
    if new_balance > U64_MAX:
        raise SpecError(ErrorCode.OVERFLOW, "lamports overflow")
    return new_balance


def checked_add(a: int, b: int) -> int:
    total = a + b
    if total > U64_MAX:
        raise SpecError(ErrorCode.OVERFLOW, "u64 addition overflow")
    return total


def get_account(state: LedgerState, address: bytes) -> Account:
    """Return the stored account, materialising an empty system account if absent."""
    acct = state.accounts.get(address)
    if acct is None:
        acct = Account()
        state.accounts[address] = acct
    return acct


def is_unused(acct: Account) -> bool:
    return acct.lamports == 0 and not acct.data and acct.owner == SYSTEM_PROGRAM_ID


@dataclass
class InvokeContext:
    """Per-instruction execution context handed to the program by the ledger."""

    program_id: bytes
    state: LedgerState
    signers: FrozenSet[bytes] = field(default_factory=frozenset)


@dataclass
class AccountInfo:
    key: bytes
    is_signer: bool
    is_writable: bool
    ctx: InvokeContext = field(repr=False, compare=False)

    @property
    def owner(self) -> bytes:
        acct = self.ctx.state.accounts.get(self.key)
        return acct.owner if acct is not None else SYSTEM_PROGRAM_ID

    @property
    def lamports(self) -> int:
        acct = self.ctx.state.accounts.get(self.key)
        return acct.lamports if acct is not None else 0

    @property
    def data(self) -> bytes:
        acct = self.ctx.state.accounts.get(self.key)
        return bytes(acct.data) if acct is not None else b""

    def data_mut(self) -> bytearray:
        """Borrow the account data for writing; only the owning program may write."""
        if not self.is_writable:
            raise SpecError(ErrorCode.INVALID_ACCOUNT_DATA, "account is not writable")
        acct = self.ctx.state.accounts.get(self.key)
        if acct is None or acct.owner != self.ctx.program_id:
            raise SpecError(ErrorCode.SWAP_ACCOUNT_NOT_FOUND, "account data not owned by program")
        return acct.data


def account_infos(ctx: InvokeContext, metas: list[AccountMeta]) -> list[AccountInfo]:
    return [
        AccountInfo(
            key=m.pubkey,
            is_signer=m.is_signer,
            is_writable=m.is_writable,
            ctx=ctx,
        )
        for m in metas
    ]
