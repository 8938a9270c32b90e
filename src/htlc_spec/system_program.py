"""Host ledger system program: account creation and native transfers.

The swap program reaches these primitives only through ``invoke_signed``,
passing the escrow seeds as an explicit signing capability.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Sequence, Union

from .account_model import InvokeContext, apply_balance_change, get_account, is_unused
from .config import SYSTEM_PROGRAM_ID
from .crypto.pda import create_program_address
from .errors import ErrorCode, SpecError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateAccount:
    from_pubkey: bytes
    to_pubkey: bytes
    lamports: int
    space: int
    owner: bytes


@dataclass(frozen=True)
class Transfer:
    from_pubkey: bytes
    to_pubkey: bytes
    lamports: int


SystemInstruction = Union[CreateAccount, Transfer]


def _require_signer(signers: AbstractSet[bytes], key: bytes, role: str) -> None:
    if key not in signers:
        raise SpecError(ErrorCode.MISSING_REQUIRED_SIGNATURE, f"{role} must sign")


def create_account(ctx: InvokeContext, ix: CreateAccount, signers: AbstractSet[bytes]) -> None:
    _require_signer(signers, ix.from_pubkey, "funding account")
    _require_signer(signers, ix.to_pubkey, "new account")

    state = ctx.state
    target = state.accounts.get(ix.to_pubkey)
    if target is not None and not is_unused(target):
        raise SpecError(ErrorCode.ACCOUNT_ALREADY_IN_USE, "account already in use")

    funder = get_account(state, ix.from_pubkey)
    funder.lamports = apply_balance_change(funder.lamports, -ix.lamports)

    target = get_account(state, ix.to_pubkey)
    target.lamports = apply_balance_change(target.lamports, ix.lamports)
    target.data = bytearray(ix.space)
    target.owner = ix.owner


def transfer(ctx: InvokeContext, ix: Transfer, signers: AbstractSet[bytes]) -> None:
    _require_signer(signers, ix.from_pubkey, "transfer source")

    state = ctx.state
    source = get_account(state, ix.from_pubkey)
    if source.owner != SYSTEM_PROGRAM_ID or source.data:
        raise SpecError(ErrorCode.INVALID_ACCOUNT_DATA, "transfer source must be a plain system account")

    source.lamports = apply_balance_change(source.lamports, -ix.lamports)
    dest = get_account(state, ix.to_pubkey)
    dest.lamports = apply_balance_change(dest.lamports, ix.lamports)


def invoke_signed(
    ctx: InvokeContext,
    ix: SystemInstruction,
    signer_seeds: Sequence[Sequence[bytes]],
) -> None:
    """Run a system instruction with the transaction's signers plus PDA signers.

    Each entry of ``signer_seeds`` must derive, under the calling program's id,
    to an address that is then treated as having signed.
    """
    derived = {create_program_address(seeds, ctx.program_id) for seeds in signer_seeds}
    signers = frozenset(ctx.signers) | derived
    logger.debug("invoke_signed %s with %d derived signer(s)", type(ix).__name__, len(derived))
    if isinstance(ix, CreateAccount):
        create_account(ctx, ix, signers)
    elif isinstance(ix, Transfer):
        transfer(ctx, ix, signers)
    else:
        raise SpecError(ErrorCode.INCORRECT_PROGRAM_ID, f"unsupported system instruction: {ix!r}")
