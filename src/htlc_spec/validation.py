"""Account and parameter preconditions for swap instructions."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .account_model import AccountInfo
from .config import COMMON_ACCOUNT_COUNT, DEFAULT_PUBKEY, SYSTEM_PROGRAM_ID
from .errors import ErrorCode, SpecError


def validate_common_payment_params(receiver: bytes, amount: int) -> None:
    if bytes(receiver) == DEFAULT_PUBKEY:
        raise SpecError(ErrorCode.RECEIVER_SET_TO_DEFAULT, "receiver must not be the default key")
    if amount == 0:
        raise SpecError(ErrorCode.AMOUNT_ZERO, "amount must be > 0")


def get_common_accounts(
    accounts: Sequence[AccountInfo],
) -> Tuple[AccountInfo, AccountInfo, AccountInfo, AccountInfo]:
    """Return (payer, vault_data, vault, system_program); extra accounts are ignored."""
    if len(accounts) < COMMON_ACCOUNT_COUNT:
        raise SpecError(
            ErrorCode.NOT_ENOUGH_ACCOUNT_KEYS,
            f"expected {COMMON_ACCOUNT_COUNT} accounts, got {len(accounts)}",
        )
    payer, vault_data, vault, system_program = accounts[:COMMON_ACCOUNT_COUNT]
    return payer, vault_data, vault, system_program


def validate_accounts(
    payer: AccountInfo,
    vault_data: AccountInfo,
    vault: AccountInfo,
    system_program: AccountInfo,
    program_id: Optional[bytes] = None,
) -> None:
    """Structural checks shared by funding and settlement.

    Passing ``program_id`` adds the settlement check: the vault-data account
    must already belong to this program, i.e. a prior funding created it.
    """
    if not payer.is_signer:
        raise SpecError(ErrorCode.MISSING_REQUIRED_SIGNATURE, "payer must sign")
    if not vault_data.is_writable or not vault.is_writable:
        raise SpecError(ErrorCode.INVALID_ACCOUNT_DATA, "vault accounts must be writable")
    if vault.owner != SYSTEM_PROGRAM_ID or system_program.key != SYSTEM_PROGRAM_ID:
        raise SpecError(ErrorCode.INCORRECT_PROGRAM_ID, "vault or system program account mismatch")
    if program_id is not None and vault_data.owner != program_id:
        raise SpecError(ErrorCode.INVALID_OWNER, "vault data not owned by program")
