"""Swap program entrypoint: decode, validate, and run one instruction.

States per swap: Uncreated -> FUNDED -> {SPENT | REFUNDED}. Funding creates the
vault-data record; settlement recomputes the commitment and flips the record
exactly once. The ledger rolls back the whole transaction on any error.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from .account_model import AccountInfo, InvokeContext, checked_add
from .config import NATIVE_TOKEN_SENTINEL, STORAGE_SPACE_ALLOCATED
from .crypto.hash_algorithms import commitment, hash_of_secret
from .crypto.pda import vault_data_seeds, vault_seeds
from .encoding import unpack
from .errors import ErrorCode, SpecError
from .payment import create_payment, update_payment_state, write_payment
from .system_program import CreateAccount, Transfer, invoke_signed
from .types import (
    NativePayment,
    PaymentState,
    ReceiverSpend,
    SenderRefund,
    TokenPayment,
)
from .validation import (
    get_common_accounts,
    validate_accounts,
    validate_common_payment_params,
)

logger = logging.getLogger(__name__)


def process_instruction(ctx: InvokeContext, accounts: Sequence[AccountInfo], data: bytes) -> None:
    ix = unpack(data)
    logger.debug("processing %s", type(ix).__name__)
    if isinstance(ix, NativePayment):
        _process_native_payment(ctx, accounts, ix)
    elif isinstance(ix, TokenPayment):
        _process_token_payment(ctx, accounts, ix)
    elif isinstance(ix, ReceiverSpend):
        _process_receiver_spend(ctx, accounts, ix)
    elif isinstance(ix, SenderRefund):
        _process_sender_refund(ctx, accounts, ix)
    else:
        raise SpecError(ErrorCode.INVALID_INSTRUCTION, f"unsupported instruction: {ix!r}")


# --- Funding ---


def _create_payment_account(
    ctx: InvokeContext,
    payer: AccountInfo,
    vault_data: AccountInfo,
    creation_funding_amount: int,
    data_seeds: list[bytes],
    payment_commitment: bytes,
    lock_time: int,
) -> None:
    invoke_signed(
        ctx,
        CreateAccount(
            from_pubkey=payer.key,
            to_pubkey=vault_data.key,
            lamports=creation_funding_amount,
            space=STORAGE_SPACE_ALLOCATED,
            owner=ctx.program_id,
        ),
        [data_seeds],
    )
    write_payment(vault_data.data_mut(), create_payment(payment_commitment, lock_time))


def _fund(
    ctx: InvokeContext,
    accounts: Sequence[AccountInfo],
    ix: Union[NativePayment, TokenPayment],
    token_program: Optional[bytes],
) -> tuple[AccountInfo, AccountInfo]:
    validate_common_payment_params(ix.receiver, ix.amount)
    payer, vault_data, vault, system_program = get_common_accounts(accounts)
    validate_accounts(payer, vault_data, vault, system_program)

    payment_commitment = commitment(ix.receiver, payer.key, ix.secret_hash, token_program, ix.amount)
    _create_payment_account(
        ctx,
        payer,
        vault_data,
        ix.creation_funding_amount,
        vault_data_seeds(ix.lock_time, ix.secret_hash, ix.vault_data_bump),
        payment_commitment,
        ix.lock_time,
    )
    return payer, vault


def _process_native_payment(
    ctx: InvokeContext, accounts: Sequence[AccountInfo], ix: NativePayment
) -> None:
    payer, vault = _fund(ctx, accounts, ix, None)
    total = checked_add(ix.amount, ix.creation_funding_amount)
    invoke_signed(
        ctx,
        Transfer(from_pubkey=payer.key, to_pubkey=vault.key, lamports=total),
        [vault_seeds(ix.lock_time, ix.secret_hash, ix.vault_bump)],
    )
    logger.info("native payment funded: amount=%d lock_time=%d", ix.amount, ix.lock_time)


def _process_token_payment(
    ctx: InvokeContext, accounts: Sequence[AccountInfo], ix: TokenPayment
) -> None:
    # Token custody moves through a separate token-program instruction.
    _fund(ctx, accounts, ix, ix.token_program)
    logger.info("token payment recorded: amount=%d lock_time=%d", ix.amount, ix.lock_time)


# --- Settlement ---


def _settle(
    ctx: InvokeContext,
    vault_data: AccountInfo,
    vault: AccountInfo,
    recipient: AccountInfo,
    payment_commitment: bytes,
    token_program: bytes,
    new_state: PaymentState,
    seeds: list[bytes],
    amount: int,
) -> None:
    updated = update_payment_state(
        vault_data.data, payment_commitment, PaymentState.FUNDED, new_state
    )
    if bytes(token_program) != NATIVE_TOKEN_SENTINEL:
        raise SpecError(ErrorCode.NOT_SUPPORTED, "token settlement is not supported")
    write_payment(vault_data.data_mut(), updated)
    invoke_signed(
        ctx,
        Transfer(from_pubkey=vault.key, to_pubkey=recipient.key, lamports=amount),
        [seeds],
    )


def _process_receiver_spend(
    ctx: InvokeContext, accounts: Sequence[AccountInfo], ix: ReceiverSpend
) -> None:
    receiver, vault_data, vault, system_program = get_common_accounts(accounts)
    validate_accounts(receiver, vault_data, vault, system_program, ctx.program_id)

    secret_hash = hash_of_secret(ix.secret)
    payment_commitment = commitment(
        receiver.key, ix.sender, secret_hash, ix.token_program, ix.amount
    )
    _settle(
        ctx,
        vault_data,
        vault,
        receiver,
        payment_commitment,
        ix.token_program,
        PaymentState.SPENT,
        vault_seeds(ix.lock_time, secret_hash, ix.vault_bump),
        ix.amount,
    )
    logger.info("payment spent by receiver: amount=%d", ix.amount)


def _process_sender_refund(
    ctx: InvokeContext, accounts: Sequence[AccountInfo], ix: SenderRefund
) -> None:
    sender, vault_data, vault, system_program = get_common_accounts(accounts)
    validate_accounts(sender, vault_data, vault, system_program, ctx.program_id)

    payment_commitment = commitment(
        ix.receiver, sender.key, ix.secret_hash, ix.token_program, ix.amount
    )
    _settle(
        ctx,
        vault_data,
        vault,
        sender,
        payment_commitment,
        ix.token_program,
        PaymentState.REFUNDED,
        vault_seeds(ix.lock_time, ix.secret_hash, ix.vault_bump),
        ix.amount,
    )
    logger.info("payment refunded to sender: amount=%d", ix.amount)
