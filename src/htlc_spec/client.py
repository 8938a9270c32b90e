"""Client-side instruction builders.

These run off-ledger: they pick valid bumps with ``find_program_address`` and
lay out the account list the program expects.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import NATIVE_TOKEN_SENTINEL, SYSTEM_PROGRAM_ID, VAULT_DATA_SEED, VAULT_SEED
from .crypto.hash_algorithms import hash_of_secret
from .crypto.pda import escrow_seed_prefix, find_program_address
from .encoding import pack
from .types import (
    AccountMeta,
    Instruction,
    NativePayment,
    ReceiverSpend,
    SenderRefund,
    SwapInstruction,
    TokenPayment,
)


@dataclass(frozen=True)
class EscrowAddresses:
    vault: bytes
    vault_bump: int
    vault_data: bytes
    vault_data_bump: int


def derive_escrow_addresses(program_id: bytes, lock_time: int, secret_hash: bytes) -> EscrowAddresses:
    vault, vault_bump = find_program_address(
        escrow_seed_prefix(VAULT_SEED, lock_time, secret_hash), program_id
    )
    vault_data, vault_data_bump = find_program_address(
        escrow_seed_prefix(VAULT_DATA_SEED, lock_time, secret_hash), program_id
    )
    return EscrowAddresses(vault, vault_bump, vault_data, vault_data_bump)


def _instruction(
    program_id: bytes, payer: bytes, escrow: EscrowAddresses, ix: SwapInstruction
) -> Instruction:
    return Instruction(
        program_id=program_id,
        accounts=[
            AccountMeta(payer, is_signer=True, is_writable=True),
            AccountMeta(escrow.vault_data, is_signer=False, is_writable=True),
            AccountMeta(escrow.vault, is_signer=False, is_writable=True),
            AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        ],
        data=pack(ix),
    )


def build_native_payment(
    program_id: bytes,
    payer: bytes,
    secret_hash: bytes,
    lock_time: int,
    amount: int,
    receiver: bytes,
    creation_funding_amount: int,
) -> Instruction:
    escrow = derive_escrow_addresses(program_id, lock_time, secret_hash)
    ix = NativePayment(
        secret_hash=secret_hash,
        lock_time=lock_time,
        amount=amount,
        receiver=receiver,
        creation_funding_amount=creation_funding_amount,
        vault_bump=escrow.vault_bump,
        vault_data_bump=escrow.vault_data_bump,
    )
    return _instruction(program_id, payer, escrow, ix)


def build_token_payment(
    program_id: bytes,
    payer: bytes,
    secret_hash: bytes,
    lock_time: int,
    amount: int,
    receiver: bytes,
    token_program: bytes,
    creation_funding_amount: int,
) -> Instruction:
    escrow = derive_escrow_addresses(program_id, lock_time, secret_hash)
    ix = TokenPayment(
        secret_hash=secret_hash,
        lock_time=lock_time,
        amount=amount,
        receiver=receiver,
        token_program=token_program,
        creation_funding_amount=creation_funding_amount,
        vault_bump=escrow.vault_bump,
        vault_data_bump=escrow.vault_data_bump,
    )
    return _instruction(program_id, payer, escrow, ix)


def build_receiver_spend(
    program_id: bytes,
    receiver: bytes,
    secret: bytes,
    lock_time: int,
    amount: int,
    sender: bytes,
    token_program: bytes = NATIVE_TOKEN_SENTINEL,
) -> Instruction:
    escrow = derive_escrow_addresses(program_id, lock_time, hash_of_secret(secret))
    ix = ReceiverSpend(
        secret=secret,
        lock_time=lock_time,
        amount=amount,
        sender=sender,
        token_program=token_program,
        vault_bump=escrow.vault_bump,
        vault_data_bump=escrow.vault_data_bump,
    )
    return _instruction(program_id, receiver, escrow, ix)


def build_sender_refund(
    program_id: bytes,
    sender: bytes,
    secret_hash: bytes,
    lock_time: int,
    amount: int,
    receiver: bytes,
    token_program: bytes = NATIVE_TOKEN_SENTINEL,
) -> Instruction:
    escrow = derive_escrow_addresses(program_id, lock_time, secret_hash)
    ix = SenderRefund(
        secret_hash=secret_hash,
        lock_time=lock_time,
        amount=amount,
        receiver=receiver,
        token_program=token_program,
        vault_bump=escrow.vault_bump,
        vault_data_bump=escrow.vault_data_bump,
    )
    return _instruction(program_id, sender, escrow, ix)
