"""Core types for the HTLC swap program specs.

Instructions are a closed tagged union: four plain dataclasses selected by the
leading tag byte. Ledger-side types model the host ledger's account store,
which the program only reaches through address lookups.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Union

from .config import SYSTEM_PROGRAM_ID


class InstructionType(IntEnum):
    NATIVE_PAYMENT = 0x00
    TOKEN_PAYMENT = 0x01
    RECEIVER_SPEND = 0x02
    SENDER_REFUND = 0x03


class PaymentState(IntEnum):
    FUNDED = 0x00
    SPENT = 0x01
    REFUNDED = 0x02


# --- Instructions ---


@dataclass
class NativePayment:
    secret_hash: bytes
    lock_time: int
    amount: int
    receiver: bytes
    creation_funding_amount: int
    vault_bump: int
    vault_data_bump: int


@dataclass
class TokenPayment:
    secret_hash: bytes
    lock_time: int
    amount: int
    receiver: bytes
    token_program: bytes
    creation_funding_amount: int
    vault_bump: int
    vault_data_bump: int


@dataclass
class ReceiverSpend:
    secret: bytes
    lock_time: int
    amount: int
    sender: bytes
    token_program: bytes
    vault_bump: int
    vault_data_bump: int


@dataclass
class SenderRefund:
    secret_hash: bytes
    lock_time: int
    amount: int
    receiver: bytes
    token_program: bytes
    vault_bump: int
    vault_data_bump: int


SwapInstruction = Union[NativePayment, TokenPayment, ReceiverSpend, SenderRefund]

INSTRUCTION_TYPES = {
    NativePayment: InstructionType.NATIVE_PAYMENT,
    TokenPayment: InstructionType.TOKEN_PAYMENT,
    ReceiverSpend: InstructionType.RECEIVER_SPEND,
    SenderRefund: InstructionType.SENDER_REFUND,
}


def instruction_type(ix: SwapInstruction) -> InstructionType:
    return INSTRUCTION_TYPES[type(ix)]


# --- Payment record ---


@dataclass(frozen=True)
class Payment:
    commitment: bytes
    lock_time: int
    state: PaymentState = PaymentState.FUNDED


# --- Ledger ---


@dataclass
class Account:
    lamports: int = 0
    data: bytearray = field(default_factory=bytearray)
    owner: bytes = SYSTEM_PROGRAM_ID
    executable: bool = False


@dataclass(frozen=True)
class AccountMeta:
    pubkey: bytes
    is_signer: bool = False
    is_writable: bool = False


@dataclass
class Instruction:
    program_id: bytes
    accounts: List[AccountMeta]
    data: bytes


@dataclass
class Transaction:
    instructions: List[Instruction]
    signers: List[bytes] = field(default_factory=list)


@dataclass
class LedgerState:
    accounts: dict[bytes, Account] = field(default_factory=dict)
    slot: int = 0
