"""Payment record store.

The record lives in the vault-data account as 41 bytes:
``commitment(32) || lock_time(u64 LE) || state(u8)``.
"""

from __future__ import annotations

from dataclasses import replace

from .config import HASH_SIZE, STORAGE_SPACE_ALLOCATED
from .encoding import Reader, Writer
from .errors import ErrorCode, SpecError
from .types import Payment, PaymentState


def create_payment(commitment: bytes, lock_time: int) -> Payment:
    return Payment(commitment=bytes(commitment), lock_time=lock_time, state=PaymentState.FUNDED)


def pack_payment(payment: Payment) -> bytes:
    if len(payment.commitment) != HASH_SIZE:
        raise SpecError(ErrorCode.INVALID_PAYMENT_DATA, "commitment must be 32 bytes")
    w = Writer(bytearray())
    w.write_bytes(payment.commitment)
    w.write_u64(payment.lock_time)
    w.write_u8(payment.state)
    return bytes(w.buf)


def unpack_payment(data: bytes) -> Payment:
    """Decode a record; trailing bytes beyond the fixed width are ignored."""
    if len(data) < STORAGE_SPACE_ALLOCATED:
        raise SpecError(ErrorCode.INVALID_PAYMENT_DATA, "payment record too short")
    r = Reader(bytes(data[:STORAGE_SPACE_ALLOCATED]))
    commitment = r.read_bytes(HASH_SIZE)
    lock_time = r.read_u64()
    raw_state = r.read_u8()
    try:
        state = PaymentState(raw_state)
    except ValueError:
        raise SpecError(ErrorCode.INVALID_PAYMENT_DATA, f"unknown payment state {raw_state}")
    return Payment(commitment=commitment, lock_time=lock_time, state=state)


def write_payment(dest: bytearray, payment: Payment) -> None:
    payment_bytes = pack_payment(payment)
    if len(dest) < len(payment_bytes):
        raise SpecError(ErrorCode.ACCOUNT_DATA_TOO_SMALL, "account data too small for payment")
    dest[: len(payment_bytes)] = payment_bytes


def transition(payment: Payment, expected: PaymentState, new: PaymentState) -> Payment:
    """Equality-gated state change; the sole guard of the terminal states."""
    if payment.state != expected:
        raise SpecError(
            ErrorCode.INVALID_PAYMENT_STATE,
            f"payment is {payment.state.name}, expected {expected.name}",
        )
    return replace(payment, state=new)


def update_payment_state(
    data: bytes,
    commitment: bytes,
    expected: PaymentState,
    new: PaymentState,
) -> Payment:
    """Check a stored record against a recomputed commitment and transition it.

    Returns the updated record without writing it back.
    """
    payment = unpack_payment(data)
    if payment.commitment != bytes(commitment):
        raise SpecError(ErrorCode.INVALID_PAYMENT_HASH, "payment commitment mismatch")
    return transition(payment, expected, new)
