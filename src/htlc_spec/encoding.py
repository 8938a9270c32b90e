"""Wire-format encoding for swap instructions and the payment record.

Instruction buffer: ``tag(u8) || variant_index(u8) || fields``. Fields are a
fixed-width little-endian record with no padding, in declaration order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import (
    INSTRUCTION_LENGTHS,
    PUBKEY_LEN,
    SECRET_LEN,
    U64_MAX,
)
from .errors import ErrorCode, SpecError
from .types import (
    InstructionType,
    NativePayment,
    ReceiverSpend,
    SenderRefund,
    SwapInstruction,
    TokenPayment,
    instruction_type,
)


@dataclass
class Writer:
    buf: bytearray

    def write_u8(self, v: int) -> None:
        if not 0 <= v <= 0xFF:
            raise SpecError(ErrorCode.INVALID_FORMAT, "u8 out of range")
        self.buf.extend(int(v).to_bytes(1, "little", signed=False))

    def write_u64(self, v: int) -> None:
        if not 0 <= v <= U64_MAX:
            raise SpecError(ErrorCode.INVALID_FORMAT, "u64 out of range")
        self.buf.extend(int(v).to_bytes(8, "little", signed=False))

    def write_bytes(self, b: bytes) -> None:
        self.buf.extend(b)


@dataclass
class Reader:
    data: bytes
    pos: int = 0

    def _take(self, size: int) -> bytes:
        end = self.pos + size
        if end > len(self.data):
            raise SpecError(ErrorCode.INVALID_FORMAT, "unexpected end of record")
        chunk = self.data[self.pos:end]
        self.pos = end
        return bytes(chunk)

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u64(self) -> int:
        return int.from_bytes(self._take(8), "little", signed=False)

    def read_bytes(self, size: int) -> bytes:
        return self._take(size)

    def remaining(self) -> int:
        return len(self.data) - self.pos


def _write_fixed_bytes(w: Writer, name: str, value: bytes, size: int) -> None:
    if not isinstance(value, (bytes, bytearray)):
        raise SpecError(ErrorCode.INVALID_FORMAT, f"{name} must be bytes")
    if len(value) != size:
        raise SpecError(ErrorCode.INVALID_FORMAT, f"{name} must be {size} bytes")
    w.write_bytes(bytes(value))


# Field kinds per variant, in declaration (wire) order.
_B32 = "b32"
_U64 = "u64"
_U8 = "u8"

_LAYOUTS = {
    InstructionType.NATIVE_PAYMENT: (
        NativePayment,
        (
            ("secret_hash", _B32),
            ("lock_time", _U64),
            ("amount", _U64),
            ("receiver", _B32),
            ("creation_funding_amount", _U64),
            ("vault_bump", _U8),
            ("vault_data_bump", _U8),
        ),
    ),
    InstructionType.TOKEN_PAYMENT: (
        TokenPayment,
        (
            ("secret_hash", _B32),
            ("lock_time", _U64),
            ("amount", _U64),
            ("receiver", _B32),
            ("token_program", _B32),
            ("creation_funding_amount", _U64),
            ("vault_bump", _U8),
            ("vault_data_bump", _U8),
        ),
    ),
    InstructionType.RECEIVER_SPEND: (
        ReceiverSpend,
        (
            ("secret", _B32),
            ("lock_time", _U64),
            ("amount", _U64),
            ("sender", _B32),
            ("token_program", _B32),
            ("vault_bump", _U8),
            ("vault_data_bump", _U8),
        ),
    ),
    InstructionType.SENDER_REFUND: (
        SenderRefund,
        (
            ("secret_hash", _B32),
            ("lock_time", _U64),
            ("amount", _U64),
            ("receiver", _B32),
            ("token_program", _B32),
            ("vault_bump", _U8),
            ("vault_data_bump", _U8),
        ),
    ),
}


# --- Field validation ---


def _check_len(value: bytes, size: int, code: ErrorCode, name: str) -> None:
    if not isinstance(value, (bytes, bytearray)) or len(value) != size:
        raise SpecError(code, f"{name} must be {size} bytes")


def _validate_common_fields(
    secret_hash: bytes,
    lock_time: int,
    amount: int,
    party: bytes,
    party_code: ErrorCode,
    token_program: Optional[bytes],
) -> None:
    _check_len(secret_hash, SECRET_LEN, ErrorCode.INVALID_SECRET_HASH, "secret_hash")
    if lock_time == 0:
        raise SpecError(ErrorCode.INVALID_LOCK_TIME, "lock_time must be non-zero")
    if amount == 0:
        raise SpecError(ErrorCode.INVALID_AMOUNT, "amount must be non-zero")
    _check_len(party, PUBKEY_LEN, party_code, "party id")
    if token_program is not None:
        _check_len(token_program, PUBKEY_LEN, ErrorCode.INVALID_TOKEN_PROGRAM, "token_program")


def validate_instruction(ix: SwapInstruction) -> None:
    """Field-level checks run after decode and before any state is touched."""
    if isinstance(ix, NativePayment):
        _validate_common_fields(
            ix.secret_hash, ix.lock_time, ix.amount, ix.receiver, ErrorCode.INVALID_RECEIVER, None
        )
    elif isinstance(ix, TokenPayment):
        _validate_common_fields(
            ix.secret_hash, ix.lock_time, ix.amount, ix.receiver,
            ErrorCode.INVALID_RECEIVER, ix.token_program,
        )
    elif isinstance(ix, ReceiverSpend):
        _check_len(ix.secret, SECRET_LEN, ErrorCode.INVALID_SECRET, "secret")
        _check_len(ix.sender, PUBKEY_LEN, ErrorCode.INVALID_SENDER, "sender")
        _validate_common_fields(
            ix.secret, ix.lock_time, ix.amount, ix.sender,
            ErrorCode.INVALID_SENDER, ix.token_program,
        )
    elif isinstance(ix, SenderRefund):
        _validate_common_fields(
            ix.secret_hash, ix.lock_time, ix.amount, ix.receiver,
            ErrorCode.INVALID_RECEIVER, ix.token_program,
        )
    else:
        raise SpecError(ErrorCode.INVALID_INSTRUCTION, f"unsupported instruction: {type(ix).__name__}")


# --- Instruction codec ---


def pack(ix: SwapInstruction) -> bytes:
    """Encode an instruction as ``tag || variant_index || fields``."""
    try:
        tag = instruction_type(ix)
    except KeyError:
        raise SpecError(ErrorCode.INVALID_INSTRUCTION, f"unsupported instruction: {type(ix).__name__}")
    _, layout = _LAYOUTS[tag]

    w = Writer(bytearray())
    w.write_u8(tag)
    w.write_u8(tag)
    for name, kind in layout:
        value = getattr(ix, name)
        if kind == _B32:
            _write_fixed_bytes(w, name, value, 32)
        elif kind == _U64:
            w.write_u64(value)
        else:
            w.write_u8(value)
    return bytes(w.buf)


def _decode_record(tag: InstructionType, record: bytes) -> SwapInstruction:
    r = Reader(record)
    # Strict: a spend tag carrying the refund record (same 116-byte length),
    # or the reverse, is rejected rather than decoded as the record's variant.
    if r.read_u8() != tag:
        raise SpecError(ErrorCode.INVALID_FORMAT, "variant index does not match instruction tag")
    cls, layout = _LAYOUTS[tag]
    values = {}
    for name, kind in layout:
        if kind == _B32:
            values[name] = r.read_bytes(32)
        elif kind == _U64:
            values[name] = r.read_u64()
        else:
            values[name] = r.read_u8()
    if r.remaining():
        raise SpecError(ErrorCode.INVALID_FORMAT, "trailing bytes in record")
    return cls(**values)


def unpack(data: bytes) -> SwapInstruction:
    """Decode and validate an instruction buffer."""
    if not data:
        raise SpecError(ErrorCode.INVALID_INSTRUCTION, "empty instruction data")
    expected = INSTRUCTION_LENGTHS.get(data[0])
    if expected is None:
        raise SpecError(ErrorCode.INVALID_INSTRUCTION, f"unknown instruction tag {data[0]}")
    if len(data) != expected:
        raise SpecError(
            ErrorCode.INVALID_INPUT_LENGTH,
            f"instruction {data[0]} must be {expected} bytes, got {len(data)}",
        )
    ix = _decode_record(InstructionType(data[0]), bytes(data[1:]))
    validate_instruction(ix)
    return ix
