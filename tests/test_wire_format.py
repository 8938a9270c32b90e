"""Instruction wire format: layout, lengths and decode of well-formed buffers."""

from __future__ import annotations

import pytest

from htlc_spec.config import INSTRUCTION_LENGTHS
from htlc_spec.encoding import pack, unpack
from htlc_spec.test_accounts import ALICE, BOB, TOKEN_PROGRAM_ID
from htlc_spec.types import (
    InstructionType,
    NativePayment,
    ReceiverSpend,
    SenderRefund,
    TokenPayment,
    instruction_type,
)

SECRET = bytes([0x11] * 32)
SECRET_HASH = bytes([0x22] * 32)


def _native() -> NativePayment:
    return NativePayment(
        secret_hash=SECRET_HASH,
        lock_time=1000,
        amount=500,
        receiver=BOB,
        creation_funding_amount=1_000_000,
        vault_bump=254,
        vault_data_bump=253,
    )


def _token() -> TokenPayment:
    return TokenPayment(
        secret_hash=SECRET_HASH,
        lock_time=1000,
        amount=500,
        receiver=BOB,
        token_program=TOKEN_PROGRAM_ID,
        creation_funding_amount=1_000_000,
        vault_bump=254,
        vault_data_bump=253,
    )


def _spend() -> ReceiverSpend:
    return ReceiverSpend(
        secret=SECRET,
        lock_time=1000,
        amount=500,
        sender=ALICE,
        token_program=bytes(32),
        vault_bump=254,
        vault_data_bump=253,
    )


def _refund() -> SenderRefund:
    return SenderRefund(
        secret_hash=SECRET_HASH,
        lock_time=1000,
        amount=500,
        receiver=BOB,
        token_program=bytes(32),
        vault_bump=254,
        vault_data_bump=253,
    )


ALL = [_native, _token, _spend, _refund]


@pytest.mark.parametrize("factory", ALL)
def test_buffer_lengths(factory) -> None:
    ix = factory()
    data = pack(ix)
    assert len(data) == INSTRUCTION_LENGTHS[instruction_type(ix)]


def test_declared_lengths() -> None:
    assert INSTRUCTION_LENGTHS == {0: 92, 1: 124, 2: 116, 3: 116}


@pytest.mark.parametrize("factory", ALL)
def test_tag_and_variant_index(factory) -> None:
    ix = factory()
    data = pack(ix)
    assert data[0] == instruction_type(ix)
    assert data[1] == instruction_type(ix)


def test_native_payment_field_offsets() -> None:
    data = pack(_native())
    assert data[2:34] == SECRET_HASH
    assert int.from_bytes(data[34:42], "little") == 1000
    assert int.from_bytes(data[42:50], "little") == 500
    assert data[50:82] == BOB
    assert int.from_bytes(data[82:90], "little") == 1_000_000
    assert data[90] == 254
    assert data[91] == 253


def test_token_payment_field_offsets() -> None:
    data = pack(_token())
    assert data[50:82] == BOB
    assert data[82:114] == TOKEN_PROGRAM_ID
    assert int.from_bytes(data[114:122], "little") == 1_000_000
    assert data[122:124] == bytes([254, 253])


def test_receiver_spend_field_offsets() -> None:
    data = pack(_spend())
    assert data[2:34] == SECRET
    assert data[50:82] == ALICE
    assert data[82:114] == bytes(32)
    assert data[114:116] == bytes([254, 253])


def test_lock_time_is_little_endian() -> None:
    ix = _refund()
    ix.lock_time = 0x0102030405060708
    data = pack(ix)
    assert data[34:42] == bytes([8, 7, 6, 5, 4, 3, 2, 1])


@pytest.mark.parametrize("factory", ALL)
def test_unpack_returns_equal_instruction(factory) -> None:
    ix = factory()
    assert unpack(pack(ix)) == ix


def test_unpack_accepts_bytearray() -> None:
    ix = _native()
    assert unpack(bytearray(pack(ix))) == ix


def test_max_u64_amount() -> None:
    ix = _spend()
    ix.amount = 2**64 - 1
    assert unpack(pack(ix)).amount == 2**64 - 1


def test_instruction_type_enum() -> None:
    assert [t.value for t in InstructionType] == [0, 1, 2, 3]


def test_wire_vectors(wire_vector) -> None:
    for factory in ALL:
        ix = factory()
        wire_vector(
            f"{instruction_type(ix).name.lower()}_basic",
            {
                "instruction": instruction_type(ix).name,
                "wire_hex": pack(ix).hex(),
                "length": INSTRUCTION_LENGTHS[instruction_type(ix)],
            },
        )
