"""Malformed instruction buffers and field-level rejections."""

from __future__ import annotations

import pytest

from htlc_spec.encoding import Reader, Writer, pack, unpack, validate_instruction
from htlc_spec.errors import ErrorCode, SpecError
from htlc_spec.test_accounts import ALICE, BOB, TOKEN_PROGRAM_ID
from htlc_spec.types import NativePayment, ReceiverSpend, SenderRefund, TokenPayment


def _native(**overrides) -> NativePayment:
    fields = dict(
        secret_hash=bytes([0x22] * 32),
        lock_time=1000,
        amount=500,
        receiver=BOB,
        creation_funding_amount=1_000_000,
        vault_bump=255,
        vault_data_bump=255,
    )
    fields.update(overrides)
    return NativePayment(**fields)


def _expect(code: ErrorCode, data: bytes) -> None:
    with pytest.raises(SpecError) as exc:
        unpack(data)
    assert exc.value.code == code


def test_empty_buffer() -> None:
    _expect(ErrorCode.INVALID_INSTRUCTION, b"")


@pytest.mark.parametrize("tag", [4, 5, 0x7F, 0xFF])
def test_unknown_tag(tag: int) -> None:
    _expect(ErrorCode.INVALID_INSTRUCTION, bytes([tag]) + bytes(91))


def test_short_buffer() -> None:
    _expect(ErrorCode.INVALID_INPUT_LENGTH, pack(_native())[:-1])


def test_long_buffer() -> None:
    _expect(ErrorCode.INVALID_INPUT_LENGTH, pack(_native()) + b"\x00")


def test_tag_only() -> None:
    _expect(ErrorCode.INVALID_INPUT_LENGTH, b"\x00")


def test_native_length_under_token_tag() -> None:
    data = bytearray(pack(_native()))
    data[0] = 1
    _expect(ErrorCode.INVALID_INPUT_LENGTH, bytes(data))


def test_variant_index_mismatch() -> None:
    # Spend and refund share a length, so only the variant index disagrees.
    spend = ReceiverSpend(
        secret=bytes([0x11] * 32),
        lock_time=1000,
        amount=500,
        sender=ALICE,
        token_program=bytes(32),
        vault_bump=255,
        vault_data_bump=255,
    )
    data = bytearray(pack(spend))
    data[1] = 3
    _expect(ErrorCode.INVALID_FORMAT, bytes(data))


def test_zero_lock_time() -> None:
    data = bytearray(pack(_native()))
    data[34:42] = bytes(8)
    _expect(ErrorCode.INVALID_LOCK_TIME, bytes(data))


def test_zero_amount_on_decode() -> None:
    data = bytearray(pack(_native()))
    data[42:50] = bytes(8)
    _expect(ErrorCode.INVALID_AMOUNT, bytes(data))


def test_zero_amount_refund() -> None:
    refund = SenderRefund(
        secret_hash=bytes([0x22] * 32),
        lock_time=1000,
        amount=1,
        receiver=BOB,
        token_program=bytes(32),
        vault_bump=255,
        vault_data_bump=255,
    )
    data = bytearray(pack(refund))
    data[42:50] = bytes(8)
    _expect(ErrorCode.INVALID_AMOUNT, bytes(data))


def test_validate_short_secret_hash() -> None:
    with pytest.raises(SpecError) as exc:
        validate_instruction(_native(secret_hash=b"\x01" * 31))
    assert exc.value.code == ErrorCode.INVALID_SECRET_HASH


def test_validate_short_receiver() -> None:
    with pytest.raises(SpecError) as exc:
        validate_instruction(_native(receiver=b"\x01" * 31))
    assert exc.value.code == ErrorCode.INVALID_RECEIVER


def test_validate_short_token_program() -> None:
    ix = TokenPayment(
        secret_hash=bytes([0x22] * 32),
        lock_time=1000,
        amount=500,
        receiver=BOB,
        token_program=TOKEN_PROGRAM_ID[:31],
        creation_funding_amount=1_000_000,
        vault_bump=255,
        vault_data_bump=255,
    )
    with pytest.raises(SpecError) as exc:
        validate_instruction(ix)
    assert exc.value.code == ErrorCode.INVALID_TOKEN_PROGRAM


def test_validate_short_secret() -> None:
    ix = ReceiverSpend(
        secret=b"\x11" * 16,
        lock_time=1000,
        amount=500,
        sender=ALICE,
        token_program=bytes(32),
        vault_bump=255,
        vault_data_bump=255,
    )
    with pytest.raises(SpecError) as exc:
        validate_instruction(ix)
    assert exc.value.code == ErrorCode.INVALID_SECRET


def test_validate_short_sender() -> None:
    ix = ReceiverSpend(
        secret=b"\x11" * 32,
        lock_time=1000,
        amount=500,
        sender=ALICE[:20],
        token_program=bytes(32),
        vault_bump=255,
        vault_data_bump=255,
    )
    with pytest.raises(SpecError) as exc:
        validate_instruction(ix)
    assert exc.value.code == ErrorCode.INVALID_SENDER


def test_validate_rejects_foreign_object() -> None:
    with pytest.raises(SpecError) as exc:
        validate_instruction(object())
    assert exc.value.code == ErrorCode.INVALID_INSTRUCTION


def test_pack_rejects_bad_field_width() -> None:
    with pytest.raises(SpecError) as exc:
        pack(_native(receiver=b"\x01" * 33))
    assert exc.value.code == ErrorCode.INVALID_FORMAT


def test_pack_rejects_u64_overflow() -> None:
    with pytest.raises(SpecError) as exc:
        pack(_native(amount=2**64))
    assert exc.value.code == ErrorCode.INVALID_FORMAT


def test_pack_rejects_bump_overflow() -> None:
    with pytest.raises(SpecError) as exc:
        pack(_native(vault_bump=256))
    assert exc.value.code == ErrorCode.INVALID_FORMAT


def test_pack_rejects_foreign_object() -> None:
    with pytest.raises(SpecError) as exc:
        pack(object())
    assert exc.value.code == ErrorCode.INVALID_INSTRUCTION


def test_reader_past_end() -> None:
    r = Reader(b"\x01\x02")
    assert r.read_u8() == 1
    with pytest.raises(SpecError) as exc:
        r.read_u64()
    assert exc.value.code == ErrorCode.INVALID_FORMAT


def test_writer_rejects_negative() -> None:
    with pytest.raises(SpecError):
        Writer(bytearray()).write_u64(-1)


def test_refund_tag_with_spend_variant() -> None:
    refund = SenderRefund(
        secret_hash=bytes([0x22] * 32),
        lock_time=1000,
        amount=500,
        receiver=BOB,
        token_program=bytes(32),
        vault_bump=255,
        vault_data_bump=255,
    )
    data = bytearray(pack(refund))
    data[1] = 2
    _expect(ErrorCode.INVALID_FORMAT, bytes(data))
