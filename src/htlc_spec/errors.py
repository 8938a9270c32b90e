"""HTLC swap program error codes and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCategory(IntEnum):
    SUCCESS = 0x00
    VALIDATION = 0x01
    AUTHORIZATION = 0x02
    RESOURCE = 0x03
    STATE = 0x04
    INTERNAL = 0xFF


class ErrorCode(IntEnum):
    # Success
    SUCCESS = 0x0000

    # Validation (instruction structure and fields)
    INVALID_INSTRUCTION = 0x0100
    INVALID_INPUT_LENGTH = 0x0101
    INVALID_FORMAT = 0x0102
    INVALID_SECRET_HASH = 0x0103
    INVALID_SECRET = 0x0104
    INVALID_LOCK_TIME = 0x0105
    INVALID_AMOUNT = 0x0106
    INVALID_RECEIVER = 0x0107
    INVALID_SENDER = 0x0108
    INVALID_TOKEN_PROGRAM = 0x0109
    RECEIVER_SET_TO_DEFAULT = 0x010A
    AMOUNT_ZERO = 0x010B

    # Authorization (account shape)
    MISSING_REQUIRED_SIGNATURE = 0x0200
    INVALID_ACCOUNT_DATA = 0x0201
    INCORRECT_PROGRAM_ID = 0x0202
    INVALID_OWNER = 0x0203
    INVALID_SEEDS = 0x0204

    # Resource
    NOT_ENOUGH_ACCOUNT_KEYS = 0x0300
    INSUFFICIENT_FUNDS = 0x0301
    ACCOUNT_ALREADY_IN_USE = 0x0302
    ACCOUNT_DATA_TOO_SMALL = 0x0303
    OVERFLOW = 0x0304

    # State (payment record)
    INVALID_PAYMENT_HASH = 0x0400
    INVALID_PAYMENT_STATE = 0x0401
    INVALID_PAYMENT_DATA = 0x0402
    SWAP_ACCOUNT_NOT_FOUND = 0x0403
    NOT_SUPPORTED = 0x0404

    # Internal
    INTERNAL_ERROR = 0xFF00
    UNKNOWN = 0xFFFF

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory(self.value >> 8)


@dataclass(frozen=True)
class SpecError(Exception):
    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.name}({self.code:#06x}): {self.message}"


# Allow Python's Exception machinery to set __traceback__/__context__/__cause__
# while keeping dataclass fields frozen (Python 3.13 contextlib compat).
_EXCEPTION_ATTRS = frozenset(
    ("__traceback__", "__context__", "__cause__", "__suppress_context__", "__notes__")
)
_frozen_setattr = SpecError.__setattr__


def _spec_error_setattr(self: SpecError, name: str, value: object) -> None:
    if name in _EXCEPTION_ATTRS:
        object.__setattr__(self, name, value)
    else:
        _frozen_setattr(self, name, value)


SpecError.__setattr__ = _spec_error_setattr  # type: ignore[method-assign]


def err(code: ErrorCode, message: str) -> SpecError:
    return SpecError(code=code, message=message)
