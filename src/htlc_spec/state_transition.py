"""Transaction entrypoints for the modelled host ledger."""

from __future__ import annotations

import logging
import threading
from copy import deepcopy
from typing import FrozenSet, Optional

from .account_model import InvokeContext, account_infos
from .errors import ErrorCode, SpecError
from .processor import process_instruction
from .types import Instruction, LedgerState, Transaction

logger = logging.getLogger(__name__)


class TransitionResult:
    """Thin wrapper for verify/apply results."""

    def __init__(self, ok: bool, error: Optional[SpecError] = None):
        self.ok = ok
        self.error = error

    @classmethod
    def success(cls) -> "TransitionResult":
        return cls(True, None)

    @classmethod
    def failure(cls, error: SpecError) -> "TransitionResult":
        return cls(False, error)

    def __repr__(self) -> str:
        if self.ok:
            return "TransitionResult(ok=True)"
        return f"TransitionResult(ok=False, error={self.error})"


def _verify_signers(tx: Transaction) -> None:
    signed = set(tx.signers)
    if not tx.instructions:
        raise SpecError(ErrorCode.INVALID_INSTRUCTION, "transaction has no instructions")
    for ix in tx.instructions:
        for meta in ix.accounts:
            if meta.is_signer and meta.pubkey not in signed:
                raise SpecError(ErrorCode.MISSING_REQUIRED_SIGNATURE, "signer meta without signature")


def instruction_signers(ix: Instruction) -> FrozenSet[bytes]:
    """Keys holding signer privilege for one instruction: its signer metas only."""
    return frozenset(meta.pubkey for meta in ix.accounts if meta.is_signer)


def apply_tx(state: LedgerState, tx: Transaction) -> tuple[LedgerState, TransitionResult]:
    """Apply every instruction of ``tx`` atomically.

    Failed-tx semantics: any error returns the original state unchanged.
    """
    try:
        _verify_signers(tx)
    except SpecError as exc:
        return state, TransitionResult.failure(exc)

    working = deepcopy(state)
    try:
        for ix in tx.instructions:
            ctx = InvokeContext(
                program_id=ix.program_id, state=working, signers=instruction_signers(ix)
            )
            process_instruction(ctx, account_infos(ctx, ix.accounts), ix.data)
    except SpecError as exc:
        logger.info("transaction rejected: %s", exc)
        return state, TransitionResult.failure(exc)

    working.slot = state.slot + 1
    return working, TransitionResult.success()


class Ledger:
    """Serializable ledger: one transaction commits at a time.

    Two transactions touching the same vault-data account cannot interleave,
    so the FUNDED-gated transition behaves as compare-and-swap.
    """

    def __init__(self, state: Optional[LedgerState] = None):
        self._state = state if state is not None else LedgerState()
        self._lock = threading.Lock()

    @property
    def state(self) -> LedgerState:
        with self._lock:
            return deepcopy(self._state)

    def submit(self, tx: Transaction) -> TransitionResult:
        with self._lock:
            self._state, result = apply_tx(self._state, tx)
        return result
