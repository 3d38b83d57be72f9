"""
Stateful accrual ledger (imperative shell around `src/core/accrual`).

The pure engine computes a complete post-state for every call; this class
owns the only mutable reference to the current state and is responsible for:
- serializing every public call behind one lock,
- refusing nested mutating calls (reentrancy guard, held across the transfer
  and the post-commit notifications),
- performing the funds transfer the step asks for, and committing only if it
  succeeds (a failed or raising transfer leaves the ledger untouched),
- logging and emitting notifications after commit.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from ..core.accrual import (
    Action,
    ActionParams,
    FundsTransferFailed,
    GlobalState,
    LedgerState,
    ReentrantCall,
    StepResult,
    VaultRecord,
    error_for_code,
    initial_state,
    preview_rewards,
    state_to_dict,
    step,
)
from ..core.accrual.invariants import check_all
from .collaborators import AdminGate, EventSink, FundsTransfer, NullEventSink, StaticAdminGate
from .config import LedgerConfig
from .structured_logging import log_event

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def _wall_clock() -> int:
    return int(time.time())


class AccrualLedger:
    """Single-writer vault reward ledger.

    Callers identify themselves explicitly: ``caller`` is the administrator on
    ``register`` and the vault identity on both claim paths.
    """

    def __init__(
        self,
        funds: FundsTransfer,
        *,
        admin_gate: Optional[AdminGate] = None,
        events: Optional[EventSink] = None,
        config: Optional[LedgerConfig] = None,
        clock: Optional[Clock] = None,
        state: Optional[LedgerState] = None,
    ):
        self._config = config or LedgerConfig()
        self._engine_params = self._config.engine_params()
        self._funds = funds
        self._gate = admin_gate or StaticAdminGate(self._config.admins)
        self._events = events or NullEventSink()
        self._clock = clock or _wall_clock
        self._lock = threading.RLock()
        self._in_call = False
        self._state = state if state is not None else initial_state(self._now())

    def _now(self) -> int:
        now = self._clock()
        if not isinstance(now, int) or isinstance(now, bool):
            raise TypeError(f"clock must return int seconds, got {type(now).__name__}")
        return now

    # -- Mutating operations -------------------------------------------------

    def register(self, caller: str, vault_id: str, stake: int, bid_amount: int, period: int) -> VaultRecord:
        """Open a vault and pull ``bid_amount`` from ``caller`` into custody."""

        def make_params(now: int) -> ActionParams:
            return ActionParams(
                action=Action.REGISTER,
                vault_id=vault_id,
                now=now,
                stake=stake,
                bid_amount=bid_amount,
                period=period,
                auth_ok=self._gate.is_admin(caller),
            )

        result = self._execute(make_params, lambda amount: self._funds.pull(caller, amount), caller=caller)
        assert result.state is not None
        return result.state.vaults[vault_id]

    def claim_rewards(self, caller: str) -> int:
        """Periodic claim for the caller's own vault. Returns the amount paid."""
        result = self._execute(
            lambda now: ActionParams(action=Action.CLAIM_REWARDS, vault_id=caller, now=now),
            lambda amount: self._funds.push(caller, amount),
            caller=caller,
        )
        return result.amount

    def claim_final_rewards(self, caller: str) -> int:
        """Terminal claim at or after the vault's end time. Returns the amount paid."""
        result = self._execute(
            lambda now: ActionParams(action=Action.CLAIM_FINAL_REWARDS, vault_id=caller, now=now),
            lambda amount: self._funds.push(caller, amount),
            caller=caller,
        )
        return result.amount

    def _execute(
        self,
        make_params: Callable[[int], ActionParams],
        transfer: Callable[[int], bool],
        *,
        caller: str,
    ) -> StepResult:
        with self._lock:
            if self._in_call:
                log_event(logger, "accrual.reentrant_call", logging.WARNING, caller=caller)
                raise ReentrantCall(f"nested ledger call from {caller!r}")
            self._in_call = True
            try:
                params = make_params(self._now())
                result = step(self._state, params, self._engine_params)
                if not result.accepted:
                    log_event(
                        logger, "accrual.rejected", logging.WARNING,
                        action=params.action.value, vault_id=params.vault_id,
                        caller=caller, reason=result.rejection, now=params.now,
                    )
                    raise error_for_code(result.rejection or "")

                self._transfer_or_raise(transfer, result, params, caller)
                assert result.state is not None
                self._state = result.state
                self._after_commit(params, result, caller)
            finally:
                self._in_call = False
            return result

    def _transfer_or_raise(
        self,
        transfer: Callable[[int], bool],
        result: StepResult,
        params: ActionParams,
        caller: str,
    ) -> None:
        try:
            ok = transfer(result.amount)
        except Exception as exc:
            log_event(
                logger, "accrual.transfer_error", logging.ERROR,
                action=params.action.value, vault_id=params.vault_id,
                caller=caller, amount=result.amount, error=repr(exc),
            )
            raise FundsTransferFailed(f"transfer raised: {exc}") from exc
        if not ok:
            log_event(
                logger, "accrual.transfer_failed", logging.WARNING,
                action=params.action.value, vault_id=params.vault_id,
                caller=caller, amount=result.amount,
            )
            raise FundsTransferFailed(f"transfer of {result.amount} refused")

    def _after_commit(self, params: ActionParams, result: StepResult, caller: str) -> None:
        effect = result.effect
        assert effect is not None
        log_event(
            logger, f"accrual.{params.action.value}",
            vault_id=params.vault_id, caller=caller, amount=result.amount,
            terminal=effect.terminal, now=params.now,
            index=effect.index_after, average_rate=effect.average_rate_after,
            active_count=effect.active_count_after,
        )
        for notice in result.notices:
            self._emit(notice.event, dict(notice.payload))
        self._emit(effect.event, {
            "vault_id": effect.vault_id,
            "amount": effect.amount,
            "terminal": effect.terminal,
            "timestamp": params.now,
        })

    def _emit(self, event: Any, payload: Dict[str, Any]) -> None:
        try:
            self._events.emit(event, payload)
        except Exception:
            # Notifications are fire-and-forget.
            logger.exception("event sink failed", extra={"event": "accrual.sink_error"})

    # -- Read-only accessors -------------------------------------------------

    @property
    def state(self) -> LedgerState:
        with self._lock:
            return self._state

    @property
    def global_state(self) -> GlobalState:
        with self._lock:
            return self._state.pool

    @property
    def active_count(self) -> int:
        with self._lock:
            return self._state.pool.active_count

    def get_vault(self, vault_id: str) -> Optional[VaultRecord]:
        with self._lock:
            return self._state.vaults.get(vault_id)

    def vaults(self) -> Dict[str, VaultRecord]:
        with self._lock:
            return dict(self._state.vaults)

    def pending_rewards(self, vault_id: str, now: Optional[int] = None) -> int:
        """What the vault's next claim would pay at ``now`` (default: the ledger clock)."""
        with self._lock:
            return preview_rewards(self._state, vault_id, self._now() if now is None else now)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return state_to_dict(self._state)

    def check_invariants(self) -> list[str]:
        with self._lock:
            return check_all(self._state)
