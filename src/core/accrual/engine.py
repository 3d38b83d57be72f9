"""Dispatch-table engine for the accrual ledger.

``step(state, params)`` is the single entry point. It:

1. Rejects clock regressions.
2. Dispatches to the correct guard / update / effect functions.
3. Checks all invariants on the post-state (plus index monotonicity).
4. Returns a ``StepResult`` (accepted or rejected with reason).

The step is pure: nothing is committed anywhere. The caller owns the funds
movement named by ``StepResult.amount`` and decides whether to adopt
``StepResult.state``.
"""

from __future__ import annotations

from typing import Callable, Optional

from .effects import (
    effect_claim_final_rewards,
    effect_claim_rewards,
    effect_register,
    notices_for,
)
from .errors import error_for_code
from .guards import (
    guard_claim_final_rewards,
    guard_claim_rewards,
    guard_clock,
    guard_register,
)
from .invariants import check_transition
from .types import Action, ActionParams, Effect, EngineParams, LedgerState, StepResult
from .updates import apply_claim_final_rewards, apply_claim_rewards, apply_register

GuardFn = Callable[[LedgerState, ActionParams, EngineParams], Optional[str]]
UpdateFn = Callable[[LedgerState, ActionParams, EngineParams], tuple[LedgerState, int]]
EffectFn = Callable[[LedgerState, ActionParams, int], Effect]

_DISPATCH: dict[Action, tuple[GuardFn, UpdateFn, EffectFn]] = {
    Action.REGISTER: (
        guard_register, apply_register, effect_register,
    ),
    Action.CLAIM_REWARDS: (
        guard_claim_rewards, apply_claim_rewards, effect_claim_rewards,
    ),
    Action.CLAIM_FINAL_REWARDS: (
        guard_claim_final_rewards, apply_claim_final_rewards, effect_claim_final_rewards,
    ),
}

DEFAULT_PARAMS = EngineParams()


def step(state: LedgerState, params: ActionParams, config: EngineParams = DEFAULT_PARAMS) -> StepResult:
    """Execute one action against the given state.

    Returns ``StepResult`` with ``accepted=True`` on success,
    or ``accepted=False`` with a ``rejection`` code.
    """
    entry = _DISPATCH.get(params.action)
    if entry is None:
        return StepResult(accepted=False, rejection=f"unknown_action:{params.action}")

    clock_err = guard_clock(state, params)
    if clock_err is not None:
        return StepResult(accepted=False, rejection=clock_err)

    guard_fn, update_fn, effect_fn = entry

    rejection = guard_fn(state, params, config)
    if rejection is not None:
        return StepResult(accepted=False, rejection=rejection)

    new_state, amount = update_fn(state, params, config)

    violations = check_transition(state, new_state)
    if violations:
        return StepResult(
            accepted=False,
            rejection=f"invariant:{','.join(violations)}",
        )

    effect = effect_fn(new_state, params, amount)
    return StepResult(
        accepted=True,
        state=new_state,
        effect=effect,
        amount=amount,
        notices=notices_for(state, new_state, params.now),
    )


def step_or_raise(state: LedgerState, params: ActionParams, config: EngineParams = DEFAULT_PARAMS) -> StepResult:
    """Like ``step()`` but raises the matching ``AccrualError`` on rejection."""
    result = step(state, params, config)
    if result.accepted:
        return result
    raise error_for_code(result.rejection or "")
