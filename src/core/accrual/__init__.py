"""`accrual`: pure-Python core of the index-based vault reward ledger.

- deterministic, integer-only transitions (fixed point at ``SCALE`` = 1e27),
- immutable state (frozen dataclasses),
- fail-closed guards and invariant checks.

Public API:
- `initial_state(start_time) -> LedgerState`
- `step(state, params, config) -> StepResult`
- `step_or_raise(state, params, config) -> StepResult` (raises on rejection)
- `preview_rewards(state, vault_id, now) -> int`
"""

from .engine import step, step_or_raise
from .errors import (
    AccrualError,
    AccrualInvariantError,
    ClockRegression,
    FundsTransferFailed,
    InvalidStakeMultiple,
    InvalidVaultIdentity,
    NoRewardsAvailable,
    NonPositiveBid,
    NonPositivePeriod,
    PeriodAlreadyEnded,
    PeriodNotYetEnded,
    ReentrantCall,
    Unauthorized,
    VaultAlreadyActive,
    VaultNotActive,
    error_for_code,
)
from .math import ONE_DAY, SCALE, STAKE_UNIT
from .preview import preview_rewards
from .state import initial_state, state_from_dict, state_to_dict
from .types import (
    Action,
    ActionParams,
    Effect,
    EngineParams,
    Event,
    GlobalState,
    LedgerState,
    Notice,
    StepResult,
    VaultRecord,
)

__all__ = [
    "step",
    "step_or_raise",
    "initial_state",
    "state_from_dict",
    "state_to_dict",
    "preview_rewards",
    "SCALE",
    "ONE_DAY",
    "STAKE_UNIT",
    "Action",
    "ActionParams",
    "Effect",
    "EngineParams",
    "Event",
    "GlobalState",
    "LedgerState",
    "Notice",
    "StepResult",
    "VaultRecord",
    "AccrualError",
    "AccrualInvariantError",
    "ClockRegression",
    "FundsTransferFailed",
    "InvalidStakeMultiple",
    "InvalidVaultIdentity",
    "NoRewardsAvailable",
    "NonPositiveBid",
    "NonPositivePeriod",
    "PeriodAlreadyEnded",
    "PeriodNotYetEnded",
    "ReentrantCall",
    "Unauthorized",
    "VaultAlreadyActive",
    "VaultNotActive",
    "error_for_code",
]
