"""
Core accrual algorithms
"""

from .accrual import (
    SCALE,
    LedgerState,
    StepResult,
    VaultRecord,
    initial_state,
    preview_rewards,
    step,
    step_or_raise,
)

__all__ = [
    "SCALE",
    "LedgerState",
    "StepResult",
    "VaultRecord",
    "initial_state",
    "preview_rewards",
    "step",
    "step_or_raise",
]
