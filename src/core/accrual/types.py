"""Data types for the accrual ledger.

All types are frozen dataclasses (immutable). Transitions build new values
with ``dataclasses.replace()``.

Units/conventions:
- ``*_rate`` and ``index`` values are fixed-point, scaled by ``SCALE`` (1e27).
- ``stake`` and ``bid_amount`` are integer token base units.
- times are integer seconds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Mapping

from .math import ONE_DAY, SCALE, STAKE_UNIT


@unique
class Action(Enum):
    REGISTER = "register"
    CLAIM_REWARDS = "claim_rewards"
    CLAIM_FINAL_REWARDS = "claim_final_rewards"


@unique
class Event(Enum):
    VAULT_REGISTERED = "VaultRegistered"
    REWARDS_CLAIMED = "RewardsClaimed"
    FINAL_REWARDS_CLAIMED = "FinalRewardsClaimed"
    INDEX_UPDATED = "IndexUpdated"
    AVERAGE_RATE_UPDATED = "AverageRateUpdated"


@dataclass(frozen=True)
class GlobalState:
    """Pool-wide accrual state."""

    average_rate: int = 0
    total_active_stake: int = 0
    index: int = SCALE
    last_update_time: int = 0
    active_count: int = 0


@dataclass(frozen=True)
class VaultRecord:
    """Per-vault accounting record. Deactivated, never deleted."""

    stake: int
    bid_amount: int
    period: int
    rate: int
    snapshot_index: int
    start_time: int
    end_time: int
    last_update_time: int
    active: bool = True


@dataclass(frozen=True)
class LedgerState:
    """Global state plus the vault map (treated as read-only)."""

    pool: GlobalState = field(default_factory=GlobalState)
    vaults: Mapping[str, VaultRecord] = field(default_factory=dict)


@dataclass(frozen=True)
class EngineParams:
    """Tunable constants of the engine."""

    stake_unit: int = STAKE_UNIT
    early_termination_window: int = ONE_DAY


@dataclass(frozen=True)
class ActionParams:
    """Parameters for an action. Unused fields default to 0/False."""

    action: Action
    vault_id: str = ""
    now: int = 0
    stake: int = 0          # register
    bid_amount: int = 0     # register
    period: int = 0         # register
    auth_ok: bool = False   # register


@dataclass(frozen=True)
class Notice:
    """Secondary notification produced while executing a step."""

    event: Event
    payload: Mapping[str, int | str | bool] = field(default_factory=dict)


@dataclass(frozen=True)
class Effect:
    """Post-state observables emitted after a successful step."""

    event: Event
    vault_id: str
    amount: int = 0
    terminal: bool = False
    index_after: int = 0
    average_rate_after: int = 0
    total_active_stake_after: int = 0
    active_count_after: int = 0


@dataclass(frozen=True)
class StepResult:
    """Result of a single engine step.

    ``amount`` is the funds movement the shell must perform before it may
    commit ``state``: pulled into custody on register, pushed to the vault on
    claims.
    """

    accepted: bool
    state: LedgerState | None = None
    effect: Effect | None = None
    amount: int = 0
    notices: tuple[Notice, ...] = ()
    rejection: str | None = None
