"""Invariant checkers for the accrual ledger.

Each function returns True when the invariant holds; ``check_all()`` returns
the list of violated invariant IDs (empty = all pass).

``average_rate`` is maintained incrementally with truncating division, so it
is only pinned exactly in the empty case. Snapshot bounds apply to active
vaults only: a final claim advances a closed vault's snapshot by a rate-based
slice that may overshoot the index when the active set churned.
"""

from __future__ import annotations

from typing import Callable

from .math import SCALE
from .types import LedgerState


def inv_total_stake_matches(s: LedgerState) -> bool:
    return s.pool.total_active_stake == sum(v.stake for v in s.vaults.values() if v.active)


def inv_active_count_matches(s: LedgerState) -> bool:
    return s.pool.active_count == sum(1 for v in s.vaults.values() if v.active)


def inv_rate_zero_when_empty(s: LedgerState) -> bool:
    if s.pool.active_count != 0:
        return True
    return s.pool.average_rate == 0


def inv_rate_nonneg(s: LedgerState) -> bool:
    return s.pool.average_rate >= 0


def inv_index_floor(s: LedgerState) -> bool:
    return s.pool.index >= SCALE


def inv_snapshot_not_ahead(s: LedgerState) -> bool:
    return all(v.snapshot_index <= s.pool.index for v in s.vaults.values() if v.active)


def inv_window_consistent(s: LedgerState) -> bool:
    return all(v.end_time == v.start_time + v.period for v in s.vaults.values())


def inv_vault_clock_bounded(s: LedgerState) -> bool:
    return all(v.start_time <= v.last_update_time <= v.end_time for v in s.vaults.values())


def inv_positive_terms(s: LedgerState) -> bool:
    return all(v.stake > 0 and v.bid_amount > 0 and v.period > 0 for v in s.vaults.values())


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[LedgerState], bool]] = {
    "inv_total_stake_matches": inv_total_stake_matches,
    "inv_active_count_matches": inv_active_count_matches,
    "inv_rate_zero_when_empty": inv_rate_zero_when_empty,
    "inv_rate_nonneg": inv_rate_nonneg,
    "inv_index_floor": inv_index_floor,
    "inv_snapshot_not_ahead": inv_snapshot_not_ahead,
    "inv_window_consistent": inv_window_consistent,
    "inv_vault_clock_bounded": inv_vault_clock_bounded,
    "inv_positive_terms": inv_positive_terms,
}


def check_all(state: LedgerState) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(state)
    ]


def check_transition(pre: LedgerState, post: LedgerState) -> list[str]:
    """Cross-state checks: the index never moves backwards."""
    violations = check_all(post)
    if post.pool.index < pre.pool.index:
        violations.append("inv_index_monotone")
    return violations
