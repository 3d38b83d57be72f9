"""Global index accumulator.

``advance()`` must run first in every mutating step so that accrual up to
``now`` is priced at the average rate in force over ``[last_update_time, now)``.
"""

from __future__ import annotations

from dataclasses import replace

from .math import index_increment
from .types import GlobalState


def advance(pool: GlobalState, now: int) -> GlobalState:
    """Bring the index forward to ``now``.

    With no active stake the index stays put but the clock still moves, so a
    later registration does not inherit accrual for the idle gap.
    """
    if now < pool.last_update_time:
        raise ValueError(f"clock regression: now={now} < last_update_time={pool.last_update_time}")
    if now == pool.last_update_time:
        return pool
    if pool.total_active_stake == 0:
        return replace(pool, last_update_time=now)
    elapsed = now - pool.last_update_time
    return replace(
        pool,
        index=pool.index + index_increment(pool.average_rate, elapsed),
        last_update_time=now,
    )


def preview_index(pool: GlobalState, now: int) -> int:
    """Index value ``advance()`` would produce at ``now``, without a new state."""
    if now <= pool.last_update_time or pool.total_active_stake == 0:
        return pool.index
    return pool.index + index_increment(pool.average_rate, now - pool.last_update_time)
