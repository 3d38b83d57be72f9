"""Active-set rate registry: running unweighted mean of active vault rates.

Every vault weighs the same in the mean regardless of its stake. Both updates
are O(1) and derive the new mean from the pre-update count; callers apply them
only after the index has been advanced for the current step.
"""

from __future__ import annotations

from dataclasses import replace

from .math import mean_after_add, mean_after_remove
from .types import GlobalState


def on_add(pool: GlobalState, new_rate: int) -> GlobalState:
    return replace(
        pool,
        average_rate=mean_after_add(pool.average_rate, pool.active_count, new_rate),
        active_count=pool.active_count + 1,
    )


def on_remove(pool: GlobalState, vault_rate: int) -> GlobalState:
    if pool.active_count <= 0:
        raise ValueError("on_remove with no active vaults")
    return replace(
        pool,
        average_rate=mean_after_remove(pool.average_rate, pool.active_count, vault_rate),
        active_count=pool.active_count - 1,
    )
