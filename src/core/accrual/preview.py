"""Read-only reward preview.

Mirrors what the next claim would pay at ``now`` without building a post-state:
the index-delta formula before ``end_time``, the rate-slice formula from
``end_time`` on. Inactive or unknown vaults preview as 0.
"""

from __future__ import annotations

from .index import preview_index
from .math import owed_from_index, owed_from_rate
from .types import LedgerState


def preview_rewards(state: LedgerState, vault_id: str, now: int) -> int:
    record = state.vaults.get(vault_id)
    if record is None or not record.active:
        return 0
    if now < record.end_time:
        index = preview_index(state.pool, now)
        return owed_from_index(record.stake, index, record.snapshot_index)
    return owed_from_rate(record.stake, state.pool.average_rate, record.end_time - record.last_update_time)
