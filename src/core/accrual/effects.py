"""Effect functions for the accrual engine.

Effects evaluate on the POST-state. ``notices_for()`` diffs pre/post pool state
to produce the secondary index/rate notifications, in the order they
happened inside the step (index first, then rate).
"""

from __future__ import annotations

from .types import ActionParams, Effect, Event, LedgerState, Notice


def _common_effects(state: LedgerState) -> dict[str, int]:
    pool = state.pool
    return dict(
        index_after=pool.index,
        average_rate_after=pool.average_rate,
        total_active_stake_after=pool.total_active_stake,
        active_count_after=pool.active_count,
    )


def effect_register(state: LedgerState, params: ActionParams, amount: int) -> Effect:
    return Effect(
        event=Event.VAULT_REGISTERED,
        vault_id=params.vault_id,
        amount=amount,
        **_common_effects(state),
    )


def effect_claim_rewards(state: LedgerState, params: ActionParams, amount: int) -> Effect:
    return Effect(
        event=Event.REWARDS_CLAIMED,
        vault_id=params.vault_id,
        amount=amount,
        terminal=not state.vaults[params.vault_id].active,
        **_common_effects(state),
    )


def effect_claim_final_rewards(state: LedgerState, params: ActionParams, amount: int) -> Effect:
    return Effect(
        event=Event.FINAL_REWARDS_CLAIMED,
        vault_id=params.vault_id,
        amount=amount,
        terminal=True,
        **_common_effects(state),
    )


def notices_for(pre: LedgerState, post: LedgerState, now: int) -> tuple[Notice, ...]:
    out: list[Notice] = []
    if post.pool.index != pre.pool.index:
        out.append(Notice(
            event=Event.INDEX_UPDATED,
            payload={"index": post.pool.index, "timestamp": now},
        ))
    if post.pool.average_rate != pre.pool.average_rate or post.pool.active_count != pre.pool.active_count:
        out.append(Notice(
            event=Event.AVERAGE_RATE_UPDATED,
            payload={"average_rate": post.pool.average_rate, "active_count": post.pool.active_count},
        ))
    return tuple(out)
