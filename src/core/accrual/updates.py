"""State transition functions for the accrual engine.

One pure function per action. Each returns ``(post_state, amount)`` where
``amount`` is the funds movement the shell performs before committing.

Order inside every transition is fixed: advance the index, then adjust the
average rate, then touch stake totals and the vault record. Guards have
already run, so these functions do not re-validate.
"""

from __future__ import annotations

from dataclasses import replace

from .index import advance
from .ledger import add_active_stake, insert_vault, remove_active_stake, update_vault
from .math import index_increment, owed_from_index, owed_from_rate, vault_rate
from .rates import on_add, on_remove
from .types import ActionParams, EngineParams, LedgerState, VaultRecord


def apply_register(state: LedgerState, params: ActionParams, config: EngineParams) -> tuple[LedgerState, int]:
    now = params.now
    pool = advance(state.pool, now)
    rate = vault_rate(params.bid_amount, params.stake, params.period)
    pool = on_add(pool, rate)
    pool = add_active_stake(pool, params.stake)

    record = VaultRecord(
        stake=params.stake,
        bid_amount=params.bid_amount,
        period=params.period,
        rate=rate,
        snapshot_index=pool.index,
        start_time=now,
        end_time=now + params.period,
        last_update_time=now,
        active=True,
    )
    post = insert_vault(replace(state, pool=pool), params.vault_id, record)
    return post, params.bid_amount


def apply_claim_rewards(state: LedgerState, params: ActionParams, config: EngineParams) -> tuple[LedgerState, int]:
    now = params.now
    record = state.vaults[params.vault_id]
    pool = advance(state.pool, now)
    owed = owed_from_index(record.stake, pool.index, record.snapshot_index)

    record = replace(record, snapshot_index=pool.index, last_update_time=now)
    if now + config.early_termination_window >= record.end_time:
        # Within the last window: this claim closes the vault.
        pool = remove_active_stake(pool, record.stake)
        pool = on_remove(pool, record.rate)
        record = replace(record, active=False)

    post = update_vault(replace(state, pool=pool), params.vault_id, record)
    return post, owed


def apply_claim_final_rewards(state: LedgerState, params: ActionParams, config: EngineParams) -> tuple[LedgerState, int]:
    record = state.vaults[params.vault_id]
    pool = advance(state.pool, params.now)

    # Final slice priced at the current average rate, not an index delta.
    time_until_end = record.end_time - record.last_update_time
    final_owed = owed_from_rate(record.stake, pool.average_rate, time_until_end)

    record = replace(
        record,
        active=False,
        last_update_time=record.end_time,
        snapshot_index=record.snapshot_index + index_increment(pool.average_rate, time_until_end),
    )
    pool = remove_active_stake(pool, record.stake)
    pool = on_remove(pool, record.rate)

    post = update_vault(replace(state, pool=pool), params.vault_id, record)
    return post, final_owed
