"""Guard functions for the accrual engine.

One pure function per action. Each inspects the PRE-state and returns
``None`` when the action may proceed, or the rejection code (see
``errors.py``) of the first failing precondition.

Checks that depend on the advanced index (``no_rewards_available``) are
evaluated against the previewed index, so no rejection can surface after the
update has started.
"""

from __future__ import annotations

import re

from .index import preview_index
from .math import is_stake_multiple, owed_from_index, owed_from_rate
from .types import ActionParams, EngineParams, LedgerState

_ZERO_ID_RE = re.compile(r"^(0x)?0+$")


def _is_int(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def is_valid_vault_id(vault_id: object) -> bool:
    """Non-empty, whitespace-free at the edges, and not an all-zero address."""
    if not isinstance(vault_id, str) or not vault_id:
        return False
    if vault_id.strip() != vault_id:
        return False
    return _ZERO_ID_RE.match(vault_id) is None


def guard_clock(state: LedgerState, params: ActionParams) -> str | None:
    """Reject a ``now`` behind the pool clock.

    ``now`` must be int seconds; the ledger shell raises ``TypeError`` for a
    clock that returns anything else, so a non-int only reaches here through
    a direct ``step()`` call and is refused with the same code.
    """
    if not _is_int(params.now) or params.now < state.pool.last_update_time:
        return "clock_regression"
    return None


def guard_register(state: LedgerState, params: ActionParams, config: EngineParams) -> str | None:
    if not params.auth_ok:
        return "unauthorized"
    if not is_valid_vault_id(params.vault_id):
        return "invalid_vault_identity"
    existing = state.vaults.get(params.vault_id)
    if existing is not None and existing.active:
        return "vault_already_active"
    if not _is_int(params.stake) or not is_stake_multiple(params.stake, config.stake_unit):
        return "invalid_stake_multiple"
    if not _is_int(params.bid_amount) or params.bid_amount <= 0:
        return "non_positive_bid"
    if not _is_int(params.period) or params.period <= 0:
        return "non_positive_period"
    return None


def guard_claim_rewards(state: LedgerState, params: ActionParams, config: EngineParams) -> str | None:
    if not is_valid_vault_id(params.vault_id):
        return "invalid_vault_identity"
    record = state.vaults.get(params.vault_id)
    if record is None or not record.active:
        return "vault_not_active"
    if params.now >= record.end_time:
        return "period_already_ended"
    index = preview_index(state.pool, params.now)
    if owed_from_index(record.stake, index, record.snapshot_index) <= 0:
        return "no_rewards_available"
    return None


def guard_claim_final_rewards(state: LedgerState, params: ActionParams, config: EngineParams) -> str | None:
    if not is_valid_vault_id(params.vault_id):
        return "invalid_vault_identity"
    record = state.vaults.get(params.vault_id)
    if record is None or not record.active:
        return "vault_not_active"
    if params.now < record.end_time:
        return "period_not_yet_ended"
    # advance() never changes the average rate, so the pre-state rate is final.
    time_until_end = record.end_time - record.last_update_time
    if owed_from_rate(record.stake, state.pool.average_rate, time_until_end) <= 0:
        return "no_rewards_available"
    return None
