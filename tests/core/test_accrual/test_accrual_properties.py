"""Property tests for the accrual engine.

Uses Hypothesis to drive random register/claim sequences across several vaults
and checks the quiescent invariants after every accepted step.
"""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from src.core.accrual import ONE_DAY, SCALE, Action, ActionParams, initial_state, step
from src.core.accrual.invariants import check_all

UNIT = 10**18
STAKE_32 = 32 * UNIT
VAULT_IDS = ("vault-0", "vault-1", "vault-2", "vault-3")


_op = st.tuples(
    st.sampled_from([Action.REGISTER, Action.CLAIM_REWARDS, Action.CLAIM_FINAL_REWARDS]),
    st.sampled_from(VAULT_IDS),
    st.integers(min_value=0, max_value=20 * ONE_DAY),   # time step
    st.integers(min_value=1, max_value=4),               # stake in 32-unit lots
    st.integers(min_value=1, max_value=10 * UNIT),       # bid
    st.integers(min_value=ONE_DAY, max_value=200 * ONE_DAY),  # period
)


@settings(max_examples=150, deadline=None)
@given(st.lists(_op, min_size=1, max_size=40))
def test_random_sequences_keep_invariants(ops):
    state = initial_state()
    now = 0
    last_index = state.pool.index
    for action, vid, dt, lots, bid, period in ops:
        now += dt
        params = ActionParams(
            action=action,
            vault_id=vid,
            now=now,
            stake=lots * STAKE_32,
            bid_amount=bid,
            period=period,
            auth_ok=True,
        )
        r = step(state, params)
        if not r.accepted:
            assert r.rejection is not None
            assert not r.rejection.startswith("invariant:"), r.rejection
            continue
        state = r.state
        assert check_all(state) == []
        assert state.pool.index >= last_index
        last_index = state.pool.index

        active = [v for v in state.vaults.values() if v.active]
        assert state.pool.active_count == len(active)
        assert state.pool.total_active_stake == sum(v.stake for v in active)
        if not active:
            assert state.pool.average_rate == 0


@settings(max_examples=100, deadline=None)
@given(
    lots=st.integers(min_value=1, max_value=10),
    bid=st.integers(min_value=10**15, max_value=100 * UNIT),
    period_days=st.integers(min_value=3, max_value=365),
    cuts=st.lists(st.floats(min_value=0.0, max_value=1.0, allow_nan=False), max_size=12),
)
def test_single_vault_payout_close_to_bid(lots, bid, period_days, cuts):
    period = period_days * ONE_DAY
    stake = lots * STAKE_32
    state = step(initial_state(), ActionParams(
        action=Action.REGISTER, vault_id="solo", now=0,
        stake=stake, bid_amount=bid, period=period, auth_ok=True,
    )).state
    assert state is not None

    # Periodic claims strictly before the early-termination window.
    claim_times = sorted({1 + int(c * (period - ONE_DAY - 2)) for c in cuts})
    paid = 0
    claims = 0
    for t in claim_times:
        r = step(state, ActionParams(action=Action.CLAIM_REWARDS, vault_id="solo", now=t))
        if r.accepted:
            state = r.state
            paid += r.amount
            claims += 1

    r = step(state, ActionParams(action=Action.CLAIM_FINAL_REWARDS, vault_id="solo", now=period))
    assert r.accepted, r.rejection
    paid += r.amount
    claims += 1

    assert paid <= bid
    # Truncation: < 1 unit per claim plus the rate's own truncation.
    assert bid - paid <= claims + (stake * period) // SCALE + 1
    assert r.state.pool.active_count == 0
