"""Fixed-point arithmetic for the accrual ledger.

Every rate and index value is an integer scaled by ``SCALE`` (1e27).

Rounding rule: multiply before divide, then truncate toward zero. Python's
``//`` floors toward -inf, so signed quotients go through ``div_trunc``.
All callers in the ledger pass non-negative operands except the mean update
on removal, where truncation drift can make the numerator negative.
"""

from __future__ import annotations

SCALE: int = 10**27
ONE_DAY: int = 86_400

# Default staking unit: 32 whole tokens at 18 decimals.
STAKE_UNIT: int = 32 * 10**18


# -- Basic helpers -----------------------------------------------------------

def div_trunc(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero."""
    if denominator == 0:
        raise ZeroDivisionError("div_trunc by zero")
    q = abs(numerator) // abs(denominator)
    return q if (numerator >= 0) == (denominator > 0) else -q


def mul_div(a: int, b: int, denominator: int) -> int:
    """``a * b / denominator`` with the product formed first."""
    return div_trunc(a * b, denominator)


# -- Vault rate / entitlement ------------------------------------------------

def vault_rate(bid_amount: int, stake: int, period: int) -> int:
    """Per-stake-unit reward rate: ``bid * SCALE / (stake * period)``."""
    return div_trunc(bid_amount * SCALE, stake * period)


def index_increment(average_rate: int, elapsed: int) -> int:
    """Index growth over ``elapsed`` seconds at ``average_rate``."""
    return average_rate * elapsed


def owed_from_index(stake: int, index: int, snapshot_index: int) -> int:
    """Periodic entitlement: ``stake * (index - snapshot) / SCALE``."""
    return mul_div(stake, index - snapshot_index, SCALE)


def owed_from_rate(stake: int, average_rate: int, elapsed: int) -> int:
    """Final-slice entitlement: ``stake * (average_rate * elapsed) / SCALE``.

    Uses the current average rate for the whole slice rather than an index
    delta, so it diverges from ``owed_from_index`` when the active set changed
    during the slice.
    """
    return mul_div(stake, index_increment(average_rate, elapsed), SCALE)


# -- Running unweighted mean ---------------------------------------------------

def mean_after_add(average_rate: int, count: int, new_rate: int) -> int:
    if count == 0:
        return new_rate
    return div_trunc(average_rate * count + new_rate, count + 1)


def mean_after_remove(average_rate: int, count: int, removed_rate: int) -> int:
    """Mean after dropping ``removed_rate`` from a set of ``count`` rates.

    Clamped at zero: truncation drift from earlier updates can leave the
    numerator slightly negative.
    """
    if count <= 1:
        return 0
    return max(0, div_trunc(average_rate * count - removed_rate, count - 1))


def is_stake_multiple(stake: int, unit: int) -> bool:
    return stake > 0 and stake % unit == 0
