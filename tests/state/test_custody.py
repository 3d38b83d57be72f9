from __future__ import annotations

import pytest

from src.state import CUSTODY_HOLDER, CustodyTable


def test_empty_table() -> None:
    t = CustodyTable()
    assert t.get("alice") == 0
    assert t.custody_balance == 0
    assert t.total_supply() == 0
    assert t.get_all_balances() == {}


def test_pull_moves_into_custody() -> None:
    t = CustodyTable()
    t.credit("alice", 100)
    assert t.pull("alice", 40) is True
    assert t.get("alice") == 60
    assert t.custody_balance == 40
    assert t.get(CUSTODY_HOLDER) == 40
    assert t.total_supply() == 100


def test_push_moves_out_of_custody() -> None:
    t = CustodyTable()
    t.credit("alice", 100)
    t.pull("alice", 100)
    assert t.push("vault-1", 30) is True
    assert t.get("vault-1") == 30
    assert t.custody_balance == 70
    # Drained holders are dropped from the sparse table.
    assert "alice" not in t.get_all_balances()


def test_insufficient_funds_is_reported_not_raised() -> None:
    t = CustodyTable()
    t.credit("alice", 10)
    before = t.get_all_balances()
    assert t.pull("alice", 11) is False
    assert t.push("alice", 1) is False
    assert t.get_all_balances() == before


@pytest.mark.parametrize("amount", [0, -1, True, 1.5])
def test_rejects_non_positive_or_non_int(amount) -> None:
    t = CustodyTable()
    t.credit("alice", 10)
    assert t.pull("alice", amount) is False
    assert t.get("alice") == 10


def test_negative_balances_rejected() -> None:
    t = CustodyTable()
    with pytest.raises(ValueError):
        t.set("alice", -1)
    with pytest.raises(ValueError):
        t.credit("alice", -1)


def test_custom_custody_holder() -> None:
    t = CustodyTable(custody_holder="escrow")
    t.credit("alice", 5)
    assert t.pull("alice", 5)
    assert t.get("escrow") == 5
    assert t.custody_balance == 5
    assert "custody=5" in repr(t)
