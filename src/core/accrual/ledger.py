"""Vault ledger: per-vault records and the aggregate active stake.

Pure storage helpers over ``LedgerState``. The vault map is never mutated in
place; every write returns a new ``LedgerState`` holding a fresh dict.
"""

from __future__ import annotations

from dataclasses import replace

from .types import GlobalState, LedgerState, VaultRecord


def get_vault(state: LedgerState, vault_id: str) -> VaultRecord | None:
    return state.vaults.get(vault_id)


def is_active(state: LedgerState, vault_id: str) -> bool:
    record = state.vaults.get(vault_id)
    return record is not None and record.active


def insert_vault(state: LedgerState, vault_id: str, record: VaultRecord) -> LedgerState:
    """Create (or re-create over an inactive record) a vault entry."""
    existing = state.vaults.get(vault_id)
    if existing is not None and existing.active:
        raise ValueError(f"vault {vault_id!r} is already active")
    vaults = dict(state.vaults)
    vaults[vault_id] = record
    return replace(state, vaults=vaults)


def update_vault(state: LedgerState, vault_id: str, record: VaultRecord) -> LedgerState:
    if vault_id not in state.vaults:
        raise KeyError(vault_id)
    vaults = dict(state.vaults)
    vaults[vault_id] = record
    return replace(state, vaults=vaults)


def add_active_stake(pool: GlobalState, stake: int) -> GlobalState:
    return replace(pool, total_active_stake=pool.total_active_stake + stake)


def remove_active_stake(pool: GlobalState, stake: int) -> GlobalState:
    remaining = pool.total_active_stake - stake
    if remaining < 0:
        raise ValueError(f"total_active_stake underflow: {pool.total_active_stake} - {stake}")
    return replace(pool, total_active_stake=remaining)


def active_vaults(state: LedgerState) -> dict[str, VaultRecord]:
    return {vid: rec for vid, rec in state.vaults.items() if rec.active}


def sum_active_stake(state: LedgerState) -> int:
    return sum(rec.stake for rec in state.vaults.values() if rec.active)
