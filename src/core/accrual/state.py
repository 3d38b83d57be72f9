"""State construction and plain-dict views for the accrual ledger.

``initial_state()`` returns an empty ledger whose clock starts at ``start_time``.

Round-trip property (tested): ``state_from_dict(state_to_dict(s)) == s``.
"""

from __future__ import annotations

from typing import Any, Mapping

from .types import GlobalState, LedgerState, VaultRecord

POOL_VAR_NAMES: tuple[str, ...] = tuple(GlobalState.__dataclass_fields__)
VAULT_VAR_NAMES: tuple[str, ...] = tuple(VaultRecord.__dataclass_fields__)


def initial_state(start_time: int = 0) -> LedgerState:
    return LedgerState(pool=GlobalState(last_update_time=start_time), vaults={})


def pool_to_dict(pool: GlobalState) -> dict[str, int]:
    return {name: getattr(pool, name) for name in POOL_VAR_NAMES}


def vault_to_dict(record: VaultRecord) -> dict[str, bool | int]:
    return {name: getattr(record, name) for name in VAULT_VAR_NAMES}


def state_to_dict(state: LedgerState) -> dict[str, Any]:
    """Serialize to ``{"pool": {...}, "vaults": {vault_id: {...}}}`` (vaults sorted by id)."""
    return {
        "pool": pool_to_dict(state.pool),
        "vaults": {vid: vault_to_dict(state.vaults[vid]) for vid in sorted(state.vaults)},
    }


def _coerce(name: str, val: Any) -> bool | int:
    if isinstance(val, bool):
        return val
    if isinstance(val, int):
        return int(val)
    raise TypeError(f"state var {name!r} must be bool|int, got {type(val).__name__}")


def state_from_dict(d: Mapping[str, Any]) -> LedgerState:
    """Deserialize a dict produced by ``state_to_dict``. Raises KeyError on missing fields."""
    pool_d = d["pool"]
    pool = GlobalState(**{name: _coerce(name, pool_d[name]) for name in POOL_VAR_NAMES})
    vaults: dict[str, VaultRecord] = {}
    for vid, rec in d["vaults"].items():
        if not isinstance(vid, str):
            raise TypeError(f"vault id must be str, got {type(vid).__name__}")
        vaults[vid] = VaultRecord(**{name: _coerce(name, rec[name]) for name in VAULT_VAR_NAMES})
    return LedgerState(pool=pool, vaults=vaults)
