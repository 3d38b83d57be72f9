"""
Runtime configuration for the accrual ledger shell.

Sources, lowest to highest precedence:
1. `LedgerConfig` defaults
2. a YAML mapping (`load_config(path)`)
3. ACCRUAL_* environment variables (`apply_env_overrides`)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Tuple

import yaml

from ..core.accrual.math import ONE_DAY, STAKE_UNIT
from ..core.accrual.types import EngineParams


_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class LedgerConfig:
    """Runtime config for the ledger shell."""

    stake_unit: int = STAKE_UNIT
    early_termination_window: int = ONE_DAY
    admins: Tuple[str, ...] = ()
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for name, v in (
            ("stake_unit", self.stake_unit),
            ("early_termination_window", self.early_termination_window),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
        if self.stake_unit <= 0:
            raise ValueError(f"stake_unit must be positive: {self.stake_unit}")
        if self.early_termination_window < 0:
            raise ValueError(f"early_termination_window must be non-negative: {self.early_termination_window}")
        if not all(isinstance(a, str) and a for a in self.admins):
            raise TypeError("admins must be non-empty strings")
        if not isinstance(self.log_level, str):
            raise TypeError("log_level must be a str")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"unknown log_level: {self.log_level}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LedgerConfig":
        known = {"stake_unit", "early_termination_window", "admins", "log_level"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"unknown config keys: {sorted(unknown)}")
        kwargs: dict[str, Any] = dict(data)
        if "admins" in kwargs:
            admins = kwargs["admins"] or ()
            if isinstance(admins, str):
                admins = (admins,)
            kwargs["admins"] = tuple(admins)
        return cls(**kwargs)

    def engine_params(self) -> EngineParams:
        return EngineParams(
            stake_unit=self.stake_unit,
            early_termination_window=self.early_termination_window,
        )


def load_config(path: str | Path) -> LedgerConfig:
    """Load a YAML config file. An empty file yields the defaults."""
    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if raw is None:
        return LedgerConfig()
    if not isinstance(raw, Mapping):
        raise TypeError("config YAML must be a mapping")
    return LedgerConfig.from_mapping(raw)


def apply_env_overrides(config: LedgerConfig, env: Mapping[str, str] | None = None) -> LedgerConfig:
    env = os.environ if env is None else env
    updates: dict[str, Any] = {}
    if env.get("ACCRUAL_STAKE_UNIT"):
        updates["stake_unit"] = int(env["ACCRUAL_STAKE_UNIT"])
    if env.get("ACCRUAL_EARLY_TERMINATION_WINDOW"):
        updates["early_termination_window"] = int(env["ACCRUAL_EARLY_TERMINATION_WINDOW"])
    if env.get("ACCRUAL_LOG_LEVEL"):
        updates["log_level"] = env["ACCRUAL_LOG_LEVEL"].strip().upper()
    if env.get("ACCRUAL_ADMINS"):
        updates["admins"] = tuple(a.strip() for a in env["ACCRUAL_ADMINS"].split(",") if a.strip())
    return replace(config, **updates) if updates else config
