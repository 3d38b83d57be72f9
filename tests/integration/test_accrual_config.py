"""Tests for src/integration/config.py and structured_logging.py."""

from __future__ import annotations

import json
import logging

import pytest

from src.core.accrual import ONE_DAY, STAKE_UNIT, EngineParams, Event
from src.integration.collaborators import LoggingEventSink
from src.integration.config import LedgerConfig, apply_env_overrides, load_config
from src.integration.structured_logging import JsonLineFormatter, log_event


# ---------------------------------------------------------------------------
# LedgerConfig
# ---------------------------------------------------------------------------

class TestLedgerConfig:
    def test_defaults(self):
        cfg = LedgerConfig()
        assert cfg.stake_unit == STAKE_UNIT
        assert cfg.early_termination_window == ONE_DAY
        assert cfg.admins == ()
        assert cfg.log_level == "INFO"
        assert cfg.engine_params() == EngineParams()

    def test_from_mapping(self):
        cfg = LedgerConfig.from_mapping({"stake_unit": 10, "admins": ["a", "b"]})
        assert cfg.stake_unit == 10
        assert cfg.admins == ("a", "b")
        assert cfg.engine_params().stake_unit == 10

    def test_single_admin_string(self):
        assert LedgerConfig.from_mapping({"admins": "ops"}).admins == ("ops",)

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="unknown config keys"):
            LedgerConfig.from_mapping({"stake_unti": 1})

    @pytest.mark.parametrize(
        "kwargs, exc",
        [
            ({"stake_unit": 0}, ValueError),
            ({"stake_unit": True}, TypeError),
            ({"stake_unit": "32"}, TypeError),
            ({"early_termination_window": -1}, ValueError),
            ({"admins": ("",)}, TypeError),
            ({"log_level": "LOUD"}, ValueError),
            ({"log_level": 10}, TypeError),
        ],
    )
    def test_validation(self, kwargs, exc):
        with pytest.raises(exc):
            LedgerConfig(**kwargs)


class TestLoadConfig:
    def test_yaml_file(self, tmp_path):
        p = tmp_path / "ledger.yaml"
        p.write_text(
            "stake_unit: 1000\nearly_termination_window: 3600\nadmins: [ops]\nlog_level: debug\n",
            encoding="utf-8",
        )
        cfg = load_config(p)
        assert cfg == LedgerConfig(stake_unit=1000, early_termination_window=3600, admins=("ops",), log_level="debug")

    def test_empty_file(self, tmp_path):
        p = tmp_path / "empty.yaml"
        p.write_text("", encoding="utf-8")
        assert load_config(p) == LedgerConfig()

    def test_non_mapping(self, tmp_path):
        p = tmp_path / "list.yaml"
        p.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(TypeError):
            load_config(p)


class TestEnvOverrides:
    def test_no_env_is_identity(self):
        cfg = LedgerConfig()
        assert apply_env_overrides(cfg, {}) is cfg

    def test_overrides(self):
        cfg = apply_env_overrides(
            LedgerConfig(admins=("a",)),
            {
                "ACCRUAL_STAKE_UNIT": "64",
                "ACCRUAL_EARLY_TERMINATION_WINDOW": "0",
                "ACCRUAL_LOG_LEVEL": " warning ",
                "ACCRUAL_ADMINS": "ops, treasury,,",
            },
        )
        assert cfg.stake_unit == 64
        assert cfg.early_termination_window == 0
        assert cfg.log_level == "WARNING"
        assert cfg.admins == ("ops", "treasury")

    def test_os_environ(self, monkeypatch):
        monkeypatch.setenv("ACCRUAL_STAKE_UNIT", "7")
        assert apply_env_overrides(LedgerConfig()).stake_unit == 7

    def test_bad_value_rejected(self):
        with pytest.raises(ValueError):
            apply_env_overrides(LedgerConfig(), {"ACCRUAL_STAKE_UNIT": "-5"})


# ---------------------------------------------------------------------------
# Structured logging
# ---------------------------------------------------------------------------

class TestStructuredLogging:
    def test_formatter_includes_extra_fields(self):
        record = logging.makeLogRecord({
            "name": "src.integration.accrual_ledger",
            "levelno": logging.INFO,
            "levelname": "INFO",
            "msg": "accrual.register",
            "event": "accrual.register",
            "vault_id": "v1",
            "amount": 10**18,
        })
        line = JsonLineFormatter().format(record)
        assert "\n" not in line
        payload = json.loads(line)
        assert payload["event"] == "accrual.register"
        assert payload["vault_id"] == "v1"
        assert payload["amount"] == 10**18
        assert payload["level"] == "INFO"
        assert payload["logger"] == "src.integration.accrual_ledger"

    def test_log_event_sets_extra(self, caplog):
        logger = logging.getLogger("src.test_config")
        with caplog.at_level(logging.DEBUG, logger="src.test_config"):
            log_event(logger, "unit.test", logging.DEBUG, foo=1)
        (rec,) = caplog.records
        assert rec.event == "unit.test"
        assert rec.foo == 1
        assert not hasattr(rec, "event_ts_ms")

    def test_logging_event_sink(self, caplog):
        logger = logging.getLogger("src.test_sink")
        sink = LoggingEventSink(logger)
        with caplog.at_level(logging.INFO, logger="src.test_sink"):
            sink.emit(Event.REWARDS_CLAIMED, {"vault_id": "v1", "amount": 3})
        (rec,) = caplog.records
        assert rec.event == f"accrual.notice.{Event.REWARDS_CLAIMED.value}"
        assert rec.p_vault_id == "v1"
        assert rec.p_amount == 3
