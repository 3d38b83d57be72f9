"""
Stateful ledger shell: locking, funds transfer, config, logging
"""

from .accrual_ledger import AccrualLedger
from .collaborators import (
    AdminGate,
    EventSink,
    FundsTransfer,
    LoggingEventSink,
    NullEventSink,
    RecordingEventSink,
    StaticAdminGate,
)
from .config import LedgerConfig, apply_env_overrides, load_config
from .structured_logging import configure_logging, log_event

__all__ = [
    "AccrualLedger",
    "AdminGate",
    "EventSink",
    "FundsTransfer",
    "LoggingEventSink",
    "NullEventSink",
    "RecordingEventSink",
    "StaticAdminGate",
    "LedgerConfig",
    "apply_env_overrides",
    "load_config",
    "configure_logging",
    "log_event",
]
