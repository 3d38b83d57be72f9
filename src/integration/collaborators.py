"""
External collaborators consumed by the accrual ledger.

The ledger only depends on these protocols:
- FundsTransfer: moves bid funds into custody and rewards out of it.
- AdminGate: authorizes vault registration.
- EventSink: fire-and-forget notifications; never affects control flow.

Concrete implementations here are the in-process defaults used by tools and
tests. `src/state/custody.py::CustodyTable` satisfies FundsTransfer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Protocol, Tuple, runtime_checkable

from ..core.accrual.types import Event
from .structured_logging import log_event


@runtime_checkable
class FundsTransfer(Protocol):
    def pull(self, source: str, amount: int) -> bool: ...

    def push(self, dest: str, amount: int) -> bool: ...


@runtime_checkable
class AdminGate(Protocol):
    def is_admin(self, caller: str) -> bool: ...


@runtime_checkable
class EventSink(Protocol):
    def emit(self, event: Event, payload: Mapping[str, Any]) -> None: ...


class StaticAdminGate:
    """Allow-list of administrator identities."""

    def __init__(self, admins: Iterable[str] = ()):
        self._admins = frozenset(admins)

    def is_admin(self, caller: str) -> bool:
        return caller in self._admins

    def __repr__(self) -> str:
        return f"StaticAdminGate({sorted(self._admins)!r})"


@dataclass
class RecordingEventSink:
    """Keeps every emitted (event, payload) pair in order."""

    records: List[Tuple[Event, dict]] = field(default_factory=list)

    def emit(self, event: Event, payload: Mapping[str, Any]) -> None:
        self.records.append((event, dict(payload)))

    def events(self) -> List[Event]:
        return [e for e, _ in self.records]


class LoggingEventSink:
    """Forwards ledger notifications to a logger as structured events."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(__name__)

    def emit(self, event: Event, payload: Mapping[str, Any]) -> None:
        log_event(self._logger, f"accrual.notice.{event.value}", **{f"p_{k}": v for k, v in payload.items()})


class NullEventSink:
    def emit(self, event: Event, payload: Mapping[str, Any]) -> None:
        return None
