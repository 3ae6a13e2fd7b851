# src/events/sinks.py — v1
"""Concrete event sinks: null, logging, recording and callback fan-out."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from smartregen.events.base_event_sink import BaseEventSink
from smartregen.events.names import ANY_EVENT

logger = logging.getLogger(__name__)

EventCallback = Callable[[str, dict[str, Any]], None]


class NullEventSink(BaseEventSink):
    """Discards every notification."""

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        return None


class LoggingEventSink(BaseEventSink):
    """Writes notifications to the log with the payload as structured data."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        logger.log(self._level, "%s", event_name, extra={"data": payload})


@dataclass
class RecordedEvent:
    """A notification captured by RecordingEventSink."""

    name: str
    payload: dict[str, Any]
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class RecordingEventSink(BaseEventSink):
    """Keeps every notification in order."""

    def __init__(self) -> None:
        self.events: list[RecordedEvent] = []

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        self.events.append(RecordedEvent(name=event_name, payload=dict(payload)))

    def names(self) -> list[str]:
        return [e.name for e in self.events]

    def of(self, event_name: str) -> list[RecordedEvent]:
        return [e for e in self.events if e.name == event_name]

    def clear(self) -> None:
        self.events.clear()


class CallbackEventSink(BaseEventSink):
    """Fans notifications out to registered observers.

    Observers subscribe to one event name or to ANY_EVENT. An observer that
    raises is logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventCallback]] = defaultdict(list)

    def subscribe(self, event_name: str, callback: EventCallback) -> None:
        self._subscribers[event_name].append(callback)

    def unsubscribe(self, event_name: str, callback: EventCallback) -> None:
        callbacks = self._subscribers.get(event_name, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        targets = [*self._subscribers.get(event_name, []),
                   *self._subscribers.get(ANY_EVENT, [])]
        for callback in targets:
            try:
                callback(event_name, payload)
            except Exception:
                logger.exception("Event observer failed for %s", event_name)
