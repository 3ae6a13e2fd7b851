# tests/unit/events/test_unit_sinks.py — v1
"""Tests for events/sinks.py — observer fan-out and recording."""

from __future__ import annotations

import logging

from smartregen.events import names
from smartregen.events.sinks import (
    CallbackEventSink,
    LoggingEventSink,
    NullEventSink,
    RecordingEventSink,
)


class TestRecordingEventSink:
    def test_keeps_order(self):
        sink = RecordingEventSink()
        sink.emit(names.SKIPPED, {"category": "a"})
        sink.emit(names.CATEGORY_STARTED, {"category": "b"})
        assert sink.names() == [names.SKIPPED, names.CATEGORY_STARTED]
        assert sink.of(names.CATEGORY_STARTED)[0].payload == {"category": "b"}

    def test_payload_copied(self):
        sink = RecordingEventSink()
        payload = {"category": "a"}
        sink.emit(names.SKIPPED, payload)
        payload["category"] = "changed"
        assert sink.events[0].payload["category"] == "a"

    def test_clear(self):
        sink = RecordingEventSink()
        sink.emit(names.FORCE_ALL, {})
        sink.clear()
        assert sink.events == []


class TestCallbackEventSink:
    def test_subscribe_by_name(self):
        sink = CallbackEventSink()
        seen: list[tuple[str, dict]] = []
        sink.subscribe(names.FORCE_ALL, lambda n, p: seen.append((n, p)))
        sink.emit(names.FORCE_ALL, {"categories": ["a"]})
        sink.emit(names.SKIPPED, {"category": "a"})
        assert seen == [(names.FORCE_ALL, {"categories": ["a"]})]

    def test_wildcard(self):
        sink = CallbackEventSink()
        seen: list[str] = []
        sink.subscribe(names.ANY_EVENT, lambda n, p: seen.append(n))
        for event in names.ALL_EVENTS:
            sink.emit(event, {})
        assert seen == list(names.ALL_EVENTS)

    def test_unsubscribe(self):
        sink = CallbackEventSink()
        seen: list[str] = []

        def callback(name, payload):
            seen.append(name)

        sink.subscribe(names.SKIPPED, callback)
        sink.unsubscribe(names.SKIPPED, callback)
        sink.unsubscribe(names.SKIPPED, callback)
        sink.emit(names.SKIPPED, {})
        assert seen == []

    def test_failing_observer_isolated(self, caplog):
        sink = CallbackEventSink()
        seen: list[str] = []

        def boom(name, payload):
            raise RuntimeError("observer bug")

        sink.subscribe(names.SKIPPED, boom)
        sink.subscribe(names.SKIPPED, lambda n, p: seen.append(n))
        sink.emit(names.SKIPPED, {})
        assert seen == [names.SKIPPED]
        assert "Event observer failed" in caplog.text


class TestOtherSinks:
    def test_null(self):
        assert NullEventSink().emit(names.SKIPPED, {}) is None

    def test_logging(self, caplog):
        with caplog.at_level(logging.INFO, logger="smartregen"):
            LoggingEventSink().emit(names.ENABLED_CHANGED, {"enabled": False})
        record = caplog.records[-1]
        assert record.getMessage() == names.ENABLED_CHANGED
        assert record.data == {"enabled": False}
