# src/events/names.py — v1
"""Notification names emitted by the change tracker."""

from __future__ import annotations

CATEGORY_STARTED = "regeneration:categoryStarted"
SKIPPED = "regeneration:skipped"
ENABLED_CHANGED = "regeneration:enabledChanged"
FORCE_ALL = "regeneration:forceAll"
FORCE_CATEGORY = "regeneration:forceCategory"

ALL_EVENTS: tuple[str, ...] = (
    CATEGORY_STARTED,
    SKIPPED,
    ENABLED_CHANGED,
    FORCE_ALL,
    FORCE_CATEGORY,
)

# Wildcard subscription key for CallbackEventSink.
ANY_EVENT = "*"
