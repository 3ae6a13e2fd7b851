# src/events/base_event_sink.py — v1
"""Abstract event sink (observer interface)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseEventSink(ABC):
    """Receives tracker notifications."""

    @abstractmethod
    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Deliver one notification."""
