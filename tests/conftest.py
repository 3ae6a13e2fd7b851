# tests/conftest.py — v2
"""Shared test fixtures for unit and integration tests.

Provides a mutable config provider, a recording event sink and an
in-memory store. No external services — sqlite and JSON stores use tmp_path.
"""

from __future__ import annotations

import logging

import pytest

from smartregen.cache.memory_store import MemoryFingerprintStore
from smartregen.core.models import CategoryConfig, GlobalStyleSettings
from smartregen.events.sinks import RecordingEventSink
from smartregen.providers.dict_config_provider import DictConfigProvider
from smartregen.regeneration.tracker import ChangeTracker


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_config() -> CategoryConfig:
    """AI-mode category config with provider options."""
    return CategoryConfig(
        num_traits=5,
        complexity=0.7,
        color_seed=42,
        generation_mode="ai",
        ai_options={"style": "pixel", "size": 512},
    )


@pytest.fixture
def provider_data() -> dict:
    """Raw provider payload for the background/body pair."""
    return {
        "categories": {
            "background": {"num_traits": 10, "complexity": 0.2,
                           "generation_mode": "procedural"},
            "body": {"num_traits": 5, "complexity": 0.5, "color_seed": 7,
                     "generation_mode": "ai"},
        },
        "global_style": {"master_prompt": "cute pixel creatures",
                         "active_preset": "retro"},
        "style_engine": {
            "master_style_prompt": "8-bit",
            "active_preset": "retro",
            "category_templates": {"body": "round body"},
            "negative_prompts": {"body": "blurry"},
        },
    }


@pytest.fixture
def provider(provider_data) -> DictConfigProvider:
    return DictConfigProvider(provider_data)


@pytest.fixture
def memory_store() -> MemoryFingerprintStore:
    return MemoryFingerprintStore()


@pytest.fixture
def recorder() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def tracker(provider, memory_store, recorder) -> ChangeTracker:
    """Uninitialized tracker over [background, body]."""
    return ChangeTracker(
        categories=["background", "body"],
        provider=provider,
        store=memory_store,
        event_sink=recorder,
    )


@pytest.fixture
def global_style() -> GlobalStyleSettings:
    return GlobalStyleSettings(
        master_prompt="cute pixel creatures",
        global_negative_prompt="text, watermark",
        active_preset="retro",
        color_palette_lock=True,
        locked_colors=["#ff0000", "#00ff00"],
        use_master_seed=True,
        master_seed=1234,
        use_ai_generation=True,
    )


@pytest.fixture(autouse=True)
def _reset_package_logging():
    """Drop handlers installed by setup_logging() (e.g. via the CLI)."""
    yield
    root = logging.getLogger("smartregen")
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()
