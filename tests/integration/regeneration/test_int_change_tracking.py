# tests/integration/regeneration/test_int_change_tracking.py — v1
"""Integration tests: tracker + durable stores across process restarts.

No external services required.
Coverage targets: regeneration/tracker.py, cache/sqlite_store.py,
cache/json_store.py, cache/store_factory.py, api/facade.py
"""

from __future__ import annotations

from pathlib import Path

import pytest

from smartregen.api.facade import open_tracker
from smartregen.cache.json_store import JsonFingerprintStore
from smartregen.cache.sqlite_store import SqliteFingerprintStore
from smartregen.config.settings import Settings
from smartregen.events import names
from smartregen.events.sinks import CallbackEventSink, RecordingEventSink
from smartregen.providers.dict_config_provider import DictConfigProvider
from smartregen.regeneration.tracker import ChangeTracker


class _CountingSqliteStore(SqliteFingerprintStore):
    def __init__(self, db_path: Path) -> None:
        super().__init__(db_path)
        self.upserts = 0

    async def upsert(self, category, fingerprint, timestamp):
        self.upserts += 1
        await super().upsert(category, fingerprint, timestamp)


def _settings(tmp_path: Path, backend: str) -> Settings:
    return Settings(
        _env_file=None,
        categories="background,body",
        store_backend=backend,
        store_root=tmp_path,
    )


class TestExampleScenario:

    @pytest.mark.asyncio
    async def test_background_body_lifecycle(self, tmp_path: Path, provider):
        store = _CountingSqliteStore(tmp_path / "hashes.db")
        sink = RecordingEventSink()
        tracker = ChangeTracker(["background", "body"], provider, store, sink)
        await tracker.initialize()

        report = await tracker.detect_changes()
        assert all(c.is_new for c in report.all_categories)

        plan = await tracker.regenerate_changed()
        assert plan.regenerated == ["background", "body"]
        assert store.upserts == 2
        assert len(sink.of(names.CATEGORY_STARTED)) == 2

        sink.clear()
        plan = await tracker.regenerate_changed()
        assert plan.message == "No configuration changes detected"
        assert store.upserts == 2
        assert sink.events == []

        provider.update_category_config("body", complexity=0.75)
        plan = await tracker.regenerate_changed()
        assert plan.regenerated == ["body"]
        assert plan.skipped == ["background"]
        assert store.upserts == 3
        skipped = sink.of(names.SKIPPED)
        assert [e.payload["reason"] for e in skipped] == ["no_changes"]
        store.close()


class TestPersistenceRoundTrip:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("backend", ["sqlite", "json"])
    async def test_restart_reproduces_mapping(self, tmp_path: Path, provider, backend):
        first = await open_tracker(_settings(tmp_path, backend), provider=provider)
        await first.regenerate_changed()
        expected = first.get_status().stored_hashes
        first.store.close()

        second = await open_tracker(_settings(tmp_path, backend), provider=provider)
        assert second.get_status().stored_hashes == expected
        plan = await second.regenerate_changed()
        assert plan.regenerated == []
        second.store.close()

    @pytest.mark.asyncio
    async def test_force_category_survives_restart(self, tmp_path: Path, provider):
        first = await open_tracker(_settings(tmp_path, "sqlite"), provider=provider)
        await first.regenerate_changed()
        await first.force_regenerate_category("body")
        first.store.close()

        second = await open_tracker(_settings(tmp_path, "sqlite"), provider=provider)
        report = await second.detect_changes()
        assert report.changed_names == ["body"]
        second.store.close()

    @pytest.mark.asyncio
    async def test_reset_survives_restart(self, tmp_path: Path, provider):
        first = await open_tracker(_settings(tmp_path, "json"), provider=provider)
        await first.regenerate_changed()
        await first.reset()

        second = await open_tracker(_settings(tmp_path, "json"), provider=provider)
        assert second.get_status().stored_hashes == {}
        report = await second.detect_changes()
        assert all(c.is_new for c in report.all_categories)

    @pytest.mark.asyncio
    async def test_json_blob_is_readable_mapping(self, tmp_path: Path, provider):
        tracker = await open_tracker(_settings(tmp_path, "json"), provider=provider)
        await tracker.regenerate_changed()
        store = JsonFingerprintStore(tmp_path / "config_hashes.json")
        assert await store.load_all() == tracker.get_status().stored_hashes

    @pytest.mark.asyncio
    async def test_corrupt_blob_fails_initialization(self, tmp_path: Path, provider):
        (tmp_path / "config_hashes.json").write_text("{oops")
        from smartregen.core.errors import CorruptRecord
        with pytest.raises(CorruptRecord):
            await open_tracker(_settings(tmp_path, "json"), provider=provider)


class TestObserverWiring:

    @pytest.mark.asyncio
    async def test_ui_observer_receives_decisions(self, tmp_path: Path):
        provider = DictConfigProvider({
            "categories": {"background": {"num_traits": 2}, "body": {"num_traits": 3}},
        })
        sink = CallbackEventSink()
        started: list[str] = []
        sink.subscribe(
            names.CATEGORY_STARTED, lambda _, p: started.append(p["category"])
        )
        tracker = await open_tracker(
            _settings(tmp_path, "memory"), provider=provider, event_sink=sink,
        )
        await tracker.regenerate_changed()
        await tracker.force_regenerate_category("background")
        await tracker.regenerate_changed()
        assert started == ["background", "body", "background"]
