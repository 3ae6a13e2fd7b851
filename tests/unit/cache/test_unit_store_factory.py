# tests/unit/cache/test_unit_store_factory.py — v1
"""Tests for cache/store_factory.py."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from smartregen.cache.json_store import JsonFingerprintStore
from smartregen.cache.memory_store import MemoryFingerprintStore
from smartregen.cache.sqlite_store import SqliteFingerprintStore
from smartregen.cache.store_factory import create_fingerprint_store
from smartregen.config.settings import Settings
from smartregen.core.errors import StoreUnavailable


def _settings(tmp_path, backend: str) -> Settings:
    return Settings(_env_file=None, store_backend=backend, store_root=tmp_path)


class TestCreateFingerprintStore:
    def test_memory(self, tmp_path):
        assert isinstance(create_fingerprint_store(_settings(tmp_path, "memory")),
                          MemoryFingerprintStore)

    def test_json(self, tmp_path):
        store = create_fingerprint_store(_settings(tmp_path, "json"))
        assert isinstance(store, JsonFingerprintStore)
        assert store.path == tmp_path / "config_hashes.json"

    def test_sqlite(self, tmp_path):
        store = create_fingerprint_store(_settings(tmp_path, "sqlite"))
        assert isinstance(store, SqliteFingerprintStore)
        store.close()

    def test_auto_prefers_sqlite(self, tmp_path):
        store = create_fingerprint_store(_settings(tmp_path, "auto"))
        assert isinstance(store, SqliteFingerprintStore)
        store.close()

    def test_auto_falls_back_to_json(self, tmp_path):
        with patch(
            "smartregen.cache.sqlite_store.SqliteFingerprintStore.__init__",
            side_effect=StoreUnavailable("locked"),
        ):
            store = create_fingerprint_store(_settings(tmp_path, "auto"))
        assert isinstance(store, JsonFingerprintStore)

    def test_explicit_sqlite_propagates(self, tmp_path):
        with patch(
            "smartregen.cache.sqlite_store.SqliteFingerprintStore.__init__",
            side_effect=StoreUnavailable("locked"),
        ):
            with pytest.raises(StoreUnavailable):
                create_fingerprint_store(_settings(tmp_path, "sqlite"))

    def test_invalid_backend_rejected_by_settings(self, tmp_path):
        with pytest.raises(ValueError):
            _settings(tmp_path, "redis")
