# tests/unit/cache/test_unit_json_store.py — v1
"""Tests for cache/json_store.py — flat blob fallback store."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from smartregen.cache.json_store import JsonFingerprintStore
from smartregen.cache.models import FingerprintRecord
from smartregen.core.errors import CorruptRecord, StoreUnavailable

TS = datetime(2026, 2, 16, tzinfo=timezone.utc)


class TestJsonFingerprintStore:
    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, tmp_path):
        store = JsonFingerprintStore(tmp_path / "hashes.json")
        assert await store.load_all() == {}

    @pytest.mark.asyncio
    async def test_single_blob(self, tmp_path):
        path = tmp_path / "nested" / "hashes.json"
        store = JsonFingerprintStore(path)
        await store.upsert("body", "abc", TS)
        await store.upsert("eyes", "def", TS)
        assert json.loads(path.read_text()) == {"body": "abc", "eyes": "def"}

    @pytest.mark.asyncio
    async def test_upsert_many_and_delete(self, tmp_path):
        store = JsonFingerprintStore(tmp_path / "hashes.json")
        await store.upsert_many([
            FingerprintRecord(category="a", fingerprint="1"),
            FingerprintRecord(category="b", fingerprint="2"),
        ])
        await store.delete("a")
        await store.delete("zzz")
        assert await store.load_all() == {"b": "2"}

    @pytest.mark.asyncio
    async def test_clear(self, tmp_path):
        store = JsonFingerprintStore(tmp_path / "hashes.json")
        await store.upsert("body", "abc", TS)
        await store.clear()
        assert await store.load_all() == {}

    @pytest.mark.asyncio
    async def test_invalid_json_is_corrupt(self, tmp_path):
        path = tmp_path / "hashes.json"
        path.write_text("{not json")
        with pytest.raises(CorruptRecord):
            await JsonFingerprintStore(path).load_all()

    @pytest.mark.asyncio
    async def test_non_object_is_corrupt(self, tmp_path):
        path = tmp_path / "hashes.json"
        path.write_text("[1, 2]")
        with pytest.raises(CorruptRecord):
            await JsonFingerprintStore(path).load_all()

    @pytest.mark.asyncio
    async def test_non_string_fingerprint_is_corrupt(self, tmp_path):
        path = tmp_path / "hashes.json"
        path.write_text('{"body": 12}')
        with pytest.raises(CorruptRecord):
            await JsonFingerprintStore(path).load_all()

    @pytest.mark.asyncio
    async def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file")
        store = JsonFingerprintStore(blocker / "hashes.json")
        with pytest.raises(StoreUnavailable):
            await store.upsert("body", "abc", TS)
