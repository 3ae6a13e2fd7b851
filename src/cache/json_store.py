# src/cache/json_store.py — v2
"""JSON blob fingerprint store (STORE_BACKEND=json).

Fallback backend: the whole {category: fingerprint} mapping is serialized
as a single JSON file under STORE_ROOT and rewritten on every change.
Timestamps are not kept.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from smartregen.cache.base_fingerprint_store import BaseFingerprintStore
from smartregen.cache.models import FingerprintRecord
from smartregen.core.errors import CorruptRecord, StoreUnavailable

logger = logging.getLogger(__name__)


class JsonFingerprintStore(BaseFingerprintStore):
    """Flat-file fingerprint store using one JSON document."""

    name = "json"

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    async def load_all(self) -> dict[str, str]:
        """Load the mapping. A missing file is an empty store."""
        return self._read()

    async def upsert(
        self, category: str, fingerprint: str, timestamp: datetime
    ) -> None:
        """Store one fingerprint."""
        hashes = self._read()
        hashes[category] = fingerprint
        self._write(hashes)

    async def upsert_many(self, records: list[FingerprintRecord]) -> None:
        """Store several fingerprints with a single file rewrite."""
        if not records:
            return
        hashes = self._read()
        for record in records:
            hashes[record.category] = record.fingerprint
        self._write(hashes)

    async def delete(self, category: str) -> None:
        """Remove one category."""
        hashes = self._read()
        if hashes.pop(category, None) is not None:
            self._write(hashes)

    async def clear(self) -> None:
        """Reset to an empty mapping."""
        self._write({})

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreUnavailable(f"Cannot read {self._path}: {e}") from e
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptRecord(f"Invalid JSON in {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise CorruptRecord(f"Expected a JSON object in {self._path}")
        for category, fingerprint in data.items():
            if not isinstance(fingerprint, str) or not fingerprint:
                raise CorruptRecord(
                    f"Invalid fingerprint for {category!r} in {self._path}",
                    category=category,
                )
        return data

    def _write(self, hashes: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(
                json.dumps(hashes, indent=2, sort_keys=True), encoding="utf-8"
            )
            tmp.replace(self._path)
        except OSError as e:
            raise StoreUnavailable(f"Cannot write {self._path}: {e}") from e
