# src/cache/memory_store.py — v1
"""In-process fingerprint store (STORE_BACKEND=memory).

Not durable. Used for dry runs and tests; counts writes so callers can
assert that a pass touched nothing.
"""

from __future__ import annotations

from datetime import datetime

from smartregen.cache.base_fingerprint_store import BaseFingerprintStore
from smartregen.cache.models import FingerprintRecord


class MemoryFingerprintStore(BaseFingerprintStore):
    """Dictionary-backed fingerprint store."""

    name = "memory"

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._records: dict[str, FingerprintRecord] = {
            category: FingerprintRecord(category=category, fingerprint=fp)
            for category, fp in (initial or {}).items()
        }
        self.write_count = 0

    async def load_all(self) -> dict[str, str]:
        return {c: r.fingerprint for c, r in self._records.items()}

    async def upsert(
        self, category: str, fingerprint: str, timestamp: datetime
    ) -> None:
        self._records[category] = FingerprintRecord(
            category=category, fingerprint=fingerprint, stored_at=timestamp,
        )
        self.write_count += 1

    async def delete(self, category: str) -> None:
        self._records.pop(category, None)
        self.write_count += 1

    async def clear(self) -> None:
        self._records.clear()
        self.write_count += 1

    def get_record(self, category: str) -> FingerprintRecord | None:
        return self._records.get(category)
