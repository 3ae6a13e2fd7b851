# src/cache/base_fingerprint_store.py — v1
"""Abstract fingerprint store interface.

Key-value persistence of one fingerprint per category, durable across
restarts. Implementations raise StoreUnavailable on I/O failure and
CorruptRecord on malformed content; the tracker decides what to absorb.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from smartregen.cache.models import FingerprintRecord


class BaseFingerprintStore(ABC):
    """Unified interface for fingerprint storage backends."""

    name: str = "abstract"

    @abstractmethod
    async def load_all(self) -> dict[str, str]:
        """Load every stored fingerprint as {category: fingerprint}."""

    @abstractmethod
    async def upsert(
        self, category: str, fingerprint: str, timestamp: datetime
    ) -> None:
        """Insert or overwrite the fingerprint of one category."""

    async def upsert_many(self, records: list[FingerprintRecord]) -> None:
        """Write several records. Backends override to use one transaction."""
        for record in records:
            await self.upsert(record.category, record.fingerprint, record.stored_at)

    @abstractmethod
    async def delete(self, category: str) -> None:
        """Remove one category's record. Missing records are not an error."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every record."""

    def close(self) -> None:
        """Release backend resources."""
