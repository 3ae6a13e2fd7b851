# src/cache/sqlite_store.py — v2
"""SQLite-based fingerprint store (STORE_BACKEND=sqlite).

Uses stdlib sqlite3 — no external dependency. Primary transactional
backend: one row per category, upserts, multi-category writes in a single
transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from smartregen.cache.base_fingerprint_store import BaseFingerprintStore
from smartregen.cache.models import FingerprintRecord
from smartregen.core.errors import CorruptRecord, StoreUnavailable

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS config_hashes (
    category TEXT PRIMARY KEY,
    fingerprint TEXT NOT NULL,
    stored_at TEXT NOT NULL
);
"""

_UPSERT = """
INSERT INTO config_hashes (category, fingerprint, stored_at)
VALUES (?, ?, ?)
ON CONFLICT(category) DO UPDATE SET
    fingerprint = excluded.fingerprint,
    stored_at = excluded.stored_at
"""


class SqliteFingerprintStore(BaseFingerprintStore):
    """SQLite-backed fingerprint store."""

    name = "sqlite"

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path))
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except (sqlite3.Error, OSError) as e:
            raise StoreUnavailable(
                f"Cannot open fingerprint database {self._db_path}: {e}"
            ) from e

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def load_all(self) -> dict[str, str]:
        """Load every stored fingerprint."""
        try:
            rows = self._conn.execute(
                "SELECT category, fingerprint FROM config_hashes"
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to read config_hashes: {e}") from e

        hashes: dict[str, str] = {}
        for category, fingerprint in rows:
            if not isinstance(fingerprint, str) or not fingerprint:
                raise CorruptRecord(
                    f"Empty or non-text fingerprint for {category!r}",
                    category=category,
                )
            hashes[category] = fingerprint
        return hashes

    async def upsert(
        self, category: str, fingerprint: str, timestamp: datetime
    ) -> None:
        """Store one fingerprint (upsert)."""
        await self.upsert_many(
            [FingerprintRecord(
                category=category, fingerprint=fingerprint, stored_at=timestamp,
            )]
        )

    async def upsert_many(self, records: list[FingerprintRecord]) -> None:
        """Store several fingerprints in one transaction."""
        if not records:
            return
        rows = [
            (r.category, r.fingerprint, r.stored_at.isoformat()) for r in records
        ]
        try:
            with self._conn:
                self._conn.executemany(_UPSERT, rows)
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to write config_hashes: {e}") from e

    async def delete(self, category: str) -> None:
        """Remove one category's record."""
        try:
            with self._conn:
                self._conn.execute(
                    "DELETE FROM config_hashes WHERE category = ?", (category,)
                )
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to delete {category!r}: {e}") from e

    async def clear(self) -> None:
        """Remove every record."""
        try:
            with self._conn:
                self._conn.execute("DELETE FROM config_hashes")
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to clear config_hashes: {e}") from e

    async def list_records(self) -> list[FingerprintRecord]:
        """List full records including timestamps."""
        try:
            rows = self._conn.execute(
                "SELECT category, fingerprint, stored_at FROM config_hashes"
                " ORDER BY category"
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to read config_hashes: {e}") from e
        records: list[FingerprintRecord] = []
        for category, fingerprint, stored_at in rows:
            try:
                records.append(FingerprintRecord(
                    category=category,
                    fingerprint=fingerprint,
                    stored_at=datetime.fromisoformat(stored_at),
                ))
            except (ValueError, TypeError) as e:
                raise CorruptRecord(
                    f"Malformed record for {category!r}: {e}", category=category,
                ) from e
        return records

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
