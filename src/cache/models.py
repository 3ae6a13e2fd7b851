# src/cache/models.py — v2
"""Cache domain models: FingerprintRecord.

One record per category; overwritten whenever the category is regenerated,
removed on force-regeneration or reset.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FingerprintRecord(BaseModel):
    """Persisted fingerprint of a category's last generated configuration."""

    category: str = Field(min_length=1)
    fingerprint: str = Field(min_length=1)
    stored_at: datetime = Field(default_factory=utc_now)
