# src/regeneration/models.py — v1
"""Regeneration domain models: change reports, plans, status and diffs.

All transient — computed per call, never persisted.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from smartregen.core.models import GenerationMode, StyleEngineSettings
from smartregen.tracking.models import CostEstimate, TimeEstimate


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# === CHANGE DETECTION ===


class CategoryChange(BaseModel):
    """Comparison of one category's current and stored fingerprints."""

    category: str
    current_hash: str
    stored_hash: str | None = None
    has_changed: bool
    is_new: bool


class ChangedCategory(BaseModel):
    """A category whose fingerprint differs from the stored one."""

    category: str
    reason: Literal["configuration_changed", "first_generation"]
    old_hash: str | None = None
    new_hash: str


class ChangeReport(BaseModel):
    """Result of scanning every known category."""

    has_changes: bool = False
    changed_categories: list[ChangedCategory] = Field(default_factory=list)
    all_categories: list[CategoryChange] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=_utc_now)

    @property
    def changed_names(self) -> list[str]:
        return [c.category for c in self.changed_categories]


# === REGENERATION ===


class RegenerationPlan(BaseModel):
    """Which categories were regenerated and which were skipped."""

    regenerated: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    change_detection: ChangeReport | None = None
    message: str = ""


class ForceResult(BaseModel):
    """Categories the next regeneration pass will treat as new."""

    regenerated: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    message: str = ""


class TrackerStatus(BaseModel):
    """Snapshot of tracker state for status reporting."""

    is_enabled: bool
    last_generation_time: datetime | None = None
    stored_hashes: dict[str, str] = Field(default_factory=dict)
    change_threshold: float


# === DIFF REPORT ===


class ChangeDetails(BaseModel):
    """Configuration summary shown next to a category in a diff."""

    num_traits: int = 0
    complexity: float = 0.0
    generation_mode: GenerationMode = "procedural"
    has_ai: bool = False
    style_settings: StyleEngineSettings = Field(default_factory=StyleEngineSettings)


class CategoryDiff(BaseModel):
    """One category row of a diff report."""

    category: str
    status: Literal["changed", "unchanged"]
    is_new: bool
    details: ChangeDetails


class DiffSummary(BaseModel):
    total_categories: int = 0
    changed_categories: int = 0
    unchanged_categories: int = 0


class DiffReport(BaseModel):
    """Data behind a UI diff view, with cost and time of the changed set."""

    timestamp: datetime = Field(default_factory=_utc_now)
    has_changes: bool = False
    summary: DiffSummary = Field(default_factory=DiffSummary)
    categories: list[CategoryDiff] = Field(default_factory=list)
    estimated_cost: CostEstimate = Field(default_factory=CostEstimate)
    estimated_time: TimeEstimate = Field(default_factory=TimeEstimate)
