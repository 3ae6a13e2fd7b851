# src/regeneration/diff_report.py — v2
"""Diff report: per-category change status with cost and time of the
changed set. Rendering is left to the UI."""

from __future__ import annotations

from smartregen.regeneration.models import (
    CategoryDiff,
    ChangeDetails,
    DiffReport,
    DiffSummary,
)
from smartregen.regeneration.tracker import ChangeTracker


def get_change_details(tracker: ChangeTracker, category: str) -> ChangeDetails:
    """Summarize the current configuration of a category."""
    config = tracker.category_config(category)
    return ChangeDetails(
        num_traits=config.num_traits,
        complexity=config.complexity,
        generation_mode=config.generation_mode,
        has_ai=config.uses_ai,
        style_settings=tracker.style_settings(category),
    )


async def generate_diff_report(tracker: ChangeTracker) -> DiffReport:
    """Run change detection and describe the result."""
    detection = await tracker.detect_changes()
    total = len(detection.all_categories)
    changed = len(detection.changed_categories)

    return DiffReport(
        has_changes=detection.has_changes,
        summary=DiffSummary(
            total_categories=total,
            changed_categories=changed,
            unchanged_categories=total - changed,
        ),
        categories=[
            CategoryDiff(
                category=c.category,
                status="changed" if c.has_changed else "unchanged",
                is_new=c.is_new,
                details=get_change_details(tracker, c.category),
            )
            for c in detection.all_categories
        ],
        estimated_cost=tracker.estimate_regeneration_cost(detection.changed_categories),
        estimated_time=tracker.estimate_regeneration_time(detection.changed_categories),
    )
