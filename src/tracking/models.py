# src/tracking/models.py — v2
"""Tracking domain models: cost, time and cache-savings estimates.

Estimates are advisory and never persisted.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from smartregen.core.models import CategoryConfig, GenerationMode


class ChangedCategoryInput(BaseModel):
    """A category scheduled for regeneration with its config snapshot."""

    category: str
    config: CategoryConfig = Field(default_factory=CategoryConfig)


class CategoryCost(BaseModel):
    """Per-category cost line."""

    num_traits: int
    cost_per_trait: float
    total_cost: float
    provider: str


class CostEstimate(BaseModel):
    """Total generation cost of a regeneration set."""

    total: float = 0.0
    breakdown: dict[str, CategoryCost] = Field(default_factory=dict)


class CategoryTime(BaseModel):
    """Per-category duration line."""

    num_traits: int
    time_per_trait: float
    total_time: float
    mode: GenerationMode


class TimeEstimate(BaseModel):
    """Total generation time of a regeneration set, in seconds."""

    total: float = 0.0
    total_formatted: str = "0s"
    breakdown: dict[str, CategoryTime] = Field(default_factory=dict)


class CacheSavings(BaseModel):
    """What reusing already-generated assets would save."""

    traits_reused: int = 0
    cost_saved: float = 0.0
    time_saved: float = 0.0
