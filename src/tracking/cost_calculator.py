# src/tracking/cost_calculator.py — v3
"""Cost and time estimation for a regeneration set.

Pure functions over changed-category descriptors: no store access, no
side effects. Savings estimation additionally queries a cache-size oracle.
"""

from __future__ import annotations

import logging

from smartregen.providers.runtime import BaseCacheSizeOracle
from smartregen.tracking.models import (
    CacheSavings,
    CategoryCost,
    CategoryTime,
    ChangedCategoryInput,
    CostEstimate,
    TimeEstimate,
)

logger = logging.getLogger(__name__)

# Currency units per generated image. First entry is the fallback provider.
DEFAULT_PROVIDER_COSTS: dict[str, float] = {
    "gemini": 0.039,
    "openai": 0.080,
    "stablediffusion": 0.050,
}

# Seconds per generated trait by generation mode.
DEFAULT_SECONDS_PER_TRAIT: dict[str, float] = {
    "procedural": 0.1,
    "ai": 3.0,
    "hybrid": 3.5,
}


def cost_per_image(provider: str, pricing: dict[str, float] | None = None) -> float:
    """Look up a provider's per-image cost, defaulting to the first table entry."""
    pricing = pricing or DEFAULT_PROVIDER_COSTS
    if provider in pricing:
        return pricing[provider]
    return next(iter(pricing.values()))


def estimate_regeneration_cost(
    changed: list[ChangedCategoryInput],
    active_provider: str = "gemini",
    pricing: dict[str, float] | None = None,
) -> CostEstimate:
    """Estimate image-service cost of regenerating the given categories.

    ai and hybrid categories cost num_traits * cost_per_image(provider);
    procedural categories cost nothing.
    """
    estimate = CostEstimate()
    for item in changed:
        config = item.config
        if config.uses_ai:
            per_image = cost_per_image(active_provider, pricing)
            line = CategoryCost(
                num_traits=config.num_traits,
                cost_per_trait=per_image,
                total_cost=config.num_traits * per_image,
                provider=active_provider,
            )
        else:
            line = CategoryCost(
                num_traits=config.num_traits,
                cost_per_trait=0.0,
                total_cost=0.0,
                provider="procedural",
            )
        estimate.breakdown[item.category] = line
        estimate.total += line.total_cost
    return estimate


def estimate_regeneration_time(
    changed: list[ChangedCategoryInput],
    seconds_per_trait: dict[str, float] | None = None,
) -> TimeEstimate:
    """Estimate wall-clock generation time of the given categories."""
    table = seconds_per_trait or DEFAULT_SECONDS_PER_TRAIT
    estimate = TimeEstimate()
    for item in changed:
        mode = item.config.generation_mode
        per_trait = table.get(mode, table.get("procedural", 0.0))
        line = CategoryTime(
            num_traits=item.config.num_traits,
            time_per_trait=per_trait,
            total_time=item.config.num_traits * per_trait,
            mode=mode,
        )
        estimate.breakdown[item.category] = line
        estimate.total += line.total_time
    estimate.total_formatted = format_duration(estimate.total * 1000)
    return estimate


def format_duration(ms: float) -> str:
    """Format milliseconds as '<m>m <s>s' (>= 60 s) or '<s>s'."""
    seconds = int(ms // 1000)
    minutes = seconds // 60
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"


async def estimate_cache_savings(
    changed: list[ChangedCategoryInput],
    oracle: BaseCacheSizeOracle,
    active_provider: str = "gemini",
    pricing: dict[str, float] | None = None,
    seconds_per_trait: dict[str, float] | None = None,
) -> CacheSavings:
    """Estimate how much reusing cached assets saves.

    Savings use the same per-image prices and per-mode timings as the
    regeneration estimates.

    Advisory only: an oracle failure counts as nothing cached.
    """
    table = seconds_per_trait or DEFAULT_SECONDS_PER_TRAIT
    savings = CacheSavings()
    for item in changed:
        try:
            cached = await oracle.count_available(item.category)
        except Exception as e:
            logger.warning("Cache size lookup failed for %s: %s", item.category, e)
            cached = 0
        reusable = max(0, min(cached, item.config.num_traits))
        savings.traits_reused += reusable

        if item.config.uses_ai:
            savings.cost_saved += reusable * cost_per_image(active_provider, pricing)
            per_trait = table.get(item.config.generation_mode, 0.0)
            savings.time_saved += reusable * per_trait
    return savings
