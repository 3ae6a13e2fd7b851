# src/core/models.py — v2
"""Shared Pydantic domain models used across modules.

Configuration snapshots consumed by fingerprinting, estimation and the
change tracker. No module redefines these types — all imports come from
core.models.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

GenerationMode = Literal["procedural", "ai", "hybrid"]

GENERATION_MODES: tuple[str, ...] = ("procedural", "ai", "hybrid")

DEFAULT_CATEGORIES: tuple[str, ...] = ("background", "body", "eyes", "mouth", "hat")


# === CATEGORY CONFIGURATION ===


class CategoryConfig(BaseModel):
    """Per-category generation parameters (read-only snapshot)."""

    model_config = ConfigDict(frozen=True)

    num_traits: int = Field(default=0, ge=0)
    complexity: float = 0.0
    color_seed: int | str | None = None
    generation_mode: GenerationMode = "procedural"
    ai_options: dict[str, Any] = Field(default_factory=dict)

    @property
    def uses_ai(self) -> bool:
        """True when generating this category calls an external image service."""
        return self.generation_mode != "procedural"


# === STYLE SETTINGS ===


class GlobalStyleSettings(BaseModel):
    """Subset of global style settings that affects generation output."""

    model_config = ConfigDict(frozen=True)

    master_prompt: str | None = None
    global_negative_prompt: str | None = None
    active_preset: str | None = None
    color_palette_lock: bool | None = None
    locked_colors: list[str] | None = None
    use_master_seed: bool | None = None
    master_seed: int | str | None = None
    use_ai_generation: bool | None = None


class StyleEngineSettings(BaseModel):
    """Style-engine settings scoped to one category."""

    model_config = ConfigDict(frozen=True)

    master_style_prompt: str | None = None
    active_preset: str | None = None
    category_template: str | None = None
    negative_prompt: str | None = None
