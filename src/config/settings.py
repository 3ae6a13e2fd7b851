# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings: the category set,
fingerprint store backend, hash algorithm, pricing tables and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Categories ===
    categories: str = "background,body,eyes,mouth,hat"

    # === Regeneration ===
    regeneration_enabled: bool = True
    change_threshold: float = 0.1

    # === Fingerprint store ===
    store_backend: Literal["auto", "sqlite", "json", "memory"] = "auto"
    store_root: Path = Path("~/.smartregen")
    store_sqlite_filename: str = "config_hashes.db"
    store_json_filename: str = "config_hashes.json"

    # === Hashing ===
    hash_algorithm: str = "sha256"

    # === Pricing (currency units per generated image) ===
    active_provider: str = "gemini"
    provider_costs: str = "gemini:0.039,openai:0.080,stablediffusion:0.050"

    # === Timing (seconds per trait) ===
    seconds_per_trait_procedural: float = 0.1
    seconds_per_trait_ai: float = 3.0
    seconds_per_trait_hybrid: float = 3.5

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("change_threshold")
    @classmethod
    def clamp_change_threshold(cls, v: float) -> float:  # noqa: N805
        """Threshold is reported only; keep it inside [0, 1]."""
        return max(0.0, min(1.0, v))

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        names = self.categories_list
        if not names:
            errors.append("CATEGORIES must name at least one category")
        elif len(set(names)) != len(names):
            errors.append("CATEGORIES contains duplicates")

        try:
            costs = self.provider_costs_map
        except ValueError as e:
            errors.append(str(e))
        else:
            if not costs:
                errors.append("PROVIDER_COSTS must list at least one provider")

        timings = (
            self.seconds_per_trait_procedural,
            self.seconds_per_trait_ai,
            self.seconds_per_trait_hybrid,
        )
        if any(t < 0 for t in timings):
            errors.append("SECONDS_PER_TRAIT_* values must be >= 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def categories_list(self) -> list[str]:
        """Parse comma-separated category names (order preserved)."""
        return [c.strip() for c in self.categories.split(",") if c.strip()]

    @property
    def provider_costs_map(self) -> dict[str, float]:
        """Parse 'name:cost' pairs. Insertion order is the table order."""
        result: dict[str, float] = {}
        for pair in self.provider_costs.split(","):
            pair = pair.strip()
            if not pair:
                continue
            name, sep, cost = pair.partition(":")
            if not sep or not name.strip():
                raise ValueError(f"Invalid PROVIDER_COSTS entry: {pair!r}")
            try:
                result[name.strip()] = float(cost)
            except ValueError as e:
                raise ValueError(f"Invalid PROVIDER_COSTS entry: {pair!r}") from e
        return result

    @property
    def seconds_per_trait_map(self) -> dict[str, float]:
        """Per generation mode seconds-per-trait table."""
        return {
            "procedural": self.seconds_per_trait_procedural,
            "ai": self.seconds_per_trait_ai,
            "hybrid": self.seconds_per_trait_hybrid,
        }


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
