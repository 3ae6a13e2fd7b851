# src/providers/dict_config_provider.py — v1
"""Configuration provider backed by a plain mapping or a JSON file.

Expected shape::

    {
      "categories": {"body": {"num_traits": 5, "generation_mode": "ai"}},
      "global_style": {"master_prompt": "..."},
      "style_engine": {
        "master_style_prompt": "...",
        "active_preset": "pixel",
        "category_templates": {"body": "..."},
        "negative_prompts": {"body": "..."}
      }
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from smartregen.core.models import (
    CategoryConfig,
    GlobalStyleSettings,
    StyleEngineSettings,
)
from smartregen.providers.base_config_provider import BaseConfigProvider

logger = logging.getLogger(__name__)


class DictConfigProvider(BaseConfigProvider):
    """Mutable in-memory configuration source."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        data = data or {}
        self._categories: dict[str, CategoryConfig] = {
            name: CategoryConfig.model_validate(cfg)
            for name, cfg in (data.get("categories") or {}).items()
        }
        self._global_style = GlobalStyleSettings.model_validate(
            data.get("global_style") or {}
        )
        engine = data.get("style_engine") or {}
        self._master_style_prompt: str | None = engine.get("master_style_prompt")
        self._style_preset: str | None = engine.get("active_preset")
        self._templates: dict[str, str] = dict(engine.get("category_templates") or {})
        self._negative_prompts: dict[str, str] = dict(
            engine.get("negative_prompts") or {}
        )

    @classmethod
    def from_json_file(cls, path: Path | str) -> DictConfigProvider:
        """Load provider data from a JSON file."""
        path = Path(path).expanduser()
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {path}")
        logger.debug("Loaded configuration for %d categories from %s",
                     len(data.get("categories") or {}), path)
        return cls(data)

    # --- BaseConfigProvider ---

    def get_category_config(self, category: str) -> CategoryConfig:
        return self._categories.get(category, CategoryConfig())

    def get_global_style_settings(self) -> GlobalStyleSettings:
        return self._global_style

    def get_style_engine_settings(self, category: str) -> StyleEngineSettings:
        return StyleEngineSettings(
            master_style_prompt=self._master_style_prompt,
            active_preset=self._style_preset,
            category_template=self._templates.get(category),
            negative_prompt=self._negative_prompts.get(category),
        )

    # --- Mutation (UI / orchestration side) ---

    def set_category_config(self, category: str, config: CategoryConfig) -> None:
        self._categories[category] = config

    def update_category_config(self, category: str, **changes: Any) -> CategoryConfig:
        """Replace selected fields of a category config; returns the new snapshot."""
        current = self.get_category_config(category)
        updated = CategoryConfig.model_validate({**current.model_dump(), **changes})
        self._categories[category] = updated
        return updated

    def set_global_style(self, settings: GlobalStyleSettings) -> None:
        self._global_style = settings

    def set_style_engine(
        self,
        master_style_prompt: str | None = None,
        active_preset: str | None = None,
        category_templates: dict[str, str] | None = None,
        negative_prompts: dict[str, str] | None = None,
    ) -> None:
        self._master_style_prompt = master_style_prompt
        self._style_preset = active_preset
        self._templates = dict(category_templates or {})
        self._negative_prompts = dict(negative_prompts or {})
