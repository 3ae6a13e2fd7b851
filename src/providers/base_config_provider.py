# src/providers/base_config_provider.py — v1
"""Abstract configuration provider.

The tracker reads category configuration through this interface instead of
reaching into shared application state. Implementations return default
(empty) models for anything they do not know about.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from smartregen.core.models import (
    CategoryConfig,
    GlobalStyleSettings,
    StyleEngineSettings,
)


class BaseConfigProvider(ABC):
    """Source of per-category generation configuration."""

    @abstractmethod
    def get_category_config(self, category: str) -> CategoryConfig:
        """Current configuration of one category."""

    @abstractmethod
    def get_global_style_settings(self) -> GlobalStyleSettings:
        """Global style settings shared by every category."""

    @abstractmethod
    def get_style_engine_settings(self, category: str) -> StyleEngineSettings:
        """Style-engine settings relevant to one category."""


class NullConfigProvider(BaseConfigProvider):
    """Provider used when none is configured: every value is a default."""

    def get_category_config(self, category: str) -> CategoryConfig:
        return CategoryConfig()

    def get_global_style_settings(self) -> GlobalStyleSettings:
        return GlobalStyleSettings()

    def get_style_engine_settings(self, category: str) -> StyleEngineSettings:
        return StyleEngineSettings()
