# src/providers/runtime.py — v1
"""Runtime collaborators used by estimation: cache-size oracle and
active image-provider resolver."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseCacheSizeOracle(ABC):
    """Reports how many generated assets of a category already exist."""

    @abstractmethod
    async def count_available(self, category: str) -> int:
        """Number of reusable cached assets for the category."""


class NullCacheSizeOracle(BaseCacheSizeOracle):
    """No asset cache: nothing is reusable."""

    async def count_available(self, category: str) -> int:
        return 0


class StaticCacheSizeOracle(BaseCacheSizeOracle):
    """Fixed per-category counts."""

    def __init__(self, counts: dict[str, int] | None = None) -> None:
        self._counts = dict(counts or {})

    async def count_available(self, category: str) -> int:
        return self._counts.get(category, 0)


class BaseProviderResolver(ABC):
    """Names the image-generation provider currently in use."""

    @abstractmethod
    def get_active_provider_name(self) -> str:
        """Active provider key, as used in the pricing table."""


class StaticProviderResolver(BaseProviderResolver):
    """Always reports the same provider."""

    def __init__(self, name: str = "gemini") -> None:
        self.name = name

    def get_active_provider_name(self) -> str:
        return self.name
