# src/__init__.py — v1
"""smartregen — change-aware regeneration gating for trait generation."""

from smartregen.version import __version__

__all__ = ["__version__"]
