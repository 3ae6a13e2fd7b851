# src/cache/store_factory.py — v1
"""Factory for fingerprint store instantiation.

STORE_BACKEND=auto prefers the transactional SQLite store and degrades to
the JSON blob store when SQLite cannot be opened.
"""

from __future__ import annotations

import logging

from smartregen.cache.base_fingerprint_store import BaseFingerprintStore
from smartregen.config.settings import Settings
from smartregen.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)


class UnsupportedStoreBackendError(ValueError):
    """Raised when STORE_BACKEND names an unknown backend."""


def create_fingerprint_store(settings: Settings | None = None) -> BaseFingerprintStore:
    """Instantiate the configured fingerprint backend.

    Args:
        settings: Application settings. Defaults to Settings() from .env.

    Returns:
        Configured BaseFingerprintStore implementation.

    Raises:
        StoreUnavailable: If STORE_BACKEND=sqlite and the database cannot be opened.
        UnsupportedStoreBackendError: If the backend is unknown.
    """
    settings = settings or Settings()
    backend = settings.store_backend
    root = settings.store_root.expanduser()

    if backend == "memory":
        from smartregen.cache.memory_store import MemoryFingerprintStore
        return MemoryFingerprintStore()

    if backend == "json":
        from smartregen.cache.json_store import JsonFingerprintStore
        return JsonFingerprintStore(root / settings.store_json_filename)

    if backend in ("sqlite", "auto"):
        from smartregen.cache.sqlite_store import SqliteFingerprintStore
        try:
            return SqliteFingerprintStore(root / settings.store_sqlite_filename)
        except StoreUnavailable as e:
            if backend == "sqlite":
                raise
            logger.warning("SQLite store unavailable, using JSON fallback: %s", e)
            from smartregen.cache.json_store import JsonFingerprintStore
            return JsonFingerprintStore(root / settings.store_json_filename)

    raise UnsupportedStoreBackendError(f"Unsupported store backend: {backend!r}")
