# src/api/facade.py — v2
"""Public API facade — wire a ChangeTracker from settings.

Usage:
    from smartregen.api.facade import open_tracker
    tracker = await open_tracker(provider=my_provider)
    plan = await tracker.regenerate_changed()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smartregen.cache.fingerprint import create_hash_provider
from smartregen.cache.store_factory import create_fingerprint_store
from smartregen.config.settings import Settings
from smartregen.providers.runtime import StaticProviderResolver
from smartregen.regeneration.tracker import ChangeTracker

if TYPE_CHECKING:
    from smartregen.cache.base_fingerprint_store import BaseFingerprintStore
    from smartregen.events.base_event_sink import BaseEventSink
    from smartregen.providers.base_config_provider import BaseConfigProvider
    from smartregen.providers.runtime import BaseCacheSizeOracle, BaseProviderResolver

logger = logging.getLogger(__name__)


def create_tracker(
    settings: Settings | None = None,
    provider: BaseConfigProvider | None = None,
    store: BaseFingerprintStore | None = None,
    event_sink: BaseEventSink | None = None,
    oracle: BaseCacheSizeOracle | None = None,
    resolver: BaseProviderResolver | None = None,
) -> ChangeTracker:
    """Build a ChangeTracker whose defaults come from settings.

    Args:
        settings: Global settings. Loaded from .env if None.
        provider: Configuration source. None = every category uses defaults.
        store: Fingerprint store. None = built by create_fingerprint_store().
        event_sink: Notification target. None = notifications are dropped.
        oracle: Cache-size oracle for savings estimates. None = nothing cached.
        resolver: Active provider resolver. None = settings.active_provider.

    Returns:
        Uninitialized ChangeTracker (call initialize() before use).
    """
    settings = settings or Settings()
    if store is None:
        store = create_fingerprint_store(settings)
    logger.debug("Using %s fingerprint store", store.name)

    return ChangeTracker(
        categories=settings.categories_list,
        provider=provider,
        store=store,
        event_sink=event_sink,
        hash_provider=create_hash_provider(settings.hash_algorithm),
        oracle=oracle,
        resolver=resolver or StaticProviderResolver(settings.active_provider),
        pricing=settings.provider_costs_map,
        seconds_per_trait=settings.seconds_per_trait_map,
        enabled=settings.regeneration_enabled,
        change_threshold=settings.change_threshold,
    )


async def open_tracker(
    settings: Settings | None = None,
    provider: BaseConfigProvider | None = None,
    store: BaseFingerprintStore | None = None,
    event_sink: BaseEventSink | None = None,
    oracle: BaseCacheSizeOracle | None = None,
    resolver: BaseProviderResolver | None = None,
) -> ChangeTracker:
    """create_tracker() followed by initialize()."""
    tracker = create_tracker(
        settings=settings,
        provider=provider,
        store=store,
        event_sink=event_sink,
        oracle=oracle,
        resolver=resolver,
    )
    await tracker.initialize()
    return tracker
