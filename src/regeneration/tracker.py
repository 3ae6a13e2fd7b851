# src/regeneration/tracker.py — v2
"""Change tracker — decides which categories must be regenerated.

Each category's configuration is fingerprinted and compared with the
fingerprint stored when it was last generated. Only changed (or explicitly
requested) categories are regenerated; the rest are skipped.

The in-memory fingerprint mapping is authoritative for the running process.
Store writes are best-effort: a failed write is logged and the pass
continues, so the worst outcome after a restart is one redundant
regeneration, never an incorrect skip.

Mutating operations (regenerate_changed, force_*, reset) are expected to be
called sequentially by a single orchestrator; there is no internal locking.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from smartregen.cache.base_fingerprint_store import BaseFingerprintStore
from smartregen.cache.fingerprint import (
    HashProvider,
    compute_fingerprint,
    create_hash_provider,
)
from smartregen.cache.memory_store import MemoryFingerprintStore
from smartregen.core.errors import StoreUnavailable
from smartregen.core.models import (
    DEFAULT_CATEGORIES,
    CategoryConfig,
    GlobalStyleSettings,
    StyleEngineSettings,
)
from smartregen.events import names as events
from smartregen.events.base_event_sink import BaseEventSink
from smartregen.events.sinks import NullEventSink
from smartregen.logging.context import operation_context, set_category_context
from smartregen.providers.base_config_provider import (
    BaseConfigProvider,
    NullConfigProvider,
)
from smartregen.providers.runtime import (
    BaseCacheSizeOracle,
    BaseProviderResolver,
    NullCacheSizeOracle,
    StaticProviderResolver,
)
from smartregen.regeneration.models import (
    CategoryChange,
    ChangedCategory,
    ChangeReport,
    ForceResult,
    RegenerationPlan,
    TrackerStatus,
)
from smartregen.tracking import cost_calculator
from smartregen.tracking.models import (
    CacheSavings,
    ChangedCategoryInput,
    CostEstimate,
    TimeEstimate,
)

logger = logging.getLogger(__name__)

NO_CHANGES_MESSAGE = "No configuration changes detected"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChangeTracker:
    """Fingerprint-based regeneration gate for a fixed set of categories."""

    def __init__(
        self,
        categories: Iterable[str] | None = None,
        provider: BaseConfigProvider | None = None,
        store: BaseFingerprintStore | None = None,
        event_sink: BaseEventSink | None = None,
        hash_provider: HashProvider | None = None,
        oracle: BaseCacheSizeOracle | None = None,
        resolver: BaseProviderResolver | None = None,
        pricing: dict[str, float] | None = None,
        seconds_per_trait: dict[str, float] | None = None,
        enabled: bool = True,
        change_threshold: float = 0.1,
    ) -> None:
        self._categories: tuple[str, ...] = (
            DEFAULT_CATEGORIES if categories is None else tuple(categories)
        )
        if not self._categories:
            raise ValueError("ChangeTracker needs at least one category")
        self._provider = provider or NullConfigProvider()
        self._store = store or MemoryFingerprintStore()
        self._events = event_sink or NullEventSink()
        self._hash_provider = hash_provider or create_hash_provider()
        self._oracle = oracle or NullCacheSizeOracle()
        self._resolver = resolver or StaticProviderResolver()
        self._pricing = dict(pricing or cost_calculator.DEFAULT_PROVIDER_COSTS)
        self._seconds_per_trait = dict(
            seconds_per_trait or cost_calculator.DEFAULT_SECONDS_PER_TRAIT
        )

        self._hashes: dict[str, str] = {}
        self._enabled = enabled
        self._change_threshold = 0.0
        self.set_change_threshold(change_threshold)
        self.last_generation_time: datetime | None = None

    # --- Properties ---

    @property
    def categories(self) -> tuple[str, ...]:
        return self._categories

    @property
    def store(self) -> BaseFingerprintStore:
        return self._store

    @property
    def provider(self) -> BaseConfigProvider:
        return self._provider

    @property
    def change_threshold(self) -> float:
        """Reserved. Clamped to [0, 1]; detection is equality-based and ignores it."""
        return self._change_threshold

    # --- Lifecycle ---

    async def initialize(self) -> bool:
        """Load stored fingerprints into memory.

        Returns:
            True when the store was read, False when it was unreachable (the
            tracker then starts empty and treats every category as new).

        Raises:
            CorruptRecord: If the store holds malformed data.
        """
        try:
            self._hashes = dict(await self._store.load_all())
        except StoreUnavailable as e:
            logger.error("Change tracker initialization failed: %s", e)
            self._hashes = {}
            return False
        logger.info(
            "Change tracker initialized with %d stored fingerprints (%s store)",
            len(self._hashes), self._store.name,
        )
        return True

    # --- Fingerprinting ---

    async def compute_fingerprint(
        self, category: str, config: CategoryConfig | None = None
    ) -> str:
        """Fingerprint a category's config (current config when omitted)."""
        self._require_known(category)
        if config is None:
            config = self.category_config(category)
        return compute_fingerprint(
            config,
            global_style=self.global_style(),
            style_settings=self.style_settings(category),
            hash_provider=self._hash_provider,
        )

    # --- Change detection ---

    async def has_config_changed(self, category: str) -> CategoryChange:
        """Compare one category's current and stored fingerprints."""
        current = await self.compute_fingerprint(category)
        stored = self._hashes.get(category)
        return CategoryChange(
            category=category,
            current_hash=current,
            stored_hash=stored,
            has_changed=current != stored,
            is_new=stored is None,
        )

    async def detect_changes(self) -> ChangeReport:
        """Scan every known category. Never writes the store."""
        if not self._enabled:
            return ChangeReport()

        report = ChangeReport()
        with operation_context("detect_changes"):
            for category in self._categories:
                set_category_context(category)
                change = await self.has_config_changed(category)
                report.all_categories.append(change)
                if change.has_changed:
                    report.changed_categories.append(ChangedCategory(
                        category=category,
                        reason=(
                            "first_generation" if change.is_new
                            else "configuration_changed"
                        ),
                        old_hash=change.stored_hash,
                        new_hash=change.current_hash,
                    ))
                    logger.debug("Configuration changed (new=%s)", change.is_new)
        report.has_changes = bool(report.changed_categories)
        return report

    # --- Regeneration ---

    async def regenerate_changed(
        self, categories: Iterable[str] | None = None
    ) -> RegenerationPlan:
        """Regenerate changed categories plus any explicitly requested ones.

        Without a request and without changes this returns immediately:
        nothing is written and no notification is emitted.
        """
        report = await self.detect_changes()
        requested = None if categories is None else list(categories)

        if requested is None and not report.has_changes:
            return RegenerationPlan(
                regenerated=[],
                skipped=[c.category for c in report.all_categories],
                change_detection=report,
                message=NO_CHANGES_MESSAGE,
            )

        to_regenerate = set(requested or []) | set(report.changed_names)
        for name in sorted(to_regenerate - set(self._categories)):
            logger.warning("Ignoring unknown category %r", name)

        plan = RegenerationPlan(change_detection=report)
        with operation_context("regenerate_changed"):
            for change in report.all_categories:
                category = change.category
                set_category_context(category)
                if category in to_regenerate:
                    plan.regenerated.append(category)
                    await self._update_stored_hash(category, change.current_hash)
                    self._emit(events.CATEGORY_STARTED, {
                        "category": category,
                        "reason": "config_changed" if change.has_changed else "forced",
                        "hash": change.current_hash,
                    })
                else:
                    plan.skipped.append(category)
                    self._emit(events.SKIPPED, {
                        "category": category,
                        "reason": "no_changes",
                        "hash": change.current_hash,
                    })

        self.last_generation_time = _utc_now()
        plan.message = (
            f"Regenerating {len(plan.regenerated)} categories, "
            f"skipping {len(plan.skipped)}"
        )
        logger.info(plan.message)
        return plan

    async def force_regenerate_all(self) -> ForceResult:
        """Forget every fingerprint so the next pass regenerates everything."""
        self._hashes.clear()
        await self._store_call("clear", self._store.clear())
        self._emit(events.FORCE_ALL, {
            "categories": list(self._categories),
            "timestamp": _utc_now(),
        })
        return ForceResult(
            regenerated=list(self._categories),
            message="Force regenerating all categories",
        )

    async def force_regenerate_category(self, category: str) -> ForceResult:
        """Forget one category's fingerprint so the next pass regenerates it."""
        self._require_known(category)
        self._hashes.pop(category, None)
        await self._store_call("delete", self._store.delete(category))
        self._emit(events.FORCE_CATEGORY, {
            "category": category,
            "timestamp": _utc_now(),
        })
        return ForceResult(
            regenerated=[category],
            message=f"Force regenerating {category} category",
        )

    async def reset(self) -> None:
        """Clear all in-memory state and persisted records."""
        self._hashes.clear()
        self.last_generation_time = None
        await self._store_call("clear", self._store.clear())

    # --- Estimation ---

    def changed_inputs(
        self, changed: Iterable[str | ChangedCategory]
    ) -> list[ChangedCategoryInput]:
        """Attach current config snapshots to changed categories."""
        inputs: list[ChangedCategoryInput] = []
        for item in changed:
            category = item if isinstance(item, str) else item.category
            inputs.append(ChangedCategoryInput(
                category=category, config=self.category_config(category),
            ))
        return inputs

    def estimate_regeneration_cost(
        self, changed: Iterable[str | ChangedCategory]
    ) -> CostEstimate:
        return cost_calculator.estimate_regeneration_cost(
            self.changed_inputs(changed),
            active_provider=self._active_provider(),
            pricing=self._pricing,
        )

    def estimate_regeneration_time(
        self, changed: Iterable[str | ChangedCategory]
    ) -> TimeEstimate:
        return cost_calculator.estimate_regeneration_time(
            self.changed_inputs(changed),
            seconds_per_trait=self._seconds_per_trait,
        )

    async def estimate_cache_savings(
        self, changed: Iterable[str | ChangedCategory]
    ) -> CacheSavings:
        return await cost_calculator.estimate_cache_savings(
            self.changed_inputs(changed),
            oracle=self._oracle,
            active_provider=self._active_provider(),
            pricing=self._pricing,
            seconds_per_trait=self._seconds_per_trait,
        )

    # --- Settings & status ---

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        self._emit(events.ENABLED_CHANGED, {"enabled": enabled})

    def is_enabled(self) -> bool:
        return self._enabled

    def set_change_threshold(self, threshold: float) -> None:
        self._change_threshold = max(0.0, min(1.0, float(threshold)))

    def get_status(self) -> TrackerStatus:
        return TrackerStatus(
            is_enabled=self._enabled,
            last_generation_time=self.last_generation_time,
            stored_hashes=dict(self._hashes),
            change_threshold=self._change_threshold,
        )

    # --- Internals ---

    async def _update_stored_hash(self, category: str, fingerprint: str) -> None:
        # Memory follows the store: an escaping CorruptRecord leaves it unchanged
        await self._store_call(
            "upsert", self._store.upsert(category, fingerprint, _utc_now())
        )
        self._hashes[category] = fingerprint

    async def _store_call(self, action: str, awaitable: Any) -> None:
        """Await a store write; failures are logged and absorbed."""
        try:
            await awaitable
        except StoreUnavailable as e:
            logger.error("Fingerprint store %s failed (%s): %s",
                         action, self._store.name, e)

    def _emit(self, event_name: str, payload: dict[str, Any]) -> None:
        try:
            self._events.emit(event_name, payload)
        except Exception:
            logger.exception("Event sink failed for %s", event_name)

    def _require_known(self, category: str) -> None:
        if category not in self._categories:
            raise ValueError(
                f"Unknown category {category!r}; known: {', '.join(self._categories)}"
            )

    def _active_provider(self) -> str:
        try:
            return self._resolver.get_active_provider_name()
        except Exception as e:
            fallback = next(iter(self._pricing))
            logger.warning("Active provider lookup failed, using %s: %s", fallback, e)
            return fallback

    # --- Provider access (failures fall back to defaults) ---

    def category_config(self, category: str) -> CategoryConfig:
        try:
            return self._provider.get_category_config(category) or CategoryConfig()
        except Exception as e:
            logger.warning("Config provider failed for %s: %s", category, e)
            return CategoryConfig()

    def global_style(self) -> GlobalStyleSettings:
        try:
            return self._provider.get_global_style_settings() or GlobalStyleSettings()
        except Exception as e:
            logger.warning("Global style lookup failed: %s", e)
            return GlobalStyleSettings()

    def style_settings(self, category: str) -> StyleEngineSettings:
        try:
            return (
                self._provider.get_style_engine_settings(category)
                or StyleEngineSettings()
            )
        except Exception as e:
            logger.warning("Style engine lookup failed for %s: %s", category, e)
            return StyleEngineSettings()
