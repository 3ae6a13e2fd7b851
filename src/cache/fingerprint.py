# src/cache/fingerprint.py — v3
"""Deterministic configuration fingerprinting.

A category fingerprint is the digest of a canonical JSON record built from
the category config plus the relevant slices of global style and
style-engine settings. Keys are sorted at every nesting level so property
order never affects the digest.

Primary digest: SHA-256 (hex). Degraded mode: 32-bit polynomial rolling
hash (base-36), which detects changes but is NOT collision resistant.
"""

from __future__ import annotations

import hashlib
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from smartregen.core.errors import HashFailure
from smartregen.core.models import (
    CategoryConfig,
    GlobalStyleSettings,
    StyleEngineSettings,
)

logger = logging.getLogger(__name__)

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


# === CANONICAL RECORD ===


def build_hash_payload(
    config: CategoryConfig,
    global_style: GlobalStyleSettings | None = None,
    style_settings: StyleEngineSettings | None = None,
) -> dict[str, Any]:
    """Collect every parameter that affects trait generation for a category."""
    global_style = global_style or GlobalStyleSettings()
    style_settings = style_settings or StyleEngineSettings()
    return {
        "num_traits": config.num_traits,
        "complexity": config.complexity,
        "color_seed": config.color_seed,
        "generation_mode": config.generation_mode,
        "ai_options": config.ai_options,
        "global_style": global_style.model_dump(),
        "style_settings": style_settings.model_dump(),
    }


def canonicalize(payload: Any) -> str:
    """Serialize with sorted keys and fixed separators.

    ensure_ascii keeps the output pure ASCII so the rolling hash sees the
    same code units on every platform.
    """
    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
        default=str,
    )


# === HASH PROVIDERS ===


class HashProvider(ABC):
    """Digest strategy for canonical configuration strings."""

    name: str = "abstract"

    @property
    def collision_resistant(self) -> bool:
        return False

    @abstractmethod
    def digest(self, data: str) -> str:
        """Return the encoded digest of data."""


class HashlibHashProvider(HashProvider):
    """Cryptographic digest via hashlib, lowercase hex."""

    def __init__(self, algorithm: str = "sha256") -> None:
        # Fails fast with ValueError when the runtime lacks the algorithm.
        hashlib.new(algorithm)
        self._algorithm = algorithm
        self.name = algorithm

    @property
    def collision_resistant(self) -> bool:
        return True

    def digest(self, data: str) -> str:
        return hashlib.new(self._algorithm, data.encode("utf-8")).hexdigest()


class Sha256HashProvider(HashlibHashProvider):
    """SHA-256 hex digest (64 chars)."""

    def __init__(self) -> None:
        super().__init__("sha256")


class RollingHashProvider(HashProvider):
    """Weak fallback: 32-bit polynomial hash (x31), base-36 encoded.

    Change detection only. Two different configs can collide.
    """

    name = "rolling32"

    def digest(self, data: str) -> str:
        return rolling_hash_32(data)


class FallbackHashProvider(HashProvider):
    """Use the primary provider, switching to the fallback if it raises."""

    def __init__(self, primary: HashProvider, fallback: HashProvider) -> None:
        self._primary = primary
        self._fallback = fallback
        self.name = f"{primary.name}+{fallback.name}"

    @property
    def collision_resistant(self) -> bool:
        return self._primary.collision_resistant

    def digest(self, data: str) -> str:
        try:
            return self._primary.digest(data)
        except Exception as e:
            logger.warning(
                "%s hashing failed, using %s fallback: %s",
                self._primary.name, self._fallback.name, e,
            )
        try:
            return self._fallback.digest(data)
        except Exception as e:
            raise HashFailure(
                f"Both {self._primary.name} and {self._fallback.name} failed"
            ) from e


def create_hash_provider(algorithm: str = "sha256") -> HashProvider:
    """Resolve the configured algorithm, degrading to the rolling hash.

    Args:
        algorithm: hashlib algorithm name.

    Returns:
        FallbackHashProvider wrapping the hashlib algorithm, or a bare
        RollingHashProvider when the algorithm is unavailable.
    """
    try:
        primary = HashlibHashProvider(algorithm)
    except ValueError:
        logger.warning(
            "Hash algorithm %r unavailable; fingerprints use the weak "
            "32-bit rolling hash (no collision resistance)",
            algorithm,
        )
        return RollingHashProvider()
    return FallbackHashProvider(primary, RollingHashProvider())


# === FINGERPRINT ===


def compute_fingerprint(
    config: CategoryConfig,
    global_style: GlobalStyleSettings | None = None,
    style_settings: StyleEngineSettings | None = None,
    hash_provider: HashProvider | None = None,
) -> str:
    """Compute the fingerprint of a category configuration.

    Args:
        config: Category generation parameters.
        global_style: Global style slice. None = defaults.
        style_settings: Style-engine slice for the category. None = defaults.
        hash_provider: Digest strategy. Defaults to SHA-256 with fallback.

    Returns:
        Encoded digest string.
    """
    provider = hash_provider or create_hash_provider()
    payload = build_hash_payload(config, global_style, style_settings)
    return provider.digest(canonicalize(payload))


def rolling_hash_32(text: str) -> str:
    """hash = hash * 31 + code_unit, wrapped to signed 32-bit, abs, base-36."""
    if not text:
        return "0"
    h = 0
    for char in text:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return _to_base36(abs(h))


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))
