# tests/unit/providers/test_unit_providers.py — v2
"""Tests for providers/ — config provider and runtime collaborators."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from smartregen.core.models import CategoryConfig, GlobalStyleSettings
from smartregen.providers.base_config_provider import NullConfigProvider
from smartregen.providers.dict_config_provider import DictConfigProvider
from smartregen.providers.runtime import (
    NullCacheSizeOracle,
    StaticCacheSizeOracle,
    StaticProviderResolver,
)
from smartregen.regeneration.tracker import ChangeTracker


class TestDictConfigProvider:
    def test_category_config(self, provider):
        cfg = provider.get_category_config("body")
        assert cfg.num_traits == 5
        assert cfg.generation_mode == "ai"

    def test_unknown_category_defaults(self, provider):
        assert provider.get_category_config("hat") == CategoryConfig()

    def test_style_engine_scoped_to_category(self, provider):
        body = provider.get_style_engine_settings("body")
        bg = provider.get_style_engine_settings("background")
        assert body.category_template == "round body"
        assert body.negative_prompt == "blurry"
        assert bg.category_template is None
        assert bg.master_style_prompt == "8-bit"

    def test_global_style(self, provider):
        assert provider.get_global_style_settings().active_preset == "retro"

    def test_update_category_config(self, provider):
        updated = provider.update_category_config("body", complexity=0.9)
        assert updated.complexity == 0.9
        assert updated.num_traits == 5
        assert provider.get_category_config("body").complexity == 0.9

    def test_set_global_style(self, provider):
        provider.set_global_style(GlobalStyleSettings(master_prompt="noir"))
        style = provider.get_global_style_settings()
        assert style.master_prompt == "noir"
        assert style.active_preset is None

    def test_set_style_engine_replaces_all(self, provider):
        provider.set_style_engine(
            master_style_prompt="pixel", category_templates={"hat": "tall hat"},
        )
        hat = provider.get_style_engine_settings("hat")
        body = provider.get_style_engine_settings("body")
        assert hat.master_style_prompt == "pixel"
        assert hat.category_template == "tall hat"
        assert body.category_template is None
        assert body.negative_prompt is None

    @pytest.mark.asyncio
    async def test_style_changes_alter_fingerprint(self, provider):
        tracker = ChangeTracker(["body"], provider)
        before = await tracker.compute_fingerprint("body")
        provider.set_style_engine(master_style_prompt="8-bit", active_preset="retro")
        after_engine = await tracker.compute_fingerprint("body")
        provider.set_global_style(GlobalStyleSettings(master_prompt="noir"))
        after_global = await tracker.compute_fingerprint("body")
        assert len({before, after_engine, after_global}) == 3

    def test_invalid_mode_rejected(self):
        with pytest.raises(ValidationError):
            DictConfigProvider({"categories": {"body": {"generation_mode": "magic"}}})

    def test_negative_traits_rejected(self):
        with pytest.raises(ValidationError):
            DictConfigProvider({"categories": {"body": {"num_traits": -1}}})

    def test_from_json_file(self, tmp_path, provider_data):
        path = tmp_path / "traits.json"
        path.write_text(json.dumps(provider_data))
        loaded = DictConfigProvider.from_json_file(path)
        assert loaded.get_category_config("background").num_traits == 10

    def test_from_json_file_rejects_list(self, tmp_path):
        path = tmp_path / "traits.json"
        path.write_text("[]")
        with pytest.raises(ValueError, match="JSON object"):
            DictConfigProvider.from_json_file(path)

    def test_empty(self):
        p = DictConfigProvider()
        assert p.get_category_config("body") == CategoryConfig()


class TestNullConfigProvider:
    def test_defaults(self):
        p = NullConfigProvider()
        assert p.get_category_config("x").num_traits == 0
        assert p.get_style_engine_settings("x").negative_prompt is None


class TestRuntime:
    @pytest.mark.asyncio
    async def test_oracles(self):
        assert await NullCacheSizeOracle().count_available("body") == 0
        oracle = StaticCacheSizeOracle({"body": 3})
        assert await oracle.count_available("body") == 3
        assert await oracle.count_available("eyes") == 0

    def test_resolver(self):
        assert StaticProviderResolver("openai").get_active_provider_name() == "openai"
