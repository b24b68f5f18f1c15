"""
Section Installer -- Concurrency Tests

Concurrent installs into the same theme must not lose settings schema
entries to a stale read-modify-write.
"""

import asyncio
import json

import pytest

from engine.kernel.asset_reader import AssetReader
from engine.kernel.installer import SectionInstaller
from engine.kernel.schema_merge import count_entries
from engine.kernel.theme_api import MemoryThemeApi
from engine.kernel.types import SETTINGS_SCHEMA_KEY, InstallationRequest, Theme

SHOP = "busy-shop.myshopify.com"


class SlowThemeApi(MemoryThemeApi):
    """Yields to the event loop inside every read and write to widen race windows."""

    async def get_asset(self, shop, theme_id, key):
        value = await super().get_asset(shop, theme_id, key)
        await asyncio.sleep(0.01)
        return value

    async def put_asset(self, shop, theme_id, key, value):
        await asyncio.sleep(0.01)
        await super().put_asset(shop, theme_id, key, value)


class TestConcurrentInstalls:
    @pytest.fixture
    def api(self):
        api = SlowThemeApi({SHOP: [Theme(1, "Dawn", "main"), Theme(2, "Draft", "unpublished")]})
        api.seed_asset(SHOP, 1, SETTINGS_SCHEMA_KEY, "[]")
        api.seed_asset(SHOP, 2, SETTINGS_SCHEMA_KEY, "[]")
        return api

    @pytest.fixture
    def section_ids(self, roots, make_section):
        ids = [f"section-{i}" for i in range(5)]
        for section_id in ids:
            make_section(roots[0], section_id, schema=json.dumps({"name": section_id}))
        return ids

    @pytest.mark.asyncio
    async def test_different_sections_same_theme_all_merged(self, roots, api, section_ids):
        installer = SectionInstaller(AssetReader(roots), api)

        results = await asyncio.gather(
            *(installer.install(InstallationRequest(shop=SHOP, section_id=s)) for s in section_ids)
        )

        assert all(r.outcome("schema").status == "installed" for r in results)
        schema = json.loads(api.asset(SHOP, 1, SETTINGS_SCHEMA_KEY))
        assert sorted(entry["name"] for entry in schema) == section_ids

    @pytest.mark.asyncio
    async def test_same_section_in_parallel_written_once(self, roots, api, section_ids):
        installer = SectionInstaller(AssetReader(roots), api)

        results = await asyncio.gather(
            *(installer.install(InstallationRequest(shop=SHOP, section_id="section-0")) for _ in range(4))
        )

        schema = json.loads(api.asset(SHOP, 1, SETTINGS_SCHEMA_KEY))
        assert count_entries(schema, "section-0") == 1
        assert sorted(r.outcome("schema").status for r in results) == ["installed", "skipped", "skipped", "skipped"]

    @pytest.mark.asyncio
    async def test_themes_are_independent(self, roots, api, section_ids):
        installer = SectionInstaller(AssetReader(roots), api)

        await asyncio.gather(
            installer.install(InstallationRequest(shop=SHOP, section_id="section-0", theme_id=1)),
            installer.install(InstallationRequest(shop=SHOP, section_id="section-0", theme_id=2)),
        )

        for theme_id in (1, 2):
            schema = json.loads(api.asset(SHOP, theme_id, SETTINGS_SCHEMA_KEY))
            assert [entry["name"] for entry in schema] == ["section-0"]


class TestThemeLocks:
    def test_one_lock_per_theme(self, roots):
        installer = SectionInstaller(AssetReader(roots), MemoryThemeApi({}))

        first = installer._get_lock(SHOP, 1)

        assert installer._get_lock(SHOP, 1) is first
        assert installer._get_lock(SHOP, 2) is not first
        assert installer._get_lock("other-shop.myshopify.com", 1) is not first
        assert len(installer._locks) == 3
