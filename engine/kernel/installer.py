"""
Section Kernel -- Installer

Deploys a section's asset set into a theme and reports per-asset outcomes.

    validate -> resolve theme -> resolve files -> write template (required)
      -> optional steps: style, script, schema (each tagged installed/skipped/failed)

Only the template write is fatal: it is what makes a section show up in the
theme editor. Optional steps never raise; whatever happens to them is
recorded in the InstallationResult. No rollback: a template write that has
started is not undone if a later step fails or the caller goes away.

The schema step is a read-modify-write of the theme-wide
config/settings_schema.json. It runs under a per-(shop, theme) asyncio lock
so two installs into the same theme in this process cannot both read a stale
copy. Cross-process writers are not serialized here.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from engine.kernel.asset_reader import AssetReader
from engine.kernel.errors import DeployFailed, InvalidRequest, SchemaMergeError, ThemeApiError
from engine.kernel.schema_merge import (
    dump_settings_schema,
    merge_fragment,
    parse_fragment,
    parse_settings_schema,
)
from engine.kernel.theme_api import ThemeApi
from engine.kernel.theme_resolver import ThemeResolver
from engine.kernel.types import (
    SETTINGS_SCHEMA_KEY,
    AssetName,
    AssetOutcome,
    InstallationRequest,
    InstallationResult,
    ResolvedSection,
    Theme,
    script_key,
    style_key,
    validate_section_id,
)

logger = logging.getLogger(__name__)

OptionalStep = Callable[[str, Theme, ResolvedSection], Awaitable[AssetOutcome]]


class SectionInstaller:
    """Orchestrates AssetReader + ThemeResolver + schema merging."""

    def __init__(
        self,
        reader: AssetReader,
        api: ThemeApi,
        resolver: ThemeResolver | None = None,
    ):
        self._reader = reader
        self._api = api
        self._resolver = resolver or ThemeResolver(api)
        # Never pruned: one entry per (shop, theme) installed into, which stays
        # small for the shops a single process serves.
        self._locks: dict[tuple[str, int], asyncio.Lock] = {}
        self._optional_steps: tuple[OptionalStep, ...] = (
            self._deploy_style,
            self._deploy_script,
            self._deploy_schema,
        )

    @property
    def resolver(self) -> ThemeResolver:
        return self._resolver

    def _get_lock(self, shop: str, theme_id: int) -> asyncio.Lock:
        """Per-theme lock serializing settings-schema writes (single process)."""
        key = (shop, theme_id)
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    async def install(self, request: InstallationRequest) -> InstallationResult:
        """
        Deploy one section.

        Raises:
            InvalidRequest: missing shop or bad section id
            NoActiveTheme: no explicit theme and no main theme
            SectionNotFound: no library root has the section's template
            DeployFailed: the template write failed
        """
        if not request.shop:
            raise InvalidRequest("Shop is required")
        section_id = validate_section_id(request.section_id)

        theme = await self._resolver.resolve_target(request.shop, request.theme_id)
        section = self._reader.resolve(section_id)

        logger.info(
            "installer: installing %s into theme %s (%s) for %s",
            section_id,
            theme.id,
            theme.name,
            request.shop,
        )

        result = InstallationResult(
            section_id=section_id,
            theme_id=theme.id,
            shop=request.shop,
            theme_name=theme.name,
        )

        entry = section.template_entry
        try:
            await self._api.put_asset(request.shop, theme.id, entry.key, entry.value)
        except ThemeApiError as e:
            logger.error("installer: template write failed for %s in theme %s: %s", section_id, theme.id, e)
            raise DeployFailed(section_id, theme.id, str(e)) from e
        result.assets.append(AssetOutcome(asset="template", key=entry.key, status="installed"))
        logger.info("installer: %s installed", entry.key)

        for step in self._optional_steps:
            outcome = await step(request.shop, theme, section)
            if outcome.status == "failed":
                logger.warning("installer: %s failed: %s", outcome.key, outcome.reason)
            else:
                logger.info("installer: %s %s", outcome.key, outcome.status)
            result.assets.append(outcome)

        return result

    # -- optional steps --

    async def _deploy_style(self, shop: str, theme: Theme, section: ResolvedSection) -> AssetOutcome:
        return await self._write_companion(shop, theme, "style", style_key(section.section_id), section.style)

    async def _deploy_script(self, shop: str, theme: Theme, section: ResolvedSection) -> AssetOutcome:
        return await self._write_companion(shop, theme, "script", script_key(section.section_id), section.script)

    async def _write_companion(
        self,
        shop: str,
        theme: Theme,
        asset: AssetName,
        key: str,
        content: str | None,
    ) -> AssetOutcome:
        if content is None:
            return AssetOutcome(asset=asset, key=key, status="skipped", reason="not present in library")
        try:
            await self._api.put_asset(shop, theme.id, key, content)
        except ThemeApiError as e:
            return AssetOutcome(asset=asset, key=key, status="failed", reason=str(e))
        return AssetOutcome(asset=asset, key=key, status="installed")

    async def _deploy_schema(self, shop: str, theme: Theme, section: ResolvedSection) -> AssetOutcome:
        key = SETTINGS_SCHEMA_KEY
        if section.schema_text is None:
            return AssetOutcome(asset="schema", key=key, status="skipped", reason="not present in library")

        try:
            fragment = parse_fragment(section.schema_text)
        except SchemaMergeError as e:
            return AssetOutcome(asset="schema", key=key, status="skipped", reason=str(e))

        async with self._get_lock(shop, theme.id):
            try:
                current_text = await self._api.get_asset(shop, theme.id, key)
            except ThemeApiError as e:
                return AssetOutcome(
                    asset="schema", key=key, status="skipped", reason=f"could not fetch settings schema: {e}"
                )
            if current_text is None:
                return AssetOutcome(asset="schema", key=key, status="skipped", reason="theme has no settings schema")

            try:
                current = parse_settings_schema(current_text)
            except SchemaMergeError as e:
                return AssetOutcome(asset="schema", key=key, status="skipped", reason=str(e))

            merged, changed = merge_fragment(current, fragment)
            if not changed:
                return AssetOutcome(
                    asset="schema",
                    key=key,
                    status="skipped",
                    reason=f"entry '{fragment['name']}' already present",
                )

            try:
                await self._api.put_asset(shop, theme.id, key, dump_settings_schema(merged))
            except ThemeApiError as e:
                return AssetOutcome(asset="schema", key=key, status="failed", reason=str(e))

        return AssetOutcome(asset="schema", key=key, status="installed")
