"""Integration tests for section, theme, and admin routes."""

from __future__ import annotations

import base64
import json

import pytest

from backend.models.section import CreateSectionRequest
from engine.kernel.types import SETTINGS_SCHEMA_KEY

pytestmark = pytest.mark.asyncio(loop_scope="session")

TEST_SHOP = "test-shop.myshopify.com"
SHOP_PARAMS = {"shop": TEST_SHOP}


def seed(section_repo, section_id: str = "faq-1", **fields) -> None:
    section_repo.create(
        CreateSectionRequest(
            id=section_id,
            title=fields.pop("title", "FAQ #1"),
            content=fields.pop("content", "<div>faq</div>"),
            **fields,
        )
    )


# ── health / admin ──────────────────────────────────────────────────────────


async def test_health(async_client):
    res = await async_client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


class TestAdminRoutes:
    async def test_login(self, async_client):
        res = await async_client.post("/admin/login", json={"password": "test-admin-password"})
        assert res.status_code == 200
        assert res.json()["token"]
        assert "session=" in res.headers["set-cookie"]

    async def test_login_wrong_password(self, async_client):
        res = await async_client.post("/admin/login", json={"password": "nope"})
        assert res.status_code == 401

    async def test_login_rejects_unknown_fields(self, async_client):
        res = await async_client.post("/admin/login", json={"password": "x", "user": "admin"})
        assert res.status_code == 422

    async def test_logout(self, async_client):
        res = await async_client.post("/admin/logout")
        assert res.status_code == 200
        assert res.json()["message"] == "Logged out successfully"

    async def test_login_token_opens_admin_routes(self, async_client):
        login = await async_client.post("/admin/login", json={"password": "test-admin-password"})
        token = login.json()["token"]
        res = await async_client.delete("/api/sections/ghost", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 200


# ── browse ──────────────────────────────────────────────────────────────────


class TestBrowseRoutes:
    async def test_list_empty(self, async_client):
        res = await async_client.get("/api/sections")
        assert res.status_code == 200
        assert res.json() == []

    async def test_list(self, async_client, section_repo):
        seed(section_repo, "hero-banner", title="Hero Banner", categories=["hero"])
        seed(section_repo)

        res = await async_client.get("/api/sections")

        data = res.json()
        assert [s["id"] for s in data] == ["faq-1", "hero-banner"]
        assert data[0]["categories"] == ["general"]
        assert data[0]["description"] == "No description available"
        assert data[1]["preview_url"] == "/api/sections/hero-banner/preview"
        assert data[1]["preview_source"] == "placeholder"

    async def test_detail(self, async_client, section_repo):
        seed(section_repo, style=".faq{}")

        res = await async_client.get("/api/sections/faq-1")

        assert res.status_code == 200
        data = res.json()
        assert data["content"] == "<div>faq</div>"
        assert data["has_css"] is True
        assert data["has_js"] is False
        assert data["has_schema"] is False
        assert data["created_at"] is not None

    async def test_detail_not_found(self, async_client):
        res = await async_client.get("/api/sections/ghost")
        assert res.status_code == 404

    async def test_detail_invalid_id(self, async_client):
        res = await async_client.get("/api/sections/Bad_Id")
        assert res.status_code == 400

    async def test_placeholder_preview(self, async_client):
        first = await async_client.get("/api/sections/hero-banner/preview")
        second = await async_client.get("/api/sections/hero-banner/preview")

        assert first.status_code == 200
        assert first.headers["content-type"].startswith("image/svg+xml")
        assert first.content == second.content
        assert b"Hero Banner" in first.content

    async def test_uploaded_preview(self, async_client, section_repo):
        png = b"\x89PNG\r\n\x1a\npixels"
        seed(section_repo, preview={"filename": "shot.png", "data": base64.b64encode(png).decode()})

        res = await async_client.get("/api/sections/faq-1/preview")

        assert res.headers["content-type"] == "image/png"
        assert res.content == png


# ── admin library management ────────────────────────────────────────────────


class TestLibraryAdminRoutes:
    async def test_upload_requires_admin(self, async_client):
        res = await async_client.post("/api/sections", json={"id": "x", "title": "X", "content": "<p></p>"})
        assert res.status_code == 401

    async def test_upload(self, async_client, admin_headers, library_roots):
        res = await async_client.post(
            "/api/sections",
            json={
                "id": "Todo List",
                "title": "Todo List",
                "categories": "features, free",
                "content": "<ul></ul>",
                "script": "init()",
                "schema_fragment": {"name": "todo-list"},
            },
            headers=admin_headers,
        )

        assert res.status_code == 201
        assert res.json()["section_id"] == "todo-list"
        assert (library_roots[0] / "todo-list" / "script.js").read_text() == "init()"

    async def test_upload_duplicate(self, async_client, admin_headers, section_repo):
        seed(section_repo)

        res = await async_client.post(
            "/api/sections",
            json={"id": "faq-1", "title": "Again", "content": "<p></p>"},
            headers=admin_headers,
        )

        assert res.status_code == 409

    async def test_upload_missing_content(self, async_client, admin_headers):
        res = await async_client.post("/api/sections", json={"id": "x", "title": "X"}, headers=admin_headers)
        assert res.status_code == 422

    async def test_upload_blank_title(self, async_client, admin_headers):
        res = await async_client.post(
            "/api/sections",
            json={"id": "x", "title": " ", "content": "<p></p>"},
            headers=admin_headers,
        )
        assert res.status_code == 400

    async def test_update(self, async_client, admin_headers, section_repo):
        seed(section_repo)

        res = await async_client.put(
            "/api/sections/faq-1",
            json={"title": "FAQ v2", "categories": ["faq"]},
            headers=admin_headers,
        )

        assert res.status_code == 200
        metadata = section_repo.get("faq-1").metadata
        assert metadata.title == "FAQ v2"
        assert metadata.categories == ["faq"]

    async def test_update_missing(self, async_client, admin_headers):
        res = await async_client.put("/api/sections/ghost", json={"title": "x"}, headers=admin_headers)
        assert res.status_code == 404
        assert res.json()["detail"]["attempted_paths"]

    async def test_save_preview(self, async_client, admin_headers, section_repo, preview_cache_dir):
        seed(section_repo)
        svg = b"<svg xmlns='http://www.w3.org/2000/svg'/>"

        res = await async_client.put(
            "/api/sections/faq-1/preview",
            json={"filename": "faq.svg", "data": base64.b64encode(svg).decode()},
            headers=admin_headers,
        )

        assert res.status_code == 200
        assert (preview_cache_dir / "faq-1" / "preview.svg").read_bytes() == svg
        preview = await async_client.get("/api/sections/faq-1/preview")
        assert preview.content == svg

    async def test_delete_is_idempotent(self, async_client, admin_headers, section_repo):
        seed(section_repo)

        first = await async_client.delete("/api/sections/faq-1", headers=admin_headers)
        second = await async_client.delete("/api/sections/faq-1", headers=admin_headers)

        assert first.json() == {"section_id": "faq-1", "deleted": True}
        assert second.status_code == 200
        assert second.json()["deleted"] is False


# ── themes / install ────────────────────────────────────────────────────────


class TestInstallRoutes:
    async def test_themes(self, async_client):
        res = await async_client.get("/api/themes", params=SHOP_PARAMS)

        assert res.status_code == 200
        assert res.json()[0] == {"id": 1, "name": "Dawn", "role": "main"}

    async def test_themes_unknown_shop(self, async_client):
        res = await async_client.get("/api/themes", params={"shop": "stranger.myshopify.com"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Store not authorized"

    async def test_themes_shop_from_header(self, async_client):
        res = await async_client.get("/api/themes", headers={"X-Shopify-Shop-Domain": TEST_SHOP})
        assert res.status_code == 200

    async def test_install_into_explicit_theme(self, async_client, section_repo, theme_api):
        seed(section_repo)

        res = await async_client.post(
            "/api/sections/install",
            params=SHOP_PARAMS,
            json={"section_id": "faq-1", "theme_id": 42},
        )

        assert res.status_code == 200
        data = res.json()
        assert data["success"] is True
        assert data["theme_name"] == "Sense"
        assert {a["asset"]: a["status"] for a in data["assets"]} == {
            "template": "installed",
            "style": "skipped",
            "script": "skipped",
            "schema": "skipped",
        }
        assert theme_api.asset(TEST_SHOP, 42, "sections/faq-1.liquid") == "<div>faq</div>"

    async def test_install_reports_failed_companion(self, async_client, section_repo, theme_api):
        seed(section_repo, style=".faq{}")
        theme_api.fail_puts.add("assets/faq-1.css")

        res = await async_client.post("/api/sections/install", params=SHOP_PARAMS, json={"section_id": "faq-1"})

        assert res.status_code == 200
        data = res.json()
        assert data["success"] is True
        assert "style failed" in data["message"]

    async def test_install_merges_schema(self, async_client, section_repo, theme_api):
        seed(section_repo, schema_fragment={"name": "faq-1", "settings": []})
        theme_api.seed_asset(TEST_SHOP, 1, SETTINGS_SCHEMA_KEY, "[]")

        for _ in range(2):
            await async_client.post("/api/sections/install", params=SHOP_PARAMS, json={"section_id": "faq-1"})

        assert json.loads(theme_api.asset(TEST_SHOP, 1, SETTINGS_SCHEMA_KEY)) == [{"name": "faq-1", "settings": []}]

    async def test_install_template_failure(self, async_client, section_repo, theme_api):
        seed(section_repo)
        theme_api.fail_puts.add("sections/faq-1.liquid")

        res = await async_client.post("/api/sections/install", params=SHOP_PARAMS, json={"section_id": "faq-1"})

        assert res.status_code == 502

    async def test_install_missing_section(self, async_client):
        res = await async_client.post("/api/sections/install", params=SHOP_PARAMS, json={"section_id": "ghost"})

        assert res.status_code == 404
        assert len(res.json()["detail"]["attempted_paths"]) == 2

    async def test_install_no_active_theme(self, async_client, section_repo, theme_api):
        seed(section_repo)
        theme_api.themes[TEST_SHOP] = []

        res = await async_client.post("/api/sections/install", params=SHOP_PARAMS, json={"section_id": "faq-1"})

        assert res.status_code == 404

    async def test_install_unauthorized_shop(self, async_client):
        res = await async_client.post("/api/sections/install", json={"section_id": "faq-1"})
        assert res.status_code == 401

    async def test_install_rejects_unknown_fields(self, async_client):
        res = await async_client.post(
            "/api/sections/install",
            params=SHOP_PARAMS,
            json={"section_id": "faq-1", "adminToken": "x"},
        )
        assert res.status_code == 422
