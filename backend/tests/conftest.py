"""
Pytest configuration and fixtures for section library service tests.

Every test gets its own library roots under tmp_path, an in-memory credential
store, and a MemoryThemeApi. The app's dependency providers are overridden so
nothing touches the real filesystem roots or the network.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("ADMIN_PASSWORD", "test-admin-password")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from backend import deps  # noqa: E402
from backend.auth import create_jwt  # noqa: E402
from backend.main import app  # noqa: E402
from backend.repos.credential_repo import MemoryCredentialStore  # noqa: E402
from backend.repos.section_repo import SectionRepo  # noqa: E402
from engine.kernel.asset_reader import AssetReader  # noqa: E402
from engine.kernel.installer import SectionInstaller  # noqa: E402
from engine.kernel.preview import PreviewResolver  # noqa: E402
from engine.kernel.theme_api import MemoryThemeApi  # noqa: E402
from engine.kernel.types import Theme  # noqa: E402

TEST_SHOP = "test-shop.myshopify.com"
TEST_TOKEN = "shpat_test_token"


@pytest.fixture
def library_roots(tmp_path):
    return [tmp_path / "sections", tmp_path / "public" / "sections"]


@pytest.fixture
def preview_cache_dir(tmp_path):
    return tmp_path / "public" / "section-previews"


@pytest.fixture
def section_repo(library_roots, preview_cache_dir):
    return SectionRepo(library_roots, preview_cache_dir)


@pytest.fixture
def preview_resolver(library_roots, preview_cache_dir):
    return PreviewResolver(AssetReader(library_roots), preview_cache_dir)


@pytest.fixture
def credential_store():
    return MemoryCredentialStore({TEST_SHOP: TEST_TOKEN})


@pytest.fixture
def theme_api():
    return MemoryThemeApi(
        {
            TEST_SHOP: [
                Theme(id=1, name="Dawn", role="main"),
                Theme(id=42, name="Sense", role="unpublished"),
            ]
        }
    )


@pytest.fixture
def installer(library_roots, theme_api):
    return SectionInstaller(AssetReader(library_roots), theme_api)


@pytest.fixture
def app_overrides(section_repo, preview_resolver, credential_store, installer):
    """Point the app's providers at this test's library and fakes."""
    app.dependency_overrides[deps.get_section_repo] = lambda: section_repo
    app.dependency_overrides[deps.get_preview_resolver] = lambda: preview_resolver
    app.dependency_overrides[deps.get_credential_store] = lambda: credential_store
    app.dependency_overrides[deps.get_installer] = lambda: installer
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(loop_scope="session")
async def async_client(app_overrides):
    """Async HTTP client against the ASGI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {create_jwt()}"}
