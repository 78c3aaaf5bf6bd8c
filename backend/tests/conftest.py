"""Test fixtures for the plugin archiver."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Mapping

import pytest
import requests

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from plugin_archiver.core.config import Settings  # noqa: E402
from plugin_archiver.db.blob_store import BlobStore  # noqa: E402
from plugin_archiver.db.sqlite import SQLiteDatabase  # noqa: E402

SOURCE_BASE_URL = "https://cdn.test/wp/plugins"
SLUG = "hello-dolly"


class FakeResponse:
    def __init__(self, status_code: int, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


class FakeSourceHost:
    """Serves directory listings and file bodies for one package from a nested dict."""

    def __init__(
        self,
        slug: str,
        tree: Mapping[str, Any],
        failing: set[str] | None = None,
        unreachable: set[str] | None = None,
    ) -> None:
        self.prefix = f"{SOURCE_BASE_URL}/{slug}/trunk"
        self.tree = tree
        self.failing = failing or set()
        self.unreachable = unreachable or set()
        self.requested: list[str] = []

    def get(self, url: str, timeout: float | None = None) -> FakeResponse:
        self.requested.append(url)
        if not url.startswith(self.prefix):
            return FakeResponse(404)
        path = url[len(self.prefix) :]
        if path in self.unreachable:
            raise requests.ConnectionError(f"connection refused: {url}")
        if path in self.failing:
            return FakeResponse(503)
        node: Any = self.tree
        for part in [segment for segment in path.split("/") if segment]:
            if not isinstance(node, Mapping) or part not in node:
                return FakeResponse(404)
            node = node[part]
        if isinstance(node, Mapping):
            return FakeResponse(200, render_listing(node).encode("utf-8"))
        return FakeResponse(200, node)


def render_listing(node: Mapping[str, Any]) -> str:
    items = ['<li><a href="../">..</a></li>']
    for name, child in node.items():
        if isinstance(child, Mapping):
            items.append(f'<li><a href="{name}/">{name}/</a></li>')
        else:
            items.append(f'<li><a href="{name}">{name}</a></li>')
    return "<html><body><ul>" + "".join(items) + "</ul></body></html>"


SAMPLE_TREE = {
    "readme.txt": b"=== Hello Dolly ===\n",
    "sub": {
        "a.php": b"<?php echo 'a';",
        "b.php": b"<?php echo 'b';",
    },
}


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset cached dependencies and environment between tests."""
    monkeypatch.setenv("PARC_DB_PATH", str(tmp_path / "store.db"))
    monkeypatch.setenv("PARC_SOURCE_BASE_URL", SOURCE_BASE_URL)
    monkeypatch.delenv("PARC_CONFIG", raising=False)

    from plugin_archiver.api import dependencies as deps
    from plugin_archiver.core.config import get_settings

    def _clear() -> None:
        get_settings.cache_clear()
        deps.get_app_settings.cache_clear()
        if deps._DB is not None:
            deps._DB.close()
        deps._DB = None
        deps._SESSION = None
        deps._ARCHIVE_SERVICE = None

    _clear()
    yield
    _clear()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(source_base_url=SOURCE_BASE_URL, db_path=tmp_path / "store.db")


@pytest.fixture
def store(settings: Settings) -> BlobStore:
    with SQLiteDatabase(settings.db_path) as db:
        db.ensure_schema()
        yield BlobStore(db)


@pytest.fixture
def source_host() -> FakeSourceHost:
    return FakeSourceHost(SLUG, SAMPLE_TREE)


@pytest.fixture
def make_client(settings: Settings, store: BlobStore):
    """Build TestClients whose archive service talks to a given fake source host."""
    from fastapi.testclient import TestClient

    from plugin_archiver.api.dependencies import get_archive_service
    from plugin_archiver.app import app
    from plugin_archiver.archive.service import ArchiveService

    clients: list[TestClient] = []

    def _make(host: FakeSourceHost) -> TestClient:
        service = ArchiveService(settings, store, host)
        app.dependency_overrides[get_archive_service] = lambda: service
        test_client = TestClient(app)
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        test_client.__exit__(None, None, None)
    app.dependency_overrides.clear()
