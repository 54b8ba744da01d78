from __future__ import annotations

import io
import tarfile
from pathlib import Path

import httpx
import pytest

DEMO_PACKAGE_JSON = """{
  "name": "demo-server",
  "version": "1.0.0",
  "scripts": {
    "start": "node src/index.js"
  }
}
"""

ENV_VARS = (
    "TEMPLATE_SCAFFOLD_HOST",
    "TEMPLATE_SCAFFOLD_MODE",
    "TEMPLATE_SCAFFOLD_TIMEOUT",
    "GH_TOKEN",
    "GITHUB_TOKEN",
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config layer at an empty per-test location."""
    config_path = tmp_path_factory.mktemp("config") / "config.yaml"
    monkeypatch.setenv("TEMPLATE_SCAFFOLD_CONFIG", str(config_path))
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return config_path


@pytest.fixture()
def template_tree(tmp_path: Path) -> Path:
    """A template-hosting repository working tree."""
    root = tmp_path / "templates-repo"
    demo = root / "template" / "demo-server"
    (demo / "src").mkdir(parents=True)
    (demo / "package.json").write_text(DEMO_PACKAGE_JSON, encoding="utf-8")
    (demo / ".npmignore").write_text("node_modules\n", encoding="utf-8")
    (demo / "src" / "index.js").write_text("console.log('demo')\n", encoding="utf-8")

    web = root / "template" / "web"
    web.mkdir(parents=True)
    (web / ".gitignore").write_text("dist\n", encoding="utf-8")
    (web / ".npmignore").write_text("src\n", encoding="utf-8")
    (web / "index.html").write_text("<html></html>\n", encoding="utf-8")

    (root / "README.md").write_text("# templates\n", encoding="utf-8")
    return root


def build_archive(root: Path, top_level: str) -> bytes:
    """Pack ``root`` the way git hosts serve tarballs: one wrapping directory."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        archive.add(root, arcname=top_level)
    return buffer.getvalue()


@pytest.fixture()
def template_archive(template_tree: Path) -> bytes:
    return build_archive(template_tree, "templates-main")


@pytest.fixture()
def archive_requests() -> list[httpx.Request]:
    return []


@pytest.fixture()
def mock_client(template_archive: bytes, archive_requests: list[httpx.Request]) -> httpx.AsyncClient:
    """HTTP client serving ``acme/templates`` tarballs; everything else is 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        archive_requests.append(request)
        path = request.url.path
        if path.startswith("/acme/templates/") and path.endswith(".tar.gz"):
            return httpx.Response(200, content=template_archive)
        return httpx.Response(404, text="Not Found")

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
