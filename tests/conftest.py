"""Shared pytest fixtures and fakes for tplctl tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import requests
from click.testing import CliRunner

from tplctl.config.settings import TplSettings
from tplctl.domain.errors import RegistryFetchError, TemplateNotFound
from tplctl.infrastructure import installer


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user config and env overrides out of every test."""
    for var in (
        "TPLCTL_CONFIG",
        "TPLCTL_JSON_OUTPUT",
        "TPLCTL_QUIET",
        "TPLCTL_VERBOSE",
        "TPLCTL_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> TplSettings:
    """Default settings with no TOML file in scope."""
    return TplSettings.from_cli(start=tmp_path)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeLocator:
    """PackageLocator backed by an explicit name -> directory mapping."""

    def __init__(self, packages: dict[str, Path]) -> None:
        self.packages = packages
        self.requested: list[str] = []

    def package_root(self, name: str) -> Path:
        self.requested.append(name)
        if name not in self.packages:
            raise TemplateNotFound(f"not installed: {name}", name=name)
        return self.packages[name]


class FakeRegistry:
    """Stands in for RegistryClient; ``versions`` maps name -> latest."""

    def __init__(self, versions: dict[str, str] | None = None, *, fail: bool = False) -> None:
        self.versions = versions or {}
        self.fail = fail
        self.queried: list[str] = []

    def latest_version(self, name: str) -> str:
        self.queried.append(name)
        if self.fail or name not in self.versions:
            raise RegistryFetchError("Registry returned HTTP 500", status=500)
        return self.versions[name]


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        payload: Any = None,
        *,
        content: bytes = b"",
        text: str | None = None,
    ) -> None:
        self.status_code = status_code
        self._payload = payload
        self._content = content
        self._text = text

    def json(self) -> Any:
        if self._text is not None:
            return json.loads(self._text)
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def iter_content(self, chunk_size: int = 1024) -> Any:
        for i in range(0, len(self._content), chunk_size):
            yield self._content[i : i + chunk_size]

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        return None


class FakeSession:
    """Minimal requests.Session replacement that records requested URLs."""

    def __init__(self, response: FakeResponse | Exception) -> None:
        self.response = response
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def fake_locator() -> type[FakeLocator]:
    return FakeLocator


@pytest.fixture
def fake_registry() -> type[FakeRegistry]:
    return FakeRegistry


@pytest.fixture
def fake_session() -> Callable[..., FakeSession]:
    """Build a FakeSession around a response (or an exception to raise)."""

    def _make(response: FakeResponse | Exception | None = None, **kwargs: Any) -> FakeSession:
        return FakeSession(response if response is not None else FakeResponse(**kwargs))

    return _make


# ---------------------------------------------------------------------------
# Template packages on disk
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture
def template_package(tmp_path: Path) -> Callable[..., Path]:
    """Factory for an installed-looking template package.

    Lays out ``<root>/package.json``, ``<root>/template.json`` and a
    ``template/`` tree built from *files* (relative path -> text). The
    template manifest lands at ``template/<manifest_path>``.
    """

    def _make(
        name: str = "cra-template-demo",
        *,
        version: str = "1.0.0",
        files: dict[str, str] | None = None,
        template_manifest: dict[str, Any] | None = None,
        descriptor: dict[str, Any] | None = None,
        with_template_dir: bool = True,
        manifest_path: str = "src/package.json",
    ) -> Path:
        root = tmp_path / "packages" / name
        _write_json(root / "package.json", {"name": name, "version": version})
        if descriptor is not None:
            _write_json(root / "template.json", descriptor)
        if with_template_dir:
            template_dir = root / "template"
            template_dir.mkdir(parents=True, exist_ok=True)
            for rel, text in (files or {}).items():
                dest = template_dir / rel
                dest.parent.mkdir(parents=True, exist_ok=True)
                dest.write_text(text, encoding="utf-8")
            if template_manifest is not None:
                _write_json(template_dir / manifest_path, template_manifest)
        return root

    return _make


@pytest.fixture
def install_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    """Replace the package-manager subprocess with a recorder."""
    calls: list[dict[str, Any]] = []

    def _fake_install(
        root: Path, dependencies: list[str], command: installer.InstallCommand
    ) -> None:
        calls.append({"root": root, "dependencies": list(dependencies), "command": command})

    monkeypatch.setattr(installer, "install", _fake_install)
    return calls
