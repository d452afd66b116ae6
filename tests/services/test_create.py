"""Tests for the CreateService pipeline."""

from __future__ import annotations

import io
import json
import tarfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tplctl.config.settings import TplSettings
from tplctl.domain.errors import InstallFailure
from tplctl.domain.project import ProjectSpec
from tplctl.infrastructure import installer
from tplctl.services.create import CreateService

DEFAULT_TEMPLATE = "cra-template-liaapi-ts"


def _write_tarball(path: Path, manifest: dict[str, Any]) -> Path:
    data = json.dumps(manifest).encode()
    with tarfile.open(path, mode="w:gz") as tar:
        info = tarfile.TarInfo("package/package.json")
        info.size = len(data)
        tar.addfile(info, io.BytesIO(data))
    return path


@pytest.fixture
def default_pkg(template_package: Callable[..., Path]) -> Path:
    return template_package(
        DEFAULT_TEMPLATE,
        version="2.3.0",
        files={"src/index.ts": "export {}\n", "README.md": "# ${appName}\n", "gitignore": "dist\n"},
        template_manifest={"scripts": {"start": "node .", "build": "tsc"}},
        descriptor={"package": {"dependencies": {"express": "4.19.2"}}},
    )


@pytest.fixture
def service_factory(
    settings: TplSettings, fake_locator: Any, fake_registry: Any, default_pkg: Path
) -> Callable[..., CreateService]:
    def _make(
        packages: dict[str, Path] | None = None,
        *,
        registry: Any = None,
        settings_override: TplSettings | None = None,
    ) -> CreateService:
        locator = fake_locator(packages or {DEFAULT_TEMPLATE: default_pkg})
        return CreateService(
            settings_override or settings,
            locator_factory=lambda _root: locator,
            registry=registry or fake_registry({DEFAULT_TEMPLATE: "2.3.0"}),
        )

    return _make


class TestCreateSuccess:
    def test_default_template(
        self,
        service_factory: Callable[..., CreateService],
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        spec = ProjectSpec.for_directory(tmp_path / "my-app", origin_dir=tmp_path)
        result = service_factory().create(spec)

        assert result.ok, result.error
        assert result.op == "create_project"
        data = result.data
        assert data["name"] == "my-app"
        assert data["template"] == DEFAULT_TEMPLATE
        assert data["template_version"] == "2.3.0"
        assert data["resolution"] == "registryName"
        assert data["language"] == "ts"
        assert data["scripts"] == ["start", "build"]
        assert {"tsconfig.json", "package.json", "src/index.ts", "README.md", ".gitignore"} <= set(
            data["files_created"]
        )

        target = spec.target_path
        manifest = json.loads((target / "package.json").read_text())
        assert manifest["name"] == "my-app"
        assert manifest["dependencies"] == {"express": "4.19.2"}
        assert (target / "README.md").read_text() == "# my-app\n"

        assert len(install_calls) == 1
        assert install_calls[0]["root"] == target
        assert install_calls[0]["dependencies"] == [DEFAULT_TEMPLATE]
        assert install_calls[0]["command"].log_level == "error"

    def test_explicit_language_wins(
        self,
        service_factory: Callable[..., CreateService],
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        spec = ProjectSpec.for_directory(tmp_path / "js-app", language="js")
        result = service_factory().create(spec)
        assert result.data["language"] == "js"
        assert not (tmp_path / "js-app" / "tsconfig.json").exists()

    def test_local_file_template(
        self,
        service_factory: Callable[..., CreateService],
        template_package: Callable[..., Path],
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        local = template_package("cra-template-local", files={"a.txt": "a\n"})
        spec = ProjectSpec.for_directory(
            tmp_path / "local-app",
            template_specifier=f"file:{local.relative_to(tmp_path)}",
            origin_dir=tmp_path,
        )
        result = service_factory({"cra-template-local": local}).create(spec)

        assert result.ok, result.error
        assert result.data["resolution"] == "localFile"
        assert result.data["template"] == "cra-template-local"
        assert install_calls[0]["dependencies"] == [f"file:{local.resolve()}"]
        assert (tmp_path / "local-app" / "a.txt").exists()

    def test_archive_relative_to_origin(
        self,
        service_factory: Callable[..., CreateService],
        template_package: Callable[..., Path],
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        archive = _write_tarball(
            tmp_path / "cra-template-arc-1.0.0.tgz",
            {"name": "cra-template-arc", "version": "1.0.0"},
        )
        installed = template_package("cra-template-arc", files={"b.txt": "b\n"})
        spec = ProjectSpec.for_directory(
            tmp_path / "arc-app",
            template_specifier="./cra-template-arc-1.0.0.tgz",
            origin_dir=tmp_path,
        )
        result = service_factory({"cra-template-arc": installed}).create(spec)

        assert result.ok, result.error
        assert result.warnings == []
        assert result.data["resolution"] == "remoteArchive"
        assert install_calls[0]["dependencies"] == [str(archive.resolve())]
        assert (tmp_path / "arc-app" / "b.txt").exists()

    def test_registry_failure_degrades(
        self,
        service_factory: Callable[..., CreateService],
        fake_registry: Any,
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        spec = ProjectSpec.for_directory(tmp_path / "my-app")
        result = service_factory(registry=fake_registry(fail=True)).create(spec)
        assert result.ok
        assert len(result.warnings) == 1
        # Version falls back to the installed package's manifest.
        assert result.data["template_version"] == "2.3.0"

    def test_install_after(
        self,
        service_factory: Callable[..., CreateService],
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        spec = ProjectSpec.for_directory(tmp_path / "my-app", install_after=True, verbose=True)
        result = service_factory().create(spec)
        assert result.ok
        assert [c["dependencies"] for c in install_calls] == [[DEFAULT_TEMPLATE], []]
        assert install_calls[1]["command"].verbose is True

    def test_verbose_meta(
        self,
        service_factory: Callable[..., CreateService],
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        spec = ProjectSpec.for_directory(tmp_path / "my-app", verbose=True)
        result = service_factory().create(spec)
        assert result.meta is not None
        names = [s["name"] for s in result.meta["stages"]]
        assert names == ["resolve", "scaffold", "metadata", "install", "materialize"]

    def test_rerun_with_overwrite_is_identical(
        self,
        service_factory: Callable[..., CreateService],
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        service = service_factory()
        service.create(ProjectSpec.for_directory(tmp_path / "my-app"))
        first = (tmp_path / "my-app" / "package.json").read_text()
        service.create(ProjectSpec.for_directory(tmp_path / "my-app", overwrite=True))
        assert (tmp_path / "my-app" / "package.json").read_text() == first


class TestCreateFailures:
    def test_invalid_name(
        self,
        service_factory: Callable[..., CreateService],
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        spec = ProjectSpec.for_directory(tmp_path / "MyApp")
        result = service_factory().create(spec)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_PROJECT_NAME"
        assert "capital letters" in result.error.message
        assert not (tmp_path / "MyApp").exists()
        assert install_calls == []

    def test_existing_path_untouched(
        self,
        service_factory: Callable[..., CreateService],
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        target = tmp_path / "my-app"
        target.mkdir()
        (target / "keep.txt").write_text("mine")

        result = service_factory().create(ProjectSpec.for_directory(target))

        assert result.error is not None
        assert result.error.code == "PATH_EXISTS"
        assert (target / "keep.txt").read_text() == "mine"
        assert sorted(p.name for p in target.iterdir()) == ["keep.txt"]
        assert install_calls == []

    def test_overwrite_replaces(
        self,
        service_factory: Callable[..., CreateService],
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        target = tmp_path / "my-app"
        target.mkdir()
        (target / "stale.txt").write_text("old")

        result = service_factory().create(ProjectSpec.for_directory(target, overwrite=True))

        assert result.ok
        assert not (target / "stale.txt").exists()

    def test_install_failure_aborts(
        self,
        service_factory: Callable[..., CreateService],
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        def failing_install(*_args: Any, **_kwargs: Any) -> None:
            raise InstallFailure("npm install cra-template-liaapi-ts", 1)

        monkeypatch.setattr(installer, "install", failing_install)
        result = service_factory().create(ProjectSpec.for_directory(tmp_path / "my-app"))

        assert result.error is not None
        assert result.error.code == "INSTALL_FAILED"
        assert result.error.detail["returncode"] == 1
        assert not (tmp_path / "my-app" / "src").exists()

    def test_missing_installed_template(
        self,
        service_factory: Callable[..., CreateService],
        fake_registry: Any,
        install_calls: list[dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        spec = ProjectSpec.for_directory(tmp_path / "my-app", template_specifier="ghost")
        result = service_factory(registry=fake_registry({"cra-template-ghost": "1.0.0"})).create(spec)
        assert result.error is not None
        assert result.error.code == "TEMPLATE_NOT_FOUND"
