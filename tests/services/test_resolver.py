"""Tests for SpecifierResolver."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tplctl.config.settings import TplSettings
from tplctl.domain.errors import TemplateNotFound
from tplctl.domain.types import ResolutionKind
from tplctl.services.resolver import SpecifierResolver


class TestResolve:
    def test_default_template(self, settings: TplSettings, tmp_path: Path) -> None:
        d = SpecifierResolver(settings).resolve(None, origin_dir=tmp_path)
        assert d.canonical_name == "cra-template-liaapi-ts"
        assert d.resolution_kind is ResolutionKind.REGISTRY_NAME

    def test_registry_name_prefixed(self, settings: TplSettings, tmp_path: Path) -> None:
        d = SpecifierResolver(settings).resolve("typescript", origin_dir=tmp_path)
        assert d.canonical_name == "cra-template-typescript"
        assert d.raw_value == "typescript"

    def test_custom_prefix(self, tmp_path: Path) -> None:
        (tmp_path / "tplctl.toml").write_text('[template]\nprefix = "acme-template"\n')
        settings = TplSettings.from_cli(start=tmp_path)
        d = SpecifierResolver(settings).resolve("web", origin_dir=tmp_path)
        assert d.canonical_name == "acme-template-web"

    def test_local_file_reads_manifest(self, settings: TplSettings, tmp_path: Path) -> None:
        tpl = tmp_path / "my-template"
        tpl.mkdir()
        (tpl / "package.json").write_text(json.dumps({"name": "cra-template-mine"}))
        work = tmp_path / "work"
        work.mkdir()

        d = SpecifierResolver(settings).resolve("file:../my-template", origin_dir=work)

        assert d.resolution_kind is ResolutionKind.LOCAL_FILE
        assert d.canonical_name == "cra-template-mine"
        assert d.raw_value == str(tpl.resolve())
        assert d.install_spec == f"file:{tpl.resolve()}"

    def test_local_file_missing_manifest(self, settings: TplSettings, tmp_path: Path) -> None:
        with pytest.raises(TemplateNotFound):
            SpecifierResolver(settings).resolve("file:./nowhere", origin_dir=tmp_path)

    def test_local_file_unnamed(self, settings: TplSettings, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{}")
        with pytest.raises(TemplateNotFound, match="no name"):
            SpecifierResolver(settings).resolve("file:.", origin_dir=tmp_path)

    def test_archive_is_raw(self, settings: TplSettings, tmp_path: Path) -> None:
        url = "https://example.com/t-1.0.0.tgz"
        d = SpecifierResolver(settings).resolve(url, origin_dir=tmp_path)
        assert d.resolution_kind is ResolutionKind.REMOTE_ARCHIVE
        assert d.canonical_name == url
        assert d.install_spec == url

    def test_archive_on_disk_resolved_against_origin(
        self, settings: TplSettings, tmp_path: Path
    ) -> None:
        d = SpecifierResolver(settings).resolve("./cra-template-arc-1.0.0.tgz", origin_dir=tmp_path)
        assert d.resolution_kind is ResolutionKind.REMOTE_ARCHIVE
        assert d.canonical_name == "./cra-template-arc-1.0.0.tgz"
        expected = str((tmp_path / "cra-template-arc-1.0.0.tgz").resolve())
        assert d.raw_value == expected
        assert d.install_spec == expected

    def test_absolute_archive_path_kept(self, settings: TplSettings, tmp_path: Path) -> None:
        archive = str((tmp_path / "t-1.0.0.tgz").resolve())
        d = SpecifierResolver(settings).resolve(archive, origin_dir=tmp_path / "elsewhere")
        assert d.install_spec == archive

    def test_git_url(self, settings: TplSettings, tmp_path: Path) -> None:
        url = "git+https://github.com/acme/tpl.git"
        d = SpecifierResolver(settings).resolve(url, origin_dir=tmp_path)
        assert d.resolution_kind is ResolutionKind.GIT_URL
        assert d.install_spec == url
