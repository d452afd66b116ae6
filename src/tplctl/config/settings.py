"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``TPLCTL_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``tplctl.toml`` (``--config``, ``TPLCTL_CONFIG``, or walk-up)
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from tplctl.config.models import InstallerConfig, RegistryConfig, RuntimeConfig, TemplateConfig

CONFIG_FILENAME = "tplctl.toml"
CONFIG_ENV_VAR = "TPLCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Locate the config file for *start* (default: cwd).

    ``TPLCTL_CONFIG`` wins when set; otherwise the nearest ``tplctl.toml``
    in *start* or any of its parents. None if nothing is found.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        explicit = Path(env_path)
        return explicit if explicit.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Feed a parsed ``tplctl.toml`` into pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed from from_cli() to settings_customise_sources().
_tls = threading.local()


class TplSettings(BaseSettings):
    """Frozen settings for one tplctl invocation.

    Attributes:
        config_path: The TOML file that was loaded, if any.
        log_level: Package-manager ``--loglevel``; falls back to
            ``installer.log_level`` when unset.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "TPLCTL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    log_level: str | None = None

    # --- TOML sections ---
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    template: TemplateConfig = Field(default_factory=TemplateConfig)
    installer: InstallerConfig = Field(default_factory=InstallerConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)

    @property
    def install_log_level(self) -> str:
        return self.log_level or self.installer.log_level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> TplSettings:
        """Construct settings from a CLI invocation.

        An explicit *config_path* that doesn't exist is ignored rather than
        discovered around. CLI flags left as None fall through to lower
        priority sources.
        """
        toml_path: Path | None
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(start)

        flags = {k: v for k, v in cli_flags.items() if v is not None}
        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **flags)
        finally:
            _tls.toml_path = None
