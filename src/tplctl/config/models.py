"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, tplctl.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- tplctl.toml sections ---


class RegistryConfig(BaseModel):
    """[registry] section."""

    model_config = {"frozen": True}

    url: str = "https://registry.npmjs.org"
    timeout: float = 10.0


class TemplateConfig(BaseModel):
    """[template] section.

    The default template resolves to ``{prefix}-{default}``.
    """

    model_config = {"frozen": True}

    prefix: str = "cra-template"
    default: str = "liaapi-ts"


class InstallerConfig(BaseModel):
    """[installer] section."""

    model_config = {"frozen": True}

    command: str = "npm"
    log_level: str = "error"
    modules_dir: str = "node_modules"
    lockfiles: list[str] = Field(default_factory=lambda: ["package-lock.json"])


class RuntimeConfig(BaseModel):
    """[runtime] section."""

    model_config = {"frozen": True}

    command: str = "node"
    min_major: int = 18
    check: bool = True
