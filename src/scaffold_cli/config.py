"""User-level scaffold configuration in config.yaml.

Settings are read from a YAML file (by default in the platform's per-user config
directory) and then overridden by environment variables:

- ``TEMPLATE_SCAFFOLD_CONFIG``: alternative config file path
- ``TEMPLATE_SCAFFOLD_HOST``: host used for ``owner/repo`` descriptors
- ``TEMPLATE_SCAFFOLD_MODE``: ``tar`` or ``git``
- ``TEMPLATE_SCAFFOLD_TIMEOUT``: network timeout in seconds
- ``GH_TOKEN`` / ``GITHUB_TOKEN``: token sent to GitHub
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from scaffold_cli.errors import ConfigError

APP_NAME = "template-scaffold"
ENV_PREFIX = "TEMPLATE_SCAFFOLD_"


class ScaffoldSettings(BaseModel):
    """Defaults for fetching and materializing templates."""

    default_host: str = "github.com"
    mode: Literal["tar", "git"] = "tar"
    timeout: float = Field(default=60.0, gt=0)
    github_token: str | None = None
    show_log: bool = False
    show_warnings: bool = True
    update_package_json: bool = False
    rename_ignore_file: bool = True


def _github_token(cli_token: str | None = None) -> str | None:
    """Return sanitized GitHub token (cli arg takes precedence) or None."""
    return ((cli_token or os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN") or "").strip()) or None


def github_auth_headers(token: str | None) -> dict[str, str]:
    """Return Authorization header dict only when a non-empty token exists."""
    token = (token or "").strip()
    return {"Authorization": f"Bearer {token}"} if token else {}


def default_config_path() -> Path:
    if env_path := os.environ.get(f"{ENV_PREFIX}CONFIG"):
        return Path(env_path).expanduser()
    return Path(user_config_dir(APP_NAME)) / "config.yaml"


def _read_config_file(config_path: Path) -> dict[str, object]:
    if not config_path.exists():
        return {}

    yaml = YAML(typ="safe")
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            payload = yaml.load(handle)
    except YAMLError as exc:
        raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"{config_path} must contain a mapping, got {type(payload).__name__}")
    return dict(payload)


def load_settings(config_path: Path | None = None) -> ScaffoldSettings:
    """Load settings from the config file and the environment."""
    path = config_path or default_config_path()
    payload = _read_config_file(path)

    overrides = {
        "default_host": os.environ.get(f"{ENV_PREFIX}HOST"),
        "mode": os.environ.get(f"{ENV_PREFIX}MODE"),
        "timeout": os.environ.get(f"{ENV_PREFIX}TIMEOUT"),
    }
    payload.update({key: value for key, value in overrides.items() if value})

    token = _github_token(payload.get("github_token") if isinstance(payload.get("github_token"), str) else None)
    if token:
        payload["github_token"] = token

    try:
        return ScaffoldSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}:\n{exc}") from exc


__all__ = [
    "APP_NAME",
    "ScaffoldSettings",
    "default_config_path",
    "github_auth_headers",
    "load_settings",
]
