"""Configuration loading and validation."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError

DEFAULT_CONFIG_PATH = "~/.pic-od-upload/config.yaml"
DEFAULT_URL_TEMPLATE = "![${fileName}](${url})"

# Only upper-case names are treated as env references so that the
# ${fileName} / ${url} template tokens pass through untouched.
_ENV_REF = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


class PicOdConfig(BaseModel):
    binary_path: str = "pic-od"
    profile: str = ""  # Empty = let pic-od pick its default profile
    url_template: str = DEFAULT_URL_TEMPLATE
    upload_timeout: float | None = Field(
        default=None, gt=0
    )  # None = wait for pic-od indefinitely
    desktop_notifications: bool = False

    @field_validator("binary_path")
    @classmethod
    def _binary_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("binary_path must not be empty")
        return value


def _interpolate_env_vars(text: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        return os.environ.get(var_name, "")

    return _ENV_REF.sub(replacer, text)


def _apply_env_overrides(config: PicOdConfig) -> PicOdConfig:
    """Let PIC_OD_* env vars win over the file (handy for CI and scripts)."""
    updates: dict[str, str] = {}
    if os.environ.get("PIC_OD_BINARY"):
        updates["binary_path"] = os.environ["PIC_OD_BINARY"]
    if "PIC_OD_PROFILE" in os.environ:
        updates["profile"] = os.environ["PIC_OD_PROFILE"]
    if os.environ.get("PIC_OD_URL_TEMPLATE"):
        updates["url_template"] = os.environ["PIC_OD_URL_TEMPLATE"]
    if not updates:
        return config
    return config.model_copy(update=updates)


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return Path(DEFAULT_CONFIG_PATH).expanduser()
    return Path(path).expanduser()


def load_config(path: str | Path | None = None) -> PicOdConfig:
    """Load config from YAML file, env vars, or defaults.

    Priority: PIC_OD_* env vars > config.yaml (with ${ENV} interpolation)
    > defaults.
    """
    path = resolve_config_path(path)

    if not path.exists():
        return _apply_env_overrides(PicOdConfig())

    raw_text = path.read_text()
    interpolated = _interpolate_env_vars(raw_text)
    try:
        data = yaml.safe_load(interpolated)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return _apply_env_overrides(PicOdConfig())
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config in {path}: expected a mapping")
    try:
        config = PicOdConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {path}: {e}") from e
    return _apply_env_overrides(config)


def save_config(config: PicOdConfig, path: str | Path | None = None) -> Path:
    """Save config to YAML file."""
    path = resolve_config_path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump()
    path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))
    return path
