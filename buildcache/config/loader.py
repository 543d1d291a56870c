"""YAML configuration loader with environment variable overrides.

Configuration is resolved in layers, later layers winning:

  1. Field defaults on :class:`Settings`
  2. The YAML file (e.g. a ``buildcache.yaml`` checked into the runner image)
  3. ``.env`` file and ``BUILDCACHE_*`` environment variables

YAML keys are the ``Settings`` field names::

    available: true
    cache_dir: /mnt/cache/branch
    compress_program: gzip
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from buildcache.config.settings import Settings
from buildcache.utils.errors import ConfigurationError


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from an optional YAML file, letting the environment override it.

    Args:
        path: Path to the YAML file.  A missing file is treated as empty.

    Returns:
        The resolved Settings.

    Raises:
        ConfigurationError: If the YAML is malformed or a value is invalid.
    """
    yaml_config = _read_yaml(Path(path)) if path is not None else {}

    try:
        env_settings = Settings()
        # Only values that actually came from .env / the environment override YAML.
        env_overrides = env_settings.model_dump(include=env_settings.model_fields_set)
        return Settings(**{**yaml_config, **env_overrides})
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid buildcache settings: {exc}") from exc


def _read_yaml(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Cannot parse {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping, got {type(data).__name__}")
    return data
