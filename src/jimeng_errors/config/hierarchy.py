"""Configuration hierarchy for retry and logging settings.

Layers, lowest priority first:
  1. Package defaults
  2. Global config   (~/.jimeng/config.yaml)
  3. Project config   (jimeng.yaml in cwd or any parent)
  4. Environment variables (JIMENG_*)
  5. Runtime keyword arguments (None means "not set")
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from jimeng_errors.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".jimeng" / "config.yaml"
_PROJECT_CONFIG_NAME = "jimeng.yaml"

_ENV_MAP: dict[str, str] = {
    "JIMENG_MAX_RETRIES": "max_retries",
    "JIMENG_RETRY_DELAY": "retry_delay",
    "JIMENG_LOG_LEVEL": "log_level",
    "JIMENG_CONTEXT": "context",
    "JIMENG_OPERATION": "operation",
}

_TYPE_MAP: dict[str, type] = {
    "max_retries": int,
    "retry_delay": float,
}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Merge every config layer into one flat dict."""
    config: dict[str, Any] = {}
    for layer in _config_layers():
        config.update(layer)
    config.update({k: v for k, v in runtime_overrides.items() if v is not None})
    return config


def _config_layers() -> Iterator[dict[str, Any]]:
    yield get_defaults()
    for path in (_GLOBAL_CONFIG_PATH, _find_project_config()):
        if path is not None:
            yield _load_yaml_config(path) or {}
    yield _load_env_vars()


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Read a YAML mapping; missing, broken or non-mapping files give None."""
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring", path)
        return None
    return data


def _find_project_config() -> Path | None:
    cwd = Path.cwd()
    return next(
        (d / _PROJECT_CONFIG_NAME for d in (cwd, *cwd.parents) if (d / _PROJECT_CONFIG_NAME).is_file()),
        None,
    )


def _load_env_vars() -> dict[str, Any]:
    return {
        config_key: _coerce_env_value(config_key, os.environ[env_key])
        for env_key, config_key in _ENV_MAP.items()
        if env_key in os.environ
    }


def _coerce_env_value(key: str, value: str) -> Any:
    """Convert typed keys; unconvertible values are left for model validation."""
    target_type = _TYPE_MAP.get(key)
    if target_type is None:
        return value
    try:
        return target_type(value)
    except ValueError:
        logger.warning(
            "Cannot convert env var for '%s' to %s: %s", key, target_type.__name__, value
        )
        return value
