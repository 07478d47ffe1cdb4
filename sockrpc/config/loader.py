"""Configuration loading with fail-fast behavior and layered merging.

Layers, later ones overriding earlier ones:
1. Global user config (~/.sockrpc/config.json)
2. Project local config (cwd/.sockrpc/config.json)
3. SOCKRPC_SOCKET_PATH environment variable (server.socket_path only)

Layers are merged section by section: a key set in a later layer's
"server" object replaces only that key. With no config files at all,
Pydantic defaults apply.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sockrpc.config.schema import Config
from sockrpc.core.constants import (
    SOCKET_PATH_ENV,
    get_default_config_path,
    get_local_config_path,
)
from sockrpc.core.errors import ConfigError, LoadError

logger = logging.getLogger(__name__)


def load_config(path: Path | None = None, cwd: Path | None = None) -> Config:
    """Load configuration from file with layered merging.

    Args:
        path: Explicit config file path. If provided, skips layered loading
            (the environment override still applies).
        cwd: Working directory for local config lookup. Defaults to Path.cwd().

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If any config file is missing (explicit path only),
            contains invalid JSON, or the merged config fails validation.
    """
    if path is not None:
        try:
            data = _read_layer(path, required=True) or {}
        except LoadError as e:
            raise ConfigError(e.message) from e
        return _validate(_apply_env_overrides(data), [path])

    effective_cwd = cwd or Path.cwd()
    merged: dict[str, Any] = {}
    loaded_from: list[Path] = []

    for layer_path in (get_default_config_path(), get_local_config_path(effective_cwd)):
        try:
            layer = _read_layer(layer_path)
        except LoadError as e:
            raise ConfigError(e.message) from e
        if layer:
            merged = _overlay(merged, layer)
            loaded_from.append(layer_path)

    if loaded_from:
        logger.info("Config loaded from: %s", [str(p) for p in loaded_from])
    else:
        logger.debug("No config files found, using Pydantic defaults")

    return _validate(_apply_env_overrides(merged), loaded_from)


def _read_layer(path: Path, required: bool = False) -> dict[str, Any] | None:
    """Read one config file as a JSON object.

    Returns None when an optional layer is absent. An empty file is an
    empty layer.

    Raises:
        LoadError: If a required file is missing, or any file is unreadable,
            not JSON, or not a JSON object.
    """
    if not path.is_file():
        if required:
            raise LoadError(f"Config file not found: {path}")
        logger.debug("Config layer not present: %s", path)
        return None

    try:
        text = path.read_text(encoding="utf-8-sig").strip()
    except OSError as e:
        raise LoadError(f"Cannot read config file {path}: {e}") from e
    if not text:
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(f"Invalid JSON in config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise LoadError(
            f"Config file {path} must contain an object, got {type(data).__name__}"
        )
    return data


def _overlay(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    """Overlay a layer onto merged data, one section at a time.

    Keys inside a section object are merged; anything else is replaced and
    left for validation to judge. Neither input is modified.
    """
    result = dict(base)
    for section, values in layer.items():
        current = result.get(section)
        if isinstance(current, dict) and isinstance(values, dict):
            result[section] = {**current, **values}
        else:
            result[section] = values
    return result


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay environment variable settings onto raw config data."""
    socket_path = os.environ.get(SOCKET_PATH_ENV)
    if not socket_path:
        return data
    logger.debug("Socket path overridden by %s: %s", SOCKET_PATH_ENV, socket_path)
    return _overlay(data, {"server": {"socket_path": socket_path}})


def _validate(data: dict[str, Any], sources: list[Path]) -> Config:
    if not data:
        return Config()
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        origin = ", ".join(str(p) for p in sources) or "environment"
        raise ConfigError(f"Config validation failed ({origin}): {e}") from e
