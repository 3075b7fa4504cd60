"""YAML-backed configuration and logging setup."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .channels import DEFAULT_BASE_URL
from .errors import ConfigError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class CoreConfig:
    """Connection, export and routing settings for one UI session."""

    base_url: str = DEFAULT_BASE_URL
    timeout_s: Optional[float] = None  # None leaves the transport default in place
    export_dir: Path = Path(".")
    fallback_on_embedded_error: bool = False
    log_level: str = "INFO"


def load_config(path: Union[str, Path, None] = "config.yaml") -> CoreConfig:
    """Read ``path`` and return a ``CoreConfig``.

    Settings may sit at the top level or under a ``matprops:`` section. A
    missing file gives the defaults.
    """

    if path is None or not Path(path).exists():
        logger.debug("No configuration file at %s; using defaults", path)
        return CoreConfig()

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level.")

    section = data.get("matprops", data)
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: 'matprops' must be a mapping.")

    known = {f.name for f in fields(CoreConfig)}
    values: Dict[str, Any] = {}
    for key, raw in section.items():
        if key not in known:
            logger.warning("Ignoring unknown configuration key '%s' in %s", key, path)
            continue
        values[key] = _coerce(key, raw, path)
    return CoreConfig(**values)


def configure_logging(config: Optional[CoreConfig] = None) -> None:
    """Install a stream handler on the root logger and apply ``config.log_level``."""

    level = (config or CoreConfig()).log_level
    logging.basicConfig(format=LOG_FORMAT)
    # basicConfig is a no-op once the root logger has handlers; the level still applies
    logging.getLogger().setLevel(level)


def _coerce(key: str, raw: Any, path: Union[str, Path]) -> Any:
    if key == "base_url":
        if not isinstance(raw, str) or not raw.strip():
            raise ConfigError(f"{path}: 'base_url' must be a non-empty string.")
        return raw.strip()
    if key == "timeout_s":
        if raw is None:
            return None
        if isinstance(raw, bool) or not isinstance(raw, (int, float)) or raw <= 0:
            raise ConfigError(f"{path}: 'timeout_s' must be a positive number.")
        return float(raw)
    if key == "export_dir":
        if not isinstance(raw, str):
            raise ConfigError(f"{path}: 'export_dir' must be a path string.")
        return Path(raw)
    if key == "fallback_on_embedded_error":
        if not isinstance(raw, bool):
            raise ConfigError(f"{path}: 'fallback_on_embedded_error' must be true or false.")
        return raw
    if key == "log_level":
        if not isinstance(raw, str) or raw.upper() not in _LEVELS:
            raise ConfigError(f"{path}: unknown log level {raw!r}.")
        return raw.upper()
    return raw
