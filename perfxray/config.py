"""Project configuration loaded from an optional YAML file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

import yaml

from .errors import ConfigError
from .report import FORMATS
from .rules import Rule
from .rules.catalog import get_rule, without
from .utils.fileio import read_yaml_file

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".perfxray.yaml"
CONFIG_ENV_VAR = "PERFXRAY_CONFIG"


@dataclass(frozen=True)
class Config:
    """Defaults applied underneath command-line flags."""

    severity: str = "low"
    format: str = "text"
    ignore: Tuple[str, ...] = ()
    disable: Tuple[str, ...] = ()
    jobs: int = 1

    def active_rules(self) -> Tuple[Rule, ...]:
        """Return the catalog minus disabled rules, in catalog order."""

        return without(self.disable)


def resolve_config_path(explicit: Optional[str] = None) -> Tuple[Path, bool]:
    """Return the config path and whether the caller asked for it by name."""

    requested = explicit or os.environ.get(CONFIG_ENV_VAR)
    if requested:
        return Path(requested), True
    return Path(DEFAULT_CONFIG_FILENAME), False


def load_config(path: Optional[str] = None) -> Config:
    """Load ``path`` (or the default location); a missing file yields defaults.

    A file named by ``path`` or ``$PERFXRAY_CONFIG`` that does not exist is a
    ``ConfigError``.
    """

    config_path, requested = resolve_config_path(path)
    try:
        raw = read_yaml_file(config_path)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to read config {config_path}: {exc}") from exc

    if raw is None:
        if requested and not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        logger.debug("No config at %s, using defaults", config_path)
        return Config()
    if not isinstance(raw, dict):
        raise ConfigError(f"Config at {config_path} is not a mapping")

    logger.debug("Loaded config from %s", config_path)
    fmt = str(raw.get("format", "text")).lower()
    if fmt not in FORMATS:
        raise ConfigError(f"'format' must be one of {', '.join(FORMATS)}")

    disable = _ensure_string_list(raw.get("disable", []), "disable")
    unknown = [rule_id for rule_id in disable if get_rule(rule_id) is None]
    if unknown:
        raise ConfigError(f"Unknown rule id(s) in 'disable': {', '.join(unknown)}")

    return Config(
        severity=str(raw.get("severity", "low")),
        format=fmt,
        ignore=_ensure_string_list(raw.get("ignore", []), "ignore"),
        disable=disable,
        jobs=_ensure_positive_int(raw.get("jobs", 1), "jobs"),
    )


def _ensure_string_list(value: Any, key: str) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Sequence):
        raise ConfigError(f"'{key}' must be a list of strings")
    return tuple(str(item).strip() for item in value if str(item).strip())


def _ensure_positive_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"'{key}' must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{key}' must be a positive integer") from exc
    if number < 1:
        raise ConfigError(f"'{key}' must be a positive integer")
    return number
