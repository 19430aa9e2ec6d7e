from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional
import logging
import os

import yaml

logger = logging.getLogger(__name__)

TIME_TAG_WIDTH = len("[00:00:00]")
DEBUG_TAG = "[ DEBUG! ]"
MIN_INDENT = max(TIME_TAG_WIDTH, len(DEBUG_TAG))

_CONFIG_FILENAMES = ("buildtrace.yaml", ".buildtrace.yaml")
_FALSY = ("0", "false", "False", "no", "off", "")


class ConfigError(ValueError):
    """Raised when logger configuration is missing or invalid."""


def load_config(root: Path) -> dict[str, Any]:
    """
    Load buildtrace config from a project root if present.

    Search order:
    1) ``buildtrace.yaml``
    2) ``.buildtrace.yaml``
    """

    for filename in _CONFIG_FILENAMES:
        config_path = root / filename
        if config_path.exists():
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
            if data is None:
                return {}
            if not isinstance(data, dict):
                raise ConfigError(f"{config_path} must contain a mapping at top level.")
            logger.debug("Loaded config from %s", config_path)
            return data
    return {}


def _parse_bool(raw: Optional[str], fallback: Optional[bool]) -> Optional[bool]:
    if raw is None:
        return fallback
    return raw.strip() not in _FALSY


def _coerce_bool(value: Any, fallback: Optional[bool]) -> Optional[bool]:
    if value is None:
        return fallback
    if isinstance(value, str):
        return _parse_bool(value, fallback)
    return bool(value)


def _parse_int(raw: Optional[str], fallback: int) -> int:
    if raw is None or not raw.strip():
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback


@dataclass(frozen=True)
class LoggerConfig:
    """
    Configuration for console task logging.

    Parameters
    ----------
    debug
        Enables verbose output: debug channel, memory usage suffixes, stack traces
        and repeated failure traces.
    indent
        Width of the left margin every wrapped line starts with. The clock tag
        and the debug tag overwrite it, so it can't be narrower than either.
    max_width
        Maximum length of a wrapped line, indent included.
    color
        Force terminal colours on/off. ``None`` auto-detects a terminal.
    console_level
        Level for the internal ``buildtrace`` diagnostics logger.
    env_prefix
        Prefix for environment-variable overrides, e.g. "BUILDTRACE_".

    Usage example
    -------------
        cfg = LoggerConfig(debug=True, max_width=100)
    """

    debug: bool = False
    indent: int = 12
    max_width: int = 120
    color: Optional[bool] = None

    console_level: int = logging.WARNING

    env_prefix: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        if self.indent < MIN_INDENT:
            raise ConfigError(f"indent must be at least {MIN_INDENT} columns (got {self.indent})")
        if self.max_width <= self.indent:
            raise ConfigError(
                f"max_width must be greater than indent (got max_width={self.max_width}, indent={self.indent})"
            )

    @property
    def indent_text(self) -> str:
        return " " * self.indent

    @classmethod
    def from_env(cls, *, default: Optional["LoggerConfig"] = None) -> "LoggerConfig":
        """
        Create config from environment variables.

        Supported variables (prefix controlled by env_prefix on `default`):
        - <PFX>DEBUG: "1"/"0"
        - <PFX>INDENT: integer
        - <PFX>MAX_WIDTH: integer
        - <PFX>COLOR: "1"/"0"
        - NO_COLOR: any value disables colours (takes precedence over <PFX>COLOR)

        Notes
        -----
        Unparseable or out-of-range integers fall back to the value on `default`.

        Usage example
        -------------
            cfg = LoggerConfig.from_env(default=LoggerConfig(env_prefix="BUILDTRACE_"))
        """
        base = default if default is not None else cls()
        pfx = base.env_prefix

        debug = _parse_bool(os.getenv(f"{pfx}DEBUG"), base.debug)
        indent = _parse_int(os.getenv(f"{pfx}INDENT"), base.indent)
        max_width = _parse_int(os.getenv(f"{pfx}MAX_WIDTH"), base.max_width)

        if indent < MIN_INDENT:
            indent = base.indent
        if max_width <= indent:
            max_width = base.max_width
        if max_width <= indent:
            indent = base.indent

        color = _parse_bool(os.getenv(f"{pfx}COLOR"), base.color)
        if os.getenv("NO_COLOR") is not None:
            color = False

        return cls(
            debug=bool(debug),
            indent=indent,
            max_width=max_width,
            color=color,
            console_level=base.console_level,
            env_prefix=pfx,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, default: Optional["LoggerConfig"] = None) -> "LoggerConfig":
        """
        Create config from the ``logger`` section of a loaded config file.

        Usage example
        -------------
            cfg = LoggerConfig.from_mapping(load_config(Path.cwd()))
        """
        base = default if default is not None else cls()
        section = data.get("logger")
        if section is None:
            return base
        if not isinstance(section, Mapping):
            raise ConfigError("'logger' section must be a mapping.")

        unknown = set(section) - {"debug", "indent", "max_width", "color"}
        if unknown:
            raise ConfigError(f"Unknown logger settings: {', '.join(sorted(unknown))}")

        try:
            indent = int(section.get("indent", base.indent))
            max_width = int(section.get("max_width", base.max_width))
        except (TypeError, ValueError) as error:
            raise ConfigError(f"Invalid logger settings: {error}") from error

        return replace(
            base,
            debug=bool(_coerce_bool(section.get("debug"), base.debug)),
            indent=indent,
            max_width=max_width,
            color=_coerce_bool(section.get("color"), base.color),
        )
