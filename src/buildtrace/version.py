"""Package version lookup."""

from __future__ import annotations

from importlib import metadata

__version__ = "0.1.0"


def get_version() -> str:
    """Installed distribution version, or an empty string when not installed."""
    try:
        return metadata.version("buildtrace")
    except metadata.PackageNotFoundError:
        return ""
