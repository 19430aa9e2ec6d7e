"""Terminal colour decoration as plain ``str -> str`` functions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from rich.color import ColorSystem
from rich.console import Console
from rich.style import Style

Colorizer = Callable[[str], str]


def plain(text: str) -> str:
    return text


def styler(style: str, *, enabled: bool = True) -> Colorizer:
    """
    Build a colorizer from a rich style definition ("dim", "bold green", ...).

    Returns the identity function when colours are disabled.
    """
    if not enabled:
        return plain
    parsed = Style.parse(style)

    def _apply(text: str) -> str:
        return parsed.render(text, color_system=ColorSystem.STANDARD)

    return _apply


def terminal_supports_color() -> bool:
    return Console().is_terminal


@dataclass(frozen=True)
class Palette:
    """The fixed set of styles the task logger decorates with."""

    dim: Colorizer = plain
    warn: Colorizer = plain
    error: Colorizer = plain
    debug: Colorizer = plain

    @classmethod
    def build(cls, enabled: Optional[bool] = None) -> "Palette":
        """Rich-rendered palette; ``enabled=None`` turns colours on only for a terminal."""
        if enabled is None:
            enabled = terminal_supports_color()
        return cls(
            dim=styler("dim", enabled=enabled),
            warn=styler("yellow", enabled=enabled),
            error=styler("red", enabled=enabled),
            debug=styler("cyan", enabled=enabled),
        )
