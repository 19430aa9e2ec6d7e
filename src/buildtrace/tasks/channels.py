"""
Console severity channels: log, info, warn, error, debug and new_line.

All channels wrap their arguments with ``word_wrap`` and then decorate the
first line. Process-wide concerns (debug flag, memory sampling, wall clock,
streams, colours, event bus) come from an injected ``LogContext``; when none is
passed, the default context (config file plus environment) is used.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import IO, Any, Optional, cast
import sys
import time

import psutil

from buildtrace.core.colors import Palette
from buildtrace.core.decorations import memory_usage, time_prefix
from buildtrace.core.events import EventBus, get_event_bus
from buildtrace.core.wrap import word_wrap
from buildtrace.errors.config import DEBUG_TAG, LoggerConfig, load_config


def _process_rss() -> int:
    return psutil.Process().memory_info().rss


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


@dataclass(frozen=True)
class LogContext:
    """
    Everything the channels and ``Logger`` would otherwise read from globals.

    Parameters
    ----------
    config
        Layout and debug settings.
    palette
        Colorizers; ``None`` builds one from ``config.color``.
    memory
        Returns resident set size in bytes.
    clock
        Wall clock for the ``[HH:MM:SS]`` tag.
    monotonic_ms
        Millisecond clock used to time tasks.
    stdout, stderr
        Output streams; ``None`` means the current ``sys.stdout``/``sys.stderr``
        at write time.
    bus
        Where TaskEvents are published; ``None`` means the process-wide bus.

    Usage example
    -------------
        ctx = LogContext(config=LoggerConfig(debug=True), stdout=io.StringIO())
        info("hello", context=ctx)
    """

    config: LoggerConfig = field(default_factory=LoggerConfig)
    palette: Optional[Palette] = None
    memory: Callable[[], int] = _process_rss
    clock: Callable[[], datetime] = datetime.now
    monotonic_ms: Callable[[], int] = _monotonic_ms
    stdout: Optional[IO[str]] = None
    stderr: Optional[IO[str]] = None
    bus: Optional[EventBus] = None

    def __post_init__(self) -> None:
        if self.palette is None:
            object.__setattr__(self, "palette", Palette.build(self.config.color))

    @property
    def debug(self) -> bool:
        return self.config.debug

    @property
    def colors(self) -> Palette:
        return cast(Palette, self.palette)

    def event_bus(self) -> EventBus:
        return self.bus if self.bus is not None else get_event_bus()

    def out(self) -> IO[str]:
        return self.stdout if self.stdout is not None else sys.stdout

    def err(self) -> IO[str]:
        return self.stderr if self.stderr is not None else sys.stderr

    def memory_suffix(self) -> str:
        return self.colors.dim(memory_usage(self.memory()))

    def wrap(self, msg: tuple[Any, ...] | list[Any]) -> list[str]:
        return word_wrap(msg, indent=self.config.indent_text, max_width=self.config.max_width)


@lru_cache(maxsize=1)
def default_context() -> LogContext:
    """
    Context for callers that don't inject one.

    Settings come from ``buildtrace.yaml`` in the working directory, overridden
    by ``BUILDTRACE_*`` environment variables.
    """
    base = LoggerConfig(env_prefix="BUILDTRACE_")
    file_cfg = LoggerConfig.from_mapping(load_config(Path.cwd()), default=base)
    return LogContext(config=LoggerConfig.from_env(default=file_cfg))


def _resolve(context: Optional[LogContext]) -> LogContext:
    return context if context is not None else default_context()


def _write(stream: IO[str], lines: list[str]) -> None:
    for line in lines:
        stream.write(line + "\n")
    stream.flush()


def log(*msg: Any, context: Optional[LogContext] = None) -> None:
    """
    Does not print a time prefix or colour any text. Only the indent is kept so
    the message lines up with timestamped logs.
    """
    ctx = _resolve(context)
    _write(ctx.out(), ctx.wrap(msg))


def info(*msg: Any, context: Optional[LogContext] = None) -> None:
    """Prints with a dim clock prefix; adds memory usage in debug mode."""
    ctx = _resolve(context)
    parts = list(msg)
    if ctx.debug:
        parts.append(ctx.memory_suffix())
    lines = ctx.wrap(parts)
    if lines:
        prefix = time_prefix(ctx.clock())
        lines[0] = ctx.colors.dim(prefix) + lines[0][len(prefix):]
    _write(ctx.out(), lines)


def warn(*msg: Any, context: Optional[LogContext] = None) -> None:
    """Prints a yellow line with a clock prefix to stderr."""
    ctx = _resolve(context)
    lines = ctx.wrap(msg)
    if lines:
        prefix = time_prefix(ctx.clock())
        lines[0] = prefix + lines[0][len(prefix):]
    _write(ctx.err(), [ctx.colors.warn(line) for line in lines])


def error(*msg: Any, context: Optional[LogContext] = None) -> None:
    """Prints a red line with a clock prefix to stderr; adds memory usage in debug mode."""
    ctx = _resolve(context)
    lines = ctx.wrap(msg)
    if lines:
        prefix = time_prefix(ctx.clock())
        lines[0] = prefix + lines[0][len(prefix):]
        if ctx.debug:
            lines[0] += ctx.memory_suffix()
    _write(ctx.err(), [ctx.colors.error(line) for line in lines])


def debug(*msg: Any, context: Optional[LogContext] = None) -> None:
    """Prints a cyan ``[ DEBUG! ]`` line. Silent unless debug mode is on."""
    ctx = _resolve(context)
    if not ctx.debug:
        return
    lines = ctx.wrap([*msg, ctx.memory_suffix()])
    if lines:
        lines[0] = DEBUG_TAG + lines[0][len(DEBUG_TAG):]
    _write(ctx.out(), [ctx.colors.debug(line) for line in lines])


def new_line(*, context: Optional[LogContext] = None) -> None:
    ctx = _resolve(context)
    _write(ctx.out(), [""])
