"""buildtrace: structured build logging and task lifecycle events."""

from buildtrace.errors import BuildError, IgnorableError, LoggerConfig
from buildtrace.tasks import Logger, LogContext, run_task, task
from buildtrace.version import __version__

__all__ = [
    "BuildError",
    "IgnorableError",
    "LoggerConfig",
    "Logger",
    "LogContext",
    "task",
    "run_task",
    "__version__",
]
