"""Task lifecycle logging: Logger, severity channels and task guards."""

from .channels import LogContext, debug, default_context, error, info, log, new_line, warn
from .guards import run_task, task
from .logger import Logger, TaskState

__all__ = [
    "Logger",
    "TaskState",
    "LogContext",
    "default_context",
    "log",
    "info",
    "warn",
    "error",
    "debug",
    "new_line",
    "task",
    "run_task",
]
