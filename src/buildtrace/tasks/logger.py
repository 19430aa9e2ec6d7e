from __future__ import annotations

from enum import Enum
from typing import Optional, TypeVar

from buildtrace.core.colors import Colorizer
from buildtrace.core.decorations import format_duration
from buildtrace.core.events import EventType, TaskEvent, TaskEventType
from buildtrace.errors.types import BuildError, IgnorableError

from . import channels
from .channels import LogContext

E = TypeVar("E", bound=BaseException)


class TaskState(str, Enum):
    """Lifecycle state of one task attempt."""
    CREATED = "created"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class Logger:
    """
    Times one task attempt and reports its lifecycle.

    Constructing a Logger starts the task: it prints ``"<scope> started ..."``
    and publishes a ``start`` TaskEvent. The task ends with ``ready``/``finish``
    or ``fail``. Events carry only the first word of the scope.

    Usage example
    -------------
        logger = Logger("Build app")
        try:
            build()
        except BuildError as err:
            raise logger.fail(err)
        logger.finish()
    """

    def __init__(self, scope: str, *, context: Optional[LogContext] = None) -> None:
        self.scope = scope
        self.state = TaskState.CREATED
        self._context = context if context is not None else channels.default_context()
        self._start = self._context.monotonic_ms()

        msg = f"{scope} started {self._context.colors.dim('...')}"
        channels.info(msg, context=self._context)
        self._emit(TaskEventType.START, msg=f"{scope} started ...")
        self.state = TaskState.RUNNING

    @property
    def short_scope(self) -> str:
        parts = self.scope.split()
        return parts[0] if parts else ""

    def ready(self, color: Optional[Colorizer] = None) -> None:
        self._completed(TaskEventType.READY, color)

    def finish(self, color: Optional[Colorizer] = None) -> None:
        self._completed(TaskEventType.FINISHED, color)

    def _completed(self, kind: TaskEventType, color: Optional[Colorizer]) -> None:
        duration = self._context.monotonic_ms() - self._start
        elapsed = format_duration(duration)
        if self.state is TaskState.RUNNING:
            self.state = TaskState.COMPLETED
        self._emit(kind, duration=duration, time=elapsed, msg=f"{self.scope} {kind.value} {elapsed}")

        msg = f"{self.scope} {kind.value}"
        if color is not None:
            msg = color(msg)
        msg += " " + self._context.colors.dim(elapsed)
        channels.info(msg, context=self._context)

    def fail(self, err: Optional[E]) -> Optional[E]:
        """
        Report a failure and hand the error back for re-raising.

        Never raises. ``None`` and ``IgnorableError`` are ignored completely.
        Any other error publishes a ``failed`` event. A ``BuildError`` is printed
        at error level the first time only: this call sets its
        ``has_been_logged`` flag in place. Later calls with the same error print
        just a debug trace, and only in debug mode.
        """
        if err is None or isinstance(err, IgnorableError):
            return err

        if self.state is TaskState.RUNNING:
            self.state = TaskState.FAILED
        self._emit(TaskEventType.FAILED, msg=f"{self.scope} failed")

        if isinstance(err, BuildError):
            failed_msg = f"{self.scope} failed"
            if err.message:
                failed_msg += f": {err.message}"

            if not err.has_been_logged:
                channels.error(failed_msg, context=self._context)
                err.has_been_logged = True
                if err.stack and self._context.debug:
                    channels.debug(err.stack, context=self._context)
            elif self._context.debug:
                channels.debug(failed_msg, context=self._context)

        return err

    def _emit(self, kind: TaskEventType, **fields: object) -> None:
        event = TaskEvent(scope=self.short_scope, type=kind, **fields)  # type: ignore[arg-type]
        self._context.event_bus().emit(EventType.TASK_EVENT, event)
