"""Task lifecycle events and the process-wide bus they are published on."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
import logging
import threading

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Kinds of payloads published on the bus."""
    TASK_EVENT = "TaskEvent"


class TaskEventType(str, Enum):
    """Lifecycle transition a TaskEvent describes."""
    START = "start"
    READY = "ready"
    FINISHED = "finished"
    FAILED = "failed"


@dataclass(frozen=True)
class TaskEvent:
    """
    A lifecycle transition of a named scope.

    ``scope`` is the short, stable identifier (first word of the logger scope),
    e.g. "Build" for "Build app".

    Usage example
    -------------
        TaskEvent(scope="Build", type=TaskEventType.START, msg="Build app started ...")
    """
    scope: str
    type: TaskEventType
    duration: Optional[int] = None
    time: Optional[str] = None
    msg: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"scope": self.scope, "type": self.type.value}
        if self.duration is not None:
            payload["duration"] = self.duration
        if self.time is not None:
            payload["time"] = self.time
        if self.msg is not None:
            payload["msg"] = self.msg
        return payload


Listener = Callable[[Any], None]


class EventBus:
    """
    Fire-and-forget publish/subscribe.

    Listeners run synchronously in the emitting thread. The listener list is
    copied under a lock so several tasks may emit concurrently. A listener that
    raises is logged and skipped; ``emit`` itself never raises.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: dict[EventType, list[Listener]] = {}

    def subscribe(self, event_type: EventType, callback: Listener) -> None:
        with self._lock:
            self._listeners.setdefault(event_type, []).append(callback)

    def unsubscribe(self, event_type: EventType, callback: Listener) -> None:
        with self._lock:
            current = self._listeners.get(event_type, [])
            self._listeners[event_type] = [cb for cb in current if cb is not callback]

    def emit(self, event_type: EventType, payload: Any) -> None:
        with self._lock:
            listeners = tuple(self._listeners.get(event_type, ()))
        for callback in listeners:
            try:
                callback(payload)
            except Exception:
                logger.exception("Listener %r failed on %s", callback, event_type.value)


_default_bus = EventBus()


def get_event_bus() -> EventBus:
    """Return the process-wide bus."""
    return _default_bus
