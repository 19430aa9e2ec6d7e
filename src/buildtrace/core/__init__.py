"""Leaf helpers: word wrapping, decorations, colours and task events."""

from buildtrace.core.decorations import format_duration, format_file_name, format_header
from buildtrace.core.events import EventBus, EventType, TaskEvent, TaskEventType, get_event_bus
from buildtrace.core.wrap import UNDEFINED, word_wrap

__all__ = [
    "word_wrap",
    "UNDEFINED",
    "format_duration",
    "format_file_name",
    "format_header",
    "EventBus",
    "EventType",
    "TaskEvent",
    "TaskEventType",
    "get_event_bus",
]
