from __future__ import annotations

import io
from datetime import datetime
from typing import Iterable

import pytest

from buildtrace.core.events import EventBus, EventType, TaskEvent, TaskEventType
from buildtrace.errors.config import LoggerConfig
from buildtrace.errors.types import BuildError, IgnorableError
from buildtrace.tasks.channels import LogContext
from buildtrace.tasks.logger import Logger, TaskState


def _make_context(
    *, debug: bool = False, ticks: Iterable[int] = (1000, 1000)
) -> tuple[LogContext, list[TaskEvent]]:
    bus = EventBus()
    events: list[TaskEvent] = []
    bus.subscribe(EventType.TASK_EVENT, events.append)
    clock = iter(ticks)
    ctx = LogContext(
        config=LoggerConfig(debug=debug, color=False),
        memory=lambda: 84_200_000,
        clock=lambda: datetime(2024, 1, 1, 9, 5, 1),
        monotonic_ms=lambda: next(clock),
        stdout=io.StringIO(),
        stderr=io.StringIO(),
        bus=bus,
    )
    return ctx, events


def _out(ctx: LogContext) -> str:
    return ctx.out().getvalue()  # type: ignore[attr-defined]


def _err(ctx: LogContext) -> str:
    return ctx.err().getvalue()  # type: ignore[attr-defined]


def test_construction_prints_and_emits_start() -> None:
    ctx, events = _make_context()

    logger = Logger("Build app", context=ctx)

    assert logger.state == TaskState.RUNNING
    assert _out(ctx) == "[09:05:01]  Build app started ...\n"
    assert events == [TaskEvent(scope="Build", type=TaskEventType.START, msg="Build app started ...")]


def test_construction_adds_memory_in_debug_mode() -> None:
    ctx, _ = _make_context(debug=True)

    Logger("Build app", context=ctx)

    assert _out(ctx) == "[09:05:01]  Build app started ... MEM: 84.2MB\n"


def test_finish_reports_duration_in_seconds() -> None:
    ctx, events = _make_context(ticks=(1000, 3300))
    logger = Logger("Build app", context=ctx)

    logger.finish()

    assert logger.state == TaskState.COMPLETED
    assert events[-1] == TaskEvent(
        scope="Build",
        type=TaskEventType.FINISHED,
        duration=2300,
        time="in 2.30 s",
        msg="Build app finished in 2.30 s",
    )
    assert _out(ctx).splitlines()[-1] == "[09:05:01]  Build app finished in 2.30 s"


def test_ready_applies_color_function_to_scope_and_word() -> None:
    ctx, events = _make_context(ticks=(1000, 1005))
    logger = Logger("Serve dev", context=ctx)

    logger.ready(lambda text: f"<{text}>")

    assert events[-1].type == TaskEventType.READY
    assert events[-1].msg == "Serve dev ready in 5 ms"
    assert _out(ctx).splitlines()[-1] == "[09:05:01]  <Serve dev ready> in 5 ms"


def test_sub_millisecond_task() -> None:
    ctx, events = _make_context(ticks=(1000, 1000))

    Logger("Watch", context=ctx).finish()

    assert events[-1].duration == 0
    assert events[-1].time == "in less than 1 ms"


def test_fail_none_is_noop() -> None:
    ctx, events = _make_context()
    logger = Logger("Build app", context=ctx)

    assert logger.fail(None) is None

    assert len(events) == 1
    assert _err(ctx) == ""


def test_fail_ignorable_error_is_silent() -> None:
    ctx, events = _make_context(debug=True)
    logger = Logger("Build app", context=ctx)
    printed = _out(ctx)
    err = IgnorableError("x")

    assert logger.fail(err) is err

    assert len(events) == 1
    assert _out(ctx) == printed
    assert _err(ctx) == ""
    assert logger.state == TaskState.RUNNING


def test_fail_build_error_prints_once_and_marks_logged() -> None:
    ctx, events = _make_context()
    logger = Logger("Build app", context=ctx)
    err = BuildError("boom")

    assert logger.fail(err) is err
    assert err.has_been_logged is True
    assert logger.fail(err) is err

    assert _err(ctx) == "[09:05:01]  Build app failed: boom\n"
    assert [e.type for e in events] == [TaskEventType.START, TaskEventType.FAILED, TaskEventType.FAILED]
    assert events[1] == TaskEvent(scope="Build", type=TaskEventType.FAILED, msg="Build app failed")
    assert logger.state == TaskState.FAILED


def test_already_logged_error_is_silent_across_loggers() -> None:
    ctx, _ = _make_context()
    inner = Logger("Compile ts", context=ctx)
    outer = Logger("Build app", context=ctx)
    err = BuildError("boom")

    inner.fail(err)
    outer.fail(err)

    assert _err(ctx) == "[09:05:01]  Compile ts failed: boom\n"


def test_already_logged_error_is_traced_in_debug_mode() -> None:
    ctx, _ = _make_context(debug=True)
    logger = Logger("Build app", context=ctx)
    err = BuildError("boom", has_been_logged=True)

    logger.fail(err)

    assert _err(ctx) == ""
    assert _out(ctx).splitlines()[-1] == "[ DEBUG! ]  Build app failed: boom MEM: 84.2MB"


def test_stack_is_traced_in_debug_mode_on_first_report() -> None:
    ctx, _ = _make_context(debug=True)
    logger = Logger("Build app", context=ctx)
    try:
        raise BuildError("boom")
    except BuildError as exc:
        err = exc

    logger.fail(err)

    assert _err(ctx) == "[09:05:01]  Build app failed: boom MEM: 84.2MB\n"
    debug_lines = [line for line in _out(ctx).splitlines() if line.startswith("[ DEBUG! ]")]
    assert len(debug_lines) == 1
    assert "Traceback" in debug_lines[0]


def test_build_error_without_message_prints_bare_summary() -> None:
    ctx, _ = _make_context()

    Logger("Bundle", context=ctx).fail(BuildError())

    assert _err(ctx) == "[09:05:01]  Bundle failed\n"


def test_unknown_error_emits_event_but_prints_nothing() -> None:
    ctx, events = _make_context()
    logger = Logger("Build app", context=ctx)
    err = ValueError("nope")

    assert logger.fail(err) is err

    assert events[-1].type == TaskEventType.FAILED
    assert _err(ctx) == ""


@pytest.mark.parametrize("scope, short", [("Build app", "Build"), ("lint", "lint"), ("  spaced  out ", "spaced")])
def test_event_scope_is_first_word(scope: str, short: str) -> None:
    ctx, events = _make_context()

    Logger(scope, context=ctx)

    assert events[0].scope == short


def test_terminal_state_is_never_left() -> None:
    ctx, events = _make_context(ticks=(1000, 1010, 1020))
    logger = Logger("Build app", context=ctx)

    logger.finish()
    logger.fail(BuildError("late"))

    assert logger.state == TaskState.COMPLETED
    assert events[-1].type == TaskEventType.FAILED
    assert "Build app failed: late" in _err(ctx)

    failed_first, _ = _make_context(ticks=(1000, 1010))
    other = Logger("Bundle", context=failed_first)
    other.fail(BuildError("boom"))
    other.finish()

    assert other.state == TaskState.FAILED
