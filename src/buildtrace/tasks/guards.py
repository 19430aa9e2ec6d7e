from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from buildtrace.core.colors import Colorizer
from buildtrace.errors.types import BuildError, IgnorableError

from .channels import LogContext
from .logger import Logger

T = TypeVar("T")


@contextmanager
def task(
    scope: str,
    *,
    context: Optional[LogContext] = None,
    color: Optional[Colorizer] = None,
    ready: bool = False,
) -> Iterator[Logger]:
    """
    Context manager wrapping a named task in a Logger.

    Behavior
    --------
    - clean exit: ``finish`` (or ``ready`` when ``ready=True``).
    - IgnorableError / BuildError: handed to ``fail`` and re-raised as is.
    - any other Exception: converted with ``BuildError.from_value``, handed to
      ``fail`` and raised from the original.
    - KeyboardInterrupt, SystemExit and the like: handed to ``fail`` unwrapped
      and re-raised.

    Usage example
    -------------
        with task("Build app"):
            compile_sources()
    """
    logger = Logger(scope, context=context)
    try:
        yield logger
    except (IgnorableError, BuildError) as exc:
        logger.fail(exc)
        raise
    except Exception as exc:
        raise logger.fail(BuildError.from_value(exc)) from exc
    except BaseException as exc:
        logger.fail(exc)
        raise
    else:
        if ready:
            logger.ready(color)
        else:
            logger.finish(color)


def run_task(
    scope: str,
    fn: Callable[[], T],
    *,
    context: Optional[LogContext] = None,
    color: Optional[Colorizer] = None,
) -> T:
    """
    Execute a callable as a named task and return its result.

    Usage example
    -------------
        bundle = run_task("Bundle app", lambda: bundle_sources(entry))
    """
    with task(scope, context=context, color=color):
        return fn()
