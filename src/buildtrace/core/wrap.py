"""Word wrapping of mixed-type log arguments into indented terminal lines."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from numbers import Number
from typing import Any, Union
import inspect

DEFAULT_INDENT = " " * 12
DEFAULT_MAX_WIDTH = 120


class _Undefined:
    """Marker for "no value was given", rendered as ``undefined``."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


@dataclass(frozen=True)
class Word:
    """Plain text token; never contains whitespace unless it came from source code."""
    text: str


@dataclass(frozen=True)
class Deferred:
    """Token for containers and objects, rendered lazily on a line of its own."""
    render: Callable[[], str]


Token = Union[Word, Deferred]


def _function_source(fn: Callable[..., Any]) -> str:
    try:
        return inspect.getsource(fn).strip()
    except (OSError, TypeError):
        return repr(fn)


def tokenize(values: Iterable[Any]) -> list[Token]:
    """
    Turn log arguments into words and deferred tokens.

    Strings are split on whitespace runs; functions are kept whole as their
    source text; containers and other objects become ``Deferred`` tokens.
    """
    tokens: list[Token] = []
    for value in values:
        if value is None:
            tokens.append(Word("null"))
        elif value is UNDEFINED:
            tokens.append(Word("undefined"))
        elif isinstance(value, str):
            tokens.extend(Word(piece) for piece in value.split())
        elif isinstance(value, bool):
            tokens.append(Word("true" if value else "false"))
        elif isinstance(value, Number):
            tokens.append(Word(str(value)))
        elif inspect.isroutine(value):
            tokens.append(Word(_function_source(value)))
        elif isinstance(value, (bytes, bytearray)):
            tokens.append(Word(str(value)))
        else:
            tokens.append(Deferred(lambda value=value: str(value)))
    return tokens


def word_wrap(
    values: Iterable[Any],
    *,
    indent: str = DEFAULT_INDENT,
    max_width: int = DEFAULT_MAX_WIDTH,
) -> list[str]:
    """
    Lay out log arguments as lines of at most ``max_width`` columns.

    Every line starts with ``indent`` except deferred renderings, which are
    emitted verbatim. A word that cannot fit even on an empty line gets a line
    of its own and is never split.

    Usage example
    -------------
        word_wrap(["Build app", "started", 3])   # ['            Build app started 3']
    """
    output: list[str] = []
    line = indent

    def _flush() -> None:
        if line.strip():
            output.append(line.rstrip())

    for token in tokenize(values):
        if isinstance(token, Deferred):
            _flush()
            output.append(token.render())
            line = indent
        elif len(indent) + len(token.text) > max_width:
            _flush()
            output.append(indent + token.text)
            line = indent
        elif len(line) + len(token.text) > max_width:
            _flush()
            line = indent + token.text + " "
        else:
            line += token.text + " "

    _flush()
    return output
