from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional
import traceback as _traceback


class BuildError(Exception):
    """
    A reportable build failure that remembers whether it was already shown.

    The same instance may bubble through several task layers; each layer hands it
    to ``Logger.fail``, which prints it the first time only and then flips
    ``has_been_logged``.

    ``updated_diagnostics`` is reserved for whatever refreshes persisted
    diagnostics from this error. Nothing in this package reads or writes it.

    Usage example
    -------------
        try:
            compile_sources()
        except OSError as exc:
            raise BuildError.from_value(exc) from exc
    """

    def __init__(
        self,
        message: str = "",
        *,
        name: Optional[str] = None,
        stack: Optional[str] = None,
        has_been_logged: bool = False,
        updated_diagnostics: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.name = name or type(self).__name__
        self._stack = stack
        self.has_been_logged = has_been_logged
        self.updated_diagnostics = updated_diagnostics

    @property
    def stack(self) -> Optional[str]:
        """Explicit stack text if one was carried over, else this error's own traceback."""
        if self._stack is not None:
            return self._stack
        if self.__traceback__ is None:
            return None
        return _format_traceback(self)

    @stack.setter
    def stack(self, value: Optional[str]) -> None:
        self._stack = value

    @classmethod
    def from_value(cls, value: Any) -> "BuildError":
        """
        Convert any thrown/failure value into a BuildError.

        Probes ``message``, ``name``, ``stack``, ``hasBeenLogged`` and
        ``updatedDiagnostics`` (snake_case spellings accepted too) on exceptions,
        mappings (e.g. a ``to_json()`` payload) and plain objects. Missing fields
        keep their defaults; logged state that is already set is carried over.
        """
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, Mapping):
            return cls._from_fields(value.get, fallback_message="")

        def _get(key: str, default: Any = None) -> Any:
            return getattr(value, key, default)

        if isinstance(value, BaseException):
            err = cls._from_fields(_get, fallback_message=str(value))
            if not isinstance(value, BuildError):
                err.name = type(value).__name__
            if err._stack is None and value.__traceback__ is not None:
                err._stack = _format_traceback(value)
            return err
        return cls._from_fields(_get, fallback_message=str(value))

    @classmethod
    def _from_fields(cls, get: Any, *, fallback_message: str) -> "BuildError":
        message = get("message")
        name = get("name")
        stack = get("stack")
        has_been_logged = _first_bool(get("hasBeenLogged"), get("has_been_logged"))
        updated_diagnostics = _first_bool(get("updatedDiagnostics"), get("updated_diagnostics"))
        return cls(
            message if isinstance(message, str) and message else fallback_message,
            name=name if isinstance(name, str) and name else None,
            stack=stack if isinstance(stack, str) else None,
            has_been_logged=bool(has_been_logged),
            updated_diagnostics=bool(updated_diagnostics),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "name": self.name,
            "stack": self.stack,
            "hasBeenLogged": self.has_been_logged,
            "updatedDiagnostics": self.updated_diagnostics,
        }


class IgnorableError(Exception):
    """Thrown to leave the happy path without any reporting at all."""


def _first_bool(*candidates: Any) -> bool:
    for candidate in candidates:
        if isinstance(candidate, bool):
            return candidate
    return False


def _format_traceback(exc: BaseException) -> str:
    return "".join(_traceback.format_exception(type(exc), exc, exc.__traceback__))


@dataclass(frozen=True)
class PrintLine:
    """One source line of a diagnostic with the offending character span."""
    line_index: int
    line_number: int
    text: str
    error_char_start: int
    error_length: int


@dataclass(frozen=True)
class Diagnostic:
    """
    A structured compiler/linter diagnostic as consumed by external renderers.

    ``header`` is normally built with ``format_header``.
    """
    level: str
    syntax: str
    type: str
    header: str
    code: str
    message_text: str
    abs_file_name: str
    rel_file_name: str
    lines: tuple[PrintLine, ...] = ()
