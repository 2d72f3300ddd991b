"""Reporting of introspection failures at two severities.

Introspection code that cannot resolve some piece of metadata (for example an
annotation naming a type that does not exist at runtime) degrades gracefully
and reports the failure here. ``DETAILED`` is for routine, expected failures
and maps to DEBUG; ``SUMMARY`` is for failures worth surfacing by default and
maps to INFO. Whether each is emitted is controlled by the standard logging
configuration (see :mod:`introlog.logging`).

Typical usage guards message construction with ``is_enabled``:

    reporter = FailureReporter()
    if reporter.is_enabled(Severity.DETAILED):
        reporter.log(Severity.DETAILED, "Failed to resolve", source=cls, cause=exc)

Reporting never raises: an error while formatting or emitting a record is
discarded so the calling introspection continues.
"""

from __future__ import annotations

import logging
import threading
from enum import IntEnum
from typing import Any, Optional

from introlog.logging import get_logger


class Severity(IntEnum):
    """Verbosity level of a failure report."""

    #: Fine-grained trace for routine, expected failures (DEBUG).
    DETAILED = 1
    #: Operational notice for failures worth surfacing by default (INFO).
    SUMMARY = 2

    @classmethod
    def from_string(cls, value: str) -> "Severity":
        """Parse a case-insensitive severity name.

        Raises:
            ValueError: If the string doesn't match any member.
        """
        try:
            return cls[value.upper()]
        except KeyError:
            valid = ", ".join(e.name for e in cls)
            raise ValueError(
                f"Invalid severity '{value}'. Valid values are: {valid}"
            ) from None


_LEVELS = {
    Severity.DETAILED: logging.DEBUG,
    Severity.SUMMARY: logging.INFO,
}

_default_sink: Optional[logging.Logger] = None
_sink_lock = threading.Lock()


def get_default_sink() -> logging.Logger:
    """Return the process-wide sink, creating it on first use.

    The sink is this module's logger. Concurrent first callers all receive the
    same instance.
    """
    global _default_sink

    sink = _default_sink
    if sink is None:
        with _sink_lock:
            sink = _default_sink
            if sink is None:
                sink = get_logger(__name__)
                _default_sink = sink
    return sink


def reset_default_sink() -> None:
    """Forget the cached default sink (mainly for testing)."""
    global _default_sink

    with _sink_lock:
        _default_sink = None


def level_for(severity: Severity) -> int:
    """Return the stdlib logging level a severity is emitted at."""
    return _LEVELS[Severity(severity)]


def describe_cause(cause: BaseException) -> str:
    """Describe an exception as ``"<ClassName>: <message>"``.

    Only the class name is returned when the exception has no message.
    """
    text = str(cause)
    name = type(cause).__name__
    return f"{name}: {text}" if text else name


def format_report(message: str, source: Any, cause: BaseException) -> str:
    """Combine a message, optional source and cause into one line.

    Args:
        message: Free-text description of what failed.
        source: Object being introspected, or None to omit the " on ..." part.
        cause: Exception that triggered the failure.

    Returns:
        ``message`` + ``" on " + str(source)`` (when source is given) +
        ``": "`` + :func:`describe_cause` of ``cause``.
    """
    on = f" on {source}" if source is not None else ""
    return f"{message}{on}: {describe_cause(cause)}"


class FailureReporter:
    """Emits introspection failure reports to a logging sink.

    Args:
        sink: Logger to write to. When None, the process-wide default sink
            from :func:`get_default_sink` is used, initialized lazily.
    """

    def __init__(self, sink: Optional[logging.Logger] = None) -> None:
        self._sink = sink

    @property
    def sink(self) -> logging.Logger:
        if self._sink is not None:
            return self._sink
        return get_default_sink()

    def is_enabled(self, severity: Severity) -> bool:
        """Return True if reports at ``severity`` would currently be emitted."""
        try:
            return bool(self.sink.isEnabledFor(level_for(severity)))
        except Exception:
            return False

    def log(
        self,
        severity: Severity,
        message: str,
        source: Any = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        """Emit a failure report.

        With ``cause`` given, the emitted text is built by
        :func:`format_report`. Without a cause, a given ``source`` is still
        appended as ``" on <source>"``; with neither, ``message`` is emitted
        unchanged. Errors raised while formatting or emitting are discarded.

        Args:
            severity: Severity to report at.
            message: Free-text description.
            source: Optional object being introspected.
            cause: Optional exception that triggered the failure.
        """
        try:
            if cause is not None:
                message = format_report(message, source, cause)
            elif source is not None:
                message = f"{message} on {source}"
            self.sink.log(level_for(severity), message)
        except Exception:
            # Reporting is best-effort; the caller's introspection must continue.
            return

    def __repr__(self) -> str:
        if self._sink is None:
            return "FailureReporter(sink='<default>')"
        target = getattr(self._sink, "name", self._sink)
        return f"FailureReporter(sink={target!r})"


_default_reporter = FailureReporter()


def default_reporter() -> FailureReporter:
    """Return the process-wide reporter bound to the default sink."""
    return _default_reporter


def is_enabled(severity: Severity) -> bool:
    """Check ``severity`` on the default reporter."""
    return _default_reporter.is_enabled(severity)


def log(
    severity: Severity,
    message: str,
    source: Any = None,
    cause: Optional[BaseException] = None,
) -> None:
    """Emit a report through the default reporter."""
    _default_reporter.log(severity, message, source=source, cause=cause)
