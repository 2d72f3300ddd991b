"""introlog: reporting of introspection failures.

Introspection code that cannot resolve metadata degrades gracefully and
reports what it dropped at one of two severities.

Primary API:
    FailureReporter - Emits failure reports to a logging sink
    Severity - DETAILED (debug trace) or SUMMARY (surfaced by default)
    resolve_annotations() - Resolve annotations, dropping unresolvable ones
    is_in_typing_package() - Check whether a name/object is a typing construct

Example:
    from introlog import FailureReporter, Severity

    reporter = FailureReporter()
    if reporter.is_enabled(Severity.SUMMARY):
        reporter.log(Severity.SUMMARY, "cannot resolve", source=cls, cause=exc)
"""

from __future__ import annotations

from introlog import logging
from introlog._version import __version__
from introlog.annotations import (
    UnresolvableAnnotationError,
    is_in_typing_package,
    resolve_annotations,
)
from introlog.config import REPORTER_CONFIG, ReporterConfig
from introlog.failure import (
    FailureReporter,
    Severity,
    default_reporter,
    describe_cause,
    format_report,
    get_default_sink,
)

__all__ = [
    # Version
    "__version__",
    # Reporting
    "FailureReporter",
    "Severity",
    "default_reporter",
    "describe_cause",
    "format_report",
    "get_default_sink",
    # Introspection
    "resolve_annotations",
    "is_in_typing_package",
    "UnresolvableAnnotationError",
    # Configuration
    "ReporterConfig",
    "REPORTER_CONFIG",
    # Utilities
    "logging",
]
