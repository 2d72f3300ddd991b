"""Tests for annotation resolution with graceful degradation."""

from __future__ import annotations

import collections.abc
import logging
import typing
from typing import Protocol

import pytest

from introlog.annotations import (
    UnresolvableAnnotationError,
    is_in_typing_package,
    resolve_annotations,
)
from introlog.failure import FailureReporter, Severity


class Resolvable:
    count: int
    names: list[str]


class Broken:
    good: int
    missing: MissingType  # noqa: F821


class Base:
    value: int
    label: str


class Overriding(Base):
    value: AbsentType  # noqa: F821
    extra: float


class GappyProtocol(Protocol):
    ref: NotThere  # noqa: F821
    ok: int


class NeedsInjection:
    ref: Injected  # noqa: F821


def annotated(a: int, b: Nowhere) -> str:  # noqa: F821
    return str(a)


class _RecordingReporter(FailureReporter):
    """Reporter that records what it was asked to emit."""

    def __init__(self, enabled=(Severity.DETAILED, Severity.SUMMARY)):
        super().__init__()
        self.enabled = set(enabled)
        self.calls = []

    def is_enabled(self, severity):
        return severity in self.enabled

    def log(self, severity, message, source=None, cause=None):
        self.calls.append((severity, message, source, cause))


def test_is_in_typing_package_names():
    assert is_in_typing_package("typing.Protocol")
    assert is_in_typing_package("typing_extensions.Literal")
    assert is_in_typing_package("collections.abc.Mapping")
    assert not is_in_typing_package("builtins.int")
    assert not is_in_typing_package("collections.OrderedDict")
    assert not is_in_typing_package("does.not.Exist")
    assert not is_in_typing_package("Optional")


def test_is_in_typing_package_objects():
    assert is_in_typing_package(typing.Protocol)
    assert is_in_typing_package(typing.Optional)
    assert is_in_typing_package(collections.abc.Mapping)
    assert not is_in_typing_package(int)
    assert not is_in_typing_package(Resolvable)
    assert not is_in_typing_package(None)


def test_resolves_all_when_nothing_missing():
    reporter = _RecordingReporter()

    hints = resolve_annotations(Resolvable, reporter)

    assert hints == {"count": int, "names": list[str]}
    assert reporter.calls == []


def test_unresolvable_attribute_disappears_and_is_reported():
    reporter = _RecordingReporter()

    hints = resolve_annotations(Broken, reporter)

    assert hints == {"good": int}
    assert len(reporter.calls) == 1
    severity, message, source, cause = reporter.calls[0]
    assert severity is Severity.SUMMARY
    assert message == "Failed to introspect annotations"
    assert source is Broken
    assert isinstance(cause, UnresolvableAnnotationError)
    assert cause.attribute == "missing"
    assert cause.expression == "MissingType"
    assert isinstance(cause.__cause__, NameError)


def test_subclass_override_that_fails_drops_inherited_annotation():
    reporter = _RecordingReporter()

    hints = resolve_annotations(Overriding, reporter)

    assert hints == {"label": str, "extra": float}
    assert [call[3].attribute for call in reporter.calls] == ["value"]


def test_protocol_failures_are_detailed():
    reporter = _RecordingReporter()

    hints = resolve_annotations(GappyProtocol, reporter)

    assert hints == {"ok": int}
    severity, message, source, _ = reporter.calls[0]
    assert severity is Severity.DETAILED
    assert message == "Failed to meta-introspect annotation"
    assert source is GappyProtocol


def test_disabled_severity_skips_log_call():
    reporter = _RecordingReporter(enabled=())

    hints = resolve_annotations(Broken, reporter)

    assert hints == {"good": int}
    assert reporter.calls == []


def test_function_annotations():
    reporter = _RecordingReporter()

    hints = resolve_annotations(annotated, reporter)

    assert hints == {"a": int, "return": str}
    assert reporter.calls[0][2] is annotated
    assert reporter.calls[0][3].attribute == "b"


def test_explicit_global_namespace():
    reporter = _RecordingReporter()

    hints = resolve_annotations(NeedsInjection, reporter, globalns={"Injected": int})

    assert hints == {"ref": int}
    assert reporter.calls == []


def test_rejects_objects_without_annotations():
    with pytest.raises(TypeError):
        resolve_annotations(42)


def test_default_reporter_emits_summary_record(caplog):
    caplog.set_level(logging.INFO, logger="introlog")

    resolve_annotations(Broken)

    messages = [r.getMessage() for r in caplog.records if r.name == "introlog.failure"]
    assert messages == [
        f"Failed to introspect annotations on {Broken}: "
        "UnresolvableAnnotationError: cannot resolve 'MissingType' "
        "for attribute 'missing'"
    ]


def test_default_reporter_hides_detailed_at_info(caplog):
    caplog.set_level(logging.INFO, logger="introlog")

    assert resolve_annotations(GappyProtocol) == {"ok": int}

    assert not [r for r in caplog.records if r.name == "introlog.failure"]


def test_default_reporter_emits_detailed_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="introlog")

    resolve_annotations(GappyProtocol)

    failures = [r for r in caplog.records if r.name == "introlog.failure"]
    assert len(failures) == 1
    assert failures[0].levelno == logging.DEBUG
    assert failures[0].getMessage().startswith(
        f"Failed to meta-introspect annotation on {GappyProtocol}: "
    )
