"""Annotation introspection that degrades gracefully.

Annotations that reference a type absent at runtime are dropped from the
result rather than aborting introspection, and each such failure is reported
through a :class:`~introlog.failure.FailureReporter`.
"""

from __future__ import annotations

import inspect
import sys
import typing
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from introlog.failure import FailureReporter, Severity, default_reporter
from introlog.logging import get_logger

logger = get_logger(__name__)

#: Modules whose members are typing constructs rather than user types.
TYPING_MODULES: Tuple[str, ...] = ("typing", "typing_extensions", "collections.abc")

_RESOLUTION_ERRORS = (NameError, AttributeError, SyntaxError, TypeError)


class UnresolvableAnnotationError(NameError):
    """An annotation expression could not be evaluated.

    Attributes:
        attribute: Annotated attribute name.
        expression: Annotation source text, or None when the whole block of
            annotations could not be retrieved.
    """

    def __init__(self, attribute: str, expression: Optional[str]) -> None:
        self.attribute = attribute
        self.expression = expression
        if expression is None:
            text = f"cannot retrieve annotations of {attribute!r}"
        else:
            text = f"cannot resolve {expression!r} for attribute {attribute!r}"
        super().__init__(text)


def _module_of(annotation: Any) -> Optional[str]:
    if isinstance(annotation, str):
        module, sep, _ = annotation.rpartition(".")
        return module if sep else None
    module = getattr(annotation, "__module__", None)
    return module if isinstance(module, str) else None


def is_in_typing_package(annotation: Any) -> bool:
    """Return True if ``annotation`` belongs to a typing package.

    Args:
        annotation: Either a qualified dotted name such as ``"typing.Optional"``
            or an object whose ``__module__`` is inspected.

    Returns:
        True when the name or defining module is one of :data:`TYPING_MODULES`
        or a submodule of one. Bare names, unknown names and None are False.
    """
    if annotation is None:
        return False
    module = _module_of(annotation)
    if not module:
        return False
    return any(
        module == pkg or module.startswith(pkg + ".") for pkg in TYPING_MODULES
    )


def _is_meta(obj: Any) -> bool:
    if is_in_typing_package(obj):
        return True
    if not inspect.isclass(obj):
        return False
    return typing.is_protocol(obj) or typing.is_typeddict(obj)


def _report_failure(
    reporter: FailureReporter, obj: Any, error: UnresolvableAnnotationError
) -> None:
    if _is_meta(obj):
        severity = Severity.DETAILED
        message = "Failed to meta-introspect annotation"
    else:
        severity = Severity.SUMMARY
        message = "Failed to introspect annotations"
    if reporter.is_enabled(severity):
        reporter.log(severity, message, source=obj, cause=error)


def _owners(obj: Any) -> Iterable[Any]:
    if inspect.isclass(obj):
        # Base classes first so subclass annotations override theirs
        return [klass for klass in reversed(obj.__mro__) if klass is not object]
    return [obj]


def _namespaces(
    owner: Any,
    globalns: Optional[Dict[str, Any]],
    localns: Optional[Mapping[str, Any]],
) -> Tuple[Dict[str, Any], Optional[Mapping[str, Any]]]:
    if globalns is None:
        if inspect.ismodule(owner):
            globalns = vars(owner)
        elif hasattr(inspect.unwrap(owner), "__globals__"):
            globalns = inspect.unwrap(owner).__globals__
        else:
            module = sys.modules.get(getattr(owner, "__module__", None) or "")
            globalns = vars(module) if module is not None else {}
    if localns is None and inspect.isclass(owner):
        localns = dict(vars(owner))
    return globalns, localns


def _raw_annotations(owner: Any) -> Dict[str, Any]:
    if sys.version_info < (3, 14):
        return inspect.get_annotations(owner)

    import annotationlib

    # Deferred annotations: unresolvable names come back as ForwardRefs
    try:
        return annotationlib.get_annotations(
            owner, format=annotationlib.Format.FORWARDREF
        )
    except _RESOLUTION_ERRORS:
        return annotationlib.get_annotations(owner, format=annotationlib.Format.STRING)


def resolve_annotations(
    obj: Any,
    reporter: Optional[FailureReporter] = None,
    *,
    globalns: Optional[Dict[str, Any]] = None,
    localns: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Resolve the annotations of a class, function or module.

    Each annotation is resolved on its own, including on interpreters that
    defer annotation evaluation. String annotations and forward references
    are evaluated against the owner's globals (or ``globalns``/``localns``
    when given). An attribute whose annotation cannot be evaluated is left
    out of the result and reported: at DETAILED when ``obj`` is itself a
    typing construct, a Protocol or a TypedDict, at SUMMARY otherwise.

    Args:
        obj: Class, function, or module to introspect. Classes include
            annotations inherited from their bases.
        reporter: Reporter for failures; the process-wide default when None.
        globalns: Global namespace for evaluating string annotations.
        localns: Local namespace for evaluating string annotations.

    Returns:
        Mapping of attribute name to resolved annotation.

    Raises:
        TypeError: If ``obj`` is not something that carries annotations.
    """
    if reporter is None:
        reporter = default_reporter()

    resolved: Dict[str, Any] = {}
    for owner in _owners(obj):
        try:
            raw = _raw_annotations(owner)
        except (NameError, AttributeError, SyntaxError) as exc:
            owner_name = getattr(owner, "__qualname__", None) or str(owner)
            error = UnresolvableAnnotationError(owner_name, None)
            error.__cause__ = exc
            _report_failure(reporter, obj, error)
            continue

        owner_globals, owner_locals = _namespaces(owner, globalns, localns)
        for name, value in raw.items():
            if isinstance(value, typing.ForwardRef):
                value = value.__forward_arg__
            if not isinstance(value, str):
                resolved[name] = value
                continue
            try:
                # Same evaluation as inspect.get_annotations(eval_str=True)
                resolved[name] = eval(value, owner_globals, owner_locals)
            except _RESOLUTION_ERRORS as exc:
                # The attribute disappears, including any base-class annotation
                resolved.pop(name, None)
                error = UnresolvableAnnotationError(name, value)
                error.__cause__ = exc
                _report_failure(reporter, obj, error)

    logger.debug("Resolved %d annotation(s) on %r", len(resolved), obj)
    return resolved
