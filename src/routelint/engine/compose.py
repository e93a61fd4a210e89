from __future__ import annotations

import logging
from dataclasses import dataclass

from routelint.domain.declarations import Declaration
from routelint.engine.diagnostics import DiagnosticKind, DiagnosticSink, Severity
from routelint.engine.names import ALL_VERBS, CONTROLLER
from routelint.engine.paths import RouteFragment, extract_fragments
from routelint.engine.resolver import resolve_marker

logger = logging.getLogger("routelint.engine")

_EMPTY_FRAGMENT = RouteFragment(path="", verbs=ALL_VERBS)


@dataclass(frozen=True)
class ComposedRoute:
    path: str  # always starts with "/"
    verbs: tuple[str, ...]
    declaration: Declaration


def compose_routes(method: Declaration, sink: DiagnosticSink) -> list[ComposedRoute]:
    """
    Combine the class-level and method-level fragments of an endpoint method.

    Every class fragment is paired with every method fragment. Class-level verbs
    only ever contribute path text; the route's verbs come from the method side.
    """
    owner = method.enclosing
    if owner is None or owner.kind != "class":
        sink.emit(
            Severity.ERROR,
            DiagnosticKind.STRUCTURAL_ERROR,
            "expected to be enclosed in class",
            method,
        )
        return []

    if resolve_marker(owner, CONTROLLER) is None:
        sink.emit(
            Severity.MANDATORY_WARNING,
            DiagnosticKind.MISSING_ROUTE_HOST,
            "endpoint outside of controller",
            method,
        )

    class_fragments = extract_fragments(owner, sink) or [_EMPTY_FRAGMENT]
    method_fragments = extract_fragments(method, sink) or [_EMPTY_FRAGMENT]

    routes: list[ComposedRoute] = []
    for class_fragment in class_fragments:
        for method_fragment in method_fragments:
            path = join_path(class_fragment.path, method_fragment.path)
            routes.append(ComposedRoute(path=path, verbs=method_fragment.verbs, declaration=method))
            logger.debug("composed %s %s for %s", ",".join(method_fragment.verbs), path, method.qualname)
    return routes


def join_path(prefix: str, suffix: str) -> str:
    path = prefix + suffix
    if not path.startswith("/"):
        path = "/" + path
    return path
