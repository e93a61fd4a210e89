from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from routelint.domain.declarations import Declaration, StrValue
from routelint.engine.compose import ComposedRoute
from routelint.engine.diagnostics import DiagnosticKind, DiagnosticSink, Severity
from routelint.engine.names import PATH_VARIABLE
from routelint.engine.paths import path_placeholders
from routelint.engine.resolver import resolve_marker

ALIAS_ARGUMENTS = ("value", "name")


@dataclass(frozen=True)
class PathBinding:
    parameter: Declaration
    name: str


def resolve_bindings(method: Declaration, sink: DiagnosticSink) -> list[PathBinding]:
    """
    Collect the parameters of ``method`` that carry a path-binding marker, with
    their external names: the alias argument when one is given, otherwise the
    parameter's own name. Two literal aliases on one marker are reported.
    """
    bindings: list[PathBinding] = []
    for parameter in method.parameters:
        marker = resolve_marker(parameter, PATH_VARIABLE)
        if marker is None:
            continue

        alias = ""
        for arg_name, value in marker.arguments.items():
            if arg_name not in ALIAS_ARGUMENTS or not isinstance(value, StrValue):
                continue
            if not alias:
                alias = value.value
            else:
                sink.emit(
                    Severity.ERROR,
                    DiagnosticKind.DUPLICATE_ALIAS,
                    "Duplicate name for path variable",
                    parameter,
                )

        bindings.append(PathBinding(parameter=parameter, name=alias or parameter.name))
    return bindings


def validate_bindings(
    method: Declaration,
    routes: Iterable[ComposedRoute],
    sink: DiagnosticSink,
) -> None:
    """
    Check the path bindings of ``method`` against each route's placeholders.

    Unknown binding names are warned about one by one. The route is then flagged
    when the number of unknown bindings differs from the number of placeholders
    left unconsumed; the names themselves are not compared.
    """
    routes = list(routes)
    if not routes:
        return
    bindings = resolve_bindings(method, sink)

    for route in routes:
        expected = path_placeholders(route.path)
        unmatched = 0

        for binding in bindings:
            if binding.name in expected:
                expected.remove(binding.name)
                continue
            unmatched += 1
            sink.emit(
                Severity.WARNING,
                DiagnosticKind.UNMATCHED_BINDING,
                f"@PathVariable {binding.name} cannot be found in path {route.path}",
                binding.parameter,
            )

        if unmatched != len(expected):
            sink.emit(
                Severity.ERROR,
                DiagnosticKind.BINDING_COUNT,
                f"@PathVariables do not match endpoint path {route.path}",
                method,
            )
