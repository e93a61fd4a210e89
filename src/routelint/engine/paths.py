from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from routelint.domain.declarations import (
    Declaration,
    ListValue,
    MarkerInstance,
    StrValue,
    TokenValue,
    Value,
    value_kind,
)
from routelint.engine.diagnostics import DiagnosticKind, DiagnosticSink, Severity
from routelint.engine.names import REQUEST_MAPPING, ROUTE_MARKERS

PATH_ARGUMENTS = ("value", "path")
VERB_ARGUMENT = "method"

# {name} placeholders in a path template
PATH_PARAM_PATTERN = re.compile(r"\{([^{}/]+)\}")


@dataclass(frozen=True)
class RouteFragment:
    path: str
    verbs: tuple[str, ...]


def extract_fragments(declaration: Declaration, sink: DiagnosticSink) -> list[RouteFragment]:
    """
    Turn the route markers attached directly to ``declaration`` into fragments.

    One fragment per declared path string; a route marker without a path argument
    yields a single fragment with an empty path. Shape problems are reported on
    ``sink`` and the offending argument is skipped.
    """
    fragments: list[RouteFragment] = []

    for marker in declaration.markers:
        defaults = ROUTE_MARKERS.get(marker.qualified_name)
        if defaults is None:
            continue

        verbs = _verbs_for(marker, defaults, declaration, sink)

        has_path = False
        for arg_name in PATH_ARGUMENTS:
            if arg_name not in marker.arguments:
                continue
            has_path = True
            for path in _paths_from(marker.arguments[arg_name], declaration, sink):
                fragments.append(RouteFragment(path=path, verbs=verbs))

        if not has_path:
            fragments.append(RouteFragment(path="", verbs=verbs))

    return fragments


def _verbs_for(
    marker: MarkerInstance,
    defaults: tuple[str, ...],
    declaration: Declaration,
    sink: DiagnosticSink,
) -> tuple[str, ...]:
    # verb-specific markers have no verb argument; only the generic one can override
    if marker.qualified_name != REQUEST_MAPPING or VERB_ARGUMENT not in marker.arguments:
        return defaults

    value = marker.arguments[VERB_ARGUMENT]
    if not isinstance(value, ListValue):
        sink.emit(
            Severity.ERROR,
            DiagnosticKind.SHAPE_ERROR,
            f"expected list of verbs but got {value_kind(value)}",
            declaration,
        )
        return defaults
    if not value.items:
        return defaults

    verbs: list[str] = []
    for item in value.items:
        verb = _verb_token(item)
        if verb is None:
            sink.emit(
                Severity.ERROR,
                DiagnosticKind.SHAPE_ERROR,
                f"expected list of verbs but got list of {value_kind(item)}",
                declaration,
            )
            continue
        if verb not in verbs:
            verbs.append(verb)
    return tuple(verbs) if verbs else defaults


def _verb_token(item: Value) -> Optional[str]:
    if isinstance(item, TokenValue):
        return item.simple_name
    if isinstance(item, StrValue):
        return item.value.rsplit(".", 1)[-1]
    return None


def _paths_from(value: Value, declaration: Declaration, sink: DiagnosticSink) -> list[str]:
    if not isinstance(value, ListValue):
        sink.emit(
            Severity.ERROR,
            DiagnosticKind.SHAPE_ERROR,
            f"expected list of paths but got {value_kind(value)}",
            declaration,
        )
        return []

    out: list[str] = []
    for item in value.items:
        if isinstance(item, StrValue):
            out.append(item.value)
        else:
            sink.emit(
                Severity.ERROR,
                DiagnosticKind.SHAPE_ERROR,
                f"expected list of paths but got list of {value_kind(item)}",
                declaration,
            )
    return out


def path_placeholders(path: str) -> set[str]:
    return set(PATH_PARAM_PATTERN.findall(path))


def wildcard_path(path: str, wildcard: str = "*") -> str:
    return PATH_PARAM_PATTERN.sub(wildcard, path)
