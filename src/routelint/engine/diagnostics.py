from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from routelint.domain.declarations import Declaration


class Severity(str, Enum):
    WARNING = "warning"
    MANDATORY_WARNING = "mandatory-warning"
    ERROR = "error"


class DiagnosticKind(str, Enum):
    SHAPE_ERROR = "shape-error"
    STRUCTURAL_ERROR = "structural-error"
    DUPLICATE_ROUTE = "duplicate-route-error"
    DUPLICATE_ALIAS = "duplicate-alias-error"
    UNMATCHED_BINDING = "unmatched-binding-warning"
    BINDING_COUNT = "unmatched-binding-count-error"
    MISSING_ENDPOINT = "missing-endpoint-warning"
    MISSING_ROUTE_HOST = "missing-route-host-warning"
    INTERNAL_FAILURE = "internal-failure"


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    kind: DiagnosticKind
    message: str
    anchor: Declaration

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


class DiagnosticSink(Protocol):
    def emit(
        self,
        severity: Severity,
        kind: DiagnosticKind,
        message: str,
        anchor: Declaration,
    ) -> None: ...


@dataclass
class CollectingSink:
    """Keeps every emitted diagnostic, in emission order."""

    diagnostics: list[Diagnostic] = field(default_factory=list)

    def emit(
        self,
        severity: Severity,
        kind: DiagnosticKind,
        message: str,
        anchor: Declaration,
    ) -> None:
        self.diagnostics.append(Diagnostic(severity=severity, kind=kind, message=message, anchor=anchor))

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]
