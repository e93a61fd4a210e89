from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass, field
from typing import Iterable, Optional

from routelint.domain.declarations import Declaration
from routelint.engine.bindings import validate_bindings
from routelint.engine.collisions import RouteRegistry
from routelint.engine.compose import ComposedRoute, compose_routes
from routelint.engine.diagnostics import (
    CollectingSink,
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    Severity,
)
from routelint.engine.endpoints import check_has_endpoint
from routelint.engine.names import SUPPORTED_MARKERS

logger = logging.getLogger("routelint.engine")

__all__ = ["AnalysisSession", "DeclarationResult", "SUPPORTED_MARKERS"]


@dataclass
class DeclarationResult:
    """Outcome of processing one declaration. ``failure`` is set when processing crashed."""

    declaration: Declaration
    routes: list[ComposedRoute] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class _RecordingSink:
    def __init__(self, result: DeclarationResult, downstream: DiagnosticSink) -> None:
        self._result = result
        self._downstream = downstream

    def emit(self, severity: Severity, kind: DiagnosticKind, message: str, anchor: Declaration) -> None:
        self._result.diagnostics.append(Diagnostic(severity=severity, kind=kind, message=message, anchor=anchor))
        self._downstream.emit(severity, kind, message, anchor)


class AnalysisSession:
    """
    One analysis run. Owns the route registry, which lives across batches and is
    reset once when the final batch has been processed.
    """

    def __init__(self, sink: Optional[DiagnosticSink] = None) -> None:
        self.sink: DiagnosticSink = sink if sink is not None else CollectingSink()
        self.registry = RouteRegistry()
        self.finished = False

    def process_batch(
        self,
        declarations: Iterable[Declaration],
        is_last_pass: bool = False,
    ) -> list[DeclarationResult]:
        if self.finished:
            raise RuntimeError("analysis session already finished")

        results: list[DeclarationResult] = []
        seen: set[int] = set()
        for declaration in declarations:
            if id(declaration) in seen:
                continue
            seen.add(id(declaration))
            results.append(self.process(declaration))

        if is_last_pass:
            self.registry.reset()
            self.finished = True
        return results

    def process(self, declaration: Declaration) -> DeclarationResult:
        result = DeclarationResult(declaration=declaration)
        sink = _RecordingSink(result, self.sink)
        try:
            if declaration.kind == "method":
                result.routes = compose_routes(declaration, sink)
                self.registry.register_routes(declaration, result.routes, sink)
                validate_bindings(declaration, result.routes, sink)
            elif declaration.kind == "class":
                check_has_endpoint(declaration, sink)
        except Exception:
            detail = traceback.format_exc()
            logger.debug("processing %s failed", declaration.qualname, exc_info=True)
            result.failure = detail
            sink.emit(
                Severity.ERROR,
                DiagnosticKind.INTERNAL_FAILURE,
                f"An exception occurred: \n{detail}",
                declaration,
            )
        return result
