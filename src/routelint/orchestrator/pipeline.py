from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from routelint.config import Settings
from routelint.domain.models import CheckReport, DiagnosticRecord, RouteRecord
from routelint.engine.compose import ComposedRoute
from routelint.engine.diagnostics import CollectingSink, Diagnostic, Severity
from routelint.engine.session import AnalysisSession
from routelint.extractors.python.declarations import (
    ModuleDeclarations,
    build_declarations_from_file,
    module_name_for,
)
from routelint.extractors.python.types import MarkerTypeTable
from routelint.repo.scanner import scan_python_files

logger = logging.getLogger("routelint.pipeline")


@dataclass(frozen=True)
class CheckResult:
    root: str
    files_scanned: int
    diagnostics: list[Diagnostic]
    routes: list[ComposedRoute]
    failures: int
    fail_on_warning: bool = False

    def count(self, severity: Severity) -> int:
        return sum(1 for d in self.diagnostics if d.severity is severity)

    @property
    def has_errors(self) -> bool:
        if any(d.is_error for d in self.diagnostics):
            return True
        if self.fail_on_warning:
            return bool(self.count(Severity.WARNING) or self.count(Severity.MANDATORY_WARNING))
        return False

    def to_report(self) -> CheckReport:
        return CheckReport(
            root=self.root,
            files_scanned=self.files_scanned,
            failures=self.failures,
            diagnostics=[_diagnostic_record(d) for d in sorted_diagnostics(self.diagnostics)],
            routes=[r for route in self.routes for r in route_records(route)],
        )


def sorted_diagnostics(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    # stable ordering: by file, line, then emission order
    return sorted(diagnostics, key=lambda d: (d.anchor.file_path, d.anchor.line))


def route_records(route: ComposedRoute) -> list[RouteRecord]:
    decl = route.declaration
    return [
        RouteRecord(verb=verb, path=route.path, handler_name=decl.qualname, file_path=decl.file_path, line=decl.line)
        for verb in route.verbs
    ]


def _diagnostic_record(d: Diagnostic) -> DiagnosticRecord:
    return DiagnosticRecord(
        severity=d.severity.value,
        kind=d.kind.value,
        message=d.message,
        file_path=d.anchor.file_path,
        line=d.anchor.line,
        declaration=d.anchor.qualname,
    )


def run_check(
    root: Path,
    settings: Optional[Settings] = None,
    max_files: int | None = None,
) -> CheckResult:
    """
    Analyse every Python file under ``root``.

    All files are parsed first so that marker types defined anywhere are known,
    then each file is fed to one session as a batch; the last batch is flagged
    as the final pass.
    """
    settings = settings or Settings()
    root = root.resolve()
    limit = max_files if max_files is not None else settings.max_files

    py_files = scan_python_files(root, max_files=limit, exclude=settings.exclude)
    base = root.parent if root.is_file() else root

    types = MarkerTypeTable()
    modules: list[ModuleDeclarations] = []
    for p in py_files:
        path = Path(p)
        parsed = build_declarations_from_file(path, module_name_for(path, base), types)
        if parsed is not None:
            modules.append(parsed)
    logger.info("parsed %d of %d files, %d marker types known", len(modules), len(py_files), len(types))

    sink = CollectingSink()
    session = AnalysisSession(sink)
    routes: list[ComposedRoute] = []
    failures = 0

    batches = [m.batch() for m in modules] or [[]]
    for index, batch in enumerate(batches):
        results = session.process_batch(batch, is_last_pass=index == len(batches) - 1)
        for result in results:
            routes.extend(result.routes)
            if not result.ok:
                failures += 1
                logger.warning("internal failure while processing %s", result.declaration.qualname)

    return CheckResult(
        root=str(root),
        files_scanned=len(py_files),
        diagnostics=list(sink.diagnostics),
        routes=routes,
        failures=failures,
        fail_on_warning=settings.fail_on_warning,
    )
