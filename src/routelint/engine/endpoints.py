from __future__ import annotations

from routelint.domain.declarations import Declaration
from routelint.engine.diagnostics import DiagnosticKind, DiagnosticSink, Severity
from routelint.engine.names import REQUEST_MAPPING, SUPPORTED_MARKERS
from routelint.engine.resolver import resolve_marker


def check_has_endpoint(cls: Declaration, sink: DiagnosticSink) -> bool:
    """
    Warn when none of the methods directly inside ``cls`` resolves to the generic
    route marker. Verb-specific markers only count through their meta-markers.
    """
    for member in cls.enclosed:
        if member.kind == "method" and resolve_marker(member, REQUEST_MAPPING) is not None:
            return True

    label = host_marker_label(cls)
    sink.emit(
        Severity.MANDATORY_WARNING,
        DiagnosticKind.MISSING_ENDPOINT,
        f"@{label} without endpoint",
        cls,
    )
    return False


def host_marker_label(cls: Declaration) -> str:
    for marker in cls.markers:
        if marker.qualified_name in SUPPORTED_MARKERS:
            return marker.simple_name
    return cls.markers[0].simple_name if cls.markers else "Controller"
