from routelint.engine import names
from routelint.engine.diagnostics import CollectingSink, DiagnosticKind, Severity
from routelint.engine.endpoints import check_has_endpoint

from helpers import ModelBuilder, strs


def test_only_verb_specific_markers_without_meta_warns_once():
    m = ModelBuilder()
    cls = m.controller("Api")
    m.method(cls, "get", m.marker(names.GET_MAPPING))
    m.method(cls, "post", m.marker(names.POST_MAPPING))
    sink = CollectingSink()

    assert check_has_endpoint(cls, sink) is False

    assert len(sink.diagnostics) == 1
    d = sink.diagnostics[0]
    assert d.kind is DiagnosticKind.MISSING_ENDPOINT
    assert d.severity is Severity.MANDATORY_WARNING
    assert d.message == "@Controller without endpoint"
    assert d.anchor is cls


def test_verb_specific_marker_counts_when_meta_marked_with_generic():
    m = ModelBuilder(builtins=True)
    cls = m.controller("Api")
    m.method(cls, "get", m.marker(names.GET_MAPPING))
    sink = CollectingSink()

    assert check_has_endpoint(cls, sink) is True
    assert sink.diagnostics == []


def test_generic_marker_satisfies_check():
    m = ModelBuilder()
    cls = m.controller("Api")
    m.method(cls, "helper")
    m.method(cls, "index", m.marker(names.REQUEST_MAPPING, value=strs("/")))
    sink = CollectingSink()

    assert check_has_endpoint(cls, sink) is True
    assert sink.diagnostics == []


def test_only_direct_methods_are_scanned():
    m = ModelBuilder()
    cls = m.controller("Api")
    outer = m.method(cls, "outer")
    m.method(outer, "inner", m.marker(names.REQUEST_MAPPING))
    sink = CollectingSink()

    assert check_has_endpoint(cls, sink) is False
    assert len(sink.diagnostics) == 1


def test_warning_names_the_class_marker():
    m = ModelBuilder(builtins=True)
    cls = m.controller("Api", m.marker(names.REST_CONTROLLER), host=False)
    sink = CollectingSink()

    check_has_endpoint(cls, sink)

    assert sink.diagnostics[0].message == "@RestController without endpoint"
