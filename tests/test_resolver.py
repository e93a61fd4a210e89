from routelint.domain.declarations import Declaration, StrValue
from routelint.engine import names
from routelint.engine.resolver import resolve_marker
from routelint.graph.traversal import breadth_first

from helpers import ModelBuilder


def test_resolve_direct_marker():
    m = ModelBuilder()
    cls = m.controller("Api")
    found = resolve_marker(cls, names.CONTROLLER)
    assert found is cls.markers[0]


def test_resolve_through_meta_marker_chain():
    m = ModelBuilder()
    # app.Stereotype -> app.Service -> Controller
    m.types.define("app.Service", [m.marker(names.CONTROLLER)])
    m.types.define("app.Stereotype", [m.marker("app.Service")])
    cls = m.controller("Api", m.marker("app.Stereotype"), host=False)

    found = resolve_marker(cls, names.CONTROLLER)
    assert found is not None
    assert found.qualified_name == names.CONTROLLER


def test_resolve_missing_marker_is_none():
    m = ModelBuilder()
    cls = m.controller("Api", host=False)
    assert resolve_marker(cls, names.CONTROLLER) is None


def test_cyclic_meta_markers_terminate_without_match():
    m = ModelBuilder()
    # A is meta-marked by B, B is meta-marked by A
    m.types.define("app.A", [m.marker("app.B")])
    m.types.define("app.B", [m.marker("app.A")])
    cls = m.controller("Api", m.marker("app.A"), host=False)

    assert resolve_marker(cls, "app.C") is None
    assert resolve_marker(cls, "app.B").qualified_name == "app.B"


def test_breadth_first_dedupes_by_identity_not_equality():
    a, b = StrValue("x"), StrValue("x")
    graph = {id(a): [b, a], id(b): [a]}
    seen = list(breadth_first([a], lambda n: graph[id(n)]))
    assert len(seen) == 2
    assert seen[0] is a and seen[1] is b


def test_breadth_first_order():
    root = Declaration(kind="module", name="m")
    left = root.add_member(Declaration(kind="class", name="L"))
    right = root.add_member(Declaration(kind="class", name="R"))
    leaf = left.add_member(Declaration(kind="method", name="leaf"))

    order = [d.name for d in breadth_first([root], lambda d: d.enclosed)]
    assert order == ["m", "L", "R", "leaf"]
    assert leaf.qualname == "L.leaf"
    assert right.enclosing is root
