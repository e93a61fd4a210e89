from routelint.engine import names
from routelint.engine.collisions import RouteRegistry, route_key
from routelint.engine.compose import ComposedRoute
from routelint.engine.diagnostics import CollectingSink, DiagnosticKind, Severity

from helpers import ModelBuilder


def _two_methods():
    m = ModelBuilder()
    cls = m.controller()
    return m.method(cls, "first", m.marker(names.GET_MAPPING)), m.method(cls, "second", m.marker(names.GET_MAPPING))


def test_route_key_wildcards_placeholders():
    assert route_key("GET", "/users/{id}/orders/{order}") == "GET /users/*/orders/*"
    assert route_key("POST", "/") == "POST /"


def test_distinct_declarations_with_same_key_report_both():
    first, second = _two_methods()
    registry = RouteRegistry()
    sink = CollectingSink()

    registry.register_routes(first, [ComposedRoute("/users/{id}", ("GET",), first)], sink)
    collisions = registry.register_routes(second, [ComposedRoute("/users/{name}", ("GET",), second)], sink)

    assert collisions == ["GET /users/*"]
    assert len(sink.diagnostics) == 2
    assert {id(d.anchor) for d in sink.diagnostics} == {id(first), id(second)}
    assert all(d.kind is DiagnosticKind.DUPLICATE_ROUTE and d.severity is Severity.ERROR for d in sink.diagnostics)
    assert all(d.message == "Duplicate path: GET /users/*" for d in sink.diagnostics)
    assert registry.owner("GET /users/*") is first


def test_same_declaration_registering_twice_is_silent():
    first, _ = _two_methods()
    registry = RouteRegistry()
    sink = CollectingSink()

    route = ComposedRoute("/a", ("GET",), first)
    registry.register_routes(first, [route], sink)
    registry.register_routes(first, [route, route], sink)

    assert sink.diagnostics == []
    assert len(registry) == 1


def test_different_verbs_do_not_collide():
    first, second = _two_methods()
    registry = RouteRegistry()
    sink = CollectingSink()

    registry.register_routes(first, [ComposedRoute("/a", ("GET",), first)], sink)
    registry.register_routes(second, [ComposedRoute("/a", ("POST", "PUT"), second)], sink)

    assert sink.diagnostics == []
    assert "POST /a" in registry and "PUT /a" in registry


def test_one_collision_per_overlapping_verb():
    first, second = _two_methods()
    registry = RouteRegistry()
    sink = CollectingSink()

    registry.register_routes(first, [ComposedRoute("/a", names.ALL_VERBS, first)], sink)
    registry.register_routes(second, [ComposedRoute("/a", ("GET", "POST"), second)], sink)

    assert len(sink.diagnostics) == 4


def test_reset_forgets_claims():
    first, second = _two_methods()
    registry = RouteRegistry()
    sink = CollectingSink()

    registry.register_routes(first, [ComposedRoute("/a", ("GET",), first)], sink)
    registry.reset()
    registry.register_routes(second, [ComposedRoute("/a", ("GET",), second)], sink)

    assert sink.diagnostics == []
    assert registry.owner("GET /a") is second
