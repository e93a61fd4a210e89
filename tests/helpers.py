from __future__ import annotations

from routelint.domain.declarations import Declaration, ListValue, MarkerInstance, StrValue, TokenValue
from routelint.engine import names
from routelint.extractors.python.types import MarkerTypeTable


def strs(*items: str) -> ListValue:
    return ListValue(tuple(StrValue(i) for i in items))


def verbs(*items: str) -> ListValue:
    return ListValue(tuple(TokenValue(f"{names.REQUEST_METHOD}.{v}") for v in items))


class ModelBuilder:
    """Builds declaration trees by hand for engine tests."""

    def __init__(self, builtins: bool = False) -> None:
        self.types = MarkerTypeTable(builtins=builtins)
        self.module = Declaration(kind="module", name="app", file_path="app.py", line=1)

    def marker(self, qualified_name: str, **arguments) -> MarkerInstance:
        return self.types.instance(qualified_name, **arguments)

    def controller(self, name: str = "UserController", *markers: MarkerInstance, host: bool = True) -> Declaration:
        all_markers = [self.marker(names.CONTROLLER)] if host else []
        all_markers.extend(markers)
        return self.module.add_member(Declaration(kind="class", name=name, markers=all_markers, file_path="app.py"))

    def method(self, owner: Declaration, name: str, *markers: MarkerInstance) -> Declaration:
        return owner.add_member(Declaration(kind="method", name=name, markers=list(markers), file_path="app.py"))

    def param(self, method: Declaration, name: str, *markers: MarkerInstance) -> Declaration:
        return method.add_parameter(Declaration(kind="parameter", name=name, markers=list(markers), file_path="app.py"))

    def path_variable(self, alias: str | None = None, **arguments) -> MarkerInstance:
        if alias is not None:
            arguments["value"] = StrValue(alias)
        return self.marker(names.PATH_VARIABLE, **arguments)
