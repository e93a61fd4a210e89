from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Union

DeclarationKind = Literal["module", "class", "method", "parameter"]


@dataclass(frozen=True)
class StrValue:
    value: str


@dataclass(frozen=True)
class ListValue:
    items: tuple[Value, ...] = ()


@dataclass(frozen=True)
class TokenValue:
    """Qualified reference such as ``routelint.markers.RequestMethod.GET``."""

    qualified_name: str

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class MarkerValue:
    marker: MarkerInstance


Value = Union[StrValue, ListValue, TokenValue, MarkerValue]


def value_kind(value: Value) -> str:
    """Human readable kind of a decoded argument value (used in shape errors)."""
    if isinstance(value, StrValue):
        return "string"
    if isinstance(value, ListValue):
        return "list"
    if isinstance(value, TokenValue):
        return "token reference"
    if isinstance(value, MarkerValue):
        return "nested marker"
    raise TypeError(f"not a decoded value: {value!r}")


@dataclass(eq=False)
class MarkerType:
    """
    A marker type (a decorator class). ``markers`` are the meta-markers attached
    to the type itself, which may point back at this type.
    """

    qualified_name: str
    markers: list[MarkerInstance] = field(default_factory=list)

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]

    def __repr__(self) -> str:
        # meta-marker graphs can be cyclic; keep repr flat
        return f"MarkerType({self.qualified_name!r})"


@dataclass(eq=False)
class MarkerInstance:
    type: MarkerType
    arguments: dict[str, Value] = field(default_factory=dict)

    @property
    def qualified_name(self) -> str:
        return self.type.qualified_name

    @property
    def simple_name(self) -> str:
        return self.type.simple_name


@dataclass(eq=False)
class Declaration:
    """
    Unit under analysis. Identity based equality: two declarations are the same
    only if they are the same object.
    """

    kind: DeclarationKind
    name: str
    enclosing: Optional[Declaration] = field(default=None, repr=False)
    markers: list[MarkerInstance] = field(default_factory=list, repr=False)
    parameters: list[Declaration] = field(default_factory=list, repr=False)
    enclosed: list[Declaration] = field(default_factory=list, repr=False)
    file_path: str = ""
    line: int = 0

    @property
    def qualname(self) -> str:
        parts = [self.name]
        outer = self.enclosing
        while outer is not None and outer.kind != "module":
            parts.append(outer.name)
            outer = outer.enclosing
        return ".".join(reversed(parts))

    def add_member(self, member: Declaration) -> Declaration:
        member.enclosing = self
        self.enclosed.append(member)
        return member

    def add_parameter(self, parameter: Declaration) -> Declaration:
        parameter.enclosing = self
        self.parameters.append(parameter)
        return parameter
