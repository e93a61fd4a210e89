from __future__ import annotations

from routelint.domain.declarations import ListValue, MarkerInstance, MarkerType, TokenValue
from routelint.engine import names


class MarkerTypeTable:
    """
    Cross-file registry of marker types by qualified name.

    Types are created on first reference and filled in when their class
    definition is parsed, so every file must be parsed before any batch runs.
    """

    def __init__(self, builtins: bool = True) -> None:
        self._types: dict[str, MarkerType] = {}
        self._locked: set[str] = set()
        # seed marker classes; subclasses are found by is_marker_class
        self.marker_classes: set[str] = set()
        self._bases: dict[str, list[str]] = {}
        if builtins:
            _register_library_markers(self)
            self._locked = set(self._types)
            self.marker_classes = {f"{names.MARKER_MODULE}.Marker", *self._types}

    def __contains__(self, qualified_name: object) -> bool:
        return qualified_name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def get(self, qualified_name: str) -> MarkerType:
        marker_type = self._types.get(qualified_name)
        if marker_type is None:
            marker_type = MarkerType(qualified_name=qualified_name)
            self._types[qualified_name] = marker_type
        return marker_type

    def define(self, qualified_name: str, meta_markers: list[MarkerInstance]) -> MarkerType:
        marker_type = self.get(qualified_name)
        if qualified_name in self._locked:
            # library markers keep their built-in meta-markers
            return marker_type
        marker_type.markers = meta_markers
        return marker_type

    def instance(self, qualified_name: str, **arguments) -> MarkerInstance:
        return MarkerInstance(type=self.get(qualified_name), arguments=dict(arguments))

    def record_bases(self, qualified_name: str, bases: list[str]) -> None:
        self._bases[qualified_name] = bases

    def is_marker_class(self, qualified_name: str) -> bool:
        """
        True when the class derives, directly or through other parsed classes,
        from a marker class. Only meaningful once every file has been parsed.
        """
        seen: set[str] = set()
        pending = [qualified_name]
        while pending:
            current = pending.pop()
            if current in seen:
                continue
            seen.add(current)
            for base in self._bases.get(current, ()):
                if base in self.marker_classes:
                    return True
                pending.append(base)
        return False


def _register_library_markers(table: MarkerTypeTable) -> None:
    # meta-markers of routelint.markers, mirroring how the classic annotation
    # library declares them
    table.define(names.CONTROLLER, [])
    table.define(names.REQUEST_MAPPING, [])
    table.define(names.PATH_VARIABLE, [])
    table.define(names.REST_CONTROLLER, [table.instance(names.CONTROLLER)])

    for qualified_name, verbs in names.ROUTE_MARKERS.items():
        if qualified_name == names.REQUEST_MAPPING:
            continue
        verb_tokens = ListValue(tuple(TokenValue(f"{names.REQUEST_METHOD}.{verb}") for verb in verbs))
        table.define(qualified_name, [table.instance(names.REQUEST_MAPPING, method=verb_tokens)])
