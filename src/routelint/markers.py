"""
Route markers for application code.

These are plain decorators: they record themselves on the decorated object under
``__route_markers__`` and hand it back unchanged. ``routelint check`` reads them
statically from the source; nothing here is needed at analysis time.

    @RestController
    @RequestMapping("/users")
    class UserController:
        @GetMapping("/{id}")
        def get(self, id: Annotated[int, PathVariable("id")]): ...
"""

from __future__ import annotations

import inspect
from enum import Enum
from typing import Any

MARKERS_ATTR = "__route_markers__"


class RequestMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


class Marker:
    """Base decorator. Works bare (``@Marker``) or called (``@Marker(...)``)."""

    def __new__(cls, *args: Any, **kwargs: Any):
        if len(args) == 1 and not kwargs and (inspect.isclass(args[0]) or inspect.isfunction(args[0])):
            # bare use: @Controller
            return cls()(args[0])
        return super().__new__(cls)

    def __init__(self, *value: Any, **arguments: Any) -> None:
        self.arguments: dict[str, Any] = {}
        if value:
            self.arguments["value"] = value[0] if len(value) == 1 else list(value)
        self.arguments.update(arguments)

    def __call__(self, target: Any) -> Any:
        markers = list(getattr(target, MARKERS_ATTR, ()))
        markers.append(self)
        setattr(target, MARKERS_ATTR, markers)
        return target

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.arguments.items())
        return f"{type(self).__name__}({args})"


def markers_of(target: Any) -> list[Marker]:
    """Markers recorded on ``target``, outermost decorator last."""
    return list(getattr(target, MARKERS_ATTR, ()))


class Controller(Marker):
    pass


class RestController(Controller):
    pass


class RequestMapping(Marker):
    pass


class GetMapping(Marker):
    pass


class PostMapping(Marker):
    pass


class PutMapping(Marker):
    pass


class DeleteMapping(Marker):
    pass


class PatchMapping(Marker):
    pass


class PathVariable(Marker):
    pass
