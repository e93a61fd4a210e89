from __future__ import annotations

MARKER_MODULE = "routelint.markers"

CONTROLLER = f"{MARKER_MODULE}.Controller"
REST_CONTROLLER = f"{MARKER_MODULE}.RestController"
REQUEST_MAPPING = f"{MARKER_MODULE}.RequestMapping"
GET_MAPPING = f"{MARKER_MODULE}.GetMapping"
POST_MAPPING = f"{MARKER_MODULE}.PostMapping"
PUT_MAPPING = f"{MARKER_MODULE}.PutMapping"
DELETE_MAPPING = f"{MARKER_MODULE}.DeleteMapping"
PATCH_MAPPING = f"{MARKER_MODULE}.PatchMapping"
PATH_VARIABLE = f"{MARKER_MODULE}.PathVariable"
REQUEST_METHOD = f"{MARKER_MODULE}.RequestMethod"

ALL_VERBS: tuple[str, ...] = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE")

# route marker -> default verbs
ROUTE_MARKERS: dict[str, tuple[str, ...]] = {
    REQUEST_MAPPING: ALL_VERBS,
    GET_MAPPING: ("GET",),
    POST_MAPPING: ("POST",),
    PUT_MAPPING: ("PUT",),
    DELETE_MAPPING: ("DELETE",),
    PATCH_MAPPING: ("PATCH",),
}

# markers the driver filters batches by
SUPPORTED_MARKERS: frozenset[str] = frozenset({CONTROLLER, PATH_VARIABLE, *ROUTE_MARKERS})
