from __future__ import annotations

import logging
from typing import Iterable, Optional

from routelint.domain.declarations import Declaration
from routelint.engine.compose import ComposedRoute
from routelint.engine.diagnostics import DiagnosticKind, DiagnosticSink, Severity
from routelint.engine.paths import wildcard_path

logger = logging.getLogger("routelint.engine")

WILDCARD = "*"


def route_key(verb: str, path: str) -> str:
    # GET /users/{id} -> "GET /users/*"
    return f"{verb} {wildcard_path(path, WILDCARD)}"


class RouteRegistry:
    """Route keys claimed so far in an analysis run, with their first claimant."""

    def __init__(self) -> None:
        self._claims: dict[str, Declaration] = {}

    def __len__(self) -> int:
        return len(self._claims)

    def __contains__(self, key: object) -> bool:
        return key in self._claims

    def owner(self, key: str) -> Optional[Declaration]:
        return self._claims.get(key)

    def register_routes(
        self,
        declaration: Declaration,
        routes: Iterable[ComposedRoute],
        sink: DiagnosticSink,
    ) -> list[str]:
        """
        Claim every (verb, path) key of ``routes`` for ``declaration``.

        Re-claiming a key by the same declaration is a no-op. A key already held
        by another declaration is reported at both declarations. Returns the
        colliding keys.
        """
        collisions: list[str] = []
        for route in routes:
            for verb in route.verbs:
                key = route_key(verb, route.path)
                previous = self._claims.setdefault(key, declaration)
                if previous is declaration:
                    continue
                collisions.append(key)
                message = f"Duplicate path: {key}"
                sink.emit(Severity.ERROR, DiagnosticKind.DUPLICATE_ROUTE, message, declaration)
                sink.emit(Severity.ERROR, DiagnosticKind.DUPLICATE_ROUTE, message, previous)
        return collisions

    def reset(self) -> None:
        logger.debug("route registry reset (%d keys)", len(self._claims))
        self._claims = {}
