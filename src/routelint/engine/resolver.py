from __future__ import annotations

from typing import Optional

from routelint.domain.declarations import Declaration, MarkerInstance
from routelint.graph.traversal import breadth_first


def resolve_marker(declaration: Declaration, qualified_name: str) -> Optional[MarkerInstance]:
    """
    Find a marker of type ``qualified_name`` on ``declaration``, either attached
    directly or reachable through meta-markers on the marker types. Returns None
    when nothing matches.
    """
    for marker in breadth_first(declaration.markers, lambda m: m.type.markers):
        if marker.qualified_name == qualified_name:
            return marker
    return None
