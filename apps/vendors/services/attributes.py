"""Read-side access to semi-structured vendor attributes"""

from typing import Any, List, Mapping, Optional

# Legacy rows store flags as real booleans or as loose strings. Only these
# spellings count; anything else (numbers, "TRUE", "1") is unknown.
TRUE_STRINGS = frozenset({"true", "Yes", "yes"})
FALSE_STRINGS = frozenset({"false", "No", "no"})

_MISSING = object()


def coerce_bool(value: Any) -> Optional[bool]:
    """Tri-state coercion of a stored flag: True, False or None (unknown)."""
    if value is True or (isinstance(value, str) and value in TRUE_STRINGS):
        return True
    if value is False or (isinstance(value, str) and value in FALSE_STRINGS):
        return False
    return None


class VendorAttributes:
    """Dotted-path lookups over a vendor record, e.g. ``get("details.cuisines")``."""

    def __init__(self, record: Mapping[str, Any]):
        self._record = record

    def get(self, path: str) -> Optional[Any]:
        node: Any = self._record
        for part in path.split("."):
            if not isinstance(node, Mapping):
                return None
            node = node.get(part, _MISSING)
            if node is _MISSING:
                return None
        return node

    def values(self, path: str) -> List[Any]:
        """Scalar candidates at ``path``: an array is flattened one level, None gives []."""
        value = self.get(path)
        if value is None:
            return []
        if isinstance(value, (list, tuple, set)):
            return [v for v in value if v is not None]
        return [value]

    def flag(self, path: str) -> Optional[bool]:
        return coerce_bool(self.get(path))
