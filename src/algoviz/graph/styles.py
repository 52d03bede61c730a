"""Style attribute sets for nodes and edges.

Styles are closed: each set declares the fields it accepts, and a patch
naming any other field is rejected. Merging only touches the fields named in
the patch, so independent writers (highlighting, layout bounds) never clobber
each other. Every change bumps ``version``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from algoviz.exceptions import StyleFieldError

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _to_snake(name: str) -> str:
    """strokeWidth -> stroke_width"""
    return _CAMEL_RE.sub("_", name).lower()


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass
class _StyleSet:
    version: int = field(default=0, compare=False)

    FIELDS: ClassVar[tuple[str, ...]] = ()

    def merge(self, patch: Mapping[str, Any]) -> bool:
        """Merge a partial patch into this style set.

        Args:
            patch: Field name -> value. camelCase wire names are accepted.

        Returns:
            True if any value changed.

        Raises:
            StyleFieldError: If a key is not a field of this style set.
                Nothing is applied in that case.
        """
        normalized: dict[str, Any] = {}
        for key, value in patch.items():
            name = _to_snake(key)
            if name not in self.FIELDS:
                raise StyleFieldError(key, self.FIELDS)
            normalized[name] = value

        changed = False
        for name, value in normalized.items():
            if getattr(self, name) != value:
                setattr(self, name, value)
                changed = True
        if changed:
            self.version += 1
        return changed

    def to_dict(self, *, camel: bool = False) -> dict[str, Any]:
        """Return the fields that are set (not None)."""
        result = {}
        for name in self.FIELDS:
            value = getattr(self, name)
            if value is not None:
                result[_to_camel(name) if camel else name] = value
        return result


def _field_names(cls: type) -> tuple[str, ...]:
    return tuple(f.name for f in fields(cls) if f.name != "version")


@dataclass
class NodeStyles(_StyleSet):
    """Visual attributes of a node.

    Attributes:
        stroke: Outline colour
        stroke_width: Outline width in pixels
        radius: Circle radius assigned by layouts
        width: Measured label width
        height: Measured label height
        offset_x: Label offset on the x axis
        offset_y: Label offset on the y axis
    """

    stroke: str | None = None
    stroke_width: float | None = None
    radius: float | None = None
    width: float | None = None
    height: float | None = None
    offset_x: float | None = None
    offset_y: float | None = None


@dataclass
class EdgeStyles(_StyleSet):
    """Visual attributes of an edge.

    ``x1``/``y1``/``x2``/``y2`` are the drawn endpoints. They differ from the
    node centres when the edge is one of an overlapped (reciprocal) pair.
    """

    stroke: str | None = None
    stroke_width: float | None = None
    overlapped: bool | None = None
    x1: float | None = None
    y1: float | None = None
    x2: float | None = None
    y2: float | None = None


NodeStyles.FIELDS = _field_names(NodeStyles)
EdgeStyles.FIELDS = _field_names(EdgeStyles)
