"""Project-level configuration from pyproject.toml.

Reads the [tool.algoviz] section to override canvas defaults and layout
constants:

    [tool.algoviz]
    width = 960
    height = 640

    [tool.algoviz.layout]
    collide_radius = 40
    rescale_padding = 80
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutConfig:
    """Constants used by the layout algorithms.

    Attributes:
        iterations: Force simulation ticks (fixed, not run to convergence)
        charge_strength: Many-body strength; negative repels
        collide_radius: Node exclusion radius for collision avoidance
        link_distance: Rest length of link springs
        padding: Distance kept from the canvas border by the force layout
        max_radius: Largest node radius assigned by the tree layout
        node_gap: Gap added around each node on a tree level
        edge_offset: Perpendicular offset of overlapped edges
        rescale_padding: Distance kept from the canvas border when rescaling
    """

    iterations: int = 300
    charge_strength: float = -35.0
    collide_radius: float = 60.0
    link_distance: float = 30.0
    padding: float = 50.0
    max_radius: float = 50.0
    node_gap: float = 15.0
    edge_offset: float = 5.0
    rescale_padding: float = 60.0


@dataclass(frozen=True)
class AlgovizConfig:
    """Configuration from [tool.algoviz] in pyproject.toml."""

    width: int = 800
    height: int = 600
    layout: LayoutConfig = field(default_factory=LayoutConfig)


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _layout_from_section(section: dict[str, Any]) -> LayoutConfig:
    known = {f.name for f in fields(LayoutConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        logger.warning("Ignoring unknown [tool.algoviz.layout] keys: %s", ", ".join(unknown))
    return LayoutConfig(**{k: v for k, v in section.items() if k in known})


def load_config(start: Path | None = None) -> AlgovizConfig:
    """Load [tool.algoviz] from the nearest pyproject.toml.

    Returns default config if no pyproject.toml or no [tool.algoviz] section.
    """
    path = find_pyproject(start)
    if path is None:
        return AlgovizConfig()

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return AlgovizConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("algoviz", {})
    if not section:
        return AlgovizConfig()

    defaults = AlgovizConfig()
    return AlgovizConfig(
        width=section.get("width", defaults.width),
        height=section.get("height", defaults.height),
        layout=_layout_from_section(section.get("layout", {})),
    )
