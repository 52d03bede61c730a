"""Force-directed layout.

A velocity-Verlet style simulation with four forces: link springs along
edges, many-body repulsion, centering on the canvas midpoint, and collision
avoidance. The simulation runs a fixed number of ticks rather than until
convergence, and every free body is clamped into the padded canvas after
each tick.

Nodes that already have a position are pinned: they push and pull the free
bodies but never move, and the result only fills positions that are still
missing. Running the layout again on a fully positioned graph changes
nothing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from algoviz.config import LayoutConfig
from algoviz.layout.base import LayoutFunction, LayoutInput, LayoutParams, LayoutResult, MergeMode

_INITIAL_RADIUS = 10.0
_INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))
_ALPHA_MIN = 0.001
_VELOCITY_DECAY = 0.6
_DISTANCE_MIN2 = 1.0


class _Lcg:
    """Linear congruential generator used to break exact ties.

    Seeded identically for every run so layouts are reproducible.
    """

    _A = 1664525
    _C = 1013904223
    _M = 4294967296

    def __init__(self, seed: int = 1) -> None:
        self._state = seed

    def __call__(self) -> float:
        self._state = (self._A * self._state + self._C) % self._M
        return self._state / self._M

    def jiggle(self) -> float:
        return (self() - 0.5) * 1e-6


@dataclass
class Body:
    """Scratch simulation state for one node."""

    id: Any
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None

    @property
    def pinned(self) -> bool:
        return self.fx is not None


@dataclass
class _Link:
    source: Body
    target: Body
    strength: float
    bias: float


class ForceSimulation:
    """Fixed-step force simulation over scratch bodies.

    Args:
        bodies: Simulation bodies in node order
        links: (source_index, target_index) pairs
        params: Canvas size
        config: Force constants
    """

    def __init__(
        self,
        bodies: list[Body],
        links: list[tuple[int, int]],
        params: LayoutParams,
        config: LayoutConfig,
    ) -> None:
        self.bodies = bodies
        self.params = params
        self.config = config
        self.alpha = 1.0
        self.alpha_decay = 1 - _ALPHA_MIN ** (1 / max(config.iterations, 1))
        self._random = _Lcg()
        self._links = self._init_links(links)

    def _init_links(self, pairs: list[tuple[int, int]]) -> list[_Link]:
        count = [0] * len(self.bodies)
        for s, t in pairs:
            count[s] += 1
            count[t] += 1
        links = []
        for s, t in pairs:
            if s == t:
                continue
            links.append(
                _Link(
                    source=self.bodies[s],
                    target=self.bodies[t],
                    strength=1 / min(count[s], count[t]),
                    bias=count[s] / (count[s] + count[t]),
                )
            )
        return links

    def run(self) -> None:
        for _ in range(self.config.iterations):
            self.tick()

    def tick(self) -> None:
        """Advance one step, then clamp free bodies into the canvas."""
        self.alpha += (0.0 - self.alpha) * self.alpha_decay
        self._apply_links()
        self._apply_charge()
        self._apply_center()
        self._apply_collision()

        for body in self.bodies:
            if body.fx is None:
                body.vx *= _VELOCITY_DECAY
                body.x += body.vx
            else:
                body.x, body.vx = body.fx, 0.0
            if body.fy is None:
                body.vy *= _VELOCITY_DECAY
                body.y += body.vy
            else:
                body.y, body.vy = body.fy, 0.0
        self._clamp()

    # =========================================================================
    # Forces
    # =========================================================================

    def _apply_links(self) -> None:
        distance = self.config.link_distance
        for link in self._links:
            s, t = link.source, link.target
            x = t.x + t.vx - s.x - s.vx or self._random.jiggle()
            y = t.y + t.vy - s.y - s.vy or self._random.jiggle()
            length = math.sqrt(x * x + y * y)
            length = (length - distance) / length * self.alpha * link.strength
            x *= length
            y *= length
            t.vx -= x * link.bias
            t.vy -= y * link.bias
            s.vx += x * (1 - link.bias)
            s.vy += y * (1 - link.bias)

    def _apply_charge(self) -> None:
        strength = self.config.charge_strength * self.alpha
        for body in self.bodies:
            for other in self.bodies:
                if other is body:
                    continue
                x = other.x - body.x
                y = other.y - body.y
                dist2 = x * x + y * y
                if x == 0:
                    x = self._random.jiggle()
                    dist2 += x * x
                if y == 0:
                    y = self._random.jiggle()
                    dist2 += y * y
                if dist2 < _DISTANCE_MIN2:
                    dist2 = math.sqrt(_DISTANCE_MIN2 * dist2)
                body.vx += x * strength / dist2
                body.vy += y * strength / dist2

    def _apply_center(self) -> None:
        n = len(self.bodies)
        sx = sum(b.x for b in self.bodies) / n - self.params.width / 2
        sy = sum(b.y for b in self.bodies) / n - self.params.height / 2
        for body in self.bodies:
            body.x -= sx
            body.y -= sy

    def _apply_collision(self) -> None:
        radius = self.config.collide_radius
        reach2 = (radius + radius) ** 2
        bodies = self.bodies
        for i, body in enumerate(bodies):
            xi = body.x + body.vx
            yi = body.y + body.vy
            for other in bodies[i + 1 :]:
                x = xi - other.x - other.vx
                y = yi - other.y - other.vy
                dist2 = x * x + y * y
                if dist2 >= reach2:
                    continue
                if x == 0:
                    x = self._random.jiggle()
                    dist2 += x * x
                if y == 0:
                    y = self._random.jiggle()
                    dist2 += y * y
                dist = math.sqrt(dist2)
                push = (radius + radius - dist) / dist
                x *= push
                y *= push
                # Equal radii split the correction evenly.
                body.vx += x * 0.5
                body.vy += y * 0.5
                other.vx -= x * 0.5
                other.vy -= y * 0.5

    def _clamp(self) -> None:
        pad = self.config.padding
        max_x = self.params.width - pad
        max_y = self.params.height - pad
        for body in self.bodies:
            if body.fx is None:
                body.x = max(pad, min(max_x, body.x))
            if body.fy is None:
                body.y = max(pad, min(max_y, body.y))


def _seed_bodies(layout_input: LayoutInput) -> list[Body]:
    """Pinned bodies start at their position; free ones on a phyllotaxis spiral."""
    bodies = []
    for i, node in enumerate(layout_input.nodes):
        if node.positioned:
            bodies.append(Body(node.id, node.x, node.y, fx=node.x, fy=node.y))
            continue
        r = _INITIAL_RADIUS * math.sqrt(0.5 + i)
        angle = i * _INITIAL_ANGLE
        bodies.append(Body(node.id, r * math.cos(angle), r * math.sin(angle)))
    return bodies


def force_layout(config: LayoutConfig | None = None) -> LayoutFunction:
    """Create a layout function that places unpositioned nodes by force simulation.

    Args:
        config: Layout constants (defaults: 300 ticks, charge -35,
            collision radius 60, padding 50)

    Returns:
        A layout function whose result only fills missing coordinates.
    """
    cfg = config or LayoutConfig()

    def force(layout_input: LayoutInput, params: LayoutParams) -> LayoutResult:
        result = LayoutResult(mode=MergeMode.FILL_GAPS)
        if all(node.positioned for node in layout_input.nodes):
            return result

        bodies = _seed_bodies(layout_input)
        index = {body.id: i for i, body in enumerate(bodies)}
        links = [(index[e.source], index[e.target]) for e in layout_input.edges]

        simulation = ForceSimulation(bodies, links, params, cfg)
        simulation.run()

        for node, body in zip(layout_input.nodes, bodies):
            if not node.positioned:
                result.positions[node.id] = (body.x, body.y)
        return result

    return force
