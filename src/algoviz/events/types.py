"""Event types exchanged between a view and its algorithm controller.

Inbound events flow controller -> view and each causes an immediate visual
mutation. Outbound events flow view -> controller and are fire-and-forget
notifications, except the reply to a domain split request.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

BOLD_STROKE_WIDTH = 7
NORMAL_STROKE_WIDTH = 4
NODE_HIGHLIGHT_WIDTH = 2


class ArcStyle(Enum):
    """Stroke style requested by a highlightArcs command."""

    NORMAL = "normal"
    BOLD = "bold"

    @property
    def stroke_width(self) -> int:
        return BOLD_STROKE_WIDTH if self is ArcStyle.BOLD else NORMAL_STROKE_WIDTH


# =============================================================================
# Inbound (controller -> view)
# =============================================================================


@dataclass(frozen=True)
class HighlightArcsEvent:
    """Restyle edges.

    Attributes:
        arc_ids: Edge ids to restyle, or None for every edge
        colour: New stroke colour, or None to keep each edge's colour
        style: Stroke style; BOLD is wider than NORMAL
    """

    ACTION: ClassVar[str] = "highlightArcs"

    arc_ids: tuple[Any, ...] | None = None
    colour: str | None = None
    style: ArcStyle = ArcStyle.NORMAL


@dataclass(frozen=True)
class HighlightNodesEvent:
    """Outline nodes with a colour at a fixed width."""

    ACTION: ClassVar[str] = "highlightNodes"

    node_ids: tuple[Any, ...] = ()
    colour: str | None = None


@dataclass(frozen=True)
class SetDomainsEvent:
    """Replace domains: ``node_ids[i]`` receives ``domains[i]``.

    Construction enforces equal lengths, so a SetDomainsEvent that exists is
    always well formed.
    """

    ACTION: ClassVar[str] = "setDomains"

    node_ids: tuple[Any, ...] = ()
    domains: tuple[tuple[Any, ...], ...] = ()

    def __post_init__(self) -> None:
        if len(self.node_ids) != len(self.domains):
            raise ValueError(
                f"setDomains needs one domain per node: got {len(self.node_ids)} node ids "
                f"and {len(self.domains)} domains"
            )


@dataclass(frozen=True)
class ChooseDomainSplitEvent:
    """Ask the user for the first half of a domain split."""

    ACTION: ClassVar[str] = "chooseDomainSplit"

    domain: tuple[Any, ...] = ()


@dataclass(frozen=True)
class OutputEvent:
    """Replace the displayed status text."""

    ACTION: ClassVar[str] = "output"

    text: str = ""


InboundEvent = Union[
    HighlightArcsEvent,
    HighlightNodesEvent,
    SetDomainsEvent,
    ChooseDomainSplitEvent,
    OutputEvent,
]


# =============================================================================
# Outbound (view -> controller)
# =============================================================================


@dataclass(frozen=True)
class ArcClickEvent:
    """User clicked the edge between a variable and a constraint.

    Attributes:
        constraint_id: Index of the constraint in the controller's model
        var_name: Name of the variable at the other end of the edge
    """

    EVENT: ClassVar[str] = "arc:click"

    constraint_id: Any
    var_name: str


@dataclass(frozen=True)
class VarClickEvent:
    """User clicked a variable node."""

    EVENT: ClassVar[str] = "var:click"

    var_name: str


@dataclass(frozen=True)
class FineStepClickEvent:
    EVENT: ClassVar[str] = "fine-step:click"


@dataclass(frozen=True)
class StepClickEvent:
    EVENT: ClassVar[str] = "step:click"


@dataclass(frozen=True)
class AutoStepClickEvent:
    EVENT: ClassVar[str] = "auto-step:click"


@dataclass(frozen=True)
class DomainSplitReplyEvent:
    """Reply to ChooseDomainSplitEvent.

    Attributes:
        domain: Chosen first half of the split, or None to let the
            controller pick a default split
    """

    EVENT: ClassVar[str] = "domain_split"

    domain: tuple[Any, ...] | None = None


@dataclass(frozen=True)
class InitialRenderEvent:
    """The view is visible; the controller may start sending state."""

    EVENT: ClassVar[str] = "initial_render"


OutboundEvent = Union[
    ArcClickEvent,
    VarClickEvent,
    FineStepClickEvent,
    StepClickEvent,
    AutoStepClickEvent,
    DomainSplitReplyEvent,
    InitialRenderEvent,
]
