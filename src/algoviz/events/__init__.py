"""Event protocol between views and algorithm controllers."""

from algoviz.events.channel import Channel, MemoryChannel
from algoviz.events.codec import decode_inbound, encode_outbound, message_tag, parse_domain_split
from algoviz.events.protocol import (
    DomainSplitPrompt,
    DomainSplitRequest,
    InteractionProtocol,
    RenderPhase,
    ViewState,
)
from algoviz.events.types import (
    ArcClickEvent,
    ArcStyle,
    AutoStepClickEvent,
    ChooseDomainSplitEvent,
    DomainSplitReplyEvent,
    FineStepClickEvent,
    HighlightArcsEvent,
    HighlightNodesEvent,
    InboundEvent,
    InitialRenderEvent,
    OutboundEvent,
    OutputEvent,
    SetDomainsEvent,
    StepClickEvent,
    VarClickEvent,
)

__all__ = [
    # Inbound event types
    "ArcStyle",
    "ChooseDomainSplitEvent",
    "HighlightArcsEvent",
    "HighlightNodesEvent",
    "InboundEvent",
    "OutputEvent",
    "SetDomainsEvent",
    # Outbound event types
    "ArcClickEvent",
    "AutoStepClickEvent",
    "DomainSplitReplyEvent",
    "FineStepClickEvent",
    "InitialRenderEvent",
    "OutboundEvent",
    "StepClickEvent",
    "VarClickEvent",
    # Codec
    "decode_inbound",
    "encode_outbound",
    "message_tag",
    "parse_domain_split",
    # Protocol
    "Channel",
    "DomainSplitPrompt",
    "DomainSplitRequest",
    "InteractionProtocol",
    "MemoryChannel",
    "RenderPhase",
    "ViewState",
]
