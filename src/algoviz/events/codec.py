"""Conversion between wire messages (JSON-shaped dicts) and event objects.

Inbound messages carry their tag in ``action``; ``event`` is accepted as a
fallback. Unknown tags decode to None and are ignored by the protocol.
Outbound messages always carry their tag in ``event``.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping
from typing import Any

from algoviz.events.types import (
    ArcClickEvent,
    ArcStyle,
    ChooseDomainSplitEvent,
    DomainSplitReplyEvent,
    HighlightArcsEvent,
    HighlightNodesEvent,
    InboundEvent,
    OutboundEvent,
    OutputEvent,
    SetDomainsEvent,
)
from algoviz.exceptions import ProtocolShapeError

logger = logging.getLogger(__name__)


def message_tag(message: Mapping[str, Any]) -> str | None:
    """Return the discriminating tag of a raw message."""
    tag = message.get("action", message.get("event"))
    return tag if isinstance(tag, str) else None


def _id_list(message: Mapping[str, Any], key: str, *, nullable: bool = False) -> tuple[Any, ...] | None:
    value = message.get(key)
    if value is None and nullable:
        return None
    if not isinstance(value, (list, tuple)):
        raise ProtocolShapeError(f"'{key}' must be a list, got {type(value).__name__}", dict(message))
    return tuple(value)


def _optional_str(message: Mapping[str, Any], key: str) -> str | None:
    value = message.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ProtocolShapeError(f"'{key}' must be a string, got {type(value).__name__}", dict(message))
    return value


def _decode_highlight_arcs(message: Mapping[str, Any]) -> HighlightArcsEvent:
    style = message.get("style") or ArcStyle.NORMAL.value
    try:
        arc_style = ArcStyle(style)
    except ValueError:
        raise ProtocolShapeError(f"Unknown arc style {style!r}", dict(message)) from None
    return HighlightArcsEvent(
        arc_ids=_id_list(message, "arcIds", nullable=True),
        colour=_optional_str(message, "colour"),
        style=arc_style,
    )


def _decode_highlight_nodes(message: Mapping[str, Any]) -> HighlightNodesEvent:
    return HighlightNodesEvent(
        node_ids=_id_list(message, "nodeIds"),
        colour=_optional_str(message, "colour"),
    )


def _decode_set_domains(message: Mapping[str, Any]) -> SetDomainsEvent:
    node_ids = _id_list(message, "nodeIds")
    domains = _id_list(message, "domains")
    for domain in domains:
        if not isinstance(domain, (list, tuple)):
            raise ProtocolShapeError("Every entry of 'domains' must be a list", dict(message))
    try:
        return SetDomainsEvent(node_ids=node_ids, domains=tuple(tuple(d) for d in domains))
    except ValueError as e:
        raise ProtocolShapeError(str(e), dict(message)) from e


def _decode_choose_domain_split(message: Mapping[str, Any]) -> ChooseDomainSplitEvent:
    return ChooseDomainSplitEvent(domain=_id_list(message, "domain"))


def _decode_output(message: Mapping[str, Any]) -> OutputEvent:
    text = message.get("text")
    if text is None:
        text = ""
    return OutputEvent(text=str(text))


_DECODERS: dict[str, Callable[[Mapping[str, Any]], InboundEvent]] = {
    HighlightArcsEvent.ACTION: _decode_highlight_arcs,
    HighlightNodesEvent.ACTION: _decode_highlight_nodes,
    SetDomainsEvent.ACTION: _decode_set_domains,
    ChooseDomainSplitEvent.ACTION: _decode_choose_domain_split,
    OutputEvent.ACTION: _decode_output,
}


def decode_inbound(message: Any) -> InboundEvent | None:
    """Decode a controller message into an inbound event.

    Args:
        message: Raw message dict

    Returns:
        The decoded event, or None for an unrecognized tag.

    Raises:
        ProtocolShapeError: If the message is not a dict, or its fields do
            not match the shape its tag requires.
    """
    if not isinstance(message, Mapping):
        raise ProtocolShapeError(f"Message must be an object, got {type(message).__name__}")
    tag = message_tag(message)
    decoder = _DECODERS.get(tag) if tag is not None else None
    if decoder is None:
        logger.debug("Ignoring message with unrecognized tag %r", tag)
        return None
    return decoder(message)


def encode_outbound(event: OutboundEvent) -> dict[str, Any]:
    """Encode an outbound event as a wire message."""
    message: dict[str, Any] = {"event": event.EVENT}
    if isinstance(event, ArcClickEvent):
        message["constId"] = event.constraint_id
        message["varName"] = event.var_name
    elif isinstance(event, DomainSplitReplyEvent):
        message["domain"] = list(event.domain) if event.domain is not None else None
    else:
        for f in dataclasses.fields(event):
            key = "".join(p.capitalize() if i else p for i, p in enumerate(f.name.split("_")))
            message[key] = getattr(event, f.name)
    return message


def parse_domain_split(text: str | None) -> list[str] | None:
    """Turn a textual prompt answer into a domain split reply.

    None (the prompt was cancelled) means "use the default split".
    Otherwise the text is split on commas and empty entries are dropped.

    Example:
        >>> parse_domain_split("1,2,,3")
        ['1', '2', '3']
        >>> parse_domain_split(None) is None
        True
    """
    if text is None:
        return None
    return [part for part in text.split(",") if part]
