"""Exceptions for the algoviz graph model, layouts and protocol."""

from __future__ import annotations

from typing import Any


class AlgovizError(Exception):
    """Base class for all algoviz errors."""


class MalformedSnapshotError(AlgovizError):
    """Initial graph snapshot cannot be turned into a Graph.

    Raised for dangling edge references, duplicate ids, or a snapshot that
    is not shaped like ``{"nodes": [...], "edges": [...]}``. Fatal to the
    construction of the view that received the snapshot.

    Attributes:
        reason: Human-readable description of the problem
        item_id: Id of the offending node or edge, if known
    """

    def __init__(self, reason: str, *, item_id: Any = None) -> None:
        self.reason = reason
        self.item_id = item_id
        super().__init__(reason)


class UnknownIdError(AlgovizError, KeyError):
    """An id was not found in the graph's id index.

    Attributes:
        id: The id that failed to resolve
        expected: "node", "edge", or None when either kind would do
    """

    def __init__(self, id: Any, *, expected: str | None = None) -> None:
        self.id = id
        self.expected = expected
        super().__init__(id)

    def __str__(self) -> str:
        kind = self.expected or "node or edge"
        return f"No {kind} with id {self.id!r}"


class ProtocolShapeError(AlgovizError, ValueError):
    """An inbound protocol message is malformed.

    The offending message is dropped; later messages are still processed.

    Attributes:
        reason: What is wrong with the message
        message: The raw message dict, if available
    """

    def __init__(self, reason: str, message: dict[str, Any] | None = None) -> None:
        self.reason = reason
        self.message = message
        super().__init__(reason)


class DomainSplitPendingError(ProtocolShapeError):
    """A domain split was requested while another one is still unanswered."""


class StyleFieldError(AlgovizError, ValueError):
    """A style patch names a field that the style set does not define.

    Attributes:
        field: The unknown field name
        allowed: The field names the style set accepts
    """

    def __init__(self, field: str, allowed: tuple[str, ...]) -> None:
        self.field = field
        self.allowed = allowed
        super().__init__(
            f"Unknown style field {field!r}\n\n"
            f"  -> Allowed fields: {', '.join(allowed)}"
        )
