"""Transport seam between a view and its controller.

The host (e.g. a notebook comm) delivers inbound messages by calling the
view's protocol, and receives outbound messages through ``Channel.send``.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Channel(Protocol):
    """Anything that can carry a message dict to the controller."""

    def send(self, message: dict[str, Any]) -> None: ...


class MemoryChannel:
    """In-process channel with an outbound log and an inbound queue.

    Outbound messages are appended to ``sent``. Inbound messages are queued
    with ``put`` and consumed in order by ``messages()``, which ends once
    ``close()`` has been called and the queue is drained.

    Example:
        >>> channel = MemoryChannel()
        >>> channel.send({"event": "initial_render"})
        >>> channel.sent
        [{'event': 'initial_render'}]
    """

    _CLOSED = object()

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self._inbox: asyncio.Queue[Any] = asyncio.Queue()

    def send(self, message: dict[str, Any]) -> None:
        self.sent.append(message)

    def put(self, message: dict[str, Any]) -> None:
        """Queue a controller message for delivery."""
        self._inbox.put_nowait(message)

    def close(self) -> None:
        """Stop ``messages()`` after the queued messages are consumed."""
        self._inbox.put_nowait(self._CLOSED)

    async def messages(self) -> AsyncIterator[dict[str, Any]]:
        while True:
            message = await self._inbox.get()
            if message is self._CLOSED:
                return
            yield message

    def events(self, tag: str) -> list[dict[str, Any]]:
        """Sent messages with the given ``event`` tag."""
        return [m for m in self.sent if m.get("event") == tag]
