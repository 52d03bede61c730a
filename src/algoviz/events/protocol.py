"""Per-view synchronization protocol with the algorithm controller.

Inbound messages are decoded and applied to the view's Graph immediately.
The one exception is ``chooseDomainSplit``: it suspends the view until a
reply is produced, either by the configured prompt or by an explicit
``reply_domain_split`` call. Messages that arrive while a split is pending
are buffered and replayed in order once the reply has been sent.

Bad messages never stop the protocol. Unknown ids and malformed messages are
logged, recorded in ``errors`` and dropped; with ``strict=True`` they raise
instead.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from algoviz.events.codec import decode_inbound, encode_outbound, message_tag
from algoviz.events.types import (
    NODE_HIGHLIGHT_WIDTH,
    ChooseDomainSplitEvent,
    DomainSplitReplyEvent,
    HighlightArcsEvent,
    HighlightNodesEvent,
    InboundEvent,
    InitialRenderEvent,
    OutboundEvent,
    OutputEvent,
    SetDomainsEvent,
)
from algoviz.exceptions import AlgovizError, DomainSplitPendingError, ProtocolShapeError, UnknownIdError

if TYPE_CHECKING:
    from algoviz.events.channel import Channel
    from algoviz.graph.core import Graph

logger = logging.getLogger(__name__)

DomainSplitAnswer = Union[Sequence[Any], None]
DomainSplitPrompt = Callable[[tuple[Any, ...]], Union[DomainSplitAnswer, Awaitable[DomainSplitAnswer]]]


class RenderPhase(Enum):
    """Lifecycle of a logical view instance.

    Values:
        CREATED: Never displayed; the bootstrap is still owed.
        RENDERED: Displayed at least once; re-renders skip the bootstrap.
    """

    CREATED = "created"
    RENDERED = "rendered"


@dataclass
class ViewState:
    """State that survives re-rendering the same logical view.

    Only an explicit ``reset`` returns it to CREATED.
    """

    phase: RenderPhase = RenderPhase.CREATED

    @property
    def previously_rendered(self) -> bool:
        return self.phase is RenderPhase.RENDERED

    def mark_rendered(self) -> None:
        self.phase = RenderPhase.RENDERED

    def reset(self) -> None:
        self.phase = RenderPhase.CREATED


@dataclass
class DomainSplitRequest:
    """An unanswered chooseDomainSplit.

    Attributes:
        domain: Values the user chooses from
        future: Resolved with the chosen values, or None for the default split
    """

    domain: tuple[Any, ...]
    future: asyncio.Future


class InteractionProtocol:
    """Maps controller messages to graph mutations and sends view events back.

    Args:
        graph: The Graph owned by the view
        channel: Outbound transport to the controller
        state: Persisted view state; a fresh one is created if omitted
        prompt: Called with the domain on chooseDomainSplit; may be async.
            Returns the chosen values or None. If omitted, the request waits
            for ``reply_domain_split``.
        strict: Raise on unknown ids and malformed messages instead of
            logging and dropping them
    """

    def __init__(
        self,
        graph: Graph,
        channel: Channel,
        *,
        state: ViewState | None = None,
        prompt: DomainSplitPrompt | None = None,
        strict: bool = False,
    ) -> None:
        self.graph = graph
        self.channel = channel
        self.state = state if state is not None else ViewState()
        self.output: str | None = None
        self.errors: list[AlgovizError] = []
        self._prompt = prompt
        self._strict = strict
        self._pending: DomainSplitRequest | None = None
        self._backlog: deque[Any] = deque()
        self._draining = False

    @property
    def pending_split(self) -> DomainSplitRequest | None:
        """The unanswered domain split request, if any."""
        return self._pending

    # =========================================================================
    # Inbound
    # =========================================================================

    async def dispatch(self, message: Any) -> None:
        """Handle one controller message.

        Raises:
            DomainSplitPendingError: If the message requests a domain split
                while another one is still unanswered.
        """
        if self._pending is not None or self._draining:
            if self._pending is not None and isinstance(message, Mapping) and (
                message_tag(message) == ChooseDomainSplitEvent.ACTION
            ):
                raise DomainSplitPendingError("A domain split is already pending", message)
            self._backlog.append(message)
            return
        await self._handle(message)

    async def run(self, messages: Any) -> None:
        """Dispatch every message of an async iterable, in order."""
        async for message in messages:
            await self.dispatch(message)

    async def _handle(self, message: Any) -> None:
        try:
            event = decode_inbound(message)
        except ProtocolShapeError as e:
            self._report(e)
            return
        if event is None:
            return
        if isinstance(event, ChooseDomainSplitEvent):
            try:
                await self._choose_domain_split(event)
            finally:
                # Buffered messages are replayed even if the split failed.
                if not self._draining:
                    await self._drain()
        else:
            self.apply(event)

    async def _drain(self) -> None:
        self._draining = True
        try:
            while self._backlog:
                await self._handle(self._backlog.popleft())
        finally:
            self._draining = False

    def discard_backlog(self) -> int:
        """Drop messages buffered behind a pending domain split.

        Returns:
            Number of messages dropped.
        """
        dropped = len(self._backlog)
        self._backlog.clear()
        return dropped

    def apply(self, event: InboundEvent) -> None:
        """Apply a non-blocking inbound event to the graph."""
        if isinstance(event, HighlightArcsEvent):
            self.highlight_arcs(event)
        elif isinstance(event, HighlightNodesEvent):
            self.highlight_nodes(event)
        elif isinstance(event, SetDomainsEvent):
            self.set_domains(event)
        elif isinstance(event, OutputEvent):
            self.output = event.text
        else:
            raise TypeError(f"{type(event).__name__} cannot be applied synchronously")

    def highlight_arcs(self, event: HighlightArcsEvent) -> None:
        """Restyle the named edges, or all edges when ``arc_ids`` is None."""
        patch: dict[str, Any] = {"stroke_width": event.style.stroke_width}
        if event.colour is not None:
            patch["stroke"] = event.colour

        if event.arc_ids is None:
            for edge in self.graph.edges:
                edge.styles.merge(patch)
            return
        for arc_id in event.arc_ids:
            try:
                self.graph.edge(arc_id).styles.merge(patch)
            except UnknownIdError as e:
                self._report(e)

    def highlight_nodes(self, event: HighlightNodesEvent) -> None:
        patch: dict[str, Any] = {"stroke_width": NODE_HIGHLIGHT_WIDTH}
        if event.colour is not None:
            patch["stroke"] = event.colour
        for node_id in event.node_ids:
            try:
                self.graph.node(node_id).styles.merge(patch)
            except UnknownIdError as e:
                self._report(e)

    def set_domains(self, event: SetDomainsEvent) -> None:
        for node_id, domain in zip(event.node_ids, event.domains):
            try:
                self.graph.set_domain(node_id, domain)
            except UnknownIdError as e:
                self._report(e)

    # =========================================================================
    # Domain split
    # =========================================================================

    async def _choose_domain_split(self, event: ChooseDomainSplitEvent) -> None:
        future = asyncio.get_running_loop().create_future()
        self._pending = DomainSplitRequest(event.domain, future)
        try:
            if self._prompt is not None:
                answer = self._prompt(event.domain)
                if inspect.isawaitable(answer):
                    answer = await answer
                if not future.done():
                    future.set_result(answer)
            values = await future
        finally:
            self._pending = None
        self.send(DomainSplitReplyEvent(tuple(values) if values is not None else None))

    def reply_domain_split(self, values: Sequence[Any] | None) -> None:
        """Answer the pending domain split.

        Args:
            values: First half of the split, or None for the default split

        Raises:
            ProtocolShapeError: If no split is waiting for an answer
        """
        if self._pending is None or self._pending.future.done():
            raise ProtocolShapeError("No domain split is waiting for a reply")
        self._pending.future.set_result(list(values) if values is not None else None)

    # =========================================================================
    # Outbound
    # =========================================================================

    def send(self, event: OutboundEvent) -> None:
        message = encode_outbound(event)
        logger.debug("Sending %s", message)
        self.channel.send(message)

    def bootstrap(self, defaults: Iterable[InboundEvent] = ()) -> bool:
        """Send ``initial_render`` and apply default events, once per state.

        Returns:
            True if the bootstrap ran, False if the view was already rendered.
        """
        if self.state.previously_rendered:
            return False
        self.send(InitialRenderEvent())
        for event in defaults:
            self.apply(event)
        self.state.mark_rendered()
        return True

    def _report(self, error: AlgovizError) -> None:
        if self._strict:
            raise error
        self.errors.append(error)
        logger.warning("Dropped inbound mutation: %s", error)
