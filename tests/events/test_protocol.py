"""Tests for InteractionProtocol: inbound mutations, domain split, bootstrap."""

from __future__ import annotations

import asyncio
import logging

import pytest

from algoviz import Graph
from algoviz.events import (
    HighlightArcsEvent,
    InitialRenderEvent,
    InteractionProtocol,
    MemoryChannel,
    OutputEvent,
    ViewState,
)
from algoviz.exceptions import DomainSplitPendingError, ProtocolShapeError, UnknownIdError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _protocol(snapshot, **kwargs) -> InteractionProtocol:
    return InteractionProtocol(Graph.from_snapshot(snapshot), MemoryChannel(), **kwargs)


async def _until_pending(protocol: InteractionProtocol) -> None:
    for _ in range(10):
        if protocol.pending_split is not None:
            return
        await asyncio.sleep(0)
    raise AssertionError("domain split never became pending")


# ---------------------------------------------------------------------------
# Inbound mutations
# ---------------------------------------------------------------------------


class TestHighlightArcs:
    @pytest.mark.asyncio
    async def test_all_arcs_red_bold(self, csp):
        protocol = _protocol(csp)
        await protocol.dispatch({"action": "highlightArcs", "arcIds": None, "colour": "red", "style": "bold"})
        for edge in protocol.graph.edges:
            assert edge.styles.stroke == "red"
            assert edge.styles.stroke_width == 7

    @pytest.mark.asyncio
    async def test_no_colour_keeps_stroke(self, csp):
        protocol = _protocol(csp)
        await protocol.dispatch({"action": "highlightArcs", "arcIds": None, "colour": "green", "style": "bold"})
        await protocol.dispatch({"action": "highlightArcs", "arcIds": ["e1"], "colour": None, "style": "normal"})
        e1 = protocol.graph.edge("e1")
        assert e1.styles.stroke == "green"
        assert e1.styles.stroke_width == 4
        assert protocol.graph.edge("e2").styles.stroke_width == 7

    @pytest.mark.asyncio
    async def test_replay_is_idempotent(self, csp):
        protocol = _protocol(csp)
        message = {"action": "highlightArcs", "arcIds": ["e2"], "colour": "red", "style": "bold"}
        await protocol.dispatch(message)
        version = protocol.graph.edge("e2").styles.version
        await protocol.dispatch(message)
        assert protocol.graph.edge("e2").styles.version == version

    @pytest.mark.asyncio
    async def test_unknown_arc_dropped_others_applied(self, csp, caplog):
        protocol = _protocol(csp)
        with caplog.at_level(logging.WARNING, logger="algoviz.events.protocol"):
            await protocol.dispatch(
                {"action": "highlightArcs", "arcIds": ["ghost", "e1"], "colour": "red", "style": "bold"}
            )
        assert protocol.graph.edge("e1").styles.stroke == "red"
        assert len(protocol.errors) == 1
        assert isinstance(protocol.errors[0], UnknownIdError)
        assert "ghost" in caplog.text

    @pytest.mark.asyncio
    async def test_node_id_is_not_an_arc(self, csp):
        protocol = _protocol(csp)
        await protocol.dispatch({"action": "highlightArcs", "arcIds": ["A"], "colour": "red"})
        assert protocol.graph.node("A").styles.stroke is None
        assert protocol.errors[0].expected == "edge"


class TestHighlightNodes:
    @pytest.mark.asyncio
    async def test_outline(self, csp):
        protocol = _protocol(csp)
        await protocol.dispatch({"action": "highlightNodes", "nodeIds": ["A"], "colour": "orange"})
        styles = protocol.graph.node("A").styles
        assert styles.stroke == "orange"
        assert styles.stroke_width == 2


class TestSetDomains:
    @pytest.mark.asyncio
    async def test_sets_domains(self, csp):
        protocol = _protocol(csp)
        await protocol.dispatch({"action": "setDomains", "nodeIds": ["A", "B"], "domains": [[1], [2]]})
        assert protocol.graph.node("A").domain == [1]
        assert protocol.graph.node("B").domain == [2]

    @pytest.mark.asyncio
    async def test_mismatched_lengths_change_nothing(self, csp):
        protocol = _protocol(csp)
        await protocol.dispatch({"action": "setDomains", "nodeIds": ["A", "B"], "domains": [[1]]})
        assert protocol.graph.node("A").domain == [1, 2, 3]
        assert protocol.graph.node("B").domain == [1, 2]
        assert isinstance(protocol.errors[0], ProtocolShapeError)

    @pytest.mark.asyncio
    async def test_strict_raises(self, csp):
        protocol = _protocol(csp, strict=True)
        with pytest.raises(ProtocolShapeError):
            await protocol.dispatch({"action": "setDomains", "nodeIds": ["A"], "domains": []})

    @pytest.mark.asyncio
    async def test_strict_raises_on_unknown_id(self, csp):
        protocol = _protocol(csp, strict=True)
        with pytest.raises(UnknownIdError):
            await protocol.dispatch({"action": "setDomains", "nodeIds": ["Q"], "domains": [[1]]})


class TestOtherMessages:
    @pytest.mark.asyncio
    async def test_output(self, csp):
        protocol = _protocol(csp)
        await protocol.dispatch({"action": "output", "text": "arc A-c0 is consistent"})
        assert protocol.output == "arc A-c0 is consistent"

    @pytest.mark.asyncio
    async def test_unknown_tag_ignored(self, csp):
        protocol = _protocol(csp)
        await protocol.dispatch({"action": "celebrate"})
        assert protocol.errors == []

    @pytest.mark.asyncio
    async def test_malformed_message_dropped(self, csp):
        protocol = _protocol(csp)
        await protocol.dispatch("not a message")
        await protocol.dispatch({"action": "output", "text": "still alive"})
        assert protocol.output == "still alive"
        assert len(protocol.errors) == 1

    @pytest.mark.asyncio
    async def test_run_consumes_channel(self, csp):
        channel = MemoryChannel()
        protocol = InteractionProtocol(Graph.from_snapshot(csp), channel)
        channel.put({"action": "output", "text": "one"})
        channel.put({"action": "highlightNodes", "nodeIds": ["B"], "colour": "red"})
        channel.close()
        await protocol.run(channel.messages())
        assert protocol.output == "one"
        assert protocol.graph.node("B").styles.stroke == "red"

    def test_apply_rejects_blocking_event(self, csp):
        from algoviz.events import ChooseDomainSplitEvent

        protocol = _protocol(csp)
        with pytest.raises(TypeError):
            protocol.apply(ChooseDomainSplitEvent(domain=(1, 2)))


# ---------------------------------------------------------------------------
# Domain split
# ---------------------------------------------------------------------------


class TestDomainSplit:
    @pytest.mark.asyncio
    async def test_cancelled_prompt_replies_null(self, csp):
        protocol = _protocol(csp, prompt=lambda domain: None)
        await protocol.dispatch({"action": "chooseDomainSplit", "domain": [1, 2, 3, 4]})
        assert protocol.channel.sent == [{"event": "domain_split", "domain": None}]
        assert protocol.pending_split is None

    @pytest.mark.asyncio
    async def test_prompt_answer(self, csp):
        seen = []

        def prompt(domain):
            seen.append(domain)
            return [1, 2]

        protocol = _protocol(csp, prompt=prompt)
        await protocol.dispatch({"action": "chooseDomainSplit", "domain": [1, 2, 3, 4]})
        assert seen == [(1, 2, 3, 4)]
        assert protocol.channel.sent == [{"event": "domain_split", "domain": [1, 2]}]

    @pytest.mark.asyncio
    async def test_async_prompt(self, csp):
        async def prompt(domain):
            await asyncio.sleep(0)
            return list(domain[:1])

        protocol = _protocol(csp, prompt=prompt)
        await protocol.dispatch({"action": "chooseDomainSplit", "domain": ["x", "y"]})
        assert protocol.channel.sent == [{"event": "domain_split", "domain": ["x"]}]

    @pytest.mark.asyncio
    async def test_explicit_reply_and_backlog(self, csp):
        protocol = _protocol(csp)
        split = asyncio.create_task(protocol.dispatch({"action": "chooseDomainSplit", "domain": [1, 2]}))
        await _until_pending(protocol)
        assert protocol.pending_split.domain == (1, 2)

        # Arrives while blocked: buffered, not applied yet.
        await protocol.dispatch({"action": "output", "text": "after split"})
        assert protocol.output is None

        protocol.reply_domain_split(None)
        await split
        assert protocol.channel.sent == [{"event": "domain_split", "domain": None}]
        assert protocol.output == "after split"

    @pytest.mark.asyncio
    async def test_second_split_while_pending_fails(self, csp):
        protocol = _protocol(csp)
        split = asyncio.create_task(protocol.dispatch({"action": "chooseDomainSplit", "domain": [1, 2]}))
        await _until_pending(protocol)
        with pytest.raises(DomainSplitPendingError):
            await protocol.dispatch({"action": "chooseDomainSplit", "domain": [3, 4]})
        protocol.reply_domain_split([1])
        await split
        assert protocol.channel.sent == [{"event": "domain_split", "domain": [1]}]

    def test_reply_without_pending_split(self, csp):
        protocol = _protocol(csp)
        with pytest.raises(ProtocolShapeError):
            protocol.reply_domain_split([1])

    @pytest.mark.asyncio
    async def test_failing_prompt_still_replays_backlog(self, csp):
        answered = asyncio.Event()

        async def prompt(domain):
            await answered.wait()
            raise RuntimeError("prompt closed")

        protocol = _protocol(csp, prompt=prompt)
        split = asyncio.create_task(protocol.dispatch({"action": "chooseDomainSplit", "domain": [1, 2]}))
        await _until_pending(protocol)
        await protocol.dispatch({"action": "output", "text": "buffered"})
        assert protocol.output is None

        answered.set()
        with pytest.raises(RuntimeError, match="prompt closed"):
            await split
        assert protocol.pending_split is None
        assert protocol.output == "buffered"
        assert protocol.channel.sent == []

        # Not stuck buffering: later messages apply straight away.
        await protocol.dispatch({"action": "highlightNodes", "nodeIds": ["A"], "colour": "orange"})
        assert protocol.graph.node("A").styles.stroke == "orange"

    @pytest.mark.asyncio
    async def test_discard_backlog(self, csp):
        protocol = _protocol(csp)
        split = asyncio.create_task(protocol.dispatch({"action": "chooseDomainSplit", "domain": [1, 2]}))
        await _until_pending(protocol)
        await protocol.dispatch({"action": "output", "text": "stale"})
        await protocol.dispatch({"action": "highlightNodes", "nodeIds": ["A"], "colour": "orange"})

        assert protocol.discard_backlog() == 2
        assert protocol.discard_backlog() == 0
        protocol.reply_domain_split([1])
        await split
        assert protocol.channel.sent == [{"event": "domain_split", "domain": [1]}]
        assert protocol.output is None
        assert protocol.graph.node("A").styles.stroke is None


# ---------------------------------------------------------------------------
# Outbound / bootstrap
# ---------------------------------------------------------------------------


class TestBootstrap:
    def test_sends_initial_render_once(self, csp):
        protocol = _protocol(csp)
        defaults = [HighlightArcsEvent(colour="blue")]
        assert protocol.bootstrap(defaults) is True
        assert protocol.bootstrap(defaults) is False
        assert protocol.channel.sent == [{"event": "initial_render"}]
        assert all(e.styles.stroke == "blue" for e in protocol.graph.edges)

    def test_shared_state_skips_bootstrap(self, csp):
        state = ViewState()
        _protocol(csp, state=state).bootstrap()
        again = _protocol(csp, state=state)
        assert again.bootstrap() is False
        assert again.channel.sent == []

    def test_reset_state_bootstraps_again(self, csp):
        protocol = _protocol(csp)
        protocol.bootstrap()
        protocol.state.reset()
        protocol.bootstrap([OutputEvent("fresh")])
        assert protocol.channel.events("initial_render") == [{"event": "initial_render"}] * 2
        assert protocol.output == "fresh"

    def test_send(self, csp):
        protocol = _protocol(csp)
        protocol.send(InitialRenderEvent())
        assert protocol.channel.sent == [{"event": "initial_render"}]
