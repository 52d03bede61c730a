"""Tests for the constraint graph view."""

import asyncio

import pytest

from algoviz import CSPView, ViewState
from algoviz.events import ArcClickEvent, MemoryChannel
from algoviz.exceptions import MalformedSnapshotError, UnknownIdError


class TestRender:
    @pytest.mark.asyncio
    async def test_initial_render_sent_once_across_two_renders(self, csp, channel):
        view = CSPView(csp, channel)
        await view.render()
        await view.render()
        assert channel.events("initial_render") == [{"event": "initial_render"}]

    @pytest.mark.asyncio
    async def test_bootstrap_highlights_all_arcs_blue(self, csp, channel):
        props = await CSPView(csp, channel).render()
        for edge in props.edges:
            assert edge.stroke == "blue"
            assert edge.stroke_width == 4

    @pytest.mark.asyncio
    async def test_every_node_positioned_within_canvas(self, csp, channel):
        props = await CSPView(csp, channel, width=500, height=400).render()
        for node in props.nodes:
            assert 50 <= node.x <= 450
            assert 50 <= node.y <= 350

    @pytest.mark.asyncio
    async def test_rerender_keeps_positions(self, csp, channel):
        view = CSPView(csp, channel)
        first = await view.render()
        second = await view.render()
        assert [(n.x, n.y) for n in first.nodes] == [(n.x, n.y) for n in second.nodes]

    @pytest.mark.asyncio
    async def test_new_view_with_persisted_state_skips_bootstrap(self, csp):
        state = ViewState()
        first, second = MemoryChannel(), MemoryChannel()
        await CSPView(csp, first, state=state).render()
        await CSPView(csp, second, state=state).render()
        assert first.events("initial_render") and not second.events("initial_render")

    @pytest.mark.asyncio
    async def test_reset_bootstraps_again(self, csp, channel):
        view = CSPView(csp, channel)
        await view.render()
        await view.receive({"action": "output", "text": "old"})
        view.reset()
        props = await view.render()
        assert len(channel.events("initial_render")) == 2
        assert props.output is None

    @pytest.mark.asyncio
    async def test_resize_rescales_into_new_canvas(self, csp, channel):
        view = CSPView(csp, channel)
        await view.render()
        props = await view.resize(200, 150)
        assert (props.width, props.height) == (200, 150)
        for node in props.nodes:
            assert 60 - 1e-6 <= node.x <= 140 + 1e-6
            assert 60 - 1e-6 <= node.y <= 90 + 1e-6

    @pytest.mark.asyncio
    async def test_reset_drops_messages_buffered_for_old_graph(self, csp, channel):
        view = CSPView(csp, channel)
        await view.render()
        split = asyncio.create_task(view.receive({"action": "chooseDomainSplit", "domain": [1, 2]}))
        for _ in range(10):
            if view.protocol.pending_split is not None:
                break
            await asyncio.sleep(0)
        await view.receive({"action": "output", "text": "stale"})
        await view.receive({"action": "setDomains", "nodeIds": ["A"], "domains": [[3]]})

        view.reset()
        # The split survives the reset and can still be answered.
        view.protocol.reply_domain_split(None)
        await split
        assert channel.events("domain_split") == [{"event": "domain_split", "domain": None}]
        props = view.props()
        assert props.output is None
        assert props.node("A").label == ("A", "{1, 2, 3}")

    def test_malformed_snapshot(self, channel):
        with pytest.raises(MalformedSnapshotError):
            CSPView({"nodes": [], "edges": [{"id": "e", "source": "x", "target": "y"}]}, channel)


class TestLabels:
    @pytest.mark.asyncio
    async def test_domain_label_tracks_set_domains(self, csp, channel):
        view = CSPView(csp, channel)
        await view.render()
        assert view.props().node("A").label == ("A", "{1, 2, 3}")
        await view.receive({"action": "setDomains", "nodeIds": ["A"], "domains": [[3]]})
        assert view.props().node("A").label == ("A", "{3}")

    def test_shapes(self, csp, channel):
        props = CSPView(csp, channel).props()
        assert props.node("A").shape == "ellipse"
        assert props.node("c0").shape == "rect"
        assert props.node("c0").label == ("A < B",)


class TestGestures:
    def test_click_edge_from_variable(self, csp, channel):
        event = CSPView(csp, channel).click_edge("e1")
        assert event == ArcClickEvent(constraint_id=0, var_name="A")
        assert channel.sent == [{"event": "arc:click", "constId": 0, "varName": "A"}]

    def test_click_edge_from_constraint(self, csp, channel):
        CSPView(csp, channel).click_edge("e2")
        assert channel.sent == [{"event": "arc:click", "constId": 0, "varName": "B"}]

    def test_click_edge_without_idx_uses_id(self, channel):
        snapshot = {
            "nodes": [{"id": "X", "name": "X", "type": "variable"}, {"id": "k", "name": "k", "type": "constraint"}],
            "edges": [{"id": "e", "source": "X", "target": "k"}],
        }
        CSPView(snapshot, channel).click_edge("e")
        assert channel.sent[0]["constId"] == "k"

    def test_click_unknown_edge(self, csp, channel):
        with pytest.raises(UnknownIdError):
            CSPView(csp, channel).click_edge("nope")

    def test_click_node(self, csp, channel):
        CSPView(csp, channel).click_node("B")
        assert channel.sent == [{"event": "var:click", "varName": "B"}]

    def test_step_buttons(self, csp, channel):
        view = CSPView(csp, channel)
        view.click_fine_step()
        view.click_step()
        view.click_auto_step()
        assert [m["event"] for m in channel.sent] == ["fine-step:click", "step:click", "auto-step:click"]


class TestProps:
    def test_lookup_by_id(self, csp, channel):
        props = CSPView(csp, channel).props()
        assert props.node("c1").type == "constraint"
        assert (props.edge("e3").source, props.edge("e3").target) == ("B", "c1")

    def test_unknown_node_id(self, csp, channel):
        props = CSPView(csp, channel).props()
        with pytest.raises(UnknownIdError):
            props.node("nope")
        # An edge id does not name a node.
        with pytest.raises(UnknownIdError):
            props.node("e1")

    def test_unknown_edge_id(self, csp, channel):
        props = CSPView(csp, channel).props()
        with pytest.raises(UnknownIdError):
            props.edge("nope")
        with pytest.raises(UnknownIdError):
            props.edge("A")
