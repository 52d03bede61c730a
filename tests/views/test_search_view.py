"""Tests for the search graph view."""

import pytest

from algoviz import SearchView


class TestSearchView:
    @pytest.mark.asyncio
    async def test_no_default_highlight(self, search, channel):
        props = await SearchView(search, channel).render()
        assert channel.sent == [{"event": "initial_render"}]
        assert all(e.stroke == "black" for e in props.edges)

    def test_labels(self, search, channel):
        props = SearchView(search, channel).props()
        assert props.node("s").label == ("start", "h: 4")
        assert props.node("m").label == ("mid", "h: 2")
        assert props.edge("sm").label == "2"
        assert props.edge("mg").label == "1.5"

    def test_shapes(self, search, channel):
        props = SearchView(search, channel).props()
        assert props.node("s").shape == "rect"
        assert props.node("g").shape == "rect"
        assert props.node("m").shape == "ellipse"

    def test_node_clicks_are_not_forwarded(self, search, channel):
        assert SearchView(search, channel).click_node("s") is None
        assert channel.sent == []

    @pytest.mark.asyncio
    async def test_resize_rescales(self, search, channel):
        view = SearchView(search, channel)
        await view.render()
        props = await view.resize(400, 300)
        xs = [n.x for n in props.nodes]
        ys = [n.y for n in props.nodes]
        assert min(xs) == pytest.approx(60)
        assert max(xs) == pytest.approx(340)
        assert min(ys) == pytest.approx(60)
        assert max(ys) == pytest.approx(240)
        assert (props.width, props.height) == (400, 300)

    @pytest.mark.asyncio
    async def test_resize_to_same_size_moves_nothing(self, search, channel):
        view = SearchView(search, channel)
        before = await view.render()
        after = await view.resize(view.params.width, view.params.height)
        assert [(n.x, n.y) for n in before.nodes] == [(n.x, n.y) for n in after.nodes]

    @pytest.mark.asyncio
    async def test_resize_before_first_render_lays_out(self, search, channel):
        view = SearchView(search, channel)
        await view.resize(400, 300)
        props = await view.render()
        assert (props.width, props.height) == (400, 300)
        for node in props.nodes:
            assert node.x is not None and node.y is not None
            assert 50 <= node.x <= 350
            assert 50 <= node.y <= 250

    @pytest.mark.asyncio
    async def test_resize_after_reset_lays_out_new_graph(self, search, channel):
        view = SearchView(search, channel)
        await view.render()
        view.reset()
        props = await view.resize(400, 300)
        assert all(n.x is not None and n.y is not None for n in props.nodes)
        again = await view.render()
        assert [(n.x, n.y) for n in props.nodes] == [(n.x, n.y) for n in again.nodes]
