"""Views for the supported visualizations.

Usage:
    view = CSPView(snapshot, channel)
    await view.render()          # lays out, sends initial_render once
    await view.receive(message)  # controller -> view
    view.click_edge(edge_id)     # view -> controller
    view.widget()                # display in a notebook
"""

from algoviz.views.base import GraphProps, GraphView, RenderedEdge, RenderedNode
from algoviz.views.bayes import BayesView
from algoviz.views.csp import CSPView
from algoviz.views.search import SearchView
from algoviz.views.widget import GraphWidget, render_document, render_svg

# View classes by the name used on the command line
VIEWS: dict[str, type[GraphView]] = {
    "csp": CSPView,
    "search": SearchView,
    "bayes": BayesView,
}

__all__ = [
    "VIEWS",
    "BayesView",
    "CSPView",
    "GraphProps",
    "GraphView",
    "GraphWidget",
    "RenderedEdge",
    "RenderedNode",
    "SearchView",
    "render_document",
    "render_svg",
]
