"""Jupyter widget drawing view props as SVG."""

from __future__ import annotations

import html as html_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from algoviz.views.base import GraphProps, RenderedEdge, RenderedNode

_LINE_HEIGHT = 14
_FILL_BY_TYPE = {
    "start": "#e8f5e9",
    "goal": "#fff3e0",
    "constraint": "#eceff1",
}
_DEFAULT_FILL = "white"


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _render_edge(edge: RenderedEdge) -> str:
    if None in (edge.x1, edge.y1, edge.x2, edge.y2):
        return ""
    edge_id = html_module.escape(str(edge.id), quote=True)
    parts = [
        f'<line data-id="{edge_id}" x1="{_fmt(edge.x1)}" y1="{_fmt(edge.y1)}" '
        f'x2="{_fmt(edge.x2)}" y2="{_fmt(edge.y2)}" '
        f'stroke="{html_module.escape(edge.stroke, quote=True)}" stroke-width="{_fmt(edge.stroke_width)}" '
        f'marker-end="url(#arrow)"/>'
    ]
    if edge.label:
        mx = (edge.x1 + edge.x2) / 2
        my = (edge.y1 + edge.y2) / 2
        parts.append(
            f'<text x="{_fmt(mx)}" y="{_fmt(my)}" class="edge-label">{html_module.escape(edge.label)}</text>'
        )
    return "".join(parts)


def _render_node(node: RenderedNode) -> str:
    if node.x is None or node.y is None:
        return ""
    node_id = html_module.escape(str(node.id), quote=True)
    stroke = html_module.escape(node.stroke, quote=True)
    fill = _FILL_BY_TYPE.get(node.type, _DEFAULT_FILL)
    r = node.radius
    if node.shape == "rect":
        shape = (
            f'<rect x="{_fmt(node.x - r)}" y="{_fmt(node.y - r / 2)}" width="{_fmt(2 * r)}" '
            f'height="{_fmt(r)}" fill="{fill}" stroke="{stroke}" stroke-width="{_fmt(node.stroke_width)}"/>'
        )
    elif node.shape == "ellipse":
        shape = (
            f'<ellipse cx="{_fmt(node.x)}" cy="{_fmt(node.y)}" rx="{_fmt(r)}" ry="{_fmt(r * 0.6)}" '
            f'fill="{fill}" stroke="{stroke}" stroke-width="{_fmt(node.stroke_width)}"/>'
        )
    else:
        shape = (
            f'<circle cx="{_fmt(node.x)}" cy="{_fmt(node.y)}" r="{_fmt(r)}" '
            f'fill="{fill}" stroke="{stroke}" stroke-width="{_fmt(node.stroke_width)}"/>'
        )

    first_y = node.y - (len(node.label) - 1) * _LINE_HEIGHT / 2
    lines = "".join(
        f'<tspan x="{_fmt(node.x)}" y="{_fmt(first_y + i * _LINE_HEIGHT)}">{html_module.escape(line)}</tspan>'
        for i, line in enumerate(node.label)
    )
    return f'<g data-id="{node_id}">{shape}<text class="node-label">{lines}</text></g>'


def render_svg(props: GraphProps) -> str:
    """Render props as a standalone SVG element."""
    edges = "".join(_render_edge(e) for e in props.edges)
    nodes = "".join(_render_node(n) for n in props.nodes)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_fmt(props.width)}" height="{_fmt(props.height)}" '
        f'viewBox="0 0 {_fmt(props.width)} {_fmt(props.height)}">'
        '<defs><marker id="arrow" viewBox="0 0 10 10" refX="10" refY="5" markerWidth="4" '
        'markerHeight="4" orient="auto"><path d="M 0 0 L 10 5 L 0 10 z"/></marker></defs>'
        f"<g class=\"edges\">{edges}</g><g class=\"nodes\">{nodes}</g></svg>"
    )


def render_document(props: GraphProps) -> str:
    """Wrap the SVG and status output in a complete HTML document."""
    output = ""
    if props.output:
        output = f'<pre class="output">{html_module.escape(props.output)}</pre>'
    return (
        "<!doctype html><html><head><meta charset=\"utf-8\"><style>"
        "body { margin: 0; font-family: sans-serif; }"
        ".node-label { font-size: 12px; text-anchor: middle; dominant-baseline: middle; }"
        ".edge-label { font-size: 11px; text-anchor: middle; fill: #555; }"
        ".output { margin: 8px; white-space: pre-wrap; }"
        "</style></head><body>"
        f"{render_svg(props)}{output}</body></html>"
    )


class GraphWidget:
    """Widget for displaying a view in Jupyter/VSCode notebooks.

    The drawing is embedded in an iframe with explicit dimensions so the
    notebook does not add its own scrollbars.
    """

    def __init__(self, props: GraphProps):
        """Create a widget.

        Args:
            props: Props of the view to draw
        """
        self.props = props
        self.html_content = render_document(props)
        self.width = int(props.width)
        # Room for the status output below the drawing
        self.height = int(props.height) + (60 if props.output else 0)

    def _repr_html_(self) -> str:
        """Return HTML representation for Jupyter display."""
        escaped_html = html_module.escape(self.html_content, quote=True)
        return (
            f'<iframe srcdoc="{escaped_html}" '
            f'width="{self.width}" height="{self.height}" frameborder="0" '
            f'style="border: none; width: {self.width}px; max-width: 100%; '
            f'height: {self.height}px; display: block; background: transparent;" '
            f'sandbox="allow-scripts allow-same-origin">'
            f"</iframe>"
        )

    def save(self, filepath: str) -> str:
        """Write the HTML document to ``filepath`` and return the path used."""
        if not filepath.endswith(".html"):
            filepath = filepath + ".html"
        with open(filepath, "w") as f:
            f.write(self.html_content)
        return filepath
