"""
QRSVG Renderer — Serializer & Document Assembly
================================================

Entry point of the rendering engine:

    svg = render_svg(grid, {'module_size': 10, 'margin': 0})

Pipeline:
  1. as_module_grid()   → SvgInputError     (before anything else)
  2. resolve_options()  → SvgOptionsError   (before any planning)
  3. plan_document()    → Canvas + shape descriptors
  4. serialize()        → SVG string

The serializer never looks at the grid; it only maps descriptors to
elements. Output is a pure function of (grid, options).
"""

import logging
from pathlib import Path
from typing import Any, List, Mapping, Union

from qrsvg_types import (
    SVG_NS, XML_DECLARATION, TRANSPARENT,
    RectShape, PolygonShape, CircleShape, StrokeShape,
    format_number as num, escape_attr,
)
from qrsvg_options import RenderOptions, as_module_grid, resolve_options
from qrsvg_planner import DocumentPlan, plan_document

logger = logging.getLogger(__name__)

INDENT = "  "


# ═══════════════════════════════════════════════════════════════
# ELEMENT WRITERS (one descriptor → one element)
# ═══════════════════════════════════════════════════════════════

def _pt(point) -> str:
    return f"{num(point[0])} {num(point[1])}"


def rect_element(shape: RectShape) -> str:
    corner = ""
    if shape.radius > 0:
        corner = f' rx="{num(shape.radius)}" ry="{num(shape.radius)}"'
    return (f'<rect x="{num(shape.x)}" y="{num(shape.y)}" '
            f'width="{num(shape.width)}" height="{num(shape.height)}" '
            f'fill="{escape_attr(shape.fill)}"{corner}/>')


def polygon_path_data(shape: PolygonShape) -> str:
    """
    Straight segments by default; with a radius every corner becomes
    a quadratic curve controlled by the original corner.
    """
    if not shape.radius:
        head, *rest = shape.points
        return "M " + _pt(head) + "".join(" L " + _pt(p) for p in rest) + " Z"
    parts = []
    for i, (entry, corner, exit_) in enumerate(shape.corner_clips()):
        move = "M" if i == 0 else "L"
        parts.append(f"{move} {_pt(entry)} Q {_pt(corner)} {_pt(exit_)}")
    return " ".join(parts) + " Z"


def polygon_element(shape: PolygonShape) -> str:
    return f'<path d="{polygon_path_data(shape)}" fill="{escape_attr(shape.fill)}"/>'


def circle_element(shape: CircleShape) -> str:
    return (f'<circle cx="{num(shape.cx)}" cy="{num(shape.cy)}" '
            f'r="{num(shape.r)}" fill="{escape_attr(shape.fill)}"/>')


def stroke_element(shape: StrokeShape) -> str:
    return (f'<path d="M {_pt(shape.start)} L {_pt(shape.end)}" '
            f'stroke="{escape_attr(shape.stroke)}" '
            f'stroke-width="{num(shape.width)}" '
            f'stroke-linecap="{shape.linecap.value}" fill="none"/>')


ELEMENT_WRITERS = {
    RectShape: rect_element,
    PolygonShape: polygon_element,
    CircleShape: circle_element,
    StrokeShape: stroke_element,
}


def shape_element(shape) -> str:
    try:
        writer = ELEMENT_WRITERS[type(shape)]
    except KeyError:
        raise TypeError(f"No SVG element for shape {type(shape).__name__}") from None
    return writer(shape)


# ═══════════════════════════════════════════════════════════════
# DOCUMENT ASSEMBLY
# ═══════════════════════════════════════════════════════════════

def serialize(plan: DocumentPlan, opts: RenderOptions) -> str:
    """Assemble the SVG document for a planned picture."""
    canvas = plan.canvas
    size = num(canvas.size)
    lines: List[str] = []

    if opts.xml_declaration:
        lines.append(XML_DECLARATION)

    attrs = f'width="{size}" height="{size}"'
    if opts.view_box:
        attrs += f' viewBox="0 0 {size} {size}"'
    if opts.crisp_edges:
        attrs += ' shape-rendering="crispEdges"'
    lines.append(f'<svg xmlns="{SVG_NS}" {attrs}>')

    if opts.light_color != TRANSPARENT:
        lines.append(f'{INDENT}<rect x="0" y="0" width="{size}" height="{size}" '
                     f'fill="{escape_attr(opts.light_color)}"/>')

    depth = 1
    if canvas.rotation:
        offset, center = num(canvas.offset), num(canvas.center)
        lines.append(f'{INDENT}<g transform="translate({offset} {offset}) '
                     f'rotate({num(canvas.rotation)} {center} {center})">')
        depth = 2

    lines.extend(INDENT * depth + shape_element(s) for s in plan.shapes)

    if canvas.rotation:
        lines.append(f"{INDENT}</g>")
    lines.append("</svg>")
    return "\n".join(lines)


def render_svg(qr, options: Union[Mapping[str, Any], RenderOptions, None] = None,
               **overrides) -> str:
    """
    Render a QR module grid to an SVG document.

    Args:
        qr: Module grid exposing `size` and `get(x, y)` (or `matrix.get`).
        options: Option mapping (see qrsvg_options.DEFAULT_OPTIONS) or a
                 resolved RenderOptions.
        **overrides: Individual options, winning over `options`.

    Returns:
        The SVG document as a string.

    Raises:
        SvgInputError: grid lacks the required capability.
        SvgOptionsError: option outside its documented bounds.
        SvgRenderError: the grid lookup failed while planning.
    """
    grid = as_module_grid(qr)
    opts = resolve_options(options, **overrides)
    plan = plan_document(grid, opts)
    logger.debug("Rendering %d shapes on %sx%s canvas (rotation=%s)",
                 len(plan.shapes), plan.canvas.size, plan.canvas.size,
                 plan.canvas.rotation)
    return serialize(plan, opts)


def save_svg(svg: str, output_path: Union[str, Path]) -> Path:
    """Write a rendered document to disk as UTF-8."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(svg, encoding='utf-8')
    return path
