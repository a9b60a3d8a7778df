"""
QRenSVG — QR Module Matrix to SVG Renderer
===========================================

Renders a QR code's dark/light module grid as a deterministic SVG
document, with configurable module shape, run-merging strategy, rotation,
corner rounding, colors and quiet zone.

The QR encoder is external (`qrcode`); this package only renders.
"""

from qrsvg_types import (
    Renderer, Grouping, ModuleShape, SvgErrorCode,
    SvgError, SvgInputError, SvgOptionsError, SvgRenderError,
)
from qrsvg_options import RenderOptions, ModuleGrid, resolve_options
from qrsvg_planner import plan_shapes
from qrsvg_renderer import render_svg, save_svg
from qrsvg_encoder import QRCodeGrid, encode_text, to_svg_string

__version__ = "1.0.0"
__all__ = [
    'render_svg', 'save_svg', 'plan_shapes', 'resolve_options',
    'RenderOptions', 'ModuleGrid',
    'QRCodeGrid', 'encode_text', 'to_svg_string',
    'Renderer', 'Grouping', 'ModuleShape', 'SvgErrorCode',
    'SvgError', 'SvgInputError', 'SvgOptionsError', 'SvgRenderError',
]
