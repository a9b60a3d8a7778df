"""
QRSVG Types & Constants — QR Module Matrix to SVG Renderer
===========================================================

Foundational type definitions, constants, enumerations, shape descriptors
and error classes for the QRenSVG renderer. This module has ZERO external
dependencies beyond the Python standard library.

Layers:
  - Option resolution   (qrsvg_options)
  - Geometry planner    (qrsvg_planner)   → shape descriptors defined here
  - Serializer          (qrsvg_renderer)  → consumes shape descriptors

The encoder that produces the module matrix is external (qrsvg_encoder
only bridges it).
"""

import math
from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

# ═══════════════════════════════════════════════════════════════
# DOCUMENT CONSTANTS
# ═══════════════════════════════════════════════════════════════

SVG_NS = "http://www.w3.org/2000/svg"
XML_DECLARATION = '<?xml version="1.0" standalone="yes"?>'

# Light color value that suppresses the background element entirely
TRANSPARENT = "transparent"

# Quiet zone bounds, in modules
MARGIN_MIN = 0
MARGIN_MAX = 64

SQRT2 = math.sqrt(2)


# ═══════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════

class Renderer(str, Enum):
    """Renderer presets."""
    CLASSIC = "classic"
    DIAMOND = "diamond"   # Whole image rotated 45° unless rotate_deg given


class Grouping(str, Enum):
    """Run-merging strategies. Mutually exclusive."""
    ROW     = "row"       # Horizontal runs
    COL     = "col"       # Vertical runs
    DOT     = "dot"       # One shape per module
    BLOB    = "blob"      # Row runs + column runs, overlapping
    DIAG45  = "45"        # Runs along d = x - y
    DIAG_45 = "-45"       # Runs along d = x + y


class ModuleShape(str, Enum):
    """Base module primitive."""
    SQUARE  = "square"
    CIRCLE  = "circle"
    # Presets, resolved to SQUARE + corner radius during option resolution
    ROUNDED = "rounded"
    PILL    = "pill"


class LineCap(str, Enum):
    BUTT  = "butt"
    ROUND = "round"


class SvgErrorCode(str, Enum):
    """Machine-readable error codes."""
    INVALID_OPTIONS   = "INVALID_OPTIONS"
    INVALID_QR_OBJECT = "INVALID_QR_OBJECT"
    RENDER_FAILED     = "RENDER_FAILED"


# ═══════════════════════════════════════════════════════════════
# SHAPE DESCRIPTORS (planner output, serializer input)
# ═══════════════════════════════════════════════════════════════

Point = Tuple[float, float]


@dataclass(frozen=True)
class RectShape:
    """
    Axis-aligned rectangle covering one module or one merged run.

    Coordinates are pixels, origin at the top-left of the un-rotated
    canvas. `radius` is already clamped to half the smaller side.
    """
    x: float
    y: float
    width: float
    height: float
    fill: str
    radius: float = 0


@dataclass(frozen=True)
class PolygonShape:
    """
    Closed polygon from an ordered point list.

    Used for rectangles rotated about their own center. When `radius`
    is non-zero every corner is clipped by a quadratic curve whose
    control point is the original corner.
    """
    points: Tuple[Point, ...]
    fill: str
    radius: float = 0

    def corner_clips(self) -> List[Tuple[Point, Point, Point]]:
        """
        (entry, corner, exit) per corner: entry/exit sit `radius` away
        from the corner along the incoming/outgoing edges.
        """
        n = len(self.points)
        clips = []
        for i, corner in enumerate(self.points):
            clips.append((
                _toward(corner, self.points[i - 1], self.radius),
                corner,
                _toward(corner, self.points[(i + 1) % n], self.radius),
            ))
        return clips


@dataclass(frozen=True)
class CircleShape:
    cx: float
    cy: float
    r: float
    fill: str


@dataclass(frozen=True)
class StrokeShape:
    """
    Diagonal run drawn as a thick line.

    The ribbon extends half a module on each side of the center line
    (stroke width = module size).
    """
    start: Point
    length: float
    direction: Point      # Unit vector
    width: float
    stroke: str
    linecap: LineCap = LineCap.BUTT

    @property
    def end(self) -> Point:
        return (self.start[0] + self.direction[0] * self.length,
                self.start[1] + self.direction[1] * self.length)


# ═══════════════════════════════════════════════════════════════
# ERROR CLASSES
# ═══════════════════════════════════════════════════════════════

class SvgError(Exception):
    """Base error for all rendering operations."""
    code = SvgErrorCode.RENDER_FAILED

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}

    def __repr__(self):
        return f"{type(self).__name__}({self.code.value}: {self})"


class SvgInputError(SvgError):
    """Module grid does not expose `size` and a callable lookup."""
    code = SvgErrorCode.INVALID_QR_OBJECT


class SvgOptionsError(SvgError):
    """Option value outside its documented bounds."""
    code = SvgErrorCode.INVALID_OPTIONS


class SvgRenderError(SvgError):
    """Failure while walking the module grid."""
    code = SvgErrorCode.RENDER_FAILED


# ═══════════════════════════════════════════════════════════════
# UTILITY FUNCTIONS
# ═══════════════════════════════════════════════════════════════

def format_number(value: float) -> str:
    """
    Format a coordinate for SVG output.

    Integral values print without a fractional part (30, not 30.0).
    Anything else prints with the shortest round-trip representation,
    no rounding applied.
    """
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, int):
        return str(value)
    if value == 0:
        return "0"  # also folds -0.0
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _toward(origin: Point, target: Point, distance: float) -> Point:
    dx, dy = target[0] - origin[0], target[1] - origin[1]
    length = math.hypot(dx, dy)
    if not length:
        return origin
    return (origin[0] + dx * distance / length,
            origin[1] + dy * distance / length)


def escape_attr(text: str) -> str:
    """Escape a string for use inside a double-quoted XML attribute."""
    return (text
            .replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;"))
