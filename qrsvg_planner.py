"""
QRSVG Planner — Geometry Planning
==================================

Walks the module grid according to the grouping strategy and produces an
ordered list of shape descriptors in pixel space. Never emits markup.

Strategies (one planner function each, selected from PLANNERS):
  - row   : horizontal runs → one rectangle per run
  - col   : vertical runs → one rectangle per run
  - dot   : one primitive per lit module
  - blob  : every row rectangle + every column rectangle
  - 45    : runs along d = x - y → one stroke per run
  - -45   : runs along d = x + y → one stroke per run

All strategies share iter_runs() for run detection and box_shape() for
the square primitive (corner rounding + per-module rotation).
"""

import math
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Sequence, Tuple

from qrsvg_types import (
    SQRT2, Grouping, ModuleShape, LineCap, Point,
    RectShape, PolygonShape, CircleShape, StrokeShape,
)
from qrsvg_options import ModuleGrid, RenderOptions, as_module_grid

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]
Line = List[Cell]


# ═══════════════════════════════════════════════════════════════
# CANVAS
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Canvas:
    """
    Document geometry.

    base_size : edge of the un-rotated picture (grid + quiet zone)
    size      : edge of the emitted canvas (enlarged when rotated)
    rotation  : whole-image rotation in degrees
    """
    base_size: int
    size: int
    rotation: float = 0

    @property
    def offset(self) -> float:
        """Translation that centers the base picture in the canvas."""
        return (self.size - self.base_size) / 2

    @property
    def center(self) -> float:
        return self.base_size / 2


def canvas_for(grid_size: int, opts: RenderOptions) -> Canvas:
    base = (grid_size + 2 * opts.margin) * opts.module_size
    rotation = opts.rotate_deg
    if not rotation:
        return Canvas(base_size=base, size=base)
    theta = math.radians(rotation)
    size = math.ceil(base * (abs(math.cos(theta)) + abs(math.sin(theta))))
    return Canvas(base_size=base, size=size, rotation=rotation)


@dataclass(frozen=True)
class DocumentPlan:
    """Everything the serializer needs. No reference to the grid."""
    canvas: Canvas
    shapes: Tuple


# ═══════════════════════════════════════════════════════════════
# SCAN LINES & RUN DETECTION
# ═══════════════════════════════════════════════════════════════

def row_lines(size: int) -> Iterator[Line]:
    for y in range(size):
        yield [(x, y) for x in range(size)]


def col_lines(size: int) -> Iterator[Line]:
    for x in range(size):
        yield [(x, y) for y in range(size)]


def diagonal_lines(size: int) -> Iterator[Line]:
    """Diagonals d = x - y, x increasing (moving down-right)."""
    for d in range(-(size - 1), size):
        yield [(x, x - d) for x in range(max(0, d), min(size, size + d))]


def anti_diagonal_lines(size: int) -> Iterator[Line]:
    """Anti-diagonals d = x + y, x increasing (moving up-right)."""
    for d in range(2 * size - 1):
        yield [(x, d - x) for x in range(max(0, d - size + 1), min(d, size - 1) + 1)]


def iter_runs(grid: ModuleGrid, line: Sequence[Cell]) -> Iterator[Tuple[int, int]]:
    """
    Yield (index, length) for every maximal lit run along `line`.

    Scanning resumes right after each run, so every lit cell belongs to
    exactly one run.
    """
    i = 0
    n = len(line)
    while i < n:
        if grid.is_lit(*line[i]):
            length = 1
            while i + length < n and grid.is_lit(*line[i + length]):
                length += 1
            yield i, length
            i += length
        else:
            i += 1


# ═══════════════════════════════════════════════════════════════
# PRIMITIVES
# ═══════════════════════════════════════════════════════════════

def module_origin(x: int, y: int, opts: RenderOptions) -> Point:
    """Pixel position of the top-left corner of module (x, y)."""
    return ((x + opts.margin) * opts.module_size,
            (y + opts.margin) * opts.module_size)


def rotate_points(points: Sequence[Point], center: Point,
                  degrees: float) -> Tuple[Point, ...]:
    """Rotate points about `center` (SVG convention: clockwise on screen)."""
    theta = math.radians(degrees)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    cx, cy = center
    out = []
    for x, y in points:
        dx, dy = x - cx, y - cy
        out.append((cx + dx * cos_t - dy * sin_t,
                    cy + dx * sin_t + dy * cos_t))
    return tuple(out)


def box_shape(px: float, py: float, width: float, height: float,
              opts: RenderOptions):
    """Square primitive for one module or one merged run."""
    radius = 0
    if opts.corner_radius:
        radius = min(opts.corner_radius, width / 2, height / 2)

    if opts.module_rotation_deg:
        corners = ((px, py), (px + width, py),
                   (px + width, py + height), (px, py + height))
        center = (px + width / 2, py + height / 2)
        return PolygonShape(
            points=rotate_points(corners, center, opts.module_rotation_deg),
            fill=opts.dark_color,
            radius=radius,
        )
    return RectShape(x=px, y=py, width=width, height=height,
                     fill=opts.dark_color, radius=radius)


def dot_shape(x: int, y: int, opts: RenderOptions):
    px, py = module_origin(x, y, opts)
    if opts.module_shape is ModuleShape.CIRCLE:
        r = opts.module_size / 2
        return CircleShape(cx=px + r, cy=py + r, r=r, fill=opts.dark_color)
    return box_shape(px, py, opts.module_size, opts.module_size, opts)


def _linecap(opts: RenderOptions) -> LineCap:
    if opts.corner_radius > 0:
        return LineCap.ROUND
    return LineCap.BUTT


# ═══════════════════════════════════════════════════════════════
# STRATEGIES
# ═══════════════════════════════════════════════════════════════

def plan_dots(grid: ModuleGrid, opts: RenderOptions) -> List:
    return [dot_shape(x, y, opts)
            for y in range(grid.size)
            for x in range(grid.size)
            if grid.is_lit(x, y)]


def _plan_runs(grid: ModuleGrid, opts: RenderOptions, lines,
               horizontal: bool) -> List:
    ms = opts.module_size
    shapes = []
    for line in lines:
        for i, length in iter_runs(grid, line):
            px, py = module_origin(*line[i], opts)
            if horizontal:
                shapes.append(box_shape(px, py, length * ms, ms, opts))
            else:
                shapes.append(box_shape(px, py, ms, length * ms, opts))
    return shapes


def plan_rows(grid: ModuleGrid, opts: RenderOptions) -> List:
    # Circles cannot merge visually: per-module emission
    if opts.module_shape is ModuleShape.CIRCLE:
        return plan_dots(grid, opts)
    return _plan_runs(grid, opts, row_lines(grid.size), horizontal=True)


def plan_cols(grid: ModuleGrid, opts: RenderOptions) -> List:
    if opts.module_shape is ModuleShape.CIRCLE:
        return plan_dots(grid, opts)
    return _plan_runs(grid, opts, col_lines(grid.size), horizontal=False)


def plan_blob(grid: ModuleGrid, opts: RenderOptions) -> List:
    if opts.module_shape is ModuleShape.CIRCLE:
        return plan_dots(grid, opts)
    # Every column run is kept: under per-module rotation a height-1
    # column rect is not contained in the rotated row rect
    return (_plan_runs(grid, opts, row_lines(grid.size), horizontal=True)
            + _plan_runs(grid, opts, col_lines(grid.size), horizontal=False))


def _plan_strokes(grid: ModuleGrid, opts: RenderOptions, lines,
                  step_y: int) -> List:
    """
    One stroke per diagonal run. The stroke follows the line through the
    module centers and starts at the first module's corner on that line.
    """
    ms = opts.module_size
    direction = (1 / SQRT2, step_y / SQRT2)
    cap = _linecap(opts)
    shapes = []
    for line in lines:
        for i, length in iter_runs(grid, line):
            px, py = module_origin(*line[i], opts)
            start = (px, py) if step_y > 0 else (px, py + ms)
            shapes.append(StrokeShape(
                start=start,
                length=length * ms * SQRT2,
                direction=direction,
                width=ms,
                stroke=opts.dark_color,
                linecap=cap,
            ))
    return shapes


def plan_diagonal(grid: ModuleGrid, opts: RenderOptions) -> List:
    return _plan_strokes(grid, opts, diagonal_lines(grid.size), step_y=1)


def plan_anti_diagonal(grid: ModuleGrid, opts: RenderOptions) -> List:
    return _plan_strokes(grid, opts, anti_diagonal_lines(grid.size), step_y=-1)


PLANNERS: Dict[Grouping, Callable[[ModuleGrid, RenderOptions], List]] = {
    Grouping.ROW:     plan_rows,
    Grouping.COL:     plan_cols,
    Grouping.DOT:     plan_dots,
    Grouping.BLOB:    plan_blob,
    Grouping.DIAG45:  plan_diagonal,
    Grouping.DIAG_45: plan_anti_diagonal,
}


# ═══════════════════════════════════════════════════════════════
# ENTRY POINTS
# ═══════════════════════════════════════════════════════════════

def plan_shapes(grid, opts: RenderOptions) -> List:
    """Ordered shape descriptors for `grid` under `opts`."""
    grid = as_module_grid(grid)
    shapes = PLANNERS[opts.grouping](grid, opts)
    logger.debug("Planned %d shapes (grouping=%s, shape=%s, size=%d)",
                 len(shapes), opts.grouping.value, opts.module_shape.value,
                 grid.size)
    return shapes


def plan_document(grid, opts: RenderOptions) -> DocumentPlan:
    grid = as_module_grid(grid)
    canvas = canvas_for(grid.size, opts)
    return DocumentPlan(canvas=canvas, shapes=tuple(plan_shapes(grid, opts)))
