"""
QRSVG Options — Option Resolution & Input Validation
=====================================================

Turns a caller's partial configuration into one immutable RenderOptions
record, and checks that the module grid exposes the capability the
planner reads (`size` + `get(x, y)`).

Resolution order:
  1. Normalize keys (camelCase spellings and legacy aliases → snake_case)
  2. Merge over DEFAULT_OPTIONS (None means "unset")
  3. Resolve aliases  (rx → corner_radius)
  4. Resolve presets  (diamond → 45°, rounded/pill → square + radius)
  5. Validate         (SvgOptionsError, nothing is coerced)
"""

import math
import numbers
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Mapping, Optional, Union

from qrsvg_types import (
    MARGIN_MIN, MARGIN_MAX,
    Renderer, Grouping, ModuleShape,
    SvgInputError, SvgOptionsError, SvgRenderError,
)


# ═══════════════════════════════════════════════════════════════
# DEFAULTS & KEY ALIASES
# ═══════════════════════════════════════════════════════════════

DEFAULT_OPTIONS = {
    'module_size': 4,
    'margin': 4,
    'dark_color': "#000",
    'light_color': "transparent",
    'xml_declaration': False,
    'view_box': True,
    'crisp_edges': True,
    'renderer': Renderer.CLASSIC,
    'grouping': Grouping.ROW,
    'module_shape': ModuleShape.SQUARE,
    'rotate_deg': 0,
    'module_rotation_deg': 0,
    'corner_radius': 0,
}

# Accepted spellings → canonical field name
KEY_ALIASES = {
    'moduleSize': 'module_size',
    'darkColor': 'dark_color',
    'lightColor': 'light_color',
    'xmlDeclaration': 'xml_declaration',
    'viewBox': 'view_box',
    'crispEdges': 'crisp_edges',
    'moduleShape': 'module_shape',
    'rotateDeg': 'rotate_deg',
    'rotate': 'rotate_deg',
    'moduleRotationDeg': 'module_rotation_deg',
    'cornerRadius': 'corner_radius',
}

# Deprecated spelling of corner_radius, consulted only when it is unset
LEGACY_RADIUS_KEY = 'rx'

DIAMOND_ROTATION = 45


# ═══════════════════════════════════════════════════════════════
# DATA STRUCTURES
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RenderOptions:
    """
    Fully resolved render configuration.

    `rotate_deg` holds the effective whole-image rotation (the diamond
    preset is already applied) and `module_shape` is never one of the
    ROUNDED/PILL presets.
    """
    module_size: int = 4
    margin: int = 4
    dark_color: str = "#000"
    light_color: str = "transparent"
    xml_declaration: bool = False
    view_box: bool = True
    crisp_edges: bool = True
    renderer: Renderer = Renderer.CLASSIC
    grouping: Grouping = Grouping.ROW
    module_shape: ModuleShape = ModuleShape.SQUARE
    rotate_deg: float = 0
    module_rotation_deg: float = 0
    corner_radius: float = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ModuleGrid:
    """
    Validated, read-only view over the caller's module grid.

    Lookup failures surface as SvgRenderError with the original
    exception chained.
    """
    size: int
    lookup: Callable[[int, int], Any]

    def is_lit(self, x: int, y: int) -> bool:
        try:
            return bool(self.lookup(x, y))
        except Exception as e:
            raise SvgRenderError(
                f"Module lookup failed at ({x}, {y}): {e}",
                {'x': x, 'y': y},
            ) from e

    @classmethod
    def from_rows(cls, rows) -> 'ModuleGrid':
        """
        Build a grid from row sequences, e.g. ["101", "010", "101"] or
        [[1, 0, 1], ...]. Rows are indexed [y][x].
        """
        matrix = [[1 if c in (1, True, "1", "#") else 0 for c in row]
                  for row in rows]
        if not matrix:
            raise SvgInputError("Module grid must have at least one row", {'rows': 0})
        if any(len(row) != len(matrix) for row in matrix):
            raise SvgInputError(
                f"Module grid must be square, got {len(matrix)} rows "
                f"of lengths {sorted({len(r) for r in matrix})}",
                {'rows': len(matrix)},
            )
        return cls(size=len(matrix), lookup=lambda x, y: matrix[y][x])


# ═══════════════════════════════════════════════════════════════
# INPUT VALIDATION
# ═══════════════════════════════════════════════════════════════

def _is_real(value) -> bool:
    return (isinstance(value, numbers.Real)
            and not isinstance(value, bool)
            and math.isfinite(value))


def _is_integer(value) -> bool:
    if not _is_real(value):
        return False
    return isinstance(value, numbers.Integral) or float(value).is_integer()


def as_module_grid(qr) -> ModuleGrid:
    """
    Check the grid capability and wrap it.

    Accepts objects exposing `size` and `get(x, y)`, or `size` and
    `matrix.get(x, y)`. Runs before any option processing.
    """
    if isinstance(qr, ModuleGrid):
        if qr.size < 1:
            raise SvgInputError(
                f"Invalid module grid: size must be a positive integer, got {qr.size!r}",
                {'size': qr.size},
            )
        return qr
    if qr is None:
        raise SvgInputError("Invalid module grid: got None", {'qr': None})

    size = getattr(qr, 'size', None)
    if not _is_real(size):
        raise SvgInputError(
            f"Invalid module grid: size must be numeric, got {size!r}",
            {'size': size},
        )

    lookup = getattr(qr, 'get', None)
    if not callable(lookup):
        lookup = getattr(getattr(qr, 'matrix', None), 'get', None)
    if not callable(lookup):
        raise SvgInputError(
            f"Invalid module grid: {type(qr).__name__} has no callable "
            f"get(x, y) or matrix.get(x, y)",
            {'type': type(qr).__name__},
        )

    if not _is_integer(size) or size < 1:
        raise SvgInputError(
            f"Invalid module grid: size must be a positive integer, got {size!r}",
            {'size': size},
        )
    return ModuleGrid(size=int(size), lookup=lookup)


# ═══════════════════════════════════════════════════════════════
# OPTION RESOLUTION
# ═══════════════════════════════════════════════════════════════

def _normalize_keys(options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Canonical keys, None values dropped. Unknown keys pass through."""
    if not options:
        return {}
    out = {}
    for key, value in options.items():
        if value is None:
            continue
        out[KEY_ALIASES.get(key, key)] = value
    return out


def _coerce_enum(enum_cls, field_name: str, value):
    # Diagonal groupings are commonly written as plain ints (45, -45)
    if enum_cls is Grouping and isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(m.value) for m in enum_cls)
        raise SvgOptionsError(
            f"Invalid {field_name}: {value!r}. Must be one of {allowed}.",
            {field_name: value},
        ) from None


def resolve_options(options: Union[Mapping[str, Any], RenderOptions, None] = None,
                    **overrides) -> RenderOptions:
    """
    Merge caller configuration over defaults and validate it.

    Args:
        options: Mapping of option values (snake_case or camelCase keys),
                 or an already resolved RenderOptions.
        **overrides: Individual option values; these win over `options`.

    Returns:
        RenderOptions

    Raises:
        SvgOptionsError: any value outside its documented bounds.
    """
    if isinstance(options, RenderOptions):
        if not overrides:
            return options
        options = options.to_dict()
        # A resolved record always carries corner_radius; an rx override
        # must replace it rather than be shadowed by it
        normalized = _normalize_keys(overrides)
        if LEGACY_RADIUS_KEY in normalized and 'corner_radius' not in normalized:
            options.pop('corner_radius')

    given = _normalize_keys(options)
    given.update(_normalize_keys(overrides))

    merged = dict(DEFAULT_OPTIONS)
    merged.update({k: v for k, v in given.items() if k in DEFAULT_OPTIONS})

    # ── Validation: bounds ──
    module_size = merged['module_size']
    if not _is_integer(module_size) or module_size <= 0:
        raise SvgOptionsError(
            f"Invalid module_size: {module_size!r}. Must be a positive integer.",
            {'module_size': module_size},
        )
    margin = merged['margin']
    if not _is_integer(margin) or not MARGIN_MIN <= margin <= MARGIN_MAX:
        raise SvgOptionsError(
            f"Invalid margin: {margin!r}. Must be an integer between "
            f"{MARGIN_MIN} and {MARGIN_MAX}.",
            {'margin': margin},
        )
    module_size = int(module_size)
    margin = int(margin)

    for key in ('dark_color', 'light_color'):
        if not isinstance(merged[key], str):
            raise SvgOptionsError(
                f"Invalid {key}: {merged[key]!r}. Must be a color string.",
                {key: merged[key]},
            )
    for key in ('xml_declaration', 'view_box', 'crisp_edges'):
        if not isinstance(merged[key], bool):
            raise SvgOptionsError(
                f"Invalid {key}: {merged[key]!r}. Must be a boolean.",
                {key: merged[key]},
            )
    for key in ('rotate_deg', 'module_rotation_deg'):
        if not _is_real(merged[key]):
            raise SvgOptionsError(
                f"Invalid {key}: {merged[key]!r}. Must be a finite number of degrees.",
                {key: merged[key]},
            )

    renderer = _coerce_enum(Renderer, 'renderer', merged['renderer'])
    grouping = _coerce_enum(Grouping, 'grouping', merged['grouping'])
    shape = _coerce_enum(ModuleShape, 'module_shape', merged['module_shape'])

    # ── Alias: rx ──
    radius = given.get('corner_radius', given.get(LEGACY_RADIUS_KEY))
    if radius is not None and (not _is_real(radius) or radius < 0):
        raise SvgOptionsError(
            f"Invalid corner_radius: {radius!r}. Must be a non-negative number.",
            {'corner_radius': radius},
        )

    # ── Presets ──
    if shape is ModuleShape.ROUNDED:
        radius = radius or max(1, module_size // 3)
        shape = ModuleShape.SQUARE
    elif shape is ModuleShape.PILL:
        radius = module_size / 2
        shape = ModuleShape.SQUARE

    rotation = merged['rotate_deg']
    if renderer is Renderer.DIAMOND and not rotation:
        rotation = DIAMOND_ROTATION

    return RenderOptions(
        module_size=module_size,
        margin=margin,
        dark_color=merged['dark_color'],
        light_color=merged['light_color'],
        xml_declaration=merged['xml_declaration'],
        view_box=merged['view_box'],
        crisp_edges=merged['crisp_edges'],
        renderer=renderer,
        grouping=grouping,
        module_shape=shape,
        rotate_deg=rotation,
        module_rotation_deg=merged['module_rotation_deg'],
        corner_radius=radius or 0,
    )
