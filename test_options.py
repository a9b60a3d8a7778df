"""
QRenSVG — Option Resolution Tests
==================================

  1. Defaults
  2. Validation boundaries (module_size, margin, enums, radius)
  3. Aliases (rx, camelCase keys, legacy `rotate`)
  4. Presets (diamond, rounded, pill)
  5. Module grid capability check

Run: python test_options.py   (or: pytest test_options.py)
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from conftest import run_suite
from qrsvg_types import (
    Renderer, Grouping, ModuleShape, SvgErrorCode, SvgInputError, SvgOptionsError,
)
from qrsvg_options import (
    DEFAULT_OPTIONS, ModuleGrid, RenderOptions, as_module_grid, resolve_options,
)


def _rejects(**options):
    try:
        resolve_options(options)
    except SvgOptionsError as e:
        assert e.code == SvgErrorCode.INVALID_OPTIONS
        return e
    raise AssertionError(f"{options} accepted")


# ═══════════════════════════════════════════════════════════════
# TESTS
# ═══════════════════════════════════════════════════════════════

def test_defaults(r):
    opts = resolve_options()
    assert opts == RenderOptions()
    assert opts.module_size == 4
    assert opts.margin == 4
    assert opts.dark_color == "#000"
    assert opts.light_color == "transparent"
    assert opts.xml_declaration is False
    assert opts.view_box is True
    assert opts.crisp_edges is True
    assert opts.renderer is Renderer.CLASSIC
    assert opts.grouping is Grouping.ROW
    assert opts.module_shape is ModuleShape.SQUARE
    assert opts.rotate_deg == 0
    assert opts.module_rotation_deg == 0
    assert opts.corner_radius == 0
    assert set(DEFAULT_OPTIONS) == set(opts.to_dict())


def test_module_size_bounds(r):
    for bad in (0, -1, 1.5, True, "4", float("nan")):
        e = _rejects(module_size=bad)
        assert "module_size" in str(e)
    assert resolve_options(module_size=1).module_size == 1
    assert resolve_options(module_size=4.0).module_size == 4


def test_margin_bounds(r):
    for bad in (-1, 65, 2.5):
        e = _rejects(margin=bad)
        assert repr(bad) in str(e)
    assert resolve_options(margin=0).margin == 0
    assert resolve_options(margin=64).margin == 64


def test_enum_values(r):
    _rejects(grouping="zigzag")
    _rejects(renderer="isometric")
    _rejects(module_shape="star")
    assert resolve_options(grouping="-45").grouping is Grouping.DIAG_45
    assert resolve_options(grouping=Grouping.BLOB).grouping is Grouping.BLOB


def test_int_diagonal_grouping(r):
    assert resolve_options(grouping=45).grouping is Grouping.DIAG45
    assert resolve_options(grouping=-45).grouping is Grouping.DIAG_45
    assert resolve_options({'grouping': 45}).grouping is Grouping.DIAG45
    _rejects(grouping=90)
    _rejects(grouping=True)


def test_other_validation(r):
    _rejects(corner_radius=-1)
    _rejects(rx="2")
    _rejects(rotate_deg="45")
    _rejects(module_rotation_deg=float("inf"))
    _rejects(dark_color=0)
    _rejects(view_box="yes")


def test_unknown_keys_ignored(r):
    opts = resolve_options({'module_size': 6, 'foo': 1, 'ecc': "Q"})
    assert opts.module_size == 6


def test_none_means_unset(r):
    opts = resolve_options({'module_size': None, 'margin': None})
    assert opts.module_size == 4
    assert opts.margin == 4


def test_camel_case_keys(r):
    opts = resolve_options({
        'moduleSize': 10, 'darkColor': "#111", 'lightColor': "#eee",
        'xmlDeclaration': True, 'viewBox': False, 'crispEdges': False,
        'moduleShape': "circle", 'rotateDeg': 15, 'moduleRotationDeg': 5,
        'cornerRadius': 2,
    })
    assert opts.module_size == 10
    assert opts.dark_color == "#111"
    assert opts.light_color == "#eee"
    assert opts.xml_declaration and not opts.view_box and not opts.crisp_edges
    assert opts.module_shape is ModuleShape.CIRCLE
    assert opts.rotate_deg == 15
    assert opts.module_rotation_deg == 5
    assert opts.corner_radius == 2


def test_keyword_overrides_win(r):
    opts = resolve_options({'module_size': 6}, module_size=8)
    assert opts.module_size == 8


def test_rx_alias(r):
    assert resolve_options(rx=3).corner_radius == 3
    # corner_radius wins when both are set
    assert resolve_options(rx=3, corner_radius=1).corner_radius == 1


def test_rx_override_on_resolved(r):
    """rx applied over a resolved record replaces its radius."""
    base = resolve_options()
    assert resolve_options(base, rx=3).corner_radius == 3
    assert resolve_options(resolve_options(corner_radius=2), rx=4).corner_radius == 4
    # An explicit corner_radius in the same call still wins
    assert resolve_options(base, rx=3, corner_radius=1).corner_radius == 1
    assert resolve_options(base, rx=3, cornerRadius=0).corner_radius == 0
    # Other overrides keep the record's radius
    assert resolve_options(resolve_options(rx=2), margin=1).corner_radius == 2


def test_diamond_preset(r):
    assert resolve_options(renderer="diamond").rotate_deg == 45
    assert resolve_options(renderer="diamond", rotate_deg=30).rotate_deg == 30
    # Legacy `rotate` key
    assert resolve_options({'renderer': "diamond", 'rotate': 60}).rotate_deg == 60
    assert resolve_options(renderer="classic").rotate_deg == 0


def test_shape_presets(r):
    rounded = resolve_options(module_shape="rounded", module_size=9)
    assert rounded.module_shape is ModuleShape.SQUARE
    assert rounded.corner_radius == 3
    assert resolve_options(module_shape="rounded", module_size=2).corner_radius == 1
    assert resolve_options(module_shape="rounded", rx=2.5).corner_radius == 2.5

    pill = resolve_options(module_shape="pill", module_size=10)
    assert pill.module_shape is ModuleShape.SQUARE
    assert pill.corner_radius == 5


def test_resolution_idempotent(r):
    opts = resolve_options(renderer="diamond", module_shape="pill", margin=2)
    assert resolve_options(opts) is opts
    assert resolve_options(opts.to_dict()) == opts
    assert resolve_options(opts, margin=3) == resolve_options(
        renderer="diamond", module_shape="pill", margin=3)


def test_grid_capability(r):
    class Plain:
        size = 2

        def get(self, x, y):
            return x == y

    grid = as_module_grid(Plain())
    assert grid.size == 2
    assert grid.is_lit(1, 1) and not grid.is_lit(0, 1)

    for bad in (None, 42, "grid",
                type("G", (), {'size': -1, 'get': len})(),
                type("Empty", (), {'size': 0, 'get': len})(),
                ModuleGrid(size=0, lookup=lambda x, y: 0)):
        try:
            as_module_grid(bad)
        except SvgInputError as e:
            assert e.code == SvgErrorCode.INVALID_QR_OBJECT
        else:
            raise AssertionError(f"{bad!r} accepted")


def test_grid_from_rows(r):
    grid = ModuleGrid.from_rows(["10", "#."])
    assert grid.size == 2
    assert [grid.is_lit(x, y) for y in range(2) for x in range(2)] == \
        [True, False, True, False]
    try:
        ModuleGrid.from_rows(["101", "01"])
    except SvgInputError:
        pass
    else:
        raise AssertionError("ragged rows accepted")
    try:
        ModuleGrid.from_rows([])
    except SvgInputError as e:
        assert e.code == SvgErrorCode.INVALID_QR_OBJECT
    else:
        raise AssertionError("empty grid accepted")


# ═══════════════════════════════════════════════════════════════
# RUNNER
# ═══════════════════════════════════════════════════════════════

def main():
    tests = [
        ("Defaults", test_defaults),
        ("module_size Bounds", test_module_size_bounds),
        ("margin Bounds", test_margin_bounds),
        ("Enum Values", test_enum_values),
        ("Int Diagonal Grouping", test_int_diagonal_grouping),
        ("Other Validation", test_other_validation),
        ("Unknown Keys Ignored", test_unknown_keys_ignored),
        ("None Means Unset", test_none_means_unset),
        ("camelCase Keys", test_camel_case_keys),
        ("Keyword Overrides", test_keyword_overrides_win),
        ("rx Alias", test_rx_alias),
        ("rx Over Resolved", test_rx_override_on_resolved),
        ("Diamond Preset", test_diamond_preset),
        ("Shape Presets", test_shape_presets),
        ("Idempotent Resolution", test_resolution_idempotent),
        ("Grid Capability", test_grid_capability),
        ("Grid From Rows", test_grid_from_rows),
    ]
    return run_suite("QRenSVG — Option Resolution", tests)


if __name__ == "__main__":
    sys.exit(main())
