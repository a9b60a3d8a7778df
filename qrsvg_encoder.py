"""
QRSVG Encoder Bridge — text → module grid → SVG
================================================

The QR encoder itself is external (the `qrcode` distribution). This
module only adapts its output to the module-grid capability the renderer
reads, and offers a one-call text → SVG helper.

Usage:
    svg = to_svg_string("https://example.com", ecc="Q",
                        render={'module_size': 10, 'light_color': '#fff'})
"""

from typing import Any, Mapping, Optional

import qrcode
from qrcode.constants import (
    ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q, ERROR_CORRECT_H,
)
from qrcode.exceptions import DataOverflowError

from qrsvg_types import SvgOptionsError
from qrsvg_renderer import render_svg

ECC_LEVELS = {
    'L': ERROR_CORRECT_L,  # ~7% recovery
    'M': ERROR_CORRECT_M,  # ~15%
    'Q': ERROR_CORRECT_Q,  # ~25%
    'H': ERROR_CORRECT_H,  # ~30%
}


class QRCodeGrid:
    """
    Module-grid view over a built `qrcode.QRCode`.

    The quiet zone is not part of the grid; the renderer adds its own
    margin.
    """

    def __init__(self, qr: qrcode.QRCode):
        if qr.modules is None or not qr.modules_count:
            qr.make(fit=True)
        self.qr = qr
        self.size = qr.modules_count
        self._modules = qr.modules

    def get(self, x: int, y: int) -> int:
        return 1 if self._modules[y][x] else 0

    @property
    def version(self) -> int:
        return self.qr.version

    def __repr__(self):
        return f"QRCodeGrid(size={self.size}, version={self.version})"


def encode_text(text: str, ecc: str = "M", version: Optional[int] = None,
                mask: Optional[int] = None) -> QRCodeGrid:
    """
    Encode text with `qrcode` and return its module grid.

    Args:
        text: Payload.
        ecc: Error correction letter, one of L/M/Q/H.
        version: Fixed symbol version 1-40. None = smallest that fits.
        mask: Fixed mask pattern 0-7. None = encoder's choice.
    """
    level = ECC_LEVELS.get(str(ecc).upper())
    if level is None:
        raise SvgOptionsError(
            f"Invalid ecc: {ecc!r}. Must be one of {', '.join(ECC_LEVELS)}.",
            {'ecc': ecc},
        )
    try:
        qr = qrcode.QRCode(
            version=version,
            error_correction=level,
            border=0,
            mask_pattern=mask,
        )
        qr.add_data(text)
        qr.make(fit=version is None)
    except DataOverflowError as e:
        raise SvgOptionsError(
            f"Payload of {len(text)} characters does not fit version {version} "
            f"at ecc {ecc}",
            {'version': version, 'ecc': ecc},
        ) from e
    except (TypeError, ValueError) as e:
        raise SvgOptionsError(
            f"Invalid encoding options (version={version!r}, mask={mask!r}): {e}",
            {'version': version, 'mask': mask},
        ) from e
    return QRCodeGrid(qr)


def to_svg_string(text: str, ecc: str = "M", version: Optional[int] = None,
                  mask: Optional[int] = None,
                  render: Optional[Mapping[str, Any]] = None) -> str:
    """Encode `text` and render it. `render` is passed to render_svg()."""
    return render_svg(encode_text(text, ecc=ecc, version=version, mask=mask),
                      render)
