"""Render the current round as a PNG.

Layout:
  canvas_size x canvas_size canvas, side x side cells, cell = canvas_size/side.
  Each cell is filled inset by gap/2, gap = max(1, round(canvas_size * K)).
  Cell index = row * side + col, (0, 0) top-left; x right, y down.
"""

import base64
import colorsys
import io
import math
from pathlib import Path

from PIL import Image, ImageDraw

from .rounds import Color, Round

DEFAULT_CANVAS_SIZE = 256

# Gap width constant (fraction of canvas)
K = 0.02

BACKGROUND = (245, 245, 240)


def hsl_to_rgb(color: Color) -> tuple[int, int, int]:
    """Convert an HSL color (degrees, percent, percent) to 8-bit RGB."""
    r, g, b = colorsys.hls_to_rgb(color.h / 360.0, color.l / 100.0, color.s / 100.0)
    return round(r * 255), round(g * 255), round(b * 255)


def _gap_width(canvas_size: int) -> int:
    return max(1, round(canvas_size * K))


def _clamp(v: int, lo: int, hi: int) -> int:
    return lo if v < lo else hi if v > hi else v


def _cell_box(index: int, side: int, canvas_size: int) -> tuple[int, int, int, int]:
    """Painted square of cell index, shrunk by half a gap on every edge."""
    row, col = divmod(index, side)
    pitch = canvas_size / side
    half_gap = _gap_width(canvas_size) / 2
    left, top = col * pitch, row * pitch
    return (
        int(left + half_gap),
        int(top + half_gap),
        int(left + pitch - half_gap),
        int(top + pitch - half_gap),
    )


def pixel_to_cell(
    x: int, y: int, side: int, canvas_size: int = DEFAULT_CANVAS_SIZE
) -> tuple[int, int]:
    """Map a canvas pixel to (row, col). Pixels off the canvas snap to the nearest edge cell."""
    pitch = canvas_size / side
    return (
        _clamp(math.floor(y / pitch), 0, side - 1),
        _clamp(math.floor(x / pitch), 0, side - 1),
    )


def cell_center_pixel(
    row: int, col: int, side: int, canvas_size: int = DEFAULT_CANVAS_SIZE
) -> tuple[int, int]:
    """Pixel (x, y) in the middle of (row, col); a click there selects that cell."""
    pitch = canvas_size / side
    last = canvas_size - 1
    return _clamp(int((col + 0.5) * pitch), 0, last), _clamp(int((row + 0.5) * pitch), 0, last)


def cell_to_index(row: int, col: int, side: int) -> int:
    if not (0 <= row < side and 0 <= col < side):
        raise ValueError(f"cell ({row}, {col}) outside {side}x{side} grid")
    return row * side + col


def render_round_png(
    rnd: Round,
    canvas_size: int = DEFAULT_CANVAS_SIZE,
    save_path: str | None = None,
) -> str:
    """Draw every cell in the base color except diff_index; return base64 PNG."""
    side = rnd.grid_size
    fills = {False: hsl_to_rgb(rnd.base_color), True: hsl_to_rgb(rnd.diff_color)}

    img = Image.new("RGB", (canvas_size, canvas_size), BACKGROUND)
    draw = ImageDraw.Draw(img)
    for index in range(rnd.cell_count):
        draw.rectangle(_cell_box(index, side, canvas_size), fill=fills[index == rnd.diff_index])

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    png_bytes = buf.getvalue()
    if save_path:
        target = Path(save_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(png_bytes)
    return base64.b64encode(png_bytes).decode("ascii")
