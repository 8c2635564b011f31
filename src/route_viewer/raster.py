"""Pillow-based raster backend.

The raster surface keeps no structure between frames: every call to
``render`` allocates a fresh image and re-issues the full draw sequence.
"""

import logging
import math
from dataclasses import dataclass
from functools import lru_cache

from PIL import Image, ImageDraw, ImageFont

from src.route_viewer.scene import (
    Circle,
    Label,
    Line,
    Polygon,
    Rect,
    SceneDescription,
    SceneRenderer,
)

logger = logging.getLogger(__name__)

# Pillow text anchors: horizontal alignment + vertical middle
TEXT_ANCHORS = {"start": "lm", "middle": "mm", "end": "rm"}
HALO_WIDTH = 2
BOLD_FONT_FILE = "DejaVuSans-Bold.ttf"


@lru_cache(maxsize=32)
def _font(size: int, bold: bool) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    if bold:
        try:
            return ImageFont.truetype(BOLD_FONT_FILE, size)
        except OSError:
            logger.debug(f"{BOLD_FONT_FILE} not available, using default font")
    return ImageFont.load_default(size=size)


@dataclass
class _Surface:
    image: Image.Image
    draw: ImageDraw.ImageDraw


def _dashed_segments(
    x1: float, y1: float, x2: float, y2: float, dash: tuple[int, int]
) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """Split a line into on/off dash pieces."""
    length = math.hypot(x2 - x1, y2 - y1)
    on, off = dash
    if length == 0 or on <= 0:
        return [((x1, y1), (x2, y2))]

    ux = (x2 - x1) / length
    uy = (y2 - y1) / length
    pieces = []
    pos = 0.0
    while pos < length:
        end = min(pos + on, length)
        pieces.append(((x1 + ux * pos, y1 + uy * pos), (x1 + ux * end, y1 + uy * end)))
        pos = end + off
    return pieces


def _dashed_arcs(radius: float, dash: tuple[int, int]) -> list[tuple[float, float]]:
    """Start/end angles (degrees) of the dashes around a circle."""
    circumference = 2 * math.pi * radius
    on, off = dash
    if circumference == 0 or on <= 0:
        return [(0.0, 360.0)]

    step = 360.0 / circumference  # Degrees per pixel of arc
    arcs = []
    pos = 0.0
    while pos < circumference:
        end = min(pos + on, circumference)
        arcs.append((pos * step, end * step))
        pos = end + off
    return arcs


class RasterRenderer(SceneRenderer):
    """Draw a scene onto a fixed-resolution RGB image."""

    def _begin(self, scene: SceneDescription) -> _Surface:
        image = Image.new("RGB", (scene.width, scene.height), scene.background)
        return _Surface(image=image, draw=ImageDraw.Draw(image))

    def _finish(self, target: _Surface, scene: SceneDescription) -> Image.Image:
        logger.debug(f"Rasterized {len(scene.primitives)} primitives at {scene.width}x{scene.height}")
        return target.image

    def _draw_rect(self, target: _Surface, rect: Rect) -> None:
        target.draw.rectangle(
            [rect.x, rect.y, rect.x + rect.width - 1, rect.y + rect.height - 1],
            fill=rect.fill,
        )

    def _draw_line(self, target: _Surface, line: Line) -> None:
        width = max(1, round(line.width))
        if line.dash is None:
            target.draw.line([(line.x1, line.y1), (line.x2, line.y2)], fill=line.color, width=width)
            return
        for start, end in _dashed_segments(line.x1, line.y1, line.x2, line.y2, line.dash):
            target.draw.line([start, end], fill=line.color, width=width)

    def _draw_polygon(self, target: _Surface, polygon: Polygon) -> None:
        target.draw.polygon(list(polygon.points), fill=polygon.fill)

    def _draw_circle(self, target: _Surface, circle: Circle) -> None:
        box = [circle.cx - circle.r, circle.cy - circle.r, circle.cx + circle.r, circle.cy + circle.r]
        width = max(1, round(circle.stroke_width))
        if circle.dash is None:
            target.draw.ellipse(box, fill=circle.fill, outline=circle.stroke, width=width)
            return

        # Dashed rings are outline-only
        for start, end in _dashed_arcs(circle.r, circle.dash):
            target.draw.arc(box, start, end, fill=circle.stroke, width=width)

    def _draw_label(self, target: _Surface, label: Label) -> None:
        font = _font(label.size, label.bold)
        stroke = HALO_WIDTH if label.halo else 0

        if not label.rotation:
            target.draw.text(
                (label.x, label.y),
                label.text,
                fill=label.color,
                font=font,
                anchor=TEXT_ANCHORS.get(label.anchor, "mm"),
                stroke_width=stroke,
                stroke_fill=label.halo,
            )
            return

        # Rotated text: draw on a transparent tile, rotate it, paste centered
        left, top, right, bottom = font.getbbox(label.text)
        pad = stroke + 1
        tile = Image.new("RGBA", (int(right - left) + 2 * pad, int(bottom - top) + 2 * pad), (0, 0, 0, 0))
        ImageDraw.Draw(tile).text(
            (pad - left, pad - top),
            label.text,
            fill=label.color,
            font=font,
            stroke_width=stroke,
            stroke_fill=label.halo,
        )
        rotated = tile.rotate(label.rotation, expand=True)
        origin = (round(label.x - rotated.width / 2), round(label.y - rotated.height / 2))
        target.image.paste(rotated, origin, rotated)


def save_png(image: Image.Image, output_path: str) -> None:
    """Write a rendered raster scene to disk."""
    image.save(output_path, format="PNG")
