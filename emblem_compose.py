# emblem_compose.py
# Grid compositor: one motif drawing tiled over rows x cols cells, each cell
# rotated as a whole, caption band underneath. Plus the two renderers
# (SVG via svgwrite, PNG via Pillow) and a soft-failing export.

import logging
import math
import os
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import svgwrite
from PIL import Image, ImageDraw, ImageFont

from emblem_motifs import (CANVAS_SIZE, CENTER, Circle, Drawing, Line, Point,
                           Polygon, Polyline, Rect, draw_motif)
from emblem_palette import DEFAULT_PALETTE, Palette
from emblem_rules import DesignConfiguration, Layout
from emblem_settings import DEFAULT_SETTINGS, EmblemSettings

log = logging.getLogger(__name__)

EXPORT_FORMATS = ("png", "svg")
CAPTION_FONTS = ("DejaVuSans.ttf", "Arial.ttf")


# =========================
# Composition
# =========================
@dataclass(frozen=True)
class Cell:
    row: int
    col: int
    x: float          # top-left corner, emblem units
    y: float
    size: float
    rotation: float   # degrees, about the motif centre
    scale: float = 1.0

    @property
    def center(self) -> Point:
        return (self.x + self.size / 2, self.y + self.size / 2)

    @property
    def unit(self) -> float:
        """Emblem units per motif-canvas unit."""
        return self.size / CANVAS_SIZE * self.scale

    def matrix(self) -> np.ndarray:
        """3x3 affine: motif canvas -> emblem coordinates."""
        k = self.unit
        th = math.radians(self.rotation)
        c, s = math.cos(th), math.sin(th)
        cx, cy = self.center
        return np.array([
            [k * c, -k * s, cx - k * (c * CENTER - s * CENTER)],
            [k * s,  k * c, cy - k * (s * CENTER + c * CENTER)],
            [0.0, 0.0, 1.0],
        ])


@dataclass(frozen=True)
class Emblem:
    layout: Layout
    drawing: Drawing
    cells: Tuple[Cell, ...]
    grid_size: float
    caption_height: float
    caption: str
    colors: Palette
    caption_font_size: float = 18.0

    @property
    def width(self) -> float:
        return self.grid_size

    @property
    def height(self) -> float:
        return self.grid_size + self.caption_height


def compose(layout: Layout, drawing: Drawing, rotation: float,
            settings: EmblemSettings = DEFAULT_SETTINGS, scale: float = 1.0,
            colors: Optional[Palette] = None, caption: Optional[str] = None) -> Emblem:
    rows, cols = max(1, layout.rows), max(1, layout.cols)
    total = settings.emblem_size
    pitch = total / max(rows, cols)
    size = max(pitch - settings.grid_gap, pitch * 0.5)
    pad = (pitch - size) / 2
    off_x = (total - cols * pitch) / 2
    off_y = (total - rows * pitch) / 2
    rot = rotation % 360

    cells = tuple(
        Cell(row=r, col=c,
             x=round(off_x + c * pitch + pad, 3),
             y=round(off_y + r * pitch + pad, 3),
             size=round(size, 3), rotation=rot, scale=scale)
        for r in range(rows) for c in range(cols)
    )
    return Emblem(layout=Layout(rows, cols), drawing=drawing, cells=cells,
                  grid_size=total, caption_height=settings.caption_height,
                  caption=settings.footer_text if caption is None else caption,
                  colors=colors or DEFAULT_PALETTE,
                  caption_font_size=settings.caption_font_size)


def build_emblem(config: DesignConfiguration, settings: EmblemSettings = DEFAULT_SETTINGS) -> Emblem:
    drawing = draw_motif(config.motif_index, config.complexity,
                         config.feature1, config.feature2, config.feature3, config.colors)
    return compose(config.layout, drawing, config.rotation, settings,
                   scale=config.scale, colors=config.colors, caption=config.footer_text)


# =========================
# SVG
# =========================
def _svg_element(dwg: svgwrite.Drawing, el):
    if isinstance(el, Line):
        extra = {"stroke_dasharray": f"{el.dash[0]},{el.dash[1]}"} if el.dash else {}
        return dwg.line(start=(el.x1, el.y1), end=(el.x2, el.y2), stroke=el.stroke,
                        stroke_width=el.width, stroke_linecap="round", **extra)
    if isinstance(el, Polyline):
        make = dwg.polygon if el.closed else dwg.polyline
        return make(points=list(el.points), fill="none", stroke=el.stroke,
                    stroke_width=el.width, stroke_linejoin="round", stroke_linecap="round")
    if isinstance(el, Polygon):
        return dwg.polygon(points=list(el.points), fill=el.fill)
    if isinstance(el, Rect):
        return dwg.rect(insert=(el.x, el.y), size=(el.w, el.h), fill=el.fill or "none",
                        stroke=el.stroke or "none", stroke_width=el.width)
    if isinstance(el, Circle):
        return dwg.circle(center=(el.cx, el.cy), r=el.r, fill=el.fill or "none",
                          stroke=el.stroke or "none", stroke_width=el.width)
    raise TypeError(f"unsupported primitive {type(el).__name__}")


def render_svg(emblem: Emblem, filename: str = "emblem.svg") -> svgwrite.Drawing:
    """Motif goes into <defs> once; each cell is a transformed <use>."""
    w, h = emblem.width, emblem.height
    dwg = svgwrite.Drawing(filename, size=(w, h))
    dwg.viewbox(0, 0, w, h)
    dwg.add(dwg.rect(insert=(0, 0), size=(w, h), fill=emblem.colors.secondary))

    motif = dwg.g(id=f"motif-{emblem.drawing.motif}")
    for el in emblem.drawing.elements:
        motif.add(_svg_element(dwg, el))
    dwg.defs.add(motif)

    for cell in emblem.cells:
        cx, cy = cell.center
        use = dwg.use(motif)
        use.translate(cx, cy)
        use.rotate(cell.rotation)
        use.scale(cell.unit)
        use.translate(-CENTER, -CENTER)
        dwg.add(use)

    if emblem.caption and emblem.caption_height > 0:
        dwg.add(dwg.text(emblem.caption,
                         insert=(w / 2, emblem.grid_size + emblem.caption_height / 2),
                         text_anchor="middle", dominant_baseline="middle",
                         font_family="sans-serif", font_size=emblem.caption_font_size,
                         fill=emblem.colors.accent))
    return dwg


# =========================
# PNG
# =========================
def _apply(m: np.ndarray, pts: Sequence[Point]) -> List[Point]:
    a = np.asarray(pts, dtype=float)
    out = a @ m[:2, :2].T + m[:2, 2]
    return [(float(x), float(y)) for x, y in out]


def _dash_segments(p: Point, q: Point, on: float, off: float) -> List[Tuple[Point, Point]]:
    length = math.hypot(q[0] - p[0], q[1] - p[1])
    if length == 0 or on <= 0:
        return [(p, q)]
    ux, uy = (q[0] - p[0]) / length, (q[1] - p[1]) / length
    segs = []
    t = 0.0
    while t < length:
        e = min(t + on, length)
        segs.append(((p[0] + ux * t, p[1] + uy * t), (p[0] + ux * e, p[1] + uy * e)))
        t = e + off
    return segs


def _paint(draw: ImageDraw.ImageDraw, el, m: np.ndarray, k: float):
    def px_width(wd):
        return max(1, int(round(wd * k)))

    if isinstance(el, Line):
        segs = (_dash_segments((el.x1, el.y1), (el.x2, el.y2), *el.dash)
                if el.dash else [((el.x1, el.y1), (el.x2, el.y2))])
        for p, q in segs:
            draw.line(_apply(m, [p, q]), fill=el.stroke, width=px_width(el.width))
    elif isinstance(el, Polyline):
        pts = list(el.points) + ([el.points[0]] if el.closed else [])
        draw.line(_apply(m, pts), fill=el.stroke, width=px_width(el.width), joint="curve")
    elif isinstance(el, Polygon):
        draw.polygon(_apply(m, el.points), fill=el.fill)
    elif isinstance(el, Rect):
        corners = [(el.x, el.y), (el.x + el.w, el.y), (el.x + el.w, el.y + el.h), (el.x, el.y + el.h)]
        pts = _apply(m, corners)
        if el.fill:
            draw.polygon(pts, fill=el.fill)
        if el.stroke and el.width > 0:
            draw.line(pts + [pts[0]], fill=el.stroke, width=px_width(el.width), joint="curve")
    elif isinstance(el, Circle):
        (cx, cy), = _apply(m, [(el.cx, el.cy)])
        r = el.r * k
        box = (cx - r, cy - r, cx + r, cy + r)
        if el.stroke and el.width > 0:
            draw.ellipse(box, fill=el.fill, outline=el.stroke, width=px_width(el.width))
        else:
            draw.ellipse(box, fill=el.fill)
    else:
        raise TypeError(f"unsupported primitive {type(el).__name__}")


def _caption_font(size_px: int):
    for name in CAPTION_FONTS:
        try:
            return ImageFont.truetype(name, size_px)
        except OSError:
            continue
    return ImageFont.load_default()


def render_png(emblem: Emblem, pixel_ratio: int = DEFAULT_SETTINGS.pixel_ratio) -> Image.Image:
    ratio = max(1, int(pixel_ratio))
    w, h = int(round(emblem.width * ratio)), int(round(emblem.height * ratio))
    img = Image.new("RGB", (w, h), emblem.colors.secondary)
    draw = ImageDraw.Draw(img)
    zoom = np.diag([float(ratio), float(ratio), 1.0])

    for cell in emblem.cells:
        m = zoom @ cell.matrix()
        k = cell.unit * ratio
        for el in emblem.drawing.elements:
            _paint(draw, el, m, k)

    if emblem.caption and emblem.caption_height > 0:
        font = _caption_font(max(1, int(round(emblem.caption_font_size * ratio))))
        left, top, right, bottom = draw.textbbox((0, 0), emblem.caption, font=font)
        x = (w - (right - left)) / 2 - left
        y = (emblem.grid_size + emblem.caption_height / 2) * ratio - (bottom - top) / 2 - top
        draw.text((x, y), emblem.caption, fill=emblem.colors.accent, font=font)
    return img


# =========================
# Export
# =========================
def export_filename(initials: Optional[str], fmt: str) -> str:
    stem = re.sub(r"[^A-Za-z0-9_-]", "", initials or "")
    return f"{stem or 'logo'}.{fmt}"


def export_emblem(emblem: Emblem, out_dir: str = ".", initials: Optional[str] = None,
                  fmt: str = "png", pixel_ratio: int = DEFAULT_SETTINGS.pixel_ratio) -> Optional[str]:
    """
    Write the emblem as <INITIALS>.png / .svg (logo.* without initials).
    Returns the written path, or None when the file could not be written
    or a renderer rejected the emblem; the failure is logged and never
    propagated.
    """
    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"unsupported export format {fmt!r}; choose from {EXPORT_FORMATS}")
    path = os.path.join(out_dir, export_filename(initials, fmt))
    try:
        if fmt == "svg":
            render_svg(emblem, path).save()
        else:
            render_png(emblem, pixel_ratio).save(path, format="PNG")
    except (OSError, ValueError, TypeError) as e:
        log.error("export to %s failed: %s", path, e)
        return None
    log.info("wrote %s", path)
    return path
