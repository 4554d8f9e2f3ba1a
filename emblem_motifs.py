# emblem_motifs.py
# Motif library: a fixed, ordered catalog of procedural drawings.
# Each motif is a pure function (complexity, f1, f2, f3, colors) -> Drawing,
# laid out on a 200x200 logical canvas. Dispatch is by integer index and
# anything outside the catalog falls back to motif 0.

import logging
import math
import operator
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from emblem_palette import Palette

log = logging.getLogger(__name__)

CANVAS_SIZE = 200
CENTER = CANVAS_SIZE / 2.0
RECURSION_CEILING = 4          # hard cap for every recursive motif
COMPLEXITY_MIN, COMPLEXITY_MAX = 1, 5
FEATURE_MIN, FEATURE_MAX = 0, 9

Point = Tuple[float, float]


# =========================
# Vector primitives
# =========================
@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    width: float = 2.0
    dash: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class Polyline:
    points: Tuple[Point, ...]
    stroke: str
    width: float = 2.0
    closed: bool = False


@dataclass(frozen=True)
class Polygon:
    points: Tuple[Point, ...]
    fill: str


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    width: float = 0.0


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    width: float = 0.0


Primitive = Union[Line, Polyline, Polygon, Rect, Circle]


@dataclass(frozen=True)
class Drawing:
    motif: str
    elements: Tuple[Primitive, ...]
    size: int = CANVAS_SIZE

    def __len__(self):
        return len(self.elements)

    def coords(self) -> Iterator[Point]:
        """Every geometric coordinate the drawing touches (circles by their extent)."""
        for el in self.elements:
            if isinstance(el, Line):
                yield (el.x1, el.y1)
                yield (el.x2, el.y2)
            elif isinstance(el, (Polyline, Polygon)):
                for p in el.points:
                    yield p
            elif isinstance(el, Rect):
                yield (el.x, el.y)
                yield (el.x + el.w, el.y + el.h)
            elif isinstance(el, Circle):
                yield (el.cx - el.r, el.cy - el.r)
                yield (el.cx + el.r, el.cy + el.r)


# =========================
# Geometry helpers
# =========================
def _r(v: float) -> float:
    return round(float(v), 3)


def _pt(x: float, y: float) -> Point:
    return (_r(x), _r(y))


def _line(x1, y1, x2, y2, stroke, width=2.0, dash=None) -> Line:
    return Line(_r(x1), _r(y1), _r(x2), _r(y2), stroke, _r(width), dash)


def _rect(x, y, w, h, fill=None, stroke=None, width=0.0) -> Rect:
    return Rect(_r(x), _r(y), _r(w), _r(h), fill, stroke, _r(width))


def _circle(cx, cy, r, fill=None, stroke=None, width=0.0) -> Circle:
    return Circle(_r(cx), _r(cy), _r(r), fill, stroke, _r(width))


def _polyline(points: Sequence[Point], stroke, width=2.0, closed=False) -> Polyline:
    return Polyline(tuple(_pt(x, y) for x, y in points), stroke, _r(width), closed)


def _polygon(points: Sequence[Point], fill) -> Polygon:
    return Polygon(tuple(_pt(x, y) for x, y in points), fill)


def arc_points(cx, cy, r, start_deg, end_deg, steps=32) -> List[Point]:
    angs = np.linspace(math.radians(start_deg), math.radians(end_deg), steps)
    return [(cx + r * math.cos(a), cy + r * math.sin(a)) for a in angs]


def rotate_about(p: Point, deg: float, center: Point = (CENTER, CENTER)) -> Point:
    th = math.radians(deg)
    c, s = math.cos(th), math.sin(th)
    x, y = p[0] - center[0], p[1] - center[1]
    return (center[0] + c * x - s * y, center[1] + s * x + c * y)


def _square(cx, cy, half, deg=0.0) -> List[Point]:
    corners = [(cx - half, cy - half), (cx + half, cy - half),
               (cx + half, cy + half), (cx - half, cy + half)]
    return [rotate_about(p, deg, (cx, cy)) for p in corners]


def _clamp(v, lo, hi) -> int:
    return max(lo, min(hi, int(v)))


class MotifKind(IntEnum):
    SPECIAL_CROSS = 0
    SIERPINSKI_CARPET = 1
    SQUARE_RESONATOR = 2
    FISHNET = 3
    SQUARE_SPIRAL = 4
    NESTED_SQUARES = 5
    DOUBLE_C = 6
    GREEK_CROSS = 7
    SIERPINSKI_TRIANGLE = 8
    H_TREE = 9
    SPLIT_RINGS = 10
    HONEYCOMB = 11


MOTIF_NAMES: Dict[MotifKind, str] = {
    MotifKind.SPECIAL_CROSS: "Special cross",
    MotifKind.SIERPINSKI_CARPET: "Sierpinski carpet",
    MotifKind.SQUARE_RESONATOR: "Square split-ring resonator",
    MotifKind.FISHNET: "Fishnet mesh",
    MotifKind.SQUARE_SPIRAL: "Square spiral",
    MotifKind.NESTED_SQUARES: "Nested squares",
    MotifKind.DOUBLE_C: "Double-C open rings",
    MotifKind.GREEK_CROSS: "Greek cross",
    MotifKind.SIERPINSKI_TRIANGLE: "Sierpinski triangle",
    MotifKind.H_TREE: "H-tree fractal",
    MotifKind.SPLIT_RINGS: "Concentric split rings",
    MotifKind.HONEYCOMB: "Honeycomb mesh",
}


def _drawing(kind: MotifKind, out: List[Primitive]) -> Drawing:
    return Drawing(motif=kind.name.lower(), elements=tuple(out))


# =========================
# Motifs
# =========================
def draw_special_cross(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    """Four orthogonal branches, each capped by a perpendicular secondary bar."""
    c = CENTER
    branch = 30 + 10 * complexity
    width = 4 + complexity
    bar = branch * (0.4 + 0.2 * f2 / 10)
    reach = branch * (1 - 0.04 * f1)      # where the secondary bars sit
    out: List[Primitive] = []

    for dx, dy in ((0, -1), (0, 1), (1, 0), (-1, 0)):
        out.append(_line(c, c, c + dx * branch, c + dy * branch, colors.primary, width))
    for dx, dy in ((0, -1), (0, 1), (1, 0), (-1, 0)):
        bx, by = c + dx * reach, c + dy * reach
        px, py = -dy, dx                  # perpendicular
        out.append(_line(bx, by, bx + px * bar, by + py * bar, colors.primary, width * 0.7))
        out.append(_line(bx, by, bx - px * bar, by - py * bar, colors.primary, width * 0.7))

    out.append(_circle(c, c, 5 + f3, fill=colors.accent))

    if complexity > 3 and f3 > 7:
        tert = branch * 0.3
        for k in range(4):
            a = math.radians(45 + 90 * k)
            out.append(_line(c, c, c + tert * math.cos(a), c + tert * math.sin(a),
                             colors.accent, width * 0.7))
    return _drawing(MotifKind.SPECIAL_CROSS, out)


def draw_sierpinski_carpet(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    level = min(complexity, RECURSION_CEILING)
    base = 120.0
    widen = 0.1 * f1 / 10
    out: List[Primitive] = [_rect(40, 40, base, base, fill=colors.primary)]

    def carve(x, y, size, depth):
        if depth <= 0:
            return
        sub = size / 3
        g = sub * widen
        out.append(_rect(x + sub - g, y + sub - g, sub + 2 * g, sub + 2 * g, fill=colors.secondary))
        if depth > 1:
            for i in range(3):
                for j in range(3):
                    if i == 1 and j == 1:
                        continue
                    carve(x + i * sub, y + j * sub, sub, depth - 1)

    carve(40, 40, base, level)

    if f3 > 5:
        hole = 10 + 5 * f2 / 10
        for k in range(min(f3 - 5, 4)):
            a = k * math.pi / 2
            hx, hy = CENTER + 50 * math.cos(a), CENTER + 50 * math.sin(a)
            out.append(_rect(hx - hole / 2, hy - hole / 2, hole, hole, fill=colors.secondary))
    return _drawing(MotifKind.SIERPINSKI_CARPET, out)


def draw_square_resonator(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    """
    Split-ring resonator: nested square frames, each cut by a gap on
    alternating sides. A third inner ring appears from complexity 4.
    """
    t = 6 + complexity
    gap = 12 + f1
    shift = 3 * f2 / 10
    rings = [(40, 120), (60, 80)]
    if complexity >= 4:
        rings.append((80, 40))
    out: List[Primitive] = []

    for x0, size in rings:
        out.append(_rect(x0, x0, size, size, stroke=colors.primary, width=t))

    cut = t + 2
    for k, (x0, size) in enumerate(rings):
        gy = x0 + size / 2 - gap / 2 + (shift if k % 2 == 0 else -shift)
        gx = x0 + size if k % 2 == 0 else x0     # right side, then left, ...
        out.append(_rect(gx - cut / 2, gy, cut, gap, fill=colors.secondary))

    if f3 > 5:
        extra = 10
        out.append(_rect(CENTER - extra / 2, 160 - cut / 2, extra, cut, fill=colors.secondary))
    return _drawing(MotifKind.SQUARE_RESONATOR, out)


def draw_fishnet(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    c = CENTER
    arm = 120
    arm_w = 12
    lo, hi = c - arm / 2, c + arm / 2
    density = 2 + complexity
    spacing = arm / (density + 1)
    mesh_w = arm_w * 0.5 * (1 + f1 / 20)
    out: List[Primitive] = [
        _rect(lo, c - arm_w / 2, arm, arm_w, fill=colors.primary),
        _rect(c - arm_w / 2, lo, arm_w, arm, fill=colors.primary),
    ]
    for i in range(1, density + 1):
        p = lo + i * spacing
        out.append(_line(lo, p, hi, p, colors.primary, mesh_w))
        out.append(_line(p, lo, p, hi, colors.primary, mesh_w))

    if f2 > 5:
        out.append(_line(lo, lo, hi, hi, colors.primary, mesh_w, dash=(5, 5)))
        out.append(_line(lo, hi, hi, lo, colors.primary, mesh_w, dash=(5, 5)))
    if f3 > 7:
        out.append(_circle(c, c, arm_w * 2, fill=colors.accent))
    return _drawing(MotifKind.FISHNET, out)


def draw_square_spiral(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    turns = complexity + 2
    step = 60.0 / (turns + 1)
    left, top, right, bottom = 40.0, 40.0, 160.0, 160.0
    pts: List[Point] = [(left, top)]
    for _ in range(turns):
        pts += [(right, top), (right, bottom), (left, bottom),
                (left, top + step), (left + step, top + step)]
        left += step
        top += step
        right -= step
        bottom -= step
    out: List[Primitive] = [_polyline(pts, colors.primary, 2 + 0.2 * f2)]

    if f3 > 5:
        gap = 4 + f1
        for k in range(min(f3 - 5, 4)):
            a = k * math.pi / 2
            gx, gy = CENTER + 60 * math.cos(a), CENTER + 60 * math.sin(a)
            out.append(_rect(gx - gap / 2, gy - gap / 2, gap, gap, fill=colors.secondary))
    return _drawing(MotifKind.SQUARE_SPIRAL, out)


def draw_nested_squares(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    n = complexity + 2
    reduction = 100.0 / n
    out: List[Primitive] = []
    for i in range(n):
        size = 120 - i * reduction
        half = size / 2
        deg = f1 * i
        out.append(_polyline(_square(CENTER, CENTER, half, deg), colors.primary,
                             2 + (n - i) * 0.5, closed=True))
        if i % 2 == 0 and f2 > 0:
            # notch on the top edge, turned with its square
            notch = size * 0.2 * f2 / 10
            depth = 2 + (n - i) * 0.5 + 2
            corners = [(CENTER - notch / 2, CENTER - half - depth / 2),
                       (CENTER + notch / 2, CENTER - half - depth / 2),
                       (CENTER + notch / 2, CENTER - half + depth / 2),
                       (CENTER - notch / 2, CENTER - half + depth / 2)]
            out.append(_polygon([rotate_about(p, deg) for p in corners], colors.secondary))

    if f3 > 5:
        out.append(_circle(CENTER, CENTER, 3 + f3 % 5, fill=colors.accent))
    return _drawing(MotifKind.NESTED_SQUARES, out)


def draw_double_c(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    """Two arc rings opening outward, left and right; an inner pair from complexity 3."""
    width = 6 + complexity
    half_gap = (30 + 6 * f1) / 2
    r = 28.0
    left_cx = 68 - f2 * 0.5
    right_cx = 132 + f2 * 0.5
    radii = [r, r * 0.55] if complexity >= 3 else [r]
    out: List[Primitive] = []
    for rad in radii:
        w = width if rad == r else width * 0.6
        # left ring opens toward 180 deg, right ring toward 0 deg
        out.append(_polyline(arc_points(left_cx, CENTER, rad, 180 + half_gap, 540 - half_gap, 48),
                             colors.primary, w))
        out.append(_polyline(arc_points(right_cx, CENTER, rad, half_gap, 360 - half_gap, 48),
                             colors.primary, w))

    if f3 > 5:
        out.append(_line(left_cx + r, CENTER, right_cx - r, CENTER, colors.accent, width * 0.7))
    return _drawing(MotifKind.DOUBLE_C, out)


def draw_greek_cross(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    c = CENTER
    length = 80 + 8 * complexity + f1
    arm_w = 20 + 2 * complexity
    hub = arm_w * 1.6
    out: List[Primitive] = [
        _rect(c - length / 2, c - arm_w / 2, length, arm_w, fill=colors.primary),
        _rect(c - arm_w / 2, c - length / 2, arm_w, length, fill=colors.primary),
        _rect(c - hub / 2, c - hub / 2, hub, hub, fill=colors.primary),
    ]
    if f3 > 5:
        notch = 4 + f2
        for k in range(4):
            a = math.radians(90 * k)
            nx, ny = c + (length / 2) * math.cos(a), c + (length / 2) * math.sin(a)
            out.append(_rect(nx - notch / 2, ny - notch / 2, notch, notch, fill=colors.secondary))
    return _drawing(MotifKind.GREEK_CROSS, out)


def draw_sierpinski_triangle(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    level = min(complexity, RECURSION_CEILING)
    grow = 1 + 0.02 * f1
    top = (CENTER, 165 - 150 * math.sqrt(3) / 2)
    a, b = (25.0, 165.0), (175.0, 165.0)
    out: List[Primitive] = [_polygon([top, a, b], colors.primary)]

    def mid(p, q):
        return ((p[0] + q[0]) / 2, (p[1] + q[1]) / 2)

    def carve(p, q, s, depth):
        if depth <= 0:
            return
        pq, qs, sp = mid(p, q), mid(q, s), mid(s, p)
        gx = (pq[0] + qs[0] + sp[0]) / 3
        gy = (pq[1] + qs[1] + sp[1]) / 3
        hole = [(gx + (x - gx) * grow, gy + (y - gy) * grow) for x, y in (pq, qs, sp)]
        out.append(_polygon(hole, colors.secondary))
        if depth > 1:
            carve(p, pq, sp, depth - 1)
            carve(pq, q, qs, depth - 1)
            carve(sp, qs, s, depth - 1)

    carve(top, a, b, level)

    if f3 > 6:
        cy = (top[1] + a[1] + b[1]) / 3
        out.append(_circle(CENTER, cy, 3 + f2 / 3, fill=colors.accent))
    return _drawing(MotifKind.SIERPINSKI_TRIANGLE, out)


def draw_h_tree(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    level = min(complexity, RECURSION_CEILING)
    ratio = (1 / math.sqrt(2)) * (0.9 + 0.02 * f1)
    out: List[Primitive] = []
    tips: List[Point] = []

    def branch(x, y, length, horizontal, depth):
        if depth <= 0:
            tips.append((x, y))
            return
        half = length / 2
        if horizontal:
            p, q = (x - half, y), (x + half, y)
        else:
            p, q = (x, y - half), (x, y + half)
        out.append(_line(p[0], p[1], q[0], q[1], colors.primary, max(1.0, 6 - (level - depth))))
        for end in (p, q):
            branch(end[0], end[1], length * ratio, not horizontal, depth - 1)

    branch(CENTER, CENTER, 80, True, level)

    if f3 > 7:
        for x, y in tips:
            out.append(_circle(x, y, 2 + f2 * 0.2, fill=colors.accent))
    return _drawing(MotifKind.H_TREE, out)


def draw_split_rings(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    """Concentric circular split rings; gaps alternate between right and left."""
    rings = 1 + complexity
    step = 60.0 / rings
    half_gap = (20 + 3 * f1) / 2
    width = 3 + f2 * 0.3
    out: List[Primitive] = []
    for i in range(rings):
        rad = 80 - i * step
        opening = 0 if i % 2 == 0 else 180
        out.append(_polyline(arc_points(CENTER, CENTER, rad, opening + half_gap,
                                        opening + 360 - half_gap, 64),
                             colors.primary, width))
    if f3 > 5:
        out.append(_circle(CENTER, CENTER, 6, fill=colors.accent))
    return _drawing(MotifKind.SPLIT_RINGS, out)


def draw_honeycomb(complexity, f1, f2, f3, colors: Palette) -> Drawing:
    n = complexity - 1                       # hex "radius" of the patch
    s = min(80 / (1.5 * n + 1), 80 / (math.sqrt(3) * (n + 0.5)))
    inset = s * (1 - 0.03 * f1)
    width = 1.5 + 0.2 * f2
    out: List[Primitive] = []
    dots: List[Point] = []
    for q in range(-n, n + 1):
        for r in range(max(-n, -q - n), min(n, -q + n) + 1):
            cx = CENTER + s * 1.5 * q
            cy = CENTER + s * math.sqrt(3) * (r + q / 2)
            hexagon = [(cx + inset * math.cos(math.radians(60 * k)),
                        cy + inset * math.sin(math.radians(60 * k))) for k in range(6)]
            out.append(_polyline(hexagon, colors.primary, width, closed=True))
            if (q - r) % 3 == 0:
                dots.append((cx, cy))
    if f3 > 6:
        for x, y in dots:
            out.append(_circle(x, y, s * 0.2, fill=colors.accent))
    return _drawing(MotifKind.HONEYCOMB, out)


# =========================
# Catalog + dispatch
# =========================
MotifFn = Callable[[int, int, int, int, Palette], Drawing]

MOTIF_CATALOG: Tuple[MotifFn, ...] = (
    draw_special_cross,
    draw_sierpinski_carpet,
    draw_square_resonator,
    draw_fishnet,
    draw_square_spiral,
    draw_nested_squares,
    draw_double_c,
    draw_greek_cross,
    draw_sierpinski_triangle,
    draw_h_tree,
    draw_split_rings,
    draw_honeycomb,
)
MOTIF_COUNT = len(MOTIF_CATALOG)
DEFAULT_MOTIF = MotifKind.SPECIAL_CROSS


def motif_kind(index) -> MotifKind:
    try:
        i = None if isinstance(index, bool) else operator.index(index)
    except TypeError:
        i = None
    if i is None or not 0 <= i < MOTIF_COUNT:
        log.debug("motif index %r outside catalog; using %s", index, DEFAULT_MOTIF.name)
        return DEFAULT_MOTIF
    return MotifKind(i)


def motif_name(index) -> str:
    return MOTIF_NAMES[motif_kind(index)]


def get_motif(index) -> MotifFn:
    return MOTIF_CATALOG[motif_kind(index)]


def draw_motif(index, complexity, feature1, feature2, feature3, colors: Palette) -> Drawing:
    fn = get_motif(index)
    return fn(_clamp(complexity, COMPLEXITY_MIN, COMPLEXITY_MAX),
              _clamp(feature1, FEATURE_MIN, FEATURE_MAX),
              _clamp(feature2, FEATURE_MIN, FEATURE_MAX),
              _clamp(feature3, FEATURE_MIN, FEATURE_MAX),
              colors)
