# tests/test_motifs.py
import itertools

import numpy as np
import pytest

from emblem_motifs import (CANVAS_SIZE, MOTIF_CATALOG, MOTIF_COUNT, MOTIF_NAMES,
                           Circle, Line, MotifKind, Polygon, Polyline, Rect,
                           arc_points, draw_motif, get_motif, motif_kind, motif_name,
                           rotate_about)
from emblem_palette import PALETTES

RECURSIVE = (MotifKind.SIERPINSKI_CARPET, MotifKind.SIERPINSKI_TRIANGLE, MotifKind.H_TREE)


def test_catalog_is_complete_and_ordered():
    assert MOTIF_COUNT == 12
    assert len(MOTIF_NAMES) == MOTIF_COUNT
    assert [int(k) for k in MotifKind] == list(range(MOTIF_COUNT))
    assert len(set(MOTIF_NAMES.values())) == MOTIF_COUNT


@pytest.mark.parametrize("index", range(12))
def test_every_motif_stays_on_canvas(index, red):
    for complexity, f1, f2, f3 in itertools.product(range(1, 6), (0, 5, 9), (0, 6, 9), (0, 6, 9)):
        d = draw_motif(index, complexity, f1, f2, f3, red)
        assert len(d) > 0
        for x, y in d.coords():
            assert 0 <= x <= CANVAS_SIZE and 0 <= y <= CANVAS_SIZE, (d.motif, complexity, x, y)


@pytest.mark.parametrize("index", range(12))
def test_motifs_are_pure(index, red):
    assert draw_motif(index, 3, 4, 7, 8, red) == draw_motif(index, 3, 4, 7, 8, red)


@pytest.mark.parametrize("index", range(12))
def test_drawing_is_tagged_with_motif(index, red):
    assert draw_motif(index, 2, 0, 0, 0, red).motif == MotifKind(index).name.lower()


@pytest.mark.parametrize("bad", [999, -1, 12, "3", None, 2.0, True])
def test_out_of_catalog_index_falls_back_to_first(bad, red):
    assert motif_kind(bad) is MotifKind.SPECIAL_CROSS
    assert draw_motif(bad, 3, 1, 2, 3, red) == draw_motif(0, 3, 1, 2, 3, red)


def test_integer_like_index_is_accepted(red):
    assert motif_kind(np.int64(9)) is MotifKind.H_TREE
    assert draw_motif(np.int64(9), 3, 0, 0, 0, red) == draw_motif(9, 3, 0, 0, 0, red)
    assert motif_kind(np.int64(40)) is MotifKind.SPECIAL_CROSS


def test_lookup_helpers():
    assert motif_name(9) == "H-tree fractal"
    assert get_motif(4) is MOTIF_CATALOG[4]


def test_inputs_are_clamped(red):
    assert draw_motif(5, 99, 42, -3, 10, red) == draw_motif(5, 5, 9, 0, 9, red)
    assert draw_motif(5, 0, 0, 0, 0, red) == draw_motif(5, 1, 0, 0, 0, red)


@pytest.mark.parametrize("kind", RECURSIVE)
def test_recursion_is_capped(kind, red):
    assert draw_motif(kind, 5, 3, 3, 3, red) == draw_motif(kind, 4, 3, 3, 3, red)
    assert len(draw_motif(kind, 3, 3, 3, 3, red)) < len(draw_motif(kind, 4, 3, 3, 3, red))


def test_complexity_grows_nested_structures(red):
    for kind in (MotifKind.NESTED_SQUARES, MotifKind.SPLIT_RINGS, MotifKind.HONEYCOMB):
        sizes = [len(draw_motif(kind, c, 0, 0, 0, red)) for c in range(1, 6)]
        assert sizes == sorted(sizes) and sizes[0] < sizes[-1]


def test_palette_colours_flow_through(red):
    blue = PALETTES["blue"]
    d = draw_motif(MotifKind.GREEK_CROSS, 3, 0, 0, 0, red)
    assert all(el.fill == red.primary for el in d.elements)
    assert draw_motif(MotifKind.GREEK_CROSS, 3, 0, 0, 0, blue) != d


def test_high_feature3_adds_accent(red):
    d = draw_motif(MotifKind.SPECIAL_CROSS, 2, 0, 0, 9, red)
    assert any(isinstance(el, Circle) and el.fill == red.accent for el in d.elements)


def test_fishnet_diagonals_are_dashed(red):
    plain = draw_motif(MotifKind.FISHNET, 2, 0, 0, 0, red)
    dashed = draw_motif(MotifKind.FISHNET, 2, 0, 9, 0, red)
    assert not any(isinstance(el, Line) and el.dash for el in plain.elements)
    assert sum(1 for el in dashed.elements if isinstance(el, Line) and el.dash) == 2


def test_primitive_kinds_used(red):
    kinds = set()
    for i in range(MOTIF_COUNT):
        kinds |= {type(el) for el in draw_motif(i, 4, 5, 9, 9, red).elements}
    assert {Line, Polyline, Polygon, Rect, Circle} <= kinds


def test_geometry_helpers():
    pts = arc_points(100, 100, 10, 0, 90, steps=3)
    assert pts[0] == pytest.approx((110, 100))
    assert pts[-1] == pytest.approx((100, 110))
    assert rotate_about((150, 100), 90) == pytest.approx((100, 150))


def _primary_shape(drawing, colors):
    """Type of every solid primitive painted in the primary colour."""
    shape = []
    for el in drawing.elements:
        if isinstance(el, (Line, Polyline)):
            paint = el.stroke
        elif isinstance(el, Polygon):
            paint = el.fill
        else:
            paint = el.fill or el.stroke
        if paint == colors.primary and not getattr(el, "dash", None):
            shape.append(type(el))
    return shape


@pytest.mark.parametrize("index", range(12))
@pytest.mark.parametrize("complexity", [1, 3, 5])
def test_features_leave_primary_shape_alone(index, complexity, red):
    plain = draw_motif(index, complexity, 0, 0, 0, red)
    ornate = draw_motif(index, complexity, 9, 9, 9, red)
    assert _primary_shape(plain, red)
    assert _primary_shape(ornate, red) == _primary_shape(plain, red)
    assert len(ornate) >= len(plain)
