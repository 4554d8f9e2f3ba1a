# tests/test_compose.py
import os

import pytest
from PIL import Image

import emblem_compose
from emblem_compose import (Cell, build_emblem, compose, export_emblem, export_filename,
                            render_png, render_svg)
from emblem_hash import RollingHasher
from emblem_motifs import MotifKind, draw_motif
from emblem_rules import FOOTER_TEXT, Layout, UserInput, build_design
from emblem_settings import EmblemSettings

SMALL = EmblemSettings(emblem_size=100, grid_gap=4, caption_height=20, pixel_ratio=1)


@pytest.fixture
def drawing(red):
    return draw_motif(MotifKind.SPECIAL_CROSS, 3, 2, 6, 8, red)


@pytest.fixture
def config():
    user = UserInput.create(initials="ZS", birth_date="1990-05-15", favorite_color="red")
    return build_design(user, hasher=RollingHasher())


# =========================
# Composition
# =========================
@pytest.mark.parametrize("rows,cols", [(1, 1), (2, 2), (2, 3), (2, 4), (3, 4)])
def test_cell_count_and_fixed_footprint(drawing, rows, cols):
    e = compose(Layout(rows, cols), drawing, 45, SMALL)
    assert len(e.cells) == rows * cols
    assert (e.width, e.height) == (100, 120)
    sizes = {c.size for c in e.cells}
    assert len(sizes) == 1
    for c in e.cells:
        assert 0 <= c.x and c.x + c.size <= e.width
        assert 0 <= c.y and c.y + c.size <= e.grid_size
        assert c.rotation == 45


def test_cells_are_row_major(drawing):
    e = compose(Layout(2, 3), drawing, 0, SMALL)
    assert [(c.row, c.col) for c in e.cells] == [(r, c) for r in range(2) for c in range(3)]
    assert e.cells[0].x < e.cells[1].x < e.cells[2].x
    assert e.cells[0].y < e.cells[3].y


def test_compose_is_idempotent(drawing):
    assert compose(Layout(2, 2), drawing, 90, SMALL) == compose(Layout(2, 2), drawing, 90, SMALL)


def test_rotation_is_normalized(drawing):
    assert compose(Layout(1, 1), drawing, 405, SMALL).cells[0].rotation == 45


def test_caption_defaults_to_settings(drawing):
    assert compose(Layout(1, 1), drawing, 0, SMALL).caption == FOOTER_TEXT
    assert compose(Layout(1, 1), drawing, 0, SMALL, caption="").caption == ""


def test_cell_matrix_maps_canvas_centre_to_cell_centre():
    cell = Cell(row=0, col=0, x=10, y=20, size=50, rotation=90, scale=0.8)
    m = cell.matrix()
    assert m[0, 0] * 100 + m[0, 1] * 100 + m[0, 2] == pytest.approx(35)
    assert m[1, 0] * 100 + m[1, 1] * 100 + m[1, 2] == pytest.approx(45)
    assert cell.unit == pytest.approx(50 / 200 * 0.8)


def test_build_emblem_uses_configuration(config):
    e = build_emblem(config, SMALL)
    assert e.layout == Layout(2, 2)
    assert e.drawing.motif == "square_resonator"
    assert all(c.rotation == 225 and c.scale == 1.0 for c in e.cells)
    assert e.colors == config.colors


# =========================
# Rendering
# =========================
def test_render_svg_uses_one_definition(config):
    xml = render_svg(build_emblem(config, SMALL), "x.svg").tostring()
    assert xml.count("<use") == 4
    assert 'id="motif-square_resonator"' in xml
    assert FOOTER_TEXT in xml
    assert config.colors.secondary in xml


def test_render_svg_is_idempotent(config):
    e = build_emblem(config, SMALL)
    assert render_svg(e, "a.svg").tostring() == render_svg(e, "a.svg").tostring()


def test_render_png_size_and_background(config):
    e = build_emblem(config, SMALL)
    img = render_png(e, pixel_ratio=2)
    assert img.size == (200, 240)
    assert img.getpixel((0, 0)) == (255, 242, 240)     # red secondary #fff2f0
    assert len(img.getcolors(maxcolors=100000)) > 1


def test_render_png_is_deterministic(config):
    e = build_emblem(config, SMALL)
    assert render_png(e, 1).tobytes() == render_png(e, 1).tobytes()


@pytest.mark.parametrize("index", range(12))
def test_every_motif_renders(index, red):
    d = draw_motif(index, 4, 5, 9, 9, red)
    e = compose(Layout(1, 2), d, 45, SMALL, colors=red)
    assert render_png(e, 1).size == (100, 120)
    assert "<use" in render_svg(e).tostring()


# =========================
# Export
# =========================
@pytest.mark.parametrize("initials,name", [("ZS", "ZS.png"), ("", "logo.png"),
                                           (None, "logo.png"), ("A/B", "AB.png")])
def test_export_filename(initials, name):
    assert export_filename(initials, "png") == name


def test_export_writes_png_and_svg(tmp_path, config):
    e = build_emblem(config, SMALL)
    png = export_emblem(e, out_dir=str(tmp_path), initials="ZS", fmt="png", pixel_ratio=1)
    svg = export_emblem(e, out_dir=str(tmp_path), initials="ZS", fmt="svg")
    assert png == os.path.join(str(tmp_path), "ZS.png")
    assert svg == os.path.join(str(tmp_path), "ZS.svg")
    with Image.open(png) as img:
        assert img.size == (100, 120)
    assert "<svg" in open(svg, encoding="utf-8").read()


def test_export_failure_returns_none(tmp_path, config, caplog):
    e = build_emblem(config, SMALL)
    missing = str(tmp_path / "does" / "not" / "exist")
    with caplog.at_level("ERROR"):
        assert export_emblem(e, out_dir=missing, initials="ZS") is None
    assert "export to" in caplog.text


@pytest.mark.parametrize("error", [OSError("disk full"), ValueError("font size must be greater than 0")])
def test_export_failure_from_renderer(monkeypatch, tmp_path, config, error):
    def boom(*a, **k):
        raise error
    monkeypatch.setattr(emblem_compose, "render_png", boom)
    assert export_emblem(build_emblem(config, SMALL), out_dir=str(tmp_path)) is None


def test_export_rejects_unknown_format(tmp_path, config):
    with pytest.raises(ValueError):
        export_emblem(build_emblem(config, SMALL), out_dir=str(tmp_path), fmt="gif")
