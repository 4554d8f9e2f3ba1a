# tests/test_settings.py
import json

import pytest

from emblem_settings import (DEFAULT_SETTINGS, EmblemSettings, SettingsError,
                             load_settings, settings_from_dict)


def test_defaults():
    s = EmblemSettings()
    assert s.emblem_size == 400 and s.grid_gap == 8 and s.pixel_ratio == 3
    assert s.footer_text == "Bionic Metamaterials"


@pytest.mark.parametrize("bad", [
    {"emblem_size": 0}, {"grid_gap": -1}, {"caption_height": -5}, {"pixel_ratio": 0},
    {"caption_font_size": 0}, {"caption_font_size": -3}, {"footer_text": 7}, {"footer_text": None},
])
def test_invalid_values_raise(bad):
    with pytest.raises(SettingsError):
        EmblemSettings(**bad)


def test_merged_skips_none_and_rejects_unknown():
    s = DEFAULT_SETTINGS.merged(emblem_size=200, grid_gap=None)
    assert s.emblem_size == 200 and s.grid_gap == DEFAULT_SETTINGS.grid_gap
    with pytest.raises(SettingsError):
        DEFAULT_SETTINGS.merged(colour="red")


def test_from_dict_ignores_unknown_keys(caplog):
    with caplog.at_level("WARNING"):
        s = settings_from_dict({"grid_gap": 2, "theme": "dark"})
    assert s.grid_gap == 2
    assert "theme" in caplog.text


def test_load_settings(tmp_path):
    p = tmp_path / "s.json"
    p.write_text(json.dumps({"emblem_size": 300, "footer_text": "Lab"}), encoding="utf-8")
    s = load_settings(str(p))
    assert s.emblem_size == 300 and s.footer_text == "Lab"
    assert load_settings(None) is DEFAULT_SETTINGS


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"pixel_ratio": -2}',
                                     '{"caption_font_size": 0}', '{"footer_text": 7}'])
def test_load_settings_bad_files(tmp_path, content):
    p = tmp_path / "bad.json"
    p.write_text(content, encoding="utf-8")
    with pytest.raises(SettingsError):
        load_settings(str(p))


def test_load_settings_missing_file(tmp_path):
    with pytest.raises(SettingsError):
        load_settings(str(tmp_path / "nope.json"))
