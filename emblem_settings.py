# emblem_settings.py
# Rendering constants. Defaults live on the dataclass; a JSON file or CLI
# flags may override them.

import json
import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from emblem_rules import FOOTER_TEXT

log = logging.getLogger(__name__)


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class EmblemSettings:
    emblem_size: float = 400.0     # square grid area, logical units
    grid_gap: float = 8.0          # space between cells
    caption_height: float = 48.0   # band under the grid for the footer text
    caption_font_size: float = 18.0
    footer_text: str = FOOTER_TEXT
    pixel_ratio: int = 3           # PNG pixels per logical unit

    def __post_init__(self):
        if self.emblem_size <= 0:
            raise SettingsError(f"emblem_size must be positive, got {self.emblem_size}")
        if self.grid_gap < 0:
            raise SettingsError(f"grid_gap must be >= 0, got {self.grid_gap}")
        if self.caption_height < 0:
            raise SettingsError(f"caption_height must be >= 0, got {self.caption_height}")
        if self.caption_font_size <= 0:
            raise SettingsError(f"caption_font_size must be positive, got {self.caption_font_size}")
        if not isinstance(self.footer_text, str):
            raise SettingsError(f"footer_text must be a string, got {self.footer_text!r}")
        if self.pixel_ratio < 1:
            raise SettingsError(f"pixel_ratio must be >= 1, got {self.pixel_ratio}")

    def merged(self, **overrides: Any) -> "EmblemSettings":
        """Copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise SettingsError(f"unknown setting(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)


DEFAULT_SETTINGS = EmblemSettings()


def settings_from_dict(data: Dict[str, Any], base: EmblemSettings = DEFAULT_SETTINGS) -> EmblemSettings:
    known = {f.name for f in fields(EmblemSettings)}
    picked = {}
    for key, value in data.items():
        if key not in known:
            log.warning("ignoring unknown setting %r", key)
            continue
        picked[key] = value
    try:
        return base.merged(**picked)
    except TypeError as e:
        raise SettingsError(str(e)) from e


def load_settings(path: Optional[str]) -> EmblemSettings:
    if not path:
        return DEFAULT_SETTINGS
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise SettingsError(f"settings file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise SettingsError(f"settings file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SettingsError(f"settings file {path} must hold a JSON object")
    return settings_from_dict(data)
