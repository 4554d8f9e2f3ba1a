# emblem_palette.py
# Favourite colour name -> fixed {primary, secondary, accent} triple.

import logging
from dataclasses import dataclass
from typing import Dict, Optional

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Palette:
    primary: str      # strokes and fills of the motif
    secondary: str    # background / knock-out colour
    accent: str       # ornaments and caption

    def as_dict(self) -> Dict[str, str]:
        return {"primary": self.primary, "secondary": self.secondary, "accent": self.accent}


DEFAULT_COLOR = "blue"

PALETTES: Dict[str, Palette] = {
    "red":    Palette("#ff4d4f", "#fff2f0", "#cf1322"),
    "blue":   Palette("#1890ff", "#f0f5ff", "#096dd9"),
    "green":  Palette("#52c41a", "#f6ffed", "#389e0d"),
    "yellow": Palette("#fadb14", "#feffe6", "#d4b106"),
    "purple": Palette("#722ed1", "#f9f0ff", "#531dab"),
    "orange": Palette("#fa8c16", "#fff7e6", "#d46b08"),
    "pink":   Palette("#eb2f96", "#fff0f6", "#c41d7f"),
    "cyan":   Palette("#13c2c2", "#e6fffb", "#08979c"),
}

DEFAULT_PALETTE = PALETTES[DEFAULT_COLOR]


def normalize_color(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def lookup_palette(name: Optional[str]) -> Palette:
    key = normalize_color(name)
    pal = PALETTES.get(key)
    if pal is None:
        if key:
            log.warning("unknown colour %r; using %s palette", name, DEFAULT_COLOR)
        return DEFAULT_PALETTE
    return pal
