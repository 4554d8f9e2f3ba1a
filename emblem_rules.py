# emblem_rules.py
# Design rules: user input -> one fully resolved DesignConfiguration.
#   birth date -> digest -> motif + structural parameters
#   initials   -> grid layout
#   colour     -> palette
# Hobbies are carried along for display only.

import logging
import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from emblem_hash import Hasher, default_hasher, hash_text
from emblem_motifs import MOTIF_COUNT, motif_name
from emblem_palette import Palette, lookup_palette, normalize_color

log = logging.getLogger(__name__)

FOOTER_TEXT = "Bionic Metamaterials"
MAX_INITIALS = 6
MAX_LAYOUT_SIDE = 12


# =========================
# Input
# =========================
def normalize_initials(value: Optional[str]) -> str:
    text = "".join((value or "").split()).upper()
    if len(text) > MAX_INITIALS:
        log.warning("initials %r longer than %d chars; truncating", text, MAX_INITIALS)
        text = text[:MAX_INITIALS]
    return text


def normalize_birth_date(value: Union[str, date, None]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        log.warning("unreadable birth date %r; treating as absent", text)
        return None


@dataclass(frozen=True)
class UserInput:
    initials: str = ""
    birth_date: Optional[str] = None    # ISO YYYY-MM-DD
    favorite_color: str = ""
    hobbies: str = ""

    @classmethod
    def create(cls, initials=None, birth_date=None, favorite_color=None, hobbies=None) -> "UserInput":
        return cls(initials=normalize_initials(initials),
                   birth_date=normalize_birth_date(birth_date),
                   favorite_color=normalize_color(favorite_color),
                   hobbies=(hobbies or "").strip())

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "UserInput":
        """Accepts the form record with camelCase or snake_case keys."""
        def pick(*keys):
            for k in keys:
                if form.get(k) is not None:
                    return form[k]
            return None
        return cls.create(initials=pick("initials"),
                          birth_date=pick("birthDate", "birth_date", "birthday"),
                          favorite_color=pick("favoriteColor", "favorite_color", "color"),
                          hobbies=pick("hobbies"))


# =========================
# Layout
# =========================
@dataclass(frozen=True)
class Layout:
    rows: int
    cols: int

    @property
    def cells(self) -> int:
        return self.rows * self.cols

    def __str__(self):
        return f"{self.rows}x{self.cols}"


# initials length -> (rows, cols)
LAYOUT_TABLE: Dict[int, Tuple[int, int]] = {
    0: (1, 1),
    1: (1, 1),
    2: (2, 2),
    3: (2, 3),
    4: (2, 4),
}
DEFAULT_LAYOUT = Layout(1, 1)


def resolve_layout(length: int) -> Layout:
    n = max(0, int(length))
    if n in LAYOUT_TABLE:
        return Layout(*LAYOUT_TABLE[n])
    rows = math.isqrt(n)
    cols = math.ceil(n / rows)
    return Layout(rows, cols)


_LAYOUT_RE = re.compile(r"^\s*(\d+)\s*[xX×]\s*(\d+)\s*$")


def parse_layout(text: Optional[str]) -> Layout:
    """Explicit "RxC" layout. Malformed -> 1x1; each side capped at MAX_LAYOUT_SIDE."""
    m = _LAYOUT_RE.match(text or "")
    if not m:
        log.warning("bad layout %r; using %s", text, DEFAULT_LAYOUT)
        return DEFAULT_LAYOUT
    rows, cols = int(m.group(1)), int(m.group(2))
    if rows < 1 or cols < 1:
        log.warning("layout %r has an empty side; using %s", text, DEFAULT_LAYOUT)
        return DEFAULT_LAYOUT
    if rows > MAX_LAYOUT_SIDE or cols > MAX_LAYOUT_SIDE:
        log.warning("layout %r capped at %d per side", text, MAX_LAYOUT_SIDE)
    return Layout(min(rows, MAX_LAYOUT_SIDE), min(cols, MAX_LAYOUT_SIDE))


# =========================
# Parameter extraction
# =========================
@dataclass(frozen=True)
class DesignParameters:
    motif_index: int
    symmetry: int
    complexity: int
    feature1: int
    feature2: int
    feature3: int
    rotation: int
    scale: float


# digit position of each field in the digest
POS_MOTIF, POS_SYMMETRY, POS_COMPLEXITY = 0, 1, 2
POS_FEATURES = (3, 4, 5)
POS_ROTATION, POS_SCALE = 6, 7

# used when no birth date was given
DEFAULT_PARAMETERS = DesignParameters(motif_index=0, symmetry=4, complexity=2,
                                      feature1=0, feature2=0, feature3=0,
                                      rotation=0, scale=0.8)


def _digit(digest: str, pos: int) -> int:
    try:
        return int(digest[pos], 16)
    except (IndexError, TypeError, ValueError):
        return 0


def extract_parameters(digest: str) -> DesignParameters:
    f1, f2, f3 = (_digit(digest, p) % 10 for p in POS_FEATURES)
    return DesignParameters(
        motif_index=_digit(digest, POS_MOTIF) % MOTIF_COUNT,
        symmetry=_digit(digest, POS_SYMMETRY) % 7 + 2,
        complexity=_digit(digest, POS_COMPLEXITY) % 5 + 1,
        feature1=f1,
        feature2=f2,
        feature3=f3,
        # multiples of 45 only, 0..315
        rotation=(_digit(digest, POS_ROTATION) % 8) * 45,
        scale=(6 + _digit(digest, POS_SCALE) % 5) / 10,
    )


# =========================
# Design configuration
# =========================
@dataclass(frozen=True)
class DesignConfiguration:
    layout: Layout
    motif_index: int
    symmetry: int
    complexity: int
    feature1: int
    feature2: int
    feature3: int
    rotation: int
    scale: float
    colors: Palette
    footer_text: str = FOOTER_TEXT
    digest: Optional[str] = None

    @property
    def motif_name(self) -> str:
        return motif_name(self.motif_index)

    @property
    def features(self) -> Tuple[int, int, int]:
        return (self.feature1, self.feature2, self.feature3)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layout": str(self.layout),
            "motifIndex": self.motif_index,
            "motifName": self.motif_name,
            "symmetry": self.symmetry,
            "complexity": self.complexity,
            "features": list(self.features),
            "rotation": self.rotation,
            "scale": self.scale,
            "colors": self.colors.as_dict(),
            "footerText": self.footer_text,
            "digest": self.digest,
        }


def _assemble(user: UserInput, params: DesignParameters, digest: Optional[str],
              layout: Optional[str], footer_text: str) -> DesignConfiguration:
    grid = parse_layout(layout) if layout else resolve_layout(len(user.initials))
    return DesignConfiguration(
        layout=grid,
        motif_index=params.motif_index,
        symmetry=params.symmetry,
        complexity=params.complexity,
        feature1=params.feature1,
        feature2=params.feature2,
        feature3=params.feature3,
        rotation=params.rotation,
        scale=params.scale,
        colors=lookup_palette(user.favorite_color),
        footer_text=footer_text,
        digest=digest,
    )


def build_design(user: UserInput, hasher: Optional[Hasher] = None,
                 layout: Optional[str] = None,
                 footer_text: str = FOOTER_TEXT) -> DesignConfiguration:
    if user.birth_date is None:
        log.debug("no birth date; using default parameters")
        return _assemble(user, DEFAULT_PARAMETERS, None, layout, footer_text)
    digest = hash_text(user.birth_date, hasher)
    return _assemble(user, extract_parameters(digest), digest, layout, footer_text)


async def build_design_async(user: UserInput, hasher: Optional[Hasher] = None,
                             layout: Optional[str] = None,
                             footer_text: str = FOOTER_TEXT) -> DesignConfiguration:
    if user.birth_date is None:
        return _assemble(user, DEFAULT_PARAMETERS, None, layout, footer_text)
    digest = await (hasher or default_hasher()).adigest(user.birth_date)
    return _assemble(user, extract_parameters(digest), digest, layout, footer_text)
