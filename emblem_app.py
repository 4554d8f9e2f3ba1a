# emblem_app.py
# Bionic-metamaterial emblem generator: initials + birth date + colour -> PNG / SVG logo.
#
#   emblem generate --initials ZS --birth-date 1990-05-15 --color red
#   emblem motifs
#   emblem inspect --birth-date 1990-05-15 --hash rolling

import argparse
import json
import logging
import sys
from typing import List, Optional

from emblem_compose import build_emblem, export_emblem
from emblem_hash import get_hasher
from emblem_motifs import MOTIF_NAMES, MotifKind
from emblem_rules import UserInput, build_design
from emblem_settings import SettingsError, load_settings


def _formats(choice: str) -> List[str]:
    return ["png", "svg"] if choice == "both" else [choice]


# =========================
# Commands
# =========================
def cmd_generate(args) -> int:
    try:
        settings = load_settings(args.config).merged(
            emblem_size=args.size, grid_gap=args.gap,
            pixel_ratio=args.pixel_ratio, footer_text=args.footer)
    except SettingsError as e:
        print(f"❌ {e}")
        return 1

    user = UserInput.create(initials=args.initials, birth_date=args.birth_date,
                            favorite_color=args.color, hobbies=args.hobbies)
    config = build_design(user, hasher=get_hasher(args.hash), layout=args.layout,
                          footer_text=settings.footer_text)
    if args.json:
        print(json.dumps(config.to_dict(), indent=2))
    else:
        print(f"🧬 Motif: {config.motif_name} (#{config.motif_index}), "
              f"complexity {config.complexity}, rotation {config.rotation}°, scale {config.scale}")
        print(f"🔲 Layout: {config.layout}   🎨 Colour: {config.colors.primary}")
        if user.hobbies:
            print(f"🎯 Hobbies: {user.hobbies}")

    emblem = build_emblem(config, settings)
    for fmt in _formats(args.format):
        path = export_emblem(emblem, out_dir=args.out_dir, initials=user.initials,
                             fmt=fmt, pixel_ratio=settings.pixel_ratio)
        if path is None:
            print(f"⚠️  Could not write {fmt.upper()} to {args.out_dir}; design shown above")
        else:
            print(f"✅ Wrote {path}")
    return 0


def cmd_motifs(args) -> int:
    for kind in MotifKind:
        print(f"{int(kind):2d}  {MOTIF_NAMES[kind]}")
    return 0


def cmd_inspect(args) -> int:
    user = UserInput.create(birth_date=args.birth_date)
    config = build_design(user, hasher=get_hasher(args.hash))
    print(f"🔑 Digest: {config.digest or '(none, defaults used)'}")
    print(f"📊 {json.dumps(config.to_dict())}")
    return 0


# =========================
# CLI
# =========================
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="emblem", description="Bionic Metamaterials emblem generator")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = ap.add_subparsers(dest="cmd")

    g = sub.add_parser("generate", help="initials + birth date + colour → emblem PNG/SVG")
    g.add_argument("--initials", type=str, default="", help="user initials (layout)")
    g.add_argument("--birth-date", type=str, default=None, help="YYYY-MM-DD (motif + parameters)")
    g.add_argument("--color", type=str, default=None, help="favourite colour (palette)")
    g.add_argument("--hobbies", type=str, default=None, help="free text, shown only")
    g.add_argument("--layout", type=str, default=None, help="explicit grid, e.g. 2x3")
    g.add_argument("--out-dir", type=str, default=".", help="output directory")
    g.add_argument("--format", type=str, default="png", choices=["png", "svg", "both"])
    g.add_argument("--config", type=str, default=None, help="JSON settings file")
    g.add_argument("--hash", type=str, default=None, choices=["sha256", "rolling"],
                   help="digest function (default: detected)")
    g.add_argument("--size", type=float, default=None, help="grid size, logical units")
    g.add_argument("--gap", type=float, default=None, help="gap between cells")
    g.add_argument("--pixel-ratio", type=int, default=None, help="PNG pixels per unit")
    g.add_argument("--footer", type=str, default=None, help="caption text")
    g.add_argument("--json", action="store_true", help="print the configuration as JSON")
    g.set_defaults(func=cmd_generate)

    m = sub.add_parser("motifs", help="list the motif catalog")
    m.set_defaults(func=cmd_motifs)

    i = sub.add_parser("inspect", help="birth date → digest and parameters")
    i.add_argument("--birth-date", type=str, default=None, help="YYYY-MM-DD")
    i.add_argument("--hash", type=str, default=None, choices=["sha256", "rolling"])
    i.set_defaults(func=cmd_inspect)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if not getattr(args, "func", None):
        ap.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
