# sysbanner/cli.py
from __future__ import annotations
import argparse, sys
from typing import List

from . import errors
from .config import load_settings
from .errors import FetchError
from .info import Info
from .render.art import Art
from .render.layout import compose
from .util import ansi


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="sysbanner",
        description="Print a system information banner.",
        epilog="Override the layout of the info block in ~/.config/sysbanner/info.tmpl.",
    )
    ap.add_argument("--no-art", action="store_true", help="do not show the distro logo")
    ap.add_argument("--no-color", action="store_true", help="disable colors")
    ap.add_argument("--info-only", action="store_true", help="print the info block alone, uncropped")
    args = ap.parse_args(argv)

    try:
        cfg = load_settings()
        if args.no_color or not cfg.color:
            ansi.USE_COLOR = False
        info = Info(settings=cfg)
        info.run()
        if args.info_only:
            print(info.rendered)
            return 0
        if cfg.show_art and not args.no_art:
            art = Art(info.probes.distro)
            art.prepare()
            art.publish(info.ctx)
    except FetchError as e:
        errors.handle(str(e))
        return 1

    cols, _ = ansi.term_size()
    print(compose(info.ctx, gap=cfg.art_gap, max_width=cols))
    return 0

if __name__ == "__main__":
    sys.exit(main())
