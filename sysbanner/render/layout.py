from __future__ import annotations
from typing import Optional

from ..context.store import Context, stringify
from ..util import ansi
from ..util.ansi import crop_visible, ljust_visible

def compose(ctx: Context, gap: int = 3, max_width: Optional[int] = None) -> str:
    """Place the published art left of the published info, aligned by visible width."""
    tv = ctx.template_vars
    info = stringify(tv["info"]).split("\n")
    width = tv["info.width"]
    if "art" in ctx:
        art = stringify(tv["art"]).split("\n")
        col = tv["art.width"] + gap
        height = max(tv["art.height"], tv["info.height"])
        art += [""] * (height - len(art))
        info += [""] * (height - len(info))
        lines = [ljust_visible(a, col) + b for a, b in zip(art, info)]
        width += col
    else:
        lines = info
    if max_width is not None and width > max_width:
        lines = [_crop(l, max_width) for l in lines]
    return "\n".join(l.rstrip(" ") for l in lines)

def _crop(line: str, width: int) -> str:
    out = crop_visible(line, width)
    return out + "\033[0m" if ansi.USE_COLOR and "\033" in out else out
