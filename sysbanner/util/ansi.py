import re, shutil, sys

# ESC [ params letter, e.g. "\x1b[1;31m", "\x1b[2K"
CONTROL_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

def strip_control(s: str) -> str: return CONTROL_RE.sub("", s or "")
def visible_len(s: str) -> int: return len(strip_control(s))

def dimensions(text: str) -> tuple[int, int]:
    """Visible (width, height) of rendered text.

    Width counts characters, not bytes, of the widest line once control
    sequences are removed. Height counts every piece of the split on "\\n",
    so a trailing newline adds an empty last line.
    """
    lines = strip_control(text).split("\n")
    return max(len(l) for l in lines), len(lines)

def crop_visible(s: str, width: int) -> str:
    if width <= 0: return ""
    vis=i=0; out=[]
    while i < len(s):
        if s[i] == "\033":
            m = CONTROL_RE.match(s, i)
            if m: out.append(m.group(0)); i=m.end(); continue
        if vis >= width: break
        out.append(s[i]); i+=1; vis+=1
    return "".join(out)

def ljust_visible(s: str, width: int) -> str:
    pad = max(0, width - visible_len(s))
    return s + (" " * pad)

USE_COLOR = sys.stdout.isatty()
def c(txt, code): return f"\033[{code}m{txt}\033[0m" if USE_COLOR else txt
BOLD   = lambda s: c(s, "1")
DIM    = lambda s: c(s, "2")
RED    = lambda s: c(s, "31")

def term_size():
    ts = shutil.get_terminal_size((100, 24))
    return ts.columns, ts.lines
