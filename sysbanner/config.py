from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os, sys

from .errors import ConfigReadError
from .probes.packages import DEFAULT_ORDER

APP = "sysbanner"
TEMPLATE_NAME = "info.tmpl"

# ---------- tiny TOML-ish parser ----------
def _parse_tomlish(text: str) -> dict:
    data, section = {}, None
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("[") and line.endswith("]"):
            section = line[1:-1].strip()
            data.setdefault(section, {})
            continue
        if "=" not in line:
            continue
        k, v = [s.strip() for s in line.split("=", 1)]
        if v.startswith(("'", '"')):
            q = v[0]
            end = v.find(q, 1)
            val = v[1:end] if end > 0 else v[1:]
        else:
            v = v.split("#", 1)[0].strip()
            if v.lower() in ("true", "false"):
                val = (v.lower() == "true")
            else:
                try:
                    val = float(v) if "." in v else int(v)
                except ValueError:
                    val = v
        if section:
            data[section][k] = val
        else:
            data[k] = val
    return data

def home_dir() -> Path:
    """Home of $USER; an unset USER gives a directory that will not exist."""
    root = Path("/Users") if sys.platform == "darwin" else Path("/home")
    return root / os.environ.get("USER", "")

def config_dir() -> Path:
    env = os.environ.get("SYSBANNER_CONFIG_DIR")
    if env:
        return Path(env)
    return home_dir() / ".config" / APP

def info_template_path() -> Path:
    return config_dir() / TEMPLATE_NAME

def _config_path() -> Path:
    base = config_dir()
    cfg = base / "config"
    toml = base / "config.toml"
    return cfg if cfg.exists() or not toml.exists() else toml

@dataclass
class Settings:
    show_art: bool = True
    art_gap: int = 3
    color: bool = True
    pm_order: list[str] | None = None

def load_settings() -> Settings:
    p = _config_path()
    d = {}
    if p.exists():
        try:
            d = _parse_tomlish(p.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigReadError(p, e) from e

    s = Settings()

    art = d.get("art", {})
    s.show_art = bool(art.get("show", s.show_art))
    try: s.art_gap = max(0, int(art.get("gap", s.art_gap)))
    except (TypeError, ValueError): pass

    ui = d.get("ui", {})
    s.color = bool(ui.get("color", s.color))

    pm = d.get("packages", {})
    order = pm.get("order", "")
    if isinstance(order, str) and order.strip():
        s.pm_order = [x.strip() for x in order.split(",") if x.strip()]
    else:
        s.pm_order = list(DEFAULT_ORDER)

    return s
