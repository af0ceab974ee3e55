import subprocess
from typing import List, Optional

def run_cmd(cmd: List[str], timeout: int = 5) -> str:
    """Run a command and return its stdout, or "" if it is missing or fails."""
    try:
        r = subprocess.run(cmd, capture_output=True, text=True,
                           stdin=subprocess.DEVNULL, timeout=timeout)
    except (OSError, subprocess.SubprocessError):
        return ""
    return r.stdout if r.returncode == 0 else ""

def read_text(path: str) -> Optional[str]:
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError:
        return None
