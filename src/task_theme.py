"""Color & style helpers for `task-cli list`.

Decisions:
- Colour only decorates already-padded columns, so widths never shift.
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Supports palette overrides via environment or a .env file in the CWD.
"""
from __future__ import annotations
import os, sys
from pathlib import Path
from typing import Dict, Mapping, Optional

from task_models import STATUS_DONE, STATUS_IN_PROGRESS, STATUS_TODO

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

PALETTE_KEYS = ('TASK_CLI_PRIMARY', 'TASK_CLI_TODO', 'TASK_CLI_INPROGRESS', 'TASK_CLI_DONE')

def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m" if _ENABLE else ''

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    idx = 16 + 36 * r6 + 6 * g6 + b6
    return f"\033[38;5;{idx}m"

def _from_hex(hex_code: str) -> str:
    """Convert a hex color code to an ANSI escape sequence."""
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return f"\033[38;2;{r};{g};{b}m"
    return _fg_256(r, g, b)

def normalize_hex(value: str) -> Optional[str]:
    """Return '#rrggbb' for a valid 6-digit hex value (with or without '#'), else None."""
    h = value.strip().lstrip('#')
    if len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h):
        return '#' + h
    return None

def read_env_file(path: Path) -> Dict[str, str]:
    """Collect palette overrides from a KEY=VALUE file; unknown keys and bad values are skipped."""
    overrides: Dict[str, str] = {}
    if not path.exists():
        return overrides
    for line in path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        if k in PALETTE_KEYS:
            h = normalize_hex(v)
            if h:
                overrides[k] = h
    return overrides

def resolve_hex(key: str, default: str, environ: Mapping[str, str], overrides: Mapping[str, str]) -> str:
    """Priority: real env var > .env override > default."""
    from_env = normalize_hex(environ.get(key, ''))
    return from_env or overrides.get(key, default)

RESET = _code('0')
BOLD = _code('1')

# Default palette
HEX_PRIMARY_DEFAULT = '#476EAE'
HEX_TODO_DEFAULT = '#48B3AF'
HEX_DONE_DEFAULT = '#A7E399'
HEX_INPROGRESS_DEFAULT = '#F6FF99'

try:
    _ENV_OVERRIDES = read_env_file(Path.cwd() / '.env')
except (OSError, UnicodeDecodeError):
    _ENV_OVERRIDES = {}  # unreadable .env only loses the palette overrides

HEX_PRIMARY = resolve_hex('TASK_CLI_PRIMARY', HEX_PRIMARY_DEFAULT, os.environ, _ENV_OVERRIDES)
HEX_TODO = resolve_hex('TASK_CLI_TODO', HEX_TODO_DEFAULT, os.environ, _ENV_OVERRIDES)
HEX_INPROGRESS = resolve_hex('TASK_CLI_INPROGRESS', HEX_INPROGRESS_DEFAULT, os.environ, _ENV_OVERRIDES)
HEX_DONE = resolve_hex('TASK_CLI_DONE', HEX_DONE_DEFAULT, os.environ, _ENV_OVERRIDES)

PRIMARY = _from_hex(HEX_PRIMARY)

STATUS_COLOR = {
    STATUS_TODO: _from_hex(HEX_TODO),
    STATUS_IN_PROGRESS: _from_hex(HEX_INPROGRESS),
    STATUS_DONE: _from_hex(HEX_DONE),
}

ID_COLOR = PRIMARY + BOLD  # emphasize IDs with bold primary

def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE or not any(styles):
        return text
    return ''.join(styles) + text + RESET

__all__ = [
    'color','normalize_hex','read_env_file','resolve_hex','RESET','BOLD',
    'STATUS_COLOR','ID_COLOR',
]
