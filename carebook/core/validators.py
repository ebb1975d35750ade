"""Shared validation helpers."""
from __future__ import annotations

import re
from typing import Any, Optional

HEX_COLOR_RE = re.compile(r"^#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")


def is_hex_color(value: Any) -> bool:
    """True for "#RRGGBB" or "#RGB"."""
    return isinstance(value, str) and HEX_COLOR_RE.match(value) is not None


def hex_color_or_default(value: Optional[str], default: str = "#1890FF") -> str:
    """Return value when it is a valid hex color, otherwise default."""
    return value if is_hex_color(value) else default
