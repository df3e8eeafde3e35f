from __future__ import annotations

import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from .errors import FormatDriftError

# Numeric prefix plus an optional unit suffix; the suffix is validated separately
_MAGNITUDE_RE = re.compile(r"^([0-9]+(?:\.[0-9]+)?)([A-Za-z].*)?$")
_SCALE = {"": 1, "K": 1, "M": 1000}


def parse_magnitude(text: Any) -> int:
    """Convert a compact traffic figure ("80.4M", "500K") to thousands.

    Text outside the grammar counts as no measurable traffic and yields 0.
    A numeric value with any other unit suffix ("3Q", "12KB") raises
    FormatDriftError so that a change in the upstream format is not
    silently mis-scaled.
    """
    if not text or not isinstance(text, str):
        return 0
    cleaned = re.sub(r"[,\s]", "", text.strip())
    m = _MAGNITUDE_RE.match(cleaned)
    if not m:
        return 0
    unit = (m.group(2) or "").upper()
    scale = _SCALE.get(unit)
    if scale is None:
        raise FormatDriftError(f"unknown magnitude unit: {m.group(2)!r} in {text!r}")
    value = Decimal(m.group(1)) * scale
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))
