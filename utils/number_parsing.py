from __future__ import annotations

import re
from typing import Optional

_SHORTHAND_RE = re.compile(r"^([0-9]+(?:\.[0-9]+)?)([KMB]?)$")
_FACTORS = {"": 1, "K": 1_000, "M": 1_000_000, "B": 1_000_000_000}


def parse_count(value) -> Optional[int]:
    """Parse count text like '1.2K', '3M', '1,204', '500+' into an integer.

    Returns None for unparsable inputs.
    """
    if value is None:
        return None
    s = str(value).strip().upper().replace(" ", "").replace(",", "")
    if s.endswith("+"):
        s = s[:-1]
    if not s:
        return None
    m = _SHORTHAND_RE.match(s)
    if m:
        return int(round(float(m.group(1)) * _FACTORS[m.group(2)]))
    digits = "".join(ch for ch in s if ch.isdigit())
    return int(digits) if digits else None
