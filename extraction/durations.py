"""Duration phrases as shown on experience entries ("2 yrs 6 mos", "5 mos").

Parsing never raises: anything unrecognizable is simply "no match".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


_YEARS_RE = re.compile(r"(\d+)\s*y(?:ears?|rs?)\b", re.IGNORECASE)
_MONTHS_RE = re.compile(r"(\d+)\s*m(?:onths?|os?)\b", re.IGNORECASE)

# One combined occurrence: years with optional months, or months alone
_COMBINED_RE = re.compile(
    r"(\d+)\s*y(?:ears?|rs?)\b(?:\s*(\d+)\s*m(?:onths?|os?)\b)?|(\d+)\s*m(?:onths?|os?)\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Duration:
    years: int = 0
    months: int = 0

    @property
    def total_months(self) -> int:
        return self.years * 12 + self.months

    @classmethod
    def from_months(cls, total: int) -> "Duration":
        total = max(int(total), 0)
        return cls(years=total // 12, months=total % 12)

    def normalized(self) -> "Duration":
        return Duration.from_months(self.total_months)

    def __add__(self, other: "Duration") -> "Duration":
        return Duration.from_months(self.total_months + other.total_months)

    def __str__(self) -> str:
        return format_duration(self.years, self.months)


@dataclass(frozen=True)
class DurationMatch:
    duration: Duration
    position: int
    text: str


def parse_duration(text: Optional[str]) -> Optional[Duration]:
    """Parse the years and/or months components of a duration phrase."""
    if not text or not isinstance(text, str):
        return None
    years_match = _YEARS_RE.search(text)
    months_match = _MONTHS_RE.search(text)
    if not years_match and not months_match:
        return None
    years = int(years_match.group(1)) if years_match else 0
    months = int(months_match.group(1)) if months_match else 0
    return Duration(years=years, months=months)


def format_duration(years: int, months: int) -> str:
    """Canonical text: "{y} yr(s)", "{m} mo(s)" or both; empty when both are zero."""
    parts = []
    if years > 0:
        parts.append(f"{years} yr{'s' if years > 1 else ''}")
    if months > 0:
        parts.append(f"{months} mo{'s' if months > 1 else ''}")
    return " ".join(parts)


def first_duration_match(text: Optional[str]) -> Optional[DurationMatch]:
    """First duration occurrence in a block of text, with its character offset."""
    if not text or not isinstance(text, str):
        return None
    match = _COMBINED_RE.search(text)
    if not match:
        return None
    if match.group(1):
        years = int(match.group(1))
        months = int(match.group(2)) if match.group(2) else 0
    else:
        years = 0
        months = int(match.group(3))
    return DurationMatch(duration=Duration(years, months), position=match.start(), text=match.group(0))
