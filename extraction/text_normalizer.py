from __future__ import annotations

import re
from typing import Iterable, Optional, Pattern, Union


PatternLike = Union[str, Pattern[str]]

_WHITESPACE_RE = re.compile(r"[\s\u00a0\u200b]+")
_SENTENCE_END_RE = re.compile(r"[.!?]")

# Navigation/button words that show up next to profile fields
NAVIGATION_NOISE: tuple[str, ...] = (
    r"\bmessage\b",
    r"\bfollow(?:ing|ers?)?\b",
    r"\bendorse(?:ments?|d)?\b",
    r"\bconnections?\b",
    r"\bpending\b",
    r"\bsave\b",
    r"\breport\b",
    r"\bmore\b",
    r"\bview\b",
)

EMPLOYMENT_TYPES: tuple[str, ...] = (
    r"full[- ]?time",
    r"part[- ]?time",
    r"self[- ]?employed",
    r"\bcontract\b",
    r"\binternship\b",
    r"\bintern\b",
    r"\bfreelance\b",
    r"\btemporary\b",
    r"\bapprentice(?:ship)?\b",
    r"\btrainee\b",
)

DURATION_TEXT: tuple[str, ...] = (
    r"\d+\s*(?:yrs?|years?|mos?|months?)\b",
)

COMPANY_SUFFIXES: tuple[str, ...] = (
    r"private limited",
    r"\bpvt\b",
    r"\binc\b\.?",
    r"\bllc\b",
    r"\bllp\b",
    r"\bltd\b",
)


def normalize(text: Optional[str]) -> str:
    """Collapse whitespace runs to a single space and trim both ends."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", str(text)).strip()


def _compile(pattern: PatternLike) -> Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern, re.IGNORECASE)
    return pattern


def is_noise(text: Optional[str], patterns: Iterable[PatternLike]) -> bool:
    """True when any pattern matches the text (case-insensitive for string patterns)."""
    if not text:
        return False
    for pattern in patterns:
        try:
            if _compile(pattern).search(text):
                return True
        except re.error:
            continue
    return False


def first_sentence(text: Optional[str]) -> str:
    cleaned = normalize(text)
    if not cleaned:
        return ""
    return _SENTENCE_END_RE.split(cleaned, maxsplit=1)[0].strip()


def split_lines(text: Optional[str]) -> list[str]:
    """Non-empty, normalized lines of a multi-line text block."""
    if not text:
        return []
    lines = (normalize(line) for line in str(text).split("\n"))
    return [line for line in lines if line]
