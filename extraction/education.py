from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from extraction.dom import Node
from extraction.page import PageContext
from extraction.text_normalizer import normalize, split_lines


logger = logging.getLogger(__name__)

ENTITY_SELECTOR = '[data-view-name="profile-component-entity"], li.artdeco-list__item, .pvs-entity'
SCHOOL_SELECTOR = 'a span[aria-hidden="true"], .t-bold span[aria-hidden="true"], a.optional-action-target-wrapper span'
DEGREE_SPAN_SELECTOR = 'span.t-14.t-normal span[aria-hidden="true"]'
DATE_SPAN_SELECTOR = 'span.t-14.t-normal.t-black--light span[aria-hidden="true"], span.pvs-entity__caption-wrapper'

_DEGREE_SPAN_RE = re.compile(
    r"bachelor|master|b\.?e\b|b\.?tech|m\.?tech|m\.?e\b|engineering|diploma|mba|mca|bca|b\.?sc|m\.?sc",
    re.IGNORECASE,
)
_DEGREE_LINE_RE = re.compile(
    r"bachelor|master|b\.?tech|b\.?e\b|m\.?tech|m\.?e\b|b\.?sc|m\.?sc|mba|mca|bca|ph\.?d|diploma"
    r"|b\.?com|m\.?com|b\.?a\b|m\.?a\b|engineering|intermediate",
    re.IGNORECASE,
)

_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?"
_YEAR = r"(?<!\d)(?:19|20)\d{2}(?!\d)"
_YEAR_RE = re.compile(_YEAR)
# "2017 - 2021", "Jun 2017 – May 2021"
_YEAR_RANGE_RE = re.compile(
    rf"({_YEAR})\s*[-–]\s*(?:{_MONTH}\s+)?({_YEAR})",
    re.IGNORECASE,
)

_QUAL_AFTER_HYPHEN_RE = re.compile(
    r"[-–]\s*(B\.?E\.?|B\.?Tech|M\.?Tech|M\.?E\.?|MBA|MCA|BCA|B\.?Sc|M\.?Sc|B\.?Com|M\.?Com|BA|MA|Ph\.?D|BBA|Diploma)\b",
    re.IGNORECASE,
)
_QUAL_STANDALONE_RE = re.compile(
    r"\b(B\.?E\.?|B\.?Tech|B\.?Sc|M\.?Tech|M\.?E\.?|M\.?Sc|MBA|MCA|BCA|Ph\.?D|B\.?Com|M\.?Com|BA|MA"
    r"|B\.?Arch|LLB|LLM|MBBS|MD|BBA|Intermediate|Diploma)\b",
    re.IGNORECASE,
)
_BACHELOR_INFERENCE = (
    ("engineering", "BE"),
    ("technology", "BTECH"),
    ("science", "BSC"),
    ("commerce", "BCOM"),
    ("arts", "BA"),
)
_MASTER_INFERENCE = (
    ("engineering", "ME"),
    ("technology", "MTECH"),
    ("science", "MSC"),
    ("business", "MBA"),
)


@dataclass(frozen=True)
class EducationEntry:
    school: str = ""
    degree: str = ""
    qualification_code: str = ""
    passout_year: str = ""


def locate_education_section(page: PageContext) -> Optional[Node]:
    document = page.document
    anchor = document.query_selector("#education")
    section = anchor.closest("section") if anchor is not None else None
    if section is not None:
        return section
    for candidate in document.query_selector_all("section"):
        if re.search(r"education", candidate.text_content or "", re.IGNORECASE):
            return candidate
    return None


def passout_year_from_text(text: Optional[str]) -> str:
    """Later year of a range, else the first standalone 4-digit year."""
    if not text:
        return ""
    match = _YEAR_RANGE_RE.search(text)
    if match:
        return match.group(2)
    match = _YEAR_RE.search(text)
    return match.group(0) if match else ""


def _passout_year(entity: Node, lines: List[str]) -> str:
    for span in entity.query_selector_all(DATE_SPAN_SELECTOR):
        year = passout_year_from_text(normalize(span.inner_text))
        if year:
            return year

    # Ranges win over single years anywhere in the entry
    for line in lines:
        match = _YEAR_RANGE_RE.search(line)
        if match:
            return match.group(2)
    for line in lines:
        match = _YEAR_RE.search(line)
        if match:
            return match.group(0)
    return ""


def qualification_code(degree: Optional[str]) -> str:
    """Short qualification code ("BE", "MBA") from free degree text."""
    text = degree or ""
    match = _QUAL_AFTER_HYPHEN_RE.search(text) or _QUAL_STANDALONE_RE.search(text)
    if match:
        return match.group(1).replace(".", "").upper()

    lowered = text.lower()
    if "bachelor" in lowered:
        table = _BACHELOR_INFERENCE
    elif "master" in lowered:
        table = _MASTER_INFERENCE
    else:
        return ""
    for keyword, code in table:
        if keyword in lowered:
            return code
    return ""


def extract_latest_education(page: PageContext) -> EducationEntry:
    section = locate_education_section(page)
    if section is None:
        return EducationEntry()
    entity = section.query_selector(ENTITY_SELECTOR)
    if entity is None:
        return EducationEntry()

    school_el = entity.query_selector(SCHOOL_SELECTOR)
    school = normalize(school_el.text_content) if school_el is not None else ""

    degree = ""
    for span in entity.query_selector_all(DEGREE_SPAN_SELECTOR):
        text = normalize(span.text_content)
        if _DEGREE_SPAN_RE.search(text):
            degree = text
            break

    lines = split_lines(entity.inner_text)
    if not school and lines:
        school = lines[0]
    if not degree:
        degree = next((line for line in lines if _DEGREE_LINE_RE.search(line) and line != school), "")
        if not degree and len(lines) > 1:
            degree = lines[1]

    entry = EducationEntry(
        school=school,
        degree=degree,
        qualification_code=qualification_code(degree),
        passout_year=_passout_year(entity, lines),
    )
    logger.debug(f"Education resolved: {entry}")
    return entry
