"""Experience section: latest entry's company/title, current role duration, total experience.

An *entry* is one employer block. Employers where the candidate held several
positions render those positions as nested *roles* under the entry, usually
with a rolled-up duration on the entry header ("Full-time · 4 yrs 2 mos").
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple

from extraction.dom import Node
from extraction.durations import Duration, first_duration_match, format_duration, parse_duration
from extraction.page import PageContext
from extraction.text_normalizer import (
    COMPANY_SUFFIXES,
    DURATION_TEXT,
    EMPLOYMENT_TYPES,
    is_noise,
    normalize,
    split_lines,
)


logger = logging.getLogger(__name__)

ENTRY_SELECTORS: Sequence[str] = (
    '[data-view-name="profile-component-entity"]',
    ".pvs-list__paged-list-item .pvs-entity",
    "li.artdeco-list__item",
    ".pvs-entity",
    ".pvs-list > li, ul > li.pvs-list__item--line-separated",
)
TOP_LEVEL_ITEM_SELECTORS: Sequence[str] = (
    ":scope > div > ul > li.artdeco-list__item",
    ".pvs-list__paged-list-item",
    "li.artdeco-list__item",
    ".pvs-list > li, ul > li.pvs-list__item--line-separated",
)
SUB_COMPONENTS_SELECTOR = ".pvs-entity__sub-components"
NESTED_ROLE_SELECTOR = ".pvs-entity__sub-components .pvs-entity, .pvs-list__paged-list-item .pvs-entity"
CAPTION_SELECTOR = '.pvs-entity__caption-wrapper, span.t-14.t-normal.t-black--light span[aria-hidden="true"]'

TITLE_SELECTOR = '.pvs-entity__title span[aria-hidden="true"]'
ROLE_TITLE_SELECTOR = '.pvs-entity__position-group-role-item__title span[aria-hidden="true"]'
SUBTITLE_SELECTOR = ".pvs-entity__subtitle"
SUBTITLE_COMPANY_LINK_SELECTOR = '.pvs-entity__subtitle a[href*="company"] span[aria-hidden="true"]'

PRESENT_MARKER = re.compile(r"present", re.IGNORECASE)
COMPANY_SKIP_WORDS = re.compile(r"^(?:at|location)$", re.IGNORECASE)
DATE_TEXT = (r"present", r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\b", r"\d{4}")
LINE_BAD_WORDS = (r"present|location|remote|hybrid|on-site|onsite",)
ROLE_KEYWORDS = (r"engineer|manager|lead|director|architect|developer|designer|analyst|consultant|specialist|head|officer",)
_SUBTITLE_SPLIT_RE = re.compile(r"\s*[•·]\s*|\s+-\s+")

# Employment-type tags, not title words: the token has to touch a separator on
# the same line, or follow an explicit "Employment type:" label.
_INTERNSHIP_MARKER_RE = re.compile(
    r"\bintern(?:ship)?[ \t]*[·•|\-]|[·•|\-][ \t]*intern(?:ship)?\b|\bemployment type:[ \t]*intern(?:ship)?\b",
    re.IGNORECASE,
)
_PART_TIME_MARKER_RE = re.compile(
    r"\bpart[- ]?time[ \t]*[·•|\-]|[·•|][ \t]*part[- ]?time\b|\bemployment type:[ \t]*part[- ]?time\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class LatestExperience:
    title: str = ""
    company: str = ""
    current_role_duration: str = ""
    total_experience: str = ""


def locate_experience_section(page: PageContext) -> Optional[Node]:
    document = page.document
    if page.is_experience_details:
        # On the details page the main content area is the whole section
        section = document.query_selector(".scaffold-layout__main, main, .pvs-list__container")
        if section is None:
            section = document.query_selector('[class*="scaffold"]') or document.body
        return section

    anchor = document.query_selector("#experience")
    section = anchor.closest("section") if anchor is not None else None
    if section is not None:
        return section
    for candidate in document.query_selector_all("section"):
        header = candidate.query_selector("h2, .pvs-header__title")
        if header is not None and re.search(r"experience", header.text_content or "", re.IGNORECASE):
            return candidate
    return None


def first_entry(section: Node) -> Optional[Node]:
    for selector in ENTRY_SELECTORS:
        entry = section.query_selector(selector)
        if entry is not None:
            return entry
    return None


def nested_roles(entry: Node) -> List[Node]:
    return entry.query_selector_all(NESTED_ROLE_SELECTOR)


def _duration_text(text: str) -> str:
    parsed = parse_duration(text)
    return format_duration(parsed.years, parsed.months) if parsed else ""


def extract_duration_from_entity(entity: Node) -> str:
    """Canonical duration of one entity: caption wrappers first, then visible lines."""
    for wrapper in entity.query_selector_all(CAPTION_SELECTOR):
        found = _duration_text(normalize(wrapper.inner_text))
        if found:
            return found
    for line in split_lines(entity.inner_text):
        found = _duration_text(line)
        if found:
            return found
    return ""


def current_role(entry: Node) -> Optional[Node]:
    """For a multi-role entry: the first role marked "Present", else the first role."""
    roles = nested_roles(entry)
    if not roles:
        return None
    for role in roles:
        if PRESENT_MARKER.search(role.inner_text):
            return role
    return roles[0]


def extract_current_role_duration(entry: Node) -> str:
    role = current_role(entry)
    return extract_duration_from_entity(role if role is not None else entry)


def _valid_company(text: str) -> bool:
    return (
        len(text) > 1
        and not is_noise(text, EMPLOYMENT_TYPES)
        and not is_noise(text, DURATION_TEXT)
        and not COMPANY_SKIP_WORDS.match(text)
    )


def extract_company_from_entity(entry: Node) -> str:
    """Company of an entry; never an employment type or a duration."""
    # Multi-role employers carry the company name as the entry header
    if nested_roles(entry):
        header = normalize(entry.inner_text_excluding(SUB_COMPONENTS_SELECTOR))
        header_title = entry.query_selector(TITLE_SELECTOR)
        if header_title is not None and header:
            text = normalize(header_title.text_content)
            if text and text in header and _valid_company(text):
                return text

    link = entry.query_selector(SUBTITLE_COMPANY_LINK_SELECTOR)
    if link is not None:
        text = normalize(link.text_content)
        if _valid_company(text):
            return text

    subtitle = entry.query_selector(SUBTITLE_SELECTOR)
    if subtitle is None:
        return ""
    for part in _SUBTITLE_SPLIT_RE.split(normalize(subtitle.inner_text)):
        part = part.strip()
        if part and _valid_company(part):
            return part

    for span in subtitle.query_selector_all('span[aria-hidden="true"]'):
        text = normalize(span.text_content)
        if _valid_company(text) and not is_noise(text, DATE_TEXT):
            return text
    return ""


def _valid_title(text: Optional[str], company_hint: str) -> bool:
    cleaned = normalize(text)
    if not cleaned:
        return False
    if is_noise(cleaned, EMPLOYMENT_TYPES) or is_noise(cleaned, DURATION_TEXT):
        return False
    if is_noise(cleaned, COMPANY_SUFFIXES):
        return False
    if company_hint and cleaned.lower() == normalize(company_hint).lower():
        return False
    return True


def _title_from_lines(entry: Node, company_hint: str) -> str:
    company = normalize(company_hint).lower()
    for line in split_lines(entry.inner_text):
        if company and line.lower() == company:
            continue
        if is_noise(line, EMPLOYMENT_TYPES) or is_noise(line, DURATION_TEXT) or is_noise(line, LINE_BAD_WORDS):
            continue
        if re.search(r"\b\d{4}\b", line):
            continue
        if is_noise(line, ROLE_KEYWORDS):
            return line
        if not is_noise(line, (r"company|education",)):
            return line
    return ""


def extract_title_from_entity(entry: Node, company_hint: Optional[str] = None) -> str:
    """Job title of an entry; never equal to the entry's company."""
    company = company_hint if company_hint is not None else extract_company_from_entity(entry)

    role = current_role(entry)
    candidates: List[Optional[Node]] = []
    if role is not None:
        candidates.append(role.query_selector(TITLE_SELECTOR))
    candidates.extend([
        entry.query_selector(TITLE_SELECTOR),
        entry.query_selector(ROLE_TITLE_SELECTOR),
        entry.query_selector(".t-bold"),
        entry.query_selector("h3, h4"),
    ])
    for el in candidates:
        if el is not None and _valid_title(el.text_content, company):
            return normalize(el.text_content)
    return _title_from_lines(entry, company)


def is_internship_or_part_time(text: str) -> bool:
    return bool(_INTERNSHIP_MARKER_RE.search(text or "") or _PART_TIME_MARKER_RE.search(text or ""))


def top_level_entries(section: Node) -> List[Node]:
    """Top-level entry items; list items nested inside another item are dropped."""
    items: List[Node] = []
    for selector in TOP_LEVEL_ITEM_SELECTORS:
        items = section.query_selector_all(selector)
        if items:
            break
    return [item for item in items if not any(item.has_ancestor(other) for other in items if other != item)]


def _contribution_texts(entry: Node) -> List[str]:
    """Texts whose first duration match counts for this entry.

    A rollup on the entry header counts once. Without a rollup, each nested
    role counts once. A plain entry counts its own first match.
    """
    roles = entry.query_selector_all(f"{SUB_COMPONENTS_SELECTOR} .pvs-entity")
    if roles:
        header = entry.inner_text_excluding(SUB_COMPONENTS_SELECTOR)
        if first_duration_match(header) is None:
            return [role.inner_text for role in roles]
    return [entry.inner_text]


def calculate_total_experience(section: Optional[Node]) -> str:
    """Sum of entry durations (internship/part-time excluded) as a canonical string."""
    if section is None:
        return ""
    total = Duration()
    seen: Set[Tuple[int, int, int, str]] = set()
    entries = top_level_entries(section)
    logger.debug(f"Found {len(entries)} top-level experience entries")

    for entry in entries:
        entry_text = entry.inner_text
        if is_internship_or_part_time(entry_text):
            logger.debug(f"Skipping internship/part-time entry: {entry_text[:50]!r}")
            continue
        for text in _contribution_texts(entry):
            if is_internship_or_part_time(text):
                continue
            match = first_duration_match(text)
            if match is None:
                continue
            key = (match.duration.years, match.duration.months, match.position, text)
            if key in seen:
                continue
            seen.add(key)
            total = total + match.duration

    return format_duration(total.years, total.months) if total.total_months else ""


def extract_latest_experience(page: PageContext) -> LatestExperience:
    section = locate_experience_section(page)
    if section is None:
        logger.debug("Could not find experience section")
        return LatestExperience()
    entry = first_entry(section)
    if entry is None:
        logger.debug("Could not find any experience entry")
        return LatestExperience()

    company = extract_company_from_entity(entry)
    title = extract_title_from_entity(entry, company_hint=company)
    return LatestExperience(
        title=title,
        company=company,
        current_role_duration=extract_current_role_duration(entry),
        total_experience=calculate_total_experience(section),
    )
