"""Top-card field extractors: name, headline, location, company, skills, industry, connections.

Every extractor walks an ordered selector cascade (most specific layout first,
page metadata last) and keeps the first text that passes a field-specific
check. Source pages change markup often, so an empty result is a normal
outcome rather than an error.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Iterable, List, Optional, Sequence

from extraction.dom import Document, Node
from extraction.text_normalizer import first_sentence, is_noise, normalize


logger = logging.getLogger(__name__)

UNKNOWN_CANDIDATE = "Unknown Candidate"

NAME_SELECTORS: Sequence[str] = (
    # Top card headings
    "h1.text-heading-xlarge",
    "div.pv-text-details__left-panel h1",
    "h1.profile-topcard__name",
    "h1.t-24",
    ".artdeco-entity-lockup__title",
    "[data-test-profile-name]",
    ".ph5 h1",
    # Details page layouts
    ".pv-top-card h1",
    ".scaffold-layout__detail h1",
    ".artdeco-card h1",
    ".scaffold-layout__detail .artdeco-entity-lockup__title span",
    ".pv-profile-card__anchor span.t-bold",
    ".scaffold-layout__detail header h1",
    '[class*="profile-card"] h3',
    # Recruiter layouts
    ".profile-topcard__title",
    "span.pv-entity__subtitle",
    "span.text-heading-medium",
    ".profile-title",
    ".profile-name",
)
NAME_LINK_SELECTOR = 'a[href*="/in/"] span.t-bold, .scaffold-layout__detail a span.t-bold'
NAME_EXCLUDE = (r"linkedin|experience|education|skills|company|pending|message|follow|endorsement",)
NAME_LINK_EXCLUDE = (r"linkedin|experience|education",)
_TITLE_PREFIX_RE = re.compile(r"^([^|–\-()]+)")
_SITE_TITLE_RE = re.compile(r"^(\(\d+\)\s*)?linkedin$", re.IGNORECASE)
_DESCRIPTION_NAME_RE = re.compile(r"^([^|–\-]+?)\s+(?:is|at|works|current)\b", re.IGNORECASE)

HEADLINE_SELECTORS: Sequence[str] = (
    ".text-body-medium.break-words",
    ".pv-text-details__left-panel .text-body-medium",
    "[data-test-profile-headline]",
    ".artdeco-entity-lockup__subtitle",
    ".pv-top-card .text-body-medium",
    ".pv-text-details__headline",
    ".profile-topcard__headline",
    "span.text-body-medium",
    ".headline",
    '[class*="headline"]',
    '.pvs-entity__headline span[aria-hidden="true"]',
    ".profile-card-headline",
)
HEADLINE_EXCLUDE = (r"\b(?:message|follow|more|endorsements?|connections?|save|report|view)\b",)

LOCATION_SELECTORS: Sequence[str] = (
    "span.text-body-small.inline.t-black--light.break-words",
    ".pv-text-details__left-panel .text-body-small:not(.break-words)",
    "[data-test-profile-location]",
    ".pv-top-card .text-body-small",
    ".profile-topcard__location",
    ".artdeco-entity-lockup__caption",
    ".profile-location",
    '[class*="location"]',
    ".pv-text-details__left-panel span.text-body-small",
)
LOCATION_EXCLUDE = (r"[·•]", r"\b(?:followers?|connections?|following|save|message|more)\b")

COMPANY_SELECTORS: Sequence[str] = (
    ".profile-topcard__company-link",
    "[data-test-profile-company]",
    ".pv-top-card--experience-list-item .t-14",
    'a[href*="company"] span[aria-hidden="true"]',
)
COMPANY_EXCLUDE = (r"full[- ]?time|part[- ]?time|contract|intern",)

SKILL_SELECTORS: Sequence[str] = (
    '[data-test-profile-skill-item] span[aria-hidden="true"]',
    ".pv-skill-category-entity__name",
    "[data-test-skill]",
)
SKILL_SECTION_SELECTORS: Sequence[str] = (
    '.pvs-entity__title span[aria-hidden="true"]',
    ".artdeco-list__item .artdeco-entity-lockup__title",
    '.pv-skill span[aria-hidden="true"]',
)
SKILL_ALT_SELECTORS: Sequence[str] = ('[class*="skill-item"]', ".skill-badge", "span.skill-text")
SKILL_EXCLUDE = (r"endorse|pending|remove", r"^skills?$", r"^show all")

INDUSTRY_SELECTORS: Sequence[str] = (
    "[data-test-profile-industry]",
    ".pv-about-section .text-body-small",
    ".profile-industry",
    'span[aria-label*="industry"]',
    '[class*="industry"]',
)
INDUSTRY_EXCLUDE = (r"industry|profile|about",)
_INDUSTRY_FROM_HEADLINE_RE = re.compile(r"\b(?:in|at|with)\s+([A-Za-z][A-Za-z\s&]*)", re.IGNORECASE)

_COUNT_TOKEN = r"(\d+(?:[.,]\d+)?\s?[KM]\b|\d{1,3}(?:,\d{3})+\+?|\d+\+?)"
_CONNECTIONS_RE = re.compile(_COUNT_TOKEN + r"\s*connections?\b", re.IGNORECASE)
_FOLLOWERS_RE = re.compile(_COUNT_TOKEN + r"\s*followers?\b", re.IGNORECASE)
_BARE_COUNT_RE = re.compile(_COUNT_TOKEN, re.IGNORECASE)


def first_matching_text(
    root: Node,
    selectors: Iterable[str],
    accept: Callable[[str], bool],
) -> str:
    """Walk selectors in priority order; return the first element text that passes ``accept``."""
    for selector in selectors:
        el = root.query_selector(selector)
        if el is None:
            continue
        text = normalize(el.text_content)
        if text and accept(text):
            return text
    return ""


def first_accepted(candidates: Iterable[Callable[[], str]], accept: Callable[[str], bool]) -> str:
    """Evaluate lazy candidate producers in order; return the first accepted value."""
    for produce in candidates:
        value = normalize(produce())
        if value and accept(value):
            return value
    return ""


def _json_ld_objects(document: Document) -> List[dict]:
    objects: List[dict] = []
    for block in document.json_ld_blocks():
        try:
            data: Any = json.loads(block)
        except ValueError:
            continue
        stack = data if isinstance(data, list) else [data]
        for item in stack:
            if not isinstance(item, dict):
                continue
            objects.append(item)
            graph = item.get("@graph")
            if isinstance(graph, list):
                objects.extend(g for g in graph if isinstance(g, dict))
    return objects


def _json_ld_person(document: Document) -> Optional[dict]:
    for obj in _json_ld_objects(document):
        kind = obj.get("@type")
        if kind == "Person" or (isinstance(kind, list) and "Person" in kind):
            return obj
    return None


def _title_prefix(value: str) -> str:
    match = _TITLE_PREFIX_RE.match(value or "")
    return match.group(1).strip() if match else ""


def extract_full_name(document: Document) -> str:
    """Candidate name, or ``UNKNOWN_CANDIDATE`` when every strategy fails."""
    name = first_matching_text(
        document,
        NAME_SELECTORS,
        lambda t: len(t) > 1 and not is_noise(t, NAME_EXCLUDE),
    )
    if name:
        return name

    for link in document.query_selector_all(NAME_LINK_SELECTOR):
        text = normalize(link.text_content)
        if len(text) > 1 and not is_noise(text, NAME_LINK_EXCLUDE):
            return text

    def _person_name() -> str:
        person = _json_ld_person(document)
        return str(person.get("name") or "") if person else ""

    def _not_site_title(text: str) -> bool:
        return len(text) > 1 and not _SITE_TITLE_RE.match(text)

    name = first_accepted(
        [
            _person_name,
            lambda: _title_prefix(document.meta_property("og:title")),
            lambda: _title_prefix(document.meta_property("twitter:title")),
        ],
        _not_site_title,
    )
    if name:
        return name

    name = first_accepted(
        [lambda: _title_prefix(document.title)],
        lambda t: _not_site_title(t) and "linkedin" not in t.lower(),
    )
    if name:
        return name

    match = _DESCRIPTION_NAME_RE.match(document.meta_name("description"))
    if match and match.group(1).strip():
        return normalize(match.group(1))

    return UNKNOWN_CANDIDATE


def extract_headline(document: Document) -> str:
    headline = first_matching_text(
        document,
        HEADLINE_SELECTORS,
        lambda t: len(t) > 3 and not is_noise(t, HEADLINE_EXCLUDE),
    )
    if headline:
        return headline

    og_description = document.meta_property("og:description")
    if og_description and not is_noise(og_description, (r"view", r"profile")):
        sentence = first_sentence(og_description)
        if len(sentence) > 3:
            return sentence

    twitter_description = document.meta_property("twitter:description")
    if twitter_description and not is_noise(twitter_description, (r"profile",)):
        sentence = first_sentence(twitter_description)
        if len(sentence) > 3:
            return sentence

    sentence = first_sentence(document.meta_name("description"))
    if len(sentence) > 3 and not is_noise(sentence, (r"view", r"profile")):
        return sentence
    return ""


def extract_location(document: Document) -> str:
    location = first_matching_text(
        document,
        LOCATION_SELECTORS,
        lambda t: len(t) > 2 and not is_noise(t, LOCATION_EXCLUDE),
    )
    if location:
        return location

    person = _json_ld_person(document)
    if person:
        address = person.get("address")
        if isinstance(address, dict) and address.get("addressLocality"):
            return normalize(str(address["addressLocality"]))
        area = person.get("areaServed")
        if isinstance(area, str):
            return normalize(area)
    return ""


def extract_current_company(document: Document) -> str:
    """Company shown on the top card; fallback for the experience-based designation."""
    return first_matching_text(
        document,
        COMPANY_SELECTORS,
        lambda t: len(t) > 2 and not is_noise(t, COMPANY_EXCLUDE),
    )


def _skills_section(document: Document) -> Optional[Node]:
    anchor = document.query_selector("#skills")
    if anchor is not None:
        return anchor.closest("section") or anchor
    for section in document.query_selector_all("section"):
        header = section.query_selector("h2")
        if header is not None and re.search(r"skills", header.text_content, re.IGNORECASE):
            return section
    return None


def extract_top_skills(document: Document, limit: int = 5) -> List[str]:
    """Up to ``limit`` distinct skill labels in discovery order."""
    section = _skills_section(document)
    selectors = list(SKILL_SELECTORS)
    if section is not None:
        selectors.extend(SKILL_SECTION_SELECTORS)
    root: Node = section if section is not None else document.body

    skills: List[str] = []
    for selector in selectors + list(SKILL_ALT_SELECTORS):
        for el in root.query_selector_all(selector):
            if len(skills) >= limit:
                return skills
            text = normalize(el.text_content)
            if len(text) > 1 and text not in skills and not is_noise(text, SKILL_EXCLUDE):
                skills.append(text)
    return skills[:limit]


def extract_industry(document: Document) -> str:
    industry = first_matching_text(
        document,
        INDUSTRY_SELECTORS,
        lambda t: len(t) > 2 and not is_noise(t, INDUSTRY_EXCLUDE),
    )
    if industry:
        return industry

    headline_el = document.query_selector("[data-test-profile-headline]")
    headline = normalize(headline_el.text_content) if headline_el is not None else ""
    match = _INDUSTRY_FROM_HEADLINE_RE.search(headline)
    if match:
        value = re.sub(r"\s+(?:industry|field)$", "", match.group(1).strip(), flags=re.IGNORECASE)
        return normalize(value)
    return ""


def _compact(count: str) -> str:
    return re.sub(r"\s+", "", count)


def extract_connection_count(document: Document) -> str:
    """Raw connection count text such as "500+", "1,204" or "1.2K"."""
    el = document.query_selector("[data-test-profile-connection-count]")
    if el is not None:
        match = _BARE_COUNT_RE.search(el.text_content or "")
        if match:
            return _compact(match.group(1))

    visible = document.body.inner_text
    for pattern in (_CONNECTIONS_RE, _FOLLOWERS_RE):
        match = pattern.search(visible)
        if match:
            return _compact(match.group(1))
    return ""
