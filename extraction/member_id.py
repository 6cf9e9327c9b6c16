from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional
from urllib.parse import parse_qs, urlparse

from extraction.page import PageContext


logger = logging.getLogger(__name__)

_PATH_PATTERNS = [
    re.compile(r"linkedin\.com/talent/profile/([^/?#]+)", re.IGNORECASE),
    re.compile(r"linkedin\.com/recruiter/profile/([^/?#]+)", re.IGNORECASE),
    re.compile(r"linkedin\.com/in/([^/?#]+)", re.IGNORECASE),
]
_MEMBER_URN_RE = re.compile(r"urn:li:member:(\d+)")
_PROFILE_ROOT_RE = re.compile(r"(https?://[^/]+/in/[^/]+)", re.IGNORECASE)


def _from_query(page: PageContext) -> Optional[str]:
    values = parse_qs(urlparse(page.url or "").query).get("profileId")
    return values[0] if values and values[0] else None


def _from_path(page: PageContext) -> Optional[str]:
    for pattern in _PATH_PATTERNS:
        match = pattern.search(page.url or "")
        if match and match.group(1):
            return match.group(1)
    return None


def _from_data_attribute(page: PageContext) -> Optional[str]:
    el = page.document.query_selector("[data-member-id]")
    value = el.get_attribute("data-member-id") if el is not None else None
    return value.strip() if value and value.strip() else None


def _from_meta(page: PageContext) -> Optional[str]:
    return page.document.meta_property("profile:id") or None


def _from_embedded_urn(page: PageContext) -> Optional[str]:
    match = _MEMBER_URN_RE.search(page.document.source or "")
    return match.group(1) if match else None


_STRATEGIES: List[Callable[[PageContext], Optional[str]]] = [
    _from_query,
    _from_path,
    _from_data_attribute,
    _from_meta,
    _from_embedded_urn,
]


def resolve_member_id(page: PageContext) -> Optional[str]:
    """Stable candidate identifier for the page, or None when nothing matches.

    Order: ``profileId`` query parameter, known profile URL shapes, the
    ``data-member-id`` attribute, the ``profile:id`` meta tag, and finally an
    embedded ``urn:li:member:<digits>`` marker in the page source.
    """
    for strategy in _STRATEGIES:
        try:
            member_id = strategy(page)
        except ValueError as e:
            logger.debug(f"Member id strategy {strategy.__name__} failed: {e}")
            continue
        if member_id:
            return member_id
    logger.info("Could not resolve member id", extra={"step": "resolve_member_id", "status": "miss"})
    return None


def canonical_profile_url(url: Optional[str]) -> str:
    """Drop query/fragment and any sub-page suffix after /in/{slug}."""
    if not url:
        return ""
    base = url.split("?", 1)[0].split("#", 1)[0]
    match = _PROFILE_ROOT_RE.search(base)
    if match:
        return match.group(1) + "/"
    return base
