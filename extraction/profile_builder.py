"""Assemble a ``CandidateProfile`` from one page snapshot.

Each field extractor runs in isolation: a failing extractor is logged and its
field falls back to the empty default, so one markup change never costs the
whole record. Only a missing member id means "no record".
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, TypeVar

from extraction.education import EducationEntry, extract_latest_education
from extraction.experience import LatestExperience, extract_latest_experience
from extraction.fields import (
    UNKNOWN_CANDIDATE,
    extract_connection_count,
    extract_current_company,
    extract_full_name,
    extract_headline,
    extract_industry,
    extract_location,
    extract_top_skills,
)
from extraction.member_id import canonical_profile_url, resolve_member_id
from extraction.page import PageContext
from models import CandidateProfile, Education, ExperienceSummary


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _guarded(name: str, fn: Callable[[], T], default: T) -> T:
    try:
        return fn()
    except Exception as e:
        logger.warning(
            f"Extractor {name} failed: {e}",
            extra={"step": "extract", "status": "degraded", "error": type(e).__name__},
        )
        return default


def build_profile(
    page: PageContext,
    member_id: Optional[str] = None,
    *,
    max_top_skills: int = 5,
    now: Optional[datetime] = None,
) -> Optional[CandidateProfile]:
    """Run every extractor against ``page``; None when no member id can be resolved."""
    member_id = member_id or resolve_member_id(page)
    if not member_id:
        return None

    document = page.document
    experience: LatestExperience = _guarded("experience", lambda: extract_latest_experience(page), LatestExperience())
    education: EducationEntry = _guarded("education", lambda: extract_latest_education(page), EducationEntry())
    designation = experience.company or _guarded("current_company", lambda: extract_current_company(document), "")

    profile = CandidateProfile(
        member_id=member_id,
        full_name=_guarded("full_name", lambda: extract_full_name(document), UNKNOWN_CANDIDATE),
        profile_url=canonical_profile_url(page.url),
        headline=_guarded("headline", lambda: extract_headline(document), ""),
        location=_guarded("location", lambda: extract_location(document), ""),
        designation=designation,
        current_title=experience.title,
        industry=_guarded("industry", lambda: extract_industry(document), ""),
        education=Education(
            school=education.school,
            degree=education.degree,
            qualification_code=education.qualification_code,
            passout_year=education.passout_year,
        ),
        experience=ExperienceSummary(
            current_role_duration=experience.current_role_duration,
            total_experience=experience.total_experience,
        ),
        top_skills=_guarded("top_skills", lambda: extract_top_skills(document, limit=max_top_skills), []),
        connections_count=_guarded("connections", lambda: extract_connection_count(document), ""),
        extracted_at=now or datetime.now(timezone.utc),
    )
    logger.info(
        f"Built profile for {profile.full_name}",
        extra={"step": "extract", "status": "ok", "member_id": member_id},
    )
    return profile
