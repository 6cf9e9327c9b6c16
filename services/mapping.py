from __future__ import annotations

from typing import Any, Dict, Optional

from models import CandidateProfile


def profile_to_candidate_payload(profile: CandidateProfile, processed_by: Optional[str] = None, notes: Optional[str] = None) -> Dict[str, Any]:
    """Flatten an extracted profile into the candidate record shape (API body / table row)."""
    return {
        "member_id": profile.member_id,
        "full_name": profile.full_name,
        "profile_url": profile.profile_url,
        "headline": profile.headline or None,
        "location": profile.location or None,
        "designation": profile.designation or None,
        "current_title": profile.current_title or None,
        "industry": profile.industry or None,
        "school": profile.education.school or None,
        "degree": profile.education.degree or None,
        "qualification": profile.education.qualification_code or None,
        "passout_year": profile.education.passout_year or None,
        "years_at_current": profile.experience.current_role_duration or None,
        "total_experience": profile.experience.total_experience or None,
        "top_skills": list(profile.top_skills),
        "connections": profile.connections_count or None,
        "processed_by": processed_by or None,
        "notes": notes or None,
        "extracted_at": profile.extracted_at.isoformat(),
    }
