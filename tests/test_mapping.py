from __future__ import annotations

from datetime import datetime, timezone

from models import CandidateIn, CandidateProfile, Education, ExperienceSummary
from services.mapping import profile_to_candidate_payload


def test_payload_flattens_profile():
    profile = CandidateProfile(
        member_id="m-1",
        full_name="Jane Doe",
        profile_url="https://www.linkedin.com/in/m-1/",
        designation="Acme",
        education=Education(school="IIT", degree="B.Tech", qualification_code="BTECH", passout_year="2019"),
        experience=ExperienceSummary(current_role_duration="1 yr", total_experience="3 yrs"),
        top_skills=["Go"],
        connections_count="500+",
        extracted_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    payload = profile_to_candidate_payload(profile, processed_by="Asha")
    assert payload["qualification"] == "BTECH"
    assert payload["years_at_current"] == "1 yr"
    assert payload["total_experience"] == "3 yrs"
    assert payload["connections"] == "500+"
    assert payload["headline"] is None
    assert payload["notes"] is None
    assert payload["processed_by"] == "Asha"
    assert payload["extracted_at"] == "2024-01-01T00:00:00+00:00"

    record = CandidateIn.model_validate(payload)
    assert record.top_skills == ["Go"]
