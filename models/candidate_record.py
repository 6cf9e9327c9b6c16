from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CandidateIn(BaseModel):
    """API/store record shape: flat, snake_case, as persisted in the candidates table."""

    member_id: str
    full_name: str
    profile_url: str
    headline: str | None = None
    location: str | None = None
    designation: str | None = None
    current_title: str | None = None
    industry: str | None = None
    school: str | None = None
    degree: str | None = None
    qualification: str | None = None
    passout_year: str | None = None
    years_at_current: str | None = None
    total_experience: str | None = None
    top_skills: list[str] | None = None
    connections: str | None = None
    processed_by: str | None = None
    notes: str | None = None
    extracted_at: str | None = None

    model_config = ConfigDict(extra="ignore")


class CandidateUpdate(BaseModel):
    """Fields a recruiter may edit after a candidate was captured."""

    designation: str | None = None
    notes: str | None = None
    processed_by: str | None = None
    years_at_current: str | None = None
    total_experience: str | None = None

    model_config = ConfigDict(extra="forbid")
