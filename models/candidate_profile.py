from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_TOP_SKILLS = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Education(BaseModel):
    school: str = ""
    degree: str = ""
    qualification_code: str = ""
    passout_year: str = ""

    model_config = ConfigDict(frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class ExperienceSummary(BaseModel):
    current_role_duration: str = ""
    total_experience: str = ""

    model_config = ConfigDict(frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class CandidateProfile(BaseModel):
    """Extraction result for one candidate page. Every text field is a string, never None."""

    member_id: str = Field(min_length=1)
    full_name: str
    profile_url: str = ""
    headline: str = ""
    location: str = ""
    designation: str = ""
    current_title: str = ""
    industry: str = ""
    education: Education = Field(default_factory=Education)
    experience: ExperienceSummary = Field(default_factory=ExperienceSummary)
    top_skills: tuple[str, ...] = ()
    connections_count: str = ""
    extracted_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator(
        "profile_url",
        "headline",
        "location",
        "designation",
        "current_title",
        "industry",
        "connections_count",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("education", "experience", mode="before")
    @classmethod
    def _none_to_default(cls, v: Any, info) -> Any:
        if v is None:
            return Education() if info.field_name == "education" else ExperienceSummary()
        return v

    @field_validator("top_skills", mode="before")
    @classmethod
    def _dedupe_skills(cls, v: Any) -> Any:
        if v is None:
            return ()
        seen: list[str] = []
        for skill in v:
            text = str(skill).strip()
            if text and text not in seen:
                seen.append(text)
        return tuple(seen[:MAX_TOP_SKILLS])
