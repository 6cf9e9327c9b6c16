from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

import extraction.profile_builder as builder
from extraction.fields import UNKNOWN_CANDIDATE
from extraction.page import PageContext
from extraction.profile_builder import build_profile
from models import CandidateProfile

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_build_profile_from_saved_page(profile_page):
    profile = build_profile(profile_page, now=FIXED_NOW)
    assert profile is not None
    assert profile.member_id == "priya-sharma-0a1b2c"
    assert profile.full_name == "Priya Sharma"
    assert profile.profile_url == "https://www.linkedin.com/in/priya-sharma-0a1b2c/"
    assert profile.headline == "Senior Data Engineer | Spark, Airflow, Python"
    assert profile.location == "Bengaluru, Karnataka, India"
    assert profile.designation == "Acme Analytics"
    assert profile.current_title == "Senior Data Engineer"
    assert profile.industry == ""
    assert profile.connections_count == "500+"
    assert profile.top_skills == ("Apache Spark", "Python", "SQL", "Apache Airflow", "Data Modeling")
    assert profile.experience.current_role_duration == "1 yr 4 mos"
    # 3 yrs 6 mos (rollup) + 2 yrs 5 mos; the internship is left out
    assert profile.experience.total_experience == "5 yrs 11 mos"
    assert profile.education.school == "RV College of Engineering"
    assert profile.education.degree == "Bachelor of Engineering - BE, Computer Science"
    assert profile.education.qualification_code == "BE"
    assert profile.education.passout_year == "2018"
    assert profile.extracted_at == FIXED_NOW


def test_skill_limit_is_configurable(profile_page):
    profile = build_profile(profile_page, max_top_skills=3)
    assert profile.top_skills == ("Apache Spark", "Python", "SQL")


def test_explicit_member_id_wins(profile_page):
    profile = build_profile(profile_page, "override-id")
    assert profile.member_id == "override-id"


def test_empty_page_yields_placeholder_record():
    page = PageContext.from_html("<html></html>", url="https://www.linkedin.com/in/someone/?trk=abc")
    profile = build_profile(page)
    assert profile is not None
    assert profile.member_id == "someone"
    assert profile.full_name == UNKNOWN_CANDIDATE
    assert profile.profile_url == "https://www.linkedin.com/in/someone/"
    for field in ("headline", "location", "designation", "current_title", "industry", "connections_count"):
        assert getattr(profile, field) == ""
    assert profile.top_skills == ()
    assert profile.education.school == ""
    assert profile.experience.total_experience == ""


def test_no_member_id_means_no_record():
    page = PageContext.from_html("<html><body><p>Feed</p></body></html>", url="https://www.linkedin.com/feed/")
    assert build_profile(page) is None


def test_failing_extractor_only_blanks_its_field(profile_page, monkeypatch):
    def _boom(*args, **kwargs):
        raise RuntimeError("markup changed")

    monkeypatch.setattr(builder, "extract_headline", _boom)
    monkeypatch.setattr(builder, "extract_latest_experience", _boom)
    profile = build_profile(profile_page)
    assert profile.headline == ""
    assert profile.current_title == ""
    assert profile.experience.total_experience == ""
    assert profile.full_name == "Priya Sharma"
    assert profile.location == "Bengaluru, Karnataka, India"
    assert profile.education.passout_year == "2018"


def test_candidate_profile_model_rules():
    profile = CandidateProfile(
        member_id="m1",
        full_name="A",
        headline=None,
        education=None,
        top_skills=["Go", " Go ", "", "Rust", "C", "D", "E", "F"],
    )
    assert profile.headline == ""
    assert profile.education.school == ""
    assert profile.top_skills == ("Go", "Rust", "C", "D", "E")
    with pytest.raises(ValidationError):
        CandidateProfile(member_id="", full_name="A")
    with pytest.raises(ValidationError):
        profile.headline = "changed"
