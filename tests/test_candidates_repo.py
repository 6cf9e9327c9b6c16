from __future__ import annotations

import pytest

from db import schema
from db.connection import get_connection
from db.repos.candidates_repo import CandidatesRepo


@pytest.fixture
def repo(tmp_path):
    conn = get_connection(str(tmp_path / "repo.db"))
    schema.bootstrap(conn)
    yield CandidatesRepo(conn)
    conn.close()


def _record(member_id="m1", **overrides):
    base = {
        "member_id": member_id,
        "full_name": "Jane Doe",
        "profile_url": f"https://www.linkedin.com/in/{member_id}/",
        "headline": "Engineer",
        "location": "Pune",
    }
    base.update(overrides)
    return base


def test_bootstrap_is_idempotent(tmp_path):
    conn = get_connection(str(tmp_path / "twice.db"))
    try:
        schema.bootstrap(conn)
        schema.bootstrap(conn)
        cols = {row[1] for row in conn.execute("PRAGMA table_info(candidates)").fetchall()}
        assert {"member_id", "top_skills_json", "connections_num", "updated_at"} <= cols
    finally:
        conn.close()


def test_upsert_inserts_then_merges(repo):
    first = repo.upsert(_record(top_skills=["Python", "Café"], connections="500+"))
    assert first["id"] > 0
    assert first["top_skills"] == ["Python", "Café"]
    assert first["connections_num"] == 500

    second = repo.upsert(_record(full_name="Jane A. Doe", headline=None, location=None, top_skills=[]))
    assert second["id"] == first["id"]
    assert second["full_name"] == "Jane A. Doe"
    assert second["headline"] == "Engineer"
    assert second["location"] == "Pune"
    assert second["top_skills"] == ["Python", "Café"]
    assert repo.count() == 1


def test_upsert_empty_string_replaces_stored_value(repo):
    repo.upsert(_record())
    row = repo.upsert(_record(headline=""))
    assert row["headline"] == ""
    assert row["location"] == "Pune"
    assert repo.get("m1")["headline"] == ""


def test_get_exists_and_delete(repo):
    repo.upsert(_record())
    assert repo.exists("m1")
    assert repo.get("m1")["full_name"] == "Jane Doe"
    assert repo.get("zzz") is None
    deleted = repo.delete("m1")
    assert deleted["member_id"] == "m1"
    assert repo.delete("m1") is None
    assert not repo.exists("m1")


def test_list_page_newest_first(repo):
    for i in range(5):
        repo.upsert(_record(member_id=f"m{i}"))
    page1 = repo.list_page(page=1, limit=2)
    page3 = repo.list_page(page=3, limit=2)
    assert [r["member_id"] for r in page1] == ["m4", "m3"]
    assert [r["member_id"] for r in page3] == ["m0"]


def test_list_recent_by_connections(repo):
    repo.upsert(_record(member_id="a", connections="120"))
    repo.upsert(_record(member_id="b", connections="1.5K"))
    repo.upsert(_record(member_id="c"))
    rows = repo.list_recent(limit=3, sort_by="connections")
    assert [r["member_id"] for r in rows] == ["b", "a", "c"]
    with pytest.raises(ValueError):
        repo.list_recent(sort_by="name")


def test_update_fields(repo):
    repo.upsert(_record())
    row = repo.update_fields("m1", {"notes": "strong SQL", "designation": "Acme", "full_name": "ignored"})
    assert row["notes"] == "strong SQL"
    assert row["designation"] == "Acme"
    assert row["full_name"] == "Jane Doe"
    assert repo.update_fields("m1", {})["notes"] == "strong SQL"
    assert repo.update_fields("missing", {"notes": "x"}) is None
