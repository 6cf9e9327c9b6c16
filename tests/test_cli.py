from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List

import pytest

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "profile_page.html"


def _run_cli_with_args(args_list: List[str]) -> None:
    """Run cli.py main() with provided argv in-process (no subprocess)."""
    argv_backup = sys.argv[:]
    try:
        sys.argv = ["cli.py"] + args_list
        # Import fresh to ensure clean parser each time
        if "cli" in sys.modules:
            del sys.modules["cli"]
        import cli  # type: ignore
        try:
            cli.main()  # type: ignore[attr-defined]
        except SystemExit as e:
            code = int(getattr(e, "code", 0) or 0)
            if code not in (0, None):
                raise
    finally:
        sys.argv = argv_backup


@pytest.fixture(autouse=True)
def _local_store(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "sqlite")
    monkeypatch.delenv("API_BASE_URL", raising=False)
    monkeypatch.setenv("RUN_ID", "test-run")
    from config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_cli_bootstrap(tmp_path, capsys):
    _run_cli_with_args(["--db", str(tmp_path / "cli.db"), "bootstrap"])
    assert "Schema ready" in capsys.readouterr().out


def test_cli_extract_prints_profile(capsys):
    _run_cli_with_args(["extract", "--html", str(FIXTURE)])
    out = capsys.readouterr().out
    assert '"member_id": "priya-sharma-0a1b2c"' in out
    assert '"total_experience": "5 yrs 11 mos"' in out


def test_cli_extract_without_member_id(tmp_path, capsys):
    page = tmp_path / "feed.html"
    page.write_text("<html><body><p>Feed</p></body></html>", encoding="utf-8")
    _run_cli_with_args(["extract", "--html", str(page), "--url", "https://www.linkedin.com/feed/"])
    assert "No member ID found on this page" in capsys.readouterr().out


def test_cli_ingest_update_report_delete(tmp_path, capsys):
    db = str(tmp_path / "cli.db")
    _run_cli_with_args(["--db", db, "ingest", "--input", str(FIXTURE), "--processed-by", "Asha"])
    out = capsys.readouterr().out
    assert "saved priya-sharma-0a1b2c Added Priya Sharma" in out
    assert "Processed 1 pages: saved=1" in out

    _run_cli_with_args(["--db", db, "ingest", "--input", str(FIXTURE)])
    out = capsys.readouterr().out
    assert "exists priya-sharma-0a1b2c Candidate already processed by Asha" in out

    _run_cli_with_args(["--db", db, "update", "--member-id", "priya-sharma-0a1b2c", "--notes", "Strong Spark"])
    assert '"notes": "Strong Spark"' in capsys.readouterr().out

    _run_cli_with_args(["--db", db, "report-recent", "--limit", "5", "--sort-by", "connections"])
    out = capsys.readouterr().out
    start = out.index("[")
    rows = json.loads(out[start:out.rindex("]") + 1])
    assert rows[0]["member_id"] == "priya-sharma-0a1b2c"
    assert rows[0]["connections_num"] == 500

    _run_cli_with_args(["--db", db, "delete", "--member-id", "priya-sharma-0a1b2c"])
    assert "Deleted Priya Sharma (priya-sharma-0a1b2c)" in capsys.readouterr().out

    _run_cli_with_args(["--db", db, "delete", "--member-id", "priya-sharma-0a1b2c"])
    assert "No candidate with member id priya-sharma-0a1b2c" in capsys.readouterr().out


def test_cli_update_missing_candidate(tmp_path, capsys):
    db = str(tmp_path / "cli.db")
    _run_cli_with_args(["--db", db, "update", "--member-id", "ghost", "--notes", "x"])
    assert "No candidate with member id ghost" in capsys.readouterr().out
