import argparse
import json
import os
import sys
import uuid as _uuid
from pathlib import Path

from config.settings import get_settings
from db import schema
from db.connection import get_connection
from db.repos.candidates_repo import CandidatesRepo
from extraction.page import PageContext
from extraction.profile_builder import build_profile
from models import CandidateUpdate
from pipelines.controller import ExtractionController
from stores.registry import get_store
from stores.sqlite_store import SqliteCandidateStore
from utils.logging_setup import init_logging
import stores  # noqa: F401 ensure registration


def _read_page(path: str, url: str = None) -> PageContext:
    html = Path(path).read_text(encoding="utf-8")
    return PageContext.from_html(html, url=url)


def _open_store(args, settings):
    backend = (args.store or settings.store_backend).lower()
    if backend == "sqlite":
        # Honour --db for the local backend
        return SqliteCandidateStore(args.db)
    return get_store(backend, settings)


def cmd_bootstrap(args):
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    print("Schema ready")


def cmd_extract(args):
    settings = get_settings()
    page = _read_page(args.html, args.url)
    profile = build_profile(page, args.member_id, max_top_skills=settings.max_top_skills)
    if profile is None:
        print("No member ID found on this page")
        return
    print(profile.model_dump_json(indent=2))


def cmd_ingest(args):
    settings = get_settings()
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex
    store = _open_store(args, settings)
    # Saved snapshots are processed back to back; the browser-side rate limit does not apply
    controller = ExtractionController.from_settings(store, settings, processed_by=args.processed_by)
    controller.min_process_interval = 0.0

    counts = {}
    for path in args.input:
        page = _read_page(path, args.url)
        outcome = controller.process(page)
        counts[outcome.status] = counts.get(outcome.status, 0) + 1
        print(f"{path}: {outcome.status} {outcome.member_id or '-'} {outcome.message}".rstrip())
    summary = ", ".join(f"{k}={v}" for k, v in sorted(counts.items()))
    print(f"Processed {len(args.input)} pages: {summary}")


def cmd_serve(args):
    import uvicorn
    from api.app import create_app

    settings = get_settings()
    app = create_app(args.db)
    uvicorn.run(app, host=args.host or settings.api_host, port=args.port or settings.api_port)


def cmd_report_recent(args):
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    rows = CandidatesRepo(conn).list_recent(limit=args.limit, sort_by=args.sort_by)
    out = []
    for r in rows:
        out.append({
            "member_id": r["member_id"],
            "full_name": r["full_name"],
            "profile_url": r["profile_url"],
            "designation": r["designation"],
            "current_title": r["current_title"],
            "total_experience": r["total_experience"],
            "connections": r["connections"],
            "connections_num": r["connections_num"],
            "processed_by": r["processed_by"],
            "created_at": r["created_at"],
        })
    print(json.dumps(out, indent=2, ensure_ascii=False))


def cmd_update(args):
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    fields = CandidateUpdate(
        notes=args.notes,
        processed_by=args.processed_by,
        designation=args.company,
        years_at_current=args.years_at_current,
        total_experience=args.total_years,
    ).model_dump(exclude_none=True)
    repo = CandidatesRepo(conn)
    if repo.get(args.member_id) is None:
        print(f"No candidate with member id {args.member_id}")
        return
    row = repo.update_fields(args.member_id, fields)
    print(json.dumps(row, indent=2, ensure_ascii=False))


def cmd_delete(args):
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    deleted = CandidatesRepo(conn).delete(args.member_id)
    if deleted is None:
        print(f"No candidate with member id {args.member_id}")
        return
    print(f"Deleted {deleted['full_name']} ({args.member_id})")


def main():
    settings = get_settings()
    # stdout carries JSON for extract/report-recent
    init_logging(settings.log_level, stream=sys.stderr)
    parser = argparse.ArgumentParser(description="Candidate tracker CLI")
    parser.add_argument("--db", default=settings.db_path, help="Path to SQLite DB (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_boot = sub.add_parser("bootstrap", help="Create tables and indexes")
    p_boot.set_defaults(func=cmd_bootstrap)

    p_ext = sub.add_parser("extract", help="Extract a candidate profile from a saved page and print it as JSON")
    p_ext.add_argument("--html", required=True, help="Path to saved profile HTML")
    p_ext.add_argument("--url", default=None, help="Page URL (default: canonical link in the page)")
    p_ext.add_argument("--member-id", default=None, help="Override the resolved member id")
    p_ext.set_defaults(func=cmd_extract)

    p_ing = sub.add_parser("ingest", help="Process saved profile pages and persist new candidates")
    p_ing.add_argument("--input", required=True, nargs="+", help="Saved profile HTML file(s)")
    p_ing.add_argument("--url", default=None, help="Page URL applied to every input (default: canonical link)")
    p_ing.add_argument("--processed-by", default=None, help="Recruiter name stored with new candidates")
    p_ing.add_argument("--store", choices=["sqlite", "api", "memory"], default=None, help="Store backend (default from settings)")
    p_ing.set_defaults(func=cmd_ingest)

    p_srv = sub.add_parser("serve", help="Run the candidate REST API")
    p_srv.add_argument("--host", default=None)
    p_srv.add_argument("--port", type=int, default=None)
    p_srv.set_defaults(func=cmd_serve)

    p_rr = sub.add_parser("report-recent", help="List recently captured candidates")
    p_rr.add_argument("--limit", type=int, default=5)
    p_rr.add_argument("--sort-by", choices=["recent", "connections"], default="recent", help="Sort by recent (default) or connections")
    p_rr.set_defaults(func=cmd_report_recent)

    p_up = sub.add_parser("update", help="Edit recruiter fields of a stored candidate")
    p_up.add_argument("--member-id", required=True)
    p_up.add_argument("--notes", default=None)
    p_up.add_argument("--processed-by", default=None)
    p_up.add_argument("--company", default=None, help="Current company (designation)")
    p_up.add_argument("--years-at-current", default=None)
    p_up.add_argument("--total-years", default=None)
    p_up.set_defaults(func=cmd_update)

    p_del = sub.add_parser("delete", help="Delete a stored candidate")
    p_del.add_argument("--member-id", required=True)
    p_del.set_defaults(func=cmd_delete)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
