"""Candidate persistence API (FastAPI over the SQLite candidates table).

Usage:
    python cli.py serve --port 3000
"""

from __future__ import annotations

import logging
import math
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import get_settings
from db.connection import get_connection
from db.repos.candidates_repo import CandidatesRepo
from db.schema import bootstrap
from models import CandidateIn


logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["member_id", "full_name", "profile_url"]


def _error(status_code: int, error: str, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message, **extra})


def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value > 0 else default


def create_app(db_path: Optional[str] = None) -> FastAPI:
    """Create and configure the FastAPI app; the schema is bootstrapped on creation."""
    settings = get_settings()
    path = db_path or settings.db_path
    default_limit = settings.default_page_limit

    conn = get_connection(path)
    try:
        bootstrap(conn)
    finally:
        conn.close()

    app = FastAPI(title="Candidate Tracker API", version="1.0.0")
    app.state.db_path = path

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}", extra={"step": "api"})
        return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error(404, "Not Found", f"Cannot {request.method} {request.url.path}")
        return _error(exc.status_code, str(exc.detail), str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request", str(exc.errors()), required=REQUIRED_FIELDS)

    @app.exception_handler(sqlite3.Error)
    async def database_error(request: Request, exc: sqlite3.Error):
        logger.error(f"Database error: {exc}", extra={"step": "api", "status": "error", "error": type(exc).__name__})
        return _error(500, "Database error", str(exc))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error(f"Unhandled error: {exc}", extra={"step": "api", "status": "error", "error": type(exc).__name__})
        return _error(500, "Internal Server Error", str(exc))

    def get_repo(request: Request) -> Iterator[CandidatesRepo]:
        conn = get_connection(request.app.state.db_path, check_same_thread=False)
        try:
            yield CandidatesRepo(conn)
        finally:
            conn.close()

    @app.get("/health")
    def health():
        return {
            "status": "OK",
            "message": "Candidate Tracker API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/api/candidates/{member_id}")
    def check_candidate(member_id: str, repo: CandidatesRepo = Depends(get_repo)):
        candidate = repo.get(member_id)
        if candidate is None:
            return JSONResponse(status_code=404, content={"exists": False, "message": "Candidate not found in database"})
        return {"exists": True, "candidate": candidate, "message": "Candidate already processed"}

    @app.post("/api/candidates", status_code=201)
    def add_candidate(payload: Dict[str, Any] = Body(...), repo: CandidatesRepo = Depends(get_repo)):
        if any(not payload.get(key) for key in REQUIRED_FIELDS):
            return _error(400, "Missing required fields", "member_id, full_name and profile_url are required", required=REQUIRED_FIELDS)
        try:
            record = CandidateIn.model_validate(payload)
        except ValidationError as e:
            return _error(400, "Invalid candidate", str(e), required=REQUIRED_FIELDS)
        candidate = repo.upsert(record.model_dump())
        logger.info(
            f"Saved candidate {record.full_name}",
            extra={"step": "api", "status": "saved", "member_id": record.member_id},
        )
        return JSONResponse(
            status_code=201,
            content={"success": True, "message": "Candidate added successfully", "candidate": candidate},
        )

    @app.get("/api/candidates")
    def list_candidates(page: Optional[str] = None, limit: Optional[str] = None, repo: CandidatesRepo = Depends(get_repo)):
        page_no = _positive_int(page, 1)
        page_size = _positive_int(limit, default_limit)
        total = repo.count()
        return {
            "success": True,
            "data": repo.list_page(page_no, page_size),
            "pagination": {
                "page": page_no,
                "limit": page_size,
                "totalCount": total,
                "totalPages": math.ceil(total / page_size),
            },
        }

    @app.delete("/api/candidates/{member_id}")
    def delete_candidate(member_id: str, repo: CandidatesRepo = Depends(get_repo)):
        deleted = repo.delete(member_id)
        if deleted is None:
            return _error(404, "Candidate not found", f"No candidate with member id {member_id}")
        return {"success": True, "message": "Candidate deleted successfully", "candidate": deleted}

    return app
