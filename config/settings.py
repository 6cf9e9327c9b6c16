from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from models.candidate_profile import MAX_TOP_SKILLS


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    log_level: str

    # Core/runtime
    db_path: str
    run_env: str

    # Persistence collaborator
    store_backend: str  # sqlite | api | memory
    api_base_url: str | None
    http_timeout_seconds: int

    # API server
    api_host: str
    api_port: int
    default_page_limit: int

    # Processing loop timing
    min_process_interval_seconds: float
    navigation_debounce_seconds: float
    navigation_min_interval_seconds: float

    # Content/extraction
    max_top_skills: int

    # Outbound request validation
    blocked_url_fragments: list[str]
    allow_private_hosts: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    store_backend = os.getenv("STORE_BACKEND", "sqlite").strip().lower()
    api_base_url = os.getenv("API_BASE_URL") or None

    if store_backend == "api" and not api_base_url:
        raise RuntimeError("API_BASE_URL required when STORE_BACKEND=api")

    max_top_skills = int(os.getenv("MAX_TOP_SKILLS", str(MAX_TOP_SKILLS)))
    if not 1 <= max_top_skills <= MAX_TOP_SKILLS:
        raise RuntimeError(f"MAX_TOP_SKILLS must be between 1 and {MAX_TOP_SKILLS}")
    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        db_path=os.getenv("DB_PATH", "candidates.db"),
        run_env=os.getenv("RUN_ENV", "local"),
        store_backend=store_backend,
        api_base_url=api_base_url,
        http_timeout_seconds=int(os.getenv("HTTP_TIMEOUT_SECONDS", "20")),
        api_host=os.getenv("API_HOST", "127.0.0.1"),
        api_port=int(os.getenv("API_PORT", "3000")),
        default_page_limit=int(os.getenv("DEFAULT_PAGE_LIMIT", "50")),
        min_process_interval_seconds=float(os.getenv("MIN_PROCESS_INTERVAL_SECONDS", "1.5")),
        navigation_debounce_seconds=float(os.getenv("NAVIGATION_DEBOUNCE_SECONDS", "1.5")),
        navigation_min_interval_seconds=float(os.getenv("NAVIGATION_MIN_INTERVAL_SECONDS", "3")),
        max_top_skills=max_top_skills,
        blocked_url_fragments=["/invalid"],
        allow_private_hosts=_as_bool(os.getenv("ALLOW_PRIVATE_HOSTS", "true")),
    )
