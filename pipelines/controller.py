"""Processing loop for candidate pages.

``ExtractionController`` owns the loop state: the candidate currently shown,
the in-flight flag, the last pass time and the pending navigation pass. One
pass runs the pipeline resolve -> check -> extract -> persist.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from extraction.member_id import resolve_member_id
from extraction.page import PageContext
from models import CandidateProfile
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import CheckExisting, ExtractProfile, PersistCandidate, ResolveMemberId
from ports.store import CandidateStorePort
from services.api_client import CandidateApiError


logger = logging.getLogger(__name__)

SKIPPED = "skipped"
RATE_LIMITED = "rate_limited"
NO_MEMBER_ID = "no_member_id"
SAME_CANDIDATE = "same_candidate"
EXISTS = "exists"
SAVED = "saved"
DELETED = "deleted"
NOT_FOUND = "not_found"
ERROR = "error"


@dataclass(frozen=True)
class ProcessOutcome:
    status: str
    member_id: Optional[str] = None
    profile: Optional[CandidateProfile] = None
    message: str = ""
    processed_by: str = ""
    record: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status != ERROR


class ExtractionController:
    def __init__(
        self,
        store: CandidateStorePort,
        *,
        processed_by: Optional[str] = None,
        min_process_interval: float = 1.5,
        navigation_debounce: float = 1.5,
        navigation_min_interval: float = 3.0,
        max_top_skills: int = 5,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.processed_by = processed_by
        self.min_process_interval = min_process_interval
        self.navigation_debounce = navigation_debounce
        self.navigation_min_interval = navigation_min_interval
        self.max_top_skills = max_top_skills
        self.clock = clock

        self.current_member_id: Optional[str] = None
        self.processing_in_progress = False
        self.last_process_time: Optional[float] = None
        self.last_url: Optional[str] = None
        self.last_navigation_pass: Optional[float] = None
        self.scheduled_at: Optional[float] = None

    @classmethod
    def from_settings(cls, store: CandidateStorePort, settings, **kwargs) -> "ExtractionController":
        return cls(
            store,
            min_process_interval=settings.min_process_interval_seconds,
            navigation_debounce=settings.navigation_debounce_seconds,
            navigation_min_interval=settings.navigation_min_interval_seconds,
            max_top_skills=settings.max_top_skills,
            **kwargs,
        )

    def _pipeline(self) -> Pipeline:
        return Pipeline([
            ResolveMemberId(),
            CheckExisting(self.store),
            ExtractProfile(max_top_skills=self.max_top_skills),
            PersistCandidate(self.store, processed_by=self.processed_by),
        ])

    def process(self, page: PageContext) -> ProcessOutcome:
        """One processing pass over ``page``."""
        if self.processing_in_progress:
            logger.debug("Processing already in progress, skipping")
            return ProcessOutcome(SKIPPED, message="Processing already in progress")

        now = self.clock()
        if self.last_process_time is not None and now - self.last_process_time < self.min_process_interval:
            logger.debug("Processing called too frequently, deferring")
            return ProcessOutcome(RATE_LIMITED, message="Processing called too frequently")
        self.last_process_time = now

        self.processing_in_progress = True
        ctx = RunContext(page=page, current_member_id=self.current_member_id)
        try:
            ctx = self._pipeline().run(ctx)
        except (CandidateApiError, sqlite3.Error, OSError) as e:
            if ctx.member_id and not ctx.halted:
                self.current_member_id = ctx.member_id
            logger.error(
                f"Error processing candidate: {e}",
                extra={"step": "process", "status": ERROR, "member_id": ctx.member_id or "-", "error": type(e).__name__},
            )
            return ProcessOutcome(ERROR, member_id=ctx.member_id, profile=ctx.profile, message=str(e))
        finally:
            self.processing_in_progress = False

        if ctx.status not in (NO_MEMBER_ID, SAME_CANDIDATE):
            self.current_member_id = ctx.member_id

        processed_by = ""
        if ctx.existing is not None:
            processed_by = ctx.existing.get("processed_by") or ""
        outcome = ProcessOutcome(
            ctx.status or SAVED,
            member_id=ctx.member_id,
            profile=ctx.profile,
            message=ctx.message,
            processed_by=processed_by,
            record=ctx.saved or ctx.existing,
        )
        logger.info(
            outcome.message or outcome.status,
            extra={"step": "process", "status": outcome.status, "member_id": outcome.member_id or "-"},
        )
        return outcome

    def on_navigation(self, url: str) -> Optional[float]:
        """Note a URL change; returns the clock time the follow-up pass is due, or None when unchanged."""
        if url == self.last_url:
            return None
        self.last_url = url
        self.current_member_id = None

        now = self.clock()
        since_last = now - self.last_navigation_pass if self.last_navigation_pass is not None else float("inf")
        delay_needed = max(0.0, self.navigation_min_interval - since_last)
        self.scheduled_at = now + self.navigation_debounce + delay_needed
        return self.scheduled_at

    def poll(self, page: PageContext) -> Optional[ProcessOutcome]:
        """Run the pending navigation pass once it is due."""
        if self.scheduled_at is None or self.clock() < self.scheduled_at:
            return None
        self.scheduled_at = None
        self.last_navigation_pass = self.clock()
        return self.process(page)

    def recheck(self, page: Optional[PageContext] = None) -> Optional[ProcessOutcome]:
        self.current_member_id = None
        if page is None:
            return None
        return self.process(page)

    def delete_current(self, page: Optional[PageContext] = None) -> ProcessOutcome:
        member_id = (resolve_member_id(page) if page is not None else None) or self.current_member_id
        if not member_id:
            return ProcessOutcome(NO_MEMBER_ID, message="No profile found on this page")
        try:
            deleted = self.store.delete(member_id)
        except (CandidateApiError, sqlite3.Error, OSError) as e:
            logger.error(f"Failed to delete candidate {member_id}: {e}", extra={"member_id": member_id, "error": type(e).__name__})
            return ProcessOutcome(ERROR, member_id=member_id, message=str(e))
        if not deleted:
            return ProcessOutcome(NOT_FOUND, member_id=member_id, message="Candidate not found")
        # Reset so the profile can be re-added
        self.current_member_id = None
        return ProcessOutcome(DELETED, member_id=member_id, message="Candidate deleted")
