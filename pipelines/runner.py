from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from extraction.page import PageContext
from models import CandidateProfile
from utils.logging_setup import init_logging


logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    page: Optional[PageContext] = None
    member_id: Optional[str] = None
    current_member_id: Optional[str] = None
    profile: Optional[CandidateProfile] = None
    existing: Optional[Dict[str, Any]] = None
    saved: Optional[Dict[str, Any]] = None
    status: Optional[str] = None
    message: str = ""
    halted: bool = False
    meta: dict = field(default_factory=dict)

    def halt(self, status: str, message: str = "") -> "RunContext":
        self.halted = True
        self.status = status
        self.message = message
        return self


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        for step in self.steps:
            if ctx.halted:
                break
            name = type(step).__name__
            started = time.perf_counter()
            ctx = step.run(ctx)
            logger.debug(
                f"Step {name} done",
                extra={
                    "step": name,
                    "status": ctx.status or "ok",
                    "duration_ms": int((time.perf_counter() - started) * 1000),
                    "member_id": ctx.member_id or "-",
                },
            )
        return ctx
