from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from extraction.profile_builder import build_profile
from pipelines.runner import RunContext


class ExtractProfile:
    def __init__(self, max_top_skills: int = 5, now: Optional[Callable[[], datetime]] = None) -> None:
        self.max_top_skills = max_top_skills
        self.now = now

    def run(self, ctx: RunContext) -> RunContext:
        profile = build_profile(
            ctx.page,
            ctx.member_id,
            max_top_skills=self.max_top_skills,
            now=self.now() if self.now else None,
        )
        if profile is None:
            return ctx.halt("no_member_id", "Could not extract profile data")
        ctx.profile = profile
        return ctx
