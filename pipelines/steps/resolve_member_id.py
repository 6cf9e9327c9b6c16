from __future__ import annotations

from extraction.member_id import resolve_member_id
from pipelines.runner import RunContext


class ResolveMemberId:
    """Resolve the page's member id; halt when there is none or it is the current candidate."""

    def run(self, ctx: RunContext) -> RunContext:
        member_id = ctx.member_id or (resolve_member_id(ctx.page) if ctx.page is not None else None)
        if not member_id:
            return ctx.halt("no_member_id", "No member ID found on this page")
        ctx.member_id = member_id
        if ctx.current_member_id and member_id == ctx.current_member_id:
            return ctx.halt("same_candidate", "Same candidate, skipping")
        return ctx
