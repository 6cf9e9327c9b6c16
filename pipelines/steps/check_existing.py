from __future__ import annotations

from pipelines.runner import RunContext
from ports.store import CandidateStorePort


class CheckExisting:
    def __init__(self, store: CandidateStorePort) -> None:
        self.store = store

    def run(self, ctx: RunContext) -> RunContext:
        ctx.existing = self.store.get(ctx.member_id)
        ctx.meta["existed"] = ctx.existing is not None
        return ctx
