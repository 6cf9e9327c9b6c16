from __future__ import annotations

from typing import Optional

from pipelines.runner import RunContext
from ports.store import CandidateStorePort
from services.mapping import profile_to_candidate_payload


class PersistCandidate:
    """Save the profile unless the candidate was already stored."""

    def __init__(self, store: CandidateStorePort, processed_by: Optional[str] = None) -> None:
        self.store = store
        self.processed_by = processed_by

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.existing is not None:
            processed_by = ctx.existing.get("processed_by") or ""
            suffix = f" by {processed_by}" if processed_by else ""
            return ctx.halt("exists", f"Candidate already processed{suffix}")
        payload = profile_to_candidate_payload(ctx.profile, processed_by=self.processed_by)
        ctx.saved = self.store.append(payload)
        ctx.status = "saved"
        ctx.message = f"Added {ctx.profile.full_name}"
        return ctx
