from __future__ import annotations

from datetime import datetime, timezone

from pipelines.runner import Pipeline, RunContext
from pipelines.steps import CheckExisting, ExtractProfile, PersistCandidate, ResolveMemberId
from stores.memory_store import MemoryCandidateStore


class _Recorder:
    def __init__(self, name, halt=False):
        self.name = name
        self.halt_here = halt
        self.calls = []

    def run(self, ctx: RunContext) -> RunContext:
        self.calls.append(self.name)
        if self.halt_here:
            return ctx.halt("stopped", f"{self.name} halted")
        return ctx


def test_pipeline_stops_after_halt():
    first, second, third = _Recorder("a"), _Recorder("b", halt=True), _Recorder("c")
    ctx = Pipeline([first, second, third]).run(RunContext())
    assert first.calls == ["a"] and second.calls == ["b"] and third.calls == []
    assert ctx.halted and ctx.status == "stopped" and ctx.message == "b halted"


def test_resolve_member_id_step(profile_page):
    ctx = ResolveMemberId().run(RunContext(page=profile_page))
    assert ctx.member_id == "priya-sharma-0a1b2c" and not ctx.halted

    ctx = ResolveMemberId().run(RunContext(page=profile_page, current_member_id="priya-sharma-0a1b2c"))
    assert ctx.status == "same_candidate"

    ctx = ResolveMemberId().run(RunContext(page=None))
    assert ctx.status == "no_member_id"
    assert ctx.message == "No member ID found on this page"


def test_full_candidate_pipeline(profile_page):
    store = MemoryCandidateStore()
    fixed = datetime(2024, 1, 2, tzinfo=timezone.utc)
    steps = [
        ResolveMemberId(),
        CheckExisting(store),
        ExtractProfile(max_top_skills=2, now=lambda: fixed),
        PersistCandidate(store, processed_by="Asha"),
    ]
    ctx = Pipeline(steps).run(RunContext(page=profile_page))
    assert ctx.status == "saved"
    assert ctx.meta["existed"] is False
    assert ctx.saved["top_skills"] == ["Apache Spark", "Python"]
    assert ctx.saved["extracted_at"] == fixed.isoformat()

    again = Pipeline(steps).run(RunContext(page=profile_page))
    assert again.status == "exists"
    assert again.meta["existed"] is True
    assert again.message == "Candidate already processed by Asha"


def test_persist_without_processor_name(profile_page):
    store = MemoryCandidateStore()
    store.append({"member_id": "priya-sharma-0a1b2c", "full_name": "Priya Sharma", "profile_url": "x"})
    ctx = RunContext(page=profile_page, member_id="priya-sharma-0a1b2c", existing=store.get("priya-sharma-0a1b2c"))
    ctx = PersistCandidate(store).run(ctx)
    assert ctx.status == "exists"
    assert ctx.message == "Candidate already processed"
