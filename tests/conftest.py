from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


FIXTURES = Path(__file__).resolve().parent / "fixtures"


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'extraction.dom'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


@pytest.fixture
def profile_html() -> str:
    return (FIXTURES / "profile_page.html").read_text(encoding="utf-8")


@pytest.fixture
def profile_page(profile_html):
    from extraction.page import PageContext

    return PageContext.from_html(profile_html)


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(100.0)
