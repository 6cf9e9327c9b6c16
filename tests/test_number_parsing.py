from __future__ import annotations

import pytest

from utils.number_parsing import parse_count


@pytest.mark.parametrize(
    "value,expected",
    [
        ("500+", 500),
        ("1,204", 1204),
        ("1.2K", 1200),
        ("12.5k", 12500),
        ("3M", 3_000_000),
        (" 42 ", 42),
        (7, 7),
        ("", None),
        (None, None),
        ("n/a", None),
    ],
)
def test_parse_count(value, expected):
    assert parse_count(value) == expected
