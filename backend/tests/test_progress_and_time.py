from datetime import datetime

import pytest

from app.core.time_utils import parse_instant
from app.models.task import compute_progress


@pytest.mark.parametrize(
    "status,subtasks,expected",
    [
        ("completed", [], 100),
        ("pending", [], 0),
        ("in_progress", [], 0),
        ("cancelled", [], 0),
        ("pending", ["completed", "pending", "pending", "in_progress"], 25),
        ("pending", ["completed", "pending", "pending"], 33),
        ("pending", ["completed", "completed", "pending"], 66),
        ("completed", ["pending"], 0),
        ("pending", ["completed", "completed"], 100),
    ],
)
def test_compute_progress(status, subtasks, expected):
    assert compute_progress(status, subtasks) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2026-01-05T09:00:00", datetime(2026, 1, 5, 9, 0)),
        ("2026-01-05 09:00:00", datetime(2026, 1, 5, 9, 0)),
        ("2026-01-05T09:00:00Z", datetime(2026, 1, 5, 9, 0)),
        ("2026-01-05T12:00:00+03:00", datetime(2026, 1, 5, 9, 0)),
        ("2026-01-05T09:00:00.250000", datetime(2026, 1, 5, 9, 0, 0, 250000)),
    ],
)
def test_parse_instant(raw, expected):
    assert parse_instant(raw) == expected


def test_parse_instant_orders_chronologically_not_lexically():
    # лексически "...T12:00+03:00" > "...T10:00Z", но это более ранний момент
    earlier = "2026-01-05T12:00:00+03:00"
    later = "2026-01-05T10:00:00Z"
    assert earlier > later
    assert parse_instant(earlier) < parse_instant(later)


@pytest.mark.parametrize("raw", ["", "   ", "yesterday", "2026-13-45"])
def test_parse_instant_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_instant(raw)
