from __future__ import annotations

import pytest

from moonshot_tracker.m1.model import Project
from moonshot_tracker.m2.errors import MalformedResponseError
from moonshot_tracker.m3.progress import (
    calculate_total_hours,
    format_duration,
    goal_reached,
    progress_percent,
    projects_from_stats,
    prune_selection,
    selected_hours,
)

STATS = {
    "data": {
        "projects": [
            {"name": "moonshot", "total_seconds": 5400, "text": "1 hr 30 mins", "hours": 1},
            {"name": "site", "total_seconds": 1800, "text": "30 mins", "hours": 0},
            {"name": "moonshot", "total_seconds": 600},
        ]
    },
    "extra": True,
}


@pytest.mark.parametrize(
    ("hours", "expected"),
    [
        (0, "0s"),
        (1.5, "1h 30m"),
        (0.0166, "1m"),
        (2, "2h"),
        (10 / 3600, "10s"),
    ],
)
def test_format_duration(hours: float, expected: str) -> None:
    assert format_duration(hours) == expected


def test_projects_from_stats_merges_duplicate_names() -> None:
    projects = projects_from_stats(STATS)
    assert [p.name for p in projects] == ["moonshot", "site"]
    assert projects[0].total_seconds == 6000
    assert projects[1].hours == 0.5


@pytest.mark.parametrize("stats", [{}, {"data": None}, {"data": {}}, {"data": {"projects": "x"}}])
def test_projects_from_stats_tolerates_missing_projects(stats: dict) -> None:
    assert projects_from_stats(stats) == []


def test_selection_is_pruned_to_loaded_projects() -> None:
    projects = [Project("a", 3600), Project("b", 7200)]
    assert prune_selection(projects, {"a", "gone"}) == {"a"}
    assert selected_hours(projects, {"a", "gone"}) == 1.0
    assert selected_hours(projects, set()) == 0
    assert calculate_total_hours(projects) == 3.0


def test_progress_is_capped() -> None:
    assert progress_percent(37.5) == 50.0
    assert progress_percent(100) == 100.0
    assert progress_percent(1, goal_hours=4) == 25.0
    assert goal_reached(75)
    assert not goal_reached(74.9)
    with pytest.raises(ValueError):
        progress_percent(1, goal_hours=0)


@pytest.mark.parametrize("total", ["n/a", {"s": 1}, [3]])
def test_projects_from_stats_rejects_bad_total_seconds(total) -> None:
    stats = {"data": {"projects": [{"name": "a", "total_seconds": total}]}}
    with pytest.raises(MalformedResponseError):
        projects_from_stats(stats)
