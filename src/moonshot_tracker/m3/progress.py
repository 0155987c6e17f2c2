from __future__ import annotations

import math
from collections.abc import Iterable

from moonshot_tracker.m1.model import Project
from moonshot_tracker.m2.errors import MalformedResponseError

DEFAULT_GOAL_HOURS = 75.0


def projects_from_stats(stats: dict) -> list[Project]:
    """Pull ``name``/``total_seconds`` out of a stats response.

    Everything else in the response is ignored. Repeated names are summed so
    the result has one entry per name, in first-seen order.
    """

    data = stats.get("data") or {}
    raw = data.get("projects") if isinstance(data, dict) else None
    if not isinstance(raw, list):
        return []

    totals: dict[str, float] = {}
    for p in raw:
        if not isinstance(p, dict) or not p.get("name"):
            continue
        name = str(p["name"])
        try:
            secs = float(p.get("total_seconds") or 0)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(f"project {name!r}: bad total_seconds") from e
        totals[name] = totals.get(name, 0.0) + secs

    return [Project(name=k, total_seconds=v) for k, v in totals.items()]


def calculate_total_hours(projects: Iterable[Project]) -> float:
    return sum(p.hours for p in projects)


def prune_selection(projects: Iterable[Project], selection: Iterable[str]) -> set[str]:
    """Drop selected names that are not among the loaded projects."""
    names = {p.name for p in projects}
    return names & set(selection)


def selected_hours(projects: list[Project], selection: Iterable[str]) -> float:
    chosen = prune_selection(projects, selection)
    return calculate_total_hours(p for p in projects if p.name in chosen)


def progress_percent(hours: float, goal_hours: float = DEFAULT_GOAL_HOURS) -> float:
    if goal_hours <= 0:
        raise ValueError("goal_hours must be > 0")
    return min(hours / goal_hours * 100, 100.0)


def goal_reached(hours: float, goal_hours: float = DEFAULT_GOAL_HOURS) -> bool:
    return hours >= goal_hours


def format_duration(hours: float) -> str:
    # Round to whole seconds first; 0.0166h is a minute, not 59s.
    total_seconds = round(hours * 3600)
    total_minutes = math.floor(total_seconds / 60)
    remaining_seconds = total_seconds % 60

    h = total_minutes // 60
    m = total_minutes % 60

    if h > 0:
        return f"{h}h {m}m" if m > 0 else f"{h}h"
    if m > 0:
        return f"{m}m"
    return f"{remaining_seconds}s"
