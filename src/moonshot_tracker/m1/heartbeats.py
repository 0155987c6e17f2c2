from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from moonshot_tracker.m1.model import UNKNOWN_PROJECT, Heartbeat, Project
from moonshot_tracker.m2.errors import MalformedResponseError

# Gaps up to this long count as continuous activity.
GAP_THRESHOLD_S = 15 * 60
# Credited for a burst start after an idle gap, and once for the last heartbeat.
FLAT_CREDIT_S = 2 * 60


def parse_time(value) -> datetime:
    if isinstance(value, bool):
        raise MalformedResponseError(f"invalid heartbeat time: {value!r}")
    if isinstance(value, int | float):
        try:
            return datetime.fromtimestamp(value, UTC)
        except (ValueError, OverflowError, OSError) as e:
            raise MalformedResponseError(f"invalid heartbeat time: {value!r}") from e
    if isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value)
        except ValueError as e:
            raise MalformedResponseError(f"invalid heartbeat time: {value!r}") from e
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt
    raise MalformedResponseError(f"invalid heartbeat time: {value!r}")


def parse_heartbeat(obj) -> Heartbeat:
    if not isinstance(obj, dict):
        raise MalformedResponseError("heartbeat must be an object")
    if "time" not in obj:
        raise MalformedResponseError("heartbeat is missing 'time'")

    project = obj.get("project")
    return Heartbeat(
        time=parse_time(obj["time"]),
        project=(str(project) if project else None),
        raw=obj,
    )


def total_active_seconds(heartbeats: Iterable[Heartbeat]) -> int:
    """Estimate active time from a set of heartbeats.

    Consecutive heartbeats up to GAP_THRESHOLD_S apart are treated as one
    continuous stretch of work. A longer gap is an idle break and only earns
    FLAT_CREDIT_S. The last heartbeat earns another FLAT_CREDIT_S since
    nothing follows it to measure against.

    Input order does not matter.
    """

    ordered = sorted(heartbeats, key=lambda h: h.time)
    if not ordered:
        return 0

    total = 0.0
    for prev, cur in zip(ordered, ordered[1:]):
        gap_s = (cur.time - prev.time).total_seconds()
        if gap_s <= GAP_THRESHOLD_S:
            total += gap_s
        else:
            total += FLAT_CREDIT_S

    total += FLAT_CREDIT_S
    return int(total)


def split_duration(seconds: float) -> tuple[int, int]:
    total_minutes = int(seconds // 60)
    return total_minutes // 60, total_minutes % 60


def group_by_project(heartbeats: Iterable[Heartbeat]) -> dict[str, list[Heartbeat]]:
    out: dict[str, list[Heartbeat]] = {}
    for h in heartbeats:
        out.setdefault(h.project or UNKNOWN_PROJECT, []).append(h)
    return out


def project_totals(heartbeats: Iterable[Heartbeat]) -> list[Project]:
    projects = [
        Project(name=name, total_seconds=total_active_seconds(hbs))
        for name, hbs in group_by_project(heartbeats).items()
    ]
    projects.sort(key=lambda p: (-p.total_seconds, p.name))
    return projects
