from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

UNKNOWN_PROJECT = "Unknown Project"


@dataclass(frozen=True)
class Heartbeat:
    time: datetime
    project: str | None = None
    # Remaining fields from the API, untouched.
    raw: dict = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Project:
    name: str
    total_seconds: float

    @property
    def hours(self) -> float:
        return self.total_seconds / 3600
