from __future__ import annotations

import math
import os

import typer

from moonshot_tracker.m2.hackatime_api import DEFAULT_BASE_URL, HackatimeConfig
from moonshot_tracker.m3.progress import DEFAULT_GOAL_HOURS

TOKEN_ENV = "HACKATIME_API_TOKEN"
BASE_URL_ENV = "HACKATIME_API_URL"
API_KEY_ENV = "HACKATIME_API_KEY"
GOAL_HOURS_ENV = "MOONSHOT_GOAL_HOURS"


def load_config_from_env() -> HackatimeConfig:
    # A missing token is allowed; the lookup then goes out with an empty bearer.
    tok = os.environ.get(TOKEN_ENV, "")
    base = os.environ.get(BASE_URL_ENV) or DEFAULT_BASE_URL
    return HackatimeConfig(api_token=tok, base_url=base.rstrip("/"))


def goal_hours_from_env() -> float:
    raw = os.environ.get(GOAL_HOURS_ENV)
    if not raw:
        return DEFAULT_GOAL_HOURS
    try:
        goal = float(raw)
    except ValueError as e:
        raise typer.BadParameter(f"{GOAL_HOURS_ENV} must be a number") from e
    if not math.isfinite(goal) or goal <= 0:
        raise typer.BadParameter(f"{GOAL_HOURS_ENV} must be > 0")
    return goal
