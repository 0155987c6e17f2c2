from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import quote

import requests

from moonshot_tracker.m1.heartbeats import parse_heartbeat
from moonshot_tracker.m1.model import Heartbeat
from moonshot_tracker.m2.errors import (
    HttpStatusError,
    LookupFailedError,
    MalformedResponseError,
    StatsFetchError,
    UserNotFoundError,
)
from moonshot_tracker.m2.retry import retrying_get

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://hackatime.hackclub.com/api"


@dataclass(frozen=True)
class HackatimeConfig:
    api_token: str
    base_url: str = DEFAULT_BASE_URL


def _bearer(token: str) -> dict[str, str]:
    # An empty token is still sent, as "Bearer ".
    return {"Authorization": f"Bearer {token}"}


def _iso(value: datetime | str) -> str:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        # Same shape as JavaScript's Date.toISOString().
        return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return value


def utc_now_iso() -> str:
    return _iso(datetime.now(UTC))


def _json_object(resp: requests.Response, what: str) -> dict:
    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedResponseError(f"{what}: response is not JSON") from e
    if not isinstance(data, dict):
        raise MalformedResponseError(f"{what}: unexpected response")
    return data


def lookup_user_id(cfg: HackatimeConfig, email: str) -> str:
    url = f"{cfg.base_url}/v1/users/lookup_email/{quote(email, safe='')}"
    try:
        resp = retrying_get(url, headers=_bearer(cfg.api_token))
    except HttpStatusError as e:
        raise LookupFailedError(e.status_code, e.body) from e

    data = _json_object(resp, "lookup")
    user_id = data.get("user_id")
    if not user_id:
        raise UserNotFoundError("User ID not found in response")
    return str(user_id)


def fetch_stats(
    cfg: HackatimeConfig,
    email: str,
    start_date: datetime | str | None = None,
) -> dict:
    """Fetch per-project stats for the user registered under ``email``.

    With ``start_date`` the window is ``[start_date, now]``. "now" is taken
    once here, so every retry of the stats request asks for the same window.
    """

    user_id = lookup_user_id(cfg, email)

    params = {"features": "projects"}
    if start_date:
        params["start_date"] = _iso(start_date)
        params["end_date"] = utc_now_iso()

    url = f"{cfg.base_url}/v1/users/{quote(user_id, safe='')}/stats"
    logger.debug("fetching stats from %s params=%s", url, params)
    try:
        resp = retrying_get(url, params=params)
    except HttpStatusError as e:
        raise StatsFetchError(e.status_code, e.body) from e

    return _json_object(resp, "stats")


def fetch_heartbeats(
    cfg: HackatimeConfig,
    api_key: str,
    start_time: datetime | str,
) -> list[Heartbeat]:
    url = f"{cfg.base_url}/v1/my/heartbeats"
    resp = retrying_get(
        url,
        headers=_bearer(api_key),
        params={"start_time": _iso(start_time)},
    )

    data = _json_object(resp, "heartbeats")
    raw = data.get("heartbeats")
    if not isinstance(raw, list):
        raise MalformedResponseError("heartbeats: expected a list")

    out = [parse_heartbeat(h) for h in raw]
    logger.debug("fetched %d heartbeat(s) since %s", len(out), start_time)
    return out
