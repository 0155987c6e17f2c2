from __future__ import annotations

import logging
import time

import requests

from moonshot_tracker.m2.errors import HttpStatusError

logger = logging.getLogger(__name__)

UNREADABLE_BODY = "Could not read error response"


def read_body(resp) -> str:
    try:
        return resp.text
    except Exception:  # noqa: BLE001
        # Decoding failures, truncated streams, etc.
        return UNREADABLE_BODY


def retrying_get(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
    timeout: float = 30,
    max_retries: int = 3,
    base_delay_s: float = 1.0,
) -> requests.Response:
    """GET with exponential backoff.

    Makes up to ``max_retries + 1`` attempts, sleeping
    ``base_delay_s * 2**attempt`` between them. The first 2xx response is
    returned. Once attempts run out the most recent failure is raised as is:
    an HttpStatusError for a non-2xx response, or the requests exception for a
    transport failure.

    Client errors (4xx) are retried exactly like server errors. Existing
    callers rely on that, so it is kept.
    """

    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")

    last_error: Exception | None = None
    for attempt in range(max_retries + 1):
        try:
            resp = requests.get(url, headers=headers, params=params, timeout=timeout)
        except requests.RequestException as e:
            last_error = e
        else:
            if 200 <= resp.status_code < 300:
                return resp
            last_error = HttpStatusError(resp.status_code, read_body(resp))

        if attempt == max_retries:
            break

        delay_s = base_delay_s * 2**attempt
        logger.debug(
            "GET %s failed (attempt %d/%d): %s; retrying in %.1fs",
            url,
            attempt + 1,
            max_retries + 1,
            last_error,
            delay_s,
        )
        time.sleep(delay_s)

    assert last_error is not None
    raise last_error
