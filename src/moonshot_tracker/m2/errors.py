from __future__ import annotations


class HackatimeApiError(RuntimeError):
    pass


class HttpStatusError(HackatimeApiError):
    """Non-2xx response. Carries the status and whatever body text could be read."""

    label = "HTTP error!"

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"{self.label} status: {status_code} - {body}")
        self.status_code = status_code
        self.body = body


class LookupFailedError(HttpStatusError):
    label = "failed to lookup user:"


class StatsFetchError(HttpStatusError):
    label = "failed to fetch stats:"


class UserNotFoundError(HackatimeApiError):
    pass


class MalformedResponseError(HackatimeApiError):
    pass
