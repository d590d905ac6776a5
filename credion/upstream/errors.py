from typing import Optional

import httpx


class FetchError(Exception):
    """An upstream report API call failed (network, timeout or non-2xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.status_code} - {self.message}"
        return self.message


class UpstreamPayloadError(FetchError):
    """The upstream answered 2xx but the body was not the JSON we expect."""


def fetch_error_from(exc: httpx.HTTPError, action: str) -> FetchError:
    """Translate an httpx failure into a FetchError naming what we were doing."""
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        detail = response.reason_phrase
        try:
            body = response.json()
            if isinstance(body, dict) and body.get("message"):
                detail = body["message"]
        except ValueError:
            pass
        return FetchError(f"{action} failed: {detail}", status_code=response.status_code)
    if isinstance(exc, httpx.TimeoutException):
        return FetchError(f"{action} timed out")
    return FetchError(f"{action} failed - no response received: {exc}")
