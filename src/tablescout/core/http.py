"""
HTTP helpers.

This module centralizes the minimal HTTP client logic used by the geocoding client.

Design goals:
- Small surface area (GET JSON).
- Deterministic defaults (timeout + User-Agent).
- Raise on non-2xx so callers can decide how to fail.
- Keep secrets passed as query params (Mapbox `access_token`) out of error messages,
  because those messages end up in logs and API error payloads.
"""

from __future__ import annotations

from typing import Any

import httpx


DEFAULT_USER_AGENT = "tablescout/0.1.0 (+https://local)"

SECRET_QUERY_PARAMS = frozenset({"access_token"})


def redact_url(url: httpx.URL | str) -> str:
    """Return `url` as text with secret query parameter values masked."""
    u = httpx.URL(str(url))
    if not any(k in SECRET_QUERY_PARAMS for k in u.params.keys()):
        return str(u)
    params = [(k, "***" if k in SECRET_QUERY_PARAMS else v) for k, v in u.params.multi_items()]
    return str(u.copy_with(params=params))


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15,
) -> Any:
    """GET `url` and return the decoded JSON response.

    Raises:
        httpx.HTTPStatusError: On non-2xx status codes (URL redacted in the message).
        httpx.HTTPError: On transport errors.
        ValueError: If the response body is not valid JSON.
    """
    request_headers = {"User-Agent": DEFAULT_USER_AGENT}
    if headers:
        request_headers.update(headers)

    with httpx.Client(timeout=timeout_seconds) as client:
        resp = client.get(url, params=params, headers=request_headers)
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = f"HTTP {resp.status_code} for url '{redact_url(resp.request.url)}'"
            raise httpx.HTTPStatusError(message, request=e.request, response=e.response) from None
        return resp.json()
