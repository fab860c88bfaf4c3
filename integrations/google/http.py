# integrations/google/http.py
from __future__ import annotations

import json
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen


class GoogleApiError(RuntimeError):
    def __init__(self, message: str, *, status: int | None = None):
        super().__init__(message)
        self.status = status


def _safe_preview(text: str, limit: int = 500) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _error_message(raw: str) -> str:
    try:
        parsed = json.loads(raw or "")
    except ValueError:
        return _safe_preview(raw)
    if not isinstance(parsed, dict):
        return _safe_preview(raw)

    err = parsed.get("error")
    if isinstance(err, dict):
        return str(err.get("message") or err.get("status") or "Google rejected request")
    return str(parsed.get("error_description") or err or "Google rejected request")


def request_json(
    method: str,
    url: str,
    *,
    body: dict | None = None,
    form: dict | None = None,
    token: str | None = None,
    params: dict | None = None,
    timeout: int = 25,
    error_class: type[GoogleApiError] = GoogleApiError,
) -> dict[str, Any]:
    """
    One JSON round-trip to a Google endpoint.

    `body` is sent as JSON, `form` as x-www-form-urlencoded (OAuth token
    endpoint). Failures raise `error_class` with the HTTP status attached.
    """
    if params:
        url = f"{url}?{urlencode(params)}"

    headers = {"Accept": "application/json"}
    data = None
    if body is not None:
        data = json.dumps(body, ensure_ascii=False).encode("utf-8")
        headers["Content-Type"] = "application/json"
    elif form is not None:
        data = urlencode(form).encode("utf-8")
        headers["Content-Type"] = "application/x-www-form-urlencoded"
    if token:
        headers["Authorization"] = f"Bearer {token}"

    req = Request(url, data=data, headers=headers, method=method)

    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        try:
            raw = e.read().decode("utf-8", errors="replace")
        except OSError:
            raw = ""
        raise error_class(f"Google HTTPError: {e.code} {_error_message(raw)}", status=e.code) from e
    except URLError as e:
        raise error_class(f"Google URLError: {e.reason}") from e

    if not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise error_class(f"Google returned non-JSON: {_safe_preview(raw)}") from e
    return parsed if isinstance(parsed, dict) else {"data": parsed}
