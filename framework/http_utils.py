"""Minimal HTTP JSON helpers for remote question providers."""

from __future__ import annotations

from http.client import HTTPException
import json
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen


def get_json(url: str, headers: dict[str, str] | None = None, timeout_sec: float = 5.0) -> Any:
    """GET a URL and decode the JSON response body."""
    request = Request(url=url, method="GET")
    request.add_header("Accept", "application/json")
    for key, value in (headers or {}).items():
        request.add_header(key, value)

    try:
        with urlopen(request, timeout=timeout_sec) as response:
            raw = response.read().decode("utf-8")
    except HTTPError as exc:
        detail = exc.read().decode("utf-8", errors="replace")
        raise RuntimeError(f"HTTP {exc.code} from {url}: {detail}") from exc
    except URLError as exc:
        raise RuntimeError(f"Network error calling {url}: {exc.reason}") from exc
    except TimeoutError as exc:
        raise RuntimeError(f"Timed out after {timeout_sec}s calling {url}") from exc
    except (HTTPException, OSError) as exc:
        raise RuntimeError(f"Connection error calling {url}: {exc}") from exc

    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Invalid JSON from {url}: {exc.msg}") from exc
