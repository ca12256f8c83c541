from __future__ import annotations

import logging
import math
import random
import time
from typing import Any, Mapping

import requests

from catalog_grouping.utils.env import env_str

JIKAN_API_BASE_URL = "https://api.jikan.moe/v4"
JIKAN_MAX_PAGE_SIZE = 25

logger = logging.getLogger(__name__)


class JikanClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, body_snippet: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


def resolve_base_url(base_url: str | None = None) -> str:
    resolved = (base_url or env_str("JIKAN_API_BASE_URL") or JIKAN_API_BASE_URL).strip()
    return resolved.rstrip("/")


def _request_json(
    session: requests.Session,
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    timeout_seconds: float = 20.0,
) -> dict[str, Any]:
    headers = {
        "accept": "application/json",
        "user-agent": "Mozilla/5.0",
    }
    max_attempts = 3

    last_response: requests.Response | None = None
    for attempt in range(max_attempts):
        try:
            resp = session.get(url, params=params, headers=headers, timeout=timeout_seconds)
        except requests.RequestException as exc:
            if attempt < max_attempts - 1:
                delay = 1.0 * (2**attempt)
                jitter = random.uniform(0.0, delay * 0.25)
                logger.warning("Jikan request to %s failed (%s); retrying in %.1fs", url, exc, delay + jitter)
                time.sleep(delay + jitter)
                continue
            raise JikanClientError(f"Jikan request failed: {exc}") from exc

        last_response = resp
        if resp.status_code == 200:
            break

        retryable = resp.status_code == 429 or 500 <= resp.status_code < 600
        if retryable and attempt < max_attempts - 1:
            delay = 1.0 * (2**attempt)
            retry_after = (resp.headers.get("Retry-After") or "").strip()
            if retry_after.isdigit():
                delay = max(delay, float(retry_after))
            jitter = random.uniform(0.0, delay * 0.25)
            logger.warning("Jikan returned HTTP %s for %s; retrying in %.1fs", resp.status_code, url, delay + jitter)
            time.sleep(delay + jitter)
            continue

        raise JikanClientError(
            f"Jikan request failed with HTTP {resp.status_code}.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        )

    if last_response is None:
        raise JikanClientError("Jikan request failed (no response).")
    resp = last_response

    try:
        payload = resp.json()
    except ValueError as exc:
        raise JikanClientError(
            "Jikan returned non-JSON response.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        ) from exc

    if not isinstance(payload, dict):
        raise JikanClientError("Jikan returned unexpected JSON shape (not an object).")
    return payload


def fetch_top_anime(
    total: int = 200,
    *,
    per_page: int = JIKAN_MAX_PAGE_SIZE,
    delay_seconds: float = 1.0,
    session: requests.Session | None = None,
    base_url: str | None = None,
) -> list[dict[str, Any]]:
    """
    Fetch the first `total` entries of `/top/anime`, one page at a time.

    Sleeps `delay_seconds` between pages (Jikan rate limits aggressively) and truncates the
    result to exactly `total` items.
    """

    if total <= 0:
        return []
    per_page = max(1, min(int(per_page), JIKAN_MAX_PAGE_SIZE))
    total_pages = math.ceil(total / per_page)
    session = session or requests.Session()
    url = f"{resolve_base_url(base_url)}/top/anime"

    items: list[dict[str, Any]] = []
    for page in range(1, total_pages + 1):
        logger.info("Fetching top anime page %s/%s", page, total_pages)
        payload = _request_json(session, url, params={"limit": per_page, "page": page})
        page_items = payload.get("data")
        if isinstance(page_items, list):
            items.extend([i for i in page_items if isinstance(i, dict)])

        pagination = payload.get("pagination")
        if isinstance(pagination, Mapping) and pagination.get("has_next_page") is False:
            break

        if page < total_pages:
            time.sleep(delay_seconds)

    return items[:total]


def fetch_anime_characters(
    mal_id: int,
    *,
    session: requests.Session | None = None,
    base_url: str | None = None,
) -> list[dict[str, Any]]:
    session = session or requests.Session()
    url = f"{resolve_base_url(base_url)}/anime/{int(mal_id)}/characters"
    payload = _request_json(session, url)
    data = payload.get("data")
    if not isinstance(data, list):
        raise JikanClientError(f"Jikan characters response for anime {mal_id} is missing `data`.")
    return [c for c in data if isinstance(c, dict)]
