"""Post Source — fetches the raw post array from a local file or an http(s) URL.

Invariants:
    - Returns the decoded JSON value untouched; shape validation lives in core/post_store.py
    - Non-2xx status, transport failure, timeout, missing file, undecodable bytes,
      or invalid JSON all raise PostsLoadError (never a partial or empty success)
    - One attempt per call: retry is a user-initiated reload, not a loop here

Design Decisions:
    - httpx.AsyncClient for URLs: same async client the test suite drives the API with
    - Local files read in a worker thread so the event loop keeps serving health probes
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import httpx

from postindex.core.errors import ErrorContext, PostsLoadError

logger = logging.getLogger(__name__)


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def fetch_posts(
    source: str,
    timeout_seconds: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Fetch and decode the post array from source."""
    if is_remote(source):
        return await _fetch_remote(source, timeout_seconds, transport)
    return await asyncio.to_thread(_read_local, Path(source))


async def _fetch_remote(
    url: str, timeout_seconds: float, transport: httpx.AsyncBaseTransport | None,
) -> Any:
    ctx = ErrorContext(source=url)
    try:
        async with httpx.AsyncClient(
            timeout=timeout_seconds, transport=transport,
        ) as client:
            response = await client.get(url)
    except httpx.TimeoutException as e:
        logger.error(f"Post fetch timed out: {e}", extra={"source": url})
        raise PostsLoadError(f"Timed out fetching {url}", ctx)
    except httpx.HTTPError as e:
        logger.error(f"Post fetch failed: {e}", extra={"source": url})
        raise PostsLoadError(f"Transport error fetching {url}: {e}", ctx)

    if not response.is_success:
        ctx.debug_info = {"status_code": response.status_code}
        raise PostsLoadError(
            f"HTTP error! status: {response.status_code}", ctx,
        )
    try:
        return response.json()
    except ValueError as e:
        raise PostsLoadError(f"Invalid JSON from {url}: {e}", ctx)


def _read_local(path: Path) -> Any:
    ctx = ErrorContext(source=str(path))
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PostsLoadError(f"Cannot read {path}: {e.strerror or e}", ctx)
    except UnicodeDecodeError as e:
        raise PostsLoadError(f"{path} is not valid UTF-8: {e.reason}", ctx)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise PostsLoadError(f"Invalid JSON in {path}: {e}", ctx)
