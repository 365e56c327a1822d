"""Post Library — owns the post set lifecycle: loading, ready, failed, reload.

Invariants:
    - status is LOADING until the first load settles; queries in LOADING raise
      PostsNotReadyError (never computed against an empty placeholder set)
    - A failed first load leaves status FAILED and every query raises PostsLoadError
    - A failed refresh keeps serving the previous store (status stays READY)
    - Listeners run after every successful load, with the new PostStore
    - The settled event is set once any load attempt finishes (success or failure)

Design Decisions:
    - Singleton initialized on startup, FastAPI dependency accessor (like a DB manager)
    - fetcher injectable: tests load from in-memory lists without touching disk/network
    - asyncio.Lock serializes overlapping reloads: the last finisher owns the store
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from postindex.core.domain_types import LoadStatus
from postindex.core.errors import PostsLoadError, PostsNotReadyError
from postindex.core.post_store import PostStore, load_posts
from postindex.infrastructure.post_source import fetch_posts

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, float], Awaitable[Any]]
StoreListener = Callable[[PostStore], None]


class PostLibrary:
    """Loads the post set once and hands out the immutable snapshot."""

    def __init__(
        self,
        source: str,
        timeout_seconds: float = 10.0,
        fetcher: Fetcher = fetch_posts,
    ):
        self.source = source
        self.timeout_seconds = timeout_seconds
        self._fetcher = fetcher
        self.status = LoadStatus.LOADING
        self.error: PostsLoadError | None = None
        self._store: PostStore | None = None
        self._settled = asyncio.Event()
        self._lock = asyncio.Lock()
        self._listeners: list[StoreListener] = []

    @property
    def store(self) -> PostStore | None:
        return self._store

    @property
    def post_count(self) -> int:
        return len(self._store) if self._store is not None else 0

    async def load(self) -> LoadStatus:
        """Fetch, validate, and publish the post set. Safe to call again as a retry."""
        async with self._lock:
            if self._store is None:
                self.status = LoadStatus.LOADING
            try:
                raw = await self._fetcher(self.source, self.timeout_seconds)
                store = load_posts(raw)
            except PostsLoadError as e:
                self._record_failure(e)
            else:
                self._publish(store)
            finally:
                self._settled.set()
            return self.status

    def _record_failure(self, error: PostsLoadError) -> None:
        self.error = error
        if self._store is None:
            self.status = LoadStatus.FAILED
        logger.error(
            f"Post load failed: {error.message}",
            extra={
                "error_code": error.code, "source": self.source,
                "load_status": self.status.value,
            },
        )

    def _publish(self, store: PostStore) -> None:
        self._store = store
        self.error = None
        self.status = LoadStatus.READY
        logger.info(
            "Posts loaded",
            extra={"source": self.source, "post_count": len(store)},
        )
        for listener in list(self._listeners):
            try:
                listener(store)
            except Exception:
                logger.exception("Store listener failed")

    async def wait_until_settled(self) -> None:
        await self._settled.wait()

    def require_store(self) -> PostStore:
        """Current snapshot, or the typed reason there is none."""
        if self._store is not None:
            return self._store
        if self.status is LoadStatus.FAILED and self.error is not None:
            raise PostsLoadError(self.error.message, self.error.context)
        raise PostsNotReadyError()

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a store-replacement listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


# Singleton (initialized on startup)
post_library: PostLibrary | None = None


def init_post_library(source: str, **kwargs) -> PostLibrary:
    global post_library
    post_library = PostLibrary(source, **kwargs)
    return post_library


def get_post_library() -> PostLibrary:
    """FastAPI dependency for the post library."""
    if not post_library:
        raise RuntimeError("Post library not initialized")
    return post_library
