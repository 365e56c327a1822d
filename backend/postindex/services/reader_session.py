"""Reader Session — one live reader's QueryState, debounced search, and navigation.

Invariants:
    - Each session owns exactly one QueryEngine; no engine is reachable globally
    - Events arriving before the first load settles are deferred by start(), not
      computed against an empty set
    - Search input is debounced; category selection and navigation cancel any
      pending debounced search before they run
    - A store reload re-runs the active derivation and pushes fresh results
    - Every outcome reaches the outbox as an event: results, view, or error
      (an empty result is a "results" event with empty=True, never silence)

Design Decisions:
    - Outbox queue instead of direct socket writes: the debouncer and library
      listeners are sync callbacks, a single sender task owns the socket
    - Engine created lazily on the first available store, so a failed first load
      followed by a successful reload still brings the session to life
"""

import asyncio
import logging

from postindex.core.domain_types import SearchMode, ViewKind
from postindex.core.errors import (
    PostIndexError, PostNotFoundError, QueryValidationError,
)
from postindex.core.post_store import PostStore
from postindex.core.query_engine import QueryEngine, QueryResult
from postindex.core.router import resolve, resolve_or_fail
from postindex.schemas.reader_events import (
    CategoryEvent, NavigateEvent, SearchEvent,
)
from postindex.schemas.views import PostListView, RouteView
from postindex.services.post_library import PostLibrary
from postindex.services.search_debouncer import SearchDebouncer

logger = logging.getLogger(__name__)


class ReaderSession:
    """Event-driven query session for one connected reader."""

    def __init__(
        self,
        library: PostLibrary,
        mode: SearchMode = SearchMode.SCORED,
        debounce_ms: int = 300,
        max_term_length: int = 200,
        site_title: str = "Personal Blog",
    ):
        self._library = library
        self._mode = mode
        self._max_term_length = max_term_length
        self._site_title = site_title
        self._engine: QueryEngine | None = None
        self._debouncer = SearchDebouncer(self._run_search, debounce_ms)
        self._unsubscribe = library.subscribe(self._on_store_replaced)
        self.outbox: asyncio.Queue[dict] = asyncio.Queue()

    @property
    def engine(self) -> QueryEngine | None:
        return self._engine

    @property
    def debouncer(self) -> SearchDebouncer:
        return self._debouncer

    async def start(self) -> bool:
        """Wait for the library to settle, then push the initial home listing."""
        await self._library.wait_until_settled()
        if self._engine is not None:
            return True
        try:
            store = self._library.require_store()
        except PostIndexError as e:
            self.reject(e)
            return False
        self._engine = QueryEngine(store, self._mode)
        self._emit_results(self._engine, self._engine.result)
        return True

    def handle(self, event: SearchEvent | CategoryEvent | NavigateEvent) -> None:
        match event:
            case SearchEvent(term=term):
                self._submit_search(term)
            case CategoryEvent(category=category):
                self._debouncer.cancel()
                self._select_category(category)
            case NavigateEvent(query=query):
                self._debouncer.cancel()
                self._navigate(query)

    def reject(self, error: PostIndexError) -> None:
        logger.warning(
            f"Reader event rejected: {error.message}",
            extra={"error_code": error.code},
        )
        self.outbox.put_nowait(error.to_event())

    def close(self) -> None:
        self._debouncer.cancel()
        self._unsubscribe()

    # ─── Event handlers ──────────────────────────────────────────

    def _submit_search(self, term: str) -> None:
        if len(term) > self._max_term_length:
            self.reject(QueryValidationError(
                f"Search term longer than {self._max_term_length} characters",
                field="term",
            ))
            return
        self._debouncer.submit(term)

    def _run_search(self, term: str) -> None:
        engine = self._require_engine()
        if engine is None:
            return
        result = engine.search(term)
        logger.info(
            "Search ran",
            extra={"search_term": term, "result_count": len(result.posts)},
        )
        self._emit_results(engine, result)

    def _select_category(self, category: str) -> None:
        engine = self._require_engine()
        if engine is None:
            return
        result = engine.select_category(category)
        logger.info(
            "Category selected",
            extra={"category": category, "result_count": len(result.posts)},
        )
        self._emit_results(engine, result)

    def _navigate(self, query: str) -> None:
        engine = self._require_engine()
        if engine is None:
            return
        route = resolve(query)
        if route.view is ViewKind.HOME:
            listing = self._list_view(engine, engine.result)
            view = RouteView.home(listing, self._site_title)
        else:
            try:
                post = resolve_or_fail(route, engine.store)
            except PostNotFoundError as e:
                logger.info(
                    "Navigation to missing post",
                    extra={"post_id": e.context.post_id},
                )
                view = RouteView.not_found(route.post_id, self._site_title)
            else:
                view = RouteView.single(post, self._site_title)
        self.outbox.put_nowait(
            {"type": "view", "data": view.model_dump(mode="json")},
        )

    def _on_store_replaced(self, store: PostStore) -> None:
        if self._engine is None:
            self._engine = QueryEngine(store, self._mode)
            result = self._engine.result
        else:
            result = self._engine.rebind(store)
        self._emit_results(self._engine, result)

    # ─── Helpers ─────────────────────────────────────────────────

    def _require_engine(self) -> QueryEngine | None:
        if self._engine is None:
            try:
                store = self._library.require_store()
            except PostIndexError as e:
                self.reject(e)
                return None
            self._engine = QueryEngine(store, self._mode)
        return self._engine

    def _list_view(self, engine: QueryEngine, result: QueryResult) -> PostListView:
        return PostListView.from_result(result, engine.categories(), self._mode)

    def _emit_results(self, engine: QueryEngine, result: QueryResult) -> None:
        view = self._list_view(engine, result)
        self.outbox.put_nowait({"type": "results", "data": view.model_dump(mode="json")})
