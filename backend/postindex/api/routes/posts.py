"""Post Routes — list, detail, categories, URL-state view resolution, and reload.

Invariants:
    - Every handler reads one PostStore snapshot via PostLibrary.require_store()
      (loading → 503 POSTS_LOADING, failed → 503 POSTS_LOAD_FAILED)
    - List results come from a request-scoped QueryEngine: no query state
      survives between requests, nothing global is mutated
    - GET /posts/{id} on a missing id → 404 POST_NOT_FOUND;
      GET /view?post=N on a missing id → 200 with view "not_found"
    - Reload returns the settled library status, or the load error envelope

Design Decisions:
    - /view takes the raw query string so resolution goes through Router.resolve,
      exactly as a browser location would
    - Search term length checked against settings (not a static Query bound),
      so operators can tune it without a code change
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from postindex.config import Settings, get_settings
from postindex.core.domain_types import LoadStatus, ViewKind
from postindex.core.errors import PostNotFoundError, QueryValidationError
from postindex.core.query_engine import QueryEngine
from postindex.core.router import RouteState, resolve, resolve_or_fail
from postindex.schemas.queries import PostListQuery
from postindex.schemas.views import (
    CategoryListResponse, LibraryStatusResponse, PostDetail, PostListView,
    RouteView,
)
from postindex.services.post_library import PostLibrary, get_post_library

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["posts"])


@router.get("/posts", response_model=PostListView)
async def list_posts(
    query: Annotated[PostListQuery, Query()],
    library: PostLibrary = Depends(get_post_library),
    settings: Settings = Depends(get_settings),
):
    """Category-filtered or searched post list."""
    store = library.require_store()
    mode = query.mode or settings.search_mode
    engine = QueryEngine(store, mode)
    if query.q is not None:
        if len(query.q) > settings.max_search_term_length:
            raise QueryValidationError(
                f"Search term longer than {settings.max_search_term_length} characters",
                field="q",
            )
        result = engine.search(query.q)
    elif query.category is not None:
        result = engine.select_category(query.category)
    else:
        result = engine.result
    logger.info(
        "Listed posts",
        extra={
            "category": result.active_category, "search_term": result.search_term,
            "result_count": len(result.posts),
        },
    )
    return PostListView.from_result(result, store.categories(), mode)


@router.get("/posts/{post_id}", response_model=PostDetail)
async def get_post(
    post_id: int, library: PostLibrary = Depends(get_post_library),
):
    """Single post by id."""
    store = library.require_store()
    post = resolve_or_fail(RouteState.single(post_id), store)
    return PostDetail.from_post(post)


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(library: PostLibrary = Depends(get_post_library)):
    return CategoryListResponse(categories=list(library.require_store().categories()))


@router.get("/view", response_model=RouteView)
async def resolve_view(
    request: Request,
    library: PostLibrary = Depends(get_post_library),
    settings: Settings = Depends(get_settings),
):
    """Resolve browser location state (?post=N) to a home or single-post view."""
    store = library.require_store()
    route = resolve(request.url.query)
    if route.view is ViewKind.HOME:
        engine = QueryEngine(store, settings.search_mode)
        listing = PostListView.from_result(
            engine.result, store.categories(), settings.search_mode,
        )
        return RouteView.home(listing, settings.site_title)
    try:
        post = resolve_or_fail(route, store)
    except PostNotFoundError:
        logger.info("View for missing post", extra={"post_id": route.post_id})
        return RouteView.not_found(route.post_id, settings.site_title)
    return RouteView.single(post, settings.site_title)


@router.post("/posts/reload", response_model=LibraryStatusResponse)
async def reload_posts(library: PostLibrary = Depends(get_post_library)):
    """Retry a failed load (or refresh a loaded one) and report the outcome."""
    status = await library.load()
    if status is LoadStatus.FAILED:
        library.require_store()  # raises the recorded PostsLoadError
    return LibraryStatusResponse(
        status=status, post_count=library.post_count, source=library.source,
    )
