"""View Schemas — JSON view models projected from engine results for the reader UI.

Invariants:
    - View models are read-only projections: built from Post / QueryResult, never fed back
    - PostListView.empty is True exactly when the result is a valid zero-length set,
      and carries a "no results" message so the client renders a distinct affordance
    - Every summary carries its canonical "?post=N" link (Router.encode)
    - RouteView.view is one of home / single / not_found; not_found is a normal view

Design Decisions:
    - Classmethod builders keep projection next to the shape it produces
    - display_date matches the long US form readers see ("January 5, 2024")
"""

import datetime
from typing import Literal

from pydantic import BaseModel

from postindex.core.domain_types import Derivation, LoadStatus, SearchMode
from postindex.core.post import Post
from postindex.core.query_engine import QueryResult
from postindex.core.router import RouteState, encode, post_link

NO_RESULTS_MESSAGE = "No posts found. Try adjusting your search terms or browse all posts."
NOT_FOUND_MESSAGE = "Post not found"


def format_display_date(value: datetime.date | None) -> str | None:
    if value is None:
        return None
    return f"{value:%B} {value.day}, {value.year}"


class PostSummary(BaseModel):
    """Card-sized projection for list views."""
    id: int
    title: str
    excerpt: str
    category: str
    date: datetime.date | None
    display_date: str | None
    link: str

    @classmethod
    def from_post(cls, post: Post) -> "PostSummary":
        return cls(
            id=post.id,
            title=post.title,
            excerpt=post.excerpt,
            category=post.category,
            date=post.date,
            display_date=format_display_date(post.date),
            link=post_link(post.id),
        )


class PostDetail(PostSummary):
    """Full projection for the single-post view."""
    content: str
    author: str
    tags: list[str]

    @classmethod
    def from_post(cls, post: Post) -> "PostDetail":
        summary = PostSummary.from_post(post)
        return cls(
            **summary.model_dump(),
            content=post.content,
            author=post.author,
            tags=list(post.tags),
        )


class PostListView(BaseModel):
    """List view: ordered posts plus the query state that produced them."""
    posts: list[PostSummary]
    total: int
    derivation: Derivation
    active_category: str
    search_term: str
    mode: SearchMode
    categories: list[str]
    empty: bool
    message: str | None = None

    @classmethod
    def from_result(
        cls, result: QueryResult, categories: tuple[str, ...], mode: SearchMode,
    ) -> "PostListView":
        return cls(
            posts=[PostSummary.from_post(p) for p in result.posts],
            total=len(result.posts),
            derivation=result.derivation,
            active_category=result.active_category,
            search_term=result.search_term,
            mode=mode,
            categories=list(categories),
            empty=result.is_empty,
            message=NO_RESULTS_MESSAGE if result.is_empty else None,
        )


class RouteView(BaseModel):
    """Resolved navigation target."""
    view: Literal["home", "single", "not_found"]
    title: str
    query: str
    post: PostDetail | None = None
    listing: PostListView | None = None
    message: str | None = None

    @classmethod
    def home(cls, listing: PostListView, site_title: str) -> "RouteView":
        return cls(
            view="home", title=f"{site_title} - Home",
            query=encode(RouteState.home()), listing=listing,
        )

    @classmethod
    def single(cls, post: Post, site_title: str) -> "RouteView":
        return cls(
            view="single", title=f"{post.title} - {site_title}",
            query=post_link(post.id), post=PostDetail.from_post(post),
        )

    @classmethod
    def not_found(cls, post_id: int, site_title: str) -> "RouteView":
        return cls(
            view="not_found", title=f"{NOT_FOUND_MESSAGE} - {site_title}",
            query=post_link(post_id), message=NOT_FOUND_MESSAGE,
        )


class CategoryListResponse(BaseModel):
    categories: list[str]


class LibraryStatusResponse(BaseModel):
    status: LoadStatus
    post_count: int
    source: str
