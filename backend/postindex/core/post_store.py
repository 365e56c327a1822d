"""Post Store — canonical, immutable-after-load snapshot of the post set.

Invariants:
    - load_posts is all-or-nothing: any malformed post or duplicate id raises
      PostsLoadError and no store is produced (never partially populated)
    - Post ids are unique for the lifetime of a store
    - Load order is preserved and is the only ordering the store knows
    - No mutation API: posts are a tuple, the id index is a MappingProxyType

Design Decisions:
    - Reload builds a new PostStore instead of mutating the old one: every
      derived view stays a read-only projection of exactly one snapshot
    - categories() computed once at construction (first-occurrence order)
"""

from collections.abc import Iterator
from types import MappingProxyType
from typing import Any

from postindex.core.domain_types import ALL_CATEGORIES, PostId
from postindex.core.errors import ErrorContext, PostsLoadError
from postindex.core.post import Post, parse_post


class PostStore:
    """Immutable post snapshot with id lookup and category listing."""

    __slots__ = ("_posts", "_by_id", "_categories")

    def __init__(self, posts: tuple[Post, ...]):
        by_id: dict[PostId, Post] = {}
        for post in posts:
            if post.id in by_id:
                raise PostsLoadError(
                    f"Duplicate post id {post.id}",
                    ErrorContext(post_id=post.id),
                )
            by_id[post.id] = post
        self._posts = posts
        self._by_id = MappingProxyType(by_id)
        self._categories = _unique_categories(posts)

    @property
    def posts(self) -> tuple[Post, ...]:
        return self._posts

    def get(self, post_id: int) -> Post | None:
        return self._by_id.get(PostId(post_id))

    def categories(self) -> tuple[str, ...]:
        """Distinct categories in first-occurrence order, prefixed by "all"."""
        return (ALL_CATEGORIES, *self._categories)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __contains__(self, post_id: object) -> bool:
        return post_id in self._by_id


def _unique_categories(posts: tuple[Post, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(p.category for p in posts))


def load_posts(source: Any) -> PostStore:
    """Build a PostStore from a JSON-like array of post objects."""
    if not isinstance(source, list):
        raise PostsLoadError(
            f"Post source must be a JSON array, got {type(source).__name__}",
        )
    posts = tuple(parse_post(raw, i) for i, raw in enumerate(source))
    return PostStore(posts)
