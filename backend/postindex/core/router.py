"""Router — maps URL query-string state to a view intent and back.

Invariants:
    - Stateless: every navigation re-resolves from the query string alone
    - Only the "post" parameter is meaningful; search term and category are never encoded
    - "post" present and a base-10 integer → single view; anything else → home view
    - resolve(encode(route)) == route for every valid route
    - A missing post is PostNotFoundError (a view-level state), never fatal

Design Decisions:
    - Strict integer pattern instead of int(): int() would accept "1_000" and
      surrounding whitespace, which no link this app generates ever contains
    - First "post" value wins when the parameter repeats (URLSearchParams.get semantics)
"""

import re
from dataclasses import dataclass
from urllib.parse import parse_qs, urlencode

from postindex.core.domain_types import PostId, ROUTE_POST_PARAM, ViewKind
from postindex.core.errors import PostNotFoundError
from postindex.core.post import Post
from postindex.core.post_store import PostStore

_INTEGER = re.compile(r"-?\d+")


@dataclass(frozen=True)
class RouteState:
    view: ViewKind
    post_id: PostId | None = None

    @classmethod
    def home(cls) -> "RouteState":
        return cls(ViewKind.HOME)

    @classmethod
    def single(cls, post_id: int) -> "RouteState":
        return cls(ViewKind.SINGLE, PostId(post_id))


def resolve(query_string: str) -> RouteState:
    """Resolve "?post=2", "post=2", "?" or "" into a RouteState."""
    params = parse_qs(query_string.removeprefix("?"), keep_blank_values=True)
    values = params.get(ROUTE_POST_PARAM)
    if not values:
        return RouteState.home()
    raw = values[0]
    if not _INTEGER.fullmatch(raw):
        return RouteState.home()
    return RouteState.single(int(raw))


def encode(route: RouteState) -> str:
    """Inverse of resolve: "?post=N" for single views, "?" for home."""
    if route.view is ViewKind.SINGLE and route.post_id is not None:
        return "?" + urlencode({ROUTE_POST_PARAM: route.post_id})
    return "?"


def post_link(post_id: int) -> str:
    return encode(RouteState.single(post_id))


def resolve_or_fail(route: RouteState, store: PostStore) -> Post:
    """Look up the post a single-view route points at."""
    if route.view is not ViewKind.SINGLE or route.post_id is None:
        raise ValueError("resolve_or_fail requires a single-post route")
    post = store.get(route.post_id)
    if post is None:
        raise PostNotFoundError(route.post_id)
    return post
