"""Post Record — immutable blog post and its validation from raw JSON objects.

Invariants:
    - Post is frozen: no field is ever reassigned after parsing
    - id is a real int (bool and float are rejected, even 1.0)
    - category is a single non-empty-typed string, required
    - tags is a tuple (display order kept, duplicates kept)
    - Optional text fields default to "" so search never sees None

Design Decisions:
    - Manual validation instead of pydantic: core/ stays dependency-free, and every
      failure maps to PostsLoadError with the offending index for the failure view
    - date parsed eagerly: a malformed date is a load failure, not a render-time crash
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping

from postindex.core.domain_types import PostId
from postindex.core.errors import ErrorContext, PostsLoadError

_TEXT_FIELDS = ("title", "excerpt", "content", "author")


@dataclass(frozen=True)
class Post:
    """A single blog entry."""
    id: PostId
    title: str
    excerpt: str
    content: str
    category: str
    author: str
    date: date | None
    tags: tuple[str, ...] = ()


def _fail(index: int, reason: str) -> PostsLoadError:
    return PostsLoadError(
        f"Invalid post at index {index}: {reason}",
        ErrorContext(debug_info={"index": index, "reason": reason}),
    )


def _parse_id(raw: Mapping[str, Any], index: int) -> PostId:
    if "id" not in raw:
        raise _fail(index, "missing required field 'id'")
    value = raw["id"]
    if isinstance(value, bool) or not isinstance(value, int):
        raise _fail(index, f"'id' must be an integer, got {type(value).__name__}")
    return PostId(value)


def _parse_category(raw: Mapping[str, Any], index: int) -> str:
    if "category" not in raw or raw["category"] is None:
        raise _fail(index, "missing required field 'category'")
    value = raw["category"]
    if not isinstance(value, str):
        raise _fail(index, "'category' must be a string")
    return value


def _parse_text(raw: Mapping[str, Any], name: str, index: int) -> str:
    value = raw.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _fail(index, f"'{name}' must be a string")
    return value


def _parse_tags(raw: Mapping[str, Any], index: int) -> tuple[str, ...]:
    value = raw.get("tags")
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
        raise _fail(index, "'tags' must be a list of strings")
    return tuple(value)


def parse_iso_date(value: str) -> date:
    """Parse an ISO-8601 date or datetime string into a calendar date."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        return datetime.fromisoformat(value).date()


def _parse_date(raw: Mapping[str, Any], index: int) -> date | None:
    value = raw.get("date")
    if value is None:
        return None
    if not isinstance(value, str):
        raise _fail(index, "'date' must be an ISO-8601 string")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise _fail(index, f"'date' is not ISO-8601: {value!r}")


def parse_post(raw: Any, index: int) -> Post:
    """Validate one raw post object. Raises PostsLoadError on any shape problem."""
    if not isinstance(raw, Mapping):
        raise _fail(index, "post must be a JSON object")
    text = {name: _parse_text(raw, name, index) for name in _TEXT_FIELDS}
    return Post(
        id=_parse_id(raw, index),
        category=_parse_category(raw, index),
        date=_parse_date(raw, index),
        tags=_parse_tags(raw, index),
        **text,
    )
