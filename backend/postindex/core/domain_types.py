"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - PostId wraps int — post identity is always an integer, never a string
    - ALL_CATEGORIES ("all") is a pseudo-category, never a value stored on a Post
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

PostId = NewType("PostId", int)


# ─── Constants ───────────────────────────────────────────────────

ALL_CATEGORIES = "all"
ROUTE_POST_PARAM = "post"


# ─── Enums ───────────────────────────────────────────────────────

class LoadStatus(str, Enum):
    """Post library lifecycle states."""
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ViewKind(str, Enum):
    """Resolved view intent — what the URL asks the reader to show."""
    HOME = "home"
    SINGLE = "single"


class SearchMode(str, Enum):
    """Search strategy. SIMPLE keeps load order, SCORED ranks by field weights."""
    SIMPLE = "simple"
    SCORED = "scored"


class Derivation(str, Enum):
    """Which derivation produced the current result set (re-run on store change)."""
    CATEGORY = "category"
    SEARCH = "search"


class SearchField(str, Enum):
    """The five post fields scanned by text search."""
    TITLE = "title"
    CATEGORY = "category"
    TAGS = "tags"
    EXCERPT = "excerpt"
    CONTENT = "content"
