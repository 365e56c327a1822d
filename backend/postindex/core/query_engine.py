"""Query Engine — category filter and weighted text search over a PostStore.

Invariants:
    - filter_by_category("all") returns every post in load order; any other value
      returns exact-match posts in load order; an unknown category returns ()
    - Search is case-insensitive, whitespace-trimmed substring matching over
      title, category, tags, excerpt, content
    - Scored search: score = sum of SEARCH_WEIGHTS for matching fields, score 0
      excluded, sorted by descending score with a STABLE sort (load order is the
      only tie-break, no secondary key)
    - Empty / whitespace-only term returns every post in load order with no scoring
      pass, in both search modes
    - Category filter and search are mutually exclusive, both run over the full set:
      select_category() clears the search term; search() ignores the active category
    - QueryState is mutated only by QueryEngine methods

Design Decisions:
    - One authoritative implementation for both the stateless API path (module
      functions) and the stateful reader session path (QueryEngine)
    - Lowercase only, no diacritic folding: "café" does not match "cafe"
    - rebind() re-runs whichever derivation produced the current result, so a
      reload never leaves a session showing posts from the old snapshot
"""

from collections.abc import Iterable
from dataclasses import dataclass

from postindex.core.domain_types import (
    ALL_CATEGORIES, Derivation, PostId, SearchField, SearchMode,
)
from postindex.core.post import Post
from postindex.core.post_store import PostStore


SEARCH_WEIGHTS: dict[SearchField, int] = {
    SearchField.TITLE: 10,
    SearchField.CATEGORY: 3,
    SearchField.TAGS: 4,
    SearchField.EXCERPT: 5,
    SearchField.CONTENT: 2,
}


# ─── Pure derivations ───────────────────────────────────────────

def normalize_term(term: str) -> str:
    return term.strip().lower()


def matched_fields(post: Post, needle: str) -> list[SearchField]:
    """Fields of post containing needle. needle must already be normalized."""
    hits = []
    if needle in post.title.lower():
        hits.append(SearchField.TITLE)
    if needle in post.category.lower():
        hits.append(SearchField.CATEGORY)
    if any(needle in tag.lower() for tag in post.tags):
        hits.append(SearchField.TAGS)
    if needle in post.excerpt.lower():
        hits.append(SearchField.EXCERPT)
    if needle in post.content.lower():
        hits.append(SearchField.CONTENT)
    return hits


def score_post(post: Post, term: str) -> int:
    """Relevance of post for term; 0 means no field matched."""
    needle = normalize_term(term)
    if not needle:
        return 0
    return sum(SEARCH_WEIGHTS[f] for f in matched_fields(post, needle))


def filter_by_category(posts: Iterable[Post], category: str) -> tuple[Post, ...]:
    if category == ALL_CATEGORIES:
        return tuple(posts)
    return tuple(p for p in posts if p.category == category)


def search_simple(posts: Iterable[Post], term: str) -> tuple[Post, ...]:
    """Unweighted search: every post matching any field, load order kept."""
    needle = normalize_term(term)
    if not needle:
        return tuple(posts)
    return tuple(p for p in posts if matched_fields(p, needle))


def search_scored(posts: Iterable[Post], term: str) -> tuple[Post, ...]:
    """Weighted search: matching posts by descending score, ties in load order."""
    needle = normalize_term(term)
    if not needle:
        return tuple(posts)
    scored = []
    for post in posts:
        score = sum(SEARCH_WEIGHTS[f] for f in matched_fields(post, needle))
        if score > 0:
            scored.append((score, post))
    # list.sort is stable
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return tuple(post for _, post in scored)


def search(
    posts: Iterable[Post], term: str, mode: SearchMode = SearchMode.SCORED,
) -> tuple[Post, ...]:
    if mode is SearchMode.SIMPLE:
        return search_simple(posts, term)
    return search_scored(posts, term)


# ─── Stateful engine ────────────────────────────────────────────

@dataclass(frozen=True)
class QueryResult:
    """One derived result set. A zero-length result is valid, not an error."""
    posts: tuple[Post, ...]
    derivation: Derivation
    active_category: str
    search_term: str

    @property
    def is_empty(self) -> bool:
        return not self.posts

    @property
    def post_ids(self) -> tuple[PostId, ...]:
        return tuple(p.id for p in self.posts)


@dataclass
class QueryState:
    """Per-session query state — owned and mutated by QueryEngine only."""
    active_category: str = ALL_CATEGORIES
    search_term: str = ""
    result_order: tuple[PostId, ...] = ()
    derivation: Derivation = Derivation.CATEGORY


class QueryEngine:
    """Holds QueryState for one reader and derives results from a PostStore."""

    def __init__(self, store: PostStore, mode: SearchMode = SearchMode.SCORED):
        self._store = store
        self._mode = mode
        self._state = QueryState()
        self._result = self._apply(self._derive())

    @property
    def store(self) -> PostStore:
        return self._store

    @property
    def mode(self) -> SearchMode:
        return self._mode

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def result(self) -> QueryResult:
        return self._result

    def categories(self) -> tuple[str, ...]:
        return self._store.categories()

    def select_category(self, category: str) -> QueryResult:
        """Switch to a category filter. Clears any search term."""
        self._state.active_category = category
        self._state.search_term = ""
        self._state.derivation = Derivation.CATEGORY
        return self._apply(self._derive())

    def search(self, term: str) -> QueryResult:
        """Run a search over the full post set. Leaves active_category untouched."""
        self._state.search_term = term
        self._state.derivation = Derivation.SEARCH
        return self._apply(self._derive())

    def rebind(self, store: PostStore) -> QueryResult:
        """Swap in a freshly loaded store and re-run the active derivation."""
        self._store = store
        return self._apply(self._derive())

    def _derive(self) -> tuple[Post, ...]:
        if self._state.derivation is Derivation.SEARCH:
            return search(self._store, self._state.search_term, self._mode)
        return filter_by_category(self._store, self._state.active_category)

    def _apply(self, posts: tuple[Post, ...]) -> QueryResult:
        self._state.result_order = tuple(p.id for p in posts)
        self._result = QueryResult(
            posts=posts,
            derivation=self._state.derivation,
            active_category=self._state.active_category,
            search_term=self._state.search_term,
        )
        return self._result
