"""Root conftest — shared test configuration and sample post data."""

import os

import pytest

from postindex.core.errors import PostsLoadError
from postindex.services.post_library import PostLibrary

# Reader stream tests must not wait on a real debounce window
os.environ.setdefault("POSTINDEX_SEARCH_DEBOUNCE_MS", "0")
os.environ.setdefault("POSTINDEX_LOG_FORMAT", "text")


def make_post(
    id: int,
    title: str = "",
    category: str = "General",
    tags: list[str] | None = None,
    excerpt: str = "",
    content: str = "",
    author: str = "A",
    date: str = "2024-01-01",
) -> dict:
    return {
        "id": id,
        "title": title,
        "excerpt": excerpt,
        "content": content,
        "category": category,
        "author": author,
        "date": date,
        "tags": tags if tags is not None else [],
    }


@pytest.fixture
def raw_posts() -> list[dict]:
    """Small mixed post set: two categories interleaved, shared tags."""
    return [
        make_post(1, title="Intro to CSS", category="Web", tags=["css"]),
        make_post(2, title="Cooking", category="Life", tags=["food", "css"], date="2024-01-02"),
        make_post(
            3, title="Grid layouts", category="Web", tags=["layout"],
            excerpt="Using CSS grid", date="2024-01-03",
        ),
        make_post(
            4, title="Morning walks", category="Life", tags=["habits"],
            content="Fresh air before the inbox.", date="2024-01-04",
        ),
    ]


@pytest.fixture
def post_factory():
    """Factory for single raw post dicts with sensible defaults."""
    return make_post


class ScriptedFetcher:
    """Post fetcher returning (or raising) the next scripted outcome per call.

    The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self, source: str, timeout_seconds: float):
        self.calls += 1
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def scripted_fetcher():
    return ScriptedFetcher


@pytest.fixture
async def library(raw_posts):
    """Post library already loaded with raw_posts."""
    lib = PostLibrary("memory://posts", fetcher=ScriptedFetcher(raw_posts))
    await lib.load()
    return lib


@pytest.fixture
def failing_then_ok_library(raw_posts):
    """Not yet loaded: first load fails, every later load succeeds."""
    fetcher = ScriptedFetcher(PostsLoadError("HTTP error! status: 500"), raw_posts)
    return PostLibrary("memory://posts", fetcher=fetcher)
