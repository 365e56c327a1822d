"""API test fixtures — FastAPI app with the post library dependency overridden.

Invariants:
    - Lifespan never runs: no background load, no real post source
    - Overrides cleared after every test

Design Decisions:
    - httpx AsyncClient over ASGITransport for HTTP routes
    - Starlette TestClient for the WebSocket route (it runs the app in its own loop,
      so the library it uses is loaded synchronously up front)
"""

import asyncio
from contextlib import asynccontextmanager

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from postindex.main import app
from postindex.services.post_library import PostLibrary, get_post_library


@asynccontextmanager
async def _client_for(library: PostLibrary):
    app.dependency_overrides[get_post_library] = lambda: library
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test",
        ) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client_for():
    """Factory: async context manager yielding a client bound to a given library."""
    return _client_for


@pytest.fixture
async def client(library):
    async with _client_for(library) as c:
        yield c


@pytest.fixture
def ws_client(raw_posts, scripted_fetcher):
    """Sync TestClient with a loaded library, for WebSocket tests."""
    library = PostLibrary("memory://posts", fetcher=scripted_fetcher(raw_posts))
    asyncio.run(library.load())
    app.dependency_overrides[get_post_library] = lambda: library
    yield TestClient(app)
    app.dependency_overrides.clear()
