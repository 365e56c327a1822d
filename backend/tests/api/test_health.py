"""Health probes — liveness always up, readiness tracks the post load.

Also checks the app serves nothing outside /api/v1 (no static mount).
"""

from postindex.main import app
from postindex.services.post_library import PostLibrary


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_ready_when_loaded(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"posts": "loaded", "post_count": 4}


async def test_not_ready_while_loading(client_for, scripted_fetcher, raw_posts):
    loading = PostLibrary("memory://", fetcher=scripted_fetcher(raw_posts))
    async with client_for(loading) as c:
        res = await c.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "posts_loading"


async def test_not_ready_after_failed_load(client_for, failing_then_ok_library):
    await failing_then_ok_library.load()
    async with client_for(failing_then_ok_library) as c:
        res = await c.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "posts_failed"


async def test_only_api_routes_are_served(client):
    docs = ("/docs", "/redoc", "/openapi")
    paths = [route.path for route in app.routes if not route.path.startswith(docs)]
    assert all(path.startswith("/api/v1/") for path in paths)
    assert (await client.get("/")).status_code == 404
