"""Post Library tests — load lifecycle, not-ready rejection, failure, reload, listeners.

Tests cover:
    - New library is LOADING and rejects queries with PostsNotReadyError
    - Successful load → READY with store, settled event set
    - Failed first load → FAILED, queries raise PostsLoadError (never empty success)
    - Reload after failure recovers
    - Failed refresh keeps the previous store
    - Malformed data (or an undecodable file) from the source is a load failure
    - Listeners notified with the new store; unsubscribe works; a broken listener
      does not block the others
    - Singleton accessor requires init
"""

import asyncio

import pytest

from postindex.core.domain_types import LoadStatus
from postindex.core.errors import PostsLoadError, PostsNotReadyError
import postindex.services.post_library as library_module
from postindex.services.post_library import (
    PostLibrary, get_post_library, init_post_library,
)


async def test_new_library_is_loading(scripted_fetcher, raw_posts):
    lib = PostLibrary("memory://", fetcher=scripted_fetcher(raw_posts))
    assert lib.status is LoadStatus.LOADING
    assert lib.store is None
    with pytest.raises(PostsNotReadyError):
        lib.require_store()


async def test_successful_load_is_ready(library):
    assert library.status is LoadStatus.READY
    assert library.post_count == 4
    assert library.require_store() is library.store
    assert library.error is None


async def test_wait_until_settled_returns_after_load(scripted_fetcher, raw_posts):
    lib = PostLibrary("memory://", fetcher=scripted_fetcher(raw_posts))
    waiter = asyncio.create_task(lib.wait_until_settled())
    await asyncio.sleep(0)
    assert not waiter.done()
    await lib.load()
    await asyncio.wait_for(waiter, timeout=1)


async def test_failed_load_reports_failure(failing_then_ok_library):
    status = await failing_then_ok_library.load()
    assert status is LoadStatus.FAILED
    assert failing_then_ok_library.error.code == "POSTS_LOAD_FAILED"
    with pytest.raises(PostsLoadError):
        failing_then_ok_library.require_store()


async def test_failed_load_still_settles(failing_then_ok_library):
    await failing_then_ok_library.load()
    await asyncio.wait_for(failing_then_ok_library.wait_until_settled(), timeout=1)


async def test_reload_after_failure_recovers(failing_then_ok_library):
    await failing_then_ok_library.load()
    status = await failing_then_ok_library.load()
    assert status is LoadStatus.READY
    assert failing_then_ok_library.error is None
    assert failing_then_ok_library.post_count == 4


async def test_failed_refresh_keeps_previous_store(scripted_fetcher, raw_posts):
    lib = PostLibrary(
        "memory://",
        fetcher=scripted_fetcher(raw_posts, PostsLoadError("down")),
    )
    await lib.load()
    first = lib.store
    status = await lib.load()
    assert status is LoadStatus.READY
    assert lib.store is first
    assert lib.error is not None


async def test_malformed_source_is_load_failure(scripted_fetcher):
    lib = PostLibrary("memory://", fetcher=scripted_fetcher([{"title": "no id"}]))
    assert await lib.load() is LoadStatus.FAILED
    assert "'id'" in lib.error.message


async def test_undecodable_local_file_fails_load(tmp_path):
    path = tmp_path / "posts.json"
    path.write_bytes(b'[{"id": 1, "category": "Web", "title": "caf\xe9"}]')
    lib = PostLibrary(str(path))
    assert await lib.load() is LoadStatus.FAILED
    assert lib.error.code == "POSTS_LOAD_FAILED"
    with pytest.raises(PostsLoadError):
        lib.require_store()


async def test_duplicate_ids_fail_whole_load(scripted_fetcher, post_factory):
    lib = PostLibrary(
        "memory://",
        fetcher=scripted_fetcher([post_factory(1), post_factory(1)]),
    )
    await lib.load()
    assert lib.status is LoadStatus.FAILED
    assert lib.store is None


async def test_listeners_receive_new_store(library):
    seen = []
    library.subscribe(seen.append)
    await library.load()
    assert seen == [library.store]


async def test_unsubscribe_stops_notifications(library):
    seen = []
    unsubscribe = library.subscribe(seen.append)
    unsubscribe()
    unsubscribe()
    await library.load()
    assert seen == []


async def test_broken_listener_does_not_block_others(library):
    seen = []

    def broken(store):
        raise RuntimeError("listener bug")

    library.subscribe(broken)
    library.subscribe(seen.append)
    assert await library.load() is LoadStatus.READY
    assert len(seen) == 1


def test_get_post_library_requires_init(monkeypatch):
    monkeypatch.setattr(library_module, "post_library", None)
    with pytest.raises(RuntimeError):
        get_post_library()


def test_init_post_library_sets_singleton(monkeypatch):
    monkeypatch.setattr(library_module, "post_library", None)
    lib = init_post_library("data/posts.json", timeout_seconds=2.0)
    assert get_post_library() is lib
    assert lib.timeout_seconds == 2.0
