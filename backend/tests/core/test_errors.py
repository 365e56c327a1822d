"""Error hierarchy tests — codes, statuses, envelopes, recoverability."""

from postindex.core.errors import (
    ErrorCategory, ErrorContext, ErrorSeverity, PostIndexError,
    PostNotFoundError, PostsLoadError, PostsNotReadyError, QueryValidationError,
)


def test_load_error_shape():
    err = PostsLoadError("HTTP error! status: 500")
    assert err.code == "POSTS_LOAD_FAILED"
    assert err.http_status == 503
    assert err.category is ErrorCategory.DATA_SOURCE
    assert not err.recoverable


def test_load_error_keeps_explicit_user_message():
    err = PostsLoadError("boom", ErrorContext(user_message="Custom"))
    assert err.to_response()["error"]["message"] == "Custom"


def test_not_ready_error_carries_retry_hint():
    err = PostsNotReadyError(retry_after_ms=2000)
    assert err.code == "POSTS_LOADING"
    assert err.http_status == 503
    assert err.to_response()["error"]["context"]["retry_after_ms"] == 2000
    assert err.recoverable


def test_not_found_error_response():
    body = PostNotFoundError(9).to_response()["error"]
    assert body["code"] == "POST_NOT_FOUND"
    assert body["message"] == "Post not found"
    assert body["category"] == "resource_not_found"
    assert body["context"]["post_id"] == 9


def test_validation_error_keeps_field():
    err = QueryValidationError("too long", field="q")
    assert err.field == "q"
    assert err.http_status == 400


def test_to_event_envelope():
    event = PostNotFoundError(3).to_event()
    assert event["type"] == "error"
    assert event["data"]["code"] == "POST_NOT_FOUND"
    assert event["data"]["recoverable"] is True


def test_all_errors_share_base():
    for err in (
        PostsLoadError("x"), PostsNotReadyError(), PostNotFoundError(1),
        QueryValidationError("x", "f"),
    ):
        assert isinstance(err, PostIndexError)
        assert isinstance(err.severity, ErrorSeverity)
        assert err.context.timestamp is not None
