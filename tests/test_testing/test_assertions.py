"""Tests for gatekeep.testing._assertions."""

from __future__ import annotations

import pytest

from gatekeep.context._bridge import mark_authorized
from gatekeep.context._protocol import SimpleRequestContext
from gatekeep.policy._registry import PolicyRegistry
from gatekeep.testing import (
    assert_allowed,
    assert_context_authorized,
    assert_denied,
    make_anonymous,
    make_user,
)
from tests.conftest import Blog


class TestAssertAllowed:
    def test_passes(self) -> None:
        assert_allowed(Blog, "list_posts", make_user())

    def test_fails_with_reason(self) -> None:
        with pytest.raises(AssertionError, match="reason='not_found'"):
            assert_allowed(Blog, "update_post", make_user())

    def test_custom_registry(self) -> None:
        registry = PolicyRegistry()
        registry.register_policy("x", lambda a, u, p: True, name="x", description="")
        assert_allowed("x", "anything", make_user(), registry=registry)


class TestAssertDenied:
    def test_passes_any_reason(self) -> None:
        assert_denied(Blog, "create_post", make_anonymous())

    def test_passes_matching_reason(self) -> None:
        assert_denied(Blog, "update_post", make_user(), reason="not_found")

    def test_fails_when_allowed(self) -> None:
        with pytest.raises(AssertionError, match="but it was allowed"):
            assert_denied(Blog, "list_posts", make_user())

    def test_fails_on_reason_mismatch(self) -> None:
        with pytest.raises(AssertionError, match="got reason='not_found'"):
            assert_denied(Blog, "update_post", make_user(), reason="unauthorized")

    def test_params_forwarded(self) -> None:
        assert_denied(Blog, "publish_post", make_user(), {"frozen": True}, reason="read_only")


class TestAssertContextAuthorized:
    def test_passes(self) -> None:
        assert_context_authorized(mark_authorized(SimpleRequestContext()))

    def test_fails(self) -> None:
        with pytest.raises(AssertionError, match="marked authorized"):
            assert_context_authorized(SimpleRequestContext())
