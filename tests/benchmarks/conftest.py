"""Benchmark-specific fixtures for gatekeep performance tests."""

from __future__ import annotations

import pytest
from sqlalchemy import Boolean, Integer, String, or_, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from gatekeep.policy._registry import PolicyRegistry
from gatekeep.testing._actors import MockActor

# ---------------------------------------------------------------------------
# Benchmark models (isolated from test models)
# ---------------------------------------------------------------------------


class BenchBase(DeclarativeBase):
    pass


class BenchPost(BenchBase):
    __tablename__ = "bench_posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    author_id: Mapped[int] = mapped_column(Integer)


class BenchBlog:
    pass


def _blog_policy(action, actor, params):
    if action == "list_posts":
        return True
    post = params.get("post")
    if post is None:
        return ("error", "not_found")
    return actor.role == "admin" or post.author_id == actor.id


def _post_scope(queryable, actor, params):
    if isinstance(queryable, list):
        return [p for p in queryable if p.is_published or p.author_id == actor.id]
    return queryable.where(or_(BenchPost.is_published.is_(True), BenchPost.author_id == actor.id))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def bench_registry() -> PolicyRegistry:
    """Registry with one context policy and one scope callback."""
    registry = PolicyRegistry()
    registry.register_policy(BenchBlog, _blog_policy, name="blog", description="")
    registry.register_scope(BenchPost, _post_scope, name="posts", description="")
    return registry


@pytest.fixture()
def bench_actor() -> MockActor:
    """Default benchmark actor."""
    return MockActor(id=1, role="editor")


@pytest.fixture()
def bench_posts() -> list[BenchPost]:
    return [
        BenchPost(id=i, title=f"post {i}", is_published=i % 2 == 0, author_id=i % 5)
        for i in range(500)
    ]


@pytest.fixture()
def bench_select():
    return select(BenchPost)


@pytest.fixture()
def bench_context() -> type[BenchBlog]:
    return BenchBlog
