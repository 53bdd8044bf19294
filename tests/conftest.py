"""Shared test fixtures for gatekeep tests."""

from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy import Boolean, ForeignKey, Integer, Select, String, create_engine, or_
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    relationship,
    sessionmaker,
)

from gatekeep._result import Denied
from gatekeep.testing._actors import MockActor
from gatekeep.testing._fixtures import (  # noqa: F401
    gatekeep_config,
    gatekeep_registry,
    isolated_gatekeep_state,
    request_context,
)
from gatekeep.testing._isolation import isolated_gatekeep

# ---------------------------------------------------------------------------
# Test models
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    role: Mapped[str] = mapped_column(String(50), default="viewer")

    posts: Mapped[list[Post]] = relationship("Post", back_populates="author")


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    author: Mapped[User] = relationship("User", back_populates="posts")

    @classmethod
    def scope(cls, queryable: Any, actor: Any, params: dict[str, Any]) -> Any:
        """Published posts plus the actor's own drafts."""
        if params.get("published_only"):
            if isinstance(queryable, Select):
                return queryable.where(Post.is_published == True)  # noqa: E712
            return [post for post in queryable if post.is_published]
        if isinstance(queryable, Select):
            return queryable.where(or_(Post.is_published == True, Post.author_id == actor.id))  # noqa: E712
        if isinstance(queryable, type):
            return queryable
        return [post for post in queryable if post.is_published or post.author_id == actor.id]


# ---------------------------------------------------------------------------
# Policy targets
# ---------------------------------------------------------------------------


class Blog:
    """A context whose policy is its own ``authorize`` staticmethod."""

    @staticmethod
    def authorize(action: Any, actor: Any, params: dict[str, Any]) -> Any:
        if action == "list_posts":
            return True
        if action == "create_post":
            return "ok" if actor.role != "anonymous" else "error"
        if action in ("update_post", "delete_post"):
            post = params.get("post")
            if post is None:
                return ("error", "not_found")
            if actor.role == "admin":
                return "ok"
            return actor.id == post.author_id
        if action == "publish_post":
            return Denied("read_only") if params.get("frozen") else actor.role == "admin"
        if action == "broken":
            return 42
        return False


class Comment:
    """A resource resolved through the ``CommentPolicy`` naming convention."""

    def __init__(self, author_id: int, body: str = "") -> None:
        self.author_id = author_id
        self.body = body


class CommentPolicy:
    def authorize(self, action: Any, actor: Any, params: dict[str, Any]) -> Any:
        if action == "read":
            return True
        comment = params.get("comment")
        return comment is not None and comment.author_id == actor.id

    def scope(self, queryable: Any, actor: Any, params: dict[str, Any]) -> Any:
        return [comment for comment in queryable if comment.author_id == actor.id]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_global_state():
    """Restore the global config and default registry after every test."""
    with isolated_gatekeep():
        yield


@pytest.fixture()
def engine():
    """Create an in-memory SQLite engine with all tables."""
    eng = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture()
def session(engine):
    """Provide a transactional session that rolls back after each test."""
    factory = sessionmaker(bind=engine)
    sess = factory()
    try:
        yield sess
    finally:
        sess.rollback()
        sess.close()


@pytest.fixture()
def sample_data(session: Session) -> dict[str, list]:
    """Seed the database with sample data for testing."""
    alice = User(id=1, name="Alice", role="admin")
    bob = User(id=2, name="Bob", role="editor")
    charlie = User(id=3, name="Charlie", role="viewer")
    session.add_all([alice, bob, charlie])

    post1 = Post(id=1, title="Public Post", is_published=True, author_id=1)
    post2 = Post(id=2, title="Draft Post", is_published=False, author_id=1)
    post3 = Post(id=3, title="Bob's Post", is_published=True, author_id=2)
    post4 = Post(id=4, title="Bob's Draft", is_published=False, author_id=2)
    session.add_all([post1, post2, post3, post4])

    session.flush()
    return {
        "users": [alice, bob, charlie],
        "posts": [post1, post2, post3, post4],
    }


@pytest.fixture()
def admin() -> MockActor:
    return MockActor(id=1, role="admin")


@pytest.fixture()
def editor() -> MockActor:
    return MockActor(id=2, role="editor")


@pytest.fixture()
def viewer() -> MockActor:
    return MockActor(id=3, role="viewer")
