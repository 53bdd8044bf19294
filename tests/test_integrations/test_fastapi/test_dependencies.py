"""Tests for FastAPI AuthorizeDep and the get_actor sentinel."""

from __future__ import annotations

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from gatekeep.context._bridge import is_authorized, put_default_params
from gatekeep.integrations.fastapi import (
    AuthorizeDep,
    StarletteRequestContext,
    get_actor,
    install_error_handlers,
)
from gatekeep.policy._registry import PolicyRegistry
from tests.conftest import MockActor, Post

POSTS = {
    1: Post(id=1, title="Alice's Post", is_published=True, author_id=1),
    2: Post(id=2, title="Bob's Post", is_published=False, author_id=2),
}


def _posts_policy(action, actor, params):
    if action == "list":
        return True
    post = POSTS.get(int(params["post_id"]))
    if post is None:
        return ("error", "not_found")
    return actor.id == post.author_id


async def _current_actor(request: Request) -> MockActor:
    return MockActor(id=int(request.headers.get("x-user-id", "0")))


@pytest.fixture()
def registry() -> PolicyRegistry:
    reg = PolicyRegistry()
    reg.register_policy("posts", _posts_policy, name="posts_policy", description="")
    return reg


@pytest.fixture()
def app(registry: PolicyRegistry) -> FastAPI:
    app = FastAPI()
    install_error_handlers(app)
    app.dependency_overrides[get_actor] = _current_actor

    @app.get("/posts")
    async def list_posts(user=AuthorizeDep("posts", "list", registry=registry)):
        return {"actor": user.id}

    @app.put("/posts/{post_id}", dependencies=[AuthorizeDep("posts", "edit", registry=registry)])
    async def edit_post(post_id: int):
        return {"edited": post_id}

    @app.delete("/posts/{post_id}")
    async def delete_post(
        post_id: int,
        user=AuthorizeDep("posts", "delete", registry=registry, message="gone", status=404),
    ):
        return {"deleted": post_id}

    @app.get("/by-query")
    async def by_query(
        user=AuthorizeDep(
            "posts",
            "edit",
            params=lambda request: {"post_id": request.query_params["id"]},
            registry=registry,
        ),
    ):
        return {"ok": True}

    @app.get("/dynamic/{post_id}")
    async def dynamic(
        post_id: int,
        user=AuthorizeDep(
            "posts",
            lambda request: request.query_params.get("as", "edit"),
            registry=registry,
        ),
    ):
        return {"ok": True}

    @app.get("/posts/{post_id}/marked")
    async def marked(
        post_id: int,
        request: Request,
        user=AuthorizeDep("posts", "edit", registry=registry),
    ):
        return {"authorized": is_authorized(StarletteRequestContext.from_request(request))}

    return app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestAuthorizeDep:
    def test_allowed_returns_actor(self, client: TestClient) -> None:
        response = client.get("/posts", headers={"x-user-id": "7"})
        assert response.status_code == 200
        assert response.json() == {"actor": 7}

    def test_path_params_reach_policy(self, client: TestClient) -> None:
        assert client.put("/posts/1", headers={"x-user-id": "1"}).status_code == 200
        response = client.put("/posts/1", headers={"x-user-id": "2"})
        assert response.status_code == 403
        assert response.json() == {"detail": "not authorized", "reason": "unauthorized"}

    def test_denial_reason(self, client: TestClient) -> None:
        response = client.put("/posts/99", headers={"x-user-id": "1"})
        assert response.status_code == 403
        assert response.json()["reason"] == "not_found"

    def test_message_and_status_override(self, client: TestClient) -> None:
        response = client.delete("/posts/1", headers={"x-user-id": "2"})
        assert response.status_code == 404
        assert response.json()["detail"] == "gone"

    def test_params_callable(self, client: TestClient) -> None:
        assert client.get("/by-query?id=2", headers={"x-user-id": "2"}).status_code == 200
        assert client.get("/by-query?id=2", headers={"x-user-id": "1"}).status_code == 403

    def test_action_callable(self, client: TestClient) -> None:
        assert client.get("/dynamic/1", headers={"x-user-id": "2"}).status_code == 403
        assert client.get("/dynamic/1?as=list", headers={"x-user-id": "2"}).status_code == 200
        assert client.get("/dynamic/1", headers={"x-user-id": "1"}).status_code == 200

    def test_marks_request_authorized(self, client: TestClient) -> None:
        response = client.get("/posts/1/marked", headers={"x-user-id": "1"})
        assert response.json() == {"authorized": True}


class TestContextDefaults:
    def test_default_params_from_middleware(self) -> None:
        seen = []
        registry = PolicyRegistry()

        def record(action, actor, params):
            seen.append(dict(params))
            return True

        registry.register_policy("tenants", record, name="record", description="")
        app = FastAPI()
        app.dependency_overrides[get_actor] = _current_actor

        @app.middleware("http")
        async def tenant_defaults(request: Request, call_next):
            put_default_params(StarletteRequestContext.from_request(request), tenant="acme")
            return await call_next(request)

        @app.get("/t/{slug}", dependencies=[AuthorizeDep("tenants", "read", registry=registry)])
        async def read(slug: str):
            return {}

        TestClient(app).get("/t/home")
        assert seen == [{"tenant": "acme", "slug": "home"}]


class TestGetActorSentinel:
    def test_raises_without_override(self) -> None:
        app = FastAPI()

        @app.get("/")
        async def index(user=AuthorizeDep("posts", "list")):
            return {}

        with pytest.raises(NotImplementedError, match="dependency_overrides"):
            TestClient(app).get("/")
