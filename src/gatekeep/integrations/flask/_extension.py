"""Flask extension for gatekeep authorization."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any

from flask import Flask, current_app, jsonify

from gatekeep._checks import can
from gatekeep._result import ALLOWED, AuthResult, Denied
from gatekeep._types import ParamsLike
from gatekeep.action._action import Action
from gatekeep.context._bridge import (
    ACTION_KEY,
    authorize_context,
    authorize_context_or_raise,
    build_action,
    get_action,
    verify_authorized_before_finalize,
)
from gatekeep.exceptions import NotAuthorized
from gatekeep.integrations.flask._context import FlaskRequestContext
from gatekeep.policy._registry import PolicyRegistry

__all__ = ["GatekeepExtension"]


class GatekeepExtension:
    """Flask extension that ties authorization checks to the request.

    Registers an error handler that turns ``NotAuthorized`` into a JSON
    response carrying the exception's status, and optionally verifies
    that every successful response was authorized.

    Supports the Flask app-factory pattern via ``init_app()``.

    Args:
        app: Optional Flask application. If provided, calls ``init_app()``
            immediately.
        actor_provider: A callable ``() -> actor`` that returns the
            current actor. Called within request context.
        verify_authorized: Register the finalize-time check on every request.
        registry: Optional policy registry. Defaults to the global registry.

    Example::

        from flask import Flask
        from gatekeep.integrations.flask import GatekeepExtension

        app = Flask(__name__)
        gatekeep = GatekeepExtension(
            app,
            actor_provider=lambda: get_current_user(),
            verify_authorized=True,
        )

        @app.get("/posts")
        def list_posts():
            gatekeep.authorize(Blog, "list_posts")
            return jsonify(Blog.list_posts())
    """

    def __init__(
        self,
        app: Flask | None = None,
        *,
        actor_provider: Callable[[], Any],
        verify_authorized: bool = False,
        registry: PolicyRegistry | None = None,
    ) -> None:
        self._actor_provider = actor_provider
        self._verify_authorized = verify_authorized
        self._registry = registry

        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Initialize the extension with a Flask application.

        Stores configuration on ``app.extensions["gatekeep"]`` and
        registers the error handler, the ``can`` template helper and, when
        ``verify_authorized`` is set, the verification hook.
        """
        app.extensions["gatekeep"] = {
            "actor_provider": self._actor_provider,
            "verify_authorized": self._verify_authorized,
            "registry": self._registry,
        }

        @app.errorhandler(NotAuthorized)
        def handle_not_authorized(exc: NotAuthorized):  # pyright: ignore[reportUnusedFunction]
            return jsonify({"detail": exc.message, "reason": str(exc.reason)}), exc.status

        if self._verify_authorized:

            @app.before_request
            def register_verification() -> None:  # pyright: ignore[reportUnusedFunction]
                verify_authorized_before_finalize(FlaskRequestContext())

        @app.context_processor
        def inject_can() -> dict[str, Any]:  # pyright: ignore[reportUnusedFunction]
            return {"can": self.can}

    @property
    def context(self) -> FlaskRequestContext:
        """The request context for the active request."""
        return FlaskRequestContext()

    def _state(self) -> tuple[Any, PolicyRegistry | None]:
        ext_state: dict[str, Any] = current_app.extensions["gatekeep"]
        actor_provider: Callable[[], Any] = ext_state["actor_provider"]
        return actor_provider(), ext_state["registry"]

    def check(self, policy: Any, action: Any, params: ParamsLike = None) -> AuthResult:
        """Check authorization for the current actor; mark the request on success."""
        actor, registry = self._state()
        outcome = authorize_context(
            self.context, policy, action, params, actor=actor, registry=registry
        )
        if isinstance(outcome, Denied):
            return outcome
        return ALLOWED

    def authorize(self, policy: Any, action: Any, params: ParamsLike = None) -> None:
        """Authorize the current actor, raising ``NotAuthorized`` on denial.

        Example::

            @app.post("/posts/<int:post_id>/publish")
            def publish(post_id):
                post = db.session.get(Post, post_id)
                gatekeep.authorize(Blog, "publish_post", {"post": post})
                ...
        """
        actor, registry = self._state()
        authorize_context_or_raise(
            self.context, policy, action, params, actor=actor, registry=registry
        )

    def build_action(self, context: Any, *, key: str = ACTION_KEY, **options: Any) -> Action:
        """Start an Action for the current actor and store it on the request.

        Extra keyword arguments are passed to
        :func:`gatekeep.context.build_action`.
        """
        actor, registry = self._state()
        options.setdefault("registry", registry)
        ctx = self.context
        build_action(ctx, context, actor=lambda _ctx: actor, key=key, **options)
        return get_action(ctx, key)  # type: ignore[return-value]

    def can(self, policy: Any, action: Any, params: ParamsLike = None) -> bool:
        """Whether the current actor may perform *action*, without marking the request.

        Also exposed to templates as ``can``::

            {% if can(Blog, "update_post", {"post": post}) %}
              <a href="{{ url_for('edit_post', post_id=post.id) }}">Edit</a>
            {% endif %}
        """
        actor, registry = self._state()
        return can(policy, action, actor, params, registry=registry)

    def guard(
        self,
        policy: Any,
        action: Any,
        params: ParamsLike | Callable[[dict[str, Any]], ParamsLike] = None,
        *,
        fallback: Callable[[Denied], Any] | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorate a view so it only runs once *action* is authorized.

        *action* and *params* may be callables; they are resolved on each
        request with the view's keyword arguments (the URL variables).

        On denial the view is skipped. With a *fallback*, its return value
        becomes the response; otherwise ``NotAuthorized`` is raised and
        rendered by the registered error handler.

        Example::

            @app.get("/admin")
            @gatekeep.guard(Blog, "admin_panel", fallback=lambda denied: redirect("/"))
            def admin_panel():
                ...

            @app.put("/posts/<int:post_id>")
            @gatekeep.guard(Blog, "update_post", lambda kw: {"post": load_post(kw["post_id"])})
            def update_post(post_id):
                ...
        """

        def decorator(view: Callable[..., Any]) -> Callable[..., Any]:
            @functools.wraps(view)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                name = action(kwargs) if callable(action) else action
                bag = params(kwargs) if callable(params) else params
                if fallback is None:
                    self.authorize(policy, name, bag)
                    return view(*args, **kwargs)
                outcome = self.check(policy, name, bag)
                if isinstance(outcome, Denied):
                    return fallback(outcome)
                return view(*args, **kwargs)

            return wrapper

        return decorator
