"""FastAPI dependencies for gatekeep authorization."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import Depends, Request

from gatekeep._params import build_params
from gatekeep.context._bridge import authorize_context_or_raise
from gatekeep.integrations.fastapi._context import StarletteRequestContext
from gatekeep.policy._registry import PolicyRegistry

__all__ = ["AuthorizeDep", "get_actor"]


# ---------------------------------------------------------------------------
# Sentinel dependency function for DI-based configuration
# ---------------------------------------------------------------------------


def get_actor(request: Request) -> Any:
    """Sentinel dependency: override via ``app.dependency_overrides[get_actor]``.

    Raises ``NotImplementedError`` if not overridden, ensuring users
    configure their actor provider before using ``AuthorizeDep``.

    Example::

        from gatekeep.integrations.fastapi import get_actor

        app.dependency_overrides[get_actor] = my_get_current_user
    """
    raise NotImplementedError(
        "Override get_actor via app.dependency_overrides[get_actor]. "
        "See the gatekeep docs for the configuration guide."
    )


# ---------------------------------------------------------------------------
# Dependency builder
# ---------------------------------------------------------------------------


def _make_dependency(
    policy: Any,
    action: Any,
    *,
    params: Callable[[Request], Any] | dict[str, Any] | None = None,
    include_path_params: bool = True,
    registry: PolicyRegistry | None = None,
    message: str | None = None,
    status: int | None = None,
) -> Callable[..., Any]:
    """Build the dependency function for a given policy/action.

    Args:
        policy: The policy target.
        action: The action identifier, or a callable ``(request) -> action``.
        params: Extra params, or a callable ``(request) -> params``.
        include_path_params: Merge the route's path parameters under *params*.
        registry: Optional per-dependency registry override.
        message: Error message override.
        status: Status override.
    """

    async def _resolve(request: Request, actor: Any = Depends(get_actor)) -> Any:
        name = action(request) if callable(action) else action
        extra = params(request) if callable(params) else params
        defaults = dict(request.path_params) if include_path_params else None
        authorize_context_or_raise(
            StarletteRequestContext.from_request(request),
            policy,
            name,
            build_params(extra, defaults),
            actor=actor,
            registry=registry,
            message=message,
            status=status,
        )
        return actor

    return _resolve


def AuthorizeDep(  # noqa: N802
    policy: Any,
    action: Any,
    *,
    params: Callable[[Request], Any] | dict[str, Any] | None = None,
    include_path_params: bool = True,
    registry: PolicyRegistry | None = None,
    message: str | None = None,
    status: int | None = None,
) -> Any:
    """FastAPI dependency that authorizes the current actor.

    Resolves the actor through :func:`get_actor`, runs the raise-variant
    check, and flags the request as authorized. Denial raises
    ``NotAuthorized`` (map it with :func:`install_error_handlers`). The
    dependency's value is the actor.

    Args:
        policy: The policy target.
        action: The action identifier, or a callable ``(request) -> action``.
        params: Extra params, or a callable ``(request) -> params``.
        include_path_params: Merge the route's path parameters under *params*.
        registry: Optional per-dependency registry override.
        message: Error message override.
        status: Status override.

    Returns:
        A FastAPI ``Depends`` instance.

    Example::

        @app.get("/posts")
        async def list_posts(user=AuthorizeDep(Blog, "list_posts")):
            return Blog.list_posts(user)

        @app.delete("/posts/{post_id}", dependencies=[AuthorizeDep(Blog, "delete_post")])
        async def delete_post(post_id: int): ...
    """
    dep_fn = _make_dependency(
        policy,
        action,
        params=params,
        include_path_params=include_path_params,
        registry=registry,
        message=message,
        status=status,
    )
    return Depends(dep_fn)
