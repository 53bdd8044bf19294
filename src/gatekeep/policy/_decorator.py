"""@policy, @scope_filter and @guarded decorators."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from gatekeep.policy._registry import PolicyRegistry, get_default_registry

__all__ = ["guarded", "policy", "scope_filter"]

F = TypeVar("F", bound=Callable[..., Any])


def policy(
    target: Any,
    *,
    registry: PolicyRegistry | None = None,
) -> Callable[[F], F]:
    """Decorator that registers the authorization callback for *target*.

    The decorated function receives ``(action, actor, params)`` and
    returns ``True``/``False``, ``"ok"``/``"error"``, ``("error", reason)``,
    ``Allowed()`` or ``Denied(reason)``.

    Args:
        target: The context class, module, resource class, or name the
            callback authorizes.
        registry: Optional custom registry. Defaults to the global registry.

    Returns:
        A decorator that registers the function and returns it unchanged.

    Example::

        @policy(Blog)
        def blog_policy(action, user, params):
            if action == "update_post":
                return user.id == params["post"].author_id or ("error", "not_found")
            return True
    """

    def decorator(fn: F) -> F:
        target_registry = registry if registry is not None else get_default_registry()
        target_registry.register_policy(
            target,
            fn,
            name=fn.__name__,
            description=fn.__doc__ or "",
        )
        return fn

    return decorator


def scope_filter(
    resource_type: type,
    *,
    registry: PolicyRegistry | None = None,
) -> Callable[[F], F]:
    """Decorator that registers the scope callback for *resource_type*.

    The decorated function receives ``(queryable, actor, params)`` and
    returns the narrowed queryable, in whatever shape it likes.

    Example::

        @scope_filter(Post)
        def visible_posts(query, user, params):
            return query.where(Post.author_id == user.id)
    """

    def decorator(fn: F) -> F:
        target_registry = registry if registry is not None else get_default_registry()
        target_registry.register_scope(
            resource_type,
            fn,
            name=fn.__name__,
            description=fn.__doc__ or "",
        )
        return fn

    return decorator


def guarded(
    target: Any,
    action: Any,
    *,
    registry: PolicyRegistry | None = None,
) -> Callable[[F], F]:
    """Decorator that authorizes before running the wrapped function.

    The wrapped function's first positional argument is the actor. Its
    remaining bound arguments, by name, become the params passed to the
    policy. Denial raises :class:`~gatekeep.exceptions.NotAuthorized`
    and the body never runs.

    Example::

        @guarded(Blog, "delete_post")
        def delete_post(user, post):
            session.delete(post)

        delete_post(current_user, post)  # policy sees params {"post": post}
    """

    def decorator(fn: F) -> F:
        signature = inspect.signature(fn)
        parameters = list(signature.parameters)
        if not parameters:
            raise TypeError(f"{fn.__qualname__} must accept the actor as its first argument")
        actor_name = parameters[0]

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            from gatekeep._checks import authorize

            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            params = dict(bound.arguments)
            actor = params.pop(actor_name)
            authorize(target, action, actor, params, registry=registry)
            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
