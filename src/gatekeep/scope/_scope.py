"""Narrow a queryable down to what an actor may see."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, inspect
from sqlalchemy.orm import Query

from gatekeep._params import build_params
from gatekeep._types import ParamsLike
from gatekeep.config._config import get_global_config
from gatekeep.exceptions import AmbiguousScope
from gatekeep.policy._registry import PolicyRegistry
from gatekeep.policy._resolve import resolve_scope

__all__ = ["infer_resource_type", "scope"]


def infer_resource_type(queryable: Any) -> type | None:
    """Infer the resource type a queryable ranges over.

    Rules, in order:

    - a class is its own resource type;
    - a SQLAlchemy ``Select`` (or legacy ``Query``) uses the first ORM
      entity among its column descriptions, unwrapping aliases;
    - a non-empty list or tuple whose items all share one exact type
      uses that type.

    Returns:
        The inferred type, or ``None`` when no rule applies.

    Example::

        infer_resource_type(select(Post).where(Post.is_published))  # Post
        infer_resource_type([post1, post2])  # Post
        infer_resource_type({"a": 1})  # None
    """
    if isinstance(queryable, type):
        return queryable

    if isinstance(queryable, (Select, Query)):
        for desc in queryable.column_descriptions:
            entity = desc.get("entity")
            if isinstance(entity, type):
                return entity
            insp = inspect(entity, raiseerr=False)
            if insp is not None and getattr(insp, "is_aliased_class", False):
                return insp.mapper.class_
        return None

    if isinstance(queryable, (list, tuple)) and queryable:
        first = type(queryable[0])
        if all(type(item) is first for item in queryable):
            return first

    return None


def scope(
    queryable: Any,
    actor: Any,
    params: ParamsLike = None,
    *,
    resource_type: type | None = None,
    registry: PolicyRegistry | None = None,
) -> Any:
    """Narrow *queryable* to the subset *actor* may access.

    Determines the resource type (explicit ``resource_type`` first, then
    :func:`infer_resource_type`), resolves that type's scope callback
    (see :func:`~gatekeep.policy.resolve_scope`) and returns whatever the
    callback returns, unmodified.

    Args:
        queryable: A model class, a ``Select``, a list of instances, or
            anything else together with ``resource_type``.
        actor: The user/principal.
        params: A mapping or list of pairs passed to the callback.
        resource_type: Explicit resource type when it cannot be inferred.
        registry: Optional custom registry. Defaults to the global registry.

    Returns:
        The callback's result.

    Raises:
        AmbiguousScope: If the resource type cannot be determined.
        NoPolicyError: If no scope callback exists for the resource type.

    Example::

        stmt = scope(select(Post), current_user)
        posts = session.execute(stmt).scalars().all()
    """
    target_type = resource_type if resource_type is not None else infer_resource_type(queryable)
    if target_type is None:
        raise AmbiguousScope(queryable)

    registration = resolve_scope(target_type, registry=registry)

    if get_global_config().log_policy_decisions:
        from gatekeep._audit import log_scope

        log_scope(scope_name=registration.name, resource_type=target_type, actor=actor)

    return registration.fn(queryable, actor, build_params(params))
