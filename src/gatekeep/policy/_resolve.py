"""Resolve a policy target into its authorization or scope callback."""

from __future__ import annotations

import inspect
import sys
import types
from typing import Any

from gatekeep.config._config import get_global_config
from gatekeep.exceptions import NoPolicyError
from gatekeep.policy._base import PolicyRegistration, ScopeRegistration
from gatekeep.policy._registry import PolicyRegistry, get_default_registry

__all__ = ["describe_target", "resolve_policy", "resolve_scope"]


def describe_target(target: Any) -> str:
    """Return a short printable name for *target* (used in errors and logs)."""
    if isinstance(target, types.ModuleType):
        return target.__name__
    if isinstance(target, type):
        return target.__qualname__
    if inspect.isroutine(target):
        return getattr(target, "__qualname__", repr(target))
    if isinstance(target, str):
        return repr(target)
    return f"{type(target).__qualname__} instance"


def _needs_instance(owner: type, attr: str) -> bool:
    """True when *attr* on class *owner* is a plain instance method."""
    try:
        raw = inspect.getattr_static(owner, attr)
    except AttributeError:
        return False
    return inspect.isfunction(raw)


def _own_callback(target: Any, attr: str) -> Any | None:
    """The target's own callable *attr*, if it can be called without an instance."""
    if isinstance(target, str):
        return None
    if isinstance(target, type) and _needs_instance(target, attr):
        return None
    fn = getattr(target, attr, None)
    return fn if callable(fn) else None


def _convention_callback(target: Any, attr: str) -> tuple[Any, str] | None:
    """Find ``<TypeName><suffix>`` in the module that defines the target's type."""
    if isinstance(target, (types.ModuleType, str)) or inspect.isroutine(target):
        return None
    cls = target if isinstance(target, type) else type(target)
    module = sys.modules.get(cls.__module__)
    if module is None:
        return None
    policy_name = f"{cls.__name__}{get_global_config().policy_suffix}"
    found = getattr(module, policy_name, None)
    if found is None:
        return None
    if isinstance(found, type):
        if _needs_instance(found, attr):
            found = found()
        fn = getattr(found, attr, None)
    else:
        fn = getattr(found, attr, None)
        if fn is None and attr == "authorize" and callable(found):
            fn = found
    if fn is None or not callable(fn):
        return None
    return fn, f"{cls.__module__}.{policy_name}"


def resolve_policy(target: Any, *, registry: PolicyRegistry | None = None) -> PolicyRegistration:
    """Resolve the authorization callback for *target*.

    Tried in order:

    1. an explicit registration (``@policy`` / ``register_policy``),
       including registrations for classes in the target's MRO;
    2. *target* itself, when it is a function or bound method;
    3. the target's own ``authorize`` attribute;
    4. ``<TypeName>Policy`` (see ``policy_suffix``) in the module that
       defines the target's type.

    Args:
        target: The policy target (context module/class, resource
            instance, or callable).
        registry: Optional custom registry. Defaults to the global registry.

    Returns:
        A ``PolicyRegistration`` describing the resolved callback.

    Raises:
        NoPolicyError: If nothing matches.

    Example::

        registration = resolve_policy(post)
        raw = registration.fn("edit", user, {})
    """
    target_registry = registry if registry is not None else get_default_registry()

    registration = target_registry.lookup_policy(target)
    if registration is not None:
        return registration

    if inspect.isroutine(target):
        return PolicyRegistration(
            target=target,
            fn=target,
            name=describe_target(target),
            description=target.__doc__ or "",
        )

    own = _own_callback(target, "authorize")
    if own is not None:
        return PolicyRegistration(
            target=target,
            fn=own,
            name=f"{describe_target(target)}.authorize",
            description=own.__doc__ or "",
        )

    found = _convention_callback(target, "authorize")
    if found is not None:
        fn, name = found
        return PolicyRegistration(target=target, fn=fn, name=name, description=fn.__doc__ or "")

    raise NoPolicyError(target=describe_target(target), callback="authorize")


def resolve_scope(
    resource_type: type,
    *,
    registry: PolicyRegistry | None = None,
) -> ScopeRegistration:
    """Resolve the scope callback for *resource_type*.

    Same order as :func:`resolve_policy`, with ``scope`` in place of
    ``authorize``: registration, the type's own ``scope`` attribute
    (a staticmethod or classmethod), then ``<TypeName>Policy.scope``.

    Raises:
        NoPolicyError: If nothing matches.
    """
    target_registry = registry if registry is not None else get_default_registry()

    registration = target_registry.lookup_scope(resource_type)
    if registration is not None:
        return registration

    own = _own_callback(resource_type, "scope")
    if own is not None:
        return ScopeRegistration(
            resource_type=resource_type,
            fn=own,
            name=f"{describe_target(resource_type)}.scope",
            description=own.__doc__ or "",
        )

    found = _convention_callback(resource_type, "scope")
    if found is not None:
        fn, name = found
        return ScopeRegistration(
            resource_type=resource_type,
            fn=fn,
            name=f"{name}.scope",
            description=fn.__doc__ or "",
        )

    raise NoPolicyError(target=describe_target(resource_type), callback="scope")
