"""PolicyRegistry: stores and retrieves authorization and scope callbacks."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from gatekeep._types import Params
from gatekeep.policy._base import PolicyRegistration, ScopeRegistration

__all__ = ["PolicyRegistry", "get_default_registry"]


def _candidate_keys(target: Any) -> Iterator[Any]:
    """Yield *target* followed by the classes of its MRO."""
    yield target
    cls = target if isinstance(target, type) else type(target)
    for base in cls.__mro__:
        if base is not object and base is not target:
            yield base


class PolicyRegistry:
    """Registry that maps targets to their authorization and scope callbacks.

    Targets are any hashable object: a context class, a model class, a
    module, or a plain string name. Lookups for an instance or a
    subclass fall back along the MRO.

    Thread-safe for reads after startup. Registration replaces any
    earlier callback for the same target.

    Example::

        registry = PolicyRegistry()
        registry.register_policy(Blog, blog_authorize, name="blog", description="")
        registration = registry.lookup_policy(Blog)
    """

    def __init__(self) -> None:
        self._policies: dict[Any, PolicyRegistration] = {}
        self._scopes: dict[type, ScopeRegistration] = {}

    def register_policy(
        self,
        target: Any,
        fn: Callable[[Any, Any, Params], Any],
        *,
        name: str,
        description: str,
    ) -> None:
        """Register the authorization callback for *target*.

        Args:
            target: The context/class/module being authorized.
            fn: A callable ``(action, actor, params) -> raw result``.
            name: Human-readable name for the callback (used in logging).
            description: Description of the callback (typically the docstring).
        """
        self._policies[target] = PolicyRegistration(
            target=target,
            fn=fn,
            name=name,
            description=description,
        )

    def register_scope(
        self,
        resource_type: type,
        fn: Callable[[Any, Any, Params], Any],
        *,
        name: str,
        description: str,
    ) -> None:
        """Register the scope callback for *resource_type*.

        Args:
            resource_type: The class whose queryables the callback narrows.
            fn: A callable ``(queryable, actor, params) -> queryable``.
            name: Human-readable name for the callback (used in logging).
            description: Description of the callback (typically the docstring).
        """
        if not isinstance(resource_type, type):
            raise TypeError(f"scope callbacks are registered per class, got {resource_type!r}")
        self._scopes[resource_type] = ScopeRegistration(
            resource_type=resource_type,
            fn=fn,
            name=name,
            description=description,
        )

    def lookup_policy(self, target: Any) -> PolicyRegistration | None:
        """Return the registration for *target* or the nearest class in its MRO.

        Unhashable targets never match a registration.
        """
        for key in _candidate_keys(target):
            try:
                registration = self._policies.get(key)
            except TypeError:
                continue
            if registration is not None:
                return registration
        return None

    def lookup_scope(self, resource_type: type) -> ScopeRegistration | None:
        """Return the scope registration for *resource_type* or a base class."""
        for base in resource_type.__mro__:
            registration = self._scopes.get(base)
            if registration is not None:
                return registration
        return None

    def has_policy(self, target: Any) -> bool:
        return self.lookup_policy(target) is not None

    def has_scope(self, resource_type: type) -> bool:
        return self.lookup_scope(resource_type) is not None

    def clear(self) -> None:
        """Remove all registrations.

        Primarily useful in test teardown to reset the registry state
        between tests.
        """
        self._policies.clear()
        self._scopes.clear()


# Module-level default registry (singleton).
_default_registry = PolicyRegistry()


def get_default_registry() -> PolicyRegistry:
    """Return the global default (singleton) policy registry.

    This is the registry used by ``@policy``, ``@scope_filter``,
    ``check`` and ``scope`` when no explicit registry is provided.

    Example::

        registry = get_default_registry()
        registry.clear()  # reset between tests
    """
    return _default_registry
