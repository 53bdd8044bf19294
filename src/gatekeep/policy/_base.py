"""Registration records and the structural protocols for policy objects."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from gatekeep._types import Params

__all__ = ["Policy", "PolicyRegistration", "Scopable", "ScopeRegistration"]


@dataclass(frozen=True, slots=True)
class PolicyRegistration:
    """A registered authorization callback.

    Attributes:
        target: The context, class or module the callback authorizes for.
        fn: ``fn(action, actor, params) -> raw result``.
        name: The callback name (for debugging/logging).
        description: Human-readable description (from docstring).
    """

    target: Any
    fn: Callable[[Any, Any, Params], Any]
    name: str
    description: str


@dataclass(frozen=True, slots=True)
class ScopeRegistration:
    """A registered scope callback.

    Attributes:
        resource_type: The type whose queryables this callback narrows.
        fn: ``fn(queryable, actor, params) -> narrowed queryable``.
        name: The callback name (for debugging/logging).
        description: Human-readable description (from docstring).
    """

    resource_type: type
    fn: Callable[[Any, Any, Params], Any]
    name: str
    description: str


@runtime_checkable
class Policy(Protocol):
    """Structural type for anything that can authorize actions.

    A module, class, or instance with an ``authorize`` callable
    satisfies it; no inheritance required.

    Example::

        class Blog:
            @staticmethod
            def authorize(action, user, params):
                if action == "list_posts":
                    return True
                return user.role == "admin"
    """

    def authorize(self, action: Any, actor: Any, params: Params) -> Any: ...


@runtime_checkable
class Scopable(Protocol):
    """Structural type for resource types that know how to narrow queries."""

    def scope(self, queryable: Any, actor: Any, params: Params) -> Any: ...
