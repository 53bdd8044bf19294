"""RequestContext protocol and the in-process reference implementation."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

__all__ = ["FinalizeHook", "RequestContext", "SimpleRequestContext"]

FinalizeHook = Callable[[Any], None]


@runtime_checkable
class RequestContext(Protocol):
    """Structural type for per-request carriers.

    Framework adapters (Flask, Starlette/FastAPI) implement it over
    their own request state. Hooks registered with
    ``register_before_finalize`` run right before the response leaves
    and may raise to stop it.
    """

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def register_before_finalize(self, callback: FinalizeHook) -> None: ...


class SimpleRequestContext:
    """A plain request context for code outside a web framework, and for tests.

    ``finalize()`` must be called by the host once the unit of work is
    complete; it runs the registered hooks, last registered first.

    Example::

        ctx = SimpleRequestContext(assigns={"current_user": user})
        verify_authorized_before_finalize(ctx)
        authorize_context(ctx, Blog, "list_posts")
        ctx.finalize()
    """

    def __init__(self, assigns: dict[str, Any] | None = None) -> None:
        self.assigns: dict[str, Any] = dict(assigns) if assigns else {}
        self._hooks: list[FinalizeHook] = []
        self.finalized = False

    def get(self, key: str, default: Any = None) -> Any:
        return self.assigns.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.assigns[key] = value

    def register_before_finalize(self, callback: FinalizeHook) -> None:
        if self.finalized:
            raise RuntimeError("Cannot register a hook on a finalized context")
        self._hooks.append(callback)

    def finalize(self) -> SimpleRequestContext:
        """Run the before-finalize hooks and mark the context finalized.

        An exception from a hook propagates and leaves the context
        unfinalized.
        """
        if self.finalized:
            raise RuntimeError("Context has already been finalized")
        for hook in reversed(self._hooks):
            hook(self)
        self.finalized = True
        return self

    def __repr__(self) -> str:
        return f"SimpleRequestContext(keys={sorted(self.assigns)!r}, finalized={self.finalized})"
