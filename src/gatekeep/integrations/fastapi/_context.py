"""RequestContext adapter over an ASGI scope's ``state`` dict."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

from starlette.requests import Request

from gatekeep.context._protocol import FinalizeHook

__all__ = ["StarletteRequestContext"]

_HOOKS_KEY = "gatekeep_finalize_hooks"


class StarletteRequestContext:
    """Request context stored in ``scope["state"]``.

    Values set here are visible as ``request.state.<key>`` inside
    endpoints. Before-finalize hooks are collected on the scope and run
    by :class:`~gatekeep.integrations.fastapi.VerifyAuthorizedMiddleware`
    when the response starts.

    Example::

        ctx = StarletteRequestContext.from_request(request)
        mark_authorized(ctx)
    """

    def __init__(self, scope: MutableMapping[str, Any]) -> None:
        self._scope = scope

    @classmethod
    def from_request(cls, request: Request) -> StarletteRequestContext:
        return cls(request.scope)

    @property
    def _state(self) -> dict[str, Any]:
        return self._scope.setdefault("state", {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._state.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._state[key] = value

    def register_before_finalize(self, callback: FinalizeHook) -> None:
        self._state.setdefault(_HOOKS_KEY, []).append(callback)

    def run_finalize_hooks(self) -> None:
        """Run the registered hooks, last registered first."""
        for hook in reversed(self._state.get(_HOOKS_KEY, [])):
            hook(self)

    def __repr__(self) -> str:
        return f"StarletteRequestContext(path={self._scope.get('path')!r})"
