"""RequestContext adapter over Flask's ``g`` and ``after_this_request``."""

from __future__ import annotations

from typing import Any

from flask import Response, after_this_request, g

from gatekeep.context._protocol import FinalizeHook

__all__ = ["FlaskRequestContext"]


class FlaskRequestContext:
    """Request context backed by ``flask.g`` for the active request.

    Before-finalize hooks are registered with ``after_this_request`` and
    run while the response is being processed. Responses that already
    carry an error status (>= 400) are passed through unverified.
    Must be used inside a Flask request context.
    """

    def get(self, key: str, default: Any = None) -> Any:
        return g.get(key, default)

    def set(self, key: str, value: Any) -> None:
        setattr(g, key, value)

    def register_before_finalize(self, callback: FinalizeHook) -> None:
        @after_this_request
        def _run_hook(response: Response) -> Response:
            if response.status_code < 400:
                callback(self)
            return response

    def __repr__(self) -> str:
        return "FlaskRequestContext()"
