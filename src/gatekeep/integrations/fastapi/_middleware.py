"""ASGI middleware that refuses to send unauthorized responses."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from gatekeep.context._bridge import verify_authorized_before_finalize
from gatekeep.exceptions import NotAuthorized
from gatekeep.integrations.fastapi._context import StarletteRequestContext

__all__ = ["VerifyAuthorizedMiddleware", "install_verify_authorized"]


class VerifyAuthorizedMiddleware:
    """Verify that every successful HTTP response was authorized.

    Registers :func:`~gatekeep.context.verify_authorized_before_finalize`
    on each request and runs the request's finalize hooks when the
    response starts. If a hook raises ``NotAuthorized``, the original
    response is discarded and a JSON error response is sent instead.
    Responses that already carry an error status (>= 400) are passed
    through unverified.

    Args:
        app: The wrapped ASGI application.
        message: Error message override.
        status: Status override.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        message: str | None = None,
        status: int | None = None,
    ) -> None:
        self.app = app
        self.message = message
        self.status = status

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        ctx = StarletteRequestContext(scope)
        verify_authorized_before_finalize(ctx, message=self.message, status=self.status)
        blocked = False

        async def send_verified(message: Message) -> None:
            nonlocal blocked
            if blocked:
                return
            if message["type"] == "http.response.start" and message["status"] < 400:
                try:
                    ctx.run_finalize_hooks()
                except NotAuthorized as exc:
                    blocked = True
                    response = JSONResponse(
                        status_code=exc.status,
                        content={"detail": exc.message, "reason": str(exc.reason)},
                    )
                    await response(scope, receive, send)
                    return
            await send(message)

        await self.app(scope, receive, send_verified)


def install_verify_authorized(
    app: FastAPI,
    *,
    message: str | None = None,
    status: int | None = None,
) -> None:
    """Add :class:`VerifyAuthorizedMiddleware` to a FastAPI app.

    Example::

        app = FastAPI()
        install_error_handlers(app)
        install_verify_authorized(app)

        @app.get("/posts", dependencies=[AuthorizeDep(Blog, "list_posts")])
        async def list_posts(): ...
    """
    options: dict[str, Any] = {"message": message, "status": status}
    app.add_middleware(VerifyAuthorizedMiddleware, **options)
