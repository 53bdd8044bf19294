"""Exception handlers for FastAPI integration."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from gatekeep.exceptions import NotAuthorized

__all__ = ["install_error_handlers"]


def install_error_handlers(app: FastAPI) -> None:
    """Install the exception handler for ``NotAuthorized`` on a FastAPI app.

    The response status is the exception's ``status`` (403 by default);
    the body carries the message and the denial reason.

    Example::

        from fastapi import FastAPI
        from gatekeep.integrations.fastapi import install_error_handlers

        app = FastAPI()
        install_error_handlers(app)
    """

    @app.exception_handler(NotAuthorized)
    async def not_authorized_handler(  # pyright: ignore[reportUnusedFunction]
        request: object, exc: NotAuthorized
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status,
            content={"detail": exc.message, "reason": str(exc.reason)},
        )
