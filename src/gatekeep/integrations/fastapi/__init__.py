"""FastAPI integration for gatekeep."""

from __future__ import annotations

try:
    import fastapi as _fastapi_check  # noqa: F401  # pyright: ignore[reportUnusedImport]

    del _fastapi_check
except ImportError as exc:
    raise ImportError(
        "FastAPI integration requires fastapi. Install it with: pip install gatekeep[fastapi]"
    ) from exc

from gatekeep.integrations.fastapi._context import StarletteRequestContext
from gatekeep.integrations.fastapi._dependencies import AuthorizeDep, get_actor
from gatekeep.integrations.fastapi._errors import install_error_handlers
from gatekeep.integrations.fastapi._middleware import (
    VerifyAuthorizedMiddleware,
    install_verify_authorized,
)

__all__ = [
    "AuthorizeDep",
    "StarletteRequestContext",
    "VerifyAuthorizedMiddleware",
    "get_actor",
    "install_error_handlers",
    "install_verify_authorized",
]
