"""Flask integration for gatekeep."""

from __future__ import annotations

try:
    import flask as _flask_check  # noqa: F401  # pyright: ignore[reportUnusedImport]

    del _flask_check
except ImportError as exc:
    raise ImportError(
        "Flask integration requires flask. Install it with: pip install gatekeep[flask]"
    ) from exc

from gatekeep.integrations.flask._context import FlaskRequestContext
from gatekeep.integrations.flask._extension import GatekeepExtension

__all__ = ["FlaskRequestContext", "GatekeepExtension"]
