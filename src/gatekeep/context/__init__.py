"""Request-context bridge: tie authorization to the lifetime of a request."""

from gatekeep.context._bridge import (
    ACTION_KEY,
    AUTHORIZED_KEY,
    DEFAULT_PARAMS_KEY,
    NO_AUTHORIZATION_RUN,
    authorize_context,
    authorize_context_or_raise,
    build_action,
    get_action,
    is_authorized,
    mark_authorized,
    put_action,
    put_default_params,
    resolve_actor,
    update_action,
    verify_authorized_before_finalize,
)
from gatekeep.context._protocol import RequestContext, SimpleRequestContext

__all__ = [
    "ACTION_KEY",
    "AUTHORIZED_KEY",
    "DEFAULT_PARAMS_KEY",
    "NO_AUTHORIZATION_RUN",
    "RequestContext",
    "SimpleRequestContext",
    "authorize_context",
    "authorize_context_or_raise",
    "build_action",
    "get_action",
    "is_authorized",
    "mark_authorized",
    "put_action",
    "put_default_params",
    "resolve_actor",
    "update_action",
    "verify_authorized_before_finalize",
]
