"""gatekeep: Embedded, policy-based authorization for Python services.

Policies are plain callables that answer "may this actor perform this
action?" with a small set of result shapes. gatekeep resolves them,
normalizes their answers, narrows queries with scope callbacks, and
ties authorization to the lifetime of a request.

Example::

    from gatekeep import authorize, policy, scope

    @policy(Blog)
    def blog_policy(action, user, params):
        if action == "update_post":
            return user.id == params["post"].author_id or ("error", "not_found")
        return True

    authorize(Blog, "update_post", current_user, {"post": post})
    stmt = scope(select(Post), current_user)
"""

from importlib.metadata import PackageNotFoundError, version

from gatekeep._checks import authorize, can, check
from gatekeep._result import ALLOWED, ERROR, OK, Allowed, AuthResult, Denied, normalize_result
from gatekeep.action._action import Action, start
from gatekeep.config._config import GatekeepConfig, configure
from gatekeep.context._bridge import (
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
from gatekeep.exceptions import (
    ActionNotRunnable,
    AmbiguousScope,
    ConfigurationError,
    GatekeepError,
    NoPolicyError,
    NotAuthorized,
    ProtocolViolation,
)
from gatekeep.policy._decorator import guarded, policy, scope_filter
from gatekeep.policy._registry import PolicyRegistry
from gatekeep.scope._scope import scope

try:
    __version__ = version("gatekeep")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "__version__",
    "ALLOWED",
    "ERROR",
    "OK",
    "Action",
    "ActionNotRunnable",
    "Allowed",
    "AmbiguousScope",
    "AuthResult",
    "ConfigurationError",
    "Denied",
    "GatekeepConfig",
    "GatekeepError",
    "NoPolicyError",
    "NotAuthorized",
    "PolicyRegistry",
    "ProtocolViolation",
    "RequestContext",
    "SimpleRequestContext",
    "authorize",
    "authorize_context",
    "authorize_context_or_raise",
    "build_action",
    "can",
    "check",
    "configure",
    "get_action",
    "guarded",
    "is_authorized",
    "mark_authorized",
    "normalize_result",
    "policy",
    "put_action",
    "put_default_params",
    "resolve_actor",
    "scope",
    "scope_filter",
    "start",
    "update_action",
    "verify_authorized_before_finalize",
]
