"""Audit logging for authorization decisions."""

from __future__ import annotations

import logging
from typing import Any

from gatekeep._result import AuthResult, Denied
from gatekeep._types import Params

__all__ = [
    "log_authorization",
    "log_missing_authorization",
    "log_protocol_violation",
    "log_scope",
]

logger = logging.getLogger("gatekeep")


def log_authorization(
    *,
    policy_name: str,
    action: Any,
    actor: Any,
    params: Params,
    result: AuthResult,
) -> None:
    """Log an authorization decision.

    Logging levels:
    - INFO: Summary (policy, action, outcome)
    - DEBUG: Detailed (actor and param keys)

    Example::

        log_authorization(
            policy_name="Blog.authorize",
            action="list_posts",
            actor=current_user,
            params={},
            result=ALLOWED,
        )
    """
    if isinstance(result, Denied):
        logger.info("Authorization denied: %s %r (reason=%r)", policy_name, action, result.reason)
    else:
        logger.info("Authorization allowed: %s %r", policy_name, action)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Authorization detail for %s %r: actor=%r params=%s",
            policy_name,
            action,
            actor,
            sorted(map(str, params)),
        )


def log_scope(*, scope_name: str, resource_type: type, actor: Any) -> None:
    logger.debug(
        "Scope applied: %s for %s (actor=%r)",
        scope_name,
        resource_type.__name__,
        actor,
    )


def log_protocol_violation(*, policy_name: str, action: Any, value: Any) -> None:
    """Log a malformed policy result that a boolean check turned into ``False``."""
    logger.warning(
        "Policy %s returned an unrecognized result for %r: %r, treated as denied",
        policy_name,
        action,
        value,
    )


def log_missing_authorization(*, context: Any) -> None:
    """Log a request context that reached finalization without authorization.

    Goes to the ``gatekeep.verify`` sub-logger so operators can route it
    separately.
    """
    logging.getLogger("gatekeep.verify").warning(
        "Request finalized without authorization: %r", context
    )
