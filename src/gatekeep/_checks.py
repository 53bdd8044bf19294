"""Policy dispatch: check(), can() and authorize()."""

from __future__ import annotations

from typing import Any

from gatekeep._params import build_params
from gatekeep._result import AuthResult, Denied, normalize_result
from gatekeep._types import ParamsLike
from gatekeep.config._config import get_global_config
from gatekeep.exceptions import NotAuthorized, ProtocolViolation
from gatekeep.policy._registry import PolicyRegistry
from gatekeep.policy._resolve import resolve_policy

__all__ = ["authorize", "can", "check"]


def check(
    policy: Any,
    action: Any,
    actor: Any,
    params: ParamsLike = None,
    *,
    registry: PolicyRegistry | None = None,
) -> AuthResult:
    """Ask *policy* whether *actor* may perform *action*.

    Resolves the authorization callback for *policy* (see
    :func:`~gatekeep.policy.resolve_policy`), calls it with
    ``(action, actor, params)`` and normalizes its return value.
    Denial is a normal return value, not an exception. Exceptions
    raised by the callback itself propagate unchanged.

    Args:
        policy: The policy target (context, resource, class, module, or callable).
        action: The action identifier (e.g. ``"update_post"``).
        actor: The user/principal performing the action.
        params: A mapping or list of pairs passed to the callback as a dict.
        registry: Optional custom registry. Defaults to the global registry.

    Returns:
        ``Allowed()`` or ``Denied(reason)``.

    Raises:
        NoPolicyError: If no callback can be resolved for *policy*.
        ProtocolViolation: If the callback returns an unrecognized value.

    Example::

        result = check(Blog, "update_post", user, {"post": post})
        if isinstance(result, Denied):
            ...
    """
    registration = resolve_policy(policy, registry=registry)
    bag = build_params(params)
    result = normalize_result(registration.fn(action, actor, bag), source=registration.name)

    if get_global_config().log_policy_decisions:
        from gatekeep._audit import log_authorization

        log_authorization(
            policy_name=registration.name,
            action=action,
            actor=actor,
            params=bag,
            result=result,
        )

    return result


def can(
    policy: Any,
    action: Any,
    actor: Any,
    params: ParamsLike = None,
    *,
    registry: PolicyRegistry | None = None,
) -> bool:
    """Return ``True`` if *actor* may perform *action*, ``False`` otherwise.

    Never raises for a malformed policy result: an unrecognized return
    value is logged on the ``gatekeep`` logger and counts as denied.
    Resolution errors and exceptions raised by the callback still propagate.

    Example::

        if can(Blog, "publish_post", user):
            show_publish_button()
    """
    try:
        result = check(policy, action, actor, params, registry=registry)
    except ProtocolViolation as exc:
        from gatekeep._audit import log_protocol_violation

        log_protocol_violation(
            policy_name=exc.source or repr(policy),
            action=action,
            value=exc.value,
        )
        return False
    return result.allowed


def authorize(
    policy: Any,
    action: Any,
    actor: Any,
    params: ParamsLike = None,
    *,
    registry: PolicyRegistry | None = None,
    message: str | None = None,
    status: int | None = None,
) -> None:
    """Assert that *actor* may perform *action*.

    Returns ``None`` on success.

    Args:
        policy: The policy target.
        action: The action identifier.
        actor: The user/principal performing the action.
        params: A mapping or list of pairs passed to the callback.
        registry: Optional custom registry.
        message: Error message override (default from config, ``"not authorized"``).
        status: Status override (default from config, ``403``).

    Raises:
        NotAuthorized: If the policy denies, carrying the denial reason.

    Example::

        authorize(Blog, "delete_post", user, {"post": post})  # raises if denied
    """
    result = check(policy, action, actor, params, registry=registry)
    if isinstance(result, Denied):
        raise NotAuthorized(reason=result.reason, message=message, status=status)
