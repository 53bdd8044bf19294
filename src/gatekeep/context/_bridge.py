"""Request-context bridge: authorized flags, stored Actions, finalize-time checks."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from gatekeep._checks import check
from gatekeep._params import build_params
from gatekeep._result import Denied
from gatekeep._types import Getter, ParamsLike
from gatekeep.action._action import Action, start
from gatekeep.config._config import get_global_config
from gatekeep.context._protocol import RequestContext
from gatekeep.exceptions import ConfigurationError, NotAuthorized
from gatekeep.policy._registry import PolicyRegistry

__all__ = [
    "ACTION_KEY",
    "AUTHORIZED_KEY",
    "DEFAULT_PARAMS_KEY",
    "NO_AUTHORIZATION_RUN",
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

AUTHORIZED_KEY = "gatekeep_authorized"
DEFAULT_PARAMS_KEY = "gatekeep_default_params"
ACTION_KEY = "action"
NO_AUTHORIZATION_RUN = "no_authorization_run"


def _resolve_getter(ctx: RequestContext, value: Getter) -> Any:
    return value(ctx) if callable(value) else value


# ---------------------------------------------------------------------------
# Authorized flag
# ---------------------------------------------------------------------------


def mark_authorized(ctx: RequestContext) -> RequestContext:
    """Flag *ctx* as authorized.

    Lets :func:`verify_authorized_before_finalize` pass even when no
    policy check ran, e.g. for public endpoints.
    """
    ctx.set(AUTHORIZED_KEY, True)
    return ctx


def is_authorized(ctx: RequestContext) -> bool:
    """Return whether *ctx* has been flagged as authorized (absent means no)."""
    return ctx.get(AUTHORIZED_KEY, False) is True


def verify_authorized_before_finalize(
    ctx: RequestContext,
    *,
    message: str | None = None,
    status: int | None = None,
    fallback: Callable[[RequestContext, Denied], Any] | None = None,
) -> RequestContext:
    """Require that *ctx* is authorized by the time it is finalized.

    Registers a before-finalize hook. If the flag is still unset when
    the hook runs, it raises :class:`~gatekeep.exceptions.NotAuthorized`
    with reason ``"no_authorization_run"``, or calls *fallback* with
    ``(ctx, Denied("no_authorization_run"))`` when one is given.

    Args:
        ctx: The request context.
        message: Error message override (default from config,
            ``"no authorization run"``).
        status: Status override (default from config, ``500``).
        fallback: Optional handler called instead of raising.

    Example::

        ctx = SimpleRequestContext()
        verify_authorized_before_finalize(ctx)
        ctx.finalize()  # raises NotAuthorized(reason="no_authorization_run")
    """

    def _verify(finalizing: RequestContext) -> None:
        if is_authorized(finalizing):
            return

        from gatekeep._audit import log_missing_authorization

        log_missing_authorization(context=finalizing)
        if fallback is not None:
            fallback(finalizing, Denied(NO_AUTHORIZATION_RUN))
            return

        config = get_global_config()
        raise NotAuthorized(
            reason=NO_AUTHORIZATION_RUN,
            message=message if message is not None else config.verify_error_message,
            status=status if status is not None else config.verify_error_status,
        )

    ctx.register_before_finalize(_verify)
    return ctx


# ---------------------------------------------------------------------------
# Context-aware authorization
# ---------------------------------------------------------------------------


def resolve_actor(ctx: RequestContext) -> Any:
    """Return the current actor stored on *ctx* under the configured ``actor_key``."""
    return ctx.get(get_global_config().actor_key)


def put_default_params(
    ctx: RequestContext,
    params: ParamsLike = None,
    **extra: Any,
) -> RequestContext:
    """Store default params merged under every context-aware check on *ctx*.

    Replaces any previously stored defaults.

    Example::

        put_default_params(ctx, tenant=current_tenant)
        authorize_context(ctx, Blog, "list_posts")  # params include tenant
    """
    ctx.set(DEFAULT_PARAMS_KEY, build_params(extra, build_params(params)))
    return ctx


def _context_params(ctx: RequestContext, params: ParamsLike) -> dict[str, Any]:
    defaults: Mapping[str, Any] | None = ctx.get(DEFAULT_PARAMS_KEY)
    return build_params(params, defaults)


def authorize_context(
    ctx: RequestContext,
    policy: Any,
    action: Any,
    params: ParamsLike = None,
    *,
    actor: Any = None,
    registry: PolicyRegistry | None = None,
) -> RequestContext | Denied:
    """Check authorization for the current request.

    The actor defaults to :func:`resolve_actor`. Stored default params
    are merged under *params*.

    Returns:
        *ctx*, flagged as authorized, on success; the ``Denied`` result
        otherwise.

    Example::

        outcome = authorize_context(ctx, Blog, "update_post", {"post": post})
        if isinstance(outcome, Denied):
            return render_error(outcome.reason)
    """
    who = actor if actor is not None else resolve_actor(ctx)
    result = check(policy, action, who, _context_params(ctx, params), registry=registry)
    if isinstance(result, Denied):
        return result
    return mark_authorized(ctx)


def authorize_context_or_raise(
    ctx: RequestContext,
    policy: Any,
    action: Any,
    params: ParamsLike = None,
    *,
    actor: Any = None,
    registry: PolicyRegistry | None = None,
    message: str | None = None,
    status: int | None = None,
) -> RequestContext:
    """Same as :func:`authorize_context`, but raises on denial.

    Raises:
        NotAuthorized: If the policy denies.
    """
    outcome = authorize_context(ctx, policy, action, params, actor=actor, registry=registry)
    if isinstance(outcome, Denied):
        raise NotAuthorized(reason=outcome.reason, message=message, status=status)
    return outcome


# ---------------------------------------------------------------------------
# Actions stored on the context
# ---------------------------------------------------------------------------


def put_action(ctx: RequestContext, action: Action, key: str = ACTION_KEY) -> RequestContext:
    ctx.set(key, action)
    return ctx


def get_action(ctx: RequestContext, key: str = ACTION_KEY) -> Action | None:
    return ctx.get(key)


def update_action(
    ctx: RequestContext,
    fn: Callable[[Action], Action],
    key: str = ACTION_KEY,
) -> RequestContext:
    """Replace the Action stored under *key* with ``fn(action)``.

    Raises:
        ConfigurationError: If no Action is stored under *key*.
    """
    current = get_action(ctx, key)
    if current is None:
        raise ConfigurationError(f"No action stored on the context under {key!r}")
    return put_action(ctx, fn(current), key)


def build_action(
    ctx: RequestContext,
    context: Any,
    *,
    policy: Any = None,
    actor: Getter = None,
    fallback: Callable[..., Any] | None = None,
    assigns: Mapping[str, Any] | None = None,
    key: str = ACTION_KEY,
    registry: PolicyRegistry | None = None,
) -> RequestContext:
    """Start an Action for *context* and store it on *ctx*.

    Args:
        ctx: The request context.
        context: The Action's context (and default policy).
        policy: Optional policy override.
        actor: The actor, or a callable receiving *ctx* that returns it.
            Defaults to :func:`resolve_actor`.
        fallback: Optional fallback for the Action.
        assigns: Initial assigns.
        key: The context key to store the Action under.
        registry: Optional custom registry.

    Example::

        build_action(ctx, Blog, actor=lambda ctx: ctx.get("user"))
        result = get_action(ctx).authorize("list_posts").run(list_posts)
    """
    who = _resolve_getter(ctx, actor) if actor is not None else resolve_actor(ctx)
    action = (
        start(context, policy=policy, actor=who, registry=registry)
        .with_fallback(fallback)
        .with_assigns(assigns or {})
    )
    return put_action(ctx, action, key)
