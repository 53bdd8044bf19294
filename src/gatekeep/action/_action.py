"""Composable authorized actions, run once."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from gatekeep._checks import check
from gatekeep._params import build_params
from gatekeep._result import ALLOWED, Allowed, AuthResult, Denied
from gatekeep._types import ParamsLike
from gatekeep.config._config import get_global_config
from gatekeep.exceptions import ActionNotRunnable, ConfigurationError, NotAuthorized
from gatekeep.policy._registry import PolicyRegistry

__all__ = ["Action", "start"]

Job = Callable[..., Any]

_DEFAULT_REASON = object()


class _RunLatch:
    """Records whether one Action value has been run."""

    __slots__ = ("fired",)

    def __init__(self) -> None:
        self.fired = False


def _call_with_action(fn: Job, action: Action) -> Any:
    """Call a job or fallback with the action if it accepts one argument."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return fn(action)
    try:
        signature.bind(action)
    except TypeError:
        return fn()
    return fn(action)


@dataclass(frozen=True, slots=True)
class Action:
    """An authorized unit of work, built up step by step and run once.

    Every ``with_*``/``assign`` method returns an updated copy; the
    original value is never changed. Thread the returned value forward.

    Attributes:
        context: The context the action belongs to.
        policy: The policy target; defaults to ``context``.
        actor: The user/principal to authorize.
        name: The action identifier of the last authorization attempt.
        authorization_performed: Whether an authorization attempt (or a
            forced result) has been recorded.
        last_result: ``Allowed()``/``Denied(reason)``, or ``None`` before
            authorization.
        job: Work to run when authorized; called with the Action if it
            takes one argument.
        fallback: Work to run when denied; same calling convention.
        assigns: Values carried along and merged under the params of
            every authorization attempt.
        registry: Optional custom policy registry.

    Example::

        result = (
            start(Blog)
            .with_actor(current_user)
            .assign("drafts", True)
            .authorize("list_posts")
            .with_fallback(lambda action: [])
            .run(lambda action: Blog.list_posts(action.actor, drafts=action.assigns["drafts"]))
        )
    """

    context: Any = None
    policy: Any = None
    actor: Any = None
    name: Any = None
    authorization_performed: bool = False
    last_result: AuthResult | None = None
    job: Job | None = None
    fallback: Job | None = None
    assigns: Mapping[str, Any] = field(default_factory=dict)
    registry: PolicyRegistry | None = field(default=None, repr=False, compare=False)
    _latch: _RunLatch = field(default_factory=_RunLatch, init=False, repr=False, compare=False)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def authorized(self) -> bool:
        """True only after an authorization attempt that was allowed."""
        return isinstance(self.last_result, Allowed)

    @property
    def executed(self) -> bool:
        return self._latch.fired

    def _ensure_not_run(self) -> None:
        if self._latch.fired:
            raise ActionNotRunnable("Action has already been run")

    def _update(self, **changes: Any) -> Action:
        self._ensure_not_run()
        return replace(self, **changes)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def with_context(self, context: Any) -> Action:
        return self._update(context=context)

    def with_policy(self, policy: Any) -> Action:
        """Authorize against *policy* instead of the context."""
        return self._update(policy=policy)

    def with_actor(self, actor: Any) -> Action:
        return self._update(actor=actor)

    def with_job(self, job: Job | None) -> Action:
        if job is not None and not callable(job):
            raise TypeError(f"job must be callable, got {job!r}")
        return self._update(job=job)

    def with_fallback(self, fallback: Job | None) -> Action:
        if fallback is not None and not callable(fallback):
            raise TypeError(f"fallback must be callable, got {fallback!r}")
        return self._update(fallback=fallback)

    def with_assigns(self, assigns: Mapping[str, Any]) -> Action:
        """Replace the assigns."""
        return self._update(assigns=dict(assigns))

    def assign(self, key: str, value: Any) -> Action:
        """Add or overwrite a single assign."""
        return self._update(assigns={**self.assigns, key: value})

    def merge_assigns(self, assigns: ParamsLike = None, **extra: Any) -> Action:
        """Merge a mapping (or pairs, or keywords) into the assigns."""
        return self._update(assigns=build_params(extra, self.assigns, build_params(assigns)))

    def force_allow(self) -> Action:
        """Record an allowed result without consulting the policy."""
        return self._update(authorization_performed=True, last_result=ALLOWED)

    def force_deny(self, reason: Any = _DEFAULT_REASON) -> Action:
        """Record a denial without consulting the policy.

        Args:
            reason: The denial reason. Defaults to the configured
                ``default_reason``.
        """
        if reason is _DEFAULT_REASON:
            reason = get_global_config().default_reason
        return self._update(authorization_performed=True, last_result=Denied(reason))

    # ------------------------------------------------------------------
    # Authorization
    # ------------------------------------------------------------------

    def authorize(self, name: Any, params: ParamsLike = None) -> Action:
        """Authorize the action *name* with the policy.

        The params passed to the policy are the assigns overlaid with
        *params*. Once an attempt has been denied, later calls return
        this Action unchanged without consulting the policy, so a later
        check can never mask an earlier failure.

        Raises:
            ConfigurationError: If no policy is set.
        """
        self._ensure_not_run()
        if self.authorization_performed and isinstance(self.last_result, Denied):
            return self
        if self.policy is None:
            raise ConfigurationError(f"Policy not specified for {name!r} action")

        result = check(
            self.policy,
            name,
            self.actor,
            build_params(params, self.assigns),
            registry=self.registry,
        )
        return self._update(name=name, authorization_performed=True, last_result=result)

    def authorize_or_raise(
        self,
        name: Any,
        params: ParamsLike = None,
        *,
        message: str | None = None,
        status: int | None = None,
    ) -> Action:
        """Same as :meth:`authorize`, but raises on denial.

        A previously denied Action raises with the recorded reason.

        Raises:
            NotAuthorized: On denial.
        """
        action = self.authorize(name, params)
        if isinstance(action.last_result, Denied):
            raise NotAuthorized(reason=action.last_result.reason, message=message, status=status)
        return action

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _prepare_run(self, job: Job | None, fallback: Job | None) -> Action:
        self._ensure_not_run()
        action = self
        if job is not None:
            action = action.with_job(job)
        if fallback is not None:
            action = action.with_fallback(fallback)
        if action.job is None:
            raise ActionNotRunnable("Job not specified for action")
        if not action.authorization_performed:
            raise ActionNotRunnable(
                "Action has not been authorized; call authorize(), force_allow() "
                "or force_deny() before run()"
            )
        self._latch.fired = True
        action._latch.fired = True
        return action

    def run(self, job: Job | None = None, fallback: Job | None = None) -> Any:
        """Execute the action.

        - Authorized: returns ``job(action)``.
        - Denied with a fallback: returns ``fallback(action)``.
        - Denied without a fallback: returns the ``Denied`` result.

        *job* and *fallback*, when given, are installed first.

        Raises:
            ActionNotRunnable: If there is no job, authorization never
                ran, or this Action has already been run.
        """
        action = self._prepare_run(job, fallback)
        if action.authorized:
            return _call_with_action(action.job, action)  # type: ignore[arg-type]
        if action.fallback is not None:
            return _call_with_action(action.fallback, action)
        return action.last_result

    def run_or_raise(
        self,
        job: Job | None = None,
        *,
        message: str | None = None,
        status: int | None = None,
    ) -> Any:
        """Execute the job, raising on denial instead of using a fallback.

        Raises:
            NotAuthorized: If the last authorization was denied.
            ActionNotRunnable: Same conditions as :meth:`run`.
        """
        action = self._prepare_run(job, None)
        if action.authorized:
            return _call_with_action(action.job, action)  # type: ignore[arg-type]
        reason = action.last_result.reason if isinstance(action.last_result, Denied) else None
        raise NotAuthorized(reason=reason, message=message, status=status)


def start(
    context: Any,
    *,
    policy: Any = None,
    actor: Any = None,
    registry: PolicyRegistry | None = None,
) -> Action:
    """Begin an Action for *context*.

    The policy defaults to the context itself. The Action is
    unauthorized until :meth:`Action.authorize` (or a forced result)
    records an outcome.

    Example::

        action = start(Blog, actor=current_user).authorize("list_posts")
    """
    return Action(
        context=context,
        policy=policy if policy is not None else context,
        actor=actor,
        registry=registry,
    )
