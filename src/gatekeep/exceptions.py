"""Exception hierarchy for gatekeep."""

from __future__ import annotations

from typing import Any

__all__ = [
    "ActionNotRunnable",
    "AmbiguousScope",
    "ConfigurationError",
    "GatekeepError",
    "NoPolicyError",
    "NotAuthorized",
    "ProtocolViolation",
]


class GatekeepError(Exception):
    """Base exception for all gatekeep errors."""


class NotAuthorized(GatekeepError):  # noqa: N818
    """Authorization was denied, or never performed.

    This is the only exception gatekeep raises for an authorization
    outcome. Frameworks can catch it once and map it to a response.

    Attributes:
        reason: The denial reason returned by the policy (e.g.
            ``"unauthorized"``, ``"not_found"``, or any custom value).
        message: Human-readable message.
        status: HTTP-like status code.

    Example::

        try:
            authorize(Blog, "delete_post", user)
        except NotAuthorized as exc:
            return exc.message, exc.status
    """

    def __init__(
        self,
        *,
        reason: Any,
        message: str | None = None,
        status: int | None = None,
    ) -> None:
        from gatekeep.config._config import get_global_config

        config = get_global_config()
        self.reason = reason
        self.message = message if message is not None else config.error_message
        self.status = status if status is not None else config.error_status
        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"NotAuthorized(reason={self.reason!r}, message={self.message!r}, "
            f"status={self.status!r})"
        )


class ProtocolViolation(GatekeepError):  # noqa: N818
    """A policy callback returned a value outside the recognized result shapes.

    This signals a bug in the policy, not a denial.

    Attributes:
        value: The offending return value.
    """

    def __init__(self, value: Any, *, source: str | None = None) -> None:
        self.value = value
        self.source = source
        where = f" from {source}" if source else ""
        super().__init__(
            f"Unexpected result{where}: {value!r}. Return True/False, 'ok'/'error', "
            f"Allowed(), Denied(reason) or ('error', reason)."
        )


class ConfigurationError(GatekeepError):
    """The library was used in a way that can never succeed.

    Parent of the resolution and pipeline errors below. None of these
    are retried or defaulted.
    """


class NoPolicyError(ConfigurationError):
    """No callback could be resolved for a target.

    Attributes:
        target: A printable name of the target that failed to resolve.
        callback: The callback kind that was looked up (``"authorize"``
            or ``"scope"``).
    """

    def __init__(self, *, target: str, callback: str = "authorize") -> None:
        self.target = target
        self.callback = callback
        super().__init__(
            f"No {callback!r} callback found for {target}. Register one with "
            f"@{'policy' if callback == 'authorize' else 'scope_filter'}, implement "
            f"{callback}() on the target, or define a policy class by naming convention."
        )


class AmbiguousScope(ConfigurationError):  # noqa: N818
    """The resource type of a queryable could not be inferred.

    Pass ``resource_type=`` to :func:`gatekeep.scope.scope` explicitly.
    """

    def __init__(self, queryable: Any) -> None:
        self.queryable = queryable
        super().__init__(
            f"Cannot determine the resource type of {queryable!r}; "
            f"pass resource_type= explicitly."
        )


class ActionNotRunnable(ConfigurationError):  # noqa: N818
    """An Action was run without a job, before authorization, or twice."""
