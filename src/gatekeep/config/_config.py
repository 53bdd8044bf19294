"""Layered configuration for gatekeep."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = [
    "GatekeepConfig",
    "configure",
    "get_global_config",
    "_reset_global_config",
    "_set_global_config",
]


def _validate_status(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 100 <= value <= 599:
        raise ValueError(f"{name} must be an HTTP status code (100-599), got {value!r}")


@dataclass(frozen=True, slots=True)
class GatekeepConfig:
    """Process-wide defaults with merge semantics (global -> per call).

    Attributes:
        default_reason: Denial reason used when a policy returns ``False``
            or ``"error"`` without a payload.
        error_message: Default message for ``NotAuthorized`` raised by the
            raise-on-denial operations.
        error_status: Default status for those errors.
        verify_error_message: Message used when a request context is
            finalized without any authorization having run.
        verify_error_status: Status used for that error.
        policy_suffix: Suffix appended to a type name when resolving a
            policy class by naming convention.
        actor_key: Request-context key the current actor is read from.
        log_policy_decisions: Log every check on the ``gatekeep`` logger.

    Example::

        config = GatekeepConfig(default_reason="forbidden")
        merged = config.merge(error_status=404)
    """

    default_reason: Any = "unauthorized"
    error_message: str = "not authorized"
    error_status: int = 403
    verify_error_message: str = "no authorization run"
    verify_error_status: int = 500
    policy_suffix: str = "Policy"
    actor_key: str = "current_user"
    log_policy_decisions: bool = False

    def __post_init__(self) -> None:
        _validate_status("error_status", self.error_status)
        _validate_status("verify_error_status", self.verify_error_status)
        if not self.policy_suffix:
            raise ValueError("policy_suffix must be a non-empty string")
        if not self.actor_key:
            raise ValueError("actor_key must be a non-empty string")

    def merge(
        self,
        *,
        default_reason: Any = None,
        error_message: str | None = None,
        error_status: int | None = None,
        verify_error_message: str | None = None,
        verify_error_status: int | None = None,
        policy_suffix: str | None = None,
        actor_key: str | None = None,
        log_policy_decisions: bool | None = None,
    ) -> GatekeepConfig:
        """Return a new config with non-None overrides applied.

        Example::

            base = GatekeepConfig()
            strict = base.merge(error_status=404, default_reason="not_found")
        """
        return GatekeepConfig(
            default_reason=(default_reason if default_reason is not None else self.default_reason),
            error_message=(error_message if error_message is not None else self.error_message),
            error_status=(error_status if error_status is not None else self.error_status),
            verify_error_message=(
                verify_error_message
                if verify_error_message is not None
                else self.verify_error_message
            ),
            verify_error_status=(
                verify_error_status if verify_error_status is not None else self.verify_error_status
            ),
            policy_suffix=(policy_suffix if policy_suffix is not None else self.policy_suffix),
            actor_key=(actor_key if actor_key is not None else self.actor_key),
            log_policy_decisions=(
                log_policy_decisions
                if log_policy_decisions is not None
                else self.log_policy_decisions
            ),
        )


# ---------------------------------------------------------------------------
# Global configuration singleton
# ---------------------------------------------------------------------------

_global_config = GatekeepConfig()


def get_global_config() -> GatekeepConfig:
    """Return the current global configuration."""
    return _global_config


def configure(
    *,
    default_reason: Any = None,
    error_message: str | None = None,
    error_status: int | None = None,
    verify_error_message: str | None = None,
    verify_error_status: int | None = None,
    policy_suffix: str | None = None,
    actor_key: str | None = None,
    log_policy_decisions: bool | None = None,
) -> GatekeepConfig:
    """Update the global configuration by merging overrides.

    Only non-None values are applied. Returns the new global config.

    Example::

        configure(default_reason="forbidden", log_policy_decisions=True)
    """
    global _global_config
    _global_config = _global_config.merge(
        default_reason=default_reason,
        error_message=error_message,
        error_status=error_status,
        verify_error_message=verify_error_message,
        verify_error_status=verify_error_status,
        policy_suffix=policy_suffix,
        actor_key=actor_key,
        log_policy_decisions=log_policy_decisions,
    )
    return _global_config


def _set_global_config(cfg: GatekeepConfig) -> None:
    """Replace global config with an exact snapshot. For testing only."""
    global _global_config
    _global_config = cfg


def _reset_global_config() -> None:
    """Reset global config to defaults. For testing only."""
    global _global_config
    _global_config = GatekeepConfig()
