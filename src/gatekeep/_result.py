"""Authorization results and the normalizer for raw policy return values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Union

from gatekeep.exceptions import ProtocolViolation

__all__ = [
    "ALLOWED",
    "ERROR",
    "OK",
    "Allowed",
    "AuthResult",
    "Denied",
    "normalize_result",
]

OK: Literal["ok"] = "ok"
ERROR: Literal["error"] = "error"


@dataclass(frozen=True, slots=True)
class Allowed:
    """The action is permitted."""

    @property
    def allowed(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Denied:
    """The action is denied.

    Attributes:
        reason: Application-defined payload, by convention a short tag
            such as ``"unauthorized"`` or ``"not_found"``.

    Example::

        match check(Blog, "edit_post", user):
            case Denied(reason="not_found"):
                abort(404)
            case Denied():
                abort(403)
    """

    reason: Any

    @property
    def allowed(self) -> bool:
        return False


AuthResult = Union[Allowed, Denied]

ALLOWED = Allowed()


def normalize_result(value: Any, *, source: str | None = None) -> AuthResult:
    """Coerce a policy callback's raw return value into an ``AuthResult``.

    Checked in order, first match wins:

    - ``True``, ``"ok"`` or an ``Allowed`` instance -> ``Allowed``
    - ``False`` or ``"error"`` -> ``Denied(default_reason)``
    - a ``Denied`` instance, or a ``("error", reason)`` pair -> ``Denied(reason)``

    Anything else raises :class:`~gatekeep.exceptions.ProtocolViolation`.

    Args:
        value: The raw value returned by the callback.
        source: Optional name of the callback, used in the error message.

    Returns:
        ``Allowed`` or ``Denied``.

    Raises:
        ProtocolViolation: If *value* is not a recognized shape.
    """
    if value is True or isinstance(value, Allowed):
        return ALLOWED
    if isinstance(value, str) and value == OK:
        return ALLOWED
    if value is False or (isinstance(value, str) and value == ERROR):
        from gatekeep.config._config import get_global_config

        return Denied(get_global_config().default_reason)
    if isinstance(value, Denied):
        return value
    if isinstance(value, tuple) and len(value) == 2:
        tag, reason = value
        if isinstance(tag, str) and tag == ERROR:
            return Denied(reason)
    raise ProtocolViolation(value, source=source)
