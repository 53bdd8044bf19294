"""ParameterBag construction."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from gatekeep._types import Params, ParamsLike

__all__ = ["build_params"]


def build_params(explicit: ParamsLike = None, *defaults: Mapping[str, Any] | None) -> Params:
    """Merge parameter sources into a fresh dict.

    *defaults* are applied first, left to right, then *explicit* on top,
    so caller-supplied values always win over accumulated ones.

    Args:
        explicit: A mapping, an iterable of ``(key, value)`` pairs, or None.
        *defaults: Lower-precedence mappings (e.g. Action assigns).

    Returns:
        A new dict; none of the inputs are modified.

    Example::

        build_params([("page", 2)], {"page": 1, "drafts": True})
        # {"page": 2, "drafts": True}
    """
    params: Params = {}
    for layer in defaults:
        if layer:
            params.update(layer)
    if explicit is None:
        return params
    if isinstance(explicit, Mapping):
        params.update(explicit)
    else:
        for key, value in explicit:
            params[key] = value
    return params
