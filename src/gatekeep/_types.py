"""Shared protocols and type aliases for gatekeep."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Union

__all__ = [
    "AuthorizeCallback",
    "Getter",
    "Params",
    "ParamsLike",
    "ScopeCallback",
]

# The merged mapping handed to policy and scope callbacks.
Params = dict[str, Any]

# What callers may pass as params: a mapping, a list of (key, value) pairs, or None.
ParamsLike = Union[Mapping[str, Any], Iterable[tuple[str, Any]], None]

# (action, actor, params) -> raw result
AuthorizeCallback = Callable[[Any, Any, Params], Any]

# (queryable, actor, params) -> narrowed queryable
ScopeCallback = Callable[[Any, Any, Params], Any]

# Either a literal value or a callable that receives the request context.
Getter = Union[Callable[[Any], Any], Any]
