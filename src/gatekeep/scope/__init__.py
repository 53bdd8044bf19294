"""Scope: narrow queryable collections down to what an actor may see."""

from gatekeep.scope._scope import infer_resource_type, scope

__all__ = ["infer_resource_type", "scope"]
