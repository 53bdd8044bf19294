"""Policy engine: registration and resolution of authorization callbacks."""

from gatekeep.policy._base import Policy, PolicyRegistration, Scopable, ScopeRegistration
from gatekeep.policy._registry import PolicyRegistry, get_default_registry
from gatekeep.policy._resolve import resolve_policy, resolve_scope
from gatekeep.policy._decorator import guarded, policy, scope_filter

__all__ = [
    "Policy",
    "PolicyRegistration",
    "PolicyRegistry",
    "Scopable",
    "ScopeRegistration",
    "get_default_registry",
    "guarded",
    "policy",
    "resolve_policy",
    "resolve_scope",
    "scope_filter",
]
