"""gatekeep testing utilities: MockActor, assertions, and fixtures.

Provides test helpers for verifying authorization policies:

- **MockActor / factories**: Lightweight actors, and request contexts
  that carry them (``make_request_context``).
- **Assertion helpers**: ``assert_allowed``, ``assert_denied``,
  ``assert_context_authorized``.
- **Fixtures**: ``gatekeep_registry``, ``gatekeep_config``,
  ``request_context``, ``isolated_gatekeep_state``.

Example::

    from gatekeep.testing import assert_denied, make_user

    def test_viewers_cannot_delete(post):
        assert_denied(Blog, "delete_post", make_user(), {"post": post}, reason="unauthorized")
"""

from gatekeep.testing._actors import (
    MockActor,
    make_admin,
    make_anonymous,
    make_request_context,
    make_user,
)
from gatekeep.testing._assertions import (
    assert_allowed,
    assert_context_authorized,
    assert_denied,
)
from gatekeep.testing._fixtures import (
    gatekeep_config,
    gatekeep_registry,
    isolated_gatekeep_state,
    request_context,
)
from gatekeep.testing._isolation import isolated_gatekeep

__all__ = [
    "MockActor",
    "assert_allowed",
    "assert_context_authorized",
    "assert_denied",
    "gatekeep_config",
    "gatekeep_registry",
    "isolated_gatekeep",
    "isolated_gatekeep_state",
    "make_admin",
    "make_anonymous",
    "make_request_context",
    "make_user",
    "request_context",
]
