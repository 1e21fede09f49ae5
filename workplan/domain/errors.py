"""Error taxonomy shared by the core and the repository layer.

The HTTP layer maps these to status codes; nothing here knows about HTTP.
"""

from __future__ import annotations


class WorkplanError(Exception):
    """Base error for plan and report operations."""


class NotFound(WorkplanError):
    """Referenced plan or report does not exist, or belongs to another user."""


class ConflictViolation(WorkplanError):
    """A uniqueness rule would be broken (second active plan, duplicate stub, resubmission)."""


class RepositoryError(WorkplanError):
    """Transient storage failure (connection, I/O, lock timeout)."""


class ValidationError(WorkplanError):
    """Malformed input. Never silently defaulted."""
