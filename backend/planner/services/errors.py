"""Domain errors raised by services.

Not-found and not-authorized are never errors; services return None, False or
an empty list for both so callers cannot probe for other users' ids.
"""


class DomainError(ValueError):
    """A business rule rejected the request. The message is safe to show to the user."""


class ConflictError(DomainError):
    """The request collides with existing state (duplicate code, duplicate member, last owner)."""
