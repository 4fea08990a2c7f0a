"""Exceptions raised by ledgerise operations.

Every rule violation is raised before the first write of an operation, so a
raised error always means nothing was persisted.
"""


class LedgeriseError(Exception):
    """Base class for all ledgerise errors."""


class ValidationError(LedgeriseError):
    """Malformed or out-of-range input."""


class ConflictError(ValidationError):
    """Attempted duplicate, such as a category name or an email in use."""


class StateError(ValidationError):
    """Operation not permitted for the current shape of the data."""


class NotFoundError(LedgeriseError):
    """Referenced record is missing or not owned by the caller.

    Both cases share one message so callers can't probe for existence.
    """


class NoPreviousMonthError(NotFoundError, StateError):
    """No budget month exists before the copy-forward target."""


class AuthenticationError(LedgeriseError):
    """Operation requires a current user."""


class NotificationError(LedgeriseError):
    """Notification settings are incomplete."""
