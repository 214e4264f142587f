"""Custom exception hierarchy for pygear.

Missing records are not errors: lookups return ``None`` and mutations of
an unknown id are no-ops.
"""

from __future__ import annotations


class GearError(Exception):
    """Base exception for all pygear errors."""


class GearConfigError(GearError):
    """Invalid or missing configuration."""


class GearStorageError(GearError):
    """The key-value backend could not be read or written.

    Also raised when a persisted payload is not valid JSON or does not
    match the expected record shape.
    """

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class GearNotLoggedInError(GearError):
    """A user-bound client call was made before :meth:`GearClient.login`."""
