"""
Exception hierarchy for the user services.

All errors raised by a UserService inherit from UserServiceError. Typed errors
(not found, duplicate email, invalid id, mapping) are raised at the service
boundary; any other store failure is wrapped as StoreError with the original
driver exception chained as __cause__.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from typing import Any, Dict, Optional


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class UserServiceError(Exception):
    """Base exception for all user service errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# -----------------------------------------------------------------------------
# Lookup / identity
# -----------------------------------------------------------------------------


class UserNotFoundError(UserServiceError):
    """Raised when no user has the requested id."""

    def __init__(self, user_id: str):
        super().__init__(f"User not found with id: {user_id}", details={"user_id": user_id})
        self.user_id = user_id


class InvalidIdError(UserServiceError):
    """Raised when a user id is not a well-formed store identifier."""

    def __init__(self, user_id: Any):
        super().__init__(f"Invalid user id: {user_id!r}", details={"user_id": user_id})
        self.user_id = user_id


# -----------------------------------------------------------------------------
# Write conflicts
# -----------------------------------------------------------------------------


class DuplicateEmailError(UserServiceError):
    """Raised when the store rejects a write because the email is already taken."""

    def __init__(self, email: Optional[str]):
        super().__init__(f"A user with email {email} already exists", details={"email": email})
        self.email = email


# -----------------------------------------------------------------------------
# Mapping / store
# -----------------------------------------------------------------------------


class MappingError(UserServiceError):
    """Raised when a stored document lacks a field required to build a User."""

    def __init__(self, field: str, document_id: Any = None):
        super().__init__(
            f"Document {document_id} is missing required field '{field}'",
            details={"field": field, "document_id": document_id},
        )
        self.field = field


class StoreError(UserServiceError):
    """Generic wrapper for any other store-level failure."""
    pass
