"""
Classification of driver errors.

This is the only place that decides whether a store failure means
"duplicate email". The structured checks come first; matching on the
message text is kept as a fallback for drivers or wrappers that lose the
error code.
"""
from typing import Optional

from pymongo.errors import DuplicateKeyError, PyMongoError

from ...domain.exceptions import DuplicateEmailError, StoreError

DUPLICATE_KEY_CODE = 11000
_DUPLICATE_KEY_MARKERS = ("E11000", "duplicate key")


def is_duplicate_key_error(error: BaseException) -> bool:
    """True if error reports a unique index violation."""
    if isinstance(error, DuplicateKeyError):
        return True
    if getattr(error, "code", None) == DUPLICATE_KEY_CODE:
        return True
    # Fallback: some wrappers only keep the message
    message = str(error)
    return any(marker in message for marker in _DUPLICATE_KEY_MARKERS)


def translate_write_error(error: PyMongoError, email: Optional[str], action: str) -> Exception:
    """Map a failed write to DuplicateEmailError or a StoreError."""
    if is_duplicate_key_error(error):
        return DuplicateEmailError(email)
    return StoreError(f"Error {action}: {error}")
