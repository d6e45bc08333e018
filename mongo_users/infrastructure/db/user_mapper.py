"""
Conversion between stored user documents and the User domain model.

Stored shape::

    {_id: ObjectId, name, email, department, role, active: bool,
     createdAt: Date, updatedAt: Date}

The functions here are pure: they never touch the database.
"""
# Standard library imports
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Dict, Mapping, Optional

# External package imports
from bson import ObjectId
from bson.errors import InvalidId

# Local application imports
from ...application.dto.user_dto import UserCreateRequest, UserUpdateRequest
from ...domain.constants import DepartmentStatsFields, UserFields
from ...domain.exceptions import InvalidIdError, MappingError
from ...domain.models.user import DepartmentStats, User
from ...utils.datetime_utils import bson_now, ensure_utc

_REQUIRED_FIELDS = (UserFields.NAME, UserFields.EMAIL)
_UPDATABLE_FIELDS = (
    UserFields.NAME,
    UserFields.EMAIL,
    UserFields.DEPARTMENT,
    UserFields.ROLE,
    UserFields.ACTIVE,
)
_MIN_TICK = timedelta(milliseconds=1)


def parse_object_id(user_id: Any) -> ObjectId:
    """
    Convert a user id string to an ObjectId.

    Raises:
        InvalidIdError: if user_id is not a 24 character hex string
    """
    if not isinstance(user_id, str) or not ObjectId.is_valid(user_id):
        raise InvalidIdError(user_id)
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError) as e:
        raise InvalidIdError(user_id) from e


def document_to_user(document: Mapping[str, Any], id_override: Optional[str] = None) -> User:
    """
    Convert MongoDB document to User domain model

    Args:
        document: MongoDB document dictionary
        id_override: id to use instead of document["_id"] (e.g. right after insert)

    Returns:
        User domain model

    Raises:
        MappingError: if _id, name or email is absent
    """
    raw_id = id_override if id_override is not None else document.get(UserFields.MONGO_ID)
    if raw_id is None:
        raise MappingError(UserFields.MONGO_ID)
    user_id = str(raw_id)

    for field in _REQUIRED_FIELDS:
        if document.get(field) is None:
            raise MappingError(field, document_id=user_id)

    active = document.get(UserFields.ACTIVE)
    return User(
        id=user_id,
        name=document[UserFields.NAME],
        email=document[UserFields.EMAIL],
        department=document.get(UserFields.DEPARTMENT),
        role=document.get(UserFields.ROLE),
        active=True if active is None else bool(active),
        created_at=ensure_utc(document.get(UserFields.CREATED_AT)),
        updated_at=ensure_utc(document.get(UserFields.UPDATED_AT)),
    )


def create_request_to_document(request: UserCreateRequest, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Build the document for a new user. _id is left for the store to assign.

    Both timestamps get the same instant; active starts as True.
    """
    timestamp = now or bson_now()
    return {
        UserFields.NAME: request.name,
        UserFields.EMAIL: request.email,
        UserFields.DEPARTMENT: request.department,
        UserFields.ROLE: request.role,
        UserFields.ACTIVE: True,
        UserFields.CREATED_AT: timestamp,
        UserFields.UPDATED_AT: timestamp,
    }


def user_to_document(user: User) -> Dict[str, Any]:
    """Convert User domain model to a full document (without _id)."""
    return {
        UserFields.NAME: user.name,
        UserFields.EMAIL: user.email,
        UserFields.DEPARTMENT: user.department,
        UserFields.ROLE: user.role,
        UserFields.ACTIVE: user.active,
        UserFields.CREATED_AT: user.created_at,
        UserFields.UPDATED_AT: user.updated_at,
    }


def update_request_changes(request: UserUpdateRequest) -> Dict[str, Any]:
    """Fields explicitly set (non-None) on the update request, keyed by stored name."""
    values = request.model_dump(exclude_none=True)
    return {field: values[field] for field in _UPDATABLE_FIELDS if field in values}


def next_updated_at(previous: Optional[datetime], now: Optional[datetime] = None) -> datetime:
    """
    Timestamp for the next mutation of a record last updated at previous.

    Returns now (default: bson_now()), or previous + 1 ms when the clock has
    not moved past previous.
    """
    timestamp = ensure_utc(now) or bson_now()
    previous = ensure_utc(previous)
    if previous is not None and timestamp <= previous:
        timestamp = previous + _MIN_TICK
    return timestamp


def update_request_to_set(
    request: UserUpdateRequest,
    now: Optional[datetime] = None,
    previous: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the $set document for an in-place update.

    updatedAt is always included, even when no other field changes, and is
    strictly later than previous (the stored updatedAt) when given.
    """
    changes = update_request_changes(request)
    changes[UserFields.UPDATED_AT] = next_updated_at(previous, now)
    return changes


def apply_update(request: UserUpdateRequest, user: User, now: Optional[datetime] = None) -> User:
    """
    Return a copy of user with the request's set fields applied.

    Absent fields keep their current value. updated_at always moves forward,
    by at least one millisecond past the previous value.
    """
    timestamp = next_updated_at(user.updated_at, now)
    return replace(user, **update_request_changes(request), updated_at=timestamp)


def document_to_department_stats(document: Mapping[str, Any]) -> DepartmentStats:
    """Convert one department statistics pipeline result to DepartmentStats."""
    return DepartmentStats(
        department=document.get(DepartmentStatsFields.DEPARTMENT),
        total_users=int(document.get(DepartmentStatsFields.TOTAL_USERS, 0)),
        active_users=int(document.get(DepartmentStatsFields.ACTIVE_USERS, 0)),
    )
