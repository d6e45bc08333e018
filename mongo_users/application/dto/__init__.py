from .user_dto import (
    ConnectionStatusResponse,
    CountResponse,
    DepartmentStatsResponse,
    UserCreateRequest,
    UserResponse,
    UserSearchCriteria,
    UserUpdateRequest,
)

__all__ = [
    "UserCreateRequest",
    "UserUpdateRequest",
    "UserSearchCriteria",
    "UserResponse",
    "DepartmentStatsResponse",
    "ConnectionStatusResponse",
    "CountResponse",
]
