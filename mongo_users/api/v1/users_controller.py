# Standard library imports
from typing import List

# External package imports
from fastapi import APIRouter, Depends, HTTPException, Response, status

# Local application imports
from ...application.dto.user_dto import (
    ConnectionStatusResponse,
    CountResponse,
    DepartmentStatsResponse,
    UserCreateRequest,
    UserResponse,
    UserSearchCriteria,
    UserUpdateRequest,
)
from ...application.services.user_service import UserService
from ...di.container import get_container
from ...domain.exceptions import (
    DuplicateEmailError,
    InvalidIdError,
    UserNotFoundError,
    UserServiceError,
)


router = APIRouter(tags=["users"])

_STATUS_BY_ERROR = (
    (UserNotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateEmailError, status.HTTP_409_CONFLICT),
    (InvalidIdError, status.HTTP_400_BAD_REQUEST),
)


def _user_service() -> UserService:
    return get_container().get(UserService)


def _http_error(exception: UserServiceError) -> HTTPException:
    """Map a service error to an HTTP error; unknown kinds become 500."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exception, error_type):
            return HTTPException(status_code=status_code, detail=exception.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exception.message)


@router.get("/connection", response_model=ConnectionStatusResponse)
def test_connection() -> ConnectionStatusResponse:
    """
    Check the database connection

    Returns:
        ConnectionStatusResponse with the active implementation and diagnostic line
    """
    service = _user_service()
    try:
        message = service.test_connection()
    except UserServiceError as exception:
        raise _http_error(exception)
    return ConnectionStatusResponse(implementation=service.name, message=message)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(request: UserCreateRequest) -> UserResponse:
    """
    Create a new user

    Args:
        request: User creation request

    Returns:
        UserResponse with the created user
    """
    try:
        user = _user_service().create_user(request)
    except UserServiceError as exception:
        raise _http_error(exception)
    return UserResponse.model_validate(user)


@router.get("", response_model=List[UserResponse])
def list_users() -> List[UserResponse]:
    """List every user"""
    try:
        users = _user_service().find_all()
    except UserServiceError as exception:
        raise _http_error(exception)
    return [UserResponse.model_validate(user) for user in users]


@router.get("/search", response_model=List[UserResponse])
def search_users(criteria: UserSearchCriteria = Depends()) -> List[UserResponse]:
    """
    Search users

    Args:
        criteria: name (substring), department, active, page, size, sort_by, sort_direction

    Returns:
        One page of matching users
    """
    try:
        users = _user_service().search_users(criteria)
    except UserServiceError as exception:
        raise _http_error(exception)
    return [UserResponse.model_validate(user) for user in users]


@router.get("/stats/departments", response_model=List[DepartmentStatsResponse])
def get_stats_by_department() -> List[DepartmentStatsResponse]:
    """Total and active users per department, largest first"""
    try:
        stats = _user_service().get_stats_by_department()
    except UserServiceError as exception:
        raise _http_error(exception)
    return [DepartmentStatsResponse.model_validate(item) for item in stats]


@router.get("/departments/{department}", response_model=List[UserResponse])
def find_users_by_department(department: str) -> List[UserResponse]:
    """List users of one department"""
    try:
        users = _user_service().find_users_by_department(department)
    except UserServiceError as exception:
        raise _http_error(exception)
    return [UserResponse.model_validate(user) for user in users]


@router.get("/departments/{department}/count", response_model=CountResponse)
def count_by_department(department: str) -> CountResponse:
    """Count users of one department"""
    try:
        count = _user_service().count_by_department(department)
    except UserServiceError as exception:
        raise _http_error(exception)
    return CountResponse(department=department, count=count)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str) -> UserResponse:
    """
    Get a user by ID

    Args:
        user_id: ID of the user

    Returns:
        UserResponse with user information
    """
    try:
        user = _user_service().find_user_by_id(user_id)
    except UserServiceError as exception:
        raise _http_error(exception)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: str, request: UserUpdateRequest) -> UserResponse:
    """
    Update a user; fields omitted from the body are left unchanged

    Args:
        user_id: ID of the user
        request: fields to change

    Returns:
        UserResponse with the updated user
    """
    try:
        user = _user_service().update_user(user_id, request)
    except UserServiceError as exception:
        raise _http_error(exception)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str) -> Response:
    """Delete a user; 404 when no user had that ID"""
    try:
        deleted = _user_service().delete_user(user_id)
    except UserServiceError as exception:
        raise _http_error(exception)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User not found with id: {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
