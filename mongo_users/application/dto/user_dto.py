from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


SortField = Literal["name", "email", "department", "role", "active", "createdAt", "updatedAt"]


class UserCreateRequest(BaseModel):
    """DTO for user creation request (all fields required)"""
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    department: str = Field(min_length=1, max_length=100)
    role: str = Field(min_length=1, max_length=100)


class UserUpdateRequest(BaseModel):
    """DTO for user update request - fields left as None are not changed"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    department: Optional[str] = Field(default=None, min_length=1, max_length=100)
    role: Optional[str] = Field(default=None, min_length=1, max_length=100)
    active: Optional[bool] = None


class UserSearchCriteria(BaseModel):
    """
    DTO for user search.

    Unset criteria put no constraint on their field. size=0 means "use the
    configured default page size", not "return nothing".
    """
    name: Optional[str] = None
    department: Optional[str] = None
    active: Optional[bool] = None
    page: int = Field(default=0, ge=0)
    size: int = Field(default=0, ge=0)
    sort_by: Optional[SortField] = None
    sort_direction: Literal["asc", "desc"] = "asc"


class UserResponse(BaseModel):
    """DTO for user response"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    department: Optional[str] = None
    role: Optional[str] = None
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DepartmentStatsResponse(BaseModel):
    """DTO for per-department user statistics"""
    model_config = ConfigDict(from_attributes=True)

    department: Optional[str] = None
    total_users: int
    active_users: int


class ConnectionStatusResponse(BaseModel):
    """DTO for the connection diagnostic"""
    implementation: str
    message: str


class CountResponse(BaseModel):
    """DTO for a count result"""
    department: str
    count: int
