from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class User:
    """Pure domain model for User entity - no external dependencies"""
    id: Optional[str]
    name: str
    email: str
    department: Optional[str] = None
    role: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class DepartmentStats:
    """Per-department user counts, computed on demand and never stored"""
    department: Optional[str]
    total_users: int
    active_users: int
