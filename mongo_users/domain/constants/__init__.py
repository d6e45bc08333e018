"""Constants for domain model field names"""

from .user_fields import DepartmentStatsFields, UserFields

__all__ = [
    "UserFields",
    "DepartmentStatsFields",
]
