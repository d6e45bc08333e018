from .user import DepartmentStats, User

__all__ = ["User", "DepartmentStats"]
