from .user_service import UserService
from .repository_user_service import RepositoryUserService

__all__ = ["UserService", "RepositoryUserService"]
