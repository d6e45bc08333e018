from .database_provider import DatabaseProvider
from .repository_provider import RepositoryProvider
from .user_service_provider import UserServiceProvider


__all__ = [
    "DatabaseProvider",
    "RepositoryProvider",
    "UserServiceProvider",
]
