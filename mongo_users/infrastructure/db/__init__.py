from .mongo_user_repository import MongoUserRepository
from .native_user_service import NativeUserService

__all__ = [
    "MongoUserRepository",
    "NativeUserService",
]
