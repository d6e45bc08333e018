# Standard library imports
import logging
from typing import List, Optional

# External package imports
from pymongo.errors import PyMongoError

# Local application imports
from ...domain.exceptions import StoreError, UserNotFoundError
from ...domain.models.user import DepartmentStats, User
from ...domain.repositories.user_repository import UserRepository
from ...infrastructure.db.store_errors import translate_write_error
from ...infrastructure.db.user_mapper import apply_update
from ...utils.datetime_utils import bson_now
from ..dto.user_dto import UserCreateRequest, UserSearchCriteria, UserUpdateRequest
from .user_service import UserService

logger = logging.getLogger(__name__)


class RepositoryUserService(UserService):
    """
    UserService built on a UserRepository.

    Only User objects cross this layer: creation builds a User and saves it,
    updates follow load -> modify -> save with whole-record replacement, and
    deletion checks existence before removing.
    """

    name = "repository"

    def __init__(self, user_repository: UserRepository, default_page_size: int = 10) -> None:
        self.user_repository = user_repository
        self.default_page_size = default_page_size

    def test_connection(self) -> str:
        logger.debug("Testing MongoDB connection (repository)")
        try:
            collection_name, exists = self.user_repository.collection_info()
            count = self.user_repository.count()
        except PyMongoError as e:
            logger.error(f"Error testing connection: {e}", exc_info=True)
            raise StoreError(f"Error testing connection: {e}") from e

        message = f"Repository connection OK | Collection: {collection_name} | Exists: {exists} | Users: {count}"
        logger.info(message)
        return message

    def create_user(self, request: UserCreateRequest) -> User:
        logger.debug(f"Creating user with email: {request.email}")
        now = bson_now()
        user = User(
            id=None,
            name=request.name,
            email=request.email,
            department=request.department,
            role=request.role,
            active=True,
            created_at=now,
            updated_at=now,
        )
        try:
            saved_user = self.user_repository.save(user)
        except PyMongoError as e:
            raise self._write_error(e, request.email, "creating user") from e

        logger.info(f"User created with ID: {saved_user.id}")
        return saved_user

    def find_user_by_id(self, user_id: str) -> User:
        logger.debug(f"Finding user by ID: {user_id}")
        user = self._call(lambda: self.user_repository.find_by_id(user_id), "finding user")
        if user is None:
            logger.warning(f"User not found with ID: {user_id}")
            raise UserNotFoundError(user_id)
        return user

    def update_user(self, user_id: str, request: UserUpdateRequest) -> User:
        logger.debug(f"Updating user with ID: {user_id}")
        # load
        user = self.find_user_by_id(user_id)
        # modify
        updated = apply_update(request, user)
        # save (replaces the stored record)
        try:
            saved_user = self.user_repository.save(updated)
        except PyMongoError as e:
            raise self._write_error(e, request.email, "updating user") from e

        logger.info(f"User updated: {user_id}")
        return saved_user

    def delete_user(self, user_id: str) -> bool:
        logger.debug(f"Deleting user with ID: {user_id}")
        if not self._call(lambda: self.user_repository.exists_by_id(user_id), "deleting user"):
            logger.warning(f"User not found for deletion: {user_id}")
            return False
        deleted = self._call(lambda: self.user_repository.delete_by_id(user_id), "deleting user")
        if deleted:
            logger.info(f"User deleted: {user_id}")
        return deleted

    def find_all(self) -> List[User]:
        logger.debug("Finding all users")
        return self._call(self.user_repository.find_all, "finding all users")

    def find_users_by_department(self, department: str) -> List[User]:
        logger.debug(f"Finding users in department: {department}")
        return self._call(
            lambda: self.user_repository.find_by_department(department),
            "finding users by department",
        )

    def search_users(self, criteria: UserSearchCriteria) -> List[User]:
        logger.debug(f"Searching users: {criteria.model_dump(exclude_none=True)}")
        return self._call(
            lambda: self.user_repository.search(criteria, self.default_page_size),
            "searching users",
        )

    def count_by_department(self, department: str) -> int:
        logger.debug(f"Counting users in department: {department}")
        return self._call(lambda: self.user_repository.count_by_department(department), "counting users")

    def get_stats_by_department(self) -> List[DepartmentStats]:
        logger.debug("Computing department statistics")
        stats = self._call(self.user_repository.department_stats, "computing statistics")
        logger.info(f"Department statistics computed: {len(stats)} departments")
        return stats

    def _call(self, operation, action: str):
        """Run a repository read, wrapping driver failures as StoreError."""
        try:
            return operation()
        except PyMongoError as e:
            logger.error(f"Error {action}: {e}", exc_info=True)
            raise StoreError(f"Error {action}: {e}") from e

    def _write_error(self, error: PyMongoError, email: Optional[str], action: str) -> Exception:
        translated = translate_write_error(error, email, action)
        if isinstance(translated, StoreError):
            logger.error(f"Error {action}: {error}", exc_info=True)
        else:
            logger.warning(f"Duplicate email while {action}: {email}")
        return translated
