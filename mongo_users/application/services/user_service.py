from abc import ABC, abstractmethod
from typing import List

from ...domain.models.user import DepartmentStats, User
from ..dto.user_dto import UserCreateRequest, UserSearchCriteria, UserUpdateRequest


class UserService(ABC):
    """
    User management contract shared by every storage implementation.

    Implementations are stateless apart from references to their
    collaborators, so one instance can serve concurrent callers.

    Errors (see domain.exceptions):
        UserNotFoundError: id is well-formed but no user has it
        InvalidIdError: id is not a well-formed store identifier
        DuplicateEmailError: the store rejected a write on the unique email index
        MappingError: a stored document lacks name or email
        StoreError: any other store failure
    """

    #: short name used in configuration and diagnostics
    name: str = ""

    @abstractmethod
    def test_connection(self) -> str:
        """Return a diagnostic line with collection existence and user count"""
        pass

    @abstractmethod
    def create_user(self, request: UserCreateRequest) -> User:
        """Insert a new active user; both timestamps set to the same instant"""
        pass

    @abstractmethod
    def find_user_by_id(self, user_id: str) -> User:
        """Find user by ID"""
        pass

    @abstractmethod
    def update_user(self, user_id: str, request: UserUpdateRequest) -> User:
        """Apply the set fields of request and refresh updated_at"""
        pass

    @abstractmethod
    def delete_user(self, user_id: str) -> bool:
        """Delete user; False when no user had that id"""
        pass

    @abstractmethod
    def find_all(self) -> List[User]:
        """Find every user"""
        pass

    @abstractmethod
    def find_users_by_department(self, department: str) -> List[User]:
        """Find users whose department equals the argument exactly"""
        pass

    @abstractmethod
    def search_users(self, criteria: UserSearchCriteria) -> List[User]:
        """Find users matching all set criteria, one page at a time"""
        pass

    @abstractmethod
    def count_by_department(self, department: str) -> int:
        """Count users in a department"""
        pass

    @abstractmethod
    def get_stats_by_department(self) -> List[DepartmentStats]:
        """Total and active users per department, largest department first"""
        pass
