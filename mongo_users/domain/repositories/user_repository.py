from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Tuple

from ..models.user import DepartmentStats, User

if TYPE_CHECKING:
    from ...application.dto.user_dto import UserSearchCriteria


class UserRepository(ABC):
    """
    Repository interface - defines contract for user data access.

    Works on User objects only; callers never see stored documents.
    Malformed ids raise InvalidIdError. Driver errors propagate unchanged.
    """

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[User]:
        """Find user by ID"""
        pass

    @abstractmethod
    def exists_by_id(self, user_id: str) -> bool:
        """Check whether a user with this ID exists"""
        pass

    @abstractmethod
    def save(self, user: User) -> User:
        """Save user (insert when id is None, otherwise replace the whole record)"""
        pass

    @abstractmethod
    def delete_by_id(self, user_id: str) -> bool:
        """Delete user by ID; True if a record was removed"""
        pass

    @abstractmethod
    def find_all(self) -> List[User]:
        """Find all users"""
        pass

    @abstractmethod
    def find_by_department(self, department: str) -> List[User]:
        """Find all users in a department"""
        pass

    @abstractmethod
    def count_by_department(self, department: str) -> int:
        """Count users in a department"""
        pass

    @abstractmethod
    def count(self) -> int:
        """Count all users"""
        pass

    @abstractmethod
    def search(self, criteria: "UserSearchCriteria", default_page_size: int) -> List[User]:
        """Find one page of users matching all set criteria"""
        pass

    @abstractmethod
    def department_stats(self) -> List[DepartmentStats]:
        """Total and active users per department, largest first"""
        pass

    @abstractmethod
    def collection_info(self) -> Tuple[str, bool]:
        """Name of the backing collection and whether it exists yet"""
        pass
