# Standard library imports
from typing import List, Optional, Tuple

# External package imports
from pymongo.collection import Collection

# Local application imports
from ...application.dto.user_dto import UserSearchCriteria
from ...domain.constants import UserFields
from ...domain.exceptions import UserNotFoundError
from ...domain.models.user import DepartmentStats, User
from ...domain.repositories.user_repository import UserRepository
from ...utils.db import get_user_collection
from .user_mapper import document_to_department_stats, document_to_user, parse_object_id, user_to_document
from .user_query_builder import build_user_query, department_filter, department_stats_pipeline


class MongoUserRepository(UserRepository):
    """MongoDB implementation of UserRepository"""

    def __init__(self, user_collection: Optional[Collection] = None) -> None:
        self.user_collection = user_collection if user_collection is not None else get_user_collection()

    def find_by_id(self, user_id: str) -> Optional[User]:
        """
        Find user by ID

        Args:
            user_id: User ID to search for

        Returns:
            User domain model if found, None otherwise

        Raises:
            InvalidIdError: if user_id is not a valid ObjectId string
        """
        object_id = parse_object_id(user_id)
        document = self.user_collection.find_one({UserFields.MONGO_ID: object_id})
        if document is None:
            return None
        return document_to_user(document)

    def exists_by_id(self, user_id: str) -> bool:
        object_id = parse_object_id(user_id)
        return self.user_collection.count_documents({UserFields.MONGO_ID: object_id}, limit=1) > 0

    def save(self, user: User) -> User:
        """
        Save user (create new or replace existing)

        Args:
            user: User domain model to save

        Returns:
            Saved User domain model with ID set

        Raises:
            UserNotFoundError: if user.id is set but no record has it
        """
        if not user:
            raise ValueError("User cannot be None")

        document = user_to_document(user)

        if user.id:
            # Update existing user: the stored record is replaced as a whole
            object_id = parse_object_id(user.id)
            result = self.user_collection.replace_one({UserFields.MONGO_ID: object_id}, document)
            if result.matched_count == 0:
                raise UserNotFoundError(user.id)
            return document_to_user(document, id_override=user.id)

        # Create new user
        result = self.user_collection.insert_one(document)
        return document_to_user(document, id_override=str(result.inserted_id))

    def delete_by_id(self, user_id: str) -> bool:
        object_id = parse_object_id(user_id)
        result = self.user_collection.delete_one({UserFields.MONGO_ID: object_id})
        return result.deleted_count > 0

    def find_all(self) -> List[User]:
        return [document_to_user(document) for document in self.user_collection.find({})]

    def find_by_department(self, department: str) -> List[User]:
        cursor = self.user_collection.find(department_filter(department))
        return [document_to_user(document) for document in cursor]

    def count_by_department(self, department: str) -> int:
        return self.user_collection.count_documents(department_filter(department))

    def count(self) -> int:
        return self.user_collection.count_documents({})

    def search(self, criteria: UserSearchCriteria, default_page_size: int) -> List[User]:
        query = build_user_query(criteria, default_page_size)
        cursor = self.user_collection.find(query.filter)
        if query.sort:
            cursor = cursor.sort(query.sort)
        cursor = cursor.skip(query.skip).limit(query.limit)
        return [document_to_user(document) for document in cursor]

    def department_stats(self) -> List[DepartmentStats]:
        cursor = self.user_collection.aggregate(department_stats_pipeline())
        return [document_to_department_stats(document) for document in cursor]

    def collection_info(self) -> Tuple[str, bool]:
        name = self.user_collection.name
        return name, name in self.user_collection.database.list_collection_names()
