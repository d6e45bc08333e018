# Standard library imports
import logging
from typing import List, Optional

# External package imports
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

# Local application imports
from ...application.dto.user_dto import UserCreateRequest, UserSearchCriteria, UserUpdateRequest
from ...application.services.user_service import UserService
from ...core.config import get_settings
from ...domain.constants import UserFields
from ...domain.exceptions import StoreError, UserNotFoundError
from ...domain.models.user import DepartmentStats, User
from ...utils.db import get_user_collection
from .store_errors import translate_write_error
from .user_mapper import (
    create_request_to_document,
    document_to_department_stats,
    document_to_user,
    parse_object_id,
    update_request_to_set,
)
from .user_query_builder import build_user_query, department_filter, department_stats_pipeline

logger = logging.getLogger(__name__)


class NativeUserService(UserService):
    """
    UserService written directly against a PyMongo collection.

    Documents, filters, $set updates and aggregation pipelines are built by
    hand; every read goes through user_mapper.document_to_user.
    """

    name = "native"

    def __init__(
        self,
        user_collection: Optional[Collection] = None,
        default_page_size: Optional[int] = None,
    ) -> None:
        self.user_collection = user_collection if user_collection is not None else get_user_collection()
        self.default_page_size = default_page_size or get_settings().default_page_size

    def test_connection(self) -> str:
        logger.debug("Testing MongoDB connection (native driver)")
        try:
            database = self.user_collection.database
            collections = database.list_collection_names()
            ping = database.command("ping")
            user_count = self.user_collection.count_documents({})
        except PyMongoError as e:
            logger.error(f"Error testing connection: {e}", exc_info=True)
            raise StoreError(f"Error testing connection: {e}") from e

        message = (
            f"Native driver connection OK | DB: {database.name} | "
            f"Collection: {self.user_collection.name} | "
            f"Exists: {self.user_collection.name in collections} | "
            f"Collections: {len(collections)} | Users: {user_count} | Ping: {ping.get('ok')}"
        )
        logger.info(message)
        return message

    def create_user(self, request: UserCreateRequest) -> User:
        logger.debug(f"Creating user with email: {request.email}")
        document = create_request_to_document(request)
        try:
            # insert_one adds _id to the document it is given; pass a copy
            result = self.user_collection.insert_one(dict(document))
        except PyMongoError as e:
            error = translate_write_error(e, request.email, "creating user")
            if isinstance(error, StoreError):
                logger.error(f"Error creating user: {e}", exc_info=True)
            else:
                logger.warning(f"Attempt to create user with duplicate email: {request.email}")
            raise error from e

        user = document_to_user(document, id_override=str(result.inserted_id))
        logger.info(f"User created with ID: {user.id}")
        return user

    def find_user_by_id(self, user_id: str) -> User:
        logger.debug(f"Finding user by ID: {user_id}")
        object_id = parse_object_id(user_id)
        try:
            document = self.user_collection.find_one({UserFields.MONGO_ID: object_id})
        except PyMongoError as e:
            logger.error(f"Error finding user: {e}", exc_info=True)
            raise StoreError(f"Error finding user: {e}") from e

        if document is None:
            logger.warning(f"User not found with ID: {user_id}")
            raise UserNotFoundError(user_id)
        return document_to_user(document)

    def update_user(self, user_id: str, request: UserUpdateRequest) -> User:
        logger.debug(f"Updating user with ID: {user_id}")
        object_id = parse_object_id(user_id)
        try:
            current = self.user_collection.find_one(
                {UserFields.MONGO_ID: object_id},
                {UserFields.UPDATED_AT: 1},
            )
        except PyMongoError as e:
            logger.error(f"Error updating user: {e}", exc_info=True)
            raise StoreError(f"Error updating user: {e}") from e

        if current is None:
            logger.warning(f"User not found for update with ID: {user_id}")
            raise UserNotFoundError(user_id)

        # updatedAt must end up strictly after the stored value
        changes = update_request_to_set(request, previous=current.get(UserFields.UPDATED_AT))
        try:
            result = self.user_collection.update_one(
                {UserFields.MONGO_ID: object_id},
                {"$set": changes},
            )
        except PyMongoError as e:
            error = translate_write_error(e, request.email, "updating user")
            if isinstance(error, StoreError):
                logger.error(f"Error updating user: {e}", exc_info=True)
            else:
                logger.warning(f"Attempt to update user {user_id} with duplicate email: {request.email}")
            raise error from e

        if result.matched_count == 0:
            logger.warning(f"User not found for update with ID: {user_id}")
            raise UserNotFoundError(user_id)

        user = self.find_user_by_id(user_id)
        logger.info(f"User updated: {user_id}")
        return user

    def delete_user(self, user_id: str) -> bool:
        logger.debug(f"Deleting user with ID: {user_id}")
        object_id = parse_object_id(user_id)
        try:
            result = self.user_collection.delete_one({UserFields.MONGO_ID: object_id})
        except PyMongoError as e:
            logger.error(f"Error deleting user: {e}", exc_info=True)
            raise StoreError(f"Error deleting user: {e}") from e

        if result.deleted_count > 0:
            logger.info(f"User deleted: {user_id}")
            return True
        logger.warning(f"User not found for deletion: {user_id}")
        return False

    def find_all(self) -> List[User]:
        logger.debug("Finding all users")
        return self._find({}, "finding all users")

    def find_users_by_department(self, department: str) -> List[User]:
        logger.debug(f"Finding users in department: {department}")
        return self._find(department_filter(department), "finding users by department")

    def search_users(self, criteria: UserSearchCriteria) -> List[User]:
        query = build_user_query(criteria, self.default_page_size)
        logger.debug(
            f"Searching users: filter={query.filter} skip={query.skip} "
            f"limit={query.limit} sort={query.sort}"
        )
        try:
            cursor = self.user_collection.find(query.filter)
            if query.sort:
                cursor = cursor.sort(query.sort)
            documents = list(cursor.skip(query.skip).limit(query.limit))
        except PyMongoError as e:
            logger.error(f"Error searching users: {e}", exc_info=True)
            raise StoreError(f"Error searching users: {e}") from e
        return [document_to_user(document) for document in documents]

    def count_by_department(self, department: str) -> int:
        logger.debug(f"Counting users in department: {department}")
        try:
            return self.user_collection.count_documents(department_filter(department))
        except PyMongoError as e:
            logger.error(f"Error counting users: {e}", exc_info=True)
            raise StoreError(f"Error counting users: {e}") from e

    def get_stats_by_department(self) -> List[DepartmentStats]:
        logger.debug("Computing department statistics with aggregation pipeline")
        try:
            documents = list(self.user_collection.aggregate(department_stats_pipeline()))
        except PyMongoError as e:
            logger.error(f"Error computing statistics: {e}", exc_info=True)
            raise StoreError(f"Error computing statistics: {e}") from e

        stats = [document_to_department_stats(document) for document in documents]
        logger.info(f"Department statistics computed: {len(stats)} departments")
        return stats

    def _find(self, query: dict, action: str) -> List[User]:
        try:
            documents = list(self.user_collection.find(query))
        except PyMongoError as e:
            logger.error(f"Error {action}: {e}", exc_info=True)
            raise StoreError(f"Error {action}: {e}") from e
        return [document_to_user(document) for document in documents]
