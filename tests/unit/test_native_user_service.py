"""
Unit tests for NativeUserService against a mocked PyMongo collection.
Store-backed behaviour is covered in tests/integration.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, OperationFailure, ServerSelectionTimeoutError

from mongo_users.application.dto.user_dto import UserCreateRequest, UserSearchCriteria, UserUpdateRequest
from mongo_users.domain.exceptions import (
    DuplicateEmailError,
    InvalidIdError,
    MappingError,
    StoreError,
    UserNotFoundError,
)
from mongo_users.infrastructure.db.native_user_service import NativeUserService

USER_ID = "507f1f77bcf86cd799439011"
STAMP = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_collection():
    """Mock PyMongo collection."""
    collection = MagicMock()
    collection.name = "users"
    return collection


@pytest.fixture
def service(mock_collection):
    return NativeUserService(user_collection=mock_collection, default_page_size=10)


def _document(**overrides):
    document = {
        "_id": ObjectId(USER_ID),
        "name": "Alice",
        "email": "alice@test.com",
        "department": "IT",
        "role": "Developer",
        "active": True,
        "createdAt": STAMP,
        "updatedAt": STAMP,
    }
    document.update(overrides)
    return document


class TestCreateUser:

    def test_inserts_document_and_returns_user(self, service, mock_collection):
        mock_collection.insert_one.return_value = MagicMock(inserted_id=ObjectId(USER_ID))
        request = UserCreateRequest(name="Alice", email="alice@test.com", department="IT", role="Developer")

        user = service.create_user(request)

        inserted = mock_collection.insert_one.call_args.args[0]
        assert "_id" not in inserted
        assert inserted["active"] is True
        assert inserted["createdAt"] == inserted["updatedAt"]
        assert user.id == USER_ID
        assert user.active is True
        assert user.created_at == user.updated_at

    def test_duplicate_key_raises_duplicate_email(self, service, mock_collection):
        mock_collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key", code=11000)
        request = UserCreateRequest(name="Alice", email="alice@test.com", department="IT", role="Developer")

        with pytest.raises(DuplicateEmailError) as exc_info:
            service.create_user(request)
        assert exc_info.value.email == "alice@test.com"

    def test_other_store_error_is_wrapped(self, service, mock_collection):
        original = OperationFailure("not authorized", code=13)
        mock_collection.insert_one.side_effect = original
        request = UserCreateRequest(name="Alice", email="alice@test.com", department="IT", role="Developer")

        with pytest.raises(StoreError) as exc_info:
            service.create_user(request)
        assert exc_info.value.__cause__ is original


class TestFindUserById:

    def test_found(self, service, mock_collection):
        mock_collection.find_one.return_value = _document()
        user = service.find_user_by_id(USER_ID)
        assert user.id == USER_ID
        mock_collection.find_one.assert_called_once_with({"_id": ObjectId(USER_ID)})

    def test_not_found(self, service, mock_collection):
        mock_collection.find_one.return_value = None
        with pytest.raises(UserNotFoundError):
            service.find_user_by_id(USER_ID)

    def test_invalid_id_never_reaches_store(self, service, mock_collection):
        with pytest.raises(InvalidIdError):
            service.find_user_by_id("not-an-id")
        mock_collection.find_one.assert_not_called()

    def test_incomplete_document_raises_mapping_error(self, service, mock_collection):
        document = _document()
        del document["email"]
        mock_collection.find_one.return_value = document
        with pytest.raises(MappingError):
            service.find_user_by_id(USER_ID)

    def test_connection_failure_wrapped(self, service, mock_collection):
        mock_collection.find_one.side_effect = ServerSelectionTimeoutError("no servers")
        with pytest.raises(StoreError):
            service.find_user_by_id(USER_ID)


class TestUpdateUser:

    def test_sets_only_present_fields(self, service, mock_collection):
        mock_collection.update_one.return_value = MagicMock(matched_count=1)
        mock_collection.find_one.return_value = _document(name="Alicia")

        user = service.update_user(USER_ID, UserUpdateRequest(name="Alicia"))

        query, update = mock_collection.update_one.call_args.args
        assert query == {"_id": ObjectId(USER_ID)}
        assert set(update["$set"]) == {"name", "updatedAt"}
        assert update["$set"]["name"] == "Alicia"
        assert user.name == "Alicia"

    def test_updated_at_moves_past_stored_value_when_clock_has_not(self, service, mock_collection):
        mock_collection.update_one.return_value = MagicMock(matched_count=1)
        mock_collection.find_one.return_value = _document()

        with patch("mongo_users.infrastructure.db.user_mapper.bson_now", return_value=STAMP):
            service.update_user(USER_ID, UserUpdateRequest(role="Lead"))

        _, update = mock_collection.update_one.call_args.args
        assert update["$set"]["updatedAt"] == STAMP + timedelta(milliseconds=1)

    def test_updated_at_uses_clock_when_it_is_ahead(self, service, mock_collection):
        mock_collection.update_one.return_value = MagicMock(matched_count=1)
        mock_collection.find_one.return_value = _document()
        later = STAMP + timedelta(minutes=5)

        with patch("mongo_users.infrastructure.db.user_mapper.bson_now", return_value=later):
            service.update_user(USER_ID, UserUpdateRequest(role="Lead"))

        _, update = mock_collection.update_one.call_args.args
        assert update["$set"]["updatedAt"] == later

    def test_missing_user_is_never_written(self, service, mock_collection):
        mock_collection.find_one.return_value = None
        with pytest.raises(UserNotFoundError):
            service.update_user(USER_ID, UserUpdateRequest(name="X"))
        mock_collection.update_one.assert_not_called()

    def test_not_matched_raises_not_found(self, service, mock_collection):
        mock_collection.find_one.return_value = _document()
        mock_collection.update_one.return_value = MagicMock(matched_count=0)
        with pytest.raises(UserNotFoundError):
            service.update_user(USER_ID, UserUpdateRequest(name="X"))

    def test_duplicate_email(self, service, mock_collection):
        mock_collection.find_one.return_value = _document()
        mock_collection.update_one.side_effect = DuplicateKeyError("E11000 duplicate key", code=11000)
        with pytest.raises(DuplicateEmailError):
            service.update_user(USER_ID, UserUpdateRequest(email="taken@test.com"))

    def test_read_failure_wrapped(self, service, mock_collection):
        mock_collection.find_one.side_effect = ServerSelectionTimeoutError("down")
        with pytest.raises(StoreError, match="updating user"):
            service.update_user(USER_ID, UserUpdateRequest(name="X"))

    def test_invalid_id(self, service, mock_collection):
        with pytest.raises(InvalidIdError):
            service.update_user("123", UserUpdateRequest(name="X"))
        mock_collection.update_one.assert_not_called()


class TestDeleteUser:

    def test_deleted(self, service, mock_collection):
        mock_collection.delete_one.return_value = MagicMock(deleted_count=1)
        assert service.delete_user(USER_ID) is True

    def test_nothing_deleted(self, service, mock_collection):
        mock_collection.delete_one.return_value = MagicMock(deleted_count=0)
        assert service.delete_user(USER_ID) is False

    def test_invalid_id(self, service, mock_collection):
        with pytest.raises(InvalidIdError):
            service.delete_user("zzz")


class TestQueries:

    def test_find_all_maps_every_document(self, service, mock_collection):
        mock_collection.find.return_value = [_document(), _document(_id=ObjectId(), email="b@test.com")]
        users = service.find_all()
        assert len(users) == 2
        mock_collection.find.assert_called_once_with({})

    def test_find_by_department_uses_exact_match(self, service, mock_collection):
        mock_collection.find.return_value = []
        assert service.find_users_by_department("IT") == []
        mock_collection.find.assert_called_once_with({"department": "IT"})

    def test_count_by_department(self, service, mock_collection):
        mock_collection.count_documents.return_value = 0
        assert service.count_by_department("Legal") == 0
        mock_collection.count_documents.assert_called_once_with({"department": "Legal"})

    def test_search_applies_sort_skip_limit(self, service, mock_collection):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.skip.return_value = cursor
        cursor.limit.return_value = iter([_document()])
        mock_collection.find.return_value = cursor

        criteria = UserSearchCriteria(department="IT", page=2, size=5, sort_by="name", sort_direction="desc")
        users = service.search_users(criteria)

        assert len(users) == 1
        mock_collection.find.assert_called_once_with({"department": "IT"})
        cursor.sort.assert_called_once_with([("name", -1)])
        cursor.skip.assert_called_once_with(10)
        cursor.limit.assert_called_once_with(5)

    def test_search_without_sort_does_not_sort(self, service, mock_collection):
        cursor = MagicMock()
        cursor.skip.return_value = cursor
        cursor.limit.return_value = iter([])
        mock_collection.find.return_value = cursor

        service.search_users(UserSearchCriteria())

        cursor.sort.assert_not_called()
        cursor.limit.assert_called_once_with(10)

    def test_stats(self, service, mock_collection):
        mock_collection.aggregate.return_value = iter(
            [{"_id": "IT", "totalUsers": 3, "activeUsers": 2}, {"_id": "HR", "totalUsers": 1, "activeUsers": 1}]
        )
        stats = service.get_stats_by_department()
        assert [(s.department, s.total_users, s.active_users) for s in stats] == [("IT", 3, 2), ("HR", 1, 1)]

    def test_stats_failure_wrapped(self, service, mock_collection):
        mock_collection.aggregate.side_effect = OperationFailure("boom")
        with pytest.raises(StoreError):
            service.get_stats_by_department()


class TestTestConnection:

    def test_reports_collection_and_count(self, service, mock_collection):
        database = mock_collection.database
        database.name = "test_db"
        database.list_collection_names.return_value = ["users", "other"]
        database.command.return_value = {"ok": 1.0}
        mock_collection.count_documents.return_value = 4

        message = service.test_connection()

        assert "test_db" in message
        assert "Exists: True" in message
        assert "Users: 4" in message
        database.command.assert_called_once_with("ping")

    def test_failure_wrapped(self, service, mock_collection):
        mock_collection.database.list_collection_names.side_effect = ServerSelectionTimeoutError("down")
        with pytest.raises(StoreError, match="Error testing connection"):
            service.test_connection()
