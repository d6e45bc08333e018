"""
Shared pytest fixtures for mongo_users tests.
"""
import os
import uuid
from unittest.mock import MagicMock, patch

import mongomock
import pytest

from mongo_users.application.dto.user_dto import UserCreateRequest
from mongo_users.application.services.repository_user_service import RepositoryUserService
from mongo_users.infrastructure.db.mongo_user_repository import MongoUserRepository
from mongo_users.infrastructure.db.native_user_service import NativeUserService
from mongo_users.utils.db import ensure_user_indexes


@pytest.fixture
def mock_env():
    """Fixture to set common test environment variables."""
    env_vars = {
        "MONGO_URI": "mongodb://localhost:27017",
        "MONGO_DB_NAME": "test_users_db",
        "MONGO_USERS_COLLECTION": "users",
        "USER_SERVICE_IMPL": "native",
        "DEFAULT_PAGE_SIZE": "10",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def mock_settings():
    """Fixture to mock get_settings for tests. Patches all modules that use it."""
    mock = MagicMock()
    mock.mongo_uri = "mongodb://localhost:27017"
    mock.mongo_database_name = "test_db"
    mock.users_collection_name = "users"
    mock.mongo_timeout_ms = 1000
    mock.user_service_impl = "native"
    mock.default_page_size = 10
    mock.log_level = "INFO"

    # Patch at source and at use sites (modules import get_settings at load time)
    with patch("mongo_users.core.config.get_settings", return_value=mock), patch(
        "mongo_users.utils.db.get_settings", return_value=mock
    ), patch(
        "mongo_users.infrastructure.db.native_user_service.get_settings", return_value=mock
    ), patch(
        "mongo_users.di.providers.user_service_provider.get_settings", return_value=mock
    ):
        yield mock


@pytest.fixture
def mongo_collection():
    """In-memory users collection with the same indexes as production."""
    client = mongomock.MongoClient()
    collection = client["test_db"]["users"]
    ensure_user_indexes(collection)
    yield collection
    client.close()


@pytest.fixture(params=["native", "repository"])
def user_service(request, mongo_collection):
    """Each store-backed test runs once per UserService implementation."""
    if request.param == "native":
        return NativeUserService(user_collection=mongo_collection, default_page_size=10)
    return RepositoryUserService(MongoUserRepository(user_collection=mongo_collection), default_page_size=10)


@pytest.fixture
def unique_email():
    """Factory for emails that never collide between tests."""
    return lambda: f"test-{uuid.uuid4().hex[:8]}@test.com"


@pytest.fixture
def make_create_request(unique_email):
    """Factory for valid UserCreateRequest values."""

    def _make(name="Test User", department="IT", role="Developer", email=None) -> UserCreateRequest:
        return UserCreateRequest(name=name, email=email or unique_email(), department=department, role=role)

    return _make
