"""
Unit tests for mongo_users.infrastructure.db.store_errors
"""
from pymongo.errors import DuplicateKeyError, OperationFailure, ServerSelectionTimeoutError

from mongo_users.domain.exceptions import DuplicateEmailError, StoreError
from mongo_users.infrastructure.db.store_errors import is_duplicate_key_error, translate_write_error


class TestIsDuplicateKeyError:

    def test_duplicate_key_error_type(self):
        assert is_duplicate_key_error(DuplicateKeyError("dup", code=11000))

    def test_error_code_without_specific_type(self):
        assert is_duplicate_key_error(OperationFailure("write failed", code=11000))

    def test_message_fallback(self):
        assert is_duplicate_key_error(RuntimeError("E11000 duplicate key error collection: db.users"))

    def test_other_errors(self):
        assert not is_duplicate_key_error(OperationFailure("unauthorized", code=13))
        assert not is_duplicate_key_error(ServerSelectionTimeoutError("no servers"))


class TestTranslateWriteError:

    def test_duplicate_becomes_duplicate_email(self):
        error = translate_write_error(DuplicateKeyError("dup", code=11000), "x@test.com", "creating user")
        assert isinstance(error, DuplicateEmailError)
        assert error.email == "x@test.com"
        assert "x@test.com" in str(error)

    def test_anything_else_becomes_store_error(self):
        error = translate_write_error(OperationFailure("disk full", code=14031), "x@test.com", "creating user")
        assert isinstance(error, StoreError)
        assert "creating user" in str(error)
        assert "disk full" in str(error)
