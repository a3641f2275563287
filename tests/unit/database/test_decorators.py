"""Tests for database decorators."""
import pytest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from diarist.core.exceptions import ContentIntegrityError, DatabaseError
from diarist.core.logging_manager import DiaristLogger
from diarist.database.decorators import handle_db_errors, log_database_operation


class FakeStore:
    """Minimal object exposing the ``logger`` attribute decorators read."""

    def __init__(self, logger=None):
        self.logger = logger

    @log_database_operation("succeed")
    def succeed(self, value):
        return value * 2

    @log_database_operation("fail")
    def fail(self):
        raise ValueError("invalid value")

    @handle_db_errors
    def integrity(self):
        raise IntegrityError("statement", {}, Exception("duplicate"))

    @handle_db_errors
    def sqlalchemy(self):
        raise SQLAlchemyError("connection failed")

    @handle_db_errors
    def content(self):
        raise ContentIntegrityError("Empty content")


class TestLogDatabaseOperation:
    def test_success_logs_completion(self):
        """Completion is logged with success=True."""
        mock_logger = MagicMock(spec=DiaristLogger)
        assert FakeStore(mock_logger).succeed(21) == 42

        mock_logger.log_debug.assert_called_once()
        assert "Starting succeed" in mock_logger.log_debug.call_args[0][0]
        call_args = mock_logger.log_operation.call_args
        assert call_args[0][0] == "succeed_completed"
        assert call_args[0][1]["success"] is True

    def test_failure_logged_and_reraised(self):
        mock_logger = MagicMock(spec=DiaristLogger)
        with pytest.raises(ValueError):
            FakeStore(mock_logger).fail()
        mock_logger.log_error.assert_called_once()
        assert mock_logger.log_error.call_args[0][1]["operation"] == "fail"
        mock_logger.log_operation.assert_not_called()

    def test_none_logger(self):
        """Works without a logger (uses NullLogger)."""
        assert FakeStore(None).succeed(1) == 2


class TestHandleDbErrors:
    def test_integrity_error_becomes_database_error(self):
        with pytest.raises(DatabaseError, match="Data integrity violation"):
            FakeStore().integrity()

    def test_sqlalchemy_error_becomes_database_error(self):
        with pytest.raises(DatabaseError, match="Database operation failed") as exc_info:
            FakeStore().sqlalchemy()
        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)

    def test_other_errors_pass_through(self):
        with pytest.raises(ContentIntegrityError):
            FakeStore().content()
