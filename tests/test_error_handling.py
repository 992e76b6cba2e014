"""
Tests for error handling.
Tests custom exceptions and error response formatting.
"""

import json
import pytest
from unittest.mock import Mock
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, OperationalError

from listings_api.services.error_handler import ErrorHandlerService
from listings_api.utils.exceptions import (
    AgentNotFoundError,
    FileSizeExceededError,
    InternalServerError,
    MissingFieldsError,
    PropertyNotFoundError,
    TooManyFilesError
)


class TestExceptions:
    """Test exception messages and status codes."""

    @pytest.mark.parametrize("fields, message", [
        (["title"], "title is required"),
        (["name", "mobile_number"], "name and mobile_number are required"),
        (["a", "b", "c"], "a, b and c are required"),
    ])
    def test_missing_fields_message(self, fields, message):
        error = MissingFieldsError(fields)

        assert error.status_code == 400
        assert error.detail == message

    def test_not_found_errors(self):
        assert PropertyNotFoundError(7).status_code == 404
        assert PropertyNotFoundError(7).detail == "Property not found with ID: 7"
        assert AgentNotFoundError(3).error_code == "NOT_FOUND"

    def test_upload_errors_are_bad_requests(self):
        assert FileSizeExceededError(30 * 1024 * 1024, 20 * 1024 * 1024).status_code == 400
        assert "20MB" in FileSizeExceededError(30 * 1024 * 1024, 20 * 1024 * 1024).detail
        assert TooManyFilesError(12, 10).status_code == 400


class TestErrorHandlerService:
    """Test error handler service functionality."""

    def test_format_error_response(self):
        """Test error response formatting."""
        response = ErrorHandlerService.format_error_response(
            error_code="TEST_ERROR",
            message="Test error message",
            details=[{"field": "test", "message": "Test field error"}],
            request_id="test123"
        )

        assert response["error"]["code"] == "TEST_ERROR"
        assert response["error"]["message"] == "Test error message"
        assert response["error"]["request_id"] == "test123"
        assert response["error"]["details"][0]["field"] == "test"
        assert response["error"]["timestamp"].endswith("Z")
        assert "detail" not in response["error"]

    def test_handle_internal_server_error_carries_detail(self):
        exception = InternalServerError("Error adding property. Please try again later.", error_detail="boom")
        response = ErrorHandlerService.handle_api_exception(exception)

        assert response.status_code == 500
        response_data = json.loads(response.body)
        assert response_data["error"]["code"] == "INTERNAL_SERVER_ERROR"
        assert response_data["error"]["detail"] == "boom"

    def test_handle_validation_error(self):
        mock_error = Mock()
        mock_error.errors.return_value = [
            {"loc": ("body", "price"), "msg": "Input should be a valid decimal", "type": "decimal_parsing", "input": "x"}
        ]

        response = ErrorHandlerService.handle_validation_error(mock_error)

        assert response.status_code == 422
        response_data = json.loads(response.body)
        assert response_data["error"]["details"][0]["field"] == "body -> price"

    def test_handle_database_error(self):
        exception = OperationalError("SELECT 1", {}, Exception("server closed the connection"))
        response = ErrorHandlerService.handle_database_error(exception)

        assert response.status_code == 500
        response_data = json.loads(response.body)
        assert response_data["error"]["code"] == "DATABASE_ERROR"
        assert "server closed the connection" in response_data["error"]["detail"]

    def test_handle_integrity_error(self):
        exception = IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))
        response = ErrorHandlerService.handle_database_error(exception)

        assert response.status_code == 409
        response_data = json.loads(response.body)
        assert response_data["error"]["message"] == "Constraint violation: Referenced record does not exist"

    def test_handle_http_exception(self):
        response = ErrorHandlerService.handle_http_exception(HTTPException(status_code=404, detail="Not Found"))

        assert response.status_code == 404
        assert json.loads(response.body)["error"]["code"] == "HTTP_404"
