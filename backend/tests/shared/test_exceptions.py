"""Tests for shared/exceptions.py."""

import pytest

from shared.exceptions import (
    TallyError,
    ValidationError,
    ExternalServiceError,
)


class TestTallyError:
    def test_tally_error_message(self):
        """TallyError should store message."""
        error = TallyError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_tally_error_default_code(self):
        """TallyError should default code to class name."""
        assert TallyError("Test error").code == "TallyError"

    def test_tally_error_custom_code(self):
        assert TallyError("Test error", code="CUSTOM_ERROR").code == "CUSTOM_ERROR"

    def test_tally_error_default_details(self):
        """TallyError should default details to empty dict."""
        assert TallyError("Test error").details == {}

    def test_tally_error_default_status(self):
        assert TallyError("Test error").status_code == 500

    def test_tally_error_to_dict(self):
        """TallyError should convert to dict."""
        error = TallyError("Test error", code="TEST_ERROR", details={"key": "value"})

        assert error.to_dict() == {
            "error": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
        }

    def test_tally_error_is_exception(self):
        with pytest.raises(TallyError):
            raise TallyError("Test")


class TestValidationError:
    def test_validation_error_inherits(self):
        error = ValidationError("Bad input")
        assert isinstance(error, TallyError)
        assert error.status_code == 400


class TestExternalServiceError:
    def test_external_service_error(self):
        """ExternalServiceError should record the service name in details."""
        error = ExternalServiceError("API failed", service="openai", details={"status": 503})

        assert isinstance(error, TallyError)
        assert error.status_code == 502
        assert error.service == "openai"
        assert error.details == {"status": 503, "service": "openai"}
