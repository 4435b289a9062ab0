"""Tests for error handler."""

import pytest
from csv_transformer.error_handler import ErrorHandler
from csv_transformer.types import ErrorType, ProcessingError, ValidationError, ValidationResult


class TestErrorHandler:
    """Tests for ErrorHandler class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.error_handler = ErrorHandler()

    def test_validate_input_valid_records(self, users):
        """Test validation of valid records."""
        result = self.error_handler.validate_input(users)

        assert result.is_valid
        assert len(result.errors) == 0

    def test_validate_input_not_a_list(self):
        """Test validation of a non-list root."""
        result = self.error_handler.validate_input({"id": 1})

        assert not result.is_valid
        assert result.errors[0].type == ErrorType.STRUCTURE

    def test_raise_for_validation(self):
        """Test that invalid results raise the first error type."""
        result = ValidationResult(
            is_valid=False,
            errors=[ValidationError(type=ErrorType.DEPTH, message="too deep", location="record 0")],
            warnings=[]
        )

        with pytest.raises(ProcessingError, match="record 0: too deep") as exc_info:
            self.error_handler.raise_for_validation(result)

        assert exc_info.value.error_type == ErrorType.DEPTH

    def test_raise_for_validation_logs_warnings(self, caplog):
        """Test that warnings are logged, not raised."""
        result = ValidationResult(is_valid=True, errors=[], warnings=["differing keys"])

        self.error_handler.raise_for_validation(result)

        assert "differing keys" in caplog.text

    def test_handle_malformed_row(self):
        """Test handling of width mismatches."""
        error = ProcessingError("Row at line 3 has 1 columns", ErrorType.MALFORMED_ROW, context={"line": 3})

        response = self.error_handler.handle_processing_error(error)

        assert response.can_recover
        assert "lenient" in response.suggested_action
        assert response.context == {"line": 3}

    def test_handle_unterminated_quote(self):
        """Test handling of unterminated quotes."""
        error = ProcessingError("Unterminated quoted field", ErrorType.UNTERMINATED_QUOTE)

        response = self.error_handler.handle_processing_error(error)

        assert not response.can_recover
        assert "doubled" in response.suggested_action

    def test_handle_field_access(self):
        """Test handling of accessor failures."""
        error = ProcessingError("Failed to read field", ErrorType.FIELD_ACCESS, context={"field": "id"})

        response = self.error_handler.handle_processing_error(error)

        assert not response.can_recover
        assert "field" in response.suggested_action

    def test_handle_configuration(self):
        """Test handling of configuration errors."""
        error = ProcessingError("Column 'x' not found", ErrorType.CONFIGURATION)

        response = self.error_handler.handle_processing_error(error)

        assert response.can_recover
        assert "header" in response.suggested_action

    def test_handle_structure(self):
        """Test handling of invalid input structure."""
        error = ProcessingError("Record must be an object", ErrorType.STRUCTURE)

        response = self.error_handler.handle_processing_error(error)

        assert not response.can_recover
        assert "list of objects" in response.suggested_action
