"""Error handling implementation for the CSV Transformer."""

import logging
from typing import Any, Optional

from .types import ErrorResponse, ErrorType, ProcessingError, ValidationError, ValidationResult
from .utils.validation import ValidationUtils


class ErrorHandler:
    """
    Error handler for CSV Transformer operations.

    Validates record input before conversion and turns conversion errors
    into suggestions the caller can act on.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_input(self, records: Any) -> ValidationResult:
        """
        Validate records before converting them to text.

        Args:
            records: Records to validate

        Returns:
            ValidationResult with validation details
        """
        try:
            return ValidationUtils.validate_records(records)
        except RecursionError as e:
            self.logger.error(f"Unexpected error during input validation: {e}")
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    type=ErrorType.DEPTH,
                    message=f"Validation failed with unexpected error: {str(e)}",
                    location="input"
                )],
                warnings=[]
            )

    def raise_for_validation(self, result: ValidationResult) -> None:
        """
        Raise the first validation error, logging the warnings.

        Raises:
            ProcessingError: If the validation result is not valid
        """
        for warning in result.warnings:
            self.logger.warning(warning)

        if not result.is_valid:
            first = result.errors[0]
            messages = "; ".join(
                f"{error.location}: {error.message}" if error.location else error.message
                for error in result.errors
            )
            raise ProcessingError(
                f"Invalid input: {messages}",
                first.type,
                context={"errors": [error.message for error in result.errors]}
            )

    def handle_processing_error(self, error: ProcessingError) -> ErrorResponse:
        """
        Handle processing errors and provide recovery suggestions.

        Args:
            error: ProcessingError to handle

        Returns:
            ErrorResponse with recovery information
        """
        self.logger.error(f"Processing error: {error.error_type.value} - {error}")

        if error.error_type == ErrorType.MALFORMED_ROW:
            return ErrorResponse(
                can_recover=True,
                suggested_action="Check the row width against the header and the quoting of the "
                                 "reported line, or parse in lenient mode to pad or truncate rows.",
                context=error.context
            )
        elif error.error_type == ErrorType.UNTERMINATED_QUOTE:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Close the quoted field starting at the reported position. "
                                 "Quotes inside a quoted field must be doubled.",
                context=error.context
            )
        elif error.error_type == ErrorType.FIELD_ACCESS:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Fix the accessor of the reported field, or make sure the record "
                                 "shape matches the field paths.",
                context=error.context
            )
        elif error.error_type == ErrorType.DEPTH:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Reduce the nesting depth of the records or supply explicit fields.",
                context=error.context
            )
        elif error.error_type == ErrorType.CONFIGURATION:
            return ErrorResponse(
                can_recover=True,
                suggested_action="Check the fields option against the column names in the header.",
                context=error.context
            )
        else:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Input must be a list of objects without circular references.",
                context=error.context
            )
