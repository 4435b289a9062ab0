"""Core type definitions for the CSV Transformer."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Union

from .constants import (
    DEFAULT_DELIMITER,
    DEFAULT_EOL,
    DEFAULT_ESCAPE_CHAR,
    DEFAULT_KEY_SEPARATOR,
    LINE_BREAKS,
    QUOTE_CHAR,
)


Record = Dict[str, Any]


class ScalarKind(Enum):
    """Enumeration of the value kinds a record can hold."""
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    CONTAINER = "container"


class ErrorType(Enum):
    """Enumeration of error types."""
    MALFORMED_ROW = "malformed_row"
    FIELD_ACCESS = "field_access"
    UNTERMINATED_QUOTE = "unterminated_quote"
    DEPTH = "depth"
    CONFIGURATION = "configuration"
    STRUCTURE = "structure"


class ProcessingError(Exception):
    """Custom exception for conversion errors."""

    def __init__(self, message: str, error_type: ErrorType, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_type = error_type
        self.context = context or {}


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str]


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str
    context: Optional[Dict[str, Any]] = None


@dataclass
class ParsedRow:
    """One decoded line of delimited text."""
    values: List[str]
    quoted: List[bool]
    line_number: int

    def is_blank(self) -> bool:
        """Check if the row came from an empty line."""
        return len(self.values) == 1 and self.values[0] == "" and not self.quoted[0]


# Abstract base classes for interfaces

class FieldInterface(ABC):
    """A named column paired with a location or accessor inside a record."""

    name: str

    @abstractmethod
    def get_value(self, record: Record) -> Any:
        """Resolve the value of this field for a record."""
        pass

    @abstractmethod
    def set_value(self, record: Record, value: Any) -> None:
        """Apply a value for this field to a record."""
        pass


FieldsOption = Union[
    Sequence[FieldInterface],
    Callable[[List[Any]], List[FieldInterface]],
    None,
]


def _validate_separators(delimiter: str, key_separator: str, escape_char: str) -> None:
    if len(delimiter) != 1:
        raise ValueError(f"delimiter must be a single character, got {delimiter!r}")
    if delimiter == QUOTE_CHAR or delimiter in LINE_BREAKS:
        raise ValueError(f"delimiter cannot be a quote or line break, got {delimiter!r}")
    if len(key_separator) != 1:
        raise ValueError(f"key_separator must be a single character, got {key_separator!r}")
    if len(escape_char) != 1:
        raise ValueError(f"escape_char must be a single character, got {escape_char!r}")
    if escape_char == key_separator:
        raise ValueError("key_separator and escape_char must differ")


@dataclass
class CsvOptions:
    """
    Options for converting records into delimited text.

    ``fields`` is either an explicit list of fields or a callable that
    receives the records and returns the fields. When it is not given,
    fields are derived from the records: from their top-level keys, or
    from every nested path when ``nested`` is set.
    """
    header: bool = True
    delimiter: str = DEFAULT_DELIMITER
    eol: str = DEFAULT_EOL
    fields: FieldsOption = None
    nested: bool = False
    key_separator: str = DEFAULT_KEY_SEPARATOR
    escape_char: str = DEFAULT_ESCAPE_CHAR

    def __post_init__(self):
        """Validate options after initialization."""
        _validate_separators(self.delimiter, self.key_separator, self.escape_char)
        if not self.eol:
            raise ValueError("eol cannot be empty")


@dataclass
class JsonOptions:
    """
    Options for converting delimited text into records.

    ``fields`` is either an explicit list of fields or a callable that
    receives the column names and returns the fields. ``parse_values``
    switches typed inference of unquoted cells on or off; ``parse_json``
    controls whether JSON object and array text becomes a container or
    stays a string; ``strict``
    rejects rows whose width differs from the header instead of padding
    or truncating them.
    """
    header: bool = True
    delimiter: str = DEFAULT_DELIMITER
    fields: FieldsOption = None
    nested: bool = False
    key_separator: str = DEFAULT_KEY_SEPARATOR
    escape_char: str = DEFAULT_ESCAPE_CHAR
    parse_values: bool = True
    parse_json: bool = True
    strict: bool = True

    def __post_init__(self):
        """Validate options after initialization."""
        _validate_separators(self.delimiter, self.key_separator, self.escape_char)


class ConverterInterface(ABC):
    """Abstract interface for the record/text converter."""

    @abstractmethod
    def iter_csv_lines(self, records: Iterable[Record], options: Optional[CsvOptions] = None) -> Iterator[str]:
        """Lazily convert records into lines of delimited text."""
        pass

    @abstractmethod
    def iter_records(self, source: Union[str, Iterable[str]],
                     options: Optional[JsonOptions] = None) -> Iterator[Record]:
        """Lazily convert delimited text into records."""
        pass
