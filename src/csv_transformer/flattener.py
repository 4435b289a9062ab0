"""Flattening of records into rows and assembly of rows into records."""

import copy
import logging
from typing import Any, List, Optional, Sequence

from .fields import FieldPath, StructuralField
from .types import ErrorType, FieldInterface, ProcessingError, Record


class Flattener:
    """
    Applies a field list to records and rows.

    ``flatten`` reads one value per field from a record; ``unflatten``
    builds a fresh record by handing each value to its field's setter.
    Accessor failures abort the conversion with the offending field and
    record index attached.

    A container value written by a structural field already holds its whole
    subtree, so null values of deeper structural fields below it are not
    applied; otherwise an empty array or object would gain null members.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the flattener.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def flatten(self, record: Record, fields: Sequence[FieldInterface], record_index: int = 0) -> List[Any]:
        """
        Produce one value per field from a record.

        Args:
            record: Record to read from
            fields: Fields defining the columns
            record_index: Position of the record in the input, for error reporting

        Returns:
            Values aligned with fields

        Raises:
            ProcessingError: If a field getter fails
        """
        row = []
        for field in fields:
            try:
                row.append(field.get_value(record))
            except ProcessingError as e:
                e.context.setdefault("record_index", record_index)
                raise
            except Exception as e:
                raise self._access_error("read", field, record_index, e) from e
        return row

    def unflatten(self, values: Sequence[Any], fields: Sequence[FieldInterface], record_index: int = 0) -> Record:
        """
        Build a record from values aligned with fields.

        Args:
            values: One value per field; not modified
            fields: Fields defining where each value goes
            record_index: Position of the row in the input, for error reporting

        Returns:
            Newly built record

        Raises:
            ProcessingError: If a field setter fails
        """
        record: Record = {}
        filled: List[FieldPath] = []
        for field, value in zip(fields, values):
            if isinstance(field, StructuralField):
                if value is None and _is_below(field.path, filled):
                    continue
                if isinstance(value, (dict, list)):
                    value = copy.deepcopy(value)
                    filled.append(field.path)
            try:
                field.set_value(record, value)
            except ProcessingError as e:
                e.context.setdefault("record_index", record_index)
                raise
            except Exception as e:
                raise self._access_error("write", field, record_index, e) from e
        return record

    def _access_error(self, action: str, field: FieldInterface, record_index: int,
                      cause: Exception) -> ProcessingError:
        self.logger.error(f"Failed to {action} field '{field.name}' of record {record_index}: {cause}")
        return ProcessingError(
            f"Failed to {action} field '{field.name}' of record {record_index}: {cause}",
            ErrorType.FIELD_ACCESS,
            context={"field": field.name, "record_index": record_index}
        )


def _is_below(path: FieldPath, prefixes: List[FieldPath]) -> bool:
    return any(len(prefix) < len(path) and path[:len(prefix)] == prefix for prefix in prefixes)
