"""Validation utilities for record input."""

from collections.abc import Mapping
from typing import Any, List, Optional, Set, Tuple

from ..constants import MAX_NESTING_DEPTH
from ..types import ErrorType, ValidationError, ValidationResult


class ValidationUtils:
    """Utility class for validating records before conversion."""

    @staticmethod
    def validate_records(records: Any, max_depth: int = MAX_NESTING_DEPTH) -> ValidationResult:
        """
        Validate that input is a list of tree-shaped records.

        Args:
            records: Input to validate
            max_depth: Maximum allowed nesting depth

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if not isinstance(records, (list, tuple)):
            errors.append(ValidationError(
                type=ErrorType.STRUCTURE,
                message=f"Input must be a list of records, got {type(records).__name__}",
                location="root"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        for index, record in enumerate(records):
            location = f"record {index}"

            if not isinstance(record, Mapping):
                errors.append(ValidationError(
                    type=ErrorType.STRUCTURE,
                    message=f"Record must be an object, got {type(record).__name__}",
                    location=location
                ))
                continue

            if ValidationUtils._has_circular_references(record):
                errors.append(ValidationError(
                    type=ErrorType.STRUCTURE,
                    message="Circular references detected in record",
                    location=location
                ))
            elif ValidationUtils._exceeds_depth(record, max_depth):
                errors.append(ValidationError(
                    type=ErrorType.DEPTH,
                    message=f"Record nests deeper than {max_depth} levels",
                    location=location
                ))

        if not errors:
            key_sets = ValidationUtils._distinct_key_sets(records)
            if len(key_sets) > 1:
                warnings.append(f"Records have {len(key_sets)} different key sets; "
                                "missing values are written as empty cells.")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @staticmethod
    def _has_circular_references(data: Any, seen: Optional[Set[int]] = None) -> bool:
        """Check for circular references in data structure."""
        if seen is None:
            seen = set()

        if isinstance(data, (Mapping, list, tuple)):
            obj_id = id(data)
            if obj_id in seen:
                return True
            seen.add(obj_id)

            children = data.values() if isinstance(data, Mapping) else data
            try:
                for child in children:
                    if ValidationUtils._has_circular_references(child, seen):
                        return True
            finally:
                seen.remove(obj_id)

        return False

    @staticmethod
    def _exceeds_depth(data: Any, limit: int, current_depth: int = 0) -> bool:
        """Check nesting depth, stopping as soon as the limit is passed."""
        if current_depth > limit:
            return True
        if isinstance(data, Mapping):
            children = data.values()
        elif isinstance(data, (list, tuple)):
            children = data
        else:
            return False
        return any(ValidationUtils._exceeds_depth(child, limit, current_depth + 1) for child in children)

    @staticmethod
    def _distinct_key_sets(records: List[Mapping]) -> List[Tuple[str, ...]]:
        key_sets = {}
        for record in records:
            key_sets.setdefault(tuple(sorted(str(key) for key in record)), None)
        return list(key_sets)
