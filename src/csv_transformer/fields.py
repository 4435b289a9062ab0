"""Field definitions and resolution of nested field paths."""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .constants import DEFAULT_ESCAPE_CHAR, DEFAULT_KEY_SEPARATOR, MAX_NESTING_DEPTH
from .types import ErrorType, FieldInterface, ProcessingError, Record

PathSegment = Union[str, int]
FieldPath = Tuple[PathSegment, ...]

_INDEX_PATTERN = re.compile(r"0|[1-9][0-9]*")
_MISSING = object()


def is_index(segment: PathSegment) -> bool:
    """Check if a path segment addresses an array element."""
    if isinstance(segment, bool):
        return False
    if isinstance(segment, int):
        return segment >= 0
    return bool(_INDEX_PATTERN.fullmatch(segment))


@dataclass
class StructuralField(FieldInterface):
    """
    Field addressing a location inside a nested record.

    The getter walks mappings by key and sequences by index and yields None
    for any missing step. The setter creates intermediate containers as
    needed: an index segment creates a list, any other segment a dict.
    """

    name: str
    path: FieldPath

    def get_value(self, record: Record) -> Any:
        current: Any = record
        for segment in self.path:
            current = _lookup(current, segment)
            if current is _MISSING:
                return None
        return current

    def set_value(self, record: Record, value: Any) -> None:
        if not self.path:
            raise ProcessingError(
                f"Field '{self.name}' has an empty path",
                ErrorType.FIELD_ACCESS,
                context={"field": self.name}
            )
        self._assign(record, self.path, value)

    def _assign(self, container: Any, path: FieldPath, value: Any) -> Any:
        """Place value at path below container, returning the (possibly replaced) container."""
        segment = path[0]

        if isinstance(container, list) and not is_index(segment):
            container = {str(index): item for index, item in enumerate(container)}

        if len(path) == 1:
            _store(container, segment, value)
            return container

        child = _lookup(container, segment)
        if child is _MISSING or (child is None and value is not None):
            child = [] if is_index(path[1]) else {}
        elif not isinstance(child, (dict, list)):
            if value is None:
                return container
            raise ProcessingError(
                f"Cannot set field '{self.name}': '{segment}' already holds a scalar value",
                ErrorType.FIELD_ACCESS,
                context={"field": self.name}
            )

        _store(container, segment, self._assign(child, path[1:], value))
        return container


@dataclass
class CustomField(FieldInterface):
    """
    Field backed by caller-supplied accessors.

    The column name is decoupled from the record shape: ``getter`` computes
    the cell value when writing text and ``setter`` applies a parsed value
    when reading it.
    """

    name: str
    getter: Optional[Callable[[Record], Any]] = None
    setter: Optional[Callable[[Record, Any], None]] = None

    def get_value(self, record: Record) -> Any:
        if self.getter is None:
            raise ProcessingError(
                f"Field '{self.name}' has no getter",
                ErrorType.FIELD_ACCESS,
                context={"field": self.name}
            )
        return self.getter(record)

    def set_value(self, record: Record, value: Any) -> None:
        if self.setter is None:
            raise ProcessingError(
                f"Field '{self.name}' has no setter",
                ErrorType.FIELD_ACCESS,
                context={"field": self.name}
            )
        self.setter(record, value)


def _lookup(container: Any, segment: PathSegment) -> Any:
    if isinstance(container, Mapping):
        if segment in container:
            return container[segment]
        if not isinstance(segment, str) and str(segment) in container:
            return container[str(segment)]
        return _MISSING
    if isinstance(container, (list, tuple)) and is_index(segment):
        index = int(segment)
        return container[index] if index < len(container) else _MISSING
    return _MISSING


def _store(container: Any, segment: PathSegment, value: Any) -> None:
    if isinstance(container, list):
        index = int(segment)
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
    else:
        container[segment if isinstance(segment, str) else str(segment)] = value


def escape_segment(segment: PathSegment, key_separator: str = DEFAULT_KEY_SEPARATOR,
                   escape_char: str = DEFAULT_ESCAPE_CHAR) -> str:
    """Escape the escape character and the key separator inside one segment."""
    text = str(segment)
    text = text.replace(escape_char, escape_char + escape_char)
    return text.replace(key_separator, escape_char + key_separator)


def stringify_path(path: Sequence[PathSegment], key_separator: str = DEFAULT_KEY_SEPARATOR,
                   escape_char: str = DEFAULT_ESCAPE_CHAR) -> str:
    """
    Join path segments into a field name.

    Args:
        path: Keys and indices from the record root to a value
        key_separator: Character placed between segments
        escape_char: Character protecting literal separators in segments

    Returns:
        Field name that splits back into the same segments
    """
    return key_separator.join(escape_segment(segment, key_separator, escape_char) for segment in path)


def parse_path(name: str, key_separator: str = DEFAULT_KEY_SEPARATOR,
               escape_char: str = DEFAULT_ESCAPE_CHAR) -> List[str]:
    """
    Split a field name into path segments.

    The escape character only escapes the key separator and itself; in
    front of any other character it is kept literally.

    Args:
        name: Field name, as read from a header line
        key_separator: Character placed between segments
        escape_char: Character protecting literal separators in segments

    Returns:
        List of unescaped segments
    """
    segments = []
    current = []
    index = 0

    while index < len(name):
        char = name[index]
        following = name[index + 1] if index + 1 < len(name) else None

        if char == escape_char and following in (escape_char, key_separator):
            current.append(following)
            index += 2
            continue

        if char == key_separator:
            segments.append("".join(current))
            current = []
        else:
            current.append(char)
        index += 1

    segments.append("".join(current))
    return segments


class FieldPathResolver:
    """
    Derives field lists from records or from column names.

    Field order is the order in which paths are first seen while scanning,
    so the same input always yields the same columns.
    """

    def __init__(self, key_separator: str = DEFAULT_KEY_SEPARATOR,
                 escape_char: str = DEFAULT_ESCAPE_CHAR,
                 max_depth: int = MAX_NESTING_DEPTH,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the resolver.

        Args:
            key_separator: Character placed between nested path segments
            escape_char: Character protecting literal separators in segments
            max_depth: Maximum nesting depth followed while scanning records
            logger: Optional logger instance
        """
        self.key_separator = key_separator
        self.escape_char = escape_char
        self.max_depth = max_depth
        self.logger = logger or logging.getLogger(__name__)

    def collect_paths(self, records: Iterable[Any], recurse: bool = True) -> List[FieldPath]:
        """
        Collect the union of value paths across records.

        Args:
            records: Records to scan
            recurse: Descend into nested objects and arrays; otherwise only
                top-level keys are collected

        Returns:
            Paths in first-seen order

        Raises:
            ProcessingError: If a record is not a mapping or nests too deeply
        """
        paths: Dict[FieldPath, None] = {}

        for record_index, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise ProcessingError(
                    f"Record {record_index} must be an object, got {type(record).__name__}",
                    ErrorType.STRUCTURE,
                    context={"record_index": record_index}
                )
            for key, value in record.items():
                if recurse:
                    self._collect(value, (key,), paths, record_index)
                else:
                    paths.setdefault((key,), None)

        return list(paths)

    def _collect(self, value: Any, prefix: FieldPath, paths: Dict[FieldPath, None],
                 record_index: int) -> None:
        if len(prefix) > self.max_depth:
            raise ProcessingError(
                f"Record {record_index} nests deeper than {self.max_depth} levels",
                ErrorType.DEPTH,
                context={"record_index": record_index, "depth": len(prefix)}
            )

        # Empty containers are leaves and end up as "{}" or "[]"
        if isinstance(value, Mapping) and value:
            for key, child in value.items():
                self._collect(child, prefix + (key,), paths, record_index)
        elif isinstance(value, (list, tuple)) and value:
            for index, child in enumerate(value):
                self._collect(child, prefix + (index,), paths, record_index)
        else:
            paths.setdefault(prefix, None)

    def fields_from_records(self, records: Iterable[Any], nested: bool = False) -> List[FieldInterface]:
        """
        Derive fields from records.

        Args:
            records: Records to scan
            nested: Produce one field per nested leaf instead of per top-level key

        Returns:
            List of structural fields
        """
        paths = self.collect_paths(records, recurse=nested)
        if nested:
            fields = [
                StructuralField(name=stringify_path(path, self.key_separator, self.escape_char), path=path)
                for path in paths
            ]
        else:
            fields = [StructuralField(name=str(path[0]), path=path) for path in paths]

        self.logger.debug(f"Derived {len(fields)} fields from records: {[f.name for f in fields]}")
        return fields

    def fields_from_names(self, names: Sequence[str], nested: bool = False) -> List[FieldInterface]:
        """
        Derive fields from column names.

        Args:
            names: Column names, in column order
            nested: Split names on the key separator into nested paths

        Returns:
            List of structural fields
        """
        if nested:
            fields = [
                StructuralField(name=name, path=tuple(parse_path(name, self.key_separator, self.escape_char)))
                for name in names
            ]
        else:
            fields = [StructuralField(name=name, path=(name,)) for name in names]

        self.logger.debug(f"Derived {len(fields)} fields from column names")
        return fields


def get_fields_from_json(records: Iterable[Any]) -> List[FieldInterface]:
    """Field discovery hook: one field per top-level key."""
    return FieldPathResolver().fields_from_records(records)


def get_nested_fields_from_json(records: Iterable[Any], key_separator: str = DEFAULT_KEY_SEPARATOR,
                                escape_char: str = DEFAULT_ESCAPE_CHAR) -> List[FieldInterface]:
    """Field discovery hook: one field per nested leaf, named by its path."""
    return FieldPathResolver(key_separator, escape_char).fields_from_records(records, nested=True)


def get_fields_from_csv(names: Sequence[str]) -> List[FieldInterface]:
    """Field discovery hook: one top-level key per column."""
    return FieldPathResolver().fields_from_names(names)


def get_nested_fields_from_csv(names: Sequence[str], key_separator: str = DEFAULT_KEY_SEPARATOR,
                               escape_char: str = DEFAULT_ESCAPE_CHAR) -> List[FieldInterface]:
    """Field discovery hook: column names are split into nested paths."""
    return FieldPathResolver(key_separator, escape_char).fields_from_names(names, nested=True)
