"""Main CSV Transformer implementation."""

import dataclasses
import json
import logging
from collections.abc import Mapping
from contextlib import nullcontext
from itertools import chain, islice
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .error_handler import ErrorHandler
from .fields import FieldPathResolver
from .flattener import Flattener
from .profiler import PerformanceProfiler
from .row_codec import RowCodec, positional_names
from .scalar_codec import ScalarCodec
from .types import (
    ConverterInterface,
    CsvOptions,
    ErrorType,
    FieldInterface,
    JsonOptions,
    ParsedRow,
    ProcessingError,
    Record,
)


class CSVTransformer(ConverterInterface):
    """
    Main implementation of the converter interface.

    Provides bidirectional conversion between lists of nested records and
    delimited text. Every call builds its own codecs from the options it
    receives, so a transformer holds no per-conversion state.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, enable_profiling: bool = False):
        """
        Initialize the CSV Transformer.

        Args:
            logger: Optional logger instance
            enable_profiling: Log timing and memory metrics for each conversion
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = ErrorHandler(self.logger)
        self.flattener = Flattener(self.logger)
        self.profiler = PerformanceProfiler(self.logger) if enable_profiling else None

    def json_to_csv(self, records: Sequence[Record], options: Optional[CsvOptions] = None) -> str:
        """
        Convert records into delimited text.

        Args:
            records: List of records
            options: Serialization options (defaults to CsvOptions())

        Returns:
            Delimited text, one terminated line per row

        Raises:
            ProcessingError: If the records are invalid or a field cannot be read
        """
        options = options or CsvOptions()
        self.error_handler.raise_for_validation(self.error_handler.validate_input(records))

        with self._profile("json_to_csv", lambda: _json_size(records)) as profiler:
            text = "".join(self.iter_csv_lines(records, options))
            if profiler:
                profiler.record_output(len(text.encode("utf-8")), len(records))

        self.logger.info(f"Converted {len(records)} records to {len(text)} characters of text")
        return text

    def iter_csv_lines(self, records: Iterable[Record], options: Optional[CsvOptions] = None) -> Iterator[str]:
        """
        Lazily convert records into lines of delimited text.

        Fields are derived from all records when a list is given. For any
        other iterable only the first record is inspected, so that lines can
        be produced before the input is exhausted.

        Yields:
            Lines including their eol sequence
        """
        options = options or CsvOptions()

        if isinstance(records, (list, tuple)):
            sample = list(records)
            source: Iterable[Record] = records
        else:
            iterator = iter(records)
            sample = list(islice(iterator, 1))
            source = chain(sample, iterator)

        fields = self._resolve_csv_fields(sample, options)
        scalar_codec = ScalarCodec()
        row_codec = RowCodec(options.delimiter, options.eol, self.logger)

        emitted = False
        if options.header:
            yield row_codec.encode_header([field.name for field in fields])
            emitted = True

        for record_index, record in enumerate(source):
            if not isinstance(record, Mapping):
                raise ProcessingError(
                    f"Record {record_index} must be an object, got {type(record).__name__}",
                    ErrorType.STRUCTURE,
                    context={"record_index": record_index}
                )
            values = self.flattener.flatten(record, fields, record_index)
            yield row_codec.encode_row(
                [scalar_codec.encode(value) for value in values],
                [scalar_codec.needs_quotes(value) for value in values]
            )
            emitted = True

        if not emitted:
            yield options.eol

    def csv_to_json(self, text: str, options: Optional[JsonOptions] = None) -> List[Record]:
        """
        Convert delimited text into records.

        Args:
            text: Delimited text
            options: Parsing options (defaults to JsonOptions())

        Returns:
            List of records

        Raises:
            ProcessingError: If the text is malformed or a field cannot be set
        """
        options = options or JsonOptions()

        with self._profile("csv_to_json", lambda: len(text.encode("utf-8"))) as profiler:
            records = list(self.iter_records(text, options))
            if profiler:
                profiler.record_output(_json_size(records), len(records))

        self.logger.info(f"Converted {len(text)} characters of text to {len(records)} records")
        return records

    def iter_records(self, source: Union[str, Iterable[str]],
                     options: Optional[JsonOptions] = None) -> Iterator[Record]:
        """
        Lazily convert delimited text into records.

        Args:
            source: Complete text, or an iterable of text chunks
            options: Parsing options (defaults to JsonOptions())

        Yields:
            One record per data row
        """
        options = options or JsonOptions()
        row_codec = RowCodec(options.delimiter, logger=self.logger)
        scalar_codec = ScalarCodec(parse_values=options.parse_values, parse_json=options.parse_json)

        rows: Iterator[ParsedRow] = row_codec.decode_rows(source)

        # leading empty lines carry no header and no data
        first = next((row for row in rows if not row.is_blank()), None)
        if first is None:
            return

        if options.header:
            names = first.values
        else:
            names = positional_names(len(first.values))
            rows = chain([first], rows)

        fields = self._resolve_json_fields(names, options)
        columns = self._bind_columns(fields, names, options.header)
        width = len(names)
        if width > 1:
            # a single-column row holding null is written as an empty line
            rows = (row for row in rows if not row.is_blank())

        for record_index, row in enumerate(rows):
            cells, quoted = self._fit_row(row, width, options.strict)
            values = [scalar_codec.decode(cells[column], quoted[column]) for column in columns]
            yield self.flattener.unflatten(values, fields, record_index)

    def _resolve_csv_fields(self, records: List[Any], options: CsvOptions) -> List[FieldInterface]:
        """Resolve the serialization field list from the options."""
        if options.fields is None:
            resolver = FieldPathResolver(options.key_separator, options.escape_char, logger=self.logger)
            return resolver.fields_from_records(records, nested=options.nested)
        return self._apply_fields_option(options.fields, records)

    def _resolve_json_fields(self, names: List[str], options: JsonOptions) -> List[FieldInterface]:
        """Resolve the parsing field list from the options."""
        if options.fields is None:
            resolver = FieldPathResolver(options.key_separator, options.escape_char, logger=self.logger)
            return resolver.fields_from_names(names, nested=options.nested)
        return self._apply_fields_option(options.fields, names)

    def _apply_fields_option(self, fields_option: Any, source: List[Any]) -> List[FieldInterface]:
        if callable(fields_option):
            try:
                fields = list(fields_option(source))
            except ProcessingError:
                raise
            except Exception as e:
                raise ProcessingError(
                    f"Field discovery failed: {e}",
                    ErrorType.CONFIGURATION
                ) from e
        else:
            fields = list(fields_option)

        for field in fields:
            if not isinstance(field, FieldInterface):
                raise ProcessingError(
                    f"Expected a field, got {type(field).__name__}",
                    ErrorType.CONFIGURATION,
                    context={"field": repr(field)}
                )

        self.logger.debug(f"Using {len(fields)} fields: {[field.name for field in fields]}")
        return fields

    def _bind_columns(self, fields: List[FieldInterface], names: List[str], header: bool) -> List[int]:
        """
        Map each field to a column index.

        With a header, fields are matched to columns by name (repeated names
        are taken in order); without one, by position.
        """
        if not header:
            if len(fields) > len(names):
                raise ProcessingError(
                    f"{len(fields)} fields given but rows have only {len(names)} columns",
                    ErrorType.CONFIGURATION
                )
            return list(range(len(fields)))

        available: Dict[str, List[int]] = {}
        for index, name in enumerate(names):
            available.setdefault(name, []).append(index)

        columns = []
        for field in fields:
            indices = available.get(field.name)
            if not indices:
                raise ProcessingError(
                    f"Column '{field.name}' not found in header",
                    ErrorType.CONFIGURATION,
                    context={"field": field.name, "header": names}
                )
            columns.append(indices.pop(0))
        return columns

    def _fit_row(self, row: ParsedRow, width: int, strict: bool) -> Tuple[List[str], List[bool]]:
        """Check the row width, padding or truncating it in lenient mode."""
        if len(row.values) == width:
            return row.values, row.quoted

        if strict:
            raise ProcessingError(
                f"Row at line {row.line_number} has {len(row.values)} columns, expected {width}",
                ErrorType.MALFORMED_ROW,
                context={"line": row.line_number, "expected": width, "actual": len(row.values)}
            )

        self.logger.warning(f"Row at line {row.line_number} has {len(row.values)} columns, "
                            f"expected {width}; adjusting")
        missing = width - len(row.values)
        if missing > 0:
            return row.values + [""] * missing, row.quoted + [False] * missing
        return row.values[:width], row.quoted[:width]

    def _profile(self, operation_name: str, input_size: Callable[[], int]):
        if self.profiler is None:
            return nullcontext(None)
        return self.profiler.profile_operation(operation_name, input_size())


def _json_size(records: Any) -> int:
    """Size in bytes of records serialized as JSON."""
    return len(json.dumps(records, ensure_ascii=False, default=str).encode("utf-8"))


def json2csv(records: Sequence[Record], options: Optional[CsvOptions] = None, **kwargs) -> str:
    """
    Convert records into delimited text.

    Keyword arguments are CsvOptions fields and override ``options``.
    """
    options = dataclasses.replace(options, **kwargs) if options else CsvOptions(**kwargs)
    return CSVTransformer().json_to_csv(records, options)


def csv2json(text: str, options: Optional[JsonOptions] = None, **kwargs) -> List[Record]:
    """
    Convert delimited text into records.

    Keyword arguments are JsonOptions fields and override ``options``.
    """
    options = dataclasses.replace(options, **kwargs) if options else JsonOptions(**kwargs)
    return CSVTransformer().csv_to_json(text, options)
