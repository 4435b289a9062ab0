"""
CSV Transformer - Bidirectional JSON/CSV conversion.

Converts lists of nested records into delimited text and back, flattening
nested objects and arrays into path-named columns.
"""

from .csv_transformer import CSVTransformer, csv2json, json2csv
from .fields import (
    CustomField,
    StructuralField,
    get_fields_from_csv,
    get_fields_from_json,
    get_nested_fields_from_csv,
    get_nested_fields_from_json,
)
from .types import CsvOptions, ErrorType, JsonOptions, ProcessingError

__version__ = "1.0.0"
__all__ = [
    "CSVTransformer",
    "json2csv",
    "csv2json",
    "CsvOptions",
    "JsonOptions",
    "CustomField",
    "StructuralField",
    "get_fields_from_json",
    "get_nested_fields_from_json",
    "get_fields_from_csv",
    "get_nested_fields_from_csv",
    "ErrorType",
    "ProcessingError",
]
