"""Encoding and decoding of single cell values."""

import json
import re
from decimal import Decimal
from typing import Any

from .types import ErrorType, ProcessingError, ScalarKind

_NUMBER_PATTERN = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_KEYWORDS = {"true": True, "false": False, "null": None}


class ScalarCodec:
    """
    Converts single values to and from their cell text.

    Encoding is lossless for strings, numbers, booleans and null. Nested
    containers that reach the codec directly are written as compact JSON.
    Decoding infers types from unquoted text unless ``parse_values`` is off,
    in which case every cell is returned as the raw string. With
    ``parse_json`` off, JSON object and array text stays a string, so string
    values that look like JSON keep their type.
    """

    def __init__(self, parse_values: bool = True, parse_json: bool = True):
        """
        Initialize the scalar codec.

        Args:
            parse_values: Infer null, boolean, number and JSON values from cell text
            parse_json: Read JSON object and array text back as containers
        """
        self.parse_values = parse_values
        self.parse_json = parse_json

    @staticmethod
    def classify(value: Any) -> ScalarKind:
        """
        Determine the kind of a value.

        Raises:
            ProcessingError: If the value is not representable in a record
        """
        if value is None:
            return ScalarKind.NULL
        if isinstance(value, bool):
            return ScalarKind.BOOLEAN
        if isinstance(value, (int, float, Decimal)):
            return ScalarKind.NUMBER
        if isinstance(value, str):
            return ScalarKind.STRING
        if isinstance(value, (dict, list, tuple)):
            return ScalarKind.CONTAINER
        raise ProcessingError(
            f"Unsupported value type: {type(value).__name__}",
            ErrorType.STRUCTURE,
            context={"value": repr(value)}
        )

    def encode(self, value: Any) -> str:
        """
        Encode a value as cell text (without CSV quoting).

        Args:
            value: Value to encode

        Returns:
            Text representation of the value
        """
        kind = self.classify(value)

        if kind == ScalarKind.NULL:
            return ""
        elif kind == ScalarKind.BOOLEAN:
            return "true" if value else "false"
        elif kind == ScalarKind.NUMBER:
            # repr keeps the shortest text that reads back as the same float
            return repr(value) if isinstance(value, float) else str(value)
        elif kind == ScalarKind.STRING:
            return value
        else:
            try:
                return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
            except (TypeError, ValueError) as e:
                raise ProcessingError(
                    f"Nested value is not JSON serializable: {e}",
                    ErrorType.STRUCTURE
                ) from e

    def needs_quotes(self, value: Any) -> bool:
        """
        Check if a value must be quoted to survive a round trip.

        Strings that would be read back as another kind of value when left
        unquoted (empty, keywords, numbers, JSON) are quoted, as are
        containers.
        """
        kind = self.classify(value)
        if kind == ScalarKind.CONTAINER:
            return True
        if kind != ScalarKind.STRING:
            return False
        if value == "" or value in _KEYWORDS:
            return True
        if _NUMBER_PATTERN.fullmatch(value):
            return True
        return self._parse_json(value) is not None

    def decode(self, text: str, quoted: bool = False) -> Any:
        """
        Decode cell text into a value.

        Args:
            text: Unquoted cell content
            quoted: Whether the cell was quoted in the source text

        Returns:
            Decoded value
        """
        if not self.parse_values:
            return text

        if quoted:
            return self._decode_json(text)

        if text == "":
            return None
        if text in _KEYWORDS:
            return _KEYWORDS[text]
        if _NUMBER_PATTERN.fullmatch(text):
            if "." in text or "e" in text or "E" in text:
                return float(text)
            return int(text)

        return self._decode_json(text)

    def _decode_json(self, text: str) -> Any:
        if not self.parse_json:
            return text
        parsed = self._parse_json(text)
        return text if parsed is None else parsed

    @staticmethod
    def _parse_json(text: str) -> Any:
        """Parse text as a JSON object or array, or return None."""
        if not text or text[0] not in "{[":
            return None
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            return None
        return parsed if isinstance(parsed, (dict, list)) else None
