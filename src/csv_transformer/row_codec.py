"""Joining and splitting lines of delimited text."""

import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from .constants import DEFAULT_DELIMITER, DEFAULT_EOL, LINE_BREAKS, POSITIONAL_FIELD_PREFIX, QUOTE_CHAR
from .types import ErrorType, ParsedRow, ProcessingError


def positional_names(count: int) -> List[str]:
    """Generate column names for text without a header line."""
    return [f"{POSITIONAL_FIELD_PREFIX}{index}" for index in range(count)]


class RowCodec:
    """
    Encodes rows of cell text into lines and decodes text back into rows.

    Cells containing the delimiter, a quote or a line break are wrapped in
    quotes with embedded quotes doubled. Decoding accepts ``\\r\\n``, ``\\n``
    and ``\\r`` as row terminators regardless of the configured eol.
    """

    def __init__(self, delimiter: str = DEFAULT_DELIMITER, eol: str = DEFAULT_EOL,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the row codec.

        Args:
            delimiter: Character separating cells
            eol: Line terminator written after each row
            logger: Optional logger instance
        """
        self.delimiter = delimiter
        self.eol = eol
        self.logger = logger or logging.getLogger(__name__)
        self._control_chars = (delimiter, QUOTE_CHAR) + LINE_BREAKS

    def needs_quotes(self, text: str) -> bool:
        """Check if cell text contains a control character."""
        return any(char in text for char in self._control_chars)

    def encode_cell(self, text: str, force_quotes: bool = False) -> str:
        """
        Encode one cell.

        Args:
            text: Cell text
            force_quotes: Quote even if the text holds no control character

        Returns:
            Cell as written to the line
        """
        if force_quotes or self.needs_quotes(text):
            return QUOTE_CHAR + text.replace(QUOTE_CHAR, QUOTE_CHAR * 2) + QUOTE_CHAR
        return text

    def encode_row(self, cells: Sequence[str], forced: Optional[Sequence[bool]] = None) -> str:
        """
        Encode a row of cell text into one terminated line.

        Args:
            cells: Cell text in column order
            forced: Per-cell flags requesting quotes regardless of content

        Returns:
            Line including the eol sequence
        """
        if forced is None:
            forced = [False] * len(cells)
        return self.delimiter.join(
            self.encode_cell(text, force) for text, force in zip(cells, forced)
        ) + self.eol

    def encode_header(self, names: Sequence[str]) -> str:
        """Encode the header line holding field names."""
        return self.encode_row(names)

    def decode_rows(self, source: Union[str, Iterable[str]]) -> Iterator[ParsedRow]:
        """
        Split delimited text into rows of raw cell text.

        Args:
            source: Complete text, or an iterable of text chunks

        Yields:
            ParsedRow per line, with per-cell quoting flags

        Raises:
            ProcessingError: On text after a closing quote or an unterminated quote
        """
        chunks = [source] if isinstance(source, str) else source

        values: List[str] = []
        quoted: List[bool] = []
        cell: List[str] = []
        cell_quoted = False
        in_quotes = False
        pending_quote = False
        after_quote = False
        pending_cr = False

        position = 0
        line = 1
        row_line = 1
        quote_line = quote_position = 0
        previous = ""

        for chunk in chunks:
            for char in chunk:
                position += 1
                if char == "\r" or (char == "\n" and previous != "\r"):
                    line += 1
                previous = char

                if pending_cr:
                    pending_cr = False
                    if char == "\n":
                        continue

                if in_quotes:
                    if pending_quote:
                        pending_quote = False
                        if char == QUOTE_CHAR:
                            cell.append(QUOTE_CHAR)
                            continue
                        in_quotes = False
                        after_quote = True
                    elif char == QUOTE_CHAR:
                        pending_quote = True
                        continue
                    else:
                        cell.append(char)
                        continue

                if char == self.delimiter:
                    values.append("".join(cell))
                    quoted.append(cell_quoted)
                    cell, cell_quoted, after_quote = [], False, False
                elif char in LINE_BREAKS:
                    values.append("".join(cell))
                    quoted.append(cell_quoted)
                    yield ParsedRow(values=values, quoted=quoted, line_number=row_line)
                    values, quoted = [], []
                    cell, cell_quoted, after_quote = [], False, False
                    pending_cr = char == "\r"
                    row_line = line
                elif after_quote:
                    raise ProcessingError(
                        f"Unexpected character {char!r} after closing quote at line {row_line}, "
                        f"position {position}",
                        ErrorType.MALFORMED_ROW,
                        context={"line": row_line, "position": position}
                    )
                elif char == QUOTE_CHAR and not cell and not cell_quoted:
                    in_quotes = cell_quoted = True
                    quote_line, quote_position = line, position
                else:
                    cell.append(char)

        if in_quotes and not pending_quote:
            raise ProcessingError(
                f"Unterminated quoted field starting at line {quote_line}, position {quote_position}",
                ErrorType.UNTERMINATED_QUOTE,
                context={"line": quote_line, "position": quote_position}
            )

        if values or cell or cell_quoted:
            values.append("".join(cell))
            quoted.append(cell_quoted)
            yield ParsedRow(values=values, quoted=quoted, line_number=row_line)
