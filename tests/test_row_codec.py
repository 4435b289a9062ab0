"""Tests for the row codec."""

import pytest
from csv_transformer.row_codec import RowCodec, positional_names
from csv_transformer.types import ErrorType, ProcessingError


class TestRowEncoding:
    """Tests for RowCodec encoding."""

    def setup_method(self):
        """Set up test fixtures."""
        self.codec = RowCodec()

    def test_encode_plain_row(self):
        """Test joining cells with the delimiter and terminating the line."""
        assert self.codec.encode_row(["1", "Joe"]) == "1,Joe\r\n"

    def test_encode_control_characters(self):
        """Test quoting of cells holding control characters."""
        assert self.codec.encode_cell("Joe,Jones") == '"Joe,Jones"'
        assert self.codec.encode_cell('"Big" Joe') == '"""Big"" Joe"'
        assert self.codec.encode_cell("Joe\nJones") == '"Joe\nJones"'
        assert self.codec.encode_cell("Joe\rJones") == '"Joe\rJones"'
        assert self.codec.encode_cell("plain") == "plain"

    def test_encode_forced_quotes(self):
        """Test quoting on request."""
        assert self.codec.encode_row(["", "42"], [True, False]) == '"",42\r\n'

    def test_custom_delimiter_and_eol(self):
        """Test quoting against a custom delimiter."""
        codec = RowCodec(delimiter=";", eol="\n")

        assert codec.encode_row(["containing;delimiter", "text"]) == '"containing;delimiter";text\n'
        assert codec.encode_row(["a,b", "c"]) == "a,b;c\n"

    def test_encode_header(self):
        """Test quoting of header names."""
        assert self.codec.encode_header(["nested.field\\.,name"]) == '"nested.field\\.,name"\r\n'

    def test_positional_names(self):
        """Test generated column names."""
        assert positional_names(3) == ["Field 0", "Field 1", "Field 2"]
        assert positional_names(0) == []


class TestRowDecoding:
    """Tests for RowCodec decoding."""

    def setup_method(self):
        """Set up test fixtures."""
        self.codec = RowCodec()

    def decode(self, text, codec=None):
        return [row.values for row in (codec or self.codec).decode_rows(text)]

    def test_decode_simple_rows(self):
        """Test splitting of rows and cells."""
        assert self.decode("id,name\r\n1,Joe\r\n2,Sarah\r\n") == [["id", "name"], ["1", "Joe"], ["2", "Sarah"]]

    def test_decode_any_line_terminator(self):
        """Test that LF, CR and CRLF all end rows."""
        assert self.decode("a\nb\rc\r\nd") == [["a"], ["b"], ["c"], ["d"]]

    def test_decode_quoted_cells(self):
        """Test quoted cells holding control characters."""
        text = '"Joe,Jones","""Big"" Joe","multi\r\nline"\r\n'

        assert self.decode(text) == [["Joe,Jones", '"Big" Joe', "multi\r\nline"]]

    def test_decode_quoting_flags(self):
        """Test that quoted and unquoted empty cells are told apart."""
        rows = list(self.codec.decode_rows('"",\r\n'))

        assert rows[0].values == ["", ""]
        assert rows[0].quoted == [True, False]

    def test_decode_custom_delimiter(self):
        """Test splitting on a custom delimiter."""
        codec = RowCodec(delimiter=";")

        assert self.decode('a;b\r\n"containing;delimiter";text\r\n', codec) == [
            ["a", "b"], ["containing;delimiter", "text"]
        ]

    def test_decode_without_trailing_terminator(self):
        """Test that the last row needs no terminator."""
        assert self.decode("a,b\r\n1,2") == [["a", "b"], ["1", "2"]]
        assert self.decode("a,") == [["a", ""]]

    def test_decode_empty_text(self):
        """Test that empty text has no rows."""
        assert self.decode("") == []

    def test_decode_blank_line(self):
        """Test that an empty line is a blank row."""
        rows = list(self.codec.decode_rows("\r\n"))

        assert len(rows) == 1
        assert rows[0].is_blank()

    def test_decode_quote_inside_unquoted_cell(self):
        """Test that a quote in the middle of a cell is literal."""
        assert self.decode('5"6,x') == [['5"6', "x"]]

    def test_decode_chunks(self):
        """Test that rows may be split across chunks at any position."""
        chunks = ['id,na', 'me\r', '\n1,"Jo', '""e"', '""\r\n']

        assert self.decode(chunks) == [["id", "name"], ["1", 'Jo"e"']]

    def test_line_numbers(self):
        """Test that rows report the line they start on."""
        rows = list(self.codec.decode_rows('a\r\n"b\nc"\r\nd\n'))

        assert [row.line_number for row in rows] == [1, 2, 4]

    def test_unterminated_quote(self):
        """Test that text ending inside quotes fails with a position."""
        with pytest.raises(ProcessingError) as exc_info:
            list(self.codec.decode_rows('a,b\r\n1,"open\r\n'))

        error = exc_info.value
        assert error.error_type == ErrorType.UNTERMINATED_QUOTE
        assert error.context == {"line": 2, "position": 8}

    def test_text_after_closing_quote(self):
        """Test that characters after a closing quote are rejected."""
        with pytest.raises(ProcessingError) as exc_info:
            list(self.codec.decode_rows('"a"b,c\r\n'))

        assert exc_info.value.error_type == ErrorType.MALFORMED_ROW
