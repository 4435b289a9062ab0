"""Tests for the command-line interface."""

import json
from click.testing import CliRunner
from csv_transformer.cli import main


class TestCli:
    """Tests for the csv-transformer commands."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_json2csv(self, temp_dir, users):
        """Test converting a JSON file to CSV."""
        input_file = temp_dir / "users.json"
        input_file.write_text(json.dumps(users), encoding="utf-8")
        output_file = temp_dir / "users.csv"

        result = self.runner.invoke(main, ["json2csv", str(input_file), "-o", str(output_file)])

        assert result.exit_code == 0
        assert output_file.read_bytes() == b"id,name\r\n1,Joe\r\n2,Sarah\r\n"

    def test_json2csv_nested_with_options(self, temp_dir, nested_record):
        """Test the nested, separator, delimiter and eol options."""
        input_file = temp_dir / "nested.json"
        input_file.write_text(json.dumps([nested_record]), encoding="utf-8")
        output_file = temp_dir / "nested.csv"

        result = self.runner.invoke(main, [
            "json2csv", str(input_file), "-o", str(output_file),
            "--nested", "--key-separator", "_", "--delimiter", ";", "--eol", "lf", "--no-header"
        ])

        assert result.exit_code == 0
        assert output_file.read_bytes() == b"Joe;Rotterdam;51.9280712;4.4207888\n"

    def test_csv2json(self, temp_dir, users):
        """Test converting a CSV file to JSON."""
        input_file = temp_dir / "users.csv"
        input_file.write_bytes(b"id,name\r\n1,Joe\r\n2,Sarah\r\n")
        output_file = temp_dir / "users.json"

        result = self.runner.invoke(main, ["csv2json", str(input_file), "-o", str(output_file)])

        assert result.exit_code == 0
        assert json.loads(output_file.read_text(encoding="utf-8")) == users

    def test_csv2json_raw_nested(self, temp_dir):
        """Test the raw and nested options."""
        input_file = temp_dir / "nested.csv"
        input_file.write_bytes(b"a.b,a.c.0\r\n1,x\r\n")
        output_file = temp_dir / "nested.json"

        result = self.runner.invoke(main, [
            "csv2json", str(input_file), "-o", str(output_file), "--nested", "--raw"
        ])

        assert result.exit_code == 0
        assert json.loads(output_file.read_text(encoding="utf-8")) == [{"a": {"b": "1", "c": ["x"]}}]

    def test_csv2json_json_as_text(self, temp_dir):
        """Test keeping JSON-looking cells as strings."""
        input_file = temp_dir / "json.csv"
        input_file.write_bytes(b'a,b\r\n"[1]",2\r\n')
        output_file = temp_dir / "json.json"

        result = self.runner.invoke(main, [
            "csv2json", str(input_file), "-o", str(output_file), "--json-as-text"
        ])

        assert result.exit_code == 0
        assert json.loads(output_file.read_text(encoding="utf-8")) == [{"a": "[1]", "b": 2}]

    def test_csv2json_malformed_row(self, temp_dir):
        """Test that conversion errors exit with a suggestion."""
        input_file = temp_dir / "bad.csv"
        input_file.write_bytes(b"id,name\r\n1\r\n")

        result = self.runner.invoke(main, ["csv2json", str(input_file)])

        assert result.exit_code == 1
        assert "expected 2" in result.output
        assert "lenient" in result.output

    def test_csv2json_lenient(self, temp_dir):
        """Test padding of short rows."""
        input_file = temp_dir / "short.csv"
        input_file.write_bytes(b"id,name\r\n1\r\n")
        output_file = temp_dir / "short.json"

        result = self.runner.invoke(main, ["csv2json", str(input_file), "-o", str(output_file), "--lenient"])

        assert result.exit_code == 0
        assert json.loads(output_file.read_text(encoding="utf-8")) == [{"id": 1, "name": None}]

    def test_json2csv_invalid_json(self, temp_dir):
        """Test reporting of unreadable JSON input."""
        input_file = temp_dir / "broken.json"
        input_file.write_text("[{", encoding="utf-8")

        result = self.runner.invoke(main, ["json2csv", str(input_file)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_json2csv_invalid_delimiter(self, temp_dir, users):
        """Test reporting of invalid options."""
        input_file = temp_dir / "users.json"
        input_file.write_text(json.dumps(users), encoding="utf-8")

        result = self.runner.invoke(main, ["json2csv", str(input_file), "--delimiter", '"'])

        assert result.exit_code == 1
        assert "delimiter" in result.output
