"""Command-line interface for the CSV Transformer."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .csv_transformer import CSVTransformer
from .error_handler import ErrorHandler
from .types import CsvOptions, JsonOptions, ProcessingError

EOL_CHOICES = {"crlf": "\r\n", "lf": "\n", "cr": "\r"}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s"
    )


def _report_error(error: ProcessingError) -> None:
    response = ErrorHandler().handle_processing_error(error)
    click.echo(f"❌ {error}", err=True)
    click.echo(f"   • {response.suggested_action}", err=True)


def _write_output(text: str, output: Optional[str]) -> None:
    if output:
        output_path = Path(output)
        output_path.write_bytes(text.encode("utf-8"))
        click.echo(f"✅ Successfully wrote {output_path}", err=True)
    else:
        click.echo(text, nl=False)


@click.group()
@click.version_option(version="1.0.0")
def main():
    """CSV Transformer - Convert between JSON records and delimited text."""
    pass


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--output', '-o', help='Output CSV file path (default: stdout)')
@click.option('--delimiter', '-d', default=',', help='Column delimiter (default: ,)')
@click.option('--eol', type=click.Choice(sorted(EOL_CHOICES)), default='crlf', help='Line terminator (default: crlf)')
@click.option('--no-header', is_flag=True, help='Do not write a header line')
@click.option('--nested', is_flag=True, help='Flatten nested objects and arrays into path-named columns')
@click.option('--key-separator', default='.', help='Separator between nested path segments (default: .)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def json2csv(input_file: Path, output: Optional[str], delimiter: str, eol: str, no_header: bool,
             nested: bool, key_separator: str, verbose: bool):
    """Convert a JSON file holding a list of records to CSV."""
    _configure_logging(verbose)

    try:
        records = json.loads(input_file.read_text(encoding='utf-8'))
        options = CsvOptions(
            header=not no_header,
            delimiter=delimiter,
            eol=EOL_CHOICES[eol],
            nested=nested,
            key_separator=key_separator
        )
        text = CSVTransformer(enable_profiling=verbose).json_to_csv(records, options)
    except ProcessingError as e:
        _report_error(e)
        sys.exit(1)
    except json.JSONDecodeError as e:
        click.echo(f"❌ Invalid JSON in {input_file}: {e.msg} at line {e.lineno}, column {e.colno}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    _write_output(text, output)


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--output', '-o', help='Output JSON file path (default: stdout)')
@click.option('--delimiter', '-d', default=',', help='Column delimiter (default: ,)')
@click.option('--no-header', is_flag=True, help='The first line holds data, not column names')
@click.option('--nested', is_flag=True, help='Rebuild nested objects and arrays from path-named columns')
@click.option('--key-separator', default='.', help='Separator between nested path segments (default: .)')
@click.option('--raw', is_flag=True, help='Keep every value as a string')
@click.option('--json-as-text', is_flag=True, help='Keep JSON object and array text as strings')
@click.option('--lenient', is_flag=True, help='Pad or truncate rows whose width differs from the header')
@click.option('--indent', default=2, help='JSON indentation (default: 2)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def csv2json(input_file: Path, output: Optional[str], delimiter: str, no_header: bool, nested: bool,
             key_separator: str, raw: bool, json_as_text: bool, lenient: bool, indent: int,
             verbose: bool):
    """Convert a CSV file to a JSON list of records."""
    _configure_logging(verbose)

    try:
        text = input_file.read_bytes().decode("utf-8")
        options = JsonOptions(
            header=not no_header,
            delimiter=delimiter,
            nested=nested,
            key_separator=key_separator,
            parse_values=not raw,
            parse_json=not json_as_text,
            strict=not lenient
        )
        records = CSVTransformer(enable_profiling=verbose).csv_to_json(text, options)
    except ProcessingError as e:
        _report_error(e)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    _write_output(json.dumps(records, indent=indent, ensure_ascii=False) + "\n", output)


if __name__ == '__main__':
    main()
