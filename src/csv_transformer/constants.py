"""Default values shared by the CSV Transformer components."""

DEFAULT_DELIMITER = ","
DEFAULT_EOL = "\r\n"
DEFAULT_KEY_SEPARATOR = "."
DEFAULT_ESCAPE_CHAR = "\\"

QUOTE_CHAR = '"'
LINE_BREAKS = ("\r", "\n")

# Column names used when the text carries no header line
POSITIONAL_FIELD_PREFIX = "Field "

MAX_NESTING_DEPTH = 100
