"""
Shared data I/O utilities for the SDG company recommender.

This module parses the delimited company table (comma or tab separated,
quote-aware) and loads it from disk.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List

from .constants import CORP_CODE_COLUMN
from .errors import TableLoadError
from .models import RawCompanyRecord, parse_number

logger = logging.getLogger(__name__)

# Rows end at \n or \r\n only; other Unicode line breaks stay inside a field
LINE_BREAK = re.compile(r"\r?\n")


def detect_delimiter(header_line: str) -> str:
    """Tab if the header line contains one, comma otherwise."""
    return "\t" if "\t" in header_line else ","


def _clean_field(raw: str) -> str:
    value = raw.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return value.replace('""', '"')


def split_line(line: str, delimiter: str) -> List[str]:
    """Split one data line, treating delimiters inside double quotes as text.

    Each field is trimmed, a single pair of wrapping quotes is removed and
    doubled quotes collapse to one.

    Example:
        split_line('a,"b, c",3', ",")
        # ['a', 'b, c', '3']
    """
    fields = []
    current = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == delimiter and not in_quotes:
            fields.append(_clean_field("".join(current)))
            current = []
        else:
            current.append(char)
    fields.append(_clean_field("".join(current)))
    return fields


def _type_value(column: str, value: str) -> Any:
    if column == CORP_CODE_COLUMN:
        return value
    number = parse_number(value)
    return number if number is not None else value


def parse_rows(text: str) -> List[Dict[str, Any]]:
    """Parse table text into typed row dicts keyed by header column.

    `corp_code` stays text; other non-empty numeric cells become floats;
    everything else is trimmed text, with empty cells as "".
    """
    lines = [line for line in LINE_BREAK.split(text) if line.strip()]
    if len(lines) <= 1:
        return []

    delimiter = detect_delimiter(lines[0])
    headers = [h.strip() for h in lines[0].split(delimiter)]

    rows = []
    for line in lines[1:]:
        values = split_line(line, delimiter)
        row = {}
        for i, column in enumerate(headers):
            value = values[i] if i < len(values) else ""
            row[column] = _type_value(column, value)
        rows.append(row)
    return rows


def parse_table(text: str) -> List[RawCompanyRecord]:
    """Parse table text into company records.

    Args:
        text: Full table contents, header row first

    Returns:
        List of RawCompanyRecord objects, empty if the text has no data rows

    Example:
        records = parse_table("company_name,corp_code\\n에코전지,036460\\n")
        records[0].corp_code  # "036460"
    """
    return [RawCompanyRecord.from_row(row) for row in parse_rows(text)]


def load_company_table(table_path: Path) -> List[RawCompanyRecord]:
    """Load company records from a CSV/TSV file.

    Args:
        table_path: Path to the table, UTF-8 (a BOM is tolerated)

    Returns:
        Non-empty list of RawCompanyRecord objects

    Raises:
        TableLoadError: If the file cannot be read or holds no data rows
    """
    table_path = Path(table_path)
    try:
        with open(table_path, "r", encoding="utf-8-sig") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise TableLoadError(f"Cannot read company table {table_path}: {e}") from e

    records = parse_table(text)
    if not records:
        raise TableLoadError(f"Company table has no data rows: {table_path}")

    logger.info("Loaded %d companies from %s", len(records), table_path)
    return records
