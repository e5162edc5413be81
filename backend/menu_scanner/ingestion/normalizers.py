"""
CSV field normalization for wine imports.

All parsing is lenient: a value that does not parse becomes None and the
row is still processed.
"""

import csv
import io
import math
from typing import Iterable, Optional


def read_rows(text: str) -> list[list[str]]:
    """
    Parse CSV text into rows of trimmed fields.

    Comma separated, double-quote escaped. Blank lines are dropped.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    rows = []
    for row in csv.reader(io.StringIO(text)):
        fields = [value.strip() for value in row]
        if not fields or (len(fields) == 1 and not fields[0]):
            continue
        rows.append(fields)
    return rows


def find_column(
    headers: list[str],
    needles: Iterable[str],
    exclude: Iterable[str] = (),
) -> Optional[int]:
    """
    Index of the first header containing any needle and none of the excluded terms.

    Matching is a case-insensitive substring test.
    """
    needles = tuple(needles)
    exclude = tuple(exclude)
    for index, header in enumerate(headers):
        lowered = header.lower()
        if any(term in lowered for term in exclude):
            continue
        if any(needle in lowered for needle in needles):
            return index
    return None


def field_at(fields: list[str], index: Optional[int]) -> Optional[str]:
    """Trimmed field at index, or None when the column is missing or the row is short."""
    if index is None or index >= len(fields):
        return None
    return fields[index].strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    """Empty strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        result = float(value.strip())
    except ValueError:
        return None
    return result if math.isfinite(result) else None


def parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_food_pairings(value: Optional[str]) -> list[str]:
    """
    Parse a pairing list such as "['Beef', 'Lamb']" or "Beef, Lamb".

    Brackets and quotes are stripped; empty items are dropped.
    """
    if not value:
        return []
    inner = value.strip().strip("[]")
    items = []
    for item in inner.split(","):
        cleaned = item.strip().strip("'\"").strip()
        if cleaned:
            items.append(cleaned)
    return items
