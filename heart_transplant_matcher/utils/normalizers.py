"""
Value normalization utilities for recipient ingestion.

These functions turn loosely-typed spreadsheet cells into the typed values
the matching engine accepts. None of them raise on bad input: an
unparseable value becomes None (or is passed through unchanged for gender)
so the engine can report the recipient as skipped with a reason.
"""

import re
from datetime import date, datetime
from typing import Optional, Union

from ..core.data_models import BloodType


def normalize_string(s: str) -> str:
    """
    Normalize string by removing spaces and converting to lowercase.

    Args:
        s: Input string to normalize

    Returns:
        Normalized string with no spaces, lowercase
    """
    if not s:
        return ""
    return re.sub(r'\s+', '', s.lower())


def normalize_header(header: str) -> str:
    """Case-fold a column header and drop spaces and underscores."""
    return normalize_string(header or "").replace('_', '')


def normalize_date(value: Union[str, date, None]) -> Optional[date]:
    """
    Parse a date cell.

    Supports multiple input formats commonly found in hospital spreadsheets:
    - YYYY-MM-DD (ISO format)
    - DD/MM/YYYY (European format)
    - MM/DD/YYYY (US format)
    - YYYY/MM/DD (Alternative ISO)

    European format wins over US format when both are plausible.

    Args:
        value: Date string, or an already-parsed date/datetime

    Returns:
        date, or None if the value is empty or no format matches
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None

    text = str(value).strip()
    formats = ['%Y-%m-%d', '%d/%m/%Y', '%m/%d/%Y', '%Y/%m/%d']

    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    return None


def normalize_gender(gender: str) -> str:
    """
    Normalize gender string to the engine's values.

    Args:
        gender: Input gender string

    Returns:
        'male', 'female', or the stripped original if unrecognized
    """
    if not gender:
        return ""

    gender_normalized = str(gender).upper().strip()

    male_variants = ['M', 'MALE', 'MAN']
    female_variants = ['F', 'FEMALE', 'WOMAN']

    if gender_normalized in male_variants:
        return 'male'
    elif gender_normalized in female_variants:
        return 'female'

    return str(gender).strip()


def normalize_blood_type(value: Optional[str]) -> Optional[BloodType]:
    """
    Parse a blood type cell such as 'AB+', 'ab +', 'O−' or 'A pos'.

    Returns:
        BloodType, or None if empty or unrecognized
    """
    if not value:
        return None

    text = re.sub(r'\s+', '', str(value).upper())
    text = re.sub(r'(POS|POSITIVE)$', '+', text)
    text = re.sub(r'(NEG|NEGATIVE)$', '-', text)

    try:
        return BloodType.parse(text)
    except ValueError:
        return None


def parse_number(value) -> Optional[float]:
    """
    Parse a numeric cell; a decimal comma is accepted.

    Returns:
        float, or None if empty or not a number
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if value is None:
        return None

    text = str(value).strip().replace(',', '.')
    if not text:
        return None

    try:
        return float(text)
    except ValueError:
        return None


def parse_status(value) -> Optional[int]:
    """
    Parse a waiting-list status cell (1 to 7).

    Returns:
        int, or None if empty, not a whole number, or out of range
    """
    number = parse_number(value)
    if number is None or not number.is_integer():
        return None

    status = int(number)
    if not 1 <= status <= 7:
        return None
    return status
