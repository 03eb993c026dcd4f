"""
Recipient list loading from the hospital waiting list.

Excel workbooks (.xlsx, first worksheet) are read with openpyxl; any other
file is read as CSV.

Header discovery and cell coercion happen here so that the matching engine
only ever sees typed Recipient values.
"""

import csv
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from openpyxl import load_workbook

from ..core.data_models import BiometricProfile, Recipient
from ..core.exceptions import ValidationError
from .normalizers import (
    normalize_blood_type,
    normalize_date,
    normalize_gender,
    normalize_header,
    parse_number,
    parse_status
)


REQUIRED_COLUMNS = ['id', 'name', 'gender', 'age', 'height', 'weight']
BLOOD_TYPE_COLUMN = 'bloodtype'
STATUS_COLUMN = 'status'
DATE_ADDED_COLUMN = 'dateadded'
EXCEL_SUFFIXES = ('.xlsx', '.xlsm')

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _cell_text(value: Any) -> str:
    """Render an identity cell as text; whole-number floats lose the '.0'."""
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Key a row by normalized header. Strings are stripped, other cells kept as read."""
    return {
        normalize_header(str(key)): (value.strip() if isinstance(value, str) else value)
        for key, value in row.items()
        if key is not None
    }


def parse_recipient_row(row: Dict[str, Any]) -> Recipient:
    """
    Build a Recipient from a row keyed by normalized header.

    Cells may be strings (CSV) or numbers and datetimes (Excel).
    Unparseable numeric cells become None and unknown genders are kept
    as-is; the engine reports such recipients as skipped.
    """
    recipient_id = _cell_text(row.get('id'))

    profile = BiometricProfile(
        gender=normalize_gender(_cell_text(row.get('gender'))),
        age=parse_number(row.get('age')),
        height=parse_number(row.get('height')),
        weight=parse_number(row.get('weight'))
    )

    raw_blood_type = row.get(BLOOD_TYPE_COLUMN)
    blood_type = normalize_blood_type(raw_blood_type)
    if not _is_blank(raw_blood_type) and blood_type is None:
        logger.warning(f"Unrecognized blood type '{raw_blood_type}' for recipient {recipient_id}")

    raw_status = row.get(STATUS_COLUMN)
    status = parse_status(raw_status)
    if not _is_blank(raw_status) and status is None:
        logger.warning(f"Invalid status '{raw_status}' for recipient {recipient_id}, using default")

    raw_date = row.get(DATE_ADDED_COLUMN)
    date_added = normalize_date(raw_date)
    if not _is_blank(raw_date) and date_added is None:
        logger.warning(f"Unparseable date added '{raw_date}' for recipient {recipient_id}")

    return Recipient(
        recipient_id=recipient_id,
        name=_cell_text(row.get('name')),
        profile=profile,
        blood_type=blood_type,
        status=status,
        date_added=date_added
    )


def read_csv_rows(recipients_file: str, encoding: Optional[str] = 'utf-8') -> Tuple[List[str], List[Dict[str, Any]]]:
    """Read the header row and data rows of a CSV file."""
    with open(recipients_file, 'r', encoding=encoding, newline='') as file:
        reader = csv.DictReader(file)
        rows = list(reader)
        return list(reader.fieldnames or []), rows


def read_workbook_rows(recipients_file: str) -> Tuple[List[str], List[Dict[str, Any]]]:
    """
    Read the first worksheet of an Excel workbook.

    Row 1 holds the headers. Rows with no value in any cell are ignored.
    """
    workbook = load_workbook(recipients_file, read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        values = sheet.iter_rows(values_only=True)

        header_row = next(values, None) or ()
        headers = [_cell_text(cell) for cell in header_row]

        rows = []
        for cells in values:
            if all(_is_blank(cell) for cell in cells):
                continue
            rows.append(dict(zip(headers, cells)))
    finally:
        workbook.close()

    return headers, rows


def load_recipients(recipients_file: str, encoding: Optional[str] = 'utf-8') -> List[Recipient]:
    """
    Load the recipient waiting list from an Excel workbook or a CSV file.

    Args:
        recipients_file: Path to the file; .xlsx/.xlsm is read as a workbook
        encoding: CSV file encoding (default: utf-8)

    Returns:
        Recipients in file order

    Raises:
        ValidationError: if required columns are missing or the file has no rows
    """
    logger.info(f"Loading recipients from: {recipients_file}")

    if Path(recipients_file).suffix.lower() in EXCEL_SUFFIXES:
        fieldnames, rows = read_workbook_rows(recipients_file)
    else:
        fieldnames, rows = read_csv_rows(recipients_file, encoding)

    headers = [normalize_header(name) for name in fieldnames]

    missing_columns = [column for column in REQUIRED_COLUMNS if column not in headers]
    if missing_columns:
        raise ValidationError(
            f"Missing required columns: {', '.join(missing_columns)}",
            fields=missing_columns
        )

    if BLOOD_TYPE_COLUMN not in headers:
        logger.warning('No "bloodType" column found. Blood type matching will be disabled.')

    recipients = [parse_recipient_row(_normalize_row(row)) for row in rows]

    if not recipients:
        raise ValidationError(f"The recipient file contains no data: {recipients_file}")

    logger.info(f"Loaded {len(recipients)} recipients")
    return recipients
