"""Utility functions for recipient ingestion."""

# Import key functions for easier access
from .normalizers import (
    normalize_string,
    normalize_header,
    normalize_date,
    normalize_gender,
    normalize_blood_type,
    parse_number,
    parse_status
)
from .recipient_loader import load_recipients, parse_recipient_row

__all__ = [
    'normalize_string',
    'normalize_header',
    'normalize_date',
    'normalize_gender',
    'normalize_blood_type',
    'parse_number',
    'parse_status',
    'load_recipients',
    'parse_recipient_row'
]
