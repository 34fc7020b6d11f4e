"""
Credit Dispute Engine - Field Normalization Helpers

Small converters shared by the parser and the issue detector.
"""
from __future__ import annotations
import re
from datetime import date, datetime
from typing import Optional

from dateutil.relativedelta import relativedelta

NOT_REPORTED = {"", "-", "—", "–", "N/A", "NA", "NONE", "NOT REPORTED", "NOT AVAILABLE"}

DATE_FORMATS = [
    "%m/%d/%Y", "%m/%d/%y", "%Y-%m-%d", "%m-%d-%Y",
    "%b %d, %Y", "%B %d, %Y", "%b. %d, %Y", "%m/%Y", "%Y",
]


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace; 'not reported' markers become an empty string."""
    if not text:
        return ""
    text = re.sub(r"\s+", " ", text).strip()
    if text.upper() in NOT_REPORTED:
        return ""
    return text


def parse_date(date_str: Optional[str]) -> Optional[date]:
    """Parse the date formats seen in consumer reports."""
    date_str = clean_text(date_str)
    if not date_str:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def parse_money(amount_str: Optional[str]) -> Optional[float]:
    """Parse '$1,234.56' style amounts. Parentheses mean negative."""
    cleaned = clean_text(amount_str)
    if not cleaned:
        return None

    cleaned = re.sub(r"[$,\s]", "", cleaned)

    is_negative = cleaned.startswith("(") and cleaned.endswith(")")
    if is_negative:
        cleaned = cleaned[1:-1]

    try:
        value = float(cleaned)
        return -value if is_negative else value
    except ValueError:
        return None


def format_money(amount_str: Optional[str]) -> str:
    """Normalise an extracted amount to '$x' form, keeping the digits as written."""
    cleaned = clean_text(amount_str)
    if not cleaned:
        return ""
    cleaned = cleaned.replace(" ", "")
    return cleaned if cleaned.startswith("$") else f"${cleaned}"


def years_since(value: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Whole years elapsed since a date, or None when the date is unknown."""
    if value is None:
        return None
    return relativedelta(today or date.today(), value).years


def mask_account_number(account_number: Optional[str]) -> str:
    """Mask all but the last four characters: xxxxxxxx1234."""
    digits = re.sub(r"[^0-9A-Za-z]", "", account_number or "")
    if not digits:
        return ""
    return "xxxxxxxx" + digits[-4:]


def older_than(value: Optional[date], years: int, today: Optional[date] = None) -> bool:
    """True when the date lies more than `years` whole years in the past."""
    if value is None:
        return False
    return value < (today or date.today()) - relativedelta(years=years)
