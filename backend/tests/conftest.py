"""Shared fixtures for the credit dispute test suite."""
from datetime import date

import pytest


SAMPLE_REPORT_TEXT = """EXPERIAN CREDIT REPORT
Report Date: 10/01/2026

PERSONAL INFORMATION
Name: John Q Consumer
Address: 123 Main St, Springfield, IL 62704
SSN: XXX-XX-1234
Date of Birth: 01/15/1980
Phone: (555) 123-4567

ACCOUNTS

Account Name: ABC COLLECTIONS AGENCY
Account Number: 1234567890
Account Type: Collection
Balance: $1,250
Status: In Collections

Account Name: CAPITAL ONE
Account Number: 4111111111111111
Account Type: Credit Card
Balance: $900
Credit Limit: $1,000
Payment Status: Current
Status: Open

INQUIRIES
03/15/2020  CHASE BANK
06/01/2024  DISCOVER (Soft)

PUBLIC RECORDS

Record Type: Chapter 7 Bankruptcy
Date Filed: 03/01/2012
Status: Discharged
"""


@pytest.fixture
def sample_report_text():
    return SAMPLE_REPORT_TEXT


@pytest.fixture
def today():
    """Fixed reference date so age-based rules are stable."""
    return date(2026, 10, 18)
