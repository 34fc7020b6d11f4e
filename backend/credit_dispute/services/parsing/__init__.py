"""Credit Dispute Engine - Parsing Layer

This layer turns extracted report text into CreditReportData.
"""
from .report_parser import parse_report_content, detect_bureaus, split_sections
from .personal_info import extract_personal_info
from .accounts import (
    extract_accounts,
    extract_accounts_by_creditor,
    generic_accounts_from_types,
    parse_account_block,
)
from .records import extract_inquiries, extract_public_records
from .account_names import clean_account_name, is_valid_account_name

__all__ = [
    "parse_report_content",
    "detect_bureaus",
    "split_sections",
    "extract_personal_info",
    "extract_accounts",
    "extract_accounts_by_creditor",
    "generic_accounts_from_types",
    "parse_account_block",
    "extract_inquiries",
    "extract_public_records",
    "clean_account_name",
    "is_valid_account_name",
]
