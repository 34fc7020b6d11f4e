"""Credit Dispute Engine - Letter Layer

Template selection, placeholder filling and the primary -> manual ->
emergency fallback chain.
"""
from .assembler import (
    LetterGenerationError,
    create_emergency_letter,
    generate_dispute_letters,
    generate_letter_with_fallback,
    generate_manual_letter,
    generate_primary_letter,
    select_issues_for_letters,
)
from .bureaus import BUREAU_ADDRESSES, format_bureau_name, get_bureau_address, get_bureau_from_account
from .selector import normalize_issue_type, select_template
from .templates import DEFAULT_TEMPLATE, LETTER_TEMPLATES, get_sample_dispute_language, legal_boilerplate

__all__ = [
    "LetterGenerationError",
    "create_emergency_letter",
    "generate_dispute_letters",
    "generate_letter_with_fallback",
    "generate_manual_letter",
    "generate_primary_letter",
    "select_issues_for_letters",
    "BUREAU_ADDRESSES",
    "format_bureau_name",
    "get_bureau_address",
    "get_bureau_from_account",
    "normalize_issue_type",
    "select_template",
    "DEFAULT_TEMPLATE",
    "LETTER_TEMPLATES",
    "get_sample_dispute_language",
    "legal_boilerplate",
]
