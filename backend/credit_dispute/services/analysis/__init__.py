"""Credit Dispute Engine - Analysis Layer"""
from .engine import IssueDetector, detect_issues
from .generic_issues import ensure_minimum_issues, get_fallback_issues, get_mandatory_issues
from .legal_references import (
    FCRA_LAWS,
    CREDIT_LAWS,
    LegalReference,
    fcra_citation,
    fdcpa_citation,
    get_legal_references_for_dispute,
)

__all__ = [
    "IssueDetector",
    "detect_issues",
    "ensure_minimum_issues",
    "get_fallback_issues",
    "get_mandatory_issues",
    "FCRA_LAWS",
    "CREDIT_LAWS",
    "LegalReference",
    "fcra_citation",
    "fdcpa_citation",
    "get_legal_references_for_dispute",
]
