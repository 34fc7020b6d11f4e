"""
Credit Dispute Engine - Legal Reference Tables

Static statute lookups used when tagging issues and writing letters.

FCRA sections map to 15 U.S.C. § 1681 + letter suffix:
    Section 604 -> 1681b   (permissible purpose)
    Section 605 -> 1681c   (obsolete information)
    Section 607 -> 1681e   (accuracy procedures)
    Section 611 -> 1681i   (reinvestigation)
    Section 623 -> 1681s-2 (furnisher duties)
FDCPA sections map to 15 U.S.C. § 1692 + letter suffix.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional


# =============================================================================
# STATUTE CITATIONS BY ISSUE CATEGORY
# =============================================================================

FCRA_LAWS: Dict[str, List[str]] = {
    "late_payments": ["15 USC 1681s-2(a)(3)", "15 USC 1681e(b)"],
    "collections": ["15 USC 1692c", "15 USC 1681s-2(a)(3)"],
    "inaccuracies": ["15 USC 1681e(b)", "15 USC 1681i"],
    "inquiries": ["15 USC 1681b(a)(2)", "15 USC 1681m"],
    "personal_info": ["15 USC 1681c", "15 USC 1681g"],
    "student_loans": ["15 USC 1681e(b)", "15 USC 1681i"],
    "bankruptcy": ["15 USC 1681c", "15 USC 1681i", "15 USC 1681e(b)"],
    "consumer_rights": ["15 USC 1681g", "15 USC 1681h", "15 USC 1681i"],
    "fraud_alerts": ["15 USC 1681c-1", "15 USC 1681c-2"],
    "credit_card_liability": ["12 CFR 1026.13"],
    "identity_theft": ["18 USC 1028a"],
}

LAW_DESCRIPTIONS: Dict[str, str] = {
    "15 USC 1681e(b)": "Requires credit reporting agencies to follow reasonable procedures to assure maximum possible accuracy.",
    "15 USC 1681i": "Requires proper investigation of disputed information.",
    "15 USC 1681s-2(a)(3)": "Prohibits furnishers from continuing to report information that is disputed and discovered to be inaccurate.",
    "15 USC 1681c": "Governs the reporting of obsolete information.",
    "15 USC 1681g": "Requires disclosure of all information in consumer file upon request.",
    "15 USC 1681m": "Requires users of consumer reports for adverse actions to provide notice.",
    "15 USC 1692c": "Regulates communication in connection with debt collection.",
    "15 USC 1681b(a)(2)": "Limits permissible purposes for accessing credit reports.",
    "12 CFR 1026.13": "Regulates billing error resolution procedures.",
    "18 USC 1028a": "Criminalizes identity theft.",
}


# =============================================================================
# SECTION TITLES
# =============================================================================

CREDIT_LAWS: Dict[str, Dict] = {
    "FCRA": {
        "name": "Fair Credit Reporting Act",
        "sections": {
            "601": "Short title",
            "602": "Congressional findings and statement of purpose",
            "603": "Definitions; rules of construction",
            "604": "Permissible purposes of consumer reports",
            "605": "Requirements relating to information contained in consumer reports",
            "605A": "Identity theft prevention and credit history restoration",
            "605B": "Block of information resulting from identity theft",
            "609": "Disclosures to consumers",
            "610": "Conditions and form of disclosure to consumers",
            "611": "Procedure in case of disputed accuracy",
            "623": "Responsibilities of furnishers of information",
        },
    },
    "METRO2": {
        "name": "METRO 2 Format",
        "sections": {
            "Compliance": "Compliance with Metro 2 Format",
            "Accuracy": "Data Accuracy",
            "PaymentHistory": "Payment History Profile",
            "AccountStatus": "Account Status Codes",
            "ConsumerInfo": "Consumer Information Indicator",
            "Dates": "Date Reporting",
        },
    },
    "ECOA": {
        "name": "Equal Credit Opportunity Act",
        "sections": {
            "701": "Prohibited discrimination",
            "702": "Definitions",
        },
    },
    "FDCPA": {
        "name": "Fair Debt Collection Practices Act",
        "sections": {
            "803": "Definitions",
            "805": "Communication in connection with debt collection",
            "807": "False or misleading representations",
            "809": "Validation of debts",
        },
    },
}


def fcra_citation(section: str, with_title: bool = True) -> str:
    """
    Display form of an FCRA section.

        >>> fcra_citation("611")
        'FCRA § 611 (Procedure in case of disputed accuracy)'
        >>> fcra_citation("623", with_title=False)
        'FCRA § 623'
    """
    title = CREDIT_LAWS["FCRA"]["sections"].get(section)
    if with_title and title:
        return f"FCRA § {section} ({title})"
    return f"FCRA § {section}"


def fdcpa_citation(section: str) -> str:
    title = CREDIT_LAWS["FDCPA"]["sections"].get(section)
    return f"FDCPA § {section} ({title})" if title else f"FDCPA § {section}"


# =============================================================================
# REFERENCES BY DISPUTE TYPE
# =============================================================================

@dataclass(frozen=True)
class LegalReference:
    law: str
    section: str
    description: str

    def citation(self) -> str:
        return f"{self.law} {self.section}"


LEGAL_REFERENCES_BY_DISPUTE_TYPE: Dict[str, List[LegalReference]] = {
    "identity_theft": [
        LegalReference("FCRA", "Section 605B", "You have the right to block information resulting from identity theft."),
        LegalReference("FCRA", "Section 605A", "You can place a fraud alert on your credit file when you've been a victim of identity theft."),
    ],
    "not_mine": [
        LegalReference("FCRA", "Section 611(a)", "Credit bureaus must conduct a reasonable investigation of disputed information."),
        LegalReference("FCRA", "Section 623(b)", "Furnishers must investigate disputed information reported to them by a consumer reporting agency."),
    ],
    "late_payment": [
        LegalReference("FCRA", "Section 611(a)", "You have the right to dispute inaccurate information about your payment history."),
        LegalReference("METRO 2", "Payment History Profile", "Creditors must accurately report payment history according to Metro 2 standards."),
    ],
    "balance": [
        LegalReference("FCRA", "Section 611(a)", "You have the right to dispute inaccurate balance information."),
        LegalReference("METRO 2", "Accuracy", "Creditors must report the correct current balance per Metro 2 standards."),
    ],
    "account_status": [
        LegalReference("FCRA", "Section 623", "Furnishers must report accurate status information to credit bureaus."),
        LegalReference("METRO 2", "AccountStatus", "Account status must be reported using correct codes per Metro 2 standards."),
    ],
    "account_information": [
        LegalReference("FCRA", "Section 611(a)", "Credit bureaus must investigate disputed account information."),
        LegalReference("METRO 2", "Compliance", "Account information must be reported accurately according to Metro 2 standards."),
    ],
    "personal_information": [
        LegalReference("FCRA", "Section 611(a)", "You have the right to dispute inaccurate personal information."),
        LegalReference("METRO 2", "ConsumerInfo", "Consumer information must be reported accurately per Metro 2 standards."),
    ],
    "closed_account": [
        LegalReference("FCRA", "Section 623", "Furnishers must report accurate information about account closure."),
        LegalReference("METRO 2", "AccountStatus", "Closed accounts must be reported with the correct status code."),
    ],
    "dates": [
        LegalReference("FCRA", "Section 611(a)", "You have the right to dispute inaccurate dates on your credit report."),
        LegalReference("METRO 2", "Dates", "Dates must be reported accurately according to Metro 2 standards."),
    ],
    "collection": [
        LegalReference("FDCPA", "Section 809", "Debt collectors must validate debts when disputed by consumers."),
        LegalReference("FCRA", "Section 623(a)(3)", "Furnishers may not report disputed information without noting the dispute."),
    ],
}


def dispute_type_for(field_name: str, context: Optional[str] = None) -> str:
    """Map a disputed field (plus free-text context) to a dispute type key."""
    field_lower = (field_name or "").lower()
    context_lower = (context or "").lower()

    if "collection" in field_lower or "collection" in context_lower:
        return "collection"
    if "name" in field_lower or "address" in field_lower:
        return "personal_information"
    if "balance" in field_lower or "balance" in context_lower:
        return "balance"
    if "payment" in field_lower or "late" in field_lower or "late" in context_lower:
        return "late_payment"
    if "status" in field_lower or "closed" in context_lower or "open" in context_lower:
        return "account_status"
    if "date" in field_lower or "date" in context_lower:
        return "dates"
    if "not mine" in context_lower or "not my account" in context_lower:
        return "not_mine"
    if "identity theft" in context_lower or "fraud" in context_lower:
        return "identity_theft"
    return "account_information"


def get_legal_references_for_dispute(field_name: str, context: Optional[str] = None) -> List[LegalReference]:
    """Applicable references for a disputed field, defaulting to account information."""
    return LEGAL_REFERENCES_BY_DISPUTE_TYPE[dispute_type_for(field_name, context)]
