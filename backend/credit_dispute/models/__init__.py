"""Credit Dispute Engine - Data Models"""
from .ssot import (
    # Enums
    Bureau, ImpactLevel, LetterStatus,
    # Parsed report
    BureausPresent, PersonalInfo, CreditReportAccount, CreditReportInquiry,
    PublicRecord, CreditReportData,
    # Analysis output
    IdentifiedIssue,
    # Letters
    UserInfo, DisputeLetter,
)

__all__ = [
    "Bureau", "ImpactLevel", "LetterStatus",
    "BureausPresent", "PersonalInfo", "CreditReportAccount", "CreditReportInquiry",
    "PublicRecord", "CreditReportData",
    "IdentifiedIssue",
    "UserInfo", "DisputeLetter",
]
