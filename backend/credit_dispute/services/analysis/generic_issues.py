"""
Credit Dispute Engine - Generic Issues

Issues that apply to any credit report. Used to pad a short result up to
the minimum count, and as the whole result when detection fails.
"""
from __future__ import annotations
from typing import List

from ...models.ssot import IdentifiedIssue, ImpactLevel
from .legal_references import fcra_citation

MINIMUM_ISSUE_COUNT = 3


def get_mandatory_issues() -> List[IdentifiedIssue]:
    """Issues always worth presenting, in padding order."""
    return [
        IdentifiedIssue(
            type="fcra",
            title="FCRA Verification Rights",
            description=(
                "Under the Fair Credit Reporting Act (FCRA), you have the right to dispute any "
                "information in your credit report, even if it appears accurate."
            ),
            impact=ImpactLevel.HIGH,
            laws=[fcra_citation("611")],
        ),
        IdentifiedIssue(
            type="late_payment",
            title="Late Payment Disputes",
            description=(
                "Late payments must be reported with 100% accuracy. Any discrepancy in dates, "
                "amounts, or frequency allows for successful disputes."
            ),
            impact=ImpactLevel.CRITICAL,
            laws=[fcra_citation("611", with_title=False), fcra_citation("623", with_title=False)],
        ),
        IdentifiedIssue(
            type="inquiry",
            title="Unauthorized Hard Inquiries",
            description=(
                "Inquiries on your credit report may have been made without proper authorization, "
                "which violates the FCRA and can be disputed."
            ),
            impact=ImpactLevel.HIGH,
            laws=[fcra_citation("604", with_title=False), fcra_citation("611", with_title=False)],
        ),
    ]


def get_fallback_issues() -> List[IdentifiedIssue]:
    """Returned in place of detection results when detection itself fails."""
    return [
        IdentifiedIssue(
            type="generic",
            title="Credit Report Accuracy Review",
            description=(
                "Under FCRA §611, you have the right to dispute any information in your credit "
                "report. This letter requests verification of all credit data for accuracy and "
                "completeness."
            ),
            impact=ImpactLevel.HIGH,
            laws=[fcra_citation("611")],
        ),
        IdentifiedIssue(
            type="inquiry_verification",
            title="Hard Inquiry Verification",
            description=(
                "All hard inquiries on your credit report must be authorized by you. This letter "
                "disputes any inquiries that may have been made without proper authorization."
            ),
            impact=ImpactLevel.MEDIUM,
            laws=[fcra_citation("604")],
        ),
        IdentifiedIssue(
            type="account_verification",
            title="Account Information Verification",
            description=(
                "This letter disputes potential inaccuracies in account information, including "
                "balances, payment history, and account status across all reported accounts."
            ),
            impact=ImpactLevel.CRITICAL,
            laws=[fcra_citation("623")],
        ),
        IdentifiedIssue(
            type="personal_info",
            title="Personal Information Verification",
            description=(
                "Personal information on your credit report must be accurate. This letter disputes "
                "any potential errors in your reported name, addresses, employment, or other "
                "personal details."
            ),
            impact=ImpactLevel.MEDIUM,
            laws=[fcra_citation("605")],
        ),
        IdentifiedIssue(
            type="credit_age",
            title="Account Age Verification",
            description=(
                "The age of your credit accounts significantly impacts your score. This letter "
                "disputes any inaccuracies in account opening dates that may be affecting your "
                "credit history length."
            ),
            impact=ImpactLevel.HIGH,
            laws=[fcra_citation("623")],
        ),
    ]


def ensure_minimum_issues(
    issues: List[IdentifiedIssue], minimum: int = MINIMUM_ISSUE_COUNT
) -> List[IdentifiedIssue]:
    """
    Pad with mandatory issues until `minimum` is reached.

    A mandatory issue is skipped when an issue with the same title is
    already present, so padding never duplicates a title.
    """
    if len(issues) >= minimum:
        return list(issues)

    combined = list(issues)
    titles = {i.title for i in combined}
    for issue in get_mandatory_issues() + get_fallback_issues():
        if issue.title in titles:
            continue
        combined.append(issue)
        titles.add(issue.title)
        if len(combined) >= minimum:
            break
    return combined
