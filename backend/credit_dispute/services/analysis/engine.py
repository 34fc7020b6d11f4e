"""
Credit Dispute Engine - Issue Detector

Runs every rule set against a CreditReportData in a fixed order and pads
the result to the minimum issue count. The returned list is never empty.
"""
from __future__ import annotations
import logging
from collections import Counter
from datetime import date
from typing import List, Optional

from ...models.ssot import CreditReportData, IdentifiedIssue
from .generic_issues import MINIMUM_ISSUE_COUNT, ensure_minimum_issues, get_fallback_issues
from .issue_rules import AccountRules, InquiryRules, PersonalInfoRules, PublicRecordRules, TextRules

logger = logging.getLogger(__name__)


class IssueDetector:
    """
    Deterministic issue detection.

    Order: personal info, per-account chain, duplicate names, inquiries,
    public records, raw text (only when no accounts were parsed), padding.
    """

    def __init__(self):
        self.personal_info_rules = PersonalInfoRules()
        self.account_rules = AccountRules()
        self.inquiry_rules = InquiryRules()
        self.public_record_rules = PublicRecordRules()
        self.text_rules = TextRules()

    def detect(self, report: CreditReportData, today: Optional[date] = None) -> List[IdentifiedIssue]:
        """
        Detect issues in a parsed report.

        Args:
            report: parsed report data
            today: reference date for age checks (defaults to date.today())

        Returns:
            At least MINIMUM_ISSUE_COUNT issues. If any rule raises, the
            fallback generic list is returned instead.
        """
        try:
            issues = self._run_rules(report, today)
        except Exception as e:
            logger.error(f"Issue detection failed, using fallback issues: {e}")
            return get_fallback_issues()

        if len(issues) < MINIMUM_ISSUE_COUNT:
            logger.info(f"Only {len(issues)} issues detected, padding with mandatory issues")
        issues = ensure_minimum_issues(issues)

        by_type = Counter(i.type for i in issues)
        logger.info(f"Issue detection complete: {len(issues)} issues {dict(by_type)}")
        return issues

    def _run_rules(self, report: CreditReportData, today: Optional[date]) -> List[IdentifiedIssue]:
        raw_text = report.raw_text or ""
        issues: List[IdentifiedIssue] = []

        issues.extend(self.personal_info_rules.check_multiple_names(raw_text))
        issues.extend(self.personal_info_rules.check_multiple_addresses(raw_text))
        issues.extend(self.personal_info_rules.check_multiple_employers(raw_text))
        issues.extend(self.personal_info_rules.check_ssn_variations(raw_text))

        for account in report.accounts:
            issue = self.account_rules.classify(account, report.accounts)
            if issue is not None:
                issues.append(issue)
        issues.extend(self.account_rules.check_duplicate_names(report.accounts))

        for inquiry in report.inquiries:
            issues.extend(self.inquiry_rules.check_hard_inquiry(inquiry))
        issues.extend(self.inquiry_rules.check_old_inquiries(report.inquiries, today))

        issues.extend(self.public_record_rules.check_records(report.public_records, raw_text, today))

        if not any(not account.is_placeholder for account in report.accounts):
            logger.info("No accounts parsed, scanning raw text for issues")
            issues.extend(self.text_rules.check_raw_text(raw_text))

        return issues


def detect_issues(report: CreditReportData, today: Optional[date] = None) -> List[IdentifiedIssue]:
    return IssueDetector().detect(report, today)
