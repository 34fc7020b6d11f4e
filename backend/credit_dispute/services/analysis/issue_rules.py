"""
Credit Dispute Engine - Issue Rules

Keyword and threshold checks over parsed report data. Every check is a
pure function of its inputs (plus an injectable "today"), so two runs over
the same CreditReportData produce the same issues.

Rule Categories:
1. Personal Info Rules - aliases, address/employer counts, SSN variations
2. Account Rules - one classification per account, then duplicate names
3. Inquiry Rules - hard inquiries and inquiries past the 2-year window
4. Public Record Rules - bankruptcy age
5. Text Rules - keyword scan of the raw text when no account was parsed
"""
from __future__ import annotations
import logging
import re
from collections import OrderedDict
from datetime import date
from typing import List, Optional

from ...models.ssot import (
    CreditReportAccount, CreditReportInquiry, IdentifiedIssue, ImpactLevel, PublicRecord
)
from ..parsing.account_names import normalize_name_key
from ..parsing.normalize import older_than, parse_date, parse_money, years_since
from .legal_references import FCRA_LAWS, fcra_citation, fdcpa_citation

logger = logging.getLogger(__name__)


# =============================================================================
# THRESHOLDS AND KEYWORDS
# =============================================================================

UTILIZATION_THRESHOLD = 0.70
STUDENT_LOAN_BALANCE_TOLERANCE = 0.01
INQUIRY_MAX_AGE_YEARS = 2
BANKRUPTCY_MAX_AGE_YEARS = 10
MAX_ADDRESS_MATCHES = 3
MAX_EMPLOYER_MATCHES = 2

STUDENT_LOAN_KEYWORDS = (
    "student", "navient", "nelnet", "sallie", "great lakes", "dept of ed",
    "department of education", "mohela", "fedloan", "aidvantage", "edfinancial",
)

LATE_PATTERN = re.compile(r"\blate\b|delinquen|past\s+due|\b(?:30|60|90|120)[\s_-]?days?\b", re.IGNORECASE)
CHARGE_OFF_PATTERN = re.compile(r"charge[\s_-]?off|charged[\s_-]?off", re.IGNORECASE)
BANKRUPTCY_PATTERN = re.compile(r"bankrupt|chapter[\s_-]?(?:7|11|13)\b", re.IGNORECASE)

ALIAS_PATTERN = re.compile(
    r"also\s+known\s+as|\ba\.?k\.?a\.?\b|\balias(?:es)?\b|formerly\s+known\s+as|previous\s+name",
    re.IGNORECASE,
)
ADDRESS_LINE_PATTERN = re.compile(r"address(?:es)?(?:\s|:)+[^\n]{1,50}(?:\n|$)", re.IGNORECASE)
EMPLOYER_LINE_PATTERN = re.compile(r"employers?(?:\s|:)+[^\n]{1,50}(?:\n|$)", re.IGNORECASE)
SSN_VALUE_PATTERN = re.compile(r"\b(?:\d{3}|X{3}|\*{3})-(?:\d{2}|X{2}|\*{2})-(\d{4})\b", re.IGNORECASE)
SSN_VARIATION_PATTERN = re.compile(
    r"(?:\bssn\b|social\s+security\s+number)[^\n]{0,60}?\b(?:variation|invalid|incorrect|different|multiple)",
    re.IGNORECASE,
)
BANKRUPTCY_DATE_PATTERN = re.compile(
    r"bankruptcy[^\n]{0,30}?((?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.? \d{1,2}, \d{4}|\d{1,2}/\d{1,2}/\d{4})",
    re.IGNORECASE,
)

RAW_LATE_KEYWORDS = ("late", "30 day", "60 day", "90 day", "delinquent", "past due", "overdue")
RAW_COLLECTION_KEYWORDS = ("collection", "charged off", "charge-off", "charge off")
RAW_INQUIRY_KEYWORDS = ("inquiry", "inquiries", "credit check")
RAW_STUDENT_LOAN_KEYWORDS = ("student loan", "dept of ed", "department of education", "navient", "nelnet", "great lakes", "sallie mae")
RAW_MEDICAL_KEYWORDS = ("medical", "hospital", "healthcare", "clinic", "physician", "doctor")


def _contains_any(text: str, keywords) -> bool:
    lowered = (text or "").lower()
    return any(k in lowered for k in keywords)


def account_balance(account: CreditReportAccount) -> Optional[float]:
    """Numeric balance, preferring the balance field over current_balance."""
    value = parse_money(account.balance)
    if value is None:
        value = parse_money(account.current_balance)
    return value


def balances_within_tolerance(a: float, b: float, tolerance: float = STUDENT_LOAN_BALANCE_TOLERANCE) -> bool:
    if a <= 0 or b <= 0:
        return False
    return abs(a - b) <= tolerance * max(a, b)


# =============================================================================
# PERSONAL INFO RULES
# =============================================================================

class PersonalInfoRules:
    """Checks run against the raw text around the consumer identity block."""

    @staticmethod
    def check_multiple_names(raw_text: str) -> List[IdentifiedIssue]:
        if not ALIAS_PATTERN.search(raw_text or ""):
            return []
        return [IdentifiedIssue(
            type="multiple_names",
            title="Multiple Names on Credit Report",
            description=(
                "Your credit report shows multiple names or aliases. This can be a sign of "
                "identity theft or credit file mixing."
            ),
            impact=ImpactLevel.HIGH,
            laws=list(FCRA_LAWS["personal_info"]),
        )]

    @staticmethod
    def check_multiple_addresses(raw_text: str) -> List[IdentifiedIssue]:
        matches = ADDRESS_LINE_PATTERN.findall(raw_text or "")
        if len(matches) <= MAX_ADDRESS_MATCHES:
            return []
        return [IdentifiedIssue(
            type="multiple_addresses",
            title="Multiple Addresses Listed",
            description=(
                f"Your credit report lists {len(matches)} addresses. Excessive or incorrect "
                f"addresses should be disputed."
            ),
            impact=ImpactLevel.MEDIUM,
            laws=list(FCRA_LAWS["personal_info"]),
        )]

    @staticmethod
    def check_multiple_employers(raw_text: str) -> List[IdentifiedIssue]:
        matches = EMPLOYER_LINE_PATTERN.findall(raw_text or "")
        if len(matches) <= MAX_EMPLOYER_MATCHES:
            return []
        return [IdentifiedIssue(
            type="multiple_employers",
            title="Multiple Employers Listed",
            description=(
                "Your credit report shows multiple employers. Incorrect employment "
                "information should be disputed."
            ),
            impact=ImpactLevel.MEDIUM,
            laws=list(FCRA_LAWS["personal_info"]),
        )]

    @staticmethod
    def check_ssn_variations(raw_text: str) -> List[IdentifiedIssue]:
        """
        Flag SSN inconsistencies: more than one distinct last-four on file,
        or an SSN line that itself mentions a variation.
        """
        text = raw_text or ""
        last_fours = {m.group(1) for m in SSN_VALUE_PATTERN.finditer(text)}
        if len(last_fours) <= 1 and not SSN_VARIATION_PATTERN.search(text):
            return []
        return [IdentifiedIssue(
            type="ssn_issues",
            title="Social Security Number Inconsistency",
            description=(
                "There may be issues with your Social Security Number reporting. Incorrect "
                "SSN information is a serious issue."
            ),
            impact=ImpactLevel.CRITICAL,
            laws=FCRA_LAWS["personal_info"] + FCRA_LAWS["identity_theft"],
        )]


# =============================================================================
# ACCOUNT RULES
# =============================================================================

class AccountRules:
    """
    Per-account classification.

    classify() is an ordered chain: the first matching check decides the
    single issue raised for the account.
    """

    @staticmethod
    def is_collection(account: CreditReportAccount) -> bool:
        if "collect" in f"{account.account_name} {account.account_type}".lower():
            return True
        return "collection" in f"{account.status} {account.payment_status}".lower()

    @staticmethod
    def is_late(account: CreditReportAccount) -> bool:
        text = " ".join([account.status, account.payment_status] + list(account.remarks))
        return bool(LATE_PATTERN.search(text))

    @staticmethod
    def is_charge_off(account: CreditReportAccount) -> bool:
        return bool(CHARGE_OFF_PATTERN.search(f"{account.status} {account.payment_status}"))

    @staticmethod
    def is_student_loan(account: CreditReportAccount) -> bool:
        return _contains_any(f"{account.account_name} {account.account_type}", STUDENT_LOAN_KEYWORDS)

    @staticmethod
    def utilization(account: CreditReportAccount) -> Optional[float]:
        balance = parse_money(account.current_balance) or parse_money(account.balance)
        limit = parse_money(account.credit_limit)
        if balance is None or not limit or limit <= 0:
            return None
        return balance / limit

    @staticmethod
    def find_similar_balance(
        account: CreditReportAccount, accounts: List[CreditReportAccount]
    ) -> Optional[CreditReportAccount]:
        """Another account whose balance is within 1% of this one (pairwise scan)."""
        balance = account_balance(account)
        if balance is None:
            return None
        for other in accounts:
            if other is account:
                continue
            other_balance = account_balance(other)
            if other_balance is not None and balances_within_tolerance(balance, other_balance):
                return other
        return None

    @staticmethod
    def check_collection(account: CreditReportAccount) -> IdentifiedIssue:
        return IdentifiedIssue(
            type="collection_account",
            title=f"Collection Account ({account.account_name})",
            description=(
                f"{account.account_name} is reported as a collection account. The collector must "
                f"validate this debt, and the furnisher must be able to verify every detail "
                f"being reported."
            ),
            impact=ImpactLevel.CRITICAL,
            laws=FCRA_LAWS["collections"] + [fdcpa_citation("809"), fcra_citation("623")],
            account=account,
        )

    @staticmethod
    def check_late_payment(account: CreditReportAccount) -> IdentifiedIssue:
        reported = account.payment_status or account.status or "late"
        return IdentifiedIssue(
            type="late_payment",
            title=f"Late Payment ({account.account_name})",
            description=(
                f"Your {account.account_name} account shows a \"{reported}\" status. Late payments "
                f"must be reported with complete accuracy, and any discrepancy is grounds for dispute."
            ),
            impact=ImpactLevel.HIGH,
            laws=list(FCRA_LAWS["late_payments"]),
            account=account,
        )

    @staticmethod
    def check_charge_off(account: CreditReportAccount) -> IdentifiedIssue:
        return IdentifiedIssue(
            type="charge_off",
            title=f"Charged-Off Account ({account.account_name})",
            description=(
                f"Your {account.account_name} account is reported as charged off. The balance, "
                f"status and dates of a charge-off should be verified for accuracy."
            ),
            impact=ImpactLevel.HIGH,
            laws=FCRA_LAWS["inaccuracies"] + [fcra_citation("623")],
            account=account,
        )

    @staticmethod
    def check_student_loan(
        account: CreditReportAccount, accounts: List[CreditReportAccount]
    ) -> IdentifiedIssue:
        duplicate = AccountRules.find_similar_balance(account, accounts)
        if duplicate is not None:
            return IdentifiedIssue(
                type="duplicate_student_loans",
                title=f"Potentially Duplicate Student Loan ({account.account_name})",
                description=(
                    f"Your {account.account_name} loan has nearly the same balance as "
                    f"{duplicate.account_name}. This often happens when loans are sold to a new "
                    f"servicer and the old tradeline is never updated."
                ),
                impact=ImpactLevel.CRITICAL,
                laws=FCRA_LAWS["student_loans"] + ["15 USC 1681s-2(a)(3)"],
                account=account,
            )
        return IdentifiedIssue(
            type="student_loans",
            title=f"Student Loan Verification ({account.account_name})",
            description=(
                f"Your {account.account_name} student loan should be verified for accurate "
                f"reporting, including status updates and current Department of Education guidelines."
            ),
            impact=ImpactLevel.HIGH,
            laws=list(FCRA_LAWS["student_loans"]),
            account=account,
        )

    @staticmethod
    def check_remarks(account: CreditReportAccount) -> IdentifiedIssue:
        return IdentifiedIssue(
            type="account_remarks",
            title=f"Negative Remarks ({account.account_name})",
            description=(
                f"Your {account.account_name} account has the following remarks: "
                f"{', '.join(account.remarks)}. These can be disputed if inaccurate."
            ),
            impact=ImpactLevel.HIGH,
            laws=[fcra_citation("605"), fcra_citation("611")],
            account=account,
        )

    @staticmethod
    def check_utilization(account: CreditReportAccount, rate: float) -> IdentifiedIssue:
        return IdentifiedIssue(
            type="high_utilization",
            title=f"High Credit Utilization ({account.account_name})",
            description=(
                f"Your {account.account_name} account shows {round(rate * 100)}% utilization. "
                f"Any inaccuracy in the reported balance or limit should be disputed."
            ),
            impact=ImpactLevel.HIGH,
            laws=[fcra_citation("611")],
            account=account,
        )

    @staticmethod
    def classify(
        account: CreditReportAccount, accounts: List[CreditReportAccount]
    ) -> Optional[IdentifiedIssue]:
        if AccountRules.is_collection(account):
            return AccountRules.check_collection(account)
        if AccountRules.is_late(account):
            return AccountRules.check_late_payment(account)
        if AccountRules.is_charge_off(account):
            return AccountRules.check_charge_off(account)
        if AccountRules.is_student_loan(account):
            return AccountRules.check_student_loan(account, accounts)
        if account.remarks:
            return AccountRules.check_remarks(account)

        rate = AccountRules.utilization(account)
        if rate is not None and rate > UTILIZATION_THRESHOLD:
            return AccountRules.check_utilization(account, rate)
        return None

    @staticmethod
    def check_duplicate_names(accounts: List[CreditReportAccount]) -> List[IdentifiedIssue]:
        """One issue per creditor name that appears more than once."""
        groups: "OrderedDict[str, List[CreditReportAccount]]" = OrderedDict()
        for account in accounts:
            key = normalize_name_key(account.account_name)
            if key:
                groups.setdefault(key, []).append(account)

        issues = []
        for group in groups.values():
            if len(group) < 2:
                continue
            first = group[0]
            issues.append(IdentifiedIssue(
                type="duplicate_account",
                title=f"Duplicate Account ({first.account_name})",
                description=(
                    f"The {first.account_name} account appears {len(group)} times on your report. "
                    f"Duplicate tradelines can inflate your reported debt and utilization."
                ),
                impact=ImpactLevel.HIGH,
                laws=[fcra_citation("611"), fcra_citation("623")],
                account=first,
            ))
        return issues


# =============================================================================
# INQUIRY RULES
# =============================================================================

class InquiryRules:

    @staticmethod
    def is_hard(inquiry: CreditReportInquiry) -> bool:
        kind = (inquiry.type or "").lower()
        return not kind or "hard" in kind

    @staticmethod
    def check_hard_inquiry(inquiry: CreditReportInquiry) -> List[IdentifiedIssue]:
        if not InquiryRules.is_hard(inquiry):
            return []
        when = inquiry.inquiry_date or "an unknown date"
        return [IdentifiedIssue(
            type="inquiry",
            title=f"Unauthorized Inquiry ({inquiry.creditor})",
            description=(
                f"Hard inquiry from {inquiry.creditor} on {when}. If you did not authorize this "
                f"inquiry it can be disputed and removed."
            ),
            impact=ImpactLevel.MEDIUM,
            laws=list(FCRA_LAWS["inquiries"]),
        )]

    @staticmethod
    def check_old_inquiries(
        inquiries: List[CreditReportInquiry], today: Optional[date] = None
    ) -> List[IdentifiedIssue]:
        old = [
            i for i in inquiries
            if older_than(parse_date(i.inquiry_date), INQUIRY_MAX_AGE_YEARS, today)
        ]
        if not old:
            return []
        return [IdentifiedIssue(
            type="old_inquiries",
            title="Outdated Inquiries (Over 2 Years)",
            description=(
                f"Your credit report contains {len(old)} inquiries that are over 2 years old. "
                f"These should be removed as they are beyond the reporting period."
            ),
            impact=ImpactLevel.MEDIUM,
            laws=list(FCRA_LAWS["inquiries"]),
        )]


# =============================================================================
# PUBLIC RECORD RULES
# =============================================================================

class PublicRecordRules:

    @staticmethod
    def is_bankruptcy(record: PublicRecord) -> bool:
        return bool(BANKRUPTCY_PATTERN.search(record.record_type or ""))

    @staticmethod
    def check_bankruptcy(filed: Optional[date], today: Optional[date] = None) -> IdentifiedIssue:
        if older_than(filed, BANKRUPTCY_MAX_AGE_YEARS, today):
            return IdentifiedIssue(
                type="old_bankruptcy",
                title="Outdated Bankruptcy Reporting",
                description=(
                    f"Your credit report shows a bankruptcy filed {years_since(filed, today)} years ago. "
                    f"Bankruptcies must be removed after 10 years."
                ),
                impact=ImpactLevel.CRITICAL,
                laws=list(FCRA_LAWS["bankruptcy"]),
            )
        return IdentifiedIssue(
            type="bankruptcy_verification",
            title="Bankruptcy Information Verification",
            description=(
                "Your bankruptcy information should be verified for accuracy, including dates, "
                "accounts included, and current status."
            ),
            impact=ImpactLevel.HIGH,
            laws=list(FCRA_LAWS["bankruptcy"]),
        )

    @staticmethod
    def check_records(
        records: List[PublicRecord], raw_text: str = "", today: Optional[date] = None
    ) -> List[IdentifiedIssue]:
        """
        Bankruptcy age check. Without parsed records, a bankruptcy mention
        in the raw text is dated from the text itself.
        """
        bankruptcies = [r for r in records if PublicRecordRules.is_bankruptcy(r)]
        if bankruptcies:
            return [PublicRecordRules.check_bankruptcy(parse_date(r.date), today) for r in bankruptcies]

        if records or not BANKRUPTCY_PATTERN.search(raw_text or ""):
            return []
        match = BANKRUPTCY_DATE_PATTERN.search(raw_text)
        filed = parse_date(match.group(1)) if match else None
        return [PublicRecordRules.check_bankruptcy(filed, today)]


# =============================================================================
# TEXT RULES
# =============================================================================

class TextRules:
    """Keyword scan used when the parser recovered only placeholder accounts, or none."""

    @staticmethod
    def check_raw_text(raw_text: str) -> List[IdentifiedIssue]:
        issues = []
        if not raw_text:
            return issues

        if _contains_any(raw_text, RAW_LATE_KEYWORDS):
            issues.append(IdentifiedIssue(
                type="late_payment",
                title="Late Payment Records Detected",
                description=(
                    "Your report appears to contain late payment information. These negative items "
                    "have a significant impact on your score and should be verified for accuracy."
                ),
                impact=ImpactLevel.CRITICAL,
                laws=[fcra_citation("623"), fcra_citation("611")],
            ))

        if _contains_any(raw_text, RAW_COLLECTION_KEYWORDS):
            issues.append(IdentifiedIssue(
                type="collection",
                title="Collection Accounts Detected",
                description=(
                    "Your report appears to contain collection accounts. These should be verified "
                    "for accuracy and proper reporting."
                ),
                impact=ImpactLevel.CRITICAL,
                laws=[fcra_citation("623"), fcra_citation("611"), fdcpa_citation("809")],
            ))

        if _contains_any(raw_text, RAW_INQUIRY_KEYWORDS):
            issues.append(IdentifiedIssue(
                type="inquiry",
                title="Credit Inquiries Detected",
                description=(
                    "Your report contains credit inquiries. These should be reviewed for accuracy "
                    "and authorization."
                ),
                impact=ImpactLevel.MEDIUM,
                laws=[fcra_citation("604"), fcra_citation("611")],
            ))

        if _contains_any(raw_text, RAW_STUDENT_LOAN_KEYWORDS):
            issues.append(IdentifiedIssue(
                type="student_loans",
                title="Student Loan Accounts Detected",
                description=(
                    "Your report contains student loan accounts. These should be reviewed for "
                    "compliance with current Department of Education reporting guidelines."
                ),
                impact=ImpactLevel.HIGH,
                laws=[fcra_citation("623"), "Department of Education Guidelines"],
            ))

        if _contains_any(raw_text, RAW_MEDICAL_KEYWORDS):
            issues.append(IdentifiedIssue(
                type="medical",
                title="Medical Collections Review",
                description=(
                    "Your report may contain medical collections or bills. These receive special "
                    "treatment under current reporting rules and should be carefully reviewed."
                ),
                impact=ImpactLevel.HIGH,
                laws=[fcra_citation("623", with_title=False), "FCRA § 604(g) (Medical information)"],
            ))

        return issues
