"""
Tests for issue detection.

Test Coverage:
1. Collection, late payment, charge-off, student loan, remarks and utilization classification
2. One issue per account (first matching rule wins)
3. Duplicate creditor names and near-duplicate student loan balances
4. Hard inquiries and inquiries older than 2 years
5. Bankruptcy age (10 year window) from records and from raw text
6. Personal info checks (aliases, SSN variations)
7. Raw text scan when no real (non-placeholder) accounts were parsed
8. Minimum issue count, padding without duplicate titles, fallback on failure
9. Determinism across repeated runs
"""
import pytest
from datetime import date

from credit_dispute.models import (
    CreditReportAccount,
    CreditReportData,
    CreditReportInquiry,
    ImpactLevel,
    PublicRecord,
)
from credit_dispute.services.analysis import detect_issues


def _report(accounts=None, inquiries=None, records=None, raw_text=""):
    return CreditReportData(
        accounts=accounts or [],
        inquiries=inquiries or [],
        public_records=records or [],
        raw_text=raw_text,
    )


def _types(issues):
    return [i.type for i in issues]


# =============================================================================
# TEST: ACCOUNT CLASSIFICATION
# =============================================================================

class TestAccountClassification:
    """Per-account rule chain."""

    def test_collection_account(self, today):
        account = CreditReportAccount(
            account_name="ABC COLLECTIONS AGENCY", balance="$1,250", status="in collections"
        )
        issues = detect_issues(_report([account]), today)

        collection = [i for i in issues if i.type == "collection_account"]
        assert len(collection) == 1
        assert collection[0].impact == ImpactLevel.CRITICAL
        assert collection[0].account is account
        assert "ABC COLLECTIONS AGENCY" in collection[0].title
        assert any(law.startswith("FDCPA") or law.startswith("FCRA") for law in collection[0].laws)

    def test_collection_status_on_ordinary_creditor(self, today):
        account = CreditReportAccount(account_name="City Hospital", payment_status="Placed for collection")
        assert _types(detect_issues(_report([account]), today))[0] == "collection_account"

    def test_late_payment(self, today):
        account = CreditReportAccount(account_name="CHASE", payment_status="30 Days Late")
        issues = detect_issues(_report([account]), today)

        assert issues[0].type == "late_payment"
        assert issues[0].impact == ImpactLevel.HIGH

    def test_charge_off(self, today):
        account = CreditReportAccount(account_name="CREDIT ONE", status="Charged Off")
        assert detect_issues(_report([account]), today)[0].type == "charge_off"

    def test_collection_wins_over_late(self, today):
        account = CreditReportAccount(
            account_name="MIDLAND", status="Collection", payment_status="90 days past due"
        )
        issues = detect_issues(_report([account]), today)

        account_issues = [i for i in issues if i.account is account]
        assert _types(account_issues) == ["collection_account"]

    def test_remarks(self, today):
        account = CreditReportAccount(account_name="DISCOVER", remarks=["Account closed by grantor"])
        issues = detect_issues(_report([account]), today)

        assert issues[0].type == "account_remarks"
        assert "Account closed by grantor" in issues[0].description

    def test_high_utilization(self, today):
        account = CreditReportAccount(account_name="CAPITAL ONE", current_balance="$900", credit_limit="$1,000")
        issues = detect_issues(_report([account]), today)

        assert issues[0].type == "high_utilization"
        assert "90%" in issues[0].description

    def test_utilization_at_threshold_is_not_flagged(self, today):
        account = CreditReportAccount(account_name="CAPITAL ONE", current_balance="$700", credit_limit="$1,000")
        issues = detect_issues(_report([account]), today)

        assert "high_utilization" not in _types(issues)

    def test_clean_account_raises_nothing(self, today):
        account = CreditReportAccount(account_name="USAA", balance="$100", credit_limit="$5,000", status="Open")
        issues = detect_issues(_report([account]), today)

        assert all(i.account is None for i in issues)


class TestStudentLoans:
    """Student loan verification and near-duplicate balances."""

    def test_balances_within_one_percent_are_duplicates(self, today):
        first = CreditReportAccount(account_name="NAVIENT", account_type="Student Loan", balance="$10,000")
        second = CreditReportAccount(account_name="NELNET", account_type="Student Loan", balance="$10,050")
        issues = detect_issues(_report([first, second]), today)

        duplicates = [i for i in issues if i.type == "duplicate_student_loans"]
        assert [i.account for i in duplicates] == [first, second]
        assert all(i.impact == ImpactLevel.CRITICAL for i in duplicates)

    def test_distinct_balances_get_verification(self, today):
        first = CreditReportAccount(account_name="NAVIENT", account_type="Student Loan", balance="$10,000")
        second = CreditReportAccount(account_name="MOHELA", account_type="Student Loan", balance="$20,000")
        issues = detect_issues(_report([first, second]), today)

        assert _types(issues)[:2] == ["student_loans", "student_loans"]

    def test_balance_tolerance(self):
        from credit_dispute.services.analysis.issue_rules import balances_within_tolerance

        assert balances_within_tolerance(10000, 10100) is True
        assert balances_within_tolerance(10000, 10200) is False
        assert balances_within_tolerance(0, 0) is False


class TestDuplicateNames:
    """Accounts sharing a creditor name."""

    def test_duplicate_names_ignore_case_and_spacing(self, today):
        accounts = [
            CreditReportAccount(account_name="Bank of America", status="Open"),
            CreditReportAccount(account_name="BANKOF AMERICA", status="Open"),
        ]
        issues = detect_issues(_report(accounts), today)

        duplicates = [i for i in issues if i.type == "duplicate_account"]
        assert len(duplicates) == 1
        assert "2 times" in duplicates[0].description


# =============================================================================
# TEST: INQUIRIES AND PUBLIC RECORDS
# =============================================================================

class TestInquiries:
    """Hard inquiry and inquiry age checks."""

    def test_hard_inquiry(self, today):
        inquiry = CreditReportInquiry(creditor="CHASE BANK", inquiry_date="09/01/2026")
        issues = detect_issues(_report(inquiries=[inquiry]), today)

        assert issues[0].type == "inquiry"
        assert issues[0].title == "Unauthorized Inquiry (CHASE BANK)"
        assert issues[0].impact == ImpactLevel.MEDIUM
        assert "old_inquiries" not in _types(issues)

    def test_soft_inquiry_is_not_disputed(self, today):
        inquiry = CreditReportInquiry(creditor="DISCOVER", inquiry_date="09/01/2026", type="Soft Inquiry")
        issues = detect_issues(_report(inquiries=[inquiry]), today)

        assert not any(i.title.startswith("Unauthorized Inquiry (") for i in issues)

    def test_old_inquiries_are_counted_once(self, today):
        inquiries = [
            CreditReportInquiry(creditor="CHASE BANK", inquiry_date="03/15/2020"),
            CreditReportInquiry(creditor="AMEX", inquiry_date="01/02/2019", type="Soft Inquiry"),
            CreditReportInquiry(creditor="CITI", inquiry_date="09/01/2026"),
        ]
        issues = detect_issues(_report(inquiries=inquiries), today)

        old = [i for i in issues if i.type == "old_inquiries"]
        assert len(old) == 1
        assert "2 inquiries" in old[0].description

    def test_undated_inquiry_is_not_old(self, today):
        inquiry = CreditReportInquiry(creditor="CHASE BANK", inquiry_date="")
        assert "old_inquiries" not in _types(detect_issues(_report(inquiries=[inquiry]), today))


class TestPublicRecords:
    """Bankruptcy reporting period."""

    def test_bankruptcy_older_than_ten_years(self, today):
        record = PublicRecord(record_type="Chapter 7 Bankruptcy", date="03/01/2012")
        issues = detect_issues(_report(records=[record]), today)

        assert issues[0].type == "old_bankruptcy"
        assert issues[0].impact == ImpactLevel.CRITICAL
        assert "14 years ago" in issues[0].description

    def test_recent_bankruptcy_needs_verification(self, today):
        record = PublicRecord(record_type="Chapter 13 Bankruptcy", date="03/01/2020")
        issues = detect_issues(_report(records=[record]), today)

        assert issues[0].type == "bankruptcy_verification"
        assert issues[0].impact == ImpactLevel.HIGH

    def test_bankruptcy_dated_from_raw_text(self, today):
        issues = detect_issues(_report(raw_text="Bankruptcy filed 05/10/2011 in district court"), today)
        assert "old_bankruptcy" in _types(issues)

    def test_non_bankruptcy_record_is_ignored(self, today):
        record = PublicRecord(record_type="Civil Judgment", date="03/01/2010")
        issues = detect_issues(_report(records=[record]), today)

        assert not {"old_bankruptcy", "bankruptcy_verification"} & set(_types(issues))


# =============================================================================
# TEST: PERSONAL INFO AND RAW TEXT
# =============================================================================

class TestPersonalInfo:
    """Checks over the identity portion of the raw text."""

    def test_alias(self, today):
        issues = detect_issues(_report(raw_text="Name: John Smith\nAlso known as: Johnny Smith\n"), today)
        assert issues[0].type == "multiple_names"

    def test_ssn_variations(self, today):
        text = "SSN: 123-45-6789\nOther SSN reported: XXX-XX-9999\n"
        issues = detect_issues(_report(raw_text=text), today)

        ssn = [i for i in issues if i.type == "ssn_issues"]
        assert len(ssn) == 1
        assert ssn[0].impact == ImpactLevel.CRITICAL

    def test_single_ssn_is_fine(self, today):
        issues = detect_issues(_report(raw_text="SSN: XXX-XX-1234\n"), today)
        assert "ssn_issues" not in _types(issues)

    def test_many_addresses(self, today):
        text = "".join(f"Address: {n} Main St\n" for n in range(1, 5))
        issues = detect_issues(_report(raw_text=text), today)

        assert "multiple_addresses" in _types(issues)


class TestRawTextScan:
    """Keyword scan when the parser found no real accounts."""

    def test_keywords(self, today):
        text = "Medical collection from City Hospital, 60 days past due. Student loan with Navient."
        types = _types(detect_issues(_report(raw_text=text), today))

        for expected in ("late_payment", "collection", "student_loans", "medical"):
            assert expected in types

    def test_not_used_when_accounts_exist(self, today):
        account = CreditReportAccount(account_name="USAA", status="Open")
        issues = detect_issues(_report([account], raw_text="medical collection"), today)

        assert "medical" not in _types(issues)

    def test_used_when_only_placeholder_accounts_parsed(self, today):
        from credit_dispute.services.parsing import parse_report_content

        text = (
            "EXPERIAN\n"
            "Your credit card was reported 60 day late and past due.\n"
            "The balance was placed in collection."
        )
        report = parse_report_content(text)

        assert [a.account_name for a in report.accounts] == ["Generic Credit Card"]
        issues = detect_issues(report, today)
        assert "collection" in _types(issues)
        assert "Late Payment Records Detected" in [i.title for i in issues]


# =============================================================================
# TEST: PADDING, FALLBACK AND DETERMINISM
# =============================================================================

class TestMinimumIssues:
    """Result size guarantees."""

    def test_empty_report_gets_mandatory_issues(self, today):
        issues = detect_issues(_report(), today)

        assert [i.title for i in issues] == [
            "FCRA Verification Rights",
            "Late Payment Disputes",
            "Unauthorized Hard Inquiries",
        ]

    def test_padding_skips_existing_titles(self):
        from credit_dispute.services.analysis import ensure_minimum_issues, get_mandatory_issues

        existing = [get_mandatory_issues()[0]]
        padded = ensure_minimum_issues(existing)

        titles = [i.title for i in padded]
        assert len(padded) == 3
        assert len(set(titles)) == 3

    def test_long_list_is_untouched(self, today):
        accounts = [
            CreditReportAccount(account_name=f"COLLECTOR {n}", status="Collection") for n in range(4)
        ]
        issues = detect_issues(_report(accounts), today)

        assert _types(issues) == ["collection_account"] * 4

    def test_failure_returns_fallback_issues(self, today, monkeypatch):
        from credit_dispute.services.analysis import get_fallback_issues
        from credit_dispute.services.analysis.issue_rules import AccountRules

        def boom(account, accounts):
            raise RuntimeError("rule exploded")

        monkeypatch.setattr(AccountRules, "classify", staticmethod(boom))
        issues = detect_issues(_report([CreditReportAccount(account_name="USAA")]), today)

        assert issues == get_fallback_issues()
        assert len(issues) == 5


class TestDeterminism:
    """Same input, same output."""

    def test_repeated_runs_are_equal(self, sample_report_text, today):
        from credit_dispute.services.parsing import parse_report_content

        report = parse_report_content(sample_report_text)

        first = detect_issues(report, today)
        second = detect_issues(report, today)

        assert first == second
        assert len(first) >= 3

    def test_sample_report_issues(self, sample_report_text, today):
        from credit_dispute.services.parsing import parse_report_content

        issues = detect_issues(parse_report_content(sample_report_text), today)

        assert _types(issues) == [
            "collection_account",
            "high_utilization",
            "inquiry",
            "old_inquiries",
            "old_bankruptcy",
        ]

    def test_issue_ids_are_unique(self, today):
        issues = detect_issues(_report(), today)
        assert len({i.id for i in issues}) == len(issues)


# =============================================================================
# TEST: LEGAL REFERENCES
# =============================================================================

class TestLegalReferences:

    def test_fcra_citation(self):
        from credit_dispute.services.analysis import fcra_citation

        assert fcra_citation("611") == "FCRA § 611 (Procedure in case of disputed accuracy)"
        assert fcra_citation("623", with_title=False) == "FCRA § 623"

    @pytest.mark.parametrize("field_name,context,expected_law", [
        ("collection_status", None, "FDCPA"),
        ("balance", None, "FCRA"),
        ("other", "identity theft suspected", "FCRA"),
    ])
    def test_references_for_dispute(self, field_name, context, expected_law):
        from credit_dispute.services.analysis import get_legal_references_for_dispute

        references = get_legal_references_for_dispute(field_name, context)

        assert references
        assert references[0].law == expected_law
