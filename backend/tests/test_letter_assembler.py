"""
Tests for dispute letter assembly.

Test Coverage:
1. Primary letters: template filled, boilerplate before the signature
2. Fallback chain: primary -> manual -> emergency on errors and short output
3. Emergency letter contents (Experian address, masked account, FCRA § 611)
4. Issue selection for letters (priority cap, medium top-up)
5. General dispute letter when there is nothing to write about
6. Bureau routing and addresses
"""
import pytest
from datetime import date

from credit_dispute.models import CreditReportAccount, IdentifiedIssue, ImpactLevel, UserInfo


@pytest.fixture
def collection_issue():
    return IdentifiedIssue(
        type="collection_account",
        title="Collection Account (ABC COLLECTIONS AGENCY)",
        description="ABC COLLECTIONS AGENCY is reported as a collection account.",
        impact=ImpactLevel.CRITICAL,
        laws=["15 USC 1692c", "FDCPA § 809 (Validation of debts)"],
        account=CreditReportAccount(
            account_name="ABC COLLECTIONS AGENCY",
            account_number="1234567890",
            balance="$1,250",
            bureau="TransUnion",
        ),
    )


@pytest.fixture
def user_info():
    return UserInfo(name="Jane Doe", address="1 Elm St", city="Austin", state="TX", zip_code="73301")


def _issue(impact, n=0, issue_type="generic"):
    return IdentifiedIssue(type=issue_type, title=f"Issue {n}", description="d", impact=impact)


def _boom(issue, user_info):
    raise RuntimeError("generator down")


# =============================================================================
# TEST: PRIMARY LETTER
# =============================================================================

class TestPrimaryLetter:
    """Template based letters."""

    def test_placeholders_filled(self, collection_issue, user_info):
        from credit_dispute.services.letters import generate_primary_letter

        content = generate_primary_letter(collection_issue, user_info, today=date(2026, 10, 18))

        assert "Jane Doe" in content
        assert "Austin, TX 73301" in content
        assert "October 18, 2026" in content
        assert "Collection Account Name: ABC COLLECTIONS AGENCY" in content
        assert "xxxxxxxx7890" in content
        assert "1234567890" not in content
        assert "{" not in content

    def test_bureau_address_from_account(self, collection_issue, user_info):
        from credit_dispute.services.letters import generate_primary_letter

        content = generate_primary_letter(collection_issue, user_info)

        assert "P.O. Box 2000" in content
        assert "Chester, PA 19016" in content

    def test_boilerplate_precedes_signature(self, collection_issue, user_info):
        from credit_dispute.services.letters import generate_primary_letter

        content = generate_primary_letter(collection_issue, user_info)

        assert content.index("Legal basis for this dispute:") < content.index("Sincerely,")
        assert "- As required by 15 USC 1692c: Regulates communication" in content
        assert "within 30 days" in content

    def test_missing_user_info_uses_placeholders(self, collection_issue):
        from credit_dispute.services.letters import generate_primary_letter

        content = generate_primary_letter(collection_issue, UserInfo())

        assert "[YOUR NAME]" in content
        assert "[YOUR ADDRESS]" in content

    def test_default_template_for_unknown_type(self, user_info):
        from credit_dispute.services.letters import generate_primary_letter

        issue = IdentifiedIssue(
            type="credit_age",
            title="Account Age Verification",
            description="Opening dates look wrong.",
            impact=ImpactLevel.HIGH,
        )
        content = generate_primary_letter(issue, user_info)

        assert "Re: Dispute of Inaccurate Information" in content
        assert "Item: Account Age Verification" in content
        assert "[ACCOUNT_DETAILS]" not in content
        assert "5. Delete the disputed information if it cannot be verified" in content

    def test_stored_template_is_used(self, collection_issue, user_info):
        from credit_dispute.services.letters import generate_primary_letter

        stored = {"collection_account": "Custom letter for {ACCOUNT_NAME}\n\nSincerely,\n{USER_NAME}"}
        content = generate_primary_letter(collection_issue, user_info, stored_templates=stored)

        assert content.startswith("Custom letter for ABC COLLECTIONS AGENCY")
        assert "Legal basis for this dispute:" in content


# =============================================================================
# TEST: FALLBACK CHAIN
# =============================================================================

class TestFallbackChain:
    """primary -> manual -> emergency."""

    def test_primary_success(self, collection_issue, user_info):
        from credit_dispute.services.letters import generate_letter_with_fallback

        letter = generate_letter_with_fallback(collection_issue, user_info)

        assert letter.generator == "primary"
        assert letter.title == collection_issue.title
        assert letter.bureau == "TransUnion"
        assert letter.error_type == "collection_account"
        assert letter.laws_cited == collection_issue.laws

    def test_primary_error_falls_back_to_manual(self, collection_issue, user_info):
        from credit_dispute.services.letters import generate_letter_with_fallback

        letter = generate_letter_with_fallback(collection_issue, user_info, primary=_boom)

        assert letter.generator == "manual"
        assert "Account Name: ABC COLLECTIONS AGENCY" in letter.content
        assert "Account Number: xxxxxxxx7890" in letter.content
        assert "1. Conduct a reasonable investigation" in letter.content

    def test_short_output_falls_back(self, collection_issue, user_info):
        from credit_dispute.services.letters import generate_letter_with_fallback

        letter = generate_letter_with_fallback(
            collection_issue, user_info, primary=lambda i, u: "   short  "
        )

        assert letter.generator == "manual"

    def test_both_fail_gives_emergency_letter(self, collection_issue, user_info):
        from credit_dispute.services.letters import generate_letter_with_fallback

        letter = generate_letter_with_fallback(collection_issue, user_info, primary=_boom, manual=_boom)

        assert letter.generator == "emergency"
        assert letter.content.strip()
        assert letter.bureau == "Experian"
        assert "P.O. Box 4500" in letter.content
        assert "FCRA § 611" in letter.content
        assert "ACCOUNT- xxxxxxxx7890" in letter.content
        assert letter.laws_cited == ["FCRA § 611", "FCRA § 623"]
        assert letter.title == collection_issue.title

    def test_emergency_letter_without_account_number(self):
        from credit_dispute.services.letters import create_emergency_letter

        letter = create_emergency_letter("Title", "Some Creditor", "", "generic")

        assert "xxxxxxxx####" in letter.content
        assert "SOME CREDITOR" in letter.content
        assert "[YOUR NAME]" in letter.content


# =============================================================================
# TEST: ISSUE SELECTION
# =============================================================================

class TestSelectIssuesForLetters:
    """Which issues get letters."""

    def test_priority_issues_capped_at_five(self):
        from credit_dispute.services.letters import select_issues_for_letters

        issues = [_issue(ImpactLevel.HIGH, n) for n in range(7)] + [_issue(ImpactLevel.MEDIUM, 9)]
        selected = select_issues_for_letters(issues)

        assert selected == issues[:5]

    def test_medium_issues_top_up_to_three(self):
        from credit_dispute.services.letters import select_issues_for_letters

        critical = _issue(ImpactLevel.CRITICAL, 0)
        mediums = [_issue(ImpactLevel.MEDIUM, n) for n in range(1, 5)]
        selected = select_issues_for_letters(mediums[:2] + [critical] + mediums[2:])

        assert selected == [critical, mediums[0], mediums[1]]

    def test_three_priority_issues_take_no_medium(self):
        from credit_dispute.services.letters import select_issues_for_letters

        issues = [_issue(ImpactLevel.HIGH, n) for n in range(3)] + [_issue(ImpactLevel.MEDIUM, 3)]
        assert select_issues_for_letters(issues) == issues[:3]

    def test_empty(self):
        from credit_dispute.services.letters import select_issues_for_letters

        assert select_issues_for_letters([]) == []


class TestGenerateDisputeLetters:
    """End-to-end letter generation for a list of issues."""

    def test_one_letter_per_selected_issue(self, collection_issue, user_info):
        from credit_dispute.services.letters import generate_dispute_letters

        issues = [collection_issue, _issue(ImpactLevel.MEDIUM, 1, "inquiry")]
        letters = generate_dispute_letters(issues, user_info)

        assert [letter.title for letter in letters] == [collection_issue.title, "Issue 1"]
        assert all(letter.generator == "primary" for letter in letters)

    def test_general_letter_when_no_issues(self):
        from credit_dispute.services.letters import generate_dispute_letters

        letters = generate_dispute_letters([])

        assert len(letters) == 1
        assert letters[0].title == "General Dispute Letter"
        assert letters[0].generator == "emergency"
        assert letters[0].content.strip()

    def test_every_generator_failing_still_yields_letters(self, collection_issue):
        from credit_dispute.services.letters import generate_dispute_letters

        letters = generate_dispute_letters([collection_issue], primary=_boom, manual=_boom)

        assert len(letters) == 1
        assert letters[0].generator == "emergency"


# =============================================================================
# TEST: BUREAUS
# =============================================================================

class TestBureaus:
    """Bureau routing."""

    def test_bureau_named_in_description(self):
        from credit_dispute.services.letters import get_bureau_from_account

        issue = IdentifiedIssue(
            type="inquiry", title="Inquiry", description="Reported by Equifax only", impact=ImpactLevel.MEDIUM
        )
        assert get_bureau_from_account(issue) == "Equifax"

    def test_default_bureau(self):
        from credit_dispute.services.letters import get_bureau_from_account

        assert get_bureau_from_account(_issue(ImpactLevel.HIGH)) == "Experian"

    @pytest.mark.parametrize("bureau,expected", [
        ("Trans Union", "TransUnion LLC"),
        ("EQUIFAX", "Equifax Information Services LLC"),
        ("Innovis", "Innovis\n[BUREAU ADDRESS]"),
        ("", "Credit Bureau\n[BUREAU ADDRESS]"),
    ])
    def test_get_bureau_address(self, bureau, expected):
        from credit_dispute.services.letters import get_bureau_address

        assert get_bureau_address(bureau).startswith(expected)
