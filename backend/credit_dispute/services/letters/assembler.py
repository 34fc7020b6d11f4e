"""
Credit Dispute Engine - Letter Assembler

Turns selected issues into DisputeLetter objects.

Each issue goes through a fallback chain:
    primary (template + boilerplate) -> manual (fixed layout) -> emergency
A generator that raises or returns fewer than MIN_LETTER_LENGTH characters
hands over to the next one. The emergency letter cannot fail.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Callable, Dict, List, Optional

from ...models.ssot import DisputeLetter, IdentifiedIssue, ImpactLevel, UserInfo
from ..parsing.normalize import mask_account_number
from .bureaus import DEFAULT_BUREAU, get_bureau_address, get_bureau_from_account
from .selector import normalize_issue_type, select_template
from .templates import fill_placeholders, get_sample_dispute_language, legal_boilerplate

logger = logging.getLogger(__name__)

MIN_LETTER_LENGTH = 10
MAX_PRIORITY_LETTERS = 5
TARGET_LETTER_COUNT = 3

EMERGENCY_LAWS = ["FCRA § 611", "FCRA § 623"]

LetterGenerator = Callable[[IdentifiedIssue, UserInfo], str]


class LetterGenerationError(Exception):
    """Raised when a generator cannot produce usable letter content."""
    pass


def _format_date(today: Optional[date] = None) -> str:
    d = today or date.today()
    return f"{d.strftime('%B')} {d.day}, {d.year}"


def _account_fields(issue: IdentifiedIssue):
    if issue.account:
        return issue.account.account_name, issue.account.account_number
    return issue.title, ""


def _account_details(issue: IdentifiedIssue) -> str:
    account = issue.account
    if account is None:
        return f"Item: {issue.title}"
    lines = [f"Account Name: {account.account_name}"]
    if account.account_number:
        lines.append(f"Account Number: {mask_account_number(account.account_number)}")
    if account.balance:
        lines.append(f"Reported Balance: {account.balance}")
    if account.payment_status or account.status:
        lines.append(f"Reported Status: {account.payment_status or account.status}")
    return "\n".join(lines)


def _insert_before_signature(content: str, block: str) -> str:
    marker = "Sincerely,"
    index = content.find(marker)
    if index == -1:
        return f"{content.rstrip()}\n\n{block}\n"
    return f"{content[:index]}{block}\n\n{content[index:]}"


# =============================================================================
# GENERATORS
# =============================================================================

def generate_primary_letter(
    issue: IdentifiedIssue,
    user_info: UserInfo,
    stored_templates: Optional[Dict[str, str]] = None,
    today: Optional[date] = None,
) -> str:
    """Template letter for the issue type with placeholders filled and boilerplate added."""
    sender = user_info.with_placeholders()
    bureau = get_bureau_from_account(issue)
    account_name, account_number = _account_fields(issue)

    values = {
        "USER_NAME": sender.name,
        "USER_ADDRESS": sender.address,
        "USER_CITY": sender.city,
        "USER_STATE": sender.state,
        "USER_ZIP": sender.zip_code,
        "DATE": _format_date(today),
        "BUREAU_ADDRESS": get_bureau_address(bureau),
        "ACCOUNT_NAME": account_name,
        "ACCOUNT_NUMBER": mask_account_number(account_number) or "Not reported",
        "ACCOUNT_DETAILS": _account_details(issue),
        "REASON": issue.title,
        "EXPLANATION": issue.description,
    }
    content = fill_placeholders(select_template(issue.type, stored_templates), values)
    return _insert_before_signature(content, legal_boilerplate(issue.laws))


def generate_manual_letter(issue: IdentifiedIssue, user_info: UserInfo, today: Optional[date] = None) -> str:
    """Fixed-layout letter that needs no template lookup."""
    sender = user_info.with_placeholders()
    bureau = get_bureau_from_account(issue)
    account_name, account_number = _account_fields(issue)
    if not account_name:
        raise LetterGenerationError("Issue has neither an account nor a title")

    parts = [
        f"{sender.name}\n{sender.address}\n{sender.city}, {sender.state} {sender.zip_code}",
        _format_date(today),
        get_bureau_address(bureau),
        "Re: Dispute of Inaccurate Information in Credit Report",
        "To Whom It May Concern:",
        "I am writing to dispute the following information in my credit report. "
        "I have identified the following items that are inaccurate or incomplete:",
    ]
    account_lines = f"Account Name: {account_name.upper()}"
    if account_number:
        account_lines += f"\nAccount Number: {mask_account_number(account_number)}"
    parts.append(account_lines)
    parts.append(f"I am disputing this information because: {issue.description}")
    parts.append(get_sample_dispute_language(normalize_issue_type(issue.type)))
    parts.append(
        "Under the Fair Credit Reporting Act, you are required to:\n"
        "1. Conduct a reasonable investigation into the information I am disputing\n"
        "2. Forward all relevant information that I provide to the furnisher\n"
        "3. Review and consider all relevant information\n"
        "4. Provide me the results of your investigation\n"
        "5. Delete the disputed information if it cannot be verified"
    )
    parts.append("Please investigate this matter and provide me with the results within 30 days as required by the FCRA.")
    parts.append(f"Sincerely,\n\n{sender.name}")
    parts.append("Enclosures:\n- Copy of ID\n- Copy of social security card\n- Copy of utility bill")
    return "\n\n".join(parts) + "\n"


def create_emergency_letter(
    title: str,
    account_name: str,
    account_number: str,
    error_type: str,
    user_info: Optional[UserInfo] = None,
    today: Optional[date] = None,
) -> DisputeLetter:
    """Last-resort letter addressed to Experian. Never raises."""
    sender = (user_info or UserInfo()).with_placeholders()
    masked = mask_account_number(account_number) or "xxxxxxxx####"
    content = f"""{_format_date(today)}

{get_bureau_address(DEFAULT_BUREAU)}

Re: Formal dispute of unverified information in my credit report

To Whom It May Concern:

I received a copy of my credit report and found the following item to be inaccurate, incomplete, or unverified.

Creditor and account as reported on my credit report:
{(account_name or "Unknown Creditor").upper()}
ACCOUNT- {masked}

I am requesting that you investigate this information and remove any item that cannot be verified as true, correct, complete, and timely.

According to the Fair Credit Reporting Act § 611 (FCRA § 611), you are required to conduct a reasonable investigation into this matter and remove or correct any information that cannot be verified.

Please send an updated copy of my credit report to my address. According to the act, there shall be no charge for this updated report.

Sincerely,
{sender.name}

Enclosures:
- Copy of Driver's License
- Copy of Social Security Card
"""
    return DisputeLetter(
        title=title,
        bureau=DEFAULT_BUREAU,
        recipient=DEFAULT_BUREAU,
        content=content,
        account_name=account_name,
        account_number=account_number,
        error_type=error_type,
        explanation="This letter addresses issues found in your credit report.",
        laws_cited=list(EMERGENCY_LAWS),
        generator="emergency",
    )


# =============================================================================
# FALLBACK CHAIN
# =============================================================================

def generate_letter_with_fallback(
    issue: IdentifiedIssue,
    user_info: UserInfo,
    primary: Optional[LetterGenerator] = None,
    manual: Optional[LetterGenerator] = None,
    stored_templates: Optional[Dict[str, str]] = None,
) -> DisputeLetter:
    """
    Build one letter, falling back primary -> manual -> emergency.

    `primary` and `manual` default to generate_primary_letter and
    generate_manual_letter.
    """
    if primary is None:
        primary = lambda i, u: generate_primary_letter(i, u, stored_templates)
    if manual is None:
        manual = generate_manual_letter

    bureau = get_bureau_from_account(issue)
    account_name, account_number = _account_fields(issue)

    for name, generator in (("primary", primary), ("manual", manual)):
        try:
            content = generator(issue, user_info)
            if not content or len(content.strip()) < MIN_LETTER_LENGTH:
                raise LetterGenerationError(f"{name} generator returned empty content")
        except Exception as e:
            logger.warning(f"{name.capitalize()} letter generator failed for '{issue.title}': {e}")
            continue

        logger.info(f"Generated {name} letter for '{issue.title}' ({len(content)} chars)")
        return DisputeLetter(
            title=issue.title,
            bureau=bureau,
            recipient=bureau,
            content=content,
            account_name=account_name,
            account_number=account_number,
            error_type=issue.type,
            explanation=issue.description,
            laws_cited=list(issue.laws),
            generator=name,
        )

    logger.error(f"All letter generators failed for '{issue.title}', using emergency letter")
    return create_emergency_letter(issue.title, account_name, account_number, issue.type, user_info)


# =============================================================================
# PUBLIC API
# =============================================================================

def select_issues_for_letters(issues: List[IdentifiedIssue]) -> List[IdentifiedIssue]:
    """
    Up to 5 Critical/High issues, then Medium issues up to 3 minus the
    priority count. Falls back to the first 3 issues when nothing qualifies.
    """
    priority = [i for i in issues if i.impact.is_priority][:MAX_PRIORITY_LETTERS]
    remaining = max(0, TARGET_LETTER_COUNT - len(priority))
    medium = [i for i in issues if i.impact == ImpactLevel.MEDIUM][:remaining]

    selected = priority + medium
    if not selected:
        selected = list(issues[:TARGET_LETTER_COUNT])
    logger.info(f"Selected {len(selected)} of {len(issues)} issues for letter generation")
    return selected


def generate_dispute_letters(
    issues: List[IdentifiedIssue],
    user_info: Optional[UserInfo] = None,
    stored_templates: Optional[Dict[str, str]] = None,
    primary: Optional[LetterGenerator] = None,
    manual: Optional[LetterGenerator] = None,
) -> List[DisputeLetter]:
    """
    Letters for the selected issues. Always returns at least one letter:
    with nothing to write about, a General Dispute Letter is produced.
    """
    user_info = user_info or UserInfo()
    letters = [
        generate_letter_with_fallback(issue, user_info, primary, manual, stored_templates)
        for issue in select_issues_for_letters(issues)
    ]

    if not letters:
        logger.warning("No letters generated, producing a general dispute letter")
        letters = [create_emergency_letter("General Dispute Letter", "General Dispute", "", "Multiple Issues", user_info)]
    return letters
