"""
Credit Dispute Engine - Letter Templates

Built-in letter bodies keyed by issue type, plus the legal boilerplate and
sample dispute language appended by the assembler.

Placeholders may be written as {NAME} or [NAME]; both are filled by
fill_placeholders().
"""
from __future__ import annotations
from typing import Dict, List, Optional

from ..analysis.legal_references import LAW_DESCRIPTIONS


# =============================================================================
# LETTER HEADER / FOOTER
# =============================================================================

SENDER_BLOCK = """{USER_NAME}
{USER_ADDRESS}
{USER_CITY}, {USER_STATE} {USER_ZIP}

{DATE}

{BUREAU_ADDRESS}"""

SIGNATURE_BLOCK = """Sincerely,

{USER_NAME}

Enclosures:
- Copy of ID
- Copy of social security card
- Copy of utility bill"""


# =============================================================================
# BUILT-IN TEMPLATES
# =============================================================================

LETTER_TEMPLATES: Dict[str, str] = {
    "late_payment": SENDER_BLOCK + """

Re: Dispute of Late Payment Information

To Whom It May Concern:

I am writing to dispute late payment information reported on my credit report for the following account:

Account Name: {ACCOUNT_NAME}
Account Number: {ACCOUNT_NUMBER}

Reason for Dispute: {REASON}

{EXPLANATION}

After reviewing my records, these payments were either made on time or the late payment information is otherwise inaccurate. If the furnisher cannot verify the exact dates and amounts reported, the late payment notations must be removed.

""" + SIGNATURE_BLOCK,

    "collection_account": SENDER_BLOCK + """

Re: Dispute of Collection Account

To Whom It May Concern:

I am writing to dispute a collection account reported on my credit report:

Collection Account Name: {ACCOUNT_NAME}
Account Number: {ACCOUNT_NUMBER}

Reason for Dispute: {REASON}

{EXPLANATION}

I have not received validation of this debt. This account either does not belong to me, has already been paid, or otherwise contains inaccurate information. If it cannot be verified with adequate documentation, it must be removed from my credit report.

""" + SIGNATURE_BLOCK,

    "inquiry": SENDER_BLOCK + """

Re: Dispute of Unauthorized Inquiry

To Whom It May Concern:

I am writing to dispute an inquiry on my credit report that I did not authorize:

Inquiry: {ACCOUNT_NAME}

Reason for Dispute: {REASON}

{EXPLANATION}

I did not authorize this company to access my credit report. An inquiry made without a permissible purpose must be removed.

""" + SIGNATURE_BLOCK,

    "account_ownership": SENDER_BLOCK + """

Re: Dispute of Account Ownership

To Whom It May Concern:

The following account on my credit report does not belong to me:

Account Name: {ACCOUNT_NAME}
Account Number: {ACCOUNT_NUMBER}

Reason for Dispute: {REASON}

{EXPLANATION}

I have never opened an account with this creditor. Information that cannot be verified as belonging to me must be removed.

""" + SIGNATURE_BLOCK,

    "personal_information": SENDER_BLOCK + """

Re: Dispute of Personal Information

To Whom It May Concern:

I am writing to dispute personal information reported on my credit report that is inaccurate.

Issue: {REASON}

{EXPLANATION}

Please correct your records so that only my accurate name, addresses, and identifiers are reported.

""" + SIGNATURE_BLOCK,

    "bankruptcy": SENDER_BLOCK + """

Re: Dispute of Bankruptcy Reporting

To Whom It May Concern:

I am writing to dispute the bankruptcy information on my credit report.

Reason for Dispute: {REASON}

{EXPLANATION}

Please verify the filing date, the accounts reported as included, and the current status. A bankruptcy may not be reported more than 10 years after the date of entry of the order for relief.

""" + SIGNATURE_BLOCK,

    "balance": SENDER_BLOCK + """

Re: Dispute of Reported Balance

To Whom It May Concern:

I am writing to dispute the balance reported for the following account:

Account Name: {ACCOUNT_NAME}
Account Number: {ACCOUNT_NUMBER}

Reason for Dispute: {REASON}

{EXPLANATION}

The reported balance does not match my records. Please verify the balance and credit limit with the furnisher and correct or delete the inaccurate figures.

""" + SIGNATURE_BLOCK,
}

# Used when neither a built-in nor a stored template matches
DEFAULT_TEMPLATE = """[USER_NAME]
[USER_ADDRESS]
[USER_CITY], [USER_STATE] [USER_ZIP]

[DATE]

[BUREAU_ADDRESS]

Re: Dispute of Inaccurate Information

To Whom It May Concern:

I am writing to dispute the following information in my credit report. I have identified the following item(s) that are inaccurate or incomplete:

[ACCOUNT_DETAILS]

Reason for Dispute: [REASON]

[EXPLANATION]

Under the Fair Credit Reporting Act (FCRA), you are required to:
1. Conduct a reasonable investigation into the information I am disputing
2. Forward all relevant information that I provide to the furnisher
3. Review and consider all relevant information
4. Provide me the results of your investigation
5. Delete the disputed information if it cannot be verified

Sincerely,

[USER_NAME]"""


# =============================================================================
# LEGAL BOILERPLATE
# =============================================================================

DEFAULT_LEGAL_CITATIONS = ["15 USC 1681i", "15 USC 1681e(b)"]

INVESTIGATION_NOTICE = (
    "Please investigate this matter and provide me with the results within 30 days of "
    "receipt of this letter, as required by the Fair Credit Reporting Act. If the disputed "
    "information cannot be verified within that period, it must be deleted from my file, "
    "and I request an updated copy of my credit report at no charge."
)


def legal_boilerplate(laws: Optional[List[str]] = None) -> str:
    """'As required by ...' lines for each citation, then the 30-day notice."""
    lines = ["Legal basis for this dispute:"]
    for law in laws or DEFAULT_LEGAL_CITATIONS:
        description = LAW_DESCRIPTIONS.get(law)
        if description:
            lines.append(f"- As required by {law}: {description}")
        else:
            lines.append(f"- As required by {law}.")
    return "\n".join(lines) + "\n\n" + INVESTIGATION_NOTICE


# =============================================================================
# SAMPLE DISPUTE LANGUAGE
# =============================================================================

SAMPLE_DISPUTE_LANGUAGE: Dict[str, str] = {
    "late_payment": "I dispute the late payment reported on this account. I have always made my payments on time and have documentation to prove it.",
    "collection_account": "I dispute this collection account. This debt is not mine, has been paid, or is too old to report.",
    "inquiry": "I dispute this inquiry. I did not authorize this inquiry and have no record of applying for credit with this company.",
    "account_ownership": "I dispute this account. This account does not belong to me and may be the result of identity theft or a mixed file.",
    "incorrect_balance": "I dispute the balance reported on this account. The reported balance does not match my records.",
    "incorrect_payment_history": "I dispute the payment history reported on this account. The history shown does not match my records.",
    "account_closed": "I dispute the status of this account. This account was closed and should be reported as closed.",
    "default": "I dispute this item on my credit report as it appears to be inaccurate or incomplete. This information must be verified or removed according to the Fair Credit Reporting Act.",
}


def get_sample_dispute_language(dispute_type: str) -> str:
    return SAMPLE_DISPUTE_LANGUAGE.get(dispute_type, SAMPLE_DISPUTE_LANGUAGE["default"])


def fill_placeholders(template: str, values: Dict[str, str]) -> str:
    """Replace every {KEY} and [KEY] occurrence for the keys in `values`."""
    content = template
    for key, value in values.items():
        content = content.replace(f"{{{key}}}", value).replace(f"[{key}]", value)
    return content
