"""
Credit Dispute Engine - Account Extraction

Splits the accounts section into blocks and pulls labelled fields out of
each block. When no block yields a usable account, two fallbacks run:
a scan for well-known creditor names, then generic placeholders for the
account types the text mentions.
"""
from __future__ import annotations
import logging
import re
from typing import Dict, List, Optional

from ...models.ssot import CreditReportAccount
from .account_names import COMMON_CREDITORS, clean_account_name, is_valid_account_name
from .normalize import clean_text, format_money

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

MIN_BLOCK_LENGTH = 50
UNKNOWN_ACCOUNT = "Unknown Account"

DATE = r"(\d{1,2}/\d{1,2}/\d{2,4}|\d{1,2}/\d{4}|\d{4}-\d{2}-\d{2}|[A-Za-z]{3,9}\.? \d{1,2}, \d{4})"
AMOUNT = r"(\(?\$?\s*[\d,]+(?:\.\d{2})?\)?)"


def _labelled(labels: str, value: str, sep: str = r"[ \t]*:[ \t]*") -> re.Pattern:
    return re.compile(rf"^[ \t]*(?:{labels}){sep}{value}", re.IGNORECASE | re.MULTILINE)


FIELD_PATTERNS: Dict[str, List[re.Pattern]] = {
    "account_name": [
        _labelled(r"Account\s+Name|Creditor\s+Name|Company\s+Name|Creditor|Furnisher|Subscriber", r"([^\n]{2,60}?)[ \t]*$"),
    ],
    "account_number": [
        _labelled(r"Account\s+Number|Account\s+No\.?|Account\s+#|Acct\.?\s+#|Acct\.?\s+Number", r"([0-9Xx*][0-9Xx*\- ]{2,30}[0-9Xx*])[ \t]*$",
                  sep=r"[ \t]*[:#]?[ \t]*"),
    ],
    "account_type": [
        _labelled(r"Account\s+Type|Type\s+of\s+Account|Loan\s+Type|Type", r"([^\n]{2,50}?)[ \t]*$"),
    ],
    "balance": [
        _labelled(r"Current\s+Balance|Balance\s+Owed|Amount\s+Owed|Balance", AMOUNT),
    ],
    "credit_limit": [
        _labelled(r"Credit\s+Limit|High\s+Credit|Original\s+Amount|Limit", AMOUNT),
    ],
    "payment_status": [
        _labelled(r"Payment\s+Status|Pay\s+Status", r"([^\n]{2,80}?)[ \t]*$"),
    ],
    "status": [
        _labelled(r"Account\s+Status|Status|Condition", r"([^\n]{2,80}?)[ \t]*$"),
    ],
    "date_opened": [
        _labelled(r"Date\s+Opened|Open\s+Date|Opened", DATE),
    ],
    "date_reported": [
        _labelled(r"Date\s+Reported|Last\s+Reported|Date\s+Updated|Reported", DATE),
    ],
}

REMARKS_PATTERN = _labelled(r"Remarks?|Comments?", r"([^\n]{2,200}?)[ \t]*$")

NEGATIVE_KEYWORDS = (
    "late", "delinquent", "past due", "collection", "charge off", "charged off",
    "charge-off", "repossession", "foreclosure", "default", "bankruptcy",
)

ACCOUNT_TYPE_KEYWORDS = {
    "credit card": "Credit Card",
    "mortgage": "Mortgage",
    "auto loan": "Auto Loan",
    "student loan": "Student Loan",
    "personal loan": "Personal Loan",
    "installment": "Installment Loan",
    "revolving": "Revolving Account",
}


# =============================================================================
# HELPERS
# =============================================================================

def detect_block_bureau(text: str) -> str:
    lowered = text.lower()
    if "experian" in lowered:
        return "Experian"
    if "equifax" in lowered:
        return "Equifax"
    if "transunion" in lowered or "trans union" in lowered:
        return "TransUnion"
    return ""


def split_account_blocks(section: str) -> List[str]:
    """Blank-line separated blocks long enough to hold an account."""
    blocks = re.split(r"\n\s*\n", section or "")
    return [b.strip() for b in blocks if len(b.strip()) >= MIN_BLOCK_LENGTH]


def _first_match(patterns: List[re.Pattern], text: str) -> str:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            value = clean_text(match.group(1))
            if value:
                return value
    return ""


def _is_negative(*values: str) -> bool:
    combined = " ".join(values).lower()
    return any(k in combined for k in NEGATIVE_KEYWORDS)


def extract_fields(text: str, default_bureau: str = "") -> Dict[str, object]:
    """Pull every labelled account field out of a chunk of text."""
    fields: Dict[str, object] = {
        name: _first_match(patterns, text) for name, patterns in FIELD_PATTERNS.items()
    }
    fields["balance"] = format_money(fields["balance"])
    fields["credit_limit"] = format_money(fields["credit_limit"])

    remarks: List[str] = []
    for match in REMARKS_PATTERN.finditer(text):
        for remark in re.split(r";", match.group(1)):
            remark = clean_text(remark)
            if remark:
                remarks.append(remark)
    fields["remarks"] = remarks
    fields["bureau"] = detect_block_bureau(text) or default_bureau
    return fields


def _build_account(fields: Dict[str, object]) -> CreditReportAccount:
    name = fields["account_name"] or UNKNOWN_ACCOUNT
    if name != UNKNOWN_ACCOUNT and not is_valid_account_name(name):
        name = clean_account_name(name) or UNKNOWN_ACCOUNT

    return CreditReportAccount(
        account_name=name,
        account_number=fields["account_number"],
        account_type=fields["account_type"],
        balance=fields["balance"],
        current_balance=fields["balance"],
        credit_limit=fields["credit_limit"],
        payment_status=fields["payment_status"],
        status=fields["status"],
        bureau=fields["bureau"],
        date_opened=fields["date_opened"],
        date_reported=fields["date_reported"],
        remarks=list(fields["remarks"]),
        is_negative=_is_negative(
            fields["status"], fields["payment_status"], " ".join(fields["remarks"])
        ),
    )


def parse_account_block(block: str, default_bureau: str = "") -> Optional[CreditReportAccount]:
    """
    Parse one block. Returns None unless the block has a real name and at
    least one of number, type, balance or status.
    """
    account = _build_account(extract_fields(block, default_bureau))
    if account.account_name == UNKNOWN_ACCOUNT:
        return None
    if not (account.account_number or account.account_type or account.balance
            or account.status or account.payment_status):
        return None
    return account


# =============================================================================
# FALLBACKS
# =============================================================================

def extract_accounts_by_creditor(text: str, default_bureau: str = "") -> List[CreditReportAccount]:
    """Find well-known creditor names and read fields from the text around each hit."""
    accounts: List[CreditReportAccount] = []
    upper = text.upper()
    seen = set()

    for creditor in COMMON_CREDITORS:
        match = re.search(rf"\b{re.escape(creditor)}\b", upper)
        if not match or creditor in seen:
            continue
        seen.add(creditor)
        start = max(0, match.start() - 100)
        end = min(len(text), match.end() + 300)
        fields = extract_fields(text[start:end], default_bureau)
        fields["account_name"] = creditor
        accounts.append(_build_account(fields))

    if accounts:
        logger.info(f"Creditor scan recovered {len(accounts)} accounts")
    return accounts


def generic_accounts_from_types(text: str, default_bureau: str = "") -> List[CreditReportAccount]:
    """Placeholder accounts for each account type mentioned in the text."""
    lowered = text.lower()
    accounts = [
        CreditReportAccount(
            account_name=f"Generic {label}",
            account_type=label,
            bureau=default_bureau,
            is_placeholder=True,
        )
        for keyword, label in ACCOUNT_TYPE_KEYWORDS.items()
        if keyword in lowered
    ]
    if accounts:
        logger.info(f"Using {len(accounts)} generic placeholder accounts")
    return accounts


# =============================================================================
# PUBLIC API
# =============================================================================

def extract_accounts(section: str, full_text: str = "", default_bureau: str = "") -> List[CreditReportAccount]:
    """
    Extract accounts from the accounts section.

    Falls back to the creditor-name scan and then to generic placeholders
    over the full text when the section yields nothing.
    """
    accounts = []
    for block in split_account_blocks(section):
        account = parse_account_block(block, default_bureau)
        if account:
            accounts.append(account)

    if accounts:
        logger.info(f"Extracted {len(accounts)} accounts from account blocks")
        return accounts

    text = full_text or section
    accounts = extract_accounts_by_creditor(text, default_bureau)
    if accounts:
        return accounts
    return generic_accounts_from_types(text, default_bureau)
