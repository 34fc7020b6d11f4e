"""
Credit Dispute Engine - Account Name Helpers

Extracted PDF text is full of object-stream debris ("142 0 obj",
"Length 312", ...). These helpers decide whether a captured creditor
name is real and tidy it up for display.
"""
from __future__ import annotations
import re

# Creditors worth recognising even when surrounded by debris
COMMON_CREDITORS = [
    "CAPITAL ONE", "CHASE", "BANK OF AMERICA", "WELLS FARGO", "DISCOVER",
    "AMERICAN EXPRESS", "AMEX", "CITIBANK", "CITI", "TD BANK", "SYNCHRONY",
    "CREDIT ONE", "CARMAX", "SANTANDER", "FIRST PREMIER", "USAA", "PNC",
    "BARCLAYS", "NAVY FEDERAL", "US BANK", "ALLY", "COMENITY", "NAVIENT",
    "NELNET", "SALLIE MAE", "GREAT LAKES", "DEPT OF ED", "MIDLAND",
    "PORTFOLIO RECOVERY", "LVNV", "CAVALRY",
]

PDF_ARTIFACTS = ("endstream", "endobj", "xref", "stream", "obj", "Length", "Typ")

PLACEHOLDER_NAMES = ("unknown", "multiple accounts", "multiple")


def is_valid_account_name(name: str) -> bool:
    """True when the name looks like a real creditor rather than a placeholder or debris."""
    if not name or len(name.strip()) < 3:
        return False

    lowered = name.lower()
    if any(p in lowered for p in PLACEHOLDER_NAMES):
        return False
    if any(a in name for a in PDF_ARTIFACTS):
        return False
    if re.match(r"^\d+\s+\d+", name) or re.search(r"[{}\\<>]", name):
        return False

    upper = name.upper()
    if any(c in upper for c in COMMON_CREDITORS):
        return True

    special = len(re.findall(r"[^a-zA-Z0-9\s]", name))
    if special > len(name) * 0.15:
        return False

    return bool(re.search(r"[A-Za-z]", name))


def clean_account_name(name: str) -> str:
    """
    Strip PDF artifacts from a captured creditor name.

    Returns "" for placeholder names so callers keep looking for a real
    one, and "Credit Account" when nothing usable survives cleaning.
    """
    if not name:
        return ""
    if "multiple accounts" in name.lower():
        return ""

    cleaned = re.sub(r"^\d+\s+\d+\s+", "", name)
    cleaned = re.sub(r"^obj\s+", "", cleaned)
    cleaned = re.sub(r"endobj.*$", "", cleaned)
    cleaned = re.sub(r"endstream.*$", "", cleaned)
    cleaned = re.sub(r"Length\s+\d+", "", cleaned)
    cleaned = re.sub(r"Typ\s+\w+", "", cleaned)
    cleaned = re.sub(r"^[\d\s]+", "", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()

    # Real creditor names usually lead with a run of capitals
    match = re.search(r"[A-Z]{2,}[A-Za-z\s&.',()-]+", cleaned)
    if match and len(match.group(0).strip()) > 3:
        return match.group(0).strip()

    if cleaned:
        return " ".join(word[:1].upper() + word[1:].lower() for word in cleaned.split(" "))

    return "Credit Account"


def title_case_name(name: str) -> str:
    """'ABC COLLECTIONS' -> 'Abc Collections' for issue titles."""
    return " ".join(w[:1].upper() + w[1:].lower() for w in (name or "").split())


def normalize_name_key(name: str) -> str:
    """Key for duplicate detection: whitespace removed, lowercased."""
    return re.sub(r"\s+", "", name or "").lower()
