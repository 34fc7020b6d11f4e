"""
Credit Dispute Engine - Bureau Helpers

Mailing addresses and name normalisation for the three bureaus.
"""
from __future__ import annotations
import logging
from typing import Dict, Optional

from ...models.ssot import IdentifiedIssue

logger = logging.getLogger(__name__)

DEFAULT_BUREAU = "Experian"

BUREAU_ADDRESSES: Dict[str, str] = {
    "experian": """Experian
P.O. Box 4500
Allen, TX 75013""",
    "equifax": """Equifax Information Services LLC
P.O. Box 740256
Atlanta, GA 30374""",
    "transunion": """TransUnion LLC
Consumer Dispute Center
P.O. Box 2000
Chester, PA 19016""",
}

DISPLAY_NAMES: Dict[str, str] = {
    "experian": "Experian",
    "equifax": "Equifax",
    "transunion": "TransUnion",
}


def bureau_key(bureau: Optional[str]) -> str:
    """'Trans Union' -> 'transunion'. Unknown names come back lowercased."""
    key = (bureau or "").lower().replace(" ", "")
    for known in BUREAU_ADDRESSES:
        if known in key:
            return known
    return key


def format_bureau_name(bureau: Optional[str]) -> str:
    key = bureau_key(bureau)
    if key in DISPLAY_NAMES:
        return DISPLAY_NAMES[key]
    return (bureau or "").strip() or DEFAULT_BUREAU


def get_bureau_address(bureau: Optional[str]) -> str:
    """Full mailing block; an unknown bureau gets a placeholder address line."""
    key = bureau_key(bureau)
    if key in BUREAU_ADDRESSES:
        return BUREAU_ADDRESSES[key]
    if bureau and bureau.strip():
        return f"{bureau.strip()}\n[BUREAU ADDRESS]"
    return "Credit Bureau\n[BUREAU ADDRESS]"


def get_bureau_from_account(issue: IdentifiedIssue) -> str:
    """
    Pick the bureau a letter should go to.

    Order: the issue's account, then a bureau named in the description or
    title, then Experian.
    """
    if issue.account and issue.account.bureau:
        return format_bureau_name(issue.account.bureau)

    for text in (issue.description, issue.title):
        lowered = (text or "").lower()
        for key, name in DISPLAY_NAMES.items():
            if key in lowered.replace(" ", ""):
                return name

    logger.debug(f"No bureau found for issue '{issue.title}', defaulting to {DEFAULT_BUREAU}")
    return DEFAULT_BUREAU
