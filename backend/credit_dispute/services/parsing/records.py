"""
Credit Dispute Engine - Inquiry and Public Record Extraction
"""
from __future__ import annotations
import logging
import re
from typing import List

from ...models.ssot import CreditReportInquiry, PublicRecord
from .accounts import detect_block_bureau
from .normalize import clean_text

logger = logging.getLogger(__name__)

INQUIRY_LINE = re.compile(
    r"^[ \t]*(\d{1,2}/\d{1,2}/\d{2,4}|[A-Za-z]{3}\.? \d{1,2}, \d{4})[ \t]+(?:[-|][ \t]*)?([^\n]+?)[ \t]*$",
    re.MULTILINE,
)
INQUIRY_TYPE_SUFFIX = re.compile(r"\s*[\(\[-]?\s*\b(hard|soft)(?:\s+inquiry)?\s*[\)\]]?\s*$", re.IGNORECASE)

MIN_RECORD_BLOCK_LENGTH = 20

RECORD_TYPE = re.compile(r"^[ \t]*(?:Record\s+Type|Type)[ \t]*:[ \t]*([^\n]+?)[ \t]*$", re.IGNORECASE | re.MULTILINE)
RECORD_DATE = re.compile(
    r"^[ \t]*(?:Date\s+Filed|Filed|Date)[ \t]*:[ \t]*(\d{1,2}/\d{1,2}/\d{2,4}|\d{1,2}/\d{4}|\d{4}-\d{2}-\d{2}|[A-Za-z]{3,9}\.? \d{1,2}, \d{4})",
    re.IGNORECASE | re.MULTILINE,
)
RECORD_STATUS = re.compile(r"^[ \t]*Status[ \t]*:[ \t]*([^\n]+?)[ \t]*$", re.IGNORECASE | re.MULTILINE)


def extract_inquiries(section: str, default_bureau: str = "") -> List[CreditReportInquiry]:
    """Read '(date)  creditor' lines. A trailing (Soft) marks a soft inquiry."""
    inquiries = []
    for match in INQUIRY_LINE.finditer(section or ""):
        creditor = match.group(2)
        inquiry_type = "Hard Inquiry"
        type_match = INQUIRY_TYPE_SUFFIX.search(creditor)
        if type_match:
            if type_match.group(1).lower() == "soft":
                inquiry_type = "Soft Inquiry"
            creditor = creditor[:type_match.start()]
        creditor = clean_text(creditor)
        if not creditor:
            continue
        inquiries.append(CreditReportInquiry(
            creditor=creditor,
            inquiry_date=match.group(1),
            type=inquiry_type,
            bureau=detect_block_bureau(match.group(0)) or default_bureau,
        ))

    logger.info(f"Extracted {len(inquiries)} inquiries")
    return inquiries


def extract_public_records(section: str, default_bureau: str = "") -> List[PublicRecord]:
    """Each blank-line separated block of 20+ characters is one record."""
    records = []
    for block in re.split(r"\n\s*\n", section or ""):
        block = block.strip()
        if len(block) < MIN_RECORD_BLOCK_LENGTH:
            continue

        type_match = RECORD_TYPE.search(block)
        date_match = RECORD_DATE.search(block)
        status_match = RECORD_STATUS.search(block)
        record_type = clean_text(type_match.group(1)) if type_match else clean_text(block.split("\n", 1)[0])

        records.append(PublicRecord(
            record_type=record_type or "Unknown",
            date=date_match.group(1) if date_match else "",
            status=clean_text(status_match.group(1)) if status_match else "",
            bureau=detect_block_bureau(block) or default_bureau,
        ))

    logger.info(f"Extracted {len(records)} public records")
    return records
