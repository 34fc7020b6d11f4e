"""
Credit Dispute Engine - Report Parser

Turns extracted report text into CreditReportData.

Sequential regex passes: detect bureaus, split on section headers
(PERSONAL INFORMATION, ACCOUNTS, INQUIRIES, PUBLIC RECORDS), then run the
per-section extractors. There is no validation pass; a layout the
patterns do not recognise simply produces empty or partial records.
"""
from __future__ import annotations
import logging
import re
from typing import Dict

from ...models.ssot import BureausPresent, CreditReportData, PersonalInfo
from .accounts import extract_accounts
from .personal_info import MIN_CONTENT_LENGTH, extract_personal_info
from .records import extract_inquiries, extract_public_records

logger = logging.getLogger(__name__)


SECTION_HEADERS = {
    "personal": r"PERSONAL\s+INFORMATION|PERSONAL\s+PROFILE|CONSUMER\s+INFORMATION|IDENTIFICATION",
    "accounts": r"ACCOUNTS?|ACCOUNT\s+INFORMATION|ACCOUNT\s+HISTORY|CREDIT\s+ACCOUNTS|TRADE\s*LINES|ACCOUNT\s+SUMMARY",
    "inquiries": r"INQUIRIES|CREDIT\s+INQUIRIES|HARD\s+INQUIRIES|REGULAR\s+INQUIRIES|REQUESTS\s+FOR\s+YOUR\s+CREDIT\s+HISTORY",
    "public_records": r"PUBLIC\s+RECORDS?|PUBLIC\s+RECORD\s+INFORMATION",
}

_HEADER_RE = re.compile(
    r"^[ \t]*(?:" + "|".join(f"(?P<{key}>{pattern})" for key, pattern in SECTION_HEADERS.items()) + r")[ \t]*:?[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)


def detect_bureaus(text: str) -> BureausPresent:
    lowered = text.lower()
    return BureausPresent(
        experian="experian" in lowered,
        equifax="equifax" in lowered,
        transunion="transunion" in lowered or "trans union" in lowered,
    )


def split_sections(text: str) -> Dict[str, str]:
    """
    Map section key -> section body.

    Text before the first recognised header is stored under "preamble".
    Repeated headers (one per bureau in tri-merge reports) are concatenated.
    """
    sections: Dict[str, str] = {}
    matches = list(_HEADER_RE.finditer(text))

    first_start = matches[0].start() if matches else len(text)
    sections["preamble"] = text[:first_start]

    for index, match in enumerate(matches):
        key = match.lastgroup
        end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
        body = text[match.end():end]
        sections[key] = f"{sections[key]}\n\n{body}" if key in sections else body

    return sections


def parse_report_content(text: str, is_pdf: bool = False) -> CreditReportData:
    """
    Parse raw report text into CreditReportData.

    Never raises: a failing extractor is logged and leaves its part of the
    report empty.
    """
    text = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    report = CreditReportData(raw_text=text, is_pdf=is_pdf)

    report.bureaus = detect_bureaus(text)
    detected = report.bureaus.detected()
    default_bureau = detected[0] if len(detected) == 1 else ""

    sections = split_sections(text)
    logger.info(f"Parsing report: {len(text)} chars, sections={sorted(k for k in sections if k != 'preamble')}, bureaus={detected}")

    try:
        personal_text = sections["preamble"] + "\n" + sections.get("personal", "")
        if "personal" not in sections or len(personal_text) < MIN_CONTENT_LENGTH:
            personal_text = text
        report.personal_info = extract_personal_info(personal_text)
    except Exception as e:
        logger.warning(f"Personal info extraction failed: {e}")
        report.personal_info = PersonalInfo()

    try:
        accounts_text = sections.get("accounts")
        if accounts_text is None:
            accounts_text = text
        report.accounts = extract_accounts(accounts_text, full_text=text, default_bureau=default_bureau)
    except Exception as e:
        logger.warning(f"Account extraction failed: {e}")

    try:
        report.inquiries = extract_inquiries(sections.get("inquiries", ""), default_bureau)
    except Exception as e:
        logger.warning(f"Inquiry extraction failed: {e}")

    try:
        report.public_records = extract_public_records(sections.get("public_records", ""), default_bureau)
    except Exception as e:
        logger.warning(f"Public record extraction failed: {e}")

    logger.info(
        f"Parsed report: {len(report.accounts)} accounts, {len(report.inquiries)} inquiries, "
        f"{len(report.public_records)} public records"
    )
    return report
