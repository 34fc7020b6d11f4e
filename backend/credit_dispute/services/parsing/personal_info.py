"""
Credit Dispute Engine - Personal Information Extraction

Label-driven regex passes over the personal section of a report.
Anything that cannot be found stays an empty string.
"""
from __future__ import annotations
import logging
import re
from typing import Optional

from ...models.ssot import PersonalInfo
from .normalize import clean_text

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 100

NAME_PATTERNS = [
    re.compile(r"^\s*(?:Consumer\s+Name|Full\s+Name|Name|Report\s+For|Prepared\s+For|Consumer)\s*:\s*([A-Za-z][A-Za-z \t.'-]{2,40})\s*$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\s*(?:PERSONAL\s+INFORMATION|PERSONAL\s+PROFILE)\s*\n\s*([A-Z][A-Za-z.'-]+(?:\s+[A-Z][A-Za-z.'-]*){1,3})\s*$", re.MULTILINE),
]

# Captured names containing these are headings or URLs, not people
NAME_REJECT_FRAGMENTS = (".com", ".gov", "llc", "www", "report", "apache", "version")

ADDRESS_PATTERN = re.compile(
    r"^\s*(?:Current\s+Address|Address|Street)\s*:\s*(.+?)\s*$", re.IGNORECASE | re.MULTILINE
)
CITY_STATE_ZIP_LABELLED = re.compile(
    r"^\s*(?:City\s*/\s*State\s*/\s*Zip|City,\s*State\s+Zip|City)\s*:\s*(.+?)\s*$", re.IGNORECASE | re.MULTILINE
)
CITY_STATE_ZIP = re.compile(r"([A-Za-z][A-Za-z .'-]*?),?\s+([A-Z]{2})\s+(\d{5}(?:-\d{4})?)\b")

SSN_PATTERN = re.compile(
    r"(?:SSN|Social\s+Security(?:\s+Number)?)\s*[:#]?\s*(?:[\dXx*]{3}-[\dXx*]{2}-|[\dXx*]{5})(\d{4})",
    re.IGNORECASE,
)
DOB_PATTERN = re.compile(
    r"(?:Date\s+of\s+Birth|Birth\s+Date|DOB|Year\s+of\s+Birth)\s*:?\s*(\d{1,2}/\d{1,2}/\d{2,4}|\d{4}-\d{2}-\d{2}|[A-Za-z]{3,9}\.? \d{1,2}, \d{4}|\d{4})",
    re.IGNORECASE,
)
PHONE_PATTERN = re.compile(
    r"(?:Phone|Telephone)(?:\s+Number)?s?\s*:?\s*(\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4})",
    re.IGNORECASE,
)


def _is_plausible_name(candidate: str) -> bool:
    lowered = candidate.lower()
    if any(fragment in lowered for fragment in NAME_REJECT_FRAGMENTS):
        return False
    return len(candidate) > 3


def extract_name(content: str) -> str:
    for pattern in NAME_PATTERNS:
        for match in pattern.finditer(content):
            candidate = clean_text(match.group(1))
            if _is_plausible_name(candidate):
                return candidate
    return ""


def _split_city_state_zip(text: str) -> Optional[tuple]:
    match = CITY_STATE_ZIP.search(text)
    if not match:
        return None
    return clean_text(match.group(1)), match.group(2), match.group(3)


def extract_personal_info(content: str) -> PersonalInfo:
    """
    Extract the consumer identity block.

    Short or unrecognisable content yields an all-empty PersonalInfo.
    SSNs are reduced to the masked form XXX-XX-1234.
    """
    info = PersonalInfo()
    if not content or len(content) < MIN_CONTENT_LENGTH:
        logger.warning("Content too short for personal info extraction")
        return info

    content = content.replace("\r\n", "\n")

    info.name = extract_name(content)

    address_match = ADDRESS_PATTERN.search(content)
    if address_match:
        address = clean_text(address_match.group(1))
        # "123 Main St, Springfield, IL 62704" on one line
        parts = address.split(",", 1)
        if len(parts) == 2:
            csz = _split_city_state_zip(parts[1])
            if csz:
                address = parts[0].strip()
                info.city, info.state, info.zip_code = csz
        info.address = address

    if not info.city:
        labelled = CITY_STATE_ZIP_LABELLED.search(content)
        csz = _split_city_state_zip(labelled.group(1)) if labelled else None
        if csz is None and address_match:
            # City line directly under the address line
            following = content[address_match.end():].lstrip("\n").split("\n", 1)[0]
            csz = _split_city_state_zip(following)
        if csz:
            info.city, info.state, info.zip_code = csz

    ssn_match = SSN_PATTERN.search(content)
    if ssn_match:
        info.ssn = f"XXX-XX-{ssn_match.group(1)}"

    dob_match = DOB_PATTERN.search(content)
    if dob_match:
        info.dob = dob_match.group(1)

    phone_match = PHONE_PATTERN.search(content)
    if phone_match:
        info.phone = phone_match.group(1)

    logger.info(f"Personal info extracted: name={'yes' if info.name else 'no'}, address={'yes' if info.address else 'no'}")
    return info
