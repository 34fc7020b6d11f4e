"""
Credit Dispute Engine - Text Extractor

Pulls raw text out of an uploaded report. PDFs go through pdfplumber,
HTML through BeautifulSoup, CSV rows become "Header: value" lines and
anything else is decoded as plain text.
"""
from __future__ import annotations
import asyncio
import csv
import io
import logging
from typing import List

import pdfplumber
from bs4 import BeautifulSoup

from .file_validator import get_extension

logger = logging.getLogger(__name__)

# pdfplumber/pdfminer are very chatty at INFO
logging.getLogger("pdfplumber").setLevel(logging.ERROR)
logging.getLogger("pdfminer").setLevel(logging.ERROR)


class TextExtractionError(Exception):
    """Raised when no text can be read from an uploaded file."""
    pass


def is_pdf_file(filename: str, content: bytes = b"") -> bool:
    return get_extension(filename) == ".pdf" or content[:4] == b"%PDF"


def decode_text(content: bytes) -> str:
    """Decode bytes as UTF-8, falling back to latin-1 (never fails)."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


# =============================================================================
# FORMAT-SPECIFIC EXTRACTORS
# =============================================================================

def _pdf_page_texts(content: bytes) -> List[str]:
    try:
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            return [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        raise TextExtractionError(f"Could not read PDF: {e}") from e


def extract_pdf_text(content: bytes) -> str:
    pages = _pdf_page_texts(content)
    text = "\n\n".join(p for p in pages if p.strip())
    logger.info(f"Extracted {len(text)} characters from {len(pages)} PDF pages")
    return text


def extract_csv_text(content: bytes) -> str:
    """Flatten CSV rows into labelled lines, one blank line between rows."""
    reader = csv.reader(io.StringIO(decode_text(content)))
    rows = [row for row in reader if any(cell.strip() for cell in row)]
    if not rows:
        return ""

    header, body = rows[0], rows[1:]
    if not body:
        return "\n".join(header)

    blocks = []
    for row in body:
        lines = [
            f"{label.strip()}: {value.strip()}"
            for label, value in zip(header, row)
            if value.strip()
        ]
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def extract_html_text(content: bytes) -> str:
    soup = BeautifulSoup(decode_text(content), "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    lines = [line.strip() for line in soup.get_text("\n").splitlines()]
    # Keep paragraph breaks, drop runs of empty lines
    text_lines: List[str] = []
    for line in lines:
        if line or (text_lines and text_lines[-1]):
            text_lines.append(line)
    return "\n".join(text_lines).strip()


# =============================================================================
# PUBLIC API
# =============================================================================

def extract_text(filename: str, content: bytes) -> str:
    """Extract raw text from an uploaded file based on its extension."""
    extension = get_extension(filename)

    if is_pdf_file(filename, content):
        text = extract_pdf_text(content)
    elif extension == ".csv":
        text = extract_csv_text(content)
    elif extension in (".html", ".htm"):
        text = extract_html_text(content)
    else:
        text = decode_text(content)

    if not text.strip():
        raise TextExtractionError(f"No readable text found in {filename}")
    return text


async def extract_text_async(filename: str, content: bytes) -> str:
    """
    Async variant of extract_text.

    PDF pages are read one at a time with a yield to the event loop
    between pages so long reports do not starve other requests.
    """
    if not is_pdf_file(filename, content):
        return extract_text(filename, content)

    pages: List[str] = []
    try:
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            for page in pdf.pages:
                pages.append(page.extract_text() or "")
                await asyncio.sleep(0)
    except Exception as e:
        raise TextExtractionError(f"Could not read PDF: {e}") from e

    text = "\n\n".join(p for p in pages if p.strip())
    if not text.strip():
        raise TextExtractionError(f"No readable text found in {filename}")
    return text
