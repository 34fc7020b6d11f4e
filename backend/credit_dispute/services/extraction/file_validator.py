"""
Credit Dispute Engine - Upload Validation

Security hygiene for uploaded credit reports: size cap, extension
allow-list, suspicious file names and dangerous magic numbers.
"""
from __future__ import annotations
import logging
import os
import re
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)


class FileValidationError(Exception):
    """Raised when an uploaded file fails validation."""
    pass


# =============================================================================
# CONSTANTS
# =============================================================================

MAX_FILE_SIZE = int(os.getenv("MAX_UPLOAD_MB", "50")) * 1024 * 1024

ALLOWED_EXTENSIONS = {".pdf", ".txt", ".csv", ".html", ".htm"}

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "text/plain",
    "text/csv",
    "application/csv",
    "text/html",
    "application/html",
}

DANGEROUS_SIGNATURES = [
    b"MZ",                  # PE/EXE
    b"\x7fELF",             # ELF
    b"\xcf\xfa\xed\xfe",    # Mach-O
    b"\xfe\xed\xfa\xcf",    # Mach-O (reverse)
    b"#!",                  # Shebang scripts
    b"PK\x03\x04",          # ZIP
    b"Rar!",                # RAR
]

PDF_SIGNATURE = b"%PDF"

SUSPICIOUS_NAME_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in (
        r"\.exe\.", r"\.scr\.", r"\.bat\.", r"\.cmd\.", r"\.com\.",
        r"\.pif\.", r"\.vbs\.", r"\.js\.", r"\.\w+\.exe$", r"\.\w+\.scr$",
    )
]


@dataclass
class FileValidationResult:
    is_valid: bool
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


# =============================================================================
# CHECKS
# =============================================================================

def get_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower()


def is_valid_extension(filename: str) -> bool:
    return get_extension(filename) in ALLOWED_EXTENSIONS


def has_suspicious_name(filename: str) -> bool:
    return any(p.search(filename) for p in SUSPICIOUS_NAME_PATTERNS)


def is_dangerous_signature(head: bytes) -> bool:
    return any(head.startswith(sig) for sig in DANGEROUS_SIGNATURES)


def validate_file(
    filename: str,
    content: bytes,
    content_type: Optional[str] = None,
    max_size: int = MAX_FILE_SIZE,
) -> FileValidationResult:
    """
    Validate an uploaded file.

    Hard failures (size, empty, extension, name, signature) give
    is_valid=False with an error message. Soft problems such as an
    unknown MIME type or a PDF whose bytes do not start with %PDF are
    returned as warnings.
    """
    warnings: List[str] = []
    size = len(content)

    if size > max_size:
        return FileValidationResult(
            is_valid=False,
            error=f"File size exceeds maximum limit of {max_size // (1024 * 1024)}MB",
        )

    if size == 0:
        return FileValidationResult(is_valid=False, error="File is empty")

    if not is_valid_extension(filename):
        return FileValidationResult(
            is_valid=False,
            error="File type not allowed. Please upload PDF, TXT, CSV, or HTML files only.",
        )

    if content_type and content_type.split(";")[0].strip().lower() not in ALLOWED_MIME_TYPES:
        warnings.append("File MIME type could not be verified. Proceeding with caution.")

    if has_suspicious_name(filename):
        return FileValidationResult(is_valid=False, error="File name contains suspicious patterns")

    head = content[:10]
    if is_dangerous_signature(head):
        return FileValidationResult(is_valid=False, error="File contains potentially dangerous content")

    if get_extension(filename) == ".pdf" and not head.startswith(PDF_SIGNATURE):
        warnings.append("File extension is PDF but content signature does not match")

    for warning in warnings:
        logger.warning(f"{filename}: {warning}")

    return FileValidationResult(is_valid=True, warnings=warnings)


def ensure_valid_file(filename: str, content: bytes, content_type: Optional[str] = None) -> List[str]:
    """Validate and raise FileValidationError on failure. Returns warnings."""
    result = validate_file(filename, content, content_type)
    if not result.is_valid:
        raise FileValidationError(result.error)
    return result.warnings
