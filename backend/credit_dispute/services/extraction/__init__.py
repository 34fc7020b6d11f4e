"""Credit Dispute Engine - Upload Validation and Text Extraction"""
from .file_validator import (
    FileValidationError,
    FileValidationResult,
    MAX_FILE_SIZE,
    ALLOWED_EXTENSIONS,
    validate_file,
    ensure_valid_file,
)
from .text_extractor import (
    TextExtractionError,
    extract_text,
    extract_text_async,
    is_pdf_file,
)

__all__ = [
    "FileValidationError",
    "FileValidationResult",
    "MAX_FILE_SIZE",
    "ALLOWED_EXTENSIONS",
    "validate_file",
    "ensure_valid_file",
    "TextExtractionError",
    "extract_text",
    "extract_text_async",
    "is_pdf_file",
]
