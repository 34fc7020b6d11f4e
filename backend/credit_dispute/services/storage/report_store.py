"""
Credit Dispute Engine - Report Store

Per-user JSON documents holding the state that moves between pipeline
steps:

    creditReportData        latest parsed report (CreditReportData.to_dict)
    generatedDisputeLetters letters from the last generation run
    pendingDisputeLetter    the letter the user is currently editing

Uploaded files are kept alongside under uploads/<user_id>/.
"""
from __future__ import annotations
import json
import logging
import os
import re
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ...models.ssot import CreditReportData, DisputeLetter

logger = logging.getLogger(__name__)

STORAGE_DIR = os.getenv(
    "STORAGE_DIR",
    str(Path(__file__).parent.parent.parent.parent / "data" / "storage"),
)

REPORT_KEY = "creditReportData"
LETTERS_KEY = "generatedDisputeLetters"
PENDING_KEY = "pendingDisputeLetter"


def _safe_name(value: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", value or "") or "file"


class ReportStore:
    """File-backed JSON store, one document per user."""

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = Path(base_dir or STORAGE_DIR)
        self._lock = threading.Lock()

    def _document_path(self, user_id: str) -> Path:
        return self.base_dir / "users" / f"{_safe_name(user_id)}.json"

    def _read(self, user_id: str) -> Dict[str, Any]:
        path = self._document_path(user_id)
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable store document for user {user_id}, starting fresh: {e}")
            return {}

    def _update(self, user_id: str, key: str, value: Any) -> None:
        with self._lock:
            document = self._read(user_id)
            if value is None:
                document.pop(key, None)
            else:
                document[key] = value
            path = self._document_path(user_id)
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, default=str)
            os.replace(tmp_path, path)

    # -------------------------------------------------------------------------
    # Report data
    # -------------------------------------------------------------------------

    def save_report_data(self, user_id: str, report: CreditReportData) -> None:
        self._update(user_id, REPORT_KEY, report.to_dict())

    def load_report_data(self, user_id: str) -> Optional[CreditReportData]:
        data = self._read(user_id).get(REPORT_KEY)
        return CreditReportData.from_dict(data) if data else None

    # -------------------------------------------------------------------------
    # Letters
    # -------------------------------------------------------------------------

    def save_letters(self, user_id: str, letters: List[DisputeLetter]) -> None:
        self._update(user_id, LETTERS_KEY, [letter.to_dict() for letter in letters])

    def load_letters(self, user_id: str) -> List[DisputeLetter]:
        return [DisputeLetter.from_dict(d) for d in self._read(user_id).get(LETTERS_KEY) or []]

    def set_pending_letter(self, user_id: str, letter: Optional[Dict[str, Any]]) -> None:
        """Store (or with None, clear) the letter being edited."""
        self._update(user_id, PENDING_KEY, letter)

    def get_pending_letter(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self._read(user_id).get(PENDING_KEY)

    def clear(self, user_id: str) -> None:
        with self._lock:
            path = self._document_path(user_id)
            if path.exists():
                path.unlink()

    # -------------------------------------------------------------------------
    # Uploaded files
    # -------------------------------------------------------------------------

    def save_upload(self, user_id: str, filename: str, content: bytes) -> str:
        """Write the original upload to disk and return its path."""
        directory = self.base_dir / "uploads" / _safe_name(user_id)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{uuid4().hex[:12]}_{_safe_name(filename)}"
        path.write_bytes(content)
        logger.info(f"Stored upload {filename} ({len(content)} bytes) at {path}")
        return str(path)

    def delete_upload(self, path: Optional[str]) -> None:
        if path and os.path.exists(path):
            os.remove(path)


_store: Optional[ReportStore] = None


def get_report_store() -> ReportStore:
    """FastAPI dependency returning the process-wide store."""
    global _store
    if _store is None:
        _store = ReportStore()
    return _store
