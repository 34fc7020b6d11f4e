"""
Tests for the per-user report store.

Test Coverage:
1. Parsed report data survives a save/load cycle
2. Generated letters and the pending letter
3. Users are isolated from one another
4. Uploaded files are written and deleted
5. Corrupt documents are treated as empty
"""
import os

import pytest

from credit_dispute.models import CreditReportAccount, CreditReportData, DisputeLetter, LetterStatus
from credit_dispute.services.storage import ReportStore


@pytest.fixture
def store(tmp_path):
    return ReportStore(str(tmp_path))


@pytest.fixture
def report():
    return CreditReportData(
        accounts=[CreditReportAccount(account_name="CHASE", balance="$500", remarks=["Disputed"])],
        raw_text="CHASE Balance: $500",
    )


class TestReportData:

    def test_missing_user_has_no_report(self, store):
        assert store.load_report_data("nobody") is None

    def test_save_and_load(self, store, report):
        store.save_report_data("user-1", report)

        assert store.load_report_data("user-1") == report

    def test_users_are_isolated(self, store, report):
        store.save_report_data("user-1", report)

        assert store.load_report_data("user-2") is None

    def test_clear(self, store, report):
        store.save_report_data("user-1", report)
        store.clear("user-1")

        assert store.load_report_data("user-1") is None

    def test_corrupt_document_is_ignored(self, store, report):
        store.save_report_data("user-1", report)
        path = store._document_path("user-1")
        path.write_text("{not json", encoding="utf-8")

        assert store.load_report_data("user-1") is None


class TestLetters:

    def test_save_and_load_letters(self, store):
        letter = DisputeLetter(
            title="Late Payment (CHASE)",
            bureau="Experian",
            recipient="Experian",
            content="Dear Experian...",
            status=LetterStatus.READY,
            laws_cited=["FCRA § 611"],
        )
        store.save_letters("user-1", [letter])

        loaded = store.load_letters("user-1")

        assert len(loaded) == 1
        assert loaded[0].id == letter.id
        assert loaded[0].status == LetterStatus.READY
        assert loaded[0].created_at == letter.created_at
        assert loaded[0].laws_cited == ["FCRA § 611"]

    def test_pending_letter_set_and_clear(self, store, report):
        store.save_report_data("user-1", report)
        store.set_pending_letter("user-1", {"title": "Draft"})

        assert store.get_pending_letter("user-1") == {"title": "Draft"}

        store.set_pending_letter("user-1", None)

        assert store.get_pending_letter("user-1") is None
        assert store.load_report_data("user-1") == report


class TestUploads:

    def test_save_and_delete_upload(self, store):
        path = store.save_upload("user-1", "../my report.txt", b"content")

        assert os.path.exists(path)
        assert os.path.dirname(path).startswith(str(store.base_dir))
        assert path.endswith("_.._my_report.txt")
        with open(path, "rb") as f:
            assert f.read() == b"content"

        store.delete_upload(path)

        assert not os.path.exists(path)

    def test_delete_missing_upload_is_a_no_op(self, store):
        store.delete_upload(None)
        store.delete_upload(str(store.base_dir / "missing.txt"))
