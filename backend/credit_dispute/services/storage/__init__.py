"""Credit Dispute Engine - Storage Layer"""
from .report_store import ReportStore, get_report_store, STORAGE_DIR

__all__ = ["ReportStore", "get_report_store", "STORAGE_DIR"]
