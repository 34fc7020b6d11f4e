"""
Credit Dispute Engine - Analysis Runner

Runs extraction -> parsing -> issue detection for one upload, raced
against ANALYSIS_TIMEOUT_SECONDS. When the timeout wins, canned sample
report data and the fallback issue list are returned with timed_out set.
"""
from __future__ import annotations
import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

from ..models.ssot import (
    BureausPresent, CreditReportAccount, CreditReportData, CreditReportInquiry,
    IdentifiedIssue, PersonalInfo,
)
from .analysis import detect_issues, get_fallback_issues
from .extraction import extract_text_async, is_pdf_file
from .parsing import parse_report_content

logger = logging.getLogger(__name__)

ANALYSIS_TIMEOUT_SECONDS = float(os.getenv("ANALYSIS_TIMEOUT_SECONDS", "30"))


@dataclass
class AnalysisResult:
    report: CreditReportData
    issues: List[IdentifiedIssue]
    timed_out: bool = False
    warnings: List[str] = field(default_factory=list)


Analyzer = Callable[[str, bytes], Awaitable[AnalysisResult]]


def get_sample_report_data() -> CreditReportData:
    """Placeholder report shown when real analysis does not finish in time."""
    return CreditReportData(
        bureaus=BureausPresent(experian=True, equifax=True, transunion=True),
        personal_info=PersonalInfo(),
        accounts=[
            CreditReportAccount(
                account_name="Sample Credit Card",
                account_number="xxxxxxxx1234",
                account_type="Credit Card",
                balance="$1,250",
                current_balance="$1,250",
                credit_limit="$5,000",
                payment_status="Current",
                status="Open",
            ),
            CreditReportAccount(
                account_name="Sample Auto Loan",
                account_number="xxxxxxxx5678",
                account_type="Auto Loan",
                balance="$8,400",
                current_balance="$8,400",
                payment_status="30 Days Late",
                status="Open",
                is_negative=True,
            ),
        ],
        inquiries=[CreditReportInquiry(creditor="Sample Bank", inquiry_date="01/15/2024")],
        raw_text=None,
        is_pdf=False,
    )


async def run_analysis(filename: str, content: bytes) -> AnalysisResult:
    """Extract, parse and detect without any timeout."""
    text = await extract_text_async(filename, content)
    await asyncio.sleep(0)

    report = parse_report_content(text, is_pdf=is_pdf_file(filename, content))
    await asyncio.sleep(0)

    issues = detect_issues(report)
    return AnalysisResult(report=report, issues=issues)


async def analyze_report(
    filename: str,
    content: bytes,
    timeout: Optional[float] = None,
    analyzer: Optional[Analyzer] = None,
) -> AnalysisResult:
    """
    Analyze an upload, substituting canned data if it takes too long.

    Extraction errors propagate; only the timeout is converted into a
    fallback result.
    """
    timeout = ANALYSIS_TIMEOUT_SECONDS if timeout is None else timeout
    analyzer = analyzer or run_analysis

    try:
        return await asyncio.wait_for(analyzer(filename, content), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Analysis of {filename} exceeded {timeout}s, returning sample data")
        return AnalysisResult(
            report=get_sample_report_data(),
            issues=get_fallback_issues(),
            timed_out=True,
            warnings=[f"Analysis timed out after {timeout} seconds; showing sample results."],
        )
