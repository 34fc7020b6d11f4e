"""
Credit Dispute Engine - Reports API Router

Handles report upload, text extraction, parsing and issue detection.
All endpoints require authentication.
"""
from __future__ import annotations
import logging
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models.db_models import CreditReportDB, ProfileDB
from ..services.extraction import FileValidationError, TextExtractionError, ensure_valid_file
from ..services.pipeline import analyze_report
from ..services.storage import ReportStore, get_report_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


# =============================================================================
# PYDANTIC MODELS FOR API
# =============================================================================

class IssueResponse(BaseModel):
    id: str
    type: str
    title: str
    description: str
    impact: str
    impact_color: str
    laws: List[str]
    account: Optional[dict] = None


class UploadResponse(BaseModel):
    report_id: str
    message: str
    bureau: Optional[str] = None
    total_accounts: int
    total_issues: int
    issues: List[IssueResponse]
    warnings: List[str] = []
    timed_out: bool = False


class ReportListItem(BaseModel):
    report_id: str
    filename: str
    uploaded: str
    bureau: Optional[str] = None
    accounts: int
    issues: int


class ReportDetailResponse(BaseModel):
    report_id: str
    filename: str
    uploaded: str
    bureau: Optional[str] = None
    processed: bool
    processing_error: Optional[str] = None
    bureaus: dict
    personal_info: dict
    accounts: List[dict]
    inquiries: List[dict]
    public_records: List[dict]


class DeleteResponse(BaseModel):
    status: str
    report_id: Optional[str] = None


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_owned_report(report_id: str, user: ProfileDB, db: Session) -> CreditReportDB:
    """Fetch a report owned by the user or raise 404."""
    report = db.query(CreditReportDB).filter(
        CreditReportDB.id == report_id,
        CreditReportDB.user_id == user.id
    ).first()
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    return report


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.get("", response_model=List[ReportListItem])
async def list_reports(
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List all reports for the authenticated user, newest first.
    """
    reports = db.query(CreditReportDB).filter(
        CreditReportDB.user_id == current_user.id
    ).order_by(CreditReportDB.created_at.desc()).all()

    return [
        ReportListItem(
            report_id=report.id,
            filename=report.file_name,
            uploaded=str(report.created_at),
            bureau=report.bureau,
            accounts=report.accounts_count or 0,
            issues=report.issues_count or 0,
        )
        for report in reports
    ]


@router.post("/upload", response_model=UploadResponse)
async def upload_report(
    file: UploadFile = File(...),
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: ReportStore = Depends(get_report_store),
):
    """
    Upload a credit report (PDF, TXT, CSV or HTML), detect issues and
    store the parsed result for the authenticated user.
    """
    filename = file.filename or "upload"
    content = await file.read()

    try:
        warnings = ensure_valid_file(filename, content, file.content_type)
    except FileValidationError as e:
        logger.warning(f"Rejected upload {filename} from {current_user.email}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = await analyze_report(filename, content)
    except TextExtractionError as e:
        logger.warning(f"Could not extract text from {filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    file_path = store.save_upload(current_user.id, filename, content)

    try:
        report = result.report
        issues = [issue.to_dict() for issue in result.issues]

        db_report = CreditReportDB(
            id=str(uuid4()),
            user_id=current_user.id,
            file_name=filename,
            file_path=file_path,
            bureau=report.primary_bureau,
            processed=True,
            processing_error="; ".join(result.warnings) if result.timed_out else None,
            report_data=report.to_dict(),
            issues_data=issues,
            accounts_count=len(report.accounts),
            issues_count=len(issues),
        )
        db.add(db_report)
        db.commit()

        store.save_report_data(current_user.id, report)
    except Exception as e:
        db.rollback()
        store.delete_upload(file_path)
        logger.error(f"Error processing report: {e}")
        raise HTTPException(status_code=500, detail=f"Error processing report: {e}")

    logger.info(f"Report {db_report.id} saved: {len(report.accounts)} accounts, {len(issues)} issues")

    return UploadResponse(
        report_id=db_report.id,
        message="Report uploaded and processed successfully",
        bureau=db_report.bureau,
        total_accounts=len(report.accounts),
        total_issues=len(issues),
        issues=[IssueResponse(**issue) for issue in issues],
        warnings=list(warnings) + list(result.warnings),
        timed_out=result.timed_out,
    )


@router.get("/{report_id}", response_model=ReportDetailResponse)
async def get_report(
    report_id: str,
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Parsed report data. Only returns if owned by current user."""
    report = get_owned_report(report_id, current_user, db)
    data = report.report_data or {}

    return ReportDetailResponse(
        report_id=report.id,
        filename=report.file_name,
        uploaded=str(report.created_at),
        bureau=report.bureau,
        processed=bool(report.processed),
        processing_error=report.processing_error,
        bureaus=data.get("bureaus") or {},
        personal_info=data.get("personal_info") or {},
        accounts=data.get("accounts") or [],
        inquiries=data.get("inquiries") or [],
        public_records=data.get("public_records") or [],
    )


@router.get("/{report_id}/issues", response_model=List[IssueResponse])
async def get_report_issues(
    report_id: str,
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Issues detected when the report was uploaded."""
    report = get_owned_report(report_id, current_user, db)
    return [IssueResponse(**issue) for issue in report.issues_data or []]


@router.delete("/{report_id}", response_model=DeleteResponse)
async def delete_report(
    report_id: str,
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: ReportStore = Depends(get_report_store),
):
    """
    Delete a report and its stored upload.
    Letters generated from it are kept with their report link cleared.
    """
    report = get_owned_report(report_id, current_user, db)
    file_path = report.file_path

    db.delete(report)
    db.commit()
    store.delete_upload(file_path)

    logger.info(f"Report {report_id} deleted by {current_user.email}")
    return DeleteResponse(status="deleted", report_id=report_id)
