"""
Credit Dispute Engine - Letters API Router

Generates dispute letters from a report's detected issues and manages the
saved letters, the pending letter, and stored letter templates.
All endpoints require authentication.
"""
from __future__ import annotations
import logging
from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models.db_models import DisputeLetterDB, LetterTemplateDB, ProfileDB
from ..models.ssot import (
    CreditReportData, DisputeLetter, IdentifiedIssue, LetterStatus, PersonalInfo, UserInfo
)
from ..services.letters import (
    generate_dispute_letters,
    generate_letter_with_fallback,
    normalize_issue_type,
)
from ..services.storage import ReportStore, get_report_store
from .reports import get_owned_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/letters", tags=["letters"])


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class GenerateLettersRequest(BaseModel):
    report_id: str
    issue_ids: Optional[List[str]] = None  # Explicit selection skips automatic prioritisation


class LetterResponse(BaseModel):
    letter_id: str
    report_id: Optional[str] = None
    title: str
    issue_type: str
    bureau: Optional[str] = None
    creditor_name: Optional[str] = None
    account_number: Optional[str] = None
    content: str
    has_edits: bool = False
    laws_cited: List[str] = []
    generator: str = "primary"
    status: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class UpdateLetterRequest(BaseModel):
    content: Optional[str] = None
    status: Optional[LetterStatus] = None


class PendingLetterRequest(BaseModel):
    letter: Optional[dict] = None


class PendingLetterResponse(BaseModel):
    letter: Optional[dict] = None


class TemplateRequest(BaseModel):
    name: str
    issue_type: str
    content: str


class TemplateResponse(BaseModel):
    id: str
    name: str
    issue_type: str
    content: str


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def letter_response(letter: DisputeLetterDB) -> LetterResponse:
    return LetterResponse(
        letter_id=letter.id,
        report_id=letter.credit_report_id,  # May be NULL if report was deleted
        title=letter.title,
        issue_type=letter.issue_type,
        bureau=letter.bureau,
        creditor_name=letter.creditor_name,
        account_number=letter.account_number,
        content=letter.edited_content or letter.letter_content,
        has_edits=letter.edited_content is not None,
        laws_cited=letter.laws_cited or [],
        generator=letter.generator or "primary",
        status=letter.status,
        created_at=letter.generated_at.isoformat() if letter.generated_at else None,
        updated_at=letter.updated_at.isoformat() if letter.updated_at else None,
    )


def build_user_info(user: ProfileDB, personal_info: Optional[PersonalInfo] = None) -> UserInfo:
    """Sender block from the profile, filling gaps from the parsed report."""
    parsed = UserInfo.from_personal_info(personal_info or PersonalInfo())
    return UserInfo(
        name=user.full_name or parsed.name,
        address=user.street_address or parsed.address,
        city=user.city or parsed.city,
        state=user.state or parsed.state,
        zip_code=user.zip_code or parsed.zip_code,
    )


def user_templates(user: ProfileDB, db: Session):
    """Templates stored by this profile. Other profiles' templates never apply."""
    return db.query(LetterTemplateDB).filter(LetterTemplateDB.user_id == user.id)


def get_owned_letter(letter_id: str, user: ProfileDB, db: Session) -> DisputeLetterDB:
    letter = db.query(DisputeLetterDB).filter(
        DisputeLetterDB.id == letter_id,
        DisputeLetterDB.user_id == user.id
    ).first()
    if not letter:
        raise HTTPException(status_code=404, detail="Letter not found")
    return letter


# =============================================================================
# GENERATION
# =============================================================================

@router.post("/generate", response_model=List[LetterResponse])
async def generate_letters(
    request: GenerateLettersRequest,
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: ReportStore = Depends(get_report_store),
):
    """
    Generate dispute letters for a report's issues and save them as drafts.
    """
    report = get_owned_report(request.report_id, current_user, db)
    issues = [IdentifiedIssue.from_dict(d) for d in report.issues_data or []]
    report_data = CreditReportData.from_dict(report.report_data or {})

    if request.issue_ids is not None:
        wanted = set(request.issue_ids)
        issues = [i for i in issues if i.id in wanted]
        if not issues:
            raise HTTPException(status_code=400, detail="None of the requested issues belong to this report")

    user_info = build_user_info(current_user, report_data.personal_info)
    stored_templates = {
        normalize_issue_type(t.issue_type): t.content
        for t in user_templates(current_user, db).order_by(LetterTemplateDB.created_at).all()
    }

    try:
        if request.issue_ids is not None:
            letters: List[DisputeLetter] = [
                generate_letter_with_fallback(issue, user_info, stored_templates=stored_templates)
                for issue in issues
            ]
        else:
            letters = generate_dispute_letters(issues, user_info, stored_templates)

        rows = []
        for letter in letters:
            row = DisputeLetterDB(
                id=letter.id,
                user_id=current_user.id,
                credit_report_id=report.id,
                title=letter.title,
                issue_type=letter.error_type or "general",
                bureau=letter.bureau,
                creditor_name=letter.account_name,
                account_number=letter.account_number,
                explanation=letter.explanation,
                letter_content=letter.content,
                laws_cited=letter.laws_cited,
                generator=letter.generator,
                status=LetterStatus.DRAFT.value,
            )
            db.add(row)
            rows.append(row)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error generating letters for report {report.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error generating letters: {e}")

    store.save_letters(current_user.id, letters)
    if letters:
        store.set_pending_letter(current_user.id, letters[0].to_dict())

    logger.info(f"Generated {len(rows)} letters for report {report.id}")
    return [letter_response(row) for row in rows]


# =============================================================================
# PENDING LETTER
# =============================================================================

@router.get("/pending", response_model=PendingLetterResponse)
async def get_pending_letter(
    current_user: ProfileDB = Depends(get_current_user),
    store: ReportStore = Depends(get_report_store),
):
    """The letter currently being edited, if any."""
    return PendingLetterResponse(letter=store.get_pending_letter(current_user.id))


@router.put("/pending", response_model=PendingLetterResponse)
async def set_pending_letter(
    request: PendingLetterRequest,
    current_user: ProfileDB = Depends(get_current_user),
    store: ReportStore = Depends(get_report_store),
):
    """Replace (or with a null letter, clear) the pending letter."""
    store.set_pending_letter(current_user.id, request.letter)
    return PendingLetterResponse(letter=request.letter)


# =============================================================================
# TEMPLATES
# =============================================================================

@router.get("/templates", response_model=List[TemplateResponse])
async def list_templates(
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    templates = user_templates(current_user, db).order_by(LetterTemplateDB.issue_type).all()
    return [
        TemplateResponse(id=t.id, name=t.name, issue_type=t.issue_type, content=t.content)
        for t in templates
    ]


@router.post("/templates", response_model=TemplateResponse, status_code=201)
async def create_template(
    request: TemplateRequest,
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Store a template for the current user. It overrides the built-in
    template for its issue type in that user's letters; an issue type of
    "general" replaces the default fallback.
    """
    template = LetterTemplateDB(
        id=str(uuid4()),
        user_id=current_user.id,
        name=request.name,
        issue_type=normalize_issue_type(request.issue_type),
        content=request.content,
    )
    db.add(template)
    db.commit()

    logger.info(f"Template '{template.name}' saved for issue type {template.issue_type}")
    return TemplateResponse(id=template.id, name=template.name, issue_type=template.issue_type, content=template.content)


# =============================================================================
# SAVED LETTERS
# =============================================================================

@router.get("", response_model=List[LetterResponse])
async def list_letters(
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    All letters for the current user, newest first.
    Includes letters whose report has since been deleted.
    """
    letters = (
        db.query(DisputeLetterDB)
        .filter(DisputeLetterDB.user_id == current_user.id)
        .order_by(DisputeLetterDB.generated_at.desc())
        .all()
    )
    return [letter_response(letter) for letter in letters]


@router.get("/{letter_id}", response_model=LetterResponse)
async def get_letter(
    letter_id: str,
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get a letter by ID.
    Returns edited content if it exists, otherwise the generated content.
    """
    return letter_response(get_owned_letter(letter_id, current_user, db))


@router.put("/{letter_id}", response_model=LetterResponse)
async def update_letter(
    letter_id: str,
    request: UpdateLetterRequest,
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Save edited content and/or change the letter status.
    Moving to "sent" records the send time.
    """
    if request.content is None and request.status is None:
        raise HTTPException(status_code=400, detail="Nothing to update")

    letter = get_owned_letter(letter_id, current_user, db)

    if request.content is not None:
        letter.edited_content = request.content
    if request.status is not None:
        letter.status = request.status.value
        if request.status == LetterStatus.SENT and not letter.sent:
            letter.sent = True
            letter.sent_at = datetime.utcnow()

    db.commit()
    db.refresh(letter)
    return letter_response(letter)


@router.delete("/{letter_id}")
async def delete_letter(
    letter_id: str,
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Delete a letter by ID.
    Only works for letters owned by current user.
    """
    letter = get_owned_letter(letter_id, current_user, db)
    db.delete(letter)
    db.commit()

    return {"status": "deleted", "letter_id": letter_id}
