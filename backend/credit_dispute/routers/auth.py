"""
Credit Dispute Engine - Authentication Router
Handles registration, login, session verification, and the sender profile
used on dispute letters.
"""
from uuid import uuid4
from typing import Optional
import logging
import re

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, field_validator
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.db_models import ProfileDB
from ..auth import authenticate_profile, get_current_user, hash_password, issue_profile_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None

    @field_validator('password')
    @classmethod
    def validate_password_strength(cls, v):
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters')
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str


class ProfileUpdateRequest(BaseModel):
    """Sender details printed at the top of each letter."""
    full_name: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None  # 2-letter state code
    zip_code: Optional[str] = None

    @field_validator('state')
    @classmethod
    def validate_state(cls, v):
        if v is not None:
            if not re.match(r'^[A-Za-z]{2}$', v):
                raise ValueError('State must be a 2-letter code')
            return v.upper()
        return v

    @field_validator('zip_code')
    @classmethod
    def validate_zip(cls, v):
        if v is not None:
            if not re.match(r'^\d{5}(-\d{4})?$', v):
                raise ValueError('Invalid ZIP code format (use 12345 or 12345-6789)')
        return v


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    created_at: Optional[str] = None


def _profile_response(user: ProfileDB) -> ProfileResponse:
    return ProfileResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        street_address=user.street_address,
        city=user.city,
        state=user.state,
        zip_code=user.zip_code,
        created_at=user.created_at.isoformat() if user.created_at else None,
    )


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """
    Register a new profile.
    """
    existing = db.query(ProfileDB).filter(ProfileDB.email == request.email).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    user = ProfileDB(
        id=str(uuid4()),
        email=request.email,
        full_name=request.full_name,
        password_hash=hash_password(request.password)
    )
    db.add(user)
    db.commit()

    logger.info(f"User registered: {request.email}")
    return MessageResponse(message="User created successfully")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate and return a JWT token.
    """
    user = authenticate_profile(db, request.email, request.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = issue_profile_token(user)

    logger.info(f"User logged in: {request.email}")
    return TokenResponse(access_token=access_token)


@router.get("/me", response_model=ProfileResponse)
async def get_me(current_user: ProfileDB = Depends(get_current_user)):
    """Current authenticated profile."""
    return _profile_response(current_user)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: ProfileDB = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update the sender profile. Only fields present in the request change.
    """
    updates = request.model_dump(exclude_unset=True)
    for field_name, value in updates.items():
        setattr(current_user, field_name, value)

    db.commit()
    db.refresh(current_user)

    logger.info(f"Profile updated for {current_user.email}: {sorted(updates)}")
    return _profile_response(current_user)
