"""
Credit Dispute Engine - Authentication Utilities

Profiles log in with email and password and receive a bearer token that
names the profile. Every letters and reports endpoint resolves that token
back to a ProfileDB row, so ownership checks downstream only ever compare
against the profile id.
"""
import logging
import os
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from .database import get_db
from .models.db_models import ProfileDB

logger = logging.getLogger(__name__)

SECRET_KEY = os.getenv("JWT_SECRET_KEY", "credit-dispute-secret-key-change-in-production")
ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(hours=24)

bearer_scheme = HTTPBearer()


# =============================================================================
# PASSWORDS
# =============================================================================

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def authenticate_profile(db: Session, email: str, password: str) -> Optional[ProfileDB]:
    """The profile for these credentials, or None if either is wrong."""
    profile = db.query(ProfileDB).filter(ProfileDB.email == email).first()
    if profile is None or not verify_password(password, profile.password_hash):
        return None
    return profile


# =============================================================================
# TOKENS
# =============================================================================

def issue_profile_token(profile: ProfileDB, lifetime: Optional[timedelta] = None) -> str:
    """Signed token naming the profile id and the email it was issued for."""
    issued_at = datetime.utcnow()
    claims = {
        "sub": profile.id,
        "email": profile.email,
        "iat": issued_at,
        "exp": issued_at + (lifetime or TOKEN_LIFETIME),
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def read_token_claims(token: str) -> Optional[dict]:
    """
    Verified claims of a profile token.

    Returns None for expired, tampered or foreign tokens, and for tokens
    without a profile id.
    """
    try:
        claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        return None
    if not claims.get("sub"):
        return None
    return claims


# =============================================================================
# DEPENDENCIES
# =============================================================================

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> ProfileDB:
    """
    Profile behind the bearer token.

    A token stops working once its profile is deleted or its email no longer
    matches the profile's.
    """
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    claims = read_token_claims(credentials.credentials)
    if claims is None:
        raise unauthorized

    profile = db.query(ProfileDB).filter(ProfileDB.id == claims["sub"]).first()
    if profile is None:
        logger.warning(f"Token for unknown profile {claims['sub']}")
        raise unauthorized
    if claims.get("email") != profile.email:
        logger.warning(f"Token email does not match profile {profile.id}")
        raise unauthorized

    return profile
