"""
Credit Dispute Engine - SQLAlchemy ORM Models
Relational tables for profiles, uploaded reports, letters and templates
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Text, JSON, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from ..database import Base


class ProfileDB(Base):
    """Registered consumer. Name and address feed the letter sender block."""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)  # UUID
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=True)

    # Sender address used on generated letters
    street_address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(2), nullable=True)
    zip_code = Column(String(10), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reports = relationship("CreditReportDB", back_populates="user", cascade="all, delete-orphan")
    letters = relationship("DisputeLetterDB", back_populates="user", cascade="all, delete-orphan")
    templates = relationship("LetterTemplateDB", back_populates="user", cascade="all, delete-orphan")


class CreditReportDB(Base):
    """Uploaded credit report plus its parsed data and detected issues."""
    __tablename__ = "credit_reports"

    id = Column(String(36), primary_key=True)  # UUID
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    file_name = Column(String(500), nullable=False)
    file_path = Column(String(1000), nullable=False)
    bureau = Column(String(50), nullable=True)

    processed = Column(Boolean, default=False)
    processing_error = Column(Text, nullable=True)

    # Parsed CreditReportData as JSON
    report_data = Column(JSON)
    # Detected issues as JSON array
    issues_data = Column(JSON)
    accounts_count = Column(Integer, default=0)
    issues_count = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("ProfileDB", back_populates="reports")
    letters = relationship("DisputeLetterDB", back_populates="report")  # Letters outlive their report


class DisputeLetterDB(Base):
    """Generated dispute letter."""
    __tablename__ = "dispute_letters"

    id = Column(String(36), primary_key=True)  # UUID
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    credit_report_id = Column(String(36), ForeignKey("credit_reports.id", ondelete="SET NULL"), nullable=True)

    title = Column(String(255), nullable=False)
    issue_type = Column(String(100), nullable=False)
    bureau = Column(String(50), nullable=True)
    creditor_name = Column(String(255), nullable=True)
    account_number = Column(String(100), nullable=True)
    explanation = Column(Text, nullable=True)

    letter_content = Column(Text, nullable=False)
    edited_content = Column(Text, nullable=True)
    laws_cited = Column(JSON)
    generator = Column(String(20), default="primary")  # primary, manual or emergency

    status = Column(String(20), default="draft")
    sent = Column(Boolean, default=False)
    sent_at = Column(DateTime, nullable=True)

    generated_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("ProfileDB", back_populates="letters")
    report = relationship("CreditReportDB", back_populates="letters")


class LetterTemplateDB(Base):
    """A profile's own letter template, overriding the built-in one for an issue type."""
    __tablename__ = "letter_templates"

    id = Column(String(36), primary_key=True)  # UUID
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    issue_type = Column(String(100), nullable=False, index=True)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("ProfileDB", back_populates="templates")
