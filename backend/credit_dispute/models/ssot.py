"""
Credit Dispute Engine - Core Models

Plain dataclasses shared by every stage of the pipeline:
extraction -> parsing (CreditReportData) -> analysis (IdentifiedIssue)
-> letter assembly (DisputeLetter).
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Any
from uuid import uuid4


# =============================================================================
# ENUMS
# =============================================================================

class Bureau(str, Enum):
    EXPERIAN = "experian"
    EQUIFAX = "equifax"
    TRANSUNION = "transunion"


class ImpactLevel(str, Enum):
    """How much an issue is expected to affect the consumer's score."""
    MEDIUM = "Medium Impact"
    HIGH = "High Impact"
    CRITICAL = "Critical Impact"

    @property
    def color(self) -> str:
        return IMPACT_COLORS[self]

    @property
    def is_priority(self) -> bool:
        return self in (ImpactLevel.HIGH, ImpactLevel.CRITICAL)


IMPACT_COLORS = {
    ImpactLevel.MEDIUM: "yellow",
    ImpactLevel.HIGH: "orange",
    ImpactLevel.CRITICAL: "red",
}


class LetterStatus(str, Enum):
    DRAFT = "draft"
    READY = "ready"
    SENT = "sent"
    COMPLETED = "completed"


# =============================================================================
# PARSED REPORT
# =============================================================================

@dataclass
class BureausPresent:
    """Which bureaus the uploaded report mentions."""
    experian: bool = False
    equifax: bool = False
    transunion: bool = False

    def detected(self) -> List[str]:
        names = []
        if self.experian:
            names.append("Experian")
        if self.equifax:
            names.append("Equifax")
        if self.transunion:
            names.append("TransUnion")
        return names


@dataclass
class PersonalInfo:
    """Consumer identity block. Fields the parser cannot find stay empty."""
    name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    ssn: str = ""
    dob: str = ""
    phone: str = ""

    def is_empty(self) -> bool:
        return not any(asdict(self).values())


@dataclass
class CreditReportAccount:
    account_name: str
    account_number: str = ""
    account_type: str = ""
    balance: str = ""
    current_balance: str = ""
    credit_limit: str = ""
    payment_status: str = ""
    status: str = ""
    bureau: str = ""
    date_opened: str = ""
    date_reported: str = ""
    remarks: List[str] = field(default_factory=list)
    is_negative: bool = False
    is_placeholder: bool = False  # Stands in for an account type named in unparseable text


@dataclass
class CreditReportInquiry:
    creditor: str
    inquiry_date: str = ""
    type: str = "Hard Inquiry"
    bureau: str = ""


@dataclass
class PublicRecord:
    record_type: str
    date: str = ""
    status: str = ""
    bureau: str = ""


@dataclass
class CreditReportData:
    """
    Structured view of one uploaded report.

    Created once per upload. Serialises to plain JSON with to_dict() and
    back with from_dict(); the pair is lossless.
    """
    bureaus: BureausPresent = field(default_factory=BureausPresent)
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    accounts: List[CreditReportAccount] = field(default_factory=list)
    inquiries: List[CreditReportInquiry] = field(default_factory=list)
    public_records: List[PublicRecord] = field(default_factory=list)
    raw_text: Optional[str] = None
    is_pdf: bool = False

    @property
    def primary_bureau(self) -> Optional[str]:
        detected = self.bureaus.detected()
        return detected[0] if detected else None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CreditReportData":
        return cls(
            bureaus=BureausPresent(**(data.get("bureaus") or {})),
            personal_info=PersonalInfo(**(data.get("personal_info") or {})),
            accounts=[CreditReportAccount(**a) for a in data.get("accounts") or []],
            inquiries=[CreditReportInquiry(**i) for i in data.get("inquiries") or []],
            public_records=[PublicRecord(**p) for p in data.get("public_records") or []],
            raw_text=data.get("raw_text"),
            is_pdf=bool(data.get("is_pdf", False)),
        )


# =============================================================================
# ANALYSIS OUTPUT
# =============================================================================

def _issue_id() -> str:
    return f"issue-{int(datetime.now().timestamp() * 1000)}-{uuid4().hex[:6]}"


@dataclass
class IdentifiedIssue:
    """
    A possibly disputable item found by the issue detector.

    The id is timestamp based and excluded from equality so two runs over
    the same report compare equal.
    """
    type: str
    title: str
    description: str
    impact: ImpactLevel
    laws: List[str] = field(default_factory=list)
    account: Optional[CreditReportAccount] = None
    id: str = field(default_factory=_issue_id, compare=False)

    @property
    def impact_color(self) -> str:
        return self.impact.color

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["impact"] = self.impact.value
        data["impact_color"] = self.impact_color
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IdentifiedIssue":
        account = data.get("account")
        return cls(
            type=data["type"],
            title=data["title"],
            description=data.get("description", ""),
            impact=ImpactLevel(data.get("impact", ImpactLevel.MEDIUM.value)),
            laws=list(data.get("laws") or []),
            account=CreditReportAccount(**account) if account else None,
            id=data.get("id") or _issue_id(),
        )


# =============================================================================
# LETTERS
# =============================================================================

@dataclass
class UserInfo:
    """Sender block for dispute letters."""
    name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""

    def with_placeholders(self) -> "UserInfo":
        return UserInfo(
            name=self.name or "[YOUR NAME]",
            address=self.address or "[YOUR ADDRESS]",
            city=self.city or "[CITY]",
            state=self.state or "[STATE]",
            zip_code=self.zip_code or "[ZIP]",
        )

    @classmethod
    def from_personal_info(cls, info: PersonalInfo) -> "UserInfo":
        return cls(
            name=info.name,
            address=info.address,
            city=info.city,
            state=info.state,
            zip_code=info.zip_code,
        )


@dataclass
class DisputeLetter:
    title: str
    bureau: str
    recipient: str
    content: str
    account_name: str = ""
    account_number: str = ""
    error_type: str = ""
    explanation: str = ""
    status: LetterStatus = LetterStatus.DRAFT
    laws_cited: List[str] = field(default_factory=list)
    generator: str = "primary"
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DisputeLetter":
        payload = dict(data)
        payload["status"] = LetterStatus(payload.get("status", LetterStatus.DRAFT.value))
        for key in ("created_at", "updated_at"):
            if isinstance(payload.get(key), str):
                payload[key] = datetime.fromisoformat(payload[key])
        payload["laws_cited"] = list(payload.get("laws_cited") or [])
        return cls(**payload)
