"""Database models for lead storage."""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from med1.auth.models import UserAccount
from med1.referral.models import PatientReferral
from med1.storage.models import Base


class LeadStatus(str, Enum):
    """Pipeline stage of a lead."""
    NEW = "new"
    CONTACTED = "contacted"
    SCHEDULED = "scheduled"
    CONVERTED = "converted"
    LOST = "lost"


LEAD_INITIAL_STATUS = LeadStatus.NEW


def _new_lead_id() -> str:
    return str(uuid.uuid4())


class Lead(Base):
    """Contact captured through a referral link."""

    __tablename__ = "leads"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_lead_id)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("user_accounts.id"), nullable=False, index=True)
    indication_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("patient_referrals.id"), nullable=True, index=True
    )

    # Contact
    name: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(20), default=LEAD_INITIAL_STATUS.value, nullable=False)

    # Attribution
    utm_source: Mapped[str | None] = mapped_column(Text, nullable=True)
    utm_medium: Mapped[str | None] = mapped_column(Text, nullable=True)
    utm_campaign: Mapped[str | None] = mapped_column(Text, nullable=True)
    utm_term: Mapped[str | None] = mapped_column(Text, nullable=True)
    utm_content: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    user: Mapped[UserAccount] = relationship(UserAccount)
    referral: Mapped[PatientReferral | None] = relationship(PatientReferral)

    def __repr__(self) -> str:
        return f"<Lead(id={self.id}, referral={self.indication_id}, status={self.status})>"
