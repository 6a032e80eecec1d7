"""Referral system database models."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from med1.auth.models import UserAccount
from med1.storage.models import Base


class RewardUnlockType(str, Enum):
    """What a reward milestone counts towards its threshold."""
    LEADS = "LEADS"                  # Leads produced by the referral link
    CONSULTATIONS = "CONSULTATIONS"  # Consultations booked (not tracked here)


class Page(Base):
    """Public link page owned by a user.

    Referral links hang off a page; the page owner owns every lead the
    links produce.
    """
    __tablename__ = "pages"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("user_accounts.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship(UserAccount)
    referrals = relationship("PatientReferral", back_populates="page")

    def __repr__(self):
        return f"<Page(id={self.id}, slug={self.slug})>"


class PatientReferral(Base):
    """Shareable referral link.

    `leads` only ever grows, by exactly one per lead registered through
    the link.
    """
    __tablename__ = "patient_referrals"

    id = Column(Integer, primary_key=True)
    slug = Column(String(64), unique=True, nullable=False, index=True)
    page_id = Column(Integer, ForeignKey("pages.id"), nullable=False, index=True)

    # Statistics
    leads = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    page = relationship(Page, back_populates="referrals")
    rewards = relationship("ReferralReward", back_populates="referral")

    def __repr__(self):
        return f"<PatientReferral(slug={self.slug}, leads={self.leads})>"


class ReferralReward(Base):
    """Milestone reward attached to a referral link.

    Unlocks once, when the referral's counter reaches `unlock_value`.
    `unlocked_at` is set at that moment and never changed afterwards.
    """
    __tablename__ = "referral_rewards"

    id = Column(Integer, primary_key=True)
    referral_id = Column(Integer, ForeignKey("patient_referrals.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Unlock rule
    unlock_type = Column(String(20), default=RewardUnlockType.LEADS.value, nullable=False)
    unlock_value = Column(Integer, nullable=False)
    unlocked_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    referral = relationship(PatientReferral, back_populates="rewards")

    def __repr__(self):
        return f"<ReferralReward(id={self.id}, unlock={self.unlock_type}>={self.unlock_value})>"
