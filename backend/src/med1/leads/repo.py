"""Repository layer for leads."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from med1.leads.models import LEAD_INITIAL_STATUS, Lead


class LeadRepository:
    """Repository for Lead entities."""

    def __init__(self, session: Session):
        self.session = session

    def create(
        self,
        user_id: int,
        name: str,
        phone: str,
        email: str | None = None,
        indication_id: int | None = None,
        utm_source: str | None = None,
        utm_medium: str | None = None,
        utm_campaign: str | None = None,
        utm_term: str | None = None,
        utm_content: str | None = None,
    ) -> Lead:
        """Create a lead in the initial status.

        Args:
            user_id: Owner of the lead
            name: Contact name
            phone: Contact phone
            email: Optional contact email
            indication_id: Referral that produced the lead
            utm_source: UTM source
            utm_medium: UTM medium
            utm_campaign: UTM campaign
            utm_term: UTM term
            utm_content: UTM content

        Returns:
            Created lead (flushed, id assigned)
        """
        lead = Lead(
            user_id=user_id,
            indication_id=indication_id,
            name=name,
            phone=phone,
            email=email,
            status=LEAD_INITIAL_STATUS.value,
            utm_source=utm_source,
            utm_medium=utm_medium,
            utm_campaign=utm_campaign,
            utm_term=utm_term,
            utm_content=utm_content,
        )
        self.session.add(lead)
        self.session.flush()
        return lead

    def count_for_user(self, user_id: int) -> int:
        """Count leads owned by a user."""
        return self.session.scalar(
            select(func.count()).select_from(Lead).where(Lead.user_id == user_id)
        ) or 0

    def list_for_referral(self, referral_id: int) -> list[Lead]:
        """List leads produced by a referral, newest first."""
        return list(
            self.session.scalars(
                select(Lead)
                .where(Lead.indication_id == referral_id)
                .order_by(Lead.created_at.desc())
            )
        )
