"""Lead registration through referral links.

Registering a lead is one unit of work: the lead row, the referral's
counter increment and any reward unlocks it triggers are committed
together or not at all.
"""

from dataclasses import dataclass, field
from datetime import datetime

from med1.leads.repo import LeadRepository
from med1.logging_config import get_logger
from med1.referral.models import RewardUnlockType
from med1.referral.repo import ReferralRepository
from med1.storage.db import Database, db

logger = get_logger(__name__)


class LeadRegistrationError(Exception):
    """Lead registration error."""
    pass


class LeadValidationError(LeadRegistrationError):
    """Required lead data is missing."""
    pass


class ReferralNotFoundError(LeadRegistrationError):
    """No referral link matches the slug."""
    pass


@dataclass
class LeadRegistration:
    """Outcome of a successful registration."""
    lead_id: str
    referral_id: int
    lead_count: int
    unlocked_reward_ids: list[int] = field(default_factory=list)


def _clean(value: str | None) -> str | None:
    """Strip a text field, mapping blank values to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class LeadRegistrationService:
    """Records leads coming in through referral links."""

    def __init__(self, database: Database | None = None):
        self.db = database or db
        self.logger = get_logger(__name__)

    def register_lead(
        self,
        slug: str,
        name: str | None,
        phone: str | None,
        email: str | None = None,
        utm_source: str | None = None,
        utm_medium: str | None = None,
        utm_campaign: str | None = None,
        utm_term: str | None = None,
        utm_content: str | None = None,
    ) -> LeadRegistration:
        """Register a lead for the referral identified by `slug`.

        Args:
            slug: Referral link slug
            name: Contact name (required)
            phone: Contact phone (required)
            email: Contact email
            utm_source: UTM source
            utm_medium: UTM medium
            utm_campaign: UTM campaign
            utm_term: UTM term
            utm_content: UTM content

        Returns:
            LeadRegistration with the new lead id, the referral's new lead
            count and the rewards unlocked by this lead

        Raises:
            LeadValidationError: name or phone missing (nothing written)
            ReferralNotFoundError: unknown slug (nothing written)
            SQLAlchemyError: storage failure (transaction rolled back)
        """
        name = _clean(name)
        phone = _clean(phone)
        if not name or not phone:
            raise LeadValidationError("Name and phone are required")

        with self.db.session() as session:
            referrals = ReferralRepository(session)
            leads = LeadRepository(session)

            referral = referrals.get_by_slug(slug)
            if referral is None:
                raise ReferralNotFoundError("Referral link not found")

            lead = leads.create(
                user_id=referral.page.user_id,
                indication_id=referral.id,
                name=name,
                phone=phone,
                email=_clean(email),
                utm_source=_clean(utm_source),
                utm_medium=_clean(utm_medium),
                utm_campaign=_clean(utm_campaign),
                utm_term=_clean(utm_term),
                utm_content=_clean(utm_content),
            )

            pending = referrals.list_pending_rewards(referral.id, RewardUnlockType.LEADS)
            lead_count = referrals.increment_leads(referral.id)

            reached = [reward.id for reward in pending if reward.unlock_value <= lead_count]
            unlocked = referrals.mark_unlocked(reached, datetime.utcnow())
            if unlocked:
                self.logger.info(
                    "rewards_unlocked",
                    referral_id=referral.id,
                    reward_ids=unlocked,
                    lead_count=lead_count,
                )

            registration = LeadRegistration(
                lead_id=lead.id,
                referral_id=referral.id,
                lead_count=lead_count,
                unlocked_reward_ids=unlocked,
            )

        self.logger.info(
            "lead_registered",
            lead_id=registration.lead_id,
            referral_id=registration.referral_id,
            lead_count=registration.lead_count,
        )
        return registration


# Singleton instance
lead_registration_service = LeadRegistrationService()
