"""Repository layer for referral links and their rewards."""

import secrets
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session, joinedload

from med1.logging_config import get_logger
from med1.referral.models import Page, PatientReferral, ReferralReward, RewardUnlockType

logger = get_logger(__name__)

# Unambiguous characters only: no 0/O, 1/I/l
_SLUG_ALPHABET = "abcdefghjkmnpqrstuvwxyz23456789"


def generate_referral_slug(length: int = 10) -> str:
    """Generate a random, readable referral slug."""
    return "".join(secrets.choice(_SLUG_ALPHABET) for _ in range(length))


class ReferralRepository:
    """Repository for PatientReferral, Page and ReferralReward entities."""

    def __init__(self, session: Session):
        self.session = session

    # ==================== LOOKUPS ====================

    def get_by_slug(self, slug: str) -> PatientReferral | None:
        """Get a referral with its page (and so its owner id) loaded."""
        return self.session.scalar(
            select(PatientReferral)
            .options(joinedload(PatientReferral.page))
            .where(PatientReferral.slug == slug)
        )

    def list_pending_rewards(
        self,
        referral_id: int,
        unlock_type: RewardUnlockType = RewardUnlockType.LEADS,
    ) -> list[ReferralReward]:
        """List rewards of a referral that have not been unlocked yet."""
        return list(
            self.session.scalars(
                select(ReferralReward).where(
                    ReferralReward.referral_id == referral_id,
                    ReferralReward.unlock_type == unlock_type.value,
                    ReferralReward.unlocked_at.is_(None),
                )
            )
        )

    def list_rewards(self, referral_id: int) -> list[ReferralReward]:
        """List every reward of a referral, lowest threshold first."""
        return list(
            self.session.scalars(
                select(ReferralReward)
                .where(ReferralReward.referral_id == referral_id)
                .order_by(ReferralReward.unlock_value, ReferralReward.id)
            )
        )

    # ==================== MUTATIONS ====================

    def increment_leads(self, referral_id: int, amount: int = 1) -> int:
        """Increment a referral's lead counter and return the new value.

        The increment is a single UPDATE evaluated by the database, so
        concurrent transactions serialize on the row instead of losing
        updates. The read-back happens in the same transaction.
        """
        self.session.execute(
            update(PatientReferral)
            .where(PatientReferral.id == referral_id)
            .values(leads=PatientReferral.leads + amount, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return self.session.scalar(
            select(PatientReferral.leads).where(PatientReferral.id == referral_id)
        )

    def mark_unlocked(self, reward_ids: list[int], unlocked_at: datetime) -> list[int]:
        """Set the unlock timestamp of rewards that are still locked.

        Rewards unlocked by a concurrent transaction are skipped.

        Returns:
            Ids of the rewards this call unlocked
        """
        if not reward_ids:
            return []

        unlocked = self.session.scalars(
            update(ReferralReward)
            .where(
                ReferralReward.id.in_(reward_ids),
                ReferralReward.unlocked_at.is_(None),
            )
            .values(unlocked_at=unlocked_at)
            .returning(ReferralReward.id)
            .execution_options(synchronize_session=False)
        )
        return sorted(unlocked)

    # ==================== PROVISIONING ====================

    def get_or_create_page(self, user_id: int, title: str, slug: str | None = None) -> Page:
        """Return the user's first page, creating one if the user has none."""
        page = self.session.scalar(
            select(Page).where(Page.user_id == user_id).order_by(Page.id)
        )
        if page:
            return page

        page = Page(user_id=user_id, title=title, slug=slug or generate_referral_slug())
        self.session.add(page)
        self.session.flush()
        logger.info("page_created", page_id=page.id, user_id=user_id)
        return page

    def create_referral(self, page_id: int, slug: str | None = None) -> PatientReferral:
        """Create a referral link on a page.

        Raises:
            ValueError: If the slug is already taken
        """
        slug = slug or generate_referral_slug()
        if self.session.scalar(select(PatientReferral.id).where(PatientReferral.slug == slug)):
            raise ValueError(f"Referral slug '{slug}' already exists")

        referral = PatientReferral(page_id=page_id, slug=slug, leads=0)
        self.session.add(referral)
        self.session.flush()
        logger.info("referral_created", referral_id=referral.id, slug=slug)
        return referral

    def add_reward(
        self,
        referral_id: int,
        title: str,
        unlock_value: int,
        unlock_type: RewardUnlockType = RewardUnlockType.LEADS,
        description: str | None = None,
    ) -> ReferralReward:
        """Attach a reward milestone to a referral."""
        if unlock_value < 1:
            raise ValueError("Unlock value must be at least 1")

        reward = ReferralReward(
            referral_id=referral_id,
            title=title,
            description=description,
            unlock_type=unlock_type.value,
            unlock_value=unlock_value,
        )
        self.session.add(reward)
        self.session.flush()
        logger.info(
            "reward_created",
            reward_id=reward.id,
            referral_id=referral_id,
            unlock_type=unlock_type.value,
            unlock_value=unlock_value,
        )
        return reward
