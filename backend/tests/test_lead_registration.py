from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from med1.leads.models import Lead
from med1.referral.models import PatientReferral, ReferralReward
from med1.referral.repo import ReferralRepository
from med1.referral.service import (
    LeadValidationError,
    ReferralNotFoundError,
    lead_registration_service,
)
from med1.storage.db import db


def _lead_count() -> int:
    with db.session() as session:
        return session.scalar(select(func.count()).select_from(Lead))


def _referral_leads(referral_id: int) -> int:
    with db.session() as session:
        return session.get(PatientReferral, referral_id).leads


def _reward(reward_id: int) -> ReferralReward:
    with db.session() as session:
        return session.get(ReferralReward, reward_id)


def test_registration_reaching_threshold_unlocks_reward(seed_referral):
    seeded = seed_referral(slug="abc123", leads=4, rewards=[(5, "LEADS")])

    result = lead_registration_service.register_lead("abc123", name="Jane", phone="555-0100")

    assert result.lead_count == 5
    assert result.unlocked_reward_ids == seeded.reward_ids
    assert _referral_leads(seeded.referral_id) == 5
    assert _reward(seeded.reward_ids[0]).unlocked_at is not None

    with db.session() as session:
        lead = session.get(Lead, result.lead_id)
        assert lead.name == "Jane"
        assert lead.phone == "555-0100"
        assert lead.email is None
        assert lead.status == "new"
        assert lead.user_id == seeded.owner_id
        assert lead.indication_id == seeded.referral_id


def test_missing_name_is_rejected_before_any_write(seed_referral):
    seeded = seed_referral(slug="abc123", leads=4, rewards=[(5, "LEADS")])

    with pytest.raises(LeadValidationError):
        lead_registration_service.register_lead("abc123", name=None, phone="555-0100")

    assert _lead_count() == 0
    assert _referral_leads(seeded.referral_id) == 4
    assert _reward(seeded.reward_ids[0]).unlocked_at is None


@pytest.mark.parametrize("name,phone", [("Jane", None), ("Jane", ""), ("   ", "555-0100"), ("", "")])
def test_blank_name_or_phone_is_rejected(seed_referral, name, phone):
    seed_referral(slug="abc123")

    with pytest.raises(LeadValidationError):
        lead_registration_service.register_lead("abc123", name=name, phone=phone)

    assert _lead_count() == 0


def test_unknown_slug_is_not_found(seed_referral):
    seed_referral(slug="abc123")

    with pytest.raises(ReferralNotFoundError):
        lead_registration_service.register_lead("nope", name="Jane", phone="555-0100")

    assert _lead_count() == 0


def test_reward_below_threshold_stays_locked(seed_referral):
    seeded = seed_referral(slug="abc123", leads=2, rewards=[(5, "LEADS")])

    result = lead_registration_service.register_lead("abc123", name="Jane", phone="555-0100")

    assert result.lead_count == 3
    assert result.unlocked_reward_ids == []
    assert _reward(seeded.reward_ids[0]).unlocked_at is None


def test_only_reached_lead_rewards_unlock(seed_referral):
    seeded = seed_referral(
        slug="abc123",
        rewards=[(1, "LEADS"), (2, "LEADS"), (10, "LEADS"), (1, "CONSULTATIONS")],
    )
    first, second, far, consultations = seeded.reward_ids

    lead_registration_service.register_lead("abc123", name="Jane", phone="555-0100")
    assert _reward(first).unlocked_at is not None
    assert _reward(second).unlocked_at is None

    result = lead_registration_service.register_lead("abc123", name="John", phone="555-0101")
    assert result.unlocked_reward_ids == [second]
    assert _reward(second).unlocked_at is not None
    assert _reward(far).unlocked_at is None
    assert _reward(consultations).unlocked_at is None


def test_unlock_timestamp_never_changes(seed_referral):
    seeded = seed_referral(slug="abc123", leads=4, rewards=[(5, "LEADS")])

    lead_registration_service.register_lead("abc123", name="Jane", phone="555-0100")
    unlocked_at = _reward(seeded.reward_ids[0]).unlocked_at

    result = lead_registration_service.register_lead("abc123", name="John", phone="555-0101")

    assert result.lead_count == 6
    assert result.unlocked_reward_ids == []
    assert _reward(seeded.reward_ids[0]).unlocked_at == unlocked_at


def test_mark_unlocked_skips_already_unlocked_rewards(seed_referral):
    seeded = seed_referral(slug="abc123", leads=4, rewards=[(5, "LEADS")])
    lead_registration_service.register_lead("abc123", name="Jane", phone="555-0100")
    unlocked_at = _reward(seeded.reward_ids[0]).unlocked_at

    with db.session() as session:
        updated = ReferralRepository(session).mark_unlocked(
            seeded.reward_ids, datetime.utcnow() + timedelta(days=1)
        )

    assert updated == []
    assert _reward(seeded.reward_ids[0]).unlocked_at == unlocked_at


def test_only_rewards_actually_unlocked_are_reported(seed_referral, monkeypatch):
    seeded = seed_referral(slug="abc123", leads=4, rewards=[(5, "LEADS")])
    first = lead_registration_service.register_lead("abc123", name="Jane", phone="555-0100")
    unlocked_at = _reward(seeded.reward_ids[0]).unlocked_at

    # A concurrent transaction read the reward as pending before it was unlocked
    monkeypatch.setattr(
        ReferralRepository,
        "list_pending_rewards",
        lambda self, referral_id, unlock_type: self.list_rewards(referral_id),
    )
    second = lead_registration_service.register_lead("abc123", name="John", phone="555-0101")

    assert first.unlocked_reward_ids == seeded.reward_ids
    assert second.lead_count == 6
    assert second.unlocked_reward_ids == []
    assert _reward(seeded.reward_ids[0]).unlocked_at == unlocked_at


def test_contact_and_utm_fields_are_stored(seed_referral):
    seed_referral(slug="abc123")

    result = lead_registration_service.register_lead(
        "abc123",
        name="  Jane Doe ",
        phone="555-0100",
        email="jane@example.com",
        utm_source="instagram",
        utm_medium="social",
        utm_campaign="spring",
        utm_term="",
        utm_content="story",
    )

    with db.session() as session:
        lead = session.get(Lead, result.lead_id)
        assert lead.name == "Jane Doe"
        assert lead.email == "jane@example.com"
        assert lead.utm_source == "instagram"
        assert lead.utm_medium == "social"
        assert lead.utm_campaign == "spring"
        assert lead.utm_term is None
        assert lead.utm_content == "story"


def test_storage_failure_rolls_back_everything(seed_referral, monkeypatch):
    seeded = seed_referral(slug="abc123", leads=4, rewards=[(5, "LEADS")])

    def boom(self, reward_ids, unlocked_at):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(ReferralRepository, "mark_unlocked", boom)

    with pytest.raises(SQLAlchemyError):
        lead_registration_service.register_lead("abc123", name="Jane", phone="555-0100")

    assert _lead_count() == 0
    assert _referral_leads(seeded.referral_id) == 4
    assert _reward(seeded.reward_ids[0]).unlocked_at is None


def test_concurrent_registrations_do_not_lose_updates(seed_referral):
    seeded = seed_referral(slug="abc123", rewards=[(7, "LEADS")])

    def register(i: int) -> str:
        return lead_registration_service.register_lead(
            "abc123", name=f"Lead {i}", phone=f"555-01{i:02d}"
        ).lead_id

    with ThreadPoolExecutor(max_workers=10) as pool:
        lead_ids = list(pool.map(register, range(10)))

    assert len(set(lead_ids)) == 10
    assert _lead_count() == 10
    assert _referral_leads(seeded.referral_id) == 10
    assert _reward(seeded.reward_ids[0]).unlocked_at is not None
