"""Test configuration: a throwaway SQLite database and upload directory."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from types import SimpleNamespace

_TMP = Path(tempfile.mkdtemp(prefix="med1-tests-"))

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'med1-test.db'}"
os.environ["UPLOAD_DIR"] = str(_TMP / "uploads")
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-1234"
os.environ["APP_URL"] = "https://med1.app"

import pytest
from fastapi.testclient import TestClient

from med1.api.main import app
from med1.auth.local import auth_service
from med1.auth.models import UserAccount
from med1.referral.models import Page, PatientReferral, ReferralReward, RewardUnlockType
from med1.storage.db import db


@pytest.fixture(autouse=True)
def database():
    db.drop_tables()
    db.create_tables()
    yield db


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(database):
    def _make(email: str = "doctor@example.com", name: str | None = "Dr. Jane", is_admin: bool = False, **fields):
        with database.session() as session:
            user = UserAccount(
                email=email,
                name=name,
                slug=fields.pop("slug", email.split("@")[0]),
                is_admin=is_admin,
                **fields,
            )
            session.add(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: UserAccount) -> dict[str, str]:
        return {"Authorization": f"Bearer {auth_service.create_access_token(user)}"}

    return _headers


@pytest.fixture
def seed_referral(database):
    """Create owner, page, referral and rewards; returns their ids.

    `rewards` is a sequence of (unlock_value, unlock_type) pairs.
    """
    def _seed(slug: str = "abc123", leads: int = 0, rewards=(), owner_id: int | None = None):
        with database.session() as session:
            if owner_id is None:
                user = UserAccount(email=f"owner-{slug}@example.com", name="Dr. Owner", slug=f"owner-{slug}")
                session.add(user)
                session.flush()
                owner_id = user.id

            page = Page(user_id=owner_id, title="Clinic", slug=f"page-{slug}")
            session.add(page)
            session.flush()

            referral = PatientReferral(page_id=page.id, slug=slug, leads=leads)
            session.add(referral)
            session.flush()

            reward_ids = []
            for unlock_value, unlock_type in rewards:
                reward = ReferralReward(
                    referral_id=referral.id,
                    title=f"Reward at {unlock_value}",
                    unlock_type=RewardUnlockType(unlock_type).value,
                    unlock_value=unlock_value,
                )
                session.add(reward)
                session.flush()
                reward_ids.append(reward.id)

            return SimpleNamespace(owner_id=owner_id, referral_id=referral.id, reward_ids=reward_ids)

    return _seed
