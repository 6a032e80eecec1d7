"""Profile service: profile fields plus lead/indication counts."""

from datetime import datetime
from typing import Any

from sqlalchemy import func, select

from med1.auth.models import PageTemplate, UserAccount
from med1.leads.repo import LeadRepository
from med1.logging_config import get_logger
from med1.referral.models import Page, PatientReferral
from med1.settings import settings
from med1.storage.db import Database, db

logger = get_logger(__name__)

# Fields the profile editor may change
EDITABLE_FIELDS = ("name", "image", "specialty", "page_template")


class ProfileError(Exception):
    """Profile operation error."""
    pass


class ProfileNotFoundError(ProfileError):
    """No active user with that id."""
    pass


def build_profile_url(slug: str | None) -> str | None:
    """Public URL of a user's page, e.g. https://med1.app/dr-jane."""
    if not slug:
        return None
    return f"{settings.app_url.rstrip('/')}/{slug}"


class ProfileService:
    """Reads and updates user profiles."""

    def __init__(self, database: Database | None = None):
        self.db = database or db
        self.logger = get_logger(__name__)

    def _to_dict(self, session, user: UserAccount) -> dict[str, Any]:
        indications = session.scalar(
            select(func.count(PatientReferral.id))
            .join(Page, PatientReferral.page_id == Page.id)
            .where(Page.user_id == user.id)
        ) or 0

        return {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "image": user.image,
            "specialty": user.specialty,
            "slug": user.slug,
            "page_template": user.page_template or PageTemplate.DEFAULT.value,
            "profile_url": build_profile_url(user.slug),
            "counts": {
                "leads": LeadRepository(session).count_for_user(user.id),
                "indications": indications,
            },
        }

    def get_profile(self, user_id: int) -> dict[str, Any]:
        """Get a user's profile with aggregate counts.

        Raises:
            ProfileNotFoundError: If the user does not exist or is inactive
        """
        with self.db.session() as session:
            user = session.get(UserAccount, user_id)
            if not user or not user.is_active:
                raise ProfileNotFoundError(f"User {user_id} not found")

            return self._to_dict(session, user)

    def update_profile(self, user_id: int, **changes: Any) -> dict[str, Any]:
        """Persist the given profile fields.

        Only fields present in `changes` are written; the stored value is
        whatever was submitted last.

        Raises:
            ProfileNotFoundError: If the user does not exist or is inactive
            ProfileError: If a field is not editable
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ProfileError(f"Fields not editable: {', '.join(sorted(unknown))}")

        with self.db.session() as session:
            user = session.get(UserAccount, user_id)
            if not user or not user.is_active:
                raise ProfileNotFoundError(f"User {user_id} not found")

            for field_name, value in changes.items():
                if isinstance(value, PageTemplate):
                    value = value.value
                setattr(user, field_name, value)

            user.updated_at = datetime.utcnow()
            session.flush()

            self.logger.info("profile_updated", user_id=user_id, fields=sorted(changes))
            return self._to_dict(session, user)


# Singleton instance
profile_service = ProfileService()
