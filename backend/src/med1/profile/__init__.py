"""Profile read/update for the dashboard profile editor."""

from med1.profile.service import ProfileError, ProfileNotFoundError, ProfileService, profile_service

__all__ = ["ProfileError", "ProfileNotFoundError", "ProfileService", "profile_service"]
