"""User accounts and local (email/password) authentication."""

from med1.auth.models import PageTemplate, UserAccount

__all__ = ["PageTemplate", "UserAccount"]
