"""Local authentication service (email/password)."""

import secrets
from datetime import datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext
from slugify import slugify
from sqlalchemy import select

from med1.auth.models import UserAccount
from med1.logging_config import get_logger
from med1.settings import settings
from med1.storage.db import db

logger = get_logger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# JWT settings
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_HOURS = 2


def generate_profile_slug(name: str | None, email: str) -> str:
    """Build a public page slug from the user's name (or email local part).

    A short random suffix keeps slugs unique without a lookup loop.
    """
    base = slugify(name or email.split("@", 1)[0], max_length=60) or "user"
    return f"{base}-{secrets.token_hex(3)}"


class LocalAuthService:
    """Authentication service for local (email/password) users."""

    def __init__(self):
        """Initialize auth service."""
        self.logger = get_logger(__name__)

    # ==================== PASSWORD ====================

    def _truncate_password(self, password: str) -> str:
        """Truncate password to 72 bytes (bcrypt limit)."""
        return password.encode('utf-8')[:72].decode('utf-8', errors='ignore')

    def hash_password(self, password: str) -> str:
        """Hash a password.

        Args:
            password: Plain password

        Returns:
            Hashed password
        """
        return pwd_context.hash(self._truncate_password(password))

    def verify_password(self, password: str, hashed: str) -> bool:
        """Verify a password against hash."""
        return pwd_context.verify(self._truncate_password(password), hashed)

    # ==================== ACCOUNTS ====================

    def _find_active(self, session, *criteria) -> UserAccount | None:
        return session.scalar(
            select(UserAccount).where(UserAccount.is_active.is_(True), *criteria)
        )

    def create_user(
        self,
        email: str,
        password: str | None,
        name: str | None = None,
        specialty: str | None = None,
        is_admin: bool = False,
    ) -> UserAccount:
        """Create an account with a fresh public profile slug.

        A None password creates an account that cannot log in (provisioned
        from the CLI and activated later).

        Raises:
            ValueError: If the email is already registered
        """
        email = email.lower()

        with db.session() as session:
            taken = session.scalar(select(UserAccount.id).where(UserAccount.email == email))
            if taken:
                raise ValueError("Email already registered")

            user = UserAccount(
                email=email,
                name=name,
                specialty=specialty,
                slug=generate_profile_slug(name, email),
                password_hash=self.hash_password(password) if password else None,
                is_admin=is_admin,
            )
            session.add(user)
            session.flush()

            self.logger.info("user_created", user_id=user.id, slug=user.slug, is_admin=is_admin)
            return user

    def authenticate(self, email: str, password: str) -> UserAccount | None:
        """Check credentials and record the login time.

        Returns:
            The account, or None for unknown email, inactive account,
            account without password or wrong password
        """
        with db.session() as session:
            user = self._find_active(session, UserAccount.email == email.lower())
            if not user or not user.password_hash:
                return None
            if not self.verify_password(password, user.password_hash):
                return None

            user.last_login_at = datetime.utcnow()
            self.logger.info("user_authenticated", user_id=user.id)
            return user

    def get_user_by_id(self, user_id: int) -> UserAccount | None:
        with db.session() as session:
            return self._find_active(session, UserAccount.id == user_id)

    # ==================== JWT TOKENS ====================

    def create_access_token(
        self,
        user: UserAccount,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create JWT access token.

        Args:
            user: User account
            expires_delta: Optional expiration time

        Returns:
            JWT token string
        """
        if expires_delta is None:
            expires_delta = timedelta(hours=JWT_EXPIRE_HOURS)

        now = datetime.utcnow()
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "exp": now + expires_delta,
            "iat": now,
        }

        return jwt.encode(payload, settings.jwt_secret_key, algorithm=JWT_ALGORITHM)

    def verify_token(self, token: str) -> dict[str, Any] | None:
        """Verify and decode JWT token.

        Returns:
            Token payload or None if invalid
        """
        try:
            return jwt.decode(token, settings.jwt_secret_key, algorithms=[JWT_ALGORITHM])
        except JWTError as e:
            self.logger.debug("token_verification_failed", error=str(e))
            return None

    def get_user_from_token(self, token: str) -> UserAccount | None:
        """Get user from JWT token."""
        payload = self.verify_token(token)
        if not payload:
            return None

        user_id = payload.get("sub")
        if not user_id:
            return None

        return self.get_user_by_id(int(user_id))


auth_service = LocalAuthService()
