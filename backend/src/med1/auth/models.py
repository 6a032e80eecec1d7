"""Authentication models for user accounts."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from med1.storage.models import Base


class PageTemplate(str, Enum):
    """Layout used to render a user's public page."""
    DEFAULT = "default"
    MINIMAL = "minimal"
    PRO = "pro"


class UserAccount(Base):
    """User account for the med1 platform.

    Holds both login identity and the editable profile shown on the
    user's public page.
    """
    __tablename__ = "user_accounts"

    id = Column(Integer, primary_key=True)

    # Identity
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=True)

    # Profile
    image = Column(String(1024), nullable=True)  # Avatar URL
    specialty = Column(String(255), nullable=True)
    slug = Column(String(100), unique=True, nullable=True, index=True)  # Public page path
    page_template = Column(String(20), default=PageTemplate.DEFAULT.value, nullable=False)

    # Status
    is_active = Column(Boolean, default=True)
    is_admin = Column(Boolean, default=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<UserAccount(id={self.id}, email={self.email})>"


# Pydantic models for API
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class User(BaseModel):
    """User data for API responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None
    image: str | None = None
    specialty: str | None = None
    slug: str | None = None
    is_active: bool
    created_at: datetime


class UserCreate(BaseModel):
    """User creation request."""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str | None = Field(default=None, max_length=255)


class UserLogin(BaseModel):
    """User login request."""
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: User
