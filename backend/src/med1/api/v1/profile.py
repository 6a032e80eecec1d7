"""Profile API v1 endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field

from med1.auth.middleware import require_auth
from med1.auth.models import PageTemplate, UserAccount
from med1.logging_config import get_logger
from med1.profile.service import ProfileError, ProfileNotFoundError, profile_service

logger = get_logger(__name__)

router = APIRouter(tags=["profile"])


# ==================== MODELS ====================


class ProfileCounts(BaseModel):
    """Aggregate counts shown on the profile."""
    leads: int
    indications: int


class ProfileResponse(BaseModel):
    """Profile fields plus counts."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str | None
    email: str
    image: str | None = None
    specialty: str | None = None
    slug: str | None = None
    page_template: str = Field(alias="pageTemplate")
    profile_url: str | None = Field(default=None, alias="profileUrl")
    counts: ProfileCounts = Field(alias="_count")


class UpdateProfileRequest(BaseModel):
    """Editable profile fields; omitted fields are left unchanged."""
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, max_length=255)
    image: str | None = Field(default=None, max_length=1024)
    specialty: str | None = Field(default=None, max_length=255)
    page_template: PageTemplate | None = Field(default=None, alias="pageTemplate")


# ==================== ENDPOINTS ====================


@router.get("/users/profile", response_model=ProfileResponse)
async def get_profile(
    user_id: int = Query(..., alias="userId"),
    user: UserAccount = Depends(require_auth),
):
    """Get a user's profile with lead and indication counts.

    Users can read their own profile; admins can read any.
    """
    if user_id != user.id and not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to read this profile",
        )

    try:
        profile = profile_service.get_profile(user_id)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return ProfileResponse(**profile)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    request: UpdateProfileRequest,
    user: UserAccount = Depends(require_auth),
):
    """Update the current user's profile (last write wins)."""
    changes = request.model_dump(exclude_unset=True)
    if changes.get("page_template") is None:
        changes.pop("page_template", None)

    try:
        profile = profile_service.update_profile(user.id, **changes)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ProfileError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ProfileResponse(**profile)
