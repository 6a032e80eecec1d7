"""Referral API v1 endpoints."""

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError

from med1.api.rate_limit import limiter
from med1.logging_config import get_logger
from med1.referral.service import (
    LeadValidationError,
    ReferralNotFoundError,
    lead_registration_service,
)
from med1.settings import settings

logger = get_logger(__name__)

router = APIRouter(prefix="/patient-referral", tags=["referral"])


# ==================== MODELS ====================


class LeadRegistrationRequest(BaseModel):
    """Lead submitted through a referral link.

    Accepts the camelCase keys sent by the public page as well as
    snake_case. Presence of name and phone is checked by the service so
    that a missing field answers 400, not 422.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    phone: str | None = None
    email: str | None = None
    utm_source: str | None = Field(default=None, alias="utmSource")
    utm_medium: str | None = Field(default=None, alias="utmMedium")
    utm_campaign: str | None = Field(default=None, alias="utmCampaign")
    utm_term: str | None = Field(default=None, alias="utmTerm")
    utm_content: str | None = Field(default=None, alias="utmContent")


class LeadRegistrationResponse(BaseModel):
    """Response for a registered lead."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    lead_id: str = Field(alias="leadId")


# ==================== ENDPOINTS ====================


@router.post("/{slug}/lead", response_model=LeadRegistrationResponse)
@limiter.limit(settings.lead_rate_limit)
async def register_referral_lead(
    request: Request,
    slug: str,
    body: LeadRegistrationRequest | None = None,
):
    """Register a lead coming from a referral link.

    Creates the lead, bumps the link's lead counter and unlocks any
    LEADS reward the new count reaches, all in one transaction. A
    non-200 answer means nothing was recorded. Not idempotent: posting
    twice records two leads. A missing body counts as missing name and
    phone.
    """
    body = body or LeadRegistrationRequest()

    try:
        registration = lead_registration_service.register_lead(
            slug=slug,
            name=body.name,
            phone=body.phone,
            email=body.email,
            utm_source=body.utm_source,
            utm_medium=body.utm_medium,
            utm_campaign=body.utm_campaign,
            utm_term=body.utm_term,
            utm_content=body.utm_content,
        )
    except LeadValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ReferralNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError:
        logger.exception("lead_registration_failed", slug=slug)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process request",
        )

    return LeadRegistrationResponse(lead_id=registration.lead_id)
