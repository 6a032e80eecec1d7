"""Authentication API v1 endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from med1.api.rate_limit import limiter
from med1.auth.local import JWT_EXPIRE_HOURS, auth_service
from med1.auth.middleware import require_auth
from med1.auth.models import TokenResponse, User, UserAccount, UserCreate, UserLogin
from med1.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: UserAccount) -> TokenResponse:
    return TokenResponse(
        access_token=auth_service.create_access_token(user),
        expires_in=JWT_EXPIRE_HOURS * 3600,
        user=User.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def register(request: Request, body: UserCreate):
    """Register a new user account."""
    try:
        user = auth_service.create_user(
            email=body.email,
            password=body.password,
            name=body.name,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
async def login(request: Request, body: UserLogin):
    """Login with email and password."""
    user = auth_service.authenticate(body.email, body.password)
    if not user:
        logger.info("login_failed", email=body.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _token_response(user)


@router.get("/me", response_model=User)
async def get_current_user_info(user: UserAccount = Depends(require_auth)):
    """Get current user information."""
    return User.model_validate(user)
