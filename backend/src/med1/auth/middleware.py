"""Authentication dependencies for FastAPI.

The authenticated account is resolved per request from the bearer token
and handed to route handlers as an explicit dependency value.
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from med1.auth.local import auth_service
from med1.auth.models import UserAccount
from med1.logging_config import get_logger

logger = get_logger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> UserAccount | None:
    """Get current authenticated user, or None for anonymous requests."""
    if not credentials:
        return None

    user = auth_service.get_user_from_token(credentials.credentials)
    if user:
        request.state.user = user

    return user


def require_auth(user: UserAccount | None = Depends(get_current_user)) -> UserAccount:
    """Require authentication - raises 401 if not authenticated.

    Raises:
        HTTPException: 401 if not authenticated
    """
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
