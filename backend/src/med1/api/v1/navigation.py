"""Navigation API v1 endpoint."""

from fastapi import APIRouter, Depends, Query

from med1.auth.middleware import get_current_user
from med1.auth.models import UserAccount
from med1.navigation import build_navigation

router = APIRouter(tags=["navigation"])


@router.get("/navigation")
async def get_navigation(
    path: str = Query(..., description="Current route path, e.g. /dashboard/leads"),
    user: UserAccount | None = Depends(get_current_user),
):
    """Describe the navigation chrome for a route.

    Returns `{"visible": false, "path": ...}` outside the dashboard routes.
    """
    state = build_navigation(path, user)
    if state is None:
        return {"visible": False, "path": path}
    return state.to_dict()
