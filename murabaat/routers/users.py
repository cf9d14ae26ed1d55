from __future__ import annotations

from fastapi import APIRouter, Depends

from murabaat.core.deps import get_current_user
from murabaat.models.users import UserAuth
from murabaat.schemas.auth import UserMeResponse

router = APIRouter(tags=["users"])


@router.get("/me", response_model=UserMeResponse)
def me(current: UserAuth = Depends(get_current_user)) -> UserMeResponse:
    return UserMeResponse(
        id=current.id,
        email=current.email,
        name=current.name,
        role=current.role,
        is_active=current.is_active,
    )
