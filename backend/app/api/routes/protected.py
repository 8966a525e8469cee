"""Routes under the protected prefix; ProtectedPathMiddleware guards them before they run."""

from fastapi import APIRouter, Depends

from backend.app.core.auth import get_current_user
from backend.app.models.user import User
from backend.app.schemas.auth import UserResponse

router = APIRouter(prefix="/protected", tags=["protected"])


@router.get("/whoami", response_model=UserResponse)
async def whoami(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)
