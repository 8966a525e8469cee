import logging

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.auth import get_current_user_optional
from backend.app.core.database import get_db
from backend.app.core.invalidation import ViewInvalidator
from backend.app.models.user import User
from backend.app.schemas.filament_profile import (
    FilamentProfileDeleteResponse,
    FilamentProfileListResponse,
    FilamentProfileResponse,
)
from backend.app.services.profile_form import parse_profile_form
from backend.app.services.profile_mutation import LISTING_PATH, FilamentProfileMutationService
from backend.app.services.profile_query import FilamentProfileQueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["filament-profiles"])


def get_invalidator(request: Request) -> ViewInvalidator:
    return request.app.state.invalidator


@router.get("/", response_model=FilamentProfileListResponse)
async def list_profiles(
    q: str = "",
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
    invalidator: ViewInvalidator = Depends(get_invalidator),
):
    """List filament profiles, optionally searching brand and material names."""
    service = FilamentProfileQueryService(db)
    result = await service.list_profiles(q, offset)
    invalidator.mark_fresh(LISTING_PATH)
    return result


@router.post("/", response_model=FilamentProfileResponse, status_code=201)
async def create_profile(
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user_optional),
    invalidator: ViewInvalidator = Depends(get_invalidator),
):
    """Create a filament profile from a form submission."""
    form = await request.form()
    submission = parse_profile_form({key: value for key, value in form.items() if isinstance(value, str)})

    service = FilamentProfileMutationService(db, current_user=lambda: current_user, invalidator=invalidator)
    return await service.create_profile(
        owner_user_id=submission.user_id,
        filament_id=submission.filament_id,
        filament_profile_name=submission.filament_profile_name,
        printer_id=submission.printer_id,
        cloned_from_profile_id=submission.cloned_from_profile_id,
        slicer_settings=submission.slicer_settings,
    )


@router.delete("/{filament_id}", response_model=FilamentProfileDeleteResponse)
async def delete_profile(
    filament_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user_optional),
    invalidator: ViewInvalidator = Depends(get_invalidator),
):
    """Delete a filament and, through it, every profile that uses it."""
    service = FilamentProfileMutationService(db, current_user=lambda: current_user, invalidator=invalidator)
    deleted = await service.delete_profile(filament_id)
    return FilamentProfileDeleteResponse(deleted=deleted)
