"""Write side of filament profiles: create a profile, delete by filament."""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import AuthorizationError, FieldError, StorageError, ValidationError
from backend.app.core.invalidation import ViewInvalidator
from backend.app.models.filament import Filament
from backend.app.models.filament_profile import FilamentProfile
from backend.app.models.user import User
from backend.app.services.slicer_settings import filter_known_settings, validate_slicer_settings

logger = logging.getLogger(__name__)

LISTING_PATH = "/"

CurrentUserProvider = Callable[[], User | None]


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


class FilamentProfileMutationService:
    """Service for creating and deleting filament profiles.

    ``current_user`` is consulted before every mutation; it returns the
    authenticated user or None.
    """

    def __init__(
        self,
        db: AsyncSession,
        current_user: CurrentUserProvider,
        invalidator: ViewInvalidator | None = None,
    ):
        self.db = db
        self.current_user = current_user
        self.invalidator = invalidator

    def _require_user(self) -> User:
        user = self.current_user()
        if user is None:
            raise AuthorizationError("Authentication required")
        return user

    async def _invalidate_listing(self) -> None:
        if self.invalidator is not None:
            await self.invalidator.revalidate_path(LISTING_PATH)

    async def create_profile(
        self,
        *,
        owner_user_id: str | None,
        filament_id: str | None,
        filament_profile_name: str | None,
        printer_id: str | None = None,
        cloned_from_profile_id: str | None = None,
        slicer_settings: Mapping[str, Any] | None = None,
    ) -> FilamentProfile:
        """Insert a new profile and return the stored row.

        Slicer settings are reduced to known columns first (unknown keys are
        dropped), then range-checked. Nothing is written if any check fails.
        """
        missing = [
            FieldError(field, "is required")
            for field, value in (
                ("user_id", owner_user_id),
                ("filament_id", filament_id),
                ("filament_profile_name", filament_profile_name),
            )
            if _blank(value)
        ]
        if missing:
            raise ValidationError("Missing required filament profile data", missing)

        user = self._require_user()
        if user.id != owner_user_id and not user.is_admin:
            raise AuthorizationError("Cannot create profiles for another user")

        settings = filter_known_settings(slicer_settings)
        errors = validate_slicer_settings(settings)
        if errors:
            raise ValidationError("Invalid slicer settings", errors)

        profile = FilamentProfile(
            user_id=owner_user_id,
            filament_id=filament_id,
            printer_id=printer_id or None,
            filament_profile_name=filament_profile_name,
            cloned_from_profile_id=cloned_from_profile_id or None,
            **settings,
        )
        self.db.add(profile)
        try:
            await self.db.commit()
            await self.db.refresh(profile)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Error adding filament profile: %s", e)
            raise StorageError("Failed to add filament profile") from e

        logger.info(
            "Created filament profile %s (%s) for user %s",
            profile.filament_profile_id,
            profile.filament_profile_name,
            owner_user_id,
        )
        await self._invalidate_listing()
        return profile

    async def delete_profile(self, filament_id: str | None) -> bool:
        """Delete the filament with this id, and through it every profile using it.

        The id is a filament id, not a profile id: the cascade on
        filament_profiles.filament_id removes all sibling profiles that share
        the filament. Non-admins may only do this when they own every one of
        those profiles.

        Returns True if a filament row was removed.
        """
        if _blank(filament_id):
            raise ValidationError("Invalid filament profile ID", [FieldError("id", "is required")])

        user = self._require_user()
        if not user.is_admin:
            result = await self.db.execute(
                select(FilamentProfile.user_id).where(FilamentProfile.filament_id == filament_id)
            )
            owners = set(result.scalars().all())
            if owners != {user.id}:
                raise AuthorizationError("Cannot delete profiles owned by other users")

        try:
            result = await self.db.execute(delete(Filament).where(Filament.filament_id == filament_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Error deleting filament profile %s: %s", filament_id, e)
            raise StorageError("Failed to delete filament profile") from e

        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted filament %s and its profiles", filament_id)
        else:
            logger.info("No filament %s to delete", filament_id)

        await self._invalidate_listing()
        return deleted
