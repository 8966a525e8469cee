"""Read side of filament profiles: search, paginate and normalize the listing."""

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Select, func, or_, select
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import FieldError, ValidationError
from backend.app.models.filament import Filament, FilamentBrand, FilamentMaterial
from backend.app.models.filament_profile import FilamentProfile
from backend.app.models.printer import Printer, PrinterBrand
from backend.app.schemas.filament_profile import FilamentProfileListResponse, FilamentProfileView

logger = logging.getLogger(__name__)

PAGE_SIZE = 5


def _listing_query(search: str | None) -> Select:
    """Build the listing join, filtered by brand or material name when searching.

    Inner joins drop profiles whose filament, brand or material cannot be
    resolved; the printer side is optional.
    """
    query = (
        select(
            FilamentProfile.filament_profile_id,
            FilamentProfile.filament_profile_name,
            FilamentBrand.name.label("brand_name"),
            FilamentMaterial.name.label("material_name"),
            Filament.color,
            Filament.diameter,
            Filament.spool_weight,
            Filament.filament_density,
            Filament.cost_per_kg,
            FilamentProfile.printer_id,
            PrinterBrand.name.label("printer_brand_name"),
            Printer.model_name.label("printer_model_name"),
            FilamentProfile.community_rating,
            FilamentProfile.submission_date.label("created_at"),
        )
        .select_from(FilamentProfile)
        .join(Filament, FilamentProfile.filament_id == Filament.filament_id)
        .join(FilamentBrand, Filament.brand_id == FilamentBrand.brand_id)
        .join(FilamentMaterial, Filament.material_id == FilamentMaterial.material_id)
        .outerjoin(Printer, FilamentProfile.printer_id == Printer.printer_id)
        .outerjoin(PrinterBrand, Printer.brand_id == PrinterBrand.brand_id)
    )

    if search:
        query = query.where(
            or_(
                FilamentBrand.name.icontains(search, autoescape=True),
                FilamentMaterial.name.icontains(search, autoescape=True),
            )
        )
    return query


def _as_float(value: Decimal | float | None) -> float | None:
    return float(value) if value is not None else None


def row_to_view(row: Row) -> FilamentProfileView:
    """Normalize one joined row: decimals to floats, rating and date fallbacks."""
    return FilamentProfileView(
        filament_profile_id=row.filament_profile_id,
        filament_profile_name=row.filament_profile_name,
        brand_name=str(row.brand_name),
        material_name=str(row.material_name),
        color=row.color,
        diameter=_as_float(row.diameter),
        spool_weight=_as_float(row.spool_weight),
        filament_density=_as_float(row.filament_density),
        cost_per_kg=_as_float(row.cost_per_kg),
        printer_id=row.printer_id,
        printer_brand_name=str(row.printer_brand_name) if row.printer_brand_name is not None else None,
        printer_model_name=str(row.printer_model_name) if row.printer_model_name is not None else None,
        community_rating=float(row.community_rating) if row.community_rating is not None else 0,
        created_at=row.created_at or datetime.now(timezone.utc),
    )


class FilamentProfileQueryService:
    """Service for listing filament profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_profiles(self, search: str | None = None, offset: int = 0) -> FilamentProfileListResponse:
        """Return one page of profiles, oldest submission first.

        ``next_offset`` is set whenever the page is full, so a final page of
        exactly PAGE_SIZE rows still points at an (empty) next page.

        ``total`` is the whole profile table when not searching, and the number
        of matching rows across all pages when searching.
        """
        if offset < 0:
            raise ValidationError("Invalid offset", [FieldError("offset", "must be zero or greater")])

        search = search or ""
        listing = _listing_query(search)

        page_query = (
            listing.order_by(
                FilamentProfile.submission_date.asc(),
                FilamentProfile.filament_profile_id.asc(),
            )
            .limit(PAGE_SIZE)
            .offset(offset)
        )
        result = await self.db.execute(page_query)
        profiles = [row_to_view(row) for row in result.all()]

        if search:
            count_query = select(func.count()).select_from(listing.subquery())
        else:
            count_query = select(func.count()).select_from(FilamentProfile)
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        logger.debug("Listed %d profiles (search=%r, offset=%d, total=%d)", len(profiles), search, offset, total)

        return FilamentProfileListResponse(
            profiles=profiles,
            next_offset=offset + PAGE_SIZE if len(profiles) >= PAGE_SIZE else None,
            total=total,
        )
