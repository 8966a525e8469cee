from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.models.filament import Filament, FilamentBrand, FilamentMaterial
from backend.app.models.printer import Printer, PrinterBrand
from backend.app.schemas.filament_profile import (
    FilamentBrandResponse,
    FilamentMaterialResponse,
    FilamentResponse,
    LookupsResponse,
    PrinterBrandResponse,
    PrinterResponse,
)

router = APIRouter(prefix="/lookups", tags=["lookups"])


@router.get("/", response_model=LookupsResponse)
async def list_lookups(db: AsyncSession = Depends(get_db)):
    """List brands, materials, filaments and printers for filling in profile forms."""
    brands = await db.execute(select(FilamentBrand).order_by(FilamentBrand.name))
    materials = await db.execute(select(FilamentMaterial).order_by(FilamentMaterial.name))
    filaments = await db.execute(select(Filament).order_by(Filament.created_at))
    printer_brands = await db.execute(select(PrinterBrand).order_by(PrinterBrand.name))
    printers = await db.execute(select(Printer).order_by(Printer.model_name))

    return LookupsResponse(
        filament_brands=[FilamentBrandResponse.model_validate(b) for b in brands.scalars()],
        filament_materials=[FilamentMaterialResponse.model_validate(m) for m in materials.scalars()],
        filaments=[FilamentResponse.model_validate(f) for f in filaments.scalars()],
        printer_brands=[PrinterBrandResponse.model_validate(b) for b in printer_brands.scalars()],
        printers=[PrinterResponse.model_validate(p) for p in printers.scalars()],
    )
