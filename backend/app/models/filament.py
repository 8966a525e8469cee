import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.core.database import Base


class FilamentBrand(Base):
    __tablename__ = "filament_brands"

    brand_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)

    filaments: Mapped[list["Filament"]] = relationship(back_populates="brand", passive_deletes=True)


class FilamentMaterial(Base):
    __tablename__ = "filament_materials"

    material_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)  # PLA, PETG, ABS, etc.

    filaments: Mapped[list["Filament"]] = relationship(back_populates="material", passive_deletes=True)


class Filament(Base):
    """A physical filament: one brand, one material, plus spool properties."""

    __tablename__ = "filaments"

    filament_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    brand_id: Mapped[int | None] = mapped_column(ForeignKey("filament_brands.brand_id", ondelete="CASCADE"))
    material_id: Mapped[int | None] = mapped_column(ForeignKey("filament_materials.material_id", ondelete="CASCADE"))
    color: Mapped[str | None] = mapped_column(Text)
    diameter: Mapped[Decimal | None] = mapped_column(Numeric(4, 2))  # mm
    spool_weight: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))  # g
    filament_density: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))  # g/cm3
    cost_per_kg: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    created_at: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now())

    brand: Mapped[FilamentBrand | None] = relationship(back_populates="filaments")
    material: Mapped[FilamentMaterial | None] = relationship(back_populates="filaments")
    profiles: Mapped[list["FilamentProfile"]] = relationship(back_populates="filament", passive_deletes=True)


from backend.app.models.filament_profile import FilamentProfile  # noqa: E402
