import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.core.database import Base


class PrinterBrand(Base):
    __tablename__ = "printer_brands"

    brand_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)

    printers: Mapped[list["Printer"]] = relationship(back_populates="brand", passive_deletes=True)


class Printer(Base):
    __tablename__ = "printers"

    printer_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    brand_id: Mapped[int | None] = mapped_column(ForeignKey("printer_brands.brand_id", ondelete="CASCADE"))
    model_name: Mapped[str] = mapped_column(Text)
    extruder_type: Mapped[str | None] = mapped_column(Text)  # direct drive, bowden
    bed_type: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now())

    brand: Mapped[PrinterBrand | None] = relationship(back_populates="printers")
    profiles: Mapped[list["FilamentProfile"]] = relationship(back_populates="printer", passive_deletes=True)


from backend.app.models.filament_profile import FilamentProfile  # noqa: E402
