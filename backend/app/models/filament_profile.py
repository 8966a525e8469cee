import uuid
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.core.database import Base


class SourceSlicer(StrEnum):
    BAMBU_STUDIO = "Bambu Studio"
    PRUSASLICER = "PrusaSlicer"
    CURA = "Cura"
    ORCASLICER = "OrcaSlicer"
    OTHER = "Other"


class InfillPattern(StrEnum):
    GRID = "Grid"
    GYROID = "Gyroid"
    HONEYCOMB = "Honeycomb"
    CUBIC = "Cubic"
    OTHER = "Other"


class SupportType(StrEnum):
    TREE = "Tree"
    GRID = "Grid"
    NONE = "None"


class FilamentProfile(Base):
    """A user-submitted bundle of slicer settings for a filament (and optionally a printer).

    Only the name, filament and owner are set on every row; all slicer settings
    are independently nullable. Enum-like columns are plain strings: values are
    not checked against SourceSlicer/InfillPattern/SupportType.
    """

    __tablename__ = "filament_profiles"

    filament_profile_id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    filament_id: Mapped[str | None] = mapped_column(ForeignKey("filaments.filament_id", ondelete="CASCADE"))
    printer_id: Mapped[str | None] = mapped_column(ForeignKey("printers.printer_id", ondelete="CASCADE"))
    filament_profile_name: Mapped[str] = mapped_column(Text)
    submission_date: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now())
    cloned_from_profile_id: Mapped[str | None] = mapped_column(String(36))  # Not enforced as a FK
    source_slicer: Mapped[str | None] = mapped_column(Text)
    slicer_version: Mapped[str | None] = mapped_column(Text)
    custom_notes: Mapped[str | None] = mapped_column(Text)
    community_rating: Mapped[Decimal | None] = mapped_column(Numeric(3, 2), default=0)

    # General print settings
    layer_height: Mapped[Decimal | None] = mapped_column(Numeric(4, 2))
    wall_thickness: Mapped[Decimal | None] = mapped_column(Numeric(4, 2))
    top_bottom_layers: Mapped[int | None] = mapped_column(Integer)
    infill_density: Mapped[int | None] = mapped_column(Integer)  # percent
    infill_pattern: Mapped[str | None] = mapped_column(Text)

    # Temperatures (°C)
    nozzle_temp: Mapped[int | None] = mapped_column(Integer)
    bed_temp: Mapped[int | None] = mapped_column(Integer)
    chamber_temp: Mapped[int | None] = mapped_column(Integer)

    # Speed & flow (mm/s, flow in percent)
    print_speed: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    wall_speed: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    infill_speed: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    travel_speed: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    flow_rate: Mapped[int | None] = mapped_column(Integer)

    # Cooling
    fan_speed: Mapped[int | None] = mapped_column(Integer)  # percent
    min_layer_time: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))  # seconds

    # Retraction
    retraction_distance: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    retraction_speed: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    z_hop: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))

    # Supports
    supports_enabled: Mapped[bool | None] = mapped_column(Boolean, default=False)
    support_type: Mapped[str | None] = mapped_column(Text)
    support_density: Mapped[int | None] = mapped_column(Integer)
    support_z_distance: Mapped[Decimal | None] = mapped_column(Numeric(4, 2))

    # Additional metadata
    gcode_link: Mapped[str | None] = mapped_column(Text)
    profile_link: Mapped[str | None] = mapped_column(Text)
    tags: Mapped[list[str] | None] = mapped_column(JSON)

    user: Mapped["User | None"] = relationship(back_populates="profiles")
    filament: Mapped["Filament | None"] = relationship(back_populates="profiles")
    printer: Mapped["Printer | None"] = relationship(back_populates="profiles")
    likes: Mapped[list["ProfileLike"]] = relationship(back_populates="profile", passive_deletes=True)


class ProfileLike(Base):
    __tablename__ = "profile_likes"

    like_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    profile_id: Mapped[str | None] = mapped_column(
        ForeignKey("filament_profiles.filament_profile_id", ondelete="CASCADE")
    )
    liked_at: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now())

    user: Mapped["User | None"] = relationship(back_populates="likes")
    profile: Mapped[FilamentProfile | None] = relationship(back_populates="likes")


from backend.app.models.filament import Filament  # noqa: E402
from backend.app.models.printer import Printer  # noqa: E402
from backend.app.models.user import User  # noqa: E402
