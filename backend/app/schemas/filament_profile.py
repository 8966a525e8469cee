from datetime import datetime

from pydantic import BaseModel


class FilamentProfileView(BaseModel):
    """One row of the profile listing, already normalized for display."""

    filament_profile_id: str
    filament_profile_name: str
    brand_name: str
    material_name: str
    color: str | None = None
    diameter: float | None = None
    spool_weight: float | None = None
    filament_density: float | None = None
    cost_per_kg: float | None = None
    printer_id: str | None = None
    printer_brand_name: str | None = None
    printer_model_name: str | None = None
    community_rating: float = 0
    created_at: datetime


class FilamentProfileListResponse(BaseModel):
    profiles: list[FilamentProfileView]
    next_offset: int | None = None  # None when the page was not full
    total: int


class FilamentProfileResponse(BaseModel):
    """A stored filament profile row, as returned after creation."""

    filament_profile_id: str
    user_id: str | None = None
    filament_id: str | None = None
    printer_id: str | None = None
    filament_profile_name: str
    submission_date: datetime | None = None
    cloned_from_profile_id: str | None = None
    source_slicer: str | None = None
    slicer_version: str | None = None
    custom_notes: str | None = None
    community_rating: float | None = None
    layer_height: float | None = None
    wall_thickness: float | None = None
    top_bottom_layers: int | None = None
    infill_density: int | None = None
    infill_pattern: str | None = None
    nozzle_temp: int | None = None
    bed_temp: int | None = None
    chamber_temp: int | None = None
    print_speed: float | None = None
    wall_speed: float | None = None
    infill_speed: float | None = None
    travel_speed: float | None = None
    flow_rate: int | None = None
    fan_speed: int | None = None
    min_layer_time: float | None = None
    retraction_distance: float | None = None
    retraction_speed: float | None = None
    z_hop: float | None = None
    supports_enabled: bool | None = None
    support_type: str | None = None
    support_density: int | None = None
    support_z_distance: float | None = None
    gcode_link: str | None = None
    profile_link: str | None = None
    tags: list[str] | None = None

    class Config:
        from_attributes = True


class FilamentProfileDeleteResponse(BaseModel):
    status: str = "deleted"
    deleted: bool


class FilamentBrandResponse(BaseModel):
    brand_id: int
    name: str

    class Config:
        from_attributes = True


class FilamentMaterialResponse(BaseModel):
    material_id: int
    name: str

    class Config:
        from_attributes = True


class PrinterBrandResponse(BaseModel):
    brand_id: int
    name: str

    class Config:
        from_attributes = True


class FilamentResponse(BaseModel):
    filament_id: str
    brand_id: int | None = None
    material_id: int | None = None
    color: str | None = None
    diameter: float | None = None
    spool_weight: float | None = None
    filament_density: float | None = None
    cost_per_kg: float | None = None

    class Config:
        from_attributes = True


class PrinterResponse(BaseModel):
    printer_id: str
    brand_id: int | None = None
    model_name: str
    extruder_type: str | None = None
    bed_type: str | None = None

    class Config:
        from_attributes = True


class LookupsResponse(BaseModel):
    filament_brands: list[FilamentBrandResponse]
    filament_materials: list[FilamentMaterialResponse]
    filaments: list[FilamentResponse]
    printer_brands: list[PrinterBrandResponse]
    printers: list[PrinterResponse]
