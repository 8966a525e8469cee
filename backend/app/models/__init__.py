from backend.app.models.user import Account, AuthSession, User, UserRole, VerificationToken
from backend.app.models.filament import Filament, FilamentBrand, FilamentMaterial
from backend.app.models.printer import Printer, PrinterBrand
from backend.app.models.filament_profile import (
    FilamentProfile,
    InfillPattern,
    ProfileLike,
    SourceSlicer,
    SupportType,
)

__all__ = [
    "Account",
    "AuthSession",
    "User",
    "UserRole",
    "VerificationToken",
    "Filament",
    "FilamentBrand",
    "FilamentMaterial",
    "Printer",
    "PrinterBrand",
    "FilamentProfile",
    "InfillPattern",
    "ProfileLike",
    "SourceSlicer",
    "SupportType",
]
