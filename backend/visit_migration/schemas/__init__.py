from .reports import MigrationReport, MigrationStats, VerificationResult
from .visits import (
    AddressComponents,
    DeleteField,
    EnrichmentResult,
    FieldEdit,
    GeoPoint,
    SetField,
)

__all__ = [
    "AddressComponents",
    "DeleteField",
    "EnrichmentResult",
    "FieldEdit",
    "GeoPoint",
    "MigrationReport",
    "MigrationStats",
    "SetField",
    "VerificationResult",
]
