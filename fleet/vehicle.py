"""Vehicle class - one fleet unit's compliance-relevant data."""

from datetime import date
from typing import Any, Optional, Tuple

from .dates import unwrap_date

# (attribute, label) pairs for the dated documents that expire
EXPIRY_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("road_tax_expiry", "Roadtax"),
    ("insurance_expiry", "Insurance"),
)


class Vehicle:
    """A fleet vehicle record as held by the document store."""

    def __init__(
        self,
        plate_number: str,
        color: Optional[str] = None,
        last_service_date: Any = None,
        last_service_mileage: Optional[int] = None,
        current_mileage: Optional[int] = None,
        road_tax_expiry: Any = None,
        insurance_expiry: Any = None,
        id: Optional[str] = None,
    ):
        plate = str(plate_number or "").strip().upper()
        if not plate:
            raise ValueError("Plate number is required")
        self.id = id
        self.plate_number = plate
        self.color = str(color).strip().upper() if color else None
        self.last_service_date = last_service_date
        self.last_service_mileage = last_service_mileage
        self.current_mileage = current_mileage
        self.road_tax_expiry = road_tax_expiry
        self.insurance_expiry = insurance_expiry

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        return f"{self.plate_number} ({self.color})" if self.color else self.plate_number

    def expiry(self, attr: str) -> Optional[date]:
        """Get an expiry field as a plain date (None when not recorded)."""
        return unwrap_date(getattr(self, attr))

    def __repr__(self) -> str:
        return f"Vehicle({self.plate_number!r}, id={self.id!r})"
