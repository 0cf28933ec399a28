from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime
from enum import Enum


# ---------------------------------------------------------
# FIXED OPTION SETS
# ---------------------------------------------------------
class Unit(str, Enum):
    BOX = "box"
    PACK = "pack"
    ROLL = "roll"
    PIECE = "piece"
    PAIR = "pair"


class Location(str, Enum):
    MAIN_OFFICE = "Main Office"
    WORKSHOP = "Workshop"
    RECEPTION = "Reception"
    GYM = "Gym"


class Inspector(str, Enum):
    JOHN_DOE = "John Doe"
    JANE_SMITH = "Jane Smith"
    MIKE_JOHNSON = "Mike Johnson"
    SARAH_LEE = "Sarah Lee"


class InspectionStatus(str, Enum):
    PASSED = "Passed"
    NEEDS_ATTENTION = "Needs Attention"
    FAILED = "Failed"


class ExpiryStatus(str, Enum):
    EXPIRED = "expired"
    WARNING = "warning"
    OK = "ok"


# Choices offered by the dashboard selectors
REQUEST_AMOUNT_CHOICES = [0, 1, 2, 3, 4, 5]
ITEM_QUANTITY_CHOICES = [1, 2, 3, 4, 5, 10, 20, 30, 50]

DATE_FIELDS = ("expiry_date", "inspection_date", "next_inspection_date")


def normalize_date(value):
    """Coerce a date-ish value to a calendar date (canonical YYYY-MM-DD).

    Accepts date, datetime, "YYYY-MM-DD" and full ISO timestamps such as the
    ones a date picker emits ("2026-03-01T00:00:00.000Z").
    """
    if value is None or (isinstance(value, date) and not isinstance(value, datetime)):
        return value
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("date must not be empty")
        if len(text) > 10:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    raise ValueError(f"unsupported date value: {value!r}")


# ---------------------------------------------------------
# INSPECTION RECORD
# ---------------------------------------------------------
class InspectionFields(BaseModel):
    picture_url: str = ""
    item_inspected: str
    item_quantity: int = Field(0, ge=0)
    unit: Unit
    expiry_date: date
    request_amount: int = Field(0, ge=0)
    location: Location
    inspection_date: date
    inspected_by: Inspector
    kit_condition: str = ""
    next_inspection_date: date
    status: InspectionStatus
    description: str = ""

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def _normalize_dates(cls, v):
        return normalize_date(v)

    @field_validator("picture_url", "kit_condition", "description", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else v

    class Config:
        from_attributes = True
        use_enum_values = True


class InspectionCreate(InspectionFields):
    """Payload for creating a record; the store assigns inspection_id."""

    class Config:
        json_schema_extra = {
            "example": {
                "picture_url": "https://example.com/bandages.jpg",
                "item_inspected": "Adhesive bandages",
                "item_quantity": 20,
                "unit": "box",
                "expiry_date": "2027-01-31",
                "request_amount": 0,
                "location": "Workshop",
                "inspection_date": "2026-10-01",
                "inspected_by": "Jane Smith",
                "kit_condition": "Sealed",
                "next_inspection_date": "2027-01-01",
                "status": "Passed",
                "description": "Assorted sizes"
            }
        }


class InspectionRecord(InspectionFields):
    inspection_id: int


# ---------------------------------------------------------
# UPDATE SCHEMAS
# ---------------------------------------------------------
class InspectionEdit(BaseModel):
    """Partial edit of the working copy held by the record editor."""
    picture_url: Optional[str] = None
    item_inspected: Optional[str] = None
    item_quantity: Optional[int] = Field(None, ge=0)
    unit: Optional[Unit] = None
    expiry_date: Optional[date] = None
    location: Optional[Location] = None
    inspection_date: Optional[date] = None
    inspected_by: Optional[Inspector] = None
    kit_condition: Optional[str] = None
    next_inspection_date: Optional[date] = None
    status: Optional[InspectionStatus] = None
    description: Optional[str] = None

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def _normalize_dates(cls, v):
        return normalize_date(v)

    class Config:
        use_enum_values = True


class RequestAmountUpdate(BaseModel):
    request_amount: int = Field(..., ge=0)


# ---------------------------------------------------------
# REQUEST BATCH
# ---------------------------------------------------------
class RequestBatchItem(BaseModel):
    """Snapshot of one inspection row at the moment a request is compiled."""
    inspection_id: int
    request_order_number: Optional[str] = None
    request_amount: int = Field(..., gt=0)
    picture_url: str = ""
    item_inspected: str
    unit: str
    description: str = ""

    class Config:
        frozen = True
        from_attributes = True

    @field_validator("picture_url", "item_inspected", "unit", "description", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else v

    @classmethod
    def snapshot(cls, record: InspectionRecord) -> "RequestBatchItem":
        return cls(
            inspection_id=record.inspection_id,
            request_amount=record.request_amount,
            picture_url=record.picture_url,
            item_inspected=record.item_inspected,
            unit=record.unit,
            description=record.description,
        )

    def tagged(self, order_number: str) -> "RequestBatchItem":
        return self.model_copy(update={"request_order_number": order_number})


class InspectionRow(InspectionRecord):
    """A table row as rendered by the dashboard."""
    expiry_status: ExpiryStatus
