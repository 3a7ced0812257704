from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .base import CamelModel, as_utc


class PassengerRecordBase(CamelModel):
    tour_date: datetime
    tour_type: Optional[str] = None
    seats: Optional[str] = None
    surname: Optional[str] = None
    first_name: Optional[str] = None
    pax: int = 0
    notes: Optional[str] = None
    email_address: Optional[str] = None
    unique_reference: Optional[str] = None
    phone_number: Optional[str] = None


class PassengerRecordCreate(PassengerRecordBase):
    """Manual passenger entry outside the spreadsheet import; limits follow the column sizes"""
    tour_type: Optional[str] = Field(None, max_length=256)
    seats: Optional[str] = Field(None, max_length=256)
    surname: Optional[str] = Field(None, max_length=256)
    first_name: Optional[str] = Field(None, max_length=256)
    pax: int = Field(0, ge=0)
    notes: Optional[str] = Field(None, max_length=4000)
    email_address: Optional[str] = Field(None, max_length=320)
    unique_reference: Optional[str] = Field(None, max_length=256)
    phone_number: Optional[str] = Field(None, max_length=64)


class PassengerRecordResponse(PassengerRecordBase):
    id: int
    original_pax: int = 0
    checked_in: bool = False
    checked_in_by: Optional[str] = None

    @field_validator("tour_date")
    @classmethod
    def mark_tour_date_utc(cls, v):
        return as_utc(v)


class ArchivePassengerRecordResponse(PassengerRecordResponse):
    archived_at: datetime

    @field_validator("archived_at")
    @classmethod
    def mark_archived_at_utc(cls, v):
        return as_utc(v)


class ImportResult(CamelModel):
    message: str = "Import successful"
    total_rows_processed: int
    rows_imported: int
    errors: List[str] = []


class UniqueRefCheckIn(CamelModel):
    # Presence is checked by the ledger so a missing ref is a 400, not a 422
    unique_ref: Optional[str] = None
    tour_type: Optional[str] = None


class UniqueRefCheckInResponse(CamelModel):
    message: str = "Checked in successfully."
    passenger: PassengerRecordResponse


class PaxUpdate(CamelModel):
    pax: int = Field(..., ge=0, description="Corrected party size")


class PaxUpdateResponse(CamelModel):
    message: str = "Pax updated"
    id: int
    pax: int
    original_pax: int


class RecordRemove(CamelModel):
    id: int


class GuideStats(CamelModel):
    guide_name: str
    clients: int
    checked_in_count: int
    not_arrived_count: int


class TourTypeStats(CamelModel):
    tour_date: datetime
    tour_type: Optional[str] = None
    guide_name: Optional[str] = None
    total_clients: int
    checked_in_count: int
    not_arrived_count: int
    guides: List[GuideStats] = []

    @field_validator("tour_date")
    @classmethod
    def mark_tour_date_utc(cls, v):
        return as_utc(v)
