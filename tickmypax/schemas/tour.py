from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .base import CamelModel, as_utc


class GuideAssignment(CamelModel):
    guide_name: Optional[str] = Field(None, max_length=256)


class TourResponse(CamelModel):
    id: int
    tour_date: datetime
    tour_type: Optional[str] = None
    tour_name: Optional[str] = None
    guide_name: Optional[str] = None

    @field_validator("tour_date")
    @classmethod
    def mark_tour_date_utc(cls, v):
        return as_utc(v)


class PassengerResponse(CamelModel):
    id: int
    passenger_guid: str
    tour_id: int
    timestamp: datetime
    surname: Optional[str] = None
    first_name: Optional[str] = None
    pax: int = 0
    email: Optional[str] = None
    unique_reference: Optional[str] = None
    other_booking_reference: Optional[str] = None
    phone_number: Optional[str] = None
    qr_code_image: Optional[str] = None
    checked_in: bool = False

    @field_validator("timestamp")
    @classmethod
    def mark_timestamp_utc(cls, v):
        return as_utc(v)


class TourWithPassengers(TourResponse):
    passengers: List[PassengerResponse] = []


class TourPaxSummary(CamelModel):
    tour_type: Optional[str] = None
    total_pax: int
    guide_name: Optional[str] = None
