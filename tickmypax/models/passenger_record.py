"""
Passenger records imported from the booking spreadsheet.

PassengerRecord is the active set for the current import cycle; every import
moves the whole set into ArchivePassengerRecord before loading the new file.
"""
from dataclasses import dataclass
from typing import Union

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Index

from ..database import Base, utcnow


@dataclass(frozen=True)
class NotCheckedIn:
    checked_in = False
    attributor = None


@dataclass(frozen=True)
class CheckedIn:
    attributor: str
    checked_in = True


CheckInState = Union[NotCheckedIn, CheckedIn]


class PassengerRecordFields:
    """Columns shared by the active and the archive table"""

    tour_date = Column(DateTime, nullable=False, index=True)
    tour_type = Column(String(256), nullable=True, index=True)
    seats = Column(String(256), nullable=True)
    surname = Column(String(256), nullable=True)
    first_name = Column(String(256), nullable=True)
    pax = Column(Integer, nullable=False, default=0)
    original_pax = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    email_address = Column(String(320), nullable=True)
    unique_reference = Column(String(256), nullable=True, index=True)
    phone_number = Column(String(64), nullable=True)
    checked_in = Column(Boolean, nullable=False, default=False)
    checked_in_by = Column(String(256), nullable=True)

    COPIED_FIELDS = (
        "tour_date", "tour_type", "seats", "surname", "first_name",
        "pax", "original_pax", "notes", "email_address",
        "unique_reference", "phone_number", "checked_in", "checked_in_by",
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.surname) if part)

    @property
    def check_in_state(self) -> CheckInState:
        if self.checked_in:
            return CheckedIn(attributor=self.checked_in_by)
        return NotCheckedIn()


class PassengerRecord(PassengerRecordFields, Base):
    __tablename__ = "passenger_records"

    id = Column(Integer, primary_key=True, autoincrement=True)

    def apply_check_in_state(self, state: CheckInState) -> None:
        """Flag and attributor only ever change together"""
        self.checked_in = state.checked_in
        self.checked_in_by = state.attributor

    def to_archive(self, archived_at=None) -> "ArchivePassengerRecord":
        values = {name: getattr(self, name) for name in self.COPIED_FIELDS}
        return ArchivePassengerRecord(archived_at=archived_at or utcnow(), **values)

    def __repr__(self):
        return f"<PassengerRecord {self.id} {self.tour_type} {self.unique_reference}>"


class ArchivePassengerRecord(PassengerRecordFields, Base):
    """Append-only copy of a record displaced by an import. Never updated."""
    __tablename__ = "archive_passenger_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    archived_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    __table_args__ = (
        Index("ix_archive_tour_type_date", "tour_type", "tour_date"),
    )

    def __repr__(self):
        return f"<ArchivePassengerRecord {self.id} archived={self.archived_at}>"
