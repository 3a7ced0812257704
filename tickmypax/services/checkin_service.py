"""
Check-In Ledger

Moves a PassengerRecord between NotCheckedIn and CheckedIn(attributor).
Every mutation goes through PassengerRecord.apply_check_in_state so the
flag and the attributor are always written together.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..models.passenger_record import PassengerRecord, CheckedIn, NotCheckedIn
from ..utils.dependencies import UNKNOWN_PRINCIPAL
from ..utils.logging_config import get_logger
from .errors import RecordNotFound, TourTypeMismatch, ValidationFailed

logger = get_logger(__name__)


def tour_types_match(expected: str, actual: Optional[str]) -> bool:
    return expected.strip().casefold() == (actual or "").strip().casefold()


class CheckInLedger:

    def __init__(self, db: Session):
        self.db = db

    def get_record(self, record_id: int) -> PassengerRecord:
        record = self.db.get(PassengerRecord, record_id)
        if record is None:
            raise RecordNotFound(f"Passenger record {record_id} not found.")
        return record

    def check_in(self, record_id: int, attributor: Optional[str]) -> PassengerRecord:
        """Mark a record checked in. Re-running with the same caller changes nothing."""
        record = self.get_record(record_id)
        record.apply_check_in_state(CheckedIn(attributor=attributor or UNKNOWN_PRINCIPAL))
        self.db.commit()
        logger.passenger_checked_in(record.id, record.checked_in_by)
        return record

    def remove_check_in(self, record_id: int) -> PassengerRecord:
        record = self.get_record(record_id)
        record.apply_check_in_state(NotCheckedIn())
        self.db.commit()
        logger.check_in_removed(record.id)
        return record

    def check_in_by_reference(
        self,
        unique_ref: Optional[str],
        attributor: Optional[str],
        expected_tour_type: Optional[str] = None,
    ) -> PassengerRecord:
        """
        Kiosk path: find the active record by its booking reference.

        When the station supplies its tour type and the record belongs to a
        different one, nothing is written and TourTypeMismatch is raised.
        """
        if not unique_ref:
            raise ValidationFailed("UniqueRef is required.")

        record = (
            self.db.query(PassengerRecord)
            .filter(PassengerRecord.unique_reference == unique_ref)
            .order_by(PassengerRecord.id)
            .first()
        )
        if record is None:
            raise RecordNotFound("Passenger not found.")

        station_tour_type = (expected_tour_type or "").strip()
        if station_tour_type and not tour_types_match(station_tour_type, record.tour_type):
            logger.check_in_refused(record.id, station_tour_type, record.tour_type)
            raise TourTypeMismatch(
                f"Passenger {record.full_name or unique_ref} is booked on tour "
                f"'{record.tour_type}', not '{station_tour_type}'.",
                actual_tour_type=record.tour_type,
            )

        record.apply_check_in_state(CheckedIn(attributor=attributor or UNKNOWN_PRINCIPAL))
        self.db.commit()
        logger.passenger_checked_in(record.id, record.checked_in_by, via="unique_reference")
        return record

    def update_pax(self, record_id: int, pax: int) -> PassengerRecord:
        """Correct the headcount; original_pax keeps the imported value"""
        if pax < 0:
            raise ValidationFailed("Pax must be zero or greater.")
        record = self.get_record(record_id)
        record.pax = pax
        self.db.commit()
        logger.log_with_context(
            logging.INFO, f"Pax corrected to {pax}",
            entity_type="passenger_record", entity_id=record.id,
            pax=pax, original_pax=record.original_pax,
        )
        return record
