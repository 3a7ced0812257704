"""Listing and manual lifecycle of passenger records outside the import"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.passenger_record import PassengerRecord, ArchivePassengerRecord
from ..schemas.record import PassengerRecordCreate
from ..utils.logging_config import get_logger
from .errors import RecordNotFound
from .import_service import to_utc_naive

logger = get_logger(__name__)


def list_records(db: Session, tour_type: Optional[str] = None) -> List[PassengerRecord]:
    """Active records by tour date, optionally narrowed to tour types containing tour_type"""
    query = db.query(PassengerRecord)
    if tour_type:
        query = query.filter(
            PassengerRecord.tour_type.isnot(None),
            PassengerRecord.tour_type.contains(tour_type, autoescape=True),
        )
    return query.order_by(PassengerRecord.tour_date, PassengerRecord.id).all()


def list_archive(db: Session, tour_type: Optional[str] = None) -> List[ArchivePassengerRecord]:
    query = db.query(ArchivePassengerRecord)
    if tour_type:
        query = query.filter(
            ArchivePassengerRecord.tour_type.isnot(None),
            ArchivePassengerRecord.tour_type.contains(tour_type, autoescape=True),
        )
    return query.order_by(
        ArchivePassengerRecord.archived_at.desc(),
        ArchivePassengerRecord.tour_date,
        ArchivePassengerRecord.id,
    ).all()


def create_record(db: Session, data: PassengerRecordCreate) -> PassengerRecord:
    record = PassengerRecord(
        tour_date=to_utc_naive(data.tour_date),
        tour_type=data.tour_type,
        seats=data.seats,
        surname=data.surname,
        first_name=data.first_name,
        pax=data.pax,
        original_pax=data.pax,
        notes=data.notes,
        email_address=data.email_address,
        unique_reference=data.unique_reference,
        phone_number=data.phone_number,
        checked_in=False,
        checked_in_by=None,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.log_with_context(
        logging.INFO, "Passenger record created manually",
        entity_type="passenger_record", entity_id=record.id, tour_type=record.tour_type,
    )
    return record


def remove_record(db: Session, record_id: int) -> None:
    """Delete an active record outright; manual removals are not archived"""
    record = db.get(PassengerRecord, record_id)
    if record is None:
        raise RecordNotFound(f"Passenger record {record_id} not found.")
    db.delete(record)
    db.commit()
    logger.log_with_context(
        logging.INFO, "Passenger record removed manually",
        entity_type="passenger_record", entity_id=record_id,
    )
