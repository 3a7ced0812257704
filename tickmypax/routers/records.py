"""
Passenger records: spreadsheet import, check-in, stats and the daily manifest
"""
import io
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import PlainTextResponse, StreamingResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..schemas.auth import MessageResponse
from ..schemas.record import (
    ArchivePassengerRecordResponse,
    ImportResult,
    PassengerRecordCreate,
    PassengerRecordResponse,
    PaxUpdate,
    PaxUpdateResponse,
    RecordRemove,
    TourTypeStats,
    UniqueRefCheckIn,
    UniqueRefCheckInResponse,
)
from ..services.checkin_service import CheckInLedger
from ..services.import_service import ImportReconciler
from ..services.record_service import create_record, list_archive, list_records, remove_record
from ..services.report_service import build_today_report, report_filename
from ..services.stats_service import StatsAggregator
from ..utils.dependencies import get_current_user, get_principal_name

router = APIRouter(prefix="/api/records", tags=["Records"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.post("/import-excel", response_model=ImportResult)
async def import_excel(
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Replace the active passenger set with the uploaded workbook.
    The previous set is archived first, whatever the outcome of the parse.
    """
    content = await file.read() if file is not None else None
    summary = ImportReconciler(db).import_upload(content)
    return ImportResult(
        message=summary.message,
        total_rows_processed=summary.total_rows_processed,
        rows_imported=summary.rows_imported,
        errors=summary.errors,
    )


@router.get("", response_model=List[PassengerRecordResponse])
@router.get("/", response_model=List[PassengerRecordResponse])
async def get_records(
    tour_type: Optional[str] = Query(None, alias="tourType"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return list_records(db, tour_type)


@router.get("/stats", response_model=List[TourTypeStats])
async def get_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Per-tour-type statistics for completed tours in the active set"""
    return [TourTypeStats.model_validate(s) for s in StatsAggregator(db).completed_tour_stats()]


@router.get("/archive", response_model=List[ArchivePassengerRecordResponse])
async def get_archive(
    tour_type: Optional[str] = Query(None, alias="tourType"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return list_archive(db, tour_type)


@router.get("/archive/stats", response_model=List[TourTypeStats])
async def get_archive_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Same aggregation as /stats, over completed archived records"""
    return [TourTypeStats.model_validate(s) for s in StatsAggregator(db).archived_tour_stats()]


@router.get("/download-today")
async def download_today(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    content = build_today_report(db)
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={report_filename()}"}
    )


@router.post("/checkin-unique", response_model=UniqueRefCheckInResponse)
async def check_in_by_unique_reference(
    payload: UniqueRefCheckIn,
    db: Session = Depends(get_db),
    attributor: str = Depends(get_principal_name)
):
    """Kiosk check-in by booking reference, refused at the wrong tour's station"""
    record = CheckInLedger(db).check_in_by_reference(
        payload.unique_ref, attributor, expected_tour_type=payload.tour_type
    )
    return UniqueRefCheckInResponse(passenger=PassengerRecordResponse.model_validate(record))


@router.post("/create", response_model=PassengerRecordResponse, status_code=201)
async def create_passenger_record(
    payload: PassengerRecordCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return create_record(db, payload)


@router.post("/remove", response_model=MessageResponse)
async def remove_passenger_record(
    payload: RecordRemove,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    remove_record(db, payload.id)
    return MessageResponse(message=f"Record {payload.id} removed")


@router.get("/{record_id}", response_model=PassengerRecordResponse)
async def get_record(
    record_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return CheckInLedger(db).get_record(record_id)


@router.post("/{record_id}/checkin", response_class=PlainTextResponse)
async def check_in(
    record_id: int,
    db: Session = Depends(get_db),
    attributor: str = Depends(get_principal_name)
):
    CheckInLedger(db).check_in(record_id, attributor)
    return "Checked in"


@router.post("/{record_id}/remove-checkin", response_class=PlainTextResponse)
async def remove_check_in(
    record_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    CheckInLedger(db).remove_check_in(record_id)
    return "Check-in removed"


@router.put("/{record_id}/pax", response_model=PaxUpdateResponse)
async def update_pax(
    record_id: int,
    payload: PaxUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Correct the party size after a booking change; originalPax is left alone"""
    record = CheckInLedger(db).update_pax(record_id, payload.pax)
    return PaxUpdateResponse(id=record.id, pax=record.pax, original_pax=record.original_pax)
