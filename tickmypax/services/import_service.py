"""
Spreadsheet Import Reconciler
=============================
Replaces the active passenger set with the rows of an uploaded workbook:

1. Every active PassengerRecord is copied into ArchivePassengerRecord and the
   active set is deleted. This happens before the workbook is opened, so a
   malformed upload still leaves an empty active set behind.
2. Data rows (row 1 is the header) are read by column position. Rows
   without any content are ignored and not counted.
3. A row with a blank tour date is skipped silently; any other bad row,
   including text too long for its column, is recorded as "Row N: ..." and
   the import carries on.

Archive, delete and insert share one session and are committed together, so
other readers never see a half-replaced set.
"""

import io
import time
from dataclasses import dataclass, field
from datetime import date, datetime, time as dt_time, timezone
from typing import Any, List, Optional, Sequence

from openpyxl import load_workbook
from sqlalchemy.orm import Session

from ..config import settings
from ..database import utcnow
from ..models.passenger_record import PassengerRecord
from ..utils.logging_config import get_logger
from .errors import ValidationFailed

logger = get_logger(__name__)


# 1-based column positions in the booking export
COLUMNS = {
    "tour_date": 2,
    "tour_type": 3,
    "seats": 4,
    "surname": 5,
    "first_name": 6,
    "pax": 7,
    "email_address": 8,
    "unique_reference": 9,
    "phone_number": 11,
    "notes": 12,
}


class RowError(Exception):
    """A data row that cannot become a PassengerRecord"""


COLUMN_LABELS = {
    "tour_type": "Tour Type",
    "seats": "Seats",
    "surname": "Surname",
    "first_name": "First Name",
    "email_address": "Email",
    "unique_reference": "Unique Ref",
    "phone_number": "Phone",
    "notes": "Notes",
}


@dataclass
class ImportSummary:
    total_rows_processed: int = 0
    rows_imported: int = 0
    errors: List[str] = field(default_factory=list)
    archived_count: int = 0
    message: str = "Import successful"


def cell_value(row: Sequence[Any], column: int) -> Any:
    if column > len(row):
        return None
    return row[column - 1]


def cell_text(value: Any) -> str:
    """Render a cell the way it reads in the sheet"""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.strftime("%d.%m.%Y %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%d.%m.%Y")
    return str(value).strip()


def to_utc_naive(value: datetime) -> datetime:
    # Naive values are taken to be UTC already
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_tour_date(value: Any, row_number: int, date_formats: Sequence[str]) -> datetime:
    """
    Native date cells are used as-is; text is matched against date_formats in
    order and the first pattern that fits wins.
    """
    if isinstance(value, datetime):
        return to_utc_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, dt_time.min)

    text = cell_text(value)
    for fmt in date_formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise RowError(f"Row {row_number}: Invalid Tour Date: '{text}'.")


def parse_pax(value: Any) -> int:
    """Non-numeric (or negative) party sizes count as zero rather than failing the row"""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0) if value.is_integer() else 0
    try:
        return max(int(cell_text(value)), 0)
    except ValueError:
        return 0


def optional_text(value: Any) -> Optional[str]:
    text = cell_text(value)
    return text or None


def is_empty_row(row: Sequence[Any]) -> bool:
    return all(cell_text(value) == "" for value in row)


def column_limit(name: str) -> Optional[int]:
    """Declared length of a String column, None for unbounded Text"""
    return getattr(PassengerRecord.__table__.c[name].type, "length", None)


class ImportReconciler:
    """Archive-then-replace import of the active passenger set"""

    def __init__(self, db: Session, date_formats: Optional[Sequence[str]] = None):
        self.db = db
        self.date_formats = list(date_formats or settings.import_date_formats)

    def archive_active_set(self) -> int:
        """Move every active record into the archive. Returns the number archived."""
        archived_at = utcnow()
        records = self.db.query(PassengerRecord).all()
        for record in records:
            self.db.add(record.to_archive(archived_at))
            self.db.delete(record)
        self.db.flush()
        logger.records_archived(len(records))
        return len(records)

    def text_field(self, row: Sequence[Any], name: str, row_number: int) -> Optional[str]:
        """Cell text for a column, refused when it does not fit the column"""
        text = optional_text(cell_value(row, COLUMNS[name]))
        limit = column_limit(name)
        if text is not None and limit is not None and len(text) > limit:
            raise RowError(f"Row {row_number}: {COLUMN_LABELS[name]} is longer than {limit} characters.")
        return text

    def parse_row(self, row: Sequence[Any], row_number: int) -> Optional[PassengerRecord]:
        """Build a record from one data row; None when the tour date is blank"""
        raw_date = cell_value(row, COLUMNS["tour_date"])
        if not isinstance(raw_date, (datetime, date)) and not cell_text(raw_date):
            return None

        tour_date = parse_tour_date(raw_date, row_number, self.date_formats)
        pax = parse_pax(cell_value(row, COLUMNS["pax"]))

        return PassengerRecord(
            tour_date=tour_date,
            tour_type=self.text_field(row, "tour_type", row_number),
            seats=self.text_field(row, "seats", row_number),
            surname=self.text_field(row, "surname", row_number),
            first_name=self.text_field(row, "first_name", row_number),
            pax=pax,
            original_pax=pax,
            notes=self.text_field(row, "notes", row_number),
            email_address=self.text_field(row, "email_address", row_number),
            unique_reference=self.text_field(row, "unique_reference", row_number),
            phone_number=self.text_field(row, "phone_number", row_number),
            checked_in=False,
            checked_in_by=None,
        )

    def import_workbook(self, content: bytes) -> ImportSummary:
        started = time.perf_counter()
        archived = self.archive_active_set()

        try:
            workbook = load_workbook(io.BytesIO(content), data_only=True)
        except Exception as exc:
            # The archive/delete above stands even though nothing replaces it
            self.db.commit()
            raise ValidationFailed(f"Could not read the Excel file: {exc}") from exc

        if not workbook.worksheets:
            self.db.commit()
            raise ValidationFailed("No worksheet found in the Excel file.")

        worksheet = workbook.worksheets[0]
        summary = ImportSummary(archived_count=archived)

        for row_number, row in enumerate(worksheet.iter_rows(min_row=2, values_only=True), start=2):
            # Rows with no content at all are not part of the sheet's used range
            if is_empty_row(row):
                continue
            summary.total_rows_processed += 1
            try:
                record = self.parse_row(row, row_number)
            except RowError as exc:
                summary.errors.append(str(exc))
                continue
            except Exception as exc:
                summary.errors.append(f"Row {row_number}: Exception: {exc}")
                continue

            if record is None:
                continue
            self.db.add(record)
            summary.rows_imported += 1

        self.db.commit()
        workbook.close()

        logger.records_imported(
            summary.total_rows_processed,
            summary.rows_imported,
            len(summary.errors),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return summary

    def import_upload(self, content: Optional[bytes]) -> ImportSummary:
        """Entry point for an uploaded file; rejects an absent or oversized upload before touching data"""
        if not content:
            raise ValidationFailed("No file provided.")
        if len(content) > settings.max_upload_bytes:
            raise ValidationFailed(
                f"File is too large ({len(content)} bytes, limit {settings.max_upload_bytes})."
            )
        return self.import_workbook(content)
