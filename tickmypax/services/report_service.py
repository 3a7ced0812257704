"""
Report Exporter - passenger manifest as an Excel workbook (openpyxl)
"""
import io
from collections import defaultdict
from typing import List

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill
from openpyxl.utils import get_column_letter
from sqlalchemy.orm import Session

from ..database import utcnow
from ..models.passenger_record import PassengerRecord
from .errors import RecordNotFound

HEADERS = ["Date", "Surname", "First name", "Pax", "Checked in", "Checked in by"]
DATE_FORMAT = "%d.%m.%Y %H:%M"


def report_filename(now=None) -> str:
    return f"TodayReport_{(now or utcnow()).strftime('%Y%m%d')}.xlsx"


def generate_manifest(records: List[PassengerRecord], sheet_name: str = "Report") -> bytes:
    """
    One block per tour type (sorted): bold merged title with the pax total,
    a header row, one row per passenger, then a blank separator row.
    Within a block passengers keep the order they were given in.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    title_font = Font(size=12, bold=True)
    header_fill = PatternFill(start_color="3b82f6", end_color="3b82f6", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")
    center = Alignment(horizontal='center', vertical='center')

    widths = [len(h) for h in HEADERS]
    row_num = 1

    grouped = defaultdict(list)
    for record in records:
        grouped[record.tour_type or ""].append(record)

    for tour_type in sorted(grouped):
        group = grouped[tour_type]
        total_pax = sum(r.pax or 0 for r in group)

        ws.merge_cells(start_row=row_num, start_column=1, end_row=row_num, end_column=len(HEADERS))
        title_cell = ws.cell(row=row_num, column=1, value=f"{tour_type} - Total pax: {total_pax}")
        title_cell.font = title_font
        title_cell.alignment = center
        row_num += 1

        for col_num, header in enumerate(HEADERS, 1):
            cell = ws.cell(row=row_num, column=col_num, value=header)
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = center
        row_num += 1

        for record in group:
            values = [
                record.tour_date.strftime(DATE_FORMAT) if record.tour_date else "",
                record.surname or "",
                record.first_name or "",
                record.pax or 0,
                "Yes" if record.checked_in else "No",
                record.checked_in_by or "",
            ]
            for col_num, value in enumerate(values, 1):
                ws.cell(row=row_num, column=col_num, value=value)
                widths[col_num - 1] = max(widths[col_num - 1], len(str(value)))
            row_num += 1

        # Blank separator row
        row_num += 1

    for col_num, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(col_num)].width = min(width + 4, 50)

    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer.getvalue()


def build_today_report(db: Session) -> bytes:
    records = (
        db.query(PassengerRecord)
        .order_by(PassengerRecord.tour_type, PassengerRecord.tour_date, PassengerRecord.id)
        .all()
    )
    if not records:
        raise RecordNotFound("No records found.")
    return generate_manifest(records)
