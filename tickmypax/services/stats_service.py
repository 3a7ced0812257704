"""
Stats Aggregator
================
Per-tour-type statistics over completed tours (tour date strictly before now).

For every tour type:
- tour_date: earliest tour date in the group
- total_clients: sum of pax
- checked_in_count: number of records flagged checked in
- not_arrived_count: total_clients - checked_in_count

not_arrived_count subtracts a record count from a pax sum. A checked-in
record of four people counts once, so the figure is not a headcount and may
go negative; it is reported as is.

Each group is further broken down by who performed the check-in, with an
unset attributor reported as "None".
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ..database import utcnow
from ..models.passenger_record import PassengerRecord, ArchivePassengerRecord
from .guide_directory import GuideDirectory, normalize_tour_type

NO_ATTRIBUTOR = "None"


@dataclass
class GuideBreakdown:
    guide_name: str
    clients: int = 0
    checked_in_count: int = 0

    @property
    def not_arrived_count(self) -> int:
        return self.clients - self.checked_in_count


@dataclass
class TourTypeSummary:
    tour_type: Optional[str]
    tour_date: datetime
    guide_name: Optional[str] = None
    total_clients: int = 0
    checked_in_count: int = 0
    guides: List[GuideBreakdown] = field(default_factory=list)

    @property
    def not_arrived_count(self) -> int:
        return self.total_clients - self.checked_in_count


def aggregate(records: Iterable, guides: Dict[str, Optional[str]]) -> List[TourTypeSummary]:
    """
    Group record-like objects (tour_date, tour_type, pax, checked_in,
    checked_in_by) by tour type. guides maps normalized tour type to guide.
    """
    groups: Dict[Optional[str], TourTypeSummary] = {}
    breakdowns: Dict[Optional[str], Dict[str, GuideBreakdown]] = defaultdict(dict)

    for record in records:
        pax = record.pax or 0
        summary = groups.get(record.tour_type)
        if summary is None:
            summary = TourTypeSummary(
                tour_type=record.tour_type,
                tour_date=record.tour_date,
                guide_name=guides.get(normalize_tour_type(record.tour_type)),
            )
            groups[record.tour_type] = summary
        elif record.tour_date < summary.tour_date:
            summary.tour_date = record.tour_date

        attributor = record.checked_in_by or NO_ATTRIBUTOR
        breakdown = breakdowns[record.tour_type].get(attributor)
        if breakdown is None:
            breakdown = GuideBreakdown(guide_name=attributor)
            breakdowns[record.tour_type][attributor] = breakdown

        summary.total_clients += pax
        breakdown.clients += pax
        if record.checked_in:
            summary.checked_in_count += 1
            breakdown.checked_in_count += 1

    for tour_type, summary in groups.items():
        summary.guides = sorted(breakdowns[tour_type].values(), key=lambda b: b.guide_name)

    return sorted(groups.values(), key=lambda s: (s.tour_date, s.tour_type or ""))


class StatsAggregator:

    def __init__(self, db: Session):
        self.db = db
        self.directory = GuideDirectory(db)

    def _completed(self, model, now: Optional[datetime]) -> List[TourTypeSummary]:
        cutoff = now or utcnow()
        records = self.db.query(model).filter(model.tour_date < cutoff).all()
        return aggregate(records, self.directory.lookup_map())

    def completed_tour_stats(self, now: Optional[datetime] = None) -> List[TourTypeSummary]:
        """Live statistics: active records only"""
        return self._completed(PassengerRecord, now)

    def archived_tour_stats(self, now: Optional[datetime] = None) -> List[TourTypeSummary]:
        """Historical statistics over the archive, never merged into the live figures"""
        return self._completed(ArchivePassengerRecord, now)
