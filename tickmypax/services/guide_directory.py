"""
Tour-Guide Directory

Maps a tour type to the guide assigned to it. Passenger records reference
tour types by plain string, so lookups go through a map keyed by the
normalized tour type; when several Tour rows share a key the oldest wins.
"""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import utcnow
from ..models.passenger_record import PassengerRecord
from ..models.tour import Tour
from ..utils.logging_config import get_logger
from .errors import RecordNotFound, ValidationFailed

logger = get_logger(__name__)


def normalize_tour_type(tour_type: Optional[str]) -> str:
    return (tour_type or "").strip().lower()


class GuideDirectory:

    def __init__(self, db: Session):
        self.db = db

    def lookup_map(self) -> Dict[str, Optional[str]]:
        """normalized tour type -> guide name, first row per key"""
        guides: Dict[str, Optional[str]] = {}
        for tour_type, guide_name in (
            self.db.query(Tour.tour_type, Tour.guide_name).order_by(Tour.id).all()
        ):
            guides.setdefault(normalize_tour_type(tour_type), guide_name)
        return guides

    def find(self, tour_type: str) -> Optional[Tour]:
        return (
            self.db.query(Tour)
            .filter(func.lower(func.trim(Tour.tour_type)) == normalize_tour_type(tour_type))
            .order_by(Tour.id)
            .first()
        )

    def assign_guide(self, tour_type: Optional[str], guide_name: Optional[str]) -> Tuple[Tour, bool]:
        """
        Upsert by tour type. A new entry is named after the tour type and
        dated now; an existing one only has its guide overwritten.
        Returns (tour, created).
        """
        if not tour_type or not tour_type.strip():
            raise ValidationFailed("tourType is required.")

        tour = self.find(tour_type)
        created = tour is None
        if created:
            tour = Tour(
                tour_type=tour_type,
                tour_name=tour_type,
                tour_date=utcnow(),
                guide_name=guide_name,
            )
            self.db.add(tour)
        else:
            tour.guide_name = guide_name

        self.db.commit()
        self.db.refresh(tour)
        logger.guide_assigned(tour.id, tour_type, guide_name, created)
        return tour, created

    def pax_by_tour_type(self) -> List[dict]:
        """Sum of active party sizes per tour type, with the assigned guide"""
        guides = self.lookup_map()
        rows = (
            self.db.query(PassengerRecord.tour_type, func.coalesce(func.sum(PassengerRecord.pax), 0))
            .group_by(PassengerRecord.tour_type)
            .all()
        )
        summaries = [
            {
                "tour_type": tour_type,
                "total_pax": int(total_pax),
                "guide_name": guides.get(normalize_tour_type(tour_type)),
            }
            for tour_type, total_pax in rows
        ]
        return sorted(summaries, key=lambda s: s["tour_type"] or "")

    def list_tours(self) -> List[Tour]:
        return self.db.query(Tour).order_by(Tour.tour_date, Tour.id).all()

    def get_tour(self, tour_id: int) -> Tour:
        tour = self.db.get(Tour, tour_id)
        if tour is None:
            raise RecordNotFound(f"Tour {tour_id} not found.")
        return tour
