"""
Tour-guide directory and the legacy per-tour passenger lists
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..schemas.tour import GuideAssignment, TourPaxSummary, TourResponse, TourWithPassengers
from ..services.guide_directory import GuideDirectory
from ..utils.dependencies import get_current_user

router = APIRouter(prefix="/api/tours", tags=["Tours"])


@router.put("/guide", response_model=TourResponse)
async def assign_guide(
    payload: GuideAssignment,
    tour_type: Optional[str] = Query(None, alias="tourType"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create or update the directory entry for a tour type"""
    tour, _ = GuideDirectory(db).assign_guide(tour_type, payload.guide_name)
    return tour


@router.get("/allTours", response_model=List[TourPaxSummary])
async def all_tours(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Total active pax per tour type"""
    return GuideDirectory(db).pax_by_tour_type()


@router.get("/today", response_model=List[TourWithPassengers])
async def today_tours(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return GuideDirectory(db).list_tours()


@router.get("/{tour_id}", response_model=TourWithPassengers)
async def get_tour(
    tour_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return GuideDirectory(db).get_tour(tour_id)
