import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base, utcnow


class Tour(Base):
    """
    Tour-guide directory entry.

    tour_type is the logical key: passenger records point at it by plain string
    match, so a record may carry a tour type that has no Tour row yet.
    """
    __tablename__ = "tours"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tour_date = Column(DateTime, nullable=False, default=utcnow)
    tour_type = Column(String(256), nullable=True, index=True)
    tour_name = Column(String(256), nullable=True)
    guide_name = Column(String(256), nullable=True)

    # Legacy per-tour passenger list, not touched by the spreadsheet import
    passengers = relationship(
        "Passenger",
        back_populates="tour",
        cascade="all, delete-orphan",
        order_by="Passenger.id",
    )

    def __repr__(self):
        return f"<Tour {self.tour_type} guide={self.guide_name}>"


class Passenger(Base):
    __tablename__ = "passengers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    passenger_guid = Column(String(36), nullable=False, default=lambda: str(uuid.uuid4()))
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp = Column(DateTime, nullable=False, default=utcnow)
    surname = Column(String(256), nullable=True)
    first_name = Column(String(256), nullable=True)
    pax = Column(Integer, nullable=False, default=0)
    email = Column(String(320), nullable=True)
    unique_reference = Column(String(256), nullable=True)
    other_booking_reference = Column(String(256), nullable=True)
    phone_number = Column(String(64), nullable=True)
    qr_code_image = Column(Text, nullable=True)
    checked_in = Column(Boolean, nullable=False, default=False)

    tour = relationship("Tour", back_populates="passengers")

    def __repr__(self):
        return f"<Passenger {self.surname} tour={self.tour_id}>"
