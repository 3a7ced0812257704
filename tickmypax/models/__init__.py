# Models package
from .user import User, UserRole
from .tour import Tour, Passenger
from .passenger_record import (
    PassengerRecord,
    ArchivePassengerRecord,
    CheckInState,
    CheckedIn,
    NotCheckedIn,
)

__all__ = [
    "User", "UserRole",
    "Tour", "Passenger",
    "PassengerRecord", "ArchivePassengerRecord",
    "CheckInState", "CheckedIn", "NotCheckedIn",
]
