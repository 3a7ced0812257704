"""
Service-layer errors.

Raised by the records/tours services and rendered by a single application
exception handler as to_dict() JSON with the carried status code.
"""
from typing import Optional


class TickMyPaxError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"detail": self.detail}


class ValidationFailed(TickMyPaxError):
    status_code = 400


class RecordNotFound(TickMyPaxError):
    status_code = 404


class TourTypeMismatch(TickMyPaxError):
    """A ticket was scanned at a check-in station for a different tour"""
    status_code = 409

    def __init__(self, detail: str, actual_tour_type: Optional[str] = None):
        super().__init__(detail)
        self.actual_tour_type = actual_tour_type

    def to_dict(self) -> dict:
        # Lets the kiosk point the passenger at the right station
        return {"detail": self.detail, "actualTourType": self.actual_tour_type}
