from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored datetimes are naive UTC; mark them so they serialize with a Z suffix"""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
