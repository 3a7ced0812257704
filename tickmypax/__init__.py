"""Tour-operations back office: passenger import, check-in and guide reporting."""

__version__ = "1.0.0"
