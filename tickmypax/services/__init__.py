# Services package
from .errors import TickMyPaxError, ValidationFailed, RecordNotFound, TourTypeMismatch
from .import_service import ImportReconciler, ImportSummary
from .checkin_service import CheckInLedger
from .guide_directory import GuideDirectory, normalize_tour_type
from .stats_service import StatsAggregator, TourTypeSummary, GuideBreakdown, aggregate
from .report_service import build_today_report, generate_manifest, report_filename

__all__ = [
    "TickMyPaxError", "ValidationFailed", "RecordNotFound", "TourTypeMismatch",
    "ImportReconciler", "ImportSummary",
    "CheckInLedger",
    "GuideDirectory", "normalize_tour_type",
    "StatsAggregator", "TourTypeSummary", "GuideBreakdown", "aggregate",
    "build_today_report", "generate_manifest", "report_filename",
]
