"""Service layer: series lifecycle and calendar queries on top of the repositories."""
from carebook.services.schedule_service import (
    ScheduleService,
    row_to_series,
    series_to_row,
)

__all__ = [
    "ScheduleService",
    "row_to_series",
    "series_to_row",
]
