"""Repositories for the Carebook database."""
from carebook.infra.database.repositories.base import BaseRepository
from carebook.infra.database.repositories.caregiver import CaregiverRepository
from carebook.infra.database.repositories.event import CalendarEventRepository
from carebook.infra.database.repositories.event_series import EventSeriesRepository
from carebook.infra.database.repositories.order import OrderRepository
from carebook.infra.database.repositories.owners import (
    CollaboratorRepository,
    HealthUnitRepository,
)

__all__ = [
    "BaseRepository",
    "OrderRepository",
    "CaregiverRepository",
    "HealthUnitRepository",
    "CollaboratorRepository",
    "EventSeriesRepository",
    "CalendarEventRepository",
]
