"""
carebook.infra.database.models – SQLAlchemy 2.0 ORM models.

Exports Base, mixins, and all model classes.
"""
from carebook.infra.database.models.base import Base, TimestampMixin, _uuid_pk
from carebook.infra.database.models.caregiver import Caregiver
from carebook.infra.database.models.collaborator import Collaborator
from carebook.infra.database.models.event import CalendarEvent
from carebook.infra.database.models.event_series import EventSeries
from carebook.infra.database.models.health_unit import HealthUnit
from carebook.infra.database.models.order import Order

__all__ = [
    "Base",
    "TimestampMixin",
    "_uuid_pk",
    "HealthUnit",
    "Collaborator",
    "Caregiver",
    "Order",
    "EventSeries",
    "CalendarEvent",
]
