"""
carebook.infra.database – PostgreSQL async engine, session, models and repositories.

Public API
──────────
  build_engine, build_session_factory, get_db, init_db, close_engine
  Base, HealthUnit, Collaborator, Caregiver, Order, EventSeries, CalendarEvent (models)
  BaseRepository and one repository per model
  RepositoryScheduleGateway (persistence boundary of carebook.scheduling)
"""
from carebook.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    ensure_database_exists,
    get_db,
    init_db,
)
from carebook.infra.database.gateway import RepositoryScheduleGateway
from carebook.infra.database.models import (
    Base,
    CalendarEvent,
    Caregiver,
    Collaborator,
    EventSeries,
    HealthUnit,
    Order,
)
from carebook.infra.database.repositories import (
    BaseRepository,
    CalendarEventRepository,
    CaregiverRepository,
    CollaboratorRepository,
    EventSeriesRepository,
    HealthUnitRepository,
    OrderRepository,
)

__all__ = [
    "build_engine",
    "build_session_factory",
    "ensure_database_exists",
    "get_db",
    "init_db",
    "close_engine",
    "RepositoryScheduleGateway",
    "Base",
    "HealthUnit",
    "Collaborator",
    "Caregiver",
    "Order",
    "EventSeries",
    "CalendarEvent",
    "BaseRepository",
    "HealthUnitRepository",
    "CollaboratorRepository",
    "CaregiverRepository",
    "OrderRepository",
    "EventSeriesRepository",
    "CalendarEventRepository",
]
