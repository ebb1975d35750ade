"""Persistence boundary of the schedule engine.

The engine never touches the database directly: order/caregiver lookups and
event storage are passed in as objects satisfying these protocols.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Sequence
from uuid import UUID

from carebook.core.exceptions import OwnerNotFoundError, ValidationError
from carebook.scheduling.types import CaregiverSummary, Event, OrderSummary, OwnerType

logger = logging.getLogger(__name__)

OwnerLookup = Callable[[UUID], Awaitable[Optional[Any]]]


class OrderLookup(Protocol):
    async def retrieve_order(self, order_id: UUID) -> Optional[OrderSummary]:
        ...


class CaregiverLookup(Protocol):
    async def retrieve_caregiver(self, caregiver_id: UUID) -> Optional[CaregiverSummary]:
        ...


class ScheduleLookups(OrderLookup, CaregiverLookup, Protocol):
    """What expand_series needs: both lookups on one object."""


class EventStore(Protocol):
    async def replace_series_events(self, series_id: UUID, events: Sequence[Event]) -> int:
        """Atomically swap every event of series_id for events; returns rows inserted."""
        ...

    async def delete_series_events(self, series_id: UUID) -> int:
        ...


class OwnerRegistry:
    """Resolves a polymorphic owner reference through one lookup per OwnerType."""

    def __init__(self, lookups: Optional[Dict[OwnerType, OwnerLookup]] = None) -> None:
        self._lookups: Dict[OwnerType, OwnerLookup] = dict(lookups or {})

    def register(self, owner_type: OwnerType, lookup: OwnerLookup) -> None:
        self._lookups[owner_type] = lookup

    @property
    def owner_types(self) -> List[OwnerType]:
        return list(self._lookups)

    async def resolve(self, owner_type: Any, owner_id: UUID) -> Any:
        try:
            kind = OwnerType(owner_type)
        except ValueError:
            raise ValidationError(
                f"Unknown owner type: {owner_type!r}", details={"owner_type": owner_type}
            ) from None
        lookup = self._lookups.get(kind)
        if lookup is None:
            raise ValidationError(
                f"No lookup registered for owner type {kind.value}",
                details={"owner_type": kind.value},
            )
        owner = await lookup(owner_id)
        if owner is None:
            logger.warning("OwnerRegistry: %s %s not found", kind.value, owner_id)
            raise OwnerNotFoundError(
                f"{kind.value} {owner_id} not found",
                details={"owner_type": kind.value, "owner_id": str(owner_id)},
            )
        return owner
