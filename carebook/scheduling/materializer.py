"""EventMaterializer: validate event drafts and attach order/caregiver summaries.

Materialization is all-or-nothing: a single bad draft rejects the batch, since a
truncated series would show a misleading calendar.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from carebook.core.exceptions import InvalidEventDraftError
from carebook.core.validators import hex_color_or_default
from carebook.scheduling.types import Event, EventDraft, ExpansionContext, OwnerType

logger = logging.getLogger(__name__)

DEFAULT_TEXT_COLOR = "#1890FF"


class EventMaterializer:
    def __init__(self, default_text_color: str = DEFAULT_TEXT_COLOR) -> None:
        self.default_text_color = default_text_color

    def materialize(
        self,
        drafts: Sequence[EventDraft],
        context: Optional[ExpansionContext] = None,
    ) -> List[Event]:
        context = context or ExpansionContext()
        order_summary = self._order_summary(context)
        caregiver_summary = self._caregiver_summary(context)

        events: List[Event] = []
        for index, draft in enumerate(drafts):
            self._validate(index, draft)
            events.append(
                Event(
                    id=uuid.uuid4(),
                    series_id=draft.series_id,
                    owner_type=OwnerType(draft.owner_type),
                    owner=draft.owner,
                    order=draft.order,
                    title=draft.title,
                    description=draft.description or "",
                    start=draft.start,
                    end=draft.end,
                    location=draft.location,
                    text_color=hex_color_or_default(draft.text_color, self.default_text_color),
                    all_day=bool(draft.all_day),
                    order_summary=order_summary,
                    caregiver_summary=caregiver_summary,
                )
            )
        logger.debug("EventMaterializer: %d events materialized", len(events))
        return events

    @staticmethod
    def _validate(index: int, draft: EventDraft) -> None:
        missing = [
            name
            for name in ("owner_type", "owner", "title", "start", "end")
            if not getattr(draft, name)
        ]
        if missing:
            raise InvalidEventDraftError(
                f"Event draft {index} is missing required fields: {', '.join(missing)}",
                details={"index": index, "missing": missing},
            )
        try:
            OwnerType(draft.owner_type)
        except ValueError:
            raise InvalidEventDraftError(
                f"Event draft {index} has an unknown owner type",
                details={"index": index, "owner_type": str(draft.owner_type)},
            ) from None
        if not draft.start < draft.end:
            raise InvalidEventDraftError(
                f"Event draft {index} ends before it starts",
                details={
                    "index": index,
                    "start": draft.start.isoformat(),
                    "end": draft.end.isoformat(),
                },
            )

    @staticmethod
    def _order_summary(context: ExpansionContext) -> Optional[Dict[str, Any]]:
        if context.order is None:
            return None
        caregiver = context.caregiver
        return {
            "id": str(context.order.id),
            "caregiver": {
                "id": str(caregiver.id),
                "name": caregiver.name,
                "profile_picture": caregiver.profile_picture,
            }
            if caregiver is not None
            else None,
        }

    @staticmethod
    def _caregiver_summary(context: ExpansionContext) -> Optional[Dict[str, Any]]:
        caregiver = context.caregiver
        if caregiver is None:
            return None
        return {
            "id": str(caregiver.id),
            "name": caregiver.name,
            "profile_picture": caregiver.profile_picture,
        }
