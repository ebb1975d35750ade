"""Caregiver repository."""
from __future__ import annotations

from carebook.infra.database.models.caregiver import Caregiver
from carebook.infra.database.repositories.base import BaseRepository


class CaregiverRepository(BaseRepository[Caregiver]):
    model = Caregiver
