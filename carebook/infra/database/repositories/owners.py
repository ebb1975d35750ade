"""Repositories for series owners: health units and collaborators."""
from __future__ import annotations

from carebook.infra.database.models.collaborator import Collaborator
from carebook.infra.database.models.health_unit import HealthUnit
from carebook.infra.database.repositories.base import BaseRepository


class HealthUnitRepository(BaseRepository[HealthUnit]):
    model = HealthUnit


class CollaboratorRepository(BaseRepository[Collaborator]):
    model = Collaborator
