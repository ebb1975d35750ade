"""Order repository. Orders are written by the ordering flow; scheduling only reads them."""
from __future__ import annotations

from carebook.infra.database.models.order import Order
from carebook.infra.database.repositories.base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    model = Order
