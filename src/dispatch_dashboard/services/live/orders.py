"""Order creation and courier assignment from a live-view click."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from ...errors import AssignmentError, DashboardError, HttpError, ValidationError
from ...models.domain import Order, OrderAssignment
from .store import LiveOperationsStore

logger = logging.getLogger(__name__)


class OrderBackend(Protocol):
    async def create_order(self, restaurant_id: str, x: int, y: int, label: str) -> Order: ...

    async def assign_order(self, order_id: str) -> OrderAssignment: ...


def order_label(x: int, y: int) -> str:
    return f"Order ({x}, {y})"


class OrderDispatcher:
    """Two-step protocol: create the order, then ask the backend to assign it."""

    def __init__(
        self,
        backend: OrderBackend,
        store: LiveOperationsStore,
        grid_width: int,
        grid_height: int,
    ) -> None:
        self.backend = backend
        self.store = store
        self.grid_width = grid_width
        self.grid_height = grid_height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.grid_width and 0 <= y < self.grid_height

    async def _refresh_store(self) -> None:
        # The store logs and keeps its previous snapshot on failure.
        await self.store.refresh()

    async def create_and_assign(self, restaurant_id: str | None, x: int, y: int) -> Optional[OrderAssignment]:
        """Create an order at ``(x, y)`` and assign a courier to it.

        Returns None without contacting the backend when the click is outside
        the grid. Step-one failures propagate (a 4xx rejection as
        ``ValidationError``) and step two is never attempted. A step-two failure raises ``AssignmentError`` carrying the
        order that was created.
        """
        if not self.in_bounds(x, y):
            return None
        if not restaurant_id:
            raise ValidationError("Select a restaurant before creating an order.")

        try:
            order = await self.backend.create_order(restaurant_id, x, y, order_label(x, y))
        except HttpError as exc:
            if 400 <= exc.status < 500:
                raise ValidationError(exc.body) from exc
            raise
        logger.info(f"Created order {order.id} at ({x}, {y}) for restaurant {restaurant_id}")

        try:
            assignment = await self.backend.assign_order(order.id)
        except HttpError as exc:
            await self._refresh_store()
            raise AssignmentError(order, exc.body, status=exc.status) from exc
        except DashboardError as exc:
            await self._refresh_store()
            raise AssignmentError(order, str(exc)) from exc

        logger.info(f"Order {order.id} assigned to courier {assignment.courier.id}")
        await self._refresh_store()
        return assignment
