"""Latest polled state of the live-operations view."""

from __future__ import annotations

import asyncio
import logging
from types import MappingProxyType
from typing import Mapping, Optional, Protocol

from ...errors import DashboardError
from ...models.domain import Courier, LiveSnapshot, Order, OrderStatus, Restaurant

logger = logging.getLogger(__name__)


class LiveBackend(Protocol):
    async def list_restaurants(self) -> list[Restaurant]: ...

    async def list_orders(self) -> list[Order]: ...

    async def list_couriers(self) -> list[Courier]: ...


class LiveOperationsStore:
    """Restaurants plus an orders/couriers snapshot replaced as one unit.

    ``refresh`` fetches orders and couriers concurrently and swaps the snapshot
    only when both succeed. Refreshes may overlap; each carries a sequence
    number and a result older than the one already applied is dropped.
    """

    def __init__(self, backend: LiveBackend) -> None:
        self.backend = backend
        self._restaurants: Mapping[str, Restaurant] = MappingProxyType({})
        self._snapshot = LiveSnapshot()
        self._issued = 0
        self._applied = 0
        self.last_error: Optional[DashboardError] = None

    @property
    def restaurants(self) -> tuple[Restaurant, ...]:
        return tuple(self._restaurants.values())

    @property
    def snapshot(self) -> LiveSnapshot:
        return self._snapshot

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._snapshot.orders

    @property
    def couriers(self) -> tuple[Courier, ...]:
        return self._snapshot.couriers

    def restaurant(self, restaurant_id: str | None) -> Optional[Restaurant]:
        if not restaurant_id:
            return None
        return self._restaurants.get(restaurant_id)

    def active_orders(self) -> list[Order]:
        return [order for order in self._snapshot.orders if order.is_active]

    def delivered_orders(self) -> list[Order]:
        return [order for order in self._snapshot.orders if order.status is OrderStatus.DELIVERED]

    async def load_restaurants(self) -> tuple[Restaurant, ...]:
        try:
            restaurants = await self.backend.list_restaurants()
        except DashboardError as exc:
            logger.warning(f"Failed to load restaurants: {exc}")
            raise
        self._restaurants = MappingProxyType({restaurant.id: restaurant for restaurant in restaurants})
        logger.info(f"Loaded {len(restaurants)} restaurants")
        return self.restaurants

    async def refresh(self) -> bool:
        """Fetch orders and couriers together. Returns True when the snapshot was replaced."""
        self._issued += 1
        token = self._issued
        orders_result, couriers_result = await asyncio.gather(
            self.backend.list_orders(),
            self.backend.list_couriers(),
            return_exceptions=True,
        )

        failures = [result for result in (orders_result, couriers_result) if isinstance(result, BaseException)]
        for failure in failures:
            if not isinstance(failure, DashboardError):
                raise failure

        if token <= self._applied:
            logger.debug(f"Dropping live refresh #{token}; #{self._applied} already applied")
            return False

        if failures:
            logger.warning(f"Live refresh #{token} failed, keeping previous snapshot: {failures[0]}")
            self.last_error = failures[0]
            return False

        self._snapshot = LiveSnapshot(orders=tuple(orders_result), couriers=tuple(couriers_result))
        self._applied = token
        self.last_error = None
        return True
