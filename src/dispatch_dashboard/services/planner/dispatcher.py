"""Route request submission with last-issued-wins ordering."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ...config import settings
from ...errors import StaleResultDiscarded
from ...models.domain import RoutePoint, RouteResult, Stop

logger = logging.getLogger(__name__)


class RoutingBackend(Protocol):
    async def route_multi(
        self, restaurant_id: str, stops: Sequence[Stop], heuristic: str, strategy: str
    ) -> RouteResult: ...

    async def route_single(
        self, grid_width: int, grid_height: int, start: RoutePoint, end: RoutePoint, heuristic: str
    ) -> RouteResult: ...


class RouteDispatcher:
    """Submits route requests and hands back only the newest request's outcome.

    Every submission takes the next sequence number. When a response (or an
    error) comes back for anything but the latest number it is dropped by
    raising ``StaleResultDiscarded``, so an out-of-order completion can never
    overwrite a newer route.
    """

    def __init__(
        self,
        backend: RoutingBackend,
        grid_width: int | None = None,
        grid_height: int | None = None,
    ) -> None:
        self.backend = backend
        self.grid_width = grid_width or settings.grid_width
        self.grid_height = grid_height or settings.grid_height
        self._issued = 0

    def _check_current(self, token: int) -> None:
        if token != self._issued:
            logger.debug(f"Dropping route response #{token}; latest issued is #{self._issued}")
            raise StaleResultDiscarded(token, self._issued)

    async def submit(
        self,
        restaurant_id: str,
        stops: Sequence[Stop],
        heuristic: str,
        strategy: str,
    ) -> RouteResult:
        self._issued += 1
        token = self._issued
        try:
            result = await self.backend.route_multi(restaurant_id, list(stops), heuristic, strategy)
        except Exception:
            self._check_current(token)
            raise
        self._check_current(token)
        return result

    async def submit_single(self, start: RoutePoint, end: RoutePoint, heuristic: str) -> RouteResult:
        self._issued += 1
        token = self._issued
        try:
            result = await self.backend.route_single(self.grid_width, self.grid_height, start, end, heuristic)
        except Exception:
            self._check_current(token)
            raise
        self._check_current(token)
        return result
