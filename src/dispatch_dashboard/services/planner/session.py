"""Planning-view state machine."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional

from ...errors import StaleResultDiscarded, ValidationError
from ...models.domain import Restaurant, RoutePoint, RouteResult, Stop
from .dispatcher import RouteDispatcher

logger = logging.getLogger(__name__)


class PlannerState(str, Enum):
    NO_RESTAURANT = "NoRestaurant"
    RESTAURANT_SELECTED = "RestaurantSelected"
    STOPS_ACCUMULATED = "StopsAccumulated"
    ROUTE_COMPUTED = "RouteComputed"


def parse_grid_coordinate(value: Any, limit: int, field_name: str) -> int:
    """Parse a manually entered coordinate and check it against ``[0, limit)``."""
    text = "" if value is None else str(value).strip()
    try:
        coordinate = int(text)
    except ValueError as exc:
        raise ValidationError(f"{field_name} must be an integer, got '{text}'.") from exc
    if not 0 <= coordinate < limit:
        raise ValidationError(f"{field_name} must be between 0 and {limit - 1}, got {coordinate}.")
    return coordinate


class PlannerSession:
    """Selected restaurant, accumulated stops and the last computed route.

    The session is mutated only through its methods. Selecting a restaurant or
    resetting bumps an epoch so that a computation started before the change
    is discarded when it completes.
    """

    def __init__(
        self,
        lookup_restaurant: Callable[[str], Optional[Restaurant]],
        grid_width: int,
        grid_height: int,
    ) -> None:
        self._lookup_restaurant = lookup_restaurant
        self.grid_width = grid_width
        self.grid_height = grid_height
        self._restaurant: Optional[Restaurant] = None
        self._stops: tuple[Stop, ...] = ()
        self._route: Optional[RouteResult] = None
        self._epoch = 0

    @property
    def restaurant(self) -> Optional[Restaurant]:
        return self._restaurant

    @property
    def stops(self) -> tuple[Stop, ...]:
        return self._stops

    @property
    def route(self) -> Optional[RouteResult]:
        return self._route

    @property
    def path(self) -> tuple[RoutePoint, ...]:
        return self._route.path if self._route is not None else ()

    @property
    def state(self) -> PlannerState:
        if self._restaurant is None:
            return PlannerState.NO_RESTAURANT
        if self._route is not None:
            return PlannerState.ROUTE_COMPUTED
        if self._stops:
            return PlannerState.STOPS_ACCUMULATED
        return PlannerState.RESTAURANT_SELECTED

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.grid_width and 0 <= y < self.grid_height

    def _clear(self) -> None:
        self._stops = ()
        self._route = None
        self._epoch += 1

    def select_restaurant(self, restaurant_id: str | None) -> PlannerState:
        restaurant = self._lookup_restaurant(restaurant_id) if restaurant_id else None
        self._clear()
        self._restaurant = restaurant
        if restaurant is None and restaurant_id:
            logger.debug(f"Unknown restaurant '{restaurant_id}'; planner cleared")
        return self.state

    def add_stop(self, x: int, y: int) -> Optional[Stop]:
        if not self.in_bounds(x, y):
            return None
        stop = Stop(x=x, y=y, label=f"Stop {len(self._stops) + 1}")
        self._stops = (*self._stops, stop)
        return stop

    def reset(self) -> PlannerState:
        self._clear()
        return self.state

    def _apply(self, epoch: int, result: RouteResult) -> RouteResult:
        if epoch != self._epoch:
            logger.debug(f"Route started in planner epoch #{epoch} finished in epoch #{self._epoch}; discarding")
            raise StaleResultDiscarded(epoch, self._epoch)
        self._route = result
        return result

    async def compute_route(
        self,
        dispatcher: RouteDispatcher,
        heuristic: str,
        strategy: str,
        end_x: Any = None,
        end_y: Any = None,
    ) -> RouteResult:
        """Compute a multi-stop route from the selected restaurant.

        With no accumulated stops, a single stop is built from the manual
        end-coordinate fields instead.
        """
        if self._restaurant is None:
            raise ValidationError("Select a restaurant before computing a route.")
        stops = self._stops
        if not stops:
            x = parse_grid_coordinate(end_x, self.grid_width, "End X")
            y = parse_grid_coordinate(end_y, self.grid_height, "End Y")
            stops = (Stop(x=x, y=y, label="Stop 1"),)

        epoch = self._epoch
        result = await dispatcher.submit(self._restaurant.id, stops, heuristic, strategy)
        return self._apply(epoch, result)

    async def compute_direct_route(
        self,
        dispatcher: RouteDispatcher,
        start: tuple[Any, Any],
        end: tuple[Any, Any],
        heuristic: str,
    ) -> RouteResult:
        """Point-to-point route between two manually entered cells."""
        start_point = RoutePoint(
            x=parse_grid_coordinate(start[0], self.grid_width, "Start X"),
            y=parse_grid_coordinate(start[1], self.grid_height, "Start Y"),
        )
        end_point = RoutePoint(
            x=parse_grid_coordinate(end[0], self.grid_width, "End X"),
            y=parse_grid_coordinate(end[1], self.grid_height, "End Y"),
        )
        epoch = self._epoch
        result = await dispatcher.submit_single(start_point, end_point, heuristic)
        return self._apply(epoch, result)
