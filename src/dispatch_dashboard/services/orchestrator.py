"""Wires user input and poll ticks to the stores and redraws the surfaces."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from ..config import settings
from ..errors import DashboardError, StaleResultDiscarded
from ..models.domain import OrderAssignment, Overlay, RouteResult, Stop
from .api.client import BackendClient
from .live.orders import OrderDispatcher
from .live.poller import SimulationPoller
from .live.store import LiveOperationsStore
from .outputs.formatter import (
    live_error_message,
    order_error_message,
    route_error_message,
    route_metrics,
)
from .planner.dispatcher import RouteDispatcher
from .planner.session import PlannerSession
from .presentation.base import LIVE_SURFACE, PLANNER_SURFACE, Presenter
from .rendering.pipeline import (
    COURIER_COLOR,
    ORDER_COLOR,
    RESTAURANT_COLOR,
    SELECTED_RESTAURANT_COLOR,
    STOP_COLOR,
)
from .terrain.cache import GridTerrainCache

logger = logging.getLogger(__name__)

PLANNER_AREA = "planner"
ORDERS_AREA = "orders"
LIVE_AREA = "live"


class Orchestrator:
    """Owner of every view store; the only component that triggers redraws.

    Errors raised by dispatchers are converted here into text for the
    relevant panel so nothing escapes into the event loop.
    """

    def __init__(
        self,
        client: BackendClient,
        presenter: Presenter,
        *,
        grid_width: int | None = None,
        grid_height: int | None = None,
        poll_interval_ms: int | None = None,
        allow_overlapping_ticks: bool | None = None,
    ) -> None:
        width = grid_width or settings.grid_width
        height = grid_height or settings.grid_height
        self.client = client
        self.presenter = presenter
        self.terrain = GridTerrainCache(width, height)
        self.terrain.add_listener(self.redraw_all)
        self.store = LiveOperationsStore(client)
        self.planner = PlannerSession(self.store.restaurant, width, height)
        self.routes = RouteDispatcher(client, width, height)
        self.orders = OrderDispatcher(client, self.store, width, height)
        self.poller = SimulationPoller(
            client,
            self.store,
            on_tick=self.redraw_all,
            interval_ms=poll_interval_ms,
            allow_overlap=allow_overlapping_ticks,
        )
        self.live_restaurant_id: Optional[str] = None
        self.last_assignment: Optional[OrderAssignment] = None

    async def bootstrap(self) -> None:
        """Load restaurants and terrain concurrently, take a first live snapshot, draw."""
        restaurants, terrain = await asyncio.gather(
            self.store.load_restaurants(),
            self.terrain.load(self.client),
            return_exceptions=True,
        )
        for label, outcome in (("restaurants", restaurants), ("terrain", terrain)):
            if isinstance(outcome, DashboardError):
                logger.warning(f"Bootstrap could not load {label}: {outcome}")
            elif isinstance(outcome, BaseException):
                raise outcome
        await self.store.refresh()
        logger.info(f"Dashboard ready with {len(self.store.restaurants)} restaurants")
        self.redraw_all()

    def start(self) -> None:
        self.poller.start()

    async def stop(self) -> None:
        await self.poller.stop()

    # Overlay layering: restaurants, active orders, couriers, then session stops.
    def _shared_overlays(self, selected_restaurant_id: Optional[str]) -> list[Overlay]:
        overlays = [
            Overlay(
                x=restaurant.x,
                y=restaurant.y,
                color=SELECTED_RESTAURANT_COLOR if restaurant.id == selected_restaurant_id else RESTAURANT_COLOR,
            )
            for restaurant in self.store.restaurants
        ]
        overlays.extend(Overlay(x=order.x, y=order.y, color=ORDER_COLOR) for order in self.store.active_orders())
        overlays.extend(
            Overlay(x=courier.current_x, y=courier.current_y, color=COURIER_COLOR)
            for courier in self.store.couriers
        )
        return overlays

    def planner_overlays(self) -> list[Overlay]:
        restaurant = self.planner.restaurant
        overlays = self._shared_overlays(restaurant.id if restaurant else None)
        overlays.extend(Overlay(x=stop.x, y=stop.y, color=STOP_COLOR) for stop in self.planner.stops)
        return overlays

    def live_overlays(self) -> list[Overlay]:
        return self._shared_overlays(self.live_restaurant_id)

    def redraw_planner(self) -> None:
        path = self.planner.path
        self.presenter.render(PLANNER_SURFACE, self.terrain, self.planner_overlays(), list(path) or None)

    def redraw_live(self) -> None:
        self.presenter.render(LIVE_SURFACE, self.terrain, self.live_overlays(), None)
        self.presenter.render_order_panels(self.store.active_orders(), self.store.delivered_orders())
        error = self.store.last_error
        self.presenter.set_error_text(LIVE_AREA, live_error_message(error) if error is not None else "")

    def redraw_all(self) -> None:
        self.redraw_planner()
        self.redraw_live()

    def select_restaurant(self, restaurant_id: str | None) -> None:
        self.planner.select_restaurant(restaurant_id)
        self.presenter.set_metrics({})
        self.presenter.set_error_text(PLANNER_AREA, "")
        self.redraw_planner()

    def planner_click(self, x: int, y: int) -> Optional[Stop]:
        stop = self.planner.add_stop(x, y)
        if stop is not None:
            self.redraw_planner()
        return stop

    def reset_planner(self) -> None:
        self.planner.reset()
        self.presenter.set_metrics({})
        self.presenter.set_error_text(PLANNER_AREA, "")
        self.redraw_planner()

    def _show_route(self, result: RouteResult) -> None:
        self.presenter.set_error_text(PLANNER_AREA, "")
        self.presenter.set_metrics(route_metrics(result))
        self.redraw_planner()

    def _show_route_error(self, exc: DashboardError) -> None:
        self.presenter.set_metrics({})
        self.presenter.set_error_text(PLANNER_AREA, route_error_message(exc))

    async def compute_route(
        self,
        heuristic: str | None = None,
        strategy: str | None = None,
        end_x: Any = None,
        end_y: Any = None,
    ) -> Optional[RouteResult]:
        try:
            result = await self.planner.compute_route(
                self.routes,
                heuristic or settings.default_heuristic,
                strategy or settings.default_strategy,
                end_x=end_x,
                end_y=end_y,
            )
        except StaleResultDiscarded:
            return None
        except DashboardError as exc:
            self._show_route_error(exc)
            return None
        self._show_route(result)
        return result

    async def compute_direct_route(
        self,
        start_x: Any,
        start_y: Any,
        end_x: Any,
        end_y: Any,
        heuristic: str | None = None,
    ) -> Optional[RouteResult]:
        try:
            result = await self.planner.compute_direct_route(
                self.routes,
                (start_x, start_y),
                (end_x, end_y),
                heuristic or settings.default_heuristic,
            )
        except StaleResultDiscarded:
            return None
        except DashboardError as exc:
            self._show_route_error(exc)
            return None
        self._show_route(result)
        return result

    def select_live_restaurant(self, restaurant_id: str | None) -> None:
        restaurant = self.store.restaurant(restaurant_id)
        self.live_restaurant_id = restaurant.id if restaurant else None
        self.redraw_live()

    async def live_click(self, x: int, y: int) -> Optional[OrderAssignment]:
        try:
            assignment = await self.orders.create_and_assign(self.live_restaurant_id, x, y)
        except DashboardError as exc:
            self.presenter.set_error_text(ORDERS_AREA, order_error_message(exc))
            self.redraw_all()
            return None
        if assignment is None:
            return None
        self.last_assignment = assignment
        self.presenter.set_error_text(ORDERS_AREA, "")
        self.redraw_all()
        return assignment
