"""Contract for the presentation surface the orchestrator draws into."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...models.domain import Order, Overlay, RoutePoint
from ..rendering.pipeline import TerrainView

PLANNER_SURFACE = "planner"
LIVE_SURFACE = "live"


class Presenter(ABC):
    """Two canvases, per-area error text, route metrics and order panels."""

    @abstractmethod
    def render(
        self,
        surface_id: str,
        terrain: TerrainView,
        overlays: Sequence[Overlay],
        polyline: Sequence[RoutePoint] | None,
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_error_text(self, area: str, text: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_metrics(self, values: dict) -> None:
        raise NotImplementedError

    @abstractmethod
    def render_order_panels(self, active: Sequence[Order], delivered: Sequence[Order]) -> None:
        raise NotImplementedError
