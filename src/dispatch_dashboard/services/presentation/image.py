"""In-memory presenter backed by Pillow images."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Sequence

from PIL import Image

from ...config import settings
from ...models.domain import Order, Overlay, RoutePoint
from ...persistence.filesystem import FileStorage
from ..outputs.formatter import order_panels_to_json
from ..rendering.pipeline import TerrainView, render_surface
from .base import Presenter

logger = logging.getLogger(__name__)


class ImagePresenter(Presenter):
    """Keeps one image per surface plus the text state of every panel."""

    def __init__(self, cell_size: int | None = None) -> None:
        self.cell_size = cell_size or settings.cell_size_px
        self.surfaces: dict[str, Image.Image] = {}
        self.error_text: dict[str, str] = {}
        self.metrics: dict = {}
        self.active_orders: list[Order] = []
        self.delivered_orders: list[Order] = []

    def render(
        self,
        surface_id: str,
        terrain: TerrainView,
        overlays: Sequence[Overlay],
        polyline: Sequence[RoutePoint] | None,
    ) -> None:
        self.surfaces[surface_id] = render_surface(
            surface_id,
            terrain,
            overlays,
            polyline,
            self.cell_size,
            image=self.surfaces.get(surface_id),
        )

    def set_error_text(self, area: str, text: str) -> None:
        self.error_text[area] = text

    def set_metrics(self, values: dict) -> None:
        self.metrics = dict(values)

    def render_order_panels(self, active: Sequence[Order], delivered: Sequence[Order]) -> None:
        self.active_orders = list(active)
        self.delivered_orders = list(delivered)

    def surface_png(self, surface_id: str) -> bytes:
        buffer = io.BytesIO()
        self.surfaces[surface_id].save(buffer, format="PNG")
        return buffer.getvalue()

    def save_snapshots(self, storage: FileStorage | None = None, prefix: str = "snapshot") -> Path:
        """Export every surface as PNG and the panel state through ``storage``."""
        storage = storage or FileStorage()
        summary = {
            **order_panels_to_json(self.active_orders, self.delivered_orders),
            "metrics": self.metrics,
            "errors": self.error_text,
        }
        surfaces = {surface_id: self.surface_png(surface_id) for surface_id in self.surfaces}
        run_dir = storage.save_snapshot(surfaces, summary, prefix=prefix)
        logger.info(f"Saved {len(surfaces)} surfaces to {run_dir}")
        return run_dir
