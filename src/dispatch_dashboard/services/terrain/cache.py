"""Static city tile classification shared by both views."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Mapping, Protocol, Sequence

from ...errors import DashboardError
from ...models.domain import Cell, CellType

logger = logging.getLogger(__name__)


class LayoutSource(Protocol):
    async def get_city_layout(self) -> list[Cell]: ...


class GridTerrainCache:
    """Read-only terrain lookup; every unknown coordinate is a road."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._types: Mapping[tuple[int, int], CellType] = MappingProxyType({})
        self._listeners: list[Callable[[], None]] = []
        self.loaded = False

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback fired once terrain has been loaded."""
        self._listeners.append(callback)

    def in_bounds(self, x: float, y: float) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def type_at(self, x: int, y: int) -> CellType:
        return self._types.get((x, y), CellType.ROAD)

    def cells(self) -> Sequence[Cell]:
        return [Cell(x=x, y=y, type=cell_type) for (x, y), cell_type in self._types.items()]

    async def load(self, source: LayoutSource) -> list[Cell]:
        """Fetch the layout once. On failure terrain stays all-road and the error is re-raised."""
        try:
            cells = await source.get_city_layout()
        except DashboardError as exc:
            logger.warning(f"Terrain load failed, rendering all cells as ROAD: {exc}")
            raise

        types = {
            (cell.x, cell.y): cell.type
            for cell in cells
            if self.in_bounds(cell.x, cell.y) and cell.type is not CellType.ROAD
        }
        self._types = MappingProxyType(types)
        self.loaded = True
        logger.info(f"Loaded terrain: {len(cells)} cells ({len(types)} non-road)")

        for callback in list(self._listeners):
            callback()
        return cells
