"""Draw routines for the planning and live-operations surfaces.

Painting order is fixed: background, terrain cells, grid lines, overlay markers
in the order supplied, then the route polyline. Callers pass overlays already
layered (restaurants, active orders, couriers, stops) so later markers occlude
earlier ones deterministically.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from PIL import Image, ImageDraw

from ...models.domain import CellType, Overlay, RoutePoint

Color = tuple[int, int, int]

BACKGROUND_COLOR: Color = (248, 248, 252)
GRID_LINE_COLOR: Color = (200, 200, 210)
ROUTE_COLOR: Color = (30, 90, 230)
TERRAIN_COLORS: dict[CellType, Color] = {
    CellType.ROAD: (236, 236, 240),
    CellType.BUILDING: (150, 150, 160),
    CellType.PARK: (150, 210, 140),
    CellType.RIVER: (110, 170, 235),
}

# Marker palette used by the orchestrator when building overlay lists.
RESTAURANT_COLOR: Color = (220, 120, 30)
SELECTED_RESTAURANT_COLOR: Color = (200, 40, 40)
ORDER_COLOR: Color = (160, 60, 200)
COURIER_COLOR: Color = (30, 160, 80)
STOP_COLOR: Color = (20, 20, 20)


class TerrainView(Protocol):
    width: int
    height: int

    def type_at(self, x: int, y: int) -> CellType: ...


def _cell_center(x: float, y: float, cell_size: int) -> tuple[float, float]:
    return ((x + 0.5) * cell_size, (y + 0.5) * cell_size)


def _darker(color: Color, factor: float = 0.6) -> Color:
    return tuple(int(channel * factor) for channel in color)  # type: ignore[return-value]


def surface_size(terrain: TerrainView, cell_size: int) -> tuple[int, int]:
    return terrain.width * cell_size, terrain.height * cell_size


def draw_surface(
    image: Image.Image,
    terrain: TerrainView,
    overlays: Sequence[Overlay],
    polyline: Sequence[RoutePoint] | None,
    cell_size: int,
) -> None:
    """Repaint ``image`` completely from its inputs."""
    width, height = surface_size(terrain, cell_size)
    draw = ImageDraw.Draw(image)
    draw.rectangle([0, 0, image.width, image.height], fill=BACKGROUND_COLOR)

    for y in range(terrain.height):
        for x in range(terrain.width):
            x1, y1 = x * cell_size, y * cell_size
            draw.rectangle(
                [x1, y1, x1 + cell_size - 1, y1 + cell_size - 1],
                fill=TERRAIN_COLORS[terrain.type_at(x, y)],
            )

    for i in range(terrain.width + 1):
        draw.line([(i * cell_size, 0), (i * cell_size, height)], fill=GRID_LINE_COLOR, width=1)
    for j in range(terrain.height + 1):
        draw.line([(0, j * cell_size), (width, j * cell_size)], fill=GRID_LINE_COLOR, width=1)

    radius = max(2.0, cell_size * 0.35)
    for overlay in overlays:
        cx, cy = _cell_center(overlay.x, overlay.y, cell_size)
        draw.ellipse(
            [cx - radius, cy - radius, cx + radius, cy + radius],
            fill=overlay.color,
            outline=_darker(overlay.color),
        )

    if polyline is not None and len(polyline) > 1:
        points = [_cell_center(point.x, point.y, cell_size) for point in polyline]
        draw.line(points, fill=ROUTE_COLOR, width=max(2, cell_size // 6), joint="curve")


def render_surface(
    surface_id: str,
    terrain: TerrainView,
    overlays: Sequence[Overlay],
    polyline: Sequence[RoutePoint] | None,
    cell_size: int,
    image: Image.Image | None = None,
) -> Image.Image:
    """Paint a surface and return it.

    A fresh RGB image is created unless ``image`` (the surface's previous
    buffer) is passed; either way the output depends only on the inputs, so
    calling this twice with the same arguments yields identical pixels.
    """
    size = surface_size(terrain, cell_size)
    if image is None or image.size != size:
        image = Image.new("RGB", size, color=BACKGROUND_COLOR)
    image.info["surface_id"] = surface_id
    draw_surface(image, terrain, overlays, polyline, cell_size)
    return image
