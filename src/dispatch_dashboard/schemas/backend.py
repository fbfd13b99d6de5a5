"""Backend request/response schemas.

Field names on the wire are camelCase; models expose snake_case attributes and
serialize with ``by_alias=True``. Response models convert to the immutable
domain entities through ``to_domain`` so nothing loosely typed leaks past the
client.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.domain import (
    Cell,
    CellType,
    Courier,
    Order,
    OrderStatus,
    Restaurant,
    RoutePoint,
    RouteResult,
    Stop,
)


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class RestaurantPayload(WireModel):
    id: str
    name: str
    x: int
    y: int

    def to_domain(self) -> Restaurant:
        return Restaurant(id=self.id, name=self.name, x=self.x, y=self.y)


class CellPayload(WireModel):
    x: int
    y: int
    type: CellType = CellType.ROAD

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value):
        if value is None:
            return CellType.ROAD
        return str(value).strip().upper()

    def to_domain(self) -> Cell:
        return Cell(x=self.x, y=self.y, type=self.type)


class PointPayload(WireModel):
    x: int
    y: int


class RouteResponsePayload(WireModel):
    path: Optional[List[PointPayload]] = None
    total_distance: float = Field(0.0, alias="totalDistance")
    visited_nodes: int = Field(0, alias="visitedNodes")
    time_ms: float = Field(0.0, alias="timeMs")

    def to_domain(self) -> RouteResult:
        return RouteResult(
            path=tuple(RoutePoint(x=point.x, y=point.y) for point in self.path or ()),
            total_distance=self.total_distance,
            visited_nodes=self.visited_nodes,
            time_ms=self.time_ms,
        )


class CourierPayload(WireModel):
    id: str
    name: str = ""
    current_x: float = Field(..., alias="currentX")
    current_y: float = Field(..., alias="currentY")

    def to_domain(self) -> Courier:
        return Courier(id=self.id, name=self.name, current_x=self.current_x, current_y=self.current_y)


class OrderPayload(WireModel):
    id: str
    restaurant_id: str = Field(..., alias="restaurantId")
    x: int
    y: int
    label: str = ""
    status: OrderStatus = OrderStatus.NEW
    assigned_courier_id: Optional[str] = Field(None, alias="assignedCourierId")

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        if value is None:
            return OrderStatus.NEW
        return str(value).strip().upper()

    def to_domain(self) -> Order:
        return Order(
            id=self.id,
            restaurant_id=self.restaurant_id,
            x=self.x,
            y=self.y,
            label=self.label,
            status=self.status,
            assigned_courier_id=self.assigned_courier_id,
        )


class AssignmentPayload(WireModel):
    order: OrderPayload
    courier: CourierPayload


class StopPayload(WireModel):
    x: int
    y: int
    label: str

    @classmethod
    def from_stop(cls, stop: Stop) -> "StopPayload":
        return cls(x=stop.x, y=stop.y, label=stop.label)


class MultiRouteRequest(WireModel):
    restaurant_id: str = Field(..., alias="restaurantId")
    stops: List[StopPayload]
    heuristic: str
    strategy: str


class SingleRouteRequest(WireModel):
    grid_width: int = Field(..., alias="gridWidth")
    grid_height: int = Field(..., alias="gridHeight")
    start_x: int = Field(..., alias="startX")
    start_y: int = Field(..., alias="startY")
    end_x: int = Field(..., alias="endX")
    end_y: int = Field(..., alias="endY")
    heuristic: str
    # Obstacles are taken from the backend's own city layout.
    cells: List[CellPayload] = Field(default_factory=list)


class CreateOrderRequest(WireModel):
    restaurant_id: str = Field(..., alias="restaurantId")
    x: int
    y: int
    label: str
