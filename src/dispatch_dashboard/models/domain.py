"""Domain models for the city grid, restaurants, routes, orders and couriers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CellType(str, Enum):
    ROAD = "ROAD"
    BUILDING = "BUILDING"
    PARK = "PARK"
    RIVER = "RIVER"


class OrderStatus(str, Enum):
    NEW = "NEW"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    DELIVERED = "DELIVERED"


ACTIVE_ORDER_STATUSES = frozenset({OrderStatus.NEW, OrderStatus.ASSIGNED, OrderStatus.IN_PROGRESS})


@dataclass(slots=True, frozen=True)
class Cell:
    """A classified tile of the city grid."""

    x: int
    y: int
    type: CellType = CellType.ROAD


@dataclass(slots=True, frozen=True)
class Restaurant:
    id: str
    name: str
    x: int
    y: int


@dataclass(slots=True, frozen=True)
class Stop:
    """A waypoint chosen on the planning view; not yet an order."""

    x: int
    y: int
    label: str


@dataclass(slots=True, frozen=True)
class RoutePoint:
    x: int
    y: int


@dataclass(slots=True, frozen=True)
class RouteResult:
    """Outcome of one route computation. Replaced wholesale, never patched."""

    path: tuple[RoutePoint, ...]
    total_distance: float
    visited_nodes: int
    time_ms: float


@dataclass(slots=True, frozen=True)
class Order:
    """Backend-tracked delivery request. Only ever received as a snapshot."""

    id: str
    restaurant_id: str
    x: int
    y: int
    label: str
    status: OrderStatus
    assigned_courier_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_ORDER_STATUSES


@dataclass(slots=True, frozen=True)
class Courier:
    id: str
    name: str
    current_x: float
    current_y: float


@dataclass(slots=True, frozen=True)
class Overlay:
    """One marker drawn over the terrain of a surface."""

    x: float
    y: float
    color: tuple[int, int, int]


@dataclass(slots=True, frozen=True)
class LiveSnapshot:
    """Orders and couriers fetched together; swapped in as one unit."""

    orders: tuple[Order, ...] = field(default_factory=tuple)
    couriers: tuple[Courier, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class OrderAssignment:
    order: Order
    courier: Courier
