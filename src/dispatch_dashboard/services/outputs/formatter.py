"""Text rendering of route metrics, paths, order panels and error messages."""

from __future__ import annotations

from typing import Sequence

from ...errors import AssignmentError, DashboardError, HttpError, NetworkError
from ...models.domain import Order, RoutePoint, RouteResult


def format_path(path: Sequence[RoutePoint]) -> str:
    if not path:
        return "No path returned"
    return " -> ".join(f"({point.x}, {point.y})" for point in path)


def route_metrics(result: RouteResult) -> dict:
    return {
        "totalDistance": result.total_distance,
        "visitedNodes": result.visited_nodes,
        "timeMs": result.time_ms,
        "path": format_path(result.path),
    }


def order_row(order: Order) -> dict:
    return {
        "id": order.id,
        "label": order.label,
        "restaurantId": order.restaurant_id,
        "x": order.x,
        "y": order.y,
        "status": order.status.value,
        "assignedCourierId": order.assigned_courier_id,
    }


def order_panels_to_json(active: Sequence[Order], delivered: Sequence[Order]) -> dict:
    return {
        "active": [order_row(order) for order in active],
        "delivered": [order_row(order) for order in delivered],
    }


def route_error_message(exc: DashboardError) -> str:
    if isinstance(exc, HttpError):
        return f"Error: {exc.status} {exc.body}"
    if isinstance(exc, NetworkError):
        return f"Network error: {exc}"
    return str(exc)


def order_error_message(exc: DashboardError) -> str:
    if isinstance(exc, AssignmentError):
        return f"Error assigning courier: {exc.detail}"
    if isinstance(exc, HttpError):
        return f"Error creating order: {exc.body}"
    if isinstance(exc, NetworkError):
        return f"Network error: {exc}"
    return f"Error creating order: {exc}"


def live_error_message(exc: DashboardError) -> str:
    return f"Live data unavailable: {exc}"
