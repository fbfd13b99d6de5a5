"""Planning-view session and route submission."""

from .dispatcher import RouteDispatcher
from .session import PlannerSession, PlannerState, parse_grid_coordinate

__all__ = ["PlannerSession", "PlannerState", "RouteDispatcher", "parse_grid_coordinate"]
