"""Error taxonomy shared by the backend client, dispatchers and orchestrator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.domain import Order


class DashboardError(Exception):
    """Base class for every failure the dashboard reports to the user."""


class NetworkError(DashboardError):
    """The request could not be sent or did not complete."""


class HttpError(DashboardError):
    """The backend answered with a non-2xx status. ``body`` is kept verbatim."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"{status} {body}")
        self.status = status
        self.body = body


class ValidationError(DashboardError):
    """Missing restaurant selection or a bad coordinate."""


class DecodeFailure(DashboardError):
    """A response body did not match the expected payload shape."""


class AssignmentError(DashboardError):
    """The order was created but no courier could be assigned to it."""

    def __init__(self, order: "Order", detail: str, status: int | None = None) -> None:
        super().__init__(detail)
        self.order = order
        self.detail = detail
        self.status = status


class StaleResultDiscarded(DashboardError):
    """A response arrived for a request that has since been superseded."""

    def __init__(self, token: int, latest: int) -> None:
        super().__init__(f"Discarded result of request #{token}; latest is #{latest}")
        self.token = token
        self.latest = latest
