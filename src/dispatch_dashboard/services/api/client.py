"""Async HTTP client for the dispatch backend."""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ...config import settings
from ...errors import DecodeFailure, HttpError, NetworkError
from ...models.domain import Cell, Courier, Order, OrderAssignment, Restaurant, RoutePoint, RouteResult, Stop
from ...schemas.backend import (
    AssignmentPayload,
    CellPayload,
    CourierPayload,
    CreateOrderRequest,
    MultiRouteRequest,
    OrderPayload,
    RestaurantPayload,
    RouteResponsePayload,
    SingleRouteRequest,
    StopPayload,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BackendClient:
    """Thin async wrapper over the backend REST endpoints.

    Every call either returns typed domain entities or raises one of
    ``NetworkError``, ``HttpError`` or ``DecodeFailure``. Nothing is retried;
    the caller decides whether the user should try again.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("Backend base URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, payload: BaseModel | None = None) -> httpx.Response:
        body = payload.model_dump(mode="json", by_alias=True) if payload is not None else None
        try:
            response = await self._client.request(method, path, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.debug(f"{method} {path} returned HTTP {exc.response.status_code}")
            raise HttpError(exc.response.status_code, exc.response.text) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Failed to reach backend at {self.base_url}{path}: {exc}") from exc
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeFailure(f"Response from {response.request.url.path} is not valid JSON: {exc}") from exc

    def _decode(self, response: httpx.Response, model: Type[ModelT]) -> ModelT:
        try:
            return model.model_validate(self._json(response))
        except PydanticValidationError as exc:
            raise DecodeFailure(
                f"Unexpected {model.__name__} payload from {response.request.url.path}: {exc}"
            ) from exc

    def _decode_list(self, response: httpx.Response, model: Type[ModelT]) -> list[ModelT]:
        try:
            return TypeAdapter(list[model]).validate_python(self._json(response))
        except PydanticValidationError as exc:
            raise DecodeFailure(
                f"Unexpected list of {model.__name__} from {response.request.url.path}: {exc}"
            ) from exc

    async def list_restaurants(self) -> list[Restaurant]:
        response = await self._request("GET", "/api/restaurants")
        return [item.to_domain() for item in self._decode_list(response, RestaurantPayload)]

    async def get_city_layout(self) -> list[Cell]:
        response = await self._request("GET", "/api/city/layout")
        return [item.to_domain() for item in self._decode_list(response, CellPayload)]

    async def route_single(
        self,
        grid_width: int,
        grid_height: int,
        start: RoutePoint,
        end: RoutePoint,
        heuristic: str,
    ) -> RouteResult:
        request = SingleRouteRequest(
            grid_width=grid_width,
            grid_height=grid_height,
            start_x=start.x,
            start_y=start.y,
            end_x=end.x,
            end_y=end.y,
            heuristic=heuristic,
        )
        response = await self._request("POST", "/api/route", request)
        return self._decode(response, RouteResponsePayload).to_domain()

    async def route_multi(
        self,
        restaurant_id: str,
        stops: Sequence[Stop],
        heuristic: str,
        strategy: str,
    ) -> RouteResult:
        request = MultiRouteRequest(
            restaurant_id=restaurant_id,
            stops=[StopPayload.from_stop(stop) for stop in stops],
            heuristic=heuristic,
            strategy=strategy,
        )
        response = await self._request("POST", "/api/route/multi", request)
        return self._decode(response, RouteResponsePayload).to_domain()

    async def list_couriers(self) -> list[Courier]:
        response = await self._request("GET", "/api/couriers")
        return [item.to_domain() for item in self._decode_list(response, CourierPayload)]

    async def list_orders(self) -> list[Order]:
        response = await self._request("GET", "/api/orders")
        return [item.to_domain() for item in self._decode_list(response, OrderPayload)]

    async def create_order(self, restaurant_id: str, x: int, y: int, label: str) -> Order:
        request = CreateOrderRequest(restaurant_id=restaurant_id, x=x, y=y, label=label)
        response = await self._request("POST", "/api/orders", request)
        return self._decode(response, OrderPayload).to_domain()

    async def assign_order(self, order_id: str) -> OrderAssignment:
        response = await self._request("POST", f"/api/orders/{order_id}/assign")
        payload = self._decode(response, AssignmentPayload)
        return OrderAssignment(order=payload.order.to_domain(), courier=payload.courier.to_domain())

    async def step_simulation(self) -> None:
        # Response body carries nothing the dashboard uses.
        await self._request("POST", "/api/sim/step")
