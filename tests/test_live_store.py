import asyncio

import httpx
import pytest

from dispatch_dashboard.errors import HttpError, NetworkError
from dispatch_dashboard.models.domain import Courier, Order, OrderStatus, Restaurant
from dispatch_dashboard.services.api.client import BackendClient
from dispatch_dashboard.services.live import LiveOperationsStore


def _order(oid: str, status: OrderStatus, courier: str | None = None) -> Order:
    return Order(
        id=oid,
        restaurant_id="r1",
        x=4,
        y=4,
        label=f"Order {oid}",
        status=status,
        assigned_courier_id=courier,
    )


def _courier(cid: str, x: float = 1.0, y: float = 1.0) -> Courier:
    return Courier(id=cid, name=f"Courier {cid}", current_x=x, current_y=y)


class DummyLive:
    def __init__(self, orders=None, couriers=None, restaurants=None):
        self.orders = orders if orders is not None else []
        self.couriers = couriers if couriers is not None else []
        self.restaurants = restaurants if restaurants is not None else []

    @staticmethod
    def _answer(value):
        if isinstance(value, Exception):
            raise value
        return list(value)

    async def list_restaurants(self):
        return self._answer(self.restaurants)

    async def list_orders(self):
        return self._answer(self.orders)

    async def list_couriers(self):
        return self._answer(self.couriers)


class GatedLive:
    """Parks every fetch on a future so overlapping refreshes can finish in any order."""

    def __init__(self):
        self.orders_calls: list[asyncio.Future] = []
        self.courier_calls: list[asyncio.Future] = []

    async def list_orders(self):
        future = asyncio.get_running_loop().create_future()
        self.orders_calls.append(future)
        return await future

    async def list_couriers(self):
        future = asyncio.get_running_loop().create_future()
        self.courier_calls.append(future)
        return await future


async def _settle():
    for _ in range(3):
        await asyncio.sleep(0)


def test_refresh_replaces_snapshot_when_both_fetches_succeed():
    backend = DummyLive(orders=[_order("o1", OrderStatus.NEW)], couriers=[_courier("c1")])
    store = LiveOperationsStore(backend)

    assert asyncio.run(store.refresh()) is True
    assert [order.id for order in store.orders] == ["o1"]
    assert [courier.id for courier in store.couriers] == ["c1"]
    assert store.last_error is None


def test_partial_failure_leaves_previous_snapshot(caplog: pytest.LogCaptureFixture):
    backend = DummyLive(orders=[_order("o1", OrderStatus.NEW)], couriers=[_courier("c1")])
    store = LiveOperationsStore(backend)
    asyncio.run(store.refresh())
    before = store.snapshot

    backend.orders = [_order("o1", OrderStatus.ASSIGNED, "c1"), _order("o2", OrderStatus.NEW)]
    backend.couriers = HttpError(500, "Internal Server Error")

    assert asyncio.run(store.refresh()) is False
    assert store.snapshot is before
    assert isinstance(store.last_error, HttpError)
    assert "keeping previous snapshot" in caplog.text


def test_failure_of_orders_fetch_also_leaves_snapshot():
    backend = DummyLive(orders=NetworkError("refused"), couriers=[_courier("c9")])
    store = LiveOperationsStore(backend)

    assert asyncio.run(store.refresh()) is False
    assert store.orders == ()
    assert store.couriers == ()


def test_active_and_delivered_views_partition_by_status():
    orders = [
        _order("o1", OrderStatus.NEW),
        _order("o2", OrderStatus.ASSIGNED, "c1"),
        _order("o3", OrderStatus.IN_PROGRESS, "c2"),
        _order("o4", OrderStatus.DELIVERED, "c1"),
    ]
    store = LiveOperationsStore(DummyLive(orders=orders))
    asyncio.run(store.refresh())

    assert [order.id for order in store.active_orders()] == ["o1", "o2", "o3"]
    assert [order.id for order in store.delivered_orders()] == ["o4"]
    assert all(order.status is not OrderStatus.DELIVERED for order in store.active_orders())


def test_older_refresh_finishing_last_does_not_overwrite_newer_one():
    backend = GatedLive()
    store = LiveOperationsStore(backend)

    async def scenario():
        first = asyncio.create_task(store.refresh())
        await _settle()
        second = asyncio.create_task(store.refresh())
        await _settle()

        backend.orders_calls[1].set_result([_order("new", OrderStatus.NEW)])
        backend.courier_calls[1].set_result([_courier("c1", 3.0, 3.0)])
        assert await second is True

        backend.orders_calls[0].set_result([_order("old", OrderStatus.NEW)])
        backend.courier_calls[0].set_result([_courier("c1", 1.0, 1.0)])
        assert await first is False

    asyncio.run(scenario())

    assert [order.id for order in store.orders] == ["new"]
    assert store.couriers[0].current_x == 3.0


def test_older_refresh_failing_last_does_not_flag_newer_snapshot():
    backend = GatedLive()
    store = LiveOperationsStore(backend)

    async def scenario():
        first = asyncio.create_task(store.refresh())
        await _settle()
        second = asyncio.create_task(store.refresh())
        await _settle()

        backend.orders_calls[1].set_result([])
        backend.courier_calls[1].set_result([_courier("c1", 3.0, 3.0)])
        assert await second is True

        backend.orders_calls[0].set_exception(HttpError(500, "old"))
        backend.courier_calls[0].set_result([])
        assert await first is False

    asyncio.run(scenario())

    assert store.last_error is None
    assert store.couriers[0].current_x == 3.0


def test_undecodable_response_body_keeps_previous_snapshot():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.DecodingError("Error -3 while decompressing data: incorrect header check", request=request)

    async def scenario():
        async with BackendClient(base_url="http://backend.test", transport=httpx.MockTransport(handler)) as client:
            store = LiveOperationsStore(client)
            return store, await store.refresh()

    store, replaced = asyncio.run(scenario())

    assert replaced is False
    assert isinstance(store.last_error, NetworkError)
    assert store.orders == ()


def test_overlapping_refreshes_apply_in_completion_order():
    backend = GatedLive()
    store = LiveOperationsStore(backend)

    async def scenario():
        first = asyncio.create_task(store.refresh())
        await _settle()
        second = asyncio.create_task(store.refresh())
        await _settle()

        backend.orders_calls[0].set_result([_order("early", OrderStatus.NEW)])
        backend.courier_calls[0].set_result([])
        assert await first is True
        assert [order.id for order in store.orders] == ["early"]

        backend.orders_calls[1].set_result([_order("late", OrderStatus.NEW)])
        backend.courier_calls[1].set_result([])
        assert await second is True

    asyncio.run(scenario())

    assert [order.id for order in store.orders] == ["late"]


def test_load_restaurants_and_lookup():
    store = LiveOperationsStore(DummyLive(restaurants=[Restaurant("r1", "Pasta Place", 2, 3)]))

    asyncio.run(store.load_restaurants())

    assert store.restaurant("r1") == Restaurant("r1", "Pasta Place", 2, 3)
    assert store.restaurant("nope") is None
    assert store.restaurant(None) is None
