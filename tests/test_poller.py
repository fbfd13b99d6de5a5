import asyncio

from dispatch_dashboard.errors import HttpError
from dispatch_dashboard.services.live import LiveOperationsStore, SimulationPoller


class DummySimulation:
    def __init__(self, step_error=None, step_delay=0.0):
        self.step_error = step_error
        self.step_delay = step_delay
        self.steps = 0
        self.refreshes = 0

    async def step_simulation(self):
        self.steps += 1
        if self.step_delay:
            await asyncio.sleep(self.step_delay)
        if self.step_error is not None:
            raise self.step_error

    async def list_orders(self):
        self.refreshes += 1
        return []

    async def list_couriers(self):
        return []


def _poller(backend, redraws, **kwargs) -> SimulationPoller:
    return SimulationPoller(
        backend,
        LiveOperationsStore(backend),
        on_tick=lambda: redraws.append("redraw"),
        **kwargs,
    )


def test_tick_steps_refreshes_and_redraws():
    backend = DummySimulation()
    redraws = []

    asyncio.run(_poller(backend, redraws, interval_ms=10).tick())

    assert backend.steps == 1
    assert backend.refreshes == 1
    assert redraws == ["redraw"]


def test_failed_step_still_refreshes():
    backend = DummySimulation(step_error=HttpError(500, "sim crashed"))
    redraws = []

    asyncio.run(_poller(backend, redraws, interval_ms=10).tick())

    assert backend.refreshes == 1
    assert redraws == ["redraw"]


def test_stop_cancels_the_timer():
    backend = DummySimulation()
    redraws = []
    poller = _poller(backend, redraws, interval_ms=10)

    async def scenario():
        poller.start()
        assert poller.running
        await asyncio.sleep(0.08)
        await poller.stop()
        assert not poller.running
        ticks = backend.steps
        await asyncio.sleep(0.08)
        return ticks

    ticks_at_stop = asyncio.run(scenario())

    assert ticks_at_stop >= 2
    assert backend.steps == ticks_at_stop


def test_pending_tick_guard_skips_overlapping_intervals():
    backend = DummySimulation(step_delay=1.0)
    poller = _poller(backend, [], interval_ms=10, allow_overlap=False)

    async def scenario():
        poller.start()
        await asyncio.sleep(0.1)
        assert poller.tick_pending
        await poller.stop()

    asyncio.run(scenario())

    assert poller.ticks_started == 1
    assert poller.ticks_skipped >= 2
    assert poller.ticks_completed == 0
    assert not poller.tick_pending


def test_overlap_allowed_starts_concurrent_ticks():
    backend = DummySimulation(step_delay=1.0)
    poller = _poller(backend, [], interval_ms=10, allow_overlap=True)

    async def scenario():
        poller.start()
        await asyncio.sleep(0.1)
        await poller.stop()

    asyncio.run(scenario())

    assert poller.ticks_started >= 2
    assert poller.ticks_skipped == 0


def test_start_is_idempotent():
    poller = _poller(DummySimulation(), [], interval_ms=10)

    async def scenario():
        poller.start()
        first = poller._task
        poller.start()
        assert poller._task is first
        await poller.stop()

    asyncio.run(scenario())
