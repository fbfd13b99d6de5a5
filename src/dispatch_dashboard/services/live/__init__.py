"""Live-operations store, order dispatch and simulation polling."""

from .orders import OrderDispatcher
from .poller import SimulationPoller
from .store import LiveOperationsStore

__all__ = ["LiveOperationsStore", "OrderDispatcher", "SimulationPoller"]
