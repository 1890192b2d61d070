from src.agents.base_monitor import BaseMonitor
from src.agents.errors import InvalidArgumentError, MissingSupplierError, ReorderError
from src.agents.order_dispatcher import OrderDispatcher
from src.agents.reorder_monitor import (
    GlobalReorderMonitor,
    RegionalReorderMonitor,
    create_monitor,
)

__all__ = [
    "BaseMonitor",
    "GlobalReorderMonitor",
    "InvalidArgumentError",
    "MissingSupplierError",
    "OrderDispatcher",
    "RegionalReorderMonitor",
    "ReorderError",
    "create_monitor",
]
