"""Order Dispatcher - Değerlendirme sonrası siparişleri tedarikçilere iletir.

Sipariş verme bir yan etkidir ve monitörün dışında tutulur. Monitör sadece
talimat üretir, dispatcher bu talimatları enjekte edilen callback ile işler.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from src.agents.base_monitor import BaseMonitor
from src.models.inventory import ReorderDirective

logger = logging.getLogger(__name__)

PlaceOrder = Callable[[ReorderDirective], None]


def supplier_place_order(directive: ReorderDirective) -> None:
    """Varsayılan callback: siparişi talimattaki tedarikçiye iletir."""
    directive.supplier.place_order(directive.product, directive.quantity, directive.warehouse)


class OrderDispatcher:
    """Yeniden sipariş talimatlarını sırayla sipariş callback'ine iletir."""

    def __init__(self, place_order: Optional[PlaceOrder] = None) -> None:
        self._place_order = place_order or supplier_place_order
        self._dispatched: list[ReorderDirective] = []

    def dispatch(self, directives: Iterable[ReorderDirective]) -> list[ReorderDirective]:
        """Talimatları sırayla işler. Callback hataları yukarı iletilir."""
        dispatched = []
        for directive in directives:
            self._place_order(directive)
            dispatched.append(directive)
            logger.debug("Talimat iletildi: %s", directive.render())
        self._dispatched.extend(dispatched)
        logger.info("%d sipariş talimatı iletildi", len(dispatched))
        return dispatched

    def run(self, monitor: BaseMonitor) -> list[ReorderDirective]:
        """Monitörü değerlendirir ve üretilen talimatları iletir.

        MissingSupplierError durumunda hiçbir sipariş verilmez.
        """
        return self.dispatch(monitor.evaluate())

    def get_dispatched(self) -> list[ReorderDirective]:
        return list(self._dispatched)
