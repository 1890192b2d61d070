"""Reorder Monitor - Eşik altına düşen stoklar için yeniden sipariş talimatı üretir.

İki alternatif politika tasarımı vardır, her kurulumda yalnızca biri kullanılır:
- Global: eşik ve sipariş miktarı ürün bazında. Eşik tanımlı değilse 0 kabul
  edilir, yani yeniden sipariş hiç tetiklenmez.
- Bölgesel: eşik ve sipariş miktarı (ürün, bölge) bazında, ek olarak ürün
  bazında teslim süresi. Eşik tanımlı değilse sonsuz kabul edilir, yani stok
  kaydı olan her depo için yeniden sipariş tetiklenir.

Bu iki varsayılan kasıtlı olarak birbirinin tersidir ve birleştirilmez.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Union

from src.agents.base_monitor import BaseMonitor, Threshold
from src.agents.errors import InvalidArgumentError
from src.models.inventory import (
    PolicyVariant,
    Product,
    ReorderDirective,
    Supplier,
    Warehouse,
)

logger = logging.getLogger(__name__)


class GlobalReorderMonitor(BaseMonitor):
    """Ürün bazlı eşik ve sipariş miktarı kullanan monitör."""

    variant = PolicyVariant.GLOBAL

    def __init__(self, **kwargs: Any):
        kwargs.setdefault("agent_name", "GlobalReorderMonitor")
        super().__init__(**kwargs)
        self._thresholds: dict[Product, int] = {}
        self._quantities: dict[Product, int] = {}

    def set_threshold(self, product: Product, threshold: int) -> None:
        with self._lock:
            self._thresholds[product] = threshold

    def get_threshold(self, product: Product) -> Optional[int]:
        return self._thresholds.get(product)

    def set_reorder_quantity(self, product: Product, quantity: int) -> None:
        with self._lock:
            self._quantities[product] = quantity

    def get_reorder_quantity(self, product: Product) -> Optional[int]:
        return self._quantities.get(product)

    def _threshold(self, product: Product, warehouse: Warehouse) -> Threshold:
        return self._thresholds.get(product, 0)

    def _build_directive(
        self, product: Product, supplier: Supplier, warehouse: Warehouse
    ) -> ReorderDirective:
        return ReorderDirective(
            product=product,
            supplier=supplier,
            warehouse=warehouse,
            quantity=self._quantities.get(product, 0),
        )


class RegionalReorderMonitor(BaseMonitor):
    """(Ürün, bölge) bazlı eşik ve sipariş miktarı, ürün bazlı teslim süresi kullanan monitör.

    Bölge, deponun ``location`` alanıdır.
    """

    variant = PolicyVariant.REGIONAL

    def __init__(self, **kwargs: Any):
        kwargs.setdefault("agent_name", "RegionalReorderMonitor")
        super().__init__(**kwargs)
        # {product: {region: value}}
        self._thresholds: dict[Product, dict[str, int]] = {}
        self._quantities: dict[Product, dict[str, int]] = {}
        # Teslim süreleri (gün): {product: days}
        self._lead_times: dict[Product, float] = {}

    def set_threshold(self, product: Product, region: str, threshold: int) -> None:
        with self._lock:
            self._thresholds.setdefault(product, {})[region] = threshold

    def get_threshold(self, product: Product, region: str) -> Optional[int]:
        return self._thresholds.get(product, {}).get(region)

    def set_reorder_quantity(self, product: Product, region: str, quantity: int) -> None:
        with self._lock:
            self._quantities.setdefault(product, {})[region] = quantity

    def get_reorder_quantity(self, product: Product, region: str) -> Optional[int]:
        return self._quantities.get(product, {}).get(region)

    def set_lead_time(self, product: Product, days: float) -> None:
        with self._lock:
            self._lead_times[product] = float(days)

    def get_lead_time(self, product: Product) -> Optional[float]:
        return self._lead_times.get(product)

    def _threshold(self, product: Product, warehouse: Warehouse) -> Threshold:
        return self._thresholds.get(product, {}).get(warehouse.location, math.inf)

    def _build_directive(
        self, product: Product, supplier: Supplier, warehouse: Warehouse
    ) -> ReorderDirective:
        region = warehouse.location
        return ReorderDirective(
            product=product,
            supplier=supplier,
            warehouse=warehouse,
            quantity=self._quantities.get(product, {}).get(region, 0),
            region=region,
            lead_time_days=self._lead_times.get(product, 0.0),
        )


_MONITORS = {
    PolicyVariant.GLOBAL: GlobalReorderMonitor,
    PolicyVariant.REGIONAL: RegionalReorderMonitor,
}


def create_monitor(variant: Union[PolicyVariant, str], **kwargs: Any) -> BaseMonitor:
    """Kurulum için seçilen politika varyantına göre monitör oluşturur."""
    try:
        policy = PolicyVariant(variant)
    except ValueError:
        raise InvalidArgumentError(f"Unknown reorder policy variant: {variant}") from None
    return _MONITORS[policy](**kwargs)
