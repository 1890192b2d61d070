"""Stok defteri ve yeniden sipariş veri modelleri."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


class PolicyVariant(str, Enum):
    GLOBAL = "global"
    REGIONAL = "regional"


@dataclass(frozen=True)
class Product:
    code: str
    name: str


@dataclass(frozen=True)
class Warehouse:
    name: str
    location: str
    distance: float = 0.0  # Karar mantığında kullanılmaz


@dataclass(frozen=True)
class Supplier:
    name: str

    def place_order(self, product: Product, quantity: int, warehouse: Warehouse) -> None:
        """Siparişi loglar. Gerçek sipariş kanalı dışarıdan enjekte edilir."""
        logger.info(
            "Order placed for %d units of %s to %s",
            quantity,
            product.name,
            warehouse.name,
        )


@dataclass(frozen=True)
class ReorderDirective:
    product: Product
    supplier: Supplier
    warehouse: Warehouse
    quantity: int
    region: Optional[str] = None
    lead_time_days: Optional[float] = None

    def render(self) -> str:
        """Yeniden sipariş talimatının metin karşılığını üretir."""
        text = (
            f"Reordering {self.quantity} units of {self.product.name} "
            f"from supplier {self.supplier.name} "
            f"for warehouse {self.warehouse.name}"
        )
        if self.region is None:
            return text
        return (
            f"{text} in region {self.region}. "
            f"Estimated delivery time: {format_days(self.lead_time_days or 0.0)} days."
        )

    def to_dict(self) -> dict:
        return {
            "product_code": self.product.code,
            "product_name": self.product.name,
            "supplier": self.supplier.name,
            "warehouse": self.warehouse.name,
            "quantity": self.quantity,
            "region": self.region,
            "lead_time_days": self.lead_time_days,
        }


@dataclass
class AgentDecision:
    decision_id: str
    agent_name: str
    decision_type: str
    input_data: dict
    output_data: dict
    reasoning: str
    timestamp: str = field(default_factory=lambda: datetime.utcnow().isoformat())


def format_days(days: float) -> str:
    """Gün sayısını üslü gösterim olmadan, en az bir ondalık basamakla yazar (7.0, 0.00001)."""
    if not math.isfinite(days):
        return str(days)
    text = format(Decimal(repr(float(days))), "f")
    return text if "." in text else f"{text}.0"


def render_directives(directives: Iterable[ReorderDirective]) -> str:
    """Talimatları tek satırlık metinler halinde birleştirir, boş liste için "" döner."""
    return "\n".join(d.render() for d in directives).strip()
