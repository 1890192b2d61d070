"""Tüm yeniden sipariş monitörleri için temel sınıf - stok defteri ve karar loglama."""

from __future__ import annotations

import json
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime
from typing import Any, Optional, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.agents.errors import InvalidArgumentError, MissingSupplierError
from src.models.inventory import (
    AgentDecision,
    PolicyVariant,
    Product,
    ReorderDirective,
    Supplier,
    Warehouse,
    render_directives,
)

logger = logging.getLogger(__name__)

Threshold = Union[int, float]

DECISION_HISTORY_LIMIT = 100


class BaseMonitor(ABC):
    """Stok defterini tutan ve eşik altı stokları değerlendiren monitör temel sınıfı.

    Stok seviyeleri ürün -> depo -> miktar şeklinde iki seviyeli, ekleme sıralı
    sözlüklerde tutulur. Tüm değişiklikler ve değerlendirme tek bir kilit
    altında çalışır.
    """

    variant: PolicyVariant

    def __init__(
        self,
        agent_name: str,
        region_name: str = "us-west-2",
        decision_logging: bool = False,
        decision_table: str = "AgentDecisions",
        log_bucket: Optional[str] = None,
        decision_history: int = DECISION_HISTORY_LIMIT,
        dynamodb_resource: Optional[Any] = None,
        s3_client: Optional[Any] = None,
    ):
        self.agent_name = agent_name
        self.region_name = region_name
        self.decision_logging = decision_logging

        # AWS istemcileri - dependency injection destekli, sadece loglama açıksa oluşturulur
        self.dynamodb = dynamodb_resource
        self.s3 = s3_client
        if decision_logging:
            self.dynamodb = self.dynamodb or boto3.resource("dynamodb", region_name=region_name)
            self.s3 = self.s3 or boto3.client("s3", region_name=region_name)
        self.decisions_table = self.dynamodb.Table(decision_table) if self.dynamodb else None
        self._s3_bucket_name = log_bucket

        # Stok seviyeleri: {product: {warehouse: quantity}}
        self._stock_levels: dict[Product, dict[Warehouse, int]] = {}
        # Ürün tedarikçileri: {product: supplier}
        self._suppliers: dict[Product, Supplier] = {}
        # Son kararlar, en eski kayıt otomatik düşer
        self._decisions: deque[AgentDecision] = deque(maxlen=decision_history)
        self._lock = threading.RLock()

        logger.info("Monitör başlatıldı: %s (varyant: %s)", agent_name, self.variant.value)

    # --- Stok defteri ---

    def record_stock(self, product: Product, warehouse: Warehouse, delta: int) -> int:
        """Ürün-depo çiftinin stoğunu delta kadar artırır ve yeni miktarı döndürür."""
        if delta < 0:
            raise InvalidArgumentError("Quantity cannot be negative.")
        with self._lock:
            warehouse_stock = self._stock_levels.setdefault(product, {})
            warehouse_stock[warehouse] = warehouse_stock.get(warehouse, 0) + delta
            logger.debug(
                "Stok güncellendi: %s / %s -> %d",
                product.code,
                warehouse.name,
                warehouse_stock[warehouse],
            )
            return warehouse_stock[warehouse]

    def get_stock(self, product: Product, warehouse: Warehouse) -> Optional[int]:
        """Ürün-depo çifti için mevcut stoğu döndürür."""
        return self._stock_levels.get(product, {}).get(warehouse)

    def get_stock_levels(self) -> dict[Product, dict[Warehouse, int]]:
        """Stok defterinin kendisini döndürür (kopya değil)."""
        return self._stock_levels

    # --- Tedarikçi ataması ---

    def assign_supplier(self, product: Product, supplier: Supplier) -> None:
        """Ürünün tek tedarikçisini ayarlar, varsa üzerine yazar."""
        with self._lock:
            self._suppliers[product] = supplier

    def get_supplier(self, product: Product) -> Optional[Supplier]:
        return self._suppliers.get(product)

    def get_product_suppliers(self) -> dict[Product, Supplier]:
        return self._suppliers

    # --- Değerlendirme ---

    @abstractmethod
    def _threshold(self, product: Product, warehouse: Warehouse) -> Threshold:
        """Ürün-depo çifti için geçerli eşiği döndürür."""
        ...

    @abstractmethod
    def _build_directive(
        self, product: Product, supplier: Supplier, warehouse: Warehouse
    ) -> ReorderDirective:
        ...

    def evaluate(self) -> list[ReorderDirective]:
        """Tüm stok kayıtlarını tarar ve eşik altındakiler için talimat üretir.

        Tedarikçisi olmayan bir ürün için talimat gerekirse MissingSupplierError
        fırlatılır ve hiçbir talimat döndürülmez.
        """
        with self._lock:
            directives: list[ReorderDirective] = []
            for product, warehouse_stock in self._stock_levels.items():
                for warehouse, quantity in warehouse_stock.items():
                    if quantity < self._threshold(product, warehouse):
                        supplier = self._suppliers.get(product)
                        if supplier is None:
                            logger.error("Tedarikçi bulunamadı: %s", product.name)
                            raise MissingSupplierError(product)
                        directives.append(self._build_directive(product, supplier, warehouse))
            return directives

    def monitor_stock_levels(self) -> str:
        """Talimatları satır satır birleştirilmiş metin olarak döndürür."""
        return render_directives(self.evaluate())

    def process(self) -> dict:
        """Ana işlem: stokları değerlendir, kararı logla ve özet döndür.

        Karar loglama (DynamoDB/S3) kilit bırakıldıktan sonra yapılır.
        """
        with self._lock:
            directives = self.evaluate()
            stock_entries = self._count_entries()

        if directives:
            self.log_decision(
                decision_type="reorder_evaluation",
                input_data={"variant": self.variant.value, "stock_entries": stock_entries},
                output_data={"directives": [d.to_dict() for d in directives]},
                reasoning=f"{len(directives)} stok kaydı yeniden sipariş eşiğinin altında.",
            )

        return {
            "agent": self.agent_name,
            "variant": self.variant.value,
            "stock_entries": stock_entries,
            "directives": len(directives),
            "report": render_directives(directives),
        }

    def _count_entries(self) -> int:
        return sum(len(stock) for stock in self._stock_levels.values())

    # --- Karar loglama ---

    def log_decision(
        self,
        decision_type: str,
        input_data: dict,
        output_data: dict,
        reasoning: str,
    ) -> AgentDecision:
        """Monitör kararını loglar, açıksa DynamoDB ve S3'e kaydeder."""
        decision = AgentDecision(
            decision_id=str(uuid.uuid4()),
            agent_name=self.agent_name,
            decision_type=decision_type,
            input_data=input_data,
            output_data=output_data,
            reasoning=reasoning,
        )
        self._decisions.append(decision)
        logger.info("Karar: %s - %s", decision_type, reasoning)

        if not self.decision_logging:
            return decision

        if self.decisions_table is not None:
            try:
                self.decisions_table.put_item(
                    Item={
                        "decision_id": decision.decision_id,
                        "agent_name": decision.agent_name,
                        "decision_type": decision.decision_type,
                        "input_data": json.dumps(input_data),
                        "output_data": json.dumps(output_data),
                        "reasoning": reasoning,
                        "timestamp": decision.timestamp,
                    }
                )
            except (BotoCoreError, ClientError) as e:
                logger.warning("Karar loglama hatası: %s", e)

        self.log_to_s3(
            {
                "decision_id": decision.decision_id,
                "agent_name": decision.agent_name,
                "decision_type": decision_type,
                "input_data": input_data,
                "output_data": output_data,
                "reasoning": reasoning,
                "timestamp": decision.timestamp,
            },
            prefix=f"{decision_type}-",
        )
        return decision

    def log_to_s3(self, log_data: dict, prefix: str = "") -> None:
        """Monitör logunu S3'e kaydeder."""
        if self.s3 is None:
            return
        timestamp = datetime.utcnow().strftime("%Y-%m-%dT%H-%M-%S")
        key = f"monitor-logs/{self.agent_name.lower().replace(' ', '-')}/{prefix}{timestamp}.json"
        try:
            # Bucket adı verilmediyse hesap numarasından türet
            if not self._s3_bucket_name:
                sts = boto3.client("sts", region_name=self.region_name)
                account_id = sts.get_caller_identity()["Account"]
                self._s3_bucket_name = f"reorder-monitor-{account_id}"
            self.s3.put_object(
                Bucket=self._s3_bucket_name,
                Key=key,
                Body=json.dumps(log_data, default=str),
            )
        except (BotoCoreError, ClientError) as e:
            logger.warning("S3 log hatası: %s", e)

    def get_decisions(self) -> list[AgentDecision]:
        return list(self._decisions)
