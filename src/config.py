"""Monitör konfigürasyonu - ortam değişkenleri ve YAML politika dosyaları."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv

from src.agents.base_monitor import BaseMonitor
from src.agents.errors import InvalidArgumentError, ReorderError
from src.agents.reorder_monitor import RegionalReorderMonitor, create_monitor
from src.models.inventory import PolicyVariant, Product, Supplier, Warehouse

logger = logging.getLogger(__name__)

# Proje kökündeki .env dosyası
_DEFAULT_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def configure_logging(level: Union[str, int] = "INFO") -> None:
    """Uygulama genelinde log formatını ayarlar."""
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


@dataclass
class MonitorSettings:
    policy: PolicyVariant = PolicyVariant.GLOBAL
    region_name: str = "us-west-2"
    decision_logging: bool = False
    decision_table: str = "AgentDecisions"
    log_bucket: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_path: Optional[Union[str, Path]] = None) -> "MonitorSettings":
        """Ayarları ortam değişkenlerinden okur.

        Proje kökündeki (veya verilen) .env dosyası önce yüklenir, mevcut ortam
        değişkenlerinin üzerine yazılmaz.
        """
        load_dotenv(env_path or _DEFAULT_ENV_PATH, override=False)

        raw_policy = os.environ.get("REORDER_POLICY", PolicyVariant.GLOBAL.value).strip().lower()
        try:
            policy = PolicyVariant(raw_policy)
        except ValueError:
            raise InvalidArgumentError(f"Unknown reorder policy variant: {raw_policy}") from None

        return cls(
            policy=policy,
            region_name=os.environ.get("AWS_DEFAULT_REGION", "us-west-2"),
            decision_logging=os.environ.get("DECISION_LOGGING", "").strip().lower() in _TRUE_VALUES,
            decision_table=os.environ.get("DECISION_TABLE", "AgentDecisions"),
            log_bucket=os.environ.get("DECISION_LOG_BUCKET") or None,
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )

    def build_monitor(self, **kwargs: Any) -> BaseMonitor:
        """Ayarlara göre monitör oluşturur. AWS istemcileri kwargs ile verilebilir."""
        return create_monitor(
            self.policy,
            region_name=self.region_name,
            decision_logging=self.decision_logging,
            decision_table=self.decision_table,
            log_bucket=self.log_bucket,
            **kwargs,
        )


def load_policy_file(path: Union[str, Path], monitor: BaseMonitor) -> BaseMonitor:
    """YAML politika dosyasını okuyup monitöre uygular.

    Dosya yapısı::

        variant: global | regional      # opsiyonel, monitörle uyuşmalı
        warehouses:
          - {name: Warehouse 1, location: Region 1, distance: 5.0}
        products:
          - code: P001
            name: Product 1
            supplier: Supplier 1
            threshold: 20               # global
            reorder_quantity: 50        # global
            lead_time: 7.0              # bölgesel
            regions:                    # bölgesel
              Region 1: {threshold: 20, reorder_quantity: 50}
        stock:
          - {product: P001, warehouse: Warehouse 1, quantity: 15}

    Tüm değerler monitörün public metodlarıyla uygulanır, bu yüzden negatif
    stok gibi hatalar normal şekilde fırlatılır. Eksik alan, yanlış tip veya
    sayıya çevrilemeyen değer içeren dosyalar InvalidArgumentError ile reddedilir.
    """
    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidArgumentError(f"Policy file {path} is not valid YAML: {e}") from e

    try:
        products, warehouses = _apply_policy(_mapping(document, "policy document"), monitor)
    except ReorderError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Malformed policy file {path}: {e!r}") from e

    logger.info(
        "Politika dosyası yüklendi: %s (%d ürün, %d depo)",
        path,
        len(products),
        len(warehouses),
    )
    return monitor


def _mapping(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise InvalidArgumentError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


def _apply_policy(
    document: dict, monitor: BaseMonitor
) -> tuple[dict[str, Product], dict[str, Warehouse]]:
    declared = document.get("variant")
    if declared is not None and str(declared).strip().lower() != monitor.variant.value:
        raise InvalidArgumentError(
            f"Policy file variant {declared!r} does not match monitor variant {monitor.variant.value!r}"
        )

    regional = isinstance(monitor, RegionalReorderMonitor)

    warehouses: dict[str, Warehouse] = {}
    for item in document.get("warehouses") or []:
        item = _mapping(item, "warehouse entry")
        warehouse = Warehouse(
            name=item["name"],
            location=item.get("location", ""),
            distance=float(item.get("distance", 0.0)),
        )
        warehouses[warehouse.name] = warehouse

    products: dict[str, Product] = {}
    for item in document.get("products") or []:
        item = _mapping(item, "product entry")
        product = Product(code=item["code"], name=item.get("name", item["code"]))
        products[product.code] = product

        if "supplier" in item:
            monitor.assign_supplier(product, Supplier(name=item["supplier"]))

        if regional:
            if "threshold" in item or "reorder_quantity" in item:
                raise InvalidArgumentError(
                    f"Product {product.code}: regional policy expects per-region values"
                )
            regions = _mapping(item.get("regions") or {}, f"regions of {product.code}")
            for region, policy in regions.items():
                policy = _mapping(policy, f"region {region!r} of {product.code}")
                if "threshold" in policy:
                    monitor.set_threshold(product, region, int(policy["threshold"]))
                if "reorder_quantity" in policy:
                    monitor.set_reorder_quantity(product, region, int(policy["reorder_quantity"]))
            if "lead_time" in item:
                monitor.set_lead_time(product, float(item["lead_time"]))
        else:
            if "regions" in item or "lead_time" in item:
                raise InvalidArgumentError(
                    f"Product {product.code}: global policy does not accept regions or lead times"
                )
            if "threshold" in item:
                monitor.set_threshold(product, int(item["threshold"]))
            if "reorder_quantity" in item:
                monitor.set_reorder_quantity(product, int(item["reorder_quantity"]))

    for entry in document.get("stock") or []:
        entry = _mapping(entry, "stock entry")
        product = products.get(entry["product"])
        warehouse = warehouses.get(entry["warehouse"])
        if product is None or warehouse is None:
            raise InvalidArgumentError(
                f"Unknown product or warehouse in stock entry: {entry['product']}/{entry['warehouse']}"
            )
        monitor.record_stock(product, warehouse, int(entry["quantity"]))

    return products, warehouses
