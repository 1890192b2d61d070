"""Yeniden sipariş hataları."""

from __future__ import annotations

from typing import Optional

from src.models.inventory import Product


class ReorderError(Exception):
    """Stok defteri ve yeniden sipariş hatalarının temel sınıfı."""
    pass


class InvalidArgumentError(ReorderError, ValueError):
    """Geçersiz girdi (ör. negatif stok miktarı)."""
    pass


class MissingSupplierError(ReorderError, LookupError):
    """Yeniden sipariş gereken ürün için tedarikçi atanmamış."""

    def __init__(self, product: Product, message: Optional[str] = None):
        self.product = product
        super().__init__(message or f"No supplier available for product: {product.name}")
