"""Shared fixtures for the PDV tests."""

from __future__ import annotations

from datetime import datetime

import pytest

from pdv import config
from pdv.models import Order, OrderStatus, PaymentMethod, Product, ProductType, SaleItem
from pdv.persistence import MemoryStorage


@pytest.fixture(autouse=True)
def debug_log_in_tmp(tmp_path, monkeypatch):
    """Keep the debug log out of /tmp during tests."""
    path = tmp_path / "pdv-debug.log"
    monkeypatch.setattr(config, "DEBUG_LOG_PATH", str(path))
    return path


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def sorvete():
    return Product(id=1, name="Tapioca", price=4.5, category="Sorvetes", type=ProductType.UNIT)


@pytest.fixture
def milkshake():
    return Product(id=15, name="Milkshake Chocolate 300ml", price=10.0, category="Milkshakes", type=ProductType.UNIT)


@pytest.fixture
def acai_peso():
    return Product(id=25, name="Açaí/Sorvete no Peso", price=47.0, category="Açaí", type=ProductType.WEIGHT)


@pytest.fixture
def nutella():
    return Product(id=70, name="Nutella", price=3.0, category="Adicionais", type=ProductType.ADDON)


@pytest.fixture
def cookies():
    return Product(id=69, name="Creme de Cookies", price=3.0, category="Adicionais", type=ProductType.ADDON)


@pytest.fixture
def make_sale():
    """Factory for completed sales at a given time."""

    def _make(
        sale_id: str,
        items: list[SaleItem],
        total: float,
        completed_at: datetime,
        payment_method: PaymentMethod | None = PaymentMethod.CASH,
    ) -> Order:
        return Order(
            id=sale_id,
            customer_name="Cliente",
            items=items,
            status=OrderStatus.COMPLETED,
            created_at=completed_at,
            updated_at=completed_at,
            payment_method=payment_method,
            total=total,
            completed_at=completed_at,
        )

    return _make
