"""Persisted state containers for the catalog, open orders and completed sales."""

from __future__ import annotations

import json
import sqlite3
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Generic, TypeVar
from uuid import uuid4

from pdv.config import ORDERS_STORAGE_KEY, PRODUCTS_STORAGE_KEY, SALES_STORAGE_KEY
from pdv.data import INITIAL_PRODUCTS, get_categories, get_products_by_category, is_sellable, search_products
from pdv.debug_log import log_debug
from pdv.models import Order, OrderStatus, Product, SaleItem
from pdv.persistence import KeyValueStorage

T = TypeVar("T")

# Everything a broken slot or unavailable database can throw at us.
STORAGE_ERRORS = (sqlite3.Error, OSError, ValueError, KeyError, TypeError)


class PersistedStore(Generic[T]):
    """
    A list that is replaced wholesale on every mutation and written to one storage key.

    Subclasses set ``storage_key`` and override ``_decode`` and ``_encode``.

    Storage failures never raise: they are logged and kept in ``error`` until
    the next write attempt, while the in-memory list stays authoritative.
    """

    storage_key: str = ""

    def __init__(self, storage: KeyValueStorage | None, default: Callable[[], list[T]] = list) -> None:
        self.storage = storage
        self.error: str | None = None
        self._items: list[T] = self._load(default)

    def _decode(self, raw: dict[str, Any]) -> T:
        raise NotImplementedError

    def _encode(self, item: T) -> dict[str, Any]:
        raise NotImplementedError

    def _load(self, default: Callable[[], list[T]]) -> list[T]:
        if self.storage is None:
            return default()
        try:
            raw = self.storage.get(self.storage_key)
            if raw is None:
                return default()
            return [self._decode(entry) for entry in json.loads(raw)]
        except STORAGE_ERRORS as exc:
            self.error = f"Erro ao carregar {self.storage_key} do storage"
            log_debug(f"store_load_failed key={self.storage_key!r} error={exc!r}")
            return default()

    def _commit(self, items: list[T]) -> None:
        self._items = items
        self.error = None
        if self.storage is None:
            return
        try:
            self.storage.set(self.storage_key, json.dumps([self._encode(item) for item in items]))
        except STORAGE_ERRORS as exc:
            self.error = f"Erro ao salvar {self.storage_key} no storage"
            log_debug(f"store_save_failed key={self.storage_key!r} error={exc!r}")

    def clear_error(self) -> None:
        self.error = None


class ProductCatalogStore(PersistedStore[Product]):
    storage_key = PRODUCTS_STORAGE_KEY

    def __init__(self, storage: KeyValueStorage | None = None) -> None:
        super().__init__(storage, default=lambda: list(INITIAL_PRODUCTS))

    def _decode(self, raw: dict[str, Any]) -> Product:
        return Product.from_dict(raw)

    def _encode(self, item: Product) -> dict[str, Any]:
        return item.to_dict()

    @property
    def products(self) -> list[Product]:
        return self._items

    def set_products(self, products: list[Product]) -> None:
        self._commit(list(products))

    def load_products(self, products: list[Product]) -> None:
        self.set_products(products)

    def add_product(self, product: Product) -> None:
        self._commit([*self._items, product])

    def update_product(self, product: Product) -> None:
        self._commit([product if p.id == product.id else p for p in self._items])

    def remove_product(self, product_id: int) -> None:
        self._commit([p for p in self._items if p.id != product_id])

    def reset_to_initial_products(self) -> None:
        self._commit(list(INITIAL_PRODUCTS))

    def get_product(self, product_id: int) -> Product | None:
        return next((p for p in self._items if p.id == product_id), None)

    def next_id(self) -> int:
        return max((p.id for p in self._items), default=0) + 1

    def search_products(self, query: str) -> list[Product]:
        return search_products(self._items, query)

    def get_products_by_category(self, category: str) -> list[Product]:
        return get_products_by_category(self._items, category)

    def get_categories(self) -> list[str]:
        return get_categories(self._items)

    def sellable_products(self) -> list[Product]:
        return [p for p in self._items if is_sellable(p)]


def _is_valid_status(value: Any) -> bool:
    try:
        OrderStatus(value)
    except ValueError:
        return False
    return True


def _validate_order_fields(changes: dict[str, Any], partial: bool) -> str | None:
    """Return a user-facing message for the first invalid field, or None."""
    if not partial or "customer_name" in changes:
        if not str(changes.get("customer_name") or "").strip():
            return "Nome do cliente é obrigatório"
    if not partial or "items" in changes:
        if not isinstance(changes.get("items"), list):
            return "Items do pedido devem ser um array"
    if "status" in changes and not _is_valid_status(changes["status"]):
        return "Status do pedido deve ser 'open' ou 'completed'"
    return None


class OrderStore(PersistedStore[Order]):
    """Open comandas."""

    storage_key = ORDERS_STORAGE_KEY

    def __init__(self, storage: KeyValueStorage | None = None, validate: bool = True) -> None:
        self.validate = validate
        super().__init__(storage)

    def _decode(self, raw: dict[str, Any]) -> Order:
        return Order.from_dict(raw)

    def _encode(self, item: Order) -> dict[str, Any]:
        return item.to_dict()

    @property
    def orders(self) -> list[Order]:
        return self._items

    @property
    def order_count(self) -> int:
        return len(self._items)

    @property
    def total_value(self) -> float:
        """Stored totals, or price x quantity for orders not yet priced."""
        value = 0.0
        for order in self._items:
            if order.total:
                value += order.total
            else:
                value += sum(item.product.price * (item.quantity or 1) for item in order.items)
        return value

    @property
    def open_orders(self) -> list[Order]:
        return [order for order in self._items if order.status is OrderStatus.OPEN]

    def add_order(
        self,
        customer_name: str,
        items: list[SaleItem] | None = None,
        status: OrderStatus = OrderStatus.OPEN,
        now: datetime | None = None,
    ) -> Order | None:
        items = list(items) if items is not None else []
        if self.validate:
            message = _validate_order_fields({"customer_name": customer_name, "items": items}, partial=False)
            if message:
                self.error = message
                return None

        now = now or datetime.now()
        order = Order(
            id=uuid4().hex,
            customer_name=customer_name.strip(),
            items=items,
            status=OrderStatus(status),
            created_at=now,
            updated_at=now,
        )
        self._commit([*self._items, order])
        return order

    def update_order(self, order_id: str, now: datetime | None = None, **changes: Any) -> Order | None:
        if self.validate:
            message = _validate_order_fields(changes, partial=True)
            if message:
                self.error = message
                return None
        if "status" in changes:
            changes["status"] = OrderStatus(changes["status"])

        current = self.get_order(order_id)
        if current is None:
            self.error = "Comanda não encontrada"
            return None

        updated = replace(current, **changes, updated_at=now or datetime.now())
        self._commit([updated if order.id == order_id else order for order in self._items])
        return updated

    def update_item_in_order(self, order_id: str, index: int, item: SaleItem) -> Order | None:
        order = self.get_order(order_id)
        if order is None or not (0 <= index < len(order.items)):
            self.error = "Item não encontrado"
            return None
        items = list(order.items)
        items[index] = item
        return self.update_order(order_id, items=items)

    def add_item_to_order(self, order_id: str, item: SaleItem) -> Order | None:
        order = self.get_order(order_id)
        if order is None:
            self.error = "Comanda não encontrada"
            return None
        return self.update_order(order_id, items=[*order.items, item])

    def remove_item_from_order(self, order_id: str, index: int) -> Order | None:
        order = self.get_order(order_id)
        if order is None or not (0 <= index < len(order.items)):
            self.error = "Item não encontrado"
            return None
        return self.update_order(order_id, items=[it for idx, it in enumerate(order.items) if idx != index])

    def remove_order(self, order_id: str) -> None:
        self._commit([order for order in self._items if order.id != order_id])

    def get_order(self, order_id: str) -> Order | None:
        return next((order for order in self._items if order.id == order_id), None)

    def clear_orders(self) -> None:
        self._commit([])


class SalesStore(PersistedStore[Order]):
    """Completed sales history, the source of the sales report."""

    storage_key = SALES_STORAGE_KEY

    def __init__(self, storage: KeyValueStorage | None = None) -> None:
        super().__init__(storage)

    def _decode(self, raw: dict[str, Any]) -> Order:
        return Order.from_dict(raw)

    def _encode(self, item: Order) -> dict[str, Any]:
        return item.to_dict()

    @property
    def sales(self) -> list[Order]:
        return self._items

    def add_sale(self, sale: Order) -> None:
        self._commit([*self._items, replace(sale, status=OrderStatus.COMPLETED)])

    def remove_sale(self, sale_id: str) -> None:
        self._commit([sale for sale in self._items if sale.id != sale_id])

    def cancel_sale(self, sale_id: str) -> None:
        self.remove_sale(sale_id)

    def get_sale(self, sale_id: str) -> Order | None:
        return next((sale for sale in self._items if sale.id == sale_id), None)

    def clear_sales(self) -> None:
        self._commit([])

    @property
    def total_sales(self) -> int:
        return len(self._items)

    @property
    def total_revenue(self) -> float:
        return sum((sale.total or 0 for sale in self._items), 0.0)

    @property
    def average_ticket(self) -> float:
        return self.total_revenue / self.total_sales if self.total_sales > 0 else 0.0
