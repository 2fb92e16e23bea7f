"""Catalog, comanda and sales stores."""

from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime

import pytest

from pdv.config import ORDERS_STORAGE_KEY, PRODUCTS_STORAGE_KEY, SALES_STORAGE_KEY
from pdv.data import INITIAL_PRODUCTS
from pdv.models import OrderStatus, ProductType, SaleItem
from pdv.persistence import MemoryStorage
from pdv.stores import OrderStore, ProductCatalogStore, SalesStore


class BrokenStorage(MemoryStorage):
    def set(self, key: str, value: str) -> None:
        raise OSError("disk full")


class FlakyStorage(MemoryStorage):
    """Fails the first ``failures`` writes, then behaves."""

    def __init__(self, failures: int = 1) -> None:
        super().__init__()
        self.failures = failures

    def set(self, key: str, value: str) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise OSError("disk busy")
        super().set(key, value)


class TestProductCatalogStore:
    def test_starts_with_initial_catalog(self):
        store = ProductCatalogStore()
        assert len(store.products) == 74
        assert store.get_product(25).type is ProductType.WEIGHT
        assert store.get_product(27).options.acompanhamentos == 4

    def test_search_is_case_insensitive_on_name_or_category(self):
        store = ProductCatalogStore()
        names = [p.name for p in store.search_products("MILKSHAKE OREO")]
        assert names == ["Milkshake Oreo 300ml", "Milkshake Oreo 500ml"]
        assert {p.category for p in store.search_products("frutas")} == {"Frutas"}

    def test_empty_query_matches_everything(self):
        store = ProductCatalogStore()
        assert store.search_products("") == store.products

    def test_categories_in_first_seen_order(self):
        categories = ProductCatalogStore().get_categories()
        assert categories[:3] == ["Sorvetes", "Milkshakes", "Milkshakes Premium"]
        assert categories[-1] == "Adicionais"

    def test_sellable_products_exclude_options_and_addons(self):
        sellable = ProductCatalogStore().sellable_products()
        assert all(p.type in (ProductType.UNIT, ProductType.WEIGHT) for p in sellable)
        assert len(sellable) == 28

    def test_mutations_persist_under_products_key(self, storage, sorvete):
        store = ProductCatalogStore(storage)
        store.set_products([sorvete])
        store.update_product(replace(sorvete, price=5.0))
        store.add_product(replace(sorvete, id=2, name="Oreo"))
        store.remove_product(1)

        saved = json.loads(storage.get(PRODUCTS_STORAGE_KEY))
        assert [entry["name"] for entry in saved] == ["Oreo"]
        assert ProductCatalogStore(storage).products[0].price == 5.0

    def test_load_products_replaces_catalog(self, sorvete, milkshake):
        store = ProductCatalogStore()
        store.load_products([sorvete, milkshake])
        assert store.get_products_by_category("Milkshakes") == [milkshake]
        assert store.get_categories() == ["Sorvetes", "Milkshakes"]

    def test_reset_and_next_id(self, storage, sorvete):
        store = ProductCatalogStore(storage)
        store.set_products([sorvete])
        assert store.next_id() == 2
        store.reset_to_initial_products()
        assert store.products == INITIAL_PRODUCTS
        assert store.next_id() == 75

    def test_corrupt_slot_falls_back_to_initial_catalog(self):
        store = ProductCatalogStore(MemoryStorage({PRODUCTS_STORAGE_KEY: "not json"}))
        assert len(store.products) == 74
        assert store.error is not None


class TestOrderStore:
    def test_add_order_generates_id_and_timestamps(self, storage, sorvete):
        now = datetime(2024, 5, 10, 12, 0)
        store = OrderStore(storage)
        order = store.add_order("  Ana ", [SaleItem(product=sorvete, quantity=1)], now=now)

        assert order is not None
        assert order.customer_name == "Ana"
        assert order.status is OrderStatus.OPEN
        assert order.created_at == order.updated_at == now
        assert store.error is None
        assert json.loads(storage.get(ORDERS_STORAGE_KEY))[0]["customerName"] == "Ana"

    def test_blank_customer_name_is_rejected(self):
        store = OrderStore()
        assert store.add_order("   ") is None
        assert store.error == "Nome do cliente é obrigatório"
        assert store.orders == []

    def test_invalid_status_is_rejected(self):
        store = OrderStore()
        order = store.add_order("Ana")
        assert store.update_order(order.id, status="paid") is None
        assert store.error == "Status do pedido deve ser 'open' ou 'completed'"

    def test_update_order_bumps_updated_at(self):
        store = OrderStore()
        order = store.add_order("Ana", now=datetime(2024, 5, 10, 12, 0))
        later = datetime(2024, 5, 10, 12, 30)
        updated = store.update_order(order.id, now=later, status="completed")

        assert updated.status is OrderStatus.COMPLETED
        assert updated.updated_at == later
        assert updated.created_at == order.created_at
        assert store.open_orders == []

    def test_add_and_remove_items(self, sorvete, milkshake):
        store = OrderStore()
        order = store.add_order("Ana")
        store.add_item_to_order(order.id, SaleItem(product=sorvete, quantity=1))
        store.add_item_to_order(order.id, SaleItem(product=milkshake, quantity=1))
        updated = store.remove_item_from_order(order.id, 0)

        assert [item.product.name for item in updated.items] == ["Milkshake Chocolate 300ml"]
        assert store.remove_item_from_order(order.id, 5) is None
        assert store.error == "Item não encontrado"
        assert store.add_item_to_order("missing", SaleItem(product=sorvete)) is None
        assert store.error == "Comanda não encontrada"

    def test_total_value_uses_stored_total_or_price_times_quantity(self, sorvete):
        store = OrderStore()
        store.add_order("Ana", [SaleItem(product=sorvete, quantity=2)])
        priced = store.add_order("Bia")
        store.update_order(priced.id, total=12.0)
        assert store.total_value == pytest.approx(9.0 + 12.0)
        assert store.order_count == 2

    def test_remove_and_clear(self, storage):
        store = OrderStore(storage)
        first = store.add_order("Ana")
        store.add_order("Bia")
        store.remove_order(first.id)
        assert store.get_order(first.id) is None
        store.clear_orders()
        assert OrderStore(storage).orders == []

    def test_storage_failure_keeps_memory_state(self):
        store = OrderStore(BrokenStorage())
        order = store.add_order("Ana")
        assert store.get_order(order.id) is not None
        assert store.error == "Erro ao salvar orders no storage"
        store.clear_error()
        assert store.error is None

    def test_update_unknown_order_reports_and_skips_write(self, storage):
        store = OrderStore(storage)
        store.add_order("Ana")
        saved = storage.get(ORDERS_STORAGE_KEY)

        assert store.update_order("missing", status="completed") is None
        assert store.error == "Comanda não encontrada"
        assert storage.get(ORDERS_STORAGE_KEY) == saved

    def test_update_item_in_order(self, sorvete, nutella):
        store = OrderStore()
        order = store.add_order("Ana", [SaleItem(product=sorvete, quantity=1)])
        richer = SaleItem(product=sorvete, quantity=2, addons=[nutella])

        updated = store.update_item_in_order(order.id, 0, richer)

        assert updated.items == [richer]
        assert store.get_order(order.id).items[0].addons == [nutella]
        assert store.update_item_in_order(order.id, 3, richer) is None
        assert store.error == "Item não encontrado"


class TestStorageRecovery:
    def test_catalog_error_clears_after_successful_write(self, sorvete):
        store = ProductCatalogStore(FlakyStorage())
        store.add_product(replace(sorvete, id=100))
        assert store.error == f"Erro ao salvar {PRODUCTS_STORAGE_KEY} no storage"

        store.add_product(replace(sorvete, id=101))
        assert store.error is None

    def test_sales_error_clears_after_successful_write(self, make_sale, sorvete):
        store = SalesStore(FlakyStorage())
        store.add_sale(make_sale("s1", [SaleItem(product=sorvete)], 4.5, datetime(2024, 5, 10, 12)))
        assert store.error is not None

        store.add_sale(make_sale("s2", [SaleItem(product=sorvete)], 4.5, datetime(2024, 5, 10, 13)))
        assert store.error is None
        assert store.total_sales == 2


class TestSalesStore:
    def test_add_sale_forces_completed_status(self, storage, make_sale, sorvete):
        sale = make_sale("s1", [SaleItem(product=sorvete, quantity=1)], 4.5, datetime(2024, 5, 10, 12))
        store = SalesStore(storage)
        store.add_sale(replace(sale, status=OrderStatus.OPEN))

        assert store.get_sale("s1").status is OrderStatus.COMPLETED
        assert json.loads(storage.get(SALES_STORAGE_KEY))[0]["status"] == "completed"

    def test_metrics(self, make_sale, sorvete):
        store = SalesStore()
        assert store.average_ticket == 0
        store.add_sale(make_sale("s1", [SaleItem(product=sorvete)], 10.0, datetime(2024, 5, 10, 12)))
        store.add_sale(make_sale("s2", [SaleItem(product=sorvete)], 20.0, datetime(2024, 5, 10, 13)))

        assert store.total_sales == 2
        assert store.total_revenue == pytest.approx(30.0)
        assert store.average_ticket == pytest.approx(15.0)

    def test_cancel_and_clear(self, make_sale, sorvete):
        store = SalesStore()
        store.add_sale(make_sale("s1", [SaleItem(product=sorvete)], 10.0, datetime(2024, 5, 10, 12)))
        store.cancel_sale("s1")
        assert store.sales == []
        store.add_sale(make_sale("s2", [SaleItem(product=sorvete)], 10.0, datetime(2024, 5, 10, 12)))
        store.clear_sales()
        assert store.total_sales == 0
