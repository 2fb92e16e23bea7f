"""Line and order totals."""

from __future__ import annotations

import pytest

from pdv.models import SaleItem
from pdv.pricing import calculate_item_total, calculate_order_total, cart_statistics


class TestItemTotal:
    def test_unit_item_uses_quantity(self, sorvete):
        assert calculate_item_total(SaleItem(product=sorvete, quantity=2)) == pytest.approx(9.0)

    def test_missing_quantity_counts_as_one(self, sorvete):
        assert calculate_item_total(SaleItem(product=sorvete)) == pytest.approx(4.5)

    def test_weight_item_priced_per_kilogram(self, acai_peso):
        assert calculate_item_total(SaleItem(product=acai_peso, weight=500)) == pytest.approx(23.5)

    def test_weight_item_without_weight_falls_back_to_quantity(self, acai_peso):
        assert calculate_item_total(SaleItem(product=acai_peso, quantity=1)) == pytest.approx(47.0)

    def test_addons_follow_quantity(self, sorvete, nutella, cookies):
        item = SaleItem(product=sorvete, quantity=2, addons=[nutella, cookies])
        assert calculate_item_total(item) == pytest.approx(21.0)

    def test_addons_on_weighed_cup_are_not_scaled_by_weight(self, acai_peso, nutella):
        item = SaleItem(product=acai_peso, quantity=1, weight=300, addons=[nutella])
        assert calculate_item_total(item) == pytest.approx(47.0 * 0.3 + 3.0)


class TestOrderTotal:
    def test_empty_order_is_zero(self):
        assert calculate_order_total([]) == 0

    def test_sums_lines(self, sorvete, acai_peso):
        items = [SaleItem(product=sorvete, quantity=2), SaleItem(product=acai_peso, weight=500)]
        assert calculate_order_total(items) == pytest.approx(9.0 + 23.5)


class TestCartStatistics:
    def test_empty(self):
        stats = cart_statistics([])
        assert stats.unique_items == 0
        assert stats.most_expensive_item is None
        assert stats.total_weight is None

    def test_summary(self, sorvete, milkshake, acai_peso):
        items = [
            SaleItem(product=sorvete, quantity=2),
            SaleItem(product=milkshake, quantity=1),
            SaleItem(product=acai_peso, quantity=1, weight=400),
        ]
        stats = cart_statistics(items, tax_rate=0.1)

        assert stats.unique_items == 3
        assert stats.total_quantity == 4
        assert stats.subtotal == pytest.approx(9.0 + 10.0 + 18.8)
        assert stats.total == pytest.approx(stats.subtotal * 1.1)
        assert stats.most_expensive_item is items[2]
        assert stats.cheapest_item is items[0]
        assert stats.categories == ["Sorvetes", "Milkshakes", "Açaí"]
        assert stats.total_weight == 400
