from __future__ import annotations

import pytest

from pdv.data import INITIAL_PRODUCTS, addon_products, is_sellable, option_choices, parse_product_line
from pdv.models import ProductType


def test_option_choices_by_slot():
    assert option_choices(INITIAL_PRODUCTS, "frutas") == ["Banana", "Uva", "Kiwi"]
    assert "Cupuaçu" in option_choices(INITIAL_PRODUCTS, "cremes")
    assert len(option_choices(INITIAL_PRODUCTS, "acompanhamentos")) == 30


def test_addons_and_sellable():
    assert [p.id for p in addon_products(INITIAL_PRODUCTS)] == [69, 70, 71, 72, 73, 74]
    assert not any(is_sellable(p) for p in addon_products(INITIAL_PRODUCTS))


class TestParseProductLine:
    def test_defaults_to_unit(self):
        product = parse_product_line("Picolé; 3,50 ;Sorvetes", 75)
        assert (product.id, product.name, product.price, product.category) == (75, "Picolé", 3.5, "Sorvetes")
        assert product.type is ProductType.UNIT

    def test_weight_type(self):
        assert parse_product_line("Sorvete kg;39.9;Açaí;WEIGHT", 76).type is ProductType.WEIGHT

    @pytest.mark.parametrize("text", ["Picolé;3,50", "Picolé;abc;Sorvetes", ";3;Sorvetes", "Picolé;-1;Sorvetes", "A;1;B;combo"])
    def test_rejects_bad_lines(self, text):
        with pytest.raises(ValueError):
            parse_product_line(text, 75)
