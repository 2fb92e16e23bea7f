"""Sale completion and the counter workflow."""

from __future__ import annotations

from datetime import datetime

import pytest

from pdv.cart import Cart
from pdv.checkout import (
    SELECTION_ADDED,
    SELECTION_NEEDS_CUSTOMIZATION,
    SELECTION_NEEDS_WEIGHT,
    SELECTION_REJECTED,
    CompleteSaleData,
    SaleError,
    SaleProcessor,
    complete_sale,
)
from pdv.models import OrderStatus, PaymentMethod, SaleItem, SelectedOptions
from pdv.stores import OrderStore, ProductCatalogStore, SalesStore

NOW = datetime(2024, 5, 10, 15, 0)


class TestCompleteSale:
    def test_completed_order_with_change(self, sorvete):
        data = CompleteSaleData("Ana", [SaleItem(product=sorvete, quantity=2)], PaymentMethod.CASH, cash_amount=20.0)
        sale = complete_sale(data, now=NOW)

        assert sale.status is OrderStatus.COMPLETED
        assert sale.total == pytest.approx(9.0)
        assert sale.change == pytest.approx(11.0)
        assert sale.completed_at == NOW
        assert len(sale.short_id) == 4

    def test_discount_reduces_total(self, sorvete):
        data = CompleteSaleData("Ana", [SaleItem(product=sorvete, quantity=2)], PaymentMethod.PIX, discount=1.0)
        sale = complete_sale(data, now=NOW)
        assert sale.total == pytest.approx(8.0)
        assert sale.change == 0

    @pytest.mark.parametrize(
        "customer, items, cash, message",
        [
            ("  ", True, None, "Nome do cliente é obrigatório"),
            ("Ana", False, None, "Pelo menos um item deve ser adicionado à venda"),
            ("Ana", True, 5.0, "Valor em dinheiro insuficiente"),
        ],
    )
    def test_invalid_sales_raise(self, sorvete, customer, items, cash, message):
        lines = [SaleItem(product=sorvete, quantity=2)] if items else []
        with pytest.raises(SaleError, match=message):
            complete_sale(CompleteSaleData(customer, lines, PaymentMethod.CASH, cash_amount=cash))


@pytest.fixture
def processor(storage):
    return SaleProcessor(ProductCatalogStore(storage), OrderStore(storage), SalesStore(storage), Cart(storage=storage))


class TestSaleProcessor:
    def test_selection_outcomes(self, processor, sorvete, acai_peso, nutella):
        monte = processor.products.get_product(26)
        assert processor.select_product(acai_peso) == SELECTION_NEEDS_WEIGHT
        assert processor.select_product(monte) == SELECTION_NEEDS_CUSTOMIZATION
        assert processor.select_product(nutella) == SELECTION_REJECTED
        assert processor.select_product(sorvete) == SELECTION_ADDED
        assert processor.cart.items[0].quantity == 1

    def test_confirm_weight_and_customization(self, processor, acai_peso, nutella):
        monte = processor.products.get_product(26)
        assert processor.confirm_weight(acai_peso, 350) == SELECTION_ADDED
        options = SelectedOptions(frutas=["Kiwi"], cremes=["Cupuaçu"])
        assert processor.confirm_customization(monte, options, [nutella]) == SELECTION_ADDED

        weighed, cup = processor.cart.items
        assert weighed.weight == 350
        assert cup.selected_options.frutas == ["Kiwi"]
        assert processor.cart.total_value == pytest.approx(47.0 * 0.35 + 12.0 + 3.0)

    def test_rejected_weight_reports_cart_error(self, processor, acai_peso):
        assert processor.confirm_weight(acai_peso, 20000) == SELECTION_REJECTED
        assert processor.last_error() == "Peso máximo é 10000g"

    def test_create_order_moves_cart_into_comanda(self, processor, sorvete):
        processor.select_product(sorvete)
        result = processor.create_order("Ana")

        assert result.success
        assert result.message == "Comanda criada para Ana"
        assert result.order.items[0].product == sorvete
        assert processor.cart.is_empty

    def test_create_order_requires_name(self, processor):
        result = processor.create_order("")
        assert not result.success
        assert result.message == "Nome do cliente é obrigatório"

    def test_items_go_to_selected_comanda(self, processor, sorvete, milkshake):
        order = processor.create_order("Ana").order
        processor.select_product(milkshake, order.id)
        assert processor.orders.get_order(order.id).items[0].product == milkshake
        assert processor.cart.is_empty

    def test_pay_comanda_with_cash(self, processor, sorvete):
        order = processor.create_order("Ana").order
        processor.select_product(sorvete, order.id)
        processor.select_product(sorvete, order.id)

        result = processor.handle_payment(PaymentMethod.CASH, cash_amount=10.0, order_id=order.id, now=NOW)

        assert result.success
        assert result.message == "Venda finalizada para Ana. Total: R$ 9,00. Troco: R$ 1,00"
        assert processor.orders.get_order(order.id) is None
        assert processor.sales.sales[0].customer_name == "Ana"
        assert processor.sales.sales[0].payment_method is PaymentMethod.CASH

    def test_pay_cart_as_direct_sale(self, processor, milkshake):
        processor.select_product(milkshake)
        result = processor.handle_payment(PaymentMethod.PIX, now=NOW)

        assert result.message == "Venda finalizada para Venda Direta. Total: R$ 10,00"
        assert processor.cart.is_empty
        assert processor.sales.total_revenue == pytest.approx(10.0)

    def test_failed_payment_keeps_everything(self, processor, milkshake):
        processor.select_product(milkshake)
        result = processor.handle_payment(PaymentMethod.CASH, cash_amount=5.0)

        assert not result.success
        assert result.message == "Valor em dinheiro insuficiente"
        assert len(processor.cart.items) == 1
        assert processor.sales.sales == []

    def test_empty_payment_fails(self, processor):
        result = processor.handle_payment(PaymentMethod.DEBIT)
        assert result.message == "Pelo menos um item deve ser adicionado à venda"

    def test_update_line_in_comanda_keeps_quantity(self, processor, nutella, cookies):
        monte = processor.products.get_product(26)
        order = processor.create_order("Ana").order
        processor.confirm_customization(monte, SelectedOptions(frutas=["Kiwi"]), [nutella], order.id)

        outcome = processor.update_line(0, SelectedOptions(frutas=["Uva"]), [nutella, cookies], order.id)

        line = processor.orders.get_order(order.id).items[0]
        assert outcome == SELECTION_ADDED
        assert line.quantity == 1
        assert line.selected_options.frutas == ["Uva"]
        assert line.addons == [nutella, cookies]

    def test_update_line_in_cart(self, processor, nutella):
        monte = processor.products.get_product(26)
        processor.confirm_customization(monte, SelectedOptions(), [])

        assert processor.update_line(0, SelectedOptions(cremes=["Ninho"]), [nutella]) == SELECTION_ADDED
        assert processor.cart.items[0].addons == [nutella]

    def test_update_missing_line_is_rejected(self, processor):
        order = processor.create_order("Ana").order
        assert processor.update_line(2, SelectedOptions(), [], order.id) == SELECTION_REJECTED
        assert processor.last_error() == "Item não encontrado"
