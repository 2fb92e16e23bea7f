"""Sale finalization and the counter workflow behind the UI event handlers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import uuid4

from pdv.cart import Cart
from pdv.config import DIRECT_SALE_CUSTOMER
from pdv.debug_log import log_debug
from pdv.formatting import format_currency
from pdv.models import Order, OrderStatus, PaymentMethod, Product, ProductType, SaleItem, SelectedOptions
from pdv.pricing import calculate_order_total
from pdv.stores import OrderStore, ProductCatalogStore, SalesStore


class SaleError(ValueError):
    """Raised when sale data cannot be turned into a completed order."""


@dataclass
class CompleteSaleData:
    customer_name: str
    items: list[SaleItem]
    payment_method: PaymentMethod
    cash_amount: float | None = None
    discount: float = 0.0


def complete_sale(data: CompleteSaleData, now: datetime | None = None) -> Order:
    """Validate and price a sale, returning the completed order."""
    if not data.customer_name.strip():
        raise SaleError("Nome do cliente é obrigatório")
    if not data.items:
        raise SaleError("Pelo menos um item deve ser adicionado à venda")

    final_total = calculate_order_total(data.items) - (data.discount or 0)
    if data.payment_method is PaymentMethod.CASH and data.cash_amount:
        if data.cash_amount < final_total:
            raise SaleError("Valor em dinheiro insuficiente")

    now = now or datetime.now()
    return Order(
        id=uuid4().hex,
        customer_name=data.customer_name,
        items=list(data.items),
        status=OrderStatus.COMPLETED,
        created_at=now,
        updated_at=now,
        payment_method=data.payment_method,
        total=final_total,
        completed_at=now,
        change=data.cash_amount - final_total if data.cash_amount else 0.0,
    )


@dataclass
class ProcessResult:
    success: bool
    message: str
    order: Order | None = None
    warnings: list[str] = field(default_factory=list)


# What select_product asks the UI to do next.
SELECTION_ADDED = "added"
SELECTION_NEEDS_WEIGHT = "weight"
SELECTION_NEEDS_CUSTOMIZATION = "customize"
SELECTION_REJECTED = "rejected"


class SaleProcessor:
    """
    Routes counter actions to the cart, the open comandas and the sales history.

    When ``order_id`` is given, new lines go to that open comanda; otherwise
    they go to the cart of a direct sale.
    """

    def __init__(self, products: ProductCatalogStore, orders: OrderStore, sales: SalesStore, cart: Cart) -> None:
        self.products = products
        self.orders = orders
        self.sales = sales
        self.cart = cart

    def select_product(self, product: Product, order_id: str | None = None) -> str:
        if product.type is ProductType.WEIGHT:
            return SELECTION_NEEDS_WEIGHT
        if product.options is not None:
            return SELECTION_NEEDS_CUSTOMIZATION
        if product.type is not ProductType.UNIT:
            return SELECTION_REJECTED
        return self._add_line(SaleItem(product=product, quantity=1), order_id)

    def confirm_weight(self, product: Product, grams: float, order_id: str | None = None) -> str:
        return self._add_line(SaleItem(product=product, quantity=1, weight=grams), order_id)

    def confirm_customization(
        self,
        product: Product,
        selected_options: SelectedOptions,
        addons: list[Product] | None = None,
        order_id: str | None = None,
    ) -> str:
        item = SaleItem(product=product, quantity=1, selected_options=selected_options, addons=list(addons or []))
        return self._add_line(item, order_id)

    def _add_line(self, item: SaleItem, order_id: str | None) -> str:
        if order_id is not None and self.orders.get_order(order_id) is not None:
            updated = self.orders.add_item_to_order(order_id, item)
            return SELECTION_ADDED if updated is not None else SELECTION_REJECTED

        result = self.cart.add_item(
            item.product,
            quantity=item.quantity,
            weight=item.weight,
            addons=item.addons,
            selected_options=item.selected_options,
        )
        return SELECTION_ADDED if result.success else SELECTION_REJECTED

    def update_line(
        self,
        index: int,
        selected_options: SelectedOptions,
        addons: list[Product] | None = None,
        order_id: str | None = None,
    ) -> str:
        """Replace the choices and add-ons of an existing line, keeping its quantity and weight."""
        changes = {"selected_options": selected_options, "addons": list(addons or [])}
        current = self.orders.get_order(order_id) if order_id is not None else None
        if current is not None:
            if not (0 <= index < len(current.items)):
                self.orders.error = "Item não encontrado"
                return SELECTION_REJECTED
            item = replace(current.items[index], **changes)
            updated = self.orders.update_item_in_order(order_id, index, item)
            return SELECTION_ADDED if updated is not None else SELECTION_REJECTED

        result = self.cart.update_item(index, **changes)
        return SELECTION_ADDED if result.success else SELECTION_REJECTED

    def last_error(self) -> str | None:
        if self.cart.error is not None:
            return self.cart.error.message
        return self.orders.error or self.sales.error

    def create_order(self, customer_name: str) -> ProcessResult:
        """Open a comanda carrying whatever is in the cart."""
        order = self.orders.add_order(customer_name, items=list(self.cart.items))
        if order is None:
            return ProcessResult(success=False, message=self.orders.error or "Erro ao criar comanda")
        self.cart.clear()
        log_debug(f"order_opened order_id={order.id} items={len(order.items)}")
        return ProcessResult(success=True, message=f"Comanda criada para {order.customer_name}", order=order)

    def handle_payment(
        self,
        method: PaymentMethod,
        cash_amount: float | None = None,
        order_id: str | None = None,
        now: datetime | None = None,
    ) -> ProcessResult:
        """Finalize the selected comanda (or the cart) and move it into the sales history."""
        current = self.orders.get_order(order_id) if order_id else None
        customer_name = current.customer_name if current else DIRECT_SALE_CUSTOMER
        items = current.items if current else list(self.cart.items)

        try:
            sale = complete_sale(
                CompleteSaleData(
                    customer_name=customer_name,
                    items=items,
                    payment_method=method,
                    cash_amount=cash_amount,
                ),
                now=now,
            )
        except SaleError as exc:
            log_debug(f"payment_failed order_id={order_id} error={exc}")
            return ProcessResult(success=False, message=str(exc))

        self.sales.add_sale(sale)
        if current is not None:
            self.orders.remove_order(current.id)
        self.cart.clear()

        message = f"Venda finalizada para {customer_name}. Total: {format_currency(sale.total or 0)}"
        if cash_amount:
            message += f". Troco: {format_currency(sale.change or 0)}"
        warnings = [error for error in (self.sales.error, self.orders.error) if error]
        log_debug(f"payment_completed sale_id={sale.id} method={method.value} total={sale.total}")
        return ProcessResult(success=True, message=message, order=sale, warnings=warnings)
