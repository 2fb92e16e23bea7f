"""Line-item and order total calculation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from pdv.models import Order, ProductType, SaleItem


def quantity_multiplier(item: SaleItem) -> int:
    return item.quantity or 1


def calculate_item_total(item: SaleItem) -> float:
    """
    Monetary total of one line.

    Weight-priced lines with a weight are charged per kilogram; everything
    else, including a weight-priced line that lost its weight, is charged
    price x quantity. Add-ons follow the quantity multiplier, never the weight.
    """
    multiplier = quantity_multiplier(item)
    if item.product.type is ProductType.WEIGHT and item.weight:
        base = item.product.price * (item.weight / 1000)
    else:
        base = item.product.price * multiplier

    addons_total = sum(addon.price for addon in item.addons)
    return base + addons_total * multiplier


def calculate_order_total(order: Order | Iterable[SaleItem]) -> float:
    items = order.items if isinstance(order, Order) else order
    return sum((calculate_item_total(item) for item in items), 0.0)


@dataclass
class CartStatistics:
    unique_items: int = 0
    total_quantity: int = 0
    subtotal: float = 0.0
    total_tax: float = 0.0
    total: float = 0.0
    average_item_value: float = 0.0
    most_expensive_item: SaleItem | None = None
    cheapest_item: SaleItem | None = None
    categories: list[str] = field(default_factory=list)
    total_weight: float | None = None


def cart_statistics(items: list[SaleItem], tax_rate: float = 0.0) -> CartStatistics:
    if not items:
        return CartStatistics()

    totals = [calculate_item_total(item) for item in items]
    subtotal = sum(totals)
    total_tax = subtotal * tax_rate
    total_weight = sum(item.weight or 0 for item in items)

    # max/min keep the first item on ties.
    most_expensive_idx = max(range(len(items)), key=lambda idx: totals[idx])
    cheapest_idx = min(range(len(items)), key=lambda idx: totals[idx])

    return CartStatistics(
        unique_items=len(items),
        total_quantity=sum(quantity_multiplier(item) for item in items),
        subtotal=subtotal,
        total_tax=total_tax,
        total=subtotal + total_tax,
        average_item_value=subtotal / len(items),
        most_expensive_item=items[most_expensive_idx],
        cheapest_item=items[cheapest_idx],
        categories=list(dict.fromkeys(item.product.category for item in items if item.product.category)),
        total_weight=total_weight if total_weight > 0 else None,
    )
