"""Sales report aggregation over completed orders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Iterable

from pdv.models import Order, SalesMetrics, SalesReport, TopProduct

OTHER_PAYMENT_BUCKET = "outros"
DEFAULT_TOP_PRODUCTS = 10


def filter_orders_by_period(orders: Iterable[Order], start: datetime, end: datetime) -> list[Order]:
    """Orders whose completion time (or creation time) falls in [start, end]."""
    return [order for order in orders if start <= order.reference_time <= end]


def calculate_sales_metrics(orders: list[Order]) -> SalesMetrics:
    total_sales = len(orders)
    total_revenue = sum((order.total or 0 for order in orders), 0.0)
    average_ticket = total_revenue / total_sales if total_sales > 0 else 0.0
    total_items = sum(item.quantity or 1 for order in orders for item in order.items)
    return SalesMetrics(
        total_sales=total_sales,
        total_revenue=total_revenue,
        average_ticket=average_ticket,
        total_items=total_items,
    )


def group_sales_by_payment_method(orders: Iterable[Order]) -> dict[str, float]:
    grouped: dict[str, float] = {}
    for order in orders:
        method = order.payment_method.value if order.payment_method else OTHER_PAYMENT_BUCKET
        grouped[method] = grouped.get(method, 0.0) + (order.total or 0)
    return grouped


def group_sales_by_category(orders: Iterable[Order]) -> dict[str, int]:
    grouped: dict[str, int] = {}
    for order in orders:
        for item in order.items:
            category = item.product.category
            grouped[category] = grouped.get(category, 0) + (item.quantity or 1)
    return grouped


def group_sales_by_hour(orders: Iterable[Order]) -> dict[int, float]:
    grouped: dict[int, float] = {}
    for order in orders:
        hour = order.reference_time.hour
        grouped[hour] = grouped.get(hour, 0.0) + (order.total or 0)
    return grouped


@dataclass
class _ProductTally:
    name: str
    quantity: int = 0
    revenue: float = 0.0


def get_top_selling_products(orders: Iterable[Order], limit: int = DEFAULT_TOP_PRODUCTS) -> list[TopProduct]:
    """Rank products by revenue (unit price x quantity), keeping first-seen order on ties."""
    tallies: dict[int, _ProductTally] = {}
    for order in orders:
        for item in order.items:
            tally = tallies.setdefault(item.product.id, _ProductTally(name=item.product.name))
            quantity = item.quantity or 1
            tally.quantity += quantity
            tally.revenue += item.product.price * quantity

    # sorted() is stable, so equal revenues keep insertion order.
    ranked = sorted(tallies.values(), key=lambda tally: tally.revenue, reverse=True)
    return [TopProduct(name=t.name, quantity=t.quantity, revenue=t.revenue) for t in ranked[: max(0, limit)]]


def calculate_sales_report(
    orders: Iterable[Order],
    start: datetime | None,
    end: datetime | None,
    top_limit: int = DEFAULT_TOP_PRODUCTS,
) -> SalesReport:
    """Build the full report; a missing or inverted range gives the zero report."""
    if start is None or end is None or start > end:
        return SalesReport()

    filtered = filter_orders_by_period(orders, start, end)
    if not filtered:
        return SalesReport()

    metrics = calculate_sales_metrics(filtered)
    return SalesReport(
        total_sales=metrics.total_sales,
        total_revenue=metrics.total_revenue,
        average_ticket=metrics.average_ticket,
        sales_by_payment_method=group_sales_by_payment_method(filtered),
        sales_by_category=group_sales_by_category(filtered),
        sales_by_hour=group_sales_by_hour(filtered),
        top_products=get_top_selling_products(filtered, top_limit),
    )


REPORT_TYPES = ("daily", "weekly", "monthly")


def date_range_for_report_type(report_type: str, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Inclusive (start, end) for today, this week (from Monday) or this month."""
    now = now or datetime.now()
    start_of_today = datetime.combine(now.date(), time.min)
    end_of_today = datetime.combine(now.date(), time(23, 59, 59, 999000))

    if report_type == "weekly":
        return (start_of_today - timedelta(days=start_of_today.weekday()), end_of_today)
    if report_type == "monthly":
        return (start_of_today.replace(day=1), end_of_today)
    return (start_of_today, end_of_today)


DEFAULT_RECENT_SALES = 5


def get_recent_sales(orders: Iterable[Order], limit: int = DEFAULT_RECENT_SALES) -> list[Order]:
    """Newest sales first, by completion time (or creation time)."""
    ranked = sorted(orders, key=lambda order: order.reference_time, reverse=True)
    return ranked[: max(0, limit)]
