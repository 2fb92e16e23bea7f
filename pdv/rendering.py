"""Rich rendering helpers for the terminal front end."""

from __future__ import annotations

from rich.console import Group
from rich.table import Table
from rich.text import Text

from pdv.constant import PAYMENT_METHOD_LABELS
from pdv.formatting import format_currency, format_date
from pdv.models import Order, Product, ProductType, SaleItem, SalesReport
from pdv.pricing import calculate_item_total
from pdv.receipt import detail_lines, quantity_label

_TYPE_TAGS = {
    ProductType.UNIT: "U",
    ProductType.WEIGHT: "P",
    ProductType.OPTION: "O",
    ProductType.ADDON: "A",
}


def badge_style(product_type: ProductType) -> str:
    """Return a consistent badge style for product type tags."""
    if product_type is ProductType.WEIGHT:
        return "bold #ffffff on #7b3fa0"
    if product_type is ProductType.ADDON:
        return "bold #ffffff on #2f6db5"
    if product_type is ProductType.OPTION:
        return "bold #0b1f0f on #d7c96a"
    return "bold #0b1f0f on #5fbf72"


def format_product_label(product: Product) -> Text:
    text = Text()
    text.append(_TYPE_TAGS[product.type], style=badge_style(product.type))
    text.append(f" {product.name}")
    price = format_currency(product.price)
    text.append(f"  {price}/kg" if product.type is ProductType.WEIGHT else f"  {price}", style="dim")
    return text


def format_item_label(item: SaleItem) -> Text:
    text = Text()
    text.append(_TYPE_TAGS[item.product.type], style=badge_style(item.product.type))
    text.append(f" {quantity_label(item)}x {item.product.name}" if item.product.type is not ProductType.WEIGHT
                else f" {quantity_label(item)} {item.product.name}")
    text.append(f"  {format_currency(calculate_item_total(item))}", style="bold")
    return text


def format_item_details(item: SaleItem) -> Text:
    """Render cup choices and add-ons as compact tags."""
    text = Text()
    for idx, line in enumerate(detail_lines(item)):
        if idx > 0:
            text.append(" ")
        text.append(f"[{line}]", style="white")
    return text


def payment_label(method: str) -> str:
    return PAYMENT_METHOD_LABELS.get(method, method)


def render_sales_report(report: SalesReport, title: str, recent: list[Order] | None = None) -> Group:
    summary = Table(title=title, show_header=False, expand=True)
    summary.add_column("Métrica")
    summary.add_column("Valor", justify="right")
    summary.add_row("Vendas", str(report.total_sales))
    summary.add_row("Faturamento", format_currency(report.total_revenue))
    summary.add_row("Ticket médio", format_currency(report.average_ticket))

    payments = Table(title="Por forma de pagamento", expand=True)
    payments.add_column("Forma")
    payments.add_column("Total", justify="right")
    for method, value in report.sales_by_payment_method.items():
        payments.add_row(payment_label(method), format_currency(value))

    categories = Table(title="Itens por categoria", expand=True)
    categories.add_column("Categoria")
    categories.add_column("Qtd", justify="right")
    for category, quantity in report.sales_by_category.items():
        categories.add_row(category, str(quantity))

    hours = Table(title="Por hora", expand=True)
    hours.add_column("Hora")
    hours.add_column("Total", justify="right")
    for hour in sorted(report.sales_by_hour):
        hours.add_row(f"{hour:02d}:00", format_currency(report.sales_by_hour[hour]))

    top = Table(title="Produtos mais vendidos", expand=True)
    top.add_column("#", justify="right")
    top.add_column("Produto")
    top.add_column("Qtd", justify="right")
    top.add_column("Receita", justify="right")
    for rank, row in enumerate(report.top_products, start=1):
        top.add_row(str(rank), row.name, str(row.quantity), format_currency(row.revenue))

    return Group(summary, payments, categories, hours, top, render_recent_sales(recent or []))


def render_recent_sales(sales: list[Order]) -> Table:
    table = Table(title="Últimas vendas", expand=True)
    table.add_column("Pedido")
    table.add_column("Cliente")
    table.add_column("Quando")
    table.add_column("Pagamento")
    table.add_column("Total", justify="right")
    if not sales:
        table.add_row("", "Nenhuma venda recente registrada.", "", "", "")
    for sale in sales:
        method = payment_label(sale.payment_method.value) if sale.payment_method else "-"
        table.add_row(
            f"#{sale.short_id}",
            sale.customer_name,
            format_date(sale.reference_time),
            method,
            format_currency(sale.total or 0),
        )
    return table
