"""Printable receipt content shared by the HTML template and the thermal printer."""

from __future__ import annotations

from datetime import datetime
from html import escape
from pathlib import Path

from pdv.config import RECEIPTS_DIR, SHOP_NAME
from pdv.formatting import format_currency, format_date, format_weight
from pdv.models import Order, ProductType, SaleItem
from pdv.pricing import calculate_order_total

_OPTION_LABELS = (("frutas", "Frutas"), ("cremes", "Cremes"), ("acompanhamentos", "Acomp"))

_PRINT_STYLES = """
    <style>
      @media print {
        body * { visibility: visible; }
        @page { margin: 0; size: 80mm auto; }
      }
    </style>
"""


def quantity_label(item: SaleItem) -> str:
    if item.product.type is ProductType.WEIGHT and item.weight:
        return format_weight(item.weight)
    return str(item.quantity or 1)


def detail_lines(item: SaleItem) -> list[str]:
    """Cup choices and add-ons printed under an item."""
    lines: list[str] = []
    if item.selected_options is not None:
        for attr, label in _OPTION_LABELS:
            values = getattr(item.selected_options, attr)
            if values:
                lines.append(f"{label}: {', '.join(values)}")
    if item.addons:
        lines.append(f"Adicionais: {', '.join(addon.name for addon in item.addons)}")
    return lines


def _item_row(item: SaleItem) -> str:
    details = "".join(f'<div style="font-size: 0.875rem;">{escape(line)}</div>' for line in detail_lines(item))
    return (
        "<tr>"
        f"<td>{escape(item.product.name)}{details}</td>"
        f'<td style="text-align: right;">{escape(quantity_label(item))}</td>'
        "</tr>"
    )


def render_order_html(order: Order, printed_at: datetime | None = None) -> str:
    """Full HTML document for the browser print surface."""
    printed_at = printed_at or order.completed_at or datetime.now()
    rows = "".join(_item_row(item) for item in order.items)
    total = order.total if order.total is not None else calculate_order_total(order)
    return f"""<html>
  <head>
    <title>Pedido #{escape(order.short_id)}</title>
    {_PRINT_STYLES}
  </head>
  <body>
    <div style="text-align: center; margin-bottom: 1rem;">
      <h1 style="font-size: 1.25rem; font-weight: bold;">{escape(SHOP_NAME)}</h1>
      <p>PEDIDO #{escape(order.short_id)}</p>
      <p>{format_date(printed_at)}</p>
    </div>
    <div style="margin-bottom: 1rem;">
      <p>Cliente: {escape(order.customer_name)}</p>
    </div>
    <table style="width: 100%; border-top: 1px solid #000; border-bottom: 1px solid #000; padding: 0.5rem 0;">
      <tr>
        <th style="text-align: left;">Item</th>
        <th style="text-align: right;">Qtd</th>
      </tr>
      {rows}
    </table>
    <p style="text-align: right;">Total: {format_currency(total)}</p>
    <div style="text-align: center; margin-top: 1rem;">
      <p>*** FIM DO PEDIDO ***</p>
    </div>
  </body>
</html>
"""


def render_ticket_lines(order: Order, printed_at: datetime | None = None) -> list[str]:
    """Plain text lines of the same receipt, for the thermal printer."""
    printed_at = printed_at or order.completed_at or datetime.now()
    lines = [SHOP_NAME, f"PEDIDO #{order.short_id}", format_date(printed_at), f"Cliente: {order.customer_name}", ""]
    for item in order.items:
        lines.append(f"{quantity_label(item)}  {item.product.name}")
        lines.extend(f"    {detail}" for detail in detail_lines(item))
    total = order.total if order.total is not None else calculate_order_total(order)
    lines.extend(["", f"Total: {format_currency(total)}"])
    if order.change:
        lines.append(f"Troco: {format_currency(order.change)}")
    lines.append("*** FIM DO PEDIDO ***")
    return lines


def save_order_html(order: Order, directory: str | Path = RECEIPTS_DIR, printed_at: datetime | None = None) -> Path:
    """Write the HTML receipt to ``pedido-<order id>.html`` and return its path."""
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / f"pedido-{order.id}.html"
    path.write_text(render_order_html(order, printed_at), encoding="utf-8")
    return path
