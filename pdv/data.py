"""Static catalog data and pure catalog lookups."""

from __future__ import annotations

from typing import Iterable

from pdv.constant import BUNDLE_LIMITS_BY_ID, INITIAL_PRODUCT_ROWS, OPTION_CATEGORY_SLOTS
from pdv.models import BundleLimits, Product, ProductType


def _build_product(row: tuple[int, str, float, str, str]) -> Product:
    product_id, name, price, category, type_name = row
    limits = BUNDLE_LIMITS_BY_ID.get(product_id)
    return Product(
        id=product_id,
        name=name,
        price=price,
        category=category,
        type=ProductType(type_name),
        options=BundleLimits(*limits) if limits is not None else None,
    )


INITIAL_PRODUCTS: list[Product] = [_build_product(row) for row in INITIAL_PRODUCT_ROWS]


def get_products_by_category(products: Iterable[Product], category: str) -> list[Product]:
    return [product for product in products if product.category == category]


def get_categories(products: Iterable[Product]) -> list[str]:
    """Distinct categories in first-seen order."""
    return list(dict.fromkeys(product.category for product in products))


def search_products(products: Iterable[Product], query: str) -> list[Product]:
    """Case-insensitive substring match on name or category; empty query matches all."""
    q = query.lower()
    return [product for product in products if q in product.name.lower() or q in product.category.lower()]


def is_sellable(product: Product) -> bool:
    """Options and add-ons only exist inside a cup, never as their own line."""
    return product.type in (ProductType.UNIT, ProductType.WEIGHT)


def option_choices(products: Iterable[Product], slot: str) -> list[str]:
    """Names of the option products that fill a bundle slot (frutas/cremes/acompanhamentos)."""
    return [
        product.name
        for product in products
        if product.type is ProductType.OPTION and OPTION_CATEGORY_SLOTS.get(product.category) == slot
    ]


def addon_products(products: Iterable[Product]) -> list[Product]:
    return [product for product in products if product.type is ProductType.ADDON]


def parse_product_line(text: str, product_id: int) -> Product:
    """
    Build a product from ``"name;price;category[;type]"``.

    The price accepts a decimal comma. Type defaults to ``unit``.
    Raises ValueError with a user-facing message.
    """
    parts = [part.strip() for part in text.split(";")]
    if len(parts) not in (3, 4) or not parts[0] or not parts[2]:
        raise ValueError("Use o formato nome;preço;categoria[;tipo]")
    try:
        price = float(parts[1].replace(",", "."))
    except ValueError as exc:
        raise ValueError(f"Preço inválido: {parts[1]!r}") from exc
    if price < 0:
        raise ValueError("O preço não pode ser negativo")
    try:
        product_type = ProductType(parts[3].lower()) if len(parts) == 4 and parts[3] else ProductType.UNIT
    except ValueError as exc:
        raise ValueError(f"Tipo inválido: {parts[3]!r}") from exc
    return Product(id=product_id, name=parts[0], price=price, category=parts[2], type=product_type)
