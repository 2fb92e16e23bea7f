"""Domain models for the ice-cream shop PDV."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ProductType(str, Enum):
    """How a product is priced and offered at the counter."""

    UNIT = "unit"
    WEIGHT = "weight"
    OPTION = "option"
    ADDON = "addon"


class PaymentMethod(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    CASH = "CASH"
    PIX = "PIX"


class OrderStatus(str, Enum):
    OPEN = "open"
    COMPLETED = "completed"


@dataclass(frozen=True)
class BundleLimits:
    """How many fruits, creams and toppings a build-your-own cup allows."""

    frutas: int = 0
    cremes: int = 0
    acompanhamentos: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"frutas": self.frutas, "cremes": self.cremes, "acompanhamentos": self.acompanhamentos}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> BundleLimits:
        return cls(
            frutas=int(raw.get("frutas", 0)),
            cremes=int(raw.get("cremes", 0)),
            acompanhamentos=int(raw.get("acompanhamentos", 0)),
        )


@dataclass(frozen=True)
class Product:
    """A sellable catalog entry. Orders embed a copy, never a reference."""

    id: int
    name: str
    price: float
    category: str
    type: ProductType = ProductType.UNIT
    options: BundleLimits | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "type": self.type.value,
        }
        if self.options is not None:
            data["options"] = self.options.to_dict()
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Product:
        options = raw.get("options")
        return cls(
            id=int(raw["id"]),
            name=str(raw["name"]),
            price=float(raw["price"]),
            category=str(raw.get("category", "")),
            type=ProductType(raw.get("type", ProductType.UNIT.value)),
            options=BundleLimits.from_dict(options) if options else None,
        )


@dataclass
class SelectedOptions:
    """Choices made inside a build-your-own cup."""

    frutas: list[str] = field(default_factory=list)
    cremes: list[str] = field(default_factory=list)
    acompanhamentos: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.frutas or self.cremes or self.acompanhamentos)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "frutas": list(self.frutas),
            "cremes": list(self.cremes),
            "acompanhamentos": list(self.acompanhamentos),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SelectedOptions:
        return cls(
            frutas=list(raw.get("frutas", [])),
            cremes=list(raw.get("cremes", [])),
            acompanhamentos=list(raw.get("acompanhamentos", [])),
        )


@dataclass
class SaleItem:
    """One line of an order: a product snapshot plus quantity, weight or choices."""

    product: Product
    quantity: int | None = None
    weight: float | None = None  # grams
    selected_options: SelectedOptions | None = None
    addons: list[Product] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"product": self.product.to_dict()}
        if self.quantity is not None:
            data["quantity"] = self.quantity
        if self.weight is not None:
            data["weight"] = self.weight
        if self.selected_options is not None:
            data["selectedOptions"] = self.selected_options.to_dict()
        if self.addons:
            data["addons"] = [addon.to_dict() for addon in self.addons]
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SaleItem:
        options = raw.get("selectedOptions")
        quantity = raw.get("quantity")
        weight = raw.get("weight")
        return cls(
            product=Product.from_dict(raw["product"]),
            quantity=int(quantity) if quantity is not None else None,
            weight=float(weight) if weight is not None else None,
            selected_options=SelectedOptions.from_dict(options) if options else None,
            addons=[Product.from_dict(addon) for addon in raw.get("addons") or []],
        )


def _parse_ts(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class Order:
    """An open comanda or a completed sale."""

    id: str
    customer_name: str
    items: list[SaleItem]
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    payment_method: PaymentMethod | None = None
    total: float | None = None
    completed_at: datetime | None = None
    change: float | None = None

    @property
    def short_id(self) -> str:
        return self.id[-4:]

    @property
    def reference_time(self) -> datetime:
        """Completion time, falling back to creation time."""
        return self.completed_at or self.created_at

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "customerName": self.customer_name,
            "items": [item.to_dict() for item in self.items],
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        if self.payment_method is not None:
            data["paymentMethod"] = self.payment_method.value
        if self.total is not None:
            data["total"] = self.total
        if self.completed_at is not None:
            data["finalizadaEm"] = self.completed_at.isoformat()
        if self.change is not None:
            data["change"] = self.change
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Order:
        created_at = _parse_ts(raw["createdAt"])
        if created_at is None:
            raise ValueError(f"Order {raw.get('id')!r} has no creation time")
        method = raw.get("paymentMethod")
        total = raw.get("total")
        change = raw.get("change")
        return cls(
            id=str(raw["id"]),
            customer_name=str(raw.get("customerName", "")),
            items=[SaleItem.from_dict(item) for item in raw.get("items", [])],
            status=OrderStatus(raw.get("status", OrderStatus.OPEN.value)),
            created_at=created_at,
            updated_at=_parse_ts(raw.get("updatedAt")) or created_at,
            payment_method=PaymentMethod(method) if method else None,
            total=float(total) if total is not None else None,
            completed_at=_parse_ts(raw.get("finalizadaEm")),
            change=float(change) if change is not None else None,
        )


@dataclass(frozen=True)
class TopProduct:
    name: str
    quantity: int
    revenue: float


@dataclass(frozen=True)
class SalesMetrics:
    total_sales: int
    total_revenue: float
    average_ticket: float
    total_items: int


@dataclass
class SalesReport:
    """Aggregates derived from completed sales; recomputed on demand."""

    total_sales: int = 0
    total_revenue: float = 0.0
    average_ticket: float = 0.0
    sales_by_payment_method: dict[str, float] = field(default_factory=dict)
    sales_by_category: dict[str, int] = field(default_factory=dict)
    sales_by_hour: dict[int, float] = field(default_factory=dict)
    top_products: list[TopProduct] = field(default_factory=list)
