"""Pending selection of sale items before it becomes a comanda or a sale."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

from pdv.config import CART_STORAGE_KEY
from pdv.debug_log import log_debug
from pdv.models import Product, ProductType, SaleItem, SelectedOptions
from pdv.persistence import KeyValueStorage
from pdv.pricing import CartStatistics, calculate_item_total, cart_statistics
from pdv.stores import STORAGE_ERRORS

T = TypeVar("T")

MIN_WEIGHT_G = 1
MAX_WEIGHT_G = 10000
MIN_QUANTITY = 1
MAX_QUANTITY = 999
DEFAULT_MAX_ITEMS = 50


class CartErrorType(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MAX_ITEMS_EXCEEDED = "MAX_ITEMS_EXCEEDED"
    INVALID_PRODUCT = "INVALID_PRODUCT"
    WEIGHT_REQUIRED = "WEIGHT_REQUIRED"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    STORAGE_ERROR = "STORAGE_ERROR"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    OPERATION_NOT_ALLOWED = "OPERATION_NOT_ALLOWED"


CART_ERROR_MESSAGES: dict[CartErrorType, str] = {
    CartErrorType.VALIDATION_ERROR: "Erro de validação do item",
    CartErrorType.MAX_ITEMS_EXCEEDED: "Número máximo de itens excedido",
    CartErrorType.INVALID_PRODUCT: "Produto inválido",
    CartErrorType.WEIGHT_REQUIRED: "Peso é obrigatório para este produto",
    CartErrorType.INVALID_QUANTITY: "Quantidade inválida",
    CartErrorType.STORAGE_ERROR: "Erro ao salvar dados",
    CartErrorType.ITEM_NOT_FOUND: "Item não encontrado",
    CartErrorType.OPERATION_NOT_ALLOWED: "Operação não permitida",
}


@dataclass(frozen=True)
class CartError:
    type: CartErrorType
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def code(self) -> str:
        return f"CART_{self.type.value}"


def make_error(error_type: CartErrorType, message: str | None = None, **details: Any) -> CartError:
    return CartError(type=error_type, message=message or CART_ERROR_MESSAGES[error_type], details=details)


@dataclass
class CartOperationResult(Generic[T]):
    success: bool
    data: T | None = None
    error: CartError | None = None
    message: str | None = None


@dataclass
class CartItemValidation:
    is_valid: bool = True
    errors: list[CartError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CartValidationConfig:
    require_weight_for_weight_products: bool = True
    minimum_quantity: int = MIN_QUANTITY
    minimum_weight: float = MIN_WEIGHT_G
    maximum_weight: float = MAX_WEIGHT_G


def validate_item(item: SaleItem, config: CartValidationConfig | None = None) -> CartItemValidation:
    config = config or CartValidationConfig()
    errors: list[CartError] = []
    warnings: list[str] = []
    product = item.product

    if not product.id:
        errors.append(make_error(CartErrorType.INVALID_PRODUCT, "Item deve ter um produto válido"))

    if config.require_weight_for_weight_products and product.type is ProductType.WEIGHT:
        if not item.weight or item.weight <= 0:
            errors.append(
                make_error(
                    CartErrorType.WEIGHT_REQUIRED,
                    "Peso é obrigatório para produtos vendidos por peso",
                    product_id=product.id,
                    current_value=item.weight,
                )
            )
        elif item.weight < config.minimum_weight:
            errors.append(make_error(CartErrorType.VALIDATION_ERROR, f"Peso mínimo é {config.minimum_weight:g}g"))
        elif item.weight > config.maximum_weight:
            errors.append(make_error(CartErrorType.VALIDATION_ERROR, f"Peso máximo é {config.maximum_weight:g}g"))

    if item.quantity is not None:
        if item.quantity < config.minimum_quantity:
            errors.append(
                make_error(CartErrorType.INVALID_QUANTITY, f"Quantidade mínima é {config.minimum_quantity}")
            )
        elif item.quantity > MAX_QUANTITY:
            errors.append(make_error(CartErrorType.INVALID_QUANTITY, f"Quantidade máxima é {MAX_QUANTITY}"))

    if product.price == 0 and product.type is ProductType.UNIT:
        warnings.append(f"{product.name} está com preço zero")

    return CartItemValidation(is_valid=not errors, errors=errors, warnings=warnings)


class Cart:
    """The in-memory selection of the counter, optionally mirrored to storage."""

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        max_items: int = DEFAULT_MAX_ITEMS,
        config: CartValidationConfig | None = None,
    ) -> None:
        self.storage = storage
        self.max_items = max_items
        self.config = config or CartValidationConfig()
        self.error: CartError | None = None
        self._items: list[SaleItem] = self._load()

    @property
    def items(self) -> list[SaleItem]:
        return self._items

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def total_items(self) -> int:
        return sum(item.quantity or 1 for item in self._items)

    @property
    def total_value(self) -> float:
        return sum((calculate_item_total(item) for item in self._items), 0.0)

    def statistics(self, tax_rate: float = 0.0) -> CartStatistics:
        return cart_statistics(self._items, tax_rate)

    def _fail(self, error: CartError) -> CartOperationResult[Any]:
        self.error = error
        return CartOperationResult(success=False, error=error)

    def add_item(
        self,
        product: Product,
        quantity: int | None = 1,
        weight: float | None = None,
        addons: list[Product] | None = None,
        selected_options: SelectedOptions | None = None,
    ) -> CartOperationResult[SaleItem]:
        if product.type in (ProductType.OPTION, ProductType.ADDON):
            return self._fail(
                make_error(
                    CartErrorType.OPERATION_NOT_ALLOWED,
                    f"{product.name} só pode ser escolhido dentro de um copo",
                    product_id=product.id,
                )
            )
        if len(self._items) >= self.max_items:
            return self._fail(make_error(CartErrorType.MAX_ITEMS_EXCEEDED, current_value=len(self._items)))

        item = SaleItem(
            product=product,
            quantity=quantity,
            weight=weight,
            selected_options=selected_options,
            addons=list(addons or []),
        )
        validation = validate_item(item, self.config)
        if not validation.is_valid:
            return self._fail(validation.errors[0])

        self._commit([*self._items, item])
        return CartOperationResult(success=True, data=item, message=f"{product.name} adicionado ao carrinho")

    def remove_item(self, index: int) -> CartOperationResult[SaleItem]:
        if not (0 <= index < len(self._items)):
            return self._fail(make_error(CartErrorType.ITEM_NOT_FOUND, item_index=index))
        removed = self._items[index]
        self._commit([item for idx, item in enumerate(self._items) if idx != index])
        return CartOperationResult(success=True, data=removed, message=f"{removed.product.name} removido")

    def update_item(self, index: int, **changes: Any) -> CartOperationResult[SaleItem]:
        if not (0 <= index < len(self._items)):
            return self._fail(make_error(CartErrorType.ITEM_NOT_FOUND, item_index=index))
        updated = replace(self._items[index], **changes)
        validation = validate_item(updated, self.config)
        if not validation.is_valid:
            return self._fail(validation.errors[0])
        self._commit([updated if idx == index else item for idx, item in enumerate(self._items)])
        return CartOperationResult(success=True, data=updated)

    def clear(self) -> CartOperationResult[list[SaleItem]]:
        previous = self._items
        self._commit([])
        return CartOperationResult(success=True, data=previous, message="Carrinho limpo")

    def find_item_index(self, product_id: int) -> int:
        return next((idx for idx, item in enumerate(self._items) if item.product.id == product_id), -1)

    def has_item(self, product_id: int) -> bool:
        return self.find_item_index(product_id) >= 0

    def items_by_category(self, category: str) -> list[SaleItem]:
        return [item for item in self._items if item.product.category == category]

    def validate(self) -> CartItemValidation:
        result = CartItemValidation()
        for item in self._items:
            item_result = validate_item(item, self.config)
            result.errors.extend(item_result.errors)
            result.warnings.extend(item_result.warnings)
        result.is_valid = not result.errors
        return result

    def clear_error(self) -> None:
        self.error = None

    def _load(self) -> list[SaleItem]:
        if self.storage is None:
            return []
        try:
            raw = self.storage.get(CART_STORAGE_KEY)
            return [SaleItem.from_dict(entry) for entry in json.loads(raw)] if raw else []
        except STORAGE_ERRORS as exc:
            self.error = make_error(CartErrorType.STORAGE_ERROR, "Falha ao carregar carrinho")
            log_debug(f"cart_load_failed error={exc!r}")
            return []

    def _commit(self, items: list[SaleItem]) -> None:
        self._items = items
        self.error = None
        if self.storage is None:
            return
        try:
            self.storage.set(CART_STORAGE_KEY, json.dumps([item.to_dict() for item in items]))
        except STORAGE_ERRORS as exc:
            self.error = make_error(CartErrorType.STORAGE_ERROR, "Falha ao salvar carrinho")
            log_debug(f"cart_save_failed error={exc!r}")


def filter_items(
    items: list[SaleItem],
    category: str | None = None,
    product_type: ProductType | None = None,
    min_total: float | None = None,
    max_total: float | None = None,
    predicate: Callable[[SaleItem], bool] | None = None,
) -> list[SaleItem]:
    result = []
    for item in items:
        if category and item.product.category != category:
            continue
        if product_type and item.product.type is not product_type:
            continue
        total = calculate_item_total(item)
        if min_total is not None and total < min_total:
            continue
        if max_total is not None and total > max_total:
            continue
        if predicate is not None and not predicate(item):
            continue
        result.append(item)
    return result


_SORT_KEYS: dict[str, Callable[[SaleItem], Any]] = {
    "name": lambda item: item.product.name,
    "price": lambda item: item.product.price,
    "category": lambda item: item.product.category,
    "quantity": lambda item: item.quantity or 0,
    "weight": lambda item: item.weight or 0,
    "total": calculate_item_total,
}


def sort_items(items: list[SaleItem], sort_field: str, direction: str = "asc") -> list[SaleItem]:
    key = _SORT_KEYS.get(sort_field)
    if key is None:
        return list(items)
    return sorted(items, key=key, reverse=direction == "desc")


def group_by_category(items: list[SaleItem]) -> dict[str, list[SaleItem]]:
    groups: dict[str, list[SaleItem]] = {}
    for item in items:
        groups.setdefault(item.product.category or "Sem categoria", []).append(item)
    return groups


def items_equivalent(item_a: SaleItem, item_b: SaleItem) -> bool:
    """Same product, same add-ons and same cup choices, ignoring order."""
    if item_a.product.id != item_b.product.id:
        return False
    if sorted(a.id for a in item_a.addons) != sorted(b.id for b in item_b.addons):
        return False

    options_a, options_b = item_a.selected_options, item_b.selected_options
    if options_a is None and options_b is None:
        return True
    if options_a is None or options_b is None:
        return False
    return (
        sorted(options_a.frutas) == sorted(options_b.frutas)
        and sorted(options_a.cremes) == sorted(options_b.cremes)
        and sorted(options_a.acompanhamentos) == sorted(options_b.acompanhamentos)
    )
