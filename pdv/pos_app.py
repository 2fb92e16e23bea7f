"""Main Textual app class."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from pdv.auth import EMPTY_PASSWORD_MESSAGE, AuthGate, AuthResult, CancelToken
from pdv.cart import MAX_WEIGHT_G, MIN_WEIGHT_G, Cart
from pdv.checkout import (
    SELECTION_ADDED,
    SELECTION_NEEDS_CUSTOMIZATION,
    SELECTION_NEEDS_WEIGHT,
    SaleProcessor,
)
from pdv.config import DIRECT_SALE_CUSTOMER, RECEIPTS_DIR
from pdv.customize_modal import CustomizeModal, CustomizeResult
from pdv.data import parse_product_line, search_products
from pdv.debug_log import log_debug
from pdv.formatting import format_currency
from pdv.models import Order, PaymentMethod, Product, ProductType, SaleItem
from pdv.payment_modal import PaymentModal
from pdv.persistence import KeyValueStorage, SqliteStorage
from pdv.pricing import calculate_order_total
from pdv.printer import check_printer_dependencies, print_order_ticket
from pdv.prompt_modal import (
    PromptModal,
    digits_only,
    grams_in_range,
    money_chars,
    optional_money,
    parse_money,
    required,
)
from pdv.receipt import save_order_html
from pdv.rendering import badge_style, format_item_details, format_item_label, format_product_label
from pdv.report_screen import ReportScreen
from pdv.stores import OrderStore, ProductCatalogStore, SalesStore

_SEARCH_EXTRA_CHARS = {" ", "-", "/"}


class PdvApp(App):
    """Counter app: search products, build comandas and direct sales, take payment."""

    TITLE = "PDV"
    SUB_TITLE = "Mundo Gelado"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #ticket-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #search-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #ticket-list {
        height: 2fr;
        border: tall $surface;
        padding: 0 1;
    }

    #comandas-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    search_query = reactive("")
    selected_index = reactive(0)
    item_selected_index = reactive(None)
    category_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "register_selected", "Add item"),
        ("backspace", "backspace_query", "Delete query char"),
        ("ctrl+n", "new_product", "New product"),
        ("ctrl+e", "edit_product_price", "Edit price"),
        ("ctrl+d", "remove_product", "Remove product"),
        ("ctrl+r", "reset_catalog", "Reset catalog"),
        ("ctrl+c", "cancel_active_mode", "Exit active mode"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        receipts_dir: str | Path = RECEIPTS_DIR,
        print_tickets: bool = True,
    ) -> None:
        super().__init__()
        storage = storage if storage is not None else SqliteStorage()
        self.products = ProductCatalogStore(storage)
        self.orders = OrderStore(storage)
        self.sales = SalesStore(storage)
        self.cart = Cart(storage=storage)
        self.auth = AuthGate(storage)
        self.processor = SaleProcessor(self.products, self.orders, self.sales, self.cart)
        self.receipts_dir = receipts_dir
        self.print_tickets = print_tickets
        self.current_order_id: str | None = None
        self.system_status = ""
        self._auth_cancel: CancelToken | None = None
        log_debug("app_init")

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="ticket-pane"):
                yield Static(id="ticket-title", classes="pane-title")
                yield Static("(sem itens)", id="ticket-list")
                yield Static("Comandas abertas", classes="pane-title")
                yield Static(id="comandas-list")
            with Vertical(id="search-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        ready, msg = check_printer_dependencies()
        self.print_tickets = self.print_tickets and ready
        self.system_status = msg
        for error in (self.products.error, self.orders.error, self.sales.error):
            if error:
                self.system_status = error
        log_debug(f"on_mount printer_status={msg!r}")
        self._refresh_all()

    def on_unmount(self) -> None:
        if self._auth_cancel is not None:
            self._auth_cancel.cancel()

    def on_key(self, event: Key) -> None:
        if self._modal_open():
            return

        log_debug(f"on_key key={event.key!r} char={event.character!r} state={self.input_state!r}")

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        if self.input_state == "active":
            if event.character.isalnum() or event.character in _SEARCH_EXTRA_CHARS:
                self.search_query += event.character
                self.selected_index = 0
                self._refresh_search()
                event.stop()
            return

        handlers = {
            "s": self._enter_search,
            "j": lambda: self._move_item_selection(1),
            "k": lambda: self._move_item_selection(-1),
            "d": self._delete_selected_item,
            "e": self._edit_selected_item,
            "o": self._cycle_comanda,
            "n": self._open_new_comanda,
            "x": self._cancel_current_comanda,
            "p": self._start_payment,
            "c": self._cycle_category,
            "r": self._open_report,
        }
        handler = handlers.get(event.character.lower())
        if handler is None:
            return
        handler()
        event.stop()

    def _modal_open(self) -> bool:
        return isinstance(self.screen, ModalScreen)

    def _set_status(self, message: str) -> None:
        self.system_status = message
        self._refresh_search()

    # Search and product selection

    def _enter_search(self) -> None:
        self.input_state = "active"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cancel_active_mode(self) -> None:
        if self._modal_open() or self.input_state == "normal":
            return
        self.input_state = "normal"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if self._modal_open() or self.input_state != "active":
            return
        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_backspace_query(self) -> None:
        if self._modal_open() or self.input_state != "active" or not self.search_query:
            return
        self.search_query = self.search_query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_register_selected(self) -> None:
        if self._modal_open() or self.input_state != "active":
            return
        product = self._selected_product()
        if product is None:
            return

        outcome = self.processor.select_product(product, self.current_order_id)
        log_debug(f"select_product product_id={product.id} outcome={outcome}")
        if outcome == SELECTION_NEEDS_WEIGHT:
            self.push_screen(
                PromptModal(
                    product.name,
                    f"Peso em gramas ({format_currency(product.price)}/kg)",
                    allowed=digits_only,
                    validate=grams_in_range(MIN_WEIGHT_G, MAX_WEIGHT_G),
                    max_length=5,
                ),
                lambda value: self._on_weight_entered(product, value),
            )
            return
        if outcome == SELECTION_NEEDS_CUSTOMIZATION:
            self.push_screen(
                CustomizeModal(product, self.products.products),
                lambda result: self._on_customized(product, result),
            )
            return
        self._after_line_added(product, outcome)

    def _on_weight_entered(self, product: Product, value: str | None) -> None:
        if value is None:
            return
        outcome = self.processor.confirm_weight(product, float(value), self.current_order_id)
        self._after_line_added(product, outcome)

    def _on_customized(self, product: Product, result: CustomizeResult | None) -> None:
        if result is None:
            return
        selected_options, addons = result
        outcome = self.processor.confirm_customization(product, selected_options, addons, self.current_order_id)
        self._after_line_added(product, outcome)

    def _after_line_added(self, product: Product, outcome: str) -> None:
        if outcome == SELECTION_ADDED:
            self.item_selected_index = len(self._current_items()) - 1
            self.system_status = f"{product.name} adicionado"
        else:
            self.system_status = self.processor.last_error() or f"Não foi possível adicionar {product.name}"
        self._refresh_all()

    # Catalog maintenance

    def action_new_product(self) -> None:
        if self._modal_open() or self.input_state != "active":
            return
        next_id = self.products.next_id()

        def _validate(value: str) -> str | None:
            try:
                parse_product_line(value, next_id)
            except ValueError as exc:
                return str(exc)
            return None

        self.push_screen(
            PromptModal(
                "Novo produto",
                "nome;preço;categoria[;unit|weight]",
                validate=_validate,
                max_length=80,
            ),
            lambda value: self._on_new_product(value, next_id),
        )

    def _on_new_product(self, value: str | None, product_id: int) -> None:
        if value is None:
            return
        product = parse_product_line(value, product_id)
        self.products.add_product(product)
        log_debug(f"product_added product_id={product.id}")
        self._set_status(self.products.error or f"Produto {product.name} cadastrado")

    def action_edit_product_price(self) -> None:
        if self._modal_open() or self.input_state != "active":
            return
        product = self._selected_product()
        if product is None:
            return
        self.push_screen(
            PromptModal(
                product.name,
                "Novo preço",
                allowed=money_chars,
                validate=required("Informe o preço."),
                max_length=10,
                initial=f"{product.price:.2f}",
            ),
            lambda value: self._on_price_edited(product, value),
        )

    def _on_price_edited(self, product: Product, value: str | None) -> None:
        if value is None:
            return
        try:
            price = parse_money(value)
        except ValueError:
            self._set_status("Preço inválido")
            return
        self.products.update_product(replace(product, price=price))
        log_debug(f"product_updated product_id={product.id} price={price}")
        self._set_status(self.products.error or f"{product.name}: {format_currency(price)}")

    def action_remove_product(self) -> None:
        if self._modal_open() or self.input_state != "active":
            return
        product = self._selected_product()
        if product is None:
            return
        self.products.remove_product(product.id)
        self.selected_index = 0
        log_debug(f"product_removed product_id={product.id}")
        self._set_status(self.products.error or f"Produto {product.name} removido")

    def action_reset_catalog(self) -> None:
        if self._modal_open() or self.input_state != "active":
            return
        self.products.reset_to_initial_products()
        self.selected_index = 0
        self._set_status(self.products.error or "Catálogo restaurado")

    # Comandas and the current ticket

    def _current_order(self) -> Order | None:
        if self.current_order_id is None:
            return None
        return self.orders.get_order(self.current_order_id)

    def _current_items(self) -> list[SaleItem]:
        order = self._current_order()
        return order.items if order is not None else self.cart.items

    def _cycle_comanda(self) -> None:
        open_ids = [order.id for order in self.orders.open_orders]
        targets: list[str | None] = [None, *open_ids]
        idx = targets.index(self.current_order_id) if self.current_order_id in targets else 0
        self.current_order_id = targets[(idx + 1) % len(targets)]
        self.item_selected_index = None
        self._refresh_ticket()

    def _open_new_comanda(self) -> None:
        self.push_screen(
            PromptModal("Nova comanda", "Nome do cliente", validate=required("Nome do cliente é obrigatório")),
            self._on_customer_name,
        )

    def _on_customer_name(self, value: str | None) -> None:
        if value is None:
            return
        result = self.processor.create_order(value)
        if result.success and result.order is not None:
            self.current_order_id = result.order.id
            self.item_selected_index = None
        self.system_status = result.message
        self._refresh_all()

    def _cancel_current_comanda(self) -> None:
        order = self._current_order()
        if order is None:
            self._set_status("Nenhuma comanda selecionada")
            return
        self.orders.remove_order(order.id)
        self.current_order_id = None
        self.item_selected_index = None
        log_debug(f"order_cancelled order_id={order.id}")
        self.system_status = self.orders.error or f"Comanda de {order.customer_name} cancelada"
        self._refresh_all()

    def _move_item_selection(self, delta: int) -> None:
        items = self._current_items()
        if not items:
            return
        if self.item_selected_index is None:
            self.item_selected_index = 0 if delta > 0 else len(items) - 1
        else:
            self.item_selected_index = (self.item_selected_index + delta) % len(items)
        self._refresh_ticket()

    def _delete_selected_item(self) -> None:
        items = self._current_items()
        idx = self.item_selected_index
        if idx is None or not (0 <= idx < len(items)):
            return

        if self.current_order_id is not None:
            updated = self.orders.remove_item_from_order(self.current_order_id, idx)
            error = self.orders.error if updated is None else None
        else:
            result = self.cart.remove_item(idx)
            error = result.error.message if result.error is not None else None

        remaining = len(self._current_items())
        self.item_selected_index = min(idx, remaining - 1) if remaining else None
        self.system_status = error or "Item removido"
        self._refresh_all()

    def _edit_selected_item(self) -> None:
        items = self._current_items()
        idx = self.item_selected_index
        if idx is None or not (0 <= idx < len(items)):
            return
        item = items[idx]
        self.push_screen(
            CustomizeModal(item.product, self.products.products, initial=item),
            lambda result: self._on_item_edited(idx, result),
        )

    def _on_item_edited(self, index: int, result: CustomizeResult | None) -> None:
        if result is None:
            return
        selected_options, addons = result
        outcome = self.processor.update_line(index, selected_options, addons, self.current_order_id)
        log_debug(f"update_line index={index} outcome={outcome}")
        if outcome == SELECTION_ADDED:
            self.system_status = "Item atualizado"
        else:
            self.system_status = self.processor.last_error() or "Não foi possível atualizar o item"
        self._refresh_all()

    def _cycle_category(self) -> None:
        categories = self._sellable_categories()
        if not categories:
            return
        if self.category_index is None:
            self.category_index = 0
        elif self.category_index + 1 >= len(categories):
            self.category_index = None
        else:
            self.category_index += 1
        self.selected_index = 0
        self._refresh_search()

    # Payment

    def _start_payment(self) -> None:
        items = self._current_items()
        if not items:
            self._set_status("Nada para finalizar")
            return
        order = self._current_order()
        customer = order.customer_name if order is not None else DIRECT_SALE_CUSTOMER
        self.push_screen(PaymentModal(customer, calculate_order_total(items)), self._on_payment_method)

    def _on_payment_method(self, method: PaymentMethod | None) -> None:
        if method is None:
            return
        if method is not PaymentMethod.CASH:
            self._finalize_sale(method, None)
            return
        self.push_screen(
            PromptModal(
                "Dinheiro",
                "Valor recebido (vazio = valor exato)",
                allowed=money_chars,
                validate=optional_money,
                max_length=10,
            ),
            lambda value: self._on_cash_amount(method, value),
        )

    def _on_cash_amount(self, method: PaymentMethod, value: str | None) -> None:
        if value is None:
            return
        self._finalize_sale(method, parse_money(value) if value else None)

    def _finalize_sale(self, method: PaymentMethod, cash_amount: float | None) -> None:
        result = self.processor.handle_payment(method, cash_amount=cash_amount, order_id=self.current_order_id)
        if not result.success or result.order is None:
            self._set_status(result.message)
            return

        self.current_order_id = None
        self.item_selected_index = None
        status = result.message
        if result.warnings:
            status += f" ({'; '.join(result.warnings)})"
        self.system_status = status
        self._emit_receipt(result.order)
        self._refresh_all()

    def _emit_receipt(self, sale: Order) -> None:
        try:
            path = save_order_html(sale, self.receipts_dir)
            log_debug(f"receipt_saved sale_id={sale.id} path={path}")
        except OSError as exc:
            self.system_status += f" | Recibo não salvo: {exc}"
            log_debug(f"receipt_save_failed sale_id={sale.id} error={exc!r}")

        if not self.print_tickets:
            return
        try:
            print_order_ticket(sale)
        except Exception as exc:
            self.system_status += f" | Impressão falhou: {exc}"
            log_debug(f"print_failed sale_id={sale.id} error={exc!r}")
            return
        log_debug(f"print_ok sale_id={sale.id}")

    # Report access

    def _open_report(self) -> None:
        if self.auth.is_authenticated:
            self.push_screen(ReportScreen(self.sales, self.auth))
            return
        self.push_screen(
            PromptModal(
                "Relatórios",
                "Senha de acesso",
                validate=required(EMPTY_PASSWORD_MESSAGE),
                mask=True,
            ),
            self._start_login,
        )

    def _start_login(self, password: str | None) -> None:
        if password is None:
            return
        token = CancelToken()
        self._auth_cancel = token
        self._set_status("Verificando senha...")
        self.run_worker(lambda: self._login_worker(password, token), thread=True, exclusive=True, group="auth")

    def _login_worker(self, password: str, token: CancelToken) -> None:
        result = self.auth.authenticate(password, token)
        if not result.cancelled:
            self.call_from_thread(self._on_login_result, result)

    def _on_login_result(self, result: AuthResult) -> None:
        self._auth_cancel = None
        if not result.success:
            self._set_status(result.error or "Falha na autenticação")
            return
        log_debug("report_login_ok")
        self._set_status("Acesso liberado")
        self.push_screen(ReportScreen(self.sales, self.auth))

    # Rendering

    def _sellable_categories(self) -> list[str]:
        return list(dict.fromkeys(product.category for product in self.products.sellable_products()))

    def _active_category(self) -> str | None:
        categories = self._sellable_categories()
        if self.category_index is None or self.category_index >= len(categories):
            return None
        return categories[self.category_index]

    def _filtered_results(self) -> list[Product]:
        source = self.products.sellable_products()
        category = self._active_category()
        if category is not None:
            source = [product for product in source if product.category == category]
        return search_products(source, self.search_query)

    def _selected_product(self) -> Product | None:
        results = self._filtered_results()
        if not results:
            return None
        if self.selected_index >= len(results):
            self.selected_index = 0
        return results[self.selected_index]

    def _refresh_all(self) -> None:
        self._refresh_ticket()
        self._refresh_search()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)
        rows = max(1, rows)
        if total <= rows:
            return (0, total)
        start = 0 if selected is None else max(0, min(selected - rows // 2, total - rows))
        return (start, start + rows)

    def _refresh_ticket(self) -> None:
        try:
            title_widget = self.query_one("#ticket-title", Static)
            items_widget = self.query_one("#ticket-list", Static)
            comandas_widget = self.query_one("#comandas-list", Static)
        except NoMatches:
            return

        order = self._current_order()
        if order is None:
            self.current_order_id = None
        items = self._current_items()
        heading = f"Comanda #{order.short_id}: {order.customer_name}" if order else DIRECT_SALE_CUSTOMER
        title_widget.update(f"{heading}  Total: {format_currency(calculate_order_total(items))}")

        if not items:
            self.item_selected_index = None
            items_widget.update("(sem itens)")
        else:
            if self.item_selected_index is not None and self.item_selected_index >= len(items):
                self.item_selected_index = len(items) - 1
            start, end = self._window_bounds(len(items), self._visible_rows(items_widget) // 2, self.item_selected_index)
            lines = Text()
            if start > 0:
                lines.append("⋮\n", style="dim")
            for idx in range(start, end):
                if idx > start:
                    lines.append("\n")
                lines.append("➤ " if idx == self.item_selected_index else "  ")
                lines.append(f"{idx + 1}. ")
                lines.append_text(format_item_label(items[idx]))
                details = format_item_details(items[idx])
                if details.plain:
                    lines.append("\n      ")
                    lines.append_text(details)
            if end < len(items):
                lines.append("\n⋮", style="dim")
            items_widget.update(lines)

        comandas = Text()
        comandas.append("➤ " if order is None else "  ")
        comandas.append(f"{DIRECT_SALE_CUSTOMER} ({len(self.cart.items)} itens)")
        for open_order in self.orders.open_orders:
            comandas.append("\n")
            comandas.append("➤ " if order is not None and open_order.id == order.id else "  ")
            comandas.append(f"#{open_order.short_id} {open_order.customer_name}  ")
            comandas.append(format_currency(calculate_order_total(open_order)), style="bold")
        comandas_widget.update(comandas)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        category = self._active_category() or "Todas"
        if self.input_state == "normal":
            status = self.system_status or "Pronto"
            bar.update(
                "S busca, C categoria, N comanda, O alterna, J/K/D/E itens, P pagar, X cancela, R relatórios\n"
                f"[{category}] {status}"
            )
            return

        text = Text()
        text.append(f" {category} ", style=badge_style(ProductType.UNIT))
        text.append(f": {self.search_query}")
        text.append("\nEnter adiciona, Ctrl+N/E/D/R catálogo, Ctrl+C sai", style="dim")
        bar.update(text)

    def _refresh_results(self, results: list[Product]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
            return
        if not results:
            results_widget.update("Nenhum produto")
            return
        if self.selected_index >= len(results):
            self.selected_index = 0

        start, end = self._window_bounds(len(results), self._visible_rows(results_widget), self.selected_index)
        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append("➤ " if idx == self.selected_index else "  ")
            lines.append_text(format_product_label(results[idx]))
        if end < len(results):
            lines.append("\n⋮", style="dim")
        results_widget.update(lines)
