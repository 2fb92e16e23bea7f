"""Payment method selection modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from pdv.constant import PAYMENT_METHOD_LABELS
from pdv.formatting import format_currency
from pdv.models import PaymentMethod

PAYMENT_METHODS = [PaymentMethod.CREDIT, PaymentMethod.DEBIT, PaymentMethod.CASH, PaymentMethod.PIX]


class PaymentModal(ModalScreen[PaymentMethod | None]):
    """Pick how the customer pays."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "confirm", "Confirm"),
    ]

    CSS = """
    PaymentModal {
        align: center middle;
        background: $background 60%;
    }

    #payment-dialog {
        width: 52;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #payment-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #payment-body {
        color: white;
    }

    #payment-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)

    def __init__(self, customer_name: str, total: float) -> None:
        super().__init__()
        self.customer_name = customer_name
        self.total = total

    def compose(self) -> ComposeResult:
        with Container(id="payment-dialog"):
            yield Static("Pagamento", id="payment-title")
            yield Static(id="payment-body")
            yield Static("1-4 ou J/K + Enter escolhe, Esc/q/Ctrl+C cancela", id="payment-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.character and event.character in {"1", "2", "3", "4"}:
            self.dismiss(PAYMENT_METHODS[int(event.character) - 1])
            event.stop()

    def action_close(self) -> None:
        self.dismiss(None)

    def action_confirm(self) -> None:
        self.dismiss(PAYMENT_METHODS[self.cursor_index])

    def action_move_cursor(self, delta: int) -> None:
        self.cursor_index = (self.cursor_index + delta) % len(PAYMENT_METHODS)
        self._refresh_content()

    def _refresh_content(self) -> None:
        body = self.query_one("#payment-body", Static)
        content = Text(style="white")
        content.append(f"Cliente: {self.customer_name}\n")
        content.append(f"Total: {format_currency(self.total)}\n\n", style="bold")
        for idx, method in enumerate(PAYMENT_METHODS):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            content.append(f"{pointer}{idx + 1}. {PAYMENT_METHOD_LABELS[method.value]}")
        body.update(content)
