"""Cup customization modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from pdv.data import addon_products, option_choices
from pdv.formatting import format_currency
from pdv.models import BundleLimits, Product, SaleItem, SelectedOptions

SLOT_LABELS = {"frutas": "Frutas", "cremes": "Cremes", "acompanhamentos": "Acompanhamentos"}

CustomizeResult = tuple[SelectedOptions, list[Product]]


class CustomizeModal(ModalScreen[CustomizeResult | None]):
    """Toggle fruits, creams, toppings and paid add-ons for one cup."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "toggle_current", "Toggle"),
        ("ctrl+s", "confirm", "Confirm"),
    ]

    CSS = """
    CustomizeModal {
        align: center middle;
        background: $background 60%;
    }

    #customize-dialog {
        width: 72;
        height: auto;
        max-height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #customize-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #customize-body {
        color: white;
    }

    #customize-error {
        color: #ffb3b3;
        margin-top: 1;
    }

    #customize-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)
    _OPTION_KIND = "option"
    _ADDON_KIND = "addon"
    _CONFIRM_KIND = "confirm"

    def __init__(self, product: Product, catalog: list[Product], initial: SaleItem | None = None) -> None:
        super().__init__()
        self.product = product
        self.limits = product.options or BundleLimits()
        self.choices = {slot: option_choices(catalog, slot) for slot in SLOT_LABELS}
        self.addons = addon_products(catalog)
        self.selected = SelectedOptions()
        self.selected_addon_ids: list[int] = []
        if initial is not None:
            # Edit a copy so Esc leaves the line untouched.
            self.selected = SelectedOptions.from_dict(initial.selected_options.to_dict())
            self.selected_addon_ids = [addon.id for addon in initial.addons]
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="customize-dialog"):
            yield Static(self.product.name, id="customize-title")
            yield Static(id="customize-body")
            yield Static(id="customize-error")
            yield Static("J/K/↑/↓ move, Enter toggle, Ctrl+S confirm, Esc/q/Ctrl+C close", id="customize-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss(None)

    def action_confirm(self) -> None:
        chosen = [addon for addon in self.addons if addon.id in self.selected_addon_ids]
        self.dismiss((self.selected, chosen))

    def action_move_cursor(self, delta: int) -> None:
        rows = self._rows()
        self.cursor_index = (self.cursor_index + delta) % len(rows)
        self._refresh_content()

    def action_toggle_current(self) -> None:
        kind, key, value = self._rows()[self.cursor_index]
        self.error = ""

        if kind == self._CONFIRM_KIND:
            self.action_confirm()
            return

        if kind == self._ADDON_KIND:
            addon_id = int(value)
            if addon_id in self.selected_addon_ids:
                self.selected_addon_ids.remove(addon_id)
            else:
                self.selected_addon_ids.append(addon_id)
            self._refresh_content()
            return

        picked: list[str] = getattr(self.selected, key)
        limit = getattr(self.limits, key)
        if value in picked:
            picked.remove(value)
        elif len(picked) >= limit:
            self.error = f"Máximo de {limit} em {SLOT_LABELS[key]}."
        else:
            picked.append(value)
        self._refresh_content()

    def _rows(self) -> list[tuple[str, str, str]]:
        rows: list[tuple[str, str, str]] = []
        for slot, names in self.choices.items():
            if getattr(self.limits, slot) > 0:
                rows.extend((self._OPTION_KIND, slot, name) for name in names)
        rows.extend((self._ADDON_KIND, "", str(addon.id)) for addon in self.addons)
        rows.append((self._CONFIRM_KIND, "", "Confirmar"))
        return rows

    def _refresh_content(self) -> None:
        body = self.query_one("#customize-body", Static)
        error_widget = self.query_one("#customize-error", Static)
        addons_by_id = {addon.id: addon for addon in self.addons}

        content = Text(style="white")
        current_heading = None
        for idx, (kind, key, value) in enumerate(self._rows()):
            heading = self._heading(kind, key)
            if heading != current_heading:
                if idx > 0:
                    content.append("\n")
                content.append(f"{heading}\n", style="bold")
                current_heading = heading
            pointer = "➤ " if idx == self.cursor_index else "  "
            if kind == self._OPTION_KIND:
                checked = value in getattr(self.selected, key)
                content.append(f"{pointer}{'[x]' if checked else '[ ]'} {value}\n", style="bold white" if checked else "white")
            elif kind == self._ADDON_KIND:
                addon = addons_by_id[int(value)]
                checked = addon.id in self.selected_addon_ids
                content.append(
                    f"{pointer}{'[x]' if checked else '[ ]'} {addon.name} (+{format_currency(addon.price)})\n",
                    style="bold white" if checked else "white",
                )
            else:
                content.append(f"{pointer}{value}", style="bold")

        body.update(content)
        error_widget.update(self.error)

    def _heading(self, kind: str, key: str) -> str:
        if kind == self._OPTION_KIND:
            return f"{SLOT_LABELS[key]} (até {getattr(self.limits, key)})"
        if kind == self._ADDON_KIND:
            return "Adicionais"
        return ""
