"""Single-line text entry modal screen."""

from __future__ import annotations

from typing import Callable

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

# Returns an error message, or None when the value is acceptable.
Validator = Callable[[str], "str | None"]


def digits_only(char: str) -> bool:
    return char.isdigit()


def money_chars(char: str) -> bool:
    return char.isdigit() or char in {",", "."}


def any_char(char: str) -> bool:
    return True


def parse_money(value: str) -> float:
    """Parse "12,50" or "12.50"; raises ValueError on garbage."""
    return float(value.strip().replace(",", "."))


def required(message: str) -> Validator:
    def _check(value: str) -> str | None:
        return message if not value.strip() else None

    return _check


def grams_in_range(minimum: int, maximum: int) -> Validator:
    def _check(value: str) -> str | None:
        if not value:
            return "Informe o peso em gramas."
        grams = int(value)
        if not (minimum <= grams <= maximum):
            return f"O peso deve estar entre {minimum} g e {maximum} g."
        return None

    return _check


def optional_money(value: str) -> str | None:
    if not value:
        return None
    try:
        parsed = parse_money(value)
    except ValueError:
        return "Valor inválido."
    if parsed < 0:
        return "Valor inválido."
    return None


class PromptModal(ModalScreen[str | None]):
    """Prompt for one line of text; dismisses with the raw value or None on cancel."""

    CSS = """
    PromptModal {
        align: center middle;
        background: $background 60%;
    }

    #prompt-dialog {
        width: 60;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #prompt-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #prompt-message {
        color: white;
        margin-bottom: 1;
    }

    #prompt-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #prompt-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #prompt-help {
        color: #dddddd;
    }
    """

    def __init__(
        self,
        title: str,
        message: str,
        allowed: Callable[[str], bool] = any_char,
        validate: Validator | None = None,
        max_length: int = 40,
        mask: bool = False,
        initial: str = "",
    ) -> None:
        super().__init__()
        self.title_text = title
        self.prompt_text = message
        self.allowed = allowed
        self.validator = validate
        self.max_length = max_length
        self.masked = mask
        self.value = initial
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="prompt-dialog"):
            yield Static(self.title_text, id="prompt-title")
            yield Static(self.prompt_text, id="prompt-message")
            yield Static(id="prompt-value")
            yield Static(id="prompt-error")
            yield Static("Enter confirma. Backspace apaga. Esc/Ctrl+C cancela.", id="prompt-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character and self.allowed(event.character):
            if len(self.value) < self.max_length:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        if self.validator is not None:
            error = self.validator(self.value)
            if error:
                self.error = error
                self._refresh_content()
                return
        self.dismiss(self.value)

    def _refresh_content(self) -> None:
        value_widget = self.query_one("#prompt-value", Static)
        error_widget = self.query_one("#prompt-error", Static)
        shown = "*" * len(self.value) if self.masked else self.value
        value_widget.update(shown)
        error_widget.update(self.error or "")
