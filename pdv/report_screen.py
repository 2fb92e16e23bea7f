"""Sales report screen shown after the password gate."""

from __future__ import annotations

from datetime import datetime

from textual.app import ComposeResult
from textual.containers import Container, VerticalScroll
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from pdv.auth import AuthGate
from pdv.debug_log import log_debug
from pdv.formatting import format_date
from pdv.reports import REPORT_TYPES, calculate_sales_report, date_range_for_report_type, get_recent_sales
from pdv.rendering import render_sales_report
from pdv.stores import SalesStore

REPORT_TITLES = dict(zip(REPORT_TYPES, ("Relatório diário", "Relatório semanal", "Relatório mensal")))


class ReportScreen(ModalScreen[None]):
    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("d", "show('daily')", "Daily"),
        ("w", "show('weekly')", "Weekly"),
        ("m", "show('monthly')", "Monthly"),
        ("l", "logout", "Logout"),
    ]

    CSS = """
    ReportScreen {
        align: center middle;
        background: $background 60%;
    }

    #report-dialog {
        width: 90%;
        height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #report-header {
        text-style: bold;
        color: white;
        margin-bottom: 1;
    }

    #report-scroll {
        height: 1fr;
    }

    #report-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    report_type = reactive("daily")

    def __init__(self, sales: SalesStore, auth: AuthGate) -> None:
        super().__init__()
        self.sales = sales
        self.auth = auth

    def compose(self) -> ComposeResult:
        with Container(id="report-dialog"):
            yield Static(id="report-header")
            with VerticalScroll(id="report-scroll"):
                yield Static(id="report-body")
            yield Static("D diário, W semanal, M mensal, L sair da conta, Esc/q fechar", id="report-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss(None)

    def action_show(self, report_type: str) -> None:
        self.report_type = report_type
        self._refresh_content()

    def action_logout(self) -> None:
        self.auth.logout()
        log_debug("report_logout")
        self.dismiss(None)

    def _refresh_content(self, now: datetime | None = None) -> None:
        start, end = date_range_for_report_type(self.report_type, now)
        report = calculate_sales_report(self.sales.sales, start, end)
        header = self.query_one("#report-header", Static)
        body = self.query_one("#report-body", Static)
        header.update(f"{REPORT_TITLES[self.report_type]}: {format_date(start)} a {format_date(end)}")
        body.update(render_sales_report(report, REPORT_TITLES[self.report_type], get_recent_sales(self.sales.sales)))
