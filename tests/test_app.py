"""Headless runs of the terminal app."""

from __future__ import annotations

import asyncio

import pytest

from pdv.models import PaymentMethod
from pdv.persistence import MemoryStorage
from pdv.pos_app import PdvApp
from pdv.report_screen import ReportScreen


@pytest.fixture
def app(tmp_path):
    pdv_app = PdvApp(storage=MemoryStorage(), receipts_dir=tmp_path / "receipts", print_tickets=False)
    pdv_app.auth.delay = 0
    return pdv_app


def run(app, scenario):
    async def _run():
        async with app.run_test() as pilot:
            await scenario(pilot)

    asyncio.run(_run())


def test_direct_sale_with_pix(app, tmp_path):
    async def scenario(pilot):
        await pilot.press("s", "t", "a", "p", "i", "enter")
        assert [item.product.name for item in app.cart.items] == ["Tapioca"]
        app.action_cancel_active_mode()
        await pilot.press("p", "4")
        await pilot.pause()

    run(app, scenario)

    assert app.sales.total_sales == 1
    assert app.sales.sales[0].payment_method is PaymentMethod.PIX
    assert app.cart.is_empty
    assert (tmp_path / "receipts" / f"pedido-{app.sales.sales[0].id}.html").exists()


def test_comanda_with_weighed_cup(app):
    async def scenario(pilot):
        await pilot.press("n", "a", "n", "a", "enter")
        await pilot.pause()
        assert app.current_order_id is not None
        await pilot.press("s", "p", "e", "s", "o", "enter")
        await pilot.pause()
        await pilot.press("5", "0", "0", "enter")
        await pilot.pause()

    run(app, scenario)

    order = app.orders.orders[0]
    assert order.customer_name == "ana"
    assert order.items[0].weight == 500


def test_report_requires_password(app):
    async def scenario(pilot):
        await pilot.press("r", *app.auth.password, "enter")
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()
        assert isinstance(app.screen, ReportScreen)
        await pilot.press("l")
        await pilot.pause()

    run(app, scenario)

    assert not app.auth.is_authenticated


def test_edit_line_adds_addon(app):
    async def scenario(pilot):
        await pilot.press("s", "t", "a", "p", "i", "enter")
        app.action_cancel_active_mode()
        await pilot.press("j", "e")
        await pilot.pause()
        await pilot.press("enter", "ctrl+s")
        await pilot.pause()

    run(app, scenario)

    line = app.cart.items[0]
    assert line.quantity == 1
    assert len(line.addons) == 1
    assert app.system_status == "Item atualizado"
