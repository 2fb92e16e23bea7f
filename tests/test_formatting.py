from __future__ import annotations

from datetime import datetime

from pdv.formatting import format_currency, format_date, format_weight


def test_currency_uses_brazilian_separators():
    assert format_currency(1234.5) == "R$ 1.234,50"
    assert format_currency(0) == "R$ 0,00"
    assert format_currency(-3) == "-R$ 3,00"


def test_date():
    assert format_date(datetime(2024, 3, 7, 9, 5)) == "07/03/2024 09:05"


def test_weight():
    assert format_weight(500) == "500 g"
    assert format_weight(1500) == "1,5 kg"
