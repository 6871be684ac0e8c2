from datetime import date, datetime, timezone

import pytest

from tourdesk.cards.formatting import (
    DEFAULT_IMAGE,
    INVALID_DATE,
    DateFormatter,
    ImageResolver,
    PriceFormatter,
    SymbolCurrencyFormatter,
)
from tourdesk.cards.i18n import CatalogLocalizer
from tourdesk.data.currency import format_price, group_number

NBSP = "\u00a0"


class TestDateFormatter:
    def test_no_start_is_empty(self):
        fmt = DateFormatter("ru")
        assert fmt.format_range(None, None) == ""
        assert fmt.format_range("", None) == ""

    def test_end_without_start_is_empty(self):
        assert DateFormatter("ru").format_range(None, "2024-05-10") == ""

    def test_start_only(self):
        assert DateFormatter("ru").format_range("2024-05-01", None) == "1 мая 2024 г."
        assert DateFormatter("en").format_range("2024-05-01") == "May 1, 2024"

    def test_range(self):
        assert DateFormatter("ru").format_range("2024-05-01", "2024-05-10") == "1 мая 2024 г. - 10 мая 2024 г."
        assert DateFormatter("en").format_range(date(2024, 12, 30), date(2025, 1, 2)) == "December 30, 2024 - January 2, 2025"

    def test_datetime_strings(self):
        fmt = DateFormatter("en")
        assert fmt.format_range("2024-05-01T10:30:00Z") == "May 1, 2024"
        assert fmt.format_range(datetime(2024, 3, 8, 12, 0)) == "March 8, 2024"

    def test_malformed_dates_do_not_raise(self):
        fmt = DateFormatter("ru")
        assert fmt.format_range("not-a-date") == INVALID_DATE
        assert fmt.format_range("2024-05-01", "2024-13-45") == f"1 мая 2024 г. - {INVALID_DATE}"

    def test_compare_orders_chronologically(self):
        assert DateFormatter.compare("2024-01-02", "2024-01-01") == 86_400_000
        assert DateFormatter.compare("2024-01-01", "2024-01-02") < 0
        assert DateFormatter.compare(date(2024, 1, 1), "2024-01-01") == 0

    def test_compare_absent_is_epoch(self):
        assert DateFormatter.compare(None, None) == 0
        assert DateFormatter.compare(None, "1971-01-01") < 0
        assert DateFormatter.compare(datetime(1970, 1, 1, tzinfo=timezone.utc), None) == 0


class TestPriceFormatter:
    @pytest.mark.parametrize("amount", [None, 0, 0.0])
    def test_falsy_amount_is_empty(self, amount):
        assert PriceFormatter(CatalogLocalizer("en"), "en").format(amount) == ""

    def test_english(self):
        text = PriceFormatter(CatalogLocalizer("en"), "en").format(1250)
        assert text == "from 1,250€"
        assert text.index("from") < text.index("1,250") < text.index("€")

    def test_russian_default_prefix(self):
        assert PriceFormatter().format(1250) == f"от 1{NBSP}250€"

    def test_missing_translation_falls_back_to_russian(self):
        assert PriceFormatter(CatalogLocalizer("xx"), "en").format(99) == "от 99€"

    def test_fraction_kept(self):
        assert PriceFormatter(CatalogLocalizer("en"), "en").format(1250.5) == "from 1,250.5€"

    def test_currency_formatter_is_authoritative(self):
        calls = []

        def external(amount):
            calls.append(amount)
            return "FREE" if not amount else f"{amount} RUB"

        fmt = PriceFormatter(CatalogLocalizer("en"), "en", currency_formatter=external)
        assert fmt.format(0) == "FREE"
        assert fmt.format(500) == "500 RUB"
        assert calls == [0, 500]

    def test_symbol_currency_formatter(self):
        fmt = SymbolCurrencyFormatter("USD", "en", CatalogLocalizer("en"))
        assert fmt(1250) == "from 1,250$"
        assert fmt(None) == ""


class TestCurrency:
    def test_group_number(self):
        assert group_number(1234567.891, "en") == "1,234,567.89"
        assert group_number(1234567.891, "ru") == f"1{NBSP}234{NBSP}567,89"
        assert group_number(1234567, "de-DE") == "1.234.567"
        assert group_number(999, "ru_RU") == "999"

    def test_format_price_unknown_currency(self):
        assert format_price(10, "XYZ", "en") == "10 XYZ"


class TestImageResolver:
    def test_absent_uses_default(self):
        assert ImageResolver().resolve(None) == DEFAULT_IMAGE
        assert ImageResolver().resolve("") == DEFAULT_IMAGE
        assert ImageResolver("/img/none.png").resolve(None) == "/img/none.png"

    def test_relative_gets_leading_slash(self):
        assert ImageResolver().resolve("images/x.jpg") == "/images/x.jpg"

    def test_root_relative_unchanged(self):
        assert ImageResolver().resolve("/images/x.jpg") == "/images/x.jpg"
