"""Display formatters for tour cards — dates, prices and images."""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Protocol

from tourdesk.cards.i18n import Localizer, translate
from tourdesk.data.currency import format_price, group_number

INVALID_DATE = "Invalid Date"
DEFAULT_IMAGE = "/assets/images/hero_background-min.jpg"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Genitive month names, as used in "1 мая 2024 г."
RU_MONTHS = [
    "", "января", "февраля", "марта", "апреля", "мая", "июня",
    "июля", "августа", "сентября", "октября", "ноября", "декабря",
]

EN_MONTHS = [
    "", "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

DateInput = date | datetime | str | None


def parse_date(value: DateInput) -> datetime | None:
    """Parse a date-like value into an aware UTC datetime. None when unparsable."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str):
        return None
    raw = value.strip()
    try:
        if len(raw) == 10:
            d = date.fromisoformat(raw)
            return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class DateFormatter:
    """Long-form localized dates and date ranges."""

    def __init__(self, locale: str = "ru"):
        self.locale = locale
        self._language = locale.replace("_", "-").split("-")[0].lower()

    def format_long(self, value: DateInput) -> str:
        parsed = parse_date(value)
        if parsed is None:
            return INVALID_DATE
        if self._language == "en":
            return f"{EN_MONTHS[parsed.month]} {parsed.day}, {parsed.year}"
        return f"{parsed.day} {RU_MONTHS[parsed.month]} {parsed.year} г."

    def format_range(self, date_start: DateInput, date_end: DateInput = None) -> str:
        """'1 мая 2024 г. - 10 мая 2024 г.', only the start, or '' without a start."""
        if not date_start:
            return ""
        start_text = self.format_long(date_start)
        if date_end:
            return f"{start_text} - {self.format_long(date_end)}"
        return start_text

    @staticmethod
    def compare(date_a: DateInput, date_b: DateInput) -> int:
        """Millisecond difference a - b. Absent or unparsable dates count as the epoch."""
        return _millis(date_a) - _millis(date_b)


def _millis(value: DateInput) -> int:
    parsed = parse_date(value) if value else None
    if parsed is None:
        return 0
    return int((parsed - EPOCH).total_seconds() * 1000)


class CurrencyFormatter(Protocol):
    def __call__(self, amount: float | Decimal | None) -> str: ...


class SymbolCurrencyFormatter:
    """Prices in an arbitrary currency: 'from $1,250' style with the symbol table."""

    def __init__(self, currency: str = "EUR", locale: str = "ru", localizer: Localizer | None = None):
        self.currency = currency
        self.locale = locale
        self.localizer = localizer

    def __call__(self, amount: float | Decimal | None) -> str:
        if not amount:
            return ""
        from_text = translate(self.localizer, "common", "from", "от")
        return f"{from_text} {format_price(amount, self.currency, self.locale)}"


class PriceFormatter:
    """Card price text. A configured currency formatter is authoritative."""

    def __init__(
        self,
        localizer: Localizer | None = None,
        locale: str = "ru",
        currency_formatter: CurrencyFormatter | None = None,
    ):
        self.localizer = localizer
        self.locale = locale
        self.currency_formatter = currency_formatter

    def format(self, amount: float | Decimal | None) -> str:
        if self.currency_formatter is not None:
            return self.currency_formatter(amount)
        # Prices are stored in euros; a zero price renders empty as well
        if not amount:
            return ""
        from_text = translate(self.localizer, "common", "from", "от")
        return f"{from_text} {group_number(amount, self.locale)}€"


class ImageResolver:
    def __init__(self, default_path: str = DEFAULT_IMAGE):
        self.default_path = default_path

    def resolve(self, image_url: str | None) -> str:
        if not image_url:
            return self.default_path
        return image_url if image_url.startswith("/") else f"/{image_url}"
