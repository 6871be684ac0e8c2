"""Currency utilities — symbols and locale-aware price strings."""

from decimal import Decimal

CURRENCY_SYMBOLS: dict[str, str] = {
    "EUR": "€", "USD": "$", "RUB": "₽", "GBP": "£",
    "CAD": "CA$", "CHF": "CHF", "TRY": "₺", "AED": "AED",
    "GEL": "₾", "AMD": "֏", "KZT": "₸",
}

# (thousands separator, decimal separator) per language
NUMBER_SEPARATORS: dict[str, tuple[str, str]] = {
    "en": (",", "."),
    "ru": ("\u00a0", ","),
    "de": (".", ","),
    "fr": ("\u202f", ","),
}


def _language(locale: str) -> str:
    return locale.replace("_", "-").split("-")[0].lower()


def group_number(amount: float | int | Decimal, locale: str = "ru") -> str:
    """Group thousands the way the locale does, keeping at most two decimals.

    1250 → "1,250" (en) / "1 250" (ru, no-break space); 1250.5 → "1,250.5".
    """
    thousands, decimal = NUMBER_SEPARATORS.get(_language(locale), NUMBER_SEPARATORS["en"])
    text = f"{float(amount):,.2f}".rstrip("0").rstrip(".")
    return text.replace(",", "\x00").replace(".", decimal).replace("\x00", thousands)


def format_price(amount: float | int | Decimal, currency: str = "EUR", locale: str = "ru") -> str:
    """Format a price with currency symbol for display, symbol after the number."""
    symbol = CURRENCY_SYMBOLS.get(currency, " " + currency)
    return f"{group_number(amount, locale)}{symbol}"
