from tourdesk.cards.formatting import (
    DateFormatter,
    ImageResolver,
    PriceFormatter,
    SymbolCurrencyFormatter,
)
from tourdesk.cards.i18n import CatalogLocalizer
from tourdesk.cards.markup import Node, el
from tourdesk.cards.renderer import CardRenderer, ClickEvent, RenderedCard


def build_card_renderer(locale: str = "ru", currency: str = "EUR", default_image: str | None = None) -> CardRenderer:
    """Card renderer for server-side pages. Non-euro currencies use the symbol table."""
    localizer = CatalogLocalizer(locale)
    currency_formatter = None
    if currency != "EUR":
        currency_formatter = SymbolCurrencyFormatter(currency, locale, localizer)
    return CardRenderer(
        date_formatter=DateFormatter(locale),
        price_formatter=PriceFormatter(localizer, locale, currency_formatter),
        image_resolver=ImageResolver(default_image) if default_image else ImageResolver(),
        localizer=localizer,
    )


__all__ = [
    "CardRenderer",
    "CatalogLocalizer",
    "ClickEvent",
    "DateFormatter",
    "ImageResolver",
    "Node",
    "PriceFormatter",
    "RenderedCard",
    "SymbolCurrencyFormatter",
    "build_card_renderer",
    "el",
]
