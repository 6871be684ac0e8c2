"""UI string catalogues used by the card renderer."""

from collections.abc import Mapping
from typing import Protocol

CATALOGUES: dict[str, dict[str, dict[str, str]]] = {
    "ru": {
        "common": {"from": "от"},
        "calendar": {"tour": "Тур"},
    },
    "en": {
        "common": {"from": "from"},
        "calendar": {"tour": "Tour"},
    },
}


class Localizer(Protocol):
    def translations(self) -> Mapping[str, Mapping[str, str]]: ...


class CatalogLocalizer:
    """Serves one of the bundled catalogues. Unknown locales yield an empty mapping."""

    def __init__(self, locale: str = "ru", catalogues: Mapping[str, Mapping] | None = None):
        self.locale = locale
        self._catalogues = catalogues if catalogues is not None else CATALOGUES

    def translations(self) -> Mapping[str, Mapping[str, str]]:
        return self._catalogues.get(self.locale.split("-")[0].split("_")[0], {})


def translate(localizer: Localizer | None, category: str, key: str, default: str) -> str:
    """Nested catalogue lookup; any missing level falls back to ``default``."""
    if localizer is None:
        return default
    section = localizer.translations().get(category) or {}
    return section.get(key) or default
