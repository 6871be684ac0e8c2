"""Tour summary cards — builds the card tree and wires its click behaviour."""

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any

from tourdesk.cards.collaborators import AnalyticsSink, ImageLazyLoader, Navigator
from tourdesk.cards.formatting import DateFormatter, ImageResolver, PriceFormatter
from tourdesk.cards.i18n import Localizer, translate
from tourdesk.cards.markup import Node, el
from tourdesk.schemas.tour import TourSummary

logger = logging.getLogger(__name__)

SEPARATOR = " • "
# Clicks inside these elements are left to the element itself
INTERACTIVE_TAGS = frozenset({"a", "button"})


@dataclass(frozen=True)
class ClickEvent:
    """A click as seen by the card: the composed path from the target up to the card root."""

    path: tuple[Node, ...] = ()

    @property
    def target(self) -> Node | None:
        return self.path[0] if self.path else None


@dataclass
class RenderedCard:
    root: Node
    tour_id: int | str
    tour_url: str
    lazy_load: asyncio.Task | None = None
    _on_click: Callable[[ClickEvent], str | None] | None = field(default=None, repr=False)

    def click(self, event: ClickEvent | None = None) -> str | None:
        """Dispatch a click. Returns the URL navigated to, or None if ignored."""
        if self._on_click is None:
            return None
        return self._on_click(event or ClickEvent(path=(self.root,)))

    def to_html(self) -> str:
        return self.root.to_html()


class CardRenderer:
    """Renders TourSummary records into travel cards."""

    def __init__(
        self,
        date_formatter: DateFormatter | None = None,
        price_formatter: PriceFormatter | None = None,
        image_resolver: ImageResolver | None = None,
        localizer: Localizer | None = None,
        lazy_loader: ImageLazyLoader | None = None,
        analytics: AnalyticsSink | None = None,
        navigator: Navigator | None = None,
    ):
        self.date_formatter = date_formatter or DateFormatter()
        self.price_formatter = price_formatter or PriceFormatter(localizer=localizer)
        self.image_resolver = image_resolver or ImageResolver()
        self.localizer = localizer
        self.lazy_loader = lazy_loader
        self.analytics = analytics
        self.navigator = navigator

    def render(self, tour: Any) -> RenderedCard:
        """Build one card. Raises InvalidInputError for a missing or unidentified tour."""
        summary = TourSummary.coerce(tour)
        tour_url = f"/tour/{summary.id}"

        image = self._create_image(summary)
        root = el(
            "div",
            image,
            self._create_content(summary),
            class_="travelCard",
            data_tour_id=summary.id,
            data_dynamic_card="true",
            data_tilda_ignore="true",
            data_tour_url=tour_url,
        )

        return RenderedCard(
            root=root,
            tour_id=summary.id,
            tour_url=tour_url,
            lazy_load=self._schedule_lazy_load(image),
            _on_click=self._click_handler(summary, tour_url),
        )

    def render_many(self, tours: Iterable[Any]) -> list[RenderedCard]:
        """Render a card grid in chronological order of start date."""
        summaries = [TourSummary.coerce(t) for t in tours]
        by_start = cmp_to_key(lambda a, b: self.date_formatter.compare(a.date_start, b.date_start))
        return [self.render(s) for s in sorted(summaries, key=by_start)]

    # ── Structure ──

    def _create_image(self, summary: TourSummary) -> Node:
        return el(
            "div",
            class_="tour-card-image lazy-image",
            data_bg=self.image_resolver.resolve(summary.image_url),
        )

    def _create_content(self, summary: TourSummary) -> Node:
        parts = [self._create_meta(summary), self._create_title(summary)]
        if summary.short_description:
            parts.append(el("div", class_="tour-card-description", text=summary.short_description))
        return el("div", *parts, class_="tour-card-content")

    def _create_meta(self, summary: TourSummary) -> Node:
        date_text = self.date_formatter.format_range(summary.date_start, summary.date_end)
        price_text = self.price_formatter.format(summary.price)

        spans = []
        if date_text:
            spans.append(el("span", class_="tour-card-date", text=date_text))
        if date_text and price_text:
            spans.append(el("span", class_="tour-card-separator", text=SEPARATOR))
        if price_text:
            spans.append(
                el(
                    "span",
                    class_="tour-card-price price",
                    text=price_text,
                    data_price_rub=_plain_number(summary.price),
                )
            )
        return el("div", *spans, class_="tour-card-meta")

    def _create_title(self, summary: TourSummary) -> Node:
        fallback = translate(self.localizer, "calendar", "tour", "Тур")
        return el("div", class_="tour-card-title", text=summary.title or fallback)

    # ── Behaviour ──

    def _schedule_lazy_load(self, image: Node) -> asyncio.Task | None:
        """Run the lazy loader on the next loop tick, after the caller has mounted the card."""
        if self.lazy_loader is None:
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, lazy image init skipped")
            return None
        return loop.create_task(self._init_lazy_image(image))

    async def _init_lazy_image(self, image: Node) -> None:
        await asyncio.sleep(0)
        try:
            result = self.lazy_loader(image)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.warning(f"Lazy image init failed for {image.get('data-bg')}: {e}")

    def _click_handler(self, summary: TourSummary, tour_url: str) -> Callable[[ClickEvent], str | None]:
        def on_click(event: ClickEvent) -> str | None:
            if any(node.tag in INTERACTIVE_TAGS for node in event.path):
                return None

            if self.analytics is not None:
                try:
                    self.analytics.track_tour_click(summary.id)
                except Exception as e:
                    logger.debug(f"Analytics error ignored for tour {summary.id}: {e}")

            if self.navigator is not None:
                self.navigator.navigate(tour_url)
            return tour_url

        return on_click


def _plain_number(value: float | None) -> str:
    if value is None:
        return ""
    return f"{float(value):.2f}".rstrip("0").rstrip(".")
