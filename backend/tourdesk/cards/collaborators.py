"""Capabilities the card renderer depends on, injected at construction."""

from collections.abc import Awaitable
from typing import Protocol

from tourdesk.cards.markup import Node


class ImageLazyLoader(Protocol):
    """Starts deferred loading for an image placeholder. May be sync or async."""

    def __call__(self, element: Node) -> Awaitable[None] | None: ...


class AnalyticsSink(Protocol):
    def track_tour_click(self, tour_id: int | str) -> None: ...


class Navigator(Protocol):
    def navigate(self, url: str) -> None: ...
