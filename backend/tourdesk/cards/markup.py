"""Immutable element tree — a small declarative stand-in for DOM construction.

Nodes are frozen, so a rendered tree can be inspected in tests, cached, or
serialized to HTML without a live document.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from html import escape

# Elements serialized without a closing tag
VOID_TAGS = frozenset({"br", "hr", "img", "input", "link", "meta"})


@dataclass(frozen=True)
class Node:
    tag: str
    attrs: tuple[tuple[str, str], ...] = ()
    children: tuple["Node", ...] = ()
    text: str | None = None

    def get(self, name: str, default: str | None = None) -> str | None:
        for attr_name, value in self.attrs:
            if attr_name == name:
                return value
        return default

    @property
    def classes(self) -> tuple[str, ...]:
        return tuple((self.get("class") or "").split())

    def iter(self) -> Iterator["Node"]:
        """Depth-first walk, self first."""
        yield self
        for child in self.children:
            yield from child.iter()

    def find(self, class_name: str) -> "Node | None":
        for node in self.iter():
            if class_name in node.classes:
                return node
        return None

    def find_all(self, class_name: str) -> list["Node"]:
        return [node for node in self.iter() if class_name in node.classes]

    def text_content(self) -> str:
        parts = [self.text or ""]
        parts.extend(child.text_content() for child in self.children)
        return "".join(parts)

    def to_html(self) -> str:
        attrs = "".join(f' {name}="{escape(value, quote=True)}"' for name, value in self.attrs)
        if self.tag in VOID_TAGS:
            return f"<{self.tag}{attrs}>"
        inner = escape(self.text, quote=False) if self.text else ""
        inner += "".join(child.to_html() for child in self.children)
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"


def _attr_name(name: str) -> str:
    return name.rstrip("_").replace("_", "-")


def el(tag: str, *children: Node, class_: str | None = None, text: str | None = None, **attrs) -> Node:
    """Build a node: ``el("div", class_="card", data_tour_id=7)``.

    Keyword names map to HTML attributes (``data_tour_id`` → ``data-tour-id``).
    ``None`` values are dropped, everything else is stringified.
    """
    pairs: list[tuple[str, str]] = []
    if class_:
        pairs.append(("class", class_))
    for name, value in attrs.items():
        if value is None:
            continue
        pairs.append((_attr_name(name), str(value)))
    return Node(tag=tag, attrs=tuple(pairs), children=tuple(children), text=text)
