from __future__ import annotations

from collections.abc import Iterator, Mapping
import logging
from types import MappingProxyType
from typing import Any

from plotgrammar.errors import ThemeElementError
from plotgrammar.style.elements import (
    ElementBlank,
    ElementLine,
    ElementRect,
    ElementText,
    Unit,
    combine_elements,
    merge_element,
    rel,
    unset_fields,
)
from plotgrammar.style.tree import DEFAULT_ELEMENT_TREE, ElementTree


LOGGER = logging.getLogger(__name__)


class Theme(Mapping[str, Any]):
    """Immutable mapping of theme property name to element or raw value."""

    def __init__(self, elements: Mapping[str, Any] | None = None, **named: Any) -> None:
        merged = dict(elements or {})
        # Keyword form uses underscores for the dotted names: axis_text_x=...
        merged.update({key.replace("_", "."): value for key, value in named.items()})
        self._elements = MappingProxyType(merged)

    def __getitem__(self, name: str) -> Any:
        return self._elements[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __repr__(self) -> str:
        return f"Theme({dict(self._elements)!r})"

    def __add__(self, other: Mapping[str, Any]) -> Theme:
        """Property-wise update; set fields on the right override the left."""

        if not isinstance(other, Mapping):
            return NotImplemented
        merged = dict(self._elements)
        for name, value in other.items():
            merged[name] = merge_element(value, merged.get(name))
        return Theme(merged)

    def replace(self, other: Mapping[str, Any]) -> Theme:
        """Swap whole elements rather than merging their properties."""

        merged = dict(self._elements)
        merged.update(other)
        return Theme(merged)


def _check_kind(name: str, value: Any, tree: ElementTree) -> None:
    definition = tree.get(name)
    if definition is not None and not definition.accepts(value):
        raise ThemeElementError(f"theme element `{name}` should be {definition.kind}, got {type(value).__name__}")


def calc_element(name: str, theme: Mapping[str, Any], tree: ElementTree = DEFAULT_ELEMENT_TREE) -> Any:
    """Resolve ``name`` against ``theme`` by walking its inheritance chain.

    Each ancestor only fills properties that are still unset; the walk stops
    once nothing is left to inherit or the root is reached. Returns ``None``
    when neither the theme nor any ancestor defines the property.
    """

    resolved: Any = None
    for node in tree.lineage(name):
        value = theme.get(node)
        _check_kind(node, value, tree)
        resolved = combine_elements(resolved, value)
        if isinstance(resolved, ElementBlank):
            break
        if resolved is not None and not unset_fields(resolved):
            break
    LOGGER.debug("calc_element(%s) -> %r", name, resolved)
    return resolved


def validate_theme(theme: Mapping[str, Any], tree: ElementTree = DEFAULT_ELEMENT_TREE) -> None:
    for name, value in theme.items():
        _check_kind(name, value, tree)


def theme_grey(base_size: float = 12, base_family: str = "") -> Theme:
    """Complete default theme: grey panel, white grid lines."""

    return Theme(
        {
            "line": ElementLine(colour="black", size=0.5, linetype=1, lineend="butt"),
            "rect": ElementRect(fill="white", colour="black", size=0.5, linetype=1),
            "text": ElementText(
                family=base_family,
                face="plain",
                colour="black",
                size=base_size,
                hjust=0.5,
                vjust=0.5,
                angle=0,
                lineheight=0.9,
            ),
            "axis.text": ElementText(size=rel(0.8), colour="grey50"),
            "strip.text": ElementText(size=rel(0.8)),
            "axis.line": ElementBlank(),
            "axis.text.x": ElementText(vjust=1),
            "axis.text.y": ElementText(hjust=1),
            "axis.ticks": ElementLine(colour="grey50"),
            "axis.title.y": ElementText(angle=90),
            "axis.ticks.length": Unit(0.15, "cm"),
            "axis.ticks.margin": Unit(0.1, "cm"),
            "legend.background": ElementRect(colour="transparent"),
            "legend.margin": Unit(0.2, "cm"),
            "legend.key": ElementRect(fill="grey95", colour="white"),
            "legend.key.size": Unit(1.2, "lines"),
            "legend.text": ElementText(size=rel(0.8)),
            "legend.title": ElementText(size=rel(0.8), face="bold", hjust=0),
            "legend.position": "right",
            "legend.box": "vertical",
            "panel.background": ElementRect(fill="grey90", colour="transparent"),
            "panel.border": ElementBlank(),
            "panel.grid.major": ElementLine(colour="white"),
            "panel.grid.minor": ElementLine(colour="grey95", size=0.25),
            "panel.margin": Unit(0.25, "lines"),
            "strip.background": ElementRect(fill="grey80", colour="transparent"),
            "strip.text.y": ElementText(angle=-90),
            "plot.background": ElementRect(colour="white"),
            "plot.title": ElementText(size=rel(1.2)),
            "plot.margin": Unit((1, 1, 0.5, 0.5), "lines"),
        }
    )
