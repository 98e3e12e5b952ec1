from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal

from plotgrammar.errors import ThemeElementError
from plotgrammar.style.elements import ELEMENT_CLASSES, ElementBlank, Rel, Unit


ElementKind = Literal["element_line", "element_rect", "element_text", "unit", "character"]
_KINDS = ("element_line", "element_rect", "element_text", "unit", "character")


@dataclass(frozen=True)
class ElementDef:
    kind: ElementKind
    inherits: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in _KINDS:
            raise ThemeElementError(f"unknown element kind: {self.kind!r}")

    def accepts(self, value: Any) -> bool:
        if value is None or isinstance(value, ElementBlank):
            return True
        if self.kind == "unit":
            return isinstance(value, (Unit, Rel)) or (isinstance(value, (int, float)) and not isinstance(value, bool))
        if self.kind == "character":
            # legend.position also takes a numeric (x, y) pair
            return isinstance(value, str) or (isinstance(value, tuple) and len(value) == 2)
        return isinstance(value, ELEMENT_CLASSES[self.kind])


def el_def(kind: ElementKind, inherits: str | None = None, description: str | None = None) -> ElementDef:
    return ElementDef(kind=kind, inherits=inherits, description=description)


@dataclass(frozen=True)
class ElementTree:
    """Immutable table of theme properties and the parent each one inherits from."""

    definitions: Mapping[str, ElementDef] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = MappingProxyType(dict(self.definitions))
        object.__setattr__(self, "definitions", frozen)
        for name, definition in frozen.items():
            parent = definition.inherits
            if parent is None:
                continue
            if parent not in frozen:
                raise ThemeElementError(f"element `{name}` inherits from undefined element `{parent}`")
            if frozen[parent].kind != definition.kind:
                raise ThemeElementError(
                    f"element `{name}` ({definition.kind}) cannot inherit from `{parent}` ({frozen[parent].kind})"
                )
            self.lineage(name)

    def __contains__(self, name: object) -> bool:
        return name in self.definitions

    def __len__(self) -> int:
        return len(self.definitions)

    def get(self, name: str) -> ElementDef | None:
        return self.definitions.get(name)

    def lineage(self, name: str) -> list[str]:
        """``name`` followed by its ancestors, nearest first."""

        chain = [name]
        definition = self.definitions.get(name)
        while definition is not None and definition.inherits is not None:
            parent = definition.inherits
            if parent in chain:
                raise ThemeElementError(f"inheritance cycle: {' -> '.join(chain + [parent])}")
            chain.append(parent)
            definition = self.definitions.get(parent)
        return chain

    def roots(self) -> list[str]:
        return [name for name, d in self.definitions.items() if d.inherits is None]


DEFAULT_ELEMENT_TREE = ElementTree(
    {
        "line": el_def("element_line", description="all line elements"),
        "rect": el_def("element_rect", description="all rectangular elements"),
        "text": el_def("element_text", description="all text elements"),
        "title": el_def("character", description="plot title text"),
        "axis.line": el_def("element_line", "line"),
        "axis.text": el_def("element_text", "text"),
        "axis.title": el_def("element_text", "text"),
        "axis.ticks": el_def("element_line", "line"),
        "legend.key.size": el_def("unit"),
        "panel.grid": el_def("element_line", "line"),
        "panel.grid.major": el_def("element_line", "panel.grid"),
        "panel.grid.minor": el_def("element_line", "panel.grid"),
        "strip.text": el_def("element_text", "text"),
        "axis.line.x": el_def("element_line", "axis.line"),
        "axis.line.y": el_def("element_line", "axis.line"),
        "axis.text.x": el_def("element_text", "axis.text"),
        "axis.text.y": el_def("element_text", "axis.text"),
        "axis.ticks.length": el_def("unit"),
        "axis.ticks.x": el_def("element_line", "axis.ticks"),
        "axis.ticks.y": el_def("element_line", "axis.ticks"),
        "axis.title.x": el_def("element_text", "axis.title"),
        "axis.title.y": el_def("element_text", "axis.title"),
        "axis.ticks.margin": el_def("unit"),
        "legend.background": el_def("element_rect", "rect"),
        "legend.margin": el_def("unit"),
        "legend.key": el_def("element_rect", "rect"),
        "legend.key.height": el_def("unit", "legend.key.size"),
        "legend.key.width": el_def("unit", "legend.key.size"),
        "legend.text": el_def("element_text", "text"),
        "legend.text.align": el_def("character"),
        "legend.title": el_def("element_text", "text"),
        "legend.title.align": el_def("character"),
        "legend.position": el_def("character"),
        "legend.direction": el_def("character"),
        "legend.justification": el_def("character"),
        "legend.box": el_def("character"),
        "panel.background": el_def("element_rect", "rect"),
        "panel.border": el_def("element_rect", "rect"),
        "panel.margin": el_def("unit"),
        "panel.grid.major.x": el_def("element_line", "panel.grid.major"),
        "panel.grid.major.y": el_def("element_line", "panel.grid.major"),
        "panel.grid.minor.x": el_def("element_line", "panel.grid.minor"),
        "panel.grid.minor.y": el_def("element_line", "panel.grid.minor"),
        "strip.background": el_def("element_rect", "rect"),
        "strip.text.x": el_def("element_text", "strip.text"),
        "strip.text.y": el_def("element_text", "strip.text"),
        "plot.background": el_def("element_rect", "rect"),
        "plot.title": el_def("element_text", "text"),
        "plot.margin": el_def("unit"),
    }
)
