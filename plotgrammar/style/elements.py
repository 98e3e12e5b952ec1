from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Literal, Union

from plotgrammar.errors import ThemeElementError


FontFace = Literal["plain", "italic", "bold", "bold.italic"]
LineEnd = Literal["butt", "round", "square"]

_FONT_FACES = ("plain", "italic", "bold", "bold.italic")
_LINE_ENDS = ("butt", "round", "square")


@dataclass(frozen=True)
class Rel:
    """Size relative to the parent element's size."""

    factor: float

    def __post_init__(self) -> None:
        if self.factor < 0:
            raise ThemeElementError("rel() factor must be >= 0")

    def __str__(self) -> str:
        return f"{self.factor:g} *"


def rel(x: float) -> Rel:
    return Rel(float(x))


def is_rel(x: Any) -> bool:
    return isinstance(x, Rel)


Size = Union[float, Rel]


@dataclass(frozen=True)
class Unit:
    value: float | tuple[float, ...]
    units: str = "lines"

    def __post_init__(self) -> None:
        if not self.units.strip():
            raise ThemeElementError("unit name must be non-empty")


def _check_size(size: Size | None, owner: str) -> None:
    if size is None or isinstance(size, Rel):
        return
    if isinstance(size, bool) or not isinstance(size, (int, float)) or size < 0:
        raise ThemeElementError(f"{owner} size must be a non-negative number or rel(), got {size!r}")


@dataclass(frozen=True)
class ElementBlank:
    """Draws nothing and takes no space."""


@dataclass(frozen=True)
class ElementRect:
    fill: str | None = None
    colour: str | None = None
    size: Size | None = None
    linetype: str | int | None = None

    def __post_init__(self) -> None:
        _check_size(self.size, "element_rect")


@dataclass(frozen=True)
class ElementLine:
    colour: str | None = None
    size: Size | None = None
    linetype: str | int | None = None
    lineend: LineEnd | None = None

    def __post_init__(self) -> None:
        _check_size(self.size, "element_line")
        if self.lineend is not None and self.lineend not in _LINE_ENDS:
            raise ThemeElementError(f"element_line lineend must be one of {_LINE_ENDS}, got {self.lineend!r}")


@dataclass(frozen=True)
class ElementText:
    family: str | None = None
    face: FontFace | None = None
    colour: str | None = None
    size: Size | None = None
    hjust: float | None = None
    vjust: float | None = None
    angle: float | None = None
    lineheight: float | None = None

    def __post_init__(self) -> None:
        _check_size(self.size, "element_text")
        if self.face is not None and self.face not in _FONT_FACES:
            raise ThemeElementError(f"element_text face must be one of {_FONT_FACES}, got {self.face!r}")


Element = Union[ElementBlank, ElementRect, ElementLine, ElementText]
ELEMENT_CLASSES: dict[str, type] = {
    "element_blank": ElementBlank,
    "element_line": ElementLine,
    "element_rect": ElementRect,
    "element_text": ElementText,
}


def element_blank() -> ElementBlank:
    return ElementBlank()


def element_rect(**props: Any) -> ElementRect:
    return ElementRect(**props)


def element_line(**props: Any) -> ElementLine:
    return ElementLine(**props)


def element_text(**props: Any) -> ElementText:
    return ElementText(**props)


def is_element(value: Any) -> bool:
    return isinstance(value, (ElementBlank, ElementRect, ElementLine, ElementText))


def unset_fields(element: Any) -> list[str]:
    """Fields still waiting on a parent: ``None`` values and relative sizes."""

    if not is_element(element) or isinstance(element, ElementBlank):
        return []
    return [f.name for f in fields(element) if getattr(element, f.name) is None or is_rel(getattr(element, f.name))]


def combine_elements(child: Any, parent: Any) -> Any:
    """Fill ``child``'s unset properties from ``parent``.

    Raw values (units, strings) are taken whole: the child wins when set.
    A blank parent has nothing to give, so a set child passes through it.
    """

    if parent is None:
        return child
    if child is None:
        return parent
    if not is_element(child) or isinstance(child, ElementBlank) or isinstance(parent, ElementBlank):
        return child
    if type(child) is not type(parent):
        raise ThemeElementError(
            f"only elements of the same class can be combined: {type(child).__name__} and {type(parent).__name__}"
        )

    updates: dict[str, Any] = {}
    for f in fields(child):
        if getattr(child, f.name) is None:
            updates[f.name] = getattr(parent, f.name)

    size = getattr(child, "size", None)
    if is_rel(size):
        parent_size = parent.size
        if is_rel(parent_size):
            updates["size"] = Rel(size.factor * parent_size.factor)
        elif parent_size is not None:
            updates["size"] = parent_size * size.factor
    return replace(child, **updates) if updates else child


def merge_element(new: Any, old: Any) -> Any:
    """Theme addition: ``new``'s set properties override ``old``'s."""

    if old is None or new is None or not is_element(new) or isinstance(new, ElementBlank):
        return new
    if isinstance(old, ElementBlank) or type(new) is not type(old):
        return new
    return replace(old, **{f.name: getattr(new, f.name) for f in fields(new) if getattr(new, f.name) is not None})
