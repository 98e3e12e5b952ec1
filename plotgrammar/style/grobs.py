from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields, replace
import logging
from typing import Any, Union

from plotgrammar.style.elements import ElementBlank, ElementLine, ElementRect, ElementText, Size, is_rel
from plotgrammar.style.theme import calc_element
from plotgrammar.style.tree import DEFAULT_ELEMENT_TREE, ElementTree


LOGGER = logging.getLogger(__name__)

# Points per millimetre; element sizes are mm, line widths are points.
PT = 72.27 / 25.4


@dataclass(frozen=True)
class GraphicalParams:
    col: str | None = None
    fill: str | None = None
    lwd: float | None = None
    lty: str | int | None = None
    lineend: str | None = None
    fontsize: float | None = None
    fontfamily: str | None = None
    fontface: str | None = None
    lineheight: float | None = None

    def modify(self, overrides: GraphicalParams) -> GraphicalParams:
        """Values set in ``overrides`` win."""

        changes = {f.name: getattr(overrides, f.name) for f in fields(overrides) if getattr(overrides, f.name) is not None}
        return replace(self, **changes) if changes else self

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True)
class ZeroGrob:
    name: str | None = None


@dataclass(frozen=True)
class RectGrob:
    x: float = 0.5
    y: float = 0.5
    width: float = 1.0
    height: float = 1.0
    gp: GraphicalParams = field(default_factory=GraphicalParams)
    default_units: str = "npc"
    name: str | None = None


@dataclass(frozen=True)
class PolylineGrob:
    x: tuple[float, ...] = (0.0, 1.0)
    y: tuple[float, ...] = (0.0, 1.0)
    gp: GraphicalParams = field(default_factory=GraphicalParams)
    id_lengths: tuple[int, ...] | None = None
    default_units: str = "npc"
    name: str | None = None

    def __post_init__(self) -> None:
        if len(self.x) != len(self.y):
            raise ValueError(f"polyline x/y length mismatch: {len(self.x)} != {len(self.y)}")
        if self.id_lengths is not None and sum(self.id_lengths) != len(self.x):
            raise ValueError("polyline id_lengths must sum to the number of points")


@dataclass(frozen=True)
class TextGrob:
    label: str | tuple[str, ...] = ""
    x: float | tuple[float, ...] = 0.5
    y: float | tuple[float, ...] = 0.5
    hjust: float = 0.5
    vjust: float = 0.5
    rot: float = 0.0
    gp: GraphicalParams = field(default_factory=GraphicalParams)
    default_units: str = "npc"
    name: str | None = None


Grob = Union[ZeroGrob, RectGrob, PolylineGrob, TextGrob]


def _first_set(*values: Any) -> Any:
    return next((v for v in values if v is not None), None)


def _line_width(size: Size | None) -> float | None:
    if size is None or is_rel(size):
        return None
    return float(size) * PT


def _as_tuple(values: Any) -> Any:
    if isinstance(values, Sequence) and not isinstance(values, str):
        return tuple(values)
    return values


def rotate_just(angle: float, hjust: float, vjust: float) -> tuple[float, float]:
    """Anchor point for text rotated by ``angle`` degrees.

    Only the four right angles move the anchor; anything else keeps the
    unrotated justification.
    """

    angle = angle % 360
    if angle == 90:
        return (vjust, hjust)
    if angle == 180:
        return (1 - hjust, vjust)
    if angle == 270:
        return (vjust, 1 - hjust)
    return (hjust, vjust)


def _rect_grob(
    element: ElementRect,
    x: float = 0.5,
    y: float = 0.5,
    width: float = 1.0,
    height: float = 1.0,
    fill: str | None = None,
    colour: str | None = None,
    size: Size | None = None,
    linetype: str | int | None = None,
) -> RectGrob:
    gp = GraphicalParams(lwd=_line_width(size), col=colour, fill=fill, lty=linetype)
    element_gp = GraphicalParams(
        lwd=_line_width(element.size), col=element.colour, fill=element.fill, lty=element.linetype
    )
    return RectGrob(x=x, y=y, width=width, height=height, gp=element_gp.modify(gp))


def _line_grob(
    element: ElementLine,
    x: Sequence[float] = (0.0, 1.0),
    y: Sequence[float] = (0.0, 1.0),
    colour: str | None = None,
    size: Size | None = None,
    linetype: str | int | None = None,
    lineend: str | None = None,
    default_units: str = "npc",
    id_lengths: Sequence[int] | None = None,
) -> PolylineGrob:
    gp = GraphicalParams(lwd=_line_width(size), col=colour, lty=linetype, lineend=lineend)
    element_gp = GraphicalParams(
        lwd=_line_width(element.size), col=element.colour, lty=element.linetype, lineend=element.lineend
    )
    return PolylineGrob(
        x=tuple(float(v) for v in x),
        y=tuple(float(v) for v in y),
        gp=element_gp.modify(gp),
        id_lengths=None if id_lengths is None else tuple(int(n) for n in id_lengths),
        default_units=default_units,
    )


def _text_grob(
    element: ElementText,
    label: str | Sequence[str] = "",
    x: Any = None,
    y: Any = None,
    family: str | None = None,
    face: str | None = None,
    colour: str | None = None,
    size: float | None = None,
    hjust: float | None = None,
    vjust: float | None = None,
    angle: float | None = None,
    lineheight: float | None = None,
    default_units: str = "npc",
) -> TextGrob:
    hj = _first_set(hjust, element.hjust, 0.5)
    vj = _first_set(vjust, element.vjust, 0.5)
    rot = _first_set(angle, element.angle, 0) % 360
    xp, yp = rotate_just(rot, hj, vj)

    gp = GraphicalParams(fontsize=size, col=colour, fontfamily=family, fontface=face, lineheight=lineheight)
    element_size = None if is_rel(element.size) else element.size
    element_gp = GraphicalParams(
        fontsize=element_size,
        col=element.colour,
        fontfamily=element.family,
        fontface=element.face,
        lineheight=element.lineheight,
    )
    return TextGrob(
        label=_as_tuple(label),
        x=_as_tuple(_first_set(x, xp)),
        y=_as_tuple(_first_set(y, yp)),
        hjust=hj,
        vjust=vj,
        rot=rot,
        gp=element_gp.modify(gp),
        default_units=default_units,
    )


def element_grob(element: Any, **overrides: Any) -> Grob:
    """Drawable descriptor for a resolved element; keyword overrides beat theme values."""

    if isinstance(element, ElementBlank):
        return ZeroGrob()
    if isinstance(element, ElementRect):
        return _rect_grob(element, **overrides)
    if isinstance(element, ElementLine):
        return _line_grob(element, **overrides)
    if isinstance(element, ElementText):
        return _text_grob(element, **overrides)
    raise TypeError(f"cannot build a grob from {type(element).__name__}")


def element_render(
    theme: Mapping[str, Any],
    element: str,
    *,
    tree: ElementTree = DEFAULT_ELEMENT_TREE,
    suffix: str | None = None,
    **overrides: Any,
) -> Grob:
    el = calc_element(element, theme, tree)
    if el is None:
        LOGGER.warning("Theme element %s missing", element)
        return ZeroGrob()
    grob = element_grob(el, **overrides)
    name = element if suffix is None else f"{element}.{suffix}"
    return replace(grob, name=name)
