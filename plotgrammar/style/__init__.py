from plotgrammar.style.elements import (
    ElementBlank,
    ElementLine,
    ElementRect,
    ElementText,
    Rel,
    Unit,
    element_blank,
    element_line,
    element_rect,
    element_text,
    rel,
)
from plotgrammar.style.grobs import PT, element_grob, element_render
from plotgrammar.style.theme import Theme, calc_element, theme_grey, validate_theme
from plotgrammar.style.tree import DEFAULT_ELEMENT_TREE, ElementDef, ElementTree, el_def

__all__ = [
    "DEFAULT_ELEMENT_TREE",
    "ElementBlank",
    "ElementDef",
    "ElementLine",
    "ElementRect",
    "ElementText",
    "ElementTree",
    "PT",
    "Rel",
    "Theme",
    "Unit",
    "calc_element",
    "el_def",
    "element_blank",
    "element_grob",
    "element_line",
    "element_rect",
    "element_render",
    "element_text",
    "rel",
    "theme_grey",
    "validate_theme",
]
