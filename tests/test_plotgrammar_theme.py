import unittest

from plotgrammar import ThemeElementError
from plotgrammar.style import (
    DEFAULT_ELEMENT_TREE,
    PT,
    ElementBlank,
    ElementLine,
    ElementRect,
    ElementText,
    ElementTree,
    Theme,
    Unit,
    calc_element,
    el_def,
    element_grob,
    element_render,
    rel,
    theme_grey,
    validate_theme,
)
from plotgrammar.style.grobs import PolylineGrob, RectGrob, TextGrob, ZeroGrob, rotate_just


class ElementTreeTests(unittest.TestCase):
    def test_lineage_walks_to_root(self) -> None:
        self.assertEqual(DEFAULT_ELEMENT_TREE.lineage("axis.text.x"), ["axis.text.x", "axis.text", "text"])
        self.assertEqual(
            DEFAULT_ELEMENT_TREE.lineage("panel.grid.minor.y"),
            ["panel.grid.minor.y", "panel.grid.minor", "panel.grid", "line"],
        )
        self.assertEqual(DEFAULT_ELEMENT_TREE.lineage("not.in.tree"), ["not.in.tree"])

    def test_default_tree_roots(self) -> None:
        roots = DEFAULT_ELEMENT_TREE.roots()
        for name in ("line", "rect", "text"):
            self.assertIn(name, roots)
        self.assertNotIn("axis.text", roots)

    def test_default_tree_is_read_only(self) -> None:
        with self.assertRaises(TypeError):
            DEFAULT_ELEMENT_TREE.definitions["extra"] = el_def("element_line", "line")  # type: ignore[index]

    def test_rejects_undefined_parent(self) -> None:
        with self.assertRaisesRegex(ThemeElementError, "undefined"):
            ElementTree({"child": el_def("element_line", "missing")})

    def test_rejects_kind_mismatch_with_parent(self) -> None:
        with self.assertRaisesRegex(ThemeElementError, "cannot inherit"):
            ElementTree({"line": el_def("element_line"), "label": el_def("element_text", "line")})

    def test_rejects_cycles(self) -> None:
        with self.assertRaisesRegex(ThemeElementError, "cycle"):
            ElementTree({"a": el_def("element_line", "b"), "b": el_def("element_line", "a")})

    def test_rejects_unknown_kind(self) -> None:
        with self.assertRaises(ThemeElementError):
            el_def("element_polygon")  # type: ignore[arg-type]


class CalcElementTests(unittest.TestCase):
    def test_fills_unset_fields_from_ancestors(self) -> None:
        theme = Theme({"text": ElementText(colour="black"), "axis.text.x": ElementText(size=10)})
        self.assertEqual(calc_element("axis.text.x", theme), ElementText(colour="black", size=10))

    def test_plain_mapping_theme(self) -> None:
        theme = {"line": ElementLine(colour="red", size=1), "panel.grid": ElementLine(linetype="dashed")}
        self.assertEqual(
            calc_element("panel.grid.major.x", theme),
            ElementLine(colour="red", size=1, linetype="dashed"),
        )

    def test_relative_sizes_multiply_through_levels(self) -> None:
        theme = Theme(
            {
                "text": ElementText(size=10),
                "axis.text": ElementText(size=rel(0.5)),
                "axis.text.x": ElementText(size=rel(3)),
            }
        )
        self.assertAlmostEqual(calc_element("axis.text.x", theme).size, 15.0)

    def test_default_theme_resolves_complete_elements(self) -> None:
        el = calc_element("axis.text.x", theme_grey())
        self.assertEqual(el.colour, "grey50")
        self.assertEqual(el.vjust, 1)
        self.assertEqual(el.hjust, 0.5)
        self.assertAlmostEqual(el.size, 9.6)
        self.assertEqual(el.family, "")

    def test_blank_element_stops_inheritance(self) -> None:
        self.assertEqual(calc_element("axis.line", theme_grey()), ElementBlank())

    def test_unset_child_inherits_blank_parent(self) -> None:
        theme = Theme({"line": ElementLine(colour="black"), "axis.line": ElementBlank()})
        self.assertEqual(calc_element("axis.line.x", theme), ElementBlank())

    def test_set_child_passes_through_blank_parent(self) -> None:
        base = Theme(
            {
                "line": ElementLine(colour="black", size=0.5, linetype=1, lineend="butt"),
                "axis.line": ElementBlank(),
            }
        )
        complete = base.replace({"axis.line.x": ElementLine(colour="red", size=1, linetype=2, lineend="round")})
        partial = base.replace({"axis.line.x": ElementLine(colour="red", size=1, linetype=2)})

        self.assertEqual(
            calc_element("axis.line.x", complete),
            ElementLine(colour="red", size=1, linetype=2, lineend="round"),
        )
        self.assertEqual(
            calc_element("axis.line.x", partial),
            ElementLine(colour="red", size=1, linetype=2, lineend="butt"),
        )

    def test_set_child_draws_under_default_theme(self) -> None:
        theme = theme_grey() + {"axis.line.x": ElementLine(colour="red")}
        grob = element_render(theme, "axis.line.x")
        self.assertIsInstance(grob, PolylineGrob)
        self.assertEqual(grob.gp.col, "red")
        self.assertAlmostEqual(grob.gp.lwd, 0.5 * PT)

    def test_raw_values_inherit_whole(self) -> None:
        theme = theme_grey()
        self.assertEqual(calc_element("legend.key.height", theme), Unit(1.2, "lines"))
        custom = theme + {"legend.key.width": Unit(2, "cm")}
        self.assertEqual(calc_element("legend.key.width", custom), Unit(2, "cm"))
        self.assertEqual(calc_element("legend.position", theme), "right")

    def test_properties_outside_the_tree(self) -> None:
        theme = Theme({"my.panel": ElementRect(fill="red")})
        self.assertEqual(calc_element("my.panel", theme), ElementRect(fill="red"))
        self.assertIsNone(calc_element("nowhere", theme))

    def test_wrong_kind_raises(self) -> None:
        theme = Theme({"text": ElementText(), "axis.text": ElementLine(colour="red")})
        with self.assertRaisesRegex(ThemeElementError, "axis.text"):
            calc_element("axis.text.x", theme)

    def test_custom_tree_is_passed_explicitly(self) -> None:
        tree = ElementTree({"ink": el_def("element_line"), "ink.border": el_def("element_line", "ink")})
        theme = Theme({"ink": ElementLine(colour="navy")})
        self.assertEqual(calc_element("ink.border", theme, tree), ElementLine(colour="navy"))
        self.assertIsNone(calc_element("ink.border", theme))


class ThemeTests(unittest.TestCase):
    def test_keyword_names_use_dots(self) -> None:
        theme = Theme(axis_text_x=ElementText(size=3))
        self.assertEqual(theme["axis.text.x"], ElementText(size=3))

    def test_addition_merges_properties(self) -> None:
        theme = theme_grey() + {"text": ElementText(colour="red")}
        self.assertEqual(theme["text"].colour, "red")
        self.assertEqual(theme["text"].size, 12)

    def test_replace_swaps_whole_element(self) -> None:
        theme = theme_grey().replace({"text": ElementText(colour="red")})
        self.assertIsNone(theme["text"].size)

    def test_addition_keeps_original_untouched(self) -> None:
        base = theme_grey(base_size=10)
        base + {"text": ElementText(size=20)}
        self.assertEqual(base["text"].size, 10)

    def test_validate_theme(self) -> None:
        validate_theme(theme_grey())
        with self.assertRaises(ThemeElementError):
            validate_theme({"legend.position": 3})
        with self.assertRaises(ThemeElementError):
            validate_theme({"panel.background": ElementLine()})

    def test_element_property_validation(self) -> None:
        with self.assertRaises(ThemeElementError):
            ElementText(face="heavy")  # type: ignore[arg-type]
        with self.assertRaises(ThemeElementError):
            ElementLine(lineend="pointy")  # type: ignore[arg-type]
        with self.assertRaises(ThemeElementError):
            ElementRect(size=-1)
        with self.assertRaises(ThemeElementError):
            rel(-0.5)


class ElementRenderTests(unittest.TestCase):
    def test_missing_element_logs_and_draws_nothing(self) -> None:
        with self.assertLogs("plotgrammar.style.grobs", level="WARNING") as logs:
            grob = element_render(Theme(), "legend.nothing")
        self.assertIsInstance(grob, ZeroGrob)
        self.assertIn("Theme element legend.nothing missing", logs.output[0])

    def test_rect_render(self) -> None:
        grob = element_render(theme_grey(), "panel.background")
        self.assertIsInstance(grob, RectGrob)
        self.assertEqual(grob.name, "panel.background")
        self.assertEqual(grob.gp.fill, "grey90")
        self.assertEqual(grob.gp.col, "transparent")
        self.assertAlmostEqual(grob.gp.lwd, 0.5 * PT)
        self.assertEqual(grob.gp.lty, 1)

    def test_call_overrides_beat_theme(self) -> None:
        grob = element_render(theme_grey(), "panel.background", fill="red", size=2, width=0.5)
        self.assertEqual(grob.gp.fill, "red")
        self.assertAlmostEqual(grob.gp.lwd, 2 * PT)
        self.assertEqual(grob.width, 0.5)

    def test_line_render(self) -> None:
        grob = element_render(theme_grey(), "panel.grid.minor.x", x=(0.2, 0.2), y=(0, 1), suffix="x")
        self.assertIsInstance(grob, PolylineGrob)
        self.assertEqual(grob.name, "panel.grid.minor.x.x")
        self.assertEqual(grob.gp.col, "grey95")
        self.assertAlmostEqual(grob.gp.lwd, 0.25 * PT)
        self.assertEqual(grob.gp.lineend, "butt")
        self.assertEqual(grob.x, (0.2, 0.2))

    def test_blank_render(self) -> None:
        grob = element_render(theme_grey(), "axis.line.x")
        self.assertIsInstance(grob, ZeroGrob)
        self.assertEqual(grob.name, "axis.line.x")

    def test_text_render_uses_resolved_font(self) -> None:
        grob = element_render(theme_grey(), "axis.title.y", label="count")
        self.assertIsInstance(grob, TextGrob)
        self.assertEqual(grob.rot, 90)
        self.assertEqual((grob.x, grob.y), (0.5, 0.5))
        self.assertEqual(grob.gp.fontsize, 12)
        self.assertEqual(grob.gp.fontface, "plain")
        self.assertEqual(grob.gp.lineheight, 0.9)

    def test_text_labels_and_positions(self) -> None:
        grob = element_render(theme_grey(), "axis.text.x", label=["1", "2"], x=[0.1, 0.9])
        self.assertEqual(grob.label, ("1", "2"))
        self.assertEqual(grob.x, (0.1, 0.9))
        self.assertEqual(grob.y, 1)


class TextRotationTests(unittest.TestCase):
    def test_rotation_table(self) -> None:
        cases = {0: (0.0, 1.0), 90: (1.0, 0.0), 180: (1.0, 1.0), 270: (1.0, 1.0), 45: (0.0, 1.0)}
        for angle, expected in cases.items():
            with self.subTest(angle=angle):
                self.assertEqual(rotate_just(angle, 0.0, 1.0), expected)

    def test_angle_is_normalised(self) -> None:
        self.assertEqual(rotate_just(450, 0.2, 0.7), rotate_just(90, 0.2, 0.7))
        grob = element_grob(ElementText(hjust=0.2, vjust=0.7, angle=-90))
        self.assertEqual(grob.rot, 270)
        self.assertAlmostEqual(grob.x, 0.7)
        self.assertAlmostEqual(grob.y, 0.8)

    def test_override_position_and_size(self) -> None:
        grob = element_grob(ElementText(hjust=0, size=10), label="a", x=0.3, size=14)
        self.assertEqual(grob.x, 0.3)
        self.assertEqual(grob.y, 0.5)
        self.assertEqual(grob.gp.fontsize, 14)

    def test_raw_values_have_no_grob(self) -> None:
        with self.assertRaises(TypeError):
            element_grob(Unit(1.0))


if __name__ == "__main__":
    unittest.main()
