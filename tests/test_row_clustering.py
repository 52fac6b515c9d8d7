from __future__ import annotations

import unittest

from contracts.recognition import Rect, TextElement
from contracts.rows import TextLine
from rows.cluster import (
    average_width,
    classify,
    cluster_lines,
    line_geometry,
    rescue,
    round_to,
    row_coordinate,
    rows_almost_equal,
)
from rows.config import DEFAULT_KEYWORDS, RowClusteringConfig


def _line(text: str, x: float, width: float, *, y: float = 0.1, height: float = 0.05) -> TextLine:
    # Single-element line: synthesized geometry equals the element box.
    box = Rect(x=x, y=y, width=width, height=height)
    return TextLine(text=text, bounding_box=box, elements=[TextElement(text=text, bounding_box=box)])


def _with_row(text: str, row: float) -> TextLine:
    return TextLine(text=text, bounding_box=Rect(0, 0, 0.1, 0.1), elements=[], row=row)


class TestRowGeometry(unittest.TestCase):
    def test_line_geometry_sums_element_sizes(self) -> None:
        box = line_geometry(
            [
                TextElement(text="Total", bounding_box=Rect(0.1, 0.2, 0.1, 0.05)),
                TextElement(text="Fat", bounding_box=Rect(0.3, 0.25, 0.2, 0.05)),
            ]
        )
        self.assertAlmostEqual(box.x, 0.1)
        self.assertAlmostEqual(box.y, 0.2)
        # Sum of widths/heights, not the union extent (which would be 0.4 x 0.1).
        self.assertAlmostEqual(box.width, 0.3)
        self.assertAlmostEqual(box.height, 0.1)

    def test_line_geometry_without_elements_is_zero(self) -> None:
        self.assertEqual(line_geometry([]), Rect(0.0, 0.0, 0.0, 0.0))

    def test_average_width_guards_empty_and_zero(self) -> None:
        self.assertIsNone(average_width([]))
        self.assertIsNone(average_width([_line("a", 0.1, 0.0)]))
        self.assertAlmostEqual(average_width([_line("a", 0.0, 0.2), _line("b", 0.0, 0.4)]), 0.3)

    def test_round_to_rounds_half_away_from_zero(self) -> None:
        self.assertEqual(round_to(0.125, 2), 0.13)
        self.assertEqual(round_to(-0.125, 2), -0.13)
        self.assertEqual(round_to(1.3333333, 2), 1.33)

    def test_round_to_just_below_half_rounds_down(self) -> None:
        below_half = 0.49999999999999994
        self.assertEqual(round_to(below_half, 0), 0.0)
        self.assertEqual(round_to(-below_half, 0), 0.0)
        self.assertEqual(round_to(0.5, 0), 1.0)
        self.assertEqual(round_to(2.5, 0), 3.0)

    def test_row_coordinate_is_centre_over_average_width(self) -> None:
        self.assertEqual(row_coordinate(Rect(0.1, 0.0, 0.2, 0.1), 0.2), 1.0)
        self.assertEqual(row_coordinate(Rect(0.25, 0.0, 0.1, 0.1), 0.1), 3.0)


class TestRowTolerance(unittest.TestCase):
    def test_close_rows_are_equal(self) -> None:
        self.assertTrue(rows_almost_equal(1.24, 1.26))

    def test_distant_rows_are_not_equal(self) -> None:
        self.assertFalse(rows_almost_equal(1.00, 1.60))

    def test_tolerance_is_strict(self) -> None:
        self.assertFalse(rows_almost_equal(1.0, 1.5))
        self.assertTrue(rows_almost_equal(1.0, 1.5, tolerance=0.6))


class TestClassifyAndRescue(unittest.TestCase):
    def test_keyword_match_is_case_insensitive_substring(self) -> None:
        lines = [_line("CALORIES 200", 0.0, 0.1), _line("Saturated Fat", 0.0, 0.1), _line("Protein", 0.0, 0.1)]
        self.assertEqual(classify(lines, DEFAULT_KEYWORDS), [False, False, True])

    def test_rescue_requires_kept_neighbor_with_different_text(self) -> None:
        lines = [_with_row("5", 1.0), _with_row("5", 1.0)]
        self.assertEqual(rescue(lines, [False, True]), [False, True])

    def test_rescue_requires_leading_digit(self) -> None:
        lines = [_with_row("Sugar", 1.0), _with_row("g 12", 1.0), _with_row("", 1.0)]
        self.assertEqual(rescue(lines, [False, True, True]), [False, True, True])

    def test_rescue_accepts_unicode_decimal_digits(self) -> None:
        lines = [_with_row("Sugar", 1.0), _with_row("١٢g", 1.1)]
        self.assertEqual(rescue(lines, [False, True]), [False, False])

    def test_rescued_line_rescues_later_lines(self) -> None:
        # 5g sits next to Fat; 7g only sits next to 5g.
        lines = [_with_row("Fat", 1.0), _with_row("5g", 1.4), _with_row("7g", 1.8)]
        flags = [False, True, True]
        self.assertEqual(rescue(lines, flags), [False, False, False])
        self.assertEqual(flags, [False, True, True])

    def test_rescue_follows_input_order(self) -> None:
        # 7g is visited before 5g has been rescued.
        lines = [_with_row("7g", 1.8), _with_row("5g", 1.4), _with_row("Fat", 1.0)]
        self.assertEqual(rescue(lines, [True, True, False]), [True, False, False])

    def test_rescue_rejects_mismatched_lengths(self) -> None:
        with self.assertRaises(ValueError):
            rescue([_with_row("5g", 1.0)], [])


class TestClusterLines(unittest.TestCase):
    def test_empty_input_yields_empty_output(self) -> None:
        self.assertEqual(cluster_lines([]), [])

    def test_keyword_line_is_never_excluded(self) -> None:
        for x in (0.0, 0.3, 0.8):
            out = cluster_lines([_line("calories", x, 0.1), _line("Protein", 0.5, 0.3)])
            self.assertFalse(out[0].excluded)
            self.assertTrue(out[1].excluded)

    def test_value_on_same_row_as_label_is_rescued(self) -> None:
        out = cluster_lines([_line("Sugar", 0.1, 0.2), _line("12g", 0.1, 0.2)])
        self.assertEqual([ln.row for ln in out], [1.0, 1.0])
        self.assertEqual([ln.excluded for ln in out], [False, False])

    def test_isolated_value_stays_excluded(self) -> None:
        out = cluster_lines([_line("12g", 0.25, 0.1)])
        self.assertEqual(out[0].row, 3.0)
        self.assertTrue(out[0].excluded)

        out = cluster_lines([_line("Calories", 0.0, 0.1), _line("12g", 0.25, 0.1)])
        self.assertEqual([ln.row for ln in out], [0.5, 3.0])
        self.assertEqual([ln.excluded for ln in out], [False, True])

    def test_values_chained_along_a_row_are_kept(self) -> None:
        out = cluster_lines([_line("Fat", 0.1, 0.2), _line("5g", 0.18, 0.2), _line("7g", 0.26, 0.2)])
        self.assertEqual([ln.row for ln in out], [1.0, 1.4, 1.8])
        self.assertEqual([ln.excluded for ln in out], [False, False, False])

    def test_clustering_is_deterministic(self) -> None:
        lines = [
            _line("Nutrition Facts", 0.1, 0.5),
            _line("Energy", 0.1, 0.2),
            _line("250kcal", 0.35, 0.15),
            _line("Protein", 0.1, 0.2),
            _line("8g", 0.7, 0.05),
        ]
        r1 = cluster_lines(lines)
        r2 = cluster_lines(lines)
        self.assertEqual(r1, r2)
        self.assertEqual([ln.to_dict() for ln in r1], [ln.to_dict() for ln in r2])

    def test_input_lines_are_not_mutated(self) -> None:
        lines = [_line("Sugar", 0.1, 0.2), _line("12g", 0.1, 0.2)]
        cluster_lines(lines)
        self.assertEqual([ln.row for ln in lines], [None, None])

    def test_custom_keywords_and_tolerance(self) -> None:
        cfg = RowClusteringConfig(keywords=frozenset({"Protein"}), row_tolerance=0.1)
        out = cluster_lines([_line("protein", 0.1, 0.2), _line("Sugar", 0.1, 0.2), _line("8g", 0.2, 0.2)], cfg)
        # rows: 1.0, 1.0, 1.5 -> 8g is outside the narrowed tolerance
        self.assertEqual([ln.excluded for ln in out], [False, True, True])

    def test_invalid_config_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            cluster_lines([_line("Sugar", 0.1, 0.2)], RowClusteringConfig(row_tolerance=0.0))
        with self.assertRaises(ValueError):
            cluster_lines([_line("Sugar", 0.1, 0.2)], RowClusteringConfig(keywords=frozenset({"  "})))


if __name__ == "__main__":
    unittest.main()
