from __future__ import annotations

import itertools
import unittest
from unittest import mock

import numpy as np

from chartkit.path_builder import make_bar_path
from chartkit.presentation import PresentationState
from chartkit.series import ChartData, Line


def _chart(chart_type: str, *rows: list[int], kind: str = "line") -> ChartData:
    lines = tuple(Line(values=row, name=f"y{i}", kind=kind) for i, row in enumerate(rows))
    labels = tuple(f"L{i}" for i in range(len(rows[0])))
    return ChartData(labels=labels, lines=lines, type=chart_type)  # type: ignore[arg-type]


class PresentationStateTests(unittest.TestCase):
    def test_regular_bounds_from_visible_lines(self) -> None:
        state = PresentationState(_chart("regular", [10, 20, 30], [5, 15, 25]))
        self.assertEqual((state.lower, state.upper), (5.0, 30.0))
        self.assertEqual(state.lines_count, 2)
        self.assertEqual(state.points_count, 3)
        self.assertEqual(state.type, "regular")

    def test_stacked_scenario(self) -> None:
        state = PresentationState(_chart("stacked", [10, 20, 30], [5, 15, 25], kind="bar"))
        np.testing.assert_array_equal(state.line_at(0).aggregated_values, [10, 20, 30])
        np.testing.assert_array_equal(state.line_at(1).aggregated_values, [15, 35, 55])
        self.assertEqual((state.lower, state.upper), (0.0, 55.0))

        self.assertTrue(state.set_line_visible(False, 0))
        np.testing.assert_array_equal(state.line_at(1).aggregated_values, [5, 15, 25])
        self.assertEqual((state.lower, state.upper), (0.0, 25.0))

    def test_percentage_scenario(self) -> None:
        state = PresentationState(_chart("percentage", [30, 10, 60], [70, 90, 40], kind="bar"))
        self.assertAlmostEqual(float(state.line_at(0).aggregated_values[0]), 30.0)
        self.assertAlmostEqual(float(state.line_at(1).aggregated_values[0]), 100.0)
        self.assertEqual((state.lower, state.upper), (0.0, 100.0))

    def test_hiding_last_visible_line_is_a_no_op_for_every_index(self) -> None:
        callback = mock.Mock()
        state = PresentationState(_chart("stacked", [1, 2], [3, 4], [5, 6], kind="bar"), callback)
        state.set_line_visible(False, 0)
        state.set_line_visible(False, 2)
        callback.reset_mock()
        before = [line.aggregated_values.copy() for line in (state.line_at(i) for i in range(3))]

        for i in range(state.lines_count):
            self.assertFalse(state.set_line_visible(False, i))

        callback.assert_not_called()
        self.assertEqual(state.visible_indices(), [1])
        for i, values in enumerate(before):
            np.testing.assert_array_equal(state.line_at(i).aggregated_values, values)

    def test_callback_receives_index_and_visibility(self) -> None:
        callback = mock.Mock()
        state = PresentationState(_chart("regular", [1, 2], [3, 4]), callback)
        state.set_line_visible(False, 1)
        callback.assert_called_once_with(state, 1, False)
        state.toggle_line(1)
        callback.assert_called_with(state, 1, True)
        self.assertTrue(state.is_line_visible_at(1))

    def test_unchanged_visibility_skips_callback(self) -> None:
        callback = mock.Mock()
        state = PresentationState(_chart("regular", [1, 2], [3, 4]), callback)
        path = state.line_at(0).path
        self.assertTrue(state.set_line_visible(True, 0))
        callback.assert_not_called()
        self.assertIs(state.line_at(0).path, path)

    def test_hidden_regular_bar_collapses_to_zero_height(self) -> None:
        state = PresentationState(_chart("regular", [3, 4], [5, 6], kind="bar"))
        state.set_line_visible(False, 1)
        hidden = state.line_at(1)
        self.assertEqual(hidden.path, make_bar_path(hidden.aggregated_values, 0.0).collapsed())
        self.assertTrue(hidden.path.closed)
        self.assertTrue(np.all(hidden.path.points[:, 1] == 0))
        self.assertTrue(np.all(hidden.preview_path.points[:, 1] == 0))

    def test_hidden_percentage_line_reuses_band_below(self) -> None:
        state = PresentationState(_chart("percentage", [30, 10, 60], [70, 90, 40], [5, 5, 5], kind="bar"))
        state.set_line_visible(False, 1)
        self.assertEqual(state.line_at(1).path, state.line_at(0).path)
        self.assertEqual(state.line_at(1).preview_path, state.line_at(0).preview_path)

    def test_extents_track_visible_lines_after_every_toggle(self) -> None:
        for chart_type in ("regular", "stacked", "percentage"):
            state = PresentationState(_chart(chart_type, [4, 9, 1], [2, 2, 8], [7, 0, 3], kind="bar"))
            for index, visible in itertools.product(range(3), (False, True, False)):
                state.set_line_visible(visible, index)
                shown = state.visible_lines()
                self.assertTrue(shown)
                self.assertEqual(state.lower, min(line.min_y for line in shown), chart_type)
                self.assertEqual(state.upper, max(line.max_y for line in shown), chart_type)

    def test_hidden_stacked_line_path_matches_line_below(self) -> None:
        state = PresentationState(_chart("stacked", [1, 2, 3], [4, 5, 6], [7, 8, 9], kind="bar"))
        state.set_line_visible(False, 1)
        self.assertEqual(state.line_at(1).path, state.line_at(0).path)
        self.assertEqual(state.line_at(1).preview_path, state.line_at(0).preview_path)

        state.set_line_visible(False, 0)
        first = state.line_at(0)
        self.assertEqual(first.path, make_bar_path(first.aggregated_values, 0.0).collapsed())

    def test_accessors_reject_out_of_range_indices(self) -> None:
        state = PresentationState(_chart("regular", [1, 2, 3]))
        self.assertEqual(state.label_at(2), "L2")
        for bad in (-1, 1):
            with self.assertRaises(IndexError):
                state.line_at(bad)
            with self.assertRaises(IndexError):
                state.is_line_visible_at(bad)
            with self.assertRaises(IndexError):
                state.set_line_visible(True, bad)
        with self.assertRaises(IndexError):
            state.label_at(3)
        with self.assertRaises(IndexError):
            state.label_at(-1)

    def test_y_scaled_line_bounds_are_independent(self) -> None:
        state = PresentationState(_chart("y_scaled", [100, 400, 250], [1, 3, 2]))
        self.assertEqual(state.line_bounds(0), (100.0, 400.0))
        self.assertEqual(state.line_bounds(1), (1.0, 3.0))

    def test_presentation_line_exposes_source_line(self) -> None:
        chart = _chart("regular", [1, 2])
        line = PresentationState(chart).line_at(0)
        self.assertEqual(line.name, "y0")
        self.assertEqual(line.kind, "line")
        self.assertEqual(line.color, chart.lines[0].color)
        np.testing.assert_array_equal(line.values, [1, 2])

    def test_invalid_preview_stride(self) -> None:
        with self.assertRaises(ValueError):
            PresentationState(_chart("regular", [1, 2]), preview_stride=0)


if __name__ == "__main__":
    unittest.main()
