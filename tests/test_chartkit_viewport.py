from __future__ import annotations

import unittest

import numpy as np

from chartkit.presentation import PresentationState
from chartkit.scales import DataLimits, axis_steps, build_transform, format_ticks_for_axis, map_to_pixels, pad_extent, round_half_up
from chartkit.series import ChartData, Line
from chartkit.viewport import (
    Viewport,
    ViewportController,
    axis_for,
    line_axis_for,
    line_transform,
    visible_extent,
    x_axis_labels,
)


def _state(chart_type: str, *rows: list[int], kinds: tuple[str, ...] | None = None) -> PresentationState:
    kinds = kinds or ("line",) * len(rows)
    lines = tuple(Line(values=row, name=f"y{i}", kind=kind) for i, (row, kind) in enumerate(zip(rows, kinds)))
    labels = tuple(f"L{i}" for i in range(len(rows[0])))
    return PresentationState(ChartData(labels=labels, lines=lines, type=chart_type))  # type: ignore[arg-type]


class AxisMathTests(unittest.TestCase):
    def test_axis_steps_round_up_to_whole_steps(self) -> None:
        axis = axis_steps(0, 47, 5)
        self.assertEqual(axis.step, 10)
        self.assertEqual(axis.upper, 50)
        self.assertEqual(axis.ticks, (0, 10, 20, 30, 40))

    def test_axis_steps_zero_range_still_spreads_ticks(self) -> None:
        axis = axis_steps(10, 10, 5)
        self.assertEqual(axis.step, 1)
        self.assertEqual(axis.ticks, (10, 11, 12, 13, 14))
        self.assertEqual(axis.upper, 15)

    def test_axis_steps_validates_input(self) -> None:
        with self.assertRaises(ValueError):
            axis_steps(0, 10, 0)
        with self.assertRaises(ValueError):
            axis_steps(10, 0, 5)

    def test_pad_extent(self) -> None:
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(pad_extent(5, 30), (2, 33))
        self.assertEqual(pad_extent(5, 95, clamp_zero=True), (0.0, 104))
        self.assertEqual(pad_extent(-10, 10, clamp_zero=True), (-12, 12))

    def test_map_to_pixels(self) -> None:
        transform = build_transform(DataLimits(xmin=10.0, xmax=20.0, ymin=0.0, ymax=4.0), width=11, height=5)
        px, py = map_to_pixels(np.asarray([10.0, 15.0]), np.asarray([0.0, 4.0]), transform)
        np.testing.assert_allclose(px, [0.0, 5.0])
        np.testing.assert_allclose(py, [0.0, 4.0])
        _, flipped = map_to_pixels(np.asarray([10.0, 15.0]), np.asarray([0.0, 4.0]), transform, height=5)
        np.testing.assert_allclose(flipped, [4.0, 0.0])

    def test_tick_labels(self) -> None:
        self.assertEqual(format_ticks_for_axis((0, 10, 20)), ["0", "10", "20"])
        self.assertEqual(format_ticks_for_axis((0, 1_500_000, 3_000_000)), ["0", "1.5M", "3M"])
        self.assertEqual(format_ticks_for_axis((-12, -5, 2)), ["-12", "-5", "2"])
        self.assertEqual(format_ticks_for_axis(()), [])


class ViewportControllerTests(unittest.TestCase):
    def test_initial_window_is_last_fifth(self) -> None:
        controller = ViewportController(101)
        self.assertEqual(controller.viewport, Viewport(80, 100))
        self.assertEqual(controller.min_width, 10)

    def test_pan_keeps_width_and_clamps(self) -> None:
        controller = ViewportController(11)
        self.assertEqual(controller.viewport, Viewport(8, 10))
        self.assertEqual(controller.pan(-3), Viewport(5, 7))
        self.assertEqual(controller.pan(-100), Viewport(0, 2))
        self.assertEqual(controller.pan(100), Viewport(8, 10))

    def test_edges_respect_minimum_width(self) -> None:
        controller = ViewportController(101)
        self.assertEqual(controller.move_left_edge(95), Viewport(90, 100))
        self.assertEqual(controller.move_left_edge(-5), Viewport(0, 100))
        self.assertEqual(controller.move_right_edge(3), Viewport(0, 10))
        self.assertEqual(controller.move_right_edge(500), Viewport(0, 100))

    def test_set_range_validation(self) -> None:
        controller = ViewportController(11)
        self.assertEqual(controller.set_range(2, 6), Viewport(2, 6))
        for bad in ((3, 3), (0, 11), (-1, 4), (5, 2)):
            with self.assertRaises(ValueError):
                controller.set_range(*bad)

    def test_set_range_enforces_minimum_width(self) -> None:
        controller = ViewportController(51)
        self.assertEqual(controller.min_width, 5)
        for bad in ((49, 50), (0, 1)):
            with self.assertRaises(ValueError):
                controller.set_range(*bad)

    def test_edge_moves_stay_inside_series(self) -> None:
        controller = ViewportController(51)
        controller.set_range(45, 50)
        self.assertEqual(controller.move_right_edge(50), Viewport(45, 50))
        self.assertEqual(controller.move_left_edge(48), Viewport(45, 50))

        controller.set_range(0, 5)
        self.assertEqual(controller.move_left_edge(0), Viewport(0, 5))
        self.assertEqual(controller.move_right_edge(2), Viewport(0, 5))

        for index in range(-3, 55):
            for viewport in (controller.move_left_edge(index), controller.move_right_edge(index)):
                self.assertGreaterEqual(viewport.min_index, 0)
                self.assertLessEqual(viewport.max_index, controller.last_index)
                self.assertGreaterEqual(viewport.span, controller.min_width)

    def test_index_at_maps_into_window(self) -> None:
        controller = ViewportController(101)
        self.assertEqual(controller.index_at(0.5), 90.0)
        self.assertEqual(controller.index_at(2.0), 100.0)
        self.assertEqual(controller.index_at_pixel(50, 100), 90.0)
        with self.assertRaises(ValueError):
            controller.index_at_pixel(1, 0)

    def test_single_point_series(self) -> None:
        controller = ViewportController(1)
        self.assertEqual(controller.viewport, Viewport(0, 0))
        self.assertEqual(controller.pan(3), Viewport(0, 0))


class ViewportAxisTests(unittest.TestCase):
    def test_visible_extent_restricted_to_window(self) -> None:
        state = _state("regular", [10, 20, 30], [5, 15, 25])
        self.assertEqual(visible_extent(state, Viewport(0, 2)), (5.0, 30.0))
        self.assertEqual(visible_extent(state, Viewport(1, 2)), (15.0, 30.0))
        self.assertEqual(visible_extent(state, Viewport(1, 2), indices=[1]), (15.0, 25.0))

    def test_bar_lines_keep_zero_floor(self) -> None:
        state = _state("regular", [10, 20, 30], kinds=("bar",))
        self.assertEqual(visible_extent(state, Viewport(1, 2)), (0.0, 30.0))

    def test_regular_axis_is_padded(self) -> None:
        state = _state("regular", [10, 20, 30], [5, 15, 25])
        axis = axis_for(state, Viewport(0, 2))
        self.assertEqual(axis.ticks, (2, 9, 16, 23, 30))
        self.assertEqual(axis.upper, 37)

    def test_stacked_axis_padding_never_goes_below_zero(self) -> None:
        state = _state("stacked", [10, 20, 30], [5, 15, 25], kinds=("bar", "bar"))
        axis = axis_for(state, Viewport(0, 2))
        self.assertEqual(axis.lower, 0)
        self.assertEqual(axis.step, 13)
        self.assertEqual(axis.upper, 65)

    def test_percentage_axis_is_fixed(self) -> None:
        state = _state("percentage", [30, 10, 60], [70, 90, 40], kinds=("bar", "bar"))
        axis = axis_for(state, Viewport(1, 2))
        self.assertEqual(axis.ticks, (0, 20, 40, 60, 80))
        self.assertEqual(axis.upper, 100)

    def test_y_scaled_lines_get_their_own_axis(self) -> None:
        state = _state("y_scaled", [100, 400, 250], [1, 3, 2])
        left = line_axis_for(state, 0, Viewport(0, 2))
        right = line_axis_for(state, 1, Viewport(0, 2))
        self.assertEqual((left.lower, left.step), (100, 60))
        self.assertEqual((right.lower, right.step), (1, 1))

    def test_line_transform_places_path_on_axis(self) -> None:
        state = _state("regular", [10, 20, 30], [5, 15, 25])
        axis = axis_steps(0, 40, 4)
        transform = line_transform(state, 0, Viewport(0, 2), axis, width=3, height=41)
        path = state.line_at(0).path.transformed(transform)
        # Path y is stored relative to the line's min (10), the transform adds it back.
        np.testing.assert_allclose(path.points[:, 1], [10.0, 20.0, 30.0])
        np.testing.assert_allclose(path.points[:, 0], [0.0, 1.0, 2.0])

    def test_x_axis_labels(self) -> None:
        labels = [f"L{i}" for i in range(11)]
        self.assertEqual(x_axis_labels(labels, Viewport(0, 10)), ["L0", "L2", "L4", "L6", "L8", "L10"])
        self.assertEqual(x_axis_labels(labels, Viewport(8, 10), count=2), ["L8", "L9", "L10"])
        with self.assertRaises(IndexError):
            x_axis_labels(labels[:5], Viewport(0, 10))


if __name__ == "__main__":
    unittest.main()
