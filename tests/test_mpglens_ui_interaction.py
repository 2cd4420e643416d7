from __future__ import annotations

import unittest

from mpglens_plot.frame import CircleMarker, Frame
from mpglens_plot.palette import CategoricalPalette, darker
from mpglens_plot.records import ClusterDetail, DataPoint, ScatterDataset, TrendRecord
from mpglens_plot.surface import DrawingSurface
from mpglens_ui import HIDDEN, ClusterScatterChart, config_from_mapping
from mpglens_ui.interaction import EmphasisStyle, HoverController, MarkerTransition
from mpglens_ui.tooltip import Tooltip, scatter_tooltip, trend_tooltip


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _scenario_dataset() -> ScatterDataset:
    return ScatterDataset(
        points=(
            DataPoint(0.0, 0.0, 0),
            DataPoint(5.0, 5.0, 1, ClusterDetail(car_model_year="Civic 2020", combined_fe=33.0, cluster=1)),
            DataPoint(10.0, 0.0, 2),
        )
    )


class TooltipTests(unittest.TestCase):
    def test_show_move_hide_track_pointer_with_offset(self) -> None:
        tooltip = Tooltip(offset=(10.0, -20.0))
        state = tooltip.show("hello", 100.0, 50.0)
        self.assertTrue(state.visible)
        self.assertEqual((state.screen_x, state.screen_y), (110.0, 30.0))
        state = tooltip.move(120.0, 60.0)
        self.assertEqual((state.content, state.screen_x, state.screen_y), ("hello", 130.0, 40.0))
        self.assertEqual(tooltip.hide(), HIDDEN)

    def test_move_while_hidden_keeps_tooltip_hidden(self) -> None:
        tooltip = Tooltip()
        self.assertEqual(tooltip.move(5.0, 5.0), HIDDEN)

    def test_destroyed_tooltip_ignores_show(self) -> None:
        tooltip = Tooltip()
        tooltip.destroy()
        self.assertTrue(tooltip.destroyed)
        self.assertFalse(tooltip.show("x", 0.0, 0.0).visible)

    def test_scatter_tooltip_lists_vehicle_details(self) -> None:
        point = DataPoint(
            1.0,
            2.0,
            1,
            ClusterDetail(
                car_model_year="Civic 2020",
                combined_fe=33.0,
                annual_fuel_cost=1250.0,
                cluster=1,
                distance_from_cluster=0.42,
            ),
        )
        self.assertEqual(
            scatter_tooltip(point),
            "Car: Civic 2020\nCombined FE: 33 MPG\nAnnual Cost: $1250\nCluster: 1\nDistance from Avg: 0.42",
        )

    def test_scatter_tooltip_leaves_missing_fields_blank(self) -> None:
        content = scatter_tooltip(DataPoint(0.0, 0.0, 0))
        self.assertIn("Car: \n", content)
        self.assertTrue(content.endswith("Distance from Avg: "))

    def test_trend_tooltip_rounds_to_two_decimals(self) -> None:
        self.assertEqual(trend_tooltip(TrendRecord("Eng: 3.5", 27.456)), "Input: Eng: 3.5\nEfficiency: 27.46")


class MarkerTransitionTests(unittest.TestCase):
    def test_sample_interpolates_radius_and_fill(self) -> None:
        transition = MarkerTransition("m", 5.0, 8.0, (100, 100, 100, 255), (70, 70, 70, 255), 1.0, 0.2)
        self.assertEqual(transition.sample(1.0), (5.0, (100, 100, 100, 255)))
        radius, fill = transition.sample(1.1)
        self.assertAlmostEqual(radius, 6.5)
        self.assertEqual(fill, (85, 85, 85, 255))
        self.assertEqual(transition.sample(5.0), (8.0, (70, 70, 70, 255)))

    def test_zero_duration_completes_immediately(self) -> None:
        transition = MarkerTransition("m", 5.0, 8.0, (0, 0, 0, 255), (0, 0, 0, 255), 0.0, 0.0)
        self.assertEqual(transition.progress(0.0), 1.0)


class HoverControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.surface = DrawingSurface(200, 200)
        self.surface.present(
            Frame(
                width=200,
                height=200,
                plot_rect=(0.0, 0.0, 200.0, 200.0),
                markers=(
                    CircleMarker("a", 0, 50.0, 50.0, 5.0, (100, 200, 50, 255)),
                    CircleMarker("b", 1, 150.0, 150.0, 5.0, (10, 20, 30, 255)),
                    CircleMarker("static", 2, 100.0, 100.0, 5.0, (0, 0, 0, 255), hoverable=False),
                ),
            )
        )
        self.tooltip = Tooltip()
        self.controller = HoverController(
            self.surface,
            lambda: self.tooltip,
            lambda marker: f"marker {marker.marker_id}",
            emphasis=EmphasisStyle(hover_radius=8.0, darken_steps=1.0, duration_s=0.2),
            clock=self.clock,
        )

    def _marker(self, marker_id: str) -> CircleMarker:
        return self.surface.frame.marker(marker_id)

    def test_enter_emphasizes_marker_over_transition(self) -> None:
        self.assertEqual(self.controller.pointer_move(51.0, 50.0), "hovered")
        self.assertEqual(self.controller.hovered_marker_id, "a")
        self.assertEqual(self.controller.tooltip_state.content, "marker a")
        self.assertEqual(self._marker("a").radius, 5.0)

        self.assertTrue(self.controller.tick(0.1))
        self.assertAlmostEqual(self._marker("a").radius, 6.5)
        self.assertFalse(self.controller.tick(0.2))
        self.assertEqual(self._marker("a").radius, 8.0)
        self.assertEqual(self._marker("a").fill, darker((100, 200, 50, 255)))

    def test_leave_restores_baseline(self) -> None:
        self.controller.pointer_move(50.0, 50.0)
        self.controller.tick(0.2)
        self.clock.now = 1.0
        self.assertEqual(self.controller.pointer_move(10.0, 190.0), "idle")
        self.assertFalse(self.controller.tooltip_state.visible)
        self.assertIsNone(self.controller.hovered_marker_id)
        self.controller.tick(1.5)
        self.assertEqual(self._marker("a").radius, 5.0)
        self.assertEqual(self._marker("a").fill, (100, 200, 50, 255))
        self.assertFalse(self.controller.animating)

    def test_only_one_marker_is_emphasized_at_a_time(self) -> None:
        self.controller.pointer_move(50.0, 50.0)
        self.controller.tick(0.2)
        self.clock.now = 0.5
        self.controller.pointer_move(150.0, 150.0)
        self.assertEqual(self.controller.state_of("a"), "idle")
        self.assertEqual(self.controller.state_of("b"), "hovered")
        self.assertEqual(self.controller.tooltip_state.content, "marker b")
        self.controller.tick(1.0)
        self.assertEqual(self._marker("a").radius, 5.0)
        self.assertEqual(self._marker("b").radius, 8.0)

    def test_moving_within_marker_only_repositions_tooltip(self) -> None:
        self.controller.pointer_move(50.0, 50.0)
        self.controller.pointer_move(52.0, 51.0)
        state = self.controller.tooltip_state
        self.assertEqual((state.screen_x, state.screen_y), (62.0, 31.0))
        self.assertEqual(self.controller.hovered_marker_id, "a")

    def test_non_hoverable_markers_are_ignored(self) -> None:
        self.assertFalse(self.controller.pointer_enter("static", 100.0, 100.0))
        self.assertEqual(self.controller.pointer_move(100.0, 100.0), "idle")
        self.assertFalse(self.controller.pointer_enter("missing", 0.0, 0.0))

    def test_reset_hides_tooltip_and_forgets_hover(self) -> None:
        self.controller.pointer_move(50.0, 50.0)
        self.controller.reset()
        self.assertIsNone(self.controller.hovered_marker_id)
        self.assertFalse(self.controller.tooltip_state.visible)
        self.assertFalse(self.controller.animating)


class ScatterChartHoverTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.chart = ClusterScatterChart(clock=self.clock)
        self.chart.set_dataset(_scenario_dataset())

    def test_hover_shows_point_details_next_to_pointer(self) -> None:
        self.assertEqual(self.chart.pointer_move(410.0, 22.0), "hovered")
        state = self.chart.tooltip_state
        self.assertTrue(state.visible)
        self.assertEqual((state.screen_x, state.screen_y), (420.0, 2.0))
        self.assertIn("Car: Civic 2020", state.content)
        self.assertIn("Combined FE: 33 MPG", state.content)

    def test_hover_darkens_cluster_color(self) -> None:
        self.chart.pointer_move(410.0, 20.0)
        self.chart.tick(0.2)
        marker = self.chart.frame.marker("point-1")
        self.assertEqual(marker.radius, 8.0)
        self.assertEqual(marker.fill, darker(CategoricalPalette().color_for(1)))

    def test_zero_transition_applies_emphasis_on_enter(self) -> None:
        chart = ClusterScatterChart(config_from_mapping("scatter", {"transition_ms": 0}), clock=self.clock)
        chart.set_dataset(_scenario_dataset())
        chart.pointer_move(50.0, 550.0)
        self.assertEqual(chart.frame.marker("point-0").radius, 8.0)

    def test_redraw_while_hovered_drops_hover_state(self) -> None:
        self.chart.pointer_move(410.0, 20.0)
        self.chart.set_dataset(_scenario_dataset())
        self.assertIsNone(self.chart.hover.hovered_marker_id)
        self.assertFalse(self.chart.tooltip_state.visible)
        self.assertEqual(self.chart.frame.marker("point-1").radius, 5.0)

    def test_pointer_leave_hides_tooltip(self) -> None:
        self.chart.pointer_move(410.0, 20.0)
        self.chart.pointer_leave()
        self.assertFalse(self.chart.tooltip_state.visible)

    def test_tooltips_are_scoped_per_chart(self) -> None:
        other = ClusterScatterChart(clock=self.clock)
        other.set_dataset(_scenario_dataset())
        self.chart.pointer_move(410.0, 20.0)
        self.assertTrue(self.chart.tooltip_state.visible)
        self.assertEqual(other.tooltip_state, HIDDEN)


if __name__ == "__main__":
    unittest.main()
