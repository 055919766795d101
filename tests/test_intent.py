import unittest

from menuaim import intent
from menuaim.geometry import Point, Region, derive_corners
from menuaim.intent import AimState, evaluate_intent, should_switch
from menuaim.tracker import Sample


class TestIntent(unittest.TestCase):
    def setUp(self):
        # content to the right, no threshold
        self.region = Region(top=0, right=100, bottom=50, left=0)
        self.corners = derive_corners(self.region, 0, "right")
        self.state = AimState(active_item="item-a")
        self.aiming = Sample(Point(90, 10), Point(95, 5))

    def test_idle_always_switches(self):
        state = AimState()
        for sample in (self.aiming, Sample(None, None), Sample(Point(1, 1), None)):
            self.assertTrue(should_switch(state, sample, self.region, self.corners))
            self.assertIsNone(state.last_checked_point)

    def test_missing_samples_switch(self):
        self.assertEqual(
            evaluate_intent(self.state, Sample(None, Point(5, 5)), self.region, self.corners),
            (True, intent.NO_SAMPLES),
        )
        self.assertEqual(
            evaluate_intent(self.state, Sample(Point(5, 5), None), self.region, self.corners),
            (True, intent.NO_SAMPLES),
        )

    def test_aiming_up_right_waits(self):
        """Gradients to the top-right corner are equal (-1), so the move counts as aiming."""
        self.assertFalse(should_switch(self.state, self.aiming, self.region, self.corners))
        self.assertEqual(self.state.last_checked_point, Point(95, 5))

    def test_moving_far_away_switches(self):
        sample = Sample(Point(10, 10), Point(200, 200))
        self.state.last_checked_point = Point(1, 1)
        switch, reason = evaluate_intent(self.state, sample, self.region, self.corners)
        self.assertTrue(switch)
        self.assertEqual(reason, intent.OFF_DECREASING)
        self.assertTrue(should_switch(self.state, sample, self.region, self.corners))
        self.assertIsNone(self.state.last_checked_point)

    def test_moving_down_trips_increasing_corner(self):
        # gradient to the bottom-right corner falls from 0.8 to 0.6
        sample = Sample(Point(50, 10), Point(50, 20))
        self.assertEqual(
            evaluate_intent(self.state, sample, self.region, self.corners),
            (True, intent.OFF_INCREASING),
        )

    def test_previous_outside_region_switches(self):
        sample = Sample(Point(-5, 10), Point(5, 10))
        self.assertEqual(
            evaluate_intent(self.state, sample, self.region, self.corners),
            (True, intent.ENTERED_FROM_OUTSIDE),
        )

    def test_stale_sample_escape(self):
        self.assertFalse(should_switch(self.state, self.aiming, self.region, self.corners))
        # pointer has not moved since the wait decision
        self.assertEqual(
            evaluate_intent(self.state, self.aiming, self.region, self.corners),
            (True, intent.STALE),
        )
        self.assertTrue(should_switch(self.state, self.aiming, self.region, self.corners))
        self.assertIsNone(self.state.last_checked_point)

    def test_stale_check_has_no_tolerance(self):
        """A sub-pixel move is not stale; the exact comparison is kept on purpose."""
        self.state.last_checked_point = Point(95.0000001, 5)
        self.assertEqual(
            evaluate_intent(self.state, self.aiming, self.region, self.corners),
            (False, intent.AIMING),
        )

    def test_vertical_alignment_does_not_raise(self):
        # current directly below the top-right corner: gradient -inf
        sample = Sample(Point(90, 20), Point(100, 10))
        switch, _ = evaluate_intent(self.state, sample, self.region, self.corners)
        self.assertFalse(switch)

    def test_sample_on_corner_does_not_raise(self):
        sample = Sample(Point(90, 10), Point(100, 0))
        switch, _ = evaluate_intent(self.state, sample, self.region, self.corners)
        self.assertIsInstance(switch, bool)


if __name__ == '__main__':
    unittest.main()
