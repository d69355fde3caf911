#!/usr/bin/env python3
"""Test suite for angle wrapping and blending"""

import unittest

import numpy as np

from pypos.attitude.wrap import (angle_difference, blend_angle, wrap_angle,
                                 wrap_to_2pi, wrap_to_2pi_array, wrap_to_pi,
                                 wrap_to_pi_array)
from pypos.core.constants import AngleRange


class TestWrapToPi(unittest.TestCase):

    def test_in_range_unchanged(self):
        for angle in (0.0, 1.0, -1.0, np.pi, -np.pi + 1e-9):
            self.assertEqual(wrap_to_pi(angle), angle)

    def test_minus_pi_maps_to_pi(self):
        self.assertAlmostEqual(wrap_to_pi(-np.pi), np.pi)

    def test_wraps(self):
        self.assertAlmostEqual(wrap_to_pi(1.5 * np.pi), -0.5 * np.pi)
        self.assertAlmostEqual(wrap_to_pi(-1.5 * np.pi), 0.5 * np.pi)
        self.assertAlmostEqual(wrap_to_pi(2 * np.pi), 0.0)


class TestWrapTo2Pi(unittest.TestCase):

    def test_in_range_unchanged(self):
        for angle in (0.0, 1.0, np.pi, 6.0):
            self.assertEqual(wrap_to_2pi(angle), angle)

    def test_wraps(self):
        self.assertAlmostEqual(wrap_to_2pi(-0.5 * np.pi), 1.5 * np.pi)
        self.assertEqual(wrap_to_2pi(2 * np.pi), 0.0)
        self.assertAlmostEqual(wrap_to_2pi(5 * np.pi), np.pi)

    def test_tiny_negative_maps_to_zero(self):
        value = wrap_to_2pi(-1e-20)
        self.assertGreaterEqual(value, 0.0)
        self.assertLess(value, 2 * np.pi)


class TestAngleDifference(unittest.TestCase):

    def test_shortest_path_across_north(self):
        diff = angle_difference(np.deg2rad(359.0), np.deg2rad(1.0))
        self.assertAlmostEqual(np.rad2deg(diff), 2.0)

    def test_shortest_path_across_south(self):
        diff = angle_difference(np.deg2rad(179.0), np.deg2rad(-179.0))
        self.assertAlmostEqual(np.rad2deg(diff), 2.0)

    def test_antisymmetric(self):
        a, b = 0.3, 2.9
        self.assertAlmostEqual(angle_difference(a, b), -angle_difference(b, a))


class TestBlendAngle(unittest.TestCase):

    def test_midpoint_across_north_is_zero(self):
        result = blend_angle(np.deg2rad(359.0), np.deg2rad(1.0), 0.5)
        self.assertAlmostEqual(result, 0.0, places=12)

    def test_midpoint_across_north_unsigned(self):
        result = blend_angle(np.deg2rad(359.0), np.deg2rad(1.0), 0.5, AngleRange.UNSIGNED)
        self.assertGreaterEqual(result, 0.0)
        self.assertLess(result, 2 * np.pi)
        self.assertAlmostEqual(angle_difference(0.0, result), 0.0, places=12)

    def test_fraction_zero_returns_start(self):
        self.assertEqual(blend_angle(1.0, 2.0, 0.0), 1.0)

    def test_quarter_fraction(self):
        result = blend_angle(np.deg2rad(350.0), np.deg2rad(10.0), 0.25, AngleRange.UNSIGNED)
        self.assertAlmostEqual(np.rad2deg(result), 355.0)

    def test_plain_blend_without_crossing(self):
        self.assertAlmostEqual(blend_angle(0.2, 0.6, 0.5), 0.4)

    def test_wrap_angle(self):
        self.assertAlmostEqual(wrap_angle(-0.5 * np.pi, AngleRange.UNSIGNED), 1.5 * np.pi)
        self.assertAlmostEqual(wrap_angle(1.5 * np.pi, AngleRange.SIGNED), -0.5 * np.pi)


class TestArrayWrap(unittest.TestCase):

    def test_wrap_to_pi_array(self):
        angles = np.array([0.0, 1.5 * np.pi, -1.5 * np.pi, 4 * np.pi])
        expected = np.array([0.0, -0.5 * np.pi, 0.5 * np.pi, 0.0])
        np.testing.assert_array_almost_equal(wrap_to_pi_array(angles), expected)

    def test_wrap_to_2pi_array(self):
        angles = [-0.5 * np.pi, 0.0, 2 * np.pi, 3 * np.pi]
        expected = np.array([1.5 * np.pi, 0.0, 0.0, np.pi])
        np.testing.assert_array_almost_equal(wrap_to_2pi_array(angles), expected)

    def test_input_not_modified(self):
        angles = np.array([3 * np.pi])
        wrap_to_2pi_array(angles)
        self.assertEqual(angles[0], 3 * np.pi)


if __name__ == '__main__':
    unittest.main()
