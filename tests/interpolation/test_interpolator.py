#!/usr/bin/env python3
"""Test suite for record interpolation"""

import io
import unittest

import numpy as np

from pypos.attitude.wrap import angle_difference
from pypos.core.constants import AngleRange
from pypos.core.data_structures import Record
from pypos.core.errors import InsufficientData, OutOfRange, PosError
from pypos.interpolation import Interpolator, StreamingInterpolator
from pypos.io.pof import PofReader, pof_bytes
from pypos.io.pos import PosReader
from pypos.io.sbet import SbetReader, SbetWriter


def record(time, latitude=0.0, heading=None, altitude=0.0, **kwargs):
    orientation = {} if heading is None else dict(roll=0.0, pitch=0.0, heading=heading)
    return Record(time=time, latitude=latitude, longitude=0.0, altitude=altitude,
                  **orientation, **kwargs)


def sbet_source(records):
    buffer = io.BytesIO()
    SbetWriter(buffer).write_all(records)
    buffer.seek(0)
    return SbetReader(buffer)


class TestInterpolator(unittest.TestCase):

    def test_latitude_scenario(self):
        interpolator = Interpolator([record(0.0, latitude=10.0), record(10.0, latitude=20.0)])
        result = interpolator.interpolate(5.0)
        self.assertEqual(result.latitude, 15.0)
        self.assertEqual(result.time, 5.0)

    def test_heading_scenario(self):
        interpolator = Interpolator([record(0.0, heading=np.deg2rad(359.0)),
                                     record(2.0, heading=np.deg2rad(1.0))])
        result = interpolator.interpolate(1.0)
        self.assertAlmostEqual(np.rad2deg(angle_difference(0.0, result.heading)), 0.0, places=9)

    def test_identity_at_sample_times(self):
        records = [record(float(t), latitude=0.1 * t, heading=0.2 * t) for t in range(5)]
        interpolator = Interpolator(records)
        for r in records:
            self.assertIs(interpolator.interpolate(r.time), r)

    def test_scalar_monotonicity(self):
        a = record(100.0, latitude=0.61, altitude=10.0, velocity_x=3.0,
                   velocity_y=-1.0, velocity_z=0.0)
        b = record(101.0, latitude=0.59, altitude=12.5, velocity_x=1.0,
                   velocity_y=2.0, velocity_z=0.5)
        interpolator = Interpolator([a, b])
        for t in np.linspace(100.0, 101.0, 37):
            result = interpolator.interpolate(float(t))
            for name in ('latitude', 'altitude', 'velocity_x', 'velocity_y', 'velocity_z'):
                low, high = sorted((getattr(a, name), getattr(b, name)))
                value = getattr(result, name)
                self.assertGreaterEqual(value, low - 1e-12, name)
                self.assertLessEqual(value, high + 1e-12, name)

    def test_out_of_range(self):
        interpolator = Interpolator([record(1.0), record(2.0), record(3.0)])
        for t in (0.999, 3.001, float('nan')):
            with self.assertRaises(OutOfRange):
                interpolator.interpolate(t)
        with self.assertRaises(OutOfRange) as ctx:
            interpolator.interpolate(5.0)
        self.assertEqual((ctx.exception.time, ctx.exception.start, ctx.exception.end),
                         (5.0, 1.0, 3.0))

    def test_insufficient_data(self):
        with self.assertRaises(InsufficientData):
            Interpolator([])
        with self.assertRaises(InsufficientData):
            Interpolator([record(1.0)])

    def test_unsorted_rejected(self):
        records = [record(0.0), record(2.0), record(1.0)]
        with self.assertRaises(ValueError):
            Interpolator(records)
        interpolator = Interpolator(records, sort=True)
        self.assertEqual(interpolator.interpolate(1.5).time, 1.5)

    def test_bracket(self):
        records = [record(float(t)) for t in range(4)]
        interpolator = Interpolator(records)
        self.assertEqual(interpolator.bracket(1.5), (records[1], records[2]))
        self.assertEqual(interpolator.bracket(0.0), (records[0], records[1]))
        self.assertEqual(interpolator.bracket(3.0), (records[2], records[3]))

    def test_duplicate_times(self):
        records = [record(0.0, latitude=0.0), record(1.0, latitude=1.0),
                   record(1.0, latitude=5.0), record(2.0, latitude=6.0)]
        interpolator = Interpolator(records)
        self.assertIs(interpolator.interpolate(1.0), records[1])
        self.assertEqual(interpolator.interpolate(1.5).latitude, 5.5)

    def test_interpolate_many(self):
        interpolator = Interpolator([record(0.0, latitude=0.0), record(4.0, latitude=8.0)])
        results = interpolator.interpolate_many(np.array([1.0, 2.0, 3.0]))
        self.assertEqual([r.latitude for r in results], [2.0, 4.0, 6.0])

    def test_angle_range_from_source(self):
        source = PofReader(io.BytesIO(pof_bytes([record(0.0, heading=np.deg2rad(350.0)),
                                                 record(2.0, heading=np.deg2rad(20.0))])))
        interpolator = Interpolator(source)
        self.assertIs(interpolator.angle_range, AngleRange.UNSIGNED)
        self.assertEqual(len(interpolator), 2)
        result = interpolator.interpolate(1.0)
        self.assertAlmostEqual(np.rad2deg(result.heading), 5.0)

    def test_explicit_angle_range(self):
        interpolator = Interpolator([record(0.0, heading=np.deg2rad(350.0)),
                                     record(2.0, heading=np.deg2rad(0.0))],
                                    angle_range=AngleRange.SIGNED)
        self.assertAlmostEqual(np.rad2deg(interpolator.interpolate(1.0).heading), -5.0)

    def test_negative_attitude_from_pof(self):
        records = [Record(time=t, latitude=0.1, longitude=0.2, altitude=5.0,
                          roll=np.deg2rad(-0.35), pitch=np.deg2rad(p), heading=np.deg2rad(h))
                   for t, p, h in ((0.0, -2.0, 10.0), (1.0, -4.0, 20.0))]
        reader = PofReader(io.BytesIO(pof_bytes(records)))
        result = Interpolator(reader, angle_range=reader.angle_range).interpolate(0.5)
        self.assertAlmostEqual(np.rad2deg(result.roll), -0.35)
        self.assertAlmostEqual(np.rad2deg(result.pitch), -3.0)
        self.assertAlmostEqual(np.rad2deg(result.heading), 15.0)

    def test_unsorted_pos_file(self):
        text = ("2.0 10.0 20.0 100.0 0.0 0.0 10.0\n"
                "0.0 10.0 20.0 100.0 0.0 0.0 350.0\n"
                "1.0 10.0 20.0 100.0 0.0 0.0 0.0\n")
        reader = PosReader(io.StringIO(text))
        interpolator = Interpolator(reader, sort=True)
        self.assertIs(interpolator.angle_range, AngleRange.UNSIGNED)
        self.assertAlmostEqual(np.rad2deg(interpolator.interpolate(0.5).heading), 355.0)
        self.assertAlmostEqual(np.rad2deg(interpolator.interpolate(1.5).heading), 5.0)


class TestStreamingInterpolator(unittest.TestCase):

    def setUp(self):
        self.records = [record(float(t), latitude=float(t), heading=0.1 * t,
                               velocity_x=0.0, velocity_y=0.0, velocity_z=0.0)
                        for t in range(6)]

    def test_forward_queries(self):
        interpolator = StreamingInterpolator(sbet_source(self.records))
        self.assertEqual(len(interpolator.records), 2)
        for t in (0.5, 1.25, 3.5):
            self.assertAlmostEqual(interpolator.interpolate(t).latitude, t)
        self.assertEqual(len(interpolator.records), 5)
        self.assertAlmostEqual(interpolator.interpolate(4.75).latitude, 4.75)
        self.assertEqual(len(interpolator.records), 6)

    def test_backward_query(self):
        interpolator = StreamingInterpolator(sbet_source(self.records))
        interpolator.interpolate(4.5)
        self.assertAlmostEqual(interpolator.interpolate(0.5).latitude, 0.5)

    def test_identity(self):
        interpolator = StreamingInterpolator(sbet_source(self.records))
        result = interpolator.interpolate(3.0)
        self.assertEqual((result.time, result.latitude), (3.0, 3.0))
        self.assertAlmostEqual(result.heading, 0.3)

    def test_out_of_range(self):
        interpolator = StreamingInterpolator(sbet_source(self.records))
        with self.assertRaises(OutOfRange):
            interpolator.interpolate(-0.1)
        with self.assertRaises(OutOfRange):
            interpolator.interpolate(5.1)
        with self.assertRaises(OutOfRange):
            interpolator.interpolate(float('nan'))
        self.assertAlmostEqual(interpolator.interpolate(5.0).latitude, 5.0)

    def test_insufficient_data(self):
        with self.assertRaises(InsufficientData):
            StreamingInterpolator(sbet_source(self.records[:1]))

    def test_unsorted_source(self):
        records = [self.records[0], self.records[2], self.records[1]]
        interpolator = StreamingInterpolator(sbet_source(records))
        with self.assertRaises(PosError):
            interpolator.interpolate(2.5)

    def test_negative_pitch_from_pos(self):
        text = "0 10 20 1 -1.0 -3.0 10\n1 10 20 1 -1.0 -3.0 20\n"
        result = StreamingInterpolator(PosReader(io.StringIO(text))).interpolate(0.5)
        self.assertAlmostEqual(np.rad2deg(result.roll), -1.0)
        self.assertAlmostEqual(np.rad2deg(result.pitch), -3.0)
        self.assertAlmostEqual(np.rad2deg(result.heading), 15.0)

    def test_heading_wraps(self):
        records = [record(0.0, heading=np.deg2rad(179.0)), record(1.0, heading=np.deg2rad(-179.0))]
        interpolator = StreamingInterpolator(sbet_source(records))
        heading = interpolator.interpolate(0.5).heading
        self.assertAlmostEqual(abs(np.rad2deg(heading)), 180.0)


if __name__ == '__main__':
    unittest.main()
