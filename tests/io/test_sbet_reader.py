import io
import os
import shutil
import tempfile
import unittest

import numpy as np

from pypos.core.config import DecoderConfig
from pypos.core.constants import SBET_FRAME_SIZE, AngleRange
from pypos.core.data_structures import Record
from pypos.core.errors import MalformedFrame, TruncatedStream
from pypos.io.sbet import SbetReader, SbetWriter, read_sbet, write_sbet


class UnseekableStream(io.RawIOBase):
    """Byte stream that can only be read forward"""

    def __init__(self, data):
        self._buffer = io.BytesIO(data)

    def readable(self):
        return True

    def readinto(self, b):
        return self._buffer.readinto(b)


def make_sbet_records(count, start=151631.0, step=0.005):
    records = []
    for i in range(count):
        records.append(Record(
            time=start + i * step,
            latitude=0.5680211 + i * 1e-7,
            longitude=-1.8831 + i * 1e-7,
            altitude=1721.0 + i * 0.01,
            velocity_x=1.0 + i, velocity_y=2.0, velocity_z=-0.1,
            roll=0.01, pitch=-0.02, heading=3.0 + 0.01 * i,
            wander_angle=0.001,
            acceleration_x=0.1, acceleration_y=0.2, acceleration_z=9.8,
            angular_rate_x=0.001, angular_rate_y=0.002, angular_rate_z=0.003,
        ))
    return records


def sbet_bytes(records):
    buffer = io.BytesIO()
    SbetWriter(buffer).write_all(records)
    return buffer.getvalue()


class TestSbetReader(unittest.TestCase):

    def setUp(self):
        self.records = make_sbet_records(5)
        self.data = sbet_bytes(self.records)

    def test_record_count_matches_frame_count(self):
        self.assertEqual(len(self.data), 5 * SBET_FRAME_SIZE)
        reader = SbetReader(io.BytesIO(self.data))
        self.assertEqual(reader.frame_count, 5)
        self.assertEqual(len(reader.records()), len(self.data) // SBET_FRAME_SIZE)

    def test_round_trip(self):
        decoded = SbetReader(io.BytesIO(self.data)).records()
        self.assertEqual(decoded, self.records)
        self.assertEqual(sbet_bytes(decoded), self.data)

    def test_field_order(self):
        frame = np.arange(17, dtype='<f8') * 0.1
        record = next(SbetReader(io.BytesIO(frame.tobytes())))
        self.assertAlmostEqual(record.time, 0.0)
        self.assertAlmostEqual(record.latitude, 0.1)
        self.assertAlmostEqual(record.longitude, 0.2)
        self.assertAlmostEqual(record.altitude, 0.3)
        self.assertAlmostEqual(record.velocity_z, 0.6)
        self.assertAlmostEqual(record.roll, 0.7)
        self.assertAlmostEqual(record.heading, 0.9)
        self.assertAlmostEqual(record.wander_angle, 1.0)
        self.assertAlmostEqual(record.angular_rate_z, 1.6)

    def test_heading_is_signed(self):
        record = make_sbet_records(1)[0]
        data = sbet_bytes([Record(**{**record.to_dict(), 'heading': 1.5 * np.pi})])
        decoded = next(SbetReader(io.BytesIO(data)))
        self.assertAlmostEqual(decoded.heading, -0.5 * np.pi)
        self.assertIs(SbetReader.angle_range, AngleRange.SIGNED)

    def test_truncated_seekable_stream_rejected_up_front(self):
        with self.assertRaises(TruncatedStream):
            SbetReader(io.BytesIO(self.data + b'\x00' * 10))

    def test_truncated_stream_is_a_malformed_frame(self):
        self.assertTrue(issubclass(TruncatedStream, MalformedFrame))

    def test_truncated_unseekable_stream_fails_on_read(self):
        reader = SbetReader(UnseekableStream(self.data[:-8]))
        self.assertIsNone(reader.frame_count)
        with self.assertRaises(TruncatedStream):
            list(reader)
        # the failure is terminal
        self.assertIsNone(reader.read_record())

    def test_unseekable_stream_reads_all(self):
        reader = SbetReader(UnseekableStream(self.data))
        self.assertEqual(reader.records(), self.records)

    def test_small_chunks(self):
        config = DecoderConfig(chunk_frames=2)
        reader = SbetReader(io.BytesIO(self.data), config=config)
        self.assertEqual(reader.records(), self.records)

    def test_empty_stream(self):
        reader = SbetReader(io.BytesIO(b''))
        self.assertEqual(reader.frame_count, 0)
        self.assertIsNone(reader.read_record())

    def test_rewind(self):
        reader = SbetReader(io.BytesIO(self.data))
        first = reader.records()
        reader.rewind()
        self.assertEqual(reader.records(), first)

    def test_rewind_unseekable(self):
        reader = SbetReader(UnseekableStream(self.data))
        with self.assertRaises(io.UnsupportedOperation):
            reader.rewind()

    def test_to_dataframe(self):
        df = SbetReader(io.BytesIO(self.data)).to_dataframe()
        self.assertEqual(len(df), 5)
        for column in ('time', 'latitude', 'heading', 'wander_angle', 'angular_rate_z'):
            self.assertIn(column, df.columns)
        np.testing.assert_array_almost_equal(df['time'].values,
                                             [r.time for r in self.records])


class TestSbetFiles(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.test_dir, "mission.sbet")
        self.records = make_sbet_records(3)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_write_and_read_file(self):
        self.assertEqual(write_sbet(self.path, self.records), 3)
        self.assertEqual(os.path.getsize(self.path), 3 * SBET_FRAME_SIZE)
        self.assertEqual(read_sbet(self.path), self.records)

    def test_context_manager_closes_file(self):
        write_sbet(self.path, self.records)
        with SbetReader.from_path(self.path) as reader:
            next(reader)
        self.assertTrue(reader.stream.closed)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            SbetReader.from_path(os.path.join(self.test_dir, "missing.sbet"))

    def test_truncated_file_is_closed(self):
        with open(self.path, "wb") as fh:
            fh.write(b'\x00' * (SBET_FRAME_SIZE + 1))
        with self.assertRaises(TruncatedStream):
            SbetReader.from_path(self.path)


if __name__ == '__main__':
    unittest.main()
