# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Riegl POQ (position and orientation quality) reader and writer.

A POQ file accompanies a POF file. After a 63-byte header every frame holds
time, north, east and down standard deviations (m), roll, pitch and yaw
standard deviations (degrees) and the PDOP, followed by the satellite count:
a single total for version 1.0, separate GPS and GLONASS counts from 1.1 on.
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Optional

import numpy as np

from ..core.config import DecoderConfig
from ..core.constants import D2R, POQ_PREAMBLE, R2D
from ..core.data_structures import Accuracy, SatelliteCount, Version
from .base import AccuracySource, BinarySourceMixin, read_header

logger = logging.getLogger(__name__)

POQ_HEADER_DTYPE = np.dtype([
    ('preamble', 'S35'),
    ('major', '<u2'), ('minor', '<u2'),
    ('avg_interval', '<f8'), ('max_interval', '<f8'), ('dev_interval', '<f8'),
])

_STD_FIELDS = [
    ('time', '<f8'),
    ('north', '<f8'), ('east', '<f8'), ('down', '<f8'),
    ('roll', '<f8'), ('pitch', '<f8'), ('yaw', '<f8'),
    ('pdop', '<f8'),
]


def specifies_satellite_count(version: Version) -> bool:
    """POQ 1.1 and later count GPS and GLONASS satellites separately"""
    return version.minor >= 1


def frame_dtype(version: Version) -> np.dtype:
    if specifies_satellite_count(version):
        return np.dtype(_STD_FIELDS + [('gps', '<u2'), ('glonass', '<u2')])
    return np.dtype(_STD_FIELDS + [('satellites', '<u2')])


@dataclass(frozen=True)
class PoqHeader:
    """Decoded POQ header; intervals are in seconds"""
    version: Version
    avg_interval: float
    max_interval: float
    dev_interval: float

    @classmethod
    def from_array(cls, raw: np.void) -> "PoqHeader":
        return cls(
            version=Version(int(raw['major']), int(raw['minor'])),
            avg_interval=float(raw['avg_interval']),
            max_interval=float(raw['max_interval']),
            dev_interval=float(raw['dev_interval']),
        )

    def to_array(self) -> np.ndarray:
        raw = np.zeros(1, dtype=POQ_HEADER_DTYPE)
        raw['preamble'] = POQ_PREAMBLE
        raw['major'], raw['minor'] = self.version
        raw['avg_interval'] = self.avg_interval
        raw['max_interval'] = self.max_interval
        raw['dev_interval'] = self.dev_interval
        return raw


class PoqReader(BinarySourceMixin, AccuracySource):
    """
    POQ accuracy source.

    Raises
    ------
    TruncatedStream
        If the header is short or the frame data is not a whole number
        of frames
    """

    def __init__(self, stream: BinaryIO, config: Optional[DecoderConfig] = None,
                 name: Optional[str] = None):
        super().__init__(stream, config=config, name=name)
        self.header = PoqHeader.from_array(read_header(stream, POQ_HEADER_DTYPE, self.name))
        self.frame_dtype = frame_dtype(self.header.version)
        self._fields = list(self.frame_dtype.names)
        self._open_frames()
        logger.debug(f"{self.name}: POQ v{self.header.version}, {self.frame_count} frames")

    @property
    def version(self) -> Version:
        return self.header.version

    def _read_next(self) -> Optional[Accuracy]:
        frame = self._frames.next_frame()
        if frame is None:
            return None
        values = dict(zip(self._fields, frame))
        if specifies_satellite_count(self.header.version):
            satellites = SatelliteCount(gps=values['gps'], glonass=values['glonass'])
        else:
            satellites = SatelliteCount(total=values['satellites'])
        return Accuracy(
            time=values['time'],
            north=values['north'],
            east=values['east'],
            down=values['down'],
            roll=values['roll'] * D2R,
            pitch=values['pitch'] * D2R,
            heading=values['yaw'] * D2R,
            pdop=values['pdop'],
            satellite_count=satellites,
        )


class PoqWriter:
    """Encode accuracies into a POQ file"""

    def __init__(self, stream: BinaryIO, version: Version = Version(1, 1)):
        self.stream = stream
        self.version = version

    def write_all(self, accuracies: Iterable[Accuracy]) -> int:
        accuracies = list(accuracies)
        intervals = np.diff([a.time for a in accuracies]) if len(accuracies) > 1 else np.zeros(0)
        header = PoqHeader(
            version=self.version,
            avg_interval=float(np.mean(intervals)) if intervals.size else 0.0,
            max_interval=float(np.max(intervals)) if intervals.size else 0.0,
            dev_interval=float(np.std(intervals)) if intervals.size else 0.0,
        )
        self.stream.write(header.to_array().tobytes())

        specified = specifies_satellite_count(self.version)
        rows = []
        for a in accuracies:
            row = [a.time, a.north, a.east, a.down,
                   a.roll * R2D, a.pitch * R2D, a.heading * R2D, a.pdop or 0.0]
            count = a.satellite_count or SatelliteCount(total=0)
            if specified:
                row += [count.gps if count.is_specified else count.count(), count.glonass or 0]
            else:
                row.append(count.count())
            rows.append(tuple(row))
        self.stream.write(np.array(rows, dtype=frame_dtype(self.version)).tobytes())
        return len(rows)


__all__ = ['PoqReader', 'PoqWriter', 'PoqHeader', 'POQ_HEADER_DTYPE',
           'frame_dtype', 'specifies_satellite_count']
