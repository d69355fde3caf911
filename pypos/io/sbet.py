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

"""SBET reader and writer.

SBET (smoothed best estimate of trajectory) files hold one 136-byte frame
per epoch: 17 little-endian doubles with no header or delimiters. Angles are
already in radians.
"""

import logging
from typing import BinaryIO, Iterable, Optional

import numpy as np

from ..attitude.wrap import wrap_angle
from ..core.config import DecoderConfig
from ..core.constants import AngleRange
from ..core.data_structures import Record
from .base import BinarySourceMixin, Source

logger = logging.getLogger(__name__)

SBET_FIELDS = [
    'time',
    'latitude', 'longitude', 'altitude',
    'velocity_x', 'velocity_y', 'velocity_z',
    'roll', 'pitch', 'heading',
    'wander_angle',
    'acceleration_x', 'acceleration_y', 'acceleration_z',
    'angular_rate_x', 'angular_rate_y', 'angular_rate_z',
]

SBET_DTYPE = np.dtype([(name, '<f8') for name in SBET_FIELDS])


class SbetReader(BinarySourceMixin, Source):
    """
    SBET record source.

    Parameters
    ----------
    stream : BinaryIO
        Binary stream positioned at the first frame
    config : DecoderConfig, optional
        Decoder options
    name : str, optional
        Label used in log and error messages

    Raises
    ------
    TruncatedStream
        If the stream length is not a multiple of 136 bytes

    Examples
    --------
    >>> with SbetReader.from_path("mission.sbet") as reader:  # doctest: +SKIP
    ...     for record in reader:
    ...         print(record.time, record.latitude)
    """

    frame_dtype = SBET_DTYPE
    angle_range = AngleRange.SIGNED

    def __init__(self, stream: BinaryIO, config: Optional[DecoderConfig] = None,
                 name: Optional[str] = None):
        super().__init__(stream, config=config, name=name)
        self._open_frames()
        logger.debug(f"{self.name}: {self.frame_count} SBET frames")

    def _read_next(self) -> Optional[Record]:
        frame = self._frames.next_frame()
        if frame is None:
            return None
        values = dict(zip(SBET_FIELDS, frame))
        values["heading"] = wrap_angle(values["heading"], self.angle_range)
        return Record(**values)


class SbetWriter:
    """Encode records into SBET frames"""

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.count = 0

    def write(self, record: Record) -> None:
        self.write_all([record])

    def write_all(self, records: Iterable[Record]) -> int:
        rows = [tuple(_value(record, name) for name in SBET_FIELDS) for record in records]
        self.stream.write(np.array(rows, dtype=SBET_DTYPE).tobytes())
        self.count += len(rows)
        return len(rows)


def _value(record: Record, name: str) -> float:
    value = getattr(record, name)
    return 0.0 if value is None else value


def read_sbet(path, config: Optional[DecoderConfig] = None) -> list[Record]:
    """Read every record of an SBET file"""
    with SbetReader.from_path(path, config=config) as reader:
        return reader.records()


def write_sbet(path, records: Iterable[Record]) -> int:
    """Write records to an SBET file, returning the number written"""
    with open(path, "wb") as fh:
        return SbetWriter(fh).write_all(records)


__all__ = ['SbetReader', 'SbetWriter', 'SBET_DTYPE', 'SBET_FIELDS', 'read_sbet', 'write_sbet']
