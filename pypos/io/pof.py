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

"""Riegl POF (position and orientation file) reader and writer.

A POF file is a little-endian header followed by fixed-size frames starting
at the header's data offset. Each frame holds time, longitude, latitude,
altitude, roll, pitch and yaw as doubles, plus a travelled distance from
version 1.1 on. Angles are stored in degrees.
"""

import io
import logging
from dataclasses import dataclass
from datetime import date
from typing import BinaryIO, Iterable, Optional

import numpy as np

from ..attitude.wrap import wrap_angle
from ..core.config import DecoderConfig
from ..core.constants import (D2R, POF_HEADER_SIZE, POF_PREAMBLE, R2D,
                              AngleRange, TimeInfo, TimeUnit)
from ..core.data_structures import Record, Version
from ..core.errors import MalformedFrame
from .base import (BinarySourceMixin, Source, read_exact, read_header,
                   stream_length)

logger = logging.getLogger(__name__)

POF_HEADER_DTYPE = np.dtype([
    ('preamble', 'S27'),
    ('major', '<u2'), ('minor', '<u2'),
    ('data_offset', '<u4'),
    ('year', '<u2'), ('month', '<u2'), ('day', '<u2'),
    ('entries', '<i8'),
    ('min_longitude', '<f8'), ('max_longitude', '<f8'),
    ('min_latitude', '<f8'), ('max_latitude', '<f8'),
    ('min_altitude', '<f8'), ('max_altitude', '<f8'),
    ('avg_interval', '<f8'), ('max_interval', '<f8'), ('dev_interval', '<f8'),
    ('time_unit', 'u1'), ('time_info', 'u1'),
    ('timezone', 'S16'), ('location', 'S16'), ('device', 'S32'),
    ('reserved1', 'S32'), ('project', 'S32'), ('company', 'S32'),
    ('reserved2', 'S32'),
])

_FRAME_FIELDS_V10 = ['time', 'longitude', 'latitude', 'altitude', 'roll', 'pitch', 'yaw']
_FRAME_FIELDS_V11 = _FRAME_FIELDS_V10 + ['distance']
_DEGREE_FIELDS = ('longitude', 'latitude', 'roll', 'pitch', 'yaw')


def has_distance(version: Version) -> bool:
    """POF 1.1 and later append a distance to every frame"""
    return version.minor >= 1


def frame_dtype(version: Version) -> np.dtype:
    names = _FRAME_FIELDS_V11 if has_distance(version) else _FRAME_FIELDS_V10
    return np.dtype([(name, '<f8') for name in names])


def _text(value: bytes) -> str:
    return value.rstrip(b"\x00").decode("latin-1").strip()


@dataclass(frozen=True)
class PofHeader:
    """Decoded POF header.

    Bounds are in degrees (longitude, latitude) and metres (altitude);
    intervals are in seconds.
    """
    version: Version
    data_offset: int
    date: Optional[date]
    entries: int
    min_longitude: float
    max_longitude: float
    min_latitude: float
    max_latitude: float
    min_altitude: float
    max_altitude: float
    avg_interval: float
    max_interval: float
    dev_interval: float
    time_unit: TimeUnit
    time_info: TimeInfo
    timezone: str = ""
    location: str = ""
    device: str = ""
    project: str = ""
    company: str = ""

    @classmethod
    def from_array(cls, raw: np.void, name: str = "<stream>") -> "PofHeader":
        try:
            time_unit = TimeUnit(int(raw['time_unit']))
        except ValueError:
            raise MalformedFrame(f"{name}: invalid time unit {int(raw['time_unit'])}") from None
        try:
            time_info = TimeInfo(int(raw['time_info']))
        except ValueError:
            raise MalformedFrame(f"{name}: invalid time info {int(raw['time_info'])}") from None

        year, month, day = int(raw['year']), int(raw['month']), int(raw['day'])
        try:
            header_date = date(year, month, day)
        except ValueError:
            header_date = None

        return cls(
            version=Version(int(raw['major']), int(raw['minor'])),
            data_offset=int(raw['data_offset']),
            date=header_date,
            entries=int(raw['entries']),
            min_longitude=float(raw['min_longitude']),
            max_longitude=float(raw['max_longitude']),
            min_latitude=float(raw['min_latitude']),
            max_latitude=float(raw['max_latitude']),
            min_altitude=float(raw['min_altitude']),
            max_altitude=float(raw['max_altitude']),
            avg_interval=float(raw['avg_interval']),
            max_interval=float(raw['max_interval']),
            dev_interval=float(raw['dev_interval']),
            time_unit=time_unit,
            time_info=time_info,
            timezone=_text(raw['timezone']),
            location=_text(raw['location']),
            device=_text(raw['device']),
            project=_text(raw['project']),
            company=_text(raw['company']),
        )

    def to_array(self) -> np.ndarray:
        raw = np.zeros(1, dtype=POF_HEADER_DTYPE)
        raw['preamble'] = POF_PREAMBLE
        raw['major'], raw['minor'] = self.version
        raw['data_offset'] = self.data_offset
        if self.date is not None:
            raw['year'], raw['month'], raw['day'] = self.date.year, self.date.month, self.date.day
        raw['entries'] = self.entries
        for key in ('min_longitude', 'max_longitude', 'min_latitude', 'max_latitude',
                    'min_altitude', 'max_altitude',
                    'avg_interval', 'max_interval', 'dev_interval'):
            raw[key] = getattr(self, key)
        raw['time_unit'] = self.time_unit.value
        raw['time_info'] = self.time_info.value
        for key in ('timezone', 'location', 'device', 'project', 'company'):
            raw[key] = getattr(self, key).encode("latin-1")
        return raw


class PofReader(BinarySourceMixin, Source):
    """
    POF record source.

    Parameters
    ----------
    stream : BinaryIO
        Binary stream positioned at the start of the header
    config : DecoderConfig, optional
        Decoder options
    name : str, optional
        Label used in log and error messages

    Attributes
    ----------
    header : PofHeader
        Decoded file header

    Raises
    ------
    MalformedFrame
        If the header is invalid or the record count disagrees with it
    TruncatedStream
        If the frame data is not a whole number of frames

    Notes
    -----
    Reading stops after the number of records the header declares, so a
    header with zero entries yields no records.
    """

    angle_range = AngleRange.UNSIGNED

    def __init__(self, stream: BinaryIO, config: Optional[DecoderConfig] = None,
                 name: Optional[str] = None):
        super().__init__(stream, config=config, name=name)
        start = stream.tell() if stream.seekable() else None
        self.header = PofHeader.from_array(read_header(stream, POF_HEADER_DTYPE, self.name), self.name)
        logger.debug(f"{self.name}: POF v{self.header.version}, {self.header.entries} entries, "
                     f"data at byte {self.header.data_offset}")

        if self.header.entries < 0:
            raise MalformedFrame(f"{self.name}: negative entry count {self.header.entries}")
        offset = self.header.data_offset
        skip = offset - POF_HEADER_SIZE
        if skip < 0:
            raise MalformedFrame(f"{self.name}: data offset {offset} lies inside the header")
        remaining = stream_length(stream)
        if remaining is not None and skip > remaining:
            raise MalformedFrame(
                f"{self.name}: data offset {offset} lies beyond the end of the stream "
                f"({POF_HEADER_SIZE + remaining} bytes)")
        if start is not None:
            stream.seek(start + offset)
        elif len(read_exact(stream, skip)) < skip:
            raise MalformedFrame(f"{self.name}: stream ends before data offset {offset}")

        self.frame_dtype = frame_dtype(self.header.version)
        self._fields = list(self.frame_dtype.names)
        self._open_frames()
        self._check_entries(self.header.entries)

    @property
    def version(self) -> Version:
        return self.header.version

    def _read_next(self) -> Optional[Record]:
        expected = self.header.entries
        if self._frames.frames_read == expected:
            return None
        frame = self._frames.next_frame()
        if frame is None:
            raise MalformedFrame(
                f"{self.name}: header declares {expected} records, "
                f"stream ended after {self._frames.frames_read}")
        values = dict(zip(self._fields, frame))
        for key in _DEGREE_FIELDS:
            values[key] *= D2R
        return Record(
            time=values['time'],
            latitude=values['latitude'],
            longitude=values['longitude'],
            altitude=values['altitude'],
            roll=values['roll'],
            pitch=values['pitch'],
            heading=wrap_angle(values['yaw'], self.angle_range),
            distance=values.get('distance'),
        )


class PofWriter:
    """
    Encode records into a POF file.

    The header bounds, entry count and interval statistics are computed
    from the records written.
    """

    def __init__(self, stream: BinaryIO, version: Version = Version(1, 1),
                 time_unit: TimeUnit = TimeUnit.WEEK,
                 time_info: TimeInfo = TimeInfo.GPS,
                 file_date: Optional[date] = None, **text):
        self.stream = stream
        self.version = version
        self.time_unit = time_unit
        self.time_info = time_info
        self.file_date = file_date
        self.text = text

    def build_header(self, records: list[Record]) -> PofHeader:
        times = np.array([r.time for r in records], dtype=np.float64)
        lon = np.array([r.longitude for r in records], dtype=np.float64) * R2D
        lat = np.array([r.latitude for r in records], dtype=np.float64) * R2D
        alt = np.array([r.altitude for r in records], dtype=np.float64)
        intervals = np.diff(times)

        def stat(values, func):
            return float(func(values)) if values.size else 0.0

        return PofHeader(
            version=self.version,
            data_offset=POF_HEADER_SIZE,
            date=self.file_date,
            entries=len(records),
            min_longitude=stat(lon, np.min), max_longitude=stat(lon, np.max),
            min_latitude=stat(lat, np.min), max_latitude=stat(lat, np.max),
            min_altitude=stat(alt, np.min), max_altitude=stat(alt, np.max),
            avg_interval=stat(intervals, np.mean),
            max_interval=stat(intervals, np.max),
            dev_interval=stat(intervals, np.std),
            time_unit=self.time_unit,
            time_info=self.time_info,
            **self.text,
        )

    def write_all(self, records: Iterable[Record]) -> int:
        records = list(records)
        self.stream.write(self.build_header(records).to_array().tobytes())
        dtype = frame_dtype(self.version)
        rows = []
        for r in records:
            row = [r.time, r.longitude * R2D, r.latitude * R2D, r.altitude,
                   (r.roll or 0.0) * R2D, (r.pitch or 0.0) * R2D, (r.heading or 0.0) * R2D]
            if has_distance(self.version):
                row.append(r.distance or 0.0)
            rows.append(tuple(row))
        self.stream.write(np.array(rows, dtype=dtype).tobytes())
        return len(rows)


def read_pof_header(path) -> PofHeader:
    """Read just the header of a POF file"""
    with open(path, "rb") as fh:
        return PofHeader.from_array(read_header(fh, POF_HEADER_DTYPE, str(path)), str(path))


def pof_bytes(records: Iterable[Record], **kwargs) -> bytes:
    """Encode records into an in-memory POF file"""
    buffer = io.BytesIO()
    PofWriter(buffer, **kwargs).write_all(records)
    return buffer.getvalue()


__all__ = ['PofReader', 'PofWriter', 'PofHeader', 'POF_HEADER_DTYPE',
           'frame_dtype', 'has_distance', 'read_pof_header', 'pof_bytes']
