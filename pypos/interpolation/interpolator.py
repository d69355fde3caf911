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

"""
Time interpolation of position records.

Given time-ordered records, estimate the state at an arbitrary query time
between two samples. Scalars are blended linearly, angles along the shortest
arc. Queries outside the sampled span fail; nothing is extrapolated.
"""

import logging
from operator import attrgetter
from typing import Iterable, Optional, Union

import numpy as np

from ..core.constants import AngleRange
from ..core.data_structures import Record
from ..core.errors import InsufficientData, OutOfRange, PosError
from ..io.base import Source

logger = logging.getLogger(__name__)


class Interpolator:
    """
    Interpolate records from a fully buffered, time-sorted sequence.

    The bracketing pair of a query is found by binary search over the buffered
    times, so each query costs O(log n).

    Parameters
    ----------
    records : iterable of Record or Source
        Records sorted by time. A Source is drained into the buffer.
    angle_range : AngleRange, optional
        Range interpolated headings are wrapped into. Defaults to the source's
        own range, or signed for plain sequences.
    sort : bool
        Sort the records by time first (needed for pos files)

    Raises
    ------
    InsufficientData
        If fewer than two records are given
    ValueError
        If the records are not sorted and ``sort`` is False

    Examples
    --------
    >>> a = Record(time=0.0, latitude=10.0, longitude=0.0, altitude=0.0)
    >>> b = Record(time=10.0, latitude=20.0, longitude=0.0, altitude=0.0)
    >>> Interpolator([a, b]).interpolate(5.0).latitude
    15.0
    """

    def __init__(self, records: Union[Iterable[Record], Source],
                 angle_range: Optional[AngleRange] = None, sort: bool = False):
        if angle_range is None:
            angle_range = getattr(records, "angle_range", AngleRange.SIGNED)
        self.angle_range = angle_range

        records = list(records)
        if sort:
            records.sort(key=attrgetter('time'))
        if len(records) < 2:
            raise InsufficientData(
                f"interpolation needs at least two records, got {len(records)}")

        self.times = np.array([r.time for r in records], dtype=np.float64)
        unsorted = np.flatnonzero(np.diff(self.times) < 0)
        if unsorted.size:
            i = int(unsorted[0])
            raise ValueError(
                f"records are not sorted by time: record {i + 1} (t={self.times[i + 1]!r}) "
                f"precedes record {i} (t={self.times[i]!r}); pass sort=True")
        self.records = records
        logger.debug(f"Interpolator buffered {len(records)} records "
                     f"spanning [{self.start}, {self.end}]")

    def __len__(self) -> int:
        return len(self.records)

    @property
    def start(self) -> float:
        return float(self.times[0])

    @property
    def end(self) -> float:
        return float(self.times[-1])

    def bracket(self, time: float) -> tuple[Record, Record]:
        """
        Bracketing pair ``(a, b)`` with ``a.time <= time <= b.time``.

        Raises
        ------
        OutOfRange
            If ``time`` is outside ``[start, end]``
        """
        if not self.start <= time <= self.end:
            raise OutOfRange(time, self.start, self.end)
        index = int(np.searchsorted(self.times, time, side='left'))
        if index == 0:
            return self.records[0], self.records[1]
        return self.records[index - 1], self.records[index]

    def interpolate(self, time: float) -> Record:
        """
        Record at ``time``.

        A query exactly at a sampled time returns that record unchanged.

        Raises
        ------
        OutOfRange
            If ``time`` is before the first or after the last record
        """
        if not self.start <= time <= self.end:
            raise OutOfRange(time, self.start, self.end)
        index = int(np.searchsorted(self.times, time, side='left'))
        if self.times[index] == time:
            return self.records[index]
        a, b = self.records[index - 1], self.records[index]
        return a.interpolate(b, time, self.angle_range)

    def interpolate_many(self, times: Iterable[float]) -> list[Record]:
        """Interpolate at each of ``times``; fails on the first out-of-range time"""
        return [self.interpolate(float(t)) for t in times]


class StreamingInterpolator:
    """
    Interpolate from a Source, reading records only as far as queries need.

    Records are pulled lazily and kept in a growing buffer with a cursor on
    the last bracketing pair, so a sequence of increasing query times reads
    the file once without loading it up front. Earlier times inside the
    buffered span are still answered.

    Parameters
    ----------
    source : Source
        Time-sorted record source
    angle_range : AngleRange, optional
        Defaults to the source's range

    Raises
    ------
    InsufficientData
        If the source holds fewer than two records
    """

    def __init__(self, source: Source, angle_range: Optional[AngleRange] = None):
        self.source = source
        self.angle_range = angle_range or source.angle_range
        self.records: list[Record] = []
        for _ in range(2):
            record = source.read_record()
            if record is None:
                raise InsufficientData(
                    f"interpolation needs at least two records, {source.name} has {len(self.records)}")
            self._append(record)
        self.index = 1
        self._exhausted = False

    def _append(self, record: Record) -> None:
        if self.records and record.time < self.records[-1].time:
            raise PosError(
                f"{self.source.name}: record at t={record.time!r} follows "
                f"t={self.records[-1].time!r}; source is not sorted by time")
        self.records.append(record)

    def _pull(self) -> bool:
        if self._exhausted:
            return False
        record = self.source.read_record()
        if record is None:
            self._exhausted = True
            return False
        self._append(record)
        return True

    def interpolate(self, time: float) -> Record:
        """
        Record at ``time``.

        Raises
        ------
        OutOfRange
            If ``time`` precedes the first record or follows the last one
            in the source
        """
        if np.isnan(time):
            raise OutOfRange(time, self.records[0].time, self.records[-1].time)
        while True:
            before, after = self.records[self.index - 1], self.records[self.index]
            if time < before.time:
                if self.index == 1:
                    raise OutOfRange(time, self.records[0].time, self.records[-1].time)
                self.index -= 1
            elif time > after.time:
                if self.index < len(self.records) - 1:
                    self.index += 1
                elif self._pull():
                    self.index += 1
                else:
                    raise OutOfRange(time, self.records[0].time, self.records[-1].time)
            else:
                break
        return before.interpolate(after, time, self.angle_range)
