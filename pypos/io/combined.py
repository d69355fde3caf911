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

"""Attach accuracy information to a stream of records"""

import logging
from typing import Optional

from ..core.data_structures import Record
from .base import AccuracySource, Source

logger = logging.getLogger(__name__)


class CombinedSource(Source):
    """
    Records from ``source`` with accuracies interpolated from ``accuracy_source``.

    Both inputs must be sorted by time and share an epoch (a POF with its
    POQ, an SBET with its SMRMSG). Each record gets the accuracy linearly
    interpolated at its time. Records before the first or after the last
    accuracy sample pass through without one.

    Parameters
    ----------
    source : Source
        Position records
    accuracy_source : AccuracySource
        Accuracy samples covering the same time span
    """

    def __init__(self, source: Source, accuracy_source: AccuracySource):
        super().__init__(source.stream, config=source.config, name=source.name)
        self.source = source
        self.accuracy_source = accuracy_source
        self.angle_range = source.angle_range
        self._before = accuracy_source.read_accuracy()
        self._after = accuracy_source.read_accuracy()
        self.unmatched = 0

    def _read_next(self) -> Optional[Record]:
        record = self.source.read_record()
        if record is None:
            return None
        if self._before is None or self._after is None or record.time < self._before.time:
            self.unmatched += 1
            return record
        while record.time > self._after.time:
            self._before, self._after = self._after, self.accuracy_source.read_accuracy()
            if self._after is None:
                logger.debug(f"{self.name}: accuracy samples end before t={record.time}")
                self.unmatched += 1
                return record
        return record.with_accuracy(self._before.interpolate(self._after, record.time))

    def close(self) -> None:
        self.source.close()
        self.accuracy_source.close()


__all__ = ['CombinedSource']
