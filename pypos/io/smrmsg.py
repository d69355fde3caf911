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

"""SMRMSG reader and writer.

SMRMSG files accompany an SBET and carry its smoothed error estimates: one
80-byte frame of 10 little-endian doubles per epoch. Position and velocity
standard deviations are in metres (per second); attitude standard deviations
are stored in arc-minutes and converted to radians on read.
"""

import logging
from typing import BinaryIO, Iterable, Optional

import numpy as np

from ..core.config import DecoderConfig
from ..core.constants import ARCMIN2RAD
from ..core.data_structures import Accuracy
from .base import AccuracySource, BinarySourceMixin

logger = logging.getLogger(__name__)

SMRMSG_FIELDS = [
    'time',
    'north', 'east', 'down',
    'velocity_north', 'velocity_east', 'velocity_down',
    'roll', 'pitch', 'heading',
]

SMRMSG_DTYPE = np.dtype([(name, '<f8') for name in SMRMSG_FIELDS])

_ANGULAR = ('roll', 'pitch', 'heading')


class SmrmsgReader(BinarySourceMixin, AccuracySource):
    """SMRMSG accuracy source"""

    frame_dtype = SMRMSG_DTYPE

    def __init__(self, stream: BinaryIO, config: Optional[DecoderConfig] = None,
                 name: Optional[str] = None):
        super().__init__(stream, config=config, name=name)
        self._open_frames()
        logger.debug(f"{self.name}: {self.frame_count} SMRMSG frames")

    def _read_next(self) -> Optional[Accuracy]:
        frame = self._frames.next_frame()
        if frame is None:
            return None
        values = dict(zip(SMRMSG_FIELDS, frame))
        for name in _ANGULAR:
            values[name] *= ARCMIN2RAD
        return Accuracy(**values)


class SmrmsgWriter:
    """Encode accuracies into SMRMSG frames"""

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def write_all(self, accuracies: Iterable[Accuracy]) -> int:
        rows = []
        for accuracy in accuracies:
            row = []
            for name in SMRMSG_FIELDS:
                value = getattr(accuracy, name)
                value = 0.0 if value is None else value
                row.append(value / ARCMIN2RAD if name in _ANGULAR else value)
            rows.append(tuple(row))
        self.stream.write(np.array(rows, dtype=SMRMSG_DTYPE).tobytes())
        return len(rows)


__all__ = ['SmrmsgReader', 'SmrmsgWriter', 'SMRMSG_DTYPE', 'SMRMSG_FIELDS']
