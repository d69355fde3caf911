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

"""Format constants and unit conversion factors"""

from enum import Enum

import numpy as np

# Unit conversion
D2R = np.pi / 180.0    # degrees to radians
R2D = 180.0 / np.pi    # radians to degrees
ARCMIN2RAD = D2R / 60.0  # arc-minutes to radians
TWO_PI = 2.0 * np.pi

# Time
WEEK_SECONDS = 604800.0  # seconds in a GPS week
DAY_SECONDS = 86400.0    # seconds in a day

# SBET: 17 little-endian doubles, no header
SBET_FIELD_COUNT = 17
SBET_FRAME_SIZE = SBET_FIELD_COUNT * 8   # 136 bytes

# SMRMSG (SBET accuracy companion): 10 little-endian doubles, no header
SMRMSG_FIELD_COUNT = 10
SMRMSG_FRAME_SIZE = SMRMSG_FIELD_COUNT * 8  # 80 bytes

# POF (Riegl position and orientation)
POF_PREAMBLE_SIZE = 27
POF_HEADER_SIZE = 315    # fixed part of the header, data offset may be larger
POF_FRAME_SIZE_V10 = 7 * 8   # time, lon, lat, alt, roll, pitch, yaw
POF_FRAME_SIZE_V11 = 8 * 8   # ... + distance
POF_PREAMBLE = b"ORIENTATION DATA FILE V1.1\x00"

# POQ (Riegl position and orientation quality)
POQ_PREAMBLE_SIZE = 35
POQ_HEADER_SIZE = POQ_PREAMBLE_SIZE + 2 * 2 + 3 * 8   # 63 bytes
POQ_FRAME_SIZE_V10 = 8 * 8 + 2       # 8 doubles + satellite count
POQ_FRAME_SIZE_V11 = 8 * 8 + 2 * 2   # 8 doubles + gps/glonass counts
POQ_PREAMBLE = b"ORIENTATION QUALITY DATA FILE V1.1\x00"

# POS (ASCII)
POS_COLUMNS_POSITION = 4      # time, lat, lon, alt
POS_COLUMNS_ORIENTATION = 7   # ... + roll, pitch, heading
POS_COMMENT_PREFIXES = ("#", "%")

# Decoding
DEFAULT_CHUNK_FRAMES = 4096


class AngleRange(Enum):
    """Canonical range an angular field is wrapped into.

    Attributes
    ----------
    SIGNED : str
        Angles in (-pi, pi]
    UNSIGNED : str
        Angles in [0, 2pi)
    """
    SIGNED = "signed"
    UNSIGNED = "unsigned"


class TimeUnit(Enum):
    """POF seconds format"""
    NORMALIZED = 0   # referenced to some start point
    DAY = 1          # GPS seconds of day
    WEEK = 2         # GPS seconds of week


class TimeInfo(Enum):
    """POF time system"""
    GPS = 0
    UTC = 1
    UNKNOWN = 2
