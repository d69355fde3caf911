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

"""Core Module.

This module provides the pieces shared by every decoder and the interpolator:

- **Constants**: frame sizes, unit conversion factors and angle ranges
- **Errors**: the decoding and interpolation error hierarchy
- **Configuration**: decoder options
- **Data Structures**: the canonical ``Record`` and ``Accuracy`` types

Example Usage:
    >>> from pypos.core import Record
    >>> a = Record(time=0.0, latitude=0.1, longitude=0.2, altitude=10.0)
    >>> b = Record(time=1.0, latitude=0.3, longitude=0.2, altitude=12.0)
    >>> a.interpolate(b, 0.5).altitude
    11.0
"""

from .constants import *
from .errors import *
from .config import *
from .data_structures import *
