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
pypos - GNSS/IMU trajectory file reader

Decoders for post-processed position and accuracy files (SBET with its
SMRMSG companion, Riegl POF/POQ, ASCII pos) behind one record model, and a
time interpolator that blends positions linearly and attitude along the
shortest arc.
"""

__version__ = "1.0.0"
__author__ = "pypos Development Team"
__title__ = "pypos"
__description__ = "GNSS/IMU trajectory file decoding and interpolation"

from .core import *
from .attitude import *
from .io import *
from .interpolation import *
