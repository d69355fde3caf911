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
Attitude angle utilities.

Wrapping of angles into canonical ranges and shortest-arc blending used when
interpolating orientation between two records.
"""

from .wrap import (angle_difference, blend_angle, wrap_angle, wrap_to_2pi,
                   wrap_to_2pi_array, wrap_to_pi, wrap_to_pi_array)

__all__ = [
    'wrap_to_pi', 'wrap_to_2pi', 'wrap_angle',
    'wrap_to_pi_array', 'wrap_to_2pi_array',
    'angle_difference', 'blend_angle',
]
