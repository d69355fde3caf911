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

"""Decoding and interpolation errors"""

from typing import Optional


class PosError(ValueError):
    """Base class for all pypos errors"""


class MalformedFrame(PosError):
    """A binary frame or text line does not match the expected layout"""


class TruncatedStream(MalformedFrame):
    """The stream ends inside a frame"""


class UnparsableField(PosError):
    """A text field could not be parsed as a number.

    Attributes
    ----------
    line_number : int or None
        1-based line number of the offending line, if known
    token : str or None
        The token that failed to parse
    """

    def __init__(self, message: str, line_number: Optional[int] = None,
                 token: Optional[str] = None):
        super().__init__(message)
        self.line_number = line_number
        self.token = token


class OutOfRange(PosError):
    """Interpolation was requested outside the buffered time range"""

    def __init__(self, time: float, start: float, end: float):
        super().__init__(
            f"time {time!r} is outside the buffered range [{start!r}, {end!r}]")
        self.time = time
        self.start = start
        self.end = end


class InsufficientData(PosError):
    """Fewer than two records are available for interpolation"""


__all__ = [
    'PosError', 'MalformedFrame', 'TruncatedStream', 'UnparsableField',
    'OutOfRange', 'InsufficientData',
]
