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

"""Decoder configuration"""

from dataclasses import dataclass, field, fields
from typing import Any

from .constants import DEFAULT_CHUNK_FRAMES, POS_COMMENT_PREFIXES

ERROR_POLICIES = ("raise", "skip")


@dataclass
class DecoderConfig:
    """Options shared by all format decoders.

    Attributes
    ----------
    on_error : str
        Policy for malformed text lines: 'raise' aborts on the first bad line,
        'skip' logs and drops it. Binary formats always raise.
    chunk_frames : int
        Number of binary frames decoded per read
    comment_prefixes : tuple of str
        Line prefixes treated as comments in text formats
    validate_length : bool
        Check up front that a seekable binary stream holds a whole number
        of frames
    """
    on_error: str = "raise"
    chunk_frames: int = DEFAULT_CHUNK_FRAMES
    comment_prefixes: tuple = field(default_factory=lambda: POS_COMMENT_PREFIXES)
    validate_length: bool = True

    def __post_init__(self):
        if self.on_error not in ERROR_POLICIES:
            raise ValueError(f"Unknown error policy: {self.on_error!r} "
                             f"(expected one of {ERROR_POLICIES})")
        if self.chunk_frames < 1:
            raise ValueError(f"chunk_frames must be positive, got {self.chunk_frames}")
        self.comment_prefixes = tuple(self.comment_prefixes)

    @property
    def skip_errors(self) -> bool:
        return self.on_error == "skip"

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "DecoderConfig":
        """Build a configuration from a plain dictionary.

        Example config:
        {
            'on_error': 'skip',
            'chunk_frames': 1024,
            'comment_prefixes': ['#'],
        }
        """
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ValueError(f"Unknown decoder options: {sorted(unknown)}")
        return cls(**config)


__all__ = ['DecoderConfig', 'ERROR_POLICIES']
