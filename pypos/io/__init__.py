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

"""I/O utilities for pypos."""

from .base import AccuracySource, FrameStream, Source, records_to_dataframe
from .combined import CombinedSource
from .pof import PofHeader, PofReader, PofWriter, read_pof_header
from .poq import PoqHeader, PoqReader, PoqWriter
from .pos import PosReader, PosWriter, read_pos
from .registry import open_accuracy_source, open_source
from .sbet import SbetReader, SbetWriter, read_sbet, write_sbet
from .smrmsg import SmrmsgReader, SmrmsgWriter

__all__ = [
    'Source', 'AccuracySource', 'FrameStream', 'CombinedSource',
    'records_to_dataframe',
    'SbetReader', 'SbetWriter', 'read_sbet', 'write_sbet',
    'SmrmsgReader', 'SmrmsgWriter',
    'PofReader', 'PofWriter', 'PofHeader', 'read_pof_header',
    'PoqReader', 'PoqWriter', 'PoqHeader',
    'PosReader', 'PosWriter', 'read_pos',
    'open_source', 'open_accuracy_source',
]
