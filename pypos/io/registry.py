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

"""Open a source by file extension"""

from pathlib import Path
from typing import Optional, Union

from ..core.config import DecoderConfig
from .base import AccuracySource, Source
from .pof import PofReader
from .poq import PoqReader
from .pos import PosReader
from .sbet import SbetReader
from .smrmsg import SmrmsgReader

SOURCE_FORMATS = {
    '.sbet': SbetReader,
    '.out': SbetReader,
    '.pof': PofReader,
    '.pos': PosReader,
    '.txt': PosReader,
}

ACCURACY_FORMATS = {
    '.poq': PoqReader,
    '.smrmsg': SmrmsgReader,
}


def _lookup(path: Path, formats: dict, kind: str):
    try:
        return formats[path.suffix.lower()]
    except KeyError:
        raise ValueError(f"Unsupported {kind} format: {path.suffix!r} "
                         f"(expected one of {sorted(formats)})") from None


def open_source(path: Union[str, Path], config: Optional[DecoderConfig] = None) -> Source:
    """
    Open a record source, choosing the decoder from the file extension.

    Parameters
    ----------
    path : str or Path
        ``.sbet``/``.out``, ``.pof`` or ``.pos``/``.txt`` file
    config : DecoderConfig, optional
        Decoder options

    Returns
    -------
    Source
        Reader owning the opened file

    Raises
    ------
    ValueError
        If the extension is not a known record format
    """
    path = Path(path)
    return _lookup(path, SOURCE_FORMATS, "record").from_path(path, config=config)


def open_accuracy_source(path: Union[str, Path],
                         config: Optional[DecoderConfig] = None) -> AccuracySource:
    """Open an accuracy source (``.poq`` or ``.smrmsg``) by file extension"""
    path = Path(path)
    return _lookup(path, ACCURACY_FORMATS, "accuracy").from_path(path, config=config)


__all__ = ['open_source', 'open_accuracy_source', 'SOURCE_FORMATS', 'ACCURACY_FORMATS']
