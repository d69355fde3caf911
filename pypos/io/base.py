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

"""Source abstractions shared by every format decoder"""

import io
import logging
from abc import ABC, abstractmethod
from dataclasses import fields
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

import numpy as np
import pandas as pd

from ..core.config import DecoderConfig
from ..core.constants import AngleRange
from ..core.data_structures import Accuracy, Record
from ..core.errors import MalformedFrame, TruncatedStream
from ..logger import TRACE

logger = logging.getLogger(__name__)


def stream_length(stream) -> Optional[int]:
    """Bytes remaining from the current position, or None if not seekable"""
    if not (hasattr(stream, "seekable") and stream.seekable()):
        return None
    position = stream.tell()
    end = stream.seek(0, io.SEEK_END)
    stream.seek(position)
    return end - position


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, retrying short reads until EOF"""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_header(stream: BinaryIO, dtype: np.dtype, name: str = "<stream>") -> np.void:
    """Read and decode a fixed-size header described by a structured dtype"""
    dtype = np.dtype(dtype)
    data = read_exact(stream, dtype.itemsize)
    if len(data) < dtype.itemsize:
        raise TruncatedStream(
            f"{name}: header needs {dtype.itemsize} bytes, stream holds {len(data)}")
    return np.frombuffer(data, dtype=dtype)[0]


class FrameStream:
    """
    Pull fixed-size frames out of a binary stream with a numpy dtype.

    Frames are decoded ``chunk_frames`` at a time so large files are never
    fully buffered. A stream whose length is not a whole number of frames
    raises :class:`TruncatedStream`, up front when the stream is seekable,
    otherwise when the short final read happens.

    Parameters
    ----------
    stream : BinaryIO
        Stream positioned at the first frame
    dtype : np.dtype
        Structured dtype of one frame
    chunk_frames : int
        Frames decoded per read
    validate_length : bool
        Check the frame alignment of seekable streams before reading
    name : str
        Label used in error messages
    """

    def __init__(self, stream: BinaryIO, dtype: np.dtype, chunk_frames: int,
                 validate_length: bool = True, name: str = "<stream>"):
        self.stream = stream
        self.dtype = np.dtype(dtype)
        self.frame_size = self.dtype.itemsize
        self.chunk_frames = chunk_frames
        self.name = name
        self.frame_count: Optional[int] = None

        nbytes = stream_length(stream)
        self.data_start = stream.tell() if nbytes is not None else None
        if nbytes is not None:
            if validate_length and nbytes % self.frame_size:
                raise TruncatedStream(
                    f"{name}: {nbytes} bytes of frame data is not a multiple "
                    f"of the {self.frame_size}-byte frame size")
            self.frame_count = nbytes // self.frame_size

        self._chunk: list = []
        self._index = 0
        self.frames_read = 0

    def _fill(self) -> None:
        wanted = self.chunk_frames * self.frame_size
        data = read_exact(self.stream, wanted)
        if len(data) % self.frame_size:
            raise TruncatedStream(
                f"{self.name}: stream ends {len(data) % self.frame_size} bytes "
                f"into frame {self.frames_read + len(data) // self.frame_size}")
        self._chunk = np.frombuffer(data, dtype=self.dtype).tolist()
        self._index = 0
        logger.log(TRACE, f"{self.name}: decoded {len(self._chunk)} frames "
                   f"after {self.frames_read}")

    def next_frame(self) -> Optional[tuple]:
        """Next frame as a tuple of Python scalars, or None at end of stream"""
        if self._index >= len(self._chunk):
            self._fill()
            if not self._chunk:
                return None
        frame = self._chunk[self._index]
        self._index += 1
        self.frames_read += 1
        return frame

    def rewind(self) -> None:
        if self.data_start is None:
            raise io.UnsupportedOperation(f"{self.name}: stream is not seekable")
        self.stream.seek(self.data_start)
        self._chunk = []
        self._index = 0
        self.frames_read = 0


class _Reader(ABC):
    """Stream ownership, iteration and error termination common to all readers"""

    def __init__(self, stream, config: Optional[DecoderConfig] = None,
                 name: Optional[str] = None):
        self.stream = stream
        self.config = config or DecoderConfig()
        self.name = name or str(getattr(stream, "name", "<stream>"))
        self._owns_stream = False
        self._exhausted = False

    @classmethod
    def from_path(cls, path: Union[str, Path], config: Optional[DecoderConfig] = None):
        """
        Open a reader on a file.

        Parameters
        ----------
        path : str or Path
            File to read
        config : DecoderConfig, optional
            Decoder options

        Returns
        -------
        reader
            Reader owning the opened file; close it or use it as a context
            manager

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"{cls.__name__} file not found: {path}")
        logger.info(f"Opening {cls.__name__} on {path}")
        stream = path.open("rb")
        try:
            reader = cls(stream, config=config, name=str(path))
        except BaseException:
            stream.close()
            raise
        reader._owns_stream = True
        return reader

    @abstractmethod
    def _read_next(self):
        """Decode the next item, or return None at end of stream"""

    def _rewind(self) -> None:
        raise io.UnsupportedOperation(f"{type(self).__name__} cannot be rewound")

    def rewind(self) -> None:
        """Restart from the first record, if the underlying stream can seek"""
        self._rewind()
        self._exhausted = False

    def __iter__(self):
        return self

    def __next__(self):
        if self._exhausted:
            raise StopIteration
        try:
            item = self._read_next()
        except Exception:
            self._exhausted = True
            raise
        if item is None:
            self._exhausted = True
            raise StopIteration
        return item

    def close(self) -> None:
        if self._owns_stream and not self.stream.closed:
            self.stream.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class Source(_Reader):
    """
    A source of position records.

    Iterating a source yields :class:`Record` values in file order until the
    stream is exhausted. Iteration is lazy and forward-only. A decode error
    is raised from ``next()`` and ends the sequence.

    Attributes
    ----------
    angle_range : AngleRange
        Canonical range of the heading values this source produces
    """

    angle_range = AngleRange.SIGNED

    def read_record(self) -> Optional[Record]:
        """Read one record, or None when the source is exhausted"""
        return next(self, None)

    def __iter__(self) -> Iterator[Record]:
        return self

    def records(self) -> list[Record]:
        """Materialize the remaining records"""
        return list(self)

    def to_dataframe(self) -> pd.DataFrame:
        """Remaining records as a DataFrame, one row per record"""
        return records_to_dataframe(self)


class AccuracySource(_Reader):
    """A source of :class:`Accuracy` values, with the same contract as :class:`Source`"""

    def read_accuracy(self) -> Optional[Accuracy]:
        """Read one accuracy, or None when the source is exhausted"""
        return next(self, None)

    def __iter__(self) -> Iterator[Accuracy]:
        return self

    def accuracies(self) -> list[Accuracy]:
        return list(self)

    def to_dataframe(self) -> pd.DataFrame:
        rows = []
        for accuracy in self:
            row = {f.name: getattr(accuracy, f.name) for f in fields(Accuracy)
                   if f.name != "satellite_count"}
            if accuracy.satellite_count is not None:
                row["satellites"] = accuracy.satellite_count.count()
            rows.append(row)
        return pd.DataFrame(rows)


class BinarySourceMixin:
    """Frame handling for headerless or header-then-frames binary formats"""

    frame_dtype: np.dtype = None

    def _open_frames(self, dtype: Optional[np.dtype] = None) -> FrameStream:
        self._frames = FrameStream(
            self.stream,
            self.frame_dtype if dtype is None else dtype,
            chunk_frames=self.config.chunk_frames,
            validate_length=self.config.validate_length,
            name=self.name,
        )
        return self._frames

    @property
    def frame_count(self) -> Optional[int]:
        """Number of frames in the stream, if its length is known"""
        return self._frames.frame_count

    def _check_entries(self, expected: int) -> None:
        count = self._frames.frame_count
        if expected > 0 and count is not None and count != expected:
            raise MalformedFrame(
                f"{self.name}: header declares {expected} records but the "
                f"stream holds {count}")

    def _rewind(self) -> None:
        self._frames.rewind()


def records_to_dataframe(records) -> pd.DataFrame:
    """
    Build a DataFrame from an iterable of records.

    Columns follow the Record field order; accuracy fields, when present,
    are appended with an ``accuracy_`` prefix.
    """
    rows = [record.to_dict() for record in records]
    if not rows:
        return pd.DataFrame(columns=[f.name for f in fields(Record) if f.name != "accuracy"])
    return pd.DataFrame(rows)


__all__ = [
    'Source', 'AccuracySource', 'FrameStream', 'BinarySourceMixin',
    'records_to_dataframe', 'read_exact', 'read_header', 'stream_length',
]
