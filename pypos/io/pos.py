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

"""ASCII pos file reader and writer.

One record per line, fields separated by runs of whitespace:

    time latitude longitude altitude [roll pitch heading]

Latitude, longitude and the attitude angles are decimal degrees, altitude is
metres. The column count is fixed by the first data line. Blank lines and
comment lines are skipped, as is a non-numeric header on the first line.
"""

import io
import logging
from operator import attrgetter
from typing import Iterable, Optional, TextIO

from ..attitude.wrap import wrap_angle
from ..core.config import DecoderConfig
from ..core.constants import (D2R, POS_COLUMNS_ORIENTATION, POS_COLUMNS_POSITION,
                              R2D, AngleRange)
from ..core.data_structures import Record
from ..core.errors import MalformedFrame, TruncatedStream, UnparsableField
from .base import Source

logger = logging.getLogger(__name__)

POS_COLUMNS = ['time', 'latitude', 'longitude', 'altitude', 'roll', 'pitch', 'heading']
VALID_COLUMN_COUNTS = (POS_COLUMNS_POSITION, POS_COLUMNS_ORIENTATION)


def _is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


class PosReader(Source):
    """
    Whitespace-delimited ASCII record source.

    Parameters
    ----------
    stream : TextIO or BinaryIO
        Text stream, or byte stream decoded as UTF-8 line by line (files
        opened with :meth:`from_path` are read as bytes)
    config : DecoderConfig, optional
        Decoder options; ``on_error='skip'`` drops malformed lines instead
        of aborting
    name : str, optional
        Label used in log and error messages

    Attributes
    ----------
    line_number : int
        1-based number of the last line read
    columns : int or None
        Column count fixed by the first data line
    skipped_lines : list of int
        Line numbers dropped under the 'skip' policy

    Notes
    -----
    Unlike the binary formats, pos files are not guaranteed to be sorted by
    time. Use :meth:`sorted_records` before interpolating.
    """
    angle_range = AngleRange.UNSIGNED

    def __init__(self, stream: TextIO, config: Optional[DecoderConfig] = None,
                 name: Optional[str] = None):
        super().__init__(stream, config=config, name=name)
        self._start = stream.tell() if hasattr(stream, "seekable") and stream.seekable() else None
        self._reset()

    def _reset(self) -> None:
        self.line_number = 0
        self.columns: Optional[int] = None
        self.skipped_lines: list[int] = []
        self._seen_content = False

    def _rewind(self) -> None:
        if self._start is None:
            raise io.UnsupportedOperation(f"{self.name}: stream is not seekable")
        self.stream.seek(self._start)
        self._reset()

    def _read_next(self) -> Optional[Record]:
        while True:
            line = self.stream.readline()
            if not line:
                return None
            self.line_number += 1
            if isinstance(line, bytes):
                try:
                    line = line.decode("utf-8")
                except UnicodeDecodeError as exc:
                    self._reject(UnparsableField(
                        f"{self.name}:{self.line_number}: invalid UTF-8 at byte {exc.start}",
                        line_number=self.line_number,
                        token=line.decode("utf-8", errors="replace").strip()))
                    continue

            text = line.strip()
            if not text or text.startswith(self.config.comment_prefixes):
                continue
            tokens = text.split()
            if not self._seen_content:
                self._seen_content = True
                if not _is_number(tokens[0]):
                    logger.debug(f"{self.name}: skipping header line {self.line_number}")
                    continue

            try:
                return self._parse(tokens, complete=line.endswith("\n"))
            except (MalformedFrame, UnparsableField) as exc:
                self._reject(exc)

    def _reject(self, exc: Exception) -> None:
        if not self.config.skip_errors:
            raise exc
        logger.warning(f"Skipping line {self.line_number} of {self.name}: {exc}")
        self.skipped_lines.append(self.line_number)

    def _parse(self, tokens: list[str], complete: bool = True) -> Record:
        count = len(tokens)
        expected = self.columns
        if expected is None and count not in VALID_COLUMN_COUNTS:
            raise MalformedFrame(
                f"{self.name}:{self.line_number}: expected {POS_COLUMNS_POSITION} or "
                f"{POS_COLUMNS_ORIENTATION} fields, found {count}")
        if expected is not None and count != expected:
            error = TruncatedStream if (count < expected and not complete) else MalformedFrame
            raise error(f"{self.name}:{self.line_number}: expected {expected} fields, found {count}")

        values = {}
        for key, token in zip(POS_COLUMNS, tokens):
            try:
                values[key] = float(token)
            except ValueError:
                raise UnparsableField(
                    f"{self.name}:{self.line_number}: cannot parse {key} from {token!r}",
                    line_number=self.line_number, token=token) from None

        if self.columns is None:
            self.columns = count
        for key in ('latitude', 'longitude', 'roll', 'pitch', 'heading'):
            if key in values:
                values[key] *= D2R
        if 'heading' in values:
            values['heading'] = wrap_angle(values['heading'], self.angle_range)
        return Record(**values)

    def sorted_records(self) -> list[Record]:
        """Remaining records sorted by time (stable for equal times)"""
        return sorted(self, key=attrgetter('time'))


class PosWriter:
    """Write records as whitespace-delimited ASCII lines"""

    def __init__(self, stream: TextIO, header: bool = True, separator: str = " "):
        self.stream = stream
        self.header = header
        self.separator = separator

    def write_all(self, records: Iterable[Record]) -> int:
        count = 0
        for record in records:
            orientation = record.orientation is not None
            if count == 0 and self.header:
                columns = POS_COLUMNS if orientation else POS_COLUMNS[:POS_COLUMNS_POSITION]
                self.stream.write("# " + self.separator.join(columns) + "\n")
            values = [record.time, record.latitude * R2D, record.longitude * R2D, record.altitude]
            if orientation:
                values += [angle * R2D for angle in record.orientation]
            self.stream.write(self.separator.join(repr(float(v)) for v in values) + "\n")
            count += 1
        return count


def read_pos(path, config: Optional[DecoderConfig] = None, sort: bool = False) -> list[Record]:
    """Read every record of a pos file, optionally sorted by time"""
    with PosReader.from_path(path, config=config) as reader:
        return reader.sorted_records() if sort else reader.records()


__all__ = ['PosReader', 'PosWriter', 'POS_COLUMNS', 'read_pos']
