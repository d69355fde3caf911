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

"""Core data structures: position records and their accuracies"""

from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, NamedTuple, Optional

from ..attitude.wrap import blend_angle
from .constants import AngleRange


def _angular(signed: bool = False, **kwargs):
    """Dataclass field holding an angle that must be blended along the shortest arc.

    ``signed`` angles (roll, pitch) always stay in (-π, π]; the others are
    wrapped into the range of the stream they come from.
    """
    return field(metadata={"angular": True, "signed": signed}, **kwargs)


def _lerp(a: float, b: float, fraction: float) -> float:
    return a + fraction * (b - a)


@dataclass(frozen=True)
class SatelliteCount:
    """Number of satellites used in a solution.

    Either ``total`` is set (constellation unspecified) or ``gps`` and
    ``glonass`` are set separately.
    """
    total: Optional[int] = None
    gps: Optional[int] = None
    glonass: Optional[int] = None

    @property
    def is_specified(self) -> bool:
        return self.gps is not None

    def count(self) -> int:
        """Total number of satellites regardless of constellation"""
        if self.is_specified:
            return self.gps + (self.glonass or 0)
        return self.total or 0


@dataclass(frozen=True)
class Accuracy:
    """Accuracy (standard deviation) of a position solution.

    Attributes
    ----------
    time : float
        Time tag in the same epoch as the records it describes
    north, east, down : float
        Position standard deviation (m)
    roll, pitch, heading : float
        Attitude standard deviation (rad)
    pdop : float, optional
        Position dilution of precision (POQ)
    velocity_north, velocity_east, velocity_down : float, optional
        Velocity standard deviation (m/s, SMRMSG)
    satellite_count : SatelliteCount, optional
        Satellites in the solution (POQ)
    """
    time: float
    north: float
    east: float
    down: float
    roll: float
    pitch: float
    heading: float
    pdop: Optional[float] = None
    velocity_north: Optional[float] = None
    velocity_east: Optional[float] = None
    velocity_down: Optional[float] = None
    satellite_count: Optional[SatelliteCount] = None

    def interpolate(self, other: "Accuracy", time: float) -> "Accuracy":
        """Linearly interpolate an accuracy at ``time``.

        Standard deviations are not angles, so every field is blended
        linearly. The satellite count is not carried over.
        """
        if time == self.time:
            return self
        if time == other.time:
            return other
        if other.time == self.time:
            return self
        fraction = (time - self.time) / (other.time - self.time)
        values = {}
        for f in fields(self):
            if f.name == "time":
                values[f.name] = time
            elif f.name == "satellite_count":
                values[f.name] = None
            else:
                values[f.name] = _blend_optional(
                    getattr(self, f.name), getattr(other, f.name), fraction)
        return Accuracy(**values)


@dataclass(frozen=True)
class Record:
    """A single time-tagged position solution.

    Latitude, longitude and all angles are in radians whatever the on-disk
    unit was. Optional groups (orientation, velocity, ...) are either set on
    every record of a stream or on none.

    Attributes
    ----------
    time : float
        Seconds since the format's epoch
    latitude, longitude : float
        Geodetic position (rad)
    altitude : float
        Height (m)
    roll, pitch, heading : float, optional
        Attitude (rad)
    distance : float, optional
        Travelled distance (m, POF v1.1)
    velocity_x, velocity_y, velocity_z : float, optional
        Velocity (m/s, SBET)
    wander_angle : float, optional
        Platform wander angle (rad, SBET)
    acceleration_x, acceleration_y, acceleration_z : float, optional
        Body acceleration (m/s², SBET)
    angular_rate_x, angular_rate_y, angular_rate_z : float, optional
        Body angular rate (rad/s, SBET)
    accuracy : Accuracy, optional
        Solution accuracy at this time
    """
    time: float
    latitude: float
    longitude: float
    altitude: float
    roll: Optional[float] = _angular(signed=True, default=None)
    pitch: Optional[float] = _angular(signed=True, default=None)
    heading: Optional[float] = _angular(default=None)
    distance: Optional[float] = None
    velocity_x: Optional[float] = None
    velocity_y: Optional[float] = None
    velocity_z: Optional[float] = None
    wander_angle: Optional[float] = _angular(default=None)
    acceleration_x: Optional[float] = None
    acceleration_y: Optional[float] = None
    acceleration_z: Optional[float] = None
    angular_rate_x: Optional[float] = None
    angular_rate_y: Optional[float] = None
    angular_rate_z: Optional[float] = None
    accuracy: Optional[Accuracy] = None

    @property
    def position(self) -> tuple[float, float, float]:
        return (self.latitude, self.longitude, self.altitude)

    @property
    def orientation(self) -> Optional[tuple[float, float, float]]:
        if self.roll is None:
            return None
        return (self.roll, self.pitch, self.heading)

    @property
    def velocity(self) -> Optional[tuple[float, float, float]]:
        if self.velocity_x is None:
            return None
        return (self.velocity_x, self.velocity_y, self.velocity_z)

    def with_accuracy(self, accuracy: Optional[Accuracy]) -> "Record":
        """Copy of this record with ``accuracy`` attached"""
        return replace(self, accuracy=accuracy)

    def interpolate(self, other: "Record", time: float,
                    angle_range: AngleRange = AngleRange.SIGNED) -> "Record":
        """
        Interpolate a new record between this one and ``other``.

        Scalars are blended linearly; angular fields move along the shortest
        arc. Heading and wander angle are wrapped into ``angle_range``, roll
        and pitch always into (-π, π]. The result carries exactly
        ``time``. Querying at either endpoint returns that record itself.

        Parameters
        ----------
        other : Record
            Record at the far end of the interval
        time : float
            Query time
        angle_range : AngleRange
            Canonical range of the stream's heading

        Returns
        -------
        Record
            Synthesized record at ``time``

        Examples
        --------
        >>> a = Record(time=0.0, latitude=10.0, longitude=0.0, altitude=0.0)
        >>> b = Record(time=10.0, latitude=20.0, longitude=0.0, altitude=0.0)
        >>> a.interpolate(b, 5.0).latitude
        15.0
        """
        if time == self.time:
            return self
        if time == other.time:
            return other
        if other.time == self.time:
            return self
        fraction = (time - self.time) / (other.time - self.time)

        values: dict[str, Any] = {"time": time}
        for f in fields(self):
            if f.name == "time":
                continue
            lhs = getattr(self, f.name)
            rhs = getattr(other, f.name)
            if f.name == "accuracy":
                values[f.name] = (lhs.interpolate(rhs, time)
                                  if lhs is not None and rhs is not None else None)
            elif lhs is None or rhs is None:
                values[f.name] = None
            elif f.metadata.get("angular"):
                target = AngleRange.SIGNED if f.metadata["signed"] else angle_range
                values[f.name] = blend_angle(lhs, rhs, fraction, target)
            else:
                values[f.name] = _lerp(lhs, rhs, fraction)
        return Record(**values)

    def to_dict(self) -> dict[str, Any]:
        """Flatten into a dict, accuracy fields prefixed with ``accuracy_``"""
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "accuracy"}
        if self.accuracy is not None:
            for key, value in asdict(self.accuracy).items():
                if key in ("time", "satellite_count"):
                    continue
                data[f"accuracy_{key}"] = value
        return data


def _blend_optional(lhs: Optional[float], rhs: Optional[float],
                    fraction: float) -> Optional[float]:
    if lhs is None or rhs is None:
        return None
    return _lerp(lhs, rhs, fraction)


def is_angular(name: str) -> bool:
    """True if the named Record field is an angle"""
    for f in fields(Record):
        if f.name == name:
            return bool(f.metadata.get("angular"))
    raise KeyError(name)


class Version(NamedTuple):
    """Binary file format version"""
    major: int
    minor: int

    def __str__(self):
        return f"{self.major}.{self.minor}"


__all__ = ['Record', 'Accuracy', 'SatelliteCount', 'Version', 'is_angular']
