"""
Attitude angle wrapping and blending utilities.

This module wraps angles into the canonical ranges used by the decoders and
blends two angles along the shortest arc. All angles are in radians.

Ranges:
    signed   : (-π, π]
    unsigned : [0, 2π)
"""

import numpy as np
from numba import njit

from ..core.constants import TWO_PI, AngleRange


@njit(cache=True)
def wrap_to_pi(angle):
    """
    Wrap an angle to the (-π, π] range.

    Parameters
    ----------
    angle : float
        Angle in radians

    Returns
    -------
    float
        Equivalent angle in (-π, π]
    """
    if -np.pi < angle <= np.pi:
        return angle
    return np.pi - np.mod(np.pi - angle, TWO_PI)


@njit(cache=True)
def wrap_to_2pi(angle):
    """
    Wrap an angle to the [0, 2π) range.

    Parameters
    ----------
    angle : float
        Angle in radians

    Returns
    -------
    float
        Equivalent angle in [0, 2π)
    """
    if 0.0 <= angle < TWO_PI:
        return angle
    wrapped = np.mod(angle, TWO_PI)
    # np.mod of a tiny negative angle rounds up to exactly 2π
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped


@njit(cache=True)
def angle_difference(a, b):
    """Shortest signed rotation from ``a`` to ``b``, in (-π, π]."""
    return wrap_to_pi(b - a)


@njit(cache=True)
def _blend_angle(a, b, fraction, signed):
    value = a + fraction * angle_difference(a, b)
    if signed:
        return wrap_to_pi(value)
    return wrap_to_2pi(value)


def blend_angle(a: float, b: float, fraction: float,
                angle_range: AngleRange = AngleRange.SIGNED) -> float:
    """
    Blend two angles along the shortest arc.

    The difference ``b - a`` is wrapped into (-π, π] before scaling, so a
    heading crossing the 0/2π (or ±π) boundary moves through the boundary
    instead of sweeping the long way round.

    Parameters
    ----------
    a, b : float
        Angles in radians at fraction 0 and 1
    fraction : float
        Blend weight, 0 returns ``a`` and 1 returns ``b`` (up to wrapping)
    angle_range : AngleRange
        Range the result is wrapped into

    Returns
    -------
    float
        Blended angle in radians

    Examples
    --------
    >>> import numpy as np
    >>> np.rad2deg(blend_angle(np.deg2rad(359.0), np.deg2rad(1.0), 0.5))  # doctest: +SKIP
    0.0
    """
    return float(_blend_angle(float(a), float(b), float(fraction),
                              angle_range is AngleRange.SIGNED))


@njit(cache=True, fastmath=True)
def _wrap_to_pi_array(v1):
    return np.pi - np.mod(np.pi - v1, TWO_PI)


@njit(cache=True, fastmath=True)
def _wrap_to_2pi_array(v1):
    v2 = np.mod(v1, TWO_PI)
    v2[v2 >= TWO_PI] = 0.0
    return v2


def wrap_to_pi_array(angles) -> np.ndarray:
    """Vectorised :func:`wrap_to_pi` for 1-D arrays of radians."""
    return _wrap_to_pi_array(np.asarray(angles, dtype=np.float64).ravel())


def wrap_to_2pi_array(angles) -> np.ndarray:
    """Vectorised :func:`wrap_to_2pi` for 1-D arrays of radians."""
    return _wrap_to_2pi_array(np.asarray(angles, dtype=np.float64).ravel())


def wrap_angle(angle: float, angle_range: AngleRange = AngleRange.SIGNED) -> float:
    """Wrap a single angle into the requested canonical range."""
    if angle_range is AngleRange.SIGNED:
        return float(wrap_to_pi(float(angle)))
    return float(wrap_to_2pi(float(angle)))
