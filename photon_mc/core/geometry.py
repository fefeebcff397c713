"""
2D geometry primitives: locations and unit directions.

Lengths are in cm, angles in radians (counter-clockwise from +x).
"""

import numpy as np
import numba
from typing import Tuple


class WrongDirection(ValueError):
    """Raised when a move would require backward or undefined motion."""


@numba.njit(fastmath=True, cache=True)
def rotate_2d(dx: float, dy: float, angle: float) -> Tuple[float, float]:
    """
    Rotate a unit vector counter-clockwise by angle.

    The rotation matrix is orthogonal, so the norm is preserved up to
    round-off; the result is renormalized to keep it from drifting over
    many scatterings.

    Parameters:
        dx, dy: Unit vector components
        angle: Rotation angle [radians]

    Returns:
        (dx', dy') rotated unit vector
    """
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)

    new_dx = dx * cos_a - dy * sin_a
    new_dy = dx * sin_a + dy * cos_a

    norm = np.sqrt(new_dx * new_dx + new_dy * new_dy)
    return new_dx / norm, new_dy / norm


class Point:
    """Location in 2D space [cm]."""

    def __init__(self, x: float, y: float):
        self._x = float(x)
        self._y = float(y)

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    def step(self, direction: "Direction", length: float):
        """
        Move the point a distance along a direction.

        Parameters:
            direction: Unit direction of motion
            length: Distance to move [cm]
        """
        self._x += direction.dx * length
        self._y += direction.dy * length

    def copy(self) -> "Point":
        return Point(self._x, self._y)

    def to_tuple(self) -> Tuple[float, float]:
        return (self._x, self._y)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.to_tuple() == other.to_tuple()

    def __repr__(self) -> str:
        return f"Point(x={self._x:.6g}, y={self._y:.6g})"


class Direction:
    """
    Unit vector in 2D space.

    Any (dx, dy) passed in is normalized to length 1. The invariant
    dx² + dy² = 1 is kept by every operation.
    """

    def __init__(self, dx: float, dy: float):
        """
        Initialize direction from a (not necessarily normalized) vector.

        Parameters:
            dx, dy: Vector components

        Raises:
            ValueError: If the vector has zero or non-finite length
        """
        norm = np.hypot(dx, dy)
        if not np.isfinite(norm) or norm == 0.0:
            raise ValueError(f"Cannot build a direction from ({dx}, {dy})")
        self._dx = float(dx / norm)
        self._dy = float(dy / norm)

    @classmethod
    def from_angle(cls, angle: float) -> "Direction":
        """Direction at angle [radians] counter-clockwise from +x."""
        return cls(np.cos(angle), np.sin(angle))

    @classmethod
    def random(cls, rng) -> "Direction":
        """
        Random direction drawn with uniform cosine.

        dx is uniform on [-1, 1) and the sign of dy is a fair coin flip,
        which is the planar projection of isotropic emission.

        Parameters:
            rng: RandomSource
        """
        dx = rng.uniform(-1.0, 1.0)
        dy = np.sqrt(1.0 - dx * dx)
        if rng.boolean():
            dy = -dy
        return cls(dx, dy)

    @property
    def dx(self) -> float:
        return self._dx

    @property
    def dy(self) -> float:
        return self._dy

    @property
    def angle(self) -> float:
        """Angle counter-clockwise from +x [radians], in (-π, π]."""
        return float(np.arctan2(self._dy, self._dx))

    def rotate(self, angle: float):
        """Rotate in place; positive angles turn counter-clockwise."""
        self._dx, self._dy = rotate_2d(self._dx, self._dy, float(angle))

    def copy(self) -> "Direction":
        new = Direction.__new__(Direction)
        new._dx = self._dx
        new._dy = self._dy
        return new

    def to_tuple(self) -> Tuple[float, float]:
        return (self._dx, self._dy)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Direction):
            return NotImplemented
        return self.to_tuple() == other.to_tuple()

    def __repr__(self) -> str:
        return f"Direction(dx={self._dx:.6g}, dy={self._dy:.6g})"
