"""
layerdoc Geometry Primitives

Point, BoundingBox and the Affine2D transform used by every layer.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional
import math

import numpy as np

from .constants import MARKUP_PRECISION
from .errors import NonInvertibleTransformError


def format_number(value: float) -> str:
    """Format a number for markup output without trailing zeros."""
    text = f"{float(value):.{MARKUP_PRECISION}f}".rstrip("0").rstrip(".")
    if text in ("", "-0"):
        return "0"
    return text


@dataclass
class Point:
    """A 2D point."""
    x: float
    y: float

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def lerp(self, other: 'Point', t: float) -> 'Point':
        """Linear interpolation towards another point."""
        return Point(self.x + (other.x - self.x) * t,
                     self.y + (other.y - self.y) * t)

    def distance_to(self, other: 'Point') -> float:
        """Calculate Euclidean distance to another point."""
        return math.sqrt((self.x - other.x)**2 + (self.y - other.y)**2)


@dataclass
class BoundingBox:
    """Axis-aligned bounding box, the [min, max] corners of a region."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> Optional['BoundingBox']:
        """Smallest box holding all points, or None when there are none."""
        points = list(points)
        if not points:
            return None
        return cls(
            min_x=min(p.x for p in points),
            min_y=min(p.y for p in points),
            max_x=max(p.x for p in points),
            max_y=max(p.y for p in points)
        )

    @property
    def min(self) -> Point:
        return Point(self.min_x, self.min_y)

    @property
    def max(self) -> Point:
        return Point(self.max_x, self.max_y)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point(
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2
        )

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        """Smallest box containing both boxes."""
        return BoundingBox(
            min_x=min(self.min_x, other.min_x),
            min_y=min(self.min_y, other.min_y),
            max_x=max(self.max_x, other.max_x),
            max_y=max(self.max_y, other.max_y)
        )

    def contains(self, point: Point) -> bool:
        """Check if point is inside bounding box."""
        return (self.min_x <= point.x <= self.max_x and
                self.min_y <= point.y <= self.max_y)

    def intersects(self, other: 'BoundingBox') -> bool:
        """Check if two bounding boxes overlap."""
        return not (self.max_x < other.min_x or
                    self.min_x > other.max_x or
                    self.max_y < other.min_y or
                    self.min_y > other.max_y)


@dataclass(frozen=True, eq=False)
class Affine2D:
    """
    2D affine transform x -> A x + t

    The column layout follows SVG's ``matrix(a, b, c, d, e, f)``:
    A = [[a, c], [b, d]] and t = [e, f]. Instances are immutable, so a
    layer's transform can only change through assignment.
    """
    A: np.ndarray  # shape (2, 2)
    t: np.ndarray  # shape (2,)

    def __post_init__(self):
        A = np.array(self.A, dtype=float)
        t = np.array(self.t, dtype=float)
        if A.shape != (2, 2):
            raise ValueError("A must be 2x2")
        if t.shape != (2,):
            raise ValueError("t must be length-2")
        A.setflags(write=False)
        t.setflags(write=False)
        object.__setattr__(self, "A", A)
        object.__setattr__(self, "t", t)

    # ---- Constructors ----
    @staticmethod
    def identity() -> "Affine2D":
        return Affine2D(A=np.eye(2), t=np.zeros(2))

    @staticmethod
    def from_cols_array(cols: Iterable[float]) -> "Affine2D":
        """Build from the six values [a, b, c, d, e, f]."""
        a, b, c, d, e, f = (float(v) for v in cols)
        return Affine2D(A=np.array([[a, c], [b, d]]), t=np.array([e, f]))

    @staticmethod
    def from_translation(dx: float, dy: float) -> "Affine2D":
        return Affine2D(A=np.eye(2), t=np.array([dx, dy], dtype=float))

    @staticmethod
    def from_scale(sx: float, sy: Optional[float] = None) -> "Affine2D":
        if sy is None:
            sy = sx
        return Affine2D(A=np.array([[sx, 0.0], [0.0, sy]], dtype=float), t=np.zeros(2))

    @staticmethod
    def from_angle(theta_radians: float) -> "Affine2D":
        c = math.cos(theta_radians)
        s = math.sin(theta_radians)
        return Affine2D(A=np.array([[c, -s], [s, c]], dtype=float), t=np.zeros(2))

    # ---- Composition ----
    def __mul__(self, other: "Affine2D") -> "Affine2D":
        """
        Compose two transforms; ``(self * other)`` applies ``other`` first.
        """
        if not isinstance(other, Affine2D):
            return NotImplemented
        return Affine2D(A=self.A @ other.A, t=self.A @ other.t + self.t)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Affine2D):
            return NotImplemented
        return np.array_equal(self.A, other.A) and np.array_equal(self.t, other.t)

    __hash__ = None

    # Immutable, so copies can share the instance
    def __copy__(self) -> "Affine2D":
        return self

    def __deepcopy__(self, memo) -> "Affine2D":
        return self

    def __repr__(self) -> str:
        return f"Affine2D({self.to_cols_array()})"

    def determinant(self) -> float:
        return float(np.linalg.det(self.A))

    def max_scale(self) -> float:
        """Largest factor by which the linear part stretches a length."""
        return float(np.linalg.norm(self.A, 2))

    def is_invertible(self) -> bool:
        det = self.determinant()
        return det != 0.0 and math.isfinite(det)

    def inverse(self) -> "Affine2D":
        """
        Return the inverse transform.

        Raises:
            NonInvertibleTransformError: If the linear part is singular
        """
        if not self.is_invertible():
            raise NonInvertibleTransformError(
                f"Transform {self.to_cols_array()} is not invertible"
            )
        A_inv = np.linalg.inv(self.A)
        return Affine2D(A=A_inv, t=-(A_inv @ self.t))

    # ---- Application ----
    def transform_point2(self, point: Point) -> Point:
        x, y = self.A @ np.array([point.x, point.y]) + self.t
        return Point(float(x), float(y))

    def transform_points(self, points: Iterable[Point]) -> List[Point]:
        return [self.transform_point2(p) for p in points]

    def to_cols_array(self) -> List[float]:
        """The six values [a, b, c, d, e, f]."""
        return [float(self.A[0, 0]), float(self.A[1, 0]),
                float(self.A[0, 1]), float(self.A[1, 1]),
                float(self.t[0]), float(self.t[1])]

    def to_svg(self) -> str:
        """SVG transform attribute value."""
        return "matrix(" + ",".join(format_number(v) for v in self.to_cols_array()) + ")"
