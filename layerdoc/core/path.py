"""
layerdoc Bezier Paths

Resolution-independent path made of line and cubic bezier segments. Used for
bounding boxes, hit-testing and the `d` attribute of rendered markup.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple
import math

from shapely.geometry import LineString, MultiPoint, Point as ShapelyPoint, Polygon
from shapely.validation import make_valid

from .constants import FLATTEN_TOLERANCE
from .geometry import Affine2D, BoundingBox, Point, format_number


# Path segment types
@dataclass
class PathSegment(ABC):
    @abstractmethod
    def transformed(self, transform: Affine2D) -> 'PathSegment':
        pass

    @abstractmethod
    def to_svg(self) -> str:
        pass


def _svg_point(point: Point) -> str:
    return f"{format_number(point.x)},{format_number(point.y)}"


@dataclass
class MoveToSegment(PathSegment):
    point: Point

    def transformed(self, transform: Affine2D) -> 'MoveToSegment':
        return MoveToSegment(transform.transform_point2(self.point))

    def to_svg(self) -> str:
        return "M" + _svg_point(self.point)


@dataclass
class LineToSegment(PathSegment):
    point: Point

    def transformed(self, transform: Affine2D) -> 'LineToSegment':
        return LineToSegment(transform.transform_point2(self.point))

    def to_svg(self) -> str:
        return "L" + _svg_point(self.point)


@dataclass
class CubicBezierSegment(PathSegment):
    cp1: Point
    cp2: Point
    end_point: Point

    def transformed(self, transform: Affine2D) -> 'CubicBezierSegment':
        return CubicBezierSegment(
            transform.transform_point2(self.cp1),
            transform.transform_point2(self.cp2),
            transform.transform_point2(self.end_point)
        )

    def to_svg(self) -> str:
        return (f"C{_svg_point(self.cp1)} {_svg_point(self.cp2)} "
                f"{_svg_point(self.end_point)}")


@dataclass
class ClosePathSegment(PathSegment):
    def transformed(self, transform: Affine2D) -> 'ClosePathSegment':
        return ClosePathSegment()

    def to_svg(self) -> str:
        return "Z"


def flatten_cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point,
                         tolerance: float = FLATTEN_TOLERANCE) -> List[Point]:
    """
    Flatten a cubic bezier curve to line segments using recursive subdivision.

    Uses the de Casteljau algorithm with flatness test.
    """
    def is_flat(p0: Point, p1: Point, p2: Point, p3: Point, tol: float) -> bool:
        """Check if curve is flat enough to approximate with a line."""
        # Distance from control points to line p0-p3
        ux = 3*p1.x - 2*p0.x - p3.x
        uy = 3*p1.y - 2*p0.y - p3.y
        vx = 3*p2.x - 2*p3.x - p0.x
        vy = 3*p2.y - 2*p3.y - p0.y
        return max(ux*ux, vx*vx) + max(uy*uy, vy*vy) <= 16 * tol * tol

    def subdivide(p0: Point, p1: Point, p2: Point, p3: Point,
                  tol: float, points: List[Point]) -> None:
        if is_flat(p0, p1, p2, p3, tol):
            points.append(p3)
        else:
            # de Casteljau subdivision at t=0.5
            q0 = p0.lerp(p1, 0.5)
            q1 = p1.lerp(p2, 0.5)
            q2 = p2.lerp(p3, 0.5)
            r0 = q0.lerp(q1, 0.5)
            r1 = q1.lerp(q2, 0.5)
            s = r0.lerp(r1, 0.5)

            subdivide(p0, q0, r0, s, tol, points)
            subdivide(s, r1, q2, p3, tol, points)

    points = [p0]
    subdivide(p0, p1, p2, p3, tolerance, points)
    return points


def cubic_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Evaluate a cubic bezier at parameter t."""
    mt = 1 - t
    a = mt * mt * mt
    b = 3 * mt * mt * t
    c = 3 * mt * t * t
    d = t * t * t
    return Point(a*p0.x + b*p1.x + c*p2.x + d*p3.x,
                 a*p0.y + b*p1.y + c*p2.y + d*p3.y)


def _cubic_extrema(p0: float, p1: float, p2: float, p3: float) -> List[float]:
    """Parameters in (0, 1) where one coordinate of a cubic has a turning point."""
    # Derivative divided by 3: a t^2 + b t + c
    a = -p0 + 3*p1 - 3*p2 + p3
    b = 2 * (p0 - 2*p1 + p2)
    c = p1 - p0
    roots = []
    if abs(a) < 1e-12:
        if abs(b) > 1e-12:
            roots.append(-c / b)
    else:
        disc = b*b - 4*a*c
        if disc >= 0:
            sq = math.sqrt(disc)
            roots.append((-b + sq) / (2*a))
            roots.append((-b - sq) / (2*a))
    return [t for t in roots if 0 < t < 1]


def polygon_geometry(coords: List[Tuple[float, float]]):
    """
    Filled shapely geometry for a ring of coordinates.

    A ring without area (a single point or a flat line) collapses to its
    convex hull, a Point or LineString; self-intersecting rings are repaired.
    """
    geometry = Polygon(coords)
    if geometry.area == 0:
        return MultiPoint(coords).convex_hull
    if not geometry.is_valid:
        geometry = make_valid(geometry)
    return geometry


class BezPath:
    """
    A path consisting of move, line, cubic and close segments.

    Builder methods return the path so calls can be chained:
    ``BezPath().move_to(0, 0).line_to(1, 0).close_path()``.
    """

    def __init__(self, segments: Optional[List[PathSegment]] = None):
        self.segments: List[PathSegment] = list(segments) if segments else []

    def __eq__(self, other) -> bool:
        if not isinstance(other, BezPath):
            return NotImplemented
        return self.segments == other.segments

    def __repr__(self) -> str:
        return f"BezPath({self.to_svg()!r})"

    def __len__(self) -> int:
        return len(self.segments)

    def move_to(self, x: float, y: float) -> 'BezPath':
        """Start a new subpath at the given point."""
        self.segments.append(MoveToSegment(Point(x, y)))
        return self

    def line_to(self, x: float, y: float) -> 'BezPath':
        """Draw a line to the given point."""
        self.segments.append(LineToSegment(Point(x, y)))
        return self

    def cubic_to(self, cp1x: float, cp1y: float,
                 cp2x: float, cp2y: float,
                 x: float, y: float) -> 'BezPath':
        """Draw a cubic bezier curve."""
        self.segments.append(CubicBezierSegment(
            Point(cp1x, cp1y), Point(cp2x, cp2y), Point(x, y)
        ))
        return self

    def close_path(self) -> 'BezPath':
        """Close the current subpath."""
        self.segments.append(ClosePathSegment())
        return self

    def extend(self, other: 'BezPath') -> 'BezPath':
        """Append all segments of another path."""
        self.segments.extend(other.segments)
        return self

    def is_empty(self) -> bool:
        return not self.segments

    def transformed(self, transform: Affine2D) -> 'BezPath':
        """Return a copy with every point mapped through the transform."""
        return BezPath([seg.transformed(transform) for seg in self.segments])

    def to_svg(self) -> str:
        """SVG path data for the `d` attribute."""
        return " ".join(seg.to_svg() for seg in self.segments)

    def bounding_box(self) -> Optional[BoundingBox]:
        """
        Exact axis-aligned bounds of the path.

        Cubic segments contribute their end points plus the curve points at
        each coordinate's turning parameters, so control points that bulge
        past the curve do not widen the box.
        """
        points: List[Point] = []
        current: Optional[Point] = None
        start: Optional[Point] = None
        for seg in self.segments:
            if isinstance(seg, MoveToSegment):
                current = start = seg.point
                points.append(current)
            elif isinstance(seg, LineToSegment):
                current = seg.point
                points.append(current)
            elif isinstance(seg, CubicBezierSegment):
                p0 = current if current is not None else seg.cp1
                ts = (_cubic_extrema(p0.x, seg.cp1.x, seg.cp2.x, seg.end_point.x) +
                      _cubic_extrema(p0.y, seg.cp1.y, seg.cp2.y, seg.end_point.y))
                points.extend(cubic_point(p0, seg.cp1, seg.cp2, seg.end_point, t)
                              for t in ts)
                current = seg.end_point
                points.append(current)
            elif isinstance(seg, ClosePathSegment):
                current = start
        return BoundingBox.from_points(points)

    def subpaths(self, tolerance: float = FLATTEN_TOLERANCE) -> List[Tuple[List[Point], bool]]:
        """
        Flatten curves to line segments.

        Returns one (points, closed) pair per subpath. Closed subpaths end
        on their first point.
        """
        result: List[Tuple[List[Point], bool]] = []
        current_path: List[Point] = []
        current: Optional[Point] = None  # Don't initialize to (0,0) - wait for MoveTo
        path_start: Optional[Point] = None

        def finish(closed: bool) -> None:
            if not current_path:
                return
            if closed and (current_path[0].x != current_path[-1].x or
                           current_path[0].y != current_path[-1].y):
                current_path.append(Point(current_path[0].x, current_path[0].y))
            result.append((list(current_path), closed))
            current_path.clear()

        for seg in self.segments:
            if isinstance(seg, MoveToSegment):
                finish(False)
                current = path_start = seg.point
                current_path.append(current)
                continue
            if current is None:
                # If no MoveTo yet, skip this segment
                continue
            if isinstance(seg, ClosePathSegment):
                finish(True)
                current = path_start
                continue
            if not current_path:
                # Drawing resumes from the start of the subpath that was just closed
                current_path.append(current)
            if isinstance(seg, LineToSegment):
                current = seg.point
                current_path.append(current)
            elif isinstance(seg, CubicBezierSegment):
                bezier_points = flatten_cubic_bezier(
                    current, seg.cp1, seg.cp2, seg.end_point, tolerance=tolerance
                )
                current_path.extend(bezier_points[1:])  # Skip first (current)
                current = seg.end_point
        finish(False)
        return result

    def flatten(self, tolerance: float = FLATTEN_TOLERANCE) -> List[List[Point]]:
        """Flattened subpaths as lists of points."""
        return [points for points, _ in self.subpaths(tolerance)]

    def to_geometries(self, tolerance: float = FLATTEN_TOLERANCE) -> list:
        """
        Shapely geometries for each subpath.

        Closed subpaths become filled polygons, open ones line strings.
        Degenerate input collapses to the matching lower-dimensional shape.
        """
        geometries = []
        for points, closed in self.subpaths(tolerance):
            coords = [(p.x, p.y) for p in points]
            if closed and len(set(coords)) >= 3:
                geometry = polygon_geometry(coords)
            elif len(set(coords)) >= 2:
                geometry = LineString(coords)
            else:
                geometry = ShapelyPoint(coords[0])
            geometries.append(geometry)
        return geometries
