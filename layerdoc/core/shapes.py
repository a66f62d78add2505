"""
layerdoc Core Shapes Module

Defines the layer payload interface and the geometric primitives:
Ellipse, Rect, Line, PolyLine and Shape (regular polygon).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import copy
import math

from .constants import CIRCLE_KAPPA, FLATTEN_TOLERANCE
from .geometry import Affine2D, BoundingBox, Point
from .path import BezPath, polygon_geometry
from .style import PathStyle

LayerId = int


def quad_geometry(quad: Sequence[Point]):
    """Shapely geometry for a 4 point selection quad (may be degenerate)."""
    return polygon_geometry([(p.x, p.y) for p in quad])


def intersect_quad_path(quad: Sequence[Point], path: BezPath,
                        tolerance: float = FLATTEN_TOLERANCE) -> bool:
    """
    Check whether a quad touches a path.

    Closed subpaths count as filled, so a quad lying entirely inside a
    rectangle hits it; open subpaths only hit where the quad reaches the line.
    Curves are flattened with `tolerance`, given in the path's own space.
    """
    quad_geom = quad_geometry(quad)
    return any(geometry.intersects(quad_geom) for geometry in path.to_geometries(tolerance))


class LayerData(ABC):
    """
    Abstract base class for everything a layer can hold.

    Every payload must implement:
    - render(): Markup for the payload under a transform and style
    - to_path(): The same geometry as a BezPath
    - intersects_quad(): Record the traversal path if a local-space quad hits
    - clone(): Create a deep copy
    """

    @abstractmethod
    def render(self, transform: Affine2D, style: PathStyle) -> str:
        pass

    @abstractmethod
    def to_path(self, transform: Affine2D, style: PathStyle) -> BezPath:
        pass

    @abstractmethod
    def intersects_quad(self, quad: Sequence[Point], path: List[LayerId],
                        intersections: List[List[LayerId]], style: PathStyle,
                        tolerance: float = FLATTEN_TOLERANCE) -> None:
        pass

    def bounding_box(self, transform: Affine2D, style: PathStyle) -> Optional[BoundingBox]:
        """Axis-aligned extent of the payload's path, None for an empty path."""
        return self.to_path(transform, style).bounding_box()

    def clone(self) -> 'LayerData':
        """Create a deep copy of this payload."""
        return copy.deepcopy(self)


class Primitive(LayerData):
    """
    A leaf payload whose geometry is a single path in local coordinates.
    """

    @abstractmethod
    def local_path(self) -> BezPath:
        """The untransformed outline."""
        pass

    def to_path(self, transform: Affine2D, style: PathStyle) -> BezPath:
        return self.local_path().transformed(transform)

    def render(self, transform: Affine2D, style: PathStyle) -> str:
        path = self.to_path(transform, style)
        return f'<path d="{path.to_svg()}"{style.render()} />'

    def intersects_quad(self, quad: Sequence[Point], path: List[LayerId],
                        intersections: List[List[LayerId]], style: PathStyle,
                        tolerance: float = FLATTEN_TOLERANCE) -> None:
        if intersect_quad_path(quad, self.local_path(), tolerance):
            intersections.append(list(path))


@dataclass
class Ellipse(Primitive):
    """An ellipse, by default the one inscribed in the unit square."""
    center_x: float = 0.5
    center_y: float = 0.5
    radius_x: float = 0.5
    radius_y: float = 0.5

    def local_path(self) -> BezPath:
        """Four cubic arcs, clockwise from the rightmost point."""
        cx, cy = self.center_x, self.center_y
        rx, ry = self.radius_x, self.radius_y
        kx, ky = rx * CIRCLE_KAPPA, ry * CIRCLE_KAPPA
        return (BezPath()
                .move_to(cx + rx, cy)
                .cubic_to(cx + rx, cy + ky, cx + kx, cy + ry, cx, cy + ry)
                .cubic_to(cx - kx, cy + ry, cx - rx, cy + ky, cx - rx, cy)
                .cubic_to(cx - rx, cy - ky, cx - kx, cy - ry, cx, cy - ry)
                .cubic_to(cx + kx, cy - ry, cx + rx, cy - ky, cx + rx, cy)
                .close_path())


@dataclass
class Rect(Primitive):
    """An axis-aligned rectangle, by default the unit square."""
    x: float = 0.0
    y: float = 0.0
    width: float = 1.0
    height: float = 1.0

    def local_path(self) -> BezPath:
        return (BezPath()
                .move_to(self.x, self.y)
                .line_to(self.x + self.width, self.y)
                .line_to(self.x + self.width, self.y + self.height)
                .line_to(self.x, self.y + self.height)
                .close_path())


@dataclass
class Line(Primitive):
    """A straight segment, by default the unit square's diagonal."""
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 1.0
    y2: float = 1.0

    def local_path(self) -> BezPath:
        return BezPath().move_to(self.x1, self.y1).line_to(self.x2, self.y2)


@dataclass
class PolyLine(Primitive):
    """An open polyline through the given points."""
    points: List[Point] = field(default_factory=list)

    def local_path(self) -> BezPath:
        path = BezPath()
        if not self.points:
            return path
        first, *rest = self.points
        path.move_to(first.x, first.y)
        for p in rest:
            path.line_to(p.x, p.y)
        return path


@dataclass
class Shape(Primitive):
    """
    A regular polygon fitted into a box (the unit square by default).

    The first vertex points up; the polygon is stretched so its extent
    fills the box exactly.
    """
    sides: int = 3
    x: float = 0.0
    y: float = 0.0
    width: float = 1.0
    height: float = 1.0

    def __post_init__(self):
        if self.sides < 3:
            raise ValueError(f"A shape needs at least 3 sides, got {self.sides}")

    def vertices(self) -> List[Point]:
        step = 2 * math.pi / self.sides
        unit = [Point(math.cos(i * step - math.pi / 2), math.sin(i * step - math.pi / 2))
                for i in range(self.sides)]
        bounds = BoundingBox.from_points(unit)
        return [Point(self.x + (p.x - bounds.min_x) / bounds.width * self.width,
                      self.y + (p.y - bounds.min_y) / bounds.height * self.height)
                for p in unit]

    def local_path(self) -> BezPath:
        first, *rest = self.vertices()
        path = BezPath().move_to(first.x, first.y)
        for p in rest:
            path.line_to(p.x, p.y)
        return path.close_path()
