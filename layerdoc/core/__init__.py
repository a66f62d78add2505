"""
layerdoc Core Module

Contains the core data structures:
- Geometry: Point, BoundingBox, Affine2D
- Paths: BezPath and its segments
- Styles: Color, Fill, Stroke, PathStyle
- Shapes: Ellipse, Rect, Line, PolyLine, Shape
- Folder: Ordered child layers
- Layer: Payload plus transform, style, compositing and render cache
- Document: Root container with path-based access
"""

# Import order matters - shapes first, then folder, then layer, then document
from .errors import (
    DocumentError, NotAFolderError, LayerNotFoundError, InvalidPathError,
    IndexOutOfBoundsError, NonInvertibleTransformError
)
from .geometry import Point, BoundingBox, Affine2D
from .path import (
    BezPath, PathSegment, MoveToSegment, LineToSegment,
    CubicBezierSegment, ClosePathSegment
)
from .style import Color, Fill, Stroke, PathStyle
from .blend_mode import BlendMode
from .shapes import (
    LayerId, LayerData, Primitive,
    Ellipse, Rect, Line, PolyLine, Shape
)
from .folder import Folder
from .layer import Layer
from .document import Document

__all__ = [
    'DocumentError', 'NotAFolderError', 'LayerNotFoundError',
    'InvalidPathError', 'IndexOutOfBoundsError', 'NonInvertibleTransformError',
    'Point', 'BoundingBox', 'Affine2D',
    'BezPath', 'PathSegment', 'MoveToSegment', 'LineToSegment',
    'CubicBezierSegment', 'ClosePathSegment',
    'Color', 'Fill', 'Stroke', 'PathStyle',
    'BlendMode',
    'LayerId', 'LayerData', 'Primitive',
    'Ellipse', 'Rect', 'Line', 'PolyLine', 'Shape',
    'Folder',
    'Layer',
    'Document'
]
