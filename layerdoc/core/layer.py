"""
layerdoc Layer

A node of the layer tree: one payload plus transform, style, compositing
and a render cache.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

from .blend_mode import BlendMode
from .constants import FLATTEN_TOLERANCE
from .errors import NotAFolderError
from .folder import Folder
from .geometry import Affine2D, BoundingBox, Point, format_number
from .path import BezPath
from .shapes import LayerData, LayerId
from .style import PathStyle

logger = logging.getLogger(__name__)


class Layer:
    """
    A layer wrapping a primitive or a folder.

    Rendering is cached: `cache` holds the last markup including the
    blend/opacity group and `thumbnail_cache` the payload markup alone.
    Both are only valid while `cache_dirty` is False.

    Assigning `data`, `transform`, `style`, `blend_mode` or `opacity` sets
    `cache_dirty`. Changing the payload in place (e.g. moving a rectangle's
    corner, or editing a folder's children) does not; callers doing that
    must set `cache_dirty = True` themselves, and on every ancestor folder
    too (see `Document.mark_as_dirty`). Toggling `visible` keeps the cache.
    """

    def __init__(self, data: LayerData,
                 transform: Union[Affine2D, Iterable[float], None] = None,
                 style: Optional[PathStyle] = None,
                 name: Optional[str] = None):
        """
        Create a layer.

        Args:
            data: The payload (a primitive or a Folder)
            transform: An Affine2D or six values [a, b, c, d, e, f];
                identity when omitted
            style: Stroke/fill paint; no paint when omitted
            name: Optional display name
        """
        if transform is None:
            transform = Affine2D.identity()
        elif not isinstance(transform, Affine2D):
            transform = Affine2D.from_cols_array(transform)

        self.visible: bool = True
        self.name: Optional[str] = name
        self._data = data
        self._transform = transform
        self._style = style if style is not None else PathStyle()
        self.cache: str = ""
        self.thumbnail_cache: str = ""
        self.cache_dirty: bool = True
        self._blend_mode = BlendMode.NORMAL
        self._opacity: float = 1.0

    def __repr__(self) -> str:
        return (f"Layer(name={self.name!r}, data={self._data!r}, "
                f"visible={self.visible}, cache_dirty={self.cache_dirty})")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Layer):
            return NotImplemented
        return (self.visible == other.visible and
                self.name == other.name and
                self._data == other._data and
                self._transform == other._transform and
                self._style == other._style and
                self.cache == other.cache and
                self.thumbnail_cache == other.thumbnail_cache and
                self.cache_dirty == other.cache_dirty and
                self._blend_mode == other._blend_mode and
                self._opacity == other._opacity)

    __hash__ = None

    # ---- Cache-tracked properties ----
    @property
    def data(self) -> LayerData:
        return self._data

    @data.setter
    def data(self, value: LayerData) -> None:
        self._data = value
        self.cache_dirty = True

    @property
    def transform(self) -> Affine2D:
        return self._transform

    @transform.setter
    def transform(self, value: Affine2D) -> None:
        self._transform = value
        self.cache_dirty = True

    @property
    def style(self) -> PathStyle:
        return self._style

    @style.setter
    def style(self, value: PathStyle) -> None:
        self._style = value
        self.cache_dirty = True

    @property
    def blend_mode(self) -> BlendMode:
        return self._blend_mode

    @blend_mode.setter
    def blend_mode(self, value: BlendMode) -> None:
        self._blend_mode = value
        self.cache_dirty = True

    @property
    def opacity(self) -> float:
        """Group opacity; expected in [0, 1] but not clamped."""
        return self._opacity

    @opacity.setter
    def opacity(self, value: float) -> None:
        self._opacity = value
        self.cache_dirty = True

    # ---- Rendering ----
    def render(self) -> str:
        """
        Markup for this layer wrapped in its compositing group.

        Invisible layers render nothing and leave the cache alone so showing
        them again is free. A clean cache is returned as is.
        """
        if not self.visible:
            return ""
        if self.cache_dirty:
            logger.debug(f"Rebuilding render cache for layer {self.name!r}")
            self.thumbnail_cache = self._data.render(self._transform, self._style)
            self.cache = (
                f'<g style="mix-blend-mode: {self._blend_mode.to_svg_style_name()}; '
                f'opacity: {format_number(self._opacity)}">{self.thumbnail_cache}</g>'
            )
            self.cache_dirty = False
        return self.cache

    def render_as_folder(self) -> str:
        """The folder's markup without the blend wrapper (and uncached)."""
        return self.as_folder().render(self._transform, self._style)

    # ---- Geometry ----
    def intersects_quad(self, quad: Sequence[Point], path: List[LayerId],
                        intersections: List[List[LayerId]],
                        tolerance: float = FLATTEN_TOLERANCE) -> None:
        """
        Hit-test a quad given in the parent's coordinate space.

        Invisible layers are skipped entirely. The quad is mapped into the
        layer's local space before the payload tests it, and the flattening
        tolerance shrinks by the transform's scale so curves stay within
        `tolerance` of their drawn outline in the parent's space.
        """
        if not self.visible:
            return
        if not self._transform.is_invertible():
            logger.debug(f"Skipping hit-test of layer {self.name!r}: degenerate transform")
            return
        inverse = self._transform.inverse()
        local_quad = [inverse.transform_point2(p) for p in quad]
        local_tolerance = tolerance / self._transform.max_scale()
        self._data.intersects_quad(local_quad, path, intersections, self._style, local_tolerance)

    def to_path(self) -> BezPath:
        return self._data.to_path(self._transform, self._style)

    def bounding_box(self, transform: Affine2D, style: PathStyle) -> Optional[BoundingBox]:
        """Extent of the layer in the space `transform` maps into."""
        if isinstance(self._data, Folder):
            return self._data.bounding_box(transform)
        return self._data.bounding_box(transform, style)

    def current_bounding_box(self) -> Optional[BoundingBox]:
        return self.bounding_box(self._transform, self._style)

    # ---- Folder access ----
    def is_folder(self) -> bool:
        return isinstance(self._data, Folder)

    def as_folder(self) -> Folder:
        """
        The folder payload.

        Raises:
            NotAFolderError: If the layer holds a primitive
        """
        if not isinstance(self._data, Folder):
            raise NotAFolderError(
                f"Layer {self.name!r} holds a {type(self._data).__name__}, not a Folder"
            )
        return self._data

    def clone(self) -> 'Layer':
        """Deep copy with the same payload, paint and compositing, cache dirty."""
        layer = Layer(self._data.clone(), self._transform, self._style, self.name)
        layer.visible = self.visible
        layer.blend_mode = self._blend_mode
        layer.opacity = self._opacity
        return layer
