"""
layerdoc Folder

A layer payload holding an ordered list of child layers.
"""

from functools import reduce
import logging
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence, Tuple

from .constants import FLATTEN_TOLERANCE
from .errors import IndexOutOfBoundsError, LayerNotFoundError
from .geometry import Affine2D, BoundingBox, Point
from .path import BezPath
from .shapes import LayerData, LayerId
from .style import PathStyle

if TYPE_CHECKING:
    from .layer import Layer

logger = logging.getLogger(__name__)


class Folder(LayerData):
    """
    An ordered collection of child layers addressed by stable ids.

    Storage order is z-order: later children are drawn on top. Ids are
    handed out sequentially and never reused by the same folder. The id
    list and the layer list always change together and stay index-aligned.
    """

    def __init__(self):
        self._next_assignment_id: LayerId = 0
        self._layer_ids: List[LayerId] = []
        self._layers: List['Layer'] = []

    def __repr__(self) -> str:
        return f"Folder(layer_ids={self._layer_ids!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Folder):
            return NotImplemented
        return self._layer_ids == other._layer_ids and self._layers == other._layers

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Tuple[LayerId, 'Layer']]:
        """Iterate (id, layer) pairs in storage order."""
        return iter(zip(self._layer_ids, self._layers))

    @property
    def layer_ids(self) -> Tuple[LayerId, ...]:
        return tuple(self._layer_ids)

    @property
    def layers(self) -> Tuple['Layer', ...]:
        return tuple(self._layers)

    # ---- LayerData ----
    def render(self, transform: Affine2D, style: PathStyle) -> str:
        """
        Children's markup in storage order inside a group carrying the
        folder's transform. Each child reuses its own cache when clean.
        """
        lines = [f'<g transform="{transform.to_svg()}">']
        for layer in self._layers:
            markup = layer.render()
            if markup:
                lines.append(markup)
        lines.append("</g>")
        return "\n".join(lines)

    def to_path(self, transform: Affine2D, style: PathStyle) -> BezPath:
        path = BezPath()
        for layer in self._layers:
            if layer.visible:
                path.extend(layer.data.to_path(transform * layer.transform, layer.style))
        return path

    def intersects_quad(self, quad: Sequence[Point], path: List[LayerId],
                        intersections: List[List[LayerId]], style: PathStyle,
                        tolerance: float = FLATTEN_TOLERANCE) -> None:
        for layer_id, layer in zip(self._layer_ids, self._layers):
            path.append(layer_id)
            layer.intersects_quad(quad, path, intersections, tolerance)
            path.pop()

    def bounding_box(self, transform: Affine2D,
                     style: Optional[PathStyle] = None) -> Optional[BoundingBox]:
        """
        Union of the visible children's boxes in the space given by
        `transform`, or None if no child has one.
        """
        boxes = [
            bbox for bbox in (
                layer.bounding_box(transform * layer.transform, layer.style)
                for layer in self._layers if layer.visible
            )
            if bbox is not None
        ]
        if not boxes:
            return None
        return reduce(BoundingBox.union, boxes)

    # ---- Structure ----
    def add_layer(self, layer: 'Layer', insert_index: int = -1) -> Optional[LayerId]:
        """
        Insert a layer and assign it a new id.

        Negative indices count from the end, so -1 appends. Returns None
        (and changes nothing) when the index is out of range.
        """
        if insert_index < 0:
            insert_index = len(self._layers) + insert_index + 1
        if not 0 <= insert_index <= len(self._layers):
            return None
        layer_id = self._next_assignment_id
        self._next_assignment_id += 1
        self._layers.insert(insert_index, layer)
        self._layer_ids.insert(insert_index, layer_id)
        logger.debug(f"Added layer {layer_id} at index {insert_index}")
        return layer_id

    def remove_layer(self, layer_id: LayerId) -> 'Layer':
        """Remove a child (and its whole subtree) and return it."""
        pos = self.position_of_layer(layer_id)
        del self._layer_ids[pos]
        layer = self._layers.pop(pos)
        logger.debug(f"Removed layer {layer_id}")
        return layer

    def reorder_layer(self, layer_id: LayerId, new_index: int) -> None:
        """Move a child to a new position in the z-order."""
        pos = self.position_of_layer(layer_id)
        if not 0 <= new_index < len(self._layers):
            raise IndexOutOfBoundsError(
                f"Index {new_index} outside folder of {len(self._layers)} layers"
            )
        self._layer_ids.insert(new_index, self._layer_ids.pop(pos))
        self._layers.insert(new_index, self._layers.pop(pos))

    def position_of_layer(self, layer_id: LayerId) -> int:
        try:
            return self._layer_ids.index(layer_id)
        except ValueError:
            raise LayerNotFoundError(f"No layer with id {layer_id}") from None

    def layer(self, layer_id: LayerId) -> Optional['Layer']:
        """Find a child by its id."""
        for child_id, layer in zip(self._layer_ids, self._layers):
            if child_id == layer_id:
                return layer
        return None

    def folder(self, layer_id: LayerId) -> 'Folder':
        """The folder payload of a child; fails if it is missing or a leaf."""
        layer = self.layer(layer_id)
        if layer is None:
            raise LayerNotFoundError(f"No layer with id {layer_id}")
        return layer.as_folder()
