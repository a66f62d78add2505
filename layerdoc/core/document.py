"""
layerdoc Document Model

The Document class is the root container of the layer tree. Layers are
addressed by paths: sequences of layer ids from the root folder down, with
the empty path naming the root itself.
"""

import logging
from typing import List, Optional, Sequence

from .blend_mode import BlendMode
from .constants import FLATTEN_TOLERANCE
from .errors import (
    IndexOutOfBoundsError, InvalidPathError, LayerNotFoundError, NotAFolderError
)
from .folder import Folder
from .geometry import Affine2D, Point
from .layer import Layer
from .shapes import LayerId
from .style import Color

logger = logging.getLogger(__name__)

LayerPath = Sequence[LayerId]


class Document:
    """
    The root document containing the layer tree.

    Editing methods mark the touched layer and its ancestors dirty so the
    next render of the root picks the change up. The document caches
    nothing itself.
    """

    def __init__(self, root: Optional[Layer] = None):
        self.root: Layer = root if root is not None else Layer(Folder(), name="Root")
        # The root must hold a folder
        self.root.as_folder()

    # ---- Navigation ----
    def document_layer(self, path: LayerPath) -> Layer:
        """
        Walk the tree from the root and return the layer at `path`.

        Raises:
            NotAFolderError: If an intermediate layer is not a folder
            LayerNotFoundError: If an id along the path does not exist
        """
        layer = self.root
        for depth, layer_id in enumerate(path):
            child = layer.as_folder().layer(layer_id)
            if child is None:
                raise LayerNotFoundError(
                    f"No layer with id {layer_id} at {list(path[:depth])}"
                )
            layer = child
        return layer

    def document_folder(self, path: LayerPath) -> Folder:
        """
        The folder payload of the layer at `path`.

        Raises:
            NotAFolderError: If the path runs through or ends on a non-folder
            LayerNotFoundError: If an id along the path does not exist
        """
        return self.document_layer(path).as_folder()

    def folder_layer(self, path: LayerPath) -> Layer:
        """
        The layer at `path`, which must hold a folder.

        Raises:
            NotAFolderError: If the path runs through or ends on a non-folder
            LayerNotFoundError: If an id along the path does not exist
        """
        layer = self.document_layer(path)
        if not layer.is_folder():
            raise NotAFolderError(f"Layer at {list(path)} is not a folder")
        return layer

    def layer(self, path: LayerPath) -> Layer:
        """The layer at a non-empty path."""
        if not path:
            raise InvalidPathError("The root is not addressable as a child layer")
        return self.document_layer(path)

    def parent_folder(self, path: LayerPath) -> Folder:
        """The folder holding the layer at a non-empty path."""
        if not path:
            raise InvalidPathError("The root has no parent folder")
        return self.document_folder(path[:-1])

    def transforms(self, path: LayerPath) -> List[Affine2D]:
        """Transforms of every layer from the root down to `path`."""
        layer = self.root
        transforms = [layer.transform]
        for layer_id in path:
            layer = layer.as_folder().layer(layer_id)
            if layer is None:
                raise LayerNotFoundError(f"No layer with id {layer_id}")
            transforms.append(layer.transform)
        return transforms

    def multiply_transforms(self, path: LayerPath) -> Affine2D:
        """Combined transform mapping the layer's local space to root space."""
        result = Affine2D.identity()
        for transform in self.transforms(path):
            result = result * transform
        return result

    def visible_layers(self, path: LayerPath = ()) -> List[List[LayerId]]:
        """Paths of all visible leaf layers below `path`, in render order."""
        result: List[List[LayerId]] = []
        for layer_id, layer in self.document_folder(path):
            if not layer.visible:
                continue
            child_path = [*path, layer_id]
            if layer.is_folder():
                result.extend(self.visible_layers(child_path))
            else:
                result.append(child_path)
        return result

    def intersects_quad_root(self, quad: Sequence[Point],
                             tolerance: float = FLATTEN_TOLERANCE) -> List[List[LayerId]]:
        """
        Paths of every visible leaf layer touching a quad given in root space.

        Nested hits are reported before later siblings, in storage order.
        Curves are matched to within `tolerance` root-space units.
        """
        intersections: List[List[LayerId]] = []
        self.root.intersects_quad(quad, [], intersections, tolerance)
        return intersections

    # ---- Cache invalidation ----
    def mark_as_dirty(self, path: LayerPath) -> None:
        """Mark the layer at `path` and every ancestor as needing a re-render."""
        layer = self.root
        layer.cache_dirty = True
        for layer_id in path:
            layer = layer.as_folder().layer(layer_id)
            if layer is None:
                raise LayerNotFoundError(f"No layer with id {layer_id}")
            layer.cache_dirty = True

    def _mark_parents_dirty(self, path: LayerPath) -> None:
        self.mark_as_dirty(path[:-1])

    # ---- Editing ----
    def add_layer(self, path: LayerPath, layer: Layer, insert_index: int = -1) -> LayerId:
        """
        Add a layer to the folder at `path`.

        Returns:
            The new layer's id within that folder
        """
        layer_id = self.document_folder(path).add_layer(layer, insert_index)
        if layer_id is None:
            raise IndexOutOfBoundsError(f"Insert index {insert_index} is out of range")
        self.mark_as_dirty(path)
        logger.debug(f"Added layer {[*path, layer_id]}")
        return layer_id

    def delete_layer(self, path: LayerPath) -> Layer:
        """Remove the layer at `path` with its subtree and return it."""
        layer = self.parent_folder(path).remove_layer(path[-1])
        self._mark_parents_dirty(path)
        logger.debug(f"Deleted layer {list(path)}")
        return layer

    def duplicate_layer(self, path: LayerPath) -> LayerId:
        """Insert a copy of the layer directly above the original."""
        folder = self.parent_folder(path)
        layer = self.layer(path)
        position = folder.position_of_layer(path[-1])
        layer_id = folder.add_layer(layer.clone(), position + 1)
        self._mark_parents_dirty(path)
        return layer_id

    def reorder_layer(self, path: LayerPath, new_index: int) -> None:
        """Move a layer to `new_index` within its folder."""
        self.parent_folder(path).reorder_layer(path[-1], new_index)
        self._mark_parents_dirty(path)

    def rename_layer(self, path: LayerPath, name: Optional[str]) -> None:
        self.layer(path).name = name

    def toggle_visibility(self, path: LayerPath) -> bool:
        """
        Flip a layer's visibility and return the new state.

        Only the ancestors are invalidated; the layer keeps its cache.
        """
        layer = self.layer(path)
        layer.visible = not layer.visible
        self._mark_parents_dirty(path)
        return layer.visible

    def set_blend_mode(self, path: LayerPath, blend_mode: BlendMode) -> None:
        self.layer(path).blend_mode = blend_mode
        self.mark_as_dirty(path)

    def set_opacity(self, path: LayerPath, opacity: float) -> None:
        self.layer(path).opacity = opacity
        self.mark_as_dirty(path)

    def set_layer_transform(self, path: LayerPath, transform: Affine2D) -> None:
        """Replace a layer's transform (relative to its parent)."""
        self.layer(path).transform = transform
        self.mark_as_dirty(path)

    def transform_layer(self, path: LayerPath, transform: Affine2D) -> None:
        """Apply `transform` on top of the layer's current transform."""
        layer = self.layer(path)
        layer.transform = transform * layer.transform
        self.mark_as_dirty(path)

    def set_transform_relative_to_viewport(self, path: LayerPath, transform: Affine2D) -> None:
        """
        Set a layer's transform so that its combined root-space transform
        equals `transform`.
        """
        parent_transform = self.multiply_transforms(path[:-1]) if path else Affine2D.identity()
        self.layer(path).transform = parent_transform.inverse() * transform
        self.mark_as_dirty(path)

    def fill_layer(self, path: LayerPath, color: Optional[Color]) -> None:
        """Set (or clear, with None) the fill color of a layer."""
        layer = self.layer(path)
        layer.style = layer.style.with_fill(color)
        self.mark_as_dirty(path)
