"""
SVG Export for layerdoc

Wraps rendered layer markup into standalone SVG documents: whole-document
exports and per-layer thumbnails.
"""

import logging
from pathlib import Path
from typing import Union
from xml.etree import ElementTree as ET

from ..core.constants import DEFAULT_DOCUMENT_WIDTH, DEFAULT_DOCUMENT_HEIGHT, SVG_NS
from ..core.document import Document
from ..core.geometry import format_number
from ..core.layer import Layer

logger = logging.getLogger(__name__)


def render_root(document: Document) -> str:
    """Markup of the root folder, without the root's blend/opacity group."""
    return document.root.render_as_folder()


def document_to_svg(document: Document,
                    width: float = DEFAULT_DOCUMENT_WIDTH,
                    height: float = DEFAULT_DOCUMENT_HEIGHT) -> str:
    """Standalone SVG with a `0 0 width height` viewport around the root."""
    return (f'<svg xmlns="{SVG_NS}" '
            f'viewBox="0 0 {format_number(width)} {format_number(height)}">'
            f'{render_root(document)}</svg>')


def export_svg(document: Document, filepath: Union[str, Path],
               width: float = DEFAULT_DOCUMENT_WIDTH,
               height: float = DEFAULT_DOCUMENT_HEIGHT) -> None:
    """Export a Document to an indented SVG file."""
    ET.register_namespace('', SVG_NS)
    svg = ET.fromstring(document_to_svg(document, width, height))
    svg.set('width', format_number(width))
    svg.set('height', format_number(height))

    tree = ET.ElementTree(svg)
    ET.indent(tree, space="  ")
    tree.write(str(filepath), encoding='unicode', xml_declaration=True)
    logger.info(f"Exported document to {filepath}")


def layer_thumbnail(layer: Layer) -> str:
    """
    SVG preview of a single layer framed by its bounding box.

    Uses the payload-only `thumbnail_cache`, rendering first if the cache is
    stale. Hidden layers do not refresh their cache, so their payload is
    rendered directly. Returns an empty string for layers without a
    bounding box.
    """
    if not layer.visible:
        markup = layer.data.render(layer.transform, layer.style)
    else:
        if layer.cache_dirty:
            layer.render()
        markup = layer.thumbnail_cache
    bbox = layer.current_bounding_box()
    if bbox is None:
        return ""
    view_box = " ".join(format_number(v) for v in (bbox.min_x, bbox.min_y, bbox.width, bbox.height))
    return f'<svg xmlns="{SVG_NS}" viewBox="{view_box}">{markup}</svg>'
