"""
layerdoc I/O Module

Handles SVG export and layer thumbnails.
"""

from .svg_export import render_root, document_to_svg, export_svg, layer_thumbnail

__all__ = ['render_root', 'document_to_svg', 'export_svg', 'layer_thumbnail']
