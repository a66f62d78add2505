"""
layerdoc - layered vector documents with cached SVG rendering and
quad hit-testing.
"""

__version__ = "0.1.0"
