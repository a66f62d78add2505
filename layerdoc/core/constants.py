"""
layerdoc Constants

Tunable defaults shared by the geometry, rendering and export code.
"""

# Maximum deviation (document units) when flattening curves to polylines
FLATTEN_TOLERANCE = 0.01

# Control point distance for approximating a quarter circle with a cubic bezier
CIRCLE_KAPPA = 0.5522847498307936

# Decimal places written for numbers in generated markup
MARKUP_PRECISION = 6

SVG_NS = "http://www.w3.org/2000/svg"

# Standalone export viewport when the caller gives no size
DEFAULT_DOCUMENT_WIDTH = 1920.0
DEFAULT_DOCUMENT_HEIGHT = 1080.0
