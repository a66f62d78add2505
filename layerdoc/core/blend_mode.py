"""
layerdoc Blend Modes

Compositing modes applied to a layer's rendered group.
"""

from enum import Enum


class BlendMode(Enum):
    """Layer compositing modes, valued by their CSS `mix-blend-mode` keyword."""
    NORMAL = "normal"
    MULTIPLY = "multiply"
    DARKEN = "darken"
    COLOR_BURN = "color-burn"
    SCREEN = "screen"
    LIGHTEN = "lighten"
    COLOR_DODGE = "color-dodge"
    OVERLAY = "overlay"
    SOFT_LIGHT = "soft-light"
    HARD_LIGHT = "hard-light"
    DIFFERENCE = "difference"
    EXCLUSION = "exclusion"
    HUE = "hue"
    SATURATION = "saturation"
    COLOR = "color"
    LUMINOSITY = "luminosity"

    def to_svg_style_name(self) -> str:
        return self.value
